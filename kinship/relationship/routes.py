"""Relationship finder API endpoints."""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Query

from kinship.db import get_pool
from kinship.models import (
    CommonAncestorOut,
    PathNodeOut,
    RelationshipOut,
    RelationshipPathIn,
)
from kinship.relationship.config import ResolverConfig
from kinship.relationship.errors import DataIntegrity, NotFound, ResolutionTimeout
from kinship.relationship.graph import GraphAccessor
from kinship.relationship.resolver import RelationshipResult, resolve
from kinship.relationship.store import PostgresGraph

logger = logging.getLogger("kinship.relationship.routes")

router = APIRouter(prefix="/api/v1/relationships", tags=["relationships"])

config = ResolverConfig()

# Resolution outcome counters for /metrics
stats: dict = {
    "resolved": 0,
    "not_found": 0,
    "depth_exceeded": 0,
    "integrity_errors": 0,
    "timeouts": 0,
}


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

def get_graph() -> GraphAccessor:
    """Graph accessor for the request; overridden in tests."""
    try:
        return PostgresGraph(get_pool())
    except RuntimeError:
        raise HTTPException(503, "Database pool not initialized")


def get_config() -> ResolverConfig:
    return config


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _result_out(r: RelationshipResult) -> RelationshipOut:
    return RelationshipOut(
        found=r.found,
        category=r.category,
        relationship_key=r.relationship_key,
        label=r.label,
        description=r.description,
        reason=r.reason,
        path=[
            PathNodeOut(
                person_id=n.person_id,
                name=n.name,
                sex=n.sex.value,
                edge_type_to_next=n.edge_to_next,
                relationship_to_next_key=n.relationship_to_next_key,
            )
            for n in r.path
        ],
        path_length=r.path_length,
        common_ancestor_id=r.common_ancestor_id,
        common_ancestors=[
            CommonAncestorOut(
                person_id=a.person_id,
                name=a.name,
                generations_from_person1=a.generations_from_person1,
                generations_from_person2=a.generations_from_person2,
            )
            for a in r.common_ancestors
        ],
    )


async def _resolve(
    graph: GraphAccessor,
    cfg: ResolverConfig,
    person1_id: str,
    person2_id: str,
    max_depth: int | None,
) -> RelationshipOut:
    depth = cfg.clamp_depth(max_depth)
    deadline = time.monotonic() + cfg.timeout_seconds if cfg.timeout_seconds > 0 else None
    try:
        result = await resolve(graph, person1_id, person2_id, max_depth=depth, deadline=deadline)
    except NotFound as exc:
        logger.info("Relationship lookup for unknown person %s", exc.person_id)
        raise HTTPException(404, str(exc))
    except DataIntegrity:
        stats["integrity_errors"] += 1
        logger.exception("Corrupt family graph resolving %s -> %s", person1_id, person2_id)
        raise HTTPException(500, "Corrupt family graph")
    except ResolutionTimeout as exc:
        stats["timeouts"] += 1
        logger.warning("%s", exc)
        raise HTTPException(504, "Relationship search timed out")

    if result.found:
        stats["resolved"] += 1
    elif result.reason == "depth_exceeded":
        stats["depth_exceeded"] += 1
    else:
        stats["not_found"] += 1
    return _result_out(result)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@router.post("/path", response_model=RelationshipOut)
async def find_relationship_path(
    body: RelationshipPathIn,
    graph: GraphAccessor = Depends(get_graph),
    cfg: ResolverConfig = Depends(get_config),
):
    """How is person2 related to person1?"""
    return await _resolve(graph, cfg, body.person1_id, body.person2_id, body.max_depth)


@router.get("/{person1_id}/{person2_id}", response_model=RelationshipOut)
async def get_relationship(
    person1_id: str,
    person2_id: str,
    max_depth: int | None = Query(None, ge=1, description="Maximum search depth in edges"),
    graph: GraphAccessor = Depends(get_graph),
    cfg: ResolverConfig = Depends(get_config),
):
    """Same as POST /path with ids in the URL."""
    return await _resolve(graph, cfg, person1_id, person2_id, max_depth)
