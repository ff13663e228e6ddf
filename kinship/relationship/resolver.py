"""Relationship resolution facade.

Validates both ids, tries the near-relationship rules, falls back to the
breadth-first search, and narrates the resulting path.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from kinship.relationship import pathfinder, terms
from kinship.relationship.classifier import Match, classify
from kinship.relationship.describer import CommonAncestor, PathNode, describe
from kinship.relationship.errors import DataIntegrity, NotFound
from kinship.relationship.graph import CachedGraph, GraphAccessor, Person, check_ancestry

logger = logging.getLogger("kinship.relationship.resolver")


@dataclass
class RelationshipResult:
    found: bool
    category: str
    relationship_key: str
    label: str
    description: str
    path: list[PathNode] = field(default_factory=list)
    path_length: int = 0
    common_ancestor_id: str | None = None
    common_ancestors: list[CommonAncestor] = field(default_factory=list)
    reason: str | None = None  # not_related | depth_exceeded when found is False


async def resolve(
    graph: GraphAccessor,
    person1_id: str,
    person2_id: str,
    max_depth: int = pathfinder.DEFAULT_MAX_DEPTH,
    deadline: float | None = None,
) -> RelationshipResult:
    """Answer "how is person2 related to person1?".

    Raises ``NotFound`` for unknown ids, ``DataIntegrity`` for a corrupt graph
    and ``ResolutionTimeout`` when ``deadline`` passes mid-search.
    """
    g = CachedGraph(graph)
    p1 = await g.person(person1_id)
    p2 = await g.person(person2_id)
    try:
        return await _resolve_known(g, p1, p2, max_depth, deadline)
    except NotFound as exc:
        # Both endpoints exist, so any other missing id is a dangling edge.
        raise DataIntegrity(f"Dangling reference to unknown person {exc.person_id}") from exc


async def _resolve_known(
    g: CachedGraph,
    p1: Person,
    p2: Person,
    max_depth: int,
    deadline: float | None,
) -> RelationshipResult:
    await check_ancestry(g, p1.id)
    await check_ancestry(g, p2.id)

    match = await classify(g, p1.id, p2.id)
    if match is None:
        search = await pathfinder.find_path(g, p1.id, p2.id, max_depth=max_depth, deadline=deadline)
        if not search.found:
            return _not_found(p1.display_name, p2.display_name, search.status, max_depth)
        match = Match("distant", terms.RELATED, search.path)

    desc = await describe(g, match)

    if match.category == "distant":
        key = terms.RELATED.key
        label = f"Related ({len(match.path) - 1} steps)"
    else:
        key = match.term.key
        label = match.term.label

    common_id = match.common_ancestor_id
    if common_id is None and desc.common_ancestors:
        common_id = desc.common_ancestors[0].person_id

    logger.debug(
        "Resolved %s -> %s as %s (%d edges, %d lookups)",
        p1.id, p2.id, match.category, len(match.path) - 1, g.misses,
    )
    return RelationshipResult(
        found=True,
        category=match.category,
        relationship_key=key,
        label=label,
        description=desc.sentence,
        path=desc.nodes,
        path_length=len(match.path) - 1,
        common_ancestor_id=common_id,
        common_ancestors=desc.common_ancestors,
    )


def _not_found(name1: str, name2: str, status: str, max_depth: int) -> RelationshipResult:
    if status == pathfinder.DEPTH_EXCEEDED:
        return RelationshipResult(
            found=False,
            category="depth_exceeded",
            relationship_key=terms.DEPTH_EXCEEDED.key,
            label="Not Found",
            description=f"No relationship between {name1} and {name2} within {max_depth} steps",
            reason=pathfinder.DEPTH_EXCEEDED,
        )
    return RelationshipResult(
        found=False,
        category="none",
        relationship_key=terms.NOT_RELATED.key,
        label="Not Related",
        description=f"{name2} is not related to {name1}",
        reason=pathfinder.NOT_RELATED,
    )
