"""Pydantic models for kinship-engine API request/response shapes."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    """Serialises as camelCase; accepts either camelCase or snake_case input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Relationship path
# ---------------------------------------------------------------------------

class RelationshipPathIn(_CamelModel):
    person1_id: str
    person2_id: str
    max_depth: int | None = Field(None, ge=1)


class PathNodeOut(_CamelModel):
    person_id: str
    name: str
    sex: str
    edge_type_to_next: str | None = None
    relationship_to_next_key: str | None = None


class CommonAncestorOut(_CamelModel):
    person_id: str
    name: str
    generations_from_person1: int
    generations_from_person2: int


class RelationshipOut(_CamelModel):
    found: bool
    category: str
    relationship_key: str
    label: str
    description: str
    reason: str | None = None
    path: list[PathNodeOut]
    path_length: int
    common_ancestor_id: str | None = None
    common_ancestors: list[CommonAncestorOut] = []
