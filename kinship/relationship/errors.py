"""Error types raised while resolving relationships."""

from __future__ import annotations


class RelationshipError(Exception):
    """Base class for relationship resolution failures."""


class NotFound(RelationshipError):
    """A person id is unknown to the graph accessor."""

    def __init__(self, person_id: str):
        super().__init__(f"Person {person_id} not found")
        self.person_id = person_id


class DataIntegrity(RelationshipError):
    """The stored graph violates an invariant (cycle, ambiguous edge, bad union)."""


class ResolutionTimeout(RelationshipError):
    """The request deadline passed before the search finished."""
