"""Distant pathfinder — breadth-first search over parent, child and spouse edges.

Only used when no near-relationship rule matched. Expands one frontier level
at a time so the first path to reach the target is a shortest one by edge
count, and so a deadline can be checked between levels.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from kinship.relationship.errors import ResolutionTimeout
from kinship.relationship.graph import GraphAccessor, neighbours_of

logger = logging.getLogger("kinship.relationship.pathfinder")

DEFAULT_MAX_DEPTH = 10

FOUND = "found"
NOT_RELATED = "not_related"
DEPTH_EXCEEDED = "depth_exceeded"


@dataclass
class SearchResult:
    status: str  # found | not_related | depth_exceeded
    path: list[str] = field(default_factory=list)
    depth: int = 0
    visited: int = 0

    @property
    def found(self) -> bool:
        return self.status == FOUND


async def find_path(
    graph: GraphAccessor,
    source: str,
    target: str,
    max_depth: int = DEFAULT_MAX_DEPTH,
    deadline: float | None = None,
) -> SearchResult:
    """Shortest path from ``source`` to ``target`` of at most ``max_depth`` edges.

    ``deadline`` is a ``time.monotonic()`` timestamp; once passed, the search
    stops before the next frontier expansion and raises ``ResolutionTimeout``.
    """
    if source == target:
        return SearchResult(FOUND, [source], 0, 1)

    # Each visited id maps to the id it was first reached from.
    came_from: dict[str, str | None] = {source: None}
    frontier: list[str] = [source]
    depth = 0

    while frontier:
        if depth >= max_depth:
            # Bound reached: only report depth_exceeded if the component
            # still has unexplored people beyond this frontier.
            for pid in frontier:
                for n in await neighbours_of(graph, pid):
                    if n not in came_from:
                        logger.debug(
                            "Search %s -> %s stopped at depth %d with %d frontier nodes",
                            source, target, depth, len(frontier),
                        )
                        return SearchResult(DEPTH_EXCEEDED, depth=depth, visited=len(came_from))
            break

        if deadline is not None and time.monotonic() > deadline:
            raise ResolutionTimeout(
                f"Search {source} -> {target} timed out at depth {depth}"
            )

        depth += 1
        next_frontier: list[str] = []
        for pid in frontier:
            for n in await neighbours_of(graph, pid):
                if n in came_from:
                    continue
                came_from[n] = pid
                if n == target:
                    path = _unwind(came_from, target)
                    logger.debug("Found %s -> %s at depth %d", source, target, depth)
                    return SearchResult(FOUND, path, depth, len(came_from))
                next_frontier.append(n)
        logger.debug("Depth %d frontier size %d", depth, len(next_frontier))
        frontier = next_frontier

    return SearchResult(NOT_RELATED, depth=depth, visited=len(came_from))


def _unwind(came_from: dict[str, str | None], target: str) -> list[str]:
    path = [target]
    prev = came_from[target]
    while prev is not None:
        path.append(prev)
        prev = came_from[prev]
    path.reverse()
    return path
