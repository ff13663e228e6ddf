"""Near-relationship classifier — fixed-priority structural pattern rules.

Rules run in ``RULES`` order and the first one that matches wins, even if a
later rule would also describe the pair. The order is authoritative; it is
not a closest-relation guarantee.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from kinship.relationship import terms
from kinship.relationship.graph import GraphAccessor

logger = logging.getLogger("kinship.relationship.classifier")


@dataclass
class Match:
    """Outcome of a near-relationship rule or of the distant search."""
    category: str  # self, parent, child, spouse, sibling, ... , distant
    term: terms.Term
    path: list[str]
    common_ancestor_id: str | None = None


Rule = Callable[[GraphAccessor, str, str], Awaitable["Match | None"]]


async def _self(g: GraphAccessor, id1: str, id2: str) -> Match | None:
    if id1 == id2:
        return Match("self", terms.SELF, [id1])
    return None


async def _parent(g: GraphAccessor, id1: str, id2: str) -> Match | None:
    if id2 in await g.parents_of(id1):
        return Match("parent", terms.gendered("parent", await g.sex_of(id2)), [id1, id2])
    return None


async def _child(g: GraphAccessor, id1: str, id2: str) -> Match | None:
    if id2 in await g.children_of(id1):
        return Match("child", terms.gendered("child", await g.sex_of(id2)), [id1, id2])
    return None


async def _spouse(g: GraphAccessor, id1: str, id2: str) -> Match | None:
    if id2 in await g.spouses_of(id1):
        return Match("spouse", terms.gendered("spouse", await g.sex_of(id2)), [id1, id2])
    return None


async def shared_parent(g: GraphAccessor, a: str, b: str) -> str | None:
    """First parent of ``a`` (in enumeration order) who is also a parent of ``b``.

    Any shared parent counts, so half-siblings pass the same test.
    """
    if a == b:
        return None
    parents_b = await g.parents_of(b)
    for p in await g.parents_of(a):
        if p in parents_b:
            return p
    return None


async def _sibling(g: GraphAccessor, id1: str, id2: str) -> Match | None:
    pivot = await shared_parent(g, id1, id2)
    if pivot is None:
        return None
    return Match(
        "sibling",
        terms.gendered("sibling", await g.sex_of(id2)),
        [id1, pivot, id2],
        common_ancestor_id=pivot,
    )


async def _grandparent(g: GraphAccessor, id1: str, id2: str) -> Match | None:
    for parent in await g.parents_of(id1):
        if id2 in await g.parents_of(parent):
            return Match(
                "grandparent",
                terms.gendered("grandparent", await g.sex_of(id2)),
                [id1, parent, id2],
            )
    return None


async def _grandchild(g: GraphAccessor, id1: str, id2: str) -> Match | None:
    for child in await g.children_of(id1):
        if id2 in await g.children_of(child):
            return Match(
                "grandchild",
                terms.gendered("grandchild", await g.sex_of(id2)),
                [id1, child, id2],
            )
    return None


async def _uncle_aunt(g: GraphAccessor, id1: str, id2: str) -> Match | None:
    for parent in await g.parents_of(id1):
        if parent == id2:
            continue
        pivot = await shared_parent(g, parent, id2)
        if pivot is not None:
            return Match(
                "uncle_aunt",
                terms.gendered("pibling", await g.sex_of(id2)),
                [id1, parent, pivot, id2],
                common_ancestor_id=pivot,
            )
    return None


async def _nephew_niece(g: GraphAccessor, id1: str, id2: str) -> Match | None:
    for parent in await g.parents_of(id2):
        if parent == id1:
            continue
        pivot = await shared_parent(g, id1, parent)
        if pivot is not None:
            return Match(
                "nephew_niece",
                terms.gendered("nibling", await g.sex_of(id2)),
                [id1, pivot, parent, id2],
                common_ancestor_id=pivot,
            )
    return None


async def _cousin(g: GraphAccessor, id1: str, id2: str) -> Match | None:
    parents_2 = await g.parents_of(id2)
    for p1 in await g.parents_of(id1):
        for p2 in parents_2:
            if p1 == p2:
                continue
            pivot = await shared_parent(g, p1, p2)
            if pivot is not None:
                return Match(
                    "cousin",
                    terms.COUSIN,
                    [id1, p1, pivot, p2, id2],
                    common_ancestor_id=pivot,
                )
    return None


RULES: list[tuple[str, Rule]] = [
    ("self", _self),
    ("parent", _parent),
    ("child", _child),
    ("spouse", _spouse),
    ("sibling", _sibling),
    ("grandparent", _grandparent),
    ("grandchild", _grandchild),
    ("uncle_aunt", _uncle_aunt),
    ("nephew_niece", _nephew_niece),
    ("cousin", _cousin),
]


async def classify(
    graph: GraphAccessor,
    id1: str,
    id2: str,
    rules: list[tuple[str, Rule]] | None = None,
) -> Match | None:
    """Return the first near-relationship rule that matches, or None."""
    for name, rule in rules if rules is not None else RULES:
        match = await rule(graph, id1, id2)
        if match is not None:
            logger.debug("Rule %s matched %s -> %s", name, id1, id2)
            return match
    return None
