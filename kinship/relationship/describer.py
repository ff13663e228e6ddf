"""Path describer — classifies each step of a resolved path and narrates it.

Edge types describe what the NEXT person on the path is relative to the
current one: ``parent`` means we step up, ``child`` down, ``spouse`` across.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from kinship.relationship import terms
from kinship.relationship.classifier import Match
from kinship.relationship.errors import DataIntegrity
from kinship.relationship.graph import GraphAccessor, Person, Sex


PARENT = "parent"
CHILD = "child"
SPOUSE = "spouse"


@dataclass
class PathNode:
    person_id: str
    name: str
    sex: Sex
    edge_to_next: str | None = None
    relationship_to_next_key: str | None = None


@dataclass
class CommonAncestor:
    person_id: str
    name: str
    generations_from_person1: int
    generations_from_person2: int


@dataclass
class Description:
    nodes: list[PathNode]
    edges: list[str]
    term: terms.Term
    sentence: str
    common_ancestors: list[CommonAncestor] = field(default_factory=list)


async def classify_edge(graph: GraphAccessor, a: str, b: str) -> str:
    """Return the single edge type linking ``a`` to ``b``.

    Raises ``DataIntegrity`` when no edge or more than one kind of edge holds.
    """
    kinds = []
    if b in await graph.parents_of(a):
        kinds.append(PARENT)
    if b in await graph.children_of(a):
        kinds.append(CHILD)
    if b in await graph.spouses_of(a):
        kinds.append(SPOUSE)
    if len(kinds) != 1:
        detail = "no edge" if not kinds else "edges " + "/".join(kinds)
        raise DataIntegrity(f"Ambiguous path step {a} -> {b}: {detail}")
    return kinds[0]


async def describe(graph: GraphAccessor, match: Match) -> Description:
    """Walk ``match.path`` pairwise and build nodes, term and narrative."""
    path = match.path
    if len(set(path)) != len(path):
        raise DataIntegrity(f"Path revisits a person: {path}")

    people = [await graph.person(pid) for pid in path]
    edges = [await classify_edge(graph, a, b) for a, b in zip(path, path[1:])]

    nodes = [PathNode(person_id=p.id, name=p.display_name, sex=p.sex) for p in people]
    for i, edge in enumerate(edges):
        nodes[i].edge_to_next = edge
        nodes[i].relationship_to_next_key = terms.edge_key(edge, people[i + 1].sex)

    first, last = people[0], people[-1]
    if match.category == "distant":
        term = term_for_edges(edges, last.sex)
    else:
        term = match.term

    if match.category == "self":
        sentence = f"{first.display_name} is the same person"
    else:
        sentence = f"{last.display_name} is {first.display_name}'s {term.word}"

    return Description(
        nodes=nodes,
        edges=edges,
        term=term,
        sentence=sentence,
        common_ancestors=_common_ancestors(match, edges, people),
    )


def _blood_shape(edges: list[str]) -> tuple[int, int] | None:
    """(ups, downs) if ``edges`` is parent* followed by child*, else None."""
    ups = 0
    while ups < len(edges) and edges[ups] == PARENT:
        ups += 1
    rest = edges[ups:]
    if any(e != CHILD for e in rest):
        return None
    return ups, len(rest)


def _common_ancestors(match: Match, edges: list[str], people: list[Person]) -> list[CommonAncestor]:
    path = match.path
    pivot = match.common_ancestor_id
    if pivot is None and match.category == "distant":
        shape = _blood_shape(edges)
        if shape and shape[0] > 0 and shape[1] > 0:
            pivot = path[shape[0]]
    if pivot is None or pivot not in path:
        return []
    idx = path.index(pivot)
    return [CommonAncestor(pivot, people[idx].display_name, idx, len(path) - 1 - idx)]


def term_for_edges(edges: list[str], sex: Sex) -> terms.Term:
    """Name the relationship of the path's last person to its first."""
    shape = _blood_shape(edges)
    if shape is not None:
        return _blood_term(shape[0], shape[1], sex)

    in_law = {
        (SPOUSE,): "spouse",
        (SPOUSE, PARENT): "parentInLaw",
        (CHILD, SPOUSE): "childInLaw",
        (SPOUSE, CHILD): "stepchild",
        (PARENT, SPOUSE): "stepparent",
        (SPOUSE, PARENT, CHILD): "siblingInLaw",
        (PARENT, CHILD, SPOUSE): "siblingInLaw",
    }.get(tuple(edges))
    if in_law is not None:
        return terms.gendered(in_law, sex)
    if SPOUSE in edges:
        return terms.BY_MARRIAGE
    return terms.RELATED


def _blood_term(ups: int, downs: int, sex: Sex) -> terms.Term:
    if ups == 0 and downs == 0:
        return terms.SELF
    if downs == 0:
        return _lineal("parent", "grandparent", "relationship.greatGrandparent", ups, sex)
    if ups == 0:
        return _lineal("child", "grandchild", "relationship.greatGrandchild", downs, sex)
    if ups == 1 and downs == 1:
        return terms.gendered("sibling", sex)
    if downs == 1:
        # parent's sibling, grandparent's sibling, ...
        return _collateral("pibling", "relationship.greatPibling", ups - 2, sex)
    if ups == 1:
        return _collateral("nibling", "relationship.greatNibling", downs - 2, sex)

    degree = min(ups, downs) - 1
    removed = abs(ups - downs)
    key = f"relationship.cousin{degree}"
    word = f"{terms.ordinal(degree)} cousin"
    if removed:
        key += f"{removed}xRemoved"
        word += f", {removed} time{'s' if removed > 1 else ''} removed"
    return terms.Term(key, word)


def _lineal(one: str, two: str, great_key: str, generations: int, sex: Sex) -> terms.Term:
    if generations == 1:
        return terms.gendered(one, sex)
    base = terms.gendered(two, sex)
    if generations == 2:
        return base
    greats = generations - 2
    return terms.Term(_great_key(great_key, greats), terms.great_prefix(greats) + base.word)


def _collateral(base_name: str, great_key: str, greats: int, sex: Sex) -> terms.Term:
    base = terms.gendered(base_name, sex)
    if greats <= 0:
        return base
    return terms.Term(_great_key(great_key, greats), terms.great_prefix(greats) + base.word)


def _great_key(key: str, greats: int) -> str:
    # relationship.greatX, relationship.greatX2, relationship.greatX3, ...
    return key if greats == 1 else f"{key}{greats}"
