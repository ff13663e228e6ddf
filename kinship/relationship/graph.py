"""Graph accessors — read-only lookups over the kinship graph.

Every resolver component talks to the graph through the ``GraphAccessor``
protocol, so the same code runs against an in-memory ``FamilyGraph`` (tests,
batch jobs) or the Postgres-backed accessor in ``store.py``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Protocol

from kinship.relationship.errors import DataIntegrity, NotFound


class Sex(str, enum.Enum):
    MALE = "male"
    FEMALE = "female"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value) -> "Sex":
        """Accept the enum, its string value, or the legacy 0/1 integer codes."""
        if isinstance(value, Sex):
            return value
        if isinstance(value, bool):
            return cls.UNKNOWN
        if value in (0, "0", "m", "M"):
            return cls.MALE
        if value in (1, "1", "f", "F"):
            return cls.FEMALE
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.UNKNOWN


@dataclass
class Person:
    id: str
    sex: Sex = Sex.UNKNOWN
    name: str | None = None

    @property
    def display_name(self) -> str:
        return self.name if self.name else self.id


@dataclass
class ParentChildEdge:
    parent_id: str
    child_id: str


@dataclass
class Union:
    id: str
    member_ids: list[str] = field(default_factory=list)


class GraphAccessor(Protocol):
    """Read-only view of people, parent-child edges and unions."""

    async def person(self, pid: str) -> Person: ...

    async def sex_of(self, pid: str) -> Sex: ...

    async def parents_of(self, pid: str) -> list[str]: ...

    async def children_of(self, pid: str) -> list[str]: ...

    async def spouses_of(self, pid: str) -> list[str]: ...


class FamilyGraph:
    """In-memory family graph.

    Neighbours are returned in insertion order, which keeps rule matching and
    BFS expansion deterministic.
    """

    def __init__(
        self,
        people: list[Person],
        edges: list[ParentChildEdge] | None = None,
        unions: list[Union] | None = None,
    ):
        self._people = {p.id: p for p in people}
        self._unions = list(unions or [])

        self._parents: dict[str, list[str]] = {}  # child_id -> [parent_ids]
        self._children: dict[str, list[str]] = {}  # parent_id -> [child_ids]
        self._spouses: dict[str, list[str]] = {}  # person_id -> [spouse_ids]

        for e in edges or []:
            _append_unique(self._children.setdefault(e.parent_id, []), e.child_id)
            _append_unique(self._parents.setdefault(e.child_id, []), e.parent_id)

        for u in self._unions:
            for member in u.member_ids:
                bucket = self._spouses.setdefault(member, [])
                for other in u.member_ids:
                    if other != member:
                        _append_unique(bucket, other)

    @classmethod
    def from_records(cls, people: list[dict], edges: list[dict], unions: list[dict]) -> "FamilyGraph":
        """Build a graph from plain dict records (JSON fixtures, DB rows)."""
        return cls(
            people=[
                Person(id=str(p["id"]), sex=Sex.parse(p.get("sex")), name=p.get("name"))
                for p in people
            ],
            edges=[ParentChildEdge(str(e["parent_id"]), str(e["child_id"])) for e in edges],
            unions=[
                Union(id=str(u["id"]), member_ids=[str(m) for m in u["member_ids"]])
                for u in unions
            ],
        )

    def _require(self, pid: str) -> Person:
        p = self._people.get(pid)
        if p is None:
            raise NotFound(pid)
        return p

    async def person(self, pid: str) -> Person:
        return self._require(pid)

    async def sex_of(self, pid: str) -> Sex:
        return self._require(pid).sex

    async def parents_of(self, pid: str) -> list[str]:
        self._require(pid)
        return list(self._parents.get(pid, []))

    async def children_of(self, pid: str) -> list[str]:
        self._require(pid)
        return list(self._children.get(pid, []))

    async def spouses_of(self, pid: str) -> list[str]:
        self._require(pid)
        return list(self._spouses.get(pid, []))

    def validate(self) -> None:
        """Raise ``DataIntegrity`` if the stored graph breaks an invariant."""
        for pid, parents in self._parents.items():
            if pid in parents:
                raise DataIntegrity(f"Person {pid} is recorded as their own parent")
        for u in self._unions:
            if len(set(u.member_ids)) < 2:
                raise DataIntegrity(f"Union {u.id} has fewer than two distinct members")
        cycle = self._find_ancestry_cycle()
        if cycle:
            raise DataIntegrity("Parent-child cycle: " + " -> ".join(cycle))

    def _find_ancestry_cycle(self) -> list[str] | None:
        # Iterative three-colour DFS over child -> parent edges.
        white, grey, black = 0, 1, 2
        colour = {pid: white for pid in self._people}
        for root in self._people:
            if colour[root] != white:
                continue
            stack: list[tuple[str, int]] = [(root, 0)]
            trail: list[str] = []
            while stack:
                node, idx = stack.pop()
                if idx == 0:
                    colour[node] = grey
                    trail.append(node)
                parents = self._parents.get(node, [])
                if idx < len(parents):
                    stack.append((node, idx + 1))
                    nxt = parents[idx]
                    state = colour.get(nxt, black)
                    if state == grey:
                        return trail[trail.index(nxt):] + [nxt]
                    if state == white:
                        stack.append((nxt, 0))
                else:
                    colour[node] = black
                    trail.pop()
        return None


class CachedGraph:
    """Memoises lookups of another accessor for the lifetime of one resolution.

    Never share an instance between concurrent resolutions.
    """

    def __init__(self, inner: GraphAccessor):
        self._inner = inner
        self._people: dict[str, Person] = {}
        self._parents: dict[str, list[str]] = {}
        self._children: dict[str, list[str]] = {}
        self._spouses: dict[str, list[str]] = {}
        self.misses = 0

    async def person(self, pid: str) -> Person:
        if pid not in self._people:
            self.misses += 1
            self._people[pid] = await self._inner.person(pid)
        return self._people[pid]

    async def sex_of(self, pid: str) -> Sex:
        return (await self.person(pid)).sex

    async def parents_of(self, pid: str) -> list[str]:
        if pid not in self._parents:
            self.misses += 1
            self._parents[pid] = list(await self._inner.parents_of(pid))
        return self._parents[pid]

    async def children_of(self, pid: str) -> list[str]:
        if pid not in self._children:
            self.misses += 1
            self._children[pid] = list(await self._inner.children_of(pid))
        return self._children[pid]

    async def spouses_of(self, pid: str) -> list[str]:
        if pid not in self._spouses:
            self.misses += 1
            self._spouses[pid] = list(await self._inner.spouses_of(pid))
        return self._spouses[pid]


async def neighbours_of(graph: GraphAccessor, pid: str) -> list[str]:
    """Parents, then children, then spouses, deduplicated in that order."""
    out: list[str] = []
    for pid_list in (
        await graph.parents_of(pid),
        await graph.children_of(pid),
        await graph.spouses_of(pid),
    ):
        for n in pid_list:
            _append_unique(out, n)
    return out


async def check_ancestry(graph: GraphAccessor, pid: str) -> None:
    """Raise ``DataIntegrity`` if any ancestor chain of ``pid`` loops back on itself.

    Same three-colour walk as ``FamilyGraph.validate`` but through the accessor,
    so it works against any store.
    """
    grey, black = 1, 2
    colour: dict[str, int] = {pid: grey}
    trail = [pid]
    stack: list[tuple[str, list[str], int]] = [(pid, await graph.parents_of(pid), 0)]
    while stack:
        node, parents, idx = stack.pop()
        if idx == len(parents):
            colour[node] = black
            trail.pop()
            continue
        stack.append((node, parents, idx + 1))
        nxt = parents[idx]
        state = colour.get(nxt)
        if state == grey:
            cycle = trail[trail.index(nxt):] + [nxt]
            raise DataIntegrity("Parent-child cycle: " + " -> ".join(cycle))
        if state is None:
            colour[nxt] = grey
            trail.append(nxt)
            stack.append((nxt, await graph.parents_of(nxt), 0))


def _append_unique(bucket: list[str], value: str) -> None:
    if value not in bucket:
        bucket.append(value)
