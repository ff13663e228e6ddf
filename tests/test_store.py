"""Tests for the asyncpg-backed accessor, using a fake pool."""

import pytest

from kinship.relationship.errors import NotFound
from kinship.relationship.graph import Sex
from kinship.relationship.resolver import resolve
from kinship.relationship.store import PostgresGraph


class FakePool:
    """Answers the accessor's queries from in-memory tables."""

    def __init__(self, people, parent_child, union_members):
        self.people = {p["id"]: p for p in people}
        self.parent_child = parent_child
        self.union_members = union_members
        self.queries: list[tuple[str, str]] = []

    async def fetchrow(self, sql, pid):
        self.queries.append((sql, pid))
        if pid not in self.people:
            return None
        if sql.startswith("SELECT id, sex, name"):
            return self.people[pid]
        if "SELECT pc.parent_id" in sql:
            return {"ids": sorted(p for p, c in self.parent_child if c == pid)}
        if "SELECT pc.child_id" in sql:
            return {"ids": sorted(c for p, c in self.parent_child if p == pid)}
        if "union_members" in sql:
            unions = {u for u, m in self.union_members if m == pid}
            return {"ids": sorted({m for u, m in self.union_members if u in unions and m != pid})}
        raise AssertionError(f"unexpected query: {sql}")


@pytest.fixture
def pool():
    return FakePool(
        people=[
            {"id": "a", "sex": "female", "name": "Amy"},
            {"id": "b", "sex": "male", "name": "Bob"},
            {"id": "c", "sex": "male", "name": None},
            {"id": "d", "sex": None, "name": "Dee"},
        ],
        parent_child=[("a", "c"), ("b", "c")],
        union_members=[("u1", "a"), ("u1", "b")],
    )


class TestPostgresGraph:
    async def test_person(self, pool):
        g = PostgresGraph(pool)
        p = await g.person("a")
        assert p.sex == Sex.FEMALE
        assert p.display_name == "Amy"
        assert (await g.person("d")).sex == Sex.UNKNOWN

    async def test_neighbours(self, pool):
        g = PostgresGraph(pool)
        assert await g.parents_of("c") == ["a", "b"]
        assert await g.children_of("a") == ["c"]
        assert await g.spouses_of("b") == ["a"]
        assert await g.parents_of("a") == []

    async def test_unknown_person(self, pool):
        g = PostgresGraph(pool)
        with pytest.raises(NotFound):
            await g.person("zzz")
        with pytest.raises(NotFound):
            await g.children_of("zzz")

    async def test_resolve_against_store(self, pool):
        r = await resolve(PostgresGraph(pool), "c", "a")
        assert r.category == "parent"
        assert r.label == "Mother"
        assert r.description == "Amy is c's mother"

    async def test_resolution_reuses_lookups(self, pool):
        await resolve(PostgresGraph(pool), "c", "d")
        # Each (query, person) pair hits the store at most once per resolution.
        assert len(pool.queries) == len(set(pool.queries))
