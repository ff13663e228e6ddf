"""Postgres-backed graph accessor.

Expected tables (owned by the people/tree service, read-only here)::

    people(id TEXT PRIMARY KEY, sex TEXT, name TEXT)
    parent_child(parent_id TEXT, child_id TEXT)
    union_members(union_id TEXT, person_id TEXT)

Every list query orders by id so neighbour enumeration, and therefore
resolution, is reproducible.
"""

from __future__ import annotations

import asyncpg

from kinship.relationship.errors import NotFound
from kinship.relationship.graph import Person, Sex


class PostgresGraph:
    """``GraphAccessor`` over an asyncpg pool."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    async def person(self, pid: str) -> Person:
        row = await self._pool.fetchrow(
            "SELECT id, sex, name FROM people WHERE id = $1",
            pid,
        )
        if row is None:
            raise NotFound(pid)
        return Person(id=str(row["id"]), sex=Sex.parse(row["sex"]), name=row["name"])

    async def sex_of(self, pid: str) -> Sex:
        return (await self.person(pid)).sex

    async def parents_of(self, pid: str) -> list[str]:
        return await self._neighbour_ids(
            "SELECT ARRAY(SELECT pc.parent_id FROM parent_child pc "
            "WHERE pc.child_id = p.id ORDER BY pc.parent_id) AS ids "
            "FROM people p WHERE p.id = $1",
            pid,
        )

    async def children_of(self, pid: str) -> list[str]:
        return await self._neighbour_ids(
            "SELECT ARRAY(SELECT pc.child_id FROM parent_child pc "
            "WHERE pc.parent_id = p.id ORDER BY pc.child_id) AS ids "
            "FROM people p WHERE p.id = $1",
            pid,
        )

    async def spouses_of(self, pid: str) -> list[str]:
        return await self._neighbour_ids(
            "SELECT ARRAY(SELECT DISTINCT um2.person_id FROM union_members um1 "
            "JOIN union_members um2 ON um1.union_id = um2.union_id "
            "WHERE um1.person_id = p.id AND um2.person_id <> p.id "
            "ORDER BY um2.person_id) AS ids "
            "FROM people p WHERE p.id = $1",
            pid,
        )

    async def _neighbour_ids(self, sql: str, pid: str) -> list[str]:
        # The outer SELECT on people yields no row for an unknown id.
        row = await self._pool.fetchrow(sql, pid)
        if row is None:
            raise NotFound(pid)
        return [str(i) for i in row["ids"] or []]
