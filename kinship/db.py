"""Database pool management and query helpers for kinship-engine."""

from __future__ import annotations

import os

import asyncpg

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

_DB_HOST = os.environ.get("KIN_DB_HOST", "localhost")
_DB_PORT = os.environ.get("KIN_DB_PORT", "5432")
_DB_USER = os.environ.get("KIN_DB_USER", "postgres")
_DB_PASSWORD = os.environ.get("KIN_DB_PASSWORD", "postgres")
_DB_NAME = os.environ.get("KIN_DB_NAME", "kinship")

DATABASE_URL = os.environ.get(
    "KIN_DATABASE_URL",
    f"postgresql://{_DB_USER}:{_DB_PASSWORD}@{_DB_HOST}:{_DB_PORT}/{_DB_NAME}",
)

# ---------------------------------------------------------------------------
# Pool
# ---------------------------------------------------------------------------

_pool: asyncpg.Pool | None = None


async def init_pool() -> asyncpg.Pool:
    """Create the global asyncpg connection pool."""
    global _pool
    _pool = await asyncpg.create_pool(
        DATABASE_URL,
        min_size=2,
        max_size=10,
    )
    return _pool


async def close_pool() -> None:
    """Gracefully close the connection pool."""
    global _pool
    if _pool:
        await _pool.close()
        _pool = None


def get_pool() -> asyncpg.Pool:
    """Return the pool, raising if not initialized."""
    if _pool is None:
        raise RuntimeError("Database pool not initialized")
    return _pool


# ---------------------------------------------------------------------------
# Query helpers
# ---------------------------------------------------------------------------

async def get_stats() -> dict:
    """Graph size for the metrics endpoint."""
    p = get_pool()
    total_people = await p.fetchval("SELECT COUNT(*) FROM people")
    total_edges = await p.fetchval("SELECT COUNT(*) FROM parent_child")
    total_unions = await p.fetchval("SELECT COUNT(DISTINCT union_id) FROM union_members")

    sex_counts = await p.fetch(
        "SELECT COALESCE(sex, 'unknown') AS sex, COUNT(*) AS cnt "
        "FROM people GROUP BY 1 ORDER BY 1"
    )

    return {
        "total_people": total_people,
        "total_edges": total_edges,
        "total_unions": total_unions,
        "people_by_sex": {r["sex"]: r["cnt"] for r in sex_counts},
    }
