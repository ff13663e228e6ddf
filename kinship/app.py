"""kinship-engine — relationship finder service for family trees."""

from __future__ import annotations

import logging
import os
import time
from collections import deque
from contextlib import asynccontextmanager
from threading import Lock

import psutil
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from kinship.db import close_pool, get_pool, get_stats, init_pool

logger = logging.getLogger("kinship")

PORT = int(os.environ.get("KIN_PORT", "9820"))


# ---------------------------------------------------------------------------
# RateCounter — thread-safe sliding-window request counter
# ---------------------------------------------------------------------------

SPARKLINE_BUCKETS = 60


class RateCounter:
    """Count events in a sliding window and expose per-second rate + history."""

    def __init__(self, window: float = 60.0) -> None:
        self._window = window
        self._lock = Lock()
        self._timestamps: deque[float] = deque()
        self._sparkline: deque[float] = deque(maxlen=SPARKLINE_BUCKETS)

    def record(self) -> None:
        now = time.monotonic()
        with self._lock:
            self._timestamps.append(now)

    def _prune(self, now: float) -> None:
        cutoff = now - self._window
        while self._timestamps and self._timestamps[0] < cutoff:
            self._timestamps.popleft()

    def rate(self) -> float:
        now = time.monotonic()
        with self._lock:
            self._prune(now)
            count = len(self._timestamps)
        return count / self._window if self._window else 0.0

    def snapshot_sparkline(self) -> None:
        self._sparkline.append(round(self.rate(), 2))

    def sparkline_history(self) -> list[float]:
        return list(self._sparkline)


request_counter = RateCounter(window=60.0)
_start_time: float = 0.0


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    global _start_time
    _start_time = time.time()

    await init_pool()
    logger.info("Database pool initialized")

    yield

    await close_pool()
    logger.info("Database pool closed")


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

app = FastAPI(
    title="kinship-engine",
    version="0.1.0",
    description="Resolves how two people in a family tree are related",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Request counting middleware
# ---------------------------------------------------------------------------

@app.middleware("http")
async def count_requests(request: Request, call_next):
    request_counter.record()
    return await call_next(request)


# ---------------------------------------------------------------------------
# Include routers
# ---------------------------------------------------------------------------

from kinship.relationship.routes import config as resolver_config  # noqa: E402
from kinship.relationship.routes import router as relationship_router  # noqa: E402
from kinship.relationship.routes import stats as resolution_stats  # noqa: E402

app.include_router(relationship_router)


# ---------------------------------------------------------------------------
# Core routes
# ---------------------------------------------------------------------------

@app.get("/health")
async def health():
    """Health check — returns DB connectivity status."""
    result: dict = {"status": "ok", "resolver": resolver_config.to_dict()}
    try:
        p = get_pool()
        db_ok = await p.fetchval("SELECT 1")
        result["database"] = "connected" if db_ok == 1 else "unexpected"
    except RuntimeError:
        result["database"] = "pool_not_initialized"
    except Exception as exc:
        result["status"] = "degraded"
        result["database"] = f"error: {exc}"
    return result


@app.get("/metrics")
async def metrics():
    """Stats endpoint for server-monitor dashboard."""
    try:
        now = time.time()
        process = psutil.Process(os.getpid())
        mem = process.memory_info()

        request_counter.snapshot_sparkline()

        # -- System metrics ---------------------------------------------------

        uptime = now - _start_time if _start_time else 0.0
        rps = request_counter.rate()

        result: list[dict] = [
            {
                "key": "uptime",
                "label": "Uptime",
                "value": round(uptime),
                "unit": "seconds",
            },
            {
                "key": "rps",
                "label": "Requests / sec",
                "value": round(rps, 2),
                "unit": "req/s",
                "warn_above": 200,
                "sparkline_history": request_counter.sparkline_history(),
            },
            {
                "key": "memory_rss",
                "label": "Memory (RSS)",
                "value": round(mem.rss / 1_048_576, 1),
                "unit": "MB",
                "warn_above": 512,
            },
            {
                "key": "cpu_percent",
                "label": "CPU usage",
                "value": process.cpu_percent(interval=0),
                "unit": "%",
                "warn_above": 90,
            },
        ]

        # -- Resolution metrics -----------------------------------------------

        result.extend([
            {"key": "resolved", "label": "Relationships resolved", "value": resolution_stats["resolved"], "unit": "requests"},
            {"key": "not_related", "label": "Not related", "value": resolution_stats["not_found"], "unit": "requests"},
            {"key": "depth_exceeded", "label": "Depth exceeded", "value": resolution_stats["depth_exceeded"], "unit": "requests"},
            {
                "key": "integrity_errors",
                "label": "Corrupt graph errors",
                "value": resolution_stats["integrity_errors"],
                "unit": "errors",
                "warn_above": 0,
            },
            {
                "key": "timeouts",
                "label": "Search timeouts",
                "value": resolution_stats["timeouts"],
                "unit": "requests",
                "warn_above": 10,
            },
        ])

        # -- Graph metrics ----------------------------------------------------

        stats = await get_stats()

        result.extend([
            {"key": "total_people", "label": "People", "value": stats["total_people"], "unit": "people"},
            {"key": "total_edges", "label": "Parent-child edges", "value": stats["total_edges"], "unit": "edges"},
            {"key": "total_unions", "label": "Unions", "value": stats["total_unions"], "unit": "unions"},
        ])

        for sex, count in stats["people_by_sex"].items():
            result.append({
                "key": f"people_{sex}",
                "label": f"People ({sex})",
                "value": count,
                "unit": "people",
            })

        # -- Database health --------------------------------------------------

        p = get_pool()
        db_size = await p.fetchval(
            "SELECT pg_database_size(current_database())"
        )
        result.append({
            "key": "db_size",
            "label": "Database size",
            "value": round(db_size / 1_048_576, 1) if db_size else 0,
            "unit": "MB",
        })

        return {"metrics": result}

    except Exception as exc:
        logger.exception("Error fetching metrics")
        return JSONResponse(
            status_code=500,
            content={"metrics": [], "error": f"Database error: {exc}"},
        )


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------

def run() -> None:
    uvicorn.run("kinship.app:app", host="127.0.0.1", port=PORT, reload=False)


if __name__ == "__main__":
    run()
