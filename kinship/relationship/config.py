"""Resolver configuration from environment variables (KIN_ prefix)."""

from __future__ import annotations

import os


class ResolverConfig:
    """Search bounds and request deadline for relationship resolution."""

    def __init__(self) -> None:
        self.max_depth: int = int(os.environ.get("KIN_MAX_DEPTH", "10"))
        self.max_depth_limit: int = int(os.environ.get("KIN_MAX_DEPTH_LIMIT", "20"))
        self.timeout_seconds: float = float(
            os.environ.get("KIN_RESOLVE_TIMEOUT_SECONDS", "5.0")
        )
        if self.max_depth > self.max_depth_limit:
            self.max_depth = self.max_depth_limit

    def clamp_depth(self, requested: int | None) -> int:
        """Requested depth, or the default, capped at the configured limit."""
        if requested is None:
            return self.max_depth
        return max(1, min(requested, self.max_depth_limit))

    def to_dict(self) -> dict:
        return {
            "max_depth": self.max_depth,
            "max_depth_limit": self.max_depth_limit,
            "timeout_seconds": self.timeout_seconds,
        }
