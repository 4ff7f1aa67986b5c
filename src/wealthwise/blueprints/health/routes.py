"""Liveness endpoint."""

from __future__ import annotations

from ...models.base import utcnow
from ...responses import success
from . import bp


@bp.get("/health")
def health():
    return success({"status": "ok", "timestamp": utcnow().isoformat()}, "WealthWise API is running")
