"""Admin health endpoints."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, Request

from ..config import ServerConfig
from ..storage import RsStorage

router = APIRouter(prefix="/admin", tags=["admin"])

logger = logging.getLogger(__name__)


def _get_storage(request: Request) -> RsStorage:
    return request.app.state.storage


def _get_config(request: Request) -> ServerConfig:
    return request.app.state.server_config


@router.get("/health")
async def health(
    request: Request,
    storage: RsStorage = Depends(_get_storage),
    config: ServerConfig = Depends(_get_config),
) -> dict[str, Any]:
    start_time = getattr(request.app.state, "start_time", None)
    uptime = int((datetime.now(timezone.utc) - start_time).total_seconds()) if start_time else 0
    storage_state: dict[str, Any] = {"backend": config.storage.backend}
    try:
        storage_state["events"] = len(await storage.list_events())
        storage_state["reachable"] = True
    except Exception as exc:  # driver errors differ per backend
        logger.warning("storage backend %s unreachable: %s", config.storage.backend, exc)
        storage_state["reachable"] = False
    return {
        "status": "healthy" if storage_state["reachable"] else "degraded",
        "uptime_seconds": uptime,
        "version": request.app.version,
        "storage": storage_state,
    }
