"""Developer-only inspection endpoints, enabled with STUDY_PLANNER_DEBUG_ENDPOINTS."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status

from .clock import resolve_now
from .config import Settings, get_settings


router = APIRouter(prefix="/api/developer", tags=["developer"])


def _require_debug(settings: Settings = Depends(get_settings)) -> Settings:
    if not settings.debug_endpoints:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Developer endpoints are disabled.",
        )
    return settings


@router.get("/settings", status_code=status.HTTP_200_OK)
def developer_settings(settings: Settings = Depends(_require_debug)) -> Dict[str, Any]:
    return {
        "settings": settings.model_dump(by_alias=True),
        "now": resolve_now(None, settings.timezone).isoformat(),
    }


__all__ = ["router"]
