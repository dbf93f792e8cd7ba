from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from ..app import AppState, get_app_state

router = APIRouter(tags=["status"])


class HealthResponse(BaseModel):
    ok: bool
    configured: bool


@router.get("/health", response_model=HealthResponse)
async def health(response: Response, state: AppState = Depends(get_app_state)) -> HealthResponse:
    response.headers["Cache-Control"] = "no-store"
    return HealthResponse(ok=True, configured=not state.settings.missing_required())
