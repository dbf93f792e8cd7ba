from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse, Response

from ..app import AppState, error_response, get_app_state, is_debug
from ..errors import InvalidInput, PreviewError

router = APIRouter(tags=["posts"])


@router.get("/p/{post_id}", response_class=HTMLResponse)
async def post_preview(
    post_id: str,
    debug: Optional[str] = Query(None, description="Echo upstream status and body on errors"),
    state: AppState = Depends(get_app_state),
) -> Response:
    try:
        html = await state.service.render(post_id)
    except PreviewError as exc:
        return error_response(exc, state.settings, debug=is_debug(debug))
    return HTMLResponse(
        html,
        headers={"Cache-Control": f"public, max-age={state.settings.cache_seconds}"},
    )


@router.get("/p", include_in_schema=False)
@router.get("/p/", include_in_schema=False)
async def missing_post_id() -> None:
    raise InvalidInput("Missing post id")
