from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from ou_overlay.config import BUILD_NAME
from ou_overlay.services.container import ServiceContainer, get_container
from ou_overlay.updates import RequestMeta, UpdateResponse, parse_update_request

router = APIRouter(tags=["status"])

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def _content_type(request: Request) -> str:
    return request.headers.get("content-type", "").split(";")[0].strip().lower()


async def _read_body(request: Request) -> Optional[Mapping[str, Any]]:
    """
    JSON or form-encoded body as a mapping. Other content types are ignored
    (query-string parameters still apply). Undecodable JSON is a 400.
    """
    ctype = _content_type(request)
    if ctype in _FORM_TYPES:
        form = await request.form()
        return dict(form)

    if ctype != "application/json" and not ctype.endswith("+json"):
        return None

    raw = await request.body()
    if not raw.strip():
        return None
    try:
        data = json.loads(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail="malformed JSON body")
    return data if isinstance(data, dict) else None


def request_meta(request: Request) -> RequestMeta:
    client = getattr(request, "client", None)
    return RequestMeta(
        ip=getattr(client, "host", None),
        ua=request.headers.get("user-agent") or None,
        xff=request.headers.get("x-forwarded-for") or None,
    )


@router.get("/status")
def get_status(container: ServiceContainer = Depends(get_container)) -> Dict[str, Any]:
    snap = container.snapshot()
    return {"build": BUILD_NAME, "buildId": container.settings.build_id, **snap.to_dict()}


@router.post("/status", response_model=UpdateResponse)
async def post_status(request: Request, container: ServiceContainer = Depends(get_container)) -> UpdateResponse:
    body = await _read_body(request)
    req = parse_update_request(body, request.query_params)
    return container.apply(req, request_meta(request))
