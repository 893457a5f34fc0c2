from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from ou_overlay.config import BUILD_NAME, SERVICE_NAME
from ou_overlay.services.container import ServiceContainer, get_container

router = APIRouter(tags=["meta"])

ROUTES = [
    "/status (GET, POST)",
    "/updates?limit=50&feed=PRST",
    "/updates/summary",
    "/overlay/asn",
    "/overlay/pup",
    "/overlay/backup",
    "/overlay/prst",
]


@router.get("/", response_class=PlainTextResponse)
def root(container: ServiceContainer = Depends(get_container)) -> str:
    return f"OK OVERLAY BUILD v1 ({container.settings.build_id})"


@router.get("/routes")
def routes() -> Dict[str, Any]:
    return {"ok": True, "routes": list(ROUTES)}


@router.get("/health")
def health() -> Dict[str, Any]:
    return {"ok": True, "service": SERVICE_NAME}


@router.get("/health/details")
def health_details(container: ServiceContainer = Depends(get_container)) -> Dict[str, Any]:
    """
    Expanded health surface. Must never raise.
    """
    out: Dict[str, Any] = {"ok": True, "service": SERVICE_NAME}
    try:
        inv = container.invariants
        _, total, snap = container.summary()
        out["invariants"] = inv
        out["counts"] = {
            "events": total,
            "maxEvents": container.event_log.max_events,
            "feeds": len(snap.values),
        }
        out["updated"] = snap.updated
        out["ok"] = bool(inv.get("ok", True))
    except Exception as e:
        out["ok"] = False
        out["error"] = str(e)
    return out


@router.get("/meta/build")
def meta_build(container: ServiceContainer = Depends(get_container)) -> Dict[str, Any]:
    return {
        "build": BUILD_NAME,
        "buildId": container.settings.build_id,
        "service": SERVICE_NAME,
        "startedAt": container.started_at,
    }
