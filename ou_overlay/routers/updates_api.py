from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from ou_overlay.config import BUILD_NAME
from ou_overlay.feeds import utc_now_iso
from ou_overlay.services.container import ServiceContainer, get_container

router = APIRouter(prefix="/updates", tags=["updates"])


def _envelope(container: ServiceContainer) -> Dict[str, Any]:
    return {
        "build": BUILD_NAME,
        "buildId": container.settings.build_id,
        "serverTime": utc_now_iso(),
        "maxEvents": container.event_log.max_events,
    }


@router.get("")
def list_updates(
    limit: Optional[str] = None,
    feed: Optional[str] = None,
    container: ServiceContainer = Depends(get_container),
) -> Dict[str, Any]:
    """
    Recent update attempts, most recent first. Debugging aid for pushers.

    limit is taken as a raw string so junk values fall back to the default
    instead of failing validation.
    """
    events, snap = container.recent_updates(limit=limit, feed=feed)
    return {
        **_envelope(container),
        "latest": snap.to_dict(),
        "events": [e.to_dict() for e in events],
    }


@router.get("/summary")
def updates_summary(container: ServiceContainer = Depends(get_container)) -> Dict[str, Any]:
    by_feed, total, snap = container.summary()
    return {
        **_envelope(container),
        "counts": {"totalEvents": total},
        "byFeed": {f: s.to_dict() for f, s in by_feed.items()},
        "latest": snap.to_dict(),
    }
