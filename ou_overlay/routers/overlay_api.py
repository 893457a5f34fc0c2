from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse

from ou_overlay.feeds import is_known_feed
from ou_overlay.overlay.template import CONTENT_SECURITY_POLICY, render_overlay
from ou_overlay.services.container import ServiceContainer, get_container

router = APIRouter(prefix="/overlay", tags=["overlay"])


@router.get("/{name}", response_class=HTMLResponse)
def overlay(name: str, container: ServiceContainer = Depends(get_container)) -> HTMLResponse:
    # Case-insensitive (/overlay/asn, /overlay/ASN); anything outside the feed set is a 404.
    feed = name.upper()
    if not is_known_feed(feed):
        raise HTTPException(status_code=404, detail="Not Found")

    html = render_overlay(feed, poll_ms=container.settings.overlay_poll_ms)
    return HTMLResponse(
        content=html,
        headers={"Content-Security-Policy": CONTENT_SECURITY_POLICY},
    )
