from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ou_overlay import __version__
from ou_overlay.config import Settings
from ou_overlay.routers.meta import router as meta_router
from ou_overlay.routers.overlay_api import router as overlay_router
from ou_overlay.routers.status_api import router as status_router
from ou_overlay.routers.updates_api import router as updates_router
from ou_overlay.runtime.invariants import startup_invariants
from ou_overlay.runtime.middleware import BareOptionsMiddleware, NoStoreMiddleware
from ou_overlay.services.container import ServiceContainer


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    container = ServiceContainer(settings)

    app = FastAPI(title="OU Overlay", version=__version__)
    app.state.container = container

    # Meta
    app.include_router(meta_router)

    # Core
    app.include_router(status_router)
    app.include_router(updates_router)
    app.include_router(overlay_router)

    # Innermost: only reached by OPTIONS requests CORS did not answer as a preflight
    app.add_middleware(BareOptionsMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    # Added last so it wraps CORS preflight responses too
    app.add_middleware(NoStoreMiddleware)

    container.invariants = startup_invariants(app, container)
    return app


app = create_app()
