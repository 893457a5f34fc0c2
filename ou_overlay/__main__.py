from __future__ import annotations

import logging

import uvicorn

from ou_overlay.main import app

_logger = logging.getLogger("ou_overlay")


def main() -> None:
    settings = app.state.container.settings
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _logger.info(
        "status API running on %s:%d (build %s, max events %d)",
        settings.host, settings.port, settings.build_id, settings.max_events,
    )
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        proxy_headers=settings.trust_proxy,
        forwarded_allow_ips=settings.forwarded_allow_ips if settings.trust_proxy else None,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
