from __future__ import annotations

import logging
import time
from typing import Any, Dict, List

from ou_overlay.feeds import FEEDS, is_known_feed

_logger = logging.getLogger(__name__)


def _middleware_names(app) -> List[str]:
    try:
        return [m.cls.__name__ for m in getattr(app, "user_middleware", [])]
    except Exception:
        return []


def startup_invariants(app, container) -> Dict[str, Any]:
    """
    Returns a dict of invariant results. If the container's settings are
    strict, raises RuntimeError on failure.
    """
    settings = container.settings
    strict = settings.invariants_strict

    names = _middleware_names(app)
    has_no_store = any("NoStore" in n for n in names)

    feeds = container.state_store.feeds()

    failures: List[str] = []
    if sorted(feeds) != sorted(FEEDS):
        failures.append(f"feed set mismatch: {feeds} != {list(FEEDS)}")
    unknown = [f for f in feeds if not is_known_feed(f)]
    if unknown:
        failures.append(f"unknown feeds in state store: {unknown}")
    if container.event_log.max_events < 1:
        failures.append(f"max_events must be >= 1, got {container.event_log.max_events}")
    if not has_no_store:
        failures.append("no-store middleware not attached")

    result = {
        "ok": len(failures) == 0,
        "strict": strict,
        "middleware": {
            "attached": names,
            "has_no_store": has_no_store,
        },
        "feeds": feeds,
        "max_events": container.event_log.max_events,
        "failures": failures,
        "ts_ms": int(time.time() * 1000),
    }

    if strict and failures:
        raise RuntimeError("Startup invariants failed: " + " | ".join(failures))

    if failures:
        _logger.warning("startup invariants failed: %s", failures)

    return result
