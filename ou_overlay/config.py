from __future__ import annotations

import os
from dataclasses import dataclass

from ou_overlay.event_log import DEFAULT_MAX_EVENTS

SERVICE_NAME = "ou-overlay"
BUILD_NAME = "overlay-v1"


def _env_bool(name: str, default: bool = False) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in ("1", "true", "yes", "y", "on")


def _env_int(name: str, default: int, minimum: int = 1) -> int:
    v = os.getenv(name)
    if v is None or not v.strip():
        return default
    try:
        n = int(v)
    except ValueError:
        return default
    return n if n >= minimum else default


@dataclass(frozen=True)
class Settings:
    build_id: str = "dev"
    max_events: int = DEFAULT_MAX_EVENTS
    host: str = "0.0.0.0"
    port: int = 8080
    overlay_poll_ms: int = 5000
    trust_proxy: bool = True
    forwarded_allow_ips: str = "*"
    log_level: str = "INFO"
    invariants_strict: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            build_id=os.getenv("BUILD_ID") or "dev",
            max_events=_env_int("MAX_EVENTS", DEFAULT_MAX_EVENTS),
            host=os.getenv("HOST", "0.0.0.0"),
            port=_env_int("PORT", 8080),
            overlay_poll_ms=_env_int("OVERLAY_POLL_MS", 5000, minimum=250),
            trust_proxy=_env_bool("TRUST_PROXY", True),
            forwarded_allow_ips=os.getenv("FORWARDED_ALLOW_IPS", "*"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            invariants_strict=_env_bool("INVARIANTS_STRICT", False),
        )
