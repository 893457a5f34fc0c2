from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

from ou_overlay.feeds import FEEDS, Number, coerce_ou, normalize_feed, raw_feed_text, utc_now_iso

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedValue:
    ou: Optional[Number] = 0
    updated: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"ou": self.ou, "updated": self.updated}


@dataclass
class StateSnapshot:
    updated: str
    values: Dict[str, FeedValue] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "updated": self.updated,
            "values": {feed: v.to_dict() for feed, v in self.values.items()},
        }


@dataclass(frozen=True)
class ApplyResult:
    feed: str
    raw_feed: Optional[str]
    ou: Optional[Number]
    accepted: bool


class StateStore:
    """
    Last-write-wins store of the latest over/under value per feed.

    - values always holds exactly the fixed feed set
    - unknown feeds are rejected, never stored, never raise
    - callers get copies from snapshot(), never the live state

    Not locked on its own: the service container serializes update-then-log.
    """

    def __init__(self, feeds: Iterable[str] = FEEDS) -> None:
        self._snapshot = StateSnapshot(
            updated=utc_now_iso(),
            values={f: FeedValue() for f in feeds},
        )

    def apply_update(self, feed: Any, raw_value: Any, *, now: Optional[str] = None, touch: bool = True) -> ApplyResult:
        """
        Apply one reading. touch=False leaves the global timestamp alone so a
        bulk request can advance it once for the whole batch.
        """
        normalized = normalize_feed(feed)
        reading = coerce_ou(raw_value)
        raw = raw_feed_text(feed)

        if normalized not in self._snapshot.values:
            return ApplyResult(feed=normalized, raw_feed=raw, ou=reading.value, accepted=False)

        now = now or utc_now_iso()
        self._snapshot.values[normalized] = FeedValue(ou=reading.value, updated=now)
        if touch:
            self._snapshot.updated = now
        _logger.debug("applied %s=%r (valid=%s)", normalized, reading.value, reading.valid)
        return ApplyResult(feed=normalized, raw_feed=raw, ou=reading.value, accepted=True)

    def touch(self, now: Optional[str] = None) -> None:
        self._snapshot.updated = now or utc_now_iso()

    def get(self, feed: str) -> Optional[FeedValue]:
        return self._snapshot.values.get(normalize_feed(feed))

    def snapshot(self) -> StateSnapshot:
        # FeedValue is frozen, so a shallow copy of the mapping is a full copy
        return StateSnapshot(updated=self._snapshot.updated, values=dict(self._snapshot.values))

    def feeds(self):
        return list(self._snapshot.values.keys())
