from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, List, Optional

from ou_overlay.feeds import EMPTY_FEED_LABEL, Number, normalize_feed, utc_now_iso

DEFAULT_MAX_EVENTS = 200
DEFAULT_QUERY_LIMIT = 50


@dataclass(frozen=True)
class UpdateEvent:
    ts: str
    type: str                 # single | bulk
    ip: Optional[str]
    ua: Optional[str]
    xff: Optional[str]
    feed: str                 # normalized
    raw_feed: Optional[str]
    ou: Optional[Number]
    applied: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ts": self.ts,
            "type": self.type,
            "ip": self.ip,
            "xff": self.xff,
            "ua": self.ua,
            "feed": self.feed,
            "rawFeed": self.raw_feed,
            "ou": self.ou,
            "applied": self.applied,
        }


@dataclass
class FeedSummary:
    total: int = 0
    applied: int = 0
    ignored: int = 0
    last_ts: Optional[str] = None
    last_ou: Optional[Number] = None
    last_raw_feed: Optional[str] = None
    last_ip: Optional[str] = None
    last_xff: Optional[str] = None
    last_ua: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "applied": self.applied,
            "ignored": self.ignored,
            "lastTs": self.last_ts,
            "lastOu": self.last_ou,
            "lastRawFeed": self.last_raw_feed,
            "lastIp": self.last_ip,
            "lastXff": self.last_xff,
            "lastUa": self.last_ua,
        }


def _parse_limit(limit: Any) -> int:
    if limit is None or isinstance(limit, bool):
        return DEFAULT_QUERY_LIMIT
    try:
        n = int(float(str(limit).strip()))
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_QUERY_LIMIT
    return n if n > 0 else DEFAULT_QUERY_LIMIT


class EventLog:
    """
    Bounded in-memory audit trail of update attempts, accepted or not.

    - insertion order is arrival order
    - oldest entries are evicted first once max_events is exceeded
    - never cleared, never written on reads
    """

    def __init__(self, max_events: int = DEFAULT_MAX_EVENTS) -> None:
        if max_events < 1:
            raise ValueError(f"max_events must be >= 1, got {max_events}")
        self.max_events = max_events
        self._events: Deque[UpdateEvent] = deque(maxlen=max_events)

    def __len__(self) -> int:
        return len(self._events)

    def record(
        self,
        *,
        etype: str,
        feed: str,
        raw_feed: Optional[str],
        ou: Optional[Number],
        applied: bool,
        ip: Optional[str] = None,
        ua: Optional[str] = None,
        xff: Optional[str] = None,
    ) -> UpdateEvent:
        ev = UpdateEvent(
            ts=utc_now_iso(),
            type=etype,
            ip=ip,
            ua=ua,
            xff=xff,
            feed=feed,
            raw_feed=raw_feed,
            ou=ou,
            applied=applied,
        )
        # deque(maxlen) drops from the left on overflow
        self._events.append(ev)
        return ev

    def query(self, limit: Any = None, feed: Optional[str] = None) -> List[UpdateEvent]:
        """
        Most recent matching events first. limit falls back to 50 when missing,
        non-numeric or non-positive, and is capped at max_events.
        """
        n = min(_parse_limit(limit), self.max_events)
        feed_filter = normalize_feed(feed) or None

        out: List[UpdateEvent] = []
        for ev in reversed(self._events):
            if feed_filter is not None and ev.feed != feed_filter:
                continue
            out.append(ev)
            if len(out) >= n:
                break
        return out

    def summarize(self) -> Dict[str, FeedSummary]:
        by_feed: Dict[str, FeedSummary] = {}
        for ev in self._events:
            s = by_feed.setdefault(ev.feed or EMPTY_FEED_LABEL, FeedSummary())
            s.total += 1
            if ev.applied:
                s.applied += 1
            else:
                s.ignored += 1
            s.last_ts = ev.ts
            s.last_ou = ev.ou
            s.last_raw_feed = ev.raw_feed
            s.last_ip = ev.ip
            s.last_xff = ev.xff
            s.last_ua = ev.ua
        return by_feed

    def events(self) -> List[UpdateEvent]:
        return list(self._events)
