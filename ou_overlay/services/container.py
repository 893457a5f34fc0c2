from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple

from fastapi import Request

from ou_overlay.config import Settings
from ou_overlay.event_log import EventLog, FeedSummary, UpdateEvent
from ou_overlay.feeds import utc_now_iso
from ou_overlay.state_store import ApplyResult, StateSnapshot, StateStore
from ou_overlay.updates import BulkUpdate, IgnoredFeed, RequestMeta, UpdateRequest, UpdateResponse

_logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Owns the process-wide state store and event log.

    Handlers run on a thread pool, so one lock guards both structures and an
    update's apply-then-record runs as a single step.
    """

    def __init__(self, settings: Optional[Settings] = None, clock: Optional[Callable[[], str]] = None) -> None:
        self.settings = settings or Settings()
        self.state_store = StateStore()
        self.event_log = EventLog(max_events=self.settings.max_events)
        self.started_at = utc_now_iso()
        self.invariants: Dict[str, Any] = {"ok": True, "failures": [], "note": "not_run_yet"}
        self._lock = threading.RLock()
        self.clock: Callable[[], str] = clock or utc_now_iso

    def _record(self, etype: str, res: ApplyResult, meta: RequestMeta) -> UpdateEvent:
        if not res.accepted:
            _logger.info("ignored %s update for feed %r from %s", etype, res.raw_feed, meta.ip)
        return self.event_log.record(
            etype=etype,
            feed=res.feed,
            raw_feed=res.raw_feed,
            ou=res.ou,
            applied=res.accepted,
            ip=meta.ip,
            ua=meta.ua,
            xff=meta.xff,
        )

    def apply(self, req: UpdateRequest, meta: Optional[RequestMeta] = None) -> UpdateResponse:
        meta = meta or RequestMeta()
        out = UpdateResponse()

        with self._lock:
            now = self.clock()
            if isinstance(req, BulkUpdate):
                for raw_feed, value in req.values.items():
                    # an explicit null in a bulk payload reads as 0
                    if value is None:
                        value = 0
                    res = self.state_store.apply_update(raw_feed, value, now=now, touch=False)
                    self._record("bulk", res, meta)
                    if res.accepted:
                        out.applied.append(res.feed)
                    else:
                        out.ignored.append(IgnoredFeed(feed=res.feed, rawFeed=res.raw_feed))
                # Any values object advances the global timestamp, even if empty or all rejected.
                self.state_store.touch(now)
                return out

            res = self.state_store.apply_update(req.feed, req.ou, now=now)
            self._record("single", res, meta)

        if res.accepted:
            out.applied.append(res.feed)
        else:
            out.ignored.append(IgnoredFeed(feed=res.feed, rawFeed=res.raw_feed))
        return out

    def snapshot(self) -> StateSnapshot:
        with self._lock:
            return self.state_store.snapshot()

    def recent_updates(self, limit: Any = None, feed: Optional[str] = None) -> Tuple[List[UpdateEvent], StateSnapshot]:
        with self._lock:
            return self.event_log.query(limit=limit, feed=feed), self.state_store.snapshot()

    def summary(self) -> Tuple[Dict[str, FeedSummary], int, StateSnapshot]:
        with self._lock:
            return self.event_log.summarize(), len(self.event_log), self.state_store.snapshot()


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container
