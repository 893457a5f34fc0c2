from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, Field


# ----------------------------
# Request shapes
# ----------------------------

class SingleUpdate(BaseModel):
    kind: Literal["single"] = "single"
    feed: Any = None
    ou: Any = None


class BulkUpdate(BaseModel):
    kind: Literal["bulk"] = "bulk"
    values: Dict[str, Any] = Field(default_factory=dict)


UpdateRequest = Union[SingleUpdate, BulkUpdate]


@dataclass(frozen=True)
class RequestMeta:
    ip: Optional[str] = None
    ua: Optional[str] = None
    xff: Optional[str] = None


def parse_update_request(body: Optional[Mapping[str, Any]], query: Optional[Mapping[str, Any]] = None) -> UpdateRequest:
    """
    Decide single vs bulk before anything is applied.

    A body carrying a `values` mapping is bulk. Anything else is single, with
    `feed`/`ou` taken from the body and falling back to the query string.
    """
    body = body if isinstance(body, Mapping) else {}
    query = query or {}

    values = body.get("values")
    if isinstance(values, Mapping):
        return BulkUpdate(values={str(k): v for k, v in values.items()})

    feed = body.get("feed")
    if feed is None:
        feed = query.get("feed")
    ou = body.get("ou")
    if ou is None:
        ou = query.get("ou")
    return SingleUpdate(feed=feed, ou=ou)


# ----------------------------
# Response shapes
# ----------------------------

class IgnoredFeed(BaseModel):
    feed: str
    rawFeed: Optional[str] = None


class UpdateResponse(BaseModel):
    ok: bool = True
    applied: List[str] = Field(default_factory=list)
    ignored: List[IgnoredFeed] = Field(default_factory=list)
