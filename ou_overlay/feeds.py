from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Tuple, Union

Number = Union[int, float]


class Feed(str, Enum):
    ASN = "ASN"
    PUP = "PUP"
    BACKUP = "BACKUP"
    PRST = "PRST"


# Closed set, known at startup. Order is the order values are reported in.
FEEDS: Tuple[str, ...] = tuple(f.value for f in Feed)

EMPTY_FEED_LABEL = "(empty)"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def raw_feed_text(raw: Any) -> Optional[str]:
    """
    String form of whatever the producer sent as a feed name.
    None stays None so "no feed at all" is distinguishable from "".
    """
    if raw is None:
        return None
    if isinstance(raw, bool):
        return "true" if raw else "false"
    return str(raw)


def normalize_feed(raw: Any) -> str:
    return (raw_feed_text(raw) or "").strip().upper()


def is_known_feed(feed: str) -> bool:
    return feed in FEEDS


@dataclass(frozen=True)
class OuReading:
    """
    Result of coercing a producer value to a number.

    valid=False means coercion failed; value is then None and serializes as null.
    """
    value: Optional[Number]
    valid: bool

    @classmethod
    def invalid(cls) -> "OuReading":
        return cls(value=None, valid=False)

    @classmethod
    def of(cls, value: Number) -> "OuReading":
        if isinstance(value, float):
            if not math.isfinite(value):
                return cls.invalid()
            if value.is_integer():
                value = int(value)
        return cls(value=value, valid=True)


_NON_NUMERIC_WORDS = {"nan", "+nan", "-nan", "inf", "+inf", "-inf", "infinity", "+infinity", "-infinity"}


def _parse_text(s: str) -> OuReading:
    s = s.strip()
    if s == "":
        # blank strings count as zero, same as an empty form field
        return OuReading.of(0)
    if "_" in s or s.lower() in _NON_NUMERIC_WORDS:
        return OuReading.invalid()
    try:
        return OuReading.of(int(s))
    except ValueError:
        pass
    if s[:2].lower() in ("0x", "0o", "0b"):
        try:
            return OuReading.of(int(s, 0))
        except ValueError:
            return OuReading.invalid()
    try:
        return OuReading.of(float(s))
    except ValueError:
        return OuReading.invalid()


def coerce_ou(raw: Any) -> OuReading:
    """
    Permissive numeric coercion for over/under values.

    Never raises. Numbers pass through, numeric strings are parsed (surrounding
    whitespace ignored, blank means 0), booleans map to 1/0, everything else
    (missing values, words, lists, objects) is an invalid reading.
    """
    if raw is None:
        return OuReading.invalid()
    if isinstance(raw, bool):
        return OuReading.of(1 if raw else 0)
    if isinstance(raw, (int, float)):
        return OuReading.of(raw)
    if isinstance(raw, str):
        return _parse_text(raw)
    return OuReading.invalid()
