from __future__ import annotations

import pytest

from ou_overlay.feeds import FEEDS, OuReading, coerce_ou, is_known_feed, normalize_feed, raw_feed_text


def test_feed_set_is_fixed() -> None:
    assert FEEDS == ("ASN", "PUP", "BACKUP", "PRST")


@pytest.mark.parametrize("raw", ["asn", " ASN ", "\tAsN\n", "ASN"])
def test_normalize_is_case_and_whitespace_insensitive(raw) -> None:
    assert normalize_feed(raw) == "ASN"


def test_normalize_is_idempotent() -> None:
    once = normalize_feed("  backup ")
    assert normalize_feed(once) == once


def test_normalize_missing_feed_is_empty() -> None:
    assert normalize_feed(None) == ""
    assert raw_feed_text(None) is None


def test_raw_feed_text_stringifies_non_strings() -> None:
    assert raw_feed_text(5) == "5"
    assert raw_feed_text(True) == "true"


def test_unknown_feeds() -> None:
    assert not is_known_feed("XYZ")
    assert not is_known_feed("asn")  # not normalized
    assert is_known_feed("PRST")


@pytest.mark.parametrize(
    "raw, expected",
    [
        (12, 12),
        (-5, -5),
        (0, 0),
        (2.5, 2.5),
        (3.0, 3),
        ("7", 7),
        (" -14 ", -14),
        ("1.25", 1.25),
        ("1e2", 100),
        ("0x10", 16),
        ("", 0),
        (True, 1),
        (False, 0),
    ],
)
def test_coerce_valid(raw, expected) -> None:
    r = coerce_ou(raw)
    assert r.valid is True
    assert r.value == expected


@pytest.mark.parametrize("raw", [None, "abc", "12abc", "NaN", "Infinity", "1_000", float("nan"), float("inf"), [1], {"a": 1}])
def test_coerce_invalid_is_a_value_not_an_error(raw) -> None:
    r = coerce_ou(raw)
    assert r == OuReading.invalid()
    assert r.value is None


def test_negative_zero_and_positive_are_distinguishable_from_invalid() -> None:
    for v in (-1, 0, 1):
        assert coerce_ou(v).valid
    assert not coerce_ou("nope").valid
