from __future__ import annotations


def test_get_status_initial_shape(client) -> None:
    r = client.get("/status")
    assert r.status_code == 200
    assert r.headers["cache-control"] == "no-store"

    j = r.json()
    assert j["build"] == "overlay-v1"
    assert j["buildId"] == "test-build"
    assert isinstance(j["updated"], str)
    assert set(j["values"]) == {"ASN", "PUP", "BACKUP", "PRST"}
    assert j["values"]["ASN"] == {"ou": 0, "updated": None}


def test_single_update_applies(client) -> None:
    r = client.post("/status", json={"feed": "ASN", "ou": 12})
    assert r.status_code == 200
    assert r.json() == {"ok": True, "applied": ["ASN"], "ignored": []}

    j = client.get("/status").json()
    assert j["values"]["ASN"]["ou"] == 12
    assert j["values"]["ASN"]["updated"] == j["updated"]


def test_single_update_unknown_feed_is_ignored(client) -> None:
    before = client.get("/status").json()

    r = client.post("/status", json={"feed": "XYZ", "ou": 5})
    assert r.json() == {"ok": True, "applied": [], "ignored": [{"feed": "XYZ", "rawFeed": "XYZ"}]}

    after = client.get("/status").json()
    assert after["values"] == before["values"]
    assert after["updated"] == before["updated"]


def test_single_update_normalizes_feed(client) -> None:
    r = client.post("/status", json={"feed": "  prst ", "ou": "-3"})
    assert r.json()["applied"] == ["PRST"]
    assert client.get("/status").json()["values"]["PRST"]["ou"] == -3


def test_bulk_update_partial_success(client) -> None:
    r = client.post("/status", json={"values": {"ASN": 10, "PUP": -5, "BOGUS": 1}})
    assert r.json() == {
        "ok": True,
        "applied": ["ASN", "PUP"],
        "ignored": [{"feed": "BOGUS", "rawFeed": "BOGUS"}],
    }

    values = client.get("/status").json()["values"]
    assert values["ASN"]["ou"] == 10
    assert values["PUP"]["ou"] == -5
    assert "BOGUS" not in values


LATER = "2099-01-01T00:00:00.000Z"


def _pin_clock(client, stamp: str = LATER) -> None:
    client.app.state.container.clock = lambda: stamp


def test_bulk_all_rejected_still_advances_updated(client) -> None:
    before = client.get("/status").json()
    _pin_clock(client)

    r = client.post("/status", json={"values": {"nope": 1}})
    assert r.json()["applied"] == []

    after = client.get("/status").json()
    assert after["values"] == before["values"]
    assert before["updated"] != LATER
    assert after["updated"] == LATER
    assert client.get("/updates").json()["events"][0]["type"] == "bulk"


def test_empty_bulk_values_still_advances_updated(client) -> None:
    before = client.get("/status").json()
    _pin_clock(client)

    r = client.post("/status", json={"values": {}})
    assert r.json() == {"ok": True, "applied": [], "ignored": []}

    after = client.get("/status").json()
    assert after["values"] == before["values"]
    assert after["updated"] == LATER
    assert client.get("/updates/summary").json()["counts"]["totalEvents"] == 0


def test_single_rejected_does_not_advance_updated(client) -> None:
    before = client.get("/status").json()
    _pin_clock(client)

    client.post("/status", json={"feed": "nope", "ou": 1})
    assert client.get("/status").json()["updated"] == before["updated"]


def test_bulk_null_value_reads_as_zero(client) -> None:
    client.post("/status", json={"feed": "ASN", "ou": 9})
    r = client.post("/status", json={"values": {"ASN": None}})
    assert r.json()["applied"] == ["ASN"]

    assert client.get("/status").json()["values"]["ASN"]["ou"] == 0
    assert client.get("/updates").json()["events"][0]["ou"] == 0


def test_single_missing_ou_stays_null(client) -> None:
    client.post("/status", json={"feed": "ASN", "ou": 9})
    r = client.post("/status", json={"feed": "ASN"})
    assert r.json()["applied"] == ["ASN"]
    assert client.get("/status").json()["values"]["ASN"]["ou"] is None


def test_missing_fields_are_rejected_not_errors(client) -> None:
    r = client.post("/status", json={})
    assert r.status_code == 200
    assert r.json() == {"ok": True, "applied": [], "ignored": [{"feed": "", "rawFeed": None}]}


def test_non_numeric_ou_is_stored_as_null(client) -> None:
    r = client.post("/status", json={"feed": "BACKUP", "ou": "n/a"})
    assert r.json()["applied"] == ["BACKUP"]
    assert client.get("/status").json()["values"]["BACKUP"]["ou"] is None


def test_form_encoded_single_update(client) -> None:
    r = client.post("/status", data={"feed": "pup", "ou": "7"})
    assert r.json()["applied"] == ["PUP"]
    assert client.get("/status").json()["values"]["PUP"]["ou"] == 7


def test_query_string_fallback(client) -> None:
    r = client.post("/status?feed=asn&ou=4")
    assert r.json()["applied"] == ["ASN"]
    assert client.get("/status").json()["values"]["ASN"]["ou"] == 4


def test_malformed_json_is_400_and_not_recorded(client) -> None:
    r = client.post("/status", content=b"{not json", headers={"content-type": "application/json"})
    assert r.status_code == 400
    assert client.get("/updates/summary").json()["counts"]["totalEvents"] == 0


def test_every_attempt_records_request_metadata(client) -> None:
    client.post(
        "/status",
        json={"feed": "ASN", "ou": 1},
        headers={"user-agent": "pusher/1.0", "x-forwarded-for": "203.0.113.9"},
    )
    ev = client.get("/updates").json()["events"][0]
    assert ev["type"] == "single"
    assert ev["feed"] == "ASN"
    assert ev["applied"] is True
    assert ev["ua"] == "pusher/1.0"
    assert ev["xff"] == "203.0.113.9"
    assert ev["ip"] == "testclient"
