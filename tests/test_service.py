"""Tests for the recovery service using the in-process ASGI TestClient."""

from __future__ import annotations

import sys
from concurrent.futures import ThreadPoolExecutor

import pytest
from fastapi.testclient import TestClient

from shamirvote.service import app as service_module

# x^2 + 2x + 7 at x = 1..5 with the share at x = 3 bumped by one,
# encoded in a mix of bases.
CORRUPTED_DOC = {
    "keys": {"n": 5, "k": 3},
    "1": {"base": "10", "value": "10"},
    "2": {"base": "16", "value": "f"},
    "3": {"base": "2", "value": "10111"},
    "4": {"base": "36", "value": "v"},
    "5": {"base": "8", "value": "52"},
}


@pytest.fixture()
def client():
    service_module._audit = service_module.RecoveryLog()
    return TestClient(service_module.app)


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_recover(client):
    resp = client.post("/recover", json=CORRUPTED_DOC)
    assert resp.status_code == 200
    body = resp.json()
    assert body["secret"] == "7"
    assert body["votes"] == 4
    assert body["valid_combinations"] == 9
    assert body["total_combinations"] == 10
    assert {"secret": "7", "count": 4} in body["candidates"]
    assert body["candidates"][0] == {"secret": "8", "count": 1}


def test_recover_big_secret_as_string(client):
    secret = 2**200 + 12345
    doc = {
        "keys": {"n": 2, "k": 2},
        "1": {"base": "16", "value": format(secret + 3, "x")},
        "2": {"base": "16", "value": format(secret + 6, "x")},
    }
    resp = client.post("/recover", json=doc)
    assert resp.status_code == 200
    assert resp.json()["secret"] == str(secret)


def test_invalid_digit_is_422(client):
    doc = dict(CORRUPTED_DOC)
    doc["3"] = {"base": "2", "value": "10211"}
    resp = client.post("/recover", json=doc)
    assert resp.status_code == 422
    assert "base 2" in resp.json()["detail"]


def test_invalid_share_set_is_422(client):
    doc = dict(CORRUPTED_DOC)
    doc["keys"] = {"n": 5, "k": 9}
    resp = client.post("/recover", json=doc)
    assert resp.status_code == 422


def test_not_found_is_404(client):
    doc = {
        "keys": {"n": 2, "k": 2},
        "1": {"base": "10", "value": "1"},
        "3": {"base": "10", "value": "2"},
    }
    resp = client.post("/recover", json=doc)
    assert resp.status_code == 404


def test_too_many_combinations_is_413(client, monkeypatch):
    monkeypatch.setattr(service_module, "MAX_COMBINATIONS", 5)
    resp = client.post("/recover", json=CORRUPTED_DOC)
    assert resp.status_code == 413


def test_timeout_is_504(client, monkeypatch):
    monkeypatch.setattr(service_module, "RECOVER_TIMEOUT_SECONDS", -1.0)
    resp = client.post("/recover", json=CORRUPTED_DOC)
    assert resp.status_code == 504
    events = [e["event"] for e in client.get("/audit").json()["entries"]]
    assert events[-1] == "cancelled"


def test_audit_records_recovery(client):
    client.post("/recover", json=CORRUPTED_DOC)
    resp = client.get("/audit")
    assert resp.status_code == 200
    audit = resp.json()
    assert audit["chain_valid"]
    events = [e["event"] for e in audit["entries"]]
    assert events[0] == "combinations"
    assert events[-1] == "recovered"
    request_ids = {e["data"]["request_id"] for e in audit["entries"]}
    assert len(request_ids) == 1


def test_recover_secret_beyond_str_digit_limit(client):
    secret = 10**5000 + 7
    doc = {
        "keys": {"n": 3, "k": 2},
        "1": {"base": "16", "value": format(secret + 3, "x")},
        "2": {"base": "16", "value": format(secret + 6, "x")},
        "3": {"base": "16", "value": format(secret + 9, "x")},
    }
    resp = client.post("/recover", json=doc)
    assert resp.status_code == 200
    body = resp.json()
    assert body["secret"] == "1" + "0" * 4999 + "7"
    assert body["candidates"] == [{"secret": body["secret"], "count": 3}]

    audit = client.get("/audit").json()
    assert audit["chain_valid"]
    assert audit["entries"][-1]["data"]["secret"] == body["secret"]


def test_concurrent_requests_keep_chain_valid(client):
    interval = sys.getswitchinterval()
    sys.setswitchinterval(1e-6)  # force frequent thread switches
    try:
        with ThreadPoolExecutor(max_workers=8) as pool:
            statuses = list(pool.map(
                lambda _: client.post("/recover", json=CORRUPTED_DOC).status_code,
                range(40),
            ))
    finally:
        sys.setswitchinterval(interval)
    assert statuses == [200] * 40

    audit = client.get("/audit").json()
    assert audit["chain_valid"]
    recovered = [e for e in audit["entries"] if e["event"] == "recovered"]
    assert len(recovered) == 40
