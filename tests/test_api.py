"""HTTP surface: validation, throttling and error mapping."""

import pytest
from fastapi.testclient import TestClient

import api
from scamradar.settings import Settings

from conftest import FakeEngine


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def client(engine) -> TestClient:
    return TestClient(api.create_app(engine=engine, settings=Settings(rate_limit=3, max_input=50)))


def test_health(client) -> None:
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


def test_scan_returns_camel_case_report(client, engine) -> None:
    r = client.post("/api/scan", json={"input": "cosmos1abcdefghijklmnopqrstuvwxyz"})
    assert r.status_code == 200
    body = r.json()
    assert body["inputType"] == "unknown"
    assert body["riskScore"] == 5
    assert body["riskLevel"] == "SAFE"
    assert "timestamp" in body
    assert engine.seen == [("cosmos1abcdefghijklmnopqrstuvwxyz", None)]


@pytest.mark.parametrize("payload", [{}, {"input": ""}, {"input": 42}, {"input": ["a"]}])
def test_missing_or_non_string_input(client, payload) -> None:
    r = client.post("/api/scan", json=payload)
    assert r.status_code == 400
    assert r.json()["detail"] == api.ERR_INPUT


def test_input_too_long(client) -> None:
    r = client.post("/api/scan", json={"input": "x" * 51})
    assert r.status_code == 400
    assert r.json()["detail"] == "Input too long. Maximum 50 characters."


def test_bad_kind_is_rejected(client, engine) -> None:
    r = client.post("/api/scan", json={"input": "abc", "kind": "dogecoin"})
    assert r.status_code == 400
    assert not engine.seen


def test_kind_is_passed_through(client, engine) -> None:
    r = client.post("/api/scan", json={"input": "0xabc", "kind": "nft"})
    assert r.status_code == 200
    assert engine.seen == [("0xabc", "nft")]


def test_rate_limit(client) -> None:
    for _ in range(3):
        assert client.post("/api/scan", json={"input": "abc"}).status_code == 200
    r = client.post("/api/scan", json={"input": "abc"})
    assert r.status_code == 429
    assert r.json()["detail"] == api.ERR_RATE


def test_rate_limit_is_per_forwarded_client(client) -> None:
    for _ in range(3):
        client.post("/api/scan", json={"input": "abc"}, headers={"X-Forwarded-For": "203.0.113.9, 10.0.0.1"})
    blocked = client.post("/api/scan", json={"input": "abc"}, headers={"X-Forwarded-For": "203.0.113.9"})
    other = client.post("/api/scan", json={"input": "abc"}, headers={"X-Forwarded-For": "198.51.100.7"})
    assert blocked.status_code == 429
    assert other.status_code == 200


def test_engine_failure_maps_to_500() -> None:
    client = TestClient(api.create_app(engine=FakeEngine(fail=True), settings=Settings()))
    r = client.post("/api/scan", json={"input": "abc"})
    assert r.status_code == 500
    assert r.json()["detail"] == api.ERR_SCAN


def test_batch(client) -> None:
    r = client.post("/api/batch", json={"inputs": ["a", "b", "c"]})
    assert r.status_code == 200
    body = r.json()
    assert body["count"] == 3
    assert [x["inputValue"] for x in body["results"]] == ["a", "b", "c"]


@pytest.mark.parametrize("inputs, detail", [
    ([], "inputs list is empty"),
    (["a"] * 21, "At most 20 inputs per batch."),
    (["a", None], api.ERR_INPUT),
])
def test_batch_validation(client, inputs, detail) -> None:
    r = client.post("/api/batch", json={"inputs": inputs})
    assert r.status_code == 400
    assert r.json()["detail"] == detail
