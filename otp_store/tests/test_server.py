from __future__ import annotations

import logging

import pytest

from otp_server.app import REJECTED_MESSAGE, create_app
from otp_server.config import ServerSettings


@pytest.fixture
def client(store):
    app = create_app(ServerSettings(), store=store)
    app.config["TESTING"] = True
    return app.test_client()


def test_issue_and_redeem_round_trip(client):
    created = client.post("/codes", json={"code": 123456, "duration_ms": 600_000})
    assert created.status_code == 200
    assert created.get_json()["data"] == {"code": 123456, "existed": False, "outcome": "created"}

    refreshed = client.post("/codes", json={"code": 123456, "duration_ms": 30_000})
    assert refreshed.get_json()["data"]["outcome"] == "refreshed"

    first = client.post("/codes/redeem", json={"code": 123456})
    assert first.get_json()["data"] == {"code": 123456, "accepted": True}

    second = client.post("/codes/redeem", json={"code": 123456})
    body = second.get_json()
    assert second.status_code == 200
    assert body["data"]["accepted"] is False
    assert body["message"] == REJECTED_MESSAGE


def test_expired_and_unknown_codes_share_one_message(client, clock):
    client.post("/codes", json={"code": 222222, "duration_ms": 1_000})
    clock.advance(1_000)
    expired = client.post("/codes/redeem", json={"code": 222222}).get_json()
    unknown = client.post("/codes/redeem", json={"code": 333333}).get_json()
    assert expired == {
        "success": True,
        "message": REJECTED_MESSAGE,
        "data": {"code": 222222, "accepted": False},
    }
    assert unknown["message"] == expired["message"]


def test_missing_duration_issues_dead_code(client):
    client.post("/codes", json={"code": 444444})
    body = client.post("/codes/redeem", json={"code": 444444}).get_json()
    assert body["data"]["accepted"] is False


def test_duration_too_large_for_float_is_capped_over_http(client, clock):
    client.post("/codes", json={"code": 123456, "duration_ms": 10**400})
    clock.advance(1_000)
    body = client.post("/codes/redeem", json={"code": 123456}).get_json()
    assert body["data"]["accepted"] is True


def test_rejected_redeem_logs_masked_code(client, caplog):
    caplog.set_level(logging.INFO, logger="otp_server.app")
    client.post("/codes/redeem", json={"code": 987654})
    assert "987654" not in caplog.text
    assert "Code Rejected" in caplog.text


@pytest.mark.parametrize("code", [99_999, 100_000_000, -123456])
def test_out_of_range_codes_are_rejected(client, code):
    response = client.post("/codes", json={"code": code, "duration_ms": 1_000})
    assert response.status_code == 400
    body = response.get_json()
    assert body["success"] is False
    assert "6-8 digit" in body["message"]


@pytest.mark.parametrize("payload", [{}, {"code": "123456"}, {"code": 123456.5}, {"code": True}])
def test_malformed_payloads_are_rejected(client, payload):
    response = client.post("/codes/redeem", json=payload)
    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_non_json_body_is_rejected(client):
    response = client.post("/codes", data="code=123456")
    assert response.status_code == 400


def test_health(client):
    assert client.get("/health").get_json() == {"status": "ok"}


def test_digit_range_must_be_ordered():
    with pytest.raises(ValueError):
        ServerSettings(min_digits=9, max_digits=8)
