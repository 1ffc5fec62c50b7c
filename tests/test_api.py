import json

import pytest
from fastapi.testclient import TestClient

from otp_relay.main import create_app
from tests.conftest import otp_body


@pytest.fixture
def client(relay):
    app = create_app(relay=relay)
    with TestClient(app) as c:
        yield c


def test_post_send_otp(client, fake_resend):
    r = client.post("/send-otp", content=otp_body(), headers={"Content-Type": "application/json"})

    assert r.status_code == 200
    assert r.json() == {"success": True, "message": "OTP sent successfully", "id": "abc123"}
    assert r.headers["access-control-allow-origin"] == "*"
    assert r.headers["content-type"].startswith("application/json")
    assert fake_resend.payload()["to"] == ["jane@thehouston100group.com"]


@pytest.mark.parametrize("method", ["GET", "PUT", "DELETE", "OPTIONS", "TRACE", "PROPFIND", "BREW"])
def test_other_methods_are_405(client, fake_resend, method):
    r = client.request(method, "/send-otp")

    assert r.status_code == 405
    assert r.json() == {"error": "Method not allowed"}
    assert r.headers["access-control-allow-origin"] == "*"
    assert fake_resend.calls == []


def test_unauthorized_domain_is_403(client, fake_resend):
    r = client.post("/send-otp", content=otp_body(email="jane@gmail.com"))

    assert r.status_code == 403
    assert r.json() == {"error": "Unauthorized email domain"}
    assert fake_resend.calls == []


def test_malformed_json_is_500(client):
    r = client.post("/send-otp", content="{nope")

    assert r.status_code == 500
    assert r.json() == {"success": False, "error": "Failed to send OTP email"}


def test_request_id_is_echoed(client):
    r = client.post("/send-otp", content=otp_body(), headers={"X-Request-ID": "rid-42"})
    assert r.headers["x-request-id"] == "rid-42"


def test_request_id_is_generated(client):
    r = client.get("/health/liveness")
    assert r.status_code == 200
    assert r.json() == {"alive": True}
    assert len(r.headers["x-request-id"]) == 32


def test_health(client):
    r = client.get("/health")
    body = r.json()
    assert body["status"] == "ok"
    assert body["provider"] == "https://api.resend.com/emails"
    assert "re_test_key" not in json.dumps(body)


def test_metrics_exposes_outcomes(client):
    client.post("/send-otp", content=otp_body())
    client.get("/send-otp")

    r = client.get("/metrics")

    assert r.status_code == 200
    assert 'otp_relay_requests_total{outcome="sent"}' in r.text
    assert 'otp_relay_requests_total{outcome="method_not_allowed"}' in r.text


def test_metrics_label_by_route_not_raw_path(client):
    client.get("/no-such-page-1")
    client.get("/no-such-page-2")
    client.request("PROPFIND", "/send-otp")

    text = client.get("/metrics").text

    assert "no-such-page" not in text
    assert 'path="unmatched"' in text
    assert 'method="OTHER",path="/send-otp",status="405"' in text
