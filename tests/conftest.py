import json
import os

# Settings are read at import time by otp_relay.main and the serverless entrypoint,
# so the required values must exist before any otp_relay module is imported.
os.environ.setdefault("ENV", "test")
os.environ.setdefault("RESEND_API_KEY", "re_test_key")
os.environ.setdefault("OTP_ALLOWED_EMAIL_DOMAIN", "@thehouston100group.com")

import httpx
import pytest

from otp_relay.config import Settings
from otp_relay.handler import OtpRelayHandler
from otp_relay.services.email_provider import ResendEmailClient

ALLOWED = "jane@thehouston100group.com"


class FakeResend:
    """httpx.MockTransport handler that records every request it sees."""

    def __init__(self, status: int = 200, json_body=None, text: str | None = None, exc: Exception | None = None):
        self.status = status
        self.json_body = {"id": "abc123"} if json_body is None else json_body
        self.text = text
        self.exc = exc
        self.calls: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self.exc is not None:
            raise self.exc
        if self.text is not None:
            return httpx.Response(self.status, text=self.text)
        return httpx.Response(self.status, json=self.json_body)

    def payload(self, i: int = -1) -> dict:
        return json.loads(self.calls[i].content)


def otp_body(email=ALLOWED, otp="482913", name="Jane") -> str:
    return json.dumps({"email": email, "otp": otp, "name": name})


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        RESEND_API_KEY="re_test_key",
        OTP_ALLOWED_EMAIL_DOMAIN="@thehouston100group.com",
    )


@pytest.fixture
def fake_resend() -> FakeResend:
    return FakeResend()


@pytest.fixture
def make_relay(settings):
    def _make(fake: FakeResend) -> OtpRelayHandler:
        client = ResendEmailClient.from_settings(settings, transport=httpx.MockTransport(fake))
        return OtpRelayHandler(settings, client)
    return _make


@pytest.fixture
def relay(make_relay, fake_resend) -> OtpRelayHandler:
    return make_relay(fake_resend)
