from __future__ import annotations
from fastapi import Request, Response

from ...config import get_settings
from ...handler import OtpRelayHandler

# Mounted as a plain route with methods=None (see main.create_app) so every
# verb, TRACE and WebDAV ones included, reaches the handler and gets its 405.
SEND_OTP_PATH = "/send-otp"


def get_relay_handler() -> OtpRelayHandler:
    global _RELAY_SINGLETON
    try:
        return _RELAY_SINGLETON  # type: ignore[name-defined]
    except NameError:
        _RELAY_SINGLETON = OtpRelayHandler(get_settings())  # type: ignore[assignment]
        return _RELAY_SINGLETON


async def send_otp(request: Request) -> Response:
    relay = getattr(request.app.state, "relay", None) or get_relay_handler()
    body = await request.body()
    rid = getattr(request.state, "request_id", None)
    result = await relay.handle(request.method, body, request_id=rid)
    return Response(
        content=result.body,
        status_code=result.status_code,
        headers=result.headers,
        media_type="application/json",
    )
