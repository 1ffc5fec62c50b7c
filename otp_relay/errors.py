from __future__ import annotations
from typing import Optional


GENERIC_FAILURE = "Failed to send OTP email"


class OtpRelayError(Exception):
    """Base for every failure the relay maps onto a caller-facing response."""

    status_code: int = 500
    public_message: str = GENERIC_FAILURE
    outcome: str = "unexpected_failure"


class InvalidMethod(OtpRelayError):
    status_code = 405
    public_message = "Method not allowed"
    outcome = "method_not_allowed"


class UnauthorizedDomain(OtpRelayError):
    status_code = 403
    public_message = "Unauthorized email domain"
    outcome = "unauthorized_domain"


class MalformedRequest(OtpRelayError):
    outcome = "malformed_request"


class ProviderFailure(OtpRelayError):
    """Resend rejected the send, timed out, or answered with garbage.

    ``provider_status`` and ``provider_detail`` are for server-side logs only.
    """

    outcome = "provider_failure"

    def __init__(self, reason: str, *, provider_status: Optional[int] = None, provider_detail: str = "") -> None:
        super().__init__(reason)
        self.provider_status = provider_status
        self.provider_detail = provider_detail
