from __future__ import annotations
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from .config import Settings
from .domain.schemas.otp import OtpRequest, SendOtpOut
from .errors import (
    GENERIC_FAILURE,
    InvalidMethod,
    MalformedRequest,
    OtpRelayError,
    ProviderFailure,
    UnauthorizedDomain,
)
from .observability.metrics import OTP_RELAY_RESULTS, PROVIDER_LATENCY
from .services.email_provider import EmailProvider, ResendEmailClient
from .services.otp_email import build_send_payload

logger = logging.getLogger(__name__)

Body = Union[str, bytes, None]


@dataclass(frozen=True)
class HandlerResult:
    status_code: int
    headers: Dict[str, str]
    body: str  # JSON-encoded object

    def to_proxy_response(self) -> Dict[str, Any]:
        """Shape expected by Netlify / API Gateway proxy integrations."""
        return {"statusCode": self.status_code, "headers": dict(self.headers), "body": self.body}


class OtpRelayHandler:
    """
    Validates an OTP email request and relays it to Resend.

    One instance per process; ``handle`` keeps no state between calls, so every
    invocation (including identical repeats) results in its own provider call.
    """

    def __init__(self, settings: Settings, provider: Optional[EmailProvider] = None) -> None:
        self.settings = settings
        self.provider: EmailProvider = provider or ResendEmailClient.from_settings(settings)
        self._headers = {
            "Content-Type": "application/json",
            "Access-Control-Allow-Origin": settings.CORS_ALLOW_ORIGIN,
        }

    async def handle(self, method: Optional[str], body: Body, *, request_id: Optional[str] = None) -> HandlerResult:
        log_extra = {"request_id": request_id or ""}
        try:
            if (method or "").upper() != "POST":
                raise InvalidMethod(f"method {method!r} not allowed")

            data = self._parse(body)
            self._authorize(data)
            req = self._validate(data)
            payload = build_send_payload(req, self.settings)

            t0 = time.perf_counter()
            try:
                result = await self.provider.send(payload)
            finally:
                PROVIDER_LATENCY.observe(time.perf_counter() - t0)

        except OtpRelayError as e:
            self._log_rejection(e, log_extra)
            OTP_RELAY_RESULTS.labels(outcome=e.outcome).inc()
            return self._error(e)
        except Exception:
            logger.exception("OTP send error", extra=log_extra)
            OTP_RELAY_RESULTS.labels(outcome="unexpected_failure").inc()
            return self._respond(500, {"success": False, "error": GENERIC_FAILURE})

        OTP_RELAY_RESULTS.labels(outcome="sent").inc()
        logger.info("OTP email sent", extra={**log_extra, "provider_id": result.id})
        return self._respond(200, SendOtpOut(id=result.id).model_dump())

    # ---- steps ----
    @staticmethod
    def _parse(body: Body) -> Dict[str, Any]:
        if body is None or body == "" or body == b"":
            raise MalformedRequest("empty request body")
        try:
            if isinstance(body, bytes):
                body = body.decode("utf-8")
            data = json.loads(body)
        except ValueError as e:  # JSONDecodeError and UnicodeDecodeError are both ValueErrors
            raise MalformedRequest(f"request body is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise MalformedRequest("request body must be a JSON object")
        return data

    def _authorize(self, data: Dict[str, Any]) -> None:
        # coarse suffix allow-list, not address validation and not an auth boundary
        email = data.get("email")
        if not isinstance(email, str) or not email.endswith(self.settings.OTP_ALLOWED_EMAIL_DOMAIN):
            raise UnauthorizedDomain(f"email {email!r} outside {self.settings.OTP_ALLOWED_EMAIL_DOMAIN}")

    @staticmethod
    def _validate(data: Dict[str, Any]) -> OtpRequest:
        try:
            return OtpRequest.model_validate(data)
        except ValidationError as e:
            # field names only; the input values include the OTP itself
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
            raise MalformedRequest(f"invalid fields: {fields}") from e

    # ---- responses ----
    def _error(self, e: OtpRelayError) -> HandlerResult:
        if e.status_code >= 500:
            return self._respond(e.status_code, {"success": False, "error": e.public_message})
        return self._respond(e.status_code, {"error": e.public_message})

    def _respond(self, status_code: int, payload: Dict[str, Any]) -> HandlerResult:
        return HandlerResult(status_code=status_code, headers=dict(self._headers), body=json.dumps(payload))

    @staticmethod
    def _log_rejection(e: OtpRelayError, log_extra: Dict[str, Any]) -> None:
        if isinstance(e, ProviderFailure):
            logger.error(
                "OTP send error: %s", e,
                extra={**log_extra, "provider_status": e.provider_status, "provider_detail": e.provider_detail},
            )
        elif isinstance(e, InvalidMethod):
            logger.info("OTP request rejected: %s", e, extra=log_extra)
        else:
            logger.warning("OTP request rejected: %s", e, extra=log_extra)
