from __future__ import annotations
import logging
from typing import Any, Dict, Optional, Protocol

import httpx
from pydantic import ValidationError

from ..config import Settings
from ..domain.schemas.otp import ProviderResponse
from ..errors import ProviderFailure

logger = logging.getLogger(__name__)

# provider error bodies are logged, never returned; keep log lines bounded
_MAX_DETAIL_CHARS = 500


class EmailProvider(Protocol):
    async def send(self, payload: Dict[str, Any]) -> ProviderResponse: ...


class ResendEmailClient:
    """Single-shot POST to Resend's /emails endpoint with a hard timeout."""

    def __init__(
        self,
        api_key: str,
        *,
        api_url: str = "https://api.resend.com/emails",
        timeout_sec: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not api_key:
            raise ValueError("Resend API key is required")
        self._headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }
        self._api_url = api_url
        self._timeout = httpx.Timeout(timeout_sec)
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "ResendEmailClient":
        return cls(
            settings.RESEND_API_KEY.get_secret_value(),
            api_url=settings.RESEND_API_URL,
            timeout_sec=settings.RESEND_TIMEOUT_SEC,
            transport=transport,
        )

    async def send(self, payload: Dict[str, Any]) -> ProviderResponse:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                r = await client.post(self._api_url, json=payload, headers=self._headers)
        except httpx.TimeoutException as e:
            raise ProviderFailure("Resend API timed out") from e
        except httpx.HTTPError as e:
            raise ProviderFailure(f"Resend API unreachable: {type(e).__name__}") from e

        if not r.is_success:
            raise ProviderFailure(
                f"Resend API error: {r.status_code}",
                provider_status=r.status_code,
                provider_detail=r.text[:_MAX_DETAIL_CHARS],
            )

        try:
            data = r.json()
        except ValueError as e:
            raise ProviderFailure(
                "Resend API returned non-JSON body",
                provider_status=r.status_code,
                provider_detail=r.text[:_MAX_DETAIL_CHARS],
            ) from e
        if not isinstance(data, dict):
            raise ProviderFailure("Resend API returned unexpected body", provider_status=r.status_code)

        try:
            result = ProviderResponse.model_validate(data)
        except ValidationError as e:
            raise ProviderFailure("Resend API returned unexpected body", provider_status=r.status_code) from e

        if result.id is None:
            logger.warning("Resend accepted the email but returned no id")
        return result
