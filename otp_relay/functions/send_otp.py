"""Serverless entrypoint (Netlify Functions / AWS Lambda proxy integration).

Settings and the relay handler are built once per cold start; each
invocation only runs ``OtpRelayHandler.handle``.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
from typing import Any, Mapping, Optional

from ..config import get_settings
from ..handler import HandlerResult, OtpRelayHandler
from ..observability.logging import setup_logging

logger = logging.getLogger(__name__)

setup_logging()
relay = OtpRelayHandler(get_settings())


def _event_method(event: Mapping[str, Any]) -> Optional[str]:
    # REST / Netlify events carry httpMethod; API Gateway v2 nests it
    method = event.get("httpMethod")
    if method:
        return method
    return ((event.get("requestContext") or {}).get("http") or {}).get("method")


def _event_body(event: Mapping[str, Any]) -> Optional[bytes | str]:
    body = event.get("body")
    if body and event.get("isBase64Encoded"):
        return base64.b64decode(body, validate=True)
    return body


def _request_id(context: Any) -> str:
    return getattr(context, "aws_request_id", None) or ""


async def invoke(event: Mapping[str, Any], context: Any = None, relay_handler: Optional[OtpRelayHandler] = None) -> HandlerResult:
    h = relay_handler or relay
    rid = _request_id(context)
    try:
        body = _event_body(event)
    except (binascii.Error, ValueError):
        logger.warning("request body is not valid base64", extra={"request_id": rid})
        body = None  # surfaces as a malformed request
    return await h.handle(_event_method(event), body, request_id=rid)


def handler(event: Mapping[str, Any], context: Any = None) -> dict[str, Any]:
    return asyncio.run(invoke(event, context)).to_proxy_response()
