from __future__ import annotations
import logging
import sys
import uuid
from typing import Mapping, Optional
from pythonjsonlogger import jsonlogger
from ..config import get_settings


def setup_logging(level: Optional[str] = None) -> None:
    root = logging.getLogger()
    if root.handlers:
        for h in list(root.handlers):
            root.removeHandler(h)

    handler = logging.StreamHandler(sys.stdout)
    formatter = jsonlogger.JsonFormatter(
        "%(levelname)s %(name)s %(message)s %(asctime)s %(request_id)s"
    )
    handler.setFormatter(formatter)
    root.addHandler(handler)
    root.setLevel(level or get_settings().LOG_LEVEL)

    # quiet noisy loggers
    logging.getLogger("uvicorn.access").setLevel("WARNING")
    # httpx logs every request line at INFO
    logging.getLogger("httpx").setLevel("WARNING")


def get_request_id(headers: Mapping[str, str]) -> str:
    rid = headers.get(get_settings().REQUEST_ID_HEADER)
    return rid if rid else uuid.uuid4().hex
