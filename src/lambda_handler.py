"""AWS Lambda entry point for API Gateway proxy integration.

Routes ``GET /resize/{proxy+}?width=&height=`` to the resizer. The resizer is
built on first use and reused for the lifetime of the execution environment.
"""
import asyncio
from typing import Any

from src.config import get_settings
from src.core.logging import setup_logging
from src.services.resizer import ImageResizer, build_resizer

_resizer: ImageResizer | None = None


def get_resizer() -> ImageResizer:
    global _resizer
    if _resizer is None:
        settings = get_settings()
        setup_logging(settings.log_level, debug=settings.debug)
        _resizer = build_resizer(settings)
    return _resizer


def extract_path(event: dict[str, Any]) -> str:
    proxy = (event.get("pathParameters") or {}).get("proxy")
    if proxy:
        return proxy
    return (event.get("path") or "").replace("/resize/", "", 1)


def handler(event: dict[str, Any], context: object, resizer: ImageResizer | None = None) -> dict[str, Any]:
    params = event.get("queryStringParameters") or {}
    resizer = resizer or get_resizer()
    response = asyncio.run(resizer.handle(extract_path(event), params.get("width"), params.get("height")))
    return response.to_lambda()
