"""
HTTP helpers shared by adapters.

Client construction and error-body extraction for non-2xx responses.
"""
import json
import logging
from typing import Any, Optional

import httpx

from .errors import TransportError

logger = logging.getLogger(__name__)

# Generation can pause for a long time while a model reasons; only the
# connect phase gets a short limit.
STREAM_TIMEOUT = httpx.Timeout(300.0, connect=10.0)
MODEL_LIST_TIMEOUT = httpx.Timeout(10.0)


def create_client(
    transport: Optional[httpx.AsyncBaseTransport] = None,
    timeout: httpx.Timeout = STREAM_TIMEOUT,
) -> httpx.AsyncClient:
    """Create an AsyncClient; tests pass an ``httpx.MockTransport``."""
    if transport is not None:
        return httpx.AsyncClient(timeout=timeout, transport=transport)
    return httpx.AsyncClient(timeout=timeout)


def extract_error_message(body: Any) -> Optional[str]:
    """
    Pull a human-readable message out of a provider error body.

    Understands ``{"error": {"message": ...}}``, ``{"error": "..."}`` and
    ``{"message": "..."}``.
    """
    if not isinstance(body, dict):
        return None

    error = body.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message:
            return message
    elif isinstance(error, str) and error:
        return error

    message = body.get("message")
    if isinstance(message, str) and message:
        return message
    return None


def error_from_response(response: httpx.Response) -> TransportError:
    """Build a TransportError for a response whose body has been read."""
    try:
        body = response.json()
    except (json.JSONDecodeError, ValueError):
        body = None

    message = extract_error_message(body)
    if not message:
        message = f"HTTP status {response.status_code}"
    logger.warning(f"Provider returned HTTP {response.status_code}: {message}")
    return TransportError(message, status_code=response.status_code)
