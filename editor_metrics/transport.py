"""
Tracking hit transport.

Serializes provider parameters into a query string and sends them with a
single bodyless POST. Hits are best effort: no retries, no queueing, and the
response is only logged. Transport-level errors (DNS, connection refused)
propagate to the caller as ``httpx.RequestError``.
"""

import logging
from typing import Optional
from urllib.parse import quote

import httpx

from editor_metrics import config
from editor_metrics.types import UrlParams, UrlParamValue

logger = logging.getLogger("editor_metrics")

ARRAY_FORMATS = ("repeat", "comma")


def _format_value(value: UrlParamValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _encode(text: str) -> str:
    # Only unreserved characters survive; space becomes %20, not +
    return quote(text, safe="")


def encode_query(params: UrlParams, array_format: str = "repeat") -> str:
    """Serialize ``params`` into a percent-encoded query string.

    Keys are sorted and None values skipped. List values become repeated
    keys (``repeat``) or one comma-joined value (``comma``).

    Examples:
        >>> encode_query({"ec": "My Category", "ea": "save"})
        'ea=save&ec=My%20Category'
        >>> encode_query({"tag": ["a", "b"]})
        'tag=a&tag=b'
        >>> encode_query({"tag": ["a", "b"]}, array_format="comma")
        'tag=a%2Cb'
    """
    if array_format not in ARRAY_FORMATS:
        raise ValueError(f"Unknown array format: {array_format!r}")

    parts = []
    for key in sorted(params):
        value = params[key]
        if value is None:
            continue

        if isinstance(value, (list, tuple)):
            items = [_format_value(v) for v in value if v is not None]
            if array_format == "comma":
                parts.append(f"{_encode(key)}={_encode(','.join(items))}")
            else:
                parts.extend(f"{_encode(key)}={_encode(item)}" for item in items)
        else:
            parts.append(f"{_encode(key)}={_encode(_format_value(value))}")

    return "&".join(parts)


def build_request_url(base_url: str, params: UrlParams, array_format: str = "repeat") -> str:
    """Append the encoded query string to ``base_url``."""
    query = encode_query(params, array_format=array_format)
    if not query:
        return base_url
    separator = "&" if "?" in base_url else "?"
    return f"{base_url}{separator}{query}"


async def send_event(
    base_url: str,
    params: UrlParams,
    dry_run: bool = False,
    client: Optional[httpx.AsyncClient] = None,
    array_format: str = "repeat",
) -> None:
    """Send one tracking hit.

    Args:
        base_url: Provider endpoint
        params: Provider-specific query parameters
        dry_run: Log the request URL without sending anything
        client: Reuse this client instead of opening a new one (not closed)
        array_format: How list values are serialized

    Raises:
        httpx.RequestError: On transport failure. HTTP error statuses are
            logged, not raised.
    """
    request_url = build_request_url(base_url, params, array_format=array_format)
    logger.debug(f"Sending post request to {request_url}")

    if dry_run:
        logger.info(f"Dry run, not sending: {request_url}")
        return

    if client is not None:
        response = await client.post(request_url)
    else:
        async with httpx.AsyncClient(timeout=config.HTTP_TIMEOUT) as new_client:
            response = await new_client.post(request_url)

    if response.is_success:
        logger.debug(f"Tracking hit accepted: HTTP {response.status_code}")
    else:
        logger.warning(f"Tracking hit returned HTTP {response.status_code}")
