"""
Google Analytics Measurement Protocol (v1) event hits.

Parameter reference:
https://developers.google.com/analytics/devguides/collection/protocol/v1/parameters
"""

import random
from typing import Optional

from editor_metrics.types import MetricsEvent, UrlParams

PROTOCOL_VERSION = 1


def build_params(
    event: MetricsEvent,
    *,
    tracking_id: str,
    client_id: str,
    user_agent: Optional[str] = None,
    ip: Optional[str] = None,
    app_name: Optional[str] = None,
    app_version: Optional[str] = None,
    viewport: Optional[str] = None,
    cache_buster: bool = False,
) -> UrlParams:
    """Build Measurement Protocol parameters for an event hit.

    Args:
        event: The event to report
        tracking_id: Property id (``UA-XXXXX-Y``)
        client_id: Pseudo-anonymous client ID
        user_agent: Reported user agent (``ua``)
        ip: Reported IP address (``uip``)
        app_name: Application name (``an``)
        app_version: Application version (``av``)
        viewport: Window size as ``WIDTHxHEIGHT`` (``vp``)
        cache_buster: Add a random ``z`` parameter

    Returns:
        Flat parameter mapping; unset values are None and dropped on encoding
    """
    params: UrlParams = {
        "v": PROTOCOL_VERSION,
        "tid": tracking_id,
        "cid": client_id,
        "t": "event",
        "ec": event.category,
        "ea": event.action,
        "el": event.label,
        "ev": event.value,
        "an": app_name,
        "av": app_version,
        "ua": user_agent,
        "uip": ip,
        "vp": viewport,
        "aip": 1,
    }

    if cache_buster:
        params["z"] = random.randint(1, 2**31 - 1)

    return params
