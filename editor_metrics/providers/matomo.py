"""
Matomo HTTP tracking API event hits.

Parameter reference: https://developer.matomo.org/api-reference/tracking-api
"""

import random
from typing import Optional

from editor_metrics.types import MetricsEvent, UrlParams

API_VERSION = 1


def visitor_id(client_id: str) -> str:
    """Matomo visitor ids are exactly 16 hex characters."""
    return client_id.replace("-", "")[:16].lower()


def build_params(
    event: MetricsEvent,
    *,
    site_id: str,
    client_id: str,
    user_agent: Optional[str] = None,
    ip: Optional[str] = None,
    resolution: Optional[str] = None,
    cache_buster: bool = False,
) -> UrlParams:
    """Build Matomo tracking parameters for an event hit."""
    params: UrlParams = {
        "idsite": site_id,
        "rec": 1,
        "apiv": API_VERSION,
        "_id": visitor_id(client_id),
        "e_c": event.category,
        "e_a": event.action,
        "e_n": event.label,
        "e_v": event.value,
        "ua": user_agent,
        "cip": ip,
        "res": resolution,
        "send_image": 0,
    }

    if cache_buster:
        params["rand"] = random.randint(1, 2**31 - 1)

    return params
