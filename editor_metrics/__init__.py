"""
editor-metrics - Opt-in analytics for code editor extensions

This package sends extension usage events to Google Analytics or Matomo:
- Pseudo-anonymous client IDs derived from the machine's MAC address
- Consent and dev/spec-mode gating before anything is sent
- Command-dispatch listening with explicit subscriptions
- Best-effort, single-request HTTP transport with a dry-run mode
"""

__version__ = "0.1.0"

from .eligibility import is_eligible
from .environment import (
    build_user_agent,
    build_window_dimensions,
    get_commands,
    get_package_name,
    get_short_hash,
    resolve_ip,
)
from .events import EventBus, add_command_listener, dispatch_event
from .exceptions import EditorMetricsError, MissingTrackingIdError, UnknownProviderError
from .host import Host, LocalHost, Subscription
from .identity import derive_client_id, get_namespace
from .tracker import MetricsTracker
from .transport import build_request_url, encode_query, send_event
from .types import MetricsEvent, Provider, TrackingConfig, UrlParams

__all__ = [
    "__version__",
    # Core
    "derive_client_id",
    "get_namespace",
    "is_eligible",
    "resolve_ip",
    "send_event",
    "encode_query",
    "build_request_url",
    # Host introspection
    "build_user_agent",
    "build_window_dimensions",
    "get_commands",
    "get_package_name",
    "get_short_hash",
    # Events
    "EventBus",
    "add_command_listener",
    "dispatch_event",
    "MetricsTracker",
    # Types
    "Host",
    "LocalHost",
    "Subscription",
    "MetricsEvent",
    "Provider",
    "TrackingConfig",
    "UrlParams",
    # Errors
    "EditorMetricsError",
    "MissingTrackingIdError",
    "UnknownProviderError",
]
