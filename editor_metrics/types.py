"""Shared types for editor-metrics."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

UrlParamValue = Union[str, int, float, bool, list, None]
UrlParams = dict[str, UrlParamValue]


class Provider(str, Enum):
    """Supported analytics backends."""
    GOOGLE = "google"      # Google Analytics Measurement Protocol
    MATOMO = "matomo"      # Matomo HTTP tracking API


@dataclass(frozen=True)
class TrackingConfig:
    """Per-call tracking options supplied by the extension.

    Attributes:
        consent_setting: Host config key holding the user's consent flag.
        track_dev_mode: Allow tracking while the editor runs in dev mode.
        track_spec_mode: Allow tracking while the editor runs specs.
        ip_override: IP address to report instead of loopback.
        command_category: Category used for command-dispatch events.
        command_action: Only forward these command ids (None forwards all).
        cache_buster: Add a random parameter to every hit.
        dry_run: Build and log requests without sending them.
        muted: Silence debug and info logging for this tracker's calls.
    """

    consent_setting: Optional[str] = None
    track_dev_mode: bool = False
    track_spec_mode: bool = False
    ip_override: Optional[str] = None
    command_category: Optional[str] = None
    command_action: Union[str, list[str], None] = None
    cache_buster: bool = False
    dry_run: Optional[bool] = None
    muted: bool = False

    def allows_command(self, command: str) -> bool:
        """Check a command id against ``command_action``."""
        if self.command_action is None:
            return True
        if isinstance(self.command_action, str):
            return command == self.command_action
        return command in self.command_action


@dataclass(frozen=True)
class MetricsEvent:
    """One trackable occurrence."""
    category: str
    action: str
    label: Optional[str] = None
    value: Union[int, float, None] = None
