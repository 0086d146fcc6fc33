"""
Host introspection helpers.

Small formatters and lookups that turn host state into the values carried by
tracking hits: reported IP address, user agent, window size, the calling
package's name and the commands it owns.
"""

import hashlib
import ipaddress
import logging
import os
from pathlib import Path
from typing import Optional

from editor_metrics.host import Host
from editor_metrics.types import TrackingConfig

logger = logging.getLogger("editor_metrics")

LOOPBACK_IP = "127.0.0.1"


def is_valid_ip(value: Optional[str]) -> bool:
    """Check for an exact IPv4 or IPv6 address.

    IPv6 addresses may carry an alphanumeric zone id (``fe80::1%eth0``).
    Prefixes and surrounding whitespace are rejected.
    """
    if not isinstance(value, str) or not value:
        return False
    address, sep, zone = value.partition("%")
    if sep and not (zone.isascii() and zone.isalnum()):
        return False
    try:
        parsed = ipaddress.ip_address(address)
    except ValueError:
        return False
    return not sep or parsed.version == 6


def resolve_ip(config: TrackingConfig) -> str:
    """Return the configured IP override if valid, otherwise loopback."""
    if is_valid_ip(config.ip_override):
        return config.ip_override
    return LOOPBACK_IP


def build_user_agent(host: Host) -> str:
    """Format the user agent, e.g. ``Atom v1.60.0 (stable)``."""
    return f"{host.app_name()} v{host.app_version()} ({host.release_channel()})"


def build_window_dimensions(host: Host) -> str:
    """Format the window size as ``WIDTHxHEIGHT``."""
    width, height = host.window_dimensions()
    return f"{width}x{height}"


def get_short_hash(text: str, algorithm: str = "sha256", length: int = 16) -> str:
    """Hex digest prefix of ``text``."""
    digest = hashlib.new(algorithm, text.encode()).hexdigest()
    return digest[:length]


def _fallback_package_name() -> str:
    return "pkg." + get_short_hash(os.path.abspath(__file__), length=8)


def get_package_name(
    host: Host,
    package_name: Optional[str] = None,
    caller_path: Optional[str] = None,
) -> str:
    """Resolve the name of the package doing the tracking.

    Priority:
      1. ``package_name`` as supplied by the caller
      2. First path segment of ``caller_path`` below a host package directory
      3. Synthetic ``pkg.<hash>`` name
    """
    if package_name:
        return package_name

    if caller_path:
        caller = Path(caller_path)
        for package_dir in host.package_dir_paths():
            try:
                relative = caller.relative_to(package_dir)
            except ValueError:
                continue
            if relative.parts:
                return relative.parts[0]

    name = _fallback_package_name()
    logger.debug(f"Could not resolve package name, using {name}")
    return name


def get_commands(host: Host, package_name: Optional[str]) -> list[str]:
    """Registered commands that belong to ``package_name``."""
    if not package_name:
        return []
    prefix = f"{package_name}:"
    return [cmd for cmd in host.registered_commands() if cmd.startswith(prefix)]
