"""
In-process event bus and editor command listener.

Extensions dispatch ``MetricsEvent`` payloads under a name; trackers
subscribe to that name. ``add_command_listener`` bridges the host's command
dispatches onto the bus for the commands a package owns.
"""

import logging
from collections import defaultdict
from typing import Callable, Optional

from editor_metrics.environment import get_commands, get_package_name
from editor_metrics.host import Host, Subscription
from editor_metrics.types import MetricsEvent, TrackingConfig

logger = logging.getLogger("editor_metrics")

EventCallback = Callable[[MetricsEvent], None]


class EventBus:
    """Named synchronous pub/sub for metrics events."""

    def __init__(self):
        self._subscribers: dict[str, list[EventCallback]] = defaultdict(list)

    def subscribe(self, name: str, callback: EventCallback) -> Subscription:
        self._subscribers[name].append(callback)

        def _remove():
            callbacks = self._subscribers.get(name, [])
            if callback in callbacks:
                callbacks.remove(callback)
            if not callbacks:
                self._subscribers.pop(name, None)

        return Subscription(_remove)

    def subscriber_count(self, name: str) -> int:
        return len(self._subscribers.get(name, []))

    def dispatch(self, name: str, payload: MetricsEvent) -> int:
        """Invoke every subscriber of ``name`` in order.

        A failing subscriber is logged and does not stop the others.

        Returns:
            Number of subscribers invoked
        """
        callbacks = list(self._subscribers.get(name, []))
        for callback in callbacks:
            try:
                callback(payload)
            except Exception as e:
                logger.error(f"Subscriber for '{name}' failed: {e}")
        return len(callbacks)


def dispatch_event(bus: EventBus, name: str, payload: MetricsEvent) -> int:
    logger.debug(f"Dispatching event '{name}': {payload}")
    return bus.dispatch(name, payload)


def add_command_listener(
    bus: EventBus,
    host: Host,
    event_name: str,
    config: TrackingConfig,
    package_name: Optional[str] = None,
    caller_path: Optional[str] = None,
) -> Subscription:
    """Forward the package's command dispatches to the bus.

    The package's command list is resolved once, at registration. Each
    matching dispatch becomes ``MetricsEvent(category, action=command)`` where
    the category is ``config.command_category`` or the package name.

    Returns:
        Subscription that unregisters the host listener when disposed
    """
    name = get_package_name(host, package_name=package_name, caller_path=caller_path)
    commands = set(get_commands(host, name))
    category = config.command_category or name

    logger.debug(f"Listening for {len(commands)} commands of package '{name}'")

    def _on_dispatch(command: str) -> None:
        if command not in commands or not config.allows_command(command):
            return
        dispatch_event(bus, event_name, MetricsEvent(category=category, action=command))

    return host.on_did_dispatch(_on_dispatch)
