"""
Metrics tracker.

Ties identity, the eligibility gate, a provider's parameter builder and the
transport together for one analytics backend. The client ID is derived once
per tracker and cached for the session.
"""

import asyncio
import logging
from typing import Optional, Union

import httpx

from editor_metrics import config as settings
from editor_metrics.eligibility import is_eligible
from editor_metrics.environment import (
    build_user_agent,
    build_window_dimensions,
    resolve_ip,
)
from editor_metrics.events import EventBus, add_command_listener
from editor_metrics.exceptions import MissingTrackingIdError
from editor_metrics.host import Host, LocalHost, Subscription
from editor_metrics.identity import derive_client_id
from editor_metrics.providers import get_builder, get_endpoint, parse_provider
from editor_metrics.transport import send_event
from editor_metrics.types import MetricsEvent, Provider, TrackingConfig, UrlParams

logger = logging.getLogger("editor_metrics")


class MetricsTracker:
    """
    Sends events for one extension to one analytics backend.

    Features:
    - Session-cached client ID
    - Consent and dev/spec-mode gating on every event
    - DO_NOT_TRACK honoured at call time
    - Optional bus and command-dispatch listeners with explicit disposal
    """

    def __init__(
        self,
        provider: Union[str, Provider],
        *,
        host: Optional[Host] = None,
        config: Optional[TrackingConfig] = None,
        tracking_id: Optional[str] = None,
        site_id: Optional[str] = None,
        base_url: Optional[str] = None,
        bus: Optional[EventBus] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the tracker.

        Args:
            provider: "google" or "matomo"
            host: Editor host (defaults to LocalHost)
            config: Tracking options
            tracking_id: Google Analytics property id (required for google)
            site_id: Matomo site id (required for matomo)
            base_url: Endpoint override (required for matomo unless configured)
            bus: Event bus for ``listen`` (a private bus by default)
            client: Shared httpx client for all hits
        """
        self.provider = parse_provider(provider)
        self.host = host or LocalHost()
        self.config = config or TrackingConfig()
        self.tracking_id = tracking_id
        self.site_id = site_id
        self.base_url = base_url or get_endpoint(self.provider)
        self.bus = bus or EventBus()
        self.client = client

        if self.provider is Provider.GOOGLE and not tracking_id:
            raise MissingTrackingIdError("Google Analytics requires a tracking_id")
        if self.provider is Provider.MATOMO and not site_id:
            raise MissingTrackingIdError("Matomo requires a site_id")
        if not self.base_url:
            raise MissingTrackingIdError(
                f"No endpoint configured for {self.provider.value}; pass base_url"
            )

        self._client_id: Optional[str] = None
        self._client_id_task: Optional[asyncio.Future] = None
        self._subscriptions: list[Subscription] = []
        self._pending: set[asyncio.Task] = set()

    async def client_id(self) -> str:
        """The session client ID, derived on first use.

        Concurrent callers share one in-flight derivation so a session never
        reports more than one ID.
        """
        if self._client_id is None:
            if self._client_id_task is None:
                self._client_id_task = asyncio.ensure_future(derive_client_id(self.host))
            self._client_id = await self._client_id_task
        return self._client_id

    def _dry_run(self, dry_run: Optional[bool]) -> bool:
        if dry_run is not None:
            return dry_run
        if self.config.dry_run is not None:
            return self.config.dry_run
        return settings.DRY_RUN

    async def build_params(self, event: MetricsEvent) -> UrlParams:
        """Provider parameters for ``event`` in the current session."""
        builder = get_builder(self.provider)
        client_id = await self.client_id()
        user_agent = build_user_agent(self.host)
        ip = resolve_ip(self.config)
        dimensions = build_window_dimensions(self.host)

        if self.provider is Provider.GOOGLE:
            return builder(
                event,
                tracking_id=self.tracking_id,
                client_id=client_id,
                user_agent=user_agent,
                ip=ip,
                app_name=self.host.app_name(),
                app_version=self.host.app_version(),
                viewport=dimensions,
                cache_buster=self.config.cache_buster,
            )

        return builder(
            event,
            site_id=self.site_id,
            client_id=client_id,
            user_agent=user_agent,
            ip=ip,
            resolution=dimensions,
            cache_buster=self.config.cache_buster,
        )

    async def track(
        self,
        event: MetricsEvent,
        dry_run: Optional[bool] = None,
        params: Optional[UrlParams] = None,
    ) -> bool:
        """Send ``event`` if tracking is allowed.

        ``params`` skips parameter building when the caller already has them.

        Returns:
            True if the hit was sent (or logged in dry-run mode), False if
            tracking was not allowed

        Raises:
            httpx.RequestError: On transport failure
        """
        with settings.muted(self.config.muted):
            return await self._track(event, dry_run, params)

    async def _track(
        self,
        event: MetricsEvent,
        dry_run: Optional[bool],
        params: Optional[UrlParams],
    ) -> bool:
        if settings.is_do_not_track():
            logger.debug("DO_NOT_TRACK is set, skipping event")
            return False

        if not is_eligible(self.config, self.host):
            return False

        if params is None:
            params = await self.build_params(event)
        await send_event(
            self.base_url,
            params,
            dry_run=self._dry_run(dry_run),
            client=self.client,
        )
        return True

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning(f"Background tracking failed: {error}")

    def _track_in_background(self, event: MetricsEvent) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(f"No running event loop, dropping event {event}")
            return

        task = loop.create_task(self.track(event))
        self._pending.add(task)
        task.add_done_callback(self._on_task_done)

    def listen(self, event_name: str) -> Subscription:
        """Track every event dispatched on the bus under ``event_name``."""
        subscription = self.bus.subscribe(event_name, self._track_in_background)
        self._subscriptions.append(subscription)
        return subscription

    def listen_commands(
        self,
        event_name: str,
        package_name: Optional[str] = None,
        caller_path: Optional[str] = None,
    ) -> Subscription:
        """Track the package's command dispatches.

        Returns:
            One subscription covering both the bus and the host listener
        """
        bus_subscription = self.bus.subscribe(event_name, self._track_in_background)
        command_subscription = add_command_listener(
            self.bus,
            self.host,
            event_name,
            self.config,
            package_name=package_name,
            caller_path=caller_path,
        )

        def _dispose_both():
            command_subscription.dispose()
            bus_subscription.dispose()

        subscription = Subscription(_dispose_both)
        self._subscriptions.append(subscription)
        return subscription

    async def wait_pending(self) -> None:
        """Wait for background tracking tasks started by listeners."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def close(self) -> None:
        """Dispose every subscription this tracker created."""
        for subscription in self._subscriptions:
            subscription.dispose()
        self._subscriptions.clear()
