"""Shared test fixtures and configuration for editor-metrics tests."""

import asyncio
import logging
from typing import Optional, Union

import pytest

from editor_metrics import config
from editor_metrics.host import LocalHost


class FakeHost(LocalHost):
    """LocalHost with a controllable MAC address lookup.

    A positive ``delay`` makes the lookup suspend, like the threaded lookup
    of a real host.
    """

    def __init__(
        self,
        mac: Union[str, Exception, None] = "aa:bb:cc:dd:ee:ff",
        delay: float = 0,
        **kwargs,
    ):
        kwargs.setdefault("app_name", "Atom")
        kwargs.setdefault("app_version", "1.60.0")
        kwargs.setdefault("release_channel", "stable")
        kwargs.setdefault("window_size", (1280, 800))
        super().__init__(**kwargs)
        self.mac = mac
        self.delay = delay
        self.mac_lookups = 0

    async def mac_address(self) -> Optional[str]:
        self.mac_lookups += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if isinstance(self.mac, Exception):
            raise self.mac
        return self.mac


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """
    Keep the developer's environment out of the tests.

    DO_NOT_TRACK and the EDITOR_METRICS_* settings would otherwise change
    what trackers send.
    """
    monkeypatch.delenv("DO_NOT_TRACK", raising=False)
    monkeypatch.setattr(config, "DRY_RUN", False)
    monkeypatch.setattr(config, "HTTP_TIMEOUT", None)
    monkeypatch.setattr(config, "GOOGLE_ENDPOINT", "https://www.google-analytics.com/collect")
    monkeypatch.setattr(config, "MATOMO_ENDPOINT", "")


@pytest.fixture
def host():
    """A host with a fixed MAC address, not in dev or spec mode."""
    return FakeHost()


@pytest.fixture
def make_host():
    """Factory for hosts with custom MAC, modes, config and commands."""
    return FakeHost


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers added by setup_logging (e.g. via the CLI) after each test."""
    logger = logging.getLogger("editor_metrics")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
    logger.setLevel(level)
