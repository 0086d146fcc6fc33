"""Consent and environment checks that gate every tracking call."""

import logging

from editor_metrics.host import Host
from editor_metrics.types import TrackingConfig

logger = logging.getLogger("editor_metrics")


def is_eligible(config: TrackingConfig, host: Host) -> bool:
    """Determine if an event may be sent.

    Returns False if:
    - A consent setting is configured and the host's value is not exactly True
    - The editor is in dev mode and dev-mode tracking is not enabled
    - The editor is running specs and spec-mode tracking is not enabled
    """
    if config.consent_setting and host.get_config(config.consent_setting) is not True:
        logger.debug("No consent given by the user, aborting tracking")
        return False

    if host.in_dev_mode() and config.track_dev_mode is not True:
        logger.debug("Tracking has not been enabled for dev mode, aborting")
        return False

    if host.in_spec_mode() and config.track_spec_mode is not True:
        logger.debug("Tracking has not been enabled for spec mode, aborting")
        return False

    return True
