"""
Client identity.

The client ID is a version-5 UUID of the machine's MAC address under a
namespace owned by this package, so the same machine always reports the same
ID without the MAC address itself ever leaving the process. Machines without
a usable MAC address get a random version-4 UUID instead.
"""

import logging
import uuid
from typing import Optional

from editor_metrics.host import Host, LocalHost

logger = logging.getLogger("editor_metrics")

NAMESPACE_SEED_URL = "https://pypi.org/project/editor-metrics/"


def get_namespace() -> uuid.UUID:
    """Namespace UUID for client IDs, derived from NAMESPACE_SEED_URL."""
    return uuid.uuid5(uuid.NAMESPACE_URL, NAMESPACE_SEED_URL)


async def derive_client_id(host: Optional[Host] = None) -> str:
    """Derive a pseudo-anonymous client ID.

    Args:
        host: Host used for the MAC address lookup (defaults to LocalHost)

    Returns:
        UUID string; deterministic when a MAC address is available
    """
    host = host or LocalHost()

    try:
        mac = await host.mac_address()
    except Exception as e:
        logger.debug(f"MAC address lookup failed, using random client ID: {e}")
        mac = None

    if mac:
        client_id = str(uuid.uuid5(get_namespace(), mac))
        logger.debug(f"Created client ID '{client_id}' from MAC address")
    else:
        client_id = str(uuid.uuid4())
        logger.debug(f"Created client ID '{client_id}' from random UUID")

    return client_id
