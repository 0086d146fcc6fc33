"""
Host editor interface.

Everything editor-metrics needs from the running editor goes through a
``Host`` object: MAC address lookup, the command registry, the config store,
mode flags, package directories and application identity. The design uses
dependency injection so a fake host can stand in for a live editor in tests.

``LocalHost`` is a process-local implementation with an in-memory config
store and command registry, suitable for scripts and the CLI.
"""

import asyncio
import logging
import uuid
from typing import Any, Callable, Iterable, Optional, Protocol

logger = logging.getLogger("editor_metrics")

CommandCallback = Callable[[str], None]

# uuid.getnode() sets this bit when it falls back to a random node
_MULTICAST_BIT = 1 << 40


class Subscription:
    """Handle for a registered listener.

    Calling ``dispose()`` runs the cleanup callback exactly once.
    """

    def __init__(self, on_dispose: Optional[Callable[[], None]] = None):
        self._on_dispose = on_dispose
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        if self._on_dispose is not None:
            self._on_dispose()
            self._on_dispose = None

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info) -> None:
        self.dispose()


class Host(Protocol):
    """Protocol for the editor host."""

    async def mac_address(self) -> Optional[str]:
        """Primary network interface MAC address, or None if unavailable."""
        ...

    def registered_commands(self) -> Iterable[str]:
        """Identifiers of all currently registered commands."""
        ...

    def on_did_dispatch(self, callback: CommandCallback) -> Subscription:
        """Call ``callback(command_id)`` after every command dispatch."""
        ...

    def get_config(self, key: str) -> Any:
        """Read a value from the host's configuration store."""
        ...

    def in_dev_mode(self) -> bool:
        ...

    def in_spec_mode(self) -> bool:
        ...

    def package_dir_paths(self) -> list[str]:
        """Directories the host loads packages from."""
        ...

    def app_name(self) -> str:
        ...

    def app_version(self) -> str:
        ...

    def release_channel(self) -> str:
        ...

    def window_dimensions(self) -> tuple[int, int]:
        """Window (width, height) in pixels."""
        ...


def format_mac(node: int) -> str:
    """Format a 48-bit node number as ``aa:bb:cc:dd:ee:ff``."""
    hex_str = f"{node:012x}"
    return ":".join(hex_str[i:i + 2] for i in range(0, 12, 2))


def read_mac_address() -> Optional[str]:
    """Read the hardware MAC address via ``uuid.getnode()``.

    Returns None when Python could only produce a random node.
    """
    node = uuid.getnode()
    if node & _MULTICAST_BIT:
        return None
    return format_mac(node)


class LocalHost:
    """In-process host.

    Keeps its own command registry and config store so the library can run
    outside an editor.
    """

    def __init__(
        self,
        config: Optional[dict] = None,
        commands: Optional[Iterable[str]] = None,
        dev_mode: bool = False,
        spec_mode: bool = False,
        package_dirs: Optional[list[str]] = None,
        app_name: str = "editor-metrics",
        app_version: str = "0.0.0",
        release_channel: str = "stable",
        window_size: tuple[int, int] = (0, 0),
    ):
        self.config = dict(config or {})
        self.commands = set(commands or [])
        self.dev_mode = dev_mode
        self.spec_mode = spec_mode
        self.package_dirs = list(package_dirs or [])
        self._app_name = app_name
        self._app_version = app_version
        self._release_channel = release_channel
        self.window_size = window_size
        self._listeners: list[CommandCallback] = []

    async def mac_address(self) -> Optional[str]:
        return await asyncio.to_thread(read_mac_address)

    def registered_commands(self) -> Iterable[str]:
        return sorted(self.commands)

    def register_command(self, command: str) -> None:
        self.commands.add(command)

    def on_did_dispatch(self, callback: CommandCallback) -> Subscription:
        self._listeners.append(callback)

        def _remove():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return Subscription(_remove)

    def dispatch_command(self, command: str) -> None:
        """Simulate the editor dispatching ``command``."""
        for callback in list(self._listeners):
            callback(command)

    def get_config(self, key: str) -> Any:
        return self.config.get(key)

    def in_dev_mode(self) -> bool:
        return self.dev_mode

    def in_spec_mode(self) -> bool:
        return self.spec_mode

    def package_dir_paths(self) -> list[str]:
        return list(self.package_dirs)

    def app_name(self) -> str:
        return self._app_name

    def app_version(self) -> str:
        return self._app_version

    def release_channel(self) -> str:
        return self._release_channel

    def window_dimensions(self) -> tuple[int, int]:
        return self.window_size
