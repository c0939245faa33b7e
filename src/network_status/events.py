# --- Standard library imports ---
import asyncio
from collections import defaultdict
from collections.abc import Mapping
from typing import Any, Awaitable, Callable, Optional, Protocol

# --- Project imports ---
from .logger import get_logger


# --- Metadata update protocol constants ---
METADATA_UPDATE_EVENT = "MetadataUpdate"
DEVICE_SECTION = "device"
ONLINE_KEY = "online"

Handler = Callable[..., None]


class EventSource(Protocol):
    """Anything that can subscribe a handler to a named event."""

    def on(self, event: str, handler: Handler) -> Any:  # pragma: no cover - interface
        ...


class HostApplication(Protocol):
    """Startup readiness surface of the hosting application."""

    def is_ready(self) -> bool:  # pragma: no cover - interface
        ...

    def when_ready(self) -> Awaitable[Any]:  # pragma: no cover - interface
        ...


def parse_online(payload: Any) -> Optional[bool]:
    """
    Return the `online` flag carried by a metadata update, or None.

    Only `device` section updates whose `online` value is a real bool are
    relevant. Strings, numbers and None are not coerced ("false" would be
    truthy); they are ignored like any other malformed payload.
    """
    if not isinstance(payload, Mapping):
        return None

    if payload.get("section") != DEVICE_SECTION:
        return None

    values = payload.get("values")
    if not isinstance(values, Mapping):
        return None

    online = values.get(ONLINE_KEY)
    return online if isinstance(online, bool) else None


class EventEmitter:
    """
    Minimal in-process event source.

    Handlers run synchronously, in subscription order, on the caller's
    turn. Handler errors propagate to whoever called emit().
    """

    def __init__(self):
        self._handlers: dict[str, list[Handler]] = defaultdict(list)

    def on(self, event: str, handler: Handler) -> "EventEmitter":
        self._handlers[event].append(handler)
        return self

    def listener_count(self, event: str) -> int:
        return len(self._handlers.get(event, ()))

    def emit(self, event: str, *args: Any) -> bool:
        """
        Call every handler for `event` with `args`.

        Returns:
            True if the event had at least one handler.
        """
        handlers = list(self._handlers.get(event, ()))
        for handler in handlers:
            handler(*args)
        return bool(handlers)


class AppReadiness:
    """
    asyncio-backed host readiness handle.

    The host calls mark_ready() once its startup sequence completes;
    waiters blocked in when_ready() are released on the loop.
    """

    def __init__(self, ready: bool = False):
        self._ready = asyncio.Event()
        self.logger = get_logger("host")
        if ready:
            self._ready.set()

    def is_ready(self) -> bool:
        return self._ready.is_set()

    async def when_ready(self) -> None:
        await self._ready.wait()

    def mark_ready(self) -> None:
        if self._ready.is_set():
            self.logger.debug("Host already ready; ignoring repeat signal")
            return

        self.logger.info("🚀 Host application ready")
        self._ready.set()
