# --- Standard library imports ---
import time
import asyncio
import logging
from collections import deque
from collections.abc import Mapping
from typing import Any, Callable, Optional

# --- Project imports ---
from .config import Config
from .logger import get_logger
from .telemetry import tlog, connectivity_label, CONNECTIVITY_EMOJI
from .readiness import ReadinessState, READINESS_EMOJI, ReadinessGate
from .events import (
    EventSource,
    HostApplication,
    METADATA_UPDATE_EVENT,
    ONLINE_KEY,
    parse_online,
)


Watcher = Callable[[bool], None]

class NetworkStatus:
    """
    Readiness-gated connectivity signal for the host application.

    Tracks the last `online` value reported through `device` metadata
    updates and exposes it as `is_connected` once the host has finished
    starting up. Until then `is_connected` is False and watchers hear
    nothing; on readiness the latest observed value is reported once.

    Invariants:
      - is_connected is False while the host is not ready
      - once ready, is_connected equals the latest raw_online
      - watchers are called only when is_connected changes
      - the readiness transition happens at most once
    """

    def __init__(
        self,
        event_source: EventSource,
        initial_metadata: Mapping[str, Any],
        host: HostApplication,
        *,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self.logger = get_logger("network_status")
        self._host = host
        self._watchers: list[Watcher] = []
        self._ready_task: Optional[asyncio.Task] = None
        self._pending: deque[bool] = deque()
        self._notifying = False

        self._raw_online = initial_metadata[ONLINE_KEY]
        if not isinstance(self._raw_online, bool):
            raise TypeError(f"initial {ONLINE_KEY!r} must be a bool, got {self._raw_online!r}")

        self._gate = ReadinessGate(host.is_ready())
        self._is_connected = self._raw_online if self._gate.is_ready else False

        # Listen from construction so raw_online is current when the host becomes ready
        event_source.on(METADATA_UPDATE_EVENT, self._on_metadata_update)

        tlog(
            self.logger,
            READINESS_EMOJI[self._gate.state],
            "NETWORK",
            str(self._gate.state),
            connectivity_label(self._is_connected),
            meta=f"raw={connectivity_label(self._raw_online)}",
        )

        if not self._gate.is_ready:
            self._ready_task = self._schedule_ready_wait(loop)

    def __repr__(self) -> str:
        return (
            f"<NetworkStatus {self._gate.state} "
            f"connected={self._is_connected} raw={self._raw_online} "
            f"watchers={len(self._watchers)}>"
        )

    # --- Public API ---
    @property
    def is_connected(self) -> bool:
        return self._is_connected

    @property
    def raw_online(self) -> bool:
        return self._raw_online

    @property
    def readiness(self) -> ReadinessState:
        return self._gate.state

    def watch(self, callback: Watcher, *, immediate: Optional[bool] = None) -> None:
        """
        Register `callback` for changes of `is_connected`.

        Callbacks run synchronously in registration order. With `immediate`
        (default: Config.WATCH_REPLAY) the callback is also called once
        right away with the current value.
        """
        if immediate is None:
            immediate = Config.WATCH_REPLAY

        self._watchers.append(callback)

        if immediate:
            self._notify(callback, self._is_connected)

    # --- Readiness ---
    def _schedule_ready_wait(
        self, loop: Optional[asyncio.AbstractEventLoop]
    ) -> Optional[asyncio.Task]:
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                self.logger.warning(
                    "No running event loop; host readiness is not awaited and "
                    "connectivity stays OFFLINE"
                )
                return None

        return loop.create_task(self._wait_for_ready(), name="network-status-ready")

    async def _wait_for_ready(self) -> None:
        start = time.monotonic()
        try:
            await self._host.when_ready()
        except Exception as e:
            self.logger.exception(f"Host readiness wait failed; connectivity stays OFFLINE: {e}")
            return

        self.logger.timing(f"Host became ready after {time.monotonic() - start:.3f} s")
        self._on_ready()

    def _on_ready(self) -> None:
        if not self._gate.promote():
            self.logger.debug("Repeat readiness signal ignored")
            return

        tlog(
            self.logger,
            READINESS_EMOJI[self._gate.state],
            "HOST",
            str(self._gate.state),
            connectivity_label(self._raw_online),
        )
        self._publish(self._raw_online)

    # --- Metadata updates ---
    def _on_metadata_update(self, payload: Any, error: Any = None, *_: Any) -> None:
        if error is not None:
            self.logger.debug(f"Metadata update carried error channel value: {error!r}")

        online = parse_online(payload)
        if online is None:
            self.logger.debug(f"Ignoring irrelevant metadata update: {payload!r}")
            return

        self._raw_online = online

        if not self._gate.is_ready:
            tlog(
                self.logger,
                CONNECTIVITY_EMOJI[online],
                "NETWORK",
                "DEFERRED",
                connectivity_label(online),
                meta="host not ready",
                level=logging.DEBUG,
            )
            return

        self._publish(online)

    # --- Notification ---
    def _publish(self, online: bool) -> None:
        """
        Report `online` to watchers if it changes is_connected.

        Values published from inside a watcher are queued and handled once
        every watcher has heard the current change.
        """
        self._pending.append(online)
        if self._notifying:
            return

        self._notifying = True
        try:
            while self._pending:
                value = self._pending.popleft()
                if value == self._is_connected:
                    continue

                self._is_connected = value
                tlog(
                    self.logger,
                    CONNECTIVITY_EMOJI[value],
                    "NETWORK",
                    "CHANGED",
                    connectivity_label(value),
                    meta=f"watchers={len(self._watchers)}",
                )

                for watcher in list(self._watchers):
                    self._notify(watcher, value)
        finally:
            self._notifying = False

    def _notify(self, watcher: Watcher, online: bool) -> None:
        try:
            watcher(online)
        except Exception as e:
            self.logger.exception(f"Connectivity watcher {watcher!r} failed: {e}")
