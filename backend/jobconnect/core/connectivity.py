"""Background connectivity monitoring feeding the error hub."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Awaitable, Callable

from loguru import logger

from jobconnect.core.errors import ErrorEvent, ErrorHub, ErrorKind
from jobconnect.core.notifications import NotificationCenter

ConnectivityProbe = Callable[[], Awaitable[bool]]

CONNECTION_LOST_MESSAGE = "Network connection lost"
CONNECTION_RESTORED_MESSAGE = "Connection restored"


class ConnectivityMonitor:
    """Track backend connectivity and announce transitions.

    Going offline reports a ``network`` error and switches the hub to its
    offline message. Coming back online after a disconnect shows one success
    notification.
    """

    def __init__(
        self,
        hub: ErrorHub,
        notifications: NotificationCenter,
        probe: ConnectivityProbe,
        interval_seconds: float = 15.0,
    ) -> None:
        self.hub = hub
        self.notifications = notifications
        self.probe = probe
        self.interval_seconds = interval_seconds
        self._online = True
        self._disconnected = False
        self._task: asyncio.Task[None] | None = None

    @property
    def online(self) -> bool:
        return self._online

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def update(self, online: bool) -> None:
        """Apply one connectivity observation."""
        if online == self._online:
            return

        self._online = online
        if not online:
            logger.warning("Connectivity lost")
            self._disconnected = True
            self.hub.set_online(False)
            self.hub.report(
                ErrorEvent(kind=ErrorKind.NETWORK, message=CONNECTION_LOST_MESSAGE)
            )
            return

        self.hub.set_online(True)
        if self._disconnected:
            self._disconnected = False
            logger.info("Connectivity restored")
            self.notifications.show(CONNECTION_RESTORED_MESSAGE, "success")

    async def check_once(self) -> bool:
        """Run the probe once and apply its result.

        Returns:
            The observed connectivity state.
        """
        try:
            online = bool(await self.probe())
        except Exception as exc:
            logger.bind(error=str(exc)).warning("Connectivity probe failed")
            online = False

        self.update(online)
        return online

    async def run(self) -> None:
        while True:
            await self.check_once()
            await asyncio.sleep(self.interval_seconds)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self.run(), name="connectivity-monitor")
        logger.bind(interval_seconds=self.interval_seconds).info(
            "Connectivity monitor started"
        )

    async def stop(self) -> None:
        if self._task is None:
            return

        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Connectivity monitor stopped")


__all__ = [
    "CONNECTION_LOST_MESSAGE",
    "CONNECTION_RESTORED_MESSAGE",
    "ConnectivityMonitor",
    "ConnectivityProbe",
]
