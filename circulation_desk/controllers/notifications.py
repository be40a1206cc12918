"""Notification poller - periodic overdue/due-soon summary for badge display"""

import asyncio
import logging
from typing import Set

from circulation_desk.config import settings
from circulation_desk.domain.exceptions import CirculationError
from circulation_desk.domain.models import NotificationSummary, badge_count
from circulation_desk.infrastructure.auth.session import SessionProvider
from circulation_desk.infrastructure.clients.catalog import CatalogClient
from circulation_desk.infrastructure.observability.metrics import notification_poll_counter

FETCH_FAILED_MESSAGE = "Failed to fetch notifications"


class NotificationPoller:
    """
    Keeps `summary` in step with the user's loan notifications.

    Lifecycle:
    - start(): one immediate fetch, then a fetch every `interval_seconds`
      on a fixed schedule measured from the first tick
    - stop(): cancels the schedule; fetches already in flight finish but
      no longer write state
    - start() again begins a new activation; fetches left over from an
      earlier one never write into it

    Fetches are not de-duplicated. A manual refresh() racing a scheduled
    fetch is last-writer-wins.
    """

    def __init__(
        self,
        client: CatalogClient,
        session: SessionProvider,
        interval_seconds: float | None = None,
    ):
        self.client = client
        self.session = session
        self.interval_seconds = interval_seconds or settings.notification_poll_seconds
        self.summary: NotificationSummary | None = None
        self.error = ""
        self.loading = False
        self._active = False
        self._stopped = False
        self._generation = 0
        self._timer: asyncio.Task | None = None
        self._fetches: Set[asyncio.Task] = set()

    @property
    def active(self) -> bool:
        return self._active

    @property
    def badge_count(self) -> int:
        return badge_count(self.summary)

    def start(self) -> None:
        """Activate polling on the running event loop"""
        if self._active:
            return
        self._active = True
        self._stopped = False
        self._generation += 1
        self._spawn_fetch()
        self._timer = asyncio.get_running_loop().create_task(self._run_schedule())

    def stop(self) -> None:
        """Cancel the schedule; in-flight fetches complete without touching state"""
        self._active = False
        self._stopped = True
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def refresh(self) -> None:
        """Fetch immediately, independent of the schedule"""
        await self._fetch()

    async def _run_schedule(self) -> None:
        loop = asyncio.get_running_loop()
        started = loop.time()
        ticks = 0
        while True:
            ticks += 1
            # Absolute deadlines so slow fetches never push later ticks back
            await asyncio.sleep(max(0.0, started + ticks * self.interval_seconds - loop.time()))
            self._spawn_fetch()

    def _spawn_fetch(self) -> None:
        task = asyncio.get_running_loop().create_task(self._fetch())
        self._fetches.add(task)
        task.add_done_callback(self._fetches.discard)

    async def _fetch(self) -> None:
        # Writes are tagged with the activation that issued them
        generation = self._generation
        self._write(generation, loading=True, error="")

        if self.session.get_active_token() is None:
            notification_poll_counter.labels(outcome="no_session").inc()
            self._write(generation, summary=None, loading=False)
            return

        try:
            summary = await self.client.get_notifications()
        except CirculationError as e:
            notification_poll_counter.labels(outcome="failure").inc()
            logging.warning(f"Notification refresh failed: {e}", extra={"status": getattr(e, "status", None)})
            self._write(generation, summary=None, error=FETCH_FAILED_MESSAGE, loading=False)
            return

        notification_poll_counter.labels(outcome="success").inc()
        self._write(generation, summary=summary, loading=False)

    def _write(self, generation: int, **state: object) -> None:
        # Writes from a stopped or superseded activation are dropped
        if self._stopped or generation != self._generation:
            return
        for name, value in state.items():
            setattr(self, name, value)
