"""
Periodic medication reminder loop.

Re-evaluates "now" on a fixed interval (a minute by default) and yields the
current due list each time, so a front end can refresh its reminder panel.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from carecompanion.config import ReminderConfig
from carecompanion.domain.models import Medication
from carecompanion.log import get_logger
from carecompanion.services.medications import MedicationStore

logger = get_logger(__name__)


class ReminderMonitor:
    """Recomputes due medications on a timer."""

    def __init__(self, store: MedicationStore, config: ReminderConfig | None = None) -> None:
        self.store = store
        self.config = config or ReminderConfig()
        self.logger = logger.bind(component="reminder_monitor")
        self._is_running = False
        self._last_due_ids: set[str] = set()

    @property
    def is_running(self) -> bool:
        return self._is_running

    @asynccontextmanager
    async def session(self) -> AsyncIterator["ReminderMonitor"]:
        """Run the monitor for the duration of the block."""
        self.logger.info(
            "reminder_session_started", interval_seconds=self.config.refresh_interval_seconds
        )
        self._is_running = True
        try:
            yield self
        finally:
            self._is_running = False
            self.logger.info("reminder_session_ended")

    def stop(self) -> None:
        self._is_running = False

    def check_once(self) -> list[Medication]:
        """Evaluate the due list now and log newly due medications."""
        due = self.store.get_due_medications()
        due_ids = {med.id for med in due}

        newly_due = due_ids - self._last_due_ids
        if newly_due:
            self.logger.info(
                "medications_due",
                medication_ids=sorted(newly_due),
                names=[med.name for med in due if med.id in newly_due],
            )
        self._last_due_ids = due_ids
        return due

    async def watch(self) -> AsyncIterator[list[Medication]]:
        """Yield the due list immediately, then once per interval until stopped."""
        if not self._is_running:
            raise RuntimeError("Monitor not running - use session()")

        while self._is_running:
            yield self.check_once()
            await asyncio.sleep(self.config.refresh_interval_seconds)
