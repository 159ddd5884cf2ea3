"""
Application container wiring storage, stores and services together.

Stores share one storage backend but never talk to each other; the dashboard
and reminder monitor only read from them.
"""

from carecompanion.config import AppConfig, get_config
from carecompanion.domain.models import Clock, local_now
from carecompanion.log import configure_logging, get_logger
from carecompanion.services.community import CommunityStore
from carecompanion.services.contacts import EmergencyContactStore
from carecompanion.services.dashboard import DashboardService
from carecompanion.services.medications import MedicationStore
from carecompanion.services.reminders import ReminderMonitor
from carecompanion.storage import LocalStorage, build_storage, clear_local_storage

logger = get_logger(__name__)


class CareCompanion:
    def __init__(
        self,
        config: AppConfig | None = None,
        storage: LocalStorage | None = None,
        clock: Clock = local_now,
    ) -> None:
        self.config = config or get_config()
        configure_logging(self.config.logging)

        self.storage = storage if storage is not None else build_storage(self.config.storage)
        prefix = self.config.storage.key_prefix

        self.medications = MedicationStore(self.storage, prefix, clock=clock)
        self.contacts = EmergencyContactStore(self.storage, prefix)
        self.community = CommunityStore(
            self.storage, prefix, clock=clock, config=self.config.community
        )
        self.dashboard = DashboardService(
            self.medications,
            self.contacts,
            self.community,
            config=self.config.reminders,
            clock=clock,
        )
        self.reminders = ReminderMonitor(self.medications, config=self.config.reminders)

        logger.info(
            "care_companion_started",
            environment=self.config.environment,
            backend=self.config.storage.backend,
            medications=len(self.medications.medications),
            contacts=len(self.contacts.contacts),
            events=len(self.community.events),
            posts=len(self.community.posts),
        )

    def clear_all_data(self) -> int:
        """Remove every persisted document and empty the in-memory stores.

        Stores are reloaded even when a removal fails partway, so memory never
        holds records that are already gone from storage.
        """
        try:
            return clear_local_storage(self.storage, self.config.storage.key_prefix)
        finally:
            self.medications.reload()
            self.contacts.reload()
            self.community.reload()
