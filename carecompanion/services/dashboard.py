"""Read-only home screen aggregation across the three stores."""

from datetime import datetime

from carecompanion.config import ReminderConfig
from carecompanion.domain.models import Clock, DashboardSnapshot, local_now, to_local_naive
from carecompanion.services.community import CommunityStore
from carecompanion.services.contacts import EmergencyContactStore
from carecompanion.services.medications import MedicationStore


class DashboardService:
    def __init__(
        self,
        medications: MedicationStore,
        contacts: EmergencyContactStore,
        community: CommunityStore,
        config: ReminderConfig | None = None,
        clock: Clock = local_now,
    ) -> None:
        self.medications = medications
        self.contacts = contacts
        self.community = community
        self.config = config or ReminderConfig()
        self._clock = clock

    def snapshot(self, now: datetime | None = None) -> DashboardSnapshot:
        now = now or to_local_naive(self._clock())
        return DashboardSnapshot(
            generated_at=now,
            due_medications=self.medications.get_due_medications(now),
            upcoming_events=self.community.events_within(
                self.config.upcoming_window_days,
                limit=self.config.dashboard_event_limit,
                now=now,
            ),
            contacts=self.contacts.contacts,
        )
