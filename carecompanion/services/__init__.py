"""
Stores and services for the care companion.

Each store owns one or two persisted collections and exposes CRUD plus the
derived views the screens need. The dashboard and reminder monitor compose
the stores read-only.
"""

from .collection import RecordCollection
from .community import CommunityStore
from .contacts import EmergencyContactStore
from .dashboard import DashboardService
from .medications import MedicationStore, is_due
from .reminders import ReminderMonitor

__all__ = [
    "RecordCollection",
    "MedicationStore",
    "EmergencyContactStore",
    "CommunityStore",
    "DashboardService",
    "ReminderMonitor",
    "is_due",
]
