"""CareCompanion: medication reminders, emergency contacts and community board.

Every collection lives in a local key-value store as one JSON document,
owned by an explicitly constructed store object.
"""

__version__ = "0.1.0"
