"""Display helpers for times and timestamps."""

from datetime import datetime

from carecompanion.domain.models import normalize_time_of_day


def format_time_12h(time_of_day: str) -> str:
    """``"14:30"`` -> ``"2:30 PM"``; empty input gives an empty string."""
    if not time_of_day:
        return ""
    hours, minutes = normalize_time_of_day(time_of_day).split(":")
    hour = int(hours)
    suffix = "PM" if hour >= 12 else "AM"
    return f"{hour % 12 or 12}:{minutes} {suffix}"


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count > 1 else ''} ago"


def format_relative_timestamp(timestamp: datetime, now: datetime) -> str:
    """Coarse "how long ago" label used for posts and comments."""
    seconds = int((now - timestamp).total_seconds())
    minutes, hours, days = seconds // 60, seconds // 3600, seconds // 86400

    if days > 0:
        return _plural(days, "day")
    if hours > 0:
        return _plural(hours, "hour")
    if minutes > 0:
        return _plural(minutes, "minute")
    return "Just now"
