"""Timestamp helpers shared by the review store and event log."""

from datetime import datetime, timedelta


def now() -> str:
    """Current local time, second precision (e.g., "2025-11-13 18:45:40")."""
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


def now_exact() -> str:
    """Current local time as a full ISO 8601 string."""
    return datetime.now().isoformat()


def format_timestamp(iso_timestamp: str, relative: bool = False) -> str:
    """
    Format ISO 8601 timestamp to readable format.

    Args:
        iso_timestamp: ISO 8601 formatted timestamp string
        relative: If True, show relative time (e.g., "2h ago")
                 If False, show absolute time (e.g., "2025-11-13 18:45:40")

    Returns:
        Human-readable timestamp, or the input unchanged if it can't be parsed
    """
    try:
        dt = datetime.fromisoformat(iso_timestamp)
    except (ValueError, TypeError):
        return iso_timestamp

    if relative:
        return _format_relative_time(dt)
    return dt.strftime("%Y-%m-%d %H:%M:%S")


def _format_relative_time(dt: datetime) -> str:
    """Compact relative time: "30s ago", "15m ago", "2h ago", "5d ago"."""
    diff = datetime.now() - dt

    if diff < timedelta(0):
        diff = -diff
        suffix = "from now"
    else:
        suffix = "ago"

    seconds = int(diff.total_seconds())
    if seconds < 60:
        return f"{seconds}s {suffix}"
    if seconds < 3600:
        return f"{seconds // 60}m {suffix}"
    if seconds < 86400:
        return f"{seconds // 3600}h {suffix}"
    return f"{diff.days}d {suffix}"
