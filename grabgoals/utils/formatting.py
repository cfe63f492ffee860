"""
formatting.py — Display strings for countdowns and timestamps
"""
from datetime import datetime


def parse_timestamp(value: str) -> datetime:
    """Parse a backend ISO timestamp into a naive local datetime.

    Raises ValueError for anything unparsable.
    """
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def format_countdown(seconds: int) -> str:
    """Seconds as M:SS, e.g. 65 -> '1:05'."""
    seconds = max(int(seconds), 0)
    return f"{seconds // 60}:{seconds % 60:02d}"


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'' if n == 1 else 's'} ago"


def format_time_ago(value: str | None, now: datetime | None = None) -> str:
    if not value:
        return "Just now"
    try:
        date = parse_timestamp(value)
    except ValueError:
        return "Invalid date"

    now = now or datetime.now()
    diff = (now - date).total_seconds()

    mins = int(diff // 60)
    if mins < 60:
        return _plural(mins, "min")
    hrs = int(diff // 3600)
    if hrs < 24:
        return _plural(hrs, "hr")
    days = int(diff // 86400)
    if days < 7:
        return _plural(days, "day")
    weeks = days // 7
    if weeks < 4:
        return _plural(weeks, "week")
    return f"{date.strftime('%b')} {date.day}"
