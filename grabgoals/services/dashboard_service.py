"""
dashboard_service.py — "Success Duration" chart data
Buckets nailed (and, on your own dashboard, failed) goal minutes by period:
  day   — six 4-hour slots for goals created today
  week  — per calendar date over the last 7 days
  month — per calendar date over the last 30 days
  year  — per month since January 1st
"""
from datetime import datetime, timedelta

from grabgoals.models.schemas import ChartBucket, Goal
from grabgoals.utils.formatting import parse_timestamp

PERIODS = ("day", "week", "month", "year")
DAY_SLOTS = ["0-4", "4-8", "8-12", "12-16", "16-20", "20-24"]
MIN_CHART_MAX = 5


def _created(goal: Goal) -> datetime | None:
    if not goal.created_at:
        return None
    try:
        return parse_timestamp(goal.created_at)
    except ValueError:
        return None


def _bucket_durations(goals: list[Goal], period: str, now: datetime) -> dict[str, int]:
    if period == "day":
        totals = dict.fromkeys(DAY_SLOTS, 0)
        for g in goals:
            created = _created(g)
            if created and created.date() == now.date():
                totals[DAY_SLOTS[created.hour // 4]] += g.duration
        return totals

    if period in ("week", "month"):
        since = now - timedelta(days=7 if period == "week" else 30)
        label_format = "%b %d"
    elif period == "year":
        since = datetime(now.year, 1, 1)
        label_format = "%b"
    else:
        raise ValueError(f"Unknown chart period: {period}")

    totals: dict[str, int] = {}
    for g in goals:
        created = _created(g)
        if created and created >= since:
            label = created.strftime(label_format)
            totals[label] = totals.get(label, 0) + g.duration
    return totals


def build_chart_data(
    nailed: list[Goal],
    failed: list[Goal] | None = None,
    period: str = "week",
    include_failed: bool = True,
    now: datetime | None = None,
) -> list[ChartBucket]:
    """Merge nailed and failed minutes into labelled buckets, nailed labels first."""
    if not nailed:
        return []
    now = now or datetime.now()

    merged: dict[str, ChartBucket] = {
        label: ChartBucket(label=label, nailed_duration=minutes)
        for label, minutes in _bucket_durations(nailed, period, now).items()
    }
    if not include_failed:
        return list(merged.values())

    for label, minutes in _bucket_durations(failed or [], period, now).items():
        if label in merged:
            merged[label].failed_duration = minutes
        else:
            merged[label] = ChartBucket(label=label, failed_duration=minutes)
    return list(merged.values())


def max_duration(buckets: list[ChartBucket]) -> int:
    """Y-axis ceiling for the chart."""
    values = [b.nailed_duration for b in buckets] + [b.failed_duration for b in buckets]
    return max(values + [MIN_CHART_MAX])
