"""Local calendar-day boundaries for the readings windows."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone


def start_of_local_day(moment: datetime, *, days_ahead: int = 0) -> datetime:
    """Return local midnight of ``moment``'s day, ``days_ahead`` days later.

    Zone-aware clocks (``ZoneInfo``) resolve midnight with their own rules.
    The default clock yields a fixed-offset datetime in the system zone; for
    those the offset is looked up again at midnight, so a DST change earlier
    in the day does not shift the boundary.

    Args:
        moment: Aware "current time".
        days_ahead: Whole days to move forward from ``moment``'s midnight.
    """
    if moment.tzinfo is None:
        raise ValueError("moment must be timezone-aware")
    midnight = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    midnight += timedelta(days=days_ahead)
    if isinstance(moment.tzinfo, timezone) and _is_system_local(moment):
        return midnight.replace(tzinfo=None).astimezone()
    return midnight


def _is_system_local(moment: datetime) -> bool:
    return moment.astimezone().utcoffset() == moment.utcoffset()
