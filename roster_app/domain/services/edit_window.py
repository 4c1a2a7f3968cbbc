"""
Roster edit window - rosters lock after a per-project cutoff day.
"""
from datetime import datetime
from typing import Optional

from roster_app.domain.entities import days_in_month


def get_edit_deadline(year: int, month: int, cutoff_day: int, use_next_month: bool) -> datetime:
    """
    Last moment a roster for year/month may be edited.

    The cutoff day is clamped to 1-31 and then to the length of the
    target month (the roster month, or the one after it).
    """
    safe_cutoff = max(1, min(31, cutoff_day))
    if use_next_month:
        target_year, target_month = (year + 1, 1) if month == 12 else (year, month + 1)
    else:
        target_year, target_month = year, month
    day = min(safe_cutoff, days_in_month(target_year, target_month))
    return datetime(target_year, target_month, day, 23, 59, 59, 999999)


def is_edit_window_open(
    year: int,
    month: int,
    cutoff_day: int,
    use_next_month: bool,
    now: Optional[datetime] = None
) -> bool:
    now = now or datetime.now()
    return now <= get_edit_deadline(year, month, cutoff_day, use_next_month)
