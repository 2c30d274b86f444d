"""
Recurrence expansion for booking series.

A pattern selects weekdays (0=Sunday .. 6=Saturday) repeated every week
(``weekly``) or every other week (``biweekly``), and ends after a number
of occurrences (``count``) or on a date (``date``, inclusive).

Weeks are anchored on the Monday of the start date's week.  Inside a
week dates are emitted Monday first and Sunday last, so the output is
always chronological.  Dates before the start date are skipped.  Every
pattern is capped at ``max_occurrences`` to bound runaway generation.
"""

from __future__ import annotations

import datetime
from typing import Iterable, Literal, Union

Frequency = Literal["weekly", "biweekly"]
EndType = Literal["count", "date"]

DEFAULT_MAX_OCCURRENCES = 52

_STEP_DAYS = {"weekly": 7, "biweekly": 14}


def weekday_offset(day_of_week: int) -> int:
    """Days from Monday for a 0=Sunday .. 6=Saturday weekday."""
    if not 0 <= day_of_week <= 6:
        raise ValueError(f"day_of_week must be in 0..6, got {day_of_week}")
    return 6 if day_of_week == 0 else day_of_week - 1


def generate_occurrence_dates(
    start: datetime.date,
    frequency: Frequency,
    days_of_week: Iterable[int],
    end_type: EndType,
    end_value: Union[int, datetime.date],
    max_occurrences: int = DEFAULT_MAX_OCCURRENCES,
) -> list[datetime.date]:
    """Expand a recurrence pattern into concrete dates."""
    if frequency not in _STEP_DAYS:
        raise ValueError(f"Unknown frequency: {frequency!r}")

    offsets = sorted({weekday_offset(d) for d in days_of_week})
    if not offsets:
        return []

    if end_type == "count":
        limit = min(int(end_value), max_occurrences)
        end_date = None
    elif end_type == "date":
        limit = max_occurrences
        end_date = end_value
    else:
        raise ValueError(f"Unknown end type: {end_type!r}")

    dates: list[datetime.date] = []
    if limit <= 0:
        return dates

    week_start = start - datetime.timedelta(days=start.weekday())
    step = datetime.timedelta(days=_STEP_DAYS[frequency])

    while True:
        for offset in offsets:
            candidate = week_start + datetime.timedelta(days=offset)
            if candidate < start:
                continue
            if end_date is not None and candidate > end_date:
                return dates
            dates.append(candidate)
            if len(dates) >= limit:
                return dates
        week_start += step
