"""
Waitlist candidate ranking for a freed slot.

An entry matches a slot when it is open, the slot's weekday is in
its preferred days (empty = any day) and the slot lies inside its
preferred time window (no start = any time, no end = until 23:59:59).

Matches are ordered by priority score (descending), then by days
waiting (descending, longer waits win ties), then by entry id.  Ranking
never assigns anything: the coach picks whom to offer the slot to.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Any, Iterable, Optional

END_OF_DAY = datetime.time(23, 59, 59)


@dataclass(frozen=True)
class RankedCandidate:
    entry_id: int
    client_id: int
    priority_score: int
    days_waiting: int
    urgency_level: int
    preferred_days: tuple[int, ...]
    preferred_time_start: Optional[datetime.time]
    preferred_time_end: Optional[datetime.time]


def js_weekday(date: datetime.date) -> int:
    """0=Sunday .. 6=Saturday."""
    return (date.weekday() + 1) % 7


def days_waiting(created_at: datetime.datetime, now: datetime.datetime) -> int:
    return max(0, (now - created_at).days)


def is_open(entry: Any, now: Optional[datetime.datetime] = None) -> bool:
    """``active``, or ``notified`` with an offer whose deadline passed before *now*."""
    if entry.status == "active":
        return True
    return (now is not None and entry.status == "notified" and entry.response_deadline is not None
            and entry.response_deadline < now)


def entry_matches_slot(entry: Any, date: datetime.date, start: datetime.time, end: datetime.time,
                       now: Optional[datetime.datetime] = None) -> bool:
    if not is_open(entry, now):
        return False
    if entry.preferred_days and js_weekday(date) not in entry.preferred_days:
        return False
    if entry.preferred_time_start is not None:
        window_end = entry.preferred_time_end or END_OF_DAY
        if start < entry.preferred_time_start or end > window_end:
            return False
    return True


def rank_candidates(entries: Iterable[Any], date: datetime.date, start: datetime.time,
                    end: datetime.time, now: datetime.datetime) -> list[RankedCandidate]:
    """Filter *entries* to those fitting the slot and rank them."""
    ranked = [
        RankedCandidate(
            entry_id=e.id,
            client_id=e.client_id,
            priority_score=e.priority_score,
            days_waiting=days_waiting(e.created_at, now),
            urgency_level=e.urgency_level,
            preferred_days=tuple(e.preferred_days or ()),
            preferred_time_start=e.preferred_time_start,
            preferred_time_end=e.preferred_time_end,
        )
        for e in entries
        if entry_matches_slot(e, date, start, end, now)
    ]
    ranked.sort(key=lambda c: (-c.priority_score, -c.days_waiting, c.entry_id))
    return ranked
