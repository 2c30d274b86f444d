"""
Slot conflict rules shared by booking preview and booking commit.

A slot ``(coach, date, start, end)`` is bookable when, in this order:

1. no coach block covers it,
2. an available window (same location type, when one is given) fully
   contains it,
3. no confirmed booking of the same coach overlaps it, whatever its
   location (a coach can only be in one place).  Only ``confirmed``
   bookings hold a slot: ``cancelled`` ones freed it, and ``completed``
   and ``no_show`` are terminal states of sessions that already took
   place, so they never sit on a future slot.

Intervals are half-open: a booking ending at 10:00 does not conflict
with one starting at 10:00.
"""

from __future__ import annotations

import datetime
from typing import Any, Iterable, Optional

REASON_BLOCKED = "Coach blocked"
REASON_NOT_AVAILABLE = "Coach not available"
REASON_BOOKED = "Slot already booked"


def times_overlap(a_start: datetime.time, a_end: datetime.time,
                  b_start: datetime.time, b_end: datetime.time) -> bool:
    return a_start < b_end and b_start < a_end


def block_covers_slot(block: Any, date: datetime.date,
                      start: datetime.time, end: datetime.time) -> bool:
    """True if *block* (a :class:`CoachBlock`-like object) excludes the slot."""
    if not block.start_date <= date <= block.end_date:
        return False
    if block.start_time is None or block.end_time is None:
        return True
    return times_overlap(start, end, block.start_time, block.end_time)


def availability_covers_slot(window: Any, date: datetime.date, start: datetime.time,
                             end: datetime.time, location_type: Optional[str] = None) -> bool:
    if not window.is_available or window.date != date:
        return False
    if location_type is not None and window.location_type != location_type:
        return False
    return window.start_time <= start and window.end_time >= end


def booking_conflicts(booking: Any, date: datetime.date,
                      start: datetime.time, end: datetime.time) -> bool:
    if booking.status != "confirmed" or booking.scheduled_date != date:
        return False
    return times_overlap(start, end, booking.start_time, booking.end_time)


def find_slot_conflict(
    date: datetime.date,
    start: datetime.time,
    end: datetime.time,
    *,
    blocks: Iterable[Any],
    availability: Iterable[Any],
    bookings: Iterable[Any],
    location_type: Optional[str] = None,
) -> Optional[str]:
    """Return the reason the slot cannot be booked, or ``None``."""
    if any(block_covers_slot(b, date, start, end) for b in blocks):
        return REASON_BLOCKED
    if not any(availability_covers_slot(w, date, start, end, location_type) for w in availability):
        return REASON_NOT_AVAILABLE
    if any(booking_conflicts(b, date, start, end) for b in bookings):
        return REASON_BOOKED
    return None
