"""
Pure split-plan edits.

Every function returns new structures and leaves its inputs untouched,
so the caller can keep the originals as the undo snapshot.  Invalid
edits raise :class:`ValueError`.
"""

from __future__ import annotations

import copy
from typing import Any, Optional

# Sets given to a muscle added to a session that had no target for it
DEFAULT_ADDED_SETS = 4

VARIATIONS = ("A", "B")


def session_for_day(sessions: list[dict[str, Any]], cycle_day: int) -> Optional[dict[str, Any]]:
    for session in sessions:
        if session.get("day") == cycle_day:
            return session
    return None


def _require_session(sessions: list[dict[str, Any]], cycle_day: int) -> dict[str, Any]:
    session = session_for_day(sessions, cycle_day)
    if session is None:
        raise ValueError(f"Session for day {cycle_day} not found")
    return session


def swap_sessions(sessions: list[dict[str, Any]], day1: int, day2: int) -> list[dict[str, Any]]:
    """Exchange the sessions scheduled on *day1* and *day2*."""
    if day1 == day2:
        raise ValueError("Cannot swap a day with itself")
    _require_session(sessions, day1)
    _require_session(sessions, day2)

    swapped = copy.deepcopy(sessions)
    for session in swapped:
        if session["day"] == day1:
            session["day"] = day2
        elif session["day"] == day2:
            session["day"] = day1
    return sorted(swapped, key=lambda s: s["day"])


def toggle_muscle_focus(
    sessions: list[dict[str, Any]],
    frequency_map: dict[str, float],
    volume_distribution: dict[str, float],
    cycle_day: int,
    muscle: str,
    add: bool,
) -> tuple[list[dict[str, Any]], dict[str, float], dict[str, float]]:
    """Add or remove *muscle* from the focus of the session on *cycle_day*.

    Returns ``(sessions, frequency_map, volume_distribution)``.  The
    frequency map counts sessions per cycle hitting a muscle; the volume
    distribution holds total sets per cycle and moves by the session's
    target sets for that muscle.
    """
    new_sessions = copy.deepcopy(sessions)
    session = _require_session(new_sessions, cycle_day)
    focus = list(session.get("focus") or [])
    target_volume = dict(session.get("target_volume") or {})
    frequency = dict(frequency_map)
    volume = dict(volume_distribution)

    if add:
        if muscle in focus:
            raise ValueError(f"{muscle} is already trained on day {cycle_day}")
        focus.append(muscle)
        sets = target_volume.get(muscle) or DEFAULT_ADDED_SETS
        target_volume[muscle] = sets
        frequency[muscle] = frequency.get(muscle, 0) + 1
        volume[muscle] = volume.get(muscle, 0) + sets
    else:
        if muscle not in focus:
            raise ValueError(f"{muscle} is not trained on day {cycle_day}")
        focus.remove(muscle)
        sets = target_volume.pop(muscle, 0)
        frequency[muscle] = frequency.get(muscle, 0) - 1
        volume[muscle] = volume.get(muscle, 0) - sets
        if frequency[muscle] <= 0:
            del frequency[muscle]
        if volume[muscle] <= 0:
            del volume[muscle]

    session["focus"] = focus
    session["target_volume"] = target_volume
    return new_sessions, frequency, volume


def change_session_variation(sessions: list[dict[str, Any]], cycle_day: int,
                             variation: str) -> list[dict[str, Any]]:
    if variation not in VARIATIONS:
        raise ValueError(f"Unknown variation: {variation!r}")
    new_sessions = copy.deepcopy(sessions)
    session = _require_session(new_sessions, cycle_day)
    if session.get("variation") == variation:
        raise ValueError(f"Day {cycle_day} already uses variation {variation}")
    session["variation"] = variation
    return new_sessions
