"""
Split cycle progression and cycle statistics.

Position
--------
A split plan repeats every ``cycle_days`` days.  The user's position is
1-indexed; advancing from the last day wraps back to day 1::

    next_day = 1 if current_day >= cycle_days else current_day + 1

A wraparound completes a cycle and is the only event that produces a
cycle completion snapshot.

Statistics
----------
Aggregates are computed over the workouts completed during the cycle:
total volume (kg), workouts, sets, duration, average mental readiness
(1-5, ``None`` if never reported) and sets per muscle group.

Muscle-group sets use fractional counting: each set counts 1.0 for the
exercise's primary muscle and 0.5 for every secondary muscle.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

SECONDARY_MUSCLE_FACTOR = 0.5


@dataclass(frozen=True)
class CyclePosition:
    next_day: int
    wrapped: bool


@dataclass
class CycleStats:
    total_volume: float = 0.0
    total_workouts_completed: int = 0
    total_sets: int = 0
    total_duration_seconds: int = 0
    avg_mental_readiness: Optional[float] = None
    sets_by_muscle_group: dict[str, float] = field(default_factory=dict)
    workouts_by_type: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class CycleComparison:
    volume_delta_pct: float
    workouts_delta: int
    sets_delta: int
    mental_readiness_delta: Optional[float]


def next_cycle_position(current_day: Optional[int], cycle_days: int) -> CyclePosition:
    """Return the day after *current_day* in a cycle of *cycle_days*.

    A missing ``current_day`` is treated as day 1.  Raises
    :class:`ValueError` when ``cycle_days < 1``.
    """
    if cycle_days < 1:
        raise ValueError(f"cycle_days must be >= 1, got {cycle_days}")
    current = current_day or 1
    if current >= cycle_days:
        return CyclePosition(next_day=1, wrapped=True)
    return CyclePosition(next_day=current + 1, wrapped=False)


def _exercise_set_count(exercise: Mapping[str, Any]) -> int:
    sets = exercise.get("sets", 0)
    if isinstance(sets, (list, tuple)):
        return len(sets)
    return int(sets or 0)


def muscle_group_sets(exercises: Iterable[Mapping[str, Any]]) -> dict[str, float]:
    """Fractional sets per muscle group for one workout's exercises."""
    totals: dict[str, float] = defaultdict(float)
    for exercise in exercises:
        n_sets = _exercise_set_count(exercise)
        if n_sets <= 0:
            continue
        primary = exercise.get("primary_muscle") or exercise.get("muscle_group")
        if primary:
            totals[primary] += n_sets
        for muscle in exercise.get("secondary_muscles") or []:
            totals[muscle] += n_sets * SECONDARY_MUSCLE_FACTOR
    return dict(totals)


def compute_cycle_stats(workouts: Iterable[Any]) -> CycleStats:
    """Aggregate completed workouts into a :class:`CycleStats`.

    *workouts* are objects exposing ``total_volume``, ``total_sets``,
    ``duration_seconds``, ``mental_readiness_overall``, ``workout_type``
    and ``exercises`` (e.g. :class:`app.models.workout.Workout`).
    """
    stats = CycleStats()
    readiness: list[int] = []
    by_muscle: dict[str, float] = defaultdict(float)
    by_type: dict[str, int] = defaultdict(int)

    for workout in workouts:
        stats.total_workouts_completed += 1
        stats.total_volume += float(workout.total_volume or 0.0)
        stats.total_sets += int(workout.total_sets or 0)
        stats.total_duration_seconds += int(workout.duration_seconds or 0)

        if workout.mental_readiness_overall is not None:
            readiness.append(workout.mental_readiness_overall)
        if workout.workout_type:
            by_type[workout.workout_type] += 1
        for muscle, sets in muscle_group_sets(workout.exercises or []).items():
            by_muscle[muscle] += sets

    if readiness:
        stats.avg_mental_readiness = round(sum(readiness) / len(readiness), 2)
    stats.sets_by_muscle_group = dict(by_muscle)
    stats.workouts_by_type = dict(by_type)
    return stats


def compare_cycles(current: CycleStats, previous: Any) -> CycleComparison:
    """Compare in-progress stats with the previous cycle completion.

    *previous* exposes the :class:`app.models.cycle_completion.CycleCompletion`
    aggregate attributes.
    """
    if previous.total_volume > 0:
        volume_delta = (current.total_volume - previous.total_volume) / previous.total_volume * 100
    else:
        volume_delta = 0.0

    readiness_delta = None
    if current.avg_mental_readiness is not None and previous.avg_mental_readiness is not None:
        readiness_delta = round(current.avg_mental_readiness - previous.avg_mental_readiness, 2)

    return CycleComparison(
        volume_delta_pct=round(volume_delta, 1),
        workouts_delta=current.total_workouts_completed - previous.total_workouts_completed,
        sets_delta=current.total_sets - previous.total_sets,
        mental_readiness_delta=readiness_delta,
    )
