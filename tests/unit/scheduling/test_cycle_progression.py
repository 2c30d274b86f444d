"""Tests for cycle position arithmetic and cycle statistics.

Pure unit tests: workouts are plain namespaces, no database.
"""

from types import SimpleNamespace

import pytest

from app.scheduling.cycle import (
    CycleStats,
    compare_cycles,
    compute_cycle_stats,
    muscle_group_sets,
    next_cycle_position,
)


# ======================================================================
# Helpers
# ======================================================================


def _workout(volume=1000.0, sets=10, duration=3600, readiness=None, workout_type="push", exercises=None):
    return SimpleNamespace(total_volume=volume, total_sets=sets, duration_seconds=duration,
                           mental_readiness_overall=readiness, workout_type=workout_type,
                           exercises=exercises or [])


# ======================================================================
# next_cycle_position
# ======================================================================


class TestNextCyclePosition:
    def test_advances_inside_cycle(self):
        position = next_cycle_position(2, 4)
        assert position.next_day == 3
        assert position.wrapped is False

    def test_last_day_wraps_to_one(self):
        position = next_cycle_position(4, 4)
        assert position.next_day == 1
        assert position.wrapped is True

    def test_day_beyond_cycle_wraps(self):
        """A plan shortened under the user still wraps cleanly."""
        position = next_cycle_position(6, 4)
        assert position == next_cycle_position(4, 4)

    def test_single_day_cycle_always_wraps(self):
        position = next_cycle_position(1, 1)
        assert position.next_day == 1
        assert position.wrapped is True

    def test_missing_day_counts_as_day_one(self):
        assert next_cycle_position(None, 3).next_day == 2

    @pytest.mark.parametrize("cycle_days", [0, -1])
    def test_rejects_empty_cycle(self, cycle_days):
        with pytest.raises(ValueError):
            next_cycle_position(1, cycle_days)

    @pytest.mark.parametrize("cycle_days", [1, 2, 3, 4, 5, 7, 10, 14])
    def test_full_loop_returns_to_day_one_with_one_wrap(self, cycle_days):
        day, wraps = 1, 0
        for _ in range(cycle_days):
            position = next_cycle_position(day, cycle_days)
            day = position.next_day
            wraps += position.wrapped
        assert day == 1
        assert wraps == 1

    @pytest.mark.parametrize("cycle_days", [2, 3, 6])
    def test_partial_loop_never_wraps(self, cycle_days):
        day = 1
        for _ in range(cycle_days - 1):
            position = next_cycle_position(day, cycle_days)
            assert position.wrapped is False
            day = position.next_day
        assert day == cycle_days


# ======================================================================
# muscle_group_sets
# ======================================================================


class TestMuscleGroupSets:
    def test_primary_full_secondary_half(self):
        exercises = [{ "name": "Bench press", "primary_muscle": "chest",
                       "secondary_muscles": ["triceps", "shoulders"], "sets": 4 }]
        assert muscle_group_sets(exercises) == { "chest": 4.0, "triceps": 2.0, "shoulders": 2.0 }

    def test_accumulates_across_exercises(self):
        exercises = [
            { "primary_muscle": "chest", "secondary_muscles": ["triceps"], "sets": 3 },
            { "primary_muscle": "triceps", "sets": 3 },
        ]
        assert muscle_group_sets(exercises) == { "chest": 3.0, "triceps": 4.5 }

    def test_set_list_counts_entries(self):
        exercises = [{ "primary_muscle": "back", "sets": [{ "reps": 8 }, { "reps": 8 }] }]
        assert muscle_group_sets(exercises) == { "back": 2.0 }

    def test_muscle_group_fallback_and_zero_sets(self):
        exercises = [{ "muscle_group": "quads", "sets": 2 }, { "primary_muscle": "calves", "sets": 0 }]
        assert muscle_group_sets(exercises) == { "quads": 2.0 }


# ======================================================================
# compute_cycle_stats / compare_cycles
# ======================================================================


class TestComputeCycleStats:
    def test_empty_cycle(self):
        stats = compute_cycle_stats([])
        assert stats == CycleStats()
        assert stats.avg_mental_readiness is None

    def test_aggregates(self):
        workouts = [
            _workout(volume=1000, sets=10, duration=3000, readiness=4, workout_type="push",
                     exercises=[{ "primary_muscle": "chest", "secondary_muscles": ["triceps"], "sets": 4 }]),
            _workout(volume=1500.5, sets=12, duration=3600, readiness=3, workout_type="pull",
                     exercises=[{ "primary_muscle": "back", "secondary_muscles": ["biceps"], "sets": 6 }]),
            _workout(volume=500, sets=5, duration=1800, readiness=None, workout_type="push"),
        ]
        stats = compute_cycle_stats(workouts)

        assert stats.total_workouts_completed == 3
        assert stats.total_volume == pytest.approx(3000.5)
        assert stats.total_sets == 27
        assert stats.total_duration_seconds == 8400
        assert stats.avg_mental_readiness == 3.5
        assert stats.workouts_by_type == { "push": 2, "pull": 1 }
        assert stats.sets_by_muscle_group == { "chest": 4.0, "triceps": 2.0, "back": 6.0, "biceps": 3.0 }

    def test_readiness_rounded(self):
        stats = compute_cycle_stats([_workout(readiness=4), _workout(readiness=4), _workout(readiness=5)])
        assert stats.avg_mental_readiness == 4.33


class TestCompareCycles:
    def test_deltas(self):
        current = CycleStats(total_volume=1100, total_workouts_completed=5, total_sets=50,
                             avg_mental_readiness=4.0)
        previous = SimpleNamespace(total_volume=1000, total_workouts_completed=4, total_sets=55,
                                   avg_mental_readiness=3.5)
        comparison = compare_cycles(current, previous)
        assert comparison.volume_delta_pct == 10.0
        assert comparison.workouts_delta == 1
        assert comparison.sets_delta == -5
        assert comparison.mental_readiness_delta == 0.5

    def test_zero_previous_volume(self):
        previous = SimpleNamespace(total_volume=0, total_workouts_completed=0, total_sets=0,
                                   avg_mental_readiness=None)
        comparison = compare_cycles(CycleStats(total_volume=500), previous)
        assert comparison.volume_delta_pct == 0.0
        assert comparison.mental_readiness_delta is None
