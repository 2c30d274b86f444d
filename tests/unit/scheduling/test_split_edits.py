"""Tests for pure split plan edits."""

import copy

import pytest

from app.scheduling.split_edits import (
    DEFAULT_ADDED_SETS,
    change_session_variation,
    session_for_day,
    swap_sessions,
    toggle_muscle_focus,
)

SESSIONS = [
    { "day": 1, "name": "Push", "workout_type": "push", "variation": "A", "focus": ["chest", "shoulders"],
      "target_volume": { "chest": 8, "shoulders": 6 } },
    { "day": 2, "name": "Pull", "workout_type": "pull", "variation": "A", "focus": ["back", "biceps"],
      "target_volume": { "back": 10, "biceps": 4 } },
    { "day": 3, "name": "Legs", "workout_type": "legs", "variation": "B", "focus": ["quads"],
      "target_volume": { "quads": 8 } },
]
FREQUENCY = { "chest": 1, "shoulders": 1, "back": 1, "biceps": 1, "quads": 1 }
VOLUME = { "chest": 8, "shoulders": 6, "back": 10, "biceps": 4, "quads": 8 }


# ======================================================================
# swap_sessions
# ======================================================================


class TestSwapSessions:
    def test_exchanges_days(self):
        swapped = swap_sessions(SESSIONS, 1, 3)
        assert session_for_day(swapped, 1)["name"] == "Legs"
        assert session_for_day(swapped, 3)["name"] == "Push"
        assert [s["day"] for s in swapped] == [1, 2, 3]

    def test_does_not_mutate_input(self):
        original = copy.deepcopy(SESSIONS)
        swap_sessions(SESSIONS, 1, 2)
        assert SESSIONS == original

    def test_same_day(self):
        with pytest.raises(ValueError):
            swap_sessions(SESSIONS, 2, 2)

    def test_missing_day(self):
        with pytest.raises(ValueError):
            swap_sessions(SESSIONS, 1, 9)


# ======================================================================
# toggle_muscle_focus
# ======================================================================


class TestToggleMuscleFocus:
    def test_add_new_muscle(self):
        sessions, frequency, volume = toggle_muscle_focus(SESSIONS, FREQUENCY, VOLUME, 1, "triceps", True)
        session = session_for_day(sessions, 1)
        assert "triceps" in session["focus"]
        assert session["target_volume"]["triceps"] == DEFAULT_ADDED_SETS
        assert frequency["triceps"] == 1
        assert volume["triceps"] == DEFAULT_ADDED_SETS

    def test_add_existing_muscle_elsewhere(self):
        _, frequency, volume = toggle_muscle_focus(SESSIONS, FREQUENCY, VOLUME, 3, "back", True)
        assert frequency["back"] == 2
        assert volume["back"] == 10 + DEFAULT_ADDED_SETS

    def test_remove_muscle(self):
        sessions, frequency, volume = toggle_muscle_focus(SESSIONS, FREQUENCY, VOLUME, 2, "biceps", False)
        session = session_for_day(sessions, 2)
        assert session["focus"] == ["back"]
        assert "biceps" not in session["target_volume"]
        assert "biceps" not in frequency
        assert "biceps" not in volume

    def test_inputs_untouched(self):
        originals = copy.deepcopy((SESSIONS, FREQUENCY, VOLUME))
        toggle_muscle_focus(SESSIONS, FREQUENCY, VOLUME, 1, "triceps", True)
        assert (SESSIONS, FREQUENCY, VOLUME) == originals

    def test_add_twice_rejected(self):
        with pytest.raises(ValueError):
            toggle_muscle_focus(SESSIONS, FREQUENCY, VOLUME, 1, "chest", True)

    def test_remove_absent_rejected(self):
        with pytest.raises(ValueError):
            toggle_muscle_focus(SESSIONS, FREQUENCY, VOLUME, 1, "quads", False)


# ======================================================================
# change_session_variation
# ======================================================================


class TestChangeSessionVariation:
    def test_switch(self):
        sessions = change_session_variation(SESSIONS, 1, "B")
        assert session_for_day(sessions, 1)["variation"] == "B"
        assert session_for_day(SESSIONS, 1)["variation"] == "A"

    def test_same_variation_rejected(self):
        with pytest.raises(ValueError):
            change_session_variation(SESSIONS, 3, "B")

    def test_unknown_variation(self):
        with pytest.raises(ValueError):
            change_session_variation(SESSIONS, 1, "C")
