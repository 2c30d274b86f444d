"""Tests for waitlist candidate filtering and ranking."""

import datetime
from types import SimpleNamespace

import pytest

from app.scheduling.waitlist import days_waiting, entry_matches_slot, is_open, js_weekday, rank_candidates

NOW = datetime.datetime(2030, 1, 7, 8, 0)
MONDAY = datetime.date(2030, 1, 7)


def _entry(entry_id, priority=50, waited_days=0, status="active", days=None, start=None, end=None, deadline=None):
    return SimpleNamespace(id=entry_id, client_id=100 + entry_id, priority_score=priority, urgency_level=50,
                           status=status, preferred_days=days or [], preferred_time_start=start,
                           preferred_time_end=end, created_at=NOW - datetime.timedelta(days=waited_days),
                           response_deadline=deadline)


def _t(hour: int) -> datetime.time:
    return datetime.time(hour, 0)


# ======================================================================
# Helpers
# ======================================================================


class TestHelpers:
    def test_js_weekday(self):
        assert js_weekday(MONDAY) == 1
        assert js_weekday(MONDAY + datetime.timedelta(days=6)) == 0

    def test_days_waiting_never_negative(self):
        assert days_waiting(NOW + datetime.timedelta(days=1), NOW) == 0
        assert days_waiting(NOW - datetime.timedelta(days=3, hours=5), NOW) == 3


# ======================================================================
# entry_matches_slot
# ======================================================================


class TestEntryMatchesSlot:
    def test_no_preferences_match_anything(self):
        assert entry_matches_slot(_entry(1), MONDAY, _t(6), _t(7))

    @pytest.mark.parametrize("status", ["notified", "booked", "expired", "cancelled"])
    def test_only_active_entries(self, status):
        assert not entry_matches_slot(_entry(1, status=status), MONDAY, _t(9), _t(10))

    def test_preferred_days(self):
        assert entry_matches_slot(_entry(1, days=[1, 3]), MONDAY, _t(9), _t(10))
        assert not entry_matches_slot(_entry(1, days=[2, 3]), MONDAY, _t(9), _t(10))

    def test_time_window(self):
        entry = _entry(1, start=_t(8), end=_t(12))
        assert entry_matches_slot(entry, MONDAY, _t(9), _t(10))
        assert entry_matches_slot(entry, MONDAY, _t(11), _t(12))
        assert not entry_matches_slot(entry, MONDAY, _t(11), _t(13))
        assert not entry_matches_slot(entry, MONDAY, _t(7), _t(8))

    def test_open_ended_window(self):
        entry = _entry(1, start=_t(17))
        assert entry_matches_slot(entry, MONDAY, _t(20), _t(21))
        assert not entry_matches_slot(entry, MONDAY, _t(16), _t(17))


# ======================================================================
# Lapsed offers
# ======================================================================


class TestLapsedOffers:
    def test_pending_offer_is_not_open(self):
        entry = _entry(1, status="notified", deadline=NOW + datetime.timedelta(hours=1))
        assert not is_open(entry, NOW)
        assert not entry_matches_slot(entry, MONDAY, _t(9), _t(10), NOW)

    def test_lapsed_offer_is_open_again(self):
        entry = _entry(1, status="notified", deadline=NOW - datetime.timedelta(minutes=1))
        assert is_open(entry, NOW)
        assert entry_matches_slot(entry, MONDAY, _t(9), _t(10), NOW)

    def test_lapsed_offer_needs_a_clock(self):
        entry = _entry(1, status="notified", deadline=NOW - datetime.timedelta(minutes=1))
        assert not is_open(entry)

    def test_ranking_does_not_touch_entries(self):
        entry = _entry(1, status="notified", deadline=NOW - datetime.timedelta(hours=2))
        ranked = rank_candidates([entry], MONDAY, _t(9), _t(10), NOW)
        assert [c.entry_id for c in ranked] == [1]
        assert entry.status == "notified"
        assert entry.response_deadline == NOW - datetime.timedelta(hours=2)


# ======================================================================
# rank_candidates
# ======================================================================


class TestRankCandidates:
    def test_priority_then_days_waiting_then_id(self):
        entries = [
            _entry(1, priority=60, waited_days=2),
            _entry(2, priority=80, waited_days=1),
            _entry(3, priority=60, waited_days=10),
            _entry(4, priority=60, waited_days=2),
        ]
        ranked = rank_candidates(entries, MONDAY, _t(9), _t(10), NOW)
        assert [c.entry_id for c in ranked] == [2, 3, 1, 4]
        assert ranked[1].days_waiting == 10

    def test_filters_before_ranking(self):
        entries = [
            _entry(1, priority=90, status="notified"),
            _entry(2, priority=70, days=[5]),
            _entry(3, priority=10),
        ]
        ranked = rank_candidates(entries, MONDAY, _t(9), _t(10), NOW)
        assert [c.entry_id for c in ranked] == [3]
        assert ranked[0].client_id == 103

    def test_empty(self):
        assert rank_candidates([], MONDAY, _t(9), _t(10), NOW) == []
