"""Tests for CycleService progression and wraparound."""

import datetime

import pytest
from sqlmodel import select

from app.core.exceptions import ConflictError, CycleStatsError, NotFoundError, PreconditionError
from app.models.cycle_completion import CycleCompletion
from app.models.split_plan import SplitPlan
from app.models.training_cycle import TrainingCycle
from app.models.workout import Workout, WorkoutStatus
from app.services.cycle_service import CycleService

T0 = datetime.datetime(2030, 1, 7, 8, 0)


def _sessions(cycle_days: int) -> list[dict]:
    return [{ "day": d, "name": f"Day {d}", "workout_type": "push" if d % 2 else "pull", "variation": "A",
              "focus": ["chest"], "target_volume": { "chest": 6 } } for d in range(1, cycle_days + 1)]


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def make_plan(session, user):
    def _make(cycle_days: int = 4) -> SplitPlan:
        plan = SplitPlan(user_id=user.id, cycle_days=cycle_days, sessions=_sessions(cycle_days),
                         frequency_map={ "chest": cycle_days }, volume_distribution={ "chest": 6 * cycle_days })
        session.add(plan)
        session.commit()
        session.refresh(plan)
        return plan

    return _make


@pytest.fixture
def service(session):
    return CycleService(session)


def _add_workout(session, user_id, plan_id, completed_at, volume=1000.0, sets=10, readiness=4,
                 status=WorkoutStatus.COMPLETED):
    workout = Workout(user_id=user_id, split_plan_id=plan_id, cycle_day=1, workout_type="push", status=status,
                      total_volume=volume, total_sets=sets, duration_seconds=3600,
                      mental_readiness_overall=readiness, completed_at=completed_at,
                      exercises=[{ "name": "Bench", "primary_muscle": "chest", "secondary_muscles": ["triceps"],
                                   "sets": sets }], )
    session.add(workout)
    session.commit()
    return workout


def _cycle(session, user_id) -> TrainingCycle:
    session.expire_all()
    return session.exec(select(TrainingCycle).where(TrainingCycle.user_id == user_id)).one()


def _completions(session, user_id) -> list[CycleCompletion]:
    return list(session.exec(select(CycleCompletion).where(CycleCompletion.user_id == user_id)).all())


# ======================================================================
# Activation
# ======================================================================


class TestActivateSplitPlan:
    def test_creates_cycle_at_day_one(self, service, session, user, make_plan):
        plan = make_plan()
        response = service.activate_split_plan(user.id, plan.id, now=T0)
        assert response.active is True
        cycle = _cycle(session, user.id)
        assert cycle.active_split_plan_id == plan.id
        assert cycle.current_cycle_day == 1
        assert cycle.current_cycle_start_date == T0

    def test_deactivates_other_plans(self, service, session, user, make_plan):
        first, second = make_plan(), make_plan(3)
        service.activate_split_plan(user.id, first.id, now=T0)
        service.activate_split_plan(user.id, second.id, now=T0)
        session.expire_all()
        assert session.get(SplitPlan, first.id).active is False
        assert session.get(SplitPlan, second.id).active is True

    def test_unknown_plan(self, service, user):
        with pytest.raises(NotFoundError) as exc_info:
            service.activate_split_plan(user.id, 999)
        assert exc_info.value.code == "split_plan_not_found"

    def test_other_users_plan(self, service, make_user, make_plan):
        plan = make_plan()
        stranger = make_user()
        with pytest.raises(NotFoundError):
            service.activate_split_plan(stranger.id, plan.id)


# ======================================================================
# advance_cycle
# ======================================================================


class TestAdvanceCycle:
    def test_no_active_split(self, service, user):
        with pytest.raises(PreconditionError) as exc_info:
            service.advance_cycle(user.id)
        assert exc_info.value.code == "no_active_split"

    def test_partial_advances_write_no_completion(self, service, session, user, make_plan):
        plan = make_plan(4)
        service.activate_split_plan(user.id, plan.id, now=T0)
        days = [service.advance_cycle(user.id, now=T0).next_day for _ in range(3)]
        assert days == [2, 3, 4]
        assert _completions(session, user.id) == []
        assert _cycle(session, user.id).cycles_completed == 0

    def test_wraparound_records_completion(self, service, session, user, make_plan):
        plan = make_plan(4)
        service.activate_split_plan(user.id, plan.id, now=T0)
        _add_workout(session, user.id, plan.id, T0 + datetime.timedelta(days=1), volume=1200.0, sets=12,
                     readiness=4)
        _add_workout(session, user.id, plan.id, T0 + datetime.timedelta(days=2), volume=800.0, sets=8,
                     readiness=2)
        _add_workout(session, user.id, plan.id, None, status=WorkoutStatus.DRAFT)
        for _ in range(3):
            service.advance_cycle(user.id, now=T0)

        wrap_at = T0 + datetime.timedelta(days=4)
        result = service.advance_cycle(user.id, now=wrap_at)

        assert result.next_day == 1
        assert result.wrapped is True
        assert result.cycles_completed == 1
        assert result.completion.cycle_number == 1
        assert result.completion.total_workouts_completed == 2
        assert result.completion.total_volume == pytest.approx(2000.0)
        assert result.completion.total_sets == 20
        assert result.completion.avg_mental_readiness == pytest.approx(3.0)
        assert result.completion.sets_by_muscle_group == { "chest": 20.0, "triceps": 10.0 }

        cycle = _cycle(session, user.id)
        assert cycle.current_cycle_day == 1
        assert cycle.cycles_completed == 1
        assert cycle.current_cycle_start_date == wrap_at
        assert cycle.last_cycle_completed_at == wrap_at

    @pytest.mark.parametrize("cycle_days", [1, 3, 7])
    def test_full_loops_complete_one_cycle_each(self, service, session, user, make_plan, cycle_days):
        plan = make_plan(cycle_days)
        service.activate_split_plan(user.id, plan.id, now=T0)
        for _ in range(2 * cycle_days):
            service.advance_cycle(user.id, now=T0)

        cycle = _cycle(session, user.id)
        assert cycle.current_cycle_day == 1
        assert cycle.cycles_completed == 2
        assert sorted(c.cycle_number for c in _completions(session, user.id)) == [1, 2]

    def test_second_cycle_stats_only_count_new_workouts(self, service, session, user, make_plan):
        plan = make_plan(1)
        service.activate_split_plan(user.id, plan.id, now=T0)
        _add_workout(session, user.id, plan.id, T0 + datetime.timedelta(hours=1))
        service.advance_cycle(user.id, now=T0 + datetime.timedelta(days=1))

        second = service.advance_cycle(user.id, now=T0 + datetime.timedelta(days=2))
        assert second.completion.cycle_number == 2
        assert second.completion.total_workouts_completed == 0

    def test_stats_failure_leaves_cycle_unchanged(self, service, session, user, make_plan, monkeypatch):
        plan = make_plan(2)
        service.activate_split_plan(user.id, plan.id, now=T0)
        service.advance_cycle(user.id, now=T0)

        def broken(workouts):
            raise ValueError("bad workout data")

        monkeypatch.setattr("app.services.cycle_service.compute_cycle_stats", broken)
        with pytest.raises(CycleStatsError):
            service.advance_cycle(user.id, now=T0)

        cycle = _cycle(session, user.id)
        assert cycle.current_cycle_day == 2
        assert cycle.cycles_completed == 0
        assert _completions(session, user.id) == []

    def test_duplicate_completion_is_a_conflict(self, service, session, user, make_plan):
        plan = make_plan(2)
        service.activate_split_plan(user.id, plan.id, now=T0)
        service.advance_cycle(user.id, now=T0)
        session.add(CycleCompletion(user_id=user.id, split_plan_id=plan.id, cycle_number=1))
        session.commit()

        with pytest.raises(ConflictError) as exc_info:
            service.advance_cycle(user.id, now=T0)
        assert exc_info.value.code == "cycle_already_completed"

        cycle = _cycle(session, user.id)
        assert cycle.current_cycle_day == 2
        assert cycle.cycles_completed == 0
        assert len(_completions(session, user.id)) == 1


# ======================================================================
# Read side
# ======================================================================


class TestCycleReads:
    def test_current_stats(self, service, session, user, make_plan):
        plan = make_plan(3)
        service.activate_split_plan(user.id, plan.id, now=T0)
        _add_workout(session, user.id, plan.id, T0 - datetime.timedelta(days=1))
        _add_workout(session, user.id, plan.id, T0 + datetime.timedelta(hours=2), volume=500.0)

        stats = service.get_current_cycle_stats(user.id)
        assert stats.cycle_number == 1
        assert stats.cycle_days == 3
        assert stats.total_workouts_completed == 1
        assert stats.total_volume == pytest.approx(500.0)

    def test_comparison_needs_previous_cycle(self, service, user, make_plan):
        plan = make_plan(1)
        service.activate_split_plan(user.id, plan.id, now=T0)
        assert service.get_comparison_with_previous(user.id) is None

    def test_comparison_with_previous(self, service, session, user, make_plan):
        plan = make_plan(1)
        service.activate_split_plan(user.id, plan.id, now=T0)
        _add_workout(session, user.id, plan.id, T0 + datetime.timedelta(hours=1), volume=1000.0, sets=10)
        service.advance_cycle(user.id, now=T0 + datetime.timedelta(days=1))
        _add_workout(session, user.id, plan.id, T0 + datetime.timedelta(days=2), volume=1500.0, sets=12)

        comparison = service.get_comparison_with_previous(user.id)
        assert comparison.previous_cycle_number == 1
        assert comparison.volume_delta_pct == pytest.approx(50.0)
        assert comparison.sets_delta == 2
        assert comparison.workouts_delta == 0

    def test_completions_newest_first(self, service, user, make_plan):
        plan = make_plan(1)
        service.activate_split_plan(user.id, plan.id, now=T0)
        assert service.get_last_cycle_completion(user.id) is None
        for _ in range(3):
            service.advance_cycle(user.id, now=T0)
        assert [c.cycle_number for c in service.get_cycle_completions(user.id)] == [3, 2, 1]
        assert service.get_last_cycle_completion(user.id).cycle_number == 3

    def test_next_workout_preview(self, service, user, make_plan):
        plan = make_plan(3)
        service.activate_split_plan(user.id, plan.id, now=T0)
        service.advance_cycle(user.id, now=T0)
        preview = service.get_next_workout_preview(user.id)
        assert preview.current_cycle_day == 2
        assert preview.session["name"] == "Day 2"
