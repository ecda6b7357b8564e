"""Tests for closing a session and summarizing it."""
from datetime import datetime, timedelta

import pytest

from traincycle.core.exceptions import BusinessRuleError, NotFoundError
from traincycle.models import ExerciseSeries, FreeContext, TrainingSession
from traincycle.services.session_summary import SessionSummaryAggregator, estimate_calories

from tests.factories import add_training, add_training_exercise

START = datetime(2024, 4, 2, 18, 0)


class TestFinalize:
    @pytest.mark.asyncio
    async def test_only_completed_sets_count(self, async_db_session, test_user, exercises):
        training = await add_training(async_db_session, test_user.id, FreeContext(), start_time=START)
        await add_training_exercise(
            async_db_session, training, exercises["bench"],
            [(10, 60), (8, 70), (6, 80), (5, 85), (5, 85)],
            completed=3,
        )

        summary = await SessionSummaryAggregator(async_db_session).finalize(
            training.id, now=START + timedelta(minutes=45)
        )

        assert summary.total_sets == 3
        assert summary.total_reps == 24
        assert summary.total_volume == 10 * 60 + 8 * 70 + 6 * 80

    @pytest.mark.asyncio
    async def test_persists_onto_session(self, async_db_session, test_user, exercises):
        training = await add_training(async_db_session, test_user.id, FreeContext(), start_time=START)
        await add_training_exercise(async_db_session, training, exercises["bench"], [(5, 100)])
        await add_training_exercise(async_db_session, training, exercises["curl"], [(12, 10)], position=1)
        end = START + timedelta(minutes=50)

        summary = await SessionSummaryAggregator(async_db_session).finalize(training.id, now=end)

        stored = await async_db_session.get(TrainingSession, training.id)
        assert stored.end_time == end
        assert stored.volume == 620
        assert stored.calories_burned == 300
        assert stored.muscles_worked == ["chest", "triceps", "shoulders", "biceps", "forearms"]
        assert stored.performance_data["total_sets"] == 2
        assert stored.performance_data["personal_records"] == {
            str(exercises["bench"].id): 117,
            str(exercises["curl"].id): 14,
        }
        assert summary.duration_seconds == 3000

    @pytest.mark.asyncio
    async def test_warmups_are_excluded(self, async_db_session, test_user, exercises):
        training = await add_training(async_db_session, test_user.id, FreeContext(), start_time=START)
        training_exercise = await add_training_exercise(async_db_session, training, exercises["bench"], [(5, 100)])
        async_db_session.add(ExerciseSeries(
            training_exercise_id=training_exercise.id,
            order=1,
            is_warmup=True,
            reps=10,
            weight=40,
            timestamp=START + timedelta(minutes=2),
        ))
        await async_db_session.flush()

        summary = await SessionSummaryAggregator(async_db_session).finalize(training.id, now=START + timedelta(minutes=30))
        assert summary.total_sets == 1
        assert summary.total_volume == 500

    @pytest.mark.asyncio
    async def test_muscles_only_from_exercises_with_completed_sets(self, async_db_session, test_user, exercises):
        training = await add_training(async_db_session, test_user.id, FreeContext(), start_time=START)
        await add_training_exercise(async_db_session, training, exercises["bench"], [(5, 100)])
        await add_training_exercise(async_db_session, training, exercises["leg_press"], [(10, 120)], completed=0)

        summary = await SessionSummaryAggregator(async_db_session).finalize(training.id, now=START + timedelta(minutes=30))
        assert "quadriceps" not in summary.muscles_worked
        assert summary.muscles_worked == ["chest", "triceps", "shoulders"]

    @pytest.mark.asyncio
    async def test_stored_record_wins_over_estimate(self, async_db_session, test_user, exercises):
        training = await add_training(async_db_session, test_user.id, FreeContext(), start_time=START)
        training_exercise = await add_training_exercise(async_db_session, training, exercises["bench"], [(5, 100)])
        series = await async_db_session.get(ExerciseSeries, (training_exercise.id, 1, False))
        series.record = {"oneRM": 130}
        await async_db_session.flush()

        summary = await SessionSummaryAggregator(async_db_session).finalize(training.id, now=START + timedelta(minutes=30))
        assert summary.personal_records == {exercises["bench"].id: 130}

    @pytest.mark.asyncio
    async def test_existing_calories_are_kept(self, async_db_session, test_user):
        training = await add_training(async_db_session, test_user.id, FreeContext(), start_time=START)
        training.calories_burned = 420
        await async_db_session.flush()

        summary = await SessionSummaryAggregator(async_db_session).finalize(training.id, now=START + timedelta(minutes=10))
        assert summary.calories_burned == 420

    @pytest.mark.asyncio
    async def test_empty_session_finalizes_with_zeros(self, async_db_session, test_user):
        training = await add_training(async_db_session, test_user.id, FreeContext(), start_time=START)
        summary = await SessionSummaryAggregator(async_db_session).finalize(training.id, now=START + timedelta(minutes=1))
        assert (summary.total_sets, summary.total_reps, summary.total_volume) == (0, 0, 0)
        assert summary.muscles_worked == []
        assert summary.calories_burned == 6

    @pytest.mark.asyncio
    async def test_not_started(self, async_db_session, test_user):
        training = await add_training(async_db_session, test_user.id, FreeContext())
        with pytest.raises(BusinessRuleError) as exc_info:
            await SessionSummaryAggregator(async_db_session).finalize(training.id)
        assert exc_info.value.code == "BR_SESSION_NOT_STARTED"
        assert training.end_time is None

    @pytest.mark.asyncio
    async def test_unknown_session(self, async_db_session):
        with pytest.raises(NotFoundError):
            await SessionSummaryAggregator(async_db_session).finalize(404)


@pytest.mark.parametrize("seconds,expected", [(0, 0), (30, 3), (89, 9), (600, 60), (3000, 300)])
def test_estimate_calories(seconds, expected):
    assert estimate_calories(seconds) == expected
