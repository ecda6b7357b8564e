"""Tests for turning planned exercises into session exercises and sets."""
import random
from datetime import datetime, timedelta

import pytest

from traincycle.core.exceptions import NotFoundError
from traincycle.models import FreeContext, PunctualContext, SplitContext
from traincycle.schemas.plan import PlannedExerciseRef
from traincycle.services.performance_history import PerformanceHistoryReader
from traincycle.services.plan_materializer import PlanMaterializer
from traincycle.services.progression import ProgressionEngine
from traincycle.services.session_lifecycle import SessionLifecycleManager

from tests.factories import add_planned_workouts, add_training, add_training_exercise


def _snapshot(exercises):
    return [
        (te.id, te.exercise_id, te.position, [(s.order, s.is_warmup, s.reps, s.weight) for s in te.series])
        for te in exercises
    ]


class TestMaterialize:
    @pytest.mark.asyncio
    async def test_working_sets_numbered_from_one(self, async_db_session, test_user, exercises):
        training = await add_training(async_db_session, test_user.id, FreeContext())
        materializer = PlanMaterializer(async_db_session, engine=ProgressionEngine(rng=random.Random(3)))

        (bench,) = await materializer.materialize(
            training.id, [PlannedExerciseRef(exercise_id=exercises["bench"].id)], test_user.id
        )

        # "Build muscle mass" + compound -> 3 sets of 6-10 at 20 * 0.75
        assert [s.order for s in bench.series] == [1, 2, 3]
        assert all(s.is_warmup is False for s in bench.series)
        assert all(s.timestamp is None for s in bench.series)
        assert all(6 <= s.reps <= 10 for s in bench.series)
        assert {s.weight for s in bench.series} == {15.0}

    @pytest.mark.asyncio
    async def test_progresses_from_latest_performance(self, async_db_session, test_user, exercises):
        earlier = datetime(2024, 3, 1, 10)
        old = await add_training(
            async_db_session, test_user.id, SplitContext(1, 0),
            start_time=earlier, end_time=earlier + timedelta(hours=1),
        )
        await add_training_exercise(
            async_db_session, old, exercises["bench"], [(6, 50), (6, 50), (6, 50)],
            created_at=earlier,
        )
        recent = await add_training(
            async_db_session, test_user.id, PunctualContext(7),
            start_time=earlier + timedelta(days=2), end_time=earlier + timedelta(days=2, hours=1),
        )
        await add_training_exercise(
            async_db_session, recent, exercises["bench"], [(8, 20), (8, 20), (7, 20)],
            created_at=earlier + timedelta(days=2),
        )

        training = await add_training(async_db_session, test_user.id, FreeContext())
        (bench,) = await PlanMaterializer(async_db_session).materialize(
            training.id, [PlannedExerciseRef(exercise_id=exercises["bench"].id)], test_user.id
        )
        assert [(s.reps, s.weight) for s in bench.series] == [(9, 20.5), (9, 20.5), (8, 20.5)]

    @pytest.mark.asyncio
    async def test_goal_override(self, async_db_session, test_user, exercises):
        training = await add_training(async_db_session, test_user.id, FreeContext())
        (bench,) = await PlanMaterializer(async_db_session).materialize(
            training.id,
            [PlannedExerciseRef(exercise_id=exercises["bench"].id)],
            test_user.id,
            fitness_goal="Improve strength",
        )
        assert len(bench.series) == 4

    @pytest.mark.asyncio
    async def test_unknown_exercise(self, async_db_session, test_user):
        training = await add_training(async_db_session, test_user.id, FreeContext())
        with pytest.raises(NotFoundError):
            await PlanMaterializer(async_db_session).materialize(
                training.id, [PlannedExerciseRef(exercise_id=999)], test_user.id
            )

    @pytest.mark.asyncio
    async def test_insert_at_position_moves_later_exercises(self, async_db_session, test_user, exercises):
        training = await add_training(async_db_session, test_user.id, FreeContext())
        materializer = PlanMaterializer(async_db_session)
        await materializer.materialize(
            training.id,
            [PlannedExerciseRef(exercise_id=exercises["bench"].id), PlannedExerciseRef(exercise_id=exercises["curl"].id)],
            test_user.id,
        )
        await materializer.materialize(
            training.id, [PlannedExerciseRef(exercise_id=exercises["plank"].id)], test_user.id, start_position=1
        )

        ordered = await SessionLifecycleManager(async_db_session).get_existing_exercises(training.id)
        assert [te.exercise_id for te in ordered] == [
            exercises["bench"].id, exercises["plank"].id, exercises["curl"].id,
        ]


class TestHistoryReader:
    @pytest.mark.asyncio
    async def test_never_performed(self, async_db_session, test_user, exercises):
        assert await PerformanceHistoryReader(async_db_session).last_series(test_user.id, exercises["curl"].id) is None

    @pytest.mark.asyncio
    async def test_excludes_given_session(self, async_db_session, test_user, exercises):
        training = await add_training(async_db_session, test_user.id, FreeContext())
        await add_training_exercise(async_db_session, training, exercises["curl"], [(10, 8)])
        reader = PerformanceHistoryReader(async_db_session)

        assert len(await reader.last_series(test_user.id, exercises["curl"].id)) == 1
        assert await reader.last_series(test_user.id, exercises["curl"].id, exclude_training_id=training.id) is None


class TestIdempotentReadBack:
    @pytest.mark.asyncio
    async def test_reopening_returns_same_rows(self, async_db_session, test_user, exercises):
        await add_planned_workouts(
            async_db_session, test_user.id, split_id=2,
            exercise_lists=[[exercises["bench"].id, exercises["leg_press"].id, exercises["curl"].id]],
        )
        manager = SessionLifecycleManager(async_db_session)

        first = await manager.open_session(test_user.id, SplitContext(2, 0))
        before = _snapshot(first.exercises)
        second = await manager.open_session(test_user.id, SplitContext(2, 0))

        assert first.is_new is True
        assert second.is_new is False
        assert second.session.id == first.session.id
        assert _snapshot(second.exercises) == before
        assert sum(len(te.series) for te in second.exercises) == 9
