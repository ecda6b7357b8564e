from __future__ import annotations

from datetime import datetime
from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from traincycle.core.exceptions import NotFoundError
from traincycle.core.logging import get_logger
from traincycle.models.training import ExerciseSeries, TrainingExercise, TrainingSession
from traincycle.repositories.exercise_repository import ExerciseRepository
from traincycle.repositories.exercise_series_repository import ExerciseSeriesRepository
from traincycle.repositories.training_exercise_repository import TrainingExerciseRepository
from traincycle.repositories.user_settings_repository import UserSettingsRepository
from traincycle.schemas.plan import PlannedExerciseRef
from traincycle.services.base import BaseService
from traincycle.services.goal_profile import get_goal_profile, movement_class
from traincycle.services.performance_history import PerformanceHistoryReader
from traincycle.services.progression import ProgressionEngine

logger = get_logger(__name__)


class PlanMaterializer(BaseService):
    """Turns planned exercises into TrainingExercises with generated working sets."""

    def __init__(self, session: AsyncSession, engine: ProgressionEngine | None = None):
        super().__init__(session)
        self._engine = engine or ProgressionEngine()
        self._history = PerformanceHistoryReader(session)
        self._exercises = ExerciseRepository(session)
        self._training_exercises = TrainingExerciseRepository(session)
        self._series = ExerciseSeriesRepository(session)
        self._user_settings = UserSettingsRepository(session)

    async def materialize(
        self,
        session_id: int,
        planned_exercises: Iterable[PlannedExerciseRef],
        user_id: int,
        fitness_goal: str | None = None,
        start_position: int | None = None,
    ) -> list[TrainingExercise]:
        """
        Insert one TrainingExercise per planned exercise, with its working sets.

        History is read excluding ``session_id`` so a session never progresses
        from itself. With ``start_position`` the new exercises are inserted at
        that slot and later ones move down; otherwise they are appended.

        Returns the inserted TrainingExercises re-read with their series.
        """
        await self._get_or_404(TrainingSession, session_id)
        refs = list(planned_exercises)
        if not refs:
            return []

        catalog = await self._exercises.get_many([ref.exercise_id for ref in refs])
        missing = [ref.exercise_id for ref in refs if ref.exercise_id not in catalog]
        if missing:
            raise NotFoundError("Exercise", f"Exercises {missing} not found", {"ids": missing})

        if fitness_goal is None:
            user_settings = await self._user_settings.get(user_id)
            fitness_goal = user_settings.fitness_goal if user_settings else None

        if start_position is None:
            position = await self._training_exercises.next_position(session_id)
        else:
            position = start_position
            await self._training_exercises.shift_positions(session_id, start_position, by=len(refs))

        created_ids: list[int] = []
        for ref in refs:
            exercise = catalog[ref.exercise_id]
            history = await self._history.last_series(
                user_id, exercise.id, exclude_training_id=session_id
            )
            working_history = [s for s in (history or []) if not s.is_warmup]
            profile = get_goal_profile(fitness_goal, movement_class(exercise))
            planned_sets = self._engine.plan_sets(exercise, profile, working_history)

            training_exercise = await self._training_exercises.create(
                TrainingExercise(
                    training_id=session_id,
                    exercise_id=exercise.id,
                    position=position,
                    created_at=datetime.utcnow(),
                )
            )
            await self._series.create_batch([
                ExerciseSeries(
                    training_exercise_id=training_exercise.id,
                    order=order,
                    is_warmup=False,
                    reps=planned.reps,
                    weight=planned.weight,
                )
                for order, planned in enumerate(planned_sets, start=1)
            ])
            created_ids.append(training_exercise.id)
            position += 1

            logger.info(
                "exercise_materialized",
                training_id=session_id,
                training_exercise_id=training_exercise.id,
                exercise_id=exercise.id,
                sets=len(planned_sets),
                from_history=bool(working_history),
            )

        loaded = await self._training_exercises.list_by_session(session_id)
        by_id = {te.id: te for te in loaded}
        return [by_id[te_id] for te_id in created_ids]
