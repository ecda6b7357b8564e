from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from traincycle.core.logging import get_logger
from traincycle.models.training import ExerciseSeries
from traincycle.repositories.exercise_series_repository import ExerciseSeriesRepository
from traincycle.repositories.training_exercise_repository import TrainingExerciseRepository

logger = get_logger(__name__)


class PerformanceHistoryReader:
    """Looks up the user's most recent performance of an exercise."""

    def __init__(self, session: AsyncSession):
        self._training_exercises = TrainingExerciseRepository(session)
        self._series = ExerciseSeriesRepository(session)

    async def last_series(
        self,
        user_id: int,
        exercise_id: int,
        exclude_training_id: int | None = None,
    ) -> list[ExerciseSeries] | None:
        """Sets of the latest TrainingExercise for ``exercise_id`` in any of the user's sessions.

        Working sets come first in ``order`` so index ``i`` lines up with the
        ``i``-th planned working set, followed by any warm-ups. Returns None
        when the user has never performed the exercise.
        """
        latest = await self._training_exercises.latest_for_user_exercise(
            user_id, exercise_id, exclude_training_id=exclude_training_id
        )
        if latest is None:
            logger.debug("history_miss", user_id=user_id, exercise_id=exercise_id)
            return None

        series = await self._series.list_working_first(latest.id)
        logger.debug(
            "history_hit",
            user_id=user_id,
            exercise_id=exercise_id,
            training_exercise_id=latest.id,
            sets=len(series),
        )
        return series
