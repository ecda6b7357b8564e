from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from traincycle.config import training_rules
from traincycle.core.exceptions import NotFoundError, SessionFinishedError, SessionNotStartedError
from traincycle.core.logging import get_logger
from traincycle.models.training import ExerciseSeries, TrainingExercise, TrainingSession
from traincycle.repositories.exercise_series_repository import ExerciseSeriesRepository
from traincycle.repositories.training_exercise_repository import TrainingExerciseRepository
from traincycle.services.base import BaseService
from traincycle.services.progression import estimate_one_rep_max

logger = get_logger(__name__)

EDITABLE_SET_FIELDS = ("reps", "weight", "time_seconds", "distance")


def build_record(series: ExerciseSeries) -> dict[str, Any] | None:
    one_rep_max = estimate_one_rep_max(series.weight, series.reps)
    if one_rep_max is None:
        return None
    return {"one_rep_max": one_rep_max}


class SetLoggingService(BaseService):
    """Edits the sets of an open session while the user trains."""

    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self._training_exercises = TrainingExerciseRepository(session)
        self._series = ExerciseSeriesRepository(session)

    async def _open_exercise(self, training_exercise_id: int) -> tuple[TrainingExercise, TrainingSession]:
        training_exercise = await self._get_or_404(TrainingExercise, training_exercise_id)
        training = await self._get_or_404(TrainingSession, training_exercise.training_id)
        if not training.is_open:
            raise SessionFinishedError(training.id)
        return training_exercise, training

    async def _get_set(self, training_exercise_id: int, order: int, is_warmup: bool) -> ExerciseSeries:
        series = await self._series.get(training_exercise_id, order, is_warmup)
        if series is None:
            raise NotFoundError(
                "ExerciseSeries",
                f"Set {order} (warmup={is_warmup}) of exercise {training_exercise_id} not found",
                {"training_exercise_id": training_exercise_id, "order": order, "is_warmup": is_warmup},
            )
        return series

    async def complete_set(
        self,
        training_exercise_id: int,
        order: int,
        is_warmup: bool = False,
        now: datetime | None = None,
    ) -> ExerciseSeries:
        _, training = await self._open_exercise(training_exercise_id)
        if not training.is_started:
            raise SessionNotStartedError(training.id, "Start the training session before completing sets")
        series = await self._get_set(training_exercise_id, order, is_warmup)
        await self._series.update(series, {
            "timestamp": now or datetime.utcnow(),
            "record": build_record(series),
        })
        logger.info("set_completed", training_exercise_id=training_exercise_id, order=order, is_warmup=is_warmup)
        return series

    async def uncomplete_set(self, training_exercise_id: int, order: int, is_warmup: bool = False) -> ExerciseSeries:
        await self._open_exercise(training_exercise_id)
        series = await self._get_set(training_exercise_id, order, is_warmup)
        await self._series.update(series, {"timestamp": None, "record": None})
        return series

    async def update_set(
        self,
        training_exercise_id: int,
        order: int,
        is_warmup: bool,
        updates: dict[str, Any],
        now: datetime | None = None,
    ) -> ExerciseSeries:
        """Edit a set's values; a completed set is re-stamped and its record recomputed."""
        await self._open_exercise(training_exercise_id)
        series = await self._get_set(training_exercise_id, order, is_warmup)
        changes = {k: v for k, v in updates.items() if k in EDITABLE_SET_FIELDS}
        for key, value in changes.items():
            setattr(series, key, value)
        if series.is_completed:
            series.timestamp = now or datetime.utcnow()
            series.record = build_record(series)
        await self._session.flush()
        return series

    async def add_set(
        self,
        training_exercise_id: int,
        is_warmup: bool = False,
        reps: int | None = None,
        weight: float | None = None,
    ) -> ExerciseSeries:
        await self._open_exercise(training_exercise_id)
        order = await self._series.max_order(training_exercise_id, is_warmup) + 1
        series = await self._series.create(ExerciseSeries(
            training_exercise_id=training_exercise_id,
            order=order,
            is_warmup=is_warmup,
            reps=training_rules.manual_set_default_reps if reps is None else reps,
            weight=training_rules.manual_set_default_weight if weight is None else weight,
        ))
        logger.info("set_added", training_exercise_id=training_exercise_id, order=order, is_warmup=is_warmup)
        return series

    async def delete_set(self, training_exercise_id: int, order: int, is_warmup: bool = False) -> None:
        await self._open_exercise(training_exercise_id)
        series = await self._get_set(training_exercise_id, order, is_warmup)
        await self._series.delete(series)
        logger.info("set_deleted", training_exercise_id=training_exercise_id, order=order, is_warmup=is_warmup)

    async def save_note(self, training_exercise_id: int, note: str) -> TrainingExercise:
        training_exercise, _ = await self._open_exercise(training_exercise_id)
        performance_data = dict(training_exercise.performance_data or {})
        performance_data["notes"] = note
        await self._training_exercises.update(training_exercise_id, {"performance_data": performance_data})
        return training_exercise
