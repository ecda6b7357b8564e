from __future__ import annotations

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from traincycle.models.training import ExerciseSeries


class ExerciseSeriesRepository:
    """Sets are addressed by ``(training_exercise_id, order, is_warmup)``."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, training_exercise_id: int, order: int, is_warmup: bool) -> ExerciseSeries | None:
        return await self._session.get(ExerciseSeries, (training_exercise_id, order, is_warmup))

    async def list_by_training_exercise(self, training_exercise_id: int) -> list[ExerciseSeries]:
        """Warm-ups first, then working sets, each by ``order`` (display order)."""
        result = await self._session.execute(
            select(ExerciseSeries)
            .where(ExerciseSeries.training_exercise_id == training_exercise_id)
            .order_by(ExerciseSeries.is_warmup.desc(), ExerciseSeries.order)
        )
        return list(result.scalars().all())

    async def list_working_first(self, training_exercise_id: int) -> list[ExerciseSeries]:
        """Working sets by ``order``, then warm-ups by ``order``."""
        result = await self._session.execute(
            select(ExerciseSeries)
            .where(ExerciseSeries.training_exercise_id == training_exercise_id)
            .order_by(ExerciseSeries.is_warmup.asc(), ExerciseSeries.order)
        )
        return list(result.scalars().all())

    async def max_order(self, training_exercise_id: int, is_warmup: bool) -> int:
        result = await self._session.execute(
            select(func.max(ExerciseSeries.order)).where(
                and_(
                    ExerciseSeries.training_exercise_id == training_exercise_id,
                    ExerciseSeries.is_warmup == is_warmup,
                )
            )
        )
        return result.scalar() or 0

    async def create(self, entity: ExerciseSeries) -> ExerciseSeries:
        self._session.add(entity)
        await self._session.flush()
        return entity

    async def create_batch(self, series: list[ExerciseSeries]) -> list[ExerciseSeries]:
        self._session.add_all(series)
        await self._session.flush()
        return series

    async def update(self, entity: ExerciseSeries, updates: dict) -> ExerciseSeries:
        for key, value in updates.items():
            if hasattr(entity, key):
                setattr(entity, key, value)
        await self._session.flush()
        return entity

    async def delete(self, entity: ExerciseSeries) -> None:
        await self._session.delete(entity)
        await self._session.flush()
