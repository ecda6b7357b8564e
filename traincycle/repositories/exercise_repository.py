from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from traincycle.models.exercise import Exercise


class ExerciseRepository:
    """Read-only access to the exercise catalog."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, id: int) -> Exercise | None:
        result = await self._session.execute(select(Exercise).where(Exercise.id == id))
        return result.scalar_one_or_none()

    async def get_many(self, ids: list[int]) -> dict[int, Exercise]:
        if not ids:
            return {}
        result = await self._session.execute(
            select(Exercise).where(Exercise.id.in_(set(ids)))
        )
        return {exercise.id: exercise for exercise in result.scalars().all()}

    async def list_active(self, exclude_ids: list[int] | None = None) -> list[Exercise]:
        query = select(Exercise).where(Exercise.is_active.is_(True))
        if exclude_ids:
            query = query.where(Exercise.id.not_in(exclude_ids))
        result = await self._session.execute(query.order_by(Exercise.id))
        return list(result.scalars().all())
