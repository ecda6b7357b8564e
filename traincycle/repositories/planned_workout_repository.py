from __future__ import annotations

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from traincycle.models.planned_workout import UserPlannedWorkout
from traincycle.repositories.base import Repository


class PlannedWorkoutRepository(Repository[UserPlannedWorkout, int]):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, id: int) -> UserPlannedWorkout | None:
        result = await self._session.execute(
            select(UserPlannedWorkout).where(UserPlannedWorkout.id == id)
        )
        return result.scalar_one_or_none()

    async def list_for_split(self, user_id: int, split_id: int) -> list[UserPlannedWorkout]:
        result = await self._session.execute(
            select(UserPlannedWorkout)
            .where(
                and_(
                    UserPlannedWorkout.user_id == user_id,
                    UserPlannedWorkout.split_id == split_id,
                )
            )
            .order_by(UserPlannedWorkout.session_index)
        )
        return list(result.scalars().all())

    async def get_by_slot(self, user_id: int, split_id: int, session_index: int) -> UserPlannedWorkout | None:
        result = await self._session.execute(
            select(UserPlannedWorkout).where(
                and_(
                    UserPlannedWorkout.user_id == user_id,
                    UserPlannedWorkout.split_id == split_id,
                    UserPlannedWorkout.session_index == session_index,
                )
            )
        )
        return result.scalar_one_or_none()

    async def upsert(
        self,
        user_id: int,
        split_id: int,
        session_index: int,
        values: dict,
    ) -> UserPlannedWorkout:
        """Insert or update the workout at ``(user_id, split_id, session_index)``."""
        planned = await self.get_by_slot(user_id, split_id, session_index)
        if planned is None:
            planned = UserPlannedWorkout(
                user_id=user_id,
                split_id=split_id,
                session_index=session_index,
                **values,
            )
            self._session.add(planned)
        else:
            for key, value in values.items():
                setattr(planned, key, value)
        await self._session.flush()
        return planned

    async def create(self, entity: UserPlannedWorkout) -> UserPlannedWorkout:
        self._session.add(entity)
        await self._session.flush()
        return entity

    async def update(self, id: int, updates: dict) -> UserPlannedWorkout | None:
        planned = await self.get(id)
        if planned:
            for key, value in updates.items():
                if hasattr(planned, key):
                    setattr(planned, key, value)
            await self._session.flush()
        return planned

    async def delete(self, id: int) -> bool:
        planned = await self.get(id)
        if planned:
            await self._session.delete(planned)
            await self._session.flush()
            return True
        return False
