from __future__ import annotations

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from traincycle.core.pagination import decode_cursor, encode_cursor
from traincycle.models.context import SessionContext
from traincycle.models.training import TrainingExercise, TrainingSession
from traincycle.repositories.base import Repository
from traincycle.schemas.pagination import PaginatedResult, PaginationParams


class TrainingSessionRepository(Repository[TrainingSession, int]):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, id: int) -> TrainingSession | None:
        result = await self._session.execute(
            select(TrainingSession).where(TrainingSession.id == id)
        )
        return result.scalar_one_or_none()

    async def get_with_exercises(self, id: int) -> TrainingSession | None:
        result = await self._session.execute(
            select(TrainingSession)
            .options(
                selectinload(TrainingSession.exercises).selectinload(TrainingExercise.series),
                selectinload(TrainingSession.exercises).selectinload(TrainingExercise.exercise),
            )
            .where(TrainingSession.id == id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_open(self, user_id: int) -> list[TrainingSession]:
        result = await self._session.execute(
            select(TrainingSession)
            .where(
                and_(
                    TrainingSession.user_id == user_id,
                    TrainingSession.end_time.is_(None),
                )
            )
            .order_by(TrainingSession.id)
        )
        return list(result.scalars().all())

    async def find_open(self, user_id: int, context: SessionContext) -> TrainingSession | None:
        result = await self._session.execute(
            select(TrainingSession)
            .where(
                and_(
                    TrainingSession.user_id == user_id,
                    TrainingSession.context_key == context.key,
                    TrainingSession.end_time.is_(None),
                )
            )
            .order_by(TrainingSession.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def last_completed_for_split(self, user_id: int, split_id: int) -> TrainingSession | None:
        result = await self._session.execute(
            select(TrainingSession)
            .where(
                and_(
                    TrainingSession.user_id == user_id,
                    TrainingSession.split_id == split_id,
                    TrainingSession.end_time.is_not(None),
                )
            )
            .order_by(TrainingSession.end_time.desc(), TrainingSession.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def list(self, filter: dict, pagination: PaginationParams) -> PaginatedResult[TrainingSession]:
        query = select(TrainingSession)

        if 'user_id' in filter:
            query = query.where(TrainingSession.user_id == filter['user_id'])

        if 'split_id' in filter:
            query = query.where(TrainingSession.split_id == filter['split_id'])

        if filter.get('completed') is True:
            query = query.where(TrainingSession.end_time.is_not(None))
        elif filter.get('completed') is False:
            query = query.where(TrainingSession.end_time.is_(None))

        query = query.order_by(TrainingSession.id.desc())

        if pagination.cursor:
            _, value = decode_cursor(pagination.cursor, cast=int)
            query = query.where(TrainingSession.id < value)

        query = query.limit(pagination.limit + 1)
        result = await self._session.execute(query)
        items = list(result.scalars().all())

        has_more = len(items) > pagination.limit
        items = items[:pagination.limit]

        next_cursor = None
        if items and has_more:
            next_cursor = encode_cursor(items[-1].id, "id")

        return PaginatedResult(items=items, next_cursor=next_cursor, has_more=has_more)

    async def create(self, entity: TrainingSession) -> TrainingSession:
        self._session.add(entity)
        await self._session.flush()
        return entity

    async def update(self, id: int, updates: dict) -> TrainingSession | None:
        training = await self.get(id)
        if training:
            for key, value in updates.items():
                if hasattr(training, key):
                    setattr(training, key, value)
            await self._session.flush()
        return training

    async def delete(self, id: int) -> bool:
        training = await self.get(id)
        if training:
            await self._session.delete(training)
            await self._session.flush()
            return True
        return False

    async def delete_many(self, trainings: list[TrainingSession]) -> int:
        for training in trainings:
            await self._session.delete(training)
        await self._session.flush()
        return len(trainings)
