from __future__ import annotations

from sqlalchemy import and_, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from traincycle.models.training import TrainingExercise, TrainingSession
from traincycle.repositories.base import Repository


class TrainingExerciseRepository(Repository[TrainingExercise, int]):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, id: int) -> TrainingExercise | None:
        result = await self._session.execute(
            select(TrainingExercise).where(TrainingExercise.id == id)
        )
        return result.scalar_one_or_none()

    async def list_by_session(self, training_id: int) -> list[TrainingExercise]:
        result = await self._session.execute(
            select(TrainingExercise)
            .options(selectinload(TrainingExercise.series))
            .options(selectinload(TrainingExercise.exercise))
            .where(TrainingExercise.training_id == training_id)
            .order_by(TrainingExercise.position, TrainingExercise.id)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def find_in_session(self, training_id: int, exercise_id: int) -> list[TrainingExercise]:
        result = await self._session.execute(
            select(TrainingExercise)
            .where(
                and_(
                    TrainingExercise.training_id == training_id,
                    TrainingExercise.exercise_id == exercise_id,
                )
            )
            .order_by(TrainingExercise.position, TrainingExercise.id)
        )
        return list(result.scalars().all())

    async def latest_for_user_exercise(
        self,
        user_id: int,
        exercise_id: int,
        exclude_training_id: int | None = None,
    ) -> TrainingExercise | None:
        """Most recently created TrainingExercise of ``exercise_id`` across the user's sessions."""
        query = (
            select(TrainingExercise)
            .join(TrainingSession, TrainingSession.id == TrainingExercise.training_id)
            .where(
                and_(
                    TrainingSession.user_id == user_id,
                    TrainingExercise.exercise_id == exercise_id,
                )
            )
        )
        if exclude_training_id is not None:
            query = query.where(TrainingExercise.training_id != exclude_training_id)

        result = await self._session.execute(
            query.order_by(TrainingExercise.created_at.desc(), TrainingExercise.id.desc()).limit(1)
        )
        return result.scalar_one_or_none()

    async def next_position(self, training_id: int) -> int:
        result = await self._session.execute(
            select(func.max(TrainingExercise.position)).where(
                TrainingExercise.training_id == training_id
            )
        )
        current = result.scalar()
        return 0 if current is None else current + 1

    async def shift_positions(self, training_id: int, from_position: int, by: int = 1) -> None:
        """Make room at ``from_position`` by moving later exercises down ``by`` slots."""
        await self._session.execute(
            update(TrainingExercise)
            .where(
                and_(
                    TrainingExercise.training_id == training_id,
                    TrainingExercise.position >= from_position,
                )
            )
            .values(position=TrainingExercise.position + by)
            .execution_options(synchronize_session="fetch")
        )

    async def create(self, entity: TrainingExercise) -> TrainingExercise:
        self._session.add(entity)
        await self._session.flush()
        return entity

    async def update(self, id: int, updates: dict) -> TrainingExercise | None:
        exercise = await self.get(id)
        if exercise:
            for key, value in updates.items():
                if hasattr(exercise, key):
                    setattr(exercise, key, value)
            await self._session.flush()
        return exercise

    async def delete(self, id: int) -> bool:
        exercise = await self.get(id)
        if exercise:
            await self._session.delete(exercise)
            await self._session.flush()
            return True
        return False
