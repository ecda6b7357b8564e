"""
Training session lifecycle.

A session moves absent -> open -> closed within its context. Opening a
session for a context first discards the user's open sessions for any other
context, then reuses the open session for this context or creates one and
fills it from the planned workout.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from traincycle.core.exceptions import BusinessRuleError, SessionFinishedError
from traincycle.core.logging import get_logger
from traincycle.models.context import SessionContext, SplitContext, context_from_columns
from traincycle.models.planned_workout import UserPlannedWorkout
from traincycle.models.training import TrainingExercise, TrainingSession
from traincycle.repositories.planned_workout_repository import PlannedWorkoutRepository
from traincycle.repositories.training_exercise_repository import TrainingExerciseRepository
from traincycle.repositories.training_session_repository import TrainingSessionRepository
from traincycle.schemas.plan import parse_planned_exercises
from traincycle.services.base import BaseService
from traincycle.services.plan_materializer import PlanMaterializer

logger = get_logger(__name__)


@dataclass
class SessionHandle:
    session: TrainingSession
    is_new: bool
    exercises: list[TrainingExercise] = field(default_factory=list)


class SessionLifecycleManager(BaseService):
    def __init__(self, session: AsyncSession, materializer: PlanMaterializer | None = None):
        super().__init__(session)
        self._trainings = TrainingSessionRepository(session)
        self._training_exercises = TrainingExerciseRepository(session)
        self._planned = PlannedWorkoutRepository(session)
        self._materializer = materializer or PlanMaterializer(session)

    async def cleanup_stale(self, user_id: int, context: SessionContext) -> int:
        """Delete the user's open sessions whose context differs from ``context``.

        A free context therefore removes every open session that carries a
        split, routine or punctual tag. Exercises and sets go with them.
        """
        open_sessions = await self._trainings.list_open(user_id)
        stale = [s for s in open_sessions if context_from_columns(s) != context]
        if not stale:
            return 0

        await self._trainings.delete_many(stale)
        logger.info(
            "stale_sessions_purged",
            user_id=user_id,
            context=context.key,
            purged=[s.context_key for s in stale],
        )
        return len(stale)

    async def find_or_create(self, user_id: int, context: SessionContext) -> tuple[TrainingSession, bool]:
        """Return the open session for ``(user_id, context)``, creating it if absent.

        The insert runs in a savepoint; if a concurrent request created the
        session first, the unique open-context index rejects ours and the
        winner is returned with ``is_new=False``.
        """
        existing = await self._trainings.find_open(user_id, context)
        if existing is not None:
            logger.debug("session_reused", user_id=user_id, training_id=existing.id, context=context.key)
            return existing, False

        training = TrainingSession(user_id=user_id, created_at=datetime.utcnow())
        training.context = context
        try:
            async with self._session.begin_nested():
                self._session.add(training)
        except IntegrityError:
            existing = await self._trainings.find_open(user_id, context)
            if existing is None:
                raise
            logger.info("session_create_raced", user_id=user_id, training_id=existing.id, context=context.key)
            return existing, False

        logger.info("session_created", user_id=user_id, training_id=training.id, context=context.key)
        return training, True

    async def open_session(
        self,
        user_id: int,
        context: SessionContext,
        planned_workout_id: int | None = None,
        fitness_goal: str | None = None,
    ) -> SessionHandle:
        """Clean up, find or create, then materialize the plan for a new session.

        The plan is ``planned_workout_id`` when given, otherwise the planned
        workout at the split slot of a split context. Reopening an existing
        session returns its exercises untouched.
        """
        await self.cleanup_stale(user_id, context)
        training, is_new = await self.find_or_create(user_id, context)

        if not is_new:
            exercises = await self.get_existing_exercises(training.id)
            return SessionHandle(session=training, is_new=False, exercises=exercises)

        planned = await self._resolve_plan(user_id, context, planned_workout_id)
        exercises: list[TrainingExercise] = []
        if planned is not None:
            exercises = await self._materializer.materialize(
                training.id,
                parse_planned_exercises(planned.exercises),
                user_id,
                fitness_goal=fitness_goal,
            )
        return SessionHandle(session=training, is_new=True, exercises=exercises)

    async def _resolve_plan(
        self,
        user_id: int,
        context: SessionContext,
        planned_workout_id: int | None,
    ) -> UserPlannedWorkout | None:
        if planned_workout_id is not None:
            planned = await self._get_or_404(UserPlannedWorkout, planned_workout_id)
            if planned.user_id != user_id:
                raise BusinessRuleError(
                    "Planned workout belongs to another user",
                    code="BR_PLAN_OWNER",
                    details={"planned_workout_id": planned_workout_id},
                )
            return planned
        if isinstance(context, SplitContext):
            return await self._planned.get_by_slot(user_id, context.split_id, context.session_index)
        return None

    async def get_existing_exercises(self, session_id: int) -> list[TrainingExercise]:
        """Exercises by position, each with its sets (warm-ups first, then by order)."""
        return await self._training_exercises.list_by_session(session_id)

    async def start_session(self, session_id: int, now: datetime | None = None) -> TrainingSession:
        training = await self._get_or_404(TrainingSession, session_id)
        if not training.is_open:
            raise SessionFinishedError(session_id)
        if training.start_time is None:
            training.start_time = now or datetime.utcnow()
            await self._session.flush()
            logger.info("session_started", training_id=session_id, start_time=training.start_time.isoformat())
        return training
