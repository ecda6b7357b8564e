"""
Planned workout editing.

Edits to a planned workout are mirrored into the open training session of
the same split slot, if there is one, so what the user sees in the gym
matches the plan.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from traincycle.core.exceptions import ExerciseNotInPlanError, NotFoundError
from traincycle.core.logging import get_logger
from traincycle.models.context import SplitContext
from traincycle.models.planned_workout import UserPlannedWorkout
from traincycle.models.training import TrainingSession
from traincycle.repositories.exercise_repository import ExerciseRepository
from traincycle.repositories.planned_workout_repository import PlannedWorkoutRepository
from traincycle.repositories.training_exercise_repository import TrainingExerciseRepository
from traincycle.repositories.training_session_repository import TrainingSessionRepository
from traincycle.schemas.plan import PlannedExerciseRef, dump_planned_exercises, parse_planned_exercises
from traincycle.services.base import BaseService
from traincycle.services.plan_materializer import PlanMaterializer
from traincycle.services.user_settings import UserSettingsService

logger = get_logger(__name__)


class PlannedWorkoutService(BaseService):
    def __init__(self, session: AsyncSession, materializer: PlanMaterializer | None = None):
        super().__init__(session)
        self._planned = PlannedWorkoutRepository(session)
        self._exercises = ExerciseRepository(session)
        self._trainings = TrainingSessionRepository(session)
        self._training_exercises = TrainingExerciseRepository(session)
        self._materializer = materializer or PlanMaterializer(session)
        self._user_settings = UserSettingsService(session)

    async def list_for_split(self, user_id: int, split_id: int) -> list[UserPlannedWorkout]:
        return await self._planned.list_for_split(user_id, split_id)

    async def save(
        self,
        user_id: int,
        split_id: int,
        session_index: int,
        exercises: list[PlannedExerciseRef],
        title: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> UserPlannedWorkout:
        values: dict[str, Any] = {"exercises": dump_planned_exercises(exercises)}
        if title is not None:
            values["title"] = title
        if details is not None:
            values["details"] = details
        planned = await self._planned.upsert(user_id, split_id, session_index, values)
        logger.info(
            "planned_workout_saved",
            user_id=user_id,
            split_id=split_id,
            session_index=session_index,
            exercises=len(exercises),
        )
        return planned

    async def _owned(self, planned_workout_id: int, user_id: int) -> UserPlannedWorkout:
        return await self._get_owned_or_404(UserPlannedWorkout, planned_workout_id, user_id)

    async def _open_session_for(self, planned: UserPlannedWorkout) -> TrainingSession | None:
        context = SplitContext(split_id=planned.split_id, session_index=planned.session_index)
        return await self._trainings.find_open(planned.user_id, context)

    async def _require_exercise(self, exercise_id: int) -> None:
        if await self._exercises.get(exercise_id) is None:
            raise NotFoundError("Exercise", f"Exercise {exercise_id} not found", {"id": exercise_id})

    @staticmethod
    def _indexes_of(refs: list[PlannedExerciseRef], exercise_id: int, planned_workout_id: int) -> list[int]:
        """Every slot holding ``exercise_id``; raises when there is none."""
        indexes = [i for i, ref in enumerate(refs) if ref.exercise_id == exercise_id]
        if not indexes:
            raise ExerciseNotInPlanError(planned_workout_id, exercise_id)
        return indexes

    async def _session_position(self, training_id: int, plan_index: int) -> int | None:
        """Session position matching plan slot ``plan_index``; None appends."""
        current = await self._training_exercises.list_by_session(training_id)
        if plan_index < len(current):
            return current[plan_index].position
        return None

    async def add_exercise(
        self,
        planned_workout_id: int,
        exercise_id: int,
        user_id: int,
        overrides: dict[str, Any] | None = None,
        position: int | None = None,
    ) -> UserPlannedWorkout:
        """Add an exercise at plan slot ``position`` (appended when None)."""
        planned = await self._owned(planned_workout_id, user_id)
        await self._require_exercise(exercise_id)

        ref = PlannedExerciseRef(exercise_id=exercise_id, overrides=overrides or {})
        refs = parse_planned_exercises(planned.exercises)
        if position is None or position >= len(refs):
            refs.append(ref)
        else:
            refs.insert(position, ref)
        planned.exercises = dump_planned_exercises(refs)
        await self._session.flush()

        training = await self._open_session_for(planned)
        if training is not None:
            start_position = None
            if position is not None:
                start_position = await self._session_position(training.id, position)
            await self._materializer.materialize(training.id, [ref], user_id, start_position=start_position)

        logger.info(
            "plan_exercise_added",
            planned_workout_id=planned_workout_id,
            exercise_id=exercise_id,
            position=position,
            synced_training_id=training.id if training else None,
        )
        return planned

    async def remove_exercise(self, planned_workout_id: int, exercise_id: int, user_id: int) -> UserPlannedWorkout:
        """Drop every occurrence of an exercise from the plan and the open session."""
        planned = await self._owned(planned_workout_id, user_id)
        refs = parse_planned_exercises(planned.exercises)
        removed = set(self._indexes_of(refs, exercise_id, planned_workout_id))
        planned.exercises = dump_planned_exercises([r for i, r in enumerate(refs) if i not in removed])
        await self._session.flush()

        training = await self._open_session_for(planned)
        if training is not None:
            for training_exercise in await self._training_exercises.find_in_session(training.id, exercise_id):
                await self._training_exercises.delete(training_exercise.id)

        logger.info(
            "plan_exercise_removed",
            planned_workout_id=planned_workout_id,
            exercise_id=exercise_id,
            occurrences=len(removed),
            synced_training_id=training.id if training else None,
        )
        return planned

    async def replace_exercise(
        self,
        planned_workout_id: int,
        old_exercise_id: int,
        new_exercise_id: int,
        user_id: int,
        dont_recommend: bool = False,
    ) -> UserPlannedWorkout:
        """Swap every occurrence of an exercise in place, keeping each slot's overrides.

        In the open session each old TrainingExercise is deleted and a fresh
        replacement is materialized at its position.
        """
        planned = await self._owned(planned_workout_id, user_id)
        refs = parse_planned_exercises(planned.exercises)
        indexes = self._indexes_of(refs, old_exercise_id, planned_workout_id)
        await self._require_exercise(new_exercise_id)

        replacements = []
        for i in indexes:
            refs[i] = PlannedExerciseRef(exercise_id=new_exercise_id, overrides=refs[i].overrides)
            replacements.append(refs[i])
        planned.exercises = dump_planned_exercises(refs)
        await self._session.flush()

        training = await self._open_session_for(planned)
        if training is not None:
            existing = await self._training_exercises.find_in_session(training.id, old_exercise_id)
            if not existing:
                await self._materializer.materialize(training.id, replacements, user_id)
            for k, training_exercise in enumerate(existing):
                # Earlier inserts shift later rows; the fetch-synchronized update keeps .position current.
                position = training_exercise.position
                await self._training_exercises.delete(training_exercise.id)
                await self._materializer.materialize(
                    training.id,
                    [replacements[min(k, len(replacements) - 1)]],
                    user_id,
                    start_position=position,
                )

        if dont_recommend:
            await self._user_settings.exclude_exercise(user_id, old_exercise_id)

        logger.info(
            "plan_exercise_replaced",
            planned_workout_id=planned_workout_id,
            old_exercise_id=old_exercise_id,
            new_exercise_id=new_exercise_id,
            occurrences=len(indexes),
            dont_recommend=dont_recommend,
        )
        return planned
