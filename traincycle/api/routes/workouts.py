"""API routes for planned workouts, skips and split generation."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from traincycle.api.routes.dependencies import get_current_user_id
from traincycle.core.exceptions import NotFoundError, ValidationError
from traincycle.core.logging import get_logger
from traincycle.db.database import get_db
from traincycle.models.planned_workout import UserPlannedWorkout
from traincycle.schemas.settings import SkipRecord
from traincycle.schemas.training import (
    GenerateSplitRequest,
    PlanExerciseRequest,
    PlannedWorkoutResponse,
    ReplaceExerciseRequest,
    SkipRequest,
)
from traincycle.services.next_workout import NextWorkoutResolver
from traincycle.services.planned_workout import PlannedWorkoutService
from traincycle.services.user_settings import UserSettingsService
from traincycle.services.workout_planner import WorkoutPlanner

router = APIRouter()
logger = get_logger(__name__)


@router.get("/next", response_model=PlannedWorkoutResponse | None)
async def next_workout(
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Planned workout to do next in the selected split, or null."""
    planned = await NextWorkoutResolver(db).next_workout(user_id)
    if planned is None:
        return None
    return PlannedWorkoutResponse.model_validate(planned)


@router.get("/planned", response_model=list[PlannedWorkoutResponse])
async def list_planned(
    split_id: int = Query(...),
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    planned = await PlannedWorkoutService(db).list_for_split(user_id, split_id)
    return [PlannedWorkoutResponse.model_validate(p) for p in planned]


@router.post("/skip", response_model=SkipRecord)
async def skip_workout(
    request: SkipRequest,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    if (request.split_id is None) == (request.routine_id is None):
        raise ValidationError("context", "exactly one of split_id or routine_id is required")
    skip = await UserSettingsService(db).record_skip(
        user_id,
        request.session_index,
        split_id=request.split_id,
        routine_id=request.routine_id,
    )
    logger.info("workout_skipped", user_id=user_id, session_index=request.session_index)
    return skip


@router.post("/planned/{planned_workout_id}/exercises", response_model=PlannedWorkoutResponse)
async def add_plan_exercise(
    planned_workout_id: int,
    request: PlanExerciseRequest,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    planned = await PlannedWorkoutService(db).add_exercise(
        planned_workout_id,
        request.exercise_id,
        user_id,
        overrides=request.overrides,
        position=request.position,
    )
    return PlannedWorkoutResponse.model_validate(planned)


@router.delete("/planned/{planned_workout_id}/exercises/{exercise_id}", response_model=PlannedWorkoutResponse)
async def remove_plan_exercise(
    planned_workout_id: int,
    exercise_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    planned = await PlannedWorkoutService(db).remove_exercise(planned_workout_id, exercise_id, user_id)
    return PlannedWorkoutResponse.model_validate(planned)


@router.post("/planned/{planned_workout_id}/replace", response_model=PlannedWorkoutResponse)
async def replace_plan_exercise(
    planned_workout_id: int,
    request: ReplaceExerciseRequest,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    planned = await PlannedWorkoutService(db).replace_exercise(
        planned_workout_id,
        request.old_exercise_id,
        request.new_exercise_id,
        user_id,
        dont_recommend=request.dont_recommend,
    )
    return PlannedWorkoutResponse.model_validate(planned)


@router.post("/generate", response_model=list[PlannedWorkoutResponse])
async def generate_split(
    request: GenerateSplitRequest,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Author one planned workout per split session and optionally make the split active."""
    planned = await WorkoutPlanner(db).generate_planned_workouts(
        user_id,
        request.split_id,
        request.sessions,
        available_equipment=request.available_equipment,
        goal=request.goal,
        workout_duration=request.workout_duration,
    )
    if request.select:
        await UserSettingsService(db).select_split(user_id, request.split_id)
    return [PlannedWorkoutResponse.model_validate(p) for p in planned]


@router.post("/planned/{planned_workout_id}/recalculate", response_model=PlannedWorkoutResponse)
async def recalculate_planned(
    planned_workout_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    existing = await db.get(UserPlannedWorkout, planned_workout_id)
    if existing is None or existing.user_id != user_id:
        raise NotFoundError("UserPlannedWorkout", f"UserPlannedWorkout {planned_workout_id} not found")
    planned = await WorkoutPlanner(db).recalculate_planned_workout(
        user_id, existing.split_id, existing.session_index
    )
    return PlannedWorkoutResponse.model_validate(planned)
