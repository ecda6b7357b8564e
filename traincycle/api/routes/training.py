"""API routes for training sessions and set logging."""
from dataclasses import asdict

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from traincycle.api.routes.dependencies import get_current_user_id
from traincycle.core.exceptions import NotFoundError, SessionAlreadyFinalizedError
from traincycle.core.logging import get_logger
from traincycle.db.database import get_db
from traincycle.models.training import TrainingExercise, TrainingSession
from traincycle.repositories.training_session_repository import TrainingSessionRepository
from traincycle.schemas.pagination import PaginationParams
from traincycle.schemas.training import (
    NoteRequest,
    OpenSessionRequest,
    OpenSessionResponse,
    SeriesResponse,
    SetAddRequest,
    SetUpdateRequest,
    TrainingExerciseResponse,
    TrainingHistoryResponse,
    TrainingSessionResponse,
    WorkoutSummaryResponse,
)
from traincycle.services.session_lifecycle import SessionLifecycleManager
from traincycle.services.session_summary import SessionSummaryAggregator
from traincycle.services.set_logging import SetLoggingService

router = APIRouter()
logger = get_logger(__name__)


async def _owned_training(db: AsyncSession, training_id: int, user_id: int) -> TrainingSession:
    training = await db.get(TrainingSession, training_id)
    if training is None or training.user_id != user_id:
        raise NotFoundError("TrainingSession", f"TrainingSession {training_id} not found", {"id": training_id})
    return training


async def _owned_exercise(db: AsyncSession, training_exercise_id: int, user_id: int) -> TrainingExercise:
    training_exercise = await db.get(TrainingExercise, training_exercise_id)
    if training_exercise is None:
        raise NotFoundError(
            "TrainingExercise",
            f"TrainingExercise {training_exercise_id} not found",
            {"id": training_exercise_id},
        )
    await _owned_training(db, training_exercise.training_id, user_id)
    return training_exercise


@router.post("/open", response_model=OpenSessionResponse)
async def open_session(
    request: OpenSessionRequest,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Reuse the open session for the context, or create and fill a new one."""
    manager = SessionLifecycleManager(db)
    handle = await manager.open_session(
        user_id,
        request.to_context(),
        planned_workout_id=request.planned_workout_id,
    )
    return OpenSessionResponse(
        session=TrainingSessionResponse.model_validate(handle.session),
        is_new=handle.is_new,
        exercises=[TrainingExerciseResponse.model_validate(te) for te in handle.exercises],
    )


@router.get("/history", response_model=TrainingHistoryResponse)
async def list_history(
    split_id: int | None = Query(default=None),
    cursor: str | None = Query(default=None),
    limit: int = Query(default=20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Finished sessions, newest first."""
    filters: dict = {"user_id": user_id, "completed": True}
    if split_id is not None:
        filters["split_id"] = split_id
    page = await TrainingSessionRepository(db).list(filters, PaginationParams(cursor=cursor, limit=limit))
    return TrainingHistoryResponse(
        items=[TrainingSessionResponse.model_validate(t) for t in page.items],
        next_cursor=page.next_cursor,
        has_more=page.has_more,
    )


@router.get("/{training_id}", response_model=OpenSessionResponse)
async def get_session(
    training_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    training = await _owned_training(db, training_id, user_id)
    exercises = await SessionLifecycleManager(db).get_existing_exercises(training_id)
    return OpenSessionResponse(
        session=TrainingSessionResponse.model_validate(training),
        is_new=False,
        exercises=[TrainingExerciseResponse.model_validate(te) for te in exercises],
    )


@router.post("/{training_id}/start", response_model=TrainingSessionResponse)
async def start_session(
    training_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    await _owned_training(db, training_id, user_id)
    training = await SessionLifecycleManager(db).start_session(training_id)
    return TrainingSessionResponse.model_validate(training)


@router.post("/{training_id}/finish", response_model=WorkoutSummaryResponse)
async def finish_session(
    training_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Close the session and return its summary. A session is finished only once."""
    training = await _owned_training(db, training_id, user_id)
    if not training.is_open:
        raise SessionAlreadyFinalizedError(training_id)
    summary = await SessionSummaryAggregator(db).finalize(training_id)
    logger.info("session_finished", user_id=user_id, training_id=training_id, total_sets=summary.total_sets)
    return WorkoutSummaryResponse(**asdict(summary))


@router.post(
    "/exercises/{training_exercise_id}/sets",
    response_model=SeriesResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_set(
    training_exercise_id: int,
    request: SetAddRequest,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    await _owned_exercise(db, training_exercise_id, user_id)
    series = await SetLoggingService(db).add_set(
        training_exercise_id,
        is_warmup=request.is_warmup,
        reps=request.reps,
        weight=request.weight,
    )
    return SeriesResponse.model_validate(series)


@router.patch("/exercises/{training_exercise_id}/sets/{order}", response_model=SeriesResponse)
async def update_set(
    training_exercise_id: int,
    order: int,
    request: SetUpdateRequest,
    is_warmup: bool = Query(default=False),
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    await _owned_exercise(db, training_exercise_id, user_id)
    series = await SetLoggingService(db).update_set(
        training_exercise_id,
        order,
        is_warmup,
        request.model_dump(exclude_unset=True),
    )
    return SeriesResponse.model_validate(series)


@router.delete("/exercises/{training_exercise_id}/sets/{order}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_set(
    training_exercise_id: int,
    order: int,
    is_warmup: bool = Query(default=False),
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    await _owned_exercise(db, training_exercise_id, user_id)
    await SetLoggingService(db).delete_set(training_exercise_id, order, is_warmup)


@router.post("/exercises/{training_exercise_id}/sets/{order}/complete", response_model=SeriesResponse)
async def complete_set(
    training_exercise_id: int,
    order: int,
    is_warmup: bool = Query(default=False),
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    await _owned_exercise(db, training_exercise_id, user_id)
    series = await SetLoggingService(db).complete_set(training_exercise_id, order, is_warmup)
    return SeriesResponse.model_validate(series)


@router.delete("/exercises/{training_exercise_id}/sets/{order}/complete", response_model=SeriesResponse)
async def uncomplete_set(
    training_exercise_id: int,
    order: int,
    is_warmup: bool = Query(default=False),
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    await _owned_exercise(db, training_exercise_id, user_id)
    series = await SetLoggingService(db).uncomplete_set(training_exercise_id, order, is_warmup)
    return SeriesResponse.model_validate(series)


@router.put("/exercises/{training_exercise_id}/note")
async def save_note(
    training_exercise_id: int,
    request: NoteRequest,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    await _owned_exercise(db, training_exercise_id, user_id)
    training_exercise = await SetLoggingService(db).save_note(training_exercise_id, request.note)
    return {"id": training_exercise.id, "performance_data": training_exercise.performance_data}
