"""Request and response models for the training API."""
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from traincycle.models.context import SessionContext, build_context
from traincycle.schemas.plan import PlannedExerciseRef, SplitSessionTemplate


class ContextIn(BaseModel):
    """Loosely-shaped session context as clients send it."""
    split_id: int | None = None
    session_index: int | None = Field(default=None, ge=0)
    session_id: int | None = None
    punctual_id: int | None = None
    routine_id: int | None = None

    def to_context(self) -> SessionContext:
        return build_context(**self.model_dump(include=set(ContextIn.model_fields)))


class OpenSessionRequest(ContextIn):
    planned_workout_id: int | None = None


class SeriesResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    order: int
    is_warmup: bool
    reps: int | None = None
    weight: float | None = None
    time_seconds: int | None = None
    distance: float | None = None
    timestamp: datetime | None = None
    record: dict[str, Any] | None = None


class TrainingExerciseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    exercise_id: int
    position: int
    performance_data: dict[str, Any] | None = None
    series: list[SeriesResponse] = Field(default_factory=list)


class TrainingSessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    context_key: str
    split_id: int | None = None
    session_index: int | None = None
    session_id: int | None = None
    punctual_id: int | None = None
    routine_id: int | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    volume: float | None = None
    calories_burned: int | None = None
    muscles_worked: list[str] | None = None
    performance_data: dict[str, Any] | None = None


class OpenSessionResponse(BaseModel):
    session: TrainingSessionResponse
    is_new: bool
    exercises: list[TrainingExerciseResponse]


class TrainingHistoryResponse(BaseModel):
    items: list[TrainingSessionResponse]
    next_cursor: str | None = None
    has_more: bool = False


class ExerciseSummaryResponse(BaseModel):
    training_exercise_id: int
    exercise_id: int
    sets: int
    reps: int
    volume: float
    max_one_rep_max: int | None = None


class WorkoutSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    training_id: int
    total_sets: int
    total_reps: int
    total_volume: float
    duration_seconds: int
    calories_burned: int
    muscles_worked: list[str]
    personal_records: dict[int, int]
    exercises: list[ExerciseSummaryResponse]


class SetAddRequest(BaseModel):
    is_warmup: bool = False
    reps: int | None = Field(default=None, ge=0)
    weight: float | None = Field(default=None, ge=0)


class SetUpdateRequest(BaseModel):
    reps: int | None = Field(default=None, ge=0)
    weight: float | None = Field(default=None, ge=0)
    time_seconds: int | None = Field(default=None, ge=0)
    distance: float | None = Field(default=None, ge=0)


class NoteRequest(BaseModel):
    note: str = Field(max_length=2000)


class PlannedWorkoutResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    split_id: int
    session_index: int
    title: str | None = None
    exercises: list[PlannedExerciseRef]
    details: dict[str, Any] = Field(default_factory=dict)


class SkipRequest(BaseModel):
    session_index: int = Field(ge=0)
    split_id: int | None = None
    routine_id: int | None = None


class PlanExerciseRequest(BaseModel):
    exercise_id: int
    overrides: dict[str, Any] = Field(default_factory=dict)
    position: int | None = Field(default=None, ge=0)


class ReplaceExerciseRequest(BaseModel):
    old_exercise_id: int
    new_exercise_id: int
    dont_recommend: bool = False


class GenerateSplitRequest(BaseModel):
    split_id: int
    sessions: list[SplitSessionTemplate]
    available_equipment: list[str] | None = None
    goal: str | None = None
    workout_duration: int | None = Field(default=None, ge=1)
    select: bool = True
