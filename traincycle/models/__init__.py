"""ORM models."""
from traincycle.models.context import (
    FreeContext,
    PunctualContext,
    RoutineContext,
    SessionContext,
    SplitContext,
    build_context,
)
from traincycle.models.enums import ContextKind, Goal, MovementClass
from traincycle.models.exercise import Exercise
from traincycle.models.planned_workout import UserPlannedWorkout
from traincycle.models.training import ExerciseSeries, TrainingExercise, TrainingSession
from traincycle.models.user import User, UserSettings

__all__ = [
    "ContextKind",
    "Exercise",
    "ExerciseSeries",
    "FreeContext",
    "Goal",
    "MovementClass",
    "PunctualContext",
    "RoutineContext",
    "SessionContext",
    "SplitContext",
    "TrainingExercise",
    "TrainingSession",
    "User",
    "UserPlannedWorkout",
    "UserSettings",
    "build_context",
]
