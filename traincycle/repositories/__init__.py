"""Repositories package."""
from traincycle.repositories.base import Repository
from traincycle.repositories.exercise_repository import ExerciseRepository
from traincycle.repositories.exercise_series_repository import ExerciseSeriesRepository
from traincycle.repositories.planned_workout_repository import PlannedWorkoutRepository
from traincycle.repositories.training_exercise_repository import TrainingExerciseRepository
from traincycle.repositories.training_session_repository import TrainingSessionRepository
from traincycle.repositories.user_settings_repository import UserSettingsRepository

__all__ = [
    "Repository",
    "ExerciseRepository",
    "ExerciseSeriesRepository",
    "PlannedWorkoutRepository",
    "TrainingExerciseRepository",
    "TrainingSessionRepository",
    "UserSettingsRepository",
]
