"""Services package."""
from traincycle.services.goal_profile import GoalProfile, get_goal_profile, movement_class, resolve_goal
from traincycle.services.next_workout import NextWorkoutResolver, resolve_next_index
from traincycle.services.performance_history import PerformanceHistoryReader
from traincycle.services.plan_materializer import PlanMaterializer
from traincycle.services.planned_workout import PlannedWorkoutService
from traincycle.services.progression import PlannedSet, ProgressionEngine
from traincycle.services.session_lifecycle import SessionHandle, SessionLifecycleManager
from traincycle.services.session_summary import SessionSummaryAggregator, WorkoutSummary
from traincycle.services.set_logging import SetLoggingService
from traincycle.services.user_settings import UserSettingsService
from traincycle.services.workout_planner import WorkoutPlanner, recommend_exercises

__all__ = [
    "GoalProfile",
    "get_goal_profile",
    "movement_class",
    "resolve_goal",
    "NextWorkoutResolver",
    "resolve_next_index",
    "PerformanceHistoryReader",
    "PlanMaterializer",
    "PlannedWorkoutService",
    "PlannedSet",
    "ProgressionEngine",
    "SessionHandle",
    "SessionLifecycleManager",
    "SessionSummaryAggregator",
    "WorkoutSummary",
    "SetLoggingService",
    "UserSettingsService",
    "WorkoutPlanner",
    "recommend_exercises",
]
