"""
Centralized training-engine tables.

Goal profiles drive how many working sets an exercise gets and where its
starting reps/load sit; the remaining constants feed progression, the
session summary and split generation. Values are plain module-level data so
they can be inspected and overridden in tests.
"""

from __future__ import annotations

from traincycle.models.enums import Goal, MovementClass


# ============================================================================
# Goal profiles
# ============================================================================

# (rep_range_low, rep_range_high, target_weight_pct, set_count)
GOAL_PROFILE_TABLE: dict[Goal, dict[MovementClass, tuple[int, int, float, int]]] = {
    Goal.STRENGTH: {
        MovementClass.COMPOUND: (3, 5, 0.85, 4),
        MovementClass.ISOLATION: (5, 8, 0.75, 3),
    },
    Goal.HYPERTROPHY: {
        MovementClass.COMPOUND: (6, 10, 0.75, 3),
        MovementClass.ISOLATION: (8, 15, 0.65, 3),
    },
    Goal.ENDURANCE: {
        MovementClass.COMPOUND: (12, 20, 0.55, 3),
        MovementClass.ISOLATION: (15, 25, 0.45, 3),
    },
    Goal.FAT_LOSS: {
        MovementClass.COMPOUND: (10, 15, 0.65, 3),
        MovementClass.ISOLATION: (12, 20, 0.55, 3),
    },
    Goal.GENERAL_FITNESS: {
        MovementClass.COMPOUND: (8, 12, 0.70, 3),
        MovementClass.ISOLATION: (10, 15, 0.60, 3),
    },
}

DEFAULT_GOAL: Goal = Goal.GENERAL_FITNESS

# Labels shown on the goal picker, plus the shorthand keys older clients stored.
GOAL_LABEL_ALIASES: dict[str, Goal] = {
    "improve strength": Goal.STRENGTH,
    "build muscle mass": Goal.HYPERTROPHY,
    "enhance endurance": Goal.ENDURANCE,
    "lose fat": Goal.FAT_LOSS,
    "general fitness": Goal.GENERAL_FITNESS,
    "strength": Goal.STRENGTH,
    "hypertrophy": Goal.HYPERTROPHY,
    "endurance": Goal.ENDURANCE,
    "fat-loss": Goal.FAT_LOSS,
    "fat_loss": Goal.FAT_LOSS,
    "fatloss": Goal.FAT_LOSS,
    "general-fitness": Goal.GENERAL_FITNESS,
    "general_fitness": Goal.GENERAL_FITNESS,
    "fitness": Goal.GENERAL_FITNESS,
}


# ============================================================================
# Progression
# ============================================================================

progression_weight_factor: float = 1.025
weight_increment: float = 0.5

# Starting loads (kg) before the goal percentage is applied.
default_barbell_weight: float = 20.0
default_dumbbell_weight: float = 2.5
default_machine_weight: float = 10.0
default_compound_weight: float = 20.0
default_isolation_weight: float = 10.0

# Sets created through the "add set" action when the user gives no values.
manual_set_default_reps: int = 10
manual_set_default_weight: float = 10.0


# ============================================================================
# Session summary
# ============================================================================

calories_per_minute: float = 6.0
one_rep_max_rep_divisor: float = 30.0


# ============================================================================
# Rest timers and warm-ups (seconds / set counts)
# ============================================================================

default_rest_time_compound: int = 150
default_rest_time_isolation: int = 90
default_warmup_sets_compound: int = 2
default_warmup_sets_isolation: int = 1
default_workout_duration_minutes: int = 60


# ============================================================================
# Split generation
# ============================================================================

# Higher values = higher priority for that goal.
MUSCLE_PRIORITY: dict[str, dict[Goal, int]] = {
    "abs": {Goal.STRENGTH: 3, Goal.HYPERTROPHY: 3, Goal.FAT_LOSS: 5, Goal.ENDURANCE: 5, Goal.GENERAL_FITNESS: 5},
    "back": {Goal.STRENGTH: 5, Goal.HYPERTROPHY: 5, Goal.FAT_LOSS: 2, Goal.ENDURANCE: 4, Goal.GENERAL_FITNESS: 3},
    "biceps": {Goal.STRENGTH: 3, Goal.HYPERTROPHY: 4, Goal.FAT_LOSS: 1, Goal.ENDURANCE: 2, Goal.GENERAL_FITNESS: 2},
    "calves": {Goal.STRENGTH: 3, Goal.HYPERTROPHY: 2, Goal.FAT_LOSS: 4, Goal.ENDURANCE: 4, Goal.GENERAL_FITNESS: 5},
    "chest": {Goal.STRENGTH: 5, Goal.HYPERTROPHY: 5, Goal.FAT_LOSS: 2, Goal.ENDURANCE: 3, Goal.GENERAL_FITNESS: 2},
    "forearms": {Goal.STRENGTH: 2, Goal.HYPERTROPHY: 3, Goal.FAT_LOSS: 1, Goal.ENDURANCE: 2, Goal.GENERAL_FITNESS: 2},
    "hamstrings": {Goal.STRENGTH: 3, Goal.HYPERTROPHY: 2, Goal.FAT_LOSS: 4, Goal.ENDURANCE: 3, Goal.GENERAL_FITNESS: 3},
    "hips": {Goal.STRENGTH: 2, Goal.HYPERTROPHY: 2, Goal.FAT_LOSS: 2, Goal.ENDURANCE: 3, Goal.GENERAL_FITNESS: 4},
    "neck": {Goal.STRENGTH: 1, Goal.HYPERTROPHY: 1, Goal.FAT_LOSS: 1, Goal.ENDURANCE: 1, Goal.GENERAL_FITNESS: 1},
    "quadriceps": {Goal.STRENGTH: 4, Goal.HYPERTROPHY: 4, Goal.FAT_LOSS: 4, Goal.ENDURANCE: 3, Goal.GENERAL_FITNESS: 3},
    "shoulders": {Goal.STRENGTH: 4, Goal.HYPERTROPHY: 4, Goal.FAT_LOSS: 2, Goal.ENDURANCE: 2, Goal.GENERAL_FITNESS: 3},
    "thighs": {Goal.STRENGTH: 3, Goal.HYPERTROPHY: 3, Goal.FAT_LOSS: 3, Goal.ENDURANCE: 3, Goal.GENERAL_FITNESS: 3},
    "triceps": {Goal.STRENGTH: 4, Goal.HYPERTROPHY: 5, Goal.FAT_LOSS: 2, Goal.ENDURANCE: 3, Goal.GENERAL_FITNESS: 2},
}

# Goal assumed by the recommender when the user has not picked one.
default_planning_goal: Goal = Goal.HYPERTROPHY

# Minutes; a compound set is ~12 reps at ~9s, an isolation set ~12 reps at ~4s.
compound_time_per_set: float = 2.0
isolation_time_per_set: float = 1.0
compound_rest_minutes: float = 2.5
isolation_rest_minutes: float = 1.5
default_planned_sets: int = 3
