"""
Goal profiles.

Maps a free-text goal label and a movement class to the rep range, load
percentage and number of working sets an exercise starts with. The mapping
is total: anything unrecognized falls back to the general-fitness profile.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from traincycle.config import training_rules
from traincycle.models.enums import Goal, MovementClass


@dataclass(frozen=True)
class GoalProfile:
    rep_range_low: int
    rep_range_high: int
    target_weight_pct: float
    set_count: int


def resolve_goal(label: str | Goal | None, default: Goal = training_rules.DEFAULT_GOAL) -> Goal:
    """Turn a stored goal label into a ``Goal``; unknown labels give ``default``."""
    if isinstance(label, Goal):
        return label
    if not label:
        return default
    normalized = " ".join(str(label).strip().lower().split())
    try:
        return Goal(normalized)
    except ValueError:
        return training_rules.GOAL_LABEL_ALIASES.get(normalized, default)


def movement_class(exercise: Any) -> MovementClass:
    return MovementClass.COMPOUND if getattr(exercise, "compound", False) else MovementClass.ISOLATION


def get_goal_profile(
    goal: str | Goal | None,
    movement: MovementClass | str = MovementClass.ISOLATION,
) -> GoalProfile:
    resolved = resolve_goal(goal)
    try:
        movement = MovementClass(movement)
    except ValueError:
        movement = MovementClass.ISOLATION
    row = training_rules.GOAL_PROFILE_TABLE.get(resolved) or training_rules.GOAL_PROFILE_TABLE[
        training_rules.DEFAULT_GOAL
    ]
    low, high, pct, sets = row[movement]
    return GoalProfile(
        rep_range_low=low,
        rep_range_high=high,
        target_weight_pct=pct,
        set_count=sets,
    )
