"""
Progressive overload.

Each planned working set either builds on the same slot of the user's last
performance (one more rep, 2.5% more load) or, without history, starts from a
random rep count inside the goal's range and an equipment-based load.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Any, Sequence

from traincycle.config import training_rules
from traincycle.services.goal_profile import GoalProfile


@dataclass(frozen=True)
class PlannedSet:
    reps: int
    weight: float


def round_to_increment(value: float, increment: float = training_rules.weight_increment) -> float:
    """Round to the nearest ``increment``, halves rounding up."""
    return math.floor(value / increment + 0.5) * increment


def estimate_one_rep_max(weight: float | None, reps: int | None) -> int | None:
    """Epley estimate, ``round(weight * (1 + reps / 30))``; None without both values."""
    if not weight or not reps:
        return None
    return math.floor(weight * (1 + reps / training_rules.one_rep_max_rep_divisor) + 0.5)


def default_weight(exercise: Any) -> float:
    equipment = getattr(exercise, "equipment", None)
    if equipment is None:
        equipment = [e.lower() for e in (getattr(exercise, "equipment_required", None) or [])]

    if "barbell" in equipment:
        return training_rules.default_barbell_weight
    if any("dumbbell" in item for item in equipment):
        return training_rules.default_dumbbell_weight
    if "machine" in equipment:
        return training_rules.default_machine_weight
    if getattr(exercise, "compound", False):
        return training_rules.default_compound_weight
    return training_rules.default_isolation_weight


class ProgressionEngine:
    """Plans the working sets of one exercise."""

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng or random.Random()

    def plan_sets(
        self,
        exercise: Any,
        profile: GoalProfile,
        history: Sequence[Any] | None = None,
    ) -> list[PlannedSet]:
        history = list(history or [])
        base_weight = round_to_increment(default_weight(exercise) * profile.target_weight_pct)

        planned: list[PlannedSet] = []
        for i in range(profile.set_count):
            if i < len(history):
                prior = history[i]
                reps = prior.reps + 1 if prior.reps else profile.rep_range_low
                if prior.weight:
                    weight = round_to_increment(prior.weight * training_rules.progression_weight_factor)
                else:
                    weight = base_weight
            else:
                reps = self._rng.randint(profile.rep_range_low, profile.rep_range_high)
                weight = base_weight
            planned.append(PlannedSet(reps=reps, weight=weight))
        return planned
