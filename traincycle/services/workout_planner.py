"""
Workout Planner

Authors the planned workouts of a split when the user picks it:
- Filters the catalog to exercises that hit a target muscle with the
  equipment on hand (cardio is never planned)
- Splits a time-bounded exercise budget across target muscles by goal priority
- Picks primary-muscle, high-priority, compound exercises first
- Tops up with the best remaining exercises while time allows
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from traincycle.config import training_rules
from traincycle.core.exceptions import NotFoundError
from traincycle.core.logging import get_logger
from traincycle.models.enums import Goal
from traincycle.models.exercise import Exercise
from traincycle.models.planned_workout import UserPlannedWorkout
from traincycle.repositories.exercise_repository import ExerciseRepository
from traincycle.repositories.planned_workout_repository import PlannedWorkoutRepository
from traincycle.schemas.plan import PlannedExerciseRef, SplitSessionTemplate, dump_planned_exercises
from traincycle.services.goal_profile import resolve_goal
from traincycle.services.user_settings import UserSettingsService

logger = get_logger(__name__)


def _normalize(names: Iterable[str] | None) -> list[str]:
    return [n.lower().strip() for n in (names or []) if n]


def _primary(exercise: Exercise) -> str:
    return (exercise.primary_muscle or "").lower().strip()


def muscle_priority(muscle: str, goal: Goal) -> int:
    return training_rules.MUSCLE_PRIORITY.get(muscle, {}).get(goal, 0)


def estimate_exercise_duration(compound: bool, sets: int = training_rules.default_planned_sets) -> float:
    """Minutes for ``sets`` sets including the rests between them."""
    if compound:
        per_set, rest = training_rules.compound_time_per_set, training_rules.compound_rest_minutes
    else:
        per_set, rest = training_rules.isolation_time_per_set, training_rules.isolation_rest_minutes
    return sets * per_set + (sets - 1) * rest


def filter_candidates(
    catalog: Iterable[Exercise],
    target_muscles: Sequence[str],
    available_equipment: Sequence[str] | None,
) -> list[Exercise]:
    """Non-cardio exercises hitting a target muscle whose equipment is all available.

    ``available_equipment=None`` means no equipment restriction.
    """
    equipment = set(_normalize(available_equipment)) if available_equipment is not None else None
    targets = set(target_muscles)
    valid = []
    for exercise in catalog:
        primary = _primary(exercise)
        if primary == "cardio":
            continue
        if primary not in targets and not targets.intersection(_normalize(exercise.secondary_muscles)):
            continue
        if equipment is not None and not set(exercise.equipment).issubset(equipment):
            continue
        valid.append(exercise)
    return valid


def distribute_budget(target_muscles: Sequence[str], goal: Goal, max_exercises: int) -> list[int]:
    """Exercises per target muscle, proportional to priority, at least one each."""
    priorities = [muscle_priority(m, goal) or 1 for m in target_muscles]
    total = sum(priorities)
    counts = [max(1, math.floor(p / total * max_exercises + 0.5)) for p in priorities]

    # Trim the largest counts until the budget fits; never below one per muscle.
    while sum(counts) > max_exercises:
        largest = max(counts)
        if largest <= 1:
            break
        counts[counts.index(largest)] -= 1
    return counts


def recommend_exercises(
    catalog: Iterable[Exercise],
    target_muscles: Sequence[str],
    available_equipment: Sequence[str] | None = None,
    goal: str | Goal | None = None,
    workout_duration: int = training_rules.default_workout_duration_minutes,
    excluded_ids: Iterable[int] = (),
) -> list[Exercise]:
    planning_goal = resolve_goal(goal, default=training_rules.default_planning_goal)
    targets = _normalize(target_muscles)
    excluded = set(excluded_ids)
    candidates = [
        e for e in filter_candidates(catalog, targets, available_equipment)
        if e.id not in excluded
    ]
    if not targets or not candidates:
        return []

    max_exercises = max(1, math.floor(workout_duration / estimate_exercise_duration(True)))
    counts = distribute_budget(targets, planning_goal, max_exercises)

    selected: list[Exercise] = []
    used: set[int] = set()
    total_minutes = 0.0

    for muscle, count in zip(targets, counts):
        pool = [
            e for e in candidates
            if e.id not in used and (_primary(e) == muscle or muscle in _normalize(e.secondary_muscles))
        ]
        pool.sort(key=lambda e: (
            _primary(e) != muscle,
            -muscle_priority(_primary(e), planning_goal),
            not e.compound,
        ))
        added = 0
        for exercise in pool:
            if added >= count:
                break
            minutes = estimate_exercise_duration(bool(exercise.compound))
            if selected and total_minutes + minutes > workout_duration:
                break
            selected.append(exercise)
            used.add(exercise.id)
            total_minutes += minutes
            added += 1

    def _muscle_order(e: Exercise) -> int:
        primary = _primary(e)
        return targets.index(primary) if primary in targets else len(targets)

    leftovers = sorted(
        (e for e in candidates if e.id not in used),
        key=lambda e: (_muscle_order(e), -muscle_priority(_primary(e), planning_goal), not e.compound),
    )
    for exercise in leftovers:
        minutes = estimate_exercise_duration(bool(exercise.compound))
        if total_minutes + minutes > workout_duration:
            break
        selected.append(exercise)
        used.add(exercise.id)
        total_minutes += minutes

    return selected


class WorkoutPlanner:
    """Generates and stores the planned workouts of a split."""

    def __init__(self, session: AsyncSession):
        self._session = session
        self._exercises = ExerciseRepository(session)
        self._planned = PlannedWorkoutRepository(session)
        self._user_settings = UserSettingsService(session)

    async def _plan_one(
        self,
        user_id: int,
        split_id: int,
        session_index: int,
        template: SplitSessionTemplate,
        catalog: list[Exercise],
        available_equipment: Sequence[str] | None,
        goal: str | None,
        workout_duration: int,
        excluded: list[int],
    ) -> UserPlannedWorkout:
        recommended = recommend_exercises(
            catalog,
            template.main_muscles,
            available_equipment=available_equipment,
            goal=goal,
            workout_duration=workout_duration,
            excluded_ids=excluded,
        )
        duration = sum(estimate_exercise_duration(bool(e.compound)) for e in recommended)
        details: dict[str, Any] = {
            "duration": math.floor(duration + 0.5),
            "main_muscles": template.main_muscles,
            "secondary_muscles": template.optional_muscles,
            "fitness_goal": goal,
        }
        refs = [PlannedExerciseRef(exercise_id=e.id) for e in recommended]
        return await self._planned.upsert(
            user_id,
            split_id,
            session_index,
            {
                "title": template.title or f"Session {session_index + 1}",
                "exercises": dump_planned_exercises(refs),
                "details": details,
            },
        )

    async def generate_planned_workouts(
        self,
        user_id: int,
        split_id: int,
        sessions: Sequence[SplitSessionTemplate],
        available_equipment: Sequence[str] | None = None,
        goal: str | None = None,
        workout_duration: int | None = None,
    ) -> list[UserPlannedWorkout]:
        """Upsert one planned workout per split session, indexed from 0."""
        user_settings = await self._user_settings.get_settings(user_id)
        preferences = await self._user_settings.get_preferences(user_id)
        goal = goal or user_settings.fitness_goal
        workout_duration = workout_duration or preferences.workout_duration
        catalog = await self._exercises.list_active(exclude_ids=preferences.excluded_exercises)

        planned = []
        for session_index, template in enumerate(sessions):
            planned.append(await self._plan_one(
                user_id,
                split_id,
                session_index,
                template,
                catalog,
                available_equipment,
                goal,
                workout_duration,
                preferences.excluded_exercises,
            ))
        logger.info("split_generated", user_id=user_id, split_id=split_id, planned_workouts=len(planned))
        return planned

    async def recalculate_planned_workout(
        self,
        user_id: int,
        split_id: int,
        session_index: int,
        template: SplitSessionTemplate | None = None,
        available_equipment: Sequence[str] | None = None,
        goal: str | None = None,
        workout_duration: int | None = None,
    ) -> UserPlannedWorkout:
        """Re-run the recommendation for one slot, by default from its stored muscles."""
        if template is None:
            existing = await self._planned.get_by_slot(user_id, split_id, session_index)
            if existing is None:
                raise NotFoundError(
                    "UserPlannedWorkout",
                    f"No planned workout at index {session_index} of split {split_id}",
                    {"split_id": split_id, "session_index": session_index},
                )
            details = existing.details or {}
            template = SplitSessionTemplate(
                title=existing.title,
                main_muscles=details.get("main_muscles", []),
                optional_muscles=details.get("secondary_muscles", []),
            )
            goal = goal or details.get("fitness_goal")

        user_settings = await self._user_settings.get_settings(user_id)
        preferences = await self._user_settings.get_preferences(user_id)
        catalog = await self._exercises.list_active(exclude_ids=preferences.excluded_exercises)

        planned = await self._plan_one(
            user_id,
            split_id,
            session_index,
            template,
            catalog,
            available_equipment,
            goal or user_settings.fitness_goal,
            workout_duration or preferences.workout_duration,
            preferences.excluded_exercises,
        )
        logger.info(
            "planned_workout_recalculated",
            planned_workout_id=planned.id,
            split_id=split_id,
            session_index=session_index,
        )
        return planned
