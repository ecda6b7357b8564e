"""
Session summary.

Closes a training session and stores its aggregate. Only completed working
sets count: a set is completed once it has a ``timestamp``, and warm-ups
never contribute to totals, muscles or records.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from traincycle.config import training_rules
from traincycle.core.exceptions import NotFoundError, SessionNotStartedError
from traincycle.core.logging import get_logger
from traincycle.models.training import ExerciseSeries
from traincycle.repositories.training_session_repository import TrainingSessionRepository
from traincycle.services.progression import estimate_one_rep_max

logger = get_logger(__name__)


@dataclass
class ExerciseSummary:
    training_exercise_id: int
    exercise_id: int
    sets: int
    reps: int
    volume: float
    max_one_rep_max: int | None = None


@dataclass
class WorkoutSummary:
    training_id: int
    total_sets: int
    total_reps: int
    total_volume: float
    duration_seconds: int
    calories_burned: int
    muscles_worked: list[str] = field(default_factory=list)
    personal_records: dict[int, int] = field(default_factory=dict)
    exercises: list[ExerciseSummary] = field(default_factory=list)

    def to_performance_data(self) -> dict[str, Any]:
        """JSON-safe snapshot stored on the session."""
        return {
            "total_sets": self.total_sets,
            "total_reps": self.total_reps,
            "total_volume": self.total_volume,
            "duration_seconds": self.duration_seconds,
            "personal_records": {str(k): v for k, v in self.personal_records.items()},
            "exercises": [asdict(e) for e in self.exercises],
        }


def series_one_rep_max(series: ExerciseSeries) -> int | None:
    """Stored estimate from the set's record, else computed from reps and weight."""
    record = series.record or {}
    stored = record.get("one_rep_max", record.get("oneRM"))
    if stored:
        return int(stored)
    return estimate_one_rep_max(series.weight, series.reps)


def estimate_calories(duration_seconds: float) -> int:
    return math.floor(duration_seconds / 60 * training_rules.calories_per_minute + 0.5)


class SessionSummaryAggregator:
    def __init__(self, session: AsyncSession):
        self._session = session
        self._trainings = TrainingSessionRepository(session)

    async def finalize(self, session_id: int, now: datetime | None = None) -> WorkoutSummary:
        """
        Close the session at ``now`` and persist its summary.

        Raises SessionNotStartedError if the session was never started. Calling it
        on an already finished session recomputes and overwrites the summary;
        callers guard against that.
        """
        training = await self._trainings.get_with_exercises(session_id)
        if training is None:
            raise NotFoundError("TrainingSession", f"TrainingSession {session_id} not found", {"id": session_id})
        if training.start_time is None:
            raise SessionNotStartedError(session_id, "Cannot finish a training session that was never started")

        now = now or datetime.utcnow()
        muscles: list[str] = []
        records: dict[int, int] = {}
        exercise_summaries: list[ExerciseSummary] = []

        for training_exercise in training.exercises:
            done = [s for s in training_exercise.series if s.is_completed and not s.is_warmup]
            if not done:
                continue

            best = None
            for s in done:
                one_rep_max = series_one_rep_max(s)
                if one_rep_max is not None and (best is None or one_rep_max > best):
                    best = one_rep_max

            exercise_summaries.append(ExerciseSummary(
                training_exercise_id=training_exercise.id,
                exercise_id=training_exercise.exercise_id,
                sets=len(done),
                reps=sum(s.reps or 0 for s in done),
                volume=sum((s.reps or 0) * (s.weight or 0) for s in done),
                max_one_rep_max=best,
            ))

            if best is not None:
                previous = records.get(training_exercise.exercise_id)
                records[training_exercise.exercise_id] = best if previous is None else max(previous, best)

            exercise = training_exercise.exercise
            for muscle in (exercise.muscles if exercise is not None else []):
                if muscle not in muscles:
                    muscles.append(muscle)

        duration = max(0, int((now - training.start_time).total_seconds()))
        calories = training.calories_burned
        if calories is None:
            calories = estimate_calories(duration)

        summary = WorkoutSummary(
            training_id=training.id,
            total_sets=sum(e.sets for e in exercise_summaries),
            total_reps=sum(e.reps for e in exercise_summaries),
            total_volume=sum(e.volume for e in exercise_summaries),
            duration_seconds=duration,
            calories_burned=calories,
            muscles_worked=muscles,
            personal_records=records,
            exercises=exercise_summaries,
        )

        training.end_time = now
        training.volume = summary.total_volume
        training.calories_burned = summary.calories_burned
        training.muscles_worked = summary.muscles_worked
        training.performance_data = summary.to_performance_data()
        await self._session.flush()

        logger.info(
            "session_finalized",
            training_id=training.id,
            total_sets=summary.total_sets,
            total_volume=summary.total_volume,
            duration_seconds=duration,
        )
        return summary
