from __future__ import annotations

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from traincycle.core.logging import get_logger
from traincycle.models.planned_workout import UserPlannedWorkout
from traincycle.repositories.planned_workout_repository import PlannedWorkoutRepository
from traincycle.repositories.training_session_repository import TrainingSessionRepository
from traincycle.repositories.user_settings_repository import UserSettingsRepository
from traincycle.schemas.settings import UserPreferences

logger = get_logger(__name__)


def resolve_next_index(
    completed_index: int | None,
    completed_at: datetime | None,
    skipped_index: int | None,
    skipped_at: datetime | None,
) -> int:
    """Index after whichever of the last completion and the last skip is newer.

    A completion wins only when strictly later than the skip. With neither
    event the split starts at 0.
    """
    has_completion = completed_at is not None
    has_skip = skipped_at is not None

    if has_completion and (not has_skip or completed_at > skipped_at):
        return 0 if completed_index is None else completed_index + 1
    if has_skip:
        return 0 if skipped_index is None else skipped_index + 1
    return 0


class NextWorkoutResolver:
    """Picks the planned workout of the user's active split to do next."""

    def __init__(self, session: AsyncSession):
        self._settings = UserSettingsRepository(session)
        self._planned = PlannedWorkoutRepository(session)
        self._trainings = TrainingSessionRepository(session)

    async def next_workout(self, user_id: int) -> UserPlannedWorkout | None:
        user_settings = await self._settings.get(user_id)
        split_id = user_settings.selected_split_id if user_settings else None
        if split_id is None:
            logger.debug("next_workout_no_split", user_id=user_id)
            return None

        planned = await self._planned.list_for_split(user_id, split_id)
        if not planned:
            logger.debug("next_workout_empty_split", user_id=user_id, split_id=split_id)
            return None

        completed = await self._trainings.last_completed_for_split(user_id, split_id)
        preferences = UserPreferences.model_validate(user_settings.preferences or {})
        skip = preferences.last_skip_for_split(split_id)

        index = resolve_next_index(
            completed_index=completed.session_index if completed else None,
            completed_at=completed.end_time if completed else None,
            skipped_index=skip.session_index if skip else None,
            skipped_at=skip.skipped_at if skip else None,
        )

        by_index = {p.session_index: p for p in planned}
        resolved = by_index.get(index)
        if resolved is None:
            resolved = by_index.get(0)

        logger.debug(
            "next_workout_resolved",
            user_id=user_id,
            split_id=split_id,
            computed_index=index,
            planned_workout_id=resolved.id if resolved else None,
        )
        return resolved
