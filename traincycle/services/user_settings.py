"""
User settings service.

Single writer of ``UserSettings``. The preference document is read into
``UserPreferences``, changed through its methods and written back whole, so
no caller ever merges into the raw JSON.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from traincycle.core.exceptions import ValidationError
from traincycle.core.logging import get_logger
from traincycle.models.exercise import Exercise
from traincycle.models.user import User, UserSettings
from traincycle.repositories.user_settings_repository import UserSettingsRepository
from traincycle.schemas.settings import SkipRecord, UserPreferences
from traincycle.services.base import BaseService
from traincycle.services.goal_profile import resolve_goal

logger = get_logger(__name__)


class UserSettingsService(BaseService):
    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self._repo = UserSettingsRepository(session)

    async def _load(self, user_id: int) -> tuple[UserSettings, UserPreferences]:
        await self._get_or_404(User, user_id)
        user_settings = await self._repo.get_or_create(user_id)
        return user_settings, UserPreferences.model_validate(user_settings.preferences or {})

    async def _store(self, user_settings: UserSettings, preferences: UserPreferences) -> None:
        # JSON columns are not mutation-tracked; assign a fresh document.
        await self._repo.update(user_settings, {"preferences": preferences.model_dump(mode="json")})

    async def get_settings(self, user_id: int) -> UserSettings:
        user_settings, _ = await self._load(user_id)
        return user_settings

    async def get_preferences(self, user_id: int) -> UserPreferences:
        _, preferences = await self._load(user_id)
        return preferences

    async def update_preferences(self, user_id: int, updates: dict[str, Any]) -> UserPreferences:
        """Replace top-level preference fields (duration, rest times, warm-ups)."""
        user_settings, preferences = await self._load(user_id)
        allowed = {"workout_duration", "rest_time", "warmup_sets"}
        unknown = set(updates) - allowed
        if unknown:
            raise ValidationError("preferences", f"cannot update {sorted(unknown)}")
        merged = UserPreferences.model_validate({**preferences.model_dump(mode="json"), **updates})
        await self._store(user_settings, merged)
        return merged

    async def set_fitness_goal(self, user_id: int, goal: str) -> UserSettings:
        user_settings, _ = await self._load(user_id)
        resolved = resolve_goal(goal)
        await self._repo.update(user_settings, {"fitness_goal": resolved.value})
        logger.info("fitness_goal_set", user_id=user_id, label=goal, goal=resolved.value)
        return user_settings

    async def select_split(self, user_id: int, split_id: int | None) -> UserSettings:
        user_settings, _ = await self._load(user_id)
        await self._repo.update(user_settings, {"selected_split_id": split_id})
        logger.info("split_selected", user_id=user_id, split_id=split_id)
        return user_settings

    async def record_skip(
        self,
        user_id: int,
        session_index: int,
        split_id: int | None = None,
        routine_id: int | None = None,
        skipped_at: datetime | None = None,
    ) -> SkipRecord:
        """Remember that ``session_index`` was skipped; replaces the previous skip of that split/routine."""
        user_settings, preferences = await self._load(user_id)
        skip = preferences.record_skip(
            session_index,
            skipped_at or datetime.utcnow(),
            split_id=split_id,
            routine_id=routine_id,
        )
        await self._store(user_settings, preferences)
        logger.info(
            "session_skipped",
            user_id=user_id,
            split_id=split_id,
            routine_id=routine_id,
            session_index=session_index,
        )
        return skip

    async def get_skipped_sessions(self, user_id: int) -> list[SkipRecord]:
        preferences = await self.get_preferences(user_id)
        return list(preferences.skipped_sessions)

    async def last_skip_for_split(self, user_id: int, split_id: int) -> SkipRecord | None:
        preferences = await self.get_preferences(user_id)
        return preferences.last_skip_for_split(split_id)

    async def exclude_exercise(self, user_id: int, exercise_id: int) -> bool:
        user_settings, preferences = await self._load(user_id)
        added = preferences.exclude_exercise(exercise_id)
        if added:
            await self._store(user_settings, preferences)
            logger.info("exercise_excluded", user_id=user_id, exercise_id=exercise_id)
        return added

    async def set_custom_rest_time(self, user_id: int, exercise_id: int, seconds: int | None) -> UserPreferences:
        """Set a per-exercise rest timer; ``None`` goes back to the default."""
        if seconds is not None and seconds < 0:
            raise ValidationError("seconds", "must not be negative")
        user_settings, preferences = await self._load(user_id)
        if seconds is None:
            preferences.custom_timers.pop(exercise_id, None)
        else:
            preferences.custom_timers[exercise_id] = seconds
        await self._store(user_settings, preferences)
        return preferences

    async def rest_time_for(self, user_id: int, exercise: Exercise) -> int:
        preferences = await self.get_preferences(user_id)
        return preferences.rest_time_for(exercise.id, bool(exercise.compound))
