"""Tests for the user settings service and the preference document."""
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from traincycle.core.exceptions import NotFoundError, ValidationError
from traincycle.models import UserSettings
from traincycle.schemas.settings import SkipRecord, UserPreferences
from traincycle.services.user_settings import UserSettingsService

NOW = datetime(2025, 3, 1, 18, 0)


class TestUserPreferences:
    def test_defaults(self):
        preferences = UserPreferences()
        assert preferences.workout_duration == 60
        assert preferences.rest_time.compound == 150
        assert preferences.rest_time.isolation == 90
        assert preferences.warmup_sets.compound == 2
        assert preferences.skipped_sessions == []

    def test_unknown_keys_dropped(self):
        preferences = UserPreferences.model_validate({"theme": "dark", "workout_duration": 45})
        assert preferences.workout_duration == 45
        assert "theme" not in preferences.model_dump()

    def test_legacy_skip_keys(self):
        skip = SkipRecord.model_validate({"split": 2, "session": 1, "skipped_at": "2025-03-01T10:00:00Z"})
        assert skip.split_id == 2
        assert skip.session_index == 1
        assert skip.skipped_at == datetime(2025, 3, 1, 10, 0)

    def test_skip_needs_exactly_one_context(self):
        with pytest.raises(PydanticValidationError):
            SkipRecord(session_index=0, skipped_at=NOW)
        with pytest.raises(PydanticValidationError):
            SkipRecord(split_id=1, routine_id=2, session_index=0, skipped_at=NOW)

    def test_aware_skip_time_becomes_naive_utc(self):
        aware = datetime(2025, 3, 1, 20, 0, tzinfo=timezone(timedelta(hours=2)))
        skip = SkipRecord(split_id=1, session_index=0, skipped_at=aware)
        assert skip.skipped_at == datetime(2025, 3, 1, 18, 0)

    def test_unreadable_skips_are_dropped(self):
        preferences = UserPreferences.model_validate({
            "workout_duration": 50,
            "skipped_sessions": [
                {"split": 1, "session": 0},
                {"split_id": 1, "routine_id": 2, "session_index": 0, "skipped_at": "2025-03-01T10:00:00"},
                "garbage",
                {"split": 2, "session": 1, "skipped_at": "2025-03-01T10:00:00"},
            ],
        })
        assert preferences.workout_duration == 50
        assert [(s.split_id, s.session_index) for s in preferences.skipped_sessions] == [(2, 1)]

    def test_non_list_skips_become_empty(self):
        assert UserPreferences.model_validate({"skipped_sessions": {"split": 1}}).skipped_sessions == []

    def test_custom_timer_wins(self):
        preferences = UserPreferences(custom_timers={7: 45})
        assert preferences.rest_time_for(7, compound=True) == 45
        assert preferences.rest_time_for(8, compound=True) == 150
        assert preferences.rest_time_for(8, compound=False) == 90


class TestUserSettingsService:
    @pytest.mark.asyncio
    async def test_unknown_user(self, async_db_session):
        with pytest.raises(NotFoundError):
            await UserSettingsService(async_db_session).get_preferences(404)

    @pytest.mark.asyncio
    async def test_settings_row_created_on_demand(self, async_db_session, test_user):
        row = await async_db_session.get(UserSettings, test_user.id)
        await async_db_session.delete(row)
        await async_db_session.flush()

        preferences = await UserSettingsService(async_db_session).get_preferences(test_user.id)
        assert preferences == UserPreferences()

    @pytest.mark.asyncio
    async def test_skip_keeps_latest_per_split(self, async_db_session, test_user):
        service = UserSettingsService(async_db_session)
        await service.record_skip(test_user.id, 0, split_id=1, skipped_at=NOW)
        await service.record_skip(test_user.id, 2, routine_id=9, skipped_at=NOW)
        await service.record_skip(test_user.id, 1, split_id=1, skipped_at=NOW + timedelta(hours=1))

        skips = await service.get_skipped_sessions(test_user.id)
        assert len(skips) == 2
        latest = await service.last_skip_for_split(test_user.id, 1)
        assert latest.session_index == 1
        assert latest.skipped_at == NOW + timedelta(hours=1)
        assert await service.last_skip_for_split(test_user.id, 2) is None

    @pytest.mark.asyncio
    async def test_legacy_stored_skips_are_read(self, async_db_session, test_user):
        row = await async_db_session.get(UserSettings, test_user.id)
        row.preferences = {"skipped_sessions": [{"split": 3, "session": 2, "skipped_at": "2025-03-01T09:00:00"}]}
        await async_db_session.flush()

        skip = await UserSettingsService(async_db_session).last_skip_for_split(test_user.id, 3)
        assert skip.session_index == 2

    @pytest.mark.asyncio
    async def test_exclude_is_idempotent(self, async_db_session, test_user):
        service = UserSettingsService(async_db_session)
        assert await service.exclude_exercise(test_user.id, 5) is True
        assert await service.exclude_exercise(test_user.id, 5) is False
        assert (await service.get_preferences(test_user.id)).excluded_exercises == [5]

    @pytest.mark.asyncio
    async def test_custom_rest_time(self, async_db_session, test_user, exercises):
        service = UserSettingsService(async_db_session)
        bench = exercises["bench"]

        await service.set_custom_rest_time(test_user.id, bench.id, 200)
        assert await service.rest_time_for(test_user.id, bench) == 200

        await service.set_custom_rest_time(test_user.id, bench.id, None)
        assert await service.rest_time_for(test_user.id, bench) == 150
        assert await service.rest_time_for(test_user.id, exercises["curl"]) == 90

    @pytest.mark.asyncio
    async def test_negative_rest_time_rejected(self, async_db_session, test_user):
        with pytest.raises(ValidationError):
            await UserSettingsService(async_db_session).set_custom_rest_time(test_user.id, 1, -5)

    @pytest.mark.asyncio
    async def test_update_preferences(self, async_db_session, test_user):
        service = UserSettingsService(async_db_session)
        await service.exclude_exercise(test_user.id, 3)

        updated = await service.update_preferences(test_user.id, {"workout_duration": 45})

        assert updated.workout_duration == 45
        assert updated.excluded_exercises == [3]
        assert (await service.get_preferences(test_user.id)).workout_duration == 45

    @pytest.mark.asyncio
    async def test_update_preferences_rejects_managed_fields(self, async_db_session, test_user):
        with pytest.raises(ValidationError):
            await UserSettingsService(async_db_session).update_preferences(
                test_user.id, {"excluded_exercises": [1]}
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("label,stored", [
        ("Improve strength", "strength"),
        ("  Build   Muscle mass ", "hypertrophy"),
        ("fat-loss", "fat_loss"),
        ("juggling", "general_fitness"),
    ])
    async def test_goal_stored_canonically(self, async_db_session, test_user, label, stored):
        user_settings = await UserSettingsService(async_db_session).set_fitness_goal(test_user.id, label)
        assert user_settings.fitness_goal == stored

    @pytest.mark.asyncio
    async def test_select_split(self, async_db_session, test_user):
        service = UserSettingsService(async_db_session)
        await service.select_split(test_user.id, 4)
        assert (await service.get_settings(test_user.id)).selected_split_id == 4
        await service.select_split(test_user.id, None)
        assert (await service.get_settings(test_user.id)).selected_split_id is None
