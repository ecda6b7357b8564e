from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from traincycle.models.user import UserSettings


class UserSettingsRepository:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, user_id: int) -> UserSettings | None:
        result = await self._session.execute(
            select(UserSettings).where(UserSettings.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_or_create(self, user_id: int) -> UserSettings:
        settings = await self.get(user_id)
        if settings is None:
            settings = UserSettings(user_id=user_id, preferences={})
            self._session.add(settings)
            await self._session.flush()
        return settings

    async def update(self, settings: UserSettings, updates: dict) -> UserSettings:
        for key, value in updates.items():
            if hasattr(settings, key):
                setattr(settings, key, value)
        await self._session.flush()
        return settings
