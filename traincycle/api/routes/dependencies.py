"""Shared dependencies for API routes."""
from fastapi import Header

from traincycle.config.settings import get_settings

settings = get_settings()


async def get_current_user_id(
    x_user_id: int | None = Header(default=None, alias="X-User-Id"),
) -> int:
    """Current user from the ``X-User-Id`` header.

    Authentication happens upstream of this service; without the header the
    configured default user is used.
    """
    if x_user_id is None:
        return settings.default_user_id
    return x_user_id
