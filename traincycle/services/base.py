from typing import Any, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from traincycle.core.exceptions import NotFoundError

T = TypeVar("T")


class BaseService:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def _get_or_404(self, model: type[T], id: int, error_msg: str | None = None) -> T:
        instance = await self._session.get(model, id)
        if instance is None:
            entity_name = model.__name__
            raise NotFoundError(
                entity_name,
                error_msg or f"{entity_name} {id} not found",
                {"id": id},
            )
        return instance

    async def _get_owned_or_404(self, model: type[T], id: int, user_id: int) -> T:
        """Like ``_get_or_404``, but rows of other users are reported as missing."""
        instance: Any = await self._get_or_404(model, id)
        if instance.user_id != user_id:
            entity_name = model.__name__
            raise NotFoundError(entity_name, f"{entity_name} {id} not found", {"id": id})
        return instance
