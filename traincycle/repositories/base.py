from abc import ABC, abstractmethod
from typing import Generic, TypeVar

ModelT = TypeVar("ModelT")
IdT = TypeVar("IdT")


class Repository(ABC, Generic[ModelT, IdT]):
    """Minimal CRUD contract shared by the repositories."""

    @abstractmethod
    async def get(self, id: IdT) -> ModelT | None:
        ...

    @abstractmethod
    async def create(self, entity: ModelT) -> ModelT:
        ...

    @abstractmethod
    async def update(self, id: IdT, updates: dict) -> ModelT | None:
        ...

    @abstractmethod
    async def delete(self, id: IdT) -> bool:
        ...
