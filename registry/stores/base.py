from abc import ABC, abstractmethod
from enum import Enum
from functools import lru_cache
from typing import Any

from registry.core.config import get_settings
from registry.models.user import UserRecord


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class UserStore(ABC):
    """Durable collection of users keyed by a store-assigned id.

    Lookups for an id that does not resolve return ``None``; they never
    raise for "not found". ``email`` uniqueness is enforced here and
    reported as ``ValidationFailure``.
    """

    @abstractmethod
    async def insert(self, fields: dict[str, Any]) -> UserRecord:
        """Insert a validated record; return it with its new id."""
        ...

    @abstractmethod
    async def get(self, user_id: str) -> UserRecord | None:
        ...

    @abstractmethod
    async def update(self, user_id: str, fields: dict[str, Any]) -> UserRecord | None:
        """Apply a partial update; return the post-update record or None if absent."""
        ...

    @abstractmethod
    async def delete(self, user_id: str) -> None:
        """Delete by id. Deleting an unknown id is a no-op."""
        ...

    @abstractmethod
    async def count(self) -> int:
        ...

    @abstractmethod
    async def fetch_ordered(
        self,
        sort_field: str,
        sort_direction: SortDirection,
        offset: int,
        limit: int,
    ) -> list[UserRecord]:
        """Return at most ``limit`` records after skipping ``offset``, sorted on one field.

        Order among records with equal sort values is whatever the backend
        natively produces.
        """
        ...


@lru_cache
def get_store() -> UserStore:
    settings = get_settings()
    if settings.store_backend == "memory":
        from registry.stores.memory import InMemoryUserStore
        return InMemoryUserStore()
    from registry.stores.mongo import MongoUserStore
    return MongoUserStore()
