"""Dict-backed store for local runs and tests."""

import itertools
from typing import Any

from registry.core.exceptions import ValidationFailure
from registry.models.user import UserRecord
from registry.stores.base import SortDirection, UserStore


class InMemoryUserStore(UserStore):
    """Ids come from a counter and are never reused.

    Sorting is stable: records with equal sort values keep insertion order.
    Records missing the sort field order before all others, as MongoDB
    orders missing values.
    """

    def __init__(self) -> None:
        self._records: dict[str, UserRecord] = {}
        self._ids = itertools.count(1)

    def _check_email(self, email: str, exclude_id: str | None = None) -> None:
        for rec in self._records.values():
            if rec.email == email and rec.id != exclude_id:
                raise ValidationFailure.single("email", "unique", f"email '{email}' is already in use")

    async def insert(self, fields: dict[str, Any]) -> UserRecord:
        self._check_email(fields["email"])
        rec = UserRecord(id=str(next(self._ids)), **fields)
        self._records[rec.id] = rec
        return rec

    async def get(self, user_id: str) -> UserRecord | None:
        return self._records.get(user_id)

    async def update(self, user_id: str, fields: dict[str, Any]) -> UserRecord | None:
        rec = self._records.get(user_id)
        if rec is None:
            return None
        if "email" in fields:
            self._check_email(fields["email"], exclude_id=user_id)
        rec = rec.model_copy(update=fields)
        self._records[user_id] = rec
        return rec

    async def delete(self, user_id: str) -> None:
        self._records.pop(user_id, None)

    async def count(self) -> int:
        return len(self._records)

    async def fetch_ordered(
        self,
        sort_field: str,
        sort_direction: SortDirection,
        offset: int,
        limit: int,
    ) -> list[UserRecord]:
        def key(rec: UserRecord) -> tuple:
            if sort_field == "id":
                return (1, int(rec.id))
            value = getattr(rec, sort_field) if sort_field in UserRecord.model_fields else None
            if value is None:
                return (0, 0)
            return (1, value)

        ordered = sorted(
            self._records.values(),
            key=key,
            reverse=sort_direction == SortDirection.DESC,
        )
        return ordered[offset:offset + limit]
