"""MongoDB store built on Beanie documents."""

from typing import Any

import pymongo
from beanie import PydanticObjectId, UpdateResponse
from beanie.operators import Set
from bson.errors import InvalidId
from pymongo.errors import DuplicateKeyError

from registry.core.exceptions import ValidationFailure
from registry.models.user import User, UserRecord
from registry.stores.base import SortDirection, UserStore

_DIRECTIONS = {
    SortDirection.ASC: pymongo.ASCENDING,
    SortDirection.DESC: pymongo.DESCENDING,
}


def _object_id(user_id: str) -> PydanticObjectId | None:
    try:
        return PydanticObjectId(user_id)
    except (InvalidId, TypeError):
        return None


def mongo_sort_key(sort_field: str) -> str:
    """Map a record field name to its document key (``id`` is stored as ``_id``)."""
    return "_id" if sort_field == "id" else sort_field


def _duplicate_email(exc: DuplicateKeyError) -> ValidationFailure:
    email = (exc.details or {}).get("keyValue", {}).get("email")
    message = f"email '{email}' is already in use" if email else "email is already in use"
    return ValidationFailure.single("email", "unique", message)


class MongoUserStore(UserStore):
    """Requires ``init_beanie`` to have run (see ``registry.db.init``).

    MongoDB gives no stable order for documents with equal sort values, so
    pages can interleave ties differently between requests.
    """

    async def insert(self, fields: dict[str, Any]) -> UserRecord:
        user = User(**fields)
        try:
            await user.insert()
        except DuplicateKeyError as e:
            raise _duplicate_email(e) from e
        return UserRecord.from_document(user)

    async def _get_document(self, user_id: str) -> User | None:
        oid = _object_id(user_id)
        if oid is None:
            return None
        return await User.get(oid)

    async def get(self, user_id: str) -> UserRecord | None:
        user = await self._get_document(user_id)
        return UserRecord.from_document(user) if user else None

    async def update(self, user_id: str, fields: dict[str, Any]) -> UserRecord | None:
        oid = _object_id(user_id)
        if oid is None:
            return None
        # no upsert: a deleted id must stay deleted
        try:
            user = await User.find_one(User.id == oid).update(
                Set(fields),
                response_type=UpdateResponse.NEW_DOCUMENT,
            )
        except DuplicateKeyError as e:
            raise _duplicate_email(e) from e
        return UserRecord.from_document(user) if user else None

    async def delete(self, user_id: str) -> None:
        user = await self._get_document(user_id)
        if user:
            await user.delete()

    async def count(self) -> int:
        return await User.find_all().count()

    async def fetch_ordered(
        self,
        sort_field: str,
        sort_direction: SortDirection,
        offset: int,
        limit: int,
    ) -> list[UserRecord]:
        docs = await User.find_all(
            sort=[(mongo_sort_key(sort_field), _DIRECTIONS[sort_direction])],
            skip=offset,
            limit=limit,
        ).to_list()
        return [UserRecord.from_document(d) for d in docs]
