"""User CRUD and listing. Every operation takes its store explicitly."""

from typing import Any

from registry.core.logging import get_logger
from registry.core.pagination import PageRequest, PageResult, Paginator
from registry.models.user import UserRecord
from registry.services.validation import validate_user_payload
from registry.stores.base import UserStore

log = get_logger(__name__)


async def list_users(store: UserStore, request: PageRequest) -> PageResult:
    page = await Paginator(store).paginate(request)
    log.debug(
        "users_listed",
        page=request.page,
        limit=request.limit,
        sort=request.sort_field,
        direction=request.sort_direction.value,
        returned=len(page.records),
        total=page.total_records,
    )
    return page


async def get_user(store: UserStore, user_id: str) -> UserRecord | None:
    return await store.get(user_id)


async def create_user(store: UserStore, payload: Any) -> UserRecord:
    fields = validate_user_payload(payload)
    user = await store.insert(fields)
    log.info("user_created", user_id=user.id, email=user.email)
    return user


async def update_user(store: UserStore, user_id: str, payload: Any) -> UserRecord | None:
    """Return the post-update record, or None when ``user_id`` does not exist."""
    fields = validate_user_payload(payload, partial=True)
    if not fields:
        return await store.get(user_id)
    user = await store.update(user_id, fields)
    if user:
        log.info("user_updated", user_id=user.id, fields=sorted(fields))
    return user


async def delete_user(store: UserStore, user_id: str) -> None:
    await store.delete(user_id)
    log.info("user_deleted", user_id=user_id)
