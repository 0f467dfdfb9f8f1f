from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status

from registry.core.config import get_settings
from registry.core.exceptions import NotFoundError
from registry.core.pagination import PageRequest
from registry.deps import get_user_store
from registry.services import users as users_service
from registry.stores.base import UserStore

router = APIRouter()


@router.get("")
async def users_list(
    page: str | None = Query(None),
    limit: str | None = Query(None),
    sort: str | None = Query(None),
    sort_direction: str | None = Query(None, alias="sortDirection"),
    store: UserStore = Depends(get_user_store),
):
    """Paginated listing. Malformed page/limit fall back to defaults instead of failing."""
    settings = get_settings()
    request = PageRequest.from_query(
        page=page,
        limit=limit,
        sort=sort,
        sort_direction=sort_direction,
        default_limit=settings.default_page_limit,
        default_sort_field=settings.default_sort_field,
    )
    result = await users_service.list_users(store, request)
    return result.to_response()


@router.get("/{user_id}")
async def user_get(user_id: str, store: UserStore = Depends(get_user_store)):
    user = await users_service.get_user(store, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user.to_response()


@router.post("", status_code=status.HTTP_201_CREATED)
async def user_create(
    body: Any = Body(...),
    store: UserStore = Depends(get_user_store),
):
    user = await users_service.create_user(store, body)
    return user.to_response()


@router.patch("/{user_id}")
async def user_update(
    user_id: str,
    body: Any = Body(...),
    store: UserStore = Depends(get_user_store),
):
    user = await users_service.update_user(store, user_id, body)
    if not user:
        raise NotFoundError("User not found")
    return user.to_response()


@router.delete("/{user_id}")
async def user_delete(user_id: str, store: UserStore = Depends(get_user_store)):
    """Idempotent: deleting an unknown id still confirms."""
    await users_service.delete_user(store, user_id)
    return {"message": "User deleted"}
