"""Shared FastAPI dependencies."""

from registry.stores.base import UserStore, get_store


async def get_user_store() -> UserStore:
    """Dependency: the process-wide store; override in tests."""
    return get_store()
