import os
from typing import Generator

import pytest
from fastapi.testclient import TestClient

# Tests never touch MongoDB
os.environ["STORE_BACKEND"] = "memory"

from registry.deps import get_user_store  # noqa: E402
from registry.stores.memory import InMemoryUserStore  # noqa: E402


@pytest.fixture
def store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def client(store: InMemoryUserStore) -> Generator[TestClient, None, None]:
    from registry.main import app
    app.dependency_overrides[get_user_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
