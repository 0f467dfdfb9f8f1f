import asyncio

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from registry.deps import get_user_store
from registry.stores.memory import InMemoryUserStore


def _seed(client, n: int) -> list[dict]:
    out = []
    for i in range(1, n + 1):
        r = client.post("/v1/users", json={"name": f"user-{i:02d}", "email": f"u{i}@example.com"})
        assert r.status_code == 201
        out.append(r.json())
    return out


def test_list_defaults(client):
    _seed(client, 12)
    r = client.get("/v1/users")
    assert r.status_code == 200
    body = r.json()
    assert set(body) == {"records", "currentPage", "totalPages", "totalRecords"}
    assert len(body["records"]) == 10
    assert body["currentPage"] == 1
    assert body["totalPages"] == 2
    assert body["totalRecords"] == 12


def test_list_second_page_sorted_by_name(client):
    _seed(client, 25)
    body = client.get("/v1/users", params={"page": 2, "limit": 10, "sort": "name"}).json()
    assert [u["name"] for u in body["records"]] == [f"user-{i:02d}" for i in range(11, 21)]
    assert (body["currentPage"], body["totalPages"], body["totalRecords"]) == (2, 3, 25)


def test_list_past_last_page(client):
    _seed(client, 5)
    body = client.get("/v1/users", params={"page": 10, "limit": 10}).json()
    assert body == {"records": [], "currentPage": 10, "totalPages": 1, "totalRecords": 5}


def test_list_huge_page_is_empty_window(client):
    _seed(client, 5)
    r = client.get("/v1/users", params={"page": "99999999999999999999", "limit": 10})
    assert r.status_code == 200
    body = r.json()
    assert body["records"] == []
    assert (body["totalPages"], body["totalRecords"]) == (1, 5)


def test_list_malformed_params_default(client):
    _seed(client, 3)
    r = client.get("/v1/users", params={"page": "abc", "limit": "-4", "sortDirection": "up"})
    assert r.status_code == 200
    body = r.json()
    assert body["currentPage"] == 1
    assert [u["name"] for u in body["records"]] == ["user-01", "user-02", "user-03"]


def test_list_descending(client):
    _seed(client, 3)
    body = client.get("/v1/users", params={"sortDirection": "desc", "limit": 2}).json()
    assert [u["name"] for u in body["records"]] == ["user-03", "user-02"]
    assert body["totalPages"] == 2


def test_create_returns_record_with_defaults(client):
    r = client.post("/v1/users", json={"name": "Ada", "email": "ada@example.com"})
    assert r.status_code == 201
    body = r.json()
    assert body["id"]
    assert body["role"] == "user"
    assert body["validated"] is False


def test_create_duplicate_email_inserts_nothing(client):
    _seed(client, 2)
    r = client.post("/v1/users", json={"name": "Again", "email": "u1@example.com"})
    assert r.status_code == 400
    body = r.json()
    assert body["message"]
    assert body["details"]["errors"][0] == {
        "field": "email",
        "rule": "unique",
        "message": "email 'u1@example.com' is already in use",
    }
    assert client.get("/v1/users").json()["totalRecords"] == 2


def test_create_invalid_payload(client):
    r = client.post("/v1/users", json={"email": "x@example.com", "role": "root"})
    assert r.status_code == 400
    rules = {(e["field"], e["rule"]) for e in r.json()["details"]["errors"]}
    assert rules == {("name", "required"), ("role", "enum")}


def test_get_user(client):
    created = _seed(client, 1)[0]
    r = client.get(f"/v1/users/{created['id']}")
    assert r.status_code == 200
    assert r.json() == created


def test_get_missing_user(client):
    r = client.get("/v1/users/999")
    assert r.status_code == 404
    assert r.json()["message"] == "User not found"


def test_patch_returns_updated_record(client):
    created = _seed(client, 1)[0]
    r = client.patch(f"/v1/users/{created['id']}", json={"role": "admin", "validated": True})
    assert r.status_code == 200
    assert r.json() == {**created, "role": "admin", "validated": True}
    assert client.get(f"/v1/users/{created['id']}").json()["role"] == "admin"


def test_patch_missing_user(client):
    r = client.patch("/v1/users/999", json={"name": "Nobody"})
    assert r.status_code == 404


def test_patch_invalid_field(client):
    created = _seed(client, 1)[0]
    r = client.patch(f"/v1/users/{created['id']}", json={"id": "7"})
    assert r.status_code == 400
    assert r.json()["details"]["errors"][0]["rule"] == "immutable"


def test_delete_then_not_found(client):
    created = _seed(client, 2)[0]
    r = client.delete(f"/v1/users/{created['id']}")
    assert r.status_code == 200
    assert r.json() == {"message": "User deleted"}
    assert client.get(f"/v1/users/{created['id']}").status_code == 404
    assert client.get("/v1/users").json()["totalRecords"] == 1


def test_delete_missing_is_confirmed(client, store):
    _seed(client, 2)
    before = asyncio.run(store.count())
    r = client.delete("/v1/users/does-not-exist")
    assert r.status_code == 200
    assert r.json() == {"message": "User deleted"}
    assert asyncio.run(store.count()) == before


class _DownStore(InMemoryUserStore):
    async def count(self) -> int:
        raise ServerSelectionTimeoutError("no servers available")


@pytest.fixture
def down_client(client):
    from registry.main import app
    app.dependency_overrides[get_user_store] = lambda: _DownStore()
    return client


def test_backend_failure_is_500(down_client):
    r = down_client.get("/v1/users")
    assert r.status_code == 500
    body = r.json()
    assert body["code"] == "BACKEND_ERROR"
    assert body["message"] == "Storage backend failure"
