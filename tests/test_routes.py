"""Tests for the panel HTTP surface."""

import json
from collections.abc import Generator

import httpx
import pytest
from fastapi.testclient import TestClient

from userpanel import configure_fastapi_app
from userpanel.auth import Actor
from userpanel.common import Permission
from userpanel.config import AppConfig

BASE_URL = "https://tenant.example"


class FakeTenantApi:
    """In-memory stand-in for the remote user service."""

    def __init__(self) -> None:
        self.users = [
            {"id": "1", "email": "a@x", "role": None},
            {"id": "2", "email": "b@x", "role": {"name": "member"}},
        ]
        self.roles = [
            {"name": "owner", "rank": 0},
            {"name": "admin", "rank": 1},
            {"name": "member", "rank": 2},
        ]
        self.fail_deletes = False
        self.calls: list[tuple[str, str]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls.append((request.method, path))

        if request.method == "GET" and path == "/users":
            return httpx.Response(200, json=self.users)
        if request.method == "GET" and path == "/roles":
            return httpx.Response(200, json=self.roles)

        user_id = path.split("/")[2]
        if request.method == "PUT":
            role_name = json.loads(request.content)["roleName"]
            for user in self.users:
                if user["id"] == user_id:
                    user["role"] = {"name": role_name}
            return httpx.Response(204)
        if request.method == "DELETE":
            if self.fail_deletes:
                return httpx.Response(500, json={"detail": "Deletion failed"})
            self.users = [user for user in self.users if user["id"] != user_id]
            return httpx.Response(204)

        return httpx.Response(404)


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(
        api_base_url=BASE_URL,
        api_timeout=5,
        logging_level=None,
        root_path="",
        use_nickname=False,
        owner_role_name="owner",
        role_ranks={"owner": 0, "admin": 1, "member": 2},
        secret_key="s" * 64,
        algorithm="HS512",
        access_token_expire_minutes=60,
    )


@pytest.fixture
def tenant_api() -> FakeTenantApi:
    return FakeTenantApi()


@pytest.fixture
def client(config: AppConfig, tenant_api: FakeTenantApi) -> Generator[TestClient]:
    api_client = httpx.AsyncClient(
        base_url=BASE_URL,
        transport=httpx.MockTransport(tenant_api),
    )
    app = configure_fastapi_app(config, api_client)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(config: AppConfig, make_actor) -> dict[str, str]:
    actor: Actor = make_actor(
        "0",
        "admin",
        Permission.MANAGE_ROLE,
        Permission.DELETE_USER,
    )
    token = config.session_manager.create_access_token(actor)
    return {"Authorization": f"Bearer {token}"}


def test_requires_credentials(client: TestClient) -> None:
    response = client.get("/panel", headers={"Authorization": "Bearer nope"})

    assert response.status_code == 401


def test_get_panel(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.get("/panel", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ready"
    assert [row["id"] for row in body["users"]] == ["1", "2"]
    assert body["confirmation"]["open"] is False


def test_load_error(
    client: TestClient,
    auth_headers: dict[str, str],
    tenant_api: FakeTenantApi,
) -> None:
    tenant_api.users = "not a list"  # type: ignore[assignment]

    body = client.get("/panel", headers=auth_headers).json()

    assert body["status"] == "error"
    assert body["users"] == []
    assert client.get("/panel/notifications", headers=auth_headers).json() == []


def test_bind_role(
    client: TestClient,
    auth_headers: dict[str, str],
    tenant_api: FakeTenantApi,
) -> None:
    client.get("/panel", headers=auth_headers)
    gets_before = len(tenant_api.calls)

    response = client.put(
        "/panel/users/1/role",
        data={"role_name": "admin"},
        headers=auth_headers,
    )

    assert response.json() == {"success": True, "user_id": "1", "message": None}
    assert tenant_api.calls[gets_before:] == [("PUT", "/users/1/role")]

    body = client.get("/panel", headers=auth_headers).json()
    assert body["users"][0]["role"] == "admin"

    notifications = client.get("/panel/notifications", headers=auth_headers).json()
    assert notifications == [
        {"kind": "success", "message": "Success role binding", "icon": "check"},
    ]


def test_bind_role_not_offered(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.put(
        "/panel/users/2/role",
        data={"role_name": "owner"},
        headers=auth_headers,
    )

    assert response.status_code == 400


def test_delete_flow(
    client: TestClient,
    auth_headers: dict[str, str],
    tenant_api: FakeTenantApi,
) -> None:
    staged = client.post("/panel/users/2/delete", headers=auth_headers).json()
    assert staged["open"] is True
    assert staged["body"] == "b@x"

    result = client.post("/panel/delete/confirm", headers=auth_headers).json()
    assert result["success"] is True

    body = client.get("/panel", headers=auth_headers).json()
    assert [row["id"] for row in body["users"]] == ["1"]
    assert body["confirmation"]["open"] is False
    assert ("DELETE", "/users/2") in tenant_api.calls


def test_failed_delete_stays_staged(
    client: TestClient,
    auth_headers: dict[str, str],
    tenant_api: FakeTenantApi,
) -> None:
    tenant_api.fail_deletes = True
    client.post("/panel/users/2/delete", headers=auth_headers)

    result = client.post("/panel/delete/confirm", headers=auth_headers).json()

    assert result == {"success": False, "user_id": "2", "message": "Deletion failed"}
    body = client.get("/panel", headers=auth_headers).json()
    assert body["confirmation"]["open"] is True
    assert body["confirmation"]["user_id"] == "2"
    notifications = client.get("/panel/notifications", headers=auth_headers).json()
    assert [n["kind"] for n in notifications] == ["failure"]


def test_cancel_delete(
    client: TestClient,
    auth_headers: dict[str, str],
    tenant_api: FakeTenantApi,
) -> None:
    client.post("/panel/users/2/delete", headers=auth_headers)

    response = client.post("/panel/delete/cancel", headers=auth_headers)

    assert response.json()["open"] is False
    assert not any(method == "DELETE" for method, _ in tenant_api.calls)


def test_confirm_without_staging(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.post("/panel/delete/confirm", headers=auth_headers)

    assert response.status_code == 409
