"""
tests.test_users_api

Users service driven in-process (no gateway): bearer-token fallback path and
trusted identity header path.
"""

from __future__ import annotations

import json
import threading

import httpx
import pytest
from fastapi import FastAPI

from orderdesk.auth.passwords import PasswordHasher
from orderdesk.storage.json_file import JsonCollection
from orderdesk.users.models import LoginRequest, RegisterRequest
from orderdesk.users.repository import UserRepo
from orderdesk.users.service import UserService

from .conftest import bearer

PASSWORD = "pass1234"


async def register(client: httpx.AsyncClient, email: str, name: str = "User") -> dict:
    r = await client.post("/register", json={"email": email, "name": name, "password": PASSWORD})
    assert r.status_code == 201, r.text
    return r.json()["data"]


async def login(client: httpx.AsyncClient, email: str) -> str:
    r = await client.post("/login", json={"email": email, "password": PASSWORD})
    assert r.status_code == 200, r.text
    return r.json()["data"]["token"]


@pytest.mark.asyncio
async def test_register_hides_verifier_and_defaults_role(users_client: httpx.AsyncClient) -> None:
    user = await register(users_client, "alice@example.com", "Alice")

    assert user["email"] == "alice@example.com"
    assert user["roles"] == ["user"]
    assert "passwordHash" not in user
    assert "id" in user and "createdAt" in user


@pytest.mark.asyncio
async def test_duplicate_email_is_case_insensitive(users_client: httpx.AsyncClient) -> None:
    await register(users_client, "bob@example.com")

    r = await users_client.post(
        "/register", json={"email": "BOB@example.com", "name": "Bob", "password": PASSWORD}
    )

    assert r.status_code == 409
    assert r.json() == {
        "success": False,
        "error": {"code": "EMAIL_EXISTS", "message": "User with this email already exists"},
    }


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"email": "not-an-email", "name": "X", "password": PASSWORD},
        {"email": "x@example.com", "name": "X", "password": "short"},
        {"email": "x@example.com", "password": PASSWORD},
    ],
)
async def test_register_validation(users_client: httpx.AsyncClient, body: dict) -> None:
    r = await users_client.post("/register", json=body)

    assert r.status_code == 400
    assert r.json()["success"] is False
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_missing_and_malformed_body_are_validation_errors(
    users_client: httpx.AsyncClient,
) -> None:
    r = await users_client.post("/login")
    assert r.status_code == 400

    r = await users_client.post(
        "/login", content=b"{oops", headers={"content-type": "application/json"}
    )
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_login_failures_look_the_same(users_client: httpx.AsyncClient) -> None:
    await register(users_client, "carol@example.com")

    wrong_pw = await users_client.post(
        "/login", json={"email": "carol@example.com", "password": "nope-nope"}
    )
    unknown = await users_client.post(
        "/login", json={"email": "nobody@example.com", "password": PASSWORD}
    )

    assert wrong_pw.status_code == unknown.status_code == 401
    assert wrong_pw.json() == unknown.json()
    assert wrong_pw.json()["error"]["code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_me_via_bearer_token(users_client: httpx.AsyncClient) -> None:
    user = await register(users_client, "dave@example.com")
    token = await login(users_client, "DAVE@example.com")

    r = await users_client.get("/me", headers=bearer(token))

    assert r.status_code == 200
    assert r.json()["data"]["id"] == user["id"]


@pytest.mark.asyncio
async def test_me_via_trusted_identity_header(users_client: httpx.AsyncClient) -> None:
    user = await register(users_client, "erin@example.com")

    r = await users_client.get(
        "/me", headers={"x-user": json.dumps({"id": user["id"], "roles": ["user"]})}
    )

    assert r.status_code == 200
    assert r.json()["data"]["email"] == "erin@example.com"


@pytest.mark.asyncio
async def test_me_without_identity_is_unauthorized(users_client: httpx.AsyncClient) -> None:
    r = await users_client.get("/me")

    assert r.status_code == 401
    assert r.json()["error"]["code"] == "UNAUTHORIZED"


@pytest.mark.asyncio
async def test_admin_routes(users_client: httpx.AsyncClient, mint) -> None:
    alice = await register(users_client, "alice2@example.com")
    user_token = await login(users_client, "alice2@example.com")
    admin_token = mint("admin-1", "user", "admin")

    r = await users_client.get("/", headers=bearer(user_token))
    assert r.status_code == 403
    assert r.json()["error"]["code"] == "FORBIDDEN"

    r = await users_client.get("/", headers=bearer(admin_token))
    assert r.status_code == 200
    assert [u["email"] for u in r.json()["data"]] == ["alice2@example.com"]
    assert all("passwordHash" not in u for u in r.json()["data"])

    r = await users_client.patch(
        f"/{alice['id']}/roles", json={"roles": ["admin", "admin"]}, headers=bearer(admin_token)
    )
    assert r.status_code == 200
    assert r.json()["data"]["roles"] == ["user", "admin"]

    r = await users_client.patch(
        "/missing/roles", json={"roles": ["admin"]}, headers=bearer(admin_token)
    )
    assert r.status_code == 404

    r = await users_client.patch(
        f"/{alice['id']}/roles", json={"roles": []}, headers=bearer(admin_token)
    )
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_roles_in_token_are_a_snapshot(users_client: httpx.AsyncClient, mint) -> None:
    frank = await register(users_client, "frank@example.com")
    old_token = await login(users_client, "frank@example.com")

    r = await users_client.patch(
        f"/{frank['id']}/roles",
        json={"roles": ["user", "admin"]},
        headers=bearer(mint("admin-1", "user", "admin")),
    )
    assert r.status_code == 200

    # The already-issued token still carries the old roles.
    r = await users_client.get("/", headers=bearer(old_token))
    assert r.status_code == 403

    new_token = await login(users_client, "frank@example.com")
    r = await users_client.get("/", headers=bearer(new_token))
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_seed_admin_only_on_empty_store(users_app: FastAPI, users_client) -> None:
    svc = users_app.state.users

    seeded = await svc.ensure_seed_admin(email="admin@example.com", password="admin123")
    assert seeded is not None and "admin" in seeded.roles

    again = await svc.ensure_seed_admin(email="other@example.com", password="admin123")
    assert again is None

    token = await login_as(users_client, "admin@example.com", "admin123")
    r = await users_client.get("/", headers=bearer(token))
    assert r.status_code == 200


async def login_as(client: httpx.AsyncClient, email: str, password: str) -> str:
    r = await client.post("/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return r.json()["data"]["token"]


class ThreadRecordingHasher(PasswordHasher):
    def __init__(self) -> None:
        super().__init__()
        self.threads: list[int] = []

    def hash(self, plain_password: str) -> str:
        self.threads.append(threading.get_ident())
        return super().hash(plain_password)

    def verify(self, plain_password: str, password_hash: str) -> bool:
        self.threads.append(threading.get_ident())
        return super().verify(plain_password, password_hash)


@pytest.mark.asyncio
async def test_password_hashing_runs_off_the_event_loop(tmp_path, jwt_cfg) -> None:
    hasher = ThreadRecordingHasher()
    svc = UserService(
        repo=UserRepo(JsonCollection(tmp_path / "users.json")), hasher=hasher, jwt_cfg=jwt_cfg
    )

    await svc.register(RegisterRequest(email="bob@example.com", name="Bob", password=PASSWORD))
    result = await svc.login(LoginRequest(email="bob@example.com", password=PASSWORD))

    assert result["token"]
    assert len(hasher.threads) == 2
    loop_thread = threading.get_ident()
    assert all(t != loop_thread for t in hasher.threads)
