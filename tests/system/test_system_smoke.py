"""
System smoke test: full API flow in-process with SQLite.
Verifies health, registration, login, lookup, profile, address and phone
updates, and delete through the HTTP surface.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.database import get_db
from src.main import app


USERS = "/api/v1/users"

ANA = {
    "name": "Ana",
    "email": "ana@x.com",
    "password": "s3nha",
    "addresses": [{"street": "Rua das Flores", "number": "42", "city": "Curitiba", "state": "PR"}],
    "phones": [{"number": "999990000", "area_code": "41"}],
}


@pytest_asyncio.fixture
async def client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """Async client over the shared in-memory database."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as ac:
            yield ac
    finally:
        app.dependency_overrides.pop(get_db, None)


async def _login(client: AsyncClient, email: str = "ana@x.com", password: str = "s3nha") -> dict:
    r = await client.post(f"{USERS}/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"
    assert "X-Request-ID" in r.headers


@pytest.mark.asyncio
async def test_routing_errors(client: AsyncClient):
    r = await client.get("/api/v1/nothing-here", headers={"X-Request-ID": "req-404"})
    assert r.status_code == 404
    assert r.json() == {"detail": "Not Found"}
    assert r.headers["X-Request-ID"] == "req-404"

    r = await client.patch(USERS)
    assert r.status_code == 405
    assert r.json() == {"detail": "Method Not Allowed"}
    assert "X-Request-ID" in r.headers


@pytest.mark.asyncio
async def test_register_and_conflict(client: AsyncClient):
    r = await client.post(USERS, json=ANA)
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["email"] == "ana@x.com"
    assert body["password"].startswith("$2b$")
    assert body["addresses"][0]["user_id"] == body["id"]
    assert body["phones"][0]["area_code"] == "41"

    r = await client.post(USERS, json=ANA)
    assert r.status_code == 409
    assert r.json()["email"] == "ana@x.com"
    assert r.json()["code"] == "conflict"


@pytest.mark.asyncio
async def test_register_validation(client: AsyncClient):
    r = await client.post(USERS, json={"name": "Ana", "email": "not-an-email", "password": "s3nha"})
    assert r.status_code == 422
    assert r.json()["detail"] == "Validation error"


@pytest.mark.asyncio
async def test_login(client: AsyncClient):
    await client.post(USERS, json=ANA)

    r = await client.post(f"{USERS}/login", json={"email": "ana@x.com", "password": "s3nha"})
    assert r.status_code == 200
    assert r.json()["token_type"] == "bearer"
    assert r.json()["expires_in"] == 3600

    r = await client.post(f"{USERS}/login", json={"email": "ana@x.com", "password": "wrong"})
    assert r.status_code == 401
    assert r.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_lookup_by_email(client: AsyncClient):
    await client.post(USERS, json=ANA)

    r = await client.get(USERS, params={"email": "ana@x.com"})
    assert r.status_code == 200
    assert r.json()["name"] == "Ana"

    r = await client.get(USERS, params={"email": "nobody@x.com"})
    assert r.status_code == 404
    assert r.json()["code"] == "not_found"


@pytest.mark.asyncio
async def test_profile_update_requires_bearer(client: AsyncClient):
    await client.post(USERS, json=ANA)

    r = await client.put(USERS, json={"name": "x"})
    assert r.status_code == 401
    assert r.headers["WWW-Authenticate"] == "Bearer"

    r = await client.put(USERS, json={"name": "x"}, headers={"Authorization": "Bearer"})
    assert r.status_code == 401
    assert r.json()["code"] == "malformed_authorization_header"

    r = await client.put(USERS, json={"name": "x"}, headers={"Authorization": "Bearer abc.def.ghi"})
    assert r.status_code == 401
    assert r.json()["code"] == "invalid_token"


@pytest.mark.asyncio
async def test_profile_update(client: AsyncClient):
    registered = (await client.post(USERS, json=ANA)).json()
    headers = await _login(client)

    r = await client.put(USERS, json={"name": "Ana Silva"}, headers=headers)
    assert r.status_code == 200, r.text
    assert r.json()["name"] == "Ana Silva"
    assert r.json()["password"] == registered["password"]

    r = await client.put(USERS, json={"password": "n0va"}, headers=headers)
    assert r.status_code == 200
    await _login(client, password="n0va")
    r = await client.post(f"{USERS}/login", json={"email": "ana@x.com", "password": "s3nha"})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_addresses_and_phones(client: AsyncClient):
    await client.post(USERS, json=ANA)
    headers = await _login(client)

    r = await client.post(f"{USERS}/addresses", json={"street": "Rua Nova", "city": "Londrina"}, headers=headers)
    assert r.status_code == 201, r.text
    address = r.json()

    r = await client.put(f"{USERS}/addresses", params={"id": address["id"]}, json={"number": "7"})
    assert r.status_code == 200
    assert r.json()["number"] == "7"
    assert r.json()["street"] == "Rua Nova"

    r = await client.post(f"{USERS}/phones", json={"number": "33334444", "area_code": "43"}, headers=headers)
    assert r.status_code == 201
    phone = r.json()

    r = await client.put(f"{USERS}/phones", params={"id": phone["id"]}, json={"area_code": "11"})
    assert r.status_code == 200
    assert r.json()["number"] == "33334444"

    r = await client.put(f"{USERS}/addresses", params={"id": 9999}, json={"number": "1"})
    assert r.status_code == 404
    r = await client.put(f"{USERS}/phones", params={"id": 9999}, json={"number": "1"})
    assert r.status_code == 404

    r = await client.get(USERS, params={"email": "ana@x.com"})
    assert len(r.json()["addresses"]) == 2
    assert len(r.json()["phones"]) == 2


@pytest.mark.asyncio
async def test_delete(client: AsyncClient):
    await client.post(USERS, json=ANA)

    r = await client.delete(f"{USERS}/ana@x.com")
    assert r.status_code == 204

    r = await client.get(USERS, params={"email": "ana@x.com"})
    assert r.status_code == 404

    r = await client.delete(f"{USERS}/ana@x.com")
    assert r.status_code == 204
