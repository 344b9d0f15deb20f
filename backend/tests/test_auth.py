"""Sign-in, sign-out and the route gates."""
import jwt
import pytest
from httpx import AsyncClient

from office_admin.dependencies import TOKEN_COOKIE
from office_admin.security import ALGORITHM

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD


@pytest.mark.asyncio
async def test_login_sets_cookie_and_redirects(client: AsyncClient, admin) -> None:
    response = await client.post(
        "/auth/login", data={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
    )

    assert response.status_code == 302
    assert response.headers["location"] == "/"
    set_cookie = response.headers["set-cookie"]
    assert f"{TOKEN_COOKIE}=" in set_cookie
    assert "httponly" in set_cookie.lower()
    assert "max-age=3600" in set_cookie.lower()

    dashboard = await client.get("/")
    assert dashboard.status_code == 200
    assert "Dashboard Overview" in dashboard.text


@pytest.mark.asyncio
async def test_json_login_returns_token(client: AsyncClient, admin, settings) -> None:
    response = await client.post(
        "/auth/login", json={"email": ADMIN_EMAIL.upper(), "password": ADMIN_PASSWORD}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    payload = jwt.decode(body["data"]["token"], settings.jwt_secret, algorithms=[ALGORITHM])
    assert payload["id"] == admin.id
    assert TOKEN_COOKIE in response.cookies


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "credentials",
    [
        {"email": ADMIN_EMAIL, "password": "wrong"},
        {"email": "nobody@company.com", "password": ADMIN_PASSWORD},
        {},
    ],
)
async def test_bad_credentials_get_one_generic_answer(
    client: AsyncClient, admin, credentials
) -> None:
    response = await client.post("/auth/login", json=credentials)

    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Invalid email or password"}
    assert TOKEN_COOKIE not in response.cookies


@pytest.mark.asyncio
async def test_failed_form_login_rerenders_page(client: AsyncClient, admin) -> None:
    response = await client.post("/auth/login", data={"email": ADMIN_EMAIL, "password": "nope"})

    assert response.status_code == 401
    assert "Invalid email or password" in response.text
    assert TOKEN_COOKIE not in response.cookies


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/", "/employees", "/api/employees", "/api/reports"])
async def test_missing_token_redirects_to_login(client: AsyncClient, path: str) -> None:
    response = await client.get(path)

    assert response.status_code == 302
    assert response.headers["location"] == "/login"


@pytest.mark.asyncio
async def test_tampered_token_gets_not_found_page(client: AsyncClient, admin, settings) -> None:
    forged = jwt.encode({"id": admin.id}, "not-the-secret", algorithm=ALGORITHM)
    client.cookies.set(TOKEN_COOKIE, forged)

    response = await client.get("/employees")

    assert response.status_code == 404
    assert "Page not found" in response.text


@pytest.mark.asyncio
async def test_token_for_unknown_admin_is_rejected(client: AsyncClient, settings) -> None:
    token = jwt.encode({"id": 999}, settings.jwt_secret, algorithm=ALGORITHM)

    response = await client.get("/api/employees", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_login_page_sends_signed_in_admins_home(auth_client: AsyncClient) -> None:
    response = await auth_client.get("/login")

    assert response.status_code == 302
    assert response.headers["location"] == "/"


@pytest.mark.asyncio
async def test_login_page_renders_for_visitors(client: AsyncClient) -> None:
    response = await client.get("/login")

    assert response.status_code == 200
    assert 'name="password"' in response.text


@pytest.mark.asyncio
async def test_logout_clears_cookie_and_flashes(auth_client: AsyncClient) -> None:
    response = await auth_client.get("/auth/logout")

    assert response.status_code == 302
    assert response.headers["location"] == "/login"
    assert "max-age=0" in response.headers["set-cookie"].lower()
    assert TOKEN_COOKIE not in auth_client.cookies

    page = await auth_client.get("/login")
    assert "You are logged out." in page.text
