"""
Tests for employee_service/api/v1/admins.py - company admin login.
"""
import pytest

from employee_service.api.deps import get_db
from employee_service.core.security import ROLE_ADMIN, decode_access_token, get_password_hash
from employee_service.main import app
from employee_service.models.company import CompanyAdmin

ADMIN_LOGIN_URL = "/api/v1/admins/login"


@pytest.fixture
def admin():
    return CompanyAdmin(
        id=3,
        email="admin@example.com",
        name="Admin",
        hashed_password=get_password_hash("admin-pass"),
        company_id=7,
        is_active=True,
    )


@pytest.fixture
def admin_db(client, mock_db_session, admin):
    mock_db_session.scalar.return_value = admin
    app.dependency_overrides[get_db] = lambda: mock_db_session
    return mock_db_session


class TestAdminLogin:

    @pytest.mark.asyncio
    async def test_admin_login_issues_admin_token(self, client, admin_db, admin):
        response = await client.post(ADMIN_LOGIN_URL, json={"email": "admin@example.com", "password": "admin-pass"})

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Admin logged in successfully"
        assert body["data"]["tokenType"] == "bearer"
        payload = decode_access_token(body["data"]["accessToken"])
        assert payload["sub"] == "3"
        assert payload["role"] == ROLE_ADMIN
        assert any(c.startswith("accessToken=") for c in response.headers.get_list("set-cookie"))
        assert admin.last_login is not None
        admin_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_wrong_password(self, client, admin_db, admin):
        response = await client.post(ADMIN_LOGIN_URL, json={"email": "admin@example.com", "password": "nope"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid admin credentials"
        assert admin.last_login is None

    @pytest.mark.asyncio
    async def test_unknown_admin(self, client, admin_db):
        admin_db.scalar.return_value = None

        response = await client.post(ADMIN_LOGIN_URL, json={"email": "who@example.com", "password": "admin-pass"})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_inactive_admin(self, client, admin_db, admin):
        admin.is_active = False

        response = await client.post(ADMIN_LOGIN_URL, json={"email": "admin@example.com", "password": "admin-pass"})

        assert response.status_code == 403
        assert response.json()["message"] == "Admin account is inactive"

    @pytest.mark.asyncio
    async def test_missing_fields_is_bad_request(self, client, admin_db):
        response = await client.post(ADMIN_LOGIN_URL, json={"email": "admin@example.com"})

        assert response.status_code == 400
        assert response.json()["message"].startswith("password")
