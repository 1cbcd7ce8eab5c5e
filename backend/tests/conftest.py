"""
Shared test fixtures and configuration for employee service tests.
"""
import asyncio
import os
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession

# Set test environment before importing app modules
os.environ["ENVIRONMENT"] = "development"
os.environ["DEBUG"] = "true"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["ACCESS_TOKEN_SECRET"] = "test-access-secret-for-testing-only-min-32-chars"
os.environ["REFRESH_TOKEN_SECRET"] = "test-refresh-secret-for-testing-only-min-32-chars"

import employee_service.db.base  # noqa: E402,F401  (registers every mapped model)
from employee_service.core.security import get_password_hash  # noqa: E402
from employee_service.models.employee import Employee  # noqa: E402
from employee_service.services.employee_store import EmployeeStore  # noqa: E402

TEST_PASSWORD = "s3cret-pass"


class InMemoryEmployeeStore(EmployeeStore):
    """
    Dict-backed store. Reads yield to the event loop so concurrent callers
    interleave; the compare-and-set holds a lock like a row update would.
    """

    def __init__(self, employees=()):
        self.employees = {employee.id: employee for employee in employees}
        self.writes = []
        self._lock = asyncio.Lock()

    async def find_by_identifier(self, email, mobile):
        await asyncio.sleep(0)
        for employee_id in sorted(self.employees):
            employee = self.employees[employee_id]
            if (email and employee.email == email) or (mobile and employee.mobile_no == mobile):
                return employee
        return None

    async def get_by_id(self, employee_id):
        await asyncio.sleep(0)
        return self.employees.get(employee_id)

    async def set_refresh_token(self, employee_id, token):
        await asyncio.sleep(0)
        self.writes.append((employee_id, token))
        employee = self.employees.get(employee_id)
        if employee is not None:
            employee.refresh_token = token

    async def compare_and_set_refresh_token(self, employee_id, expected, new):
        async with self._lock:
            await asyncio.sleep(0)
            employee = self.employees.get(employee_id)
            if employee is None or employee.refresh_token != expected:
                return False
            self.writes.append((employee_id, new))
            employee.refresh_token = new
            return True


def make_employee(
    employee_id: int = 1,
    email: str = "jane@example.com",
    mobile_no: str = "9876543210",
    password: str = TEST_PASSWORD,
    is_active: bool = True,
    refresh_token: Optional[str] = None,
) -> Employee:
    return Employee(
        id=employee_id,
        employee_code=f"EMP{employee_id:03d}",
        name="Jane Doe",
        email=email,
        mobile_no=mobile_no,
        salary=50000.0,
        gender="female",
        address1="1 Main Street",
        address2="Suite 2",
        password=get_password_hash(password),
        type="full-time",
        profile_pic="https://res.cloudinary.com/demo/image/upload/jane.png",
        account_no="000111222",
        pf_account_no="PF000111",
        is_active=is_active,
        refresh_token=refresh_token,
        company_id=7,
    )


@pytest.fixture
def employee():
    """An active employee with no open session."""
    return make_employee()


@pytest.fixture
def inactive_employee():
    return make_employee(employee_id=2, email="gone@example.com", mobile_no="9000000000", is_active=False)


@pytest.fixture
def store(employee, inactive_employee):
    return InMemoryEmployeeStore([employee, inactive_employee])


@pytest.fixture
def mock_db_session():
    """Create a mock async database session."""
    session = AsyncMock(spec=AsyncSession)
    session.execute = AsyncMock()
    session.scalar = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.add = MagicMock()
    session.close = AsyncMock()
    return session


@pytest.fixture
def mock_request():
    """Create a mock FastAPI request."""
    request = MagicMock()
    request.url.path = "/api/v1/employees/login"
    request.method = "POST"
    request.headers = {}
    request.cookies = {}
    return request


@pytest_asyncio.fixture
async def client(store):
    """HTTP client against the app with the store swapped for the in-memory one."""
    from employee_service.api.deps import get_employee_store
    from employee_service.main import app

    app.dependency_overrides[get_employee_store] = lambda: store
    transport = ASGITransport(app=app)
    # https so the secure session cookies are sent back
    async with AsyncClient(transport=transport, base_url="https://test") as ac:
        yield ac
    app.dependency_overrides.clear()
