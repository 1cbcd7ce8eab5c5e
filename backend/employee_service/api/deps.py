import logging
from typing import AsyncGenerator, Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from employee_service.core.config import settings
from employee_service.core.exceptions import ForbiddenError, UnauthorizedError
from employee_service.core.security import ROLE_ADMIN, ROLE_EMPLOYEE, decode_access_token
from employee_service.db.session import AsyncSessionLocal
from employee_service.models.company import CompanyAdmin
from employee_service.models.employee import Employee
from employee_service.services.employee_registration_service import EmployeeRegistrationService
from employee_service.services.employee_store import EmployeeStore, SQLAlchemyEmployeeStore
from employee_service.services.image_storage_service import ImageStorage, get_image_storage
from employee_service.services.session_manager import SessionManager

logger = logging.getLogger("employee_service.deps")

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"

# auto_error=False so a missing Authorization header falls back to the cookie
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/employees/login", auto_error=False
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session


def get_employee_store(db: AsyncSession = Depends(get_db)) -> EmployeeStore:
    return SQLAlchemyEmployeeStore(db)


def get_session_manager(store: EmployeeStore = Depends(get_employee_store)) -> SessionManager:
    return SessionManager(store)


def get_registration_service(
    db: AsyncSession = Depends(get_db),
    image_storage: ImageStorage = Depends(get_image_storage),
) -> EmployeeRegistrationService:
    return EmployeeRegistrationService(db, image_storage)


def _resolve_access_token(request: Request, token: Optional[str]) -> str:
    if not token:
        token = request.cookies.get(ACCESS_TOKEN_COOKIE)
        # Support "Bearer <token>" stored in the cookie
        if token and token.lower().startswith("bearer "):
            token = token.split(" ", 1)[1].strip() or None
    if not token:
        raise UnauthorizedError("Unauthorized request")
    return token


def _subject_for_role(token: str, role: str) -> int:
    try:
        payload = decode_access_token(token)
        if payload.get("role") != role:
            raise UnauthorizedError("Invalid access token")
        return int(payload["sub"])
    except (JWTError, KeyError, ValueError):
        raise UnauthorizedError("Invalid access token")


async def get_authenticated_employee(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    store: EmployeeStore = Depends(get_employee_store),
) -> Employee:
    """
    Resolve the employee behind the access token (Authorization header or cookie),
    whether or not the account is active. Logout uses this so an inactive
    employee can still end their session.

    Raises:
        UnauthorizedError: token missing, invalid, or employee unknown
    """
    employee_id = _subject_for_role(_resolve_access_token(request, token), ROLE_EMPLOYEE)

    employee = await store.get_by_id(employee_id)
    if employee is None:
        raise UnauthorizedError("Invalid access token")
    return employee


async def get_current_admin(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> CompanyAdmin:
    """Resolve the company admin behind the access token."""
    admin_id = _subject_for_role(_resolve_access_token(request, token), ROLE_ADMIN)

    admin = await db.scalar(select(CompanyAdmin).where(CompanyAdmin.id == admin_id))
    if admin is None:
        raise UnauthorizedError("Invalid access token")
    if not admin.is_active:
        raise ForbiddenError("Admin account is inactive")
    return admin
