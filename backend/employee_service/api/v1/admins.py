from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from employee_service.api.deps import ACCESS_TOKEN_COOKIE, get_db
from employee_service.core.config import settings
from employee_service.core.exceptions import ForbiddenError, UnauthorizedError
from employee_service.core.rate_limiter import RateLimits, limiter
from employee_service.core.security import ROLE_ADMIN, create_access_token, verify_password
from employee_service.models.company import CompanyAdmin
from employee_service.schemas.response import ApiResponse
from employee_service.schemas.token import AdminLoginRequest, AdminToken

router = APIRouter()


@router.post("/login", response_model=ApiResponse[AdminToken])
@limiter.limit(RateLimits.AUTH_LOGIN)
async def admin_login(
    request: Request,
    response: Response,
    login_data: AdminLoginRequest,
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Log in a company admin. The access token scopes employee creation
    to the admin's company.
    """
    admin = await db.scalar(select(CompanyAdmin).where(CompanyAdmin.email == login_data.email.strip()))

    if admin is None or not verify_password(login_data.password, admin.hashed_password):
        raise UnauthorizedError("Invalid admin credentials")
    if not admin.is_active:
        raise ForbiddenError("Admin account is inactive")

    admin.last_login = datetime.now(timezone.utc)
    await db.commit()

    access_token = create_access_token(admin.id, role=ROLE_ADMIN)
    response.set_cookie(
        key=ACCESS_TOKEN_COOKIE,
        value=access_token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        path="/",
    )

    data = AdminToken(
        access_token=access_token,
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    return ApiResponse.ok(data, "Admin logged in successfully")
