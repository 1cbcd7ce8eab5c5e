from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, File, Form, Request, Response, UploadFile, status

from employee_service.api.deps import (
    ACCESS_TOKEN_COOKIE,
    REFRESH_TOKEN_COOKIE,
    get_current_admin,
    get_authenticated_employee,
    get_registration_service,
    get_session_manager,
)
from employee_service.core.config import settings
from employee_service.core.rate_limiter import RateLimits, limiter
from employee_service.models.company import CompanyAdmin
from employee_service.models.employee import Employee
from employee_service.schemas.employee import EmployeeCreate, EmployeeRead, EmployeeSession, LoginData
from employee_service.schemas.response import ApiResponse
from employee_service.schemas.token import LoginRequest, TokenPair, TokenRefreshRequest
from employee_service.services.employee_registration_service import EmployeeRegistrationService
from employee_service.services.image_storage_service import ProfileImage
from employee_service.services.session_manager import SessionManager, TokenPair as IssuedTokens

router = APIRouter()


def _cookie_options() -> dict[str, Any]:
    return {
        "httponly": True,
        "secure": settings.COOKIE_SECURE,
        "samesite": settings.COOKIE_SAMESITE,
        "path": "/",
    }


def set_session_cookies(response: Response, tokens: IssuedTokens) -> None:
    """Set both session cookies (http-only, secure)."""
    options = _cookie_options()
    response.set_cookie(
        key=ACCESS_TOKEN_COOKIE,
        value=tokens.access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        **options,
    )
    response.set_cookie(
        key=REFRESH_TOKEN_COOKIE,
        value=tokens.refresh_token,
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        **options,
    )


def clear_session_cookies(response: Response) -> None:
    options = _cookie_options()
    response.delete_cookie(ACCESS_TOKEN_COOKIE, **options)
    response.delete_cookie(REFRESH_TOKEN_COOKIE, **options)


async def _read_profile_image(upload: Optional[UploadFile]) -> Optional[ProfileImage]:
    if upload is None or not upload.filename:
        return None
    # One byte past the limit is enough for the size check to reject it
    content = await upload.read(settings.MAX_PROFILE_PIC_SIZE_MB * 1024 * 1024 + 1)
    return ProfileImage(
        filename=upload.filename,
        content_type=upload.content_type or "application/octet-stream",
        content=content,
    )


@router.post("", response_model=ApiResponse[EmployeeRead], status_code=status.HTTP_201_CREATED)
async def add_employee(
    employee_code: Optional[str] = Form(None, alias="employeeCode"),
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    mobile_no: Optional[str] = Form(None, alias="mobileNo"),
    salary: Optional[str] = Form(None),
    gender: Optional[str] = Form(None),
    dob: Optional[str] = Form(None),
    address1: Optional[str] = Form(None),
    address2: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    type: Optional[str] = Form(None),
    account_no: Optional[str] = Form(None, alias="accountNo"),
    pf_account_no: Optional[str] = Form(None, alias="pfAccountNo"),
    bank_code: Optional[str] = Form(None, alias="bankCode"),
    state_name: Optional[str] = Form(None, alias="stateName"),
    city_name: Optional[str] = Form(None, alias="cityName"),
    designation_name: Optional[str] = Form(None, alias="designationName"),
    department_name: Optional[str] = Form(None, alias="departmentName"),
    profile_pic: Optional[UploadFile] = File(None, alias="profilePic"),
    current_admin: CompanyAdmin = Depends(get_current_admin),
    registration: EmployeeRegistrationService = Depends(get_registration_service),
) -> Any:
    """
    Create an employee in the calling admin's company.
    Multipart form with the employee fields and a `profilePic` image file.
    """
    payload = EmployeeCreate(
        employee_code=employee_code,
        name=name,
        email=email,
        mobile_no=mobile_no,
        salary=salary,
        gender=gender,
        dob=dob,
        address1=address1,
        address2=address2,
        password=password,
        type=type,
        account_no=account_no,
        pf_account_no=pf_account_no,
        bank_code=bank_code,
        state_name=state_name,
        city_name=city_name,
        designation_name=designation_name,
        department_name=department_name,
    )
    image = await _read_profile_image(profile_pic)

    employee = await registration.register(current_admin.company_id, payload, image)
    return ApiResponse.ok(employee, "Employee added successfully", status.HTTP_201_CREATED)


@router.post("/login", response_model=ApiResponse[LoginData])
@limiter.limit(RateLimits.AUTH_LOGIN)
async def employee_login(
    request: Request,
    response: Response,
    login_data: LoginRequest,
    sessions: SessionManager = Depends(get_session_manager),
) -> Any:
    """
    Log in with email or mobile number plus password.
    Sets `accessToken` and `refreshToken` cookies and returns both tokens.
    """
    result = await sessions.login(
        password=login_data.password,
        email=login_data.email,
        mobile=login_data.mobile,
    )
    set_session_cookies(response, result.tokens)

    data = LoginData(
        employee=EmployeeSession.model_validate(result.employee),
        access_token=result.tokens.access_token,
        refresh_token=result.tokens.refresh_token,
    )
    return ApiResponse.ok(data, "Employee logged in successfully")


@router.post("/logout", response_model=ApiResponse[dict])
async def employee_logout(
    response: Response,
    current_employee: Employee = Depends(get_authenticated_employee),
    sessions: SessionManager = Depends(get_session_manager),
) -> Any:
    """Revoke the employee's refresh token and clear both cookies."""
    await sessions.logout(current_employee.id)
    clear_session_cookies(response)
    return ApiResponse.ok({}, "Employee logged out successfully")


@router.post("/refresh", response_model=ApiResponse[TokenPair])
@limiter.limit(RateLimits.AUTH_REFRESH)
async def refresh_employee_access_token(
    request: Request,
    response: Response,
    refresh_request: Optional[TokenRefreshRequest] = Body(None),
    sessions: SessionManager = Depends(get_session_manager),
) -> Any:
    """
    Rotate the session: exchange the refresh token (cookie first, then body)
    for a new access/refresh pair. Each refresh token works once.
    """
    presented = request.cookies.get(REFRESH_TOKEN_COOKIE)
    if not presented and refresh_request is not None:
        presented = refresh_request.refresh_token

    tokens = await sessions.refresh(presented)
    set_session_cookies(response, tokens)

    data = TokenPair(access_token=tokens.access_token, refresh_token=tokens.refresh_token)
    return ApiResponse.ok(data, "Employee access token refreshed")
