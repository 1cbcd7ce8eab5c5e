from typing import Optional

from employee_service.schemas.response import CamelModel


class LoginRequest(CamelModel):
    # Presence is checked by the session manager so that it can answer 400
    email: Optional[str] = None
    mobile: Optional[str] = None
    password: Optional[str] = None


class AdminLoginRequest(CamelModel):
    email: str
    password: str


class TokenRefreshRequest(CamelModel):
    refresh_token: Optional[str] = None


class TokenPair(CamelModel):
    access_token: str
    refresh_token: str


class AdminToken(CamelModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
