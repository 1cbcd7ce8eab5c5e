"""
Employee session lifecycle: login, logout and refresh-token rotation.

Each employee has a single refresh-token slot in the store:

    NoSession (null) --login--> Active(T1) --refresh--> Active(T2) --logout--> NoSession

Login overwrites the slot (a newer login supersedes any older session),
refresh swaps it atomically, logout clears it. A refresh presenting anything
other than the current slot value is rejected and changes nothing.
"""

import hmac
import logging
from dataclasses import dataclass
from typing import Optional

from jose import JWTError

from employee_service.core.exceptions import (
    BadRequestError,
    ForbiddenError,
    InternalServerError,
    NotFoundError,
    UnauthorizedError,
)
from employee_service.core.security import (
    ROLE_EMPLOYEE,
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    verify_password,
)
from employee_service.models.employee import Employee
from employee_service.services.employee_store import EmployeeStore

logger = logging.getLogger("employee_service.sessions")

INACTIVE_MESSAGE = "Employee account is inactive"
INVALID_REFRESH_MESSAGE = "Invalid refresh token"
STALE_REFRESH_MESSAGE = "Refresh token is expired or used"


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class LoginResult:
    employee: Employee
    tokens: TokenPair


def _tokens_match(stored: Optional[str], presented: str) -> bool:
    if stored is None:
        return False
    return hmac.compare_digest(stored.encode("utf-8"), presented.encode("utf-8"))


class SessionManager:
    """Issues, rotates and revokes employee access/refresh token pairs."""

    def __init__(self, store: EmployeeStore):
        self.store = store

    def _issue_token_pair(self, employee_id: int) -> TokenPair:
        try:
            return TokenPair(
                access_token=create_access_token(employee_id, role=ROLE_EMPLOYEE),
                refresh_token=create_refresh_token(employee_id),
            )
        except (JWTError, ValueError, TypeError) as e:
            logger.error(f"Token generation failed for employee {employee_id}: {e}")
            raise InternalServerError(
                "Something went wrong while generating refresh and access token"
            ) from e

    async def login(
        self,
        password: Optional[str],
        email: Optional[str] = None,
        mobile: Optional[str] = None,
    ) -> LoginResult:
        """
        Authenticate an employee by email or mobile number and open a session.

        Raises:
            BadRequestError: password or both identifiers missing
            NotFoundError: no employee matches the identifier
            ForbiddenError: the employee is inactive
            UnauthorizedError: the password does not match
        """
        email = email.strip() if email else None
        mobile = mobile.strip() if mobile else None

        if not password:
            raise BadRequestError("Password is required")
        if not email and not mobile:
            raise BadRequestError("Email or mobile number is required")

        employee = await self.store.find_by_identifier(email, mobile)
        if employee is None:
            raise NotFoundError("Employee not found")

        if not employee.is_active:
            logger.info(f"Login refused for inactive employee {employee.id}")
            raise ForbiddenError(INACTIVE_MESSAGE)

        if not verify_password(password, employee.password):
            logger.info(f"Login failed for employee {employee.id}: bad credentials")
            raise UnauthorizedError("Invalid employee credentials")

        tokens = self._issue_token_pair(employee.id)
        await self.store.set_refresh_token(employee.id, tokens.refresh_token)

        logger.info(f"Employee {employee.id} logged in")
        return LoginResult(employee=employee, tokens=tokens)

    async def logout(self, employee_id: int) -> None:
        """Clear the employee's refresh-token slot. Safe to call repeatedly."""
        await self.store.set_refresh_token(employee_id, None)
        logger.info(f"Employee {employee_id} logged out")

    async def refresh(self, presented_token: Optional[str]) -> TokenPair:
        """
        Exchange the current refresh token for a new access/refresh pair.

        Every refresh token is single-use: the slot is swapped with a
        compare-and-set, so a replayed or superseded token is rejected even if
        its signature is still valid.

        Raises:
            UnauthorizedError: token missing, invalid, unknown, stale or already used
            ForbiddenError: the employee is inactive
        """
        if not presented_token:
            raise UnauthorizedError("Unauthorized request")

        try:
            payload = decode_refresh_token(presented_token)
            employee_id = int(payload["sub"])
        except (JWTError, KeyError, ValueError):
            raise UnauthorizedError(INVALID_REFRESH_MESSAGE)

        employee = await self.store.get_by_id(employee_id)
        if employee is None:
            raise UnauthorizedError(INVALID_REFRESH_MESSAGE)

        if not employee.is_active:
            raise ForbiddenError(INACTIVE_MESSAGE)

        if not _tokens_match(employee.refresh_token, presented_token):
            logger.warning(f"Rejected stale or reused refresh token for employee {employee_id}")
            raise UnauthorizedError(STALE_REFRESH_MESSAGE)

        tokens = self._issue_token_pair(employee_id)
        swapped = await self.store.compare_and_set_refresh_token(
            employee_id, presented_token, tokens.refresh_token
        )
        if not swapped:
            # Another refresh rotated the slot between our read and our write
            logger.warning(f"Concurrent refresh lost the rotation race for employee {employee_id}")
            raise UnauthorizedError(STALE_REFRESH_MESSAGE)

        logger.info(f"Rotated refresh token for employee {employee_id}")
        return tokens
