"""
Credential store for employee sessions.

The session manager only needs a handful of reads and writes on the employee
record. They are expressed as a small backend interface so the refresh-token
slot can be updated with an atomic compare-and-set instead of a
read-then-write.
"""

import logging
from typing import Optional

from sqlalchemy import select, update, or_
from sqlalchemy.ext.asyncio import AsyncSession

from employee_service.models.employee import Employee

logger = logging.getLogger("employee_service.employee_store")


class EmployeeStore:
    """Base class for credential store backends."""

    async def find_by_identifier(self, email: Optional[str], mobile: Optional[str]) -> Optional[Employee]:
        """Return the first employee matching the email OR the mobile number."""
        raise NotImplementedError

    async def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    async def set_refresh_token(self, employee_id: int, token: Optional[str]) -> None:
        """Unconditionally overwrite (or clear, with None) the refresh-token slot."""
        raise NotImplementedError

    async def compare_and_set_refresh_token(self, employee_id: int, expected: str, new: str) -> bool:
        """
        Replace the refresh-token slot with ``new`` only if it currently holds ``expected``.
        Returns True if the swap happened.
        """
        raise NotImplementedError


class SQLAlchemyEmployeeStore(EmployeeStore):
    """
    Store backed by the relational database.

    The compare-and-set is a single conditional UPDATE, so two racing
    refreshes of the same token cannot both match: the database serializes
    the row update and the loser sees zero affected rows.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_identifier(self, email: Optional[str], mobile: Optional[str]) -> Optional[Employee]:
        conditions = []
        if email:
            conditions.append(Employee.email == email)
        if mobile:
            conditions.append(Employee.mobile_no == mobile)
        if not conditions:
            return None

        result = await self.db.execute(
            select(Employee).where(or_(*conditions)).order_by(Employee.id).limit(1)
        )
        return result.scalar_one_or_none()

    async def get_by_id(self, employee_id: int) -> Optional[Employee]:
        result = await self.db.execute(select(Employee).where(Employee.id == employee_id))
        return result.scalar_one_or_none()

    async def set_refresh_token(self, employee_id: int, token: Optional[str]) -> None:
        await self.db.execute(
            update(Employee)
            .where(Employee.id == employee_id)
            .values(refresh_token=token)
        )
        await self.db.commit()

    async def compare_and_set_refresh_token(self, employee_id: int, expected: str, new: str) -> bool:
        result = await self.db.execute(
            update(Employee)
            .where(Employee.id == employee_id, Employee.refresh_token == expected)
            .values(refresh_token=new)
        )
        await self.db.commit()

        swapped = result.rowcount == 1
        if not swapped:
            logger.info(f"Refresh token compare-and-set lost for employee {employee_id}")
        return swapped
