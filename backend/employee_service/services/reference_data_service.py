from typing import Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from employee_service.models.employee import Employee
from employee_service.models.reference import BankCode, City, Department, Designation, State


async def employee_email_exists(db: AsyncSession, email: str) -> bool:
    return await db.scalar(select(Employee.id).where(Employee.email == email)) is not None


async def find_state_and_city(
    db: AsyncSession, state_name: str, city_name: str
) -> Tuple[Optional[State], Optional[City]]:
    """
    Resolve a state by name and a city by name within that state.
    The city is None when the state is unknown or has no such city.
    """
    state = await db.scalar(select(State).where(State.state_name == state_name))
    if state is None:
        return None, None

    city = await db.scalar(
        select(City).where(City.state_id == state.id, City.city_name == city_name).limit(1)
    )
    return state, city


async def find_bank_code(db: AsyncSession, code: str) -> Optional[BankCode]:
    return await db.scalar(select(BankCode).where(BankCode.code == code))


async def find_department(db: AsyncSession, name: str, company_id: int) -> Optional[Department]:
    return await db.scalar(
        select(Department).where(Department.name == name, Department.company_id == company_id)
    )


async def find_designation(db: AsyncSession, name: str, company_id: int) -> Optional[Designation]:
    return await db.scalar(
        select(Designation).where(Designation.name == name, Designation.company_id == company_id)
    )
