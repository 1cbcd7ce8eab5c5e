from typing import Optional

from pydantic import Field

from employee_service.schemas.response import CamelModel


class EmployeeCreate(CamelModel):
    """
    Raw registration submission. Every field is kept as the submitted string;
    the registration workflow validates presence and converts salary and dob.
    """
    employee_code: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    mobile_no: Optional[str] = None
    salary: Optional[str] = None
    gender: Optional[str] = None
    dob: Optional[str] = None
    address1: Optional[str] = None
    address2: Optional[str] = None
    password: Optional[str] = Field(default=None, repr=False)
    type: Optional[str] = None
    account_no: Optional[str] = None
    pf_account_no: Optional[str] = None
    bank_code: Optional[str] = None
    state_name: Optional[str] = None
    city_name: Optional[str] = None
    designation_name: Optional[str] = None
    department_name: Optional[str] = None


class NamedRef(CamelModel):
    name: str


class StateRef(CamelModel):
    state_name: str


class CityRef(CamelModel):
    city_name: str


class BankCodeRef(CamelModel):
    code: str
    bank_name: str


class EmployeeRead(CamelModel):
    """Public projection of a created employee: no password, no foreign keys."""
    id: int
    employee_code: str
    name: str
    email: str
    mobile_no: str
    salary: float
    gender: str
    type: str
    profile_pic: str
    account_no: str
    pf_account_no: str
    is_active: bool
    department: NamedRef
    designation: NamedRef
    state: StateRef
    city: CityRef
    bank_code: BankCodeRef


class EmployeeSession(CamelModel):
    """Projection returned on login."""
    employee_code: str
    is_active: bool
    name: str
    email: str
    mobile_no: str
    company_id: int
    type: str


class LoginData(CamelModel):
    employee: EmployeeSession
    access_token: str
    refresh_token: str
