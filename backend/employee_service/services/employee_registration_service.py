"""
Employee registration workflow.

Validation runs first and touches nothing external: each check returns an
optional error and the first one wins. Reference data is resolved next, and
the profile image is uploaded only after every check has passed, so a
rejected submission never leaves an orphaned image behind.
"""

import logging
import math
from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, NoResultFound, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from employee_service.core.config import settings
from employee_service.core.exceptions import ApiError, BadRequestError, InternalServerError
from employee_service.core.security import get_password_hash
from employee_service.models.employee import Employee
from employee_service.schemas.employee import EmployeeCreate, EmployeeRead
from employee_service.services import reference_data_service as refs
from employee_service.services.image_storage_service import ImageStorage, ImageUploadError, ProfileImage

logger = logging.getLogger("employee_service.registration")

REQUIRED_FIELDS = (
    "employee_code", "name", "email", "mobile_no", "salary", "gender", "dob",
    "address1", "address2", "password", "type", "account_no", "pf_account_no",
    "bank_code", "state_name", "city_name", "designation_name", "department_name",
)

# PostgreSQL SQLSTATE codes
_UNIQUE_VIOLATION = "23505"
_FOREIGN_KEY_VIOLATION = "23503"


def check_required_fields(payload: EmployeeCreate) -> Optional[ApiError]:
    for field_name in REQUIRED_FIELDS:
        value = getattr(payload, field_name)
        if value is None or not value.strip():
            return BadRequestError("All fields are required")
    return None


def check_password(password: str) -> Optional[ApiError]:
    if len(password) < settings.MIN_PASSWORD_LENGTH:
        return BadRequestError(
            f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters long"
        )
    return None


def check_salary(salary: str) -> Optional[ApiError]:
    try:
        value = float(salary)
    except ValueError:
        return BadRequestError("Invalid salary")
    if not math.isfinite(value) or value < 0:
        return BadRequestError("Invalid salary")
    return None


def check_dob(dob: str) -> Optional[ApiError]:
    try:
        date.fromisoformat(dob.strip())
    except ValueError:
        return BadRequestError("Invalid date of birth")
    return None


def check_profile_image(image: Optional[ProfileImage]) -> Optional[ApiError]:
    if image is None or image.size == 0:
        return BadRequestError("Profile picture is required")
    if not (image.content_type or "").startswith("image/"):
        return BadRequestError("Profile picture must be an image")
    if image.size > settings.MAX_PROFILE_PIC_SIZE_MB * 1024 * 1024:
        return BadRequestError("Profile picture is too large")
    return None


def _integrity_error_code(error: IntegrityError) -> Optional[str]:
    orig = error.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code:
        return code
    text = str(orig).lower()
    if "unique" in text or "duplicate" in text:
        return _UNIQUE_VIOLATION
    if "foreign key" in text:
        return _FOREIGN_KEY_VIOLATION
    return None


class EmployeeRegistrationService:
    """Creates employee records for one company."""

    def __init__(self, db: AsyncSession, image_storage: ImageStorage):
        self.db = db
        self.image_storage = image_storage

    async def register(
        self,
        company_id: int,
        payload: EmployeeCreate,
        profile_image: Optional[ProfileImage],
    ) -> EmployeeRead:
        """
        Validate, resolve reference data, upload the profile image and persist.

        Args:
            company_id: Company of the admin creating the employee
            payload: Submitted employee fields
            profile_image: Uploaded profile picture, if any

        Returns:
            Public projection of the created employee

        Raises:
            BadRequestError: validation, lookup, upload or constraint failure
            InternalServerError: any other persistence failure
        """
        error = check_required_fields(payload)
        if error is None:
            error = (
                check_password(payload.password)
                or check_salary(payload.salary)
                or check_dob(payload.dob)
                or check_profile_image(profile_image)
            )
        if error is not None:
            raise error

        email = payload.email.strip()
        if await refs.employee_email_exists(self.db, email):
            raise BadRequestError("Employee with this email already exists")

        # Lookups share the request's AsyncSession, which cannot run statements concurrently
        state, city = await refs.find_state_and_city(
            self.db, payload.state_name.strip(), payload.city_name.strip()
        )
        bank_code = await refs.find_bank_code(self.db, payload.bank_code.strip())
        department = await refs.find_department(self.db, payload.department_name.strip(), company_id)
        designation = await refs.find_designation(self.db, payload.designation_name.strip(), company_id)

        if state is None:
            raise BadRequestError("Invalid state name")
        if city is None:
            raise BadRequestError("Invalid city name for the specified state")
        if department is None:
            raise BadRequestError("Invalid department name")
        if designation is None:
            raise BadRequestError("Invalid designation name")
        if bank_code is None:
            raise BadRequestError("Invalid bank code")

        try:
            profile_pic_url = await self.image_storage.upload(profile_image)
        except ImageUploadError as e:
            logger.warning(f"Profile picture upload failed: {e}")
            raise BadRequestError("Failed to upload profile picture")

        employee = Employee(
            employee_code=payload.employee_code.strip(),
            name=payload.name.strip(),
            email=email,
            mobile_no=payload.mobile_no.strip(),
            salary=float(payload.salary),
            gender=payload.gender.strip(),
            dob=date.fromisoformat(payload.dob.strip()),
            address1=payload.address1.strip(),
            address2=payload.address2.strip(),
            password=get_password_hash(payload.password),
            type=payload.type.strip(),
            profile_pic=profile_pic_url,
            account_no=payload.account_no.strip(),
            pf_account_no=payload.pf_account_no.strip(),
            bank_code_id=bank_code.id,
            city_id=city.id,
            state_id=state.id,
            department_id=department.id,
            designation_id=designation.id,
            company_id=company_id,
            is_active=True,
        )

        try:
            self.db.add(employee)
            await self.db.commit()
            created = (
                await self.db.execute(
                    select(Employee)
                    .where(Employee.id == employee.id)
                    .options(
                        selectinload(Employee.department),
                        selectinload(Employee.designation),
                        selectinload(Employee.state),
                        selectinload(Employee.city),
                        selectinload(Employee.bank_code),
                    )
                )
            ).scalar_one()
        except IntegrityError as e:
            await self.db.rollback()
            code = _integrity_error_code(e)
            logger.error(f"Employee creation failed with constraint violation ({code})")
            if code == _UNIQUE_VIOLATION:
                raise BadRequestError("Duplicate entry found")
            if code == _FOREIGN_KEY_VIOLATION:
                raise BadRequestError("Invalid reference data")
            raise InternalServerError("Failed to add employee")
        except NoResultFound:
            await self.db.rollback()
            raise BadRequestError("Required record not found")
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Employee creation failed: {e.__class__.__name__}")
            raise InternalServerError("Failed to add employee")

        logger.info(f"Created employee {created.id} for company {company_id}")
        return EmployeeRead.model_validate(created)
