# Import all the models, so that Base has them before being
# imported by Alembic
from employee_service.db.base_class import Base  # noqa

# Reference data
from employee_service.models.company import Company, CompanyAdmin  # noqa
from employee_service.models.reference import Department, Designation, BankCode, State, City  # noqa

# Employees
from employee_service.models.employee import Employee  # noqa
