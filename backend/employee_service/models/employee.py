from sqlalchemy import Column, Integer, String, Float, Boolean, Date, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from employee_service.db.base_class import Base


class Employee(Base):
    __tablename__ = "employees"  # type: ignore[assignment]

    id = Column(Integer, primary_key=True, index=True)
    employee_code = Column(String, nullable=False)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    mobile_no = Column(String, index=True, nullable=False)
    salary = Column(Float, nullable=False)
    gender = Column(String, nullable=False)
    dob = Column(Date, nullable=False)
    address1 = Column(String, nullable=False)
    address2 = Column(String, nullable=False)
    password = Column(String, nullable=False)  # bcrypt hash, never plaintext
    type = Column(String, nullable=False)  # employment type
    profile_pic = Column(String, nullable=False)
    account_no = Column(String, nullable=False)
    pf_account_no = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Single slot: null, or the most recently issued refresh token
    refresh_token = Column(Text, nullable=True)

    department_id = Column(Integer, ForeignKey("departments.id"), nullable=False)
    designation_id = Column(Integer, ForeignKey("designations.id"), nullable=False)
    bank_code_id = Column(Integer, ForeignKey("bank_codes.id"), nullable=False)
    city_id = Column(Integer, ForeignKey("cities.id"), nullable=False)
    state_id = Column(Integer, ForeignKey("states.id"), nullable=False)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    department = relationship("Department")
    designation = relationship("Designation")
    bank_code = relationship("BankCode")
    city = relationship("City")
    state = relationship("State")
    company = relationship("Company")
