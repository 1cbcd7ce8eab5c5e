import argparse
import asyncio
import getpass
import os
import sys

# Add the current directory to sys.path to allow imports
sys.path.append(os.getcwd())

from sqlalchemy import select

from employee_service.core.config import settings
from employee_service.core.security import get_password_hash
from employee_service.db.session import AsyncSessionLocal
from employee_service.models.company import Company, CompanyAdmin


async def create_admin(company_name: str, email: str, password: str, name: str | None = None):
    async with AsyncSessionLocal() as db:
        company = await db.scalar(select(Company).where(Company.name == company_name))
        if company is None:
            company = Company(name=company_name)
            db.add(company)
            await db.flush()
            print(f"Created company: {company_name}")

        # Check if admin exists
        existing_admin = await db.scalar(select(CompanyAdmin).where(CompanyAdmin.email == email))
        if existing_admin:
            print(f"Admin {email} already exists.")
            # Update password just in case
            existing_admin.hashed_password = get_password_hash(password)
            existing_admin.company_id = company.id
            existing_admin.is_active = True
            await db.commit()
            print(f"Updated password for {email}")
            return

        admin = CompanyAdmin(
            email=email,
            name=name,
            hashed_password=get_password_hash(password),
            company_id=company.id,
            is_active=True,
        )
        db.add(admin)
        await db.commit()
        print(f"Created admin {email} for company {company_name}")


def main():
    parser = argparse.ArgumentParser(description="Create a company and its admin account")
    parser.add_argument("--company", required=True, help="Company name (created if missing)")
    parser.add_argument("--email", required=True, help="Admin login email")
    parser.add_argument("--name", default=None, help="Admin display name")
    parser.add_argument("--password", default=None, help="Admin password (prompted if omitted)")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Admin password: ")
    if len(password) < settings.MIN_PASSWORD_LENGTH:
        parser.error(f"password must be at least {settings.MIN_PASSWORD_LENGTH} characters long")

    asyncio.run(create_admin(args.company, args.email, password, args.name))


if __name__ == "__main__":
    main()
