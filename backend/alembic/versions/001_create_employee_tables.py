"""create employee and reference data tables

Revision ID: 001
Revises:
Create Date: 2026-10-17

Companies and their admins, reference data (departments, designations,
bank codes, states, cities) and employees with a single refresh token slot.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create company, reference data and employee tables."""
    op.create_table(
        'companies',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('name', sa.String(), unique=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    )

    op.create_table(
        'company_admins',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('email', sa.String(), unique=True, nullable=False, index=True),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        'departments',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.UniqueConstraint('name', 'company_id', name='uq_departments_name_company'),
    )

    op.create_table(
        'designations',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.UniqueConstraint('name', 'company_id', name='uq_designations_name_company'),
    )

    op.create_table(
        'bank_codes',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('code', sa.String(), unique=True, nullable=False),
        sa.Column('bank_name', sa.String(), nullable=False),
    )

    op.create_table(
        'states',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('state_name', sa.String(), unique=True, nullable=False),
    )

    op.create_table(
        'cities',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('city_name', sa.String(), nullable=False),
        sa.Column('state_id', sa.Integer(), sa.ForeignKey('states.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.UniqueConstraint('city_name', 'state_id', name='uq_cities_name_state'),
    )

    op.create_table(
        'employees',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('employee_code', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), unique=True, nullable=False, index=True),
        sa.Column('mobile_no', sa.String(), nullable=False, index=True),
        sa.Column('salary', sa.Float(), nullable=False),
        sa.Column('gender', sa.String(), nullable=False),
        sa.Column('dob', sa.Date(), nullable=False),
        sa.Column('address1', sa.String(), nullable=False),
        sa.Column('address2', sa.String(), nullable=False),
        sa.Column('password', sa.String(), nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('profile_pic', sa.String(), nullable=False),
        sa.Column('account_no', sa.String(), nullable=False),
        sa.Column('pf_account_no', sa.String(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('refresh_token', sa.Text(), nullable=True),
        sa.Column('department_id', sa.Integer(), sa.ForeignKey('departments.id'), nullable=False),
        sa.Column('designation_id', sa.Integer(), sa.ForeignKey('designations.id'), nullable=False),
        sa.Column('bank_code_id', sa.Integer(), sa.ForeignKey('bank_codes.id'), nullable=False),
        sa.Column('city_id', sa.Integer(), sa.ForeignKey('cities.id'), nullable=False),
        sa.Column('state_id', sa.Integer(), sa.ForeignKey('states.id'), nullable=False),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id'), nullable=False, index=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_table('employees')
    op.drop_table('cities')
    op.drop_table('states')
    op.drop_table('bank_codes')
    op.drop_table('designations')
    op.drop_table('departments')
    op.drop_table('company_admins')
    op.drop_table('companies')
