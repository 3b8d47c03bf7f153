"""create booking tables

Revision ID: 5b2d8e41c9a7
Revises:
Create Date: 2026-10-19 10:12:44.512390

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '5b2d8e41c9a7'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


BOOKING_STATUS = postgresql.ENUM('pending', 'active', 'canceled', 'complete', name='bookingstatus', create_type=False)


def upgrade() -> None:
    """Upgrade schema."""

    # btree_gist lets a gist exclusion constraint compare employee_id with =
    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
    BOOKING_STATUS.create(op.get_bind(), checkfirst=True)

    # 1. Businesses (booking settings live on the row)
    op.create_table(
        'businesses',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('auto_confirm_bookings', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('booking_buffer_minutes', sa.Integer(), nullable=False, server_default='15'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true()),
    )

    # 2. Employees
    op.create_table(
        'employees',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('business_id', sa.Uuid(), sa.ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('surname', sa.String(100), nullable=False),
        sa.Column('position', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
    )
    op.create_index('ix_employees_business_id', 'employees', ['business_id'])

    # 3. Users (customers)
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # 4. Services
    op.create_table(
        'services',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('business_id', sa.Uuid(), sa.ForeignKey('businesses.id', ondelete='SET NULL'), nullable=True),
        sa.Column('employee_id', sa.Uuid(), sa.ForeignKey('employees.id', ondelete='SET NULL'), nullable=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('duration_minutes', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.CheckConstraint('duration_minutes > 0', name='ck_services_duration_positive'),
        sa.CheckConstraint('price >= 0', name='ck_services_price_non_negative'),
    )
    op.create_index('ix_services_business_id', 'services', ['business_id'])
    op.create_index('ix_services_employee_id', 'services', ['employee_id'])
    op.create_index('ix_services_is_active', 'services', ['is_active'])

    # 5. Weekly schedules
    op.create_table(
        'day_schedules',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('business_id', sa.Uuid(), sa.ForeignKey('businesses.id', ondelete='CASCADE'), nullable=True),
        sa.Column('employee_id', sa.Uuid(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=True),
        sa.CheckConstraint('(business_id IS NULL) <> (employee_id IS NULL)', name='ck_day_schedules_single_owner'),
        sa.CheckConstraint('day_of_week BETWEEN 0 AND 6', name='ck_day_schedules_weekday'),
        sa.UniqueConstraint('business_id', 'day_of_week', name='uq_day_schedules_business_day'),
        sa.UniqueConstraint('employee_id', 'day_of_week', name='uq_day_schedules_employee_day'),
    )
    op.create_index('ix_day_schedules_business_id', 'day_schedules', ['business_id'])
    op.create_index('ix_day_schedules_employee_id', 'day_schedules', ['employee_id'])

    op.create_table(
        'time_slots',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('day_schedule_id', sa.Uuid(), sa.ForeignKey('day_schedules.id', ondelete='CASCADE'), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.CheckConstraint('start_time < end_time', name='ck_time_slots_start_before_end'),
    )
    op.create_index('ix_time_slots_day_schedule_id', 'time_slots', ['day_schedule_id'])

    # 6. Bookings
    op.create_table(
        'bookings',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('service_id', sa.Uuid(), sa.ForeignKey('services.id'), nullable=False),
        sa.Column('employee_id', sa.Uuid(), sa.ForeignKey('employees.id'), nullable=False),
        sa.Column('business_id', sa.Uuid(), sa.ForeignKey('businesses.id'), nullable=False),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('confirmed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('note', sa.String(500), nullable=True),
        sa.Column('final_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('status', BOOKING_STATUS, nullable=False),
    )
    op.create_index('ix_bookings_employee_start', 'bookings', ['employee_id', 'start_time'])
    op.create_index('ix_bookings_user_id', 'bookings', ['user_id'])
    op.create_index('ix_bookings_business_id', 'bookings', ['business_id'])
    op.create_index('ix_bookings_status', 'bookings', ['status'])

    # Last line of defence against double-booking: no two blocking bookings
    # of one employee may overlap
    op.execute("""
        ALTER TABLE bookings
        ADD CONSTRAINT ex_bookings_employee_no_overlap
        EXCLUDE USING gist (
            employee_id WITH =,
            tstzrange(start_time, end_time) WITH &&
        )
        WHERE (status IN ('pending', 'active'))
    """)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('bookings')
    op.drop_table('time_slots')
    op.drop_table('day_schedules')
    op.drop_table('services')
    op.drop_table('users')
    op.drop_table('employees')
    op.drop_table('businesses')
    BOOKING_STATUS.drop(op.get_bind(), checkfirst=True)
