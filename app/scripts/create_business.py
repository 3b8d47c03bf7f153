#!/usr/bin/env python3
"""
Script to create a demo business with opening hours, one employee and services,
and print access tokens for trying the API locally
Usage: python -m app.scripts.create_business
"""
import sys
import traceback
from datetime import time
from decimal import Decimal
from sqlalchemy.orm import Session

from app.api.dependencies import create_access_token
from app.config.database import SessionLocal
from app.models import Business, DaySchedule, Employee, Service, TimeSlot, User

DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

# Opening hours (Monday=0); Sunday is closed
BUSINESS_HOURS = {
    0: [(time(9), time(13)), (time(14), time(19))],
    1: [(time(9), time(13)), (time(14), time(19))],
    2: [(time(9), time(13)), (time(14), time(19))],
    3: [(time(9), time(13)), (time(14), time(19))],
    4: [(time(9), time(13)), (time(14), time(19))],
    5: [(time(10), time(16))],
}

SERVICES = [
    {"name": "Haircut", "price": Decimal("45.00"), "duration_minutes": 30},
    {"name": "Hair Colouring", "price": Decimal("120.00"), "duration_minutes": 90},
    {"name": "Beard Trim", "price": Decimal("20.00"), "duration_minutes": 15},
]


def _week(hours):
    return [
        DaySchedule(
            day_of_week=day,
            time_slots=[TimeSlot(start_time=start, end_time=end) for start, end in slots]
        )
        for day, slots in hours.items()
    ]


def create_demo_business():
    """Create a demo business with schedules and services"""
    db: Session = SessionLocal()

    try:
        business = Business(
            name="Sunset Hair Studio",
            email="owner@sunsethair.example.com",
            auto_confirm_bookings=False,
            booking_buffer_minutes=15,
            schedule=_week(BUSINESS_HOURS),
        )
        db.add(business)
        db.flush()  # Get the ID without committing

        employee = Employee(
            business_id=business.id,
            name="Maria",
            surname="Lopez",
            position="Senior Stylist",
            email="maria@sunsethair.example.com",
            schedule=_week(BUSINESS_HOURS),
        )
        db.add(employee)
        db.flush()

        services = [
            Service(business_id=business.id, employee_id=employee.id, **data)
            for data in SERVICES
        ]
        db.add_all(services)

        customer = User(email="customer@example.com", full_name="Demo Customer")
        db.add(customer)

        db.commit()

        print("\n" + "=" * 60)
        print("BUSINESS CREATED SUCCESSFULLY!")
        print("=" * 60)
        print(f"\nBusiness ID: {business.id}")
        print(f"Name: {business.name}")
        print(f"Employee: {employee.full_name} ({employee.id})")
        print(f"\nServices:")
        for service in services:
            print(f"  - {service.name} ({service.formatted_duration}, {service.price}) id={service.id}")
        print(f"\nOpening Hours:")
        for day, day_name in enumerate(DAYS):
            slots = BUSINESS_HOURS.get(day)
            if not slots:
                print(f"  {day_name}: CLOSED")
            else:
                print(f"  {day_name}: " + ", ".join(f"{s:%H:%M} - {e:%H:%M}" for s, e in slots))

        print("\n" + "=" * 60)
        print("ACCESS TOKENS")
        print("=" * 60)
        print(f"\nBusiness: {create_access_token({'sub': str(business.id), 'role': 'business'})}")
        print(f"Customer: {create_access_token({'sub': str(customer.id), 'role': 'user'})}")
        print()

        return str(business.id)

    except Exception as e:
        db.rollback()
        print(f"\n❌ Error creating business: {e}")
        traceback.print_exc()
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    create_demo_business()
