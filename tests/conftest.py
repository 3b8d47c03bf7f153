"""
Shared fixtures: an in-memory SQLite session, a recording notifier and
small factories for businesses, employees, services and schedules.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"

from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.models import Base, Booking, BookingStatus, Business, DaySchedule, Employee, Service, TimeSlot, User

# 2030-01-07 is a Monday
MONDAY = date(2030, 1, 7)
SUNDAY = date(2030, 1, 13)

Hours = Dict[int, List[Tuple[time, time]]]


def at(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=timezone.utc)


class RecordingNotifier:
    """Collects notifier calls as (event, booking_id) pairs"""

    def __init__(self, fail: bool = False):
        self.calls: List[Tuple[str, object]] = []
        self.fail = fail

    def _record(self, event, booking):
        self.calls.append((event, booking.id))
        if self.fail:
            raise RuntimeError("mail queue down")

    def notify_booking_requested(self, booking):
        self._record("requested", booking)

    def notify_booking_confirmed(self, booking):
        self._record("confirmed", booking)

    def notify_booking_rejected(self, booking):
        self._record("rejected", booking)

    def events(self) -> List[str]:
        return [event for event, _ in self.calls]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def file_sessions(tmp_path):
    """Session factory over a file-backed SQLite database; every session gets its own connection"""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'bookings.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


def seed_studio(session, auto_confirm: bool = True, buffer_minutes: int = 15,
                users: int = 1) -> Tuple[Service, List[User]]:
    """One business, one employee, a 30 minute service and some customers, committed"""
    business = Business(
        name="Studio",
        email="studio@example.com",
        auto_confirm_bookings=auto_confirm,
        booking_buffer_minutes=buffer_minutes,
    )
    session.add(business)
    session.flush()
    employee = Employee(business_id=business.id, name="Anna", surname="Kowalska", position="Stylist")
    session.add(employee)
    session.flush()
    service = Service(
        business_id=business.id,
        employee_id=employee.id,
        name="Haircut",
        price=Decimal("50.00"),
        duration_minutes=30,
    )
    customers = [User(email=f"customer{n}@example.com", full_name="Jan Nowak") for n in range(users)]
    session.add(service)
    session.add_all(customers)
    session.commit()
    return service, customers


@pytest.fixture
def notifier():
    return RecordingNotifier()


def _add_week(db, hours: Optional[Hours], **owner):
    for day_of_week, slots in (hours or {}).items():
        db.add(DaySchedule(
            day_of_week=day_of_week,
            time_slots=[TimeSlot(start_time=start, end_time=end) for start, end in slots],
            **owner
        ))


@pytest.fixture
def make_business(db):
    def _make(
            auto_confirm: bool = False,
            buffer_minutes: int = 15,
            hours: Optional[Hours] = None,
            name: str = "Studio"
    ) -> Business:
        business = Business(
            name=name,
            email=f"{name.lower()}@example.com",
            auto_confirm_bookings=auto_confirm,
            booking_buffer_minutes=buffer_minutes,
        )
        db.add(business)
        db.flush()
        _add_week(db, hours, business_id=business.id)
        db.commit()
        return business
    return _make


@pytest.fixture
def make_employee(db):
    def _make(business: Business, hours: Optional[Hours] = None) -> Employee:
        employee = Employee(business_id=business.id, name="Anna", surname="Kowalska", position="Stylist")
        db.add(employee)
        db.flush()
        _add_week(db, hours, employee_id=employee.id)
        db.commit()
        return employee
    return _make


@pytest.fixture
def make_service(db):
    def _make(business: Optional[Business], employee: Optional[Employee],
              duration_minutes: int = 30, price: str = "50.00") -> Service:
        service = Service(
            business_id=business.id if business else None,
            employee_id=employee.id if employee else None,
            name="Haircut",
            price=Decimal(price),
            duration_minutes=duration_minutes,
        )
        db.add(service)
        db.commit()
        return service
    return _make


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make() -> User:
        counter["n"] += 1
        user = User(email=f"customer{counter['n']}@example.com", full_name="Jan Nowak")
        db.add(user)
        db.commit()
        return user
    return _make


@pytest.fixture
def make_booking(db):
    def _make(service: Service, user: User, start: datetime,
              status: BookingStatus = BookingStatus.ACTIVE) -> Booking:
        booking = Booking(
            user_id=user.id,
            service_id=service.id,
            employee_id=service.employee_id,
            business_id=service.business_id,
            start_time=start,
            end_time=start + service.duration,
            created_at=start - timedelta(days=1),
            final_price=service.price,
            status=status,
        )
        db.add(booking)
        db.commit()
        return booking
    return _make


MORNING: Hours = {0: [(time(9), time(12))]}


@pytest.fixture
def salon(make_business, make_employee, make_service):
    """Business and employee open Monday 09:00-12:00, a 30 minute service, 15 minute buffer"""
    business = make_business(hours=MORNING)
    employee = make_employee(business, hours=MORNING)
    service = make_service(business, employee)
    return business, employee, service
