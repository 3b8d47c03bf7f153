# app/models/__init__.py
from .base import Base
from .business import Business
from .employee import Employee
from .user import User
from .service import Service
from .schedule import DaySchedule, TimeSlot
from .booking import Booking, BookingStatus, BLOCKING_STATUSES

__all__ = [
    "Base",
    "Business",
    "Employee",
    "User",
    "Service",
    "DaySchedule",
    "TimeSlot",
    "Booking",
    "BookingStatus",
    "BLOCKING_STATUSES",
]
