# app/services/availability/availability_service.py
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple, Union
from uuid import UUID

from sqlalchemy.orm import Session, joinedload
import logging

from app.models.service import Service
from app.services.booking.booking_repository import BookingRepository
from app.services.booking.policy import BookingPolicy
from app.services.result import ErrorKind, ServiceResult
from app.services.schedule.schedule_service import Interval, ScheduleService
from app.utils.time_utils import start_of_day, to_utc, utc_date, utc_now

logger = logging.getLogger(__name__)

BusyPeriod = Tuple[datetime, datetime]


def is_slot_free(
        start: datetime,
        end: datetime,
        busy: Iterable[BusyPeriod],
        buffer: timedelta
) -> bool:
    """True when [start, end) stays clear of every busy period padded by buffer on both sides"""
    return not any(
        start < busy_end + buffer and end > busy_start - buffer
        for busy_start, busy_end in busy
    )


def compute_slots(
        day: date,
        intervals: Sequence[Interval],
        duration: timedelta,
        buffer: timedelta,
        busy: Sequence[BusyPeriod],
        now: datetime,
        policy: BookingPolicy
) -> List[datetime]:
    """Candidate start times for one day, walked interval by interval on the policy grid"""
    day_start = start_of_day(day)
    earliest_start = now + policy.lead_time
    is_today = day == now.date()

    slots = []
    for interval_start, interval_end in intervals:
        candidate = day_start + interval_start

        if is_today and candidate < earliest_start:
            candidate = earliest_start

        while (candidate - day_start) + duration <= interval_end:
            if is_slot_free(candidate, candidate + duration, busy, buffer):
                slots.append(candidate)
            candidate += policy.slot_step

    return slots


class AvailabilityService:
    """Computes bookable start times for a service on a given date"""

    def __init__(self, db: Session, policy: Optional[BookingPolicy] = None):
        self.db = db
        self.policy = policy or BookingPolicy.from_settings()
        self.bookings = BookingRepository(db)
        self.schedules = ScheduleService(db)

    def get_available_slots(
            self,
            service_id: UUID,
            selected_date: Union[date, datetime],
            now: Optional[datetime] = None
    ) -> ServiceResult[List[datetime]]:
        """
        Available start times (UTC) for the service on selected_date.

        Past dates and services with a broken business/employee link are
        errors. A day on which the business or the employee is closed is a
        valid answer with no slots.
        """
        now = to_utc(now) if now else utc_now()
        day = utc_date(selected_date)

        if day < now.date():
            logger.warning(f"Attempt to get slots for past date: {day}")
            return ServiceResult.fail(ErrorKind.INVALID_INPUT, "Cannot check past dates.")

        logger.info(f"Checking availability for service {service_id} on {day}")

        service = self.db.query(Service).options(
            joinedload(Service.business),
            joinedload(Service.employee)
        ).filter(Service.id == service_id).first()

        if not service:
            logger.warning(f"Service {service_id} not found")
            return ServiceResult.fail(ErrorKind.NOT_FOUND, "Service not found.")

        business = service.business
        employee = service.employee

        if business is None or employee is None:
            logger.warning(f"Service {service_id} is missing associated business or employee")
            return ServiceResult.fail(ErrorKind.INVALID_INPUT, "Invalid business or employee.")

        weekday = day.weekday()
        business_intervals = self.schedules.get_day_intervals(weekday, business_id=business.id)
        employee_intervals = self.schedules.get_day_intervals(weekday, employee_id=employee.id)

        if business_intervals is None or employee_intervals is None:
            logger.info(f"Business or employee closed on {day} (weekday {weekday}) for service {service_id}")
            return ServiceResult.ok([])

        # Bookings just across midnight still reach into this day through the buffer
        day_start = start_of_day(day)
        buffer = business.booking_buffer
        busy = [
            (booking.start_time, booking.end_time)
            for booking in self.bookings.get_active_or_pending(
                employee.id, day_start - buffer, day_start + timedelta(days=1) + buffer
            )
        ]

        # Only business intervals seed candidates; employee hours are enforced
        # when the employee schedule is saved.
        slots = compute_slots(
            day=day,
            intervals=business_intervals,
            duration=service.duration,
            buffer=buffer,
            busy=busy,
            now=now,
            policy=self.policy,
        )

        logger.info(f"Found {len(slots)} available time slots for service {service_id}")
        return ServiceResult.ok(slots)
