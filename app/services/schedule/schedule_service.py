# app/services/schedule/schedule_service.py
"""Service for reading and replacing weekly business/employee schedules"""
import calendar
import logging
from datetime import timedelta
from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy.orm import Session, selectinload

from app.models.business import Business
from app.models.employee import Employee
from app.models.schedule import DaySchedule, TimeSlot
from app.schemas.schedule import DayScheduleUpdate
from app.services.result import ErrorKind, ServiceResult
from app.utils.time_utils import time_to_offset

logger = logging.getLogger(__name__)

Interval = Tuple[timedelta, timedelta]


class ScheduleService:
    """Weekly schedules are always replaced wholesale, never patched"""

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Schedule provider used by the availability calculator
    # ------------------------------------------------------------------

    def get_day_intervals(
            self,
            day_of_week: int,
            business_id: Optional[UUID] = None,
            employee_id: Optional[UUID] = None
    ) -> Optional[List[Interval]]:
        """
        Opening intervals for one weekday as offsets from midnight.
        Returns None when the owner is closed that day.
        """
        query = self.db.query(DaySchedule).options(selectinload(DaySchedule.time_slots))
        if business_id is not None:
            query = query.filter(DaySchedule.business_id == business_id)
        elif employee_id is not None:
            query = query.filter(DaySchedule.employee_id == employee_id)
        else:
            raise ValueError("Either business_id or employee_id is required")

        day_schedule = query.filter(DaySchedule.day_of_week == day_of_week).first()
        if day_schedule is None:
            return None

        return [
            (time_to_offset(slot.start_time), time_to_offset(slot.end_time))
            for slot in day_schedule.time_slots
        ]

    # ------------------------------------------------------------------
    # Business schedule
    # ------------------------------------------------------------------

    def get_business_schedule(self, business_id: UUID) -> ServiceResult[List[DaySchedule]]:
        business = self.db.query(Business).filter(Business.id == business_id).first()
        if not business:
            logger.warning(f"Business {business_id} not found while retrieving schedule")
            return ServiceResult.fail(ErrorKind.NOT_FOUND, "Business not found.")

        return ServiceResult.ok(sorted(business.schedule, key=lambda d: d.day_of_week))

    def replace_business_schedule(
            self,
            business_id: UUID,
            days: Sequence[DayScheduleUpdate]
    ) -> ServiceResult[List[DaySchedule]]:
        business = self.db.query(Business).filter(Business.id == business_id).first()
        if not business:
            logger.warning(f"Business {business_id} not found while updating schedule")
            return ServiceResult.fail(ErrorKind.NOT_FOUND, "Business not found.")

        error = self._validate_days(days)
        if error:
            logger.warning(f"Invalid schedule for business {business_id}: {error}")
            return ServiceResult.fail(ErrorKind.INVALID_INPUT, error)

        try:
            self._replace_week(DaySchedule.business_id == business_id, days, business_id=business_id)
            self.db.commit()
        except Exception as e:
            logger.error(f"Error replacing schedule for business {business_id}: {e}", exc_info=True)
            self.db.rollback()
            raise

        logger.info(f"Schedule successfully updated for business {business_id}")
        self.db.refresh(business)
        return ServiceResult.ok(sorted(business.schedule, key=lambda d: d.day_of_week))

    # ------------------------------------------------------------------
    # Employee schedule
    # ------------------------------------------------------------------

    def get_employee_schedule(self, employee_id: UUID, business_id: UUID) -> ServiceResult[List[DaySchedule]]:
        employee = self._get_employee(employee_id, business_id)
        if not employee:
            logger.warning(f"Employee {employee_id} not found in business {business_id}")
            return ServiceResult.fail(ErrorKind.NOT_FOUND, "Employee not found.")

        return ServiceResult.ok(sorted(employee.schedule, key=lambda d: d.day_of_week))

    def replace_employee_schedule(
            self,
            employee_id: UUID,
            business_id: UUID,
            days: Sequence[DayScheduleUpdate]
    ) -> ServiceResult[List[DaySchedule]]:
        """
        Replace the employee's week. Every employee interval must fit inside
        one business interval of the same day, and the business must be open
        on every day the employee works.
        """
        business = self.db.query(Business).filter(Business.id == business_id).first()
        if not business:
            logger.warning(f"Business {business_id} not found while updating employee schedule")
            return ServiceResult.fail(ErrorKind.NOT_FOUND, "Business not found.")

        employee = self._get_employee(employee_id, business_id)
        if not employee:
            logger.warning(f"Employee {employee_id} not found while updating employee schedule")
            return ServiceResult.fail(ErrorKind.NOT_FOUND, "Employee not found.")

        error = self._validate_days(days)
        if error:
            logger.warning(f"Invalid schedule for employee {employee_id}: {error}")
            return ServiceResult.fail(ErrorKind.INVALID_INPUT, error)

        business_days = {d.day_of_week: d.time_slots for d in business.schedule}

        for day in days:
            business_slots = business_days.get(day.day_of_week)
            if business_slots is None:
                day_name = calendar.day_name[day.day_of_week]
                logger.warning(f"Attempt to set employee working hours on closed business day: {day_name}")
                return ServiceResult.fail(ErrorKind.INVALID_INPUT, f"Business is closed on {day_name}.")

            for slot in day.time_slots:
                fits = any(
                    bs.start_time <= slot.start_time and bs.end_time >= slot.end_time
                    for bs in business_slots
                )
                if not fits:
                    logger.warning(
                        f"Employee {employee_id} time slot {slot.start_time}-{slot.end_time} "
                        f"exceeds business hours on day {day.day_of_week}"
                    )
                    return ServiceResult.fail(
                        ErrorKind.INVALID_INPUT,
                        "Employee's working hours exceed business working hours."
                    )

        try:
            self._replace_week(DaySchedule.employee_id == employee_id, days, employee_id=employee_id)
            self.db.commit()
        except Exception as e:
            logger.error(f"Error replacing schedule for employee {employee_id}: {e}", exc_info=True)
            self.db.rollback()
            raise

        logger.info(f"Schedule successfully updated for employee {employee_id}")
        self.db.refresh(employee)
        return ServiceResult.ok(sorted(employee.schedule, key=lambda d: d.day_of_week))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_employee(self, employee_id: UUID, business_id: UUID) -> Optional[Employee]:
        return self.db.query(Employee).filter(
            Employee.id == employee_id,
            Employee.business_id == business_id
        ).first()

    @staticmethod
    def _validate_days(days: Sequence[DayScheduleUpdate]) -> Optional[str]:
        seen = set()
        for day in days:
            if day.day_of_week in seen:
                return f"Duplicate schedule for day {day.day_of_week}."
            seen.add(day.day_of_week)

            if any(slot.start_time >= slot.end_time for slot in day.time_slots):
                return "Incorrect time slots in the work schedule."
        return None

    def _replace_week(self, owner_filter, days: Sequence[DayScheduleUpdate], **owner) -> None:
        """Delete the whole week for the owner, then insert the new one (same transaction)"""
        for existing in self.db.query(DaySchedule).filter(owner_filter).all():
            self.db.delete(existing)
        self.db.flush()

        for day in days:
            self.db.add(DaySchedule(
                day_of_week=day.day_of_week,
                time_slots=[
                    TimeSlot(start_time=slot.start_time, end_time=slot.end_time)
                    for slot in day.time_slots
                ],
                **owner
            ))
        self.db.flush()
