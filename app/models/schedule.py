# app/models/schedule.py
"""Weekly working-hour schedules for businesses and employees"""
from sqlalchemy import (
    Column, Integer, Time, ForeignKey, Uuid, CheckConstraint, UniqueConstraint
)
from sqlalchemy.orm import relationship
import uuid

from app.models.base import Base


class DaySchedule(Base):
    """
    Opening hours of one weekday (0=Monday, 6=Sunday).

    Owned by exactly one of a business or an employee. A weekday without a
    row means closed.
    """
    __tablename__ = "day_schedules"
    __table_args__ = (
        CheckConstraint(
            "(business_id IS NULL) <> (employee_id IS NULL)",
            name="ck_day_schedules_single_owner",
        ),
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_day_schedules_weekday"),
        UniqueConstraint("business_id", "day_of_week", name="uq_day_schedules_business_day"),
        UniqueConstraint("employee_id", "day_of_week", name="uq_day_schedules_employee_day"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    day_of_week = Column(Integer, nullable=False)

    business_id = Column(
        Uuid(as_uuid=True), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=True, index=True
    )
    employee_id = Column(
        Uuid(as_uuid=True), ForeignKey("employees.id", ondelete="CASCADE"), nullable=True, index=True
    )

    business = relationship("Business", back_populates="schedule")
    employee = relationship("Employee", back_populates="schedule")
    time_slots = relationship(
        "TimeSlot",
        back_populates="day_schedule",
        cascade="all, delete-orphan",
        order_by="TimeSlot.start_time",
    )

    def __repr__(self):
        return f"<DaySchedule(day={self.day_of_week}, slots={len(self.time_slots)})>"


class TimeSlot(Base):
    """One opening interval inside a day schedule"""
    __tablename__ = "time_slots"
    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_time_slots_start_before_end"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    day_schedule_id = Column(
        Uuid(as_uuid=True), ForeignKey("day_schedules.id", ondelete="CASCADE"), nullable=False, index=True
    )
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    day_schedule = relationship("DaySchedule", back_populates="time_slots")
