# app/models/booking.py
from sqlalchemy import Column, String, Numeric, ForeignKey, Index, Uuid, Enum as SQLEnum
from sqlalchemy.orm import relationship
import uuid
import enum

from app.models.base import Base
from app.models.types import UTCDateTime


class BookingStatus(str, enum.Enum):
    """Lifecycle of a booking"""
    PENDING = "pending"      # waiting for the business to confirm
    ACTIVE = "active"        # confirmed, occupies the employee's calendar
    CANCELED = "canceled"    # rejected by the business or canceled by the user
    COMPLETE = "complete"    # end time has passed


# Statuses that occupy an employee's time
BLOCKING_STATUSES = (BookingStatus.ACTIVE, BookingStatus.PENDING)


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        Index("ix_bookings_employee_start", "employee_id", "start_time"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # References (business/employee denormalized from the service)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    service_id = Column(Uuid(as_uuid=True), ForeignKey("services.id"), nullable=False)
    employee_id = Column(Uuid(as_uuid=True), ForeignKey("employees.id"), nullable=False)
    business_id = Column(Uuid(as_uuid=True), ForeignKey("businesses.id"), nullable=False, index=True)

    # end_time is start_time + service duration at creation, never recomputed
    start_time = Column(UTCDateTime, nullable=False)
    end_time = Column(UTCDateTime, nullable=False)
    created_at = Column(UTCDateTime, nullable=False)
    confirmed_at = Column(UTCDateTime, nullable=True)

    note = Column(String(500), nullable=True)
    # Price snapshot taken at creation
    final_price = Column(Numeric(10, 2), nullable=False)

    status = Column(
        SQLEnum(
            BookingStatus,
            name="bookingstatus",
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        index=True,
    )

    user = relationship("User")
    service = relationship("Service")
    employee = relationship("Employee")
    business = relationship("Business")

    def __repr__(self):
        return f"<Booking(id={self.id}, employee_id={self.employee_id}, status={self.status})>"
