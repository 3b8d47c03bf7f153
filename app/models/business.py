# app/models/business.py
"""
Business Model
Booking settings (auto-confirm, buffer time) live directly on the business row.
"""
from datetime import timedelta

from sqlalchemy import Column, String, Boolean, Integer, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from app.config.settings import get_settings
from app.models.base import Base
from app.models.types import UTCDateTime


def _default_buffer_minutes() -> int:
    return get_settings().DEFAULT_BOOKING_BUFFER_MINUTES


class Business(Base):
    __tablename__ = "businesses"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=False)

    # Booking settings
    auto_confirm_bookings = Column(Boolean, nullable=False, default=False)
    booking_buffer_minutes = Column(Integer, nullable=False, default=_default_buffer_minutes)

    # Technical fields
    created_at = Column(UTCDateTime, server_default=func.now())
    updated_at = Column(UTCDateTime, server_default=func.now(), onupdate=func.now())
    is_active = Column(Boolean, default=True)

    employees = relationship("Employee", back_populates="business")
    services = relationship("Service", back_populates="business")
    schedule = relationship(
        "DaySchedule",
        back_populates="business",
        cascade="all, delete-orphan",
        order_by="DaySchedule.day_of_week",
    )

    @property
    def booking_buffer(self) -> timedelta:
        """Gap kept free before and after every booking of this business"""
        return timedelta(minutes=self.booking_buffer_minutes or 0)

    def __repr__(self):
        return f"<Business(id={self.id}, name={self.name})>"

    def settings_dict(self):
        return {
            "auto_confirm_bookings": self.auto_confirm_bookings,
            "booking_buffer_minutes": self.booking_buffer_minutes,
        }
