# app/services/booking/policy.py
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from app.config.settings import Settings, get_settings


@dataclass(frozen=True)
class BookingPolicy:
    """Platform-wide booking constants (not configurable per business)"""
    slot_step: timedelta = timedelta(minutes=15)
    lead_time: timedelta = timedelta(minutes=15)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "BookingPolicy":
        settings = settings or get_settings()
        return cls(
            slot_step=timedelta(minutes=settings.BOOKING_SLOT_STEP_MINUTES),
            lead_time=timedelta(minutes=settings.BOOKING_LEAD_TIME_MINUTES),
        )
