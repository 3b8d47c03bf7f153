# app/schemas/__init__.py
from .schedule import (
    TimeSlotSchema,
    DayScheduleUpdate,
    DayScheduleResponse
)

from .booking import (
    BookingCreateRequest,
    BookingStatusUpdate,
    AvailableSlotsResponse,
    BookingResponse,
    CompletedBookingResponse
)

from .business import (
    BusinessSettingsUpdate,
    BusinessSettingsResponse
)
