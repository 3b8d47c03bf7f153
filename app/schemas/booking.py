"""
Pydantic schemas for booking requests and responses
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.booking import BookingStatus


class BookingCreateRequest(BaseModel):
    """One (service, start time) pair in a booking request"""
    service_id: UUID
    start_time: datetime = Field(..., description="Requested start; naive values are read as UTC")
    note: Optional[str] = Field(None, max_length=500)


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class AvailableSlotsResponse(BaseModel):
    service_id: UUID
    date: str
    total_slots: int
    slots: List[datetime]


class BookingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    service_id: UUID
    employee_id: UUID
    business_id: UUID
    start_time: datetime
    end_time: datetime
    created_at: datetime
    confirmed_at: Optional[datetime] = None
    note: Optional[str] = None
    final_price: Decimal
    status: BookingStatus


class CompletedBookingResponse(BaseModel):
    business_id: UUID
    has_completed_booking: bool
