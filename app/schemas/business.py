"""
Pydantic schemas for business booking settings
"""
from typing import Optional

from pydantic import BaseModel, Field


class BusinessSettingsUpdate(BaseModel):
    """
    Partial update of booking settings.
    Only send the fields you want to change.
    """
    auto_confirm_bookings: Optional[bool] = None
    booking_buffer_minutes: Optional[int] = Field(None, description="Gap kept before and after every booking")


class BusinessSettingsResponse(BaseModel):
    auto_confirm_bookings: bool
    booking_buffer_minutes: int
