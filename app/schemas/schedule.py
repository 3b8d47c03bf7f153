"""
Pydantic schemas for weekly schedules
"""
from datetime import time
from typing import List
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class TimeSlotSchema(BaseModel):
    """One opening interval, e.g. 09:00-12:00"""
    model_config = ConfigDict(from_attributes=True)

    start_time: time
    end_time: time


class DayScheduleUpdate(BaseModel):
    """Opening hours of one weekday in a full-week replacement"""
    day_of_week: int = Field(..., ge=0, le=6, description="0=Monday, 6=Sunday")
    time_slots: List[TimeSlotSchema] = Field(default_factory=list)


class DayScheduleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    day_of_week: int
    time_slots: List[TimeSlotSchema]
