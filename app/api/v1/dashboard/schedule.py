"""
Schedule Dashboard Routes
Business-authenticated endpoints for weekly business and employee schedules
"""
from typing import List
from uuid import UUID
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.dependencies import CurrentAccount, require_business
from app.config.database import get_db
from app.schemas.schedule import DayScheduleResponse, DayScheduleUpdate
from app.services.result import ServiceResult
from app.services.schedule.schedule_service import ScheduleService

logger = logging.getLogger(__name__)
router = APIRouter(tags=["dashboard-schedule"])


def _to_response(result: ServiceResult) -> List[DayScheduleResponse]:
    if not result.success:
        raise HTTPException(status_code=result.status_code, detail=result.error)
    return [DayScheduleResponse.model_validate(day) for day in result.data]


# ============================================================================
# Business schedule
# ============================================================================

@router.get("/schedule", response_model=List[DayScheduleResponse])
def get_business_schedule(
        account: CurrentAccount = Depends(require_business),
        db: Session = Depends(get_db)
):
    """Weekly opening hours of the caller's business; missing days are closed"""
    return _to_response(ScheduleService(db).get_business_schedule(account.account_id))


@router.put("/schedule", response_model=List[DayScheduleResponse])
def replace_business_schedule(
        days: List[DayScheduleUpdate],
        account: CurrentAccount = Depends(require_business),
        db: Session = Depends(get_db)
):
    """
    Replace the whole weekly schedule of the business.
    Days left out of the payload become closed days.
    """
    return _to_response(ScheduleService(db).replace_business_schedule(account.account_id, days))


# ============================================================================
# Employee schedule
# ============================================================================

@router.get("/employees/{employee_id}/schedule", response_model=List[DayScheduleResponse])
def get_employee_schedule(
        employee_id: UUID,
        account: CurrentAccount = Depends(require_business),
        db: Session = Depends(get_db)
):
    return _to_response(ScheduleService(db).get_employee_schedule(employee_id, account.account_id))


@router.put("/employees/{employee_id}/schedule", response_model=List[DayScheduleResponse])
def replace_employee_schedule(
        employee_id: UUID,
        days: List[DayScheduleUpdate],
        account: CurrentAccount = Depends(require_business),
        db: Session = Depends(get_db)
):
    """Replace an employee's week; hours must fit inside the business hours"""
    return _to_response(
        ScheduleService(db).replace_employee_schedule(employee_id, account.account_id, days)
    )
