"""
Business Management Dashboard Routes
Business-authenticated endpoints for booking settings
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
import logging

from app.api.dependencies import CurrentAccount, require_business
from app.config.database import get_db
from app.schemas.business import BusinessSettingsResponse, BusinessSettingsUpdate
from app.services.business.business_service import BusinessService

logger = logging.getLogger(__name__)
router = APIRouter(tags=["dashboard-business"])


@router.get("/settings", response_model=BusinessSettingsResponse)
def get_booking_settings(
        account: CurrentAccount = Depends(require_business),
        db: Session = Depends(get_db)
):
    """Current booking settings of the caller's business"""
    business = BusinessService.get_business(db, account.account_id)
    if not business:
        raise HTTPException(status_code=404, detail="Business not found")

    return BusinessSettingsResponse(**business.settings_dict())


@router.patch("/settings", response_model=BusinessSettingsResponse)
def update_booking_settings(
        updates: BusinessSettingsUpdate,
        account: CurrentAccount = Depends(require_business),
        db: Session = Depends(get_db)
):
    """
    Update booking settings (partial update).

    Only send the fields you want to change:
    - auto_confirm_bookings: new bookings start as active instead of pending
    - booking_buffer_minutes: gap kept before and after every booking
    """
    result = BusinessService.update_settings(
        db,
        account.account_id,
        auto_confirm_bookings=updates.auto_confirm_bookings,
        booking_buffer_minutes=updates.booking_buffer_minutes
    )
    if not result.success:
        raise HTTPException(status_code=result.status_code, detail=result.error)

    return BusinessSettingsResponse(**result.data.settings_dict())
