# app/services/business/business_service.py
"""Service for business booking settings"""
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session
import logging

from app.models.business import Business
from app.services.result import ErrorKind, ServiceResult

logger = logging.getLogger(__name__)


class BusinessService:
    """Handles business-related operations"""

    @staticmethod
    def get_business(db: Session, business_id: UUID) -> Optional[Business]:
        return db.query(Business).filter(Business.id == business_id).first()

    @staticmethod
    def update_settings(
            db: Session,
            business_id: UUID,
            auto_confirm_bookings: Optional[bool] = None,
            booking_buffer_minutes: Optional[int] = None
    ) -> ServiceResult[Business]:
        """Patch booking settings; fields left as None are not touched"""
        business = BusinessService.get_business(db, business_id)
        if not business:
            logger.warning(f"Business {business_id} not found while updating settings")
            return ServiceResult.fail(ErrorKind.NOT_FOUND, "Business not found.")

        if booking_buffer_minutes is not None and booking_buffer_minutes < 0:
            return ServiceResult.fail(ErrorKind.INVALID_INPUT, "Booking buffer time cannot be negative.")

        if auto_confirm_bookings is not None:
            business.auto_confirm_bookings = auto_confirm_bookings
        if booking_buffer_minutes is not None:
            business.booking_buffer_minutes = booking_buffer_minutes

        try:
            db.commit()
        except Exception as e:
            logger.error(f"Error updating settings for business {business_id}: {e}", exc_info=True)
            db.rollback()
            raise

        db.refresh(business)
        logger.info(f"Booking settings updated for business {business_id}: {business.settings_dict()}")
        return ServiceResult.ok(business)
