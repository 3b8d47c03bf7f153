# app/services/booking/booking_query_service.py
"""
Read-only booking listings for users and businesses.
Pure business logic - no FastAPI dependencies.
"""
from typing import Any, Dict
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.booking import Booking
from app.services.booking.booking_repository import BookingRepository
from app.utils.time_utils import format_utc


class BookingQueryService:
    """Service layer for booking listings."""

    @staticmethod
    def list_user_bookings(db: Session, user_id: UUID) -> Dict[str, Any]:
        bookings = BookingRepository(db).list_by_user(user_id)

        return {
            "user_id": str(user_id),
            "total_bookings": len(bookings),
            "bookings": [
                {
                    **BookingQueryService.serialize_booking(booking),
                    "business_name": booking.business.name if booking.business else None,
                }
                for booking in bookings
            ]
        }

    @staticmethod
    def list_business_bookings(db: Session, business_id: UUID) -> Dict[str, Any]:
        bookings = BookingRepository(db).list_by_business(business_id)

        return {
            "business_id": str(business_id),
            "total_bookings": len(bookings),
            "bookings": [
                {
                    **BookingQueryService.serialize_booking(booking),
                    "user_name": booking.user.full_name if booking.user else None,
                    "user_email": booking.user.email if booking.user else None,
                }
                for booking in bookings
            ]
        }

    @staticmethod
    def serialize_booking(booking: Booking) -> Dict[str, Any]:
        """Convert Booking model to dictionary."""
        return {
            "id": str(booking.id),
            "user_id": str(booking.user_id),
            "business_id": str(booking.business_id),
            "service_id": str(booking.service_id),
            "service_name": booking.service.name if booking.service else None,
            "employee_id": str(booking.employee_id),
            "employee_name": booking.employee.full_name if booking.employee else None,
            "start_time": format_utc(booking.start_time),
            "end_time": format_utc(booking.end_time),
            "created_at": format_utc(booking.created_at),
            "confirmed_at": format_utc(booking.confirmed_at),
            "note": booking.note,
            "final_price": str(booking.final_price),
            "status": booking.status.value,
        }
