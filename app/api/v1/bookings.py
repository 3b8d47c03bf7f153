# app/api/v1/bookings.py
"""
Booking API Endpoints
Availability lookup, booking creation, status changes and listings
"""
from datetime import date
from typing import List
from uuid import UUID
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.dependencies import AccountRole, CurrentAccount, get_current_account, require_business, require_user
from app.config.database import get_db
from app.schemas.booking import (
    AvailableSlotsResponse,
    BookingCreateRequest,
    BookingResponse,
    BookingStatusUpdate,
    CompletedBookingResponse
)
from app.services.availability.availability_service import AvailabilityService
from app.services.booking.booking_query_service import BookingQueryService
from app.services.booking.booking_service import BookingService
from app.services.booking.booking_status_service import BookingStatusService
from app.services.notification.notification_service import BookingNotifier, get_notifier
from app.services.result import ServiceResult

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/bookings")


def _unwrap(result: ServiceResult):
    """Return result data or raise the matching HTTP error"""
    if not result.success:
        raise HTTPException(status_code=result.status_code, detail=result.error)
    return result.data


# ============================================================================
# Endpoints
# ============================================================================

@router.get("/available", response_model=AvailableSlotsResponse)
def get_available_slots(
        service_id: UUID = Query(...),
        selected_date: date = Query(..., description="Date to check (YYYY-MM-DD, UTC)"),
        db: Session = Depends(get_db)
):
    """
    Get available start times for a service on a date
    """
    slots = _unwrap(AvailabilityService(db).get_available_slots(service_id, selected_date))

    return AvailableSlotsResponse(
        service_id=service_id,
        date=selected_date.isoformat(),
        total_slots=len(slots),
        slots=slots
    )


@router.post("", response_model=List[BookingResponse], status_code=status.HTTP_201_CREATED)
def create_bookings(
        requests: List[BookingCreateRequest],
        account: CurrentAccount = Depends(require_user),
        db: Session = Depends(get_db),
        notifier: BookingNotifier = Depends(get_notifier)
):
    """
    Book one or more services in a single all-or-nothing request
    """
    bookings = _unwrap(BookingService(db, notifier).create_bookings(account.account_id, requests))
    return [BookingResponse.model_validate(booking) for booking in bookings]


@router.patch("/{booking_id}/status", response_model=BookingResponse)
def update_booking_status(
        booking_id: UUID,
        payload: BookingStatusUpdate,
        account: CurrentAccount = Depends(get_current_account),
        db: Session = Depends(get_db),
        notifier: BookingNotifier = Depends(get_notifier)
):
    """
    Change a booking's status.

    Businesses confirm (active) or reject (canceled) their bookings; customers
    may only cancel their own.
    """
    service = BookingStatusService(db, notifier)

    if account.role == AccountRole.BUSINESS:
        result = service.set_status_by_business(booking_id, account.account_id, payload.status)
    else:
        result = service.set_status_by_user(booking_id, account.account_id, payload.status)

    return BookingResponse.model_validate(_unwrap(result))


@router.get("/user")
def list_user_bookings(
        account: CurrentAccount = Depends(require_user),
        db: Session = Depends(get_db)
):
    """List the caller's bookings ordered by start time"""
    return BookingQueryService.list_user_bookings(db, account.account_id)


@router.get("/business")
def list_business_bookings(
        account: CurrentAccount = Depends(require_business),
        db: Session = Depends(get_db)
):
    """List all bookings of the caller's business ordered by start time"""
    return BookingQueryService.list_business_bookings(db, account.account_id)


@router.get("/completed", response_model=CompletedBookingResponse)
def has_completed_booking(
        business_id: UUID = Query(...),
        account: CurrentAccount = Depends(require_user),
        db: Session = Depends(get_db)
):
    """Whether the caller has at least one completed booking with the business"""
    completed = BookingStatusService(db).user_has_completed_booking(account.account_id, business_id)
    return CompletedBookingResponse(business_id=business_id, has_completed_booking=completed)
