# app/services/booking/booking_repository.py
"""Data access for bookings - the only mutable state the booking engine shares"""
from datetime import datetime
from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy import exists
from sqlalchemy.orm import Session, joinedload

from app.models.booking import Booking, BookingStatus, BLOCKING_STATUSES
from app.services.booking.locks import acquire_advisory_locks


class BookingRepository:

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, booking_id: UUID) -> Optional[Booking]:
        return self.db.query(Booking).options(
            joinedload(Booking.service),
            joinedload(Booking.user),
            joinedload(Booking.business),
            joinedload(Booking.employee),
        ).filter(Booking.id == booking_id).first()

    def get_active_or_pending(
            self,
            employee_id: UUID,
            window_start: Optional[datetime] = None,
            window_end: Optional[datetime] = None
    ) -> List[Booking]:
        """Bookings that block the employee's time, optionally only those overlapping [window_start, window_end)"""
        query = self.db.query(Booking).filter(
            Booking.employee_id == employee_id,
            Booking.status.in_(BLOCKING_STATUSES),
        )

        if window_start is not None:
            query = query.filter(Booking.end_time > window_start)
        if window_end is not None:
            query = query.filter(Booking.start_time < window_end)

        return query.order_by(Booking.start_time.asc()).all()

    def lock_employees(self, employee_ids: Iterable[UUID]) -> None:
        acquire_advisory_locks(self.db, employee_ids)

    def add_all(self, bookings: List[Booking]) -> None:
        if not bookings:
            raise ValueError("Booking list cannot be empty.")
        self.db.add_all(bookings)
        self.db.flush()

    def list_by_user(self, user_id: UUID) -> List[Booking]:
        return self.db.query(Booking).options(
            joinedload(Booking.service),
            joinedload(Booking.business),
            joinedload(Booking.employee),
        ).filter(Booking.user_id == user_id).order_by(Booking.start_time.asc()).all()

    def list_by_business(self, business_id: UUID) -> List[Booking]:
        return self.db.query(Booking).options(
            joinedload(Booking.service),
            joinedload(Booking.user),
            joinedload(Booking.employee),
        ).filter(Booking.business_id == business_id).order_by(Booking.start_time.asc()).all()

    def any_completed(self, user_id: UUID, business_id: UUID) -> bool:
        return self.db.query(
            exists().where(
                Booking.user_id == user_id,
                Booking.business_id == business_id,
                Booking.status == BookingStatus.COMPLETE,
            )
        ).scalar()

    def complete_expired(self, now: datetime, from_statuses: Iterable[BookingStatus]) -> int:
        """Flip bookings that ended before now to complete in one UPDATE guarded on status"""
        return self.db.query(Booking).filter(
            Booking.status.in_(list(from_statuses)),
            Booking.end_time < now,
        ).update({Booking.status: BookingStatus.COMPLETE}, synchronize_session=False)
