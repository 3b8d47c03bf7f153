# app/services/booking/booking_status_service.py
"""Status changes of existing bookings: business confirm/reject, user cancel, time-driven completion"""
import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.booking import Booking, BookingStatus
from app.services.booking.booking_repository import BookingRepository
from app.services.booking.transitions import Actor, actor_may_request, can_transition
from app.services.notification.notification_service import BookingNotifier, dispatch
from app.services.result import ErrorKind, ServiceResult
from app.utils.time_utils import to_utc, utc_now

logger = logging.getLogger(__name__)


class BookingStatusService:

    def __init__(self, db: Session, notifier: Optional[BookingNotifier] = None):
        self.db = db
        self.notifier = notifier
        self.bookings = BookingRepository(db)

    def set_status_by_business(
            self,
            booking_id: UUID,
            business_id: UUID,
            new_status: BookingStatus,
            now: Optional[datetime] = None
    ) -> ServiceResult[Booking]:
        """Confirm (-> active) or reject (-> canceled) a booking of the caller's business"""
        result = self._load_for_transition(booking_id, Actor.BUSINESS, new_status)
        if not result.success:
            return result
        booking = result.data

        if booking.business_id != business_id:
            logger.warning(f"Unauthorized attempt to modify booking {booking_id} by business {business_id}")
            return ServiceResult.fail(ErrorKind.ACCESS_DENIED, "Access denied.")

        if not can_transition(booking.status, Actor.BUSINESS, new_status):
            return self._illegal_transition(booking, Actor.BUSINESS, new_status)

        booking.status = new_status
        if new_status == BookingStatus.ACTIVE:
            booking.confirmed_at = to_utc(now) if now else utc_now()

        self._commit(booking)

        if new_status == BookingStatus.ACTIVE:
            self._notify("notify_booking_confirmed", booking)
        else:
            self._notify("notify_booking_rejected", booking)

        logger.info(f"Booking {booking_id} status updated to '{new_status.value}' by business {business_id}")
        return ServiceResult.ok(booking)

    def set_status_by_user(
            self,
            booking_id: UUID,
            user_id: UUID,
            new_status: BookingStatus
    ) -> ServiceResult[Booking]:
        """Let a user cancel their own booking"""
        result = self._load_for_transition(booking_id, Actor.USER, new_status)
        if not result.success:
            return result
        booking = result.data

        if booking.user_id != user_id:
            logger.warning(f"Unauthorized attempt to modify booking {booking_id} by user {user_id}")
            return ServiceResult.fail(ErrorKind.ACCESS_DENIED, "Access denied.")

        if not can_transition(booking.status, Actor.USER, new_status):
            return self._illegal_transition(booking, Actor.USER, new_status)

        booking.status = new_status
        self._commit(booking)
        self._notify("notify_booking_rejected", booking)

        logger.info(f"Booking {booking_id} status updated to '{new_status.value}' by user {user_id}")
        return ServiceResult.ok(booking)

    def complete_expired_bookings(self, now: Optional[datetime] = None) -> int:
        """Flip every active booking that has ended to complete. No notifications are sent."""
        now = to_utc(now) if now else utc_now()
        sources = [
            status for status in BookingStatus
            if can_transition(status, Actor.SYSTEM, BookingStatus.COMPLETE)
        ]

        try:
            updated = self.bookings.complete_expired(now, sources)
            self.db.commit()
        except Exception as e:
            logger.error(f"Error completing expired bookings: {e}", exc_info=True)
            self.db.rollback()
            raise

        if updated:
            logger.info(f"Updated {updated} bookings to 'complete'")
        return updated

    def user_has_completed_booking(self, user_id: UUID, business_id: UUID) -> bool:
        """Review eligibility: at least one completed booking with the business"""
        return self.bookings.any_completed(user_id, business_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _load_for_transition(
            self,
            booking_id: UUID,
            actor: Actor,
            new_status: BookingStatus
    ) -> ServiceResult[Booking]:
        if not actor_may_request(actor, new_status):
            logger.warning(f"Invalid booking status value from {actor.value}: {new_status}")
            return ServiceResult.fail(ErrorKind.INVALID_INPUT, "Invalid status value.")

        booking = self.bookings.get_by_id(booking_id)
        if not booking:
            logger.warning(f"Booking {booking_id} not found")
            return ServiceResult.fail(ErrorKind.NOT_FOUND, "Booking not found.")

        return ServiceResult.ok(booking)

    @staticmethod
    def _illegal_transition(booking: Booking, actor: Actor, new_status: BookingStatus) -> ServiceResult:
        logger.warning(
            f"Refused transition of booking {booking.id} from '{booking.status.value}' "
            f"to '{new_status.value}' by {actor.value}"
        )
        return ServiceResult.fail(
            ErrorKind.CONFLICT,
            f"Cannot change booking status from {booking.status.value} to {new_status.value}."
        )

    def _commit(self, booking: Booking) -> None:
        try:
            self.db.commit()
        except Exception as e:
            logger.error(f"Error updating booking {booking.id}: {e}", exc_info=True)
            self.db.rollback()
            raise
        self.db.refresh(booking)

    def _notify(self, method: str, booking: Booking) -> None:
        if self.notifier is None:
            return
        dispatch(getattr(self.notifier, method), booking)
