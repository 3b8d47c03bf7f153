# ===== app/tasks/email_tasks.py =====
import logging
from uuid import UUID

from sqlalchemy.orm import joinedload

from app.config.celery_config import celery_app
from app.config.database import SessionLocal
from app.models.booking import Booking
from app.services.email.email_service import EmailService

logger = logging.getLogger(__name__)


def _load_booking(db, booking_id: str):
    return db.query(Booking).options(
        joinedload(Booking.service),
        joinedload(Booking.user),
        joinedload(Booking.business),
    ).filter(Booking.id == UUID(booking_id)).first()


@celery_app.task(bind=True, max_retries=3)
def send_booking_request_email(self, booking_id: str):
    """
    Notify the business owner about a booking waiting for confirmation

    Args:
        booking_id: ID of the pending booking
    """
    db = SessionLocal()
    try:
        booking = _load_booking(db, booking_id)
        if not booking or not booking.business:
            logger.error(f"Booking {booking_id} not found for request email")
            return {"status": "failed", "reason": "booking_not_found"}

        logger.info(f"Sending booking request email for {booking_id} to {booking.business.email}")

        EmailService.send_booking_request_email(
            email=booking.business.email,
            service_name=booking.service.name,
            start_time=booking.start_time,
            customer_name=booking.user.full_name if booking.user else None
        )

        return {"status": "success", "booking_id": booking_id}

    except Exception as exc:
        logger.error(f"Failed to send booking request email for {booking_id}: {exc}")

        # Retry with exponential backoff: 1min, 2min, 4min
        raise self.retry(
            exc=exc,
            countdown=60 * (2 ** self.request.retries)
        )
    finally:
        db.close()


@celery_app.task(bind=True, max_retries=3)
def send_booking_confirmation_email(self, booking_id: str):
    """Notify the user that the business confirmed the booking"""
    db = SessionLocal()
    try:
        booking = _load_booking(db, booking_id)
        if not booking or not booking.user:
            logger.error(f"Booking {booking_id} not found for confirmation email")
            return {"status": "failed", "reason": "booking_not_found"}

        EmailService.send_booking_confirmation_email(
            email=booking.user.email,
            service_name=booking.service.name,
            start_time=booking.start_time,
            user_name=booking.user.full_name
        )

        logger.info(f"Booking confirmation email sent for {booking_id}")
        return {"status": "success", "booking_id": booking_id}

    except Exception as exc:
        logger.error(f"Failed to send booking confirmation email for {booking_id}: {exc}")
        raise self.retry(
            exc=exc,
            countdown=60 * (2 ** self.request.retries)
        )
    finally:
        db.close()


@celery_app.task(bind=True, max_retries=3)
def send_booking_rejection_email(self, booking_id: str):
    """Notify the user that the booking was rejected or canceled"""
    db = SessionLocal()
    try:
        booking = _load_booking(db, booking_id)
        if not booking or not booking.user:
            logger.error(f"Booking {booking_id} not found for rejection email")
            return {"status": "failed", "reason": "booking_not_found"}

        EmailService.send_booking_rejection_email(
            email=booking.user.email,
            service_name=booking.service.name,
            start_time=booking.start_time,
            user_name=booking.user.full_name
        )

        logger.info(f"Booking rejection email sent for {booking_id}")
        return {"status": "success", "booking_id": booking_id}

    except Exception as exc:
        logger.error(f"Failed to send booking rejection email for {booking_id}: {exc}")
        raise self.retry(
            exc=exc,
            countdown=60 * (2 ** self.request.retries)
        )
    finally:
        db.close()
