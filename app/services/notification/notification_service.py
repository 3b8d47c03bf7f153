# app/services/notification/notification_service.py
"""
Booking notification trigger points.

The booking engine only decides *when* to notify. Delivery is handed to
Celery email tasks, and a failing notifier never undoes a booking write.
"""
import logging
from typing import Callable, Protocol

from app.models.booking import Booking

logger = logging.getLogger(__name__)


class BookingNotifier(Protocol):
    def notify_booking_requested(self, booking: Booking) -> None: ...

    def notify_booking_confirmed(self, booking: Booking) -> None: ...

    def notify_booking_rejected(self, booking: Booking) -> None: ...


class CeleryBookingNotifier:
    """Queues booking emails on the notifications queue"""

    def notify_booking_requested(self, booking: Booking) -> None:
        from app.tasks.email_tasks import send_booking_request_email
        send_booking_request_email.delay(str(booking.id))

    def notify_booking_confirmed(self, booking: Booking) -> None:
        from app.tasks.email_tasks import send_booking_confirmation_email
        send_booking_confirmation_email.delay(str(booking.id))

    def notify_booking_rejected(self, booking: Booking) -> None:
        from app.tasks.email_tasks import send_booking_rejection_email
        send_booking_rejection_email.delay(str(booking.id))


def dispatch(notify: Callable[[Booking], None], booking: Booking) -> bool:
    """Run one notifier call; failures are logged and reported as False, never raised"""
    try:
        notify(booking)
        return True
    except Exception as e:
        logger.error(
            f"Notification {getattr(notify, '__name__', notify)} failed for booking {booking.id}: {e}",
            exc_info=True
        )
        return False


def get_notifier() -> BookingNotifier:
    """FastAPI dependency; overridden in tests"""
    return CeleryBookingNotifier()
