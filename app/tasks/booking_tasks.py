# ===== app/tasks/booking_tasks.py =====
import logging

from app.config.celery_config import celery_app
from app.config.database import SessionLocal
from app.services.booking.booking_status_service import BookingStatusService

logger = logging.getLogger(__name__)


@celery_app.task
def complete_finished_bookings():
    """
    Periodic sweep (Celery beat): mark active bookings whose end time has
    passed as complete. Failures are logged and the next run tries again.
    """
    db = SessionLocal()
    try:
        updated = BookingStatusService(db).complete_expired_bookings()
        if updated:
            logger.info(f"Completion sweep marked {updated} bookings as complete")
        return {"status": "success", "updated": updated}

    except Exception as exc:
        logger.error(f"Completion sweep failed: {exc}", exc_info=True)
        return {"status": "failed", "reason": str(exc)}
    finally:
        db.close()
