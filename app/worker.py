"""
Celery worker entry point
Runs booking emails and the completion sweep (start beat with -B or a separate beat process)
"""
import logging
from celery.signals import worker_ready, worker_shutdown

from app.config.celery_config import celery_app
from app.utils.my_logging import setup_logging

setup_logging()
logger = logging.getLogger(__name__)


@worker_ready.connect
def worker_ready_handler(sender=None, **kwargs):
    """Handle worker startup"""
    booking_tasks = [name for name in celery_app.tasks.keys() if name.startswith("app.tasks.")]
    logger.info("Celery worker ready")
    logger.info(f"Registered booking tasks: {booking_tasks}")


@worker_shutdown.connect
def worker_shutdown_handler(sender=None, **kwargs):
    """Handle worker shutdown"""
    logger.info("Celery worker shutting down")


if __name__ == "__main__":
    celery_app.start([
        'worker',
        '--beat',
        '--loglevel=info',
        '--queues=notifications,bookings',
        '--concurrency=4',
        '--max-tasks-per-child=1000'
    ])
