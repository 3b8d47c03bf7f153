# app/config/celery_config.py
"""Celery application factory and beat schedule"""
from celery import Celery

from app.config.settings import get_settings

settings = get_settings()


def create_celery_app() -> Celery:
    """Create and configure the Celery application"""
    app = Celery(
        "booking_service",
        broker=settings.CELERY_BROKER_URL,
        backend=settings.CELERY_RESULT_BACKEND,
        include=[
            "app.tasks.booking_tasks",
            "app.tasks.email_tasks",
        ],
    )

    app.conf.update(
        task_serializer=settings.CELERY_TASK_SERIALIZER,
        result_serializer="json",
        accept_content=["json"],
        timezone="UTC",
        enable_utc=True,
        task_acks_late=True,
        worker_prefetch_multiplier=1,
        task_routes={
            "app.tasks.email_tasks.*": {"queue": "notifications"},
            "app.tasks.booking_tasks.*": {"queue": "bookings"},
        },
        beat_schedule={
            "complete-finished-bookings": {
                "task": "app.tasks.booking_tasks.complete_finished_bookings",
                "schedule": float(settings.BOOKING_SWEEP_INTERVAL_SECONDS),
            },
        },
    )

    return app


celery_app = create_celery_app()
