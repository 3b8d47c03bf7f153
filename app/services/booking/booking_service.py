# app/services/booking/booking_service.py
"""Service for creating bookings without double-booking an employee"""
import logging
from datetime import datetime
from typing import Dict, List, Optional, Sequence
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.models.booking import Booking, BookingStatus
from app.models.service import Service
from app.schemas.booking import BookingCreateRequest
from app.services.availability.availability_service import is_slot_free
from app.services.booking.booking_repository import BookingRepository
from app.services.booking.locks import EmployeeLockRegistry, employee_locks
from app.services.booking.policy import BookingPolicy
from app.services.notification.notification_service import BookingNotifier, dispatch
from app.services.result import ErrorKind, ServiceResult
from app.utils.time_utils import to_utc, utc_now

logger = logging.getLogger(__name__)


class BookingService:
    """
    Creates one or more bookings for a user in a single all-or-nothing batch.

    The availability re-check and the insert run in one transaction while
    holding an exclusive lock for every employee in the batch, so two callers
    can never both see a slot as free and both write it.

    Requests in the same batch are checked against stored bookings only, not
    against each other.
    """

    def __init__(
            self,
            db: Session,
            notifier: BookingNotifier,
            policy: Optional[BookingPolicy] = None,
            locks: Optional[EmployeeLockRegistry] = None
    ):
        self.db = db
        self.notifier = notifier
        self.policy = policy or BookingPolicy.from_settings()
        self.locks = locks or employee_locks
        self.bookings = BookingRepository(db)

    def create_bookings(
            self,
            user_id: UUID,
            requests: Sequence[BookingCreateRequest],
            now: Optional[datetime] = None
    ) -> ServiceResult[List[Booking]]:
        if not requests:
            logger.warning("Empty booking list received")
            return ServiceResult.fail(ErrorKind.INVALID_INPUT, "No services selected.")

        now = to_utc(now) if now else utc_now()
        service_ids = list(dict.fromkeys(r.service_id for r in requests))

        logger.info(f"Attempting to create {len(requests)} bookings for user {user_id}")

        services = self._load_services(service_ids)
        if len(services) != len(service_ids):
            logger.warning(
                f"Some services not found: requested {len(service_ids)}, found {len(services)}"
            )
            return ServiceResult.fail(ErrorKind.NOT_FOUND, "Some services not found.")

        for request in requests:
            service = services[request.service_id]
            if service.business is None or service.employee is None:
                logger.warning(f"Service {service.id} is missing business or employee")
                return ServiceResult.fail(
                    ErrorKind.INVALID_INPUT,
                    f"Invalid business or employee for service {service.id}."
                )

        employee_ids = {s.employee_id for s in services.values()}

        try:
            with self.locks.hold(employee_ids):
                self.bookings.lock_employees(employee_ids)

                bookings = []
                for request in requests:
                    service = services[request.service_id]
                    booking = self._build_booking(user_id, service, request, now)

                    if booking is None:
                        self.db.rollback()
                        logger.warning(
                            f"Time slot not available for service {service.id} at {to_utc(request.start_time)}"
                        )
                        return ServiceResult.fail(
                            ErrorKind.CONFLICT,
                            f"Selected time slot for service {service.id} is not available"
                        )

                    bookings.append(booking)

                self.bookings.add_all(bookings)
                self.db.commit()

        except IntegrityError as e:
            # Raised by the PostgreSQL exclusion constraint on overlapping bookings
            self.db.rollback()
            logger.warning(f"Booking insert rejected by database constraint for user {user_id}: {e}")
            return ServiceResult.fail(ErrorKind.CONFLICT, "Selected time slot is no longer available")
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error creating bookings for user {user_id}: {e}", exc_info=True)
            raise

        for booking in bookings:
            if booking.status == BookingStatus.PENDING:
                dispatch(self.notifier.notify_booking_requested, booking)

        logger.info(f"Successfully created {len(bookings)} bookings for user {user_id}")
        return ServiceResult.ok(bookings)

    def _load_services(self, service_ids: List[UUID]) -> Dict[UUID, Service]:
        services = self.db.query(Service).options(
            joinedload(Service.business),
            joinedload(Service.employee)
        ).filter(Service.id.in_(service_ids)).all()
        return {service.id: service for service in services}

    def _build_booking(
            self,
            user_id: UUID,
            service: Service,
            request: BookingCreateRequest,
            now: datetime
    ) -> Optional[Booking]:
        """Build the booking if its slot is still free, else None"""
        business = service.business
        start_time = to_utc(request.start_time)
        end_time = start_time + service.duration

        buffer = business.booking_buffer
        busy = [
            (b.start_time, b.end_time)
            for b in self.bookings.get_active_or_pending(
                service.employee_id, start_time - buffer, end_time + buffer
            )
        ]

        is_available = (
            is_slot_free(start_time, end_time, busy, buffer)
            and start_time > now + self.policy.lead_time
        )
        if not is_available:
            return None

        return Booking(
            user_id=user_id,
            employee_id=service.employee_id,
            business_id=business.id,
            service_id=service.id,
            start_time=start_time,
            end_time=end_time,
            final_price=service.price,
            note=request.note,
            created_at=now,
            status=BookingStatus.ACTIVE if business.auto_confirm_bookings else BookingStatus.PENDING,
        )
