"""
Concurrent booking creation: one session per thread on a file-backed database,
all threads released together by a barrier.
"""
import threading
from datetime import timedelta

from conftest import MONDAY, RecordingNotifier, at, seed_studio

from app.models import Booking
from app.schemas.booking import BookingCreateRequest
from app.services.booking.booking_service import BookingService
from app.services.booking.locks import EmployeeLockRegistry
from app.services.booking.policy import BookingPolicy
from app.services.result import ErrorKind

NOW = at(MONDAY - timedelta(days=7), 8)
POLICY = BookingPolicy(slot_step=timedelta(minutes=15), lead_time=timedelta(minutes=15))


def _book_concurrently(file_sessions, starts):
    with file_sessions() as session:
        service, customers = seed_studio(session, auto_confirm=True, buffer_minutes=15, users=len(starts))
        service_id = service.id
        user_ids = [customer.id for customer in customers]

    locks = EmployeeLockRegistry()
    barrier = threading.Barrier(len(starts))
    results = [None] * len(starts)
    errors = []

    def worker(i):
        session = file_sessions()
        try:
            booking_service = BookingService(session, RecordingNotifier(), policy=POLICY, locks=locks)
            request = BookingCreateRequest(service_id=service_id, start_time=starts[i])
            barrier.wait()
            results[i] = booking_service.create_bookings(user_ids[i], [request], now=NOW)
        except Exception as e:
            errors.append(e)
        finally:
            session.close()

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(len(starts))]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)

    assert errors == []
    with file_sessions() as session:
        stored = session.query(Booking).count()
    return results, stored


def test_overlapping_requests_produce_exactly_one_booking(file_sessions):
    """Eight callers ask for 10:00, 10:05 ... 10:35 on one employee; every pair collides."""
    starts = [at(MONDAY, 10) + timedelta(minutes=5 * i) for i in range(8)]

    results, stored = _book_concurrently(file_sessions, starts)

    assert sum(1 for r in results if r.success) == 1
    assert all(r.error_kind == ErrorKind.CONFLICT for r in results if not r.success)
    assert stored == 1


def test_spaced_requests_all_succeed(file_sessions):
    """An hour apart leaves 30 minutes between bookings, more than the 15 minute buffer."""
    starts = [at(MONDAY, 9 + i) for i in range(4)]

    results, stored = _book_concurrently(file_sessions, starts)

    assert all(r.success for r in results)
    assert stored == 4
