"""
Tests for available slot calculation.
"""
import uuid
from datetime import date, time, timedelta

from conftest import MONDAY, SUNDAY, at

from app.models import BookingStatus
from app.services.availability.availability_service import AvailabilityService, compute_slots, is_slot_free
from app.services.booking.policy import BookingPolicy
from app.services.result import ErrorKind

WEEK_BEFORE = at(MONDAY - timedelta(days=7), 8)
POLICY = BookingPolicy(slot_step=timedelta(minutes=15), lead_time=timedelta(minutes=15))


def _slots(db, service, day=MONDAY, now=WEEK_BEFORE):
    return AvailabilityService(db, policy=POLICY).get_available_slots(service.id, day, now=now)


def test_open_morning_yields_every_grid_point_that_fits(db, salon):
    """Mon 09:00-12:00, 30 minute service, no bookings: 09:00 through 11:30."""
    _, _, service = salon

    result = _slots(db, service)

    assert result.success
    assert len(result.data) == 11
    assert result.data[0] == at(MONDAY, 9)
    assert result.data[-1] == at(MONDAY, 11, 30)
    assert all(b - a == timedelta(minutes=15) for a, b in zip(result.data, result.data[1:]))


def test_existing_booking_blocks_its_buffered_window(db, salon, make_user, make_booking):
    """Active 10:00-10:30 with a 15 minute buffer leaves nothing that ends after 09:45 or starts before 10:45."""
    _, _, service = salon
    make_booking(service, make_user(), at(MONDAY, 10))

    result = _slots(db, service)

    assert result.data == [
        at(MONDAY, 9),
        at(MONDAY, 9, 15),
        at(MONDAY, 10, 45),
        at(MONDAY, 11),
        at(MONDAY, 11, 15),
        at(MONDAY, 11, 30),
    ]


def test_pending_bookings_block_and_canceled_ones_do_not(db, salon, make_user, make_booking):
    _, _, service = salon
    user = make_user()
    make_booking(service, user, at(MONDAY, 9), status=BookingStatus.CANCELED)
    make_booking(service, user, at(MONDAY, 11), status=BookingStatus.PENDING)

    slots = _slots(db, service).data

    assert at(MONDAY, 9) in slots
    assert at(MONDAY, 11) not in slots
    assert at(MONDAY, 10, 15) in slots
    assert at(MONDAY, 10, 30) not in slots


def test_past_date_is_rejected(db, salon):
    _, _, service = salon
    yesterday = WEEK_BEFORE.date() - timedelta(days=1)

    result = _slots(db, service, day=yesterday)

    assert not result.success
    assert result.error_kind == ErrorKind.INVALID_INPUT
    assert result.data is None


def test_closed_day_returns_empty_success(db, salon):
    _, _, service = salon

    result = _slots(db, service, day=SUNDAY)

    assert result.success
    assert result.data == []


def test_employee_day_off_returns_empty_success(db, make_business, make_employee, make_service):
    business = make_business(hours={0: [(time(9), time(12))]})
    employee = make_employee(business, hours={1: [(time(9), time(12))]})
    service = make_service(business, employee)

    result = _slots(db, service)

    assert result.success
    assert result.data == []


def test_today_is_clamped_to_lead_time(db, salon):
    _, _, service = salon

    result = _slots(db, service, now=at(MONDAY, 9, 7))

    assert result.data[0] == at(MONDAY, 9, 22)
    assert result.data[-1] == at(MONDAY, 11, 22)
    assert len(result.data) == 9


def test_unknown_service_is_not_found(db, salon):
    result = AvailabilityService(db, policy=POLICY).get_available_slots(uuid.uuid4(), MONDAY, now=WEEK_BEFORE)

    assert result.error_kind == ErrorKind.NOT_FOUND


def test_service_without_employee_is_invalid(db, make_business, make_service):
    business = make_business(hours={0: [(time(9), time(12))]})
    service = make_service(business, None)

    result = _slots(db, service)

    assert result.error_kind == ErrorKind.INVALID_INPUT
    assert result.error == "Invalid business or employee."


def test_split_day_walks_each_interval():
    intervals = [
        (timedelta(hours=9), timedelta(hours=10)),
        (timedelta(hours=14), timedelta(hours=15)),
    ]

    slots = compute_slots(
        day=date(2030, 1, 7),
        intervals=intervals,
        duration=timedelta(minutes=60),
        buffer=timedelta(0),
        busy=[],
        now=WEEK_BEFORE,
        policy=POLICY,
    )

    assert slots == [at(MONDAY, 9), at(MONDAY, 14)]


def test_back_to_back_is_free_without_buffer():
    busy = [(at(MONDAY, 10), at(MONDAY, 10, 30))]

    assert is_slot_free(at(MONDAY, 10, 30), at(MONDAY, 11), busy, timedelta(0))
    assert is_slot_free(at(MONDAY, 9, 30), at(MONDAY, 10), busy, timedelta(0))
    assert not is_slot_free(at(MONDAY, 10, 30), at(MONDAY, 11), busy, timedelta(minutes=1))


def test_booking_after_midnight_blocks_late_evening_slots(db, make_business, make_employee, make_service,
                                                          make_user, make_booking):
    """Sun 22:00-23:59, 30 minute buffer: a Monday 00:05 booking rules out 23:15, which ends at 23:45."""
    late = {6: [(time(22), time(23, 59))]}
    business = make_business(buffer_minutes=30, hours=late)
    service = make_service(business, make_employee(business, hours=late))
    make_booking(service, make_user(), at(SUNDAY + timedelta(days=1), 0, 5))

    result = _slots(db, service, day=SUNDAY)

    assert result.data == [
        at(SUNDAY, 22),
        at(SUNDAY, 22, 15),
        at(SUNDAY, 22, 30),
        at(SUNDAY, 22, 45),
        at(SUNDAY, 23),
    ]
