"""
Tests for booking status changes and the completion sweep.
"""
import uuid

import pytest
from conftest import MONDAY, at, seed_studio
from sqlalchemy import event

from app.models import Booking, BookingStatus
from app.services.booking.booking_status_service import BookingStatusService
from app.services.booking.transitions import Actor, actor_may_request, can_transition
from app.services.result import ErrorKind

ALL_STATUSES = list(BookingStatus)


@pytest.fixture
def pending(salon, make_user, make_booking):
    _, _, service = salon
    return make_booking(service, make_user(), at(MONDAY, 10), status=BookingStatus.PENDING)


class TestTransitionTable:

    @pytest.mark.parametrize("terminal", [BookingStatus.CANCELED, BookingStatus.COMPLETE])
    @pytest.mark.parametrize("actor", list(Actor))
    def test_terminal_statuses_have_no_way_out(self, terminal, actor):
        assert not any(can_transition(terminal, actor, target) for target in ALL_STATUSES)

    def test_complete_only_from_active_by_system(self):
        sources = [
            (status, actor)
            for status in ALL_STATUSES
            for actor in Actor
            if can_transition(status, actor, BookingStatus.COMPLETE)
        ]
        assert sources == [(BookingStatus.ACTIVE, Actor.SYSTEM)]

    def test_requestable_targets_per_actor(self):
        assert actor_may_request(Actor.BUSINESS, BookingStatus.ACTIVE)
        assert actor_may_request(Actor.BUSINESS, BookingStatus.CANCELED)
        assert not actor_may_request(Actor.BUSINESS, BookingStatus.COMPLETE)
        assert not actor_may_request(Actor.USER, BookingStatus.ACTIVE)
        assert not actor_may_request(Actor.USER, BookingStatus.PENDING)


class TestBusinessActions:

    def test_confirm_pending_stamps_and_notifies(self, db, salon, pending, notifier):
        business, _, _ = salon
        now = at(MONDAY, 7)

        result = BookingStatusService(db, notifier).set_status_by_business(
            pending.id, business.id, BookingStatus.ACTIVE, now=now
        )

        assert result.success
        assert result.data.status == BookingStatus.ACTIVE
        assert result.data.confirmed_at == now
        assert notifier.calls == [("confirmed", pending.id)]

    def test_reject_pending_notifies_user(self, db, salon, pending, notifier):
        business, _, _ = salon

        result = BookingStatusService(db, notifier).set_status_by_business(
            pending.id, business.id, BookingStatus.CANCELED
        )

        assert result.data.status == BookingStatus.CANCELED
        assert result.data.confirmed_at is None
        assert notifier.events() == ["rejected"]

    def test_canceled_booking_cannot_be_confirmed_again(self, db, salon, pending, notifier):
        business, _, _ = salon
        service = BookingStatusService(db, notifier)
        service.set_status_by_business(pending.id, business.id, BookingStatus.CANCELED)

        result = service.set_status_by_business(pending.id, business.id, BookingStatus.ACTIVE)

        assert result.error_kind == ErrorKind.CONFLICT
        assert result.error == "Cannot change booking status from canceled to active."
        assert notifier.events() == ["rejected"]

    def test_business_cannot_request_complete(self, db, salon, pending, notifier):
        business, _, _ = salon

        result = BookingStatusService(db, notifier).set_status_by_business(
            pending.id, business.id, BookingStatus.COMPLETE
        )

        assert result.error_kind == ErrorKind.INVALID_INPUT

    def test_other_business_is_denied(self, db, pending, make_business, notifier):
        intruder = make_business(name="Rival")

        result = BookingStatusService(db, notifier).set_status_by_business(
            pending.id, intruder.id, BookingStatus.ACTIVE
        )

        assert result.error_kind == ErrorKind.ACCESS_DENIED
        assert notifier.calls == []

    def test_unknown_booking_is_not_found(self, db, salon, notifier):
        business, _, _ = salon

        result = BookingStatusService(db, notifier).set_status_by_business(
            uuid.uuid4(), business.id, BookingStatus.ACTIVE
        )

        assert result.error_kind == ErrorKind.NOT_FOUND


class TestUserActions:

    def test_user_cancels_own_booking(self, db, pending, notifier):
        result = BookingStatusService(db, notifier).set_status_by_user(
            pending.id, pending.user_id, BookingStatus.CANCELED
        )

        assert result.data.status == BookingStatus.CANCELED
        assert notifier.events() == ["rejected"]

    def test_user_cannot_confirm(self, db, pending, notifier):
        result = BookingStatusService(db, notifier).set_status_by_user(
            pending.id, pending.user_id, BookingStatus.ACTIVE
        )

        assert result.error_kind == ErrorKind.INVALID_INPUT

    def test_other_user_is_denied(self, db, pending, make_user, notifier):
        result = BookingStatusService(db, notifier).set_status_by_user(
            pending.id, make_user().id, BookingStatus.CANCELED
        )

        assert result.error_kind == ErrorKind.ACCESS_DENIED

    def test_completed_booking_cannot_be_canceled(self, db, salon, make_user, make_booking, notifier):
        _, _, service = salon
        done = make_booking(service, make_user(), at(MONDAY, 9), status=BookingStatus.COMPLETE)

        result = BookingStatusService(db, notifier).set_status_by_user(
            done.id, done.user_id, BookingStatus.CANCELED
        )

        assert result.error_kind == ErrorKind.CONFLICT


class TestCompletionSweep:

    def test_only_finished_active_bookings_complete(self, db, salon, make_user, make_booking, notifier):
        _, _, service = salon
        user = make_user()
        finished = make_booking(service, user, at(MONDAY, 9))
        finished_pending = make_booking(service, user, at(MONDAY, 9, 30), status=BookingStatus.PENDING)
        upcoming = make_booking(service, user, at(MONDAY, 11))

        updated = BookingStatusService(db, notifier).complete_expired_bookings(now=at(MONDAY, 10, 30))

        assert updated == 1
        db.refresh(finished)
        db.refresh(finished_pending)
        db.refresh(upcoming)
        assert finished.status == BookingStatus.COMPLETE
        assert finished_pending.status == BookingStatus.PENDING
        assert upcoming.status == BookingStatus.ACTIVE
        assert notifier.calls == []

    def test_sweep_with_nothing_to_do(self, db, salon):
        assert BookingStatusService(db).complete_expired_bookings(now=at(MONDAY, 10)) == 0

    def test_completed_booking_makes_user_eligible(self, db, salon, make_user, make_booking):
        business, _, service = salon
        user = make_user()
        make_booking(service, user, at(MONDAY, 9))
        status_service = BookingStatusService(db)

        assert not status_service.user_has_completed_booking(user.id, business.id)

        status_service.complete_expired_bookings(now=at(MONDAY, 12))

        assert status_service.user_has_completed_booking(user.id, business.id)

    def test_cancel_committed_mid_sweep_is_not_overwritten(self, file_sessions):
        """A user cancel that lands just before the sweep writes must stay canceled."""
        with file_sessions() as session:
            service, (user,) = seed_studio(session)
            booking = Booking(
                user_id=user.id,
                service_id=service.id,
                employee_id=service.employee_id,
                business_id=service.business_id,
                start_time=at(MONDAY, 9),
                end_time=at(MONDAY, 9, 30),
                created_at=at(MONDAY, 8),
                final_price=service.price,
                status=BookingStatus.ACTIVE,
            )
            session.add(booking)
            session.commit()
            booking_id = booking.id

        sweeper = file_sessions()
        engine = sweeper.get_bind()
        canceled = []

        def cancel_before_update(conn, cursor, statement, parameters, context, executemany):
            if canceled or not statement.startswith("UPDATE bookings"):
                return
            canceled.append(booking_id)
            with file_sessions() as user_session:
                user_session.get(Booking, booking_id).status = BookingStatus.CANCELED
                user_session.commit()

        event.listen(engine, "before_cursor_execute", cancel_before_update)
        try:
            updated = BookingStatusService(sweeper).complete_expired_bookings(now=at(MONDAY, 12))
        finally:
            event.remove(engine, "before_cursor_execute", cancel_before_update)
            sweeper.close()

        assert canceled == [booking_id]
        assert updated == 0
        with file_sessions() as session:
            assert session.get(Booking, booking_id).status == BookingStatus.CANCELED
