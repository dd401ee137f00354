"""
Tests for pousada/services/reservation_service.py
Covers: create_reservation（重叠检测、房间占用）、update_reservation、
        cancel_reservation、find_conflicts
"""
import pytest
from datetime import datetime, timedelta
from decimal import Decimal

from pousada.models.ontology import (
    Reservation, ReservationStatus, RoomStatus, PaymentMethod
)
from pousada.models.schemas import ReservationCreate, ReservationUpdate
from pousada.services.reservation_service import ReservationService
from pousada.services.errors import (
    ValidationError, RoomUnavailableError, NotFoundError, InvalidReservationStateError
)


# ── helpers ──────────────────────────────────────────────────────────

def _at(days, hour=14):
    """距今天 days 天的某个整点"""
    base = datetime.now().replace(hour=hour, minute=0, second=0, microsecond=0)
    return base + timedelta(days=days)


def _create(service, client, room, check_in, check_out, guests=2, **kwargs):
    return service.create_reservation(ReservationCreate(
        client_id=client.id,
        room_id=room.id,
        check_in_date=check_in,
        expected_check_out_date=check_out,
        number_of_guests=guests,
        **kwargs
    ))


# ── create_reservation ───────────────────────────────────────────────

class TestCreateReservation:

    def test_create_future_reservation(self, db_session, sample_client, sample_room):
        """未来的预订不改变房间状态"""
        service = ReservationService(db_session)
        r = _create(service, sample_client, sample_room, _at(5), _at(7), notes="lua de mel")

        assert r.id is not None
        assert r.status == ReservationStatus.ACTIVE
        assert r.total_amount == Decimal("0")
        assert r.actual_check_out_date is None
        assert r.created_at is not None
        assert r.notes == "lua de mel"
        db_session.refresh(sample_room)
        assert sample_room.status == RoomStatus.AVAILABLE

    def test_create_today_occupies_room(self, db_session, sample_client, sample_room):
        """当天入住的预订占用房间"""
        service = ReservationService(db_session)
        _create(service, sample_client, sample_room, datetime.now(), _at(2))

        db_session.refresh(sample_room)
        assert sample_room.status == RoomStatus.OCCUPIED

    def test_create_past_check_in_occupies_room(self, db_session, sample_client, sample_room):
        """补录的过去入住同样占用房间"""
        service = ReservationService(db_session)
        _create(service, sample_client, sample_room, _at(-1), _at(1))

        db_session.refresh(sample_room)
        assert sample_room.status == RoomStatus.OCCUPIED

    def test_check_in_must_precede_check_out(self, db_session, sample_client, sample_room):
        service = ReservationService(db_session)
        with pytest.raises(ValidationError):
            _create(service, sample_client, sample_room, _at(3), _at(3))
        with pytest.raises(ValidationError):
            _create(service, sample_client, sample_room, _at(4), _at(3))
        assert db_session.query(Reservation).count() == 0

    def test_missing_client_or_room(self, db_session, sample_client, sample_room):
        service = ReservationService(db_session)
        with pytest.raises(NotFoundError):
            service.create_reservation(ReservationCreate(
                client_id=999, room_id=sample_room.id,
                check_in_date=_at(1), expected_check_out_date=_at(2), number_of_guests=1
            ))
        with pytest.raises(NotFoundError):
            service.create_reservation(ReservationCreate(
                client_id=sample_client.id, room_id=999,
                check_in_date=_at(1), expected_check_out_date=_at(2), number_of_guests=1
            ))

    def test_overlap_rejected(self, db_session, sample_client, sample_room):
        """与已有 active 预订重叠时拒绝，不写入任何数据"""
        service = ReservationService(db_session)
        _create(service, sample_client, sample_room, _at(10), _at(13))

        with pytest.raises(RoomUnavailableError):
            _create(service, sample_client, sample_room, _at(11), _at(12))
        with pytest.raises(RoomUnavailableError):
            _create(service, sample_client, sample_room, _at(9), _at(11))
        with pytest.raises(RoomUnavailableError):
            _create(service, sample_client, sample_room, _at(12), _at(15))
        with pytest.raises(RoomUnavailableError):
            _create(service, sample_client, sample_room, _at(9), _at(15))

        assert db_session.query(Reservation).count() == 1

    def test_back_to_back_allowed(self, db_session, sample_client, sample_room):
        """离店时间等于下一个入住时间不算重叠"""
        service = ReservationService(db_session)
        _create(service, sample_client, sample_room, _at(10), _at(12))
        _create(service, sample_client, sample_room, _at(12), _at(14))
        _create(service, sample_client, sample_room, _at(8), _at(10))

        assert db_session.query(Reservation).count() == 3

    def test_non_active_reservations_do_not_block(self, db_session, sample_client, sample_room):
        service = ReservationService(db_session)
        first = _create(service, sample_client, sample_room, _at(10), _at(12))
        service.cancel_reservation(first.id)

        second = _create(service, sample_client, sample_room, _at(10), _at(12))
        assert second.status == ReservationStatus.ACTIVE

    def test_other_room_not_affected(self, db_session, sample_client, sample_room, sample_room_102):
        service = ReservationService(db_session)
        _create(service, sample_client, sample_room, _at(10), _at(12))
        r = _create(service, sample_client, sample_room_102, _at(10), _at(12))
        assert r.room_id == sample_room_102.id


class TestFindConflicts:

    def test_exclude_self(self, db_session, sample_client, sample_room):
        service = ReservationService(db_session)
        r = _create(service, sample_client, sample_room, _at(10), _at(12))

        assert [c.id for c in service.find_conflicts(sample_room.id, _at(11), _at(13))] == [r.id]
        assert service.find_conflicts(sample_room.id, _at(11), _at(13), exclude_id=r.id) == []


# ── update_reservation ───────────────────────────────────────────────

class TestUpdateReservation:

    def test_partial_update(self, db_session, sample_client, sample_room):
        service = ReservationService(db_session)
        r = _create(service, sample_client, sample_room, _at(10), _at(12))

        updated = service.update_reservation(r.id, ReservationUpdate(number_of_guests=3))
        assert updated.number_of_guests == 3
        assert updated.check_in_date == _at(10)

    def test_extend_stay_checks_overlap(self, db_session, sample_client, sample_room):
        service = ReservationService(db_session)
        r = _create(service, sample_client, sample_room, _at(10), _at(12))
        _create(service, sample_client, sample_room, _at(13), _at(15))

        # 自身区间不算冲突
        extended = service.update_reservation(r.id, ReservationUpdate(expected_check_out_date=_at(13)))
        assert extended.expected_check_out_date == _at(13)

        with pytest.raises(RoomUnavailableError):
            service.update_reservation(r.id, ReservationUpdate(expected_check_out_date=_at(14)))
        db_session.refresh(r)
        assert r.expected_check_out_date == _at(13)

    def test_update_invalid_period(self, db_session, sample_client, sample_room):
        service = ReservationService(db_session)
        r = _create(service, sample_client, sample_room, _at(10), _at(12))
        with pytest.raises(ValidationError):
            service.update_reservation(r.id, ReservationUpdate(expected_check_out_date=_at(9)))

    def test_change_room_moves_occupancy(self, db_session, sample_client, sample_room, sample_room_102):
        """已入住预订换房：原房间释放，新房间占用"""
        service = ReservationService(db_session)
        r = _create(service, sample_client, sample_room, _at(-1), _at(2))

        service.update_reservation(r.id, ReservationUpdate(room_id=sample_room_102.id))

        db_session.refresh(sample_room)
        db_session.refresh(sample_room_102)
        assert sample_room.status == RoomStatus.AVAILABLE
        assert sample_room_102.status == RoomStatus.OCCUPIED

    def test_postpone_started_stay_releases_room(self, db_session, sample_client, sample_room):
        """已入住预订改到未来日期：同一房间释放"""
        service = ReservationService(db_session)
        r = _create(service, sample_client, sample_room, datetime.now() - timedelta(hours=1), _at(2))
        db_session.refresh(sample_room)
        assert sample_room.status == RoomStatus.OCCUPIED

        service.update_reservation(r.id, ReservationUpdate(
            check_in_date=_at(3), expected_check_out_date=_at(5)
        ))

        db_session.refresh(sample_room)
        assert sample_room.status == RoomStatus.AVAILABLE

    def test_postpone_keeps_room_for_other_guest(self, db_session, sample_client, sample_room):
        """改期的预订之外还有已开始的预订：房间保持占用"""
        service = ReservationService(db_session)
        _create(service, sample_client, sample_room, _at(-3), _at(-1))
        r = _create(service, sample_client, sample_room, _at(-1), _at(2))

        service.update_reservation(r.id, ReservationUpdate(
            check_in_date=_at(3), expected_check_out_date=_at(5)
        ))

        db_session.refresh(sample_room)
        assert sample_room.status == RoomStatus.OCCUPIED

    def test_status_completed_routes_to_checkout(self, db_session, active_reservation, sample_room):
        service = ReservationService(db_session)
        r = service.update_reservation(active_reservation.id, ReservationUpdate(
            status=ReservationStatus.COMPLETED, payment_method=PaymentMethod.PIX
        ))

        assert r.status == ReservationStatus.COMPLETED
        assert r.payment_method == PaymentMethod.PIX
        assert r.total_amount == Decimal("200.00")
        assert r.actual_check_out_date is not None
        db_session.refresh(sample_room)
        assert sample_room.status == RoomStatus.AVAILABLE

    def test_status_completed_requires_payment_method(self, db_session, active_reservation):
        service = ReservationService(db_session)
        with pytest.raises(ValidationError):
            service.update_reservation(active_reservation.id, ReservationUpdate(
                status=ReservationStatus.COMPLETED
            ))
        db_session.refresh(active_reservation)
        assert active_reservation.status == ReservationStatus.ACTIVE

    def test_status_cancelled_routes_to_cancel(self, db_session, active_reservation, sample_room):
        service = ReservationService(db_session)
        r = service.update_reservation(active_reservation.id, ReservationUpdate(
            status=ReservationStatus.CANCELLED
        ))
        assert r.status == ReservationStatus.CANCELLED
        db_session.refresh(sample_room)
        assert sample_room.status == RoomStatus.AVAILABLE

    def test_terminal_reservation_rejects_edits(self, db_session, active_reservation):
        service = ReservationService(db_session)
        service.cancel_reservation(active_reservation.id)

        with pytest.raises(InvalidReservationStateError):
            service.update_reservation(active_reservation.id, ReservationUpdate(notes="x"))
        with pytest.raises(InvalidReservationStateError):
            service.update_reservation(active_reservation.id, ReservationUpdate(
                status=ReservationStatus.COMPLETED, payment_method=PaymentMethod.CASH
            ))

    def test_checkout_fields_ignored_on_plain_update(self, db_session, active_reservation):
        service = ReservationService(db_session)
        r = service.update_reservation(active_reservation.id, ReservationUpdate(
            total_amount=Decimal("999.00"), notes="late check-out"
        ))
        assert r.total_amount == Decimal("0")
        assert r.notes == "late check-out"

    def test_update_missing_reservation(self, db_session):
        service = ReservationService(db_session)
        with pytest.raises(NotFoundError):
            service.update_reservation(999, ReservationUpdate(notes="x"))


# ── cancel_reservation ───────────────────────────────────────────────

class TestCancelReservation:

    def test_cancel_appends_reason(self, db_session, sample_client, sample_room):
        service = ReservationService(db_session)
        r = _create(service, sample_client, sample_room, _at(5), _at(6), notes="vip")

        cancelled = service.cancel_reservation(r.id, "desistência")
        assert cancelled.status == ReservationStatus.CANCELLED
        assert cancelled.notes.startswith("vip")
        assert "desistência" in cancelled.notes

    def test_cancel_releases_occupied_room(self, db_session, active_reservation, sample_room):
        service = ReservationService(db_session)
        service.cancel_reservation(active_reservation.id)
        db_session.refresh(sample_room)
        assert sample_room.status == RoomStatus.AVAILABLE

    def test_cancel_future_keeps_current_guest(self, db_session, active_reservation, sample_client, sample_room):
        """取消未来预订时，在住客人的房间仍为 occupied"""
        service = ReservationService(db_session)
        future = _create(service, sample_client, sample_room, _at(5), _at(7))

        service.cancel_reservation(future.id)
        db_session.refresh(sample_room)
        assert sample_room.status == RoomStatus.OCCUPIED

    def test_cancel_twice_rejected(self, db_session, active_reservation):
        service = ReservationService(db_session)
        service.cancel_reservation(active_reservation.id)
        with pytest.raises(InvalidReservationStateError):
            service.cancel_reservation(active_reservation.id)


class TestListReservations:

    def test_filters(self, db_session, sample_client, sample_room, sample_room_102):
        service = ReservationService(db_session)
        a = _create(service, sample_client, sample_room, _at(5), _at(6))
        b = _create(service, sample_client, sample_room_102, _at(5), _at(6))
        service.cancel_reservation(b.id)

        assert [r.id for r in service.get_reservations(room_id=sample_room.id)] == [a.id]
        assert [r.id for r in service.get_reservations(status=ReservationStatus.CANCELLED)] == [b.id]
        assert [r.id for r in service.get_active_reservations()] == [a.id]
        assert len(service.get_reservations(client_id=sample_client.id)) == 2
