"""
预订服务
管理 Reservation 对象（预订台账的聚合根）以及由预订驱动的房间占用状态

业务联动规则：
1. 同一房间的 active 预订，[入住时间, 预计离店时间) 区间两两不重叠
2. 入住日期为今天或更早的预订，创建后房间置为 occupied
3. 取消预订或将入住日期改到未来时，若房间没有其他已开始的 active 预订，房间恢复为 available
4. 状态机：active -> completed | cancelled，后两者为终态
"""
from typing import List, Optional
from datetime import datetime, date
import logging
from sqlalchemy.orm import Session
from pousada.models.ontology import (
    Reservation, ReservationStatus, Room, RoomStatus, Client
)
from pousada.models.schemas import ReservationCreate, ReservationUpdate, CheckOutRequest
from pousada.services.base import transaction
from pousada.services.checkout_service import CheckOutService
from pousada.services.room_service import RoomService
from pousada.services.errors import (
    NotFoundError, ValidationError, RoomUnavailableError, InvalidReservationStateError
)

# 只能由退房流程写入的字段
CHECKOUT_ONLY_FIELDS = ('actual_check_out_date', 'total_amount', 'discount_percent')


def _has_started(check_in: datetime) -> bool:
    """入住日期（只看日期）为今天或更早"""
    return check_in.date() <= date.today()


class ReservationService:
    """预订服务"""

    def __init__(self, db: Session, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)
        self.rooms = RoomService(db, self.logger)
        self.checkout = CheckOutService(db, self.logger)

    def get_reservations(self, status: Optional[ReservationStatus] = None,
                         client_id: Optional[int] = None,
                         room_id: Optional[int] = None) -> List[Reservation]:
        """获取预订列表（最新创建的在前）"""
        query = self.db.query(Reservation)

        if status:
            query = query.filter(Reservation.status == status)
        if client_id is not None:
            query = query.filter(Reservation.client_id == client_id)
        if room_id is not None:
            query = query.filter(Reservation.room_id == room_id)

        return query.order_by(Reservation.created_at.desc(), Reservation.id.desc()).all()

    def get_active_reservations(self) -> List[Reservation]:
        """获取所有 active 预订（按入住时间排序）"""
        return self.db.query(Reservation).filter(
            Reservation.status == ReservationStatus.ACTIVE
        ).order_by(Reservation.check_in_date).all()

    def get_reservation(self, reservation_id: int) -> Optional[Reservation]:
        return self.db.query(Reservation).filter(Reservation.id == reservation_id).first()

    def require_reservation(self, reservation_id: int) -> Reservation:
        reservation = self.get_reservation(reservation_id)
        if not reservation:
            raise NotFoundError("预订不存在")
        return reservation

    def find_conflicts(self, room_id: int, check_in: datetime, check_out: datetime,
                       exclude_id: Optional[int] = None) -> List[Reservation]:
        """
        查找与给定时间段重叠的 active 预订

        半开区间：一个预订的离店时间等于另一个的入住时间不算冲突
        """
        query = self.db.query(Reservation).filter(
            Reservation.room_id == room_id,
            Reservation.status == ReservationStatus.ACTIVE,
            Reservation.check_in_date < check_out,
            Reservation.expected_check_out_date > check_in
        )
        if exclude_id is not None:
            query = query.filter(Reservation.id != exclude_id)
        return query.all()

    def _lock_room(self, room_id: int) -> Room:
        """锁定房间行，串行化同一房间的并发预订"""
        room = self.db.query(Room).filter(Room.id == room_id).with_for_update().first()
        if not room:
            raise NotFoundError("房间不存在")
        return room

    def _require_client(self, client_id: int) -> Client:
        client = self.db.query(Client).filter(Client.id == client_id).first()
        if not client:
            raise NotFoundError("客户不存在")
        return client

    @staticmethod
    def _validate_period(check_in: datetime, check_out: datetime) -> None:
        if check_in >= check_out:
            raise ValidationError(
                "入住时间必须早于预计离店时间",
                errors=[{"field": "expected_check_out_date", "message": "必须晚于入住时间"}]
            )

    def _ensure_available(self, room: Room, check_in: datetime, check_out: datetime,
                          exclude_id: Optional[int] = None) -> None:
        conflicts = self.find_conflicts(room.id, check_in, check_out, exclude_id)
        if conflicts:
            raise RoomUnavailableError(
                f"房间 {room.number} 在该时间段已被预订",
                errors=[{"reservation_id": r.id,
                         "check_in_date": r.check_in_date.isoformat(),
                         "expected_check_out_date": r.expected_check_out_date.isoformat()}
                        for r in conflicts]
            )

    def create_reservation(self, data: ReservationCreate) -> Reservation:
        """
        创建预订
        1. 验证时间段、客户与房间
        2. 锁定房间行后检查重叠，与插入在同一事务中
        3. 当天或已过入住日期的预订直接占用房间
        """
        self._validate_period(data.check_in_date, data.expected_check_out_date)
        self._require_client(data.client_id)

        with transaction(self.db):
            room = self._lock_room(data.room_id)
            self._ensure_available(room, data.check_in_date, data.expected_check_out_date)

            reservation = Reservation(
                client_id=data.client_id,
                room_id=data.room_id,
                check_in_date=data.check_in_date,
                expected_check_out_date=data.expected_check_out_date,
                number_of_guests=data.number_of_guests,
                payment_method=data.payment_method,
                notes=data.notes,
                status=ReservationStatus.ACTIVE,
            )
            self.db.add(reservation)

            if _has_started(data.check_in_date):
                room.status = RoomStatus.OCCUPIED

        self.db.refresh(reservation)
        self.logger.info(
            f"Reservation {reservation.id} created: room {room.number}, "
            f"{data.check_in_date:%Y-%m-%d %H:%M} -> {data.expected_check_out_date:%Y-%m-%d %H:%M}"
        )
        return reservation

    def update_reservation(self, reservation_id: int, data: ReservationUpdate) -> Reservation:
        """
        部分更新预订

        status=completed 转入退房流程，status=cancelled 转入取消流程；
        终态预订不可再修改；修改时间或房间会重新检查重叠（排除自身）
        """
        reservation = self.require_reservation(reservation_id)
        update_data = data.model_dump(exclude_unset=True)
        target = update_data.pop('status', None)

        if target == ReservationStatus.CANCELLED:
            return self.cancel_reservation(reservation_id)

        if reservation.status != ReservationStatus.ACTIVE:
            raise InvalidReservationStateError(
                f"状态为 {reservation.status.value} 的预订不可修改"
            )

        if target == ReservationStatus.COMPLETED:
            payment_method = update_data.get('payment_method') or reservation.payment_method
            if payment_method is None:
                raise ValidationError(
                    "退房必须指定支付方式",
                    errors=[{"field": "payment_method", "message": "必填"}]
                )
            request = CheckOutRequest(
                payment_method=payment_method,
                discount_percent=data.discount_percent,
                total_amount=update_data.get('total_amount'),
            )
            return self.checkout.finalize_checkout(reservation_id, request)

        for key in CHECKOUT_ONLY_FIELDS:
            update_data.pop(key, None)

        check_in = update_data.get('check_in_date') or reservation.check_in_date
        check_out = update_data.get('expected_check_out_date') or reservation.expected_check_out_date
        new_room_id = update_data.get('room_id') or reservation.room_id
        period_changed = any(k in update_data for k in
                             ('check_in_date', 'expected_check_out_date', 'room_id'))

        if period_changed:
            self._validate_period(check_in, check_out)
        if update_data.get('client_id') is not None:
            self._require_client(update_data['client_id'])

        with transaction(self.db):
            old_room = reservation.room
            if period_changed:
                new_room = self._lock_room(new_room_id)
                self._ensure_available(new_room, check_in, check_out, exclude_id=reservation_id)
            else:
                new_room = old_room

            for key, value in update_data.items():
                if value is not None:
                    setattr(reservation, key, value)

            if new_room.id != old_room.id:
                self.rooms.release_room(old_room, reservation_id)
            if _has_started(check_in):
                new_room.status = RoomStatus.OCCUPIED
            elif new_room.id == old_room.id and period_changed:
                # 入住日期改到未来，房间不再由本预订占用
                self.rooms.release_room(new_room, reservation_id)

        self.db.refresh(reservation)
        self.logger.info(f"Reservation {reservation_id} updated: {sorted(update_data)}")
        return reservation

    def cancel_reservation(self, reservation_id: int, reason: Optional[str] = None) -> Reservation:
        """
        取消预订
        取消原因追加到备注；房间没有其他已开始的 active 预订时释放
        """
        reservation = self.require_reservation(reservation_id)
        if reservation.status != ReservationStatus.ACTIVE:
            raise InvalidReservationStateError(
                f"状态为 {reservation.status.value} 的预订不可取消"
            )

        with transaction(self.db):
            reservation.status = ReservationStatus.CANCELLED
            if reason:
                line = f"取消原因: {reason}"
                reservation.notes = f"{reservation.notes}\n{line}" if reservation.notes else line
            self.rooms.release_room(reservation.room, reservation_id)

        self.db.refresh(reservation)
        self.logger.info(f"Reservation {reservation_id} cancelled" + (f": {reason}" if reason else ""))
        return reservation
