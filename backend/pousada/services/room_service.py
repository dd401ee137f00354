"""
房间服务
管理 Room 对象；房间占用状态由预订与退房流程驱动，释放规则集中在 release_room
"""
from typing import List, Optional
from datetime import datetime, date, time, timedelta
import logging
from sqlalchemy.orm import Session
from pousada.models.ontology import Room, RoomStatus, Reservation, ReservationStatus
from pousada.models.schemas import RoomCreate, RoomUpdate
from pousada.services.base import transaction
from pousada.services.errors import NotFoundError, ValidationError


def _start_of_tomorrow() -> datetime:
    return datetime.combine(date.today() + timedelta(days=1), time.min)


class RoomService:
    """房间服务"""

    def __init__(self, db: Session, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)

    def get_rooms(self, status: Optional[RoomStatus] = None) -> List[Room]:
        """获取房间列表（按房间号排序）"""
        query = self.db.query(Room)
        if status is not None:
            query = query.filter(Room.status == status)
        return query.order_by(Room.number).all()

    def get_available_rooms(self) -> List[Room]:
        """获取空闲房间"""
        return self.get_rooms(RoomStatus.AVAILABLE)

    def get_room(self, room_id: int) -> Optional[Room]:
        """获取单个房间"""
        return self.db.query(Room).filter(Room.id == room_id).first()

    def require_room(self, room_id: int) -> Room:
        room = self.get_room(room_id)
        if not room:
            raise NotFoundError("房间不存在")
        return room

    def get_room_by_number(self, number: str) -> Optional[Room]:
        return self.db.query(Room).filter(Room.number == number).first()

    def create_room(self, data: RoomCreate) -> Room:
        """创建房间"""
        if self.get_room_by_number(data.number):
            raise ValidationError(f"房间号 '{data.number}' 已存在")

        room = Room(**data.model_dump())
        with transaction(self.db):
            self.db.add(room)
        self.db.refresh(room)
        self.logger.info(f"Room {room.number} created (id={room.id})")
        return room

    def update_room(self, room_id: int, data: RoomUpdate) -> Room:
        """更新房间（只修改提交的字段）"""
        room = self.require_room(room_id)

        update_data = data.model_dump(exclude_unset=True)
        if 'number' in update_data:
            existing = self.get_room_by_number(update_data['number'])
            if existing and existing.id != room_id:
                raise ValidationError(f"房间号 '{update_data['number']}' 已存在")

        with transaction(self.db):
            for key, value in update_data.items():
                setattr(room, key, value)
        self.db.refresh(room)
        return room

    def delete_room(self, room_id: int) -> bool:
        """删除房间"""
        room = self.require_room(room_id)

        reservation_count = self.db.query(Reservation).filter(
            Reservation.room_id == room_id
        ).count()
        if reservation_count > 0:
            raise ValidationError(f"该房间有 {reservation_count} 条预订记录，无法删除")

        with transaction(self.db):
            self.db.delete(room)
        self.logger.info(f"Room {room_id} deleted")
        return True

    def release_room(self, room: Room, exclude_reservation_id: int) -> bool:
        """
        释放房间：occupied 且没有其他已开始的 active 预订时恢复为 available

        在调用方的事务中执行，不单独提交

        Returns:
            房间是否被释放
        """
        if room.status != RoomStatus.OCCUPIED:
            return False
        others = self.db.query(Reservation).filter(
            Reservation.room_id == room.id,
            Reservation.status == ReservationStatus.ACTIVE,
            Reservation.id != exclude_reservation_id,
            Reservation.check_in_date < _start_of_tomorrow()
        ).count()
        if others:
            return False
        room.status = RoomStatus.AVAILABLE
        return True
