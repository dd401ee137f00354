"""
退房服务
计算住宿费用明细并完成退房

业务联动规则：
1. 费用 = 住宿晚数 * 房价 + 商品消费 + 服务消费 - 折扣
2. 退房金额由服务端重算，客户端提交的金额只用于核对
3. 预订置为 completed 与房间释放在同一事务中提交；房间仍有其他已开始的 active 预订时保持 occupied
"""
import math
from typing import Optional
from datetime import datetime
from decimal import Decimal
import logging
from sqlalchemy.orm import Session
from pousada.models.ontology import (
    Reservation, ReservationStatus, ProductSale, ServiceSale
)
from pousada.models.schemas import CheckOutRequest
from pousada.services.base import transaction, to_money
from pousada.services.room_service import RoomService
from pousada.services.errors import (
    NotFoundError, ValidationError, InvalidReservationStateError
)

SECONDS_PER_DAY = 24 * 60 * 60


def calculate_nights(check_in: datetime, check_out: datetime) -> int:
    """
    计算住宿晚数：不足一天按一天计

    当天入住当天退房也按 1 晚计算，结果至少为 1
    """
    seconds = (check_out - check_in).total_seconds()
    return max(math.ceil(seconds / SECONDS_PER_DAY), 1)


class CheckOutService:
    """退房服务"""

    def __init__(self, db: Session, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)
        self.rooms = RoomService(db, self.logger)

    def _require_reservation(self, reservation_id: int) -> Reservation:
        reservation = self.db.query(Reservation).filter(Reservation.id == reservation_id).first()
        if not reservation:
            raise NotFoundError("预订不存在")
        return reservation

    def compute_stay_charges(self, reservation_id: int,
                             check_out_time: Optional[datetime] = None,
                             discount_percent: Decimal = Decimal("0")) -> dict:
        """
        计算住宿费用明细（仅用于展示，不持久化）

        Args:
            reservation_id: 预订ID
            check_out_time: 退房时间，默认为实际退房时间（已退房）或当前时间
            discount_percent: 折扣百分比 [0, 100]
        """
        discount_percent = Decimal(str(discount_percent))
        if discount_percent < 0 or discount_percent > 100:
            raise ValidationError("折扣必须在 0 到 100 之间")

        reservation = self._require_reservation(reservation_id)
        if check_out_time is None:
            check_out_time = reservation.actual_check_out_date or datetime.now()

        room = reservation.room
        nights = calculate_nights(reservation.check_in_date, check_out_time)
        daily_rate = to_money(room.daily_rate)
        accommodation_total = to_money(daily_rate * nights)

        product_sales = self.db.query(ProductSale).filter(
            ProductSale.reservation_id == reservation_id
        ).order_by(ProductSale.sale_date, ProductSale.id).all()
        service_sales = self.db.query(ServiceSale).filter(
            ServiceSale.reservation_id == reservation_id
        ).order_by(ServiceSale.sale_date, ServiceSale.id).all()

        # 服务消费不区分状态，pending 与 completed 都计费
        products_total = to_money(sum((to_money(s.total_price) for s in product_sales), Decimal("0")))
        services_total = to_money(sum((to_money(s.price) for s in service_sales), Decimal("0")))

        subtotal = accommodation_total + products_total + services_total
        discount_amount = to_money(subtotal * discount_percent / 100)
        total_amount = subtotal - discount_amount

        return {
            'reservation_id': reservation.id,
            'check_in_date': reservation.check_in_date,
            'check_out_date': check_out_time,
            'nights': nights,
            'daily_rate': daily_rate,
            'accommodation_total': accommodation_total,
            'products_total': products_total,
            'services_total': services_total,
            'subtotal': subtotal,
            'discount_percent': discount_percent,
            'discount_amount': discount_amount,
            'total_amount': total_amount,
            'product_sales': product_sales,
            'service_sales': service_sales,
        }

    def finalize_checkout(self, reservation_id: int, data: CheckOutRequest) -> Reservation:
        """
        退房
        1. 验证预订处于 active 状态
        2. 按当前时间重算费用，核对客户端金额（如有）
        3. 更新预订（completed、实际退房时间、支付方式、总额）
        4. 释放房间（同一房间没有其他已开始的 active 预订时恢复为 available）
        """
        reservation = self._require_reservation(reservation_id)
        if reservation.status != ReservationStatus.ACTIVE:
            raise InvalidReservationStateError(
                f"状态为 {reservation.status.value} 的预订不可退房"
            )

        check_out_time = datetime.now()
        charges = self.compute_stay_charges(reservation_id, check_out_time, data.discount_percent)
        total_amount = charges['total_amount']

        if data.total_amount is not None and to_money(data.total_amount) != total_amount:
            raise ValidationError(
                f"提交的金额 {to_money(data.total_amount)} 与系统计算金额 {total_amount} 不一致",
                errors=[{
                    "field": "total_amount",
                    "submitted": str(to_money(data.total_amount)),
                    "expected": str(total_amount),
                }]
            )

        with transaction(self.db):
            reservation.status = ReservationStatus.COMPLETED
            reservation.actual_check_out_date = check_out_time
            reservation.payment_method = data.payment_method
            reservation.total_amount = total_amount
            self.rooms.release_room(reservation.room, reservation_id)

        self.db.refresh(reservation)
        self.logger.info(
            f"Reservation {reservation_id} checked out: {charges['nights']} nights, "
            f"total {total_amount} via {data.payment_method.value}"
        )
        return reservation
