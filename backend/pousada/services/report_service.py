"""
报表服务
提供仪表盘统计、财务报表和入住率报表（只读）
"""
from typing import Optional, Tuple
from datetime import date, datetime, timedelta
from decimal import Decimal
import logging
from sqlalchemy.orm import Session
from sqlalchemy import func
from pousada.models.ontology import (
    Room, RoomStatus, Reservation, ReservationStatus, ProductSale, ServiceSale
)
from pousada.services.base import to_money


def _day_window(day: date) -> Tuple[datetime, datetime]:
    """[当天 00:00, 次日 00:00)"""
    start = datetime.combine(day, datetime.min.time())
    return start, start + timedelta(days=1)


def _month_starts(today: date) -> Tuple[datetime, datetime]:
    """本月第一天与上月第一天（00:00）"""
    this_month = today.replace(day=1)
    last_month = (this_month - timedelta(days=1)).replace(day=1)
    return (datetime.combine(this_month, datetime.min.time()),
            datetime.combine(last_month, datetime.min.time()))


class ReportService:
    """报表服务"""

    def __init__(self, db: Session, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)

    def get_dashboard_stats(self, today: Optional[date] = None) -> dict:
        """获取仪表盘统计数据"""
        today = today or date.today()
        day_start, day_end = _day_window(today)

        total_rooms = self.db.query(Room).count()
        occupied_rooms = self.db.query(Room).filter(Room.status == RoomStatus.OCCUPIED).count()

        # 今日入住/退房
        check_ins_today = self.db.query(Reservation).filter(
            Reservation.check_in_date >= day_start,
            Reservation.check_in_date < day_end
        ).count()

        check_outs_today = self.db.query(Reservation).filter(
            Reservation.actual_check_out_date >= day_start,
            Reservation.actual_check_out_date < day_end
        ).count()

        # 今日营收
        revenue_today = self.db.query(func.sum(Reservation.total_amount)).filter(
            Reservation.actual_check_out_date >= day_start,
            Reservation.actual_check_out_date < day_end
        ).scalar() or Decimal('0')

        return {
            'occupied_rooms': occupied_rooms,
            'total_rooms': total_rooms,
            'check_ins_today': check_ins_today,
            'check_outs_today': check_outs_today,
            'revenue_today': to_money(revenue_today),
        }

    def get_financial_report(self, today: Optional[date] = None) -> dict:
        """
        财务报表
        月度营收按已完成预订的实际退房时间归属；
        商品与服务营收为全部消费记录的合计
        """
        today = today or date.today()
        this_month_start, last_month_start = _month_starts(today)

        completed = self.db.query(Reservation).filter(
            Reservation.status == ReservationStatus.COMPLETED,
            Reservation.actual_check_out_date >= last_month_start
        ).all()

        this_month = [r for r in completed if r.actual_check_out_date >= this_month_start]
        last_month = [r for r in completed if r.actual_check_out_date < this_month_start]

        this_month_revenue = to_money(sum((r.total_amount for r in this_month), Decimal('0')))
        last_month_revenue = to_money(sum((r.total_amount for r in last_month), Decimal('0')))

        if last_month_revenue > 0:
            growth = (this_month_revenue - last_month_revenue) / last_month_revenue * 100
            revenue_growth = round(float(growth), 1)
        else:
            revenue_growth = 0.0

        product_revenue = to_money(
            self.db.query(func.sum(ProductSale.total_price)).scalar() or Decimal('0')
        )
        service_revenue = to_money(
            self.db.query(func.sum(ServiceSale.price)).scalar() or Decimal('0')
        )

        return {
            'this_month_revenue': this_month_revenue,
            'last_month_revenue': last_month_revenue,
            'revenue_growth': revenue_growth,
            'product_revenue': product_revenue,
            'service_revenue': service_revenue,
            'total_revenue': this_month_revenue + product_revenue + service_revenue,
            'this_month_reservations': len(this_month),
            'last_month_reservations': len(last_month),
        }

    def get_occupancy_report(self, today: Optional[date] = None) -> dict:
        """入住率报表"""
        today = today or date.today()
        this_month_start, _ = _month_starts(today)

        rooms = self.db.query(Room).all()
        total_rooms = len(rooms)
        occupied = len([r for r in rooms if r.status == RoomStatus.OCCUPIED])
        available = len([r for r in rooms if r.status == RoomStatus.AVAILABLE])
        maintenance = len([r for r in rooms if r.status == RoomStatus.MAINTENANCE])

        occupancy_rate = (occupied / total_rooms * 100) if total_rooms > 0 else 0

        this_month_check_ins = self.db.query(Reservation).filter(
            Reservation.check_in_date >= this_month_start
        ).count()

        return {
            'total_rooms': total_rooms,
            'occupied_rooms': occupied,
            'available_rooms': available,
            'maintenance_rooms': maintenance,
            'occupancy_rate': round(occupancy_rate, 1),
            'this_month_check_ins': this_month_check_ins,
        }
