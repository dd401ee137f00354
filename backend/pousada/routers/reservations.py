"""
预订管理路由
入住即创建预订；退房与取消既可通过专用接口，也可通过 PUT 修改状态
"""
from typing import List, Optional
from decimal import Decimal
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from pousada.database import get_db
from pousada.models.ontology import ReservationStatus
from pousada.models.schemas import (
    ReservationCreate, ReservationUpdate, ReservationResponse,
    CheckOutRequest, ReservationCancel, StayCharges
)
from pousada.services.checkout_service import CheckOutService
from pousada.services.reservation_service import ReservationService

router = APIRouter(prefix="/reservations", tags=["预订管理"])


@router.get("", response_model=List[ReservationResponse])
def list_reservations(
    reservation_status: Optional[ReservationStatus] = Query(None, alias="status"),
    client_id: Optional[int] = None,
    room_id: Optional[int] = None,
    db: Session = Depends(get_db)
):
    """获取预订列表"""
    service = ReservationService(db)
    return service.get_reservations(reservation_status, client_id, room_id)


@router.get("/active", response_model=List[ReservationResponse])
def list_active_reservations(db: Session = Depends(get_db)):
    """获取在住及待入住的预订"""
    service = ReservationService(db)
    return service.get_active_reservations()


@router.get("/{reservation_id}", response_model=ReservationResponse)
def get_reservation(reservation_id: int, db: Session = Depends(get_db)):
    """获取预订详情"""
    service = ReservationService(db)
    return service.require_reservation(reservation_id)


@router.post("", response_model=ReservationResponse, status_code=status.HTTP_201_CREATED)
def create_reservation(data: ReservationCreate, db: Session = Depends(get_db)):
    """创建预订（入住登记）"""
    service = ReservationService(db)
    return service.create_reservation(data)


@router.put("/{reservation_id}", response_model=ReservationResponse)
def update_reservation(reservation_id: int, data: ReservationUpdate, db: Session = Depends(get_db)):
    """更新预订（status=completed 退房，status=cancelled 取消）"""
    service = ReservationService(db)
    return service.update_reservation(reservation_id, data)


@router.get("/{reservation_id}/charges", response_model=StayCharges)
def get_stay_charges(
    reservation_id: int,
    discount_percent: Decimal = Query(Decimal("0"), ge=0, le=100),
    db: Session = Depends(get_db)
):
    """获取费用明细（按当前时间或实际退房时间计算）"""
    service = CheckOutService(db)
    return StayCharges(**service.compute_stay_charges(
        reservation_id, discount_percent=discount_percent
    ))


@router.post("/{reservation_id}/checkout", response_model=ReservationResponse)
def checkout(reservation_id: int, data: CheckOutRequest, db: Session = Depends(get_db)):
    """退房结账"""
    service = CheckOutService(db)
    return service.finalize_checkout(reservation_id, data)


@router.post("/{reservation_id}/cancel", response_model=ReservationResponse)
def cancel_reservation(
    reservation_id: int,
    data: Optional[ReservationCancel] = None,
    db: Session = Depends(get_db)
):
    """取消预订"""
    service = ReservationService(db)
    return service.cancel_reservation(reservation_id, data.reason if data else None)
