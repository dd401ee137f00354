"""
服务消费路由
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from pousada.database import get_db
from pousada.models.schemas import ServiceSaleCreate, ServiceSaleUpdate, ServiceSaleResponse
from pousada.services.sales_service import SalesService

router = APIRouter(prefix="/service-sales", tags=["服务消费"])


@router.get("", response_model=List[ServiceSaleResponse])
def list_service_sales(reservation_id: Optional[int] = None, db: Session = Depends(get_db)):
    """获取服务消费记录"""
    service = SalesService(db)
    return service.get_service_sales(reservation_id)


@router.post("", response_model=ServiceSaleResponse, status_code=status.HTTP_201_CREATED)
def create_service_sale(data: ServiceSaleCreate, db: Session = Depends(get_db)):
    """记录服务消费"""
    service = SalesService(db)
    return service.create_service_sale(data)


@router.put("/{sale_id}", response_model=ServiceSaleResponse)
def update_service_sale(sale_id: int, data: ServiceSaleUpdate, db: Session = Depends(get_db)):
    """更新服务消费（完成或取消）"""
    service = SalesService(db)
    return service.update_service_sale(sale_id, data)
