"""
库存变动路由
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from pousada.database import get_db
from pousada.models.schemas import InventoryMovementCreate, InventoryMovementResponse
from pousada.services.inventory_service import InventoryService

router = APIRouter(prefix="/inventory-movements", tags=["库存管理"])


@router.get("", response_model=List[InventoryMovementResponse])
def list_movements(product_id: Optional[int] = None, db: Session = Depends(get_db)):
    """获取库存变动记录"""
    service = InventoryService(db)
    return service.get_movements(product_id)


@router.post("", response_model=InventoryMovementResponse, status_code=status.HTTP_201_CREATED)
def create_movement(data: InventoryMovementCreate, db: Session = Depends(get_db)):
    """记录入库/出库"""
    service = InventoryService(db)
    return service.create_movement(data)
