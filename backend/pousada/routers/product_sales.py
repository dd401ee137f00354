"""
商品消费路由
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from pousada.database import get_db
from pousada.models.schemas import ProductSaleCreate, ProductSaleResponse
from pousada.services.sales_service import SalesService

router = APIRouter(prefix="/product-sales", tags=["商品消费"])


@router.get("", response_model=List[ProductSaleResponse])
def list_product_sales(reservation_id: Optional[int] = None, db: Session = Depends(get_db)):
    """获取商品消费记录"""
    service = SalesService(db)
    return service.get_product_sales(reservation_id)


@router.post("", response_model=ProductSaleResponse, status_code=status.HTTP_201_CREATED)
def create_product_sale(data: ProductSaleCreate, db: Session = Depends(get_db)):
    """记录商品消费（同时扣减库存）"""
    service = SalesService(db)
    return service.create_product_sale(data)


@router.delete("/{sale_id}")
def delete_product_sale(sale_id: int, db: Session = Depends(get_db)):
    """删除商品消费记录（不回补库存）"""
    service = SalesService(db)
    service.delete_product_sale(sale_id)
    return {"message": "删除成功"}
