"""
商品管理路由
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from pousada.database import get_db
from pousada.models.schemas import ProductCreate, ProductUpdate, ProductResponse
from pousada.services.catalog_service import CatalogService

router = APIRouter(prefix="/products", tags=["商品管理"])


@router.get("", response_model=List[ProductResponse])
def list_products(category: Optional[str] = None, db: Session = Depends(get_db)):
    """获取商品列表"""
    service = CatalogService(db)
    return service.get_products(category)


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: int, db: Session = Depends(get_db)):
    """获取商品详情"""
    service = CatalogService(db)
    return service.require_product(product_id)


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(data: ProductCreate, db: Session = Depends(get_db)):
    """创建商品"""
    service = CatalogService(db)
    return service.create_product(data)


@router.put("/{product_id}", response_model=ProductResponse)
def update_product(product_id: int, data: ProductUpdate, db: Session = Depends(get_db)):
    """更新商品"""
    service = CatalogService(db)
    return service.update_product(product_id, data)


@router.delete("/{product_id}")
def delete_product(product_id: int, db: Session = Depends(get_db)):
    """删除商品"""
    service = CatalogService(db)
    service.delete_product(product_id)
    return {"message": "删除成功"}
