"""
服务项目管理路由
"""
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from pousada.database import get_db
from pousada.models.schemas import ServiceCreate, ServiceUpdate, ServiceResponse
from pousada.services.catalog_service import CatalogService

router = APIRouter(prefix="/services", tags=["服务项目"])


@router.get("", response_model=List[ServiceResponse])
def list_services(db: Session = Depends(get_db)):
    """获取服务项目列表"""
    service = CatalogService(db)
    return service.get_services()


@router.get("/{service_id}", response_model=ServiceResponse)
def get_service(service_id: int, db: Session = Depends(get_db)):
    """获取服务项目详情"""
    service = CatalogService(db)
    return service.require_service(service_id)


@router.post("", response_model=ServiceResponse, status_code=status.HTTP_201_CREATED)
def create_service(data: ServiceCreate, db: Session = Depends(get_db)):
    """创建服务项目"""
    service = CatalogService(db)
    return service.create_service(data)


@router.put("/{service_id}", response_model=ServiceResponse)
def update_service(service_id: int, data: ServiceUpdate, db: Session = Depends(get_db)):
    """更新服务项目"""
    service = CatalogService(db)
    return service.update_service(service_id, data)


@router.delete("/{service_id}")
def delete_service(service_id: int, db: Session = Depends(get_db)):
    """删除服务项目"""
    service = CatalogService(db)
    service.delete_service(service_id)
    return {"message": "删除成功"}
