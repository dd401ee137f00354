"""
客户管理路由
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from pousada.database import get_db
from pousada.models.schemas import ClientCreate, ClientUpdate, ClientResponse
from pousada.services.client_service import ClientService

router = APIRouter(prefix="/clients", tags=["客户管理"])


@router.get("", response_model=List[ClientResponse])
def list_clients(search: Optional[str] = None, db: Session = Depends(get_db)):
    """获取客户列表（可按姓名搜索）"""
    service = ClientService(db)
    return service.get_clients(search)


@router.get("/{client_id}", response_model=ClientResponse)
def get_client(client_id: int, db: Session = Depends(get_db)):
    """获取客户详情"""
    service = ClientService(db)
    return service.require_client(client_id)


@router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
def create_client(data: ClientCreate, db: Session = Depends(get_db)):
    """创建客户"""
    service = ClientService(db)
    return service.create_client(data)


@router.put("/{client_id}", response_model=ClientResponse)
def update_client(client_id: int, data: ClientUpdate, db: Session = Depends(get_db)):
    """更新客户"""
    service = ClientService(db)
    return service.update_client(client_id, data)


@router.delete("/{client_id}")
def delete_client(client_id: int, db: Session = Depends(get_db)):
    """删除客户"""
    service = ClientService(db)
    service.delete_client(client_id)
    return {"message": "删除成功"}
