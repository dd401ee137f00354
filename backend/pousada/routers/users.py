"""
员工管理路由
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from pousada.database import get_db
from pousada.models.ontology import UserRole
from pousada.models.schemas import UserCreate, UserUpdate, UserResponse
from pousada.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["员工管理"])


@router.get("", response_model=List[UserResponse])
def list_users(role: Optional[UserRole] = None, db: Session = Depends(get_db)):
    """获取员工列表"""
    service = UserService(db)
    return service.get_users(role)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: Session = Depends(get_db)):
    """获取员工详情"""
    service = UserService(db)
    return service.require_user(user_id)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(data: UserCreate, db: Session = Depends(get_db)):
    """创建员工"""
    service = UserService(db)
    return service.create_user(data)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(user_id: int, data: UserUpdate, db: Session = Depends(get_db)):
    """更新员工（可重置密码）"""
    service = UserService(db)
    return service.update_user(user_id, data)


@router.delete("/{user_id}")
def delete_user(user_id: int, db: Session = Depends(get_db)):
    """删除员工"""
    service = UserService(db)
    service.delete_user(user_id)
    return {"message": "删除成功"}
