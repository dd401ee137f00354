"""
房间管理路由
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from pousada.database import get_db
from pousada.models.ontology import RoomStatus
from pousada.models.schemas import RoomCreate, RoomUpdate, RoomResponse
from pousada.services.room_service import RoomService

router = APIRouter(prefix="/rooms", tags=["房间管理"])


@router.get("", response_model=List[RoomResponse])
def list_rooms(
    room_status: Optional[RoomStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db)
):
    """获取房间列表"""
    service = RoomService(db)
    return service.get_rooms(room_status)


@router.get("/available", response_model=List[RoomResponse])
def list_available_rooms(db: Session = Depends(get_db)):
    """获取空闲房间"""
    service = RoomService(db)
    return service.get_available_rooms()


@router.get("/{room_id}", response_model=RoomResponse)
def get_room(room_id: int, db: Session = Depends(get_db)):
    """获取房间详情"""
    service = RoomService(db)
    return service.require_room(room_id)


@router.post("", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
def create_room(data: RoomCreate, db: Session = Depends(get_db)):
    """创建房间"""
    service = RoomService(db)
    return service.create_room(data)


@router.put("/{room_id}", response_model=RoomResponse)
def update_room(room_id: int, data: RoomUpdate, db: Session = Depends(get_db)):
    """更新房间（部分更新）"""
    service = RoomService(db)
    return service.update_room(room_id, data)


@router.delete("/{room_id}")
def delete_room(room_id: int, db: Session = Depends(get_db)):
    """删除房间"""
    service = RoomService(db)
    service.delete_room(room_id)
    return {"message": "删除成功"}
