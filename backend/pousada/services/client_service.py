"""
客户服务
管理 Client 对象
"""
from typing import List, Optional
import logging
from sqlalchemy.orm import Session
from pousada.models.ontology import Client, Reservation
from pousada.models.schemas import ClientCreate, ClientUpdate
from pousada.services.base import transaction
from pousada.services.errors import NotFoundError, ValidationError


class ClientService:
    """客户服务"""

    def __init__(self, db: Session, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)

    def get_clients(self, search: Optional[str] = None) -> List[Client]:
        """获取客户列表（最新创建的在前）"""
        query = self.db.query(Client)
        if search:
            query = query.filter(Client.full_name.contains(search))
        return query.order_by(Client.created_at.desc(), Client.id.desc()).all()

    def get_client(self, client_id: int) -> Optional[Client]:
        return self.db.query(Client).filter(Client.id == client_id).first()

    def require_client(self, client_id: int) -> Client:
        client = self.get_client(client_id)
        if not client:
            raise NotFoundError("客户不存在")
        return client

    def create_client(self, data: ClientCreate) -> Client:
        """创建客户"""
        client = Client(**data.model_dump())
        with transaction(self.db):
            self.db.add(client)
        self.db.refresh(client)
        self.logger.info(f"Client {client.id} created")
        return client

    def update_client(self, client_id: int, data: ClientUpdate) -> Client:
        """更新客户"""
        client = self.require_client(client_id)
        with transaction(self.db):
            for key, value in data.model_dump(exclude_unset=True).items():
                setattr(client, key, value)
        self.db.refresh(client)
        return client

    def delete_client(self, client_id: int) -> bool:
        """删除客户（有预订记录的客户不可删除）"""
        client = self.require_client(client_id)

        reservation_count = self.db.query(Reservation).filter(
            Reservation.client_id == client_id
        ).count()
        if reservation_count > 0:
            raise ValidationError(f"该客户有 {reservation_count} 条预订记录，无法删除")

        with transaction(self.db):
            self.db.delete(client)
        return True
