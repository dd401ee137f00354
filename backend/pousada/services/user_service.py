"""
员工服务
管理 User 对象；密码只以 bcrypt 哈希保存
"""
from typing import List, Optional
import logging
from sqlalchemy.orm import Session
from pousada.models.ontology import User, UserRole
from pousada.models.schemas import UserCreate, UserUpdate
from pousada.security.auth import get_password_hash
from pousada.services.base import transaction
from pousada.services.errors import NotFoundError, ValidationError


class UserService:
    """员工服务"""

    def __init__(self, db: Session, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)

    def get_users(self, role: Optional[UserRole] = None) -> List[User]:
        """获取员工列表"""
        query = self.db.query(User)
        if role:
            query = query.filter(User.role == role)
        return query.order_by(User.created_at.desc(), User.id.desc()).all()

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def require_user(self, user_id: int) -> User:
        user = self.get_user(user_id)
        if not user:
            raise NotFoundError("员工不存在")
        return user

    def get_user_by_username(self, username: str) -> Optional[User]:
        """根据用户名获取员工"""
        return self.db.query(User).filter(User.username == username).first()

    def create_user(self, data: UserCreate) -> User:
        """创建员工"""
        if self.get_user_by_username(data.username):
            raise ValidationError(f"用户名 '{data.username}' 已存在")

        user = User(
            full_name=data.full_name,
            role=data.role,
            phone=data.phone,
            email=data.email,
            username=data.username,
            password_hash=get_password_hash(data.password),
            permissions=[p.value for p in data.permissions],
        )
        with transaction(self.db):
            self.db.add(user)
        self.db.refresh(user)
        self.logger.info(f"User '{user.username}' created with role {user.role.value}")
        return user

    def update_user(self, user_id: int, data: UserUpdate) -> User:
        """更新员工"""
        user = self.require_user(user_id)
        update_data = data.model_dump(exclude_unset=True)

        if 'username' in update_data:
            existing = self.get_user_by_username(update_data['username'])
            if existing and existing.id != user_id:
                raise ValidationError(f"用户名 '{update_data['username']}' 已存在")

        # 检查是否是最后一个经理
        if 'role' in update_data and update_data['role'] != UserRole.MANAGER:
            self._ensure_not_last_manager(user)

        password = update_data.pop('password', None)
        if 'permissions' in update_data:
            update_data['permissions'] = [p.value for p in update_data['permissions'] or []]

        with transaction(self.db):
            for key, value in update_data.items():
                setattr(user, key, value)
            if password:
                user.password_hash = get_password_hash(password)
        self.db.refresh(user)
        return user

    def delete_user(self, user_id: int) -> bool:
        """删除员工"""
        user = self.require_user(user_id)
        self._ensure_not_last_manager(user)
        with transaction(self.db):
            self.db.delete(user)
        self.logger.info(f"User {user_id} deleted")
        return True

    def _ensure_not_last_manager(self, user: User) -> None:
        if user.role != UserRole.MANAGER:
            return
        manager_count = self.db.query(User).filter(User.role == UserRole.MANAGER).count()
        if manager_count <= 1:
            raise ValidationError("系统需至少保留一个经理账号")
