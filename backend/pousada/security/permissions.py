"""
员工能力（权限）定义

权限是封闭的枚举集合，而不是任意键值对；
员工的有效权限 = 角色默认权限 ∪ 额外授予的权限
"""
from enum import Enum
from typing import Iterable, Optional, Set
from pousada.models.ontology import UserRole


class Permission(str, Enum):
    """员工能力"""
    CHECKIN = "checkin"
    CHECKOUT = "checkout"
    SALES = "sales"
    CLIENTS = "clients"
    ROOMS = "rooms"
    INVENTORY = "inventory"
    REPORTS = "reports"
    USERS = "users"


ROLE_PERMISSIONS = {
    UserRole.MANAGER: frozenset(Permission),
    UserRole.RECEPTIONIST: frozenset({
        Permission.CHECKIN, Permission.CHECKOUT, Permission.SALES,
        Permission.CLIENTS, Permission.ROOMS,
    }),
    UserRole.STAFF: frozenset({Permission.SALES, Permission.INVENTORY}),
}


def effective_permissions(role: Optional[UserRole], granted: Optional[Iterable] = None) -> Set[Permission]:
    """计算员工的有效权限"""
    result = set(ROLE_PERMISSIONS.get(role, frozenset())) if role else set()
    for code in granted or []:
        result.add(Permission(code))
    return result


def has_permission(user, permission: Permission) -> bool:
    """检查员工是否拥有指定能力"""
    if user is None:
        return False
    return permission in effective_permissions(user.role, user.permissions)
