# Security module
from pousada.security.auth import get_password_hash, verify_password
from pousada.security.permissions import Permission, effective_permissions, has_permission

__all__ = [
    'get_password_hash', 'verify_password',
    'Permission', 'effective_permissions', 'has_permission'
]
