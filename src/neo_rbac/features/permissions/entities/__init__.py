"""Permission entities package.

Domain entities and protocols for permission and role management.
"""

from .permission import Permission, PERMISSION_CODE_MAX_LENGTH
from .role import Role, ROLE_NAME_MAX_LENGTH
from .grants import RolePermission, UserRole
from .protocols import (
    PermissionRepository,
    RoleRepository,
    RolePermissionRepository,
    UserRoleRepository,
    UserLookup,
    TransactionManager,
)

__all__ = [
    # Domain entities
    "Permission",
    "Role",
    "RolePermission",
    "UserRole",
    "PERMISSION_CODE_MAX_LENGTH",
    "ROLE_NAME_MAX_LENGTH",
    
    # Protocols
    "PermissionRepository",
    "RoleRepository",
    "RolePermissionRepository",
    "UserRoleRepository",
    "UserLookup",
    "TransactionManager",
]
