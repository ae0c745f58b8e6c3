"""Permission services package.

Business logic for the permission and role catalogs, the grant and
assignment graphs, and permission resolution.
"""

from .permission_service import PermissionService
from .role_service import RoleService
from .role_permission_service import RolePermissionService
from .user_role_service import UserRoleService
from .permission_resolver import PermissionResolver

__all__ = [
    "PermissionService",
    "RoleService",
    "RolePermissionService",
    "UserRoleService",
    "PermissionResolver",
]
