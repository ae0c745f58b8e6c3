"""Permission repositories package.

AsyncPG implementations of the permission feature protocols.
"""

from .permission_repository import AsyncPGPermissionRepository
from .role_repository import AsyncPGRoleRepository
from .role_permission_repository import AsyncPGRolePermissionRepository
from .user_role_repository import AsyncPGUserRoleRepository

__all__ = [
    "AsyncPGPermissionRepository",
    "AsyncPGRoleRepository",
    "AsyncPGRolePermissionRepository",
    "AsyncPGUserRoleRepository",
]
