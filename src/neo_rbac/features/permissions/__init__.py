"""Permissions feature.

Feature-first layout for role-based access control:
- entities/: permissions, roles, grants, assignments and protocols
- repositories/: asyncpg data access
- services/: catalogs, graph synchronisation and permission resolution
- guards/: per-route authorization
"""

from .entities import (
    Permission, Role, RolePermission, UserRole,
    PermissionRepository, RoleRepository, RolePermissionRepository,
    UserRoleRepository, UserLookup, TransactionManager
)
from .services import (
    PermissionService, RoleService, RolePermissionService,
    UserRoleService, PermissionResolver
)
from .guards import RoutePermissionTable, PermissionGuard, GuardState, GuardDecision

__all__ = [
    # Entities
    "Permission",
    "Role",
    "RolePermission",
    "UserRole",
    
    # Protocols
    "PermissionRepository",
    "RoleRepository",
    "RolePermissionRepository",
    "UserRoleRepository",
    "UserLookup",
    "TransactionManager",
    
    # Services
    "PermissionService",
    "RoleService",
    "RolePermissionService",
    "UserRoleService",
    "PermissionResolver",
    
    # Guard
    "RoutePermissionTable",
    "PermissionGuard",
    "GuardState",
    "GuardDecision",
]
