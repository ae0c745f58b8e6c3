"""
Response models for the RBAC endpoints.
"""
from typing import Optional, List
from datetime import datetime
from pydantic import Field

from ...models.base import BaseSchema
from ...features.permissions.entities import Permission, Role, RolePermission, UserRole
from ...features.users.entities import User


class PermissionResponse(BaseSchema):
    id: int
    code: str
    description: Optional[str] = None
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")
    
    @classmethod
    def from_domain(cls, permission: Permission) -> "PermissionResponse":
        return cls(
            id=permission.id,
            code=permission.code,
            description=permission.description,
            created_at=permission.created_at,
            updated_at=permission.updated_at
        )


class RoleResponse(BaseSchema):
    id: int
    name: str
    description: Optional[str] = None
    is_default: bool = Field(False, alias="isDefault")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")
    
    @classmethod
    def from_domain(cls, role: Role) -> "RoleResponse":
        return cls(
            id=role.id,
            name=role.name,
            description=role.description,
            is_default=role.is_default,
            created_at=role.created_at,
            updated_at=role.updated_at
        )


class UserResponse(BaseSchema):
    id: str
    username: str
    email: Optional[str] = None
    full_name: Optional[str] = Field(None, alias="fullName")
    is_active: bool = Field(True, alias="isActive")
    
    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            full_name=user.full_name,
            is_active=user.is_active
        )


class RolePermissionResponse(BaseSchema):
    """A grant, with the permission or role loaded when available."""
    role_id: int = Field(alias="roleId")
    permission_id: int = Field(alias="permissionId")
    granted_by: Optional[str] = Field(None, alias="grantedBy")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    permission: Optional[PermissionResponse] = None
    role: Optional[RoleResponse] = None
    
    @classmethod
    def from_domain(cls, grant: RolePermission) -> "RolePermissionResponse":
        return cls(
            role_id=grant.role_id,
            permission_id=grant.permission_id,
            granted_by=grant.granted_by,
            created_at=grant.created_at,
            permission=PermissionResponse.from_domain(grant.permission) if grant.permission else None,
            role=RoleResponse.from_domain(grant.role) if grant.role else None
        )


class UserRoleResponse(BaseSchema):
    """An assignment, with the role or user loaded when available."""
    user_id: str = Field(alias="userId")
    role_id: int = Field(alias="roleId")
    assigned_by: Optional[str] = Field(None, alias="assignedBy")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    role: Optional[RoleResponse] = None
    user: Optional[UserResponse] = None
    
    @classmethod
    def from_domain(cls, assignment: UserRole) -> "UserRoleResponse":
        return cls(
            user_id=assignment.user_id,
            role_id=assignment.role_id,
            assigned_by=assignment.assigned_by,
            created_at=assignment.created_at,
            role=RoleResponse.from_domain(assignment.role) if assignment.role else None,
            user=UserResponse.from_domain(assignment.user) if assignment.user else None
        )


class PermissionWithRolesResponse(PermissionResponse):
    role_permissions: List[RolePermissionResponse] = Field(default_factory=list, alias="rolePermissions")
    
    @classmethod
    def from_domain(cls, permission: Permission) -> "PermissionWithRolesResponse":
        base = PermissionResponse.from_domain(permission).model_dump()
        return cls(
            **base,
            role_permissions=[RolePermissionResponse.from_domain(g) for g in permission.role_permissions]
        )


class RoleWithPermissionsResponse(RoleResponse):
    role_permissions: List[RolePermissionResponse] = Field(default_factory=list, alias="rolePermissions")
    permissions: List[str] = Field(default_factory=list, description="Codes granted to the role")
    
    @classmethod
    def from_domain(cls, role: Role) -> "RoleWithPermissionsResponse":
        base = RoleResponse.from_domain(role).model_dump()
        return cls(
            **base,
            role_permissions=[RolePermissionResponse.from_domain(g) for g in role.role_permissions],
            permissions=role.permission_codes
        )


class RoleWithUsersResponse(RoleResponse):
    user_roles: List[UserRoleResponse] = Field(default_factory=list, alias="userRoles")
    
    @classmethod
    def from_domain(cls, role: Role) -> "RoleWithUsersResponse":
        base = RoleResponse.from_domain(role).model_dump()
        return cls(
            **base,
            user_roles=[UserRoleResponse.from_domain(a) for a in role.user_roles]
        )


class UserPermissionsResponse(BaseSchema):
    user_id: str = Field(alias="userId")
    permissions: List[str]


class PermissionCheckResponse(BaseSchema):
    user_id: str = Field(alias="userId")
    permission_code: str = Field(alias="permissionCode")
    has_permission: bool = Field(alias="hasPermission")


class UserProfileResponse(UserResponse):
    permissions: List[str] = Field(default_factory=list)


class RevokeAllResponse(BaseSchema):
    removed: int


class HealthResponse(BaseSchema):
    status: str
    database: bool
    version: str
