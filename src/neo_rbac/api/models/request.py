"""
Request models for the RBAC endpoints.
"""
from typing import Optional, List
from pydantic import Field

from ...models.base import BaseSchema
from ...features.permissions.entities import PERMISSION_CODE_MAX_LENGTH, ROLE_NAME_MAX_LENGTH


class PermissionCreateRequest(BaseSchema):
    """Request to create a permission."""
    code: str = Field(..., min_length=1, max_length=PERMISSION_CODE_MAX_LENGTH, description="Unique permission code, e.g. users.view")
    description: Optional[str] = Field(None, description="Human readable description")


class PermissionUpdateRequest(BaseSchema):
    """Partial permission update. Only fields that are sent are applied."""
    code: Optional[str] = Field(None, min_length=1, max_length=PERMISSION_CODE_MAX_LENGTH)
    description: Optional[str] = None


class RoleCreateRequest(BaseSchema):
    """Request to create a role."""
    name: str = Field(..., min_length=1, max_length=ROLE_NAME_MAX_LENGTH, description="Unique role name")
    description: Optional[str] = Field(None, description="Role description")
    is_default: bool = Field(False, alias="isDefault", description="Auto-assigned to new users")


class RoleUpdateRequest(BaseSchema):
    """Partial role update."""
    name: Optional[str] = Field(None, min_length=1, max_length=ROLE_NAME_MAX_LENGTH)
    description: Optional[str] = None
    is_default: Optional[bool] = Field(None, alias="isDefault")


class AssignPermissionRequest(BaseSchema):
    """Grant one permission to a role."""
    role_id: int = Field(..., alias="roleId", ge=1)
    permission_id: int = Field(..., alias="permissionId", ge=1)
    granted_by: Optional[str] = Field(None, alias="grantedBy")


class AssignMultiplePermissionsRequest(BaseSchema):
    """Reconcile a role's grants within the ``grantedBy`` scope."""
    role_id: int = Field(..., alias="roleId", ge=1)
    permission_ids: List[int] = Field(..., alias="permissionIds")
    granted_by: Optional[str] = Field(None, alias="grantedBy")


class SyncPermissionsRequest(BaseSchema):
    """Replace a role's grants."""
    permission_ids: List[int] = Field(..., alias="permissionIds")
    granted_by: Optional[str] = Field(None, alias="grantedBy")


class AssignRoleRequest(BaseSchema):
    """Assign one role to a user."""
    user_id: str = Field(..., alias="userId", min_length=1)
    role_id: int = Field(..., alias="roleId", ge=1)
    assigned_by: Optional[str] = Field(None, alias="assignedBy")


class AssignMultipleRolesRequest(BaseSchema):
    """Reconcile a user's assignments within the ``assignedBy`` scope."""
    user_id: str = Field(..., alias="userId", min_length=1)
    role_ids: List[int] = Field(..., alias="roleIds")
    assigned_by: Optional[str] = Field(None, alias="assignedBy")


class SyncRolesRequest(BaseSchema):
    """Replace a user's assignments."""
    role_ids: List[int] = Field(..., alias="roleIds")
    assigned_by: Optional[str] = Field(None, alias="assignedBy")
