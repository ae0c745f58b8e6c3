"""
API endpoints for assigning roles to users.
"""

from typing import List
from fastapi import APIRouter, Depends, status

from ...models.base import APIResponse
from ...features.permissions.services import UserRoleService, PermissionResolver
from ..dependencies import get_user_role_service, get_permission_resolver
from ..models.request import AssignRoleRequest, AssignMultipleRolesRequest, SyncRolesRequest
from ..models.response import (
    UserRoleResponse, UserPermissionsResponse, PermissionCheckResponse, RevokeAllResponse
)

router = APIRouter()


def _to_response(assignments) -> List[UserRoleResponse]:
    return [UserRoleResponse.from_domain(assignment) for assignment in assignments]


@router.post(
    "",
    name="user_roles.assign",
    status_code=status.HTTP_201_CREATED,
    response_model=APIResponse[UserRoleResponse],
    summary="Assign a role to a user"
)
async def assign_role(
    request: AssignRoleRequest,
    service: UserRoleService = Depends(get_user_role_service)
) -> APIResponse[UserRoleResponse]:
    assignment = await service.assign(request.user_id, request.role_id, request.assigned_by)
    return APIResponse.success_response(
        data=UserRoleResponse.from_domain(assignment),
        message="Role assigned successfully",
        status_code=status.HTTP_201_CREATED
    )


@router.post(
    "/bulk",
    name="user_roles.assign_bulk",
    response_model=APIResponse[List[UserRoleResponse]],
    summary="Reconcile a user's assignments within one assigner's scope"
)
async def assign_multiple_roles(
    request: AssignMultipleRolesRequest,
    service: UserRoleService = Depends(get_user_role_service)
) -> APIResponse[List[UserRoleResponse]]:
    assignments = await service.assign_many(request.user_id, request.role_ids, request.assigned_by)
    return APIResponse.success_response(
        data=_to_response(assignments),
        message="Roles assigned successfully"
    )


@router.put(
    "/user/{user_id}/sync",
    name="user_roles.sync",
    response_model=APIResponse[List[UserRoleResponse]],
    summary="Replace a user's assignments"
)
async def sync_user_roles(
    user_id: str,
    request: SyncRolesRequest,
    service: UserRoleService = Depends(get_user_role_service)
) -> APIResponse[List[UserRoleResponse]]:
    assignments = await service.sync_user_roles(user_id, request.role_ids, request.assigned_by)
    return APIResponse.success_response(
        data=_to_response(assignments),
        message="User roles synchronized successfully"
    )


@router.get(
    "/user/{user_id}",
    name="user_roles.list_by_user",
    response_model=APIResponse[List[UserRoleResponse]],
    summary="List a user's roles"
)
async def list_roles_by_user(
    user_id: str,
    service: UserRoleService = Depends(get_user_role_service)
) -> APIResponse[List[UserRoleResponse]]:
    assignments = await service.list_by_user(user_id)
    return APIResponse.success_response(
        data=_to_response(assignments),
        message="User roles retrieved successfully"
    )


@router.get(
    "/user/{user_id}/permissions",
    name="user_roles.user_permissions",
    response_model=APIResponse[UserPermissionsResponse],
    summary="Effective permissions of a user"
)
async def get_user_permissions(
    user_id: str,
    resolver: PermissionResolver = Depends(get_permission_resolver)
) -> APIResponse[UserPermissionsResponse]:
    permissions = await resolver.get_user_permissions(user_id)
    return APIResponse.success_response(
        data=UserPermissionsResponse(user_id=user_id, permissions=permissions),
        message="User permissions retrieved successfully"
    )


@router.get(
    "/user/{user_id}/check-permission/{permission_code}",
    name="user_roles.check_permission",
    response_model=APIResponse[PermissionCheckResponse],
    summary="Check whether a user holds a permission"
)
async def check_user_permission(
    user_id: str,
    permission_code: str,
    resolver: PermissionResolver = Depends(get_permission_resolver)
) -> APIResponse[PermissionCheckResponse]:
    has_permission = await resolver.check_user_permission(user_id, permission_code)
    return APIResponse.success_response(
        data=PermissionCheckResponse(
            user_id=user_id,
            permission_code=permission_code,
            has_permission=has_permission
        ),
        message="Permission check completed"
    )


@router.get(
    "/role/{role_id}",
    name="user_roles.list_by_role",
    response_model=APIResponse[List[UserRoleResponse]],
    summary="List the users holding a role"
)
async def list_users_by_role(
    role_id: int,
    service: UserRoleService = Depends(get_user_role_service)
) -> APIResponse[List[UserRoleResponse]]:
    assignments = await service.list_by_role(role_id)
    return APIResponse.success_response(
        data=_to_response(assignments),
        message="Role users retrieved successfully"
    )


@router.delete(
    "/user/{user_id}/role/{role_id}",
    name="user_roles.revoke",
    response_model=APIResponse[None],
    summary="Revoke a role from a user"
)
async def revoke_role(
    user_id: str,
    role_id: int,
    service: UserRoleService = Depends(get_user_role_service)
) -> APIResponse[None]:
    await service.revoke(user_id, role_id)
    return APIResponse.success_response(message="Role removed successfully")


@router.delete(
    "/user/{user_id}",
    name="user_roles.revoke_all",
    response_model=APIResponse[RevokeAllResponse],
    summary="Revoke every role of a user"
)
async def revoke_all_roles(
    user_id: str,
    service: UserRoleService = Depends(get_user_role_service)
) -> APIResponse[RevokeAllResponse]:
    removed = await service.remove_all_roles_from_user(user_id)
    return APIResponse.success_response(
        data=RevokeAllResponse(removed=removed),
        message="All roles removed successfully"
    )
