"""
API endpoints for granting permissions to roles.
"""

from typing import List
from fastapi import APIRouter, Depends, status

from ...models.base import APIResponse
from ...features.permissions.services import RolePermissionService
from ..dependencies import get_role_permission_service
from ..models.request import (
    AssignPermissionRequest, AssignMultiplePermissionsRequest, SyncPermissionsRequest
)
from ..models.response import RolePermissionResponse, RevokeAllResponse

router = APIRouter()


def _to_response(grants) -> List[RolePermissionResponse]:
    return [RolePermissionResponse.from_domain(grant) for grant in grants]


@router.post(
    "",
    name="role_permissions.assign",
    status_code=status.HTTP_201_CREATED,
    response_model=APIResponse[RolePermissionResponse],
    summary="Grant a permission to a role"
)
async def assign_permission(
    request: AssignPermissionRequest,
    service: RolePermissionService = Depends(get_role_permission_service)
) -> APIResponse[RolePermissionResponse]:
    grant = await service.grant(request.role_id, request.permission_id, request.granted_by)
    return APIResponse.success_response(
        data=RolePermissionResponse.from_domain(grant),
        message="Permission assigned successfully",
        status_code=status.HTTP_201_CREATED
    )


@router.post(
    "/bulk",
    name="role_permissions.assign_bulk",
    response_model=APIResponse[List[RolePermissionResponse]],
    summary="Reconcile a role's grants within one granter's scope"
)
async def assign_multiple_permissions(
    request: AssignMultiplePermissionsRequest,
    service: RolePermissionService = Depends(get_role_permission_service)
) -> APIResponse[List[RolePermissionResponse]]:
    grants = await service.grant_many(request.role_id, request.permission_ids, request.granted_by)
    return APIResponse.success_response(
        data=_to_response(grants),
        message="Permissions assigned successfully"
    )


@router.put(
    "/role/{role_id}/sync",
    name="role_permissions.sync",
    response_model=APIResponse[List[RolePermissionResponse]],
    summary="Replace a role's grants"
)
async def sync_role_permissions(
    role_id: int,
    request: SyncPermissionsRequest,
    service: RolePermissionService = Depends(get_role_permission_service)
) -> APIResponse[List[RolePermissionResponse]]:
    grants = await service.sync_exact(role_id, request.permission_ids, request.granted_by)
    return APIResponse.success_response(
        data=_to_response(grants),
        message="Role permissions synchronized successfully"
    )


@router.get(
    "/role/{role_id}",
    name="role_permissions.list_by_role",
    response_model=APIResponse[List[RolePermissionResponse]],
    summary="List a role's grants"
)
async def list_permissions_by_role(
    role_id: int,
    service: RolePermissionService = Depends(get_role_permission_service)
) -> APIResponse[List[RolePermissionResponse]]:
    grants = await service.list_by_role(role_id)
    return APIResponse.success_response(
        data=_to_response(grants),
        message="Role permissions retrieved successfully"
    )


@router.get(
    "/permission/{permission_id}",
    name="role_permissions.list_by_permission",
    response_model=APIResponse[List[RolePermissionResponse]],
    summary="List the roles a permission is granted to"
)
async def list_roles_by_permission(
    permission_id: int,
    service: RolePermissionService = Depends(get_role_permission_service)
) -> APIResponse[List[RolePermissionResponse]]:
    grants = await service.list_by_permission(permission_id)
    return APIResponse.success_response(
        data=_to_response(grants),
        message="Permission roles retrieved successfully"
    )


@router.delete(
    "/role/{role_id}/permission/{permission_id}",
    name="role_permissions.revoke",
    response_model=APIResponse[None],
    summary="Revoke a permission from a role"
)
async def revoke_permission(
    role_id: int,
    permission_id: int,
    service: RolePermissionService = Depends(get_role_permission_service)
) -> APIResponse[None]:
    await service.revoke(role_id, permission_id)
    return APIResponse.success_response(message="Permission removed successfully")


@router.delete(
    "/role/{role_id}",
    name="role_permissions.revoke_all",
    response_model=APIResponse[RevokeAllResponse],
    summary="Revoke every permission of a role"
)
async def revoke_all_permissions(
    role_id: int,
    service: RolePermissionService = Depends(get_role_permission_service)
) -> APIResponse[RevokeAllResponse]:
    removed = await service.revoke_all(role_id)
    return APIResponse.success_response(
        data=RevokeAllResponse(removed=removed),
        message="All permissions removed successfully"
    )
