"""
API endpoints for the permission catalog.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status

from ...models.base import APIResponse
from ...models.pagination import PaginationParams, PaginatedResponse
from ...features.permissions.services import PermissionService
from ..dependencies import get_permission_service
from ..models.request import PermissionCreateRequest, PermissionUpdateRequest
from ..models.response import PermissionResponse, PermissionWithRolesResponse

router = APIRouter()


@router.post(
    "",
    name="permissions.create",
    status_code=status.HTTP_201_CREATED,
    response_model=APIResponse[PermissionResponse],
    summary="Create permission"
)
async def create_permission(
    request: PermissionCreateRequest,
    service: PermissionService = Depends(get_permission_service)
) -> APIResponse[PermissionResponse]:
    permission = await service.create(request.code, request.description)
    return APIResponse.success_response(
        data=PermissionResponse.from_domain(permission),
        message="Permission created successfully",
        status_code=status.HTTP_201_CREATED
    )


@router.get(
    "",
    name="permissions.list",
    response_model=APIResponse[PaginatedResponse[PermissionResponse]],
    summary="List permissions",
    description="List permissions ordered by code, optionally filtered by a code substring"
)
async def list_permissions(
    code: Optional[str] = Query(None, description="Case-insensitive code substring"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(1000, ge=1, le=1000, alias="pageSize", description="Items per page"),
    service: PermissionService = Depends(get_permission_service)
) -> APIResponse[PaginatedResponse[PermissionResponse]]:
    pagination = PaginationParams(page=page, page_size=page_size)
    permissions, total = await service.list(code_filter=code, pagination=pagination)
    
    return APIResponse.success_response(
        data=PaginatedResponse.create(
            items=[PermissionResponse.from_domain(p) for p in permissions],
            params=pagination,
            total_items=total
        ),
        message="Permissions retrieved successfully"
    )


@router.get(
    "/{permission_id}",
    name="permissions.get",
    response_model=APIResponse[PermissionResponse],
    summary="Get permission"
)
async def get_permission(
    permission_id: int,
    service: PermissionService = Depends(get_permission_service)
) -> APIResponse[PermissionResponse]:
    permission = await service.get(permission_id)
    return APIResponse.success_response(
        data=PermissionResponse.from_domain(permission),
        message="Permission retrieved successfully"
    )


@router.get(
    "/{permission_id}/roles",
    name="permissions.get_roles",
    response_model=APIResponse[PermissionWithRolesResponse],
    summary="Get permission with the roles it is granted to"
)
async def get_permission_roles(
    permission_id: int,
    service: PermissionService = Depends(get_permission_service)
) -> APIResponse[PermissionWithRolesResponse]:
    permission = await service.get_with_roles(permission_id)
    return APIResponse.success_response(
        data=PermissionWithRolesResponse.from_domain(permission),
        message="Permission retrieved successfully"
    )


@router.patch(
    "/{permission_id}",
    name="permissions.update",
    response_model=APIResponse[PermissionResponse],
    summary="Update permission"
)
async def update_permission(
    permission_id: int,
    request: PermissionUpdateRequest,
    service: PermissionService = Depends(get_permission_service)
) -> APIResponse[PermissionResponse]:
    permission = await service.update(permission_id, request.model_dump(exclude_unset=True))
    return APIResponse.success_response(
        data=PermissionResponse.from_domain(permission),
        message="Permission updated successfully"
    )


@router.delete(
    "/{permission_id}",
    name="permissions.delete",
    response_model=APIResponse[None],
    summary="Delete permission"
)
async def delete_permission(
    permission_id: int,
    service: PermissionService = Depends(get_permission_service)
) -> APIResponse[None]:
    await service.delete(permission_id)
    return APIResponse.success_response(message="Permission deleted successfully")
