"""
API endpoints for the role catalog.
"""

from typing import Optional, List
from fastapi import APIRouter, Depends, Query, status

from ...models.base import APIResponse
from ...models.pagination import PaginationParams, PaginatedResponse
from ...features.permissions.services import RoleService
from ..dependencies import get_role_service
from ..models.request import RoleCreateRequest, RoleUpdateRequest
from ..models.response import RoleResponse, RoleWithPermissionsResponse, RoleWithUsersResponse

router = APIRouter()


@router.post(
    "",
    name="roles.create",
    status_code=status.HTTP_201_CREATED,
    response_model=APIResponse[RoleResponse],
    summary="Create role"
)
async def create_role(
    request: RoleCreateRequest,
    service: RoleService = Depends(get_role_service)
) -> APIResponse[RoleResponse]:
    role = await service.create(request.name, request.description, request.is_default)
    return APIResponse.success_response(
        data=RoleResponse.from_domain(role),
        message="Role created successfully",
        status_code=status.HTTP_201_CREATED
    )


@router.get(
    "",
    name="roles.list",
    response_model=APIResponse[PaginatedResponse[RoleResponse]],
    summary="List roles",
    description="List roles newest first with optional name and default filters"
)
async def list_roles(
    name: Optional[str] = Query(None, description="Case-insensitive name substring"),
    is_default: Optional[bool] = Query(None, alias="isDefault", description="Filter by default flag"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=1000, alias="pageSize", description="Items per page"),
    service: RoleService = Depends(get_role_service)
) -> APIResponse[PaginatedResponse[RoleResponse]]:
    pagination = PaginationParams(page=page, page_size=page_size)
    roles, total = await service.list(name_filter=name, is_default=is_default, pagination=pagination)
    
    return APIResponse.success_response(
        data=PaginatedResponse.create(
            items=[RoleResponse.from_domain(r) for r in roles],
            params=pagination,
            total_items=total
        ),
        message="Roles retrieved successfully"
    )


@router.get(
    "/defaults",
    name="roles.list_defaults",
    response_model=APIResponse[List[RoleResponse]],
    summary="List default roles"
)
async def list_default_roles(
    service: RoleService = Depends(get_role_service)
) -> APIResponse[List[RoleResponse]]:
    roles = await service.list_default_roles()
    return APIResponse.success_response(
        data=[RoleResponse.from_domain(r) for r in roles],
        message="Default roles retrieved successfully"
    )


@router.get(
    "/{role_id}",
    name="roles.get",
    response_model=APIResponse[RoleResponse],
    summary="Get role"
)
async def get_role(
    role_id: int,
    service: RoleService = Depends(get_role_service)
) -> APIResponse[RoleResponse]:
    role = await service.get(role_id)
    return APIResponse.success_response(
        data=RoleResponse.from_domain(role),
        message="Role retrieved successfully"
    )


@router.get(
    "/{role_id}/permissions",
    name="roles.get_permissions",
    response_model=APIResponse[RoleWithPermissionsResponse],
    summary="Get role with its permissions"
)
async def get_role_permissions(
    role_id: int,
    service: RoleService = Depends(get_role_service)
) -> APIResponse[RoleWithPermissionsResponse]:
    role = await service.get_with_permissions(role_id)
    return APIResponse.success_response(
        data=RoleWithPermissionsResponse.from_domain(role),
        message="Role retrieved successfully"
    )


@router.get(
    "/{role_id}/users",
    name="roles.get_users",
    response_model=APIResponse[RoleWithUsersResponse],
    summary="Get role with its users"
)
async def get_role_users(
    role_id: int,
    service: RoleService = Depends(get_role_service)
) -> APIResponse[RoleWithUsersResponse]:
    role = await service.get_with_users(role_id)
    return APIResponse.success_response(
        data=RoleWithUsersResponse.from_domain(role),
        message="Role retrieved successfully"
    )


@router.patch(
    "/{role_id}",
    name="roles.update",
    response_model=APIResponse[RoleResponse],
    summary="Update role"
)
async def update_role(
    role_id: int,
    request: RoleUpdateRequest,
    service: RoleService = Depends(get_role_service)
) -> APIResponse[RoleResponse]:
    role = await service.update(role_id, request.model_dump(exclude_unset=True))
    return APIResponse.success_response(
        data=RoleResponse.from_domain(role),
        message="Role updated successfully"
    )


@router.delete(
    "/{role_id}",
    name="roles.delete",
    response_model=APIResponse[None],
    summary="Delete role"
)
async def delete_role(
    role_id: int,
    service: RoleService = Depends(get_role_service)
) -> APIResponse[None]:
    await service.delete(role_id)
    return APIResponse.success_response(message="Role deleted successfully")
