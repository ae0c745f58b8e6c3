"""
API endpoints of the users collaborator.
"""

from typing import Optional
from fastapi import APIRouter, Depends

from ...exceptions import ForbiddenError
from ...models.base import APIResponse
from ...features.auth import Principal
from ...features.users.service import UserService
from ..dependencies import get_user_service, get_current_principal
from ..models.response import UserResponse, UserProfileResponse

router = APIRouter()


def _profile(user, permissions) -> UserProfileResponse:
    return UserProfileResponse(
        **UserResponse.from_domain(user).model_dump(),
        permissions=permissions
    )


@router.get(
    "/me",
    name="users.me",
    response_model=APIResponse[UserProfileResponse],
    summary="Current user with effective permissions"
)
async def get_me(
    principal: Optional[Principal] = Depends(get_current_principal),
    service: UserService = Depends(get_user_service)
) -> APIResponse[UserProfileResponse]:
    if principal is None:
        raise ForbiddenError("User not authenticated")
    
    user, permissions = await service.get_user_with_permissions(principal.id)
    return APIResponse.success_response(
        data=_profile(user, permissions),
        message="Profile retrieved successfully"
    )


@router.get(
    "/{user_id}",
    name="users.get",
    response_model=APIResponse[UserProfileResponse],
    summary="User with effective permissions"
)
async def get_user(
    user_id: str,
    service: UserService = Depends(get_user_service)
) -> APIResponse[UserProfileResponse]:
    user, permissions = await service.get_user_with_permissions(user_id)
    return APIResponse.success_response(
        data=_profile(user, permissions),
        message="User retrieved successfully"
    )


@router.delete(
    "/{user_id}",
    name="users.delete",
    response_model=APIResponse[None],
    summary="Delete a user and its role assignments"
)
async def delete_user(
    user_id: str,
    service: UserService = Depends(get_user_service)
) -> APIResponse[None]:
    await service.delete_user(user_id)
    return APIResponse.success_response(message="User deleted successfully")
