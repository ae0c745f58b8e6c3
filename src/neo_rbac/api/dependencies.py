"""
Dependency wiring for the HTTP surface.

Services are constructed once at startup into a ServiceContainer kept on
``app.state``. Endpoints reach them through the getters below, which
keeps every collaborator replaceable in tests.
"""
from dataclasses import dataclass
from typing import Optional
import logging

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from ..config.settings import Settings
from ..database import DatabaseManager
from ..features.auth import Principal, TokenValidator
from ..features.permissions.guards import PermissionGuard, GuardDecision, RoutePermissionTable
from ..features.permissions.repositories import (
    AsyncPGPermissionRepository,
    AsyncPGRoleRepository,
    AsyncPGRolePermissionRepository,
    AsyncPGUserRoleRepository,
)
from ..features.permissions.services import (
    PermissionService,
    RoleService,
    RolePermissionService,
    UserRoleService,
    PermissionResolver,
)
from ..features.users.repository import AsyncPGUserRepository
from ..features.users.service import UserService
from .route_permissions import build_route_table

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class ServiceContainer:
    """Every service the routers need, built once per process."""
    permission_service: PermissionService
    role_service: RoleService
    role_permission_service: RolePermissionService
    user_role_service: UserRoleService
    permission_resolver: PermissionResolver
    user_service: UserService
    guard: PermissionGuard
    token_validator: TokenValidator
    db: Optional[DatabaseManager] = None


def build_container(
    db: DatabaseManager,
    settings: Settings,
    route_table: Optional[RoutePermissionTable] = None
) -> ServiceContainer:
    """Wire repositories, services and the guard over one database manager."""
    schema = settings.db_schema
    
    permission_repository = AsyncPGPermissionRepository(db, schema)
    role_repository = AsyncPGRoleRepository(db, schema)
    role_permission_repository = AsyncPGRolePermissionRepository(db, schema)
    user_role_repository = AsyncPGUserRoleRepository(db, schema)
    user_repository = AsyncPGUserRepository(db, schema)
    
    permission_service = PermissionService(permission_repository, role_permission_repository)
    role_service = RoleService(role_repository, role_permission_repository, user_role_repository)
    role_permission_service = RolePermissionService(
        role_permission_repository, role_service, permission_service, db
    )
    user_role_service = UserRoleService(user_role_repository, role_service, user_repository, db)
    resolver = PermissionResolver(user_role_repository, timeout=settings.permission_resolve_timeout)
    user_service = UserService(user_repository, user_role_service, resolver)
    
    return ServiceContainer(
        permission_service=permission_service,
        role_service=role_service,
        role_permission_service=role_permission_service,
        user_role_service=user_role_service,
        permission_resolver=resolver,
        user_service=user_service,
        guard=PermissionGuard(resolver, route_table or build_route_table()),
        token_validator=TokenValidator(
            secret_key=settings.jwt_secret_key.get_secret_value(),
            algorithm=settings.jwt_algorithm,
            audience=settings.jwt_audience
        ),
        db=db
    )


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_permission_service(container: ServiceContainer = Depends(get_container)) -> PermissionService:
    return container.permission_service


def get_role_service(container: ServiceContainer = Depends(get_container)) -> RoleService:
    return container.role_service


def get_role_permission_service(
    container: ServiceContainer = Depends(get_container)
) -> RolePermissionService:
    return container.role_permission_service


def get_user_role_service(container: ServiceContainer = Depends(get_container)) -> UserRoleService:
    return container.user_role_service


def get_permission_resolver(container: ServiceContainer = Depends(get_container)) -> PermissionResolver:
    return container.permission_resolver


def get_user_service(container: ServiceContainer = Depends(get_container)) -> UserService:
    return container.user_service


async def get_current_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    container: ServiceContainer = Depends(get_container)
) -> Optional[Principal]:
    """Principal named by the bearer token, or None without a token.
    
    A token that is present but invalid raises UnauthorizedError.
    """
    if credentials is None:
        return None
    
    principal = container.token_validator.validate(credentials.credentials)
    request.state.principal = principal
    return principal


async def enforce_route_permissions(
    request: Request,
    principal: Optional[Principal] = Depends(get_current_principal),
    container: ServiceContainer = Depends(get_container)
) -> GuardDecision:
    """Router-level dependency running the guard for the matched route."""
    route = request.scope.get("route")
    route_id = getattr(route, "name", None) or ""
    return await container.guard.authorize(route_id, principal)
