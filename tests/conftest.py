"""Pytest configuration and fixtures for neo-rbac tests."""

import time
import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt

from neo_rbac.api.dependencies import ServiceContainer
from neo_rbac.api.route_permissions import build_route_table
from neo_rbac.app import create_app
from neo_rbac.config.settings import Settings
from neo_rbac.features.auth import TokenValidator
from neo_rbac.features.permissions.guards import PermissionGuard
from neo_rbac.features.permissions.services import (
    PermissionService,
    RoleService,
    RolePermissionService,
    UserRoleService,
    PermissionResolver,
)
from neo_rbac.features.users.service import UserService

from fakes import (
    InMemoryStore,
    FakePermissionRepository,
    FakeRoleRepository,
    FakeRolePermissionRepository,
    FakeUserRoleRepository,
    FakeUserRepository,
)

JWT_SECRET = "test-secret"


@pytest.fixture
def store():
    """Fresh in-memory RBAC tables."""
    return InMemoryStore()


@pytest.fixture
def permission_repository(store):
    return FakePermissionRepository(store)


@pytest.fixture
def role_repository(store):
    return FakeRoleRepository(store)


@pytest.fixture
def role_permission_repository(store):
    return FakeRolePermissionRepository(store)


@pytest.fixture
def user_role_repository(store):
    return FakeUserRoleRepository(store)


@pytest.fixture
def user_repository(store):
    return FakeUserRepository(store)


@pytest.fixture
def permission_service(permission_repository, role_permission_repository):
    return PermissionService(permission_repository, role_permission_repository)


@pytest.fixture
def role_service(role_repository, role_permission_repository, user_role_repository):
    return RoleService(role_repository, role_permission_repository, user_role_repository)


@pytest.fixture
def role_permission_service(store, role_permission_repository, role_service, permission_service):
    return RolePermissionService(role_permission_repository, role_service, permission_service, store)


@pytest.fixture
def user_role_service(store, user_role_repository, role_service, user_repository):
    return UserRoleService(user_role_repository, role_service, user_repository, store)


@pytest.fixture
def resolver(user_role_repository):
    return PermissionResolver(user_role_repository)


@pytest.fixture
def user_service(user_repository, user_role_service, resolver):
    return UserService(user_repository, user_role_service, resolver)


@pytest.fixture
def container(
    permission_service,
    role_service,
    role_permission_service,
    user_role_service,
    resolver,
    user_service
):
    """Services wired over the in-memory store, as the app builds them at startup."""
    return ServiceContainer(
        permission_service=permission_service,
        role_service=role_service,
        role_permission_service=role_permission_service,
        user_role_service=user_role_service,
        permission_resolver=resolver,
        user_service=user_service,
        guard=PermissionGuard(resolver, build_route_table()),
        token_validator=TokenValidator(secret_key=JWT_SECRET),
    )


@pytest.fixture
def test_settings():
    return Settings(environment="test", jwt_secret_key=JWT_SECRET)


@pytest.fixture
def app(container, test_settings):
    return create_app(container=container, settings=test_settings)


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_token():
    """Build a signed bearer token for a user ID."""
    def _make(user_id: str, secret: str = JWT_SECRET, expires_in: int = 3600) -> str:
        claims = {"sub": user_id, "exp": int(time.time()) + expires_in}
        return jwt.encode(claims, secret, algorithm="HS256")
    return _make


@pytest.fixture
def auth_headers(make_token):
    def _headers(user_id: str) -> dict:
        return {"Authorization": f"Bearer {make_token(user_id)}"}
    return _headers


@pytest.fixture
async def seed_admin(store, permission_service, role_service, role_permission_service, user_role_service):
    """User ``admin`` holding a role with the given permission codes."""
    async def _seed(*codes: str, user_id: str = "admin"):
        if user_id not in store.users:
            store.add_user(user_id)
        role = await role_service.create(f"role-{user_id}-{len(store.roles)}")
        for code in codes:
            permission = await permission_service.get_by_code(code) or await permission_service.create(code)
            await role_permission_service.grant(role.id, permission.id)
        await user_role_service.assign(user_id, role.id)
        return role
    return _seed
