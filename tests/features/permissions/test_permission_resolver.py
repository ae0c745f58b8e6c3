"""Tests for effective permission resolution."""

from unittest.mock import AsyncMock

import pytest

from neo_rbac.exceptions import DatabaseError
from neo_rbac.features.permissions.services import PermissionResolver


class TestPermissionResolver:
    
    @pytest.mark.asyncio
    async def test_union_over_roles(
        self, store, resolver, role_service, permission_service,
        role_permission_service, user_role_service
    ):
        store.add_user("u1")
        codes = {}
        for code in ("a", "b", "c"):
            codes[code] = (await permission_service.create(code)).id
        r1 = await role_service.create("r1")
        r2 = await role_service.create("r2")
        await role_permission_service.grant_many(r1.id, [codes["a"], codes["b"]])
        await role_permission_service.grant_many(r2.id, [codes["b"], codes["c"]])
        await user_role_service.assign("u1", r1.id)
        await user_role_service.assign("u1", r2.id)
        
        permissions = await resolver.get_user_permissions("u1")
        
        assert sorted(permissions) == ["a", "b", "c"]
        assert len(permissions) == 3
    
    @pytest.mark.asyncio
    async def test_user_without_roles_has_nothing(self, resolver):
        assert await resolver.get_user_permissions("nobody") == []
    
    @pytest.mark.asyncio
    async def test_sees_changes_immediately(
        self, store, resolver, role_service, permission_service,
        role_permission_service, user_role_service
    ):
        store.add_user("u1")
        permission = await permission_service.create("posts.edit")
        role = await role_service.create("editor")
        await user_role_service.assign("u1", role.id)
        
        assert await resolver.check_user_permission("u1", "posts.edit") is False
        
        await role_permission_service.grant(role.id, permission.id)
        assert await resolver.check_user_permission("u1", "posts.edit") is True
        
        await role_permission_service.revoke(role.id, permission.id)
        assert await resolver.check_user_permission("u1", "posts.edit") is False
    
    @pytest.mark.asyncio
    async def test_deduplicates_and_passes_timeout(self):
        repository = AsyncMock()
        repository.list_permission_codes.return_value = ["a", "b", "a"]
        resolver = PermissionResolver(repository, timeout=2.5)
        
        assert await resolver.get_user_permissions("u1") == ["a", "b"]
        repository.list_permission_codes.assert_awaited_once_with("u1", timeout=2.5)
    
    @pytest.mark.asyncio
    async def test_storage_error_propagates(self):
        repository = AsyncMock()
        repository.list_permission_codes.side_effect = DatabaseError("Permission resolution timed out")
        resolver = PermissionResolver(repository)
        
        with pytest.raises(DatabaseError):
            await resolver.check_user_permission("u1", "a")
