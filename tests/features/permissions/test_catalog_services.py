"""Tests for the permission and role catalog services."""

import pytest

from neo_rbac.exceptions import ConflictError, NotFoundError
from neo_rbac.models.pagination import PaginationParams


class TestPermissionService:
    """Permission catalog keyed by unique code."""
    
    @pytest.mark.asyncio
    async def test_create_and_get(self, permission_service):
        created = await permission_service.create("users.view", "View users")
        
        fetched = await permission_service.get(created.id)
        
        assert fetched.code == "users.view"
        assert fetched.description == "View users"
    
    @pytest.mark.asyncio
    async def test_create_duplicate_code_conflicts(self, permission_service):
        await permission_service.create("users.view")
        
        with pytest.raises(ConflictError) as exc_info:
            await permission_service.create("users.view")
        
        assert exc_info.value.status_code == 409
        assert exc_info.value.details["conflicting_field"] == "code"
    
    @pytest.mark.asyncio
    async def test_get_missing_raises_not_found(self, permission_service):
        with pytest.raises(NotFoundError) as exc_info:
            await permission_service.get(999)
        
        assert exc_info.value.message == "Permission with ID 999 not found"
    
    @pytest.mark.asyncio
    async def test_get_by_code_returns_none_when_absent(self, permission_service):
        assert await permission_service.get_by_code("nope") is None
    
    @pytest.mark.asyncio
    async def test_get_many_by_ids_returns_existing_subset(self, permission_service):
        a = await permission_service.create("a")
        b = await permission_service.create("b")
        
        found = await permission_service.get_many_by_ids([a.id, b.id, 999])
        
        assert {p.id for p in found} == {a.id, b.id}
    
    @pytest.mark.asyncio
    async def test_list_orders_by_code_and_filters_case_insensitively(self, permission_service):
        for code in ["users.view", "roles.view", "users.delete", "audit.read"]:
            await permission_service.create(code)
        
        items, total = await permission_service.list()
        assert [p.code for p in items] == ["audit.read", "roles.view", "users.delete", "users.view"]
        assert total == 4
        
        items, total = await permission_service.list(code_filter="USERS")
        assert [p.code for p in items] == ["users.delete", "users.view"]
        assert total == 2
    
    @pytest.mark.asyncio
    async def test_list_paginates(self, permission_service):
        for code in ["a", "b", "c"]:
            await permission_service.create(code)
        
        items, total = await permission_service.list(pagination=PaginationParams(page=2, page_size=2))
        
        assert [p.code for p in items] == ["c"]
        assert total == 3
    
    @pytest.mark.asyncio
    async def test_update_to_taken_code_conflicts(self, permission_service):
        await permission_service.create("a")
        b = await permission_service.create("b")
        
        with pytest.raises(ConflictError):
            await permission_service.update(b.id, {"code": "a"})
    
    @pytest.mark.asyncio
    async def test_update_keeping_own_code_is_allowed(self, permission_service):
        a = await permission_service.create("a")
        
        updated = await permission_service.update(a.id, {"code": "a", "description": "new"})
        
        assert updated.description == "new"
    
    @pytest.mark.asyncio
    async def test_update_ignores_null_code(self, permission_service):
        a = await permission_service.create("a")
        
        updated = await permission_service.update(a.id, {"code": None})
        
        assert updated.code == "a"
    
    @pytest.mark.asyncio
    async def test_update_missing_raises_not_found(self, permission_service):
        with pytest.raises(NotFoundError):
            await permission_service.update(42, {"description": "x"})
    
    @pytest.mark.asyncio
    async def test_delete_cascades_grants(self, store, permission_service, role_service, role_permission_service):
        role = await role_service.create("editor")
        permission = await permission_service.create("posts.edit")
        await role_permission_service.grant(role.id, permission.id)
        
        await permission_service.delete(permission.id)
        
        assert store.grants == {}
        with pytest.raises(NotFoundError):
            await permission_service.get(permission.id)
    
    @pytest.mark.asyncio
    async def test_get_with_roles(self, permission_service, role_service, role_permission_service):
        permission = await permission_service.create("posts.edit")
        editor = await role_service.create("editor")
        admin = await role_service.create("admin")
        await role_permission_service.grant(editor.id, permission.id)
        await role_permission_service.grant(admin.id, permission.id)
        
        loaded = await permission_service.get_with_roles(permission.id)
        
        assert [g.role.name for g in loaded.role_permissions] == ["admin", "editor"]


class TestRoleService:
    """Role catalog keyed by unique name."""
    
    @pytest.mark.asyncio
    async def test_create_duplicate_name_conflicts(self, role_service):
        await role_service.create("editor")
        
        with pytest.raises(ConflictError):
            await role_service.create("editor")
    
    @pytest.mark.asyncio
    async def test_get_missing_raises_not_found(self, role_service):
        with pytest.raises(NotFoundError) as exc_info:
            await role_service.get(7)
        
        assert exc_info.value.message == "Role with ID 7 not found"
    
    @pytest.mark.asyncio
    async def test_list_newest_first_with_filters(self, role_service):
        await role_service.create("viewer", is_default=True)
        await role_service.create("editor")
        await role_service.create("auditor", is_default=True)
        
        items, total = await role_service.list()
        assert [r.name for r in items] == ["auditor", "editor", "viewer"]
        assert total == 3
        
        items, _ = await role_service.list(is_default=True)
        assert [r.name for r in items] == ["auditor", "viewer"]
        
        items, _ = await role_service.list(name_filter="EDIT")
        assert [r.name for r in items] == ["editor"]
    
    @pytest.mark.asyncio
    async def test_many_default_roles_allowed(self, role_service):
        await role_service.create("member", is_default=True)
        await role_service.create("reader", is_default=True)
        
        defaults = await role_service.list_default_roles()
        
        assert [r.name for r in defaults] == ["member", "reader"]
    
    @pytest.mark.asyncio
    async def test_update_name_collision_conflicts(self, role_service):
        await role_service.create("editor")
        viewer = await role_service.create("viewer")
        
        with pytest.raises(ConflictError):
            await role_service.update(viewer.id, {"name": "editor"})
    
    @pytest.mark.asyncio
    async def test_update_applies_patch(self, role_service):
        viewer = await role_service.create("viewer")
        
        updated = await role_service.update(viewer.id, {"description": "Read only", "is_default": True})
        
        assert updated.description == "Read only"
        assert updated.is_default is True
        assert updated.name == "viewer"
    
    @pytest.mark.asyncio
    async def test_delete_cascades_grants_and_assignments(
        self, store, role_service, permission_service, role_permission_service, user_role_service
    ):
        store.add_user("u1")
        role = await role_service.create("editor")
        permission = await permission_service.create("posts.edit")
        await role_permission_service.grant(role.id, permission.id)
        await user_role_service.assign("u1", role.id)
        
        await role_service.delete(role.id)
        
        assert store.grants == {}
        assert store.assignments == {}
        with pytest.raises(NotFoundError):
            await role_permission_service.list_by_role(role.id)
    
    @pytest.mark.asyncio
    async def test_get_with_permissions_and_users(
        self, store, role_service, permission_service, role_permission_service, user_role_service
    ):
        store.add_user("u1", "alice")
        role = await role_service.create("editor")
        for code in ["posts.edit", "posts.view"]:
            permission = await permission_service.create(code)
            await role_permission_service.grant(role.id, permission.id)
        await user_role_service.assign("u1", role.id)
        
        with_permissions = await role_service.get_with_permissions(role.id)
        with_users = await role_service.get_with_users(role.id)
        
        assert with_permissions.permission_codes == ["posts.edit", "posts.view"]
        assert [a.user.username for a in with_users.user_roles] == ["alice"]
