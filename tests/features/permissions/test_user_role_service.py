"""Tests for the user -> role graph."""

import pytest

from neo_rbac.exceptions import ConflictError, NotFoundError


@pytest.fixture
async def roles(store, role_service):
    store.add_user("u1", "alice")
    store.add_user("admin1")
    store.add_user("admin2")
    ids = {}
    for name in ("viewer", "editor", "auditor"):
        ids[name] = (await role_service.create(name)).id
    return ids


def _role_ids(assignments):
    return sorted(a.role_id for a in assignments)


class TestAssign:
    
    @pytest.mark.asyncio
    async def test_assign_unknown_user_creates_nothing(self, store, user_role_service, roles):
        with pytest.raises(NotFoundError) as exc_info:
            await user_role_service.assign("ghost", roles["viewer"])
        
        assert exc_info.value.message == "User not found"
        assert store.assignments == {}
    
    @pytest.mark.asyncio
    async def test_assign_unknown_assigner(self, user_role_service, roles):
        with pytest.raises(NotFoundError, match="User not found"):
            await user_role_service.assign("u1", roles["viewer"], assigned_by="ghost")
    
    @pytest.mark.asyncio
    async def test_assign_unknown_role(self, user_role_service, roles):
        with pytest.raises(NotFoundError, match="Role"):
            await user_role_service.assign("u1", 999)
    
    @pytest.mark.asyncio
    async def test_duplicate_assign_conflicts(self, user_role_service, roles):
        await user_role_service.assign("u1", roles["viewer"], assigned_by="admin1")
        
        with pytest.raises(ConflictError) as exc_info:
            await user_role_service.assign("u1", roles["viewer"])
        
        assert exc_info.value.message == "Role already assigned to this user"
    
    @pytest.mark.asyncio
    async def test_revoke(self, user_role_service, roles):
        await user_role_service.assign("u1", roles["viewer"])
        
        await user_role_service.revoke("u1", roles["viewer"])
        
        assert await user_role_service.list_by_user("u1") == []
        with pytest.raises(NotFoundError, match="Role assignment not found"):
            await user_role_service.revoke("u1", roles["viewer"])


class TestAssignMany:
    
    @pytest.mark.asyncio
    async def test_attributed_scope(self, user_role_service, roles):
        await user_role_service.assign("u1", roles["viewer"], assigned_by="admin2")
        await user_role_service.assign_many("u1", [roles["editor"]], assigned_by="admin1")
        
        result = await user_role_service.assign_many("u1", [roles["auditor"]], assigned_by="admin1")
        
        assert _role_ids(result) == [roles["auditor"]]
        everything = await user_role_service.list_by_user("u1")
        assert {a.role_id: a.assigned_by for a in everything} == {
            roles["viewer"]: "admin2",
            roles["auditor"]: "admin1",
        }
    
    @pytest.mark.asyncio
    async def test_unattributed_scope_spares_attributed_assignments(self, user_role_service, roles):
        await user_role_service.assign("u1", roles["viewer"], assigned_by="admin1")
        await user_role_service.assign("u1", roles["editor"])
        
        result = await user_role_service.assign_many("u1", [roles["auditor"]])
        
        assert _role_ids(result) == sorted([roles["viewer"], roles["auditor"]])
        assert {a.role_id: a.assigned_by for a in result}[roles["viewer"]] == "admin1"
    
    @pytest.mark.asyncio
    async def test_skips_roles_held_under_other_attribution(self, user_role_service, roles):
        await user_role_service.assign("u1", roles["viewer"], assigned_by="admin2")
        
        result = await user_role_service.assign_many(
            "u1", [roles["viewer"], roles["editor"]], assigned_by="admin1"
        )
        
        assert _role_ids(result) == [roles["editor"]]
    
    @pytest.mark.asyncio
    async def test_unknown_role_creates_nothing(self, store, user_role_service, roles):
        with pytest.raises(NotFoundError) as exc_info:
            await user_role_service.assign_many("u1", [roles["viewer"], 999])
        
        assert exc_info.value.message == "One or more roles not found"
        assert store.assignments == {}
    
    @pytest.mark.asyncio
    async def test_unknown_user(self, user_role_service, roles):
        with pytest.raises(NotFoundError, match="User not found"):
            await user_role_service.assign_many("ghost", [roles["viewer"]])
    
    @pytest.mark.asyncio
    async def test_blank_assigner_falls_in_unattributed_scope(self, user_role_service, roles):
        assignment = await user_role_service.assign("u1", roles["viewer"], assigned_by="")
        assert assignment.assigned_by is None
        
        result = await user_role_service.assign_many("u1", [])
        
        assert result == []
        assert await user_role_service.list_by_user("u1") == []
    
    @pytest.mark.asyncio
    async def test_blank_assigner_on_bulk_and_sync(self, user_role_service, roles):
        await user_role_service.assign("u1", roles["viewer"])
        
        result = await user_role_service.assign_many("u1", [roles["editor"]], assigned_by="  ")
        assert _role_ids(result) == [roles["editor"]]
        
        synced = await user_role_service.sync_user_roles("u1", [roles["auditor"]], assigned_by="")
        assert [a.assigned_by for a in synced] == [None]


class TestRemoval:
    
    @pytest.mark.asyncio
    async def test_remove_user_roles_without_assignments_is_true(self, user_role_service, roles):
        assert await user_role_service.remove_user_roles("u1") is True
    
    @pytest.mark.asyncio
    async def test_remove_user_roles_clears_assignments(self, user_role_service, roles):
        await user_role_service.assign("u1", roles["viewer"])
        await user_role_service.assign("u1", roles["editor"])
        
        assert await user_role_service.remove_user_roles("u1") is True
        assert await user_role_service.list_by_user("u1") == []
    
    @pytest.mark.asyncio
    async def test_remove_all_roles_returns_count(self, user_role_service, roles):
        await user_role_service.assign("u1", roles["viewer"])
        
        assert await user_role_service.remove_all_roles_from_user("u1") == 1
        assert await user_role_service.remove_all_roles_from_user("u1") == 0


class TestSyncUserRoles:
    
    @pytest.mark.asyncio
    async def test_replaces_regardless_of_attribution(self, user_role_service, roles):
        await user_role_service.assign("u1", roles["viewer"], assigned_by="admin2")
        
        result = await user_role_service.sync_user_roles(
            "u1", [roles["editor"], roles["auditor"]], assigned_by="admin1"
        )
        
        assert _role_ids(result) == sorted([roles["editor"], roles["auditor"]])
        assert {a.assigned_by for a in result} == {"admin1"}
    
    @pytest.mark.asyncio
    async def test_empty_target_clears(self, user_role_service, roles):
        await user_role_service.assign("u1", roles["viewer"])
        
        assert await user_role_service.sync_user_roles("u1", []) == []
        assert await user_role_service.list_by_user("u1") == []
    
    @pytest.mark.asyncio
    async def test_unknown_role_rolls_back(self, store, user_role_service, roles):
        await user_role_service.assign("u1", roles["viewer"])
        
        with pytest.raises(NotFoundError):
            await user_role_service.sync_user_roles("u1", [roles["editor"], 999])
        
        assert store.rollbacks == 1
        assert _role_ids(await user_role_service.list_by_user("u1")) == [roles["viewer"]]
    
    @pytest.mark.asyncio
    async def test_unknown_user(self, user_role_service, roles):
        with pytest.raises(NotFoundError, match="User not found"):
            await user_role_service.sync_user_roles("ghost", [roles["viewer"]])


class TestListings:
    
    @pytest.mark.asyncio
    async def test_list_by_user_loads_roles(self, user_role_service, roles):
        await user_role_service.assign("u1", roles["viewer"])
        
        assignments = await user_role_service.list_by_user("u1")
        
        assert [a.role.name for a in assignments] == ["viewer"]
    
    @pytest.mark.asyncio
    async def test_list_by_role_loads_users(self, user_role_service, roles):
        await user_role_service.assign("u1", roles["viewer"])
        
        assignments = await user_role_service.list_by_role(roles["viewer"])
        
        assert [a.user.username for a in assignments] == ["alice"]
    
    @pytest.mark.asyncio
    async def test_list_by_deleted_role_raises(self, role_service, user_role_service, roles):
        await role_service.delete(roles["viewer"])
        
        with pytest.raises(NotFoundError):
            await user_role_service.list_by_role(roles["viewer"])
    
    @pytest.mark.asyncio
    async def test_list_by_unknown_user_raises(self, user_role_service):
        with pytest.raises(NotFoundError, match="User not found"):
            await user_role_service.list_by_user("ghost")
