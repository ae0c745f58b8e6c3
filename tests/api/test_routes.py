"""HTTP tests for the RBAC routers, the guard dependency and the error envelope."""

import pytest

API = "/api/v1"


class TestErrorEnvelope:
    
    @pytest.mark.asyncio
    async def test_guarded_route_without_token_is_forbidden(self, client):
        response = await client.get(f"{API}/permissions")
        
        assert response.status_code == 403
        body = response.json()
        assert body["success"] is False
        assert body["data"] is None
        assert body["message"] == "User not authenticated"
        assert body["error"] == "Forbidden"
        assert body["statusCode"] == 403
        assert body["path"] == f"{API}/permissions"
        assert "timestamp" in body
    
    @pytest.mark.asyncio
    async def test_missing_permission_is_forbidden(self, client, auth_headers, seed_admin):
        await seed_admin("role.view")
        
        response = await client.post(f"{API}/permissions", json={"code": "x"}, headers=auth_headers("admin"))
        
        assert response.status_code == 403
        assert response.json()["message"] == "Access denied. Required permissions: permission.create"
    
    @pytest.mark.asyncio
    async def test_malformed_token_is_unauthorized(self, client):
        response = await client.get(f"{API}/permissions", headers={"Authorization": "Bearer garbage"})
        
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token"
    
    @pytest.mark.asyncio
    async def test_expired_token_is_unauthorized(self, client, make_token):
        token = make_token("admin", expires_in=-60)
        
        response = await client.get(f"{API}/permissions", headers={"Authorization": f"Bearer {token}"})
        
        assert response.status_code == 401
        assert response.json()["message"] == "Token has expired"
    
    @pytest.mark.asyncio
    async def test_request_validation_is_bad_request(self, client, auth_headers, seed_admin):
        await seed_admin("permission.create")
        
        response = await client.post(f"{API}/permissions", json={"code": ""}, headers=auth_headers("admin"))
        
        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Validation failed"
        assert body["error"] == "Bad Request"
        assert body["details"]
    
    @pytest.mark.asyncio
    async def test_not_found_envelope(self, client, auth_headers, seed_admin):
        await seed_admin("role.view")
        
        response = await client.get(f"{API}/roles/999", headers=auth_headers("admin"))
        
        assert response.status_code == 404
        assert response.json()["message"] == "Role with ID 999 not found"
    
    @pytest.mark.asyncio
    async def test_unknown_path(self, client):
        response = await client.get("/nowhere")
        
        assert response.status_code == 404
        assert response.json()["success"] is False


class TestPermissionRoutes:
    
    @pytest.mark.asyncio
    async def test_create_and_list(self, client, auth_headers, seed_admin):
        await seed_admin("permission.create", "permission.view")
        headers = auth_headers("admin")
        
        created = await client.post(
            f"{API}/permissions",
            json={"code": "reports.view", "description": "View reports"},
            headers=headers
        )
        assert created.status_code == 201
        body = created.json()
        assert body["success"] is True
        assert body["statusCode"] == 201
        assert body["data"]["code"] == "reports.view"
        assert "createdAt" in body["data"]
        
        listed = await client.get(f"{API}/permissions", params={"code": "report"}, headers=headers)
        data = listed.json()["data"]
        assert [p["code"] for p in data["items"]] == ["reports.view"]
        assert data["pagination"] == {
            "page": 1, "pageSize": 1000, "totalItems": 1,
            "totalPages": 1, "hasNext": False, "hasPrevious": False,
        }
    
    @pytest.mark.asyncio
    async def test_duplicate_code_conflicts(self, client, auth_headers, seed_admin):
        await seed_admin("permission.create")
        headers = auth_headers("admin")
        
        response = await client.post(f"{API}/permissions", json={"code": "permission.create"}, headers=headers)
        
        assert response.status_code == 409
        assert response.json()["error"] == "Conflict"


class TestRoleRoutes:
    
    @pytest.mark.asyncio
    async def test_create_update_and_defaults(self, client, auth_headers, seed_admin):
        await seed_admin("role.create", "role.edit", "role.view")
        headers = auth_headers("admin")
        
        created = await client.post(f"{API}/roles", json={"name": "viewer"}, headers=headers)
        role_id = created.json()["data"]["id"]
        assert created.json()["data"]["isDefault"] is False
        
        updated = await client.patch(f"{API}/roles/{role_id}", json={"isDefault": True}, headers=headers)
        assert updated.json()["data"]["isDefault"] is True
        assert updated.json()["data"]["name"] == "viewer"
        
        defaults = await client.get(f"{API}/roles/defaults", headers=headers)
        assert [r["name"] for r in defaults.json()["data"]] == ["viewer"]


class TestGraphRoutes:
    
    @pytest.mark.asyncio
    async def test_bulk_grant_and_sync(self, client, auth_headers, seed_admin, permission_service, role_service):
        await seed_admin("permission.assign", "role.view")
        headers = auth_headers("admin")
        role = await role_service.create("editor")
        p10 = await permission_service.create("posts.view")
        p20 = await permission_service.create("posts.edit")
        
        bulk = await client.post(
            f"{API}/role-permissions/bulk",
            json={"roleId": role.id, "permissionIds": [p10.id, p20.id], "grantedBy": "admin"},
            headers=headers
        )
        assert bulk.status_code == 200
        grants = bulk.json()["data"]
        assert sorted(g["permissionId"] for g in grants) == sorted([p10.id, p20.id])
        assert {g["grantedBy"] for g in grants} == {"admin"}
        
        synced = await client.put(
            f"{API}/role-permissions/role/{role.id}/sync",
            json={"permissionIds": [p20.id]},
            headers=headers
        )
        assert [g["permissionId"] for g in synced.json()["data"]] == [p20.id]
        
        listed = await client.get(f"{API}/role-permissions/role/{role.id}", headers=headers)
        assert [g["permission"]["code"] for g in listed.json()["data"]] == ["posts.edit"]
    
    @pytest.mark.asyncio
    async def test_sync_with_unknown_permission(self, client, auth_headers, seed_admin, role_service):
        await seed_admin("permission.assign")
        role = await role_service.create("editor")
        
        response = await client.put(
            f"{API}/role-permissions/role/{role.id}/sync",
            json={"permissionIds": [999]},
            headers=auth_headers("admin")
        )
        
        assert response.status_code == 404
        body = response.json()
        assert body["message"] == "One or more permissions not found"
        assert body["details"]["missing_ids"] == [999]
    
    @pytest.mark.asyncio
    async def test_assign_role_and_resolve(self, client, store, auth_headers, seed_admin, role_service):
        await seed_admin("role.assign", "role.view")
        store.add_user("u1")
        role = await role_service.create("viewer")
        headers = auth_headers("admin")
        
        assigned = await client.post(
            f"{API}/user-roles",
            json={"userId": "u1", "roleId": role.id, "assignedBy": "admin"},
            headers=headers
        )
        assert assigned.status_code == 201
        assert assigned.json()["data"]["assignedBy"] == "admin"
        
        again = await client.post(f"{API}/user-roles", json={"userId": "u1", "roleId": role.id}, headers=headers)
        assert again.status_code == 409
        
        check = await client.get(f"{API}/user-roles/user/admin/check-permission/role.assign", headers=headers)
        assert check.json()["data"] == {"userId": "admin", "permissionCode": "role.assign", "hasPermission": True}
        
        permissions = await client.get(f"{API}/user-roles/user/admin/permissions", headers=headers)
        assert sorted(permissions.json()["data"]["permissions"]) == ["role.assign", "role.view"]
    
    @pytest.mark.asyncio
    async def test_assign_to_unknown_user(self, client, auth_headers, seed_admin, role_service):
        await seed_admin("role.assign")
        role = await role_service.create("viewer")
        
        response = await client.post(
            f"{API}/user-roles",
            json={"userId": "ghost", "roleId": role.id},
            headers=auth_headers("admin")
        )
        
        assert response.status_code == 404
        assert response.json()["message"] == "User not found"
    
    @pytest.mark.asyncio
    async def test_either_permission_opens_grant_listing(self, client, auth_headers, seed_admin, role_service):
        await seed_admin("permission.view")
        role = await role_service.create("editor")
        
        response = await client.get(f"{API}/role-permissions/role/{role.id}", headers=auth_headers("admin"))
        
        assert response.status_code == 200
        assert response.json()["data"] == []


class TestUserRoutes:
    
    @pytest.mark.asyncio
    async def test_me_requires_token(self, client):
        response = await client.get(f"{API}/users/me")
        
        assert response.status_code == 403
        assert response.json()["message"] == "User not authenticated"
    
    @pytest.mark.asyncio
    async def test_me_returns_profile(self, client, auth_headers, seed_admin):
        await seed_admin("users.view")
        
        response = await client.get(f"{API}/users/me", headers=auth_headers("admin"))
        
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == "admin"
        assert data["permissions"] == ["users.view"]
    
    @pytest.mark.asyncio
    async def test_delete_user(self, client, store, auth_headers, seed_admin):
        await seed_admin("users.delete")
        store.add_user("u1")
        
        response = await client.delete(f"{API}/users/u1", headers=auth_headers("admin"))
        
        assert response.status_code == 200
        assert "u1" not in store.users


class TestHealth:
    
    @pytest.mark.asyncio
    async def test_health_without_database(self, client):
        response = await client.get("/health")
        
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "degraded"
