"""
Permissions required by each route, keyed by route name.

Routes are registered under explicit names (``name=`` on the router
decorator) and the guard looks the name up here. Several codes on one
route are alternatives.
"""
from ..features.permissions.guards import RoutePermissionTable


ROUTE_PERMISSIONS = {
    # Permission catalog
    "permissions.create": ["permission.create"],
    "permissions.list": ["permission.view"],
    "permissions.get": ["permission.view"],
    "permissions.get_roles": ["permission.view"],
    "permissions.update": ["permission.edit"],
    "permissions.delete": ["permission.delete"],
    
    # Role catalog
    "roles.create": ["role.create"],
    "roles.list": ["role.view"],
    "roles.list_defaults": ["role.view"],
    "roles.get": ["role.view"],
    "roles.get_permissions": ["role.view"],
    "roles.get_users": ["role.view"],
    "roles.update": ["role.edit"],
    "roles.delete": ["role.delete"],
    
    # Role -> permission grants
    "role_permissions.assign": ["permission.assign"],
    "role_permissions.assign_bulk": ["permission.assign"],
    "role_permissions.sync": ["permission.assign"],
    "role_permissions.list_by_role": ["role.view", "permission.view"],
    "role_permissions.list_by_permission": ["role.view", "permission.view"],
    "role_permissions.revoke": ["permission.revoke"],
    "role_permissions.revoke_all": ["permission.revoke"],
    
    # User -> role assignments
    "user_roles.assign": ["role.assign"],
    "user_roles.assign_bulk": ["role.assign"],
    "user_roles.sync": ["role.assign"],
    "user_roles.list_by_user": ["role.view"],
    "user_roles.user_permissions": ["role.view"],
    "user_roles.check_permission": ["role.view"],
    "user_roles.list_by_role": ["role.view"],
    "user_roles.revoke": ["role.revoke"],
    "user_roles.revoke_all": ["role.revoke"],
    
    # Users
    "users.me": [],
    "users.get": ["users.view"],
    "users.delete": ["users.delete"],
}


def build_route_table() -> RoutePermissionTable:
    """Route table populated with the service's routes."""
    return RoutePermissionTable(ROUTE_PERMISSIONS)
