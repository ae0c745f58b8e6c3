"""Edge entities of the RBAC graph.

``RolePermission`` links a role to a permission (a grant), ``UserRole``
links a user to a role (an assignment). Both record who created the edge;
``None`` means the edge is unattributed.
"""

from datetime import datetime
from typing import Optional, Any
from dataclasses import dataclass

from .permission import Permission
from .role import Role


@dataclass
class RolePermission:
    """A grant of one permission to one role."""
    
    role_id: int
    permission_id: int
    granted_by: Optional[str] = None
    created_at: Optional[datetime] = None
    role: Optional[Role] = None
    permission: Optional[Permission] = None


@dataclass
class UserRole:
    """An assignment of one role to one user."""
    
    user_id: str
    role_id: int
    assigned_by: Optional[str] = None
    created_at: Optional[datetime] = None
    role: Optional[Role] = None
    # Loaded user record, owned by the users feature
    user: Optional[Any] = None
