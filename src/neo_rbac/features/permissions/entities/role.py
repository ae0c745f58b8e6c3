"""Role domain entity.

Roles are named bundles of permissions. Any number of roles may carry the
default flag.
"""

from datetime import datetime
from typing import Optional, List, TYPE_CHECKING
from dataclasses import dataclass, field

if TYPE_CHECKING:
    from .grants import RolePermission, UserRole


ROLE_NAME_MAX_LENGTH = 64


@dataclass
class Role:
    """Domain entity representing a role."""
    
    id: Optional[int]
    name: str
    description: Optional[str] = None
    is_default: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    role_permissions: List["RolePermission"] = field(default_factory=list)
    user_roles: List["UserRole"] = field(default_factory=list)
    
    @property
    def permission_codes(self) -> List[str]:
        """Codes of the permissions loaded on this role's grants."""
        return [
            grant.permission.code
            for grant in self.role_permissions
            if grant.permission is not None
        ]
    
    def __str__(self) -> str:
        return self.name
