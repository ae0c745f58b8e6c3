"""Permission domain entity.

A permission is a flat code such as ``users.view``. Codes are unique
across the catalog; the guard compares them by string equality only.
"""

from datetime import datetime
from typing import Optional, List, TYPE_CHECKING
from dataclasses import dataclass, field

if TYPE_CHECKING:
    from .grants import RolePermission


PERMISSION_CODE_MAX_LENGTH = 128


@dataclass
class Permission:
    """Domain entity representing a grantable permission."""
    
    id: Optional[int]
    code: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    role_permissions: List["RolePermission"] = field(default_factory=list)
    
    def __str__(self) -> str:
        return self.code
