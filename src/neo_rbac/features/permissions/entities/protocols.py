"""Protocol interfaces for the permissions feature.

Services depend on these contracts only. The asyncpg repositories in
``repositories/`` implement them for production and the test suite ships
in-memory implementations.
"""

from abc import abstractmethod
from typing import (
    Protocol, runtime_checkable, List, Optional, Dict, Any, Tuple, AsyncContextManager
)

from .permission import Permission
from .role import Role
from .grants import RolePermission, UserRole


@runtime_checkable
class PermissionRepository(Protocol):
    """Protocol for permission data access operations."""
    
    @abstractmethod
    async def get_by_id(self, permission_id: int) -> Optional[Permission]:
        """Get permission by ID."""
        ...
    
    @abstractmethod
    async def get_by_code(self, code: str) -> Optional[Permission]:
        """Get permission by its unique code."""
        ...
    
    @abstractmethod
    async def get_by_ids(self, permission_ids: List[int]) -> List[Permission]:
        """Get the subset of the given IDs that exist."""
        ...
    
    @abstractmethod
    async def list(
        self,
        code_filter: Optional[str] = None,
        offset: int = 0,
        limit: int = 1000
    ) -> Tuple[List[Permission], int]:
        """List permissions ordered by code, returning the page and the total count."""
        ...
    
    @abstractmethod
    async def create(self, code: str, description: Optional[str] = None) -> Permission:
        """Insert a permission."""
        ...
    
    @abstractmethod
    async def update(self, permission_id: int, updates: Dict[str, Any]) -> Optional[Permission]:
        """Apply a partial update; None when the permission does not exist."""
        ...
    
    @abstractmethod
    async def delete(self, permission_id: int) -> bool:
        """Hard delete; grants cascade."""
        ...


@runtime_checkable
class RoleRepository(Protocol):
    """Protocol for role data access operations."""
    
    @abstractmethod
    async def get_by_id(self, role_id: int) -> Optional[Role]:
        ...
    
    @abstractmethod
    async def get_by_name(self, name: str) -> Optional[Role]:
        ...
    
    @abstractmethod
    async def get_by_ids(self, role_ids: List[int]) -> List[Role]:
        ...
    
    @abstractmethod
    async def list(
        self,
        name_filter: Optional[str] = None,
        is_default: Optional[bool] = None,
        offset: int = 0,
        limit: int = 20
    ) -> Tuple[List[Role], int]:
        """List roles newest first, returning the page and the total count."""
        ...
    
    @abstractmethod
    async def list_defaults(self) -> List[Role]:
        """All roles flagged as default."""
        ...
    
    @abstractmethod
    async def create(
        self,
        name: str,
        description: Optional[str] = None,
        is_default: bool = False
    ) -> Role:
        ...
    
    @abstractmethod
    async def update(self, role_id: int, updates: Dict[str, Any]) -> Optional[Role]:
        ...
    
    @abstractmethod
    async def delete(self, role_id: int) -> bool:
        """Hard delete; grants and assignments cascade."""
        ...


@runtime_checkable
class RolePermissionRepository(Protocol):
    """Protocol for grant (role -> permission edge) storage."""
    
    @abstractmethod
    async def get(self, role_id: int, permission_id: int) -> Optional[RolePermission]:
        ...
    
    @abstractmethod
    async def list_by_role(self, role_id: int) -> List[RolePermission]:
        """Grants of a role with their permissions loaded."""
        ...
    
    @abstractmethod
    async def list_by_role_and_granter(
        self,
        role_id: int,
        granted_by: Optional[str]
    ) -> List[RolePermission]:
        """Grants of a role attributed to ``granted_by`` (None matches unattributed)."""
        ...
    
    @abstractmethod
    async def list_by_permission(self, permission_id: int) -> List[RolePermission]:
        """Grants of a permission with their roles loaded."""
        ...
    
    @abstractmethod
    async def create(
        self,
        role_id: int,
        permission_id: int,
        granted_by: Optional[str] = None
    ) -> RolePermission:
        ...
    
    @abstractmethod
    async def create_many(
        self,
        role_id: int,
        permission_ids: List[int],
        granted_by: Optional[str] = None
    ) -> List[RolePermission]:
        ...
    
    @abstractmethod
    async def delete(self, role_id: int, permission_id: int) -> bool:
        ...
    
    @abstractmethod
    async def delete_many(self, role_id: int, permission_ids: List[int]) -> int:
        ...
    
    @abstractmethod
    async def delete_by_role(self, role_id: int) -> int:
        ...


@runtime_checkable
class UserRoleRepository(Protocol):
    """Protocol for assignment (user -> role edge) storage."""
    
    @abstractmethod
    async def get(self, user_id: str, role_id: int) -> Optional[UserRole]:
        ...
    
    @abstractmethod
    async def list_by_user(self, user_id: str) -> List[UserRole]:
        """Assignments of a user with their roles loaded."""
        ...
    
    @abstractmethod
    async def list_by_user_and_assigner(
        self,
        user_id: str,
        assigned_by: Optional[str]
    ) -> List[UserRole]:
        """Assignments of a user made by ``assigned_by`` (None matches unattributed)."""
        ...
    
    @abstractmethod
    async def list_by_role(self, role_id: int) -> List[UserRole]:
        """Assignments of a role with their users loaded."""
        ...
    
    @abstractmethod
    async def create(
        self,
        user_id: str,
        role_id: int,
        assigned_by: Optional[str] = None
    ) -> UserRole:
        ...
    
    @abstractmethod
    async def create_many(
        self,
        user_id: str,
        role_ids: List[int],
        assigned_by: Optional[str] = None
    ) -> List[UserRole]:
        ...
    
    @abstractmethod
    async def delete(self, user_id: str, role_id: int) -> bool:
        ...
    
    @abstractmethod
    async def delete_many(self, user_id: str, role_ids: List[int]) -> int:
        ...
    
    @abstractmethod
    async def delete_by_user(self, user_id: str) -> int:
        ...
    
    @abstractmethod
    async def list_permission_codes(
        self,
        user_id: str,
        timeout: Optional[float] = None
    ) -> List[str]:
        """Distinct permission codes reachable through the user's roles, in one read."""
        ...


@runtime_checkable
class UserLookup(Protocol):
    """The slice of the users module the RBAC core relies on."""
    
    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[Any]:
        """Return the user record or None."""
        ...


@runtime_checkable
class TransactionManager(Protocol):
    """Runs a block of repository calls atomically."""
    
    @abstractmethod
    def transaction(self) -> AsyncContextManager[Any]:
        ...
