"""Per-request authorization decision.

The guard is stateless. For each request it walks
``NO_REQUIREMENT -> UNAUTHENTICATED -> CHECKING -> ALLOWED | DENIED`` and
either returns the decision or raises ForbiddenError.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Any
import logging

from ....exceptions import ForbiddenError
from ..services.permission_resolver import PermissionResolver
from .route_table import RoutePermissionTable

logger = logging.getLogger(__name__)


class GuardState(str, Enum):
    """Terminal and intermediate states of one authorization decision."""
    NO_REQUIREMENT = "no_requirement"
    UNAUTHENTICATED = "unauthenticated"
    CHECKING = "checking"
    ALLOWED = "allowed"
    DENIED = "denied"


@dataclass
class GuardDecision:
    """Outcome of an allowed request."""
    state: GuardState
    route_id: str
    required: List[str] = field(default_factory=list)
    matched: Optional[str] = None


class PermissionGuard:
    """Checks the principal against the permissions a route requires (OR semantics)."""
    
    def __init__(self, resolver: PermissionResolver, route_table: RoutePermissionTable):
        self.resolver = resolver
        self.route_table = route_table
    
    async def authorize(self, route_id: str, principal: Optional[Any]) -> GuardDecision:
        """Allow or raise ForbiddenError.
        
        Args:
            route_id: Identifier the route was registered under
            principal: Authenticated principal with an ``id``, or None
        """
        required = self.route_table.required_for(route_id)
        if not required:
            return GuardDecision(state=GuardState.NO_REQUIREMENT, route_id=route_id)
        
        if principal is None:
            logger.warning(f"Rejected unauthenticated request to {route_id}")
            raise ForbiddenError("User not authenticated", required_permissions=required)
        
        # CHECKING: storage errors propagate, they never turn into an allow
        held = set(await self.resolver.get_user_permissions(principal.id))
        for code in required:
            if code in held:
                return GuardDecision(
                    state=GuardState.ALLOWED,
                    route_id=route_id,
                    required=required,
                    matched=code
                )
        
        logger.warning(f"Denied {route_id} for user {principal.id}; requires one of {required}")
        raise ForbiddenError(
            f"Access denied. Required permissions: {' or '.join(required)}",
            required_permissions=required
        )
