"""Authorization guard and its route permission table."""

from .route_table import RoutePermissionTable
from .permission_guard import PermissionGuard, GuardState, GuardDecision

__all__ = [
    "RoutePermissionTable",
    "PermissionGuard",
    "GuardState",
    "GuardDecision",
]
