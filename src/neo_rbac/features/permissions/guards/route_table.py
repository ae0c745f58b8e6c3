"""Route identifier -> required permission codes."""

from typing import Dict, Iterable, List, Mapping, Optional, Tuple


class RoutePermissionTable:
    """Explicit registry of the permissions each route requires.
    
    A route that is absent, or registered with an empty list, has no
    requirement. Listed codes are alternatives: holding any one of them
    is enough.
    """
    
    def __init__(self, entries: Optional[Mapping[str, Iterable[str]]] = None):
        self._entries: Dict[str, Tuple[str, ...]] = {}
        for route_id, codes in (entries or {}).items():
            self.register(route_id, codes)
    
    def register(self, route_id: str, codes: Iterable[str]) -> None:
        """Declare the permissions a route requires, replacing any previous entry."""
        self._entries[route_id] = tuple(dict.fromkeys(codes))
    
    def required_for(self, route_id: str) -> List[str]:
        return list(self._entries.get(route_id, ()))
    
    def __contains__(self, route_id: str) -> bool:
        return route_id in self._entries
    
    def __len__(self) -> int:
        return len(self._entries)
    
    def items(self):
        return self._entries.items()
