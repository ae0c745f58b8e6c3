"""Authenticated principal attached to a request."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Principal:
    """Identity extracted from a verified token."""
    
    id: str
    username: Optional[str] = None
    claims: Dict[str, Any] = field(default_factory=dict, compare=False)
