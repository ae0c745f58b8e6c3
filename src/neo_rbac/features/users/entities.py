"""User domain entity."""

from datetime import datetime
from typing import Optional
from dataclasses import dataclass


@dataclass
class User:
    """A user account as seen by the RBAC core."""
    
    id: str
    username: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
