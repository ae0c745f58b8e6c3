"""Upstream authentication: bearer token -> principal."""

from .principal import Principal
from .token_validator import TokenValidator

__all__ = ["Principal", "TokenValidator"]
