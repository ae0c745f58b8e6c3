"""neo-rbac: role-based access control core of the NeoMultiTenant admin backend."""

from .__version__ import __version__

__all__ = ["__version__"]
