"""Feature packages of the RBAC service."""
