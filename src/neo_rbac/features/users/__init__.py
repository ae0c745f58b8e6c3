"""Users feature.

Thin collaborator of the RBAC core: user lookup, account deletion that
clears role assignments first, and the profile read that carries the
effective permission set.
"""
