"""RBAC (Role-Based Access Control) module for canrbac.

This module defines the ability vocabulary, the permission model, the config
compiler and loader, the decision engine, and request classification helpers.
"""

from .abilities import (
    Ability,
    CONCRETE_ABILITIES,
    SENTINEL_ABILITIES,
    ability_to_string,
    parse_ability,
)
from .permissions import Permission, Role, Roles
from .compiler import (
    DiskPermission,
    DiskRole,
    DiskRoles,
    RoleConfigError,
    build_roles,
    config,
)
from .loader import load_roles, open_file
from .engine import CanFn, RoleChecker, can, can_with, compare
from .requests import ability_from_method, classify_request, permission_from_path

__all__ = [
    "Ability",
    "CONCRETE_ABILITIES",
    "SENTINEL_ABILITIES",
    "ability_to_string",
    "parse_ability",
    "Permission",
    "Role",
    "Roles",
    "DiskPermission",
    "DiskRole",
    "DiskRoles",
    "RoleConfigError",
    "build_roles",
    "config",
    "load_roles",
    "open_file",
    "CanFn",
    "RoleChecker",
    "can",
    "can_with",
    "compare",
    "ability_from_method",
    "classify_request",
    "permission_from_path",
]
