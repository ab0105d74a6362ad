"""Compile on-disk role definitions into the in-memory Roles model.

Disk format (YAML or any decoder producing the same shape):

    admin:
      users:
        abilities: [all]
        routes: ["42", comments]
        resource: user

Each declared permission ``P`` with routes ``[r1, r2]`` produces the keys
``P``, ``P_r1`` and ``P_r2`` in the compiled Role, all sharing one
Permission value.
"""

from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, ValidationInfo, field_validator

from ...common.logger import get_logger
from .abilities import Ability, parse_ability
from .permissions import Permission, Role, Roles

logger = get_logger("rbac_compiler")


class RoleConfigError(ValueError):
    """Raised when a role definition cannot be compiled."""

    def __init__(self, message: str, role: Optional[str] = None, permission: Optional[str] = None):
        super().__init__(message)
        self.role = role
        self.permission = permission


class DiskPermission(BaseModel):
    """A permission as written in the role config file."""

    model_config = ConfigDict(extra="ignore")

    abilities: List[str] = []
    routes: List[str] = []
    resource: str = ""

    @field_validator("abilities", "routes", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return []
        # Unquoted numeric routes ("routes: [42]") decode as ints
        if info.field_name == "routes" and isinstance(value, list):
            return [
                str(v) if isinstance(v, (int, float)) and not isinstance(v, bool) else v
                for v in value
            ]
        return value

    @field_validator("resource", mode="before")
    @classmethod
    def _coerce_resource(cls, value: Any) -> Any:
        if value is None:
            return ""
        # Unquoted numeric tags ("resource: 42") decode as numbers
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


DiskRole = Dict[str, DiskPermission]

DiskRoles = Dict[str, DiskRole]


def parse_disk_roles(raw: Mapping[str, Any]) -> DiskRoles:
    """Validate a decoded config mapping against the disk schema.

    Args:
        raw: Mapping of role name -> permission name -> permission body

    Returns:
        DiskRoles with every permission body validated

    Raises:
        RoleConfigError: If a role or permission body has the wrong shape
    """
    disk_roles: DiskRoles = {}
    for role_name, permissions in raw.items():
        role_name = str(role_name)
        if permissions is None:
            permissions = {}
        if not isinstance(permissions, Mapping):
            raise RoleConfigError(
                f"Role '{role_name}' must map permission names to definitions, "
                f"got {type(permissions).__name__}",
                role=role_name,
            )

        disk_role: DiskRole = {}
        for perm_name, body in permissions.items():
            perm_name = str(perm_name)
            if isinstance(body, DiskPermission):
                disk_role[perm_name] = body
                continue
            try:
                disk_role[perm_name] = DiskPermission.model_validate(body or {})
            except ValidationError as e:
                raise RoleConfigError(
                    f"Invalid permission '{perm_name}' in role '{role_name}': {e}",
                    role=role_name,
                    permission=perm_name,
                ) from e
        disk_roles[role_name] = disk_role

    return disk_roles


def build_abilities(
    abilities: List[str],
    strict: bool = False,
    role: Optional[str] = None,
    permission: Optional[str] = None,
) -> frozenset:
    """Convert config ability names into an ability set.

    Unknown names become Ability.NONE, which can never be granted. In
    strict mode they raise RoleConfigError instead.
    """
    result = set()
    for name in abilities:
        ability = parse_ability(name)
        if ability is Ability.NONE and str(name).strip().lower() != "none":
            if strict:
                raise RoleConfigError(
                    f"Unknown ability '{name}' for permission '{permission}' in role '{role}'",
                    role=role,
                    permission=permission,
                )
            logger.warning(
                f"Unknown ability '{name}' for permission '{permission}' "
                f"in role '{role}'; treating as none"
            )
        result.add(ability)
    return frozenset(result)


def build_role(role_name: str, disk_role: DiskRole, strict: bool = False) -> Role:
    """Compile a single role, expanding route fan-out keys.

    Keys are written in declaration order: the permission's own name first,
    then one ``name_route`` key per route. A later write to an existing key
    replaces it.
    """
    role: Role = {}
    sources: Dict[str, str] = {}

    for perm_name, disk_perm in disk_role.items():
        permission = Permission(
            abilities=build_abilities(
                disk_perm.abilities, strict=strict, role=role_name, permission=perm_name
            ),
            resource=disk_perm.resource,
        )

        for key in expand_keys(perm_name, disk_perm.routes):
            if key in role and sources[key] != perm_name:
                message = (
                    f"Permission key '{key}' in role '{role_name}' from '{perm_name}' "
                    f"collides with the one from '{sources[key]}'"
                )
                if strict:
                    raise RoleConfigError(message, role=role_name, permission=perm_name)
                logger.warning(f"{message}; the later definition wins")
            role[key] = permission
            sources[key] = perm_name

    return role


def expand_keys(perm_name: str, routes: List[str]) -> List[str]:
    """Return the lookup keys a declared permission answers to."""
    keys = [perm_name]
    for route in routes:
        if not route:
            continue
        keys.append(f"{perm_name}_{route}")
    return keys


def build_roles(disk_roles: Mapping[str, Any], strict: bool = False) -> Roles:
    """Compile disk role definitions into Roles.

    Args:
        disk_roles: DiskRoles, or a raw decoded mapping in the disk format
        strict: Reject unknown abilities and colliding keys instead of
            degrading to deny / last-writer-wins

    Returns:
        A freshly built Roles mapping

    Raises:
        RoleConfigError: On a malformed definition, or in strict mode on
            unknown abilities and key collisions
    """
    roles: Roles = {}
    for role_name, disk_role in parse_disk_roles(disk_roles).items():
        roles[role_name] = build_role(role_name, disk_role, strict=strict)

    logger.debug(
        f"Compiled {len(roles)} roles: "
        + ", ".join(f"{name} ({len(role)} permissions)" for name, role in roles.items())
    )
    return roles


def config(disk_roles: Mapping[str, Any]) -> Roles:
    """Build Roles from an already-parsed config.

    Useful when the config is stored in a format other than YAML or is
    decoded elsewhere.
    """
    return build_roles(disk_roles)
