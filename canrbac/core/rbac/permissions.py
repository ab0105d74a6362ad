"""Permission model for canrbac.

A Permission is a named, role-scoped grant: a set of abilities plus an
optional resource tag. The name is the key the permission is stored under
in its Role.

  Roles  = {role name: Role}
  Role   = {permission name: Permission}

Both mappings are built once by the compiler and are only read afterwards.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet

from .abilities import Ability, SENTINEL_ABILITIES


@dataclass(frozen=True)
class Permission:
    """Abilities granted on a permission, plus an opaque resource tag."""

    abilities: FrozenSet[Ability] = field(default_factory=frozenset)
    resource: str = ""

    @classmethod
    def of(cls, *abilities: Ability, resource: str = "") -> "Permission":
        """Build a permission from abilities given positionally."""
        return cls(frozenset(abilities), resource)

    def grants(self, ability: Ability) -> bool:
        """Check whether the ability itself is in the granted set."""
        return ability in self.abilities

    @property
    def is_unrestricted(self) -> bool:
        """True if ALL or SKIP is granted."""
        return not self.abilities.isdisjoint(SENTINEL_ABILITIES)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "abilities": sorted(str(a) for a in self.abilities),
            "resource": self.resource,
        }


Role = Dict[str, Permission]

Roles = Dict[str, Role]

