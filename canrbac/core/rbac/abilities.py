"""Ability vocabulary for canrbac.

An ability is the abstract operation being requested on a permission.
Four are concrete operations; the rest are control values:

  - ALL grants every concrete operation on a permission
  - SKIP grants access unconditionally (authorization intentionally bypassed)
  - NONE is explicit denial, and the result of parsing an unknown string

String form is case-insensitive on input and lowercase on output.
"""

from enum import IntEnum
from typing import Any, FrozenSet


class Ability(IntEnum):
    """Operations that can be granted on a permission."""

    READ = 0
    CREATE = 1
    UPDATE = 2
    DELETE = 3
    ALL = 4
    SKIP = 5
    NONE = 6

    def __str__(self) -> str:
        return ability_to_string(self)

    def __format__(self, format_spec: str) -> str:
        return format(str(self), format_spec)

    @classmethod
    def parse(cls, value: Any) -> "Ability":
        """Parse an ability name like 'read'. Unknown names give NONE."""
        return parse_ability(value)


_NAMES = {
    Ability.READ: "read",
    Ability.CREATE: "create",
    Ability.UPDATE: "update",
    Ability.DELETE: "delete",
    Ability.ALL: "all",
    Ability.SKIP: "skip",
}

_BY_NAME = {name: ability for ability, name in _NAMES.items()}

NONE_NAME = "none"

# Abilities that are decided by the caller's predicate
CONCRETE_ABILITIES: FrozenSet[Ability] = frozenset([
    Ability.READ, Ability.CREATE, Ability.UPDATE, Ability.DELETE,
])

# Abilities that grant access without consulting a predicate
SENTINEL_ABILITIES: FrozenSet[Ability] = frozenset([Ability.ALL, Ability.SKIP])


def ability_to_string(ability: Any) -> str:
    """Render an ability as its canonical name.

    Anything outside the six named abilities renders as "none".
    """
    try:
        return _NAMES.get(Ability(ability), NONE_NAME)
    except (ValueError, TypeError):
        return NONE_NAME


def parse_ability(value: Any) -> Ability:
    """Convert a string to an Ability.

    Matching is case-insensitive. No error is raised; callers must treat
    Ability.NONE as "could not parse".
    """
    if not isinstance(value, str):
        return Ability.NONE
    return _BY_NAME.get(value.strip().lower(), Ability.NONE)
