"""Authorization decisions for canrbac.

``can`` answers one question: may this role exercise this ability on this
permission, given an optional request-specific predicate? Every miss
(no role, unknown permission, ungranted ability, no predicate) is a denial.
"""

from typing import Any, Callable, Mapping, Optional, Protocol

from ...common.logger import get_logger
from .abilities import Ability, CONCRETE_ABILITIES
from .permissions import Role, Roles

logger = get_logger("rbac_engine")


Compare = Callable[[], bool]


class CanFn(Protocol):
    """Shape shared by the built-in engine and custom decision functions."""

    def __call__(
        self,
        ctx: Any,
        role: Optional[Role],
        permission: str,
        ability: Ability,
        compare: Optional[Compare] = None,
    ) -> bool:
        ...


def can(
    ctx: Any,
    role: Optional[Role],
    permission: str,
    ability: Ability,
    compare: Optional[Compare] = None,
) -> bool:
    """Decide whether ``role`` may perform ``ability`` on ``permission``.

    Args:
        ctx: Request context passed through for custom decision functions
            and predicates. The built-in engine never inspects it.
        role: Permissions of the caller's role
        permission: Permission name, e.g. from permission_from_path()
        ability: Requested ability, e.g. from ability_from_method()
        compare: Request-specific check, such as "does this record belong
            to the caller". Only consulted for concrete abilities that the
            permission grants directly.

    Returns:
        True if the action is allowed
    """
    if not role:
        return False

    perm = role.get(permission)
    if perm is None:
        return False

    granted = ability in perm.abilities
    granted_all = Ability.ALL in perm.abilities
    granted_skip = Ability.SKIP in perm.abilities
    if not granted and not granted_all and not granted_skip:
        return False

    # ALL and SKIP authorize any request without the predicate
    if granted_all or granted_skip:
        return True

    if ability in CONCRETE_ABILITIES:
        if compare is None:
            return False
        return bool(compare())

    return False


def can_with(
    fn: Optional[CanFn],
    ctx: Any,
    role: Optional[Role],
    permission: str,
    ability: Ability,
    compare: Optional[Compare] = None,
) -> bool:
    """Run a custom decision function in place of the built-in engine."""
    if fn is None:
        fn = can
    return bool(fn(ctx, role, permission, ability, compare))


def compare(a: Any, b: Any) -> Compare:
    """Build a predicate for ``can`` from an equality check.

    The comparison happens immediately; the returned function only
    reports the result.

    Usage:
        can(ctx, role, "comments", Ability.UPDATE, compare(comment.author_id, user.id))
    """
    result = a == b
    return lambda: result


class RoleChecker:
    """Checks authorization for role names against a compiled Roles value."""

    def __init__(self, roles: Mapping[str, Role], can_fn: Optional[CanFn] = None):
        """
        Initialize with compiled roles.

        Args:
            roles: Roles as produced by the compiler or loader
            can_fn: Custom decision function. Defaults to the built-in engine.
        """
        self.roles: Roles = dict(roles)
        self.can_fn = can_fn or can

    def role(self, role_name: Optional[str]) -> Optional[Role]:
        """Look up a role by name. Unknown names give None."""
        if role_name is None:
            return None
        return self.roles.get(role_name)

    def can(
        self,
        role_name: Optional[str],
        permission: str,
        ability: Ability,
        compare: Optional[Compare] = None,
        ctx: Any = None,
    ) -> bool:
        """Check whether the named role may perform ability on permission."""
        allowed = can_with(
            self.can_fn, ctx, self.role(role_name), permission, ability, compare
        )
        logger.debug(
            f"role={role_name} permission={permission} ability={ability} "
            f"allowed={allowed}"
        )
        return allowed
