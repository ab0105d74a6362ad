"""FastAPI dependency for RBAC enforcement.

Classifies the routed request into a (permission, ability) pair and checks
it against the caller's role.

Usage:
    roles = open_file("rbac.yml")
    authorize = RequirePermission(roles, role_getter=lambda r: r.state.user.role)

    @router.get("/v1/users/{user_id}/comments", dependencies=[Depends(authorize)])
    async def list_comments(user_id: int):
        ...
"""

from typing import Any, Callable, Mapping, Optional

from fastapi import HTTPException, Request, status

from canrbac.common.config import Settings, get_settings
from canrbac.common.logger import configure_logging, get_logger
from canrbac.core.rbac.engine import CanFn, Compare, RoleChecker
from canrbac.core.rbac.loader import open_file
from canrbac.core.rbac.permissions import Role
from canrbac.core.rbac.requests import (
    DEFAULT_VERSION_PATTERN,
    INDEX_PERMISSION,
    classify_request,
)

logger = get_logger("rbac_api")


class RequirePermission:
    """
    FastAPI dependency that authorizes a request by its method and path.

    Args:
        roles: Compiled roles
        role_getter: Returns the caller's role name for a request, or None
        compare_getter: Returns the request-specific predicate, if any
        can_fn: Custom decision function replacing the built-in engine
    """

    def __init__(
        self,
        roles: Mapping[str, Role],
        role_getter: Callable[[Request], Optional[str]],
        compare_getter: Optional[Callable[[Request], Optional[Compare]]] = None,
        can_fn: Optional[CanFn] = None,
        version_pattern: str = DEFAULT_VERSION_PATTERN,
        index: str = INDEX_PERMISSION,
    ):
        self.checker = RoleChecker(roles, can_fn=can_fn)
        self.role_getter = role_getter
        self.compare_getter = compare_getter
        self.version_pattern = version_pattern
        self.index = index

    @classmethod
    def from_settings(
        cls,
        role_getter: Callable[[Request], Optional[str]],
        settings: Optional[Settings] = None,
        **kwargs: Any,
    ) -> "RequirePermission":
        """Build the dependency from the roles file named in settings.

        Also configures package logging from the same settings.
        """
        settings = settings or get_settings()
        configure_logging(settings)
        if not settings.roles_file:
            raise ValueError("roles_file is not configured (set CANRBAC_ROLES_FILE)")

        roles = open_file(settings.roles_file, strict=settings.strict_roles)
        kwargs.setdefault("version_pattern", settings.api_version_pattern)
        kwargs.setdefault("index", settings.index_permission)
        return cls(roles, role_getter, **kwargs)

    async def __call__(self, request: Request) -> bool:
        role_name = self.role_getter(request)
        if not role_name:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Authentication required",
            )

        permission, ability = classify_request(
            request.method,
            request.url.path,
            request.path_params.values(),
            version_pattern=self.version_pattern,
            index=self.index,
        )
        compare = self.compare_getter(request) if self.compare_getter else None

        if not self.checker.can(role_name, permission, ability, compare, ctx=request):
            logger.info(
                f"Denied {request.method} {request.url.path}: role={role_name} "
                f"permission={permission} ability={ability}"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required: {permission}:{ability}",
            )

        request.state.permission = permission
        request.state.ability = ability
        return True
