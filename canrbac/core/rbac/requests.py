"""Derive permission names and abilities from HTTP requests.

REST conventions map the method to an ability and the URL path to a flat
permission key:

    GET /v1/users/42/comments   (route value "42")  ->  ("users_comments", READ)
    DELETE /v1/users/42         (route value "42")  ->  ("users", DELETE)

These helpers know nothing about roles; middleware feeds their output to can().
"""

import re
from typing import Iterable, Tuple

from .abilities import Ability

INDEX_PERMISSION = "index"

DEFAULT_VERSION_PATTERN = r"v\d+"

METHOD_TO_ABILITY = {
    "GET": Ability.READ,
    "POST": Ability.CREATE,
    "PUT": Ability.UPDATE,
    "PATCH": Ability.UPDATE,
    "DELETE": Ability.DELETE,
    "OPTIONS": Ability.SKIP,
}


def ability_from_method(method: str) -> Ability:
    """Map an HTTP method to an ability. Unknown methods give NONE."""
    if not method:
        return Ability.NONE
    return METHOD_TO_ABILITY.get(method.upper(), Ability.NONE)


def permission_from_path(
    path: str,
    route_values: Iterable[str] = (),
    version_pattern: str = DEFAULT_VERSION_PATTERN,
    index: str = INDEX_PERMISSION,
) -> str:
    """Build a permission key from a request path.

    Args:
        path: URL path, e.g. "/v1/users/42/comments"
        route_values: Values the router captured from the path. Each one is
            removed wherever it occurs.
        version_pattern: Regex a leading API version segment must fully match
        index: Name returned for the root path

    Returns:
        Flat permission key, e.g. "users_comments"
    """
    if not path or path == "/":
        return index

    segments = path.split("/")
    # segments[0] is "" for an absolute path
    if len(segments) > 1 and version_pattern and re.fullmatch(version_pattern, segments[1]):
        path = "/".join(segments[:1] + segments[2:])

    for value in route_values:
        value = str(value)
        if not value:
            continue
        path = path.replace(value, "")

    permission = "_".join(segment for segment in path.split("/") if segment)
    return permission or index


def classify_request(
    method: str,
    path: str,
    route_values: Iterable[str] = (),
    version_pattern: str = DEFAULT_VERSION_PATTERN,
    index: str = INDEX_PERMISSION,
) -> Tuple[str, Ability]:
    """Return the (permission, ability) pair for a request."""
    return (
        permission_from_path(path, route_values, version_pattern=version_pattern, index=index),
        ability_from_method(method),
    )
