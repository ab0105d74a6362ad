"""canrbac: role-based access control decisions for request handlers."""

from .core.rbac import *  # noqa: F401,F403
from .core.rbac import __all__

__version__ = "0.1.0"
