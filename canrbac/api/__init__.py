"""HTTP integration for canrbac."""

from .dependencies import RequirePermission

__all__ = ["RequirePermission"]
