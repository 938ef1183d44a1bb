"""HTTP-facing auth dependencies and error handlers."""

from .dependencies import (
    CurrentUser,
    SessionDep,
    SettingsDep,
    get_current_principal,
    require_authenticated,
    require_csrf,
)
from .errors import register_auth_exception_handlers

__all__ = [
    "CurrentUser",
    "SessionDep",
    "SettingsDep",
    "get_current_principal",
    "register_auth_exception_handlers",
    "require_authenticated",
    "require_csrf",
]
