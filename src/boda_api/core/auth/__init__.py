"""Authentication primitives shared by HTTP dependencies."""

from .errors import AuthenticationError
from .pipeline import authenticate_request, principal_from_access_token
from .principal import AuthenticatedPrincipal, AuthVia

__all__ = [
    "AuthVia",
    "AuthenticatedPrincipal",
    "AuthenticationError",
    "authenticate_request",
    "principal_from_access_token",
]
