"""Authentication for the package catalog."""

from .adapters.base import AuthAdapter, AuthenticationError, Principal
from .context import AuthContext
from .factory import get_auth_adapter
from .middleware import CredentialVerifier, build_auth_context

__all__ = [
    "AuthAdapter",
    "AuthenticationError",
    "Principal",
    "AuthContext",
    "CredentialVerifier",
    "build_auth_context",
    "get_auth_adapter",
]
