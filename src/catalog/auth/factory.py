"""Factory for creating the auth adapter from configuration."""

from __future__ import annotations

from ..config import get_jwt_secret, settings
from .adapters.base import AuthAdapter
from .adapters.jwt import JWTAuthAdapter


def get_auth_adapter() -> AuthAdapter:
    """Create the JWT adapter used to issue and verify login tokens."""
    secret_key = get_jwt_secret()
    if not secret_key:
        raise ValueError("JWT secret key is required. Set CATALOG_JWT_SECRET.")

    return JWTAuthAdapter(
        secret_key=secret_key,
        algorithm=settings.jwt_algorithm,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        token_expiry_hours=settings.token_expiry_hours,
    )
