"""JWT authentication adapter for self-issued login tokens."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from uuid import UUID

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from ...logging import get_logger
from .base import AuthenticationError, Principal

logger = get_logger(__name__)


class JWTAuthAdapter:
    """Issues and verifies HS256 tokens carrying the user id and role."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        issuer: str = "package-catalog",
        audience: str = "package-catalog-api",
        token_expiry_hours: int = 24,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.issuer = issuer
        self.audience = audience
        self.token_expiry_hours = token_expiry_hours

    async def verify_token(self, token: str) -> Principal:
        """Verify a JWT token and return the principal."""
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                audience=self.audience,
                options={
                    "require": ["exp", "sub"],
                    "verify_exp": True,
                    "verify_nbf": True,
                    "verify_iat": True,
                },
            )
        except ExpiredSignatureError as e:
            raise AuthenticationError("Token expired") from e
        except InvalidTokenError as e:
            raise AuthenticationError("Invalid token") from e

        subject = payload.get("sub")
        if not subject or not isinstance(subject, str):
            raise AuthenticationError("Missing 'sub' claim in token")

        principal = Principal(subject=subject, claims=payload)
        if role := payload.get("role"):
            principal["role"] = role
        return principal

    async def issue_token(self, user_id: UUID, claims: dict | None = None) -> str:
        """Issue a new JWT token valid for ``token_expiry_hours``."""
        now = datetime.now(UTC)

        payload = {
            "iss": self.issuer,
            "aud": self.audience,
            "sub": str(user_id),
            "iat": now,
            "nbf": now,
            "exp": now + timedelta(hours=self.token_expiry_hours),
        }
        if claims:
            payload.update(claims)

        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
