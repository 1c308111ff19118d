"""Resolve the caller identity from the Authorization header."""

from __future__ import annotations

from uuid import UUID

from ..dbmodels import Users
from ..logging import bind_user_id, get_logger
from ..repository.base import CatalogStore
from .adapters.base import AuthAdapter, AuthenticationError
from .context import AuthContext

logger = get_logger(__name__)


def extract_token(authorization: str | None) -> str | None:
    """Return the token segment of ``"<scheme> <token>"``, or None."""
    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) < 2 or not parts[1]:
        return None
    return parts[1]


class CredentialVerifier:
    """Turns a raw Authorization header into a user, or None.

    Every failure (no header, bad token, expired token, user gone) yields
    None for the caller. The reason is only visible in the logs.
    """

    def __init__(self, adapter: AuthAdapter, store: CatalogStore):
        self.adapter = adapter
        self.store = store

    async def verify(self, authorization: str | None) -> Users | None:
        token = extract_token(authorization)
        if token is None:
            if authorization:
                logger.info("Ignoring malformed authorization header", reason="malformed_header")
            return None

        try:
            principal = await self.adapter.verify_token(token)
        except AuthenticationError as e:
            logger.warning("Token validation failed", reason="invalid_token", error=str(e))
            return None

        try:
            user_id = UUID(principal["subject"])
        except ValueError:
            logger.warning("Token subject is not a user id", reason="bad_subject")
            return None

        try:
            user = await self.store.get_user(user_id)
        except Exception as e:
            logger.error(
                "User lookup failed during authentication", reason="lookup_error", error=str(e)
            )
            return None

        if user is None:
            logger.info(
                "Token refers to unknown user", reason="user_not_found", user_id=str(user_id)
            )
            return None

        return user


async def build_auth_context(
    verifier: CredentialVerifier, authorization: str | None
) -> AuthContext:
    """Build the per-request identity context. Never raises."""
    user = await verifier.verify(authorization)
    bind_user_id(str(user.id) if user else None)
    return AuthContext(user=user, token=extract_token(authorization) if user else None)
