"""Base authentication adapter interface and types."""

from __future__ import annotations

from typing import NotRequired, Protocol, TypedDict
from uuid import UUID


class Principal(TypedDict):
    """Identity extracted from a verified token."""

    subject: str  # user id (sub)
    role: NotRequired[str]
    claims: NotRequired[dict]


class AuthAdapter(Protocol):
    """Token issuing and verification interface."""

    async def verify_token(self, token: str) -> Principal:
        """
        Verify a token and return the principal identity.

        Raises:
            AuthenticationError: If token is invalid or expired
        """
        ...

    async def issue_token(self, user_id: UUID, claims: dict | None = None) -> str:
        """Issue a signed token for ``user_id`` with optional extra claims."""
        ...


class AuthenticationError(Exception):
    """Raised when authentication fails."""

    pass
