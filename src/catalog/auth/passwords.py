"""Password hashing with bcrypt.

bcrypt is CPU bound, so both operations run in a worker thread to keep the
event loop serving other requests.
"""

from __future__ import annotations

import asyncio

import bcrypt

from ..config import settings


def _hash(password: str, rounds: int) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("ascii")


def _check(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("ascii"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


async def hash_password(password: str, rounds: int | None = None) -> str:
    return await asyncio.to_thread(_hash, password, rounds or settings.bcrypt_rounds)


async def verify_password(password: str, hashed: str) -> bool:
    return await asyncio.to_thread(_check, password, hashed)
