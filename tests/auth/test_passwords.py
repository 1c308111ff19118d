"""Tests for bcrypt password hashing."""

import pytest

from catalog.auth.passwords import hash_password, verify_password


@pytest.mark.asyncio
async def test_hash_is_salted():
    first = await hash_password("hunter2", rounds=4)
    second = await hash_password("hunter2", rounds=4)

    assert first != second
    assert first.startswith("$2b$04$")


@pytest.mark.asyncio
async def test_verify_round_trip():
    hashed = await hash_password("hunter2", rounds=4)

    assert await verify_password("hunter2", hashed) is True
    assert await verify_password("hunter3", hashed) is False


@pytest.mark.asyncio
async def test_uses_configured_cost():
    # fast_password_hashing sets the configured cost to 4
    hashed = await hash_password("hunter2")

    assert hashed.startswith("$2b$04$")


@pytest.mark.asyncio
async def test_garbage_hash_does_not_verify():
    assert await verify_password("hunter2", "not-a-bcrypt-hash") is False
