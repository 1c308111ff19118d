from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from ...auth.passwords import hash_password, verify_password
from ...logging import get_logger
from ...repository.base import UserAlreadyExistsError
from ...validation import Registration, format_validation_error
from ..access_control import get_auth_adapter_from_info, get_store_from_info
from ..types.responses import (
    INVALID_CREDENTIALS,
    USER_EXISTS,
    CreateUserResponse,
    ErrorCode,
    LoginResponse,
    failure,
)
from ..types.user import Token

if TYPE_CHECKING:
    from ..mutations.root import CreateUserInput, LoginInput

logger = get_logger(__name__)


async def create_user(info: strawberry.Info, request: CreateUserInput) -> CreateUserResponse:
    """Register a new user. Public; never echoes the account back."""
    try:
        registration = Registration(
            user_name=request.user_name,
            password=request.password,
            user_type=request.user_type,
        )
    except ValidationError as e:
        return failure(CreateUserResponse, ErrorCode.VALIDATION_ERROR, format_validation_error(e))

    store = get_store_from_info(info)
    if await store.get_user_by_name(registration.user_name) is not None:
        return failure(CreateUserResponse, ErrorCode.USER_EXISTS, USER_EXISTS)

    password_hash = await hash_password(registration.password)

    try:
        user = await store.create_user(
            user_name=registration.user_name,
            password_hash=password_hash,
            user_type=registration.user_type,
        )
    except UserAlreadyExistsError:
        # Lost a race with a concurrent registration
        return failure(CreateUserResponse, ErrorCode.USER_EXISTS, USER_EXISTS)
    except SQLAlchemyError as e:
        logger.error("Error creating user", error=str(e))
        return failure(CreateUserResponse, ErrorCode.INTERNAL_ERROR, "Failed to create user")

    logger.info("User created", user_id=str(user.id), user_type=user.user_type)

    return CreateUserResponse(status=True, message="User created successfully", data=None)


async def login(info: strawberry.Info, request: LoginInput) -> LoginResponse:
    """
    Exchange a username and password for a signed token.

    Unknown users and wrong passwords get the same answer.
    """
    user = await get_store_from_info(info).get_user_by_name(request.user_name)
    if user is None:
        logger.info("Login failed", reason="unknown_user")
        return failure(LoginResponse, ErrorCode.INVALID_CREDENTIALS, INVALID_CREDENTIALS)

    if not await verify_password(request.password, user.password_hash):
        logger.info("Login failed", reason="bad_password", user_id=str(user.id))
        return failure(LoginResponse, ErrorCode.INVALID_CREDENTIALS, INVALID_CREDENTIALS)

    adapter = get_auth_adapter_from_info(info)
    token = await adapter.issue_token(user.id, claims={"role": user.user_type})

    logger.info("Login successful", user_id=str(user.id))

    return LoginResponse(status=True, message="Login successful", data=Token(token=token))
