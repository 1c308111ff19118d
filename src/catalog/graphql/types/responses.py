"""
Response envelopes shared by every query and mutation.

Every operation answers ``{status, message, code, data}``. Failures carry a
stable ``code`` and ``data: null``.
"""

from enum import Enum
from typing import TypeVar

import strawberry

from .package import Package
from .user import Token


@strawberry.enum
class ErrorCode(Enum):
    """Stable failure taxonomy."""

    AUTHENTICATION_REQUIRED = "authentication_required"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    VALIDATION_ERROR = "validation_error"
    INVALID_CREDENTIALS = "invalid_credentials"
    USER_EXISTS = "user_exists"
    INTERNAL_ERROR = "internal_error"


AUTHENTICATION_REQUIRED = "Authentication required"
PACKAGE_NOT_FOUND = "Package not found"
INVALID_CREDENTIALS = "Invalid credentials"
USER_EXISTS = "User already exists"


@strawberry.interface
class Response:
    status: bool
    message: str
    code: ErrorCode | None = None


@strawberry.type
class PackageResponse(Response):
    data: Package | None = None


@strawberry.type
class PackageListResponse(Response):
    data: list[Package] | None = None


@strawberry.type
class LoginResponse(Response):
    data: Token | None = None


@strawberry.type
class CreateUserResponse(Response):
    """Registration result. ``data`` is always null."""

    data: strawberry.scalars.JSON | None = None  # type: ignore[reportInvalidTypeForm]


R = TypeVar("R", bound=Response)


def failure(response_type: type[R], code: ErrorCode, message: str) -> R:
    return response_type(status=False, message=message, code=code)
