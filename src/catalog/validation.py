"""
Field validation for package and user writes.

Resolvers run inputs through these models before touching the store, so
constraint violations come back as readable messages instead of database
errors.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


class PackageFields(BaseModel):
    """A complete, valid package."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    price: float = Field(ge=0, allow_inf_nan=False)
    expiration_date: datetime

    @field_validator("expiration_date")
    @classmethod
    def normalize_to_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)


class PackagePatch(BaseModel):
    """Partial update. Only name, description and price may change."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, min_length=1)
    price: float | None = Field(default=None, ge=0, allow_inf_nan=False)

    def changes(self) -> dict:
        """Fields that were supplied with a non-null value."""
        return self.model_dump(exclude_none=True)


class Registration(BaseModel):
    user_name: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)
    user_type: str = Field(min_length=1, max_length=50)

    @field_validator("password")
    @classmethod
    def fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


def format_validation_error(error: ValidationError) -> str:
    """Render a pydantic error as ``"field: message; other: message"``."""
    parts = []
    for item in error.errors():
        field = ".".join(str(loc) for loc in item["loc"]) or "input"
        parts.append(f"{field}: {item['msg']}")
    return "; ".join(parts)
