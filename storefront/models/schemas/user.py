from pydantic import EmailStr, Field, ValidationError, ValidatorFunctionWrapHandler, field_validator
from pydantic_core import PydanticCustomError
from typing import Any, Optional

from storefront.utils import validation
from .base import CamelModel


class UserCreate(CamelModel):
    email: EmailStr = Field(examples=["jane@example.com"])
    password: str = Field(examples=["s3cret"])

    @field_validator("email", mode="wrap")
    @classmethod
    def validate_email(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> str:
        value = validation.trim(value)
        error = validation.check_email(value)
        if error is not None:
            raise PydanticCustomError(error.constraint, error.message)
        try:
            return handler(value)
        except ValidationError:
            raise PydanticCustomError("isEmail", validation.EMAIL_MESSAGE)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        error = validation.check_password(value)
        if error is not None:
            raise PydanticCustomError(error.constraint, error.message)
        return value


class UserUpdate(UserCreate):
    email: Optional[EmailStr] = Field(examples=["jane@example.com"], default=None)
    password: Optional[str] = Field(examples=["n3w-s3cret"], default=None)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class UserResponse(CamelModel):
    """Public view of a user; the password never leaves the service."""

    id: int
    email: str


class UserDeleted(CamelModel):
    id: int


class UserQueryParams(CamelModel):
    email: Optional[str] = None
    search: Optional[str] = None
    page: Optional[int] = None
    limit: Optional[int] = None
