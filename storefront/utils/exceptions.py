from typing import Any, Iterable, List, Optional, Union

from fastapi import HTTPException, status
from pydantic import ValidationError

from storefront.models.schemas.response import FieldError


class ValidationException(HTTPException):
    """Field-level validation failure carrying a structured error list."""

    def __init__(
        self,
        errors: Iterable[FieldError],
        message: str = "Validation failed",
        status_code: int = status.HTTP_400_BAD_REQUEST,
    ):
        self.errors = list(errors)
        super().__init__(status_code=status_code, detail=message)

    def __str__(self) -> str:
        return "; ".join(f"{e.field}: {e.message}" for e in self.errors) or self.detail

    @classmethod
    def for_field(
        cls,
        field: str,
        message: str,
        value: Any = None,
        constraint: Optional[str] = None,
        status_code: int = status.HTTP_400_BAD_REQUEST,
    ) -> "ValidationException":
        error = FieldError(field=field, message=message, value=value, constraint=constraint)
        return cls([error], message=message, status_code=status_code)

    @classmethod
    def for_fields(
        cls,
        errors: List[Union[FieldError, dict]],
        status_code: int = status.HTTP_400_BAD_REQUEST,
    ) -> "ValidationException":
        return cls(
            [e if isinstance(e, FieldError) else FieldError(**e) for e in errors],
            status_code=status_code,
        )

    @classmethod
    def from_pydantic(cls, exc: ValidationError) -> "ValidationException":
        return cls(field_errors_from_pydantic(exc.errors()))


class NotFoundException(HTTPException):
    def __init__(self, message: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=message)

    def __str__(self) -> str:
        return self.detail


# pydantic error types that map onto our constraint vocabulary
_CONSTRAINT_ALIASES = {
    "missing": "required",
    "string_too_short": "minLength",
    "string_too_long": "maxLength",
    "greater_than_equal": "min",
    "greater_than": "min",
    "less_than_equal": "max",
    "less_than": "max",
    "literal_error": "isIn",
    "enum": "isIn",
    "float_parsing": "isNumber",
    "float_type": "isNumber",
    "int_parsing": "isInt",
    "int_type": "isInt",
    "string_type": "isString",
}

# location prefixes FastAPI adds in front of the field name
_LOCATION_PARTS = {"body", "query", "path", "header", "cookie"}


def field_errors_from_pydantic(errors: Iterable[dict]) -> List[FieldError]:
    results = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if str(part) not in _LOCATION_PARTS]
        # for a missing field pydantic reports the whole parent object as input
        value = None if error.get("type") == "missing" else error.get("input")
        results.append(
            FieldError(
                field=".".join(loc) or "body",
                message=error.get("msg", "Invalid value"),
                value=value,
                constraint=_CONSTRAINT_ALIASES.get(error.get("type"), error.get("type")),
            )
        )
    return results
