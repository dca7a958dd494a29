"""
Field normalizers and validation rules for request payloads.

Normalizers are pure functions applied while DTOs are being built. Rules
return a ``FieldError`` (or ``None`` when the value is acceptable) so callers
can collect every problem in a payload instead of stopping at the first one.
"""
import math
import re
from typing import Any, Callable, Dict, List, Mapping, Optional

from storefront.models.enums import ProductCategory
from storefront.models.schemas.response import FieldError

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 1000
MAX_PRICE = 999_999.99

NAME_PATTERN = re.compile(r"^[a-zA-Z0-9\s\-']+$")

NAME_MESSAGE = (
    "Product name must be 2-100 characters long, contain only letters, numbers, "
    "spaces, hyphens, and apostrophes, and not have multiple consecutive spaces"
)
CATEGORY_MESSAGE = "Category must be one of: " + ", ".join(ProductCategory.values())
PRICE_MESSAGE = "Price must be a positive number not exceeding 999,999.99"
EMAIL_MESSAGE = "Email must be a valid email address"


# Normalizers


def trim(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def empty_to_none(value: Any) -> Any:
    value = trim(value)
    return None if value == "" else value


def lowercase(value: Any) -> Any:
    value = trim(value)
    return value.lower() if isinstance(value, str) else value


def to_number(value: Any) -> Any:
    """Coerce numeric strings; anything unparseable is returned untouched."""
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return value
    return value


# Rules


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def check_product_name(value: Any) -> Optional[FieldError]:
    if _is_blank(value):
        return FieldError(field="name", message="Product name is required", value=value, constraint="required")
    if not isinstance(value, str):
        return FieldError(field="name", message="Product name must be a string", value=value, constraint="isString")
    if (
        not NAME_MIN_LENGTH <= len(value) <= NAME_MAX_LENGTH
        or value != value.strip()
        or not NAME_PATTERN.match(value)
        or "  " in value
    ):
        return FieldError(field="name", message=NAME_MESSAGE, value=value, constraint="isValidProductName")
    return None


def check_description(value: Any) -> Optional[FieldError]:
    if value is None:
        return None
    if not isinstance(value, str) or len(value) > DESCRIPTION_MAX_LENGTH:
        return FieldError(
            field="description",
            message="Description must be a string with maximum 1000 characters",
            value=value,
            constraint="isValidDescription",
        )
    return None


def check_price(value: Any) -> Optional[FieldError]:
    if value is None or value == "":
        return FieldError(field="price", message="Product price is required", value=value, constraint="required")
    if isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value):
        return FieldError(field="price", message="Price must be a valid number", value=value, constraint="isNumber")
    if value <= 0 or value > MAX_PRICE:
        return FieldError(field="price", message=PRICE_MESSAGE, value=value, constraint="isPositivePrice")
    return None


def check_category(value: Any) -> Optional[FieldError]:
    if _is_blank(value):
        return FieldError(field="category", message="Product category is required", value=value, constraint="required")
    if value not in ProductCategory.values():
        return FieldError(field="category", message=CATEGORY_MESSAGE, value=value, constraint="isValidCategory")
    return None


def check_email(value: Any) -> Optional[FieldError]:
    """Presence only; the address format is checked by ``EmailStr`` on the DTO."""
    if _is_blank(value):
        return FieldError(field="email", message="Email is required", value=value, constraint="required")
    if not isinstance(value, str):
        return FieldError(field="email", message=EMAIL_MESSAGE, value=value, constraint="isEmail")
    return None


def check_password(value: Any) -> Optional[FieldError]:
    if value is None or value == "":
        return FieldError(field="password", message="Password is required", value=value, constraint="required")
    if not isinstance(value, str):
        return FieldError(field="password", message="Password must be a string", value=value, constraint="isString")
    return None


def check_positive_id(value: Any, field: str = "id", label: str = "ID") -> Optional[FieldError]:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return FieldError(field=field, message=f"{label} must be a positive number", value=value, constraint="positive")
    return None


Rule = Callable[[Any], Optional[FieldError]]

PRODUCT_RULES: Dict[str, Rule] = {
    "name": check_product_name,
    "description": check_description,
    "price": check_price,
    "category": check_category,
}

USER_RULES: Dict[str, Rule] = {
    "email": check_email,
    "password": check_password,
}


def _run_rules(rules: Dict[str, Rule], data: Mapping[str, Any], partial: bool) -> List[FieldError]:
    errors = []
    for field, rule in rules.items():
        if partial and field not in data:
            continue
        error = rule(data.get(field))
        if error is not None:
            errors.append(error)
    return errors


def _at_least_one(data: Mapping[str, Any], fields) -> List[FieldError]:
    if any(field in data for field in fields):
        return []
    return [
        FieldError(
            field="body",
            message="At least one field must be provided for update",
            constraint="required",
        )
    ]


def validate_product_create(data: Mapping[str, Any]) -> List[FieldError]:
    return _run_rules(PRODUCT_RULES, data, partial=False)


def validate_product_update(data: Mapping[str, Any]) -> List[FieldError]:
    """``data`` holds only the fields the caller actually sent."""
    return _at_least_one(data, PRODUCT_RULES) + _run_rules(PRODUCT_RULES, data, partial=True)


def validate_user_create(data: Mapping[str, Any]) -> List[FieldError]:
    return _run_rules(USER_RULES, data, partial=False)


def validate_user_update(data: Mapping[str, Any]) -> List[FieldError]:
    return _at_least_one(data, USER_RULES) + _run_rules(USER_RULES, data, partial=True)
