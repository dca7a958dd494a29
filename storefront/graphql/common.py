import dataclasses
from typing import Any, Dict, Type, TypeVar

import strawberry
from fastapi import Depends
from pydantic import BaseModel, ValidationError

from storefront.database.dependencies import get_product_service, get_user_service
from storefront.services.product import ProductService
from storefront.services.user import UserService
from storefront.utils.exceptions import ValidationException

M = TypeVar("M", bound=BaseModel)


async def get_context(
    product_service: ProductService = Depends(get_product_service),
    user_service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    # resolved for both HTTP requests and websocket connections
    return {"product_service": product_service, "user_service": user_service}


def input_values(data: Any) -> Dict[str, Any]:
    """Fields of a strawberry input the client actually supplied."""
    return {
        field.name: getattr(data, field.name)
        for field in dataclasses.fields(data)
        if getattr(data, field.name) is not strawberry.UNSET
    }


def build_dto(model: Type[M], data: Any) -> M:
    """Run a GraphQL input through the same pydantic DTO the REST layer uses."""
    try:
        return model(**input_values(data))
    except ValidationError as e:
        raise ValidationException.from_pydantic(e) from e
