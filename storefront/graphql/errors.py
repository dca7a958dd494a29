"""
GraphQL rendering of the service exceptions.

Resolvers raise the same ``ValidationException`` / ``NotFoundException`` the
REST routes do. This extension keeps the error message and adds the code,
status and field-level details to ``extensions`` so GraphQL clients see the
same structured information as the REST error envelope.
"""
from typing import Any, Dict, Iterator

from fastapi import HTTPException
from fastapi.encoders import jsonable_encoder
from graphql import ExecutionResult, GraphQLError
from strawberry.extensions import SchemaExtension

from storefront.utils.exception_handlers import error_code
from storefront.utils.exceptions import NotFoundException, ValidationException


def error_extensions(exc: HTTPException) -> Dict[str, Any]:
    if isinstance(exc, ValidationException):
        return {
            "code": "VALIDATION_ERROR",
            "statusCode": exc.status_code,
            "details": jsonable_encoder([e.model_dump(by_alias=True) for e in exc.errors]),
        }
    if isinstance(exc, NotFoundException):
        return {"code": "NOT_FOUND", "statusCode": exc.status_code}
    return {"code": error_code(exc.status_code), "statusCode": exc.status_code}


def with_extensions(error: GraphQLError) -> GraphQLError:
    original = error.original_error
    if not isinstance(original, HTTPException):
        return error
    return GraphQLError(
        message=error.message,
        nodes=error.nodes,
        source=error.source,
        positions=error.positions,
        path=error.path,
        original_error=original,
        extensions={**(error.extensions or {}), **error_extensions(original)},
    )


class ServiceErrorExtensions(SchemaExtension):
    def on_operation(self) -> Iterator[None]:
        yield
        result = self.execution_context.result
        if isinstance(result, ExecutionResult) and result.errors:
            result.errors = [with_extensions(error) for error in result.errors]
