# services/user.py
from fastapi import HTTPException, status

from storefront.models.database_models import User
from storefront.models.enums import UserEvent
from storefront.models.schemas.response import ApiResponse
from storefront.models.schemas.user import (
    UserCreate,
    UserDeleted,
    UserQueryParams,
    UserResponse,
    UserUpdate,
)
from storefront.services.base import BaseService
from storefront.services.pubsub import Subscription
from storefront.services.query_builder import build_query_options
from storefront.utils import validation
from storefront.utils.exceptions import NotFoundException, ValidationException
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class UserService(BaseService[User]):
    @staticmethod
    def _check_id(id: int) -> None:
        error = validation.check_positive_id(id, label="User ID")
        if error is not None:
            raise ValidationException([error], message=error.message)

    async def _get_existing(self, id: int) -> User:
        user = await self.repository.find_by_id(id)
        if user is None:
            raise NotFoundException(f"User with id {id} not found")
        return user

    async def get_user_by_id(self, id: int, base_url: str) -> ApiResponse:
        self._check_id(id)
        try:
            user = UserResponse.model_validate(await self._get_existing(id))
            return self.response_builder.build_success_response(
                user,
                "User retrieved successfully",
                status.HTTP_200_OK,
                self.trace_id,
                self._links(base_url, resource_id=user.id),
            )
        except HTTPException:
            raise
        except Exception as e:
            raise self._failure("retrieve user", e)

    async def get_all_users(self, base_url: str) -> ApiResponse:
        try:
            users = [UserResponse.model_validate(row) for row in await self.repository.find_all()]
            return self.response_builder.build_success_response(
                users,
                "Users retrieved successfully" if users else "No users found",
                status.HTTP_200_OK,
                self.trace_id,
                self._links(base_url),
            )
        except HTTPException:
            raise
        except Exception as e:
            raise self._failure("retrieve users", e)

    async def find_all(self, params: UserQueryParams, base_url: str) -> ApiResponse:
        try:
            result = await self.repository.find_with_filters(build_query_options(params))
            users = [UserResponse.model_validate(row) for row in result.data]
            pagination = result.pagination
            links = self._links(
                base_url,
                current_page=pagination.current_page,
                total_pages=pagination.total_pages,
                has_next=pagination.has_next,
                has_prev=pagination.has_prev,
            )
            return self.response_builder.build_success_response(
                users,
                "Users retrieved successfully" if users else "No users found",
                status.HTTP_200_OK,
                self.trace_id,
                links,
                pagination,
            )
        except HTTPException:
            raise
        except Exception as e:
            raise self._failure("retrieve users", e)

    async def search(self, query: str, base_url: str) -> ApiResponse:
        if not query or not query.strip():
            raise ValidationException.for_field(
                "query", "Search query cannot be empty", value=query, constraint="required"
            )

        try:
            rows = await self.repository.search(query.strip(), ["email"])
            users = [UserResponse.model_validate(row) for row in rows]
            return self.response_builder.build_success_response(
                users,
                "Search completed successfully"
                if users
                else "No users found matching the search criteria",
                status.HTTP_200_OK,
                self.trace_id,
                self._links(base_url),
            )
        except HTTPException:
            raise
        except Exception as e:
            raise self._failure("search users", e)

    async def create_user(self, data: UserCreate, base_url: str) -> ApiResponse:
        payload = data.model_dump()
        errors = validation.validate_user_create(payload)
        if errors:
            raise ValidationException(errors)

        try:
            created = UserResponse.model_validate(await self.repository.create(payload))
            await self.pubsub.publish(UserEvent.CREATED.value, created)
            logger.info(f"User {created.id} created")

            return self.response_builder.build_success_response(
                created,
                "User created successfully",
                status.HTTP_201_CREATED,
                self.trace_id,
                self._links(base_url, resource_id=created.id),
            )
        except HTTPException:
            raise
        except Exception as e:
            raise self._failure("create user", e)

    async def update_user(self, id: int, data: UserUpdate, base_url: str) -> ApiResponse:
        self._check_id(id)
        changes = data.changes()
        errors = validation.validate_user_update(changes)
        if errors:
            raise ValidationException(errors)

        try:
            await self._get_existing(id)
            row = await self.repository.update(id, changes)
            if row is None:
                raise NotFoundException(f"User with id {id} not found")
            updated = UserResponse.model_validate(row)

            await self.pubsub.publish(UserEvent.UPDATED.value, updated)
            logger.info(f"User {id} updated: {sorted(changes)}")

            return self.response_builder.build_success_response(
                updated,
                "User updated successfully",
                status.HTTP_200_OK,
                self.trace_id,
                self._links(base_url, resource_id=updated.id),
            )
        except HTTPException:
            raise
        except Exception as e:
            raise self._failure(f"update user with id {id}", e)

    async def delete_user(self, id: int, base_url: str) -> ApiResponse:
        self._check_id(id)
        try:
            await self._get_existing(id)
            await self.repository.delete(id)

            await self.pubsub.publish(UserEvent.DELETED.value, UserDeleted(id=id))
            logger.info(f"User {id} deleted")

            return self.response_builder.build_success_response(
                None,
                "User deleted successfully",
                status.HTTP_200_OK,
                self.trace_id,
                self._links(base_url),
            )
        except HTTPException:
            raise
        except Exception as e:
            raise self._failure(f"delete user with id {id}", e)

    def subscribe_to_user_created(self) -> Subscription:
        return self.pubsub.async_iterator(UserEvent.CREATED.value)

    def subscribe_to_user_updated(self) -> Subscription:
        return self.pubsub.async_iterator(UserEvent.UPDATED.value)

    def subscribe_to_user_deleted(self) -> Subscription:
        return self.pubsub.async_iterator(UserEvent.DELETED.value)
