from typing import Annotated, AsyncGenerator, List, Optional

import strawberry
from strawberry.types import Info

from storefront.database.dependencies import USERS_PATH
from storefront.graphql.common import build_dto
from storefront.models.schemas.user import UserCreate, UserQueryParams, UserResponse, UserUpdate
from storefront.services.user import UserService


@strawberry.type(name="User")
class UserType:
    id: int
    email: str

    @classmethod
    def from_schema(cls, user: UserResponse) -> "UserType":
        return cls(id=user.id, email=user.email)


@strawberry.type(name="DeletedUser")
class DeletedUserType:
    id: int


@strawberry.input
class CreateUserInput:
    email: str
    password: str


@strawberry.input
class UpdateUserInput:
    email: Optional[str] = strawberry.UNSET
    password: Optional[str] = strawberry.UNSET


@strawberry.input
class UserSubscriptionFilter:
    email: Optional[str] = None
    # accepted but not enforced
    user_id: Optional[str] = None


def matches_user_filter(user: UserResponse, filter: Optional[UserSubscriptionFilter]) -> bool:
    if filter is None or not filter.email:
        return True
    return filter.email.strip().lower() in user.email.lower()


FilterArgument = Annotated[
    Optional[UserSubscriptionFilter],
    strawberry.argument(name="filter", description="Optional filter for subscription events"),
]


def _service(info: Info) -> UserService:
    return info.context["user_service"]


@strawberry.type
class UserQuery:
    @strawberry.field(description="List users, optionally filtered by email")
    async def users(
        self,
        info: Info,
        email: Optional[str] = None,
        search: Optional[str] = None,
        page: Optional[int] = 1,
        limit: Optional[int] = 10,
    ) -> List[UserType]:
        params = UserQueryParams(email=email, search=search, page=page, limit=limit)
        response = await _service(info).find_all(params, USERS_PATH)
        return [UserType.from_schema(user) for user in response.data]

    @strawberry.field(description="Get a user by ID")
    async def user(self, info: Info, id: int) -> UserType:
        response = await _service(info).get_user_by_id(id, USERS_PATH)
        return UserType.from_schema(response.data)


@strawberry.type
class UserMutation:
    @strawberry.mutation
    async def create_user(self, info: Info, input: CreateUserInput) -> UserType:
        response = await _service(info).create_user(build_dto(UserCreate, input), USERS_PATH)
        return UserType.from_schema(response.data)

    @strawberry.mutation
    async def update_user(self, info: Info, id: int, input: UpdateUserInput) -> UserType:
        response = await _service(info).update_user(id, build_dto(UserUpdate, input), USERS_PATH)
        return UserType.from_schema(response.data)

    @strawberry.mutation
    async def delete_user(self, info: Info, id: int) -> bool:
        await _service(info).delete_user(id, USERS_PATH)
        return True


@strawberry.type
class UserSubscription:
    @strawberry.subscription
    async def user_created(
        self, info: Info, filter_: FilterArgument = None
    ) -> AsyncGenerator[UserType, None]:
        subscription = _service(info).subscribe_to_user_created()
        try:
            async for user in subscription:
                if matches_user_filter(user, filter_):
                    yield UserType.from_schema(user)
        finally:
            subscription.close()

    @strawberry.subscription
    async def user_updated(
        self, info: Info, filter_: FilterArgument = None
    ) -> AsyncGenerator[UserType, None]:
        subscription = _service(info).subscribe_to_user_updated()
        try:
            async for user in subscription:
                if matches_user_filter(user, filter_):
                    yield UserType.from_schema(user)
        finally:
            subscription.close()

    @strawberry.subscription
    async def user_deleted(
        self, info: Info, filter_: FilterArgument = None
    ) -> AsyncGenerator[DeletedUserType, None]:
        subscription = _service(info).subscribe_to_user_deleted()
        try:
            async for deleted in subscription:
                yield DeletedUserType(id=deleted.id)
        finally:
            subscription.close()
