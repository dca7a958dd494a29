# tests/test_user_service.py
import asyncio

import pytest

from storefront.models.schemas.user import UserCreate, UserQueryParams, UserUpdate
from storefront.utils.exceptions import NotFoundException, ValidationException

BASE = "http://testserver/user"


async def test_create_hides_password_and_publishes(user_service):
    subscription = user_service.subscribe_to_user_created()

    response = await user_service.create_user(UserCreate(email="jane@example.com", password="s3cret"), BASE)

    assert response.status_code == 201
    assert response.data.model_dump(by_alias=True) == {"id": response.data.id, "email": "jane@example.com"}
    published = await asyncio.wait_for(subscription.__anext__(), 1)
    assert published.email == "jane@example.com"


async def test_get_user_not_found(user_service):
    with pytest.raises(NotFoundException):
        await user_service.get_user_by_id(12, BASE)


async def test_update_and_delete_user(user_service):
    created = await user_service.create_user(UserCreate(email="a@b.co", password="pw"), BASE)
    user_id = created.data.id

    updated = await user_service.update_user(user_id, UserUpdate(email="new@b.co"), BASE)
    assert updated.data.email == "new@b.co"

    with pytest.raises(ValidationException):
        await user_service.update_user(user_id, UserUpdate(), BASE)

    deleted = await user_service.delete_user(user_id, BASE)
    assert deleted.data is None
    with pytest.raises(NotFoundException):
        await user_service.delete_user(user_id, BASE)


async def test_find_all_filters_by_email(user_service):
    for email in ("a@example.com", "b@example.com", "c@other.org"):
        await user_service.create_user(UserCreate(email=email, password="pw"), BASE)

    response = await user_service.find_all(UserQueryParams(email="example"), BASE)

    assert sorted(u.email for u in response.data) == ["a@example.com", "b@example.com"]
    assert response.meta.pagination.total_items == 2


async def test_search_rejects_empty_query(user_service):
    with pytest.raises(ValidationException):
        await user_service.search(" ", BASE)
