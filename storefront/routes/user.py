# routes/user.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status

from storefront.database.dependencies import USERS_PATH, get_user_service, users_url
from storefront.models.schemas.response import ApiResponse
from storefront.models.schemas.user import UserCreate, UserQueryParams, UserUpdate
from storefront.services.user import UserService

router = APIRouter(prefix=USERS_PATH, tags=["users"])


@router.get("", response_model=ApiResponse)
async def list_users(
    request: Request,
    email: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    page: Optional[int] = Query(None, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    service: UserService = Depends(get_user_service),
):
    params = UserQueryParams(email=email, search=search, page=page, limit=limit)
    return await service.find_all(params, users_url(request))


@router.get("/all-users", response_model=ApiResponse)
async def get_all_users(request: Request, service: UserService = Depends(get_user_service)):
    return await service.get_all_users(users_url(request))


@router.get("/search/{query}", response_model=ApiResponse)
async def search_users(
    request: Request, query: str, service: UserService = Depends(get_user_service)
):
    return await service.search(query, users_url(request))


@router.get("/{user_id}", response_model=ApiResponse)
async def get_user(
    request: Request, user_id: int, service: UserService = Depends(get_user_service)
):
    return await service.get_user_by_id(user_id, users_url(request))


@router.post("/add", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    request: Request, data: UserCreate, service: UserService = Depends(get_user_service)
):
    return await service.create_user(data, users_url(request))


@router.put("/{user_id}", response_model=ApiResponse)
async def update_user(
    request: Request,
    user_id: int,
    data: UserUpdate,
    service: UserService = Depends(get_user_service),
):
    return await service.update_user(user_id, data, users_url(request))


@router.delete("/{user_id}", response_model=ApiResponse)
async def delete_user(
    request: Request, user_id: int, service: UserService = Depends(get_user_service)
):
    return await service.delete_user(user_id, users_url(request))
