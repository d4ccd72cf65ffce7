"""um_user REST endpoints.

POST   /users              — create (409 on duplicate email)
GET    /users              — list, newest first (cache-aside)
GET    /users/{user_id}    — single user (cache-aside)
PATCH  /users/{user_id}    — partial update
DELETE /users/{user_id}    — delete

All endpoints return ApiResponse. request_id is read from
request.state (injected by RequestLogMiddleware).
"""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Request, status

from src.um_common.errors import InvalidUserIdError, UserNotFoundError
from src.um_common.response import ApiResponse, success_response
from src.um_user.api.dependencies import get_user_service
from src.um_user.application.schemas import (
    CreateUserRequest,
    UpdateUserRequest,
    UserEnvelope,
    UserListResponse,
    UserOut,
)
from src.um_user.application.service import UserAccessService

router = APIRouter(prefix="/users", tags=["users"])

Service = Annotated[UserAccessService, Depends(get_user_service)]


def _get_request_id(request: Request) -> str:
    """Read request_id injected by RequestLogMiddleware, fallback if absent."""
    return getattr(request.state, "request_id", "req_unknown")


def valid_user_id(user_id: Annotated[str, Path(description="User UUID")]) -> str:
    try:
        return str(uuid.UUID(user_id))
    except ValueError:
        raise InvalidUserIdError(user_id) from None


UserId = Annotated[str, Depends(valid_user_id)]


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    summary="Create a new user",
    responses={409: {"description": "Email already exists"}},
)
async def create_user(
    request: Request,
    body: CreateUserRequest,
    service: Service,
) -> ApiResponse:
    user = await service.create_user(body.name, body.email, body.age)
    data = UserEnvelope(user=UserOut.from_domain(user))
    resp = success_response(data.model_dump(), message="User created successfully")
    resp.request_id = _get_request_id(request)
    return resp


@router.get("", response_model=ApiResponse, summary="Get all users")
async def list_users(request: Request, service: Service) -> ApiResponse:
    users = await service.list_users()
    data = UserListResponse.from_domain(users)
    resp = success_response(data.model_dump(), message="Users retrieved successfully")
    resp.request_id = _get_request_id(request)
    return resp


@router.get("/{user_id}", response_model=ApiResponse, summary="Get a user by ID")
async def get_user(request: Request, user_id: UserId, service: Service) -> ApiResponse:
    user = await service.get_user(user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    data = UserEnvelope(user=UserOut.from_domain(user))
    resp = success_response(data.model_dump(), message="User retrieved successfully")
    resp.request_id = _get_request_id(request)
    return resp


@router.patch(
    "/{user_id}",
    response_model=ApiResponse,
    summary="Update a user by ID",
    responses={409: {"description": "Email already exists"}},
)
async def update_user(
    request: Request,
    user_id: UserId,
    body: UpdateUserRequest,
    service: Service,
) -> ApiResponse:
    user = await service.update_user(user_id, body.to_patch())
    if user is None:
        raise UserNotFoundError(user_id)
    data = UserEnvelope(user=UserOut.from_domain(user))
    resp = success_response(data.model_dump(), message="User updated successfully")
    resp.request_id = _get_request_id(request)
    return resp


@router.delete("/{user_id}", response_model=ApiResponse, summary="Delete a user by ID")
async def delete_user(request: Request, user_id: UserId, service: Service) -> ApiResponse:
    if not await service.delete_user(user_id):
        raise UserNotFoundError(user_id)
    resp = success_response(message="User deleted successfully")
    resp.request_id = _get_request_id(request)
    return resp
