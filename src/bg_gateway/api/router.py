"""Auth + user API routers.

POST /auth/register: create user, returns access token
POST /auth/login   : returns access token
GET  /users/me     : caller's profile including current score

All endpoints return ApiResponse; request_id is read from request.state
(injected by RequestLogMiddleware).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from config.settings import settings
from src.bg_common.response import ApiResponse, success_response
from src.bg_gateway.auth.dependencies import get_current_user, get_user_service
from src.bg_gateway.user.models import User
from src.bg_gateway.user.schemas import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserInfo,
)
from src.bg_gateway.user.service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])
users_router = APIRouter(prefix="/users", tags=["users"])


def _auth_payload(user: User, token: str) -> dict:
    return AuthResponse(
        access_token=token,
        token_type="Bearer",
        expires_in=settings.JWT_EXPIRE_MINUTES * 60,
        user=UserInfo.from_domain(user),
    ).model_dump()


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    summary="User registration",
)
async def register(
    request: Request,
    body: RegisterRequest,
    service: Annotated[UserService, Depends(get_user_service)],
) -> ApiResponse:
    user, token = await service.register(body.username, body.password)
    return success_response(
        _auth_payload(user, token), request, message="User registered successfully"
    )


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="User login",
)
async def login(
    request: Request,
    body: LoginRequest,
    service: Annotated[UserService, Depends(get_user_service)],
) -> ApiResponse:
    user, token = await service.login(body.username, body.password)
    return success_response(_auth_payload(user, token), request, message="Login successful")


@users_router.get("/me", response_model=ApiResponse, summary="Current user")
async def me(
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
) -> ApiResponse:
    return success_response(UserInfo.from_domain(current_user).model_dump(), request)
