"""FastAPI dependencies: get_user_service, get_current_user.

Usage in any protected router:
    from src.bg_gateway.auth.dependencies import get_current_user

    @router.get("/protected")
    async def protected(user: User = Depends(get_current_user)):
        ...
"""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from config.settings import settings
from src.bg_common.errors import InvalidCredentialsError
from src.bg_gateway.user.models import User
from src.bg_gateway.user.service import UserService
from src.bg_store.dependencies import get_store
from src.bg_store.domain.store import StoreProtocol

# tokenUrl tells Swagger UI where to get a token (used for the "Authorize" button)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


def get_user_service(
    store: Annotated[StoreProtocol, Depends(get_store)],
) -> UserService:
    return UserService(store, settings.collections.users)


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> User:
    """Resolve the Bearer token to its User, or fail with HTTP 401."""
    try:
        user_id = service.validate(token)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    user = await service.get_user(user_id)
    if user is None:
        raise _CREDENTIALS_EXCEPTION
    return user
