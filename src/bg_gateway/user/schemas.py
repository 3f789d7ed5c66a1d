"""Pydantic request/response schemas for bg_gateway.

All responses are wrapped in ApiResponse at the router layer.
"""

from pydantic import BaseModel, Field

from src.bg_gateway.user.models import User


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=20, pattern=r"^[a-zA-Z0-9_-]+$")
    password: str = Field(..., min_length=6, max_length=100)


class LoginRequest(BaseModel):
    username: str
    password: str


class UserInfo(BaseModel):
    """Public view of a user; never includes the password hash."""

    user_id: str
    username: str
    score: int
    created_at: str
    updated_at: str

    @classmethod
    def from_domain(cls, u: User) -> "UserInfo":
        return cls(
            user_id=u.id,
            username=u.username,
            score=u.score,
            created_at=u.created_at.isoformat(),
            updated_at=u.updated_at.isoformat(),
        )


class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int = 3600
    user: UserInfo
