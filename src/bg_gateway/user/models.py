"""User document mapping.

Stored in the users collection as
{id, username, password, createdAt, updatedAt, score}; ``password`` holds
the bcrypt hash, never the plain text.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from src.bg_common.datetime_utils import parse_iso, to_iso


@dataclass(frozen=True)
class User:
    id: str
    username: str
    password_hash: str
    score: int
    created_at: datetime
    updated_at: datetime


def user_to_item(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "username": user.username,
        "password": user.password_hash,
        "createdAt": to_iso(user.created_at),
        "updatedAt": to_iso(user.updated_at),
        "score": user.score,
    }


def item_to_user(item: dict[str, Any]) -> User:
    created_at = parse_iso(item["createdAt"])
    return User(
        id=item["id"],
        username=item["username"],
        password_hash=item["password"],
        score=int(item.get("score") or 0),
        created_at=created_at,
        updated_at=parse_iso(item["updatedAt"]) if item.get("updatedAt") else created_at,
    )
