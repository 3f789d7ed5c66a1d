"""Identity & Access: register, login, token validation.

Users live in the document store. The store has no unique constraint, so
username uniqueness is a scan-then-put check: two concurrent registrations
of the same name can both succeed.
"""

import logging
import uuid

from src.bg_common.datetime_utils import utc_now
from src.bg_common.errors import InvalidCredentialsError, UsernameExistsError
from src.bg_gateway.auth.jwt_handler import create_access_token, decode_token
from src.bg_gateway.auth.password import hash_password, verify_password
from src.bg_gateway.user.models import User, item_to_user, user_to_item
from src.bg_store.domain.filters import Equals
from src.bg_store.domain.store import StoreProtocol

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, store: StoreProtocol, collection: str) -> None:
        self._store = store
        self._collection = collection

    async def register(self, username: str, password: str) -> tuple[User, str]:
        """Create the user (score 0) and return it with a fresh access token."""
        if await self.find_by_username(username) is not None:
            raise UsernameExistsError()

        now = utc_now()
        user = User(
            id=str(uuid.uuid4()),
            username=username,
            password_hash=hash_password(password),
            score=0,
            created_at=now,
            updated_at=now,
        )
        await self._store.put(self._collection, user_to_item(user))
        logger.info("Registered user %s (%s)", user.id, username)
        return user, create_access_token(user.id, user.username)

    async def login(self, username: str, password: str) -> tuple[User, str]:
        """Authenticate and return (user, access_token).

        Unknown user and wrong password raise the same InvalidCredentialsError.
        """
        user = await self.find_by_username(username)
        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()
        return user, create_access_token(user.id, user.username)

    def validate(self, token: str) -> str:
        """Return the user id carried by a valid access token."""
        return str(decode_token(token)["sub"])

    async def get_user(self, user_id: str) -> User | None:
        item = await self._store.get(self._collection, user_id)
        return item_to_user(item) if item else None

    async def find_by_username(self, username: str) -> User | None:
        items = await self._store.scan(self._collection, Equals("username", username))
        return item_to_user(items[0]) if items else None
