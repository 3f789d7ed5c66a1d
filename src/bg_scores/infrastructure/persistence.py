"""ScoreRepository: per-user running score kept on the user document.

The score is only ever changed by an atomic store-side increment, never by
read-modify-write, so concurrent deltas for the same user cannot be lost.
A missing ``score`` attribute counts as 0.
"""

from src.bg_common.errors import UserNotFoundError
from src.bg_store.domain.store import StoreProtocol

_SCORE_FIELD = "score"


class ScoreRepository:
    def __init__(self, store: StoreProtocol, users_collection: str) -> None:
        self._store = store
        self._collection = users_collection

    async def apply_delta(self, user_id: str, delta: int) -> int:
        """Raises ItemNotFoundError when the user document does not exist."""
        return await self._store.increment(self._collection, user_id, _SCORE_FIELD, delta)

    async def get_score(self, user_id: str) -> int:
        item = await self._store.get(self._collection, user_id)
        if item is None:
            raise UserNotFoundError(user_id)
        return int(item.get(_SCORE_FIELD) or 0)
