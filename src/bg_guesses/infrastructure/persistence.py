"""GuessRepository: the guess ledger on the document store.

Document layout: {id, userId, priceSnapshotId, direction, isCorrect, createdAt}.

``isCorrect`` is null on creation, but a schema-less store may also hold
documents where the attribute was never written at all, so "unresolved"
means absent OR null. The same predicate guards ``resolve`` as a
conditional write, which makes resolution a one-way transition even when two
resolution cycles race on the same guess.
"""

import logging
import uuid
from typing import Any

from src.bg_common.datetime_utils import parse_iso, to_iso, utc_now
from src.bg_common.enums import GuessDirection, GuessOutcome
from src.bg_common.errors import (
    ConditionFailedError,
    GuessAlreadyResolvedError,
    GuessNotFoundError,
    ItemNotFoundError,
    MalformedItemError,
)
from src.bg_guesses.domain.models import Guess
from src.bg_store.domain.filters import Equals, Missing, Or
from src.bg_store.domain.store import StoreProtocol

logger = logging.getLogger(__name__)

UNRESOLVED_FILTER = Or(Missing("isCorrect"), Equals("isCorrect", None))


def _item_to_guess(item: dict[str, Any], collection: str) -> Guess:
    try:
        return Guess(
            id=item["id"],
            user_id=item["userId"],
            price_snapshot_id=item["priceSnapshotId"],
            direction=GuessDirection(item["direction"]),
            outcome=GuessOutcome.from_is_correct(item.get("isCorrect")),
            created_at=parse_iso(item["createdAt"]),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise MalformedItemError(collection, str(item.get("id")), repr(exc)) from exc


class GuessRepository:
    def __init__(self, store: StoreProtocol, collection: str) -> None:
        self._store = store
        self._collection = collection

    def _map_all(self, items: list[dict[str, Any]]) -> list[Guess]:
        """Map scan results; a malformed document is logged and left out."""
        guesses = []
        for item in items:
            try:
                guesses.append(_item_to_guess(item, self._collection))
            except MalformedItemError as exc:
                logger.warning("Skipping guess: %s", exc.message)
        return guesses

    async def create(
        self,
        price_snapshot_id: str,
        direction: GuessDirection,
        user_id: str,
    ) -> Guess:
        """Persist a new unresolved guess. The snapshot id is not checked here."""
        guess = Guess(
            id=str(uuid.uuid4()),
            user_id=user_id,
            price_snapshot_id=price_snapshot_id,
            direction=direction,
            outcome=GuessOutcome.UNRESOLVED,
            created_at=utc_now(),
        )
        await self._store.put(
            self._collection,
            {
                "id": guess.id,
                "userId": guess.user_id,
                "priceSnapshotId": guess.price_snapshot_id,
                "direction": guess.direction.value,
                "isCorrect": None,
                "createdAt": to_iso(guess.created_at),
            },
        )
        return guess

    async def list_all(self) -> list[Guess]:
        items = await self._store.scan(self._collection)
        return self._map_all(items)

    async def list_by_user(self, user_id: str) -> list[Guess]:
        items = await self._store.scan(self._collection, Equals("userId", user_id))
        return self._map_all(items)

    async def list_unresolved(self) -> list[Guess]:
        items = await self._store.scan(self._collection, UNRESOLVED_FILTER)
        return self._map_all(items)

    async def resolve(self, guess_id: str, is_correct: bool) -> Guess:
        """Set the verdict once.

        Raises:
            GuessNotFoundError: no such guess.
            GuessAlreadyResolvedError: the guess already carries a verdict.
        """
        try:
            item = await self._store.update(
                self._collection,
                guess_id,
                {"isCorrect": is_correct},
                condition=UNRESOLVED_FILTER,
            )
        except ItemNotFoundError:
            raise GuessNotFoundError(guess_id) from None
        except ConditionFailedError:
            raise GuessAlreadyResolvedError(guess_id) from None
        return _item_to_guess(item, self._collection)
