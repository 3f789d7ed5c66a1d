"""InMemoryStore: process-local implementation of StoreProtocol.

Used by the test-suite and by STORE_BACKEND=memory for local runs. Documents
are deep-copied on write and on read so callers can never mutate stored
state through a returned reference.
"""

import copy
from collections import defaultdict

from src.bg_common.errors import ConditionFailedError, ItemNotFoundError
from src.bg_store.domain.filters import Filter, matches
from src.bg_store.domain.store import Item


class InMemoryStore:
    def __init__(self) -> None:
        self._collections: dict[str, dict[str, Item]] = defaultdict(dict)

    async def put(self, collection: str, item: Item) -> None:
        key = item.get("id")
        if not key:
            raise ValueError("item must carry a non-empty 'id'")
        self._collections[collection][str(key)] = copy.deepcopy(item)

    async def get(self, collection: str, key: str) -> Item | None:
        item = self._collections[collection].get(key)
        return copy.deepcopy(item) if item is not None else None

    async def update(
        self,
        collection: str,
        key: str,
        fields: Item,
        condition: Filter | None = None,
    ) -> Item:
        item = self._collections[collection].get(key)
        if item is None:
            raise ItemNotFoundError(collection, key)
        if not matches(condition, item):
            raise ConditionFailedError(collection, key)
        item.update(copy.deepcopy(fields))
        return copy.deepcopy(item)

    async def increment(
        self,
        collection: str,
        key: str,
        field: str,
        delta: int,
    ) -> int:
        item = self._collections[collection].get(key)
        if item is None:
            raise ItemNotFoundError(collection, key)
        new_value = int(item.get(field) or 0) + delta
        item[field] = new_value
        return new_value

    async def delete(self, collection: str, key: str) -> None:
        self._collections[collection].pop(key, None)

    async def query(
        self,
        collection: str,
        key: str,
        filter: Filter | None = None,
    ) -> list[Item]:
        item = self._collections[collection].get(key)
        if item is None or not matches(filter, item):
            return []
        return [copy.deepcopy(item)]

    async def scan(
        self,
        collection: str,
        filter: Filter | None = None,
    ) -> list[Item]:
        return [
            copy.deepcopy(item)
            for item in self._collections[collection].values()
            if matches(filter, item)
        ]
