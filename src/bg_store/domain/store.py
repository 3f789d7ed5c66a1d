# src/bg_store/domain/store.py
"""Store Protocol: the schema-less key-value collaborator.

Documents are plain JSON-compatible dicts keyed by their ``id`` attribute
inside a named collection. There are no joins, no multi-item transactions
and scans are unordered. Failures raise ``StoreError`` (or a subclass).

Unit tests inject ``InMemoryStore`` or a mock conforming to this Protocol.
"""

from typing import Any, Protocol

from src.bg_store.domain.filters import Filter

Item = dict[str, Any]


class StoreProtocol(Protocol):
    async def put(self, collection: str, item: Item) -> None: ...

    async def get(self, collection: str, key: str) -> Item | None: ...

    async def update(
        self,
        collection: str,
        key: str,
        fields: Item,
        condition: Filter | None = None,
    ) -> Item: ...

    async def increment(
        self,
        collection: str,
        key: str,
        field: str,
        delta: int,
    ) -> int: ...

    async def delete(self, collection: str, key: str) -> None: ...

    async def query(
        self,
        collection: str,
        key: str,
        filter: Filter | None = None,
    ) -> list[Item]: ...

    async def scan(
        self,
        collection: str,
        filter: Filter | None = None,
    ) -> list[Item]: ...
