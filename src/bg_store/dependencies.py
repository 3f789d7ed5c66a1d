"""Process-wide store instance and its FastAPI dependency.

Usage in a router:
    from src.bg_store.dependencies import get_store

    @router.get("/things")
    async def things(store: StoreProtocol = Depends(get_store)):
        ...
"""

from config.settings import settings
from src.bg_store.domain.store import StoreProtocol
from src.bg_store.infrastructure.memory_store import InMemoryStore

_store: StoreProtocol | None = None


def build_store(backend: str) -> StoreProtocol:
    """Instantiate the configured backend ("postgres" or "memory")."""
    if backend == "memory":
        return InMemoryStore()
    if backend == "postgres":
        # Inline import: the async engine is only created when Postgres is used
        from src.bg_common.database import async_session_factory
        from src.bg_store.infrastructure.postgres_store import PostgresDocumentStore

        return PostgresDocumentStore(async_session_factory)
    raise ValueError(f"Unknown STORE_BACKEND: {backend!r}")


def get_store() -> StoreProtocol:
    """FastAPI dependency: the shared store, built on first use."""
    global _store  # noqa: PLW0603
    if _store is None:
        _store = build_store(settings.STORE_BACKEND)
    return _store
