"""Async SQLAlchemy engine backing the Postgres document store.

There is no ORM layer: the store issues raw ``text()`` SQL against the
``documents`` table (alembic/versions/001_create_documents.py). Each store
call opens its own short transaction through ``async_session_factory``.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from config.settings import settings

engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=10,
    max_overflow=5,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)
