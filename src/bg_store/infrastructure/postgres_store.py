"""PostgresDocumentStore: StoreProtocol on a single JSONB table.

Table ``documents`` (alembic 001) holds every collection:
    (collection TEXT, id TEXT, body JSONB, created_at, updated_at)
    PRIMARY KEY (collection, id)

All queries use raw text() SQL. Each call runs in its own transaction; there
is no way to span several documents. Typed filters are compiled
to parameterised JSONB predicates:

    Equals(f, v)     ->  body -> :f = CAST(:v AS JSONB)
    Equals(f, None)  ->  body -> :f = CAST('null' AS JSONB)
    Missing(f)       ->  body -> :f IS NULL
"""

import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.bg_common.errors import ConditionFailedError, ItemNotFoundError, StoreError
from src.bg_store.domain.filters import And, Equals, Filter, Missing, Or
from src.bg_store.domain.store import Item

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_PUT_SQL = text("""
    INSERT INTO documents (collection, id, body)
    VALUES (:collection, :id, CAST(:body AS JSONB))
    ON CONFLICT (collection, id)
    DO UPDATE SET body = EXCLUDED.body, updated_at = NOW()
""")

_GET_SQL = text("""
    SELECT body
    FROM documents
    WHERE collection = :collection AND id = :id
""")

_DELETE_SQL = text("""
    DELETE FROM documents
    WHERE collection = :collection AND id = :id
""")

_INCREMENT_SQL = text("""
    UPDATE documents
    SET body = jsonb_set(
            body,
            ARRAY[CAST(:field AS TEXT)],
            to_jsonb(
                COALESCE(CAST(body ->> CAST(:field AS TEXT) AS BIGINT), 0)
                + CAST(:delta AS BIGINT)
            )
        ),
        updated_at = NOW()
    WHERE collection = :collection AND id = :id
    RETURNING body ->> CAST(:field AS TEXT) AS value
""")


# ---------------------------------------------------------------------------
# Filter compilation
# ---------------------------------------------------------------------------

class _FilterCompiler:
    """Turns a Filter into a SQL fragment, collecting bind params as it goes."""

    def __init__(self) -> None:
        self.params: dict[str, Any] = {}
        self._counter = 0

    def _bind(self, value: Any) -> str:
        name = f"p{self._counter}"
        self._counter += 1
        self.params[name] = value
        return f":{name}"

    def compile(self, flt: Filter) -> str:
        if isinstance(flt, Equals):
            field = self._bind(flt.field)
            if flt.value is None:
                return f"body -> CAST({field} AS TEXT) = CAST('null' AS JSONB)"
            value = self._bind(json.dumps(flt.value))
            return f"body -> CAST({field} AS TEXT) = CAST({value} AS JSONB)"
        if isinstance(flt, Missing):
            field = self._bind(flt.field)
            return f"body -> CAST({field} AS TEXT) IS NULL"
        if isinstance(flt, Or):
            return "(" + " OR ".join(self.compile(c) for c in flt.clauses) + ")"
        if isinstance(flt, And):
            return "(" + " AND ".join(self.compile(c) for c in flt.clauses) + ")"
        raise TypeError(f"Unsupported filter: {flt!r}")


def compile_filter(flt: Filter) -> tuple[str, dict[str, Any]]:
    """Compile ``flt`` to ``(sql_fragment, params)``."""
    compiler = _FilterCompiler()
    sql = compiler.compile(flt)
    return sql, compiler.params


def _load_body(body: Any) -> Item:
    # asyncpg hands JSONB back as text unless a codec is registered
    if isinstance(body, str):
        return json.loads(body)
    return dict(body)


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class PostgresDocumentStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory.begin() as session:
                yield session
        except SQLAlchemyError as exc:
            raise StoreError(f"Store operation failed: {exc}") from exc

    async def put(self, collection: str, item: Item) -> None:
        key = item.get("id")
        if not key:
            raise ValueError("item must carry a non-empty 'id'")
        async with self._session() as db:
            await db.execute(
                _PUT_SQL,
                {"collection": collection, "id": str(key), "body": json.dumps(item)},
            )

    async def get(self, collection: str, key: str) -> Item | None:
        async with self._session() as db:
            result = await db.execute(_GET_SQL, {"collection": collection, "id": key})
            row = result.fetchone()
        return _load_body(row.body) if row else None

    async def update(
        self,
        collection: str,
        key: str,
        fields: Item,
        condition: Filter | None = None,
    ) -> Item:
        params: dict[str, Any] = {
            "collection": collection,
            "id": key,
            "fields": json.dumps(fields),
        }
        where = "collection = :collection AND id = :id"
        if condition is not None:
            cond_sql, cond_params = compile_filter(condition)
            where += f" AND {cond_sql}"
            params.update(cond_params)

        sql = text(
            "UPDATE documents"
            " SET body = body || CAST(:fields AS JSONB), updated_at = NOW()"
            f" WHERE {where}"
            " RETURNING body"
        )
        async with self._session() as db:
            row = (await db.execute(sql, params)).fetchone()
            if row is not None:
                return _load_body(row.body)
            # Zero rows: either the document is gone or the condition failed
            exists = (
                await db.execute(_GET_SQL, {"collection": collection, "id": key})
            ).fetchone()
        if exists is None:
            raise ItemNotFoundError(collection, key)
        raise ConditionFailedError(collection, key)

    async def increment(
        self,
        collection: str,
        key: str,
        field: str,
        delta: int,
    ) -> int:
        async with self._session() as db:
            row = (
                await db.execute(
                    _INCREMENT_SQL,
                    {"collection": collection, "id": key, "field": field, "delta": delta},
                )
            ).fetchone()
        if row is None:
            raise ItemNotFoundError(collection, key)
        return int(row.value)

    async def delete(self, collection: str, key: str) -> None:
        async with self._session() as db:
            await db.execute(_DELETE_SQL, {"collection": collection, "id": key})

    async def query(
        self,
        collection: str,
        key: str,
        filter: Filter | None = None,
    ) -> list[Item]:
        params: dict[str, Any] = {"collection": collection, "id": key}
        where = "collection = :collection AND id = :id"
        if filter is not None:
            filter_sql, filter_params = compile_filter(filter)
            where += f" AND {filter_sql}"
            params.update(filter_params)
        return await self._select(where, params)

    async def scan(
        self,
        collection: str,
        filter: Filter | None = None,
    ) -> list[Item]:
        params: dict[str, Any] = {"collection": collection}
        where = "collection = :collection"
        if filter is not None:
            filter_sql, filter_params = compile_filter(filter)
            where += f" AND {filter_sql}"
            params.update(filter_params)
        return await self._select(where, params)

    async def _select(self, where: str, params: dict[str, Any]) -> list[Item]:
        sql = text(f"SELECT body FROM documents WHERE {where}")
        async with self._session() as db:
            rows = (await db.execute(sql, params)).fetchall()
        return [_load_body(row.body) for row in rows]
