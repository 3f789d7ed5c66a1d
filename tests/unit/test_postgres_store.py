"""Unit tests for PostgresDocumentStore (mocked session, no database)."""

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import SQLAlchemyError

from src.bg_common.errors import ConditionFailedError, ItemNotFoundError, StoreError
from src.bg_store.domain.filters import And, Equals, Missing, Or
from src.bg_store.infrastructure.postgres_store import PostgresDocumentStore, compile_filter


class _Begin:
    """Stands in for ``async_sessionmaker.begin()``."""

    def __init__(self, session: AsyncMock) -> None:
        self._session = session

    async def __aenter__(self) -> AsyncMock:
        return self._session

    async def __aexit__(self, *exc_info: Any) -> bool:
        return False


def _result(rows: list[Any]) -> MagicMock:
    result = MagicMock()
    result.fetchone.return_value = rows[0] if rows else None
    result.fetchall.return_value = rows
    return result


def _row(**columns: Any) -> MagicMock:
    row = MagicMock()
    for name, value in columns.items():
        setattr(row, name, value)
    return row


@pytest.fixture
def session() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def pg_store(session: AsyncMock) -> PostgresDocumentStore:
    factory = MagicMock()
    factory.begin.side_effect = lambda: _Begin(session)
    return PostgresDocumentStore(factory)


def _sql(session: AsyncMock, call: int = 0) -> str:
    return str(session.execute.call_args_list[call].args[0])


def _params(session: AsyncMock, call: int = 0) -> dict[str, Any]:
    return session.execute.call_args_list[call].args[1]


class TestCompileFilter:
    def test_equals(self) -> None:
        sql, params = compile_filter(Equals("userId", "u1"))
        assert sql == "body -> CAST(:p0 AS TEXT) = CAST(:p1 AS JSONB)"
        assert params == {"p0": "userId", "p1": '"u1"'}

    def test_equals_null(self) -> None:
        sql, params = compile_filter(Equals("isCorrect", None))
        assert sql == "body -> CAST(:p0 AS TEXT) = CAST('null' AS JSONB)"
        assert params == {"p0": "isCorrect"}

    def test_missing(self) -> None:
        sql, params = compile_filter(Missing("isCorrect"))
        assert sql == "body -> CAST(:p0 AS TEXT) IS NULL"
        assert params == {"p0": "isCorrect"}

    def test_or_of_missing_and_null(self) -> None:
        sql, params = compile_filter(Or(Missing("isCorrect"), Equals("isCorrect", None)))
        assert sql == (
            "(body -> CAST(:p0 AS TEXT) IS NULL"
            " OR body -> CAST(:p1 AS TEXT) = CAST('null' AS JSONB))"
        )
        assert params == {"p0": "isCorrect", "p1": "isCorrect"}

    def test_nested_binds_are_unique(self) -> None:
        sql, params = compile_filter(
            And(Equals("userId", "u1"), Or(Missing("x"), Equals("x", True)))
        )
        assert sql.startswith("(") and " AND " in sql and " OR " in sql
        assert params == {"p0": "userId", "p1": '"u1"', "p2": "x", "p3": "x", "p4": "true"}

    def test_unknown_filter(self) -> None:
        with pytest.raises(TypeError):
            compile_filter(object())  # type: ignore[arg-type]


class TestPutGet:
    async def test_put_upserts_json_body(
        self, pg_store: PostgresDocumentStore, session: AsyncMock
    ) -> None:
        session.execute.return_value = _result([])
        await pg_store.put("users", {"id": "u1", "score": 0})
        assert "INSERT INTO documents" in _sql(session)
        assert "ON CONFLICT" in _sql(session)
        params = _params(session)
        assert params["collection"] == "users"
        assert params["id"] == "u1"
        assert json.loads(params["body"]) == {"id": "u1", "score": 0}

    async def test_put_requires_id(self, pg_store: PostgresDocumentStore) -> None:
        with pytest.raises(ValueError):
            await pg_store.put("users", {"score": 0})

    async def test_get_decodes_text_body(
        self, pg_store: PostgresDocumentStore, session: AsyncMock
    ) -> None:
        session.execute.return_value = _result([_row(body='{"id": "u1"}')])
        assert await pg_store.get("users", "u1") == {"id": "u1"}

    async def test_get_accepts_decoded_body(
        self, pg_store: PostgresDocumentStore, session: AsyncMock
    ) -> None:
        session.execute.return_value = _result([_row(body={"id": "u1"})])
        assert await pg_store.get("users", "u1") == {"id": "u1"}

    async def test_get_missing(
        self, pg_store: PostgresDocumentStore, session: AsyncMock
    ) -> None:
        session.execute.return_value = _result([])
        assert await pg_store.get("users", "u1") is None


class TestUpdate:
    async def test_conditional_update_success(
        self, pg_store: PostgresDocumentStore, session: AsyncMock
    ) -> None:
        session.execute.return_value = _result([_row(body={"id": "g1", "isCorrect": True})])
        item = await pg_store.update(
            "guesses", "g1", {"isCorrect": True}, condition=Missing("isCorrect")
        )
        assert item == {"id": "g1", "isCorrect": True}
        sql = _sql(session)
        assert "body || CAST(:fields AS JSONB)" in sql
        assert "AND body -> CAST(:p0 AS TEXT) IS NULL" in sql
        assert "RETURNING body" in sql
        assert _params(session)["p0"] == "isCorrect"

    async def test_condition_failed(
        self, pg_store: PostgresDocumentStore, session: AsyncMock
    ) -> None:
        session.execute.side_effect = [
            _result([]),
            _result([_row(body={"id": "g1", "isCorrect": False})]),
        ]
        with pytest.raises(ConditionFailedError):
            await pg_store.update("guesses", "g1", {"isCorrect": True}, condition=Missing("isCorrect"))

    async def test_item_not_found(
        self, pg_store: PostgresDocumentStore, session: AsyncMock
    ) -> None:
        session.execute.side_effect = [_result([]), _result([])]
        with pytest.raises(ItemNotFoundError):
            await pg_store.update("guesses", "g1", {"isCorrect": True})


class TestIncrement:
    async def test_returns_new_value(
        self, pg_store: PostgresDocumentStore, session: AsyncMock
    ) -> None:
        session.execute.return_value = _result([_row(value="4")])
        assert await pg_store.increment("users", "u1", "score", 1) == 4
        assert "jsonb_set" in _sql(session)
        assert _params(session)["delta"] == 1

    async def test_missing_user(
        self, pg_store: PostgresDocumentStore, session: AsyncMock
    ) -> None:
        session.execute.return_value = _result([])
        with pytest.raises(ItemNotFoundError):
            await pg_store.increment("users", "ghost", "score", 1)


class TestScan:
    async def test_scan_with_filter(
        self, pg_store: PostgresDocumentStore, session: AsyncMock
    ) -> None:
        session.execute.return_value = _result([_row(body={"id": "a"}), _row(body='{"id": "b"}')])
        items = await pg_store.scan("guesses", Equals("userId", "u1"))
        assert items == [{"id": "a"}, {"id": "b"}]
        assert "WHERE collection = :collection AND body" in _sql(session)
        assert _params(session)["p1"] == '"u1"'

    async def test_query_by_key(
        self, pg_store: PostgresDocumentStore, session: AsyncMock
    ) -> None:
        session.execute.return_value = _result([])
        assert await pg_store.query("guesses", "g1") == []
        assert _params(session) == {"collection": "guesses", "id": "g1"}


async def test_driver_errors_become_store_errors(
    pg_store: PostgresDocumentStore, session: AsyncMock
) -> None:
    session.execute.side_effect = SQLAlchemyError("connection refused")
    with pytest.raises(StoreError) as exc_info:
        await pg_store.scan("guesses")
    assert "connection refused" in exc_info.value.message
