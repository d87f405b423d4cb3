"""Tests for the psycopg-backed PostgreSQL executor."""
# pylint: disable=redefined-outer-name
from unittest.mock import AsyncMock, MagicMock, patch

import psycopg
import pytest
from psycopg.rows import dict_row

from pgtsgen.config.connection import ConnectionConfig
from pgtsgen.database.base import ExecutorError
from pgtsgen.database.postgres import PostgresExecutor


@pytest.fixture
def config():
    """Validated connection settings."""
    return ConnectionConfig(host="db.local", port=5433, user="me", password="secret", database="app")


def _mock_connection(rows=None, description=True):
    cursor = MagicMock()
    cursor.execute = AsyncMock()
    cursor.fetchall = AsyncMock(return_value=rows or [])
    cursor.description = [("col",)] if description else None

    conn = MagicMock()
    conn.cursor.return_value.__aenter__.return_value = cursor
    conn.cursor.return_value.__aexit__.return_value = False
    conn.close = AsyncMock()
    return conn, cursor


def test_executor_init():
    """Test function."""
    assert PostgresExecutor().conn is None


@pytest.mark.asyncio
async def test_connect_passes_settings(config):
    """Test function."""
    conn, _ = _mock_connection()
    with patch("psycopg.AsyncConnection.connect", new=AsyncMock(return_value=conn)) as mock_connect:
        executor = PostgresExecutor()
        await executor.connect(config)

    assert executor.conn is conn
    mock_connect.assert_awaited_once_with(
        host="db.local",
        port=5433,
        user="me",
        password="secret",
        dbname="app",
        autocommit=True,
        row_factory=dict_row,
    )


@pytest.mark.asyncio
async def test_connect_failure_propagates(config):
    """Test function."""
    failing = AsyncMock(side_effect=psycopg.OperationalError("Connection refused"))
    with patch("psycopg.AsyncConnection.connect", new=failing):
        executor = PostgresExecutor()
        with pytest.raises(psycopg.OperationalError):
            await executor.connect(config)
    assert executor.conn is None


@pytest.mark.asyncio
async def test_execute_returns_rows():
    """Test function."""
    rows = [{'table_name': 'users', 'table_schema': 'public'}]
    conn, cursor = _mock_connection(rows)
    executor = PostgresExecutor()
    executor.conn = conn

    result = await executor.execute("SELECT * FROM t WHERE s = %s", ("public",))

    assert result == rows
    cursor.execute.assert_awaited_once_with("SELECT * FROM t WHERE s = %s", ["public"])


@pytest.mark.asyncio
async def test_execute_without_result_set():
    """Test function."""
    conn, cursor = _mock_connection(description=False)
    executor = PostgresExecutor()
    executor.conn = conn

    assert await executor.execute("SET search_path TO public") == []
    cursor.fetchall.assert_not_awaited()


@pytest.mark.asyncio
async def test_ping_runs_select_one():
    """Test function."""
    conn, cursor = _mock_connection([{'?column?': 1}])
    executor = PostgresExecutor()
    executor.conn = conn

    await executor.ping()
    cursor.execute.assert_awaited_once_with("SELECT 1", [])


@pytest.mark.asyncio
async def test_execute_requires_connection():
    """Test function."""
    with pytest.raises(ExecutorError, match="Not connected"):
        await PostgresExecutor().execute("SELECT 1")


@pytest.mark.asyncio
async def test_close_is_idempotent():
    """Test function."""
    conn, _ = _mock_connection()
    executor = PostgresExecutor()
    executor.conn = conn

    await executor.close()
    await executor.close()

    conn.close.assert_awaited_once()
    assert executor.conn is None


@pytest.mark.asyncio
async def test_close_swallows_driver_error():
    """Test function."""
    conn, _ = _mock_connection()
    conn.close.side_effect = psycopg.InterfaceError("already closed")
    executor = PostgresExecutor()
    executor.conn = conn

    await executor.close()
    assert executor.conn is None
