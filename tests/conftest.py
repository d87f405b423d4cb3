"""Common test fixtures."""
# pylint: disable=redefined-outer-name
from typing import Any, Dict, List, Optional, Sequence

import pytest

from pgtsgen.database.base import QueryExecutor
from pgtsgen.models.schema import Column, DatabaseSchema, EnumType, Table


class FakeExecutor(QueryExecutor):
    """In-memory executor answering the introspector's catalog queries.

    Also mimics the connect/ping lifecycle of PostgresExecutor for CLI tests.
    """

    def __init__(self, tables=None, columns=None, enums=None, fail_on: Optional[str] = None,
                 connect_error: Optional[Exception] = None):
        self.tables = tables or []
        self.columns = columns or {}
        self.enums = enums or []
        self.fail_on = fail_on
        self.connect_error = connect_error
        self.config = None
        self.calls: List[tuple] = []
        self.closed = False

    async def connect(self, config) -> None:
        if self.connect_error:
            raise self.connect_error
        self.config = config

    async def ping(self) -> None:
        await self.execute("SELECT 1")

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        self.calls.append((sql, list(params)))
        if "information_schema.tables" in sql:
            stage = "tables"
            rows = [{'table_name': name, 'table_schema': params[0]} for name in self.tables]
        elif "information_schema.columns" in sql:
            stage = "columns"
            rows = self.columns.get(params[0], [])
        elif "pg_enum" in sql:
            stage = "enums"
            rows = self.enums
        else:
            stage = "other"
            rows = [{'?column?': 1}]

        if self.fail_on == stage:
            raise ConnectionError(f"{stage} query blew up")
        return rows

    async def close(self) -> None:
        self.closed = True


def column_row(name, udt_name, nullable=False, default=None, description=None,
               data_type=None):
    """Row shaped like the columns query result."""
    return {
        'column_name': name,
        'data_type': data_type or udt_name,
        'udt_name': udt_name,
        'is_nullable': 'YES' if nullable else 'NO',
        'column_default': default,
        'description': description,
    }


@pytest.fixture
def fake_executor_factory():
    """Factory to create FakeExecutor instances for testing."""
    return FakeExecutor


@pytest.fixture
def users_executor():
    """Executor describing a users table with a user_role enum."""
    return FakeExecutor(
        tables=['users'],
        columns={
            'users': [
                column_row('id', 'int4', default="nextval('users_id_seq'::regclass)"),
                column_row('email', 'text', description='User email address'),
                column_row('role', 'user_role', nullable=True, default="'user'::user_role",
                           data_type='USER-DEFINED'),
            ],
        },
        enums=[
            {'typname': 'user_role', 'nspname': 'public', 'enumlabels': ['admin', 'user', 'guest']},
        ],
    )


@pytest.fixture
def column_factory():
    """Factory to create Column instances for testing."""
    def _make_column(
        name="test_col",
        native_type="text",
        is_nullable=False,
        default_value=None,
        comment=None
    ):
        return Column(
            name=name,
            native_type=native_type,
            is_nullable=is_nullable,
            default_value=default_value,
            comment=comment
        )
    return _make_column


@pytest.fixture
def table_factory(column_factory):
    """Factory to create Table instances for testing."""
    def _make_table(name="test_table", schema_name="public", columns=None):
        if columns is None:
            columns = [column_factory()]
        return Table(name=name, schema_name=schema_name, columns=columns)
    return _make_table


@pytest.fixture
def users_schema(column_factory, table_factory):
    """Schema with one users table and a user_role enum."""
    users = table_factory(
        name="users",
        columns=[
            column_factory(name="id", native_type="int4", comment="Primary key"),
            column_factory(name="email", native_type="varchar"),
            column_factory(name="role", native_type="user_role", is_nullable=True),
        ]
    )
    return DatabaseSchema(
        schema_name="public",
        tables=[users],
        enums=[EnumType(name="user_role", schema_name="public", labels=["admin", "user", "guest"])],
    )


@pytest.fixture
def column_row_factory():
    """Factory to create raw column query rows for testing."""
    return column_row
