"""PostgreSQL schema introspection."""
import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from pgtsgen.database.base import QueryExecutor
from pgtsgen.models.schema import Column, DatabaseSchema, EnumType, Table

logger = logging.getLogger(__name__)

TABLES_QUERY = """
SELECT
    t.table_name,
    t.table_schema
FROM information_schema.tables t
WHERE t.table_schema = %s
  AND t.table_type = 'BASE TABLE'
ORDER BY t.table_name
"""

COLUMNS_QUERY = """
SELECT
    c.column_name,
    c.data_type,
    c.udt_name,
    c.is_nullable,
    c.column_default,
    pgd.description
FROM information_schema.columns c
LEFT JOIN pg_catalog.pg_statio_all_tables st
    ON st.schemaname = c.table_schema
    AND st.relname = c.table_name
LEFT JOIN pg_catalog.pg_description pgd
    ON pgd.objoid = st.relid
    AND pgd.objsubid = c.ordinal_position
WHERE c.table_name = %s
  AND c.table_schema = %s
ORDER BY c.ordinal_position
"""

ENUMS_QUERY = """
SELECT
    t.typname,
    n.nspname,
    COALESCE(
        array_agg(e.enumlabel::text ORDER BY e.enumsortorder)
            FILTER (WHERE e.enumlabel IS NOT NULL),
        '{}'::text[]
    ) AS enumlabels
FROM pg_catalog.pg_type t
JOIN pg_catalog.pg_namespace n ON n.oid = t.typnamespace
LEFT JOIN pg_catalog.pg_enum e ON t.oid = e.enumtypid
WHERE n.nspname = %s
  AND t.typtype = 'e'
GROUP BY t.typname, n.nspname
ORDER BY t.typname
"""


class IntrospectionStage(str, Enum):
    """Metadata query that an introspection failure happened in."""

    TABLES = "TABLES"
    COLUMNS = "COLUMNS"
    ENUMS = "ENUMS"


class IntrospectionError(RuntimeError):
    """Raised when a metadata query fails. Wraps the executor's exception."""

    def __init__(self, stage: IntrospectionStage, schema_name: str,
                 table_name: Optional[str] = None, cause: Optional[BaseException] = None):
        self.stage = stage
        self.schema_name = schema_name
        self.table_name = table_name
        target = f"{schema_name}.{table_name}" if table_name else schema_name
        message = f"{stage.value.lower()} query failed for {target}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


def parse_pg_array(value: Any) -> List[str]:
    """Normalize an aggregated label array to a list of strings.

    Drivers return ``text[]`` as a list, but some hand the raw array literal
    back instead (``{draft,"in review"}``), so both forms are accepted.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]

    text = str(value).strip()
    if text.startswith('{') and text.endswith('}'):
        text = text[1:-1]
    if not text:
        return []

    items: List[str] = []
    current: List[str] = []
    in_quotes = False
    escaped = False
    for char in text:
        if escaped:
            current.append(char)
            escaped = False
        elif char == '\\':
            escaped = True
        elif char == '"':
            in_quotes = not in_quotes
        elif char == ',' and not in_quotes:
            items.append(''.join(current))
            current = []
        else:
            current.append(char)
    items.append(''.join(current))
    return items


def _native_type(row: Dict[str, Any]) -> str:
    # udt_name carries the real name where data_type says USER-DEFINED or ARRAY
    return row.get('udt_name') or row['data_type']


def _to_column(row: Dict[str, Any]) -> Column:
    return Column(
        name=row['column_name'],
        native_type=_native_type(row),
        is_nullable=row['is_nullable'] == 'YES',
        default_value=row.get('column_default'),
        comment=row.get('description') or None,
    )


class SchemaIntrospector:
    """Builds a DatabaseSchema from PostgreSQL catalog queries.

    Queries run one at a time: tables first, then each table's columns in
    table order, then the schema's enums. Any failure aborts the whole pass.
    """

    def __init__(self, executor: QueryExecutor):
        self.executor = executor

    async def introspect(self, schema_name: str = "public") -> DatabaseSchema:
        """Introspect tables, columns and enums of one schema.

        Args:
            schema_name: Schema to introspect

        Returns:
            DatabaseSchema with tables ordered by name and columns by ordinal position.

        Raises:
            IntrospectionError: If any metadata query fails
        """
        tables = await self.fetch_tables(schema_name)
        enums = await self.fetch_enums(schema_name)

        logger.info(
            "Introspected %d tables and %d enums from schema %s",
            len(tables), len(enums), schema_name
        )
        return DatabaseSchema(schema_name=schema_name, tables=tables, enums=enums)

    async def fetch_tables(self, schema_name: str) -> List[Table]:
        """Fetch all base tables with their columns."""
        rows = await self._run(TABLES_QUERY, [schema_name], IntrospectionStage.TABLES, schema_name)

        result = []
        for row in rows:
            table_name = row['table_name']
            table_schema = row.get('table_schema') or schema_name
            columns = await self.fetch_columns(table_name, table_schema)
            logger.debug("Table %s.%s has %d columns", table_schema, table_name, len(columns))
            result.append(Table(name=table_name, schema_name=table_schema, columns=columns))
        return result

    async def fetch_columns(self, table_name: str, schema_name: str) -> List[Column]:
        """Fetch columns of one table ordered by ordinal position."""
        rows = await self._run(
            COLUMNS_QUERY, [table_name, schema_name],
            IntrospectionStage.COLUMNS, schema_name, table_name
        )
        return [_to_column(row) for row in rows]

    async def fetch_enums(self, schema_name: str) -> List[EnumType]:
        """Fetch enum types declared in the schema."""
        rows = await self._run(ENUMS_QUERY, [schema_name], IntrospectionStage.ENUMS, schema_name)
        return [
            EnumType(
                name=row['typname'],
                schema_name=row.get('nspname') or schema_name,
                labels=parse_pg_array(row.get('enumlabels')),
            )
            for row in rows
        ]

    async def _run(self, sql: str, params: Sequence[Any], stage: IntrospectionStage,
                   schema_name: str, table_name: Optional[str] = None) -> List[Dict[str, Any]]:
        try:
            return await self.executor.execute(sql, params)
        except Exception as e:  # pylint: disable=broad-except
            raise IntrospectionError(stage, schema_name, table_name, cause=e) from e


async def introspect_schema(executor: QueryExecutor, schema_name: str = "public") -> DatabaseSchema:
    """Introspect one schema through the given executor."""
    return await SchemaIntrospector(executor).introspect(schema_name)
