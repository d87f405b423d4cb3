"""Query executors used by the schema introspector."""
from pgtsgen.database.base import ExecutorError, QueryExecutor
from pgtsgen.database.postgres import PostgresExecutor

__all__ = [
    'ExecutorError',
    'PostgresExecutor',
    'QueryExecutor',
]
