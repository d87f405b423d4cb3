"""PostgreSQL query executor backed by psycopg."""
import logging
from typing import Any, Dict, List, Optional, Sequence

import psycopg
from psycopg.rows import dict_row

from pgtsgen.config.connection import ConnectionConfig
from pgtsgen.database.base import ExecutorError, QueryExecutor

logger = logging.getLogger(__name__)


class PostgresExecutor(QueryExecutor):
    """Runs metadata queries over a single async psycopg connection."""

    def __init__(self):
        """Initialize PostgreSQL executor."""
        self.conn: Optional[psycopg.AsyncConnection] = None

    async def connect(self, config: ConnectionConfig) -> None:
        """Open the connection.

        Args:
            config: Validated connection settings

        Raises:
            psycopg.OperationalError: If the server cannot be reached
        """
        self.conn = await psycopg.AsyncConnection.connect(
            host=config.host,
            port=config.port,
            user=config.user,
            password=config.password,
            dbname=config.database,
            autocommit=True,
            row_factory=dict_row,
        )
        logger.info(
            "Connected to PostgreSQL at %s:%s/%s", config.host, config.port, config.database
        )

    async def ping(self) -> None:
        """Check that the connection answers a trivial query."""
        await self.execute("SELECT 1")

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        if not self.conn:
            raise ExecutorError("Not connected to PostgreSQL. Call connect() first.")

        async with self.conn.cursor() as cursor:
            await cursor.execute(sql, list(params))
            if cursor.description is None:
                return []
            return await cursor.fetchall()

    async def close(self) -> None:
        """Close PostgreSQL connection."""
        if self.conn:
            try:
                await self.conn.close()
                logger.info("Closed PostgreSQL connection")
            except psycopg.Error as e:
                logger.warning("Error closing connection: %s", e)
            finally:
                self.conn = None
