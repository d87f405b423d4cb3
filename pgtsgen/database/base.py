"""Abstract base class for query executors."""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Sequence


class ExecutorError(RuntimeError):
    """Raised when an executor is used in an invalid state."""


class QueryExecutor(ABC):
    """Executes read-only SQL against a database.

    The introspector only depends on this interface, so it can run against
    an in-memory fake as well as a live connection.
    """

    @abstractmethod
    async def execute(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        """Run a query with positional parameters.

        Args:
            sql: SQL text using ``%s`` placeholders
            params: Positional parameter values

        Returns:
            List of rows, each a mapping from column label to value.

        Raises:
            Exception: Driver-specific errors propagate unchanged.
        """

    async def close(self) -> None:
        """Release any held resources. Safe to call more than once."""
