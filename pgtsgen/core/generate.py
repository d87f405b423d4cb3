"""Schema to TypeScript generation pipeline."""
import logging
from pathlib import Path
from typing import Union

from pydantic import BaseModel

from pgtsgen.core.builder import build_declarations
from pgtsgen.database.base import QueryExecutor
from pgtsgen.metadata.introspector import introspect_schema
from pgtsgen.models.schema import DatabaseSchema
from pgtsgen.output.typescript import render_typescript

logger = logging.getLogger(__name__)


class GenerationResult(BaseModel):
    """Outcome of one generation run."""

    output_path: Path
    content: str
    table_count: int
    enum_count: int
    written: bool


def generate(schema: DatabaseSchema) -> str:
    """Render the declaration file for an introspected schema.

    The output depends only on the schema value, so repeated calls return
    identical text.
    """
    return render_typescript(build_declarations(schema))


def write_declarations(output_path: Path, content: str) -> None:
    """Write generated text, creating parent directories as needed."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content, encoding='utf-8')


async def generate_types(
    executor: QueryExecutor,
    output_path: Union[str, Path],
    schema_name: str = "public",
    dry_run: bool = False
) -> GenerationResult:
    """Introspect a schema and write its TypeScript declarations.

    Args:
        executor: Connected query executor
        output_path: Destination file
        schema_name: Schema to introspect
        dry_run: Build the text without touching the filesystem

    Returns:
        GenerationResult with the generated text and counts

    Raises:
        IntrospectionError: If a metadata query fails (nothing is written)
        DeclarationError: If generated names would collide (nothing is written)
    """
    output_path = Path(output_path)
    schema = await introspect_schema(executor, schema_name)
    content = generate(schema)

    logger.info("Enum types: %d", len(schema.enums))
    logger.info("Table interfaces: %d", len(schema.tables))

    if dry_run:
        logger.info("Dry run: skipping write to %s", output_path)
    else:
        write_declarations(output_path, content)
        logger.info("Wrote %d bytes to %s", len(content.encode('utf-8')), output_path)

    return GenerationResult(
        output_path=output_path,
        content=content,
        table_count=len(schema.tables),
        enum_count=len(schema.enums),
        written=not dry_run,
    )
