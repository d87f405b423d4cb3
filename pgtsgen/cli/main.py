"""Command-line interface for pgtsgen - PostgreSQL to TypeScript types."""
import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Dict

import dotenv

from pgtsgen.config.connection import load_connection_config, validate_connection_config
from pgtsgen.core.generate import generate_types
from pgtsgen.database.postgres import PostgresExecutor

logger = logging.getLogger(__name__)

CONNECTION_ARGS = ('host', 'port', 'user', 'password', 'database')


def _resolve_connection(args) -> Dict[str, Any]:
    """Connection settings from config sources, overridden by CLI flags."""
    config = load_connection_config(getattr(args, 'conn_file', None))
    for key in CONNECTION_ARGS:
        value = getattr(args, key, None)
        if value is not None:
            config[key] = value
    return config


async def run_generate(args):
    """Async execution wrapper for the generate command."""
    executor = None
    try:
        output_path = (Path.cwd() / args.output).resolve()
        config = validate_connection_config(_resolve_connection(args))

        executor = PostgresExecutor()
        await executor.connect(config)
        await executor.ping()
        logger.info("Database connection successful")

        result = await generate_types(
            executor, output_path, schema_name=args.schema, dry_run=args.dry_run
        )

        if args.dry_run:
            sys.stdout.write(result.content)
            print("Dry run completed. No files were written.", file=sys.stderr)
        else:
            print(f"Types generated successfully at {result.output_path}")

        sys.exit(0)

    except Exception as e:  # pylint: disable=broad-except
        print(f"Error: {e}", file=sys.stderr)
        logger.debug("Generation failed", exc_info=True)
        sys.exit(1)
    finally:
        if executor:
            await executor.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pgtsgen",
        description="Generate TypeScript types and Knex table registrations from a PostgreSQL schema",
        epilog="Examples:\n"
               "  pgtsgen                                    Generate types using default settings\n"
               "  pgtsgen -o ./src/types/db.ts               Generate types to a custom location\n"
               "  pgtsgen --dry-run                          Preview the generated types\n"
               "  pgtsgen -H localhost -p 5432 -u me -d mydb Connect to a specific database",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        "-o", "--output", default="./types/db.ts",
        help="Output file path (default: ./types/db.ts)"
    )
    parser.add_argument(
        "-s", "--schema", default="public",
        help="Database schema to introspect (default: public)"
    )
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Print what would be generated without writing to file"
    )
    parser.add_argument("-H", "--host", help="Database host (default: DB_HOST or localhost)")
    parser.add_argument("-p", "--port", type=int, help="Database port (default: DB_PORT or 5432)")
    parser.add_argument("-u", "--user", help="Database user (default: DB_USER or postgres)")
    parser.add_argument("--password", help="Database password (default: DB_PASSWORD)")
    parser.add_argument("-d", "--database", help="Database name (default: DB_DATABASE)")
    parser.add_argument(
        "--conn-file",
        help="Path to connection config file (default: ~/.pgtsgen/postgres.yaml)"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging"
    )
    return parser


def main():
    """Parse command line arguments and run generation."""
    dotenv.load_dotenv()
    args = build_parser().parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    asyncio.run(run_generate(args))


if __name__ == "__main__":
    main()
