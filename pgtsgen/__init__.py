"""pgtsgen - TypeScript declarations from PostgreSQL schemas."""

__version__ = "0.1.0"
