"""Schema model produced by introspection."""
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict


class Column(BaseModel):
    """Represents a single table column."""

    model_config = ConfigDict(frozen=True)

    name: str
    native_type: str  # udt_name, e.g. int4, _text, user_role
    is_nullable: bool
    default_value: Optional[str] = None
    comment: Optional[str] = None


class Table(BaseModel):
    """Represents a base table with its columns in ordinal order."""

    model_config = ConfigDict(frozen=True)

    name: str
    schema_name: str
    columns: Tuple[Column, ...] = ()


class EnumType(BaseModel):
    """Represents a database enum type with labels in declared sort order."""

    model_config = ConfigDict(frozen=True)

    name: str
    schema_name: str
    labels: Tuple[str, ...] = ()


class DatabaseSchema(BaseModel):
    """Tables and enums introspected for one schema."""

    model_config = ConfigDict(frozen=True)

    schema_name: str = "public"
    tables: Tuple[Table, ...] = ()
    enums: Tuple[EnumType, ...] = ()
