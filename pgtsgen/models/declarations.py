"""Structured TypeScript declarations, independent of text formatting."""
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict

KNEX_TABLES_MODULE = "knex/types/tables"
KNEX_TABLES_INTERFACE = "Tables"


class UnionDeclaration(BaseModel):
    """String-literal union generated from an enum type."""

    model_config = ConfigDict(frozen=True)

    name: str
    members: Tuple[str, ...] = ()


class FieldDeclaration(BaseModel):
    """One interface member generated from a column."""

    model_config = ConfigDict(frozen=True)

    name: str
    type_expression: str
    comment: Optional[str] = None
    default_value: Optional[str] = None  # verbatim, never evaluated


class InterfaceDeclaration(BaseModel):
    """Record type generated from a table."""

    model_config = ConfigDict(frozen=True)

    name: str
    properties: Tuple[FieldDeclaration, ...] = ()


class RegistryEntry(BaseModel):
    """Binds a table name to its interface."""

    model_config = ConfigDict(frozen=True)

    table_name: str
    interface_name: str


class RegistryDeclaration(BaseModel):
    """Module augmentation registering every table with the query builder."""

    model_config = ConfigDict(frozen=True)

    module: str = KNEX_TABLES_MODULE
    interface_name: str = KNEX_TABLES_INTERFACE
    entries: Tuple[RegistryEntry, ...] = ()


class DeclarationFile(BaseModel):
    """Everything that goes into one generated file, in output order."""

    model_config = ConfigDict(frozen=True)

    unions: Tuple[UnionDeclaration, ...] = ()
    interfaces: Tuple[InterfaceDeclaration, ...] = ()
    registry: RegistryDeclaration = RegistryDeclaration()
