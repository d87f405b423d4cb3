"""Turn an introspected schema into structured declarations."""
import logging
from collections import Counter
from typing import AbstractSet, List

from pgtsgen.core.type_map import is_mapped, resolve_column_type
from pgtsgen.models.declarations import (
    DeclarationFile,
    FieldDeclaration,
    InterfaceDeclaration,
    RegistryDeclaration,
    RegistryEntry,
    UnionDeclaration,
)
from pgtsgen.models.schema import DatabaseSchema, EnumType, Table

logger = logging.getLogger(__name__)


class DeclarationError(ValueError):
    """Raised when a schema cannot be turned into unambiguous declarations."""


def _duplicates(names: List[str]) -> List[str]:
    return sorted(name for name, count in Counter(names).items() if count > 1)


def check_name_collisions(schema: DatabaseSchema) -> None:
    """Reject schemas whose generated names would clash.

    Enum unions and table interfaces share one namespace in the output file,
    and interface members must be unique per table.

    Raises:
        DeclarationError: On the first kind of collision found
    """
    enum_names = [e.name for e in schema.enums]
    table_names = [t.name for t in schema.tables]

    duplicated = _duplicates(enum_names) + _duplicates(table_names)
    if duplicated:
        raise DeclarationError(f"Duplicate type names in schema {schema.schema_name}: "
                               f"{', '.join(duplicated)}")

    shared = sorted(set(enum_names) & set(table_names))
    if shared:
        raise DeclarationError(
            f"Enum and table names collide in schema {schema.schema_name}: {', '.join(shared)}"
        )

    for table in schema.tables:
        duplicated = _duplicates([c.name for c in table.columns])
        if duplicated:
            raise DeclarationError(
                f"Duplicate column names in table {table.name}: {', '.join(duplicated)}"
            )


def build_union(enum_type: EnumType) -> UnionDeclaration:
    """Labels keep their declared sort order."""
    return UnionDeclaration(name=enum_type.name, members=enum_type.labels)


def build_interface(table: Table, enum_names: AbstractSet[str]) -> InterfaceDeclaration:
    properties = [
        FieldDeclaration(
            name=column.name,
            type_expression=resolve_column_type(column, enum_names),
            comment=column.comment,
            default_value=column.default_value,
        )
        for column in table.columns
    ]
    return InterfaceDeclaration(name=table.name, properties=properties)


def build_registry(schema: DatabaseSchema) -> RegistryDeclaration:
    entries = [RegistryEntry(table_name=t.name, interface_name=t.name) for t in schema.tables]
    return RegistryDeclaration(entries=entries)


def _log_unmapped_types(schema: DatabaseSchema, enum_names: AbstractSet[str]) -> None:
    seen = set()
    for table in schema.tables:
        for column in table.columns:
            native_type = column.native_type
            if native_type in enum_names or is_mapped(native_type) or native_type in seen:
                continue
            seen.add(native_type)
            logger.info(
                "No TypeScript mapping for type %s (first seen on %s.%s), using unknown",
                native_type, table.name, column.name
            )


def build_declarations(schema: DatabaseSchema) -> DeclarationFile:
    """Build enum unions, table interfaces and the table registry.

    Raises:
        DeclarationError: If enum, table or column names collide
    """
    check_name_collisions(schema)
    enum_names = frozenset(e.name for e in schema.enums)
    _log_unmapped_types(schema, enum_names)

    return DeclarationFile(
        unions=[build_union(e) for e in schema.enums],
        interfaces=[build_interface(t, enum_names) for t in schema.tables],
        registry=build_registry(schema),
    )
