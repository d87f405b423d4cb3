"""PostgreSQL to TypeScript type mapping."""
from types import MappingProxyType
from typing import AbstractSet, Dict, Mapping

from pgtsgen.models.schema import Column

UNKNOWN_TYPE = "unknown"
NULL_TYPE = "null"

_SCALAR_TYPES: Dict[str, str] = {
    # Numeric types
    'int2': 'number',
    'int4': 'number',
    'int8': 'string',  # bigint exceeds Number.MAX_SAFE_INTEGER
    'float4': 'number',
    'float8': 'number',
    'numeric': 'string',
    'money': 'string',

    # Character types
    'varchar': 'string',
    'char': 'string',
    'bpchar': 'string',
    'text': 'string',
    'citext': 'string',
    'uuid': 'string',

    # Boolean type
    'bool': 'boolean',

    # Date/Time types
    'timestamp': 'Date',
    'timestamptz': 'Date',
    'date': 'Date',
    'time': 'string',
    'timetz': 'string',
    'interval': 'string',

    # JSON types (payload structure is not introspected)
    'json': UNKNOWN_TYPE,
    'jsonb': UNKNOWN_TYPE,

    # Network address types
    'inet': 'string',
    'cidr': 'string',
    'macaddr': 'string',
    'macaddr8': 'string',

    # Geometric types
    'point': 'string',
    'line': 'string',
    'lseg': 'string',
    'box': 'string',
    'path': 'string',
    'polygon': 'string',
    'circle': 'string',
}


def _with_array_types(scalars: Dict[str, str]) -> Dict[str, str]:
    """Add the one-dimensional array variant (``_<udt>``) of every scalar."""
    mapping = dict(scalars)
    for udt_name, ts_type in scalars.items():
        mapping[f"_{udt_name}"] = f"{ts_type}[]"
    return mapping


PG_TO_TS_TYPES: Mapping[str, str] = MappingProxyType(_with_array_types(_SCALAR_TYPES))


def is_mapped(native_type: str) -> bool:
    """Return True if the native type has an entry in the mapping table."""
    return native_type in PG_TO_TS_TYPES


def map_type(native_type: str, enum_names: AbstractSet[str] = frozenset()) -> str:
    """Map a PostgreSQL udt_name to a TypeScript type expression.

    Enum names take precedence over the mapping table so that enum columns
    reference the generated union type. Anything unrecognized degrades to
    ``unknown`` instead of raising.
    """
    if native_type in enum_names:
        return native_type
    return PG_TO_TS_TYPES.get(native_type, UNKNOWN_TYPE)


def apply_nullability(base_type: str, is_nullable: bool) -> str:
    """Union the base type with null for nullable columns."""
    if is_nullable:
        return f"{base_type} | {NULL_TYPE}"
    return base_type


def resolve_column_type(column: Column, enum_names: AbstractSet[str] = frozenset()) -> str:
    """Full TypeScript type of a column, nullability included."""
    return apply_nullability(map_type(column.native_type, enum_names), column.is_nullable)
