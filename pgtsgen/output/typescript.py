"""TypeScript rendering for generated declarations."""
import re
from typing import List, Optional

from pgtsgen.models.declarations import (
    DeclarationFile,
    FieldDeclaration,
    InterfaceDeclaration,
    RegistryDeclaration,
    UnionDeclaration,
)

HEADER = "// This file is auto-generated. Do not edit it manually."
INDENT = "  "

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def quote_string(value: str) -> str:
    """Single-quoted TypeScript string literal."""
    escaped = (value.replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n")
               .replace("\r", "\\r").replace("\u2028", "\\u2028").replace("\u2029", "\\u2029"))
    return f"'{escaped}'"


def property_key(name: str) -> str:
    """Bare identifier when possible, quoted otherwise."""
    if _IDENTIFIER.match(name):
        return name
    return quote_string(name)


def _doc_lines(text: str) -> List[str]:
    return text.replace("*/", "*\\/").splitlines() or [""]


def render_union(union: UnionDeclaration) -> str:
    """Render an enum as a union of string literals, one member per line."""
    if not union.members:
        return f"export type {union.name} = never;"
    members = " |\n".join(f"{INDENT}{quote_string(m)}" for m in union.members)
    return f"export type {union.name} =\n{members};"


def _render_default(default_value: Optional[str]) -> List[str]:
    lines = _doc_lines("null" if default_value is None else default_value)
    return [f"@default {lines[0]}"] + lines[1:]


def render_field(field: FieldDeclaration) -> str:
    doc = []
    if field.comment:
        doc.extend(_doc_lines(field.comment))
    doc.extend(_render_default(field.default_value))

    lines = [f"{INDENT}/**"]
    lines.extend(f"{INDENT} * {line}".rstrip() for line in doc)
    lines.append(f"{INDENT} */")
    lines.append(f"{INDENT}{property_key(field.name)}: {field.type_expression};")
    return "\n".join(lines)


def render_interface(interface: InterfaceDeclaration) -> str:
    body = "\n\n".join(render_field(f) for f in interface.properties)
    if not body:
        return f"export interface {interface.name} {{\n}}"
    return f"export interface {interface.name} {{\n{body}\n}}"


def render_registry(registry: RegistryDeclaration) -> str:
    """Render the module augmentation that registers every table."""
    lines = [
        f"declare module {quote_string(registry.module)} {{",
        f"{INDENT}interface {registry.interface_name} {{",
    ]
    for entry in registry.entries:
        lines.append(f"{INDENT * 2}{property_key(entry.table_name)}: {entry.interface_name};")
    lines.append(f"{INDENT}}}")
    lines.append("}")
    return "\n".join(lines)


def render_typescript(declarations: DeclarationFile) -> str:
    """Render a declaration file.

    Sections are the header, enum unions, table interfaces and the registry,
    separated by blank lines. Empty sections are left out.
    """
    sections = [HEADER]
    if declarations.unions:
        sections.append("\n\n".join(render_union(u) for u in declarations.unions))
    if declarations.interfaces:
        sections.append("\n\n".join(render_interface(i) for i in declarations.interfaces))
    sections.append(render_registry(declarations.registry))
    return "\n\n".join(sections) + "\n"
