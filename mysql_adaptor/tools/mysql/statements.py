"""
SQL statement assembly for MySQL.

Statements are built from column/value mappings by independent, pure
assemblers. Each returns a SqlFragment: text with ``%s`` placeholders plus
the parameter values in placeholder order. Fragments are combined by the
caller and rendered into a literal statement with PyMySQL's escaping.
"""

import json
from dataclasses import dataclass
from typing import Any, Mapping

from pymysql.converters import escape_item

from mysql_adaptor.core.common import DateTimeEncoder


@dataclass(frozen=True)
class SqlFragment:
    text: str
    params: tuple = ()

    def __add__(self, other: "SqlFragment") -> "SqlFragment":
        return SqlFragment(f"{self.text} {other.text}", self.params + other.params)


def quote_identifier(name: str) -> str:
    """Backtick-quote one identifier, doubling embedded backticks."""
    name = str(name)
    if not name:
        raise ValueError("Identifier must not be empty")
    # '%' is doubled because fragment text goes through %-formatting on render
    return "`" + name.replace("`", "``").replace("%", "%%") + "`"


def quote_table(table: str) -> str:
    """Quote ``table`` or ``schema.table``."""
    parts = str(table).split(".")
    return ".".join(quote_identifier(part) for part in parts)


def _check_values(values: Mapping[str, Any]) -> None:
    if not isinstance(values, Mapping):
        raise TypeError(f"Field values must be a mapping, got {type(values).__name__}")
    if not values:
        raise ValueError("No fields to write")


def _param(value: Any) -> Any:
    # JSON columns: nested structures are sent as JSON text
    if isinstance(value, (dict, list, tuple, set, frozenset)):
        return json.dumps(value, cls=DateTimeEncoder)
    return value


def insert_fragment(table: str, values: Mapping[str, Any]) -> SqlFragment:
    """``INSERT INTO `t` (`a`, `b`) VALUES (%s, %s)`` for a single row."""
    _check_values(values)
    columns = ", ".join(quote_identifier(column) for column in values)
    placeholders = ", ".join("%s" for _ in values)
    return SqlFragment(
        f"INSERT INTO {quote_table(table)} ({columns}) VALUES ({placeholders})",
        tuple(_param(v) for v in values.values()),
    )


def assignment_fragment(values: Mapping[str, Any]) -> SqlFragment:
    """```a` = %s, `b` = %s`` assignment list."""
    _check_values(values)
    assignments = ", ".join(f"{quote_identifier(column)} = %s" for column in values)
    return SqlFragment(assignments, tuple(_param(v) for v in values.values()))


def upsert_fragment(table: str, values: Mapping[str, Any]) -> SqlFragment:
    """INSERT ... ON DUPLICATE KEY UPDATE with the same columns on both sides."""
    return (
        insert_fragment(table, values)
        + SqlFragment("ON DUPLICATE KEY UPDATE")
        + assignment_fragment(values)
    )


def render(fragment: SqlFragment, charset: str = "utf8mb4") -> str:
    """Substitute escaped literals for the placeholders."""
    return fragment.text % tuple(escape_item(param, charset) for param in fragment.params)
