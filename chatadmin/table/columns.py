"""Column descriptors and value extraction for the table engine."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

Accessor = str | Callable[[Any], Any]


@dataclass(frozen=True)
class Column:
    """Describes how to extract, display and sort one table column.

    ``accessor`` is either a field name on the record or a function of the
    record.  ``cell`` produces the display artifact; when both are present
    the cell wins for display while the accessor still drives sorting and
    filtering.
    """

    header: str
    accessor: Accessor | None = None
    cell: Callable[[Any], Any] | None = None
    id: str | None = None
    sortable: bool = False
    class_name: str = ""


def column_key(column: Column, index: int) -> str:
    """Return the stable identifier of a column (its id or position)."""
    return column.id if column.id is not None else str(index)


def field_value(record: Any, field: str) -> Any:
    """Read a named field from a mapping or attribute-style record."""
    if isinstance(record, Mapping):
        return record.get(field)
    return getattr(record, field, None)


def _accessor_value(record: Any, accessor: Accessor | None) -> Any:
    if callable(accessor):
        return accessor(record)
    if isinstance(accessor, str):
        return field_value(record, accessor)
    return None


def display_value(record: Any, column: Column) -> Any:
    """Value shown in the cell: ``cell`` output, else the accessor value."""
    if column.cell is not None:
        return column.cell(record)
    return _accessor_value(record, column.accessor)


def sort_value(record: Any, column: Column) -> Any:
    """Scalar used for sorting.

    Precedence: function accessor, named field, ``cell`` output as-is, ``None``.
    """
    if column.accessor is not None:
        return _accessor_value(record, column.accessor)
    if column.cell is not None:
        return column.cell(record)
    return None
