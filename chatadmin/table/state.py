"""Controlled / uncontrolled state resolution for the table engine.

Each piece of table state (page, page size, sort) is owned either by the
caller or by the table itself.  The caller owns a value by supplying it, and
owns its mutation by supplying a change handler; anything left unset falls
back to the table's internal state.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from .sorting import SortDirection

T = TypeVar("T")


class _Unset:
    """Marker for state the caller did not supply."""

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def is_set(value: Any) -> bool:
    return value is not UNSET


@dataclass(frozen=True)
class SortState:
    column_index: int | None = None
    direction: SortDirection = "ASC"


@dataclass(frozen=True)
class Owned(Generic[T]):
    """Effective value and setter for one piece of state."""

    value: T
    set: Callable[[T], None]
    controlled: bool


def resolve_ownership(
    external_value: Any,
    external_setter: Callable[[T], None] | None,
    internal_value: T,
    internal_setter: Callable[[T], None],
) -> Owned[T]:
    """Pick the caller's value and setter where supplied, else the internal ones.

    The value and the setter resolve independently.  A setter alone receives
    every change while the displayed value stays on internal state, which no
    longer updates.  A value alone pins the display and internal updates run.
    """
    value = external_value if is_set(external_value) else internal_value
    setter = external_setter if external_setter is not None else internal_setter
    return Owned(
        value=value,
        set=setter,
        controlled=is_set(external_value) and external_setter is not None,
    )


@dataclass
class TableControls:
    """Externally supplied state and change handlers.

    Leave a field as ``UNSET`` (or a handler as ``None``) to let the table
    manage that piece itself.  ``total_items`` is required in server mode.
    """

    page: Any = UNSET
    page_size: Any = UNSET
    total_items: Any = UNSET
    on_page_change: Callable[[int], None] | None = None
    on_page_size_change: Callable[[int], None] | None = None
    sort_column_index: Any = UNSET
    sort_direction: Any = UNSET
    on_sort_change: Callable[[int | None, SortDirection], None] | None = None


@dataclass
class InternalState:
    """State held by a table instance for whatever the caller does not own."""

    page: int = 1
    page_size: int = 10
    sort: SortState = field(default_factory=SortState)
