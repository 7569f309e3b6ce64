"""Table render orchestration: filter, sort, paginate, emit a view.

``DataTable`` is a stateless-per-call transformation of the records handed
to :meth:`DataTable.render`.  The only state it keeps is the fallback
page / page size / sort used for whatever the caller does not control.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Literal

from .columns import Column, column_key, display_value
from .filtering import filter_records
from .pagination import PageControls, PaginationInfo, page_controls, paginate, slice_page
from .sorting import SortDirection, sort_records
from .state import (
    UNSET,
    InternalState,
    Owned,
    SortState,
    TableControls,
    is_set,
    resolve_ownership,
)

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE_OPTIONS = (10, 20, 30)
NO_RESULTS = "No results"


@dataclass(frozen=True)
class HeaderView:
    index: int
    key: str
    label: str
    sortable: bool
    indicator: Literal["asc", "desc", "none"] | None
    class_name: str = ""


@dataclass(frozen=True)
class RowView:
    index: int
    record: Any
    cells: list[Any]


@dataclass(frozen=True)
class TableActions:
    """Interaction callbacks bound to one rendered view."""

    columns: Sequence[Column]
    sort: Owned[SortState]
    page: Owned[int]
    page_size: Owned[int]
    info: PaginationInfo

    def header_click(self, index: int) -> None:
        """Toggle sorting on a sortable column; other clicks are ignored."""
        if not 0 <= index < len(self.columns) or not self.columns[index].sortable:
            logger.debug("Ignoring header click on column %s", index)
            return
        current = self.sort.value
        direction: SortDirection = "ASC"
        if current.column_index == index:
            direction = "DESC" if current.direction == "ASC" else "ASC"
        self.sort.set(SortState(column_index=index, direction=direction))

    def page_click(self, page: int) -> None:
        self.page.set(max(1, min(page, self.info.total_pages)))

    def previous(self) -> None:
        self.page_click(self.info.page - 1)

    def next(self) -> None:
        self.page_click(self.info.page + 1)

    def page_size_change(self, page_size: int) -> None:
        """Change the page size and return to the first page."""
        self.page_size.set(page_size)
        self.page.set(1)


@dataclass(frozen=True)
class TableView:
    """Result of one render pass."""

    headers: list[HeaderView]
    rows: list[RowView]
    pagination: PageControls
    sort: SortState
    actions: TableActions
    server_pagination: bool = False
    empty_message: str = NO_RESULTS

    @property
    def is_empty(self) -> bool:
        return not self.rows


class DataTable:
    """Generic table engine over caller-supplied records and columns.

    Args:
        columns: Column descriptors, in display order.
        page_size_options: Choices offered by the rows-per-page selector.
        default_page_size: Initial page size when the caller does not own it.
        server_pagination: When True, records are one already-prepared page
            and ``total_items`` comes from the caller.
    """

    def __init__(
        self,
        columns: Sequence[Column],
        *,
        page_size_options: Sequence[int] = DEFAULT_PAGE_SIZE_OPTIONS,
        default_page_size: int = 10,
        server_pagination: bool = False,
        empty_message: str = NO_RESULTS,
    ) -> None:
        self.columns = list(columns)
        self.page_size_options = list(page_size_options)
        self.server_pagination = server_pagination
        self.empty_message = empty_message
        self.state = InternalState(page=1, page_size=max(1, default_page_size))
        self._memo: tuple[Sequence[Any], str, SortState, list[Any]] | None = None

    # -- internal setters ---------------------------------------------------

    def _set_page(self, page: int) -> None:
        self.state.page = page

    def _set_page_size(self, page_size: int) -> None:
        self.state.page_size = page_size
        self.state.page = 1

    def _set_sort(self, sort: SortState) -> None:
        self.state.sort = sort

    def reset(self) -> None:
        """Drop internal page, page-size and sort state."""
        page_size = self.state.page_size
        self.state = InternalState(page=1, page_size=page_size)
        self._memo = None

    # -- pipeline -----------------------------------------------------------

    def _resolve_sort(self, controls: TableControls) -> Owned[SortState]:
        internal = self.state.sort
        external: Any = UNSET
        if is_set(controls.sort_column_index) or is_set(controls.sort_direction):
            external = SortState(
                column_index=(
                    controls.sort_column_index
                    if is_set(controls.sort_column_index)
                    else internal.column_index
                ),
                direction=(
                    controls.sort_direction
                    if is_set(controls.sort_direction)
                    else internal.direction
                ),
            )
        handler = controls.on_sort_change
        external_setter = None
        if handler is not None:

            def external_setter(sort: SortState) -> None:
                handler(sort.column_index, sort.direction)

        return resolve_ownership(external, external_setter, internal, self._set_sort)

    def _prepare(self, records: Sequence[Any], query: str, sort: SortState) -> list[Any]:
        memo = self._memo
        if (
            memo is not None
            and memo[0] is records
            and memo[1] == query
            and memo[2] == sort
        ):
            return memo[3]

        candidates = filter_records(records, query)
        column = None
        if sort.column_index is not None and 0 <= sort.column_index < len(self.columns):
            column = self.columns[sort.column_index]
        if column is not None:
            prepared = sort_records(candidates, column, sort.direction)
        else:
            prepared = list(candidates)

        self._memo = (records, query, sort, prepared)
        return prepared

    def _headers(self, sort: SortState) -> list[HeaderView]:
        headers: list[HeaderView] = []
        for index, column in enumerate(self.columns):
            indicator: Literal["asc", "desc", "none"] | None = None
            if column.sortable:
                if sort.column_index == index:
                    indicator = "asc" if sort.direction == "ASC" else "desc"
                else:
                    indicator = "none"
            headers.append(
                HeaderView(
                    index=index,
                    key=column_key(column, index),
                    label=column.header,
                    sortable=column.sortable,
                    indicator=indicator,
                    class_name=column.class_name,
                )
            )
        return headers

    def render(
        self,
        records: Sequence[Any],
        controls: TableControls | None = None,
        query: str = "",
    ) -> TableView:
        """Run filter, sort and pagination over ``records``.

        Args:
            records: Full record sequence (client mode) or one page of
                records (server mode).
            controls: Caller-owned state and change handlers.
            query: Global search text; client mode only.

        Returns:
            The visible rows, header indicators, page buttons and bound
            interaction callbacks.
        """
        controls = controls or TableControls()
        page = resolve_ownership(
            controls.page, controls.on_page_change, self.state.page, self._set_page
        )
        page_size = resolve_ownership(
            controls.page_size,
            controls.on_page_size_change,
            self.state.page_size,
            self._set_page_size,
        )
        sort = self._resolve_sort(controls)

        if self.server_pagination:
            visible = list(records)
            total_items = controls.total_items if is_set(controls.total_items) else len(visible)
            info = paginate(total_items, page.value, page_size.value)
        else:
            prepared = self._prepare(records, query, sort.value)
            info = paginate(len(prepared), page.value, page_size.value)
            visible = slice_page(prepared, info)

        rows = [
            RowView(
                index=row_index,
                record=record,
                cells=[display_value(record, column) for column in self.columns],
            )
            for row_index, record in enumerate(visible)
        ]
        return TableView(
            headers=self._headers(sort.value),
            rows=rows,
            pagination=page_controls(info, self.page_size_options, len(rows)),
            sort=sort.value,
            actions=TableActions(
                columns=self.columns,
                sort=sort,
                page=page,
                page_size=page_size,
                info=info,
            ),
            server_pagination=self.server_pagination,
            empty_message=self.empty_message,
        )
