"""Shared Pydantic models for the admin console.

Wire-level shapes for record sources and the HTTP API live here; the table
engine itself works on plain dataclasses in ``chatadmin.table``.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, Field

# --- Record source models ---


class AdminPagination(BaseModel):
    """Pagination block returned by the admin API list endpoints.

    Endpoints disagree on field names (``page`` vs ``current_page``,
    ``total`` vs ``total_records``); missing fields stay ``None`` so the
    caller can fall back on what it asked for.
    """

    page: int | None = Field(
        default=None, validation_alias=AliasChoices("page", "current_page", "currentPage")
    )
    page_size: int | None = Field(
        default=None,
        validation_alias=AliasChoices("page_size", "pageSize", "records_per_page", "limit"),
    )
    total: int | None = Field(
        default=None, validation_alias=AliasChoices("total", "total_records", "totalRecords")
    )
    total_pages: int | None = Field(
        default=None, validation_alias=AliasChoices("total_pages", "totalPages")
    )


class RecordPage(BaseModel):
    """One page of raw records plus the totals needed to paginate them."""

    records: list[dict[str, Any]] = Field(default_factory=list)
    page: int = 1
    page_size: int = 10
    total: int = 0
    total_pages: int = 1


# --- API response models ---


class ServiceHealth(BaseModel):
    status: Literal["healthy", "unhealthy"]
    error: str | None = None


class HealthResponse(BaseModel):
    status: Literal["healthy", "degraded"]
    record_source: ServiceHealth


class ScreenSummary(BaseModel):
    name: str
    title: str
    server_pagination: bool
    columns: list[str]


class ScreenListResponse(BaseModel):
    screens: list[ScreenSummary]


class HeaderPayload(BaseModel):
    index: int
    key: str
    label: str
    sortable: bool
    indicator: Literal["asc", "desc", "none"] | None = None


class PageButtonPayload(BaseModel):
    kind: Literal["page", "ellipsis"]
    number: int | None = None
    current: bool = False


class PaginationPayload(BaseModel):
    page: int
    page_size: int
    total_items: int
    total_pages: int
    first_item: int
    last_item: int
    prev_disabled: bool
    next_disabled: bool
    page_size_options: list[int]
    buttons: list[PageButtonPayload]


class TableViewResponse(BaseModel):
    """JSON rendition of one rendered table view."""

    screen: str
    headers: list[HeaderPayload]
    rows: list[dict[str, str]]
    pagination: PaginationPayload
    sort_column_index: int | None = None
    sort_direction: Literal["ASC", "DESC"] = "ASC"
    query: str = ""
    empty_message: str | None = None
