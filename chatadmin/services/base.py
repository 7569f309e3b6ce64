"""Abstract record source interface and fetch errors."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Literal

from chatadmin.core.types import RecordPage, ServiceHealth
from chatadmin.table.sorting import SortDirection

logger = logging.getLogger(__name__)

SourceKind = Literal["local", "remote"]
ErrorCategory = Literal["network", "timeout", "auth", "not_found", "client", "server"]
HttpMethod = Literal["GET", "POST"]


class RecordSourceError(Exception):
    """A record fetch failed; nothing reaches the table engine."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def category(self) -> ErrorCategory:
        code = self.status_code
        if code is None:
            return "network"
        if code in (401, 403):
            return "auth"
        if code == 404:
            return "not_found"
        if code == 408:
            return "timeout"
        if 400 <= code < 500:
            return "client"
        return "server"

    @property
    def retryable(self) -> bool:
        """Transport failures, server errors and auth hiccups are retried."""
        return self.category in ("network", "timeout", "server", "auth")


@dataclass(frozen=True)
class ListEndpoint:
    """How one admin API list endpoint is called and where its records sit.

    The admin API is not uniform: most lists are ``POST`` with ``pageSize``,
    some take ``limit``, some are plain ``GET`` and return everything at
    once, and the pagination block is ``pagination`` or ``Pagination``.
    """

    path: str
    items_key: str
    method: HttpMethod = "POST"
    # Body field carrying the page size; None for endpoints without paging.
    page_size_param: str | None = "pageSize"
    pagination_key: str = "pagination"
    extra_body: dict[str, Any] = field(default_factory=dict)

    @property
    def paged(self) -> bool:
        return self.page_size_param is not None


class RecordSource(ABC):
    """Supplies raw entity records to the list screens."""

    @abstractmethod
    async def list_page(
        self,
        endpoint: ListEndpoint,
        *,
        page: int = 1,
        page_size: int = 10,
        search: str = "",
        sort_by: str | None = None,
        sort_order: SortDirection = "ASC",
    ) -> RecordPage:
        """Fetch one page of records from ``endpoint``."""

    @abstractmethod
    async def health(self) -> ServiceHealth:
        """Report whether the source is reachable."""

    async def list_all(
        self,
        endpoint: ListEndpoint,
        *,
        search: str = "",
        page_size: int = 50,
    ) -> list[dict[str, Any]]:
        """Fetch every page of ``endpoint`` and concatenate the records.

        The first page reports the page count; the rest are fetched
        concurrently and appended in page order.
        """
        first = await self.list_page(endpoint, page=1, page_size=page_size, search=search)
        rest = await asyncio.gather(
            *(
                self.list_page(endpoint, page=page, page_size=page_size, search=search)
                for page in range(2, first.total_pages + 1)
            )
        )
        records = list(first.records)
        for page in rest:
            records.extend(page.records)
        logger.debug("Loaded %d records from %s", len(records), endpoint.path)
        return records
