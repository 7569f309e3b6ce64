"""Record source backed by JSON fixture files on disk.

Each endpoint maps to ``<fixtures_dir>/<endpoint>.json``, holding either a
plain list of records or the admin API envelope.  Server-side search, sort
and slicing are emulated with the table engine's own filter and sort.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from chatadmin.core.types import RecordPage, ServiceHealth
from chatadmin.table.columns import Column
from chatadmin.table.filtering import filter_records
from chatadmin.table.pagination import paginate, slice_page
from chatadmin.table.sorting import SortDirection, sort_records

from .base import ListEndpoint, RecordSource, RecordSourceError

logger = logging.getLogger(__name__)


def fixture_path(fixtures_dir: str, path: str) -> Path:
    name = path.strip("/").replace("/", "__") or "index"
    return Path(fixtures_dir) / f"{name}.json"


def read_fixture(fixtures_dir: str, endpoint: ListEndpoint) -> list[dict[str, Any]]:
    """Load the records stored for ``endpoint``.

    Raises:
        RecordSourceError: If the file is missing or is not valid JSON.
    """
    path = fixture_path(fixtures_dir, endpoint.path)
    if not path.exists():
        raise RecordSourceError(f"No fixture for endpoint {endpoint.path!r}", status_code=404)
    try:
        with path.open("r", encoding="utf-8") as file_obj:
            payload = json.load(file_obj)
    except (OSError, json.JSONDecodeError) as exc:
        raise RecordSourceError(f"Failed to read fixture {path}: {exc}") from exc

    if isinstance(payload, dict):
        data = payload.get("data", payload)
        payload = data.get(endpoint.items_key, []) if isinstance(data, dict) else data
    if not isinstance(payload, list):
        raise RecordSourceError(f"Fixture {path} does not hold a record list")

    records: list[dict[str, Any]] = []
    for item in payload:
        if isinstance(item, dict):
            records.append(item)
        else:
            logger.warning("Skipping non-object record in %s", path)
    return records


class FixtureRecordSource(RecordSource):
    """Serve records from a directory of JSON files."""

    def __init__(self, fixtures_dir: str) -> None:
        self.fixtures_dir = fixtures_dir

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
        records = await asyncio.to_thread(read_fixture, self.fixtures_dir, endpoint)
        candidates = filter_records(records, search)
        if sort_by:
            candidates = sort_records(candidates, Column(header=sort_by, accessor=sort_by), sort_order)
        if not endpoint.paged:
            page, page_size = 1, max(1, len(candidates))
        info = paginate(len(candidates), page, page_size)
        return RecordPage(
            records=slice_page(candidates, info),
            page=info.page,
            page_size=info.page_size,
            total=info.total_items,
            total_pages=info.total_pages,
        )

    async def health(self) -> ServiceHealth:
        if Path(self.fixtures_dir).is_dir():
            return ServiceHealth(status="healthy")
        return ServiceHealth(
            status="unhealthy", error=f"fixtures_dir not found: {self.fixtures_dir}"
        )
