"""Record source that calls the messaging product's admin API over HTTP.

Most list endpoints take a JSON body ``{page, pageSize, search?, sortBy?,
sortOrder?}`` and answer with the envelope below. Per-endpoint differences
(method, page size field, pagination key) come from ``ListEndpoint``::

    {"status": true, "data": {"<items_key>": [...], "pagination": {...}}, "message": ""}
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from chatadmin.core.config import RemoteConfig
from chatadmin.core.types import AdminPagination, RecordPage, ServiceHealth
from chatadmin.table.pagination import total_pages_for
from chatadmin.table.sorting import SortDirection

from .base import ListEndpoint, RecordSource, RecordSourceError

logger = logging.getLogger(__name__)

RETRY_BACKOFF_S = 0.5


def _error_message(resp: httpx.Response) -> str:
    try:
        payload = resp.json()
    except ValueError:
        return resp.text[:200] or resp.reason_phrase
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return resp.reason_phrase


class RemoteRecordSource(RecordSource):
    """Fetch records from the admin API with bounded retries."""

    def __init__(
        self,
        cfg: RemoteConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = cfg.api_base_url.rstrip("/")
        self.timeout_s = cfg.request_timeout_s
        self.max_retries = max(0, cfg.max_retries)
        self._token = cfg.api_token
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        attempt = 0
        while True:
            try:
                async with httpx.AsyncClient(
                    base_url=self.base_url,
                    timeout=self.timeout_s,
                    transport=self._transport,
                ) as client:
                    resp = await client.request(
                        method, path, json=json_body, params=params, headers=self._headers(),
                    )
                if resp.is_error:
                    raise RecordSourceError(
                        f"{method} {path} failed: {_error_message(resp)}",
                        status_code=resp.status_code,
                    )
                return resp.json()
            except httpx.TimeoutException as exc:
                error = RecordSourceError(f"{method} {path} timed out: {exc}", status_code=408)
            except httpx.HTTPError as exc:
                error = RecordSourceError(f"{method} {path} failed: {exc}")
            except RecordSourceError as exc:
                error = exc
            except ValueError as exc:
                raise RecordSourceError(f"{method} {path} returned invalid JSON") from exc

            if not error.retryable or attempt >= self.max_retries:
                raise error
            attempt += 1
            logger.warning(
                "Retrying %s %s (attempt %d/%d): %s",
                method, path, attempt, self.max_retries, error,
            )
            await asyncio.sleep(RETRY_BACKOFF_S * attempt)

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
        body: dict[str, Any] = dict(endpoint.extra_body)
        if endpoint.page_size_param:
            body["page"] = page
            body[endpoint.page_size_param] = page_size
        if search:
            body["search"] = search
        if sort_by:
            body["sortBy"] = sort_by
            body["sortOrder"] = sort_order

        method, path = endpoint.method, endpoint.path
        if method == "GET":
            payload = await self._request(method, path, params=body or None)
        else:
            payload = await self._request(method, path, json_body=body)
        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            raise RecordSourceError(f"{method} {path} returned no data block")

        items = data.get(endpoint.items_key) or []
        records = [item for item in items if isinstance(item, dict)]
        if len(records) != len(items):
            logger.warning("Dropped %d non-object records from %s", len(items) - len(records), path)

        try:
            pagination = AdminPagination.model_validate(data.get(endpoint.pagination_key) or {})
        except ValidationError as exc:
            raise RecordSourceError(f"{method} {path} returned invalid pagination") from exc

        page_size = pagination.page_size or page_size
        total = pagination.total if pagination.total is not None else len(records)
        if not endpoint.paged:
            # The whole list arrives in one response.
            total_pages = 1
        elif pagination.total_pages is not None:
            total_pages = pagination.total_pages
        elif pagination.total is not None:
            total_pages = total_pages_for(total, page_size)
        else:
            total_pages = 1
        return RecordPage(
            records=records,
            page=pagination.page or page,
            page_size=page_size,
            total=total,
            total_pages=max(1, total_pages),
        )

    async def health(self) -> ServiceHealth:
        try:
            await self._request("GET", "/health")
        except RecordSourceError as exc:
            return ServiceHealth(status="unhealthy", error=str(exc))
        return ServiceHealth(status="healthy")
