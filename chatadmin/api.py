"""Chat admin console API: FastAPI app serving the entity list screens.

Every list screen is rendered by the shared table engine.  Page, page size,
sort and search travel in the query string, so the URL owns the table state
and each request renders the engine in controlled mode.

Endpoints:
- GET /v1/screens: List available screens
- GET /v1/screens/{name}: HTML list page
- GET /v1/screens/{name}/table: The same table view as JSON
- GET /v1/health: Health check

Example usage::

    curl "http://localhost:8080/v1/screens/users/table?page=2&per_page=20&sort=2&dir=DESC&q=ali"
"""

from __future__ import annotations

import logging
import os
from typing import Any

import hydra
import uvicorn
from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import HTMLResponse
from omegaconf import DictConfig, OmegaConf

from .core.config import ConsoleConfig, build_config
from .core.types import (
    HeaderPayload,
    HealthResponse,
    PageButtonPayload,
    PaginationPayload,
    ScreenListResponse,
    ScreenSummary,
    TableViewResponse,
)
from .dashboard import rendering as dashboard_rendering
from .screens import SCREENS, Screen, get_screen
from .services import get_record_source
from .services.base import RecordSource, RecordSourceError
from .table import SortDirection, TableControls, TableView
from .table.sorting import use_system_collation

logger = logging.getLogger(__name__)

web_app = FastAPI(
    title="Chat Admin Console",
    description="Admin list screens for the messaging product",
    version="0.1.0",
)


def configure_web_app(cfg: ConsoleConfig) -> None:
    """Inject runtime config and the matching record source into the app."""
    web_app.state.runtime_config = cfg
    web_app.state.record_source = get_record_source(cfg)
    logger.info("Configured admin console with %s record source", cfg.mode)


def _runtime_config() -> ConsoleConfig:
    cfg = getattr(web_app.state, "runtime_config", None)
    if isinstance(cfg, ConsoleConfig):
        return cfg
    raise TypeError("Admin console has not been configured")


def _record_source() -> RecordSource:
    source = getattr(web_app.state, "record_source", None)
    if isinstance(source, RecordSource):
        return source
    raise TypeError("Admin console has no record source")


# ---------------------------------------------------------------------------
# Screen helpers
# ---------------------------------------------------------------------------


def _resolve_screen(name: str) -> Screen:
    try:
        return get_screen(name)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=f"Unknown screen: {name}") from e


def _resolve_page_size(per_page: int | None) -> int:
    cfg = _runtime_config()
    if per_page is None:
        return cfg.default_page_size
    if per_page > cfg.max_page_size:
        raise HTTPException(
            status_code=400,
            detail=f"per_page must be at most {cfg.max_page_size}",
        )
    return per_page


def _resolve_sort(screen: Screen, sort: int | None) -> int | None:
    """Drop sort requests for missing or non-sortable columns."""
    if sort is None or not 0 <= sort < len(screen.columns):
        return None
    return sort if screen.columns[sort].sortable else None


async def _load_view(
    screen: Screen,
    *,
    page: int,
    per_page: int | None,
    sort: int | None,
    direction: SortDirection,
    query: str,
) -> TableView:
    """Fetch records for ``screen`` and render them through the table engine."""
    cfg = _runtime_config()
    source = _record_source()
    page_size = _resolve_page_size(per_page)
    sort_index = _resolve_sort(screen, sort)
    table = screen.build_table(cfg)

    try:
        if screen.server_pagination:
            result = await source.list_page(
                screen.endpoint,
                page=page,
                page_size=page_size,
                search=query,
                sort_by=screen.sort_field(sort_index),
                sort_order=direction,
            )
            records = [screen.to_record(raw) for raw in result.records]
            controls = TableControls(
                page=result.page,
                page_size=page_size,
                total_items=result.total,
                sort_column_index=sort_index,
                sort_direction=direction,
            )
            return table.render(records, controls)

        raw_records = await source.list_all(screen.endpoint)
    except RecordSourceError as e:
        logger.error(
            "Loading screen %s failed (%s): %s", screen.name, e.category, e, exc_info=True,
        )
        raise HTTPException(status_code=502, detail=f"Record source error: {e}") from e

    records = [screen.to_record(raw) for raw in raw_records]
    controls = TableControls(
        page=page,
        page_size=page_size,
        sort_column_index=sort_index,
        sort_direction=direction,
    )
    return table.render(records, controls, query=query)


def _view_response(screen: Screen, view: TableView, query: str) -> TableViewResponse:
    info = view.pagination.info
    return TableViewResponse(
        screen=screen.name,
        headers=[
            HeaderPayload(
                index=h.index,
                key=h.key,
                label=h.label,
                sortable=h.sortable,
                indicator=h.indicator,
            )
            for h in view.headers
        ],
        rows=[
            {
                header.key: dashboard_rendering.cell_text(value)
                for header, value in zip(view.headers, row.cells)
            }
            for row in view.rows
        ],
        pagination=PaginationPayload(
            page=info.page,
            page_size=info.page_size,
            total_items=info.total_items,
            total_pages=info.total_pages,
            first_item=view.pagination.first_item,
            last_item=view.pagination.last_item,
            prev_disabled=view.pagination.prev_disabled,
            next_disabled=view.pagination.next_disabled,
            page_size_options=view.pagination.page_size_options,
            buttons=[
                PageButtonPayload(kind=b.kind, number=b.number, current=b.current)
                for b in view.pagination.buttons
            ],
        ),
        sort_column_index=view.sort.column_index,
        sort_direction=view.sort.direction,
        query=query,
        empty_message=view.empty_message if view.is_empty else None,
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@web_app.get("/v1/screens", response_model=ScreenListResponse)
async def list_screens() -> ScreenListResponse:
    """List the available admin screens."""
    return ScreenListResponse(
        screens=[
            ScreenSummary(
                name=screen.name,
                title=screen.title,
                server_pagination=screen.server_pagination,
                columns=[column.header for column in screen.columns],
            )
            for screen in SCREENS.values()
        ]
    )


@web_app.get("/v1/screens/{name}", response_class=HTMLResponse)
async def screen_page(
    name: str,
    page: int = Query(default=1, ge=1),
    per_page: int | None = Query(default=None, ge=1),
    sort: int | None = Query(default=None),
    direction: SortDirection = Query(default="ASC", alias="dir"),
    q: str = Query(default=""),
) -> HTMLResponse:
    """Serve one admin list screen as HTML.

    Args:
        name: Screen name (``users``, ``groups``, ...).
        page: Page number (1-indexed); clamped to the last page.
        per_page: Rows per page (defaults to the configured page size).
        sort: Index of the sorted column.
        direction: ``ASC`` or ``DESC``.
        q: Search text.

    Returns:
        Rendered list page.
    """
    screen = _resolve_screen(name)
    view = await _load_view(
        screen, page=page, per_page=per_page, sort=sort, direction=direction, query=q,
    )
    content = dashboard_rendering.console_page_html(
        screen.title, view, f"/v1/screens/{screen.name}", query=q,
    )
    return HTMLResponse(content=content)


@web_app.get("/v1/screens/{name}/table", response_model=TableViewResponse)
async def screen_table(
    name: str,
    page: int = Query(default=1, ge=1),
    per_page: int | None = Query(default=None, ge=1),
    sort: int | None = Query(default=None),
    direction: SortDirection = Query(default="ASC", alias="dir"),
    q: str = Query(default=""),
) -> TableViewResponse:
    """Serve one admin list screen as a JSON table view."""
    screen = _resolve_screen(name)
    view = await _load_view(
        screen, page=page, per_page=per_page, sort=sort, direction=direction, query=q,
    )
    return _view_response(screen, view, q)


@web_app.get("/v1/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check health of the API and its record source."""
    source_health = await _record_source().health()
    status = "healthy" if source_health.status == "healthy" else "degraded"
    return HealthResponse(status=status, record_source=source_health)


@web_app.get("/health")
async def health_check_root() -> HealthResponse:
    """Health check at root path (alias for /v1/health)."""
    return await health_check()


@web_app.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint with API info."""
    return {
        "name": "Chat Admin Console",
        "version": "0.1.0",
        "screens": sorted(SCREENS),
        "docs": "/docs",
    }


def run(cfg: ConsoleConfig, host: str | None = None, port: int | None = None) -> None:
    """Configure the app and serve it with uvicorn."""
    use_system_collation()
    configure_web_app(cfg)
    host = host or os.environ.get("CHATADMIN_API_HOST", "0.0.0.0")
    port = port or int(os.environ.get("CHATADMIN_API_PORT", "8080"))
    uvicorn.run(web_app, host=host, port=port)


@hydra.main(version_base=None, config_path="core/configs", config_name="local")
def main(cfg: DictConfig) -> None:
    """Hydra entry point for running the API with an explicit config profile."""
    container = OmegaConf.to_container(cfg, resolve=True)
    if not isinstance(container, dict):
        raise TypeError("Hydra did not produce a mapping config")
    run(build_config(container))  # type: ignore[arg-type]


if __name__ == "__main__":
    main()
