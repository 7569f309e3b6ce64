"""Chat admin CLI: inspect the list screens from a terminal.

Usage:
    chatadmin screens
    chatadmin show users --per-page 20 --sort 2 --desc --page 3
    chatadmin serve --port 8080
    chatadmin health
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Any

from .core.config import get_config
from .dashboard.rendering import cell_text
from .screens import SCREENS, Screen, get_screen
from .services import get_record_source
from .services.base import RecordSource, RecordSourceError
from .table import DataTable, TableControls, TableView
from .table.sorting import use_system_collation

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Plain-text rendering
# ---------------------------------------------------------------------------

def format_table(view: TableView) -> str:
    """Render a view as an aligned plain-text table with a status line."""
    labels = []
    for header in view.headers:
        marker = {"asc": " ^", "desc": " v"}.get(header.indicator or "", "")
        labels.append(header.label + marker)
    rows = [[cell_text(value) for value in row.cells] for row in view.rows]
    widths = [
        max([len(label)] + [len(row[i]) for row in rows]) for i, label in enumerate(labels)
    ]

    def _line(cells: list[str]) -> str:
        return "  ".join(cell.ljust(width) for cell, width in zip(cells, widths)).rstrip()

    lines = [_line(labels), _line(["-" * width for width in widths])]
    if rows:
        lines.extend(_line(row) for row in rows)
    else:
        lines.append(view.empty_message)

    controls = view.pagination
    pages = " ".join(
        "..." if button.number is None
        else f"[{button.number}]" if button.current
        else str(button.number)
        for button in controls.buttons
    )
    lines.append("")
    lines.append(
        f"Showing {controls.first_item}-{controls.last_item} of "
        f"{controls.info.total_items} results  |  pages: {pages}"
    )
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------

async def _render_screen(
    source: RecordSource, screen: Screen, table: DataTable, query: str,
) -> TableView:
    """Fetch records for the table's current internal state and render them."""
    if not screen.server_pagination:
        raw = await source.list_all(screen.endpoint)
        return table.render([screen.to_record(item) for item in raw], query=query)

    state = table.state
    result = await source.list_page(
        screen.endpoint,
        page=state.page,
        page_size=state.page_size,
        search=query,
        sort_by=screen.sort_field(state.sort.column_index),
        sort_order=state.sort.direction,
    )
    records = [screen.to_record(item) for item in result.records]
    return table.render(records, TableControls(total_items=result.total))


async def _show(args: argparse.Namespace) -> str:
    cfg = get_config()
    screen = get_screen(args.screen)
    source = get_record_source(cfg)
    table = screen.build_table(cfg)

    # The table owns its state here; each option is applied as the user
    # interaction it stands for.
    view = await _render_screen(source, screen, table, args.query)
    if args.per_page is not None:
        view.actions.page_size_change(args.per_page)
        view = await _render_screen(source, screen, table, args.query)
    if args.sort is not None:
        view.actions.header_click(args.sort)
        if args.desc:
            view = await _render_screen(source, screen, table, args.query)
            view.actions.header_click(args.sort)
        view = await _render_screen(source, screen, table, args.query)
    if args.page != 1:
        view.actions.page_click(args.page)
        view = await _render_screen(source, screen, table, args.query)
    return f"{screen.title}\n\n{format_table(view)}"


def cmd_show(args: argparse.Namespace) -> int:
    """Print one page of a list screen."""
    try:
        output = asyncio.run(_show(args))
    except KeyError as e:
        print(f"Error: {e.args[0]}", file=sys.stderr)
        return 2
    except RecordSourceError as e:
        print(f"Error loading records ({e.category}): {e}", file=sys.stderr)
        return 1
    print(output)
    return 0


# ---------------------------------------------------------------------------
# Other commands
# ---------------------------------------------------------------------------

def cmd_screens(args: argparse.Namespace) -> int:
    """List the available screens."""
    for screen in SCREENS.values():
        mode = "server" if screen.server_pagination else "client"
        print(f"  {screen.name:<14} {screen.title} ({mode} pagination)")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the admin console API with uvicorn."""
    from .api import run

    run(get_config(), host=args.host, port=args.port)
    return 0


def cmd_health(args: argparse.Namespace) -> int:
    """Check the configured record source."""
    source = get_record_source(get_config())
    health = asyncio.run(source.health())
    print(f"Record source: {health.model_dump_json(indent=2)}")
    return 0 if health.status == "healthy" else 1


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="chatadmin",
        description="Chat admin console: entity list screens",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # screens command
    screens_parser = subparsers.add_parser("screens", help="List available screens")
    screens_parser.set_defaults(func=cmd_screens)

    # show command
    show_parser = subparsers.add_parser("show", help="Print one page of a list screen")
    show_parser.add_argument("screen", help="Screen name (e.g. 'users')")
    show_parser.add_argument("--page", type=int, default=1, help="Page number")
    show_parser.add_argument("--per-page", type=int, default=None, help="Rows per page")
    show_parser.add_argument("--sort", type=int, default=None, help="Sort column index")
    show_parser.add_argument("--desc", action="store_true", help="Sort descending")
    show_parser.add_argument("--query", default="", help="Search text")
    show_parser.set_defaults(func=cmd_show)

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Run the admin console API")
    serve_parser.add_argument("--host", default=None, help="Bind address")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port")
    serve_parser.set_defaults(func=cmd_serve)

    # health command
    health_parser = subparsers.add_parser("health", help="Check record source health")
    health_parser.set_defaults(func=cmd_health)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    use_system_collation()
    func: Any = args.func
    return func(args)


if __name__ == "__main__":
    sys.exit(main())
