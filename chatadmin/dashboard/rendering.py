"""Console HTML rendering.

Builds table markup, the pagination footer and the final page from a
``TableView``.  State travels in query-string links, so every control is a
plain ``<a>`` or GET form.
"""

from __future__ import annotations

import html
import re
import urllib.parse
from pathlib import Path
from typing import Any

from chatadmin.table.engine import HeaderView, TableView
from chatadmin.table.pagination import PageControls

CONSOLE_TEMPLATE = Path(__file__).resolve().parent / "console.html"

SORT_ICONS = {"asc": "&#9650;", "desc": "&#9660;", "none": "&#9661;"}
_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")


def cell_text(value: Any) -> str:
    """Plain-text rendition of a display value."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return str(value)


def _build_url(base_url: str, params: dict[str, str]) -> str:
    clean = {key: value for key, value in params.items() if value != ""}
    qs = urllib.parse.urlencode(clean)
    return f"{base_url}?{qs}" if qs else base_url


def _state_params(view: TableView, query: str) -> dict[str, str]:
    params = {
        "page": str(view.pagination.info.page),
        "per_page": str(view.pagination.info.page_size),
        "q": query,
    }
    if view.sort.column_index is not None:
        params["sort"] = str(view.sort.column_index)
        params["dir"] = view.sort.direction
    return params


def _header_cell(header: HeaderView, view: TableView, base_url: str, query: str) -> str:
    label = html.escape(header.label)
    class_attr = f' class="{html.escape(header.class_name)}"' if header.class_name else ""
    if not header.sortable:
        return f"<th{class_attr}>{label}</th>"

    direction = "ASC"
    if view.sort.column_index == header.index and view.sort.direction == "ASC":
        direction = "DESC"
    params = _state_params(view, query)
    params.update({"sort": str(header.index), "dir": direction, "page": "1"})
    icon = SORT_ICONS[header.indicator or "none"]
    return (
        '<th{class_attr}><a class="sort-link" href="{url}">{label}'
        ' <span class="sort-indicator sort-{indicator}">{icon}</span></a></th>'
    ).format(
        class_attr=class_attr,
        url=html.escape(_build_url(base_url, params)),
        label=label,
        indicator=header.indicator,
        icon=icon,
    )


def table_html(view: TableView, base_url: str, query: str = "") -> str:
    """Render the ``<table>`` element for a view.

    An empty view renders a single placeholder row spanning every column.
    """
    header_cells = "".join(_header_cell(h, view, base_url, query) for h in view.headers)
    body_rows: list[str] = []
    for row in view.rows:
        cells = "".join(
            "<td>{}</td>".format(html.escape(cell_text(value))) for value in row.cells
        )
        row_class = "row-even" if row.index % 2 == 0 else "row-odd"
        body_rows.append(f'<tr class="{row_class}">{cells}</tr>')
    if not body_rows:
        body_rows.append(
            '<tr><td class="empty" colspan="{span}">{message}</td></tr>'.format(
                span=max(1, len(view.headers)),
                message=html.escape(view.empty_message),
            )
        )
    return (
        "<table>"
        "<thead><tr>{headers}</tr></thead>"
        "<tbody>\n{rows}\n</tbody>"
        "</table>"
    ).format(headers=header_cells, rows="\n".join(body_rows))


def render_pagination_nav(
    controls: PageControls,
    base_url: str,
    extra_params: dict[str, str] | None = None,
) -> str:
    """Render an HTML ``<nav>`` with Previous / page buttons / Next.

    ``extra_params`` (sort, search) are carried on every link.
    """
    info = controls.info

    def _page_url(page: int) -> str:
        params: dict[str, str] = {}
        if extra_params:
            params.update(extra_params)
        params["page"] = str(page)
        params["per_page"] = str(info.page_size)
        return html.escape(_build_url(base_url, params))

    if controls.prev_disabled:
        prev_link = '<span class="pagination-link disabled">Previous</span>'
    else:
        prev_link = '<a class="pagination-link" href="{url}">Previous</a>'.format(
            url=_page_url(info.page - 1),
        )

    if controls.next_disabled:
        next_link = '<span class="pagination-link disabled">Next</span>'
    else:
        next_link = '<a class="pagination-link" href="{url}">Next</a>'.format(
            url=_page_url(info.page + 1),
        )

    buttons: list[str] = []
    for button in controls.buttons:
        if button.kind == "ellipsis" or button.number is None:
            buttons.append('<span class="pagination-ellipsis">...</span>')
        elif button.current:
            buttons.append(
                '<span class="pagination-page current">{n}</span>'.format(n=button.number)
            )
        else:
            buttons.append(
                '<a class="pagination-page" href="{url}">{n}</a>'.format(
                    url=_page_url(button.number), n=button.number,
                )
            )

    hidden_inputs = "".join(
        '<input type="hidden" name="{k}" value="{v}">'.format(
            k=html.escape(key), v=html.escape(value)
        )
        for key, value in (extra_params or {}).items()
        if value != ""
    )
    options = "".join(
        '<option value="{size}"{selected}>{size}</option>'.format(
            size=size, selected=" selected" if size == info.page_size else "",
        )
        for size in controls.page_size_options
    )
    page_size_form = (
        '<form class="page-size" method="get" action="{action}">{hidden}'
        '<input type="hidden" name="page" value="1">'
        '<select name="per_page" aria-label="Rows per page" onchange="this.form.submit()">'
        "{options}</select></form>"
    ).format(action=html.escape(base_url), hidden=hidden_inputs, options=options)

    status = "Showing {first}-{last} of {total} results".format(
        first=controls.first_item,
        last=controls.last_item,
        total=info.total_items,
    )

    return (
        '<nav class="pagination">'
        "{page_size_form} "
        '<span class="pagination-status">{status}</span> '
        "{prev} {buttons} {next}"
        "</nav>"
    ).format(
        page_size_form=page_size_form,
        status=status,
        prev=prev_link,
        buttons=" ".join(buttons),
        next=next_link,
    )


def console_page_html(title: str, view: TableView, base_url: str, query: str = "") -> str:
    """Render a full list screen into the console HTML template.

    Args:
        title: Screen title.
        view: Rendered table view.
        base_url: Path of the screen; used for every state link.
        query: Current search text.

    Returns:
        Rendered HTML content.
    """
    extra: dict[str, str] = {"q": query}
    if view.sort.column_index is not None:
        extra["sort"] = str(view.sort.column_index)
        extra["dir"] = view.sort.direction

    search_form = (
        '<form class="search" method="get" action="{action}">'
        '<input type="search" name="q" value="{query}" placeholder="Search...">'
        '<input type="hidden" name="per_page" value="{per_page}">'
        '<button type="submit">Search</button></form>'
    ).format(
        action=html.escape(base_url),
        query=html.escape(query),
        per_page=view.pagination.info.page_size,
    )

    parts = {
        "TITLE": html.escape(title),
        "SEARCH": search_form,
        "TABLE": table_html(view, base_url, query),
        "PAGINATION": render_pagination_nav(view.pagination, base_url, extra),
    }
    template = CONSOLE_TEMPLATE.read_text(encoding="utf-8")
    return _PLACEHOLDER.sub(lambda match: parts.get(match.group(1), match.group(0)), template)
