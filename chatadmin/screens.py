"""Entity list screens: endpoints, record normalizers and column layouts.

Every screen hands its normalized records and columns to the shared
``DataTable``; nothing here sorts or paginates.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from .core.config import ConsoleConfig
from .services.base import ListEndpoint
from .table import Column, DataTable
from .table.sorting import parse_date


@dataclass(frozen=True)
class Screen:
    """One admin list page."""

    name: str
    title: str
    endpoint: ListEndpoint
    columns: list[Column]
    to_record: Callable[[dict[str, Any]], dict[str, Any]]
    server_pagination: bool = False
    # Server-side sort field names that differ from the column accessor.
    sort_aliases: dict[str, str] = field(default_factory=dict)

    def sort_field(self, column_index: int | None) -> str | None:
        """Field name the record source should sort by, if any."""
        if column_index is None or not 0 <= column_index < len(self.columns):
            return None
        column = self.columns[column_index]
        if not column.sortable or not isinstance(column.accessor, str):
            return None
        return self.sort_aliases.get(column.accessor, column.accessor)

    def build_table(self, cfg: ConsoleConfig) -> DataTable:
        return DataTable(
            self.columns,
            page_size_options=cfg.page_size_options,
            default_page_size=cfg.default_page_size,
            server_pagination=self.server_pagination,
        )


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def country_flag(code: str) -> str:
    """Emoji flag for an ISO alpha-2 country code."""
    code = (code or "").strip().upper()
    if len(code) != 2 or not code.isalpha():
        return ""
    return "".join(chr(127397 + ord(char)) for char in code)


def mask_email(email: str | None) -> str:
    if not email or "@" not in email:
        return "xxxxxxxxxxxxxx@demo"
    local, _, domain = email.partition("@")
    return f"{local[:4]}xxxxxxxx@{domain}"


def date_label(value: Any) -> str:
    if not isinstance(value, str):
        return "-"
    parsed = parse_date(value)
    if parsed is None:
        return value
    return parsed.strftime("%b %d, %Y")


def _full_name(raw: dict[str, Any]) -> str:
    name = raw.get("full_name") or " ".join(
        part for part in (raw.get("first_name"), raw.get("last_name")) if part
    )
    return name or raw.get("user_name") or "-"


def _yes_no(value: Any) -> str:
    return "Yes" if value else "No"


# ---------------------------------------------------------------------------
# Record normalizers
# ---------------------------------------------------------------------------

def user_record(raw: dict[str, Any]) -> dict[str, Any]:
    socket_ids = raw.get("socket_ids")
    return {
        "id": raw.get("user_id"),
        "full_name": _full_name(raw),
        "email_masked": mask_email(raw.get("email")),
        "username": raw.get("user_name") or "-",
        "country_code": (raw.get("country_short_name") or "").upper(),
        "country": raw.get("country"),
        "joined_at": raw.get("createdAt"),
        "platform": "Web" if "web" in (raw.get("platforms") or []) else "App",
        "report_counts": raw.get("report_count", 0),
        "status": "Online" if isinstance(socket_ids, list) and socket_ids else "Offline",
        "is_blocked": bool(raw.get("blocked_by_admin")),
    }


def group_record(raw: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": raw.get("chat_id"),
        "group_name": raw.get("group_name") or "Unnamed Group",
        "group_description": raw.get("group_description") or "",
        "participants": len(raw.get("participants") or []),
        "created_at": raw.get("createdAt") or raw.get("created_at"),
        "status": "Blocked" if raw.get("is_group_blocked") else "Active",
    }


def call_record(raw: dict[str, Any]) -> dict[str, Any]:
    caller = raw.get("caller") or {}
    chat = raw.get("Chat") or raw.get("chat") or {}
    return {
        "id": raw.get("call_id"),
        "caller": _full_name(caller) if caller else "-",
        "chat": chat.get("group_name") or "N/A",
        "call_status": raw.get("call_status"),
        "call_type": raw.get("call_type"),
        "call_duration": raw.get("call_duration"),
        "start_time": raw.get("start_time"),
        "end_time": raw.get("end_time"),
        "created_at": raw.get("createdAt") or raw.get("start_time"),
    }


def language_record(raw: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": raw.get("language_id"),
        "language": raw.get("language") or "Unknown",
        "language_short": raw.get("language_short") or "",
        "country": raw.get("country") or "Unknown",
        "language_alignment": raw.get("language_alignment"),
        "status": bool(raw.get("status", True)),
        "default_status": bool(raw.get("default_status")),
    }


def avatar_record(raw: dict[str, Any]) -> dict[str, Any]:
    return {
        "avatar_id": raw.get("avatar_id"),
        "name": raw.get("name"),
        "avatar_gender": raw.get("avatar_gender"),
        "status": "Active" if raw.get("status") else "Inactive",
        "created_at": raw.get("createdAt"),
    }


def report_record(raw: dict[str, Any]) -> dict[str, Any]:
    reported_user = raw.get("reported_user")
    reported_group = raw.get("reported_group")
    if isinstance(reported_user, dict):
        entity_id = reported_user.get("user_id")
        entity_name = reported_user.get("user_name") or _full_name(reported_user)
        entity_type = "User"
    elif isinstance(reported_group, dict):
        entity_id = reported_group.get("chat_id")
        entity_name = reported_group.get("group_name") or "Unnamed Group"
        entity_type = "Group"
    else:
        report_type = raw.get("Report_type") or {}
        entity_id, entity_name, entity_type = None, "-", report_type.get("report_for")
    return {
        "entity_id": entity_id,
        "entity_name": entity_name,
        "entity_type": entity_type,
        "report_count": raw.get("report_count", 0),
    }


def notification_record(raw: dict[str, Any]) -> dict[str, Any]:
    return {
        "notification_id": raw.get("notification_id"),
        "title": raw.get("title"),
        "message": raw.get("message"),
        "views": len(raw.get("users") or []),
        "created_at": raw.get("createdAt"),
    }


# ---------------------------------------------------------------------------
# Screen registry
# ---------------------------------------------------------------------------

SCREENS: dict[str, Screen] = {
    screen.name: screen
    for screen in (
        Screen(
            name="users",
            title="User List",
            endpoint=ListEndpoint("/admin/users", "users"),
            to_record=user_record,
            columns=[
                Column(header="ID", cell=lambda r: f"#{r['id']}", class_name="w-16"),
                Column(
                    header="Full Name",
                    cell=lambda r: f"{r['full_name']} ({r['email_masked']})",
                ),
                Column(header="User Name", accessor="username", sortable=True),
                Column(
                    header="Country",
                    cell=lambda r: f"{country_flag(r['country_code'])} {r['country'] or '-'}".strip(),
                ),
                Column(
                    header="Joining date",
                    accessor="joined_at",
                    cell=lambda r: date_label(r["joined_at"]),
                    sortable=True,
                ),
                Column(header="Platform", accessor="platform"),
                Column(header="Report Counts", accessor="report_counts"),
                Column(header="Status", accessor="status"),
                Column(header="Blocked", cell=lambda r: _yes_no(r["is_blocked"])),
            ],
        ),
        Screen(
            name="groups",
            title="Group List",
            endpoint=ListEndpoint("/admin/group-chats", "chats"),
            to_record=group_record,
            server_pagination=True,
            sort_aliases={"participants": "user_count"},
            columns=[
                Column(header="ID", cell=lambda r: f"#{r['id']}"),
                Column(header="Group", accessor="group_name"),
                Column(header="Participants", accessor="participants", sortable=True),
                Column(
                    header="Creation date",
                    accessor="created_at",
                    cell=lambda r: date_label(r["created_at"]),
                    sortable=True,
                ),
                Column(header="Status", accessor="status"),
            ],
        ),
        Screen(
            name="calls",
            title="Audio Call List",
            endpoint=ListEndpoint(
                "/admin/calls-list", "call", page_size_param="limit", extra_body={"call_type": "audio"},
            ),
            to_record=call_record,
            columns=[
                Column(header="ID", cell=lambda r: f"#{r['id']}"),
                Column(header="Caller", accessor="caller"),
                Column(header="Chat", accessor="chat"),
                Column(header="Call Status", accessor="call_status"),
                Column(header="Duration(sec)", accessor="call_duration"),
                Column(
                    header="Created At",
                    accessor="created_at",
                    cell=lambda r: date_label(r["created_at"]),
                    sortable=True,
                ),
            ],
        ),
        Screen(
            name="languages",
            title="Language List",
            endpoint=ListEndpoint("/language/get-language", "Records", page_size_param="limit"),
            to_record=language_record,
            columns=[
                Column(header="ID", cell=lambda r: f"#{r['id']}"),
                Column(header="Language", accessor="language"),
                Column(header="Country", accessor="country", sortable=True),
                Column(header="Language Alignment", accessor="language_alignment"),
                Column(header="Status", cell=lambda r: "Active" if r["status"] else "Inactive"),
                Column(header="Default", cell=lambda r: _yes_no(r["default_status"])),
            ],
        ),
        Screen(
            name="avatars",
            title="Avatar List",
            endpoint=ListEndpoint("/avatar/get-all-avatars", "Records", method="GET", page_size_param=None),
            to_record=avatar_record,
            columns=[
                Column(header="ID", accessor="avatar_id", sortable=True),
                Column(header="Name", accessor="name", sortable=True),
                Column(header="Gender", accessor="avatar_gender", sortable=True),
                Column(header="Status", accessor="status", sortable=True),
                Column(
                    header="Created",
                    accessor="created_at",
                    cell=lambda r: date_label(r["created_at"]),
                    sortable=True,
                ),
            ],
        ),
        Screen(
            name="reports",
            title="Reported Entities",
            endpoint=ListEndpoint(
                "/report/reported-entities", "data", page_size_param="limit", extra_body={"type": "user"},
            ),
            to_record=report_record,
            columns=[
                Column(header="Reported id", accessor="entity_id"),
                Column(
                    header="Reported entity",
                    cell=lambda r: f"{r['entity_name']} ({r['entity_type'] or '-'})",
                ),
                Column(header="Report Counts", accessor="report_count", sortable=True),
            ],
        ),
        Screen(
            name="notifications",
            title="Push Notifications",
            endpoint=ListEndpoint(
                "/admin/list-broadcast-notification",
                "Records",
                page_size_param=None,
                pagination_key="Pagination",
            ),
            to_record=notification_record,
            columns=[
                Column(header="ID", accessor="notification_id"),
                Column(header="Title", accessor="title"),
                Column(header="Message", accessor="message"),
                Column(header="Views", accessor="views", sortable=True),
                Column(
                    header="Created",
                    accessor="created_at",
                    cell=lambda r: date_label(r["created_at"]),
                    sortable=True,
                ),
            ],
        ),
    )
}


def get_screen(name: str) -> Screen:
    """Look up a screen by name.

    Raises:
        KeyError: If no screen has that name.
    """
    try:
        return SCREENS[name]
    except KeyError:
        raise KeyError(f"Unknown screen: {name!r}") from None
