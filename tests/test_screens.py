"""Tests for the entity list screens."""

from __future__ import annotations

from pathlib import Path

import pytest

from chatadmin.core.config import LocalConfig
from chatadmin.screens import (
    SCREENS,
    call_record,
    country_flag,
    date_label,
    get_screen,
    group_record,
    mask_email,
    notification_record,
    report_record,
    user_record,
)
from chatadmin.services.fixtures import read_fixture
from chatadmin.table import TableControls


class TestRegistry:
    def test_expected_screens(self):
        assert set(SCREENS) == {
            "users", "groups", "calls", "languages", "avatars", "reports", "notifications",
        }

    def test_only_groups_paginate_on_server(self):
        assert [name for name, s in SCREENS.items() if s.server_pagination] == ["groups"]

    def test_unknown_screen(self):
        with pytest.raises(KeyError, match="Unknown screen"):
            get_screen("payments")


class TestSortField:
    def test_sortable_accessor(self):
        assert get_screen("users").sort_field(2) == "username"

    def test_alias(self):
        assert get_screen("groups").sort_field(2) == "user_count"

    def test_not_sortable_or_out_of_range(self):
        users = get_screen("users")
        assert users.sort_field(0) is None
        assert users.sort_field(None) is None
        assert users.sort_field(42) is None


class TestHelpers:
    def test_country_flag(self):
        assert country_flag("in") == "\U0001F1EE\U0001F1F3"
        assert country_flag("") == ""
        assert country_flag("usa") == ""

    def test_mask_email(self):
        assert mask_email("alice.smith@example.com") == "alicxxxxxxxx@example.com"
        assert mask_email(None) == "xxxxxxxxxxxxxx@demo"

    def test_date_label(self):
        assert date_label("2022-01-10T14:00:00.000Z") == "Jan 10, 2022"
        assert date_label(None) == "-"
        assert date_label("someday") == "someday"


class TestNormalizers:
    def test_user_record(self):
        record = user_record(
            {
                "user_id": 5,
                "first_name": "Emma",
                "last_name": "Tester",
                "platforms": ["web"],
                "socket_ids": ["s1"],
                "blocked_by_admin": False,
            }
        )
        assert record["id"] == 5
        assert record["full_name"] == "Emma Tester"
        assert record["status"] == "Online"
        assert record["platform"] == "Web"
        assert record["is_blocked"] is False

    def test_group_record(self):
        record = group_record(
            {"chat_id": 3, "participants": [{"user_id": n} for n in range(3)]}
        )
        assert record["participants"] == 3
        assert record["status"] == "Active"

    def test_group_record_unnamed(self):
        assert group_record({"chat_id": 1})["group_name"] == "Unnamed Group"

    def test_report_record_group(self):
        record = report_record(
            {
                "report_id": 12,
                "reported_user": None,
                "reported_group": {"chat_id": 9, "group_name": None},
                "Report_type": {"report_text": "Abuse", "report_for": "group"},
                "report_count": 2,
            }
        )
        assert (record["entity_id"], record["entity_type"]) == (9, "Group")
        assert record["entity_name"] == "Unnamed Group"

    def test_report_record_user_name(self):
        record = report_record(
            {
                "reported_user": {"user_id": 3, "user_name": "cara.diaz", "blocked_by_admin": False},
                "report_count": 5,
            }
        )
        assert (record["entity_id"], record["entity_name"], record["entity_type"]) == (
            3, "cara.diaz", "User",
        )

    def test_call_record(self):
        record = call_record(
            {
                "call_id": 501,
                "call_status": "ended",
                "start_time": "2023-05-01T10:00:00.000Z",
                "caller": {"first_name": "Bob", "last_name": "Stone"},
                "Chat": {"group_name": "Book Club"},
            }
        )
        assert record["caller"] == "Bob Stone"
        assert record["chat"] == "Book Club"
        assert record["created_at"] == "2023-05-01T10:00:00.000Z"
        assert call_record({"call_id": 2, "Chat": None})["chat"] == "N/A"

    def test_notification_views_count_recipients(self):
        assert notification_record({"notification_id": 1, "users": [4, 5, 6]})["views"] == 3


class TestScreenEndpoints:
    def test_request_shapes(self):
        avatars = get_screen("avatars").endpoint
        assert (avatars.path, avatars.method, avatars.paged) == ("/avatar/get-all-avatars", "GET", False)
        calls = get_screen("calls").endpoint
        assert (calls.path, calls.items_key, calls.page_size_param) == ("/admin/calls-list", "call", "limit")
        assert calls.extra_body == {"call_type": "audio"}
        assert get_screen("reports").endpoint.extra_body == {"type": "user"}
        assert get_screen("notifications").endpoint.pagination_key == "Pagination"
        assert get_screen("languages").endpoint.items_key == "Records"

    @pytest.mark.parametrize("name", sorted(SCREENS))
    def test_bundled_fixture_renders(self, name):
        screen = get_screen(name)
        fixtures_dir = Path(__file__).resolve().parent.parent / "data" / "fixtures"
        raw = read_fixture(str(fixtures_dir), screen.endpoint)
        assert raw
        view = screen.build_table(LocalConfig(mode="local")).render([screen.to_record(r) for r in raw])
        assert len(view.rows) == min(len(raw), 10)


class TestScreenTables:
    def test_users_table_sorts_by_joining_date(self, fixtures_dir):
        screen = get_screen("users")
        cfg = LocalConfig(mode="local")
        raw_users = read_fixture(fixtures_dir, screen.endpoint)[:12]
        records = [screen.to_record(raw) for raw in raw_users]
        view = screen.build_table(cfg).render(
            records, TableControls(sort_column_index=4, sort_direction="DESC")
        )
        assert view.rows[0].cells[0] == "#12"
        assert view.rows[0].cells[4] == "Jan 12, 2022"
        assert len(view.rows) == 10

    def test_build_table_uses_config(self):
        cfg = LocalConfig(mode="local", default_page_size=20, page_size_options=(20, 40))
        table = get_screen("groups").build_table(cfg)
        assert table.server_pagination is True
        assert table.state.page_size == 20
        assert table.page_size_options == [20, 40]
