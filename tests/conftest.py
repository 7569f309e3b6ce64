"""Shared test fixtures for the admin console."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from chatadmin.api import configure_web_app
from chatadmin.core.config import LocalConfig, get_config
from chatadmin.services.fixtures import fixture_path

FIRST_NAMES = [
    "Bob", "alice", "Cara", "Deepak", "Emma", "Farid", "Gina", "Hiro", "Ines",
    "Jon", "Kemi", "Lena", "Mateo", "Nora", "Omar", "Priya", "Quinn", "Rosa",
    "Sven", "Tara", "Umar", "Vera", "Wes", "Xena", "Yuki",
]


def make_users(count: int = 25) -> list[dict[str, Any]]:
    """Raw admin API user records with predictable fields."""
    users = []
    for i in range(1, count + 1):
        users.append(
            {
                "user_id": i,
                "first_name": FIRST_NAMES[(i - 1) % len(FIRST_NAMES)],
                "last_name": "Tester",
                "user_name": f"user{i:02d}",
                "email": f"user{i:02d}@example.com",
                "country": "India",
                "country_short_name": "in",
                "createdAt": f"2022-01-{i:02d}T10:00:00.000Z",
                "platforms": ["web"] if i % 2 else ["android"],
                "report_count": i % 3,
                "socket_ids": ["s"] if i % 5 == 0 else [],
                "blocked_by_admin": i == 3,
            }
        )
    return users


def make_groups(count: int = 12) -> list[dict[str, Any]]:
    """Raw admin API group chat records; group ``i`` has ``i`` participants."""
    return [
        {
            "chat_id": 100 + i,
            "group_name": f"Group {i:02d}",
            "group_description": "",
            "participants": [{"user_id": n} for n in range(i)],
            "user_count": i,
            "createdAt": f"2023-02-{i:02d}T08:00:00.000Z",
            "is_group_blocked": i == 1,
        }
        for i in range(1, count + 1)
    ]


def write_fixture(
    fixtures_dir: str | Path, endpoint: str, items_key: str, records: list[dict[str, Any]],
) -> Path:
    """Write ``records`` in the admin API envelope for ``endpoint``."""
    path = fixture_path(str(fixtures_dir), endpoint)
    payload = {"status": True, "message": "", "data": {items_key: records}}
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


@pytest.fixture()
def fixtures_dir(tmp_path) -> str:
    """Fixture directory holding the users and groups screens' records."""
    directory = tmp_path / "fixtures"
    directory.mkdir()
    write_fixture(directory, "/admin/users", "users", make_users())
    write_fixture(directory, "/admin/group-chats", "chats", make_groups())
    return str(directory)


@pytest.fixture(autouse=True)
def _configure_console(fixtures_dir):
    """Point the web app at the per-test fixture directory."""
    get_config.cache_clear()
    configure_web_app(LocalConfig(mode="local", fixtures_dir=fixtures_dir))
    yield
    get_config.cache_clear()
