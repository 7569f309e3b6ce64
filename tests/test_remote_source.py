"""Tests for the HTTP admin API record source."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from chatadmin.core.config import RemoteConfig
from chatadmin.services import remote
from chatadmin.services.base import ListEndpoint, RecordSourceError
from chatadmin.services.remote import RemoteRecordSource

USERS = ListEndpoint("/admin/users", "users")
GROUPS = ListEndpoint("/admin/group-chats", "chats")
CALLS = ListEndpoint(
    "/admin/calls-list", "call", page_size_param="limit", extra_body={"call_type": "audio"},
)
LANGUAGES = ListEndpoint("/language/get-language", "Records", page_size_param="limit")
AVATARS = ListEndpoint("/avatar/get-all-avatars", "Records", method="GET", page_size_param=None)
NOTIFICATIONS = ListEndpoint(
    "/admin/list-broadcast-notification",
    "Records",
    page_size_param=None,
    pagination_key="Pagination",
)


@pytest.fixture(autouse=True)
def _no_backoff(monkeypatch):
    monkeypatch.setattr(remote, "RETRY_BACKOFF_S", 0.0)


def _source(handler, **overrides) -> RemoteRecordSource:
    cfg = RemoteConfig(
        mode="remote",
        api_base_url=overrides.get("api_base_url", "http://admin.test/api/"),
        api_token=overrides.get("api_token", "tok"),
        max_retries=overrides.get("max_retries", 2),
    )
    return RemoteRecordSource(cfg, transport=httpx.MockTransport(handler))


def _envelope(items_key: str, records: list[dict], **pagination) -> dict:
    data: dict = {items_key: records}
    if pagination:
        data["pagination"] = pagination
    return {"status": True, "data": data, "message": ""}


# ---------------------------------------------------------------------------
# list_page
# ---------------------------------------------------------------------------


class TestListPage:
    def test_request_shape(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json=_envelope(
                    "chats", [{"chat_id": 1}], page=2, pageSize=10, total=11, total_pages=2,
                ),
            )

        page = asyncio.run(
            _source(handler).list_page(
                GROUPS,
                page=2,
                page_size=10,
                search="book",
                sort_by="user_count",
                sort_order="DESC",
            )
        )
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == "http://admin.test/api/admin/group-chats"
        assert request.headers["Authorization"] == "Bearer tok"
        assert json.loads(request.content) == {
            "page": 2,
            "pageSize": 10,
            "search": "book",
            "sortBy": "user_count",
            "sortOrder": "DESC",
        }
        assert page.records == [{"chat_id": 1}]
        assert (page.page, page.page_size, page.total, page.total_pages) == (2, 10, 11, 2)

    def test_optional_fields_omitted(self):
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json=_envelope("users", []))

        asyncio.run(_source(handler, api_token="").list_page(USERS))
        assert bodies == [{"page": 1, "pageSize": 10}]

    def test_missing_pagination_uses_record_count(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=_envelope("call", [{"call_id": 1}, {"call_id": 2}, "x"]))

        page = asyncio.run(_source(handler).list_page(CALLS))
        assert page.total == 2
        assert page.total_pages == 1

    def test_missing_data_block(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"status": False, "message": "nope"})

        with pytest.raises(RecordSourceError, match="no data block"):
            asyncio.run(_source(handler).list_page(CALLS))

    def test_list_all_fetches_every_page(self):
        def handler(request: httpx.Request) -> httpx.Response:
            page = json.loads(request.content)["page"]
            records = [{"user_id": page * 10 + i} for i in range(2)]
            return httpx.Response(
                200, json=_envelope("users", records, page=page, pageSize=2, total=6, total_pages=3),
            )

        records = asyncio.run(_source(handler).list_all(USERS, page_size=2))
        assert [r["user_id"] for r in records] == [10, 11, 20, 21, 30, 31]

    def test_pagination_without_page_keeps_requested_page(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=_envelope("users", [{"user_id": 11}], total=30, total_pages=3))

        page = asyncio.run(_source(handler).list_page(USERS, page=2, page_size=10))
        assert (page.page, page.page_size, page.total, page.total_pages) == (2, 10, 30, 3)

    def test_page_count_derived_from_total(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=_envelope("users", [{"user_id": 1}], total=25))

        page = asyncio.run(_source(handler).list_page(USERS, page_size=10))
        assert page.total_pages == 3


# ---------------------------------------------------------------------------
# Per-endpoint request and envelope shapes
# ---------------------------------------------------------------------------


class TestEndpointShapes:
    def test_calls_send_limit_and_call_type(self):
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json=_envelope("call", [{"call_id": 501}], total_pages=1))

        page = asyncio.run(_source(handler).list_page(CALLS, page_size=50))
        assert bodies == [{"call_type": "audio", "page": 1, "limit": 50}]
        assert page.records == [{"call_id": 501}]

    def test_language_records_envelope(self):
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(
                200,
                json={
                    "status": True,
                    "data": {
                        "Records": [{"language_id": 11}, {"language_id": 12}],
                        "pagination": {
                            "total_pages": 3,
                            "total_records": 25,
                            "current_page": "2",
                            "records_per_page": 10,
                        },
                    },
                },
            )

        page = asyncio.run(_source(handler).list_page(LANGUAGES, page=2, page_size=10))
        assert bodies == [{"page": 2, "limit": 10}]
        assert [r["language_id"] for r in page.records] == [11, 12]
        assert (page.page, page.page_size, page.total, page.total_pages) == (2, 10, 25, 3)

    def test_avatars_use_get_without_body(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            records = [{"avatar_id": i} for i in range(1, 61)]
            return httpx.Response(200, json={"status": True, "data": {"Records": records}})

        records = asyncio.run(_source(handler).list_all(AVATARS, page_size=50))
        assert len(seen) == 1
        request = seen[0]
        assert request.method == "GET"
        assert str(request.url) == "http://admin.test/api/avatar/get-all-avatars"
        assert request.content == b""
        assert len(records) == 60

    def test_notifications_capitalised_pagination(self):
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(
                200,
                json={
                    "status": True,
                    "data": {
                        "Records": [{"notification_id": 1, "users": [1, 2]}],
                        "Pagination": {
                            "total_pages": 2,
                            "total_records": 12,
                            "current_page": 1,
                            "records_per_page": 10,
                        },
                    },
                },
            )

        page = asyncio.run(_source(handler).list_page(NOTIFICATIONS))
        assert bodies == [{}]
        assert page.total == 12
        assert page.page_size == 10
        assert page.total_pages == 1


# ---------------------------------------------------------------------------
# Retries and error classification
# ---------------------------------------------------------------------------


class TestRetries:
    def test_server_error_retried_then_succeeds(self):
        calls = {"n": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            calls["n"] += 1
            if calls["n"] < 3:
                return httpx.Response(503, json={"message": "busy"})
            return httpx.Response(200, json=_envelope("users", [{"user_id": 1}]))

        page = asyncio.run(_source(handler).list_page(USERS))
        assert calls["n"] == 3
        assert page.records == [{"user_id": 1}]

    def test_retries_exhausted(self):
        calls = {"n": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            calls["n"] += 1
            return httpx.Response(500, json={"message": "boom"})

        with pytest.raises(RecordSourceError) as excinfo:
            asyncio.run(_source(handler, max_retries=1).list_page(USERS))
        assert calls["n"] == 2
        assert excinfo.value.category == "server"
        assert "boom" in str(excinfo.value)

    def test_client_error_not_retried(self):
        calls = {"n": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            calls["n"] += 1
            return httpx.Response(422, json={"message": "bad page"})

        with pytest.raises(RecordSourceError) as excinfo:
            asyncio.run(_source(handler).list_page(USERS))
        assert calls["n"] == 1
        assert excinfo.value.category == "client"

    def test_auth_error_retried(self):
        calls = {"n": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            calls["n"] += 1
            return httpx.Response(401, text="unauthorized")

        with pytest.raises(RecordSourceError) as excinfo:
            asyncio.run(_source(handler).list_page(USERS))
        assert calls["n"] == 3
        assert excinfo.value.category == "auth"

    def test_transport_error_is_network(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(RecordSourceError) as excinfo:
            asyncio.run(_source(handler, max_retries=0).list_page(USERS))
        assert excinfo.value.category == "network"
        assert excinfo.value.status_code is None

    def test_timeout_is_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(RecordSourceError) as excinfo:
            asyncio.run(_source(handler, max_retries=0).list_page(USERS))
        assert excinfo.value.category == "timeout"


class TestErrorCategory:
    @pytest.mark.parametrize(
        ("status", "category", "retryable"),
        [
            (None, "network", True),
            (401, "auth", True),
            (403, "auth", True),
            (404, "not_found", False),
            (408, "timeout", True),
            (400, "client", False),
            (500, "server", True),
            (502, "server", True),
        ],
    )
    def test_classification(self, status, category, retryable):
        error = RecordSourceError("x", status_code=status)
        assert error.category == category
        assert error.retryable is retryable


# ---------------------------------------------------------------------------
# health
# ---------------------------------------------------------------------------


class TestHealth:
    def test_healthy(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/health"
            return httpx.Response(200, json={"ok": True})

        assert asyncio.run(_source(handler).health()).status == "healthy"

    def test_unhealthy(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"message": "down"})

        health = asyncio.run(_source(handler, max_retries=0).health())
        assert health.status == "unhealthy"
        assert "down" in (health.error or "")
