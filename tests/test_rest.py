"""Tests for the hosted table store client."""

import json

import httpx
import pytest

from capacity_board.db.engine import StoreError, is_missing_schema
from capacity_board.integrations.rest import RestTableSource


def _source(handler):
    client = httpx.Client(base_url="https://store.test/rest/v1", transport=httpx.MockTransport(handler))
    return RestTableSource("https://store.test", "key", client=client)


class TestSelect:
    def test_rows_and_limit(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json=[{"key": "A-1"}, {"key": "A-2"}])

        rows = _source(handler).select("jira_tickets", limit=200)
        assert rows == [{"key": "A-1"}, {"key": "A-2"}]
        assert seen["path"] == "/rest/v1/jira_tickets"
        assert seen["params"] == {"select": "*", "limit": "200"}

    def test_missing_table(self):
        def handler(request):
            return httpx.Response(
                404, json={"code": "42P01", "message": 'relation "public.developers" does not exist'}
            )

        with pytest.raises(StoreError) as exc:
            _source(handler).select("developers")
        assert exc.value.code == "42P01"
        assert is_missing_schema(exc.value)

    def test_unreachable(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(StoreError, match="unreachable"):
            _source(handler).select("developers")

    def test_unknown_table(self):
        with pytest.raises(StoreError):
            _source(lambda r: httpx.Response(200, json=[])).select("users")


class TestInsert:
    def test_posts_row(self):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["body"] = json.loads(request.content)
            return httpx.Response(201)

        _source(handler).insert("manual_availability", {"developer_id": "d1", "reason": "OOO"})
        assert seen == {"method": "POST", "body": {"developer_id": "d1", "reason": "OOO"}}

    def test_error_without_json(self):
        with pytest.raises(StoreError, match="bad gateway"):
            _source(lambda r: httpx.Response(502, text="bad gateway")).insert("developers", {})
