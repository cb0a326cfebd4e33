"""
Tests for HttpExecutionSource (urllib is patched, no network).
"""

import io
import json
import urllib.error
import urllib.request

import pytest

from agentgraph_core.adapters.http_data_source import HttpExecutionSource
from agentgraph_core.domain.errors import DataFetchError


class FakeResponse(io.BytesIO):
    """Context-manager response like the one urlopen returns."""

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


@pytest.fixture
def captured(monkeypatch):
    """Patch urlopen; returns a dict describing the last call and what to answer."""
    state = {"body": b"{}", "error": None, "request": None, "timeout": None}

    def fake_urlopen(request, timeout=None):
        state["request"] = request
        state["timeout"] = timeout
        if state["error"] is not None:
            raise state["error"]
        return FakeResponse(state["body"])

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)
    return state


class TestRequest:
    """URL and header construction."""

    def test_page_url(self):
        source = HttpExecutionSource("http://api.local/api/")
        assert source.page_url("group 1", 2) == "http://api.local/api/agent-executions/group%201?page=2"

    def test_request_details(self, captured):
        source = HttpExecutionSource("http://api.local/api", timeout=5.0, headers={"Authorization": "Bearer t"})
        source.fetch_execution_page("g", 3)

        request = captured["request"]
        assert request.full_url == "http://api.local/api/agent-executions/g?page=3"
        assert request.get_header("Authorization") == "Bearer t"
        assert request.get_method() == "GET"
        assert captured["timeout"] == 5.0


class TestResponses:
    """Envelope decoding and error mapping."""

    def test_valid_page(self, captured):
        captured["body"] = json.dumps({
            "nodes": [{"id": "a", "label": "Agent A", "status": "success"}],
            "links": [],
            "hasMore": True,
            "totalPages": 2,
        }).encode("utf-8")

        page = HttpExecutionSource().fetch_execution_page("g", 1)
        assert page.nodes[0].label == "Agent A"
        assert page.has_more
        assert page.total_pages == 2

    def test_empty_page_is_valid(self, captured):
        captured["body"] = b'{"nodes": [], "links": [], "hasMore": false}'
        page = HttpExecutionSource().fetch_execution_page("g", 4)
        assert page.nodes == ()

    def test_http_error(self, captured):
        captured["error"] = urllib.error.HTTPError(
            "http://x", 500, "Server Error", {}, io.BytesIO(b"")
        )
        with pytest.raises(DataFetchError, match="HTTP 500") as info:
            HttpExecutionSource().fetch_execution_page("g", 2)
        assert info.value.page_index == 2
        assert info.value.group_id == "g"

    def test_unreachable(self, captured):
        captured["error"] = urllib.error.URLError("Connection refused")
        with pytest.raises(DataFetchError, match="Cannot reach"):
            HttpExecutionSource().fetch_execution_page("g", 1)

    def test_timeout(self, captured):
        captured["error"] = TimeoutError("timed out")
        with pytest.raises(DataFetchError, match="Network error"):
            HttpExecutionSource().fetch_execution_page("g", 1)

    def test_invalid_json(self, captured):
        captured["body"] = b"<html>oops</html>"
        with pytest.raises(DataFetchError, match="Invalid JSON"):
            HttpExecutionSource().fetch_execution_page("g", 1)

    def test_wrong_shape(self, captured):
        captured["body"] = b'{"nodes": "nope"}'
        with pytest.raises(DataFetchError, match="Unexpected page shape"):
            HttpExecutionSource().fetch_execution_page("g", 1)

    def test_undecodable_body(self, captured):
        captured["body"] = b'{"nodes": ["\xff"]}'
        with pytest.raises(DataFetchError, match="Invalid JSON") as info:
            HttpExecutionSource().fetch_execution_page("g", 1)
        assert isinstance(info.value.__cause__, UnicodeDecodeError)
