"""
Tests for tooltip content: history parsing and formatting.
"""

import json
from datetime import datetime, timedelta, timezone

import pytest

from agentgraph_core.domain.enums import NodeStatus, TooltipKind
from agentgraph_core.domain.errors import MalformedHistoryError
from agentgraph_core.domain.models import ExecutionPayload, GraphLink, GraphNode
from agentgraph_core.services.tooltip import (
    HISTORY_NOTICE, LINK_HEADER, NOT_AVAILABLE,
    build_link_tooltip, build_node_tooltip, format_datetime, format_timestamp,
    parse_history, summarize_history,
)

HISTORY = json.dumps([
    {
        "AuthorName": "Planner",
        "Content": "Split the task",
        "ModelId": "gpt-4o",
        "Metadata": {"Usage": {"TotalTokenCount": 321}, "FinishReason": "Stop"},
    },
    {"AuthorName": "Coder", "Content": "Wrote code"},
])


def make_node(**payload):
    return GraphNode("n1", "Planner 1", NodeStatus.SUCCESS, ExecutionPayload(**payload))


class TestParseHistory:
    """Strict parsing."""

    def test_entries_in_order(self):
        entries = parse_history(HISTORY)
        assert [e.author for e in entries] == ["Planner", "Coder"]
        assert entries[0].total_tokens == 321
        assert entries[0].finish_reason == "Stop"
        assert entries[1].model_id == NOT_AVAILABLE

    def test_empty(self):
        assert parse_history(None) == []
        assert parse_history("") == []

    def test_not_json(self):
        with pytest.raises(MalformedHistoryError):
            parse_history("not json")

    def test_not_a_list(self):
        with pytest.raises(MalformedHistoryError, match="list"):
            parse_history('{"AuthorName": "x"}')

    def test_non_object_items(self):
        with pytest.raises(MalformedHistoryError):
            parse_history("[1, 2]")


class TestSummarizeHistory:
    """Fail-soft parsing for display."""

    def test_bad_history_becomes_notice(self):
        view = summarize_history("not json")
        assert view.entries == ()
        assert view.notice == HISTORY_NOTICE

    def test_good_history(self):
        view = summarize_history(HISTORY)
        assert len(view.entries) == 2
        assert view.notice is None


class TestTimestamps:
    """Run time formatting."""

    def test_format_datetime(self):
        assert format_datetime(datetime(2024, 10, 5, 15, 4, 5)) == "Oct 5, 2024, 3:04:05 PM"

    def test_midnight_and_noon(self):
        assert format_datetime(datetime(2024, 1, 1, 0, 0, 0)) == "Jan 1, 2024, 12:00:00 AM"
        assert format_datetime(datetime(2024, 1, 1, 12, 30, 0)) == "Jan 1, 2024, 12:30:00 PM"

    def test_run_on_in_timezone(self):
        payload = ExecutionPayload(run_on="2024-10-05T13:04:05.1234567Z")
        tz = timezone(timedelta(hours=2))
        assert format_timestamp(payload, tz) == "Oct 5, 2024, 3:04:05 PM"

    def test_epoch_milliseconds(self):
        payload = ExecutionPayload(timestamp=1728133445000.0)
        assert format_timestamp(payload, timezone.utc) == "Oct 5, 2024, 1:04:05 PM"

    def test_unparseable(self):
        assert format_timestamp(ExecutionPayload(run_on="someday")) == NOT_AVAILABLE
        assert format_timestamp(ExecutionPayload()) == NOT_AVAILABLE


class TestNodeTooltip:
    """Node tooltip assembly."""

    def test_content(self):
        node = make_node(
            run_on="2024-10-05T13:04:05Z",
            description="Plans work",
            history_raw=HISTORY,
        )
        content = build_node_tooltip(node, timezone.utc)
        assert content.kind == TooltipKind.NODE
        assert content.header == "Planner 1"
        assert content.meta == ("Status: Success", "Oct 5, 2024, 1:04:05 PM")
        assert content.description == "Plans work"
        assert len(content.history) == 2

    def test_bad_history_still_builds(self):
        content = build_node_tooltip(make_node(history_raw="not json"))
        assert content.history_notice == HISTORY_NOTICE
        assert HISTORY_NOTICE in content.to_text()
        assert content.meta[1] == NOT_AVAILABLE

    def test_html_is_escaped(self):
        node = GraphNode("x", "<b>bold</b>", NodeStatus.ERROR, ExecutionPayload(description="a & b"))
        html = build_node_tooltip(node).to_html()
        assert "&lt;b&gt;bold&lt;/b&gt;" in html
        assert "a &amp; b" in html
        assert "<b>" not in html

    def test_html_history(self):
        html = build_node_tooltip(make_node(history_raw=HISTORY)).to_html()
        assert 'class="tooltip-history-author">Planner<' in html
        assert "Model: gpt-4o (321 tokens)" in html


class TestLinkTooltip:
    """Link tooltip assembly."""

    def test_resolved_labels(self):
        source = GraphNode("a", "Alpha", NodeStatus.SUCCESS)
        target = GraphNode("b", "Beta", NodeStatus.PENDING)
        link = GraphLink("a", "b", "a->b#0", source=source, target=target)
        content = build_link_tooltip(link)
        assert content.header == LINK_HEADER
        assert content.meta == ("From: Alpha", "To: Beta")

    def test_unresolved_falls_back_to_ids(self):
        content = build_link_tooltip(GraphLink("a", "b", "a->b#0"))
        assert content.meta == ("From: a", "To: b")
