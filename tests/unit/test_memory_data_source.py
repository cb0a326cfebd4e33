"""
Tests for InMemoryExecutionSource and the demo dataset.
"""

import pytest

from agentgraph_core.adapters.memory_data_source import InMemoryExecutionSource, build_demo_source
from agentgraph_core.domain.errors import DataFetchError
from agentgraph_core.domain.models import DatasetSnapshot, FetchedPage
from agentgraph_core.services.tooltip import HISTORY_NOTICE, summarize_history


class TestInMemorySource:
    """Serving prepared pages."""

    def test_derives_pagination_fields(self, memory_source):
        first = memory_source.fetch_execution_page("g", 1)
        last = memory_source.fetch_execution_page("g", 3)
        assert first.has_more and first.total_pages == 3
        assert not last.has_more

    def test_fetched_page_returned_as_is(self):
        page = FetchedPage(has_more=True, total_pages=5)
        source = InMemoryExecutionSource({"g": [page]})
        assert source.fetch_execution_page("g", 1) is page

    def test_fetch_log(self, memory_source):
        memory_source.fetch_execution_page("g", 2)
        assert memory_source.fetch_log == [("g", 2)]

    def test_fail_and_heal(self, memory_source):
        memory_source.fail_page("g", 1)
        with pytest.raises(DataFetchError):
            memory_source.fetch_execution_page("g", 1)
        memory_source.heal_page("g", 1)
        assert memory_source.fetch_execution_page("g", 1).nodes

    def test_bad_envelope(self):
        source = InMemoryExecutionSource({"g": [{"nodes": [{"label": "no id"}]}]})
        with pytest.raises(DataFetchError, match="shape"):
            source.fetch_execution_page("g", 1)


class TestDemoSource:
    """Generated demo pages."""

    def test_page_count(self, demo_source):
        assert demo_source.fetch_execution_page("demo-group", 1).has_more
        last = demo_source.fetch_execution_page("demo-group", 2)
        assert not last.has_more
        assert last.total_pages == 2
        assert len(last.nodes) == 6

    def test_all_links_resolve(self, demo_source):
        page = demo_source.fetch_execution_page("demo-group", 1)
        ids = {n.node_id for n in page.nodes}
        for link in page.links:
            assert link.source in ids and link.target in ids

    def test_has_loop_and_parallel_links(self, demo_source):
        page = demo_source.fetch_execution_page("demo-group", 1)
        pairs = [(l.source, l.target) for l in page.links]
        assert any(s == t for s, t in pairs)
        assert len(pairs) != len(set(pairs))

    def test_one_broken_history_per_page(self):
        source = build_demo_source("g", page_count=1, page_size=8)
        page = source.fetch_execution_page("g", 1)
        notices = [summarize_history(n.payload.history_raw).notice for n in page.nodes]
        assert notices.count(HISTORY_NOTICE) == 1

    def test_snapshot_ids_unique(self, demo_source):
        page = demo_source.fetch_execution_page("demo-group", 1)
        snapshot = DatasetSnapshot.from_page(page, 1)
        ids = [link.link_id for link in snapshot.links]
        assert len(ids) == len(set(ids))
