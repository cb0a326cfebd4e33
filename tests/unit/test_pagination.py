"""
Tests for PaginationController.
"""

import pytest

from agentgraph_core.adapters.memory_data_source import InMemoryExecutionSource
from agentgraph_core.domain.errors import DataFetchError
from agentgraph_core.domain.models import FetchedPage
from agentgraph_core.ports.data_source_port import ExecutionDataSource
from agentgraph_core.services.pagination import PaginationController, PaginationSettings


@pytest.fixture
def pager(memory_source):
    return PaginationController(memory_source, "g")


class TestSynchronousLoading:
    """load_page / next / previous."""

    def test_first_page(self, pager):
        snapshot = pager.load_page(1)
        assert [n.node_id for n in snapshot.nodes] == ["a1", "a2"]
        assert pager.page_index == 1
        assert pager.has_next_page
        assert not pager.has_previous_page

    def test_next_and_previous(self, pager):
        pager.load_page(1)
        assert pager.next().page_index == 2
        assert pager.page_index == 2
        assert pager.previous().page_index == 1

    def test_previous_on_first_page_does_not_fetch(self, pager, memory_source):
        pager.load_page(1)
        memory_source.fetch_log.clear()
        assert pager.previous() is None
        assert memory_source.fetch_log == []
        assert pager.page_index == 1

    def test_next_on_last_page_is_noop(self, pager, memory_source):
        pager.load_page(3)
        assert not pager.has_next_page
        memory_source.fetch_log.clear()
        assert pager.next() is None
        assert memory_source.fetch_log == []

    def test_next_before_any_load(self, pager):
        assert pager.next() is None

    def test_snapshot_replaces_previous(self, pager):
        first = pager.load_page(1)
        second = pager.load_page(2)
        assert pager.snapshot is second
        assert {n.node_id for n in second.nodes}.isdisjoint({n.node_id for n in first.nodes})

    def test_on_snapshot_callback(self, memory_source):
        received = []
        pager = PaginationController(memory_source, "g", on_snapshot=received.append)
        pager.load_page(2)
        assert [s.page_index for s in received] == [2]

    def test_page_past_end_is_empty(self, pager):
        snapshot = pager.load_page(9)
        assert snapshot.nodes == ()
        assert not snapshot.has_more


class TestFailures:
    """A failed fetch leaves the last good page in place."""

    def test_failure_keeps_page(self, pager, memory_source):
        pager.load_page(1)
        good = pager.snapshot
        memory_source.fail_page("g", 2)

        with pytest.raises(DataFetchError):
            pager.next()

        assert pager.page_index == 1
        assert pager.snapshot is good
        assert pager.last_error is not None
        assert not pager.is_loading

    def test_success_clears_error(self, pager, memory_source):
        memory_source.fail_page("g", 1)
        with pytest.raises(DataFetchError):
            pager.load_page(1)
        memory_source.heal_page("g", 1)
        pager.reload()
        assert pager.last_error is None

    def test_unexpected_error_is_wrapped(self):
        """A source breaking its contract still ends the load as a DataFetchError."""

        class BrokenSource(ExecutionDataSource):
            def fetch_execution_page(self, group_id, page):
                raise ValueError("bad byte")

        pager = PaginationController(BrokenSource(), "g")
        with pytest.raises(DataFetchError, match="bad byte") as info:
            pager.load_page(1)

        assert isinstance(info.value.__cause__, ValueError)
        assert not pager.is_loading
        assert pager.last_error is info.value

    def test_unknown_group(self, memory_source):
        pager = PaginationController(memory_source, "nope")
        with pytest.raises(DataFetchError, match="Unknown agent group"):
            pager.load_page(1)


class TestSupersededRequests:
    """Only the latest request may change the current page."""

    def test_stale_response_discarded(self, pager):
        pager.load_page(1)
        to_page_2 = pager.begin(2)
        to_page_3 = pager.begin(3)

        page_3 = FetchedPage.from_envelope({"nodes": [{"id": "c1"}]})
        page_2 = FetchedPage.from_envelope({"nodes": [{"id": "b1"}]})

        assert pager.complete(to_page_3, page_3) is not None
        assert pager.complete(to_page_2, page_2) is None
        assert pager.page_index == 3
        assert [n.node_id for n in pager.snapshot.nodes] == ["c1"]

    def test_stale_failure_ignored(self, pager):
        old = pager.begin(2)
        pager.begin(3)
        assert pager.fail(old, DataFetchError("late")) is False
        assert pager.last_error is None
        assert pager.is_loading

    def test_is_current(self, pager):
        first = pager.begin(1)
        assert pager.is_current(first)
        pager.begin(2)
        assert not pager.is_current(first)

    def test_set_group_supersedes_in_flight(self, pager):
        request = pager.begin(1)
        pager.set_group("other")
        assert not pager.is_current(request)
        assert pager.group_id == "other"
        assert pager.snapshot is None

    def test_request_next_while_loading_targets_page_after_shown(self, pager):
        """Next is relative to the page on screen, not to one still loading."""
        pager.load_page(1)
        first = pager.request_next()
        second = pager.request_next()
        assert second.page_index == 2
        assert not pager.is_current(first)
        assert pager.is_current(second)

    def test_request_previous_on_first_page(self, pager):
        pager.load_page(1)
        assert pager.request_previous() is None


class TestEstimates:
    def test_estimated_total_nodes(self):
        source = InMemoryExecutionSource({"g": [{"nodes": [], "totalPages": 7}]})
        pager = PaginationController(source, "g", settings=PaginationSettings(page_size=25))
        assert pager.estimated_total_nodes == 0
        pager.load_page(1)
        assert pager.estimated_total_nodes == 175
