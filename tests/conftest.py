"""
Shared fixtures for the agent graph test suite.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from agentgraph_core.adapters.memory_data_source import InMemoryExecutionSource, build_demo_source
from agentgraph_core.domain.models import DatasetSnapshot, FetchedPage, ViewportSize
from agentgraph_core.services.layout import LayoutEngine
from agentgraph_core.services.viewport import ViewportTransform


def make_envelope(node_ids, links, has_more=None, total_pages=None, statuses=None):
    """
    Raw page envelope with one node per id and (source, target) links.

    hasMore/totalPages are left out unless given.
    """
    statuses = statuses or {}
    envelope = {
        "nodes": [
            {"id": n, "label": n, "status": statuses.get(n, "success")}
            for n in node_ids
        ],
        "links": [{"source": s, "target": t} for s, t in links],
    }
    if has_more is not None:
        envelope["hasMore"] = has_more
    if total_pages is not None:
        envelope["totalPages"] = total_pages
    return envelope


def make_snapshot(node_ids, links, page_index=1, has_more=False):
    page = FetchedPage.from_envelope(make_envelope(node_ids, links, has_more=has_more))
    return DatasetSnapshot.from_page(page, page_index, "group-1")


@pytest.fixture
def chain_snapshot():
    """A -> B -> C"""
    return make_snapshot(["A", "B", "C"], [("A", "B"), ("B", "C")])


@pytest.fixture
def viewport_size():
    return ViewportSize(800, 600)


@pytest.fixture
def engine(viewport_size):
    return LayoutEngine(viewport_size)


@pytest.fixture
def viewport(viewport_size):
    return ViewportTransform(viewport_size)


@pytest.fixture
def memory_source():
    """Three-page group 'g' with 2, 2 and 1 nodes."""
    return InMemoryExecutionSource({
        "g": [
            make_envelope(["a1", "a2"], [("a1", "a2")]),
            make_envelope(["b1", "b2"], [("b1", "b2")]),
            make_envelope(["c1"], []),
        ],
    })


@pytest.fixture
def demo_source():
    return build_demo_source("demo-group", page_count=2, page_size=6)
