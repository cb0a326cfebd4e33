"""
In-memory data source adapter.

Serves pre-built pages. Used by the test suite and by the app's demo mode
so the graph can be explored without a backend.
"""

import json
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from ..domain.errors import DataFetchError
from ..domain.models import FetchedPage
from ..ports.data_source_port import ExecutionDataSource


class InMemoryExecutionSource(ExecutionDataSource):
    """Data source backed by a dict of page lists."""

    def __init__(self, pages: Optional[Dict[str, Sequence[Any]]] = None):
        """
        Initialize the source.

        Args:
            pages: group_id -> list of pages. Each page is a FetchedPage or
                a raw envelope dict (validated on fetch, like HTTP data).
                hasMore/totalPages are derived from the list when a raw
                envelope omits them.
        """
        self._pages: Dict[str, List[Any]] = {
            group: list(items) for group, items in (pages or {}).items()
        }
        self._failing: Set[Tuple[str, int]] = set()
        self.fetch_log: List[Tuple[str, int]] = []

    def add_page(self, group_id: str, page: Any) -> None:
        """Append a page to a group."""
        self._pages.setdefault(group_id, []).append(page)

    def fail_page(self, group_id: str, page: int) -> None:
        """Make fetching (group_id, page) raise DataFetchError."""
        self._failing.add((group_id, page))

    def heal_page(self, group_id: str, page: int) -> None:
        """Undo fail_page."""
        self._failing.discard((group_id, page))

    def fetch_execution_page(self, group_id: str, page: int) -> FetchedPage:
        """Return the requested page. See ExecutionDataSource."""
        self.fetch_log.append((group_id, page))

        if (group_id, page) in self._failing:
            raise DataFetchError(
                f"Simulated failure for page {page}",
                group_id=group_id, page_index=page,
            )

        group_pages = self._pages.get(group_id)
        if group_pages is None:
            raise DataFetchError(
                f"Unknown agent group {group_id!r}",
                group_id=group_id, page_index=page,
            )
        if page < 1 or page > len(group_pages):
            # Past the end is an empty, final page rather than an error
            return FetchedPage(has_more=False, total_pages=len(group_pages))

        item = group_pages[page - 1]
        if isinstance(item, FetchedPage):
            return item

        envelope = dict(item)
        envelope.setdefault("hasMore", page < len(group_pages))
        envelope.setdefault("totalPages", len(group_pages))
        try:
            return FetchedPage.from_envelope(envelope)
        except ValueError as e:
            raise DataFetchError(
                f"Unexpected page shape for page {page}: {e}",
                group_id=group_id, page_index=page,
            ) from e


# -----------------------------------------------------------------------------
# Demo data
# -----------------------------------------------------------------------------

DEMO_AGENTS = [
    ("Planner", "success"),
    ("Retriever", "success"),
    ("Summarizer", "running"),
    ("Critic", "pending"),
    ("Coder", "error"),
    ("Reviewer", "success"),
    ("Tester", "running"),
    ("Reporter", "pending"),
]


def build_demo_source(group_id: str, page_count: int = 3, page_size: int = 10) -> InMemoryExecutionSource:
    """
    Build a deterministic multi-page demo dataset.

    Each page is a short pipeline: consecutive steps are chained, every
    third step fans back to the page's first step, and one step loops on
    itself so all link shapes show up.
    """
    source = InMemoryExecutionSource()

    for page in range(1, page_count + 1):
        nodes = []
        links = []
        for i in range(page_size):
            agent, status = DEMO_AGENTS[(i + page) % len(DEMO_AGENTS)]
            node_id = f"p{page}-n{i}"
            history = [
                {
                    "AuthorName": agent,
                    "Content": f"Step {i + 1} of page {page} handled by {agent}.",
                    "ModelId": "gpt-4o-mini",
                    "Metadata": {"Usage": {"TotalTokenCount": 120 + 17 * i}},
                },
            ]
            nodes.append({
                "id": node_id,
                "label": f"{agent} {i + 1}",
                "status": status,
                "order": i,
                "data": {
                    "id": node_id,
                    "agent_group_id": group_id,
                    "run_status": status,
                    "run_on": f"2024-10-{page:02d}T{8 + i % 10:02d}:{(7 * i) % 60:02d}:05Z",
                    # One node per page carries a broken history to show the fallback
                    "agent_execution_history": json.dumps(history) if i != 5 else "not json",
                    "app_insight_operation_id": f"op-{page}-{i}",
                },
            })
            if i > 0:
                links.append({"source": f"p{page}-n{i - 1}", "target": node_id})
            if i > 1 and i % 3 == 0:
                links.append({"source": node_id, "target": f"p{page}-n0"})

        links.append({"source": f"p{page}-n2", "target": f"p{page}-n2"})
        links.append({"source": f"p{page}-n0", "target": f"p{page}-n1"})

        source.add_page(group_id, {
            "nodes": nodes,
            "links": links,
            "hasMore": page < page_count,
            "totalPages": page_count,
        })

    return source
