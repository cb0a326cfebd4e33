"""
Fetch worker thread.

Fetches one page of graph data in the background without blocking the UI.
"""

import logging

from PyQt6.QtCore import QThread, pyqtSignal

from agentgraph_core.domain.errors import DataFetchError
from agentgraph_core.ports import ExecutionDataSource
from agentgraph_core.services.pagination import PageRequest

logger = logging.getLogger(__name__)


class FetchWorker(QThread):
    """
    Background thread for one page fetch.

    Signals:
        page_fetched(PageRequest, FetchedPage): Emitted when the page arrived
        fetch_failed(PageRequest, DataFetchError): Emitted when the fetch failed

    Both carry the request so the receiver can tell a superseded response
    from the current one.
    """

    page_fetched = pyqtSignal(object, object)  # request, page
    fetch_failed = pyqtSignal(object, object)  # request, error

    def __init__(self, source: ExecutionDataSource, request: PageRequest):
        """
        Initialize the worker.

        Args:
            source: Data source to fetch from
            request: Which group and page to fetch
        """
        super().__init__()
        self.source = source
        self.request = request

    def run(self):
        """Run the fetch."""
        try:
            page = self.source.fetch_execution_page(self.request.group_id, self.request.page_index)
        except DataFetchError as e:
            self.fetch_failed.emit(self.request, e)
            return
        except Exception as e:
            logger.exception("Unexpected error fetching page %d", self.request.page_index)
            self.fetch_failed.emit(
                self.request,
                DataFetchError(
                    f"Unexpected error: {e}",
                    group_id=self.request.group_id,
                    page_index=self.request.page_index,
                ),
            )
            return

        self.page_fetched.emit(self.request, page)
