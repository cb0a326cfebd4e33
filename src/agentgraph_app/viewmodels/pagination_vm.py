"""
Pagination ViewModel.

Wraps the PaginationController with background fetching. Each request
runs on its own FetchWorker; responses are delivered back on the UI thread
and the controller discards the ones that were superseded meanwhile.
"""

import logging
from typing import List, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from agentgraph_core.domain.errors import DataFetchError
from agentgraph_core.domain.models import DatasetSnapshot, FetchedPage
from agentgraph_core.ports import ExecutionDataSource
from agentgraph_core.services.pagination import (
    PageRequest, PaginationController, PaginationSettings,
)

from ..workers.fetch_worker import FetchWorker
from .base import BaseViewModel

logger = logging.getLogger(__name__)


class PaginationVM(BaseViewModel):
    """
    ViewModel for page navigation.

    Signals:
        snapshot_ready: A page loaded and became current (DatasetSnapshot)
        page_changed: Current page index changed (int)
        loading_changed: A fetch started or ended (bool)
        navigation_changed: has_previous_page / has_next_page may have changed
        error_occurred: (from BaseViewModel) a fetch failed

    State:
        page_index, has_previous_page, has_next_page, is_loading,
        estimated_total_nodes
    """

    snapshot_ready = pyqtSignal(object)  # DatasetSnapshot
    page_changed = pyqtSignal(int)
    loading_changed = pyqtSignal(bool)
    navigation_changed = pyqtSignal()

    def __init__(
        self,
        source: ExecutionDataSource,
        group_id: str,
        settings: Optional[PaginationSettings] = None,
        threaded: bool = True,
        parent: Optional[QObject] = None,
    ):
        """
        Initialize the ViewModel.

        Args:
            source: Where pages come from
            group_id: Agent group to page through
            settings: Paging parameters
            threaded: Fetch on a FetchWorker (False fetches inline, for tests)
            parent: Optional parent QObject
        """
        super().__init__(parent)

        self._source = source
        self._controller = PaginationController(source, group_id, settings=settings)
        self._threaded = threaded
        self._workers: List[FetchWorker] = []

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def controller(self) -> PaginationController:
        return self._controller

    @property
    def page_index(self) -> int:
        return self._controller.page_index

    @property
    def has_previous_page(self) -> bool:
        return self._controller.has_previous_page

    @property
    def has_next_page(self) -> bool:
        return self._controller.has_next_page

    @property
    def is_loading(self) -> bool:
        return self._controller.is_loading

    @property
    def estimated_total_nodes(self) -> int:
        return self._controller.estimated_total_nodes

    @property
    def snapshot(self) -> Optional[DatasetSnapshot]:
        return self._controller.snapshot

    @property
    def last_error(self) -> Optional[DataFetchError]:
        return self._controller.last_error

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def load_page(self, page_index: int) -> PageRequest:
        """Request a page, superseding any request in flight."""
        request = self._controller.begin(page_index)
        self._dispatch(request)
        return request

    def next_page(self) -> bool:
        """Request the following page. Returns False on the last page."""
        request = self._controller.request_next()
        if request is None:
            return False
        self._dispatch(request)
        return True

    def previous_page(self) -> bool:
        """Request the preceding page. Returns False on the first page."""
        request = self._controller.request_previous()
        if request is None:
            return False
        self._dispatch(request)
        return True

    def reload(self) -> PageRequest:
        return self.load_page(self._controller.page_index)

    # -------------------------------------------------------------------------
    # Fetching
    # -------------------------------------------------------------------------

    def _dispatch(self, request: PageRequest) -> None:
        self.loading_changed.emit(True)

        if not self._threaded:
            try:
                page = self._source.fetch_execution_page(request.group_id, request.page_index)
            except DataFetchError as e:
                self._on_fetch_failed(request, e)
            except Exception as e:
                logger.exception("Unexpected error fetching page %d", request.page_index)
                self._on_fetch_failed(request, DataFetchError(
                    f"Unexpected error: {e}",
                    group_id=request.group_id,
                    page_index=request.page_index,
                ))
            else:
                self._on_page_fetched(request, page)
            return

        worker = FetchWorker(self._source, request)
        worker.page_fetched.connect(self._on_page_fetched)
        worker.fetch_failed.connect(self._on_fetch_failed)
        worker.finished.connect(lambda w=worker: self._on_worker_finished(w))
        # Keep a reference until the thread has finished
        self._workers.append(worker)
        worker.start()

    def _on_worker_finished(self, worker: FetchWorker) -> None:
        if worker in self._workers:
            self._workers.remove(worker)
        worker.deleteLater()

    def _on_page_fetched(self, request: PageRequest, page: FetchedPage) -> None:
        snapshot = self._controller.complete(request, page)
        if snapshot is None:
            return

        self.loading_changed.emit(False)
        self._notify_change(self.page_changed, snapshot.page_index)
        self.navigation_changed.emit()
        self.snapshot_ready.emit(snapshot)

    def _on_fetch_failed(self, request: PageRequest, error: DataFetchError) -> None:
        if not self._controller.fail(request, error):
            return

        self.loading_changed.emit(False)
        self.navigation_changed.emit()
        self.error_occurred.emit(f"Could not load page {request.page_index}: {error}")

    def wait_for_workers(self, timeout_ms: int = 5000) -> None:
        """Block until in-flight fetches finish (used on shutdown)."""
        for worker in list(self._workers):
            worker.wait(timeout_ms)
