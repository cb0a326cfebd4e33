"""
PaginationController - one page of graph data at a time.

Each successful load produces a fresh DatasetSnapshot that fully replaces
the previous one. Loads can be driven two ways:

- load_page()/next()/previous(): fetch synchronously on the caller's thread
- begin()/complete()/fail(): split form for asynchronous fetches. Every
  begin() supersedes earlier requests; a response for a superseded request
  is discarded on arrival so a slow earlier page never replaces a later one.

The current page index only changes when a load completes, so a failed
fetch leaves the last good page in place.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from ..domain.errors import DataFetchError
from ..domain.models import DatasetSnapshot, FetchedPage
from ..ports.data_source_port import ExecutionDataSource

logger = logging.getLogger(__name__)


@dataclass
class PaginationSettings:
    """Paging parameters."""
    page_size: int = 10   # Only used to estimate the total node count
    first_page: int = 1


@dataclass(frozen=True)
class PageRequest:
    """Handle for one in-flight page fetch."""
    token: int
    group_id: str
    page_index: int


class PaginationController:
    """
    Tracks the current page and turns fetched pages into snapshots.

    Usage:
        pager = PaginationController(source, group_id, on_snapshot=engine.load_snapshot)
        pager.load_page(1)
        pager.next()
    """

    def __init__(
        self,
        source: ExecutionDataSource,
        group_id: str,
        on_snapshot: Optional[Callable[[DatasetSnapshot], None]] = None,
        settings: Optional[PaginationSettings] = None,
    ):
        """
        Initialize the controller.

        Args:
            source: Where pages come from
            group_id: Agent group to page through
            on_snapshot: Called with every snapshot that becomes current
            settings: Paging parameters
        """
        self._source = source
        self._group_id = group_id
        self._on_snapshot = on_snapshot
        self.settings = settings or PaginationSettings()

        self._page_index = self.settings.first_page
        self._snapshot: Optional[DatasetSnapshot] = None
        self._last_error: Optional[DataFetchError] = None
        self._latest_token = 0
        self._pending: Optional[PageRequest] = None

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def group_id(self) -> str:
        return self._group_id

    @property
    def page_index(self) -> int:
        """Index of the page currently shown (the last one that loaded)."""
        return self._page_index

    @property
    def has_next_page(self) -> bool:
        return self._snapshot is not None and self._snapshot.has_more

    @property
    def has_previous_page(self) -> bool:
        return self._page_index > self.settings.first_page

    @property
    def snapshot(self) -> Optional[DatasetSnapshot]:
        return self._snapshot

    @property
    def last_error(self) -> Optional[DataFetchError]:
        return self._last_error

    @property
    def is_loading(self) -> bool:
        return self._pending is not None

    @property
    def estimated_total_nodes(self) -> int:
        """Upper bound on nodes across all pages, from the server's page count."""
        if self._snapshot is None:
            return 0
        return self._snapshot.total_pages * self.settings.page_size

    def set_group(self, group_id: str) -> None:
        """Switch to another agent group. Forgets the current page."""
        self._group_id = group_id
        self._page_index = self.settings.first_page
        self._snapshot = None
        self._last_error = None
        self._pending = None
        # Anything still in flight belongs to the old group
        self._latest_token += 1

    # -------------------------------------------------------------------------
    # Synchronous loading
    # -------------------------------------------------------------------------

    def load_page(self, page_index: int) -> DatasetSnapshot:
        """
        Fetch one page and make it current.

        Raises:
            DataFetchError: If the fetch fails. The current page is kept.
        """
        request = self.begin(page_index)
        try:
            page = self._source.fetch_execution_page(request.group_id, request.page_index)
        except DataFetchError as e:
            self.fail(request, e)
            raise
        except Exception as e:
            logger.exception("Unexpected error fetching page %d", request.page_index)
            error = DataFetchError(
                f"Unexpected error: {e}",
                group_id=request.group_id,
                page_index=request.page_index,
            )
            self.fail(request, error)
            raise error from e
        return self.complete(request, page)

    def next(self) -> Optional[DatasetSnapshot]:
        """Load the following page. No-op (returns None) on the last page."""
        if not self.has_next_page:
            return None
        return self.load_page(self._page_index + 1)

    def previous(self) -> Optional[DatasetSnapshot]:
        """Load the preceding page. No-op (returns None) on the first page."""
        if not self.has_previous_page:
            return None
        return self.load_page(self._page_index - 1)

    def reload(self) -> DatasetSnapshot:
        return self.load_page(self._page_index)

    # -------------------------------------------------------------------------
    # Asynchronous loading
    # -------------------------------------------------------------------------

    def begin(self, page_index: int) -> PageRequest:
        """Start a request for page_index, superseding any earlier one."""
        self._latest_token += 1
        request = PageRequest(self._latest_token, self._group_id, page_index)
        self._pending = request
        return request

    def request_next(self) -> Optional[PageRequest]:
        """Request the page after the one shown, even while another request is in flight."""
        if not self.has_next_page:
            return None
        return self.begin(self._page_index + 1)

    def request_previous(self) -> Optional[PageRequest]:
        if not self.has_previous_page:
            return None
        return self.begin(self._page_index - 1)

    def is_current(self, request: PageRequest) -> bool:
        """True if no later request has been started."""
        return request.token == self._latest_token

    def complete(self, request: PageRequest, page: FetchedPage) -> Optional[DatasetSnapshot]:
        """
        Deliver a fetched page.

        Returns:
            The new current snapshot, or None if the request was superseded
        """
        if not self.is_current(request):
            logger.debug(
                "Discarding superseded response for page %d (token %d, latest %d)",
                request.page_index, request.token, self._latest_token,
            )
            return None

        snapshot = DatasetSnapshot.from_page(page, request.page_index, request.group_id)
        self._pending = None
        self._snapshot = snapshot
        self._page_index = request.page_index
        self._last_error = None

        logger.info(
            "Loaded page %d of %d: %d nodes, %d links",
            snapshot.page_index, snapshot.total_pages,
            len(snapshot.nodes), len(snapshot.links),
        )

        if self._on_snapshot is not None:
            self._on_snapshot(snapshot)
        return snapshot

    def fail(self, request: PageRequest, error: DataFetchError) -> bool:
        """
        Deliver a fetch failure.

        Returns:
            True if the failure was recorded, False if the request was superseded
        """
        if not self.is_current(request):
            logger.debug("Discarding superseded failure for page %d: %s", request.page_index, error)
            return False

        self._pending = None
        self._last_error = error
        logger.warning(
            "Failed to load page %d (staying on page %d): %s",
            request.page_index, self._page_index, error,
        )
        return True
