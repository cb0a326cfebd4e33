"""
App Coordinator for cross-ViewModel communication.

Handles:
- Page loaded → Graph dataset replaced
- Fetch failure → Status bar message (graph keeps the last good page)
"""

from PyQt6.QtCore import QObject, pyqtSignal

from agentgraph_core.domain.models import DatasetSnapshot

from .graph_vm import GraphVM
from .pagination_vm import PaginationVM


class AppCoordinator(QObject):
    """
    Coordinates communication between ViewModels.

    This allows ViewModels to remain decoupled while still responding
    to changes in other ViewModels.
    """

    # Signal emitted when status bar should update
    status_message = pyqtSignal(str, int)  # message, timeout_ms

    def __init__(self, graph_vm: GraphVM, pagination_vm: PaginationVM):
        """
        Initialize the coordinator.

        Args:
            graph_vm: Graph ViewModel
            pagination_vm: Pagination ViewModel
        """
        super().__init__()

        self._graph_vm = graph_vm
        self._pagination_vm = pagination_vm

        self._connect_signals()

    def _connect_signals(self) -> None:
        """Connect cross-ViewModel signals."""
        self._pagination_vm.snapshot_ready.connect(self._on_snapshot_ready)
        self._pagination_vm.error_occurred.connect(self._on_fetch_error)
        self._pagination_vm.loading_changed.connect(self._on_loading_changed)

    # -------------------------------------------------------------------------
    # Handlers
    # -------------------------------------------------------------------------

    def _on_snapshot_ready(self, snapshot: DatasetSnapshot) -> None:
        """Hand the new page to the graph and summarise it."""
        self._graph_vm.set_snapshot(snapshot)

        message = (
            f"Page {snapshot.page_index} of {snapshot.total_pages} | "
            f"Nodes: {len(snapshot.nodes)} | Links: {len(self._graph_vm.engine.links)}"
        )
        dropped = self._graph_vm.engine.dropped_link_count
        if dropped:
            message += f" | {dropped} link(s) skipped"
        self.status_message.emit(message, 0)  # Persistent

    def _on_fetch_error(self, message: str) -> None:
        self.status_message.emit(message, 8000)

    def _on_loading_changed(self, loading: bool) -> None:
        if loading:
            self.status_message.emit("Loading...", 0)

    # -------------------------------------------------------------------------
    # Public Methods
    # -------------------------------------------------------------------------

    def start(self) -> None:
        """Load the first page and start the layout loop."""
        self._graph_vm.start()
        self._pagination_vm.load_page(self._pagination_vm.controller.settings.first_page)

    def shutdown(self) -> None:
        self._graph_vm.stop()
        self._pagination_vm.wait_for_workers()
