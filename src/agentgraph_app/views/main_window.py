"""
Main Window for the agent graph viewer.

Thin view layer using MVVM pattern:
- ViewModels hold state and drive the core services
- This view handles UI layout and binding
"""

from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QLabel, QPushButton, QStatusBar,
)

from ..config import AppConfig
from ..viewmodels import GraphVM, PaginationVM, AppCoordinator
from .graph import GraphCanvas


class MainWindow(QMainWindow):
    """Main application window using MVVM pattern."""

    def __init__(self, config: AppConfig):
        super().__init__()

        self.setWindowTitle("Agent Execution Graph")
        self.resize(1200, 800)

        self._config = config
        self._source = config.create_data_source()

        # Initialize ViewModels
        self._init_viewmodels()

        # Setup UI
        self._setup_ui()
        self._setup_status_bar()

        # Bind ViewModels to UI
        self._bind_viewmodels()
        self._update_navigation()

        # Initial data load
        self._coordinator.start()

    def _init_viewmodels(self):
        """Initialize all ViewModels."""
        self._graph_vm = GraphVM(self._config, parent=self)
        self._pagination_vm = PaginationVM(
            self._source,
            self._config.group_id,
            settings=self._config.pagination,
            parent=self,
        )

        # Create coordinator for cross-VM wiring
        self._coordinator = AppCoordinator(self._graph_vm, self._pagination_vm)

    def _bind_viewmodels(self):
        """Bind ViewModel signals to UI updates."""
        # Pagination bindings
        self._pagination_vm.navigation_changed.connect(self._update_navigation)
        self._pagination_vm.page_changed.connect(lambda _: self._update_navigation())
        self._pagination_vm.loading_changed.connect(lambda _: self._update_navigation())

        # Coordinator bindings
        self._coordinator.status_message.connect(self._show_status)

    # -------------------------------------------------------------------------
    # UI Setup
    # -------------------------------------------------------------------------

    def _setup_ui(self):
        """Setup the main UI layout."""
        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(12, 12, 12, 8)
        layout.setSpacing(8)

        # Header
        title = QLabel("Agent Execution Graph")
        title.setObjectName("titleLabel")
        layout.addWidget(title)

        subtitle = QLabel(f"Group {self._config.group_id}")
        subtitle.setObjectName("subtitleLabel")
        layout.addWidget(subtitle)

        # Graph
        self.canvas = GraphCanvas(self._graph_vm)
        layout.addWidget(self.canvas, stretch=1)

        # Navigation bar
        nav = QHBoxLayout()

        self.prev_btn = QPushButton("◀ Previous")
        self.prev_btn.clicked.connect(self._pagination_vm.previous_page)
        nav.addWidget(self.prev_btn)

        self.page_label = QLabel()
        self.page_label.setObjectName("pageLabel")
        nav.addWidget(self.page_label)

        self.next_btn = QPushButton("Next ▶")
        self.next_btn.clicked.connect(self._pagination_vm.next_page)
        nav.addWidget(self.next_btn)

        self.total_label = QLabel()
        self.total_label.setObjectName("totalLabel")
        nav.addWidget(self.total_label)

        nav.addStretch()

        reset_btn = QPushButton("Reset view")
        reset_btn.clicked.connect(self._graph_vm.reset_view)
        nav.addWidget(reset_btn)

        layout.addLayout(nav)

    def _setup_status_bar(self):
        """Setup the status bar."""
        status_bar = QStatusBar()
        self.setStatusBar(status_bar)

        source_label = QLabel("Demo data" if self._config.demo else self._config.api_url)
        status_bar.addPermanentWidget(source_label)

    # -------------------------------------------------------------------------
    # UI Update Methods (bound to ViewModel signals)
    # -------------------------------------------------------------------------

    def _update_navigation(self):
        """Enable controls for the pages that exist."""
        vm = self._pagination_vm
        loading = vm.is_loading

        self.prev_btn.setEnabled(vm.has_previous_page and not loading)
        self.next_btn.setEnabled(vm.has_next_page and not loading)
        self.page_label.setText(f"Page {vm.page_index}")

        total = vm.estimated_total_nodes
        self.total_label.setText(f"~{total} nodes" if total else "")

    def _show_status(self, message: str, timeout: int):
        self.statusBar().showMessage(message, timeout)

    def closeEvent(self, event):
        """Handle window close."""
        self._coordinator.shutdown()
        event.accept()
