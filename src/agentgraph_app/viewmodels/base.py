"""
Base ViewModel class for the agent graph MVVM layer.

Provides the foundation for all ViewModels with:
- PyQt6 signal support for UI binding
- A shared error signal for user-visible failures
"""

from typing import Optional, Any

from PyQt6.QtCore import QObject, pyqtSignal


class BaseViewModel(QObject):
    """
    Base class for all ViewModels.

    Pattern:
    - Properties with signals on change
    - Commands as methods
    - No widget references (UI-agnostic)
    - Core services injected or built from settings in the constructor

    Example:
        class PageVM(BaseViewModel):
            page_changed = pyqtSignal(int)

            def set_page(self, page: int) -> None:
                if self._page != page:
                    self._page = page
                    self._notify_change(self.page_changed, page)
    """

    # User-visible failure message
    error_occurred = pyqtSignal(str)

    def __init__(self, parent: Optional[QObject] = None):
        """
        Initialize the ViewModel.

        Args:
            parent: Optional parent QObject for Qt memory management
        """
        super().__init__(parent)

    def _notify_change(self, signal: pyqtSignal, *args: Any) -> None:
        """Emit a change signal."""
        signal.emit(*args)
