"""
ViewModels for the agent graph app.

MVVM architecture separating interaction logic from UI:
- ViewModels hold state and drive the core services
- Views (Qt widgets) handle rendering and user input
- agentgraph_core does layout, hit state and data access
"""

from .base import BaseViewModel
from .graph_vm import GraphVM
from .pagination_vm import PaginationVM
from .coordinator import AppCoordinator

__all__ = [
    # Base
    "BaseViewModel",

    # ViewModels
    "GraphVM",
    "PaginationVM",
    "AppCoordinator",
]
