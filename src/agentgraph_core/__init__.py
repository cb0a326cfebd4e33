"""
AgentGraph Core - Headless engine for agent execution graphs.

This module provides force-directed layout, pan/zoom, hover/drag
interaction and paginated data loading for agent execution graphs. It has
no UI dependencies and can be driven from tests or any renderer.
"""

__version__ = "0.1.0"

# Lazy imports to avoid loading everything at once
def __getattr__(name):
    if name == "LayoutEngine":
        from .services.layout import LayoutEngine
        return LayoutEngine
    elif name == "ViewportTransform":
        from .services.viewport import ViewportTransform
        return ViewportTransform
    elif name == "InteractionController":
        from .services.interaction import InteractionController
        return InteractionController
    elif name == "PaginationController":
        from .services.pagination import PaginationController
        return PaginationController
    elif name == "HttpExecutionSource":
        from .adapters.http_data_source import HttpExecutionSource
        return HttpExecutionSource
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

__all__ = [
    "__version__",
    "LayoutEngine",
    "ViewportTransform",
    "InteractionController",
    "PaginationController",
    "HttpExecutionSource",
]
