"""
Domain models for the agent graph.

Contains DTOs, enums, errors and geometry values used throughout the core.
"""

from .models import (
    ExecutionPayload,
    HistoryEntry,
    NodeRecord,
    LinkRecord,
    FetchedPage,
    GraphNode,
    GraphLink,
    DatasetSnapshot,
    ViewportSize,
    Rect,
    NodeFrame,
    LinkFrame,
    RenderFrame,
    polyline_midpoint,
)
from .enums import (
    NodeStatus,
    NodeEmphasis,
    LinkStyle,
    TooltipKind,
)
from .errors import (
    AgentGraphError,
    DataFetchError,
    MalformedHistoryError,
    UnknownLinkEndpointError,
    LayoutDivergenceError,
)

__all__ = [
    # Models
    "ExecutionPayload",
    "HistoryEntry",
    "NodeRecord",
    "LinkRecord",
    "FetchedPage",
    "GraphNode",
    "GraphLink",
    "DatasetSnapshot",
    "ViewportSize",
    "Rect",
    "NodeFrame",
    "LinkFrame",
    "RenderFrame",
    "polyline_midpoint",
    # Enums
    "NodeStatus",
    "NodeEmphasis",
    "LinkStyle",
    "TooltipKind",
    # Errors
    "AgentGraphError",
    "DataFetchError",
    "MalformedHistoryError",
    "UnknownLinkEndpointError",
    "LayoutDivergenceError",
]
