"""
Graph visualization package - QGraphicsView-based implementation.

This package provides the interactive agent graph:
- Force-directed positions from agentgraph_core's LayoutEngine
- Pan and zoom through a root-item transform
- Hover highlighting with rich tooltips
- Node dragging
"""

from .canvas import GraphCanvas
from .scene import GraphScene

__all__ = ["GraphCanvas", "GraphScene"]
