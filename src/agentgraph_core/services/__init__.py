"""
Services for the agent graph.

Force layout, viewport, interaction, tooltips and pagination.
"""

from .layout import LayoutEngine, LayoutSettings
from .viewport import ViewportTransform, ViewportSettings, Transform
from .interaction import (
    InteractionController,
    InteractionSettings,
    HighlightState,
    TooltipState,
)
from .tooltip import TooltipContent, build_node_tooltip, build_link_tooltip
from .pagination import PaginationController, PaginationSettings, PageRequest

__all__ = [
    "LayoutEngine",
    "LayoutSettings",
    "ViewportTransform",
    "ViewportSettings",
    "Transform",
    "InteractionController",
    "InteractionSettings",
    "HighlightState",
    "TooltipState",
    "TooltipContent",
    "build_node_tooltip",
    "build_link_tooltip",
    "PaginationController",
    "PaginationSettings",
    "PageRequest",
]
