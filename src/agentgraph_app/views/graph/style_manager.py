"""
Style manager for the agent graph.

Centralizes colors, sizes, fonts and pens. Items ask the StyleManager
instead of hard-coding paint parameters.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from PyQt6.QtCore import Qt, QPointF
from PyQt6.QtGui import QBrush, QColor, QFont, QLinearGradient, QPen

from agentgraph_core.domain.enums import LinkStyle, NodeEmphasis, NodeStatus


@dataclass
class GraphStyle:
    """All styling parameters for the graph."""

    # Background
    bg_color: QColor = field(default_factory=lambda: QColor("#fafafa"))

    # Nodes
    node_radius: float = 20.0
    node_outline: QColor = field(default_factory=lambda: QColor("#ffffff"))
    node_outline_width: float = 2.0

    # Labels
    label_color: QColor = field(default_factory=lambda: QColor("#2c3e50"))
    label_offset: float = 35.0   # Baseline below the node centre
    font_size: int = 9

    # Links (gradient from source to target)
    link_colors: Tuple[QColor, QColor] = field(
        default_factory=lambda: (QColor(33, 150, 243, 204), QColor(3, 169, 244, 102))
    )
    link_highlight_colors: Tuple[QColor, QColor] = field(
        default_factory=lambda: (QColor(21, 101, 192, 255), QColor(25, 118, 210, 204))
    )
    link_width: float = 2.0
    link_highlight_width: float = 3.0

    # Direction marker at the link midpoint
    arrow_color: QColor = field(default_factory=lambda: QColor("#1565c0"))
    arrow_size: float = 12.0


class StyleManager:
    """Manages all styling for the graph visualization."""

    # Status colors: gradient start, gradient end
    STATUS_COLORS: Dict[NodeStatus, Tuple[QColor, QColor]] = {
        NodeStatus.SUCCESS: (QColor("#43a047"), QColor(102, 187, 106, 204)),
        NodeStatus.RUNNING: (QColor("#1e88e5"), QColor(66, 165, 245, 204)),
        NodeStatus.ERROR: (QColor("#e53935"), QColor(239, 83, 80, 204)),
        NodeStatus.PENDING: (QColor("#fb8c00"), QColor(255, 167, 38, 204)),
    }

    def __init__(self, style: Optional[GraphStyle] = None, dim_opacity: float = 0.3):
        self.style = style or GraphStyle()
        self.dim_opacity = dim_opacity
        self._font = QFont("Segoe UI", self.style.font_size)

    # -------------------------------------------------------------------------
    # Nodes
    # -------------------------------------------------------------------------

    def get_status_colors(self, status: NodeStatus) -> Tuple[QColor, QColor]:
        """Gradient colors for a status. Unknown statuses look pending."""
        return self.STATUS_COLORS.get(status, self.STATUS_COLORS[NodeStatus.PENDING])

    def get_node_brush(self, status: NodeStatus) -> QBrush:
        """Diagonal gradient across the node circle."""
        r = self.style.node_radius
        start, end = self.get_status_colors(status)
        gradient = QLinearGradient(QPointF(-r, -r), QPointF(r, r))
        gradient.setColorAt(0.0, start)
        gradient.setColorAt(1.0, end)
        return QBrush(gradient)

    def get_node_pen(self) -> QPen:
        return QPen(self.style.node_outline, self.style.node_outline_width)

    def get_node_opacity(self, emphasis: NodeEmphasis) -> float:
        if emphasis == NodeEmphasis.DIM:
            return self.dim_opacity
        return 1.0

    def get_font(self) -> QFont:
        """Get font for labels."""
        return self._font

    def get_text_pen(self) -> QPen:
        return QPen(self.style.label_color)

    # -------------------------------------------------------------------------
    # Links
    # -------------------------------------------------------------------------

    def get_link_pen(self, style: LinkStyle, start: QPointF, end: QPointF) -> QPen:
        """Gradient pen running from source to target."""
        if style == LinkStyle.HIGHLIGHTED:
            colors = self.style.link_highlight_colors
            width = self.style.link_highlight_width
        else:
            colors = self.style.link_colors
            width = self.style.link_width

        gradient = QLinearGradient(start, end)
        gradient.setColorAt(0.0, colors[0])
        gradient.setColorAt(1.0, colors[1])

        pen = QPen(QBrush(gradient), width)
        pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
        return pen

    def get_arrow_brush(self) -> QBrush:
        return QBrush(self.style.arrow_color)
