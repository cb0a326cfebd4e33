"""
Link QGraphicsItem.

Draws the polyline the layout engine computes for a link (straight,
fanned-out parallel, or self-loop) with a direction marker at its midpoint.
"""

import math
from typing import Optional, Sequence, Tuple, TYPE_CHECKING

from PyQt6.QtWidgets import QGraphicsItem, QStyleOptionGraphicsItem, QWidget
from PyQt6.QtCore import Qt, QRectF, QPointF
from PyQt6.QtGui import QBrush, QPainter, QPainterPath, QPainterPathStroker, QPolygonF

from agentgraph_core.domain.enums import LinkStyle
from agentgraph_core.domain.models import Point

if TYPE_CHECKING:
    from ..style_manager import StyleManager


class LinkItem(QGraphicsItem):
    """
    QGraphicsItem for one directed link.

    Hover is reported to the scene; mouse buttons pass through so the
    canvas can pan when a drag starts on a link.
    """

    HIT_WIDTH = 10.0

    def __init__(
        self,
        link_id: str,
        source_id: str,
        target_id: str,
        style_manager: "StyleManager",
        parent: Optional[QGraphicsItem] = None,
    ):
        super().__init__(parent)

        self.link_id = link_id
        self.source_id = source_id
        self.target_id = target_id
        self._style = style_manager
        self._link_style = LinkStyle.NORMAL

        self._points: Tuple[QPointF, ...] = ()
        self._path = QPainterPath()

        # Links should be behind nodes
        self.setZValue(-1)
        self.setAcceptHoverEvents(True)
        self.setAcceptedMouseButtons(Qt.MouseButton.NoButton)

    # -------------------------------------------------------------------------
    # Geometry
    # -------------------------------------------------------------------------

    @property
    def world_points(self) -> Tuple[Point, ...]:
        return tuple((p.x(), p.y()) for p in self._points)

    def set_path(self, points: Sequence[Point]):
        """Update the polyline (world coordinates)."""
        new_points = tuple(QPointF(x, y) for x, y in points)
        if new_points == self._points:
            return

        self.prepareGeometryChange()
        self._points = new_points
        self._path = QPainterPath()
        if new_points:
            self._path.moveTo(new_points[0])
            for point in new_points[1:]:
                self._path.lineTo(point)
        self.update()

    def _midpoint_and_angle(self) -> Optional[Tuple[QPointF, float]]:
        """Point halfway along the path and the path direction there."""
        if len(self._points) < 2:
            return None
        total = self._path.length()
        if total == 0:
            return None

        remaining = total / 2
        for a, b in zip(self._points, self._points[1:]):
            dx = b.x() - a.x()
            dy = b.y() - a.y()
            seg = math.hypot(dx, dy)
            if seg > 0 and remaining <= seg:
                t = remaining / seg
                return QPointF(a.x() + dx * t, a.y() + dy * t), math.atan2(dy, dx)
            remaining -= seg
        return None

    # -------------------------------------------------------------------------
    # State Properties
    # -------------------------------------------------------------------------

    @property
    def link_style(self) -> LinkStyle:
        return self._link_style

    @link_style.setter
    def link_style(self, value: LinkStyle):
        if self._link_style != value:
            self._link_style = value
            self.update()

    # -------------------------------------------------------------------------
    # QGraphicsItem Interface
    # -------------------------------------------------------------------------

    def boundingRect(self) -> QRectF:
        if self._path.isEmpty():
            return QRectF()
        pad = max(self.HIT_WIDTH, self._style.style.arrow_size)
        return self._path.boundingRect().adjusted(-pad, -pad, pad, pad)

    def shape(self) -> QPainterPath:
        """Widened stroke for easier hovering."""
        stroker = QPainterPathStroker()
        stroker.setWidth(self.HIT_WIDTH)
        return stroker.createStroke(self._path)

    def paint(
        self,
        painter: QPainter,
        option: QStyleOptionGraphicsItem,
        widget: Optional[QWidget] = None,
    ):
        if len(self._points) < 2:
            return

        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        # Loops start and end on the same point; run the gradient to the far side
        end = self._points[-1]
        if end == self._points[0]:
            end = self._points[len(self._points) // 2]
        pen = self._style.get_link_pen(self._link_style, self._points[0], end)

        painter.setPen(pen)
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawPath(self._path)

        self._draw_arrow(painter)

    def _draw_arrow(self, painter: QPainter):
        """Filled disc with a white chevron pointing along the link."""
        mid = self._midpoint_and_angle()
        if mid is None:
            return
        center, angle = mid
        radius = self._style.style.arrow_size / 2

        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(self._style.get_arrow_brush())
        painter.drawEllipse(center, radius, radius)

        tip = radius * 0.6
        back = radius * 0.45
        cos_a, sin_a = math.cos(angle), math.sin(angle)

        def rotated(x: float, y: float) -> QPointF:
            return QPointF(center.x() + x * cos_a - y * sin_a, center.y() + x * sin_a + y * cos_a)

        painter.setBrush(QBrush(Qt.GlobalColor.white))
        painter.drawPolygon(QPolygonF([rotated(tip, 0), rotated(-back, -back), rotated(-back, back)]))
