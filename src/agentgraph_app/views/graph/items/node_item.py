"""
Node QGraphicsItem.

A status-coloured circle with its label underneath. Pointer input is
reported to the GraphScene; the item never moves itself.
"""

from typing import Optional, TYPE_CHECKING

from PyQt6.QtWidgets import QGraphicsItem, QStyleOptionGraphicsItem, QWidget
from PyQt6.QtCore import Qt, QRectF, QPointF
from PyQt6.QtGui import QPainter, QPainterPath, QFontMetricsF

from agentgraph_core.domain.enums import NodeEmphasis, NodeStatus

if TYPE_CHECKING:
    from ..style_manager import StyleManager


class NodeItem(QGraphicsItem):
    """
    QGraphicsItem for one execution node.

    Features:
    - Gradient fill by status
    - Label centred below the circle
    - Dimmed while another node's neighbourhood is highlighted
    """

    def __init__(
        self,
        node_id: str,
        label: str,
        status: NodeStatus,
        style_manager: "StyleManager",
        parent: Optional[QGraphicsItem] = None,
    ):
        super().__init__(parent)

        self.node_id = node_id
        self.label = label
        self.status = status
        self._style = style_manager
        self._emphasis = NodeEmphasis.ACTIVE

        self._label_rect = QRectF()
        self._update_label_metrics()

        self.setAcceptHoverEvents(True)
        self.setAcceptedMouseButtons(Qt.MouseButton.LeftButton)
        self.setCursor(Qt.CursorShape.PointingHandCursor)

        # Nodes above links
        self.setZValue(1)

    def _update_label_metrics(self):
        fm = QFontMetricsF(self._style.get_font())
        width = fm.horizontalAdvance(self.label)
        baseline = self._style.style.label_offset
        self._label_rect = QRectF(-width / 2, baseline - fm.ascent(), width, fm.height())

    # -------------------------------------------------------------------------
    # State Properties
    # -------------------------------------------------------------------------

    @property
    def emphasis(self) -> NodeEmphasis:
        return self._emphasis

    @emphasis.setter
    def emphasis(self, value: NodeEmphasis):
        if self._emphasis != value:
            self._emphasis = value
            self.setOpacity(self._style.get_node_opacity(value))

    def content_rect(self) -> QRectF:
        """Circle plus label, in item coordinates."""
        r = self._style.style.node_radius
        return QRectF(-r, -r, 2 * r, 2 * r).united(self._label_rect)

    # -------------------------------------------------------------------------
    # QGraphicsItem Interface
    # -------------------------------------------------------------------------

    def boundingRect(self) -> QRectF:
        pad = self._style.style.node_outline_width
        return self.content_rect().adjusted(-pad, -pad, pad, pad)

    def shape(self) -> QPainterPath:
        """Circle and label both count as the node for hover and drag."""
        r = self._style.style.node_radius
        path = QPainterPath()
        path.addEllipse(QPointF(0, 0), r, r)
        path.addRect(self._label_rect)
        return path

    def paint(
        self,
        painter: QPainter,
        option: QStyleOptionGraphicsItem,
        widget: Optional[QWidget] = None,
    ):
        r = self._style.style.node_radius
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        painter.setPen(self._style.get_node_pen())
        painter.setBrush(self._style.get_node_brush(self.status))
        painter.drawEllipse(QPointF(0, 0), r, r)

        painter.setPen(self._style.get_text_pen())
        painter.setFont(self._style.get_font())
        painter.drawText(QPointF(self._label_rect.left(), self._style.style.label_offset), self.label)

    # -------------------------------------------------------------------------
    # Events (forwarded to the scene)
    # -------------------------------------------------------------------------

    def hoverEnterEvent(self, event):
        scene = self.scene()
        if scene is not None:
            scene.item_hover_entered(self)
        super().hoverEnterEvent(event)

    def hoverLeaveEvent(self, event):
        scene = self.scene()
        if scene is not None:
            scene.item_hover_left(self)
        super().hoverLeaveEvent(event)

    def mousePressEvent(self, event):
        if event.button() != Qt.MouseButton.LeftButton:
            event.ignore()
            return
        scene = self.scene()
        if scene is not None:
            scene.item_pressed(self, event.scenePos())
        event.accept()

    def mouseMoveEvent(self, event):
        scene = self.scene()
        if scene is not None:
            scene.item_dragged(self, event.scenePos())
        event.accept()

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            scene = self.scene()
            if scene is not None:
                scene.item_released(self)
        event.accept()
