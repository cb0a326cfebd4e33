"""
GraphCanvas - QGraphicsView-based rendering adapter for the agent graph.

The view itself is never transformed: its scene rect tracks the widget
size, so event positions are screen coordinates and can go straight to
the GraphVM. Pan and zoom are applied to the scene's root item.
"""

from PyQt6.QtWidgets import QGraphicsView, QLabel, QWidget
from PyQt6.QtCore import Qt, QPointF
from PyQt6.QtGui import QMouseEvent, QPainter, QResizeEvent, QWheelEvent

from agentgraph_core.domain.models import Point

from ...resources.styles import TOOLTIP_CSS
from ...viewmodels.graph_vm import GraphVM
from .items import NodeItem
from .scene import GraphScene
from .style_manager import StyleManager


class TooltipOverlay(QLabel):
    """Rich-text tooltip whose bottom centre sits on an anchor point."""

    def __init__(self, parent: QWidget):
        super().__init__(parent)
        self.setObjectName("graphTooltip")
        self.setTextFormat(Qt.TextFormat.RichText)
        self.setWordWrap(True)
        self.setMaximumWidth(320)
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)
        self.hide()

    def show_at(self, html: str, anchor: Point):
        self.setText(f"<style>{TOOLTIP_CSS}</style>{html}")
        self.adjustSize()

        x = anchor[0] - self.width() / 2
        y = anchor[1] - self.height()

        # Keep it inside the canvas
        parent = self.parentWidget()
        if parent is not None:
            x = max(0, min(parent.width() - self.width(), x))
            y = max(0, min(parent.height() - self.height(), y))

        self.move(int(x), int(y))
        self.show()
        self.raise_()


class GraphCanvas(QGraphicsView):
    """
    QGraphicsView that renders a GraphVM.

    Input handling:
    - Drag on a node: pin it to the pointer
    - Drag on empty space (or a link): pan
    - Wheel: zoom toward the pointer
    - Hover on a node or link: highlight and tooltip
    """

    def __init__(self, graph_vm: GraphVM, parent=None):
        super().__init__(parent)

        self._vm = graph_vm
        self._style = StyleManager(dim_opacity=graph_vm.dim_opacity)

        self._scene = GraphScene(self._style)
        self.setScene(self._scene)

        # Pan state
        self._panning = False
        self._pan_last = QPointF()

        self._tooltip = TooltipOverlay(self.viewport())

        self._setup_view()
        self._bind_viewmodel()

    def _setup_view(self):
        """Configure the QGraphicsView."""
        # Rendering
        self.setRenderHint(QPainter.RenderHint.Antialiasing)
        self.setRenderHint(QPainter.RenderHint.TextAntialiasing)

        # Every tick moves most items
        self.setViewportUpdateMode(QGraphicsView.ViewportUpdateMode.FullViewportUpdate)

        # Interaction
        self.setDragMode(QGraphicsView.DragMode.NoDrag)
        self.setTransformationAnchor(QGraphicsView.ViewportAnchor.NoAnchor)
        self.setResizeAnchor(QGraphicsView.ViewportAnchor.NoAnchor)
        self.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop)
        self.setMouseTracking(True)

        # Scrollbars
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)

        # Size
        self.setMinimumSize(400, 300)

    def _bind_viewmodel(self):
        """Connect GraphVM and GraphScene signals."""
        vm = self._vm

        # ViewModel -> view
        vm.dataset_changed.connect(self._on_dataset_changed)
        vm.frame_ready.connect(self._scene.apply_frame)
        vm.highlight_changed.connect(self._on_highlight_changed)
        vm.tooltip_changed.connect(self._on_tooltip_changed)
        vm.transform_changed.connect(self._on_transform_changed)

        # Scene -> ViewModel
        self._scene.node_pressed.connect(vm.pointer_down)
        self._scene.node_dragged.connect(vm.pointer_move)
        self._scene.node_released.connect(vm.pointer_up)
        self._scene.node_hovered.connect(vm.node_entered)
        self._scene.node_unhovered.connect(vm.node_left)
        self._scene.link_hovered.connect(vm.link_entered)
        self._scene.link_unhovered.connect(vm.link_left)

        self._scene.apply_transform(vm.transform)

    # -------------------------------------------------------------------------
    # ViewModel handlers
    # -------------------------------------------------------------------------

    def _on_dataset_changed(self):
        engine = self._vm.engine
        self._scene.build(engine.nodes, engine.links)
        self._scene.apply_frame(engine.frame())
        self._scene.apply_highlight(self._vm.highlight)

    def _on_highlight_changed(self):
        self._scene.apply_highlight(self._vm.highlight)

    def _on_tooltip_changed(self):
        state = self._vm.tooltip
        if not state.visible or state.content is None or state.anchor is None:
            self._tooltip.hide()
            return
        self._tooltip.show_at(state.content.to_html(), state.anchor)

    def _on_transform_changed(self, transform):
        self._scene.apply_transform(transform)

    # -------------------------------------------------------------------------
    # Zoom and Pan
    # -------------------------------------------------------------------------

    def wheelEvent(self, event: QWheelEvent):
        """Zoom toward the pointer."""
        # Qt reports +120 per notch away from the user; zoom in on that
        delta = -event.angleDelta().y()
        if delta == 0:
            return
        pos = event.position()
        self._vm.wheel(delta, pos.x(), pos.y())
        event.accept()

    def mousePressEvent(self, event: QMouseEvent):
        """Pan unless the press lands on a node."""
        if event.button() == Qt.MouseButton.LeftButton:
            if not isinstance(self.itemAt(event.position().toPoint()), NodeItem):
                self._panning = True
                self._pan_last = event.position()
                self.setCursor(Qt.CursorShape.ClosedHandCursor)
                event.accept()
                return

        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent):
        if self._panning:
            pos = event.position()
            delta = pos - self._pan_last
            self._pan_last = pos
            self._vm.pan(delta.x(), delta.y())
            event.accept()
            return

        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent):
        if self._panning and event.button() == Qt.MouseButton.LeftButton:
            self._panning = False
            self.unsetCursor()
            event.accept()
            return

        super().mouseReleaseEvent(event)

    def resizeEvent(self, event: QResizeEvent):
        """Keep scene coordinates equal to widget coordinates."""
        super().resizeEvent(event)
        size = self.viewport().size()
        self._scene.setSceneRect(0, 0, size.width(), size.height())
        self._vm.resize(size.width(), size.height())
