"""
GraphScene - QGraphicsScene subclass holding the node and link items.

All items hang off one root item that carries the pan/zoom transform, so
scene coordinates equal widget coordinates and item positions stay in
layout (world) coordinates.
"""

from typing import Dict, Sequence

from PyQt6.QtWidgets import QGraphicsItem, QGraphicsRectItem, QGraphicsScene
from PyQt6.QtCore import QPointF, pyqtSignal
from PyQt6.QtGui import QBrush, QTransform

from agentgraph_core.domain.models import GraphLink, GraphNode, Rect, RenderFrame
from agentgraph_core.services.interaction import HighlightState
from agentgraph_core.services.viewport import Transform

from .items import LinkItem, NodeItem
from .style_manager import StyleManager


class GraphScene(QGraphicsScene):
    """
    QGraphicsScene for the agent graph.

    Responsibilities:
    - Creates NodeItem/LinkItem instances for a dataset
    - Moves them to the positions of each RenderFrame
    - Applies hover emphasis and the viewport transform
    - Translates item input into id-based signals (screen coordinates)
    """

    # Signals
    node_pressed = pyqtSignal(str, float, float)   # node_id, x, y
    node_dragged = pyqtSignal(float, float)        # x, y
    node_released = pyqtSignal()
    node_hovered = pyqtSignal(str, object)         # node_id, Rect (screen)
    node_unhovered = pyqtSignal(str)
    link_hovered = pyqtSignal(str, object)         # link_id, path points (world)
    link_unhovered = pyqtSignal(str)

    def __init__(self, style_manager: StyleManager):
        super().__init__()

        self._style = style_manager

        # Transform carrier for every graph item
        self._root = QGraphicsRectItem()
        self._root.setFlag(QGraphicsItem.GraphicsItemFlag.ItemHasNoContents, True)
        self.addItem(self._root)

        # Item lookups
        self._node_items: Dict[str, NodeItem] = {}
        self._link_items: Dict[str, LinkItem] = {}

        self.setBackgroundBrush(QBrush(self._style.style.bg_color))

    @property
    def style_manager(self) -> StyleManager:
        return self._style

    # -------------------------------------------------------------------------
    # Building the Graph
    # -------------------------------------------------------------------------

    def clear_graph(self):
        """Remove all node and link items."""
        for item in self._root.childItems():
            self.removeItem(item)
        self._node_items.clear()
        self._link_items.clear()

    def build(self, nodes: Sequence[GraphNode], links: Sequence[GraphLink]):
        """Create items for a dataset, replacing any previous ones."""
        self.clear_graph()

        for link in links:
            item = LinkItem(link.link_id, link.source_id, link.target_id, self._style, self._root)
            self._link_items[link.link_id] = item

        for node in nodes:
            item = NodeItem(node.node_id, node.label, node.status, self._style, self._root)
            if node.position is not None:
                item.setPos(node.x, node.y)
            self._node_items[node.node_id] = item

    def apply_frame(self, frame: RenderFrame):
        """Move items to the positions of one tick."""
        for node_frame in frame.nodes:
            item = self._node_items.get(node_frame.node_id)
            if item is not None:
                item.setPos(node_frame.x, node_frame.y)

        for link_frame in frame.links:
            item = self._link_items.get(link_frame.link_id)
            if item is not None:
                item.set_path(link_frame.path_points)

    def apply_highlight(self, state: HighlightState):
        for node_id, item in self._node_items.items():
            item.emphasis = state.node_emphasis(node_id)
        for link_id, item in self._link_items.items():
            item.link_style = state.link_style(link_id)

    def apply_transform(self, transform: Transform):
        """screen = world * scale + translate"""
        self._root.setTransform(QTransform(
            transform.scale, 0.0,
            0.0, transform.scale,
            transform.translate_x, transform.translate_y,
        ))

    # -------------------------------------------------------------------------
    # Item callbacks
    # -------------------------------------------------------------------------

    def item_hover_entered(self, item: QGraphicsItem):
        if isinstance(item, NodeItem):
            box = item.mapRectToScene(item.content_rect())
            self.node_hovered.emit(item.node_id, Rect(box.x(), box.y(), box.width(), box.height()))
        elif isinstance(item, LinkItem):
            self.link_hovered.emit(item.link_id, item.world_points)

    def item_hover_left(self, item: QGraphicsItem):
        if isinstance(item, NodeItem):
            self.node_unhovered.emit(item.node_id)
        elif isinstance(item, LinkItem):
            self.link_unhovered.emit(item.link_id)

    def item_pressed(self, item: NodeItem, scene_pos: QPointF):
        self.node_pressed.emit(item.node_id, scene_pos.x(), scene_pos.y())

    def item_dragged(self, item: NodeItem, scene_pos: QPointF):
        self.node_dragged.emit(scene_pos.x(), scene_pos.y())

    def item_released(self, item: NodeItem):
        self.node_released.emit()
