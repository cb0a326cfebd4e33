"""
InteractionController - drag, hover and pan/zoom input for the graph.

The rendering adapter calls the on_* methods with ids and screen
coordinates; the controller turns them into pins on the LayoutEngine,
viewport changes, and transient highlight/tooltip state that the adapter
reads back. It never stores positions itself.

Rules:
- Dragging takes precedence: hover-enter is ignored while a drag is active
- Leave events clear highlight and tooltip unconditionally
"""

from dataclasses import dataclass
from datetime import tzinfo
from typing import FrozenSet, Optional, Sequence

from ..domain.enums import LinkStyle, NodeEmphasis
from ..domain.models import Point, Rect, polyline_midpoint
from .layout import LayoutEngine
from .tooltip import TooltipContent, build_link_tooltip, build_node_tooltip
from .viewport import Transform, ViewportTransform


@dataclass
class InteractionSettings:
    """Hover presentation parameters."""
    tooltip_offset: float = 10.0   # Gap between anchor and hovered element, px
    dim_opacity: float = 0.3


@dataclass(frozen=True)
class HighlightState:
    """
    Which nodes and links are emphasised by the current hover.

    active_node_ids is the HighlightSet: the hovered node plus its direct
    neighbours. It stays empty while a link is hovered.
    """
    active_node_ids: FrozenSet[str] = frozenset()
    highlighted_link_ids: FrozenSet[str] = frozenset()
    hovered_node_id: Optional[str] = None
    hovered_link_id: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.hovered_node_id is None and self.hovered_link_id is None

    def node_emphasis(self, node_id: str) -> NodeEmphasis:
        # Only node hover dims anything
        if self.hovered_node_id is None or node_id in self.active_node_ids:
            return NodeEmphasis.ACTIVE
        return NodeEmphasis.DIM

    def link_style(self, link_id: str) -> LinkStyle:
        if link_id in self.highlighted_link_ids:
            return LinkStyle.HIGHLIGHTED
        return LinkStyle.NORMAL


@dataclass(frozen=True)
class TooltipState:
    """
    Tooltip visibility and placement.

    anchor is the screen point the tooltip's bottom centre sits on.
    """
    visible: bool = False
    content: Optional[TooltipContent] = None
    anchor: Optional[Point] = None


NO_HIGHLIGHT = HighlightState()
HIDDEN_TOOLTIP = TooltipState()


class InteractionController:
    """Routes pointer input into the layout engine and viewport."""

    def __init__(
        self,
        engine: LayoutEngine,
        viewport: ViewportTransform,
        settings: Optional[InteractionSettings] = None,
        tz: Optional[tzinfo] = None,
    ):
        """
        Initialize the controller.

        Args:
            engine: Layout engine that owns node positions
            viewport: Current pan/zoom
            settings: Hover presentation parameters
            tz: Timezone for tooltip timestamps (local time if None)
        """
        self._engine = engine
        self._viewport = viewport
        self.settings = settings or InteractionSettings()
        self._tz = tz

        self._drag_node_id: Optional[str] = None
        self._highlight = NO_HIGHLIGHT
        self._tooltip = HIDDEN_TOOLTIP

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def highlight(self) -> HighlightState:
        return self._highlight

    @property
    def highlight_set(self) -> FrozenSet[str]:
        return self._highlight.active_node_ids

    @property
    def tooltip(self) -> TooltipState:
        return self._tooltip

    @property
    def dragging_node_id(self) -> Optional[str]:
        return self._drag_node_id

    @property
    def is_dragging(self) -> bool:
        return self._drag_node_id is not None

    # -------------------------------------------------------------------------
    # Drag
    # -------------------------------------------------------------------------

    def on_pointer_down(self, node_id: str, screen_x: float, screen_y: float) -> bool:
        """
        Start dragging a node: pin it under the pointer and raise energy.

        Returns:
            False if the node is unknown
        """
        if self._engine.node(node_id) is None:
            return False
        if self._drag_node_id is not None and self._drag_node_id != node_id:
            self._engine.unpin(self._drag_node_id)

        self._drag_node_id = node_id
        self._engine.set_alpha_target(self._engine.settings.drag_alpha_target)
        wx, wy = self._viewport.to_world(screen_x, screen_y)
        self._engine.pin(node_id, wx, wy)
        return True

    def on_pointer_move(self, screen_x: float, screen_y: float) -> bool:
        """Move the pin target. Returns False when no drag is active."""
        if self._drag_node_id is None:
            return False
        wx, wy = self._viewport.to_world(screen_x, screen_y)
        return self._engine.pin(self._drag_node_id, wx, wy)

    def on_pointer_up(self) -> bool:
        """Release the dragged node and let energy decay."""
        if self._drag_node_id is None:
            return False
        self._engine.set_alpha_target(0.0)
        self._engine.unpin(self._drag_node_id)
        self._drag_node_id = None
        return True

    # -------------------------------------------------------------------------
    # Hover
    # -------------------------------------------------------------------------

    def on_node_enter(self, node_id: str, screen_box: Optional[Rect] = None) -> bool:
        """
        Highlight a node with its neighbours and show its tooltip.

        Args:
            node_id: Hovered node
            screen_box: Rendered bounding box of the node in screen space.
                Falls back to the node's simulated position if None.

        Returns:
            False if ignored (drag in progress or unknown node)
        """
        if self._drag_node_id is not None:
            return False
        node = self._engine.node(node_id)
        if node is None:
            return False

        active = {node_id} | self._engine.neighbors(node_id)
        links = {link.link_id for link in self._engine.incident_links(node_id)}
        self._highlight = HighlightState(
            active_node_ids=frozenset(active),
            highlighted_link_ids=frozenset(links),
            hovered_node_id=node_id,
        )

        if screen_box is not None:
            ax, ay = screen_box.top_center
        else:
            ax, ay = self._viewport.to_screen(node.x, node.y)
        self._tooltip = TooltipState(
            visible=True,
            content=build_node_tooltip(node, self._tz),
            anchor=(ax, ay - self.settings.tooltip_offset),
        )
        return True

    def on_node_leave(self, node_id: Optional[str] = None) -> None:
        """Clear highlight and hide the tooltip."""
        self._clear_hover()

    def on_link_enter(self, link_id: str, path_points: Optional[Sequence[Point]] = None) -> bool:
        """
        Highlight a single link and show its endpoints.

        Args:
            link_id: Hovered link
            path_points: Rendered path in world coordinates (the engine's
                current path if None). The tooltip sits at its midpoint.

        Returns:
            False if ignored (drag in progress or unknown link)
        """
        if self._drag_node_id is not None:
            return False
        link = self._engine.link(link_id)
        if link is None or not link.resolved:
            return False

        points = tuple(path_points) if path_points else self._engine.link_path(link)
        mx, my = polyline_midpoint(points)
        sx, sy = self._viewport.to_screen(mx, my)

        self._highlight = HighlightState(
            highlighted_link_ids=frozenset({link_id}),
            hovered_link_id=link_id,
        )
        self._tooltip = TooltipState(
            visible=True,
            content=build_link_tooltip(link),
            anchor=(sx, sy - self.settings.tooltip_offset),
        )
        return True

    def on_link_leave(self, link_id: Optional[str] = None) -> None:
        """Restore normal link styling and hide the tooltip."""
        self._clear_hover()

    def _clear_hover(self) -> None:
        self._highlight = NO_HIGHLIGHT
        self._tooltip = HIDDEN_TOOLTIP

    # -------------------------------------------------------------------------
    # Viewport delegation
    # -------------------------------------------------------------------------

    def on_wheel(self, delta: float, screen_x: float, screen_y: float) -> Transform:
        """Zoom toward the pointer."""
        return self._viewport.apply_zoom(delta, (screen_x, screen_y))

    def on_pan(self, dx: float, dy: float) -> Transform:
        return self._viewport.apply_pan(dx, dy)

    def reset(self) -> None:
        """Drop all transient state, e.g. when the dataset is replaced."""
        if self._drag_node_id is not None:
            self._engine.unpin(self._drag_node_id)
            self._engine.set_alpha_target(0.0)
        self._drag_node_id = None
        self._clear_hover()
