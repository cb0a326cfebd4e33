"""
Graph ViewModel for the agent execution graph.

Manages:
- The LayoutEngine and the timer that drives it
- Pan/zoom (ViewportTransform)
- Drag and hover state (InteractionController)

The GraphCanvas forwards pointer input here and redraws from the signals;
it never touches node positions itself.
"""

import logging
from typing import Optional, Sequence

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from agentgraph_core.domain.models import (
    DatasetSnapshot, Point, Rect, RenderFrame, ViewportSize,
)
from agentgraph_core.services.interaction import (
    HighlightState, InteractionController, TooltipState,
)
from agentgraph_core.services.layout import LayoutEngine
from agentgraph_core.services.viewport import Transform, ViewportTransform

from ..config import AppConfig
from .base import BaseViewModel

logger = logging.getLogger(__name__)


class GraphVM(BaseViewModel):
    """
    ViewModel for the force-laid-out graph.

    Signals:
        dataset_changed: A new snapshot replaced the nodes and links
        frame_ready: A tick produced new positions (RenderFrame)
        highlight_changed: Hover highlight changed
        tooltip_changed: Tooltip content, visibility or anchor changed
        transform_changed: Pan/zoom changed (Transform)

    State:
        frame: Last RenderFrame
        highlight: Current HighlightState
        tooltip: Current TooltipState
        transform: Current Transform
    """

    dataset_changed = pyqtSignal()
    frame_ready = pyqtSignal(object)        # RenderFrame
    highlight_changed = pyqtSignal()
    tooltip_changed = pyqtSignal()
    transform_changed = pyqtSignal(object)  # Transform

    def __init__(self, config: Optional[AppConfig] = None, parent: Optional[QObject] = None):
        """
        Initialize the ViewModel.

        Args:
            config: App configuration (defaults if None)
            parent: Optional parent QObject
        """
        super().__init__(parent)

        self._config = config or AppConfig()
        size = ViewportSize(800, 600)

        self._engine = LayoutEngine(size, self._config.layout)
        self._viewport = ViewportTransform(size, self._config.viewport)
        self._interaction = InteractionController(
            self._engine, self._viewport, self._config.interaction
        )

        self._frame = RenderFrame()
        self._view_initialized = False

        self._timer = QTimer(self)
        self._timer.timeout.connect(self.tick)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def engine(self) -> LayoutEngine:
        return self._engine

    @property
    def viewport(self) -> ViewportTransform:
        return self._viewport

    @property
    def interaction(self) -> InteractionController:
        return self._interaction

    @property
    def frame(self) -> RenderFrame:
        return self._frame

    @property
    def highlight(self) -> HighlightState:
        return self._interaction.highlight

    @property
    def tooltip(self) -> TooltipState:
        return self._interaction.tooltip

    @property
    def transform(self) -> Transform:
        return self._viewport.current()

    @property
    def dim_opacity(self) -> float:
        return self._interaction.settings.dim_opacity

    @property
    def is_running(self) -> bool:
        return self._timer.isActive()

    @property
    def tick_interval(self) -> int:
        """Timer interval the layout currently wants, in ms."""
        if self._engine.converged and self._engine.alpha_target == 0:
            return self._config.idle_tick_ms
        return self._config.hot_tick_ms

    # -------------------------------------------------------------------------
    # Data
    # -------------------------------------------------------------------------

    def set_snapshot(self, snapshot: DatasetSnapshot) -> None:
        """Replace the dataset. Nothing carries over from the previous one."""
        self._interaction.reset()
        self._engine.load_snapshot(snapshot)

        if self._engine.dropped_link_count:
            logger.warning(
                "Page %d: %d link(s) dropped", snapshot.page_index, self._engine.dropped_link_count
            )

        self.dataset_changed.emit()
        self.highlight_changed.emit()
        self.tooltip_changed.emit()

        if not self._view_initialized and self._engine.nodes:
            self.reset_view()
            self._view_initialized = True

        self.tick()

    # -------------------------------------------------------------------------
    # Simulation loop
    # -------------------------------------------------------------------------

    def start(self) -> None:
        """Start ticking at the current cadence."""
        self._timer.start(self.tick_interval)

    def stop(self) -> None:
        self._timer.stop()

    def tick(self) -> RenderFrame:
        """Advance the layout one step and publish the frame."""
        self._frame = self._engine.step()
        self.frame_ready.emit(self._frame)
        self._update_cadence()
        return self._frame

    def _update_cadence(self) -> None:
        interval = self.tick_interval
        if self._timer.isActive() and self._timer.interval() != interval:
            self._timer.setInterval(interval)

    def resize(self, width: float, height: float) -> None:
        """
        Follow the render surface size.

        Positions are kept; centring targets and bounds move with the size.
        """
        if width <= 0 or height <= 0:
            return
        size = ViewportSize(width, height)
        self._engine.resize(size)
        self._viewport.resize(size)
        self._update_cadence()

    # -------------------------------------------------------------------------
    # Pointer commands
    # -------------------------------------------------------------------------

    def pointer_down(self, node_id: str, x: float, y: float) -> None:
        if self._interaction.on_pointer_down(node_id, x, y):
            self._update_cadence()
            self.tick()

    def pointer_move(self, x: float, y: float) -> None:
        # Only the pin follows the pointer; the timer keeps the tick rate
        self._interaction.on_pointer_move(x, y)

    def pointer_up(self) -> None:
        if self._interaction.on_pointer_up():
            self._update_cadence()

    def node_entered(self, node_id: str, screen_box: Optional[Rect] = None) -> None:
        if self._interaction.on_node_enter(node_id, screen_box):
            self.highlight_changed.emit()
            self.tooltip_changed.emit()

    def node_left(self, node_id: Optional[str] = None) -> None:
        self._interaction.on_node_leave(node_id)
        self.highlight_changed.emit()
        self.tooltip_changed.emit()

    def link_entered(self, link_id: str, path_points: Optional[Sequence[Point]] = None) -> None:
        if self._interaction.on_link_enter(link_id, path_points):
            self.highlight_changed.emit()
            self.tooltip_changed.emit()

    def link_left(self, link_id: Optional[str] = None) -> None:
        self._interaction.on_link_leave(link_id)
        self.highlight_changed.emit()
        self.tooltip_changed.emit()

    # -------------------------------------------------------------------------
    # Viewport commands
    # -------------------------------------------------------------------------

    def wheel(self, delta: float, x: float, y: float) -> None:
        self.transform_changed.emit(self._interaction.on_wheel(delta, x, y))

    def pan(self, dx: float, dy: float) -> None:
        self.transform_changed.emit(self._interaction.on_pan(dx, dy))

    def reset_view(self) -> None:
        """Initial view: configured scale, centred on the surface centre."""
        self.transform_changed.emit(self._viewport.reset())
