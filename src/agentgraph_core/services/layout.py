"""
LayoutEngine - force-directed placement of agent execution nodes.

The engine owns all position/velocity state. Callers drive it with step();
there is no background timer, so the same snapshot and seed always produce
the same trajectory.

Forces (applied in this order on every tick):
1. Link - spring toward a rest length, once per link
2. Charge - many-body repulsion, Barnes-Hut approximated
3. Collision - nodes are discs of fixed radius, resolved iteratively
4. Centering - shifts the mean position onto the viewport centre
5. Axis - weak independent pulls toward the centre on x and y
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Set, Tuple

from ..domain.errors import LayoutDivergenceError, UnknownLinkEndpointError
from ..domain.models import (
    DatasetSnapshot, GraphLink, GraphNode, LinkFrame, NodeFrame,
    Point, RenderFrame, ViewportSize,
)
from .quadtree import Quad, QuadTree

logger = logging.getLogger(__name__)


@dataclass
class LayoutSettings:
    """Force and integration parameters."""

    # Link force
    link_distance: float = 200.0

    # Charge (many-body) force
    charge_strength: float = -2000.0
    charge_distance_min: float = 100.0
    charge_distance_max: Optional[float] = None  # None = min(width, height) / 2
    theta: float = 0.9

    # Collision force
    collide_radius: float = 80.0
    collide_strength: float = 1.0
    collide_iterations: int = 4

    # Centering forces
    center_strength: float = 1.0
    axis_strength: float = 0.1
    center_follow: float = 0.1   # Fraction of a resize's centre shift taken per tick

    # Integration
    velocity_decay: float = 0.4
    alpha_min: float = 0.001
    alpha_decay: Optional[float] = None  # None = 1 - alpha_min ** (1 / 300)
    drag_alpha_target: float = 0.3

    # Bounds and seeding
    padding: float = 50.0
    seed_radius: float = 10.0
    random_seed: int = 1

    # Link geometry
    parallel_spacing: float = 30.0
    self_loop_size: float = 40.0

    def effective_alpha_decay(self) -> float:
        if self.alpha_decay is not None:
            return self.alpha_decay
        return 1 - self.alpha_min ** (1 / 300)


class LcgRandom:
    """Linear congruential generator, so jitter is reproducible from a seed."""

    A = 1664525
    C = 1013904223
    M = 4294967296

    def __init__(self, seed: int = 1):
        self._state = seed % self.M

    def __call__(self) -> float:
        self._state = (self.A * self._state + self.C) % self.M
        return self._state / self.M


class LayoutEngine:
    """
    Force simulation over one dataset snapshot.

    Usage:
        engine = LayoutEngine(ViewportSize(800, 600))
        engine.load_snapshot(snapshot)
        while running:
            frame = engine.step()
    """

    def __init__(
        self,
        viewport_size: Optional[ViewportSize] = None,
        settings: Optional[LayoutSettings] = None,
    ):
        self.settings = settings or LayoutSettings()
        self._size = viewport_size or ViewportSize(800, 600)
        self._center: Point = self._size.center
        self._random = LcgRandom(self.settings.random_seed)

        self._nodes: List[GraphNode] = []
        self._links: List[GraphLink] = []
        self._by_id: Dict[str, GraphNode] = {}
        self._links_by_id: Dict[str, GraphLink] = {}
        self._neighbors: Dict[str, Set[str]] = {}
        self._incident: Dict[str, List[GraphLink]] = {}
        self._link_strength: List[float] = []

        self._alpha = 0.0
        self._alpha_target = 0.0
        self._tick_count = 0

        self.dropped_links: List[UnknownLinkEndpointError] = []
        self.divergence_resets = 0

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def nodes(self) -> Tuple[GraphNode, ...]:
        return tuple(self._nodes)

    @property
    def links(self) -> Tuple[GraphLink, ...]:
        return tuple(self._links)

    @property
    def viewport_size(self) -> ViewportSize:
        return self._size

    @property
    def center(self) -> Point:
        """Point the centring forces currently pull toward."""
        return self._center

    @property
    def alpha(self) -> float:
        """Current simulation energy."""
        return self._alpha

    @property
    def alpha_target(self) -> float:
        return self._alpha_target

    @property
    def converged(self) -> bool:
        """True once energy has decayed below alpha_min."""
        return self._alpha < self.settings.alpha_min

    @property
    def tick_count(self) -> int:
        return self._tick_count

    @property
    def dropped_link_count(self) -> int:
        return len(self.dropped_links)

    @property
    def charge_distance_max(self) -> float:
        if self.settings.charge_distance_max is not None:
            return self.settings.charge_distance_max
        return self._size.min_side / 2

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def node(self, node_id: str) -> Optional[GraphNode]:
        return self._by_id.get(node_id)

    def link(self, link_id: str) -> Optional[GraphLink]:
        return self._links_by_id.get(link_id)

    def neighbors(self, node_id: str) -> Set[str]:
        """Ids of nodes sharing a link with node_id, in either direction."""
        return set(self._neighbors.get(node_id, ()))

    def incident_links(self, node_id: str) -> List[GraphLink]:
        return list(self._incident.get(node_id, ()))

    # -------------------------------------------------------------------------
    # Seeding
    # -------------------------------------------------------------------------

    def load_snapshot(self, snapshot: DatasetSnapshot) -> None:
        """Replace the dataset with a snapshot. No state carries over."""
        self.seed(snapshot.nodes, snapshot.links)

    def seed(
        self,
        nodes: Sequence[GraphNode],
        links: Sequence[GraphLink],
        viewport_size: Optional[ViewportSize] = None,
    ) -> None:
        """
        Initialize positions and resolve links.

        Free nodes are placed with small jitter around the viewport centre;
        pinned nodes keep their pin. Links naming an unknown node are
        dropped and recorded in dropped_links.

        Args:
            nodes: Nodes of the new dataset
            links: Links of the new dataset
            viewport_size: New surface size (keeps the current one if None)
        """
        if viewport_size is not None:
            self._size = viewport_size
        self._center = self._size.center

        self._random = LcgRandom(self.settings.random_seed)
        self._nodes = []
        self._by_id = {}

        for node in nodes:
            if node.node_id in self._by_id:
                logger.warning("Duplicate node id %r in dataset, keeping the first", node.node_id)
                continue
            node.index = len(self._nodes)
            self._nodes.append(node)
            self._by_id[node.node_id] = node

        cx, cy = self._size.center
        radius = self.settings.seed_radius
        for node in self._nodes:
            node.vx = 0.0
            node.vy = 0.0
            if node.pinned:
                node.x, node.y = node.fx, node.fy
            else:
                angle = self._random() * 2 * math.pi
                r = radius * math.sqrt(self._random())
                node.x = cx + r * math.cos(angle)
                node.y = cy + r * math.sin(angle)

        self._resolve_links(links)

        self._alpha = 1.0
        self._alpha_target = 0.0
        self._tick_count = 0
        self.divergence_resets = 0

        logger.info("Seeded layout: %d nodes, %d links", len(self._nodes), len(self._links))

    def _resolve_links(self, links: Sequence[GraphLink]) -> None:
        self._links = []
        self._links_by_id = {}
        self._neighbors = {node.node_id: set() for node in self._nodes}
        self._incident = {node.node_id: [] for node in self._nodes}
        self.dropped_links = []

        for link in links:
            source = self._by_id.get(link.source_id)
            target = self._by_id.get(link.target_id)
            if source is None or target is None:
                missing = link.source_id if source is None else link.target_id
                self.dropped_links.append(
                    UnknownLinkEndpointError(link.source_id, link.target_id, missing)
                )
                link.source = link.target = None
                continue

            link.source = source
            link.target = target
            link.index = len(self._links)
            self._links.append(link)
            self._links_by_id[link.link_id] = link

            self._incident[source.node_id].append(link)
            if target is not source:
                self._incident[target.node_id].append(link)
                self._neighbors[source.node_id].add(target.node_id)
                self._neighbors[target.node_id].add(source.node_id)

        if self.dropped_links:
            logger.warning(
                "Dropped %d link(s) with unknown endpoints (first: %s)",
                len(self.dropped_links), self.dropped_links[0],
            )

        # Degree-normalised spring strength, self-loops excluded
        degree: Dict[str, int] = {}
        for link in self._links:
            if not link.is_self_loop:
                degree[link.source_id] = degree.get(link.source_id, 0) + 1
                degree[link.target_id] = degree.get(link.target_id, 0) + 1
        self._link_strength = [
            0.0 if link.is_self_loop
            else 1.0 / min(degree[link.source_id], degree[link.target_id])
            for link in self._links
        ]

        # Rank parallel links and loops so they can be drawn apart
        groups: Dict[Tuple[str, str], List[GraphLink]] = {}
        for link in self._links:
            key = tuple(sorted((link.source_id, link.target_id)))
            groups.setdefault(key, []).append(link)
        for group in groups.values():
            for rank, link in enumerate(group):
                link.parallel_rank = rank
                link.parallel_count = len(group)

    # -------------------------------------------------------------------------
    # Energy and pinning
    # -------------------------------------------------------------------------

    def set_alpha_target(self, value: float) -> None:
        """Energy level alpha decays toward (0 at rest, higher while dragging)."""
        self._alpha_target = max(0.0, value)

    def reheat(self, alpha: float = 1.0) -> None:
        """Raise energy so the layout moves again."""
        self._alpha = max(self._alpha, alpha)

    def pin(self, node_id: str, x: float, y: float) -> bool:
        """
        Fix a node at (x, y) in world coordinates until unpin().

        Returns:
            False if the node is unknown
        """
        node = self._by_id.get(node_id)
        if node is None:
            return False
        node.fx, node.fy = x, y
        node.x, node.y = x, y
        node.vx = node.vy = 0.0
        return True

    def unpin(self, node_id: str) -> bool:
        """Release a pinned node back to the simulation."""
        node = self._by_id.get(node_id)
        if node is None:
            return False
        node.fx = node.fy = None
        return True

    def resize(self, size: ViewportSize) -> None:
        """
        Change the surface size. Positions are kept; only the centring
        targets, charge range and clamp rectangle follow the new size.

        The clamp rectangle and charge range switch immediately. The centring
        target eases toward the new centre over the next ticks, so a settled
        layout drifts across instead of jumping.
        """
        self._size = size

    # -------------------------------------------------------------------------
    # Simulation
    # -------------------------------------------------------------------------

    def step(self, dt: float = 1.0) -> RenderFrame:
        """Advance the simulation by one tick and return the new frame."""
        if self._nodes:
            self._alpha += (self._alpha_target - self._alpha) * self.settings.effective_alpha_decay()
            alpha = self._alpha
            self._follow_center()

            self._apply_link_force(alpha)
            self._apply_charge_force(alpha)
            self._apply_collide_force()
            self._apply_center_force()
            self._apply_axis_forces(alpha)

            decay = 1 - self.settings.velocity_decay
            for node in self._nodes:
                if node.fx is not None and node.fy is not None:
                    node.x, node.y = node.fx, node.fy
                    node.vx = node.vy = 0.0
                else:
                    node.vx *= decay
                    node.vy *= decay
                    node.x += node.vx * dt
                    node.y += node.vy * dt

            self._check_divergence()
            self._clamp_to_bounds()

        self._tick_count += 1
        return self.frame()

    def _jiggle(self) -> float:
        return (self._random() - 0.5) * 1e-6

    def _apply_link_force(self, alpha: float) -> None:
        distance = self.settings.link_distance
        for link in self._links:
            if link.is_self_loop:
                continue
            source, target = link.source, link.target
            source_free = source.fx is None
            target_free = target.fx is None
            if not source_free and not target_free:
                continue

            x = target.x + target.vx - source.x - source.vx
            y = target.y + target.vy - source.y - source.vy
            if x == 0:
                x = self._jiggle()
            if y == 0:
                y = self._jiggle()
            length = math.sqrt(x * x + y * y)
            length = (length - distance) / length * alpha * self._link_strength[link.index]
            x *= length
            y *= length

            # Split the correction evenly; a pinned end absorbs nothing
            if source_free and target_free:
                bias = 0.5
            elif source_free:
                bias = 0.0
            else:
                bias = 1.0
            target.vx -= x * bias
            target.vy -= y * bias
            source.vx += x * (1 - bias)
            source.vy += y * (1 - bias)

    def _apply_charge_force(self, alpha: float) -> None:
        if len(self._nodes) < 2:
            return

        strength = self.settings.charge_strength
        theta2 = self.settings.theta ** 2
        dmin2 = self.settings.charge_distance_min ** 2
        dmax2 = self.charge_distance_max ** 2

        tree = QuadTree((n.x, n.y, n) for n in self._nodes)

        def accumulate(quad: Quad) -> None:
            if quad.is_leaf:
                quad.value = strength * len(quad.points)
                quad.cx, quad.cy = quad.points[0][0], quad.points[0][1]
                return
            value = 0.0
            weight = 0.0
            cx = cy = 0.0
            for child in quad.children:
                if child is None or child.value == 0:
                    continue
                c = abs(child.value)
                value += child.value
                weight += c
                cx += c * child.cx
                cy += c * child.cy
            quad.value = value
            if weight:
                quad.cx = cx / weight
                quad.cy = cy / weight

        tree.visit_after(accumulate)

        for node in self._nodes:
            if node.fx is not None:
                continue

            def apply(quad: Quad) -> bool:
                if quad.value == 0:
                    return True
                dx = quad.cx - node.x
                dy = quad.cy - node.y
                w = quad.width
                dist2 = dx * dx + dy * dy

                # Far enough away: treat the quad as a single body
                if w * w / theta2 < dist2:
                    if dist2 < dmax2:
                        if dx == 0:
                            dx = self._jiggle()
                            dist2 += dx * dx
                        if dy == 0:
                            dy = self._jiggle()
                            dist2 += dy * dy
                        if dist2 < dmin2:
                            dist2 = math.sqrt(dmin2 * dist2)
                        node.vx += dx * quad.value * alpha / dist2
                        node.vy += dy * quad.value * alpha / dist2
                    return True

                if not quad.is_leaf:
                    return False
                if dist2 >= dmax2:
                    return True

                others = [p for p in quad.points if p[2] is not node]
                if not others:
                    return True
                if dx == 0:
                    dx = self._jiggle()
                    dist2 += dx * dx
                if dy == 0:
                    dy = self._jiggle()
                    dist2 += dy * dy
                if dist2 < dmin2:
                    dist2 = math.sqrt(dmin2 * dist2)
                for _ in others:
                    w = strength * alpha / dist2
                    node.vx += dx * w
                    node.vy += dy * w
                return True

            tree.visit(apply)

    def _apply_collide_force(self) -> None:
        if len(self._nodes) < 2:
            return

        radius = self.settings.collide_radius
        strength = self.settings.collide_strength
        reach = radius * 2

        for _ in range(self.settings.collide_iterations):
            tree = QuadTree((n.x + n.vx, n.y + n.vy, n) for n in self._nodes)

            for node in self._nodes:
                xi = node.x + node.vx
                yi = node.y + node.vy

                def apply(quad: Quad) -> bool:
                    if not quad.is_leaf:
                        return (
                            quad.x0 > xi + reach or quad.x1 < xi - reach
                            or quad.y0 > yi + reach or quad.y1 < yi - reach
                        )
                    for _, _, other in quad.points:
                        if other.index <= node.index:
                            continue
                        x = xi - other.x - other.vx
                        y = yi - other.y - other.vy
                        dist2 = x * x + y * y
                        if dist2 >= reach * reach:
                            continue
                        if x == 0:
                            x = self._jiggle()
                            dist2 += x * x
                        if y == 0:
                            y = self._jiggle()
                            dist2 += y * y
                        dist = math.sqrt(dist2)
                        push = (reach - dist) / dist * strength
                        x *= push
                        y *= push

                        # Equal radii share the push; a pinned disc does not move
                        if node.fx is not None:
                            share = 0.0
                        elif other.fx is not None:
                            share = 1.0
                        else:
                            share = 0.5
                        node.vx += x * share
                        node.vy += y * share
                        other.vx -= x * (1 - share)
                        other.vy -= y * (1 - share)
                    return True

                tree.visit(apply)

    def _follow_center(self) -> None:
        tx, ty = self._size.center
        cx, cy = self._center
        if abs(tx - cx) < 0.01 and abs(ty - cy) < 0.01:
            self._center = (tx, ty)
            return
        f = self.settings.center_follow
        self._center = (cx + (tx - cx) * f, cy + (ty - cy) * f)

    def _apply_center_force(self) -> None:
        n = len(self._nodes)
        cx, cy = self._center
        sx = sum(node.x for node in self._nodes) / n - cx
        sy = sum(node.y for node in self._nodes) / n - cy
        shift_x = sx * self.settings.center_strength
        shift_y = sy * self.settings.center_strength
        for node in self._nodes:
            node.x -= shift_x
            node.y -= shift_y

    def _apply_axis_forces(self, alpha: float) -> None:
        cx, cy = self._center
        k = self.settings.axis_strength * alpha
        for node in self._nodes:
            node.vx += (cx - node.x) * k
        for node in self._nodes:
            node.vy += (cy - node.y) * k

    def _check_divergence(self) -> None:
        cx, cy = self._size.center
        for node in self._nodes:
            if all(math.isfinite(v) for v in (node.x, node.y, node.vx, node.vy)):
                continue
            error = LayoutDivergenceError(node.node_id, node.x, node.y)
            logger.warning("%s; resetting to viewport centre", error)
            node.x, node.y = cx, cy
            node.vx = node.vy = 0.0
            if node.fx is not None and not (math.isfinite(node.fx) and math.isfinite(node.fy)):
                node.fx = node.fy = None
            self.divergence_resets += 1

    def _bounds(self) -> Tuple[float, float, float, float]:
        pad = self.settings.padding
        w, h = self._size.width, self._size.height
        x_lo, x_hi = pad, w - pad
        y_lo, y_hi = pad, h - pad
        # Surface smaller than the padding: everything sits on the centre line
        if x_hi < x_lo:
            x_lo = x_hi = w / 2
        if y_hi < y_lo:
            y_lo = y_hi = h / 2
        return x_lo, x_hi, y_lo, y_hi

    def _clamp_to_bounds(self) -> None:
        x_lo, x_hi, y_lo, y_hi = self._bounds()
        for node in self._nodes:
            node.x = max(x_lo, min(x_hi, node.x))
            node.y = max(y_lo, min(y_hi, node.y))

    # -------------------------------------------------------------------------
    # Render output
    # -------------------------------------------------------------------------

    def frame(self) -> RenderFrame:
        """Current node positions and link paths."""
        nodes = tuple(
            NodeFrame(node.node_id, node.x, node.y)
            for node in self._nodes
            if node.x is not None and node.y is not None
        )
        links = tuple(
            LinkFrame(link.link_id, link.source_id, link.target_id, self.link_path(link))
            for link in self._links
        )
        return RenderFrame(nodes=nodes, links=links, alpha=self._alpha, tick=self._tick_count)

    def link_path(self, link: GraphLink) -> Tuple[Point, ...]:
        """
        Polyline for a link: source, midpoint, target.

        Parallel links bend their midpoint away from the chord; self-loops
        are closed polylines above the node, growing with rank.
        """
        source, target = link.source, link.target
        sx, sy = source.x, source.y

        if link.is_self_loop:
            size = self.settings.self_loop_size * (1 + link.parallel_rank)
            return (
                (sx, sy),
                (sx + size / 2, sy - size),
                (sx - size / 2, sy - size),
                (sx, sy),
            )

        tx, ty = target.x, target.y
        mx, my = (sx + tx) / 2, (sy + ty) / 2

        offset = (link.parallel_rank - (link.parallel_count - 1) / 2) * self.settings.parallel_spacing
        if offset:
            # Perpendicular taken from a canonical direction so A->B and
            # B->A links fan out on opposite sides
            if link.source_id <= link.target_id:
                dx, dy = tx - sx, ty - sy
            else:
                dx, dy = sx - tx, sy - ty
            length = math.hypot(dx, dy)
            if length > 0:
                mx += -dy / length * offset
                my += dx / length * offset
            else:
                my -= offset

        return ((sx, sy), (mx, my), (tx, ty))
