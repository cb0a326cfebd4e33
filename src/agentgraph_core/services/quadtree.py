"""
Point quadtree used by the many-body and collision forces.

Each leaf holds one or more coincident points; internal quads have up to
four children. Aggregate fields (value, cx, cy) are filled in by the forces
through visit_after().
"""

from typing import Any, Callable, Iterable, List, Optional, Tuple

QuadPoint = Tuple[float, float, Any]


class Quad:
    """One square cell of the tree."""

    __slots__ = ("x0", "y0", "x1", "y1", "children", "points", "value", "cx", "cy")

    def __init__(self, x0: float, y0: float, x1: float, y1: float):
        self.x0 = x0
        self.y0 = y0
        self.x1 = x1
        self.y1 = y1
        self.children: Optional[List[Optional["Quad"]]] = None
        self.points: List[QuadPoint] = []

        # Aggregates, set by the force that owns the tree
        self.value = 0.0
        self.cx = (x0 + x1) / 2
        self.cy = (y0 + y1) / 2

    @property
    def is_leaf(self) -> bool:
        return self.children is None

    @property
    def width(self) -> float:
        return self.x1 - self.x0


class QuadTree:
    """
    Quadtree over (x, y, item) points.

    Coordinates must be finite. Points that cannot be separated within
    MAX_DEPTH subdivisions share a leaf.
    """

    MAX_DEPTH = 48

    def __init__(self, points: Iterable[QuadPoint]):
        points = list(points)
        self.size = len(points)

        if points:
            xs = [p[0] for p in points]
            ys = [p[1] for p in points]
            x0, y0 = min(xs), min(ys)
            extent = max(max(xs) - x0, max(ys) - y0, 1.0)
        else:
            x0, y0, extent = 0.0, 0.0, 1.0

        # Square root cell, slightly padded so max coordinates fall inside
        extent *= 1.0001
        self.root = Quad(x0, y0, x0 + extent, y0 + extent)

        for x, y, item in points:
            self._insert(x, y, item)

    def _insert(self, x: float, y: float, item: Any) -> None:
        quad = self.root
        depth = 0
        while True:
            if quad.children is None:
                if (
                    not quad.points
                    or depth >= self.MAX_DEPTH
                    or (quad.points[0][0] == x and quad.points[0][1] == y)
                ):
                    quad.points.append((x, y, item))
                    return

                # Split: existing points are coincident, so they move together
                existing = quad.points
                quad.points = []
                quad.children = [None, None, None, None]
                px, py = existing[0][0], existing[0][1]
                self._child(quad, px, py).points.extend(existing)

            quad = self._child(quad, x, y)
            depth += 1

    @staticmethod
    def _child(quad: Quad, x: float, y: float) -> Quad:
        xm = (quad.x0 + quad.x1) / 2
        ym = (quad.y0 + quad.y1) / 2
        right = x >= xm
        bottom = y >= ym
        i = (int(bottom) << 1) | int(right)

        child = quad.children[i]
        if child is None:
            child = Quad(
                xm if right else quad.x0,
                ym if bottom else quad.y0,
                quad.x1 if right else xm,
                quad.y1 if bottom else ym,
            )
            quad.children[i] = child
        return child

    def visit(self, callback: Callable[[Quad], bool]) -> None:
        """Pre-order traversal. If callback returns True, skip that quad's children."""
        stack = [self.root]
        while stack:
            quad = stack.pop()
            if callback(quad) or quad.children is None:
                continue
            for child in reversed(quad.children):
                if child is not None:
                    stack.append(child)

    def visit_after(self, callback: Callable[[Quad], None]) -> None:
        """Post-order traversal: children before their parent."""
        stack = [self.root]
        order: List[Quad] = []
        while stack:
            quad = stack.pop()
            order.append(quad)
            if quad.children is not None:
                for child in quad.children:
                    if child is not None:
                        stack.append(child)
        for quad in reversed(order):
            callback(quad)
