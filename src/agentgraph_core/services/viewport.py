"""
ViewportTransform - pan and zoom as one affine transform.

screen = world * scale + translate

The transform is applied as translate-then-scale on the rendered scene
(the same order as an SVG "translate(tx, ty) scale(k)" attribute), so
to_world() inverts it exactly for hit-testing and drag tracking.
"""

from dataclasses import dataclass
from typing import Optional

from ..domain.models import Point, Rect, ViewportSize


@dataclass
class ViewportSettings:
    """Zoom limits and input scaling."""
    min_scale: float = 0.1
    max_scale: float = 4.0
    wheel_sensitivity: float = 0.002   # Scale doubles per 500 px of wheel delta
    initial_scale: float = 0.8

    def clamp(self, scale: float) -> float:
        return max(self.min_scale, min(self.max_scale, scale))


@dataclass(frozen=True)
class Transform:
    """Immutable scale + translation."""
    scale: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0

    def apply(self, x: float, y: float) -> Point:
        """World -> screen."""
        return (x * self.scale + self.translate_x, y * self.scale + self.translate_y)

    def invert(self, x: float, y: float) -> Point:
        """Screen -> world."""
        return ((x - self.translate_x) / self.scale, (y - self.translate_y) / self.scale)

    def then_translate(self, dx: float, dy: float) -> "Transform":
        """This transform followed by a screen-space translation."""
        return Transform(self.scale, self.translate_x + dx, self.translate_y + dy)

    def to_svg(self) -> str:
        return f"translate({self.translate_x},{self.translate_y}) scale({self.scale})"


IDENTITY = Transform()


class ViewportTransform:
    """
    Holds the current pan/zoom. Independent of layout state.

    The scale is always inside [min_scale, max_scale]; translation is
    unbounded.
    """

    def __init__(
        self,
        size: Optional[ViewportSize] = None,
        settings: Optional[ViewportSettings] = None,
    ):
        self.settings = settings or ViewportSettings()
        self._size = size or ViewportSize(800, 600)
        self._transform = IDENTITY

    @property
    def size(self) -> ViewportSize:
        return self._size

    def current(self) -> Transform:
        """The current transform value."""
        return self._transform

    def set_transform(self, transform: Transform) -> Transform:
        """Replace the transform, clamping its scale."""
        scale = self.settings.clamp(transform.scale)
        self._transform = Transform(scale, transform.translate_x, transform.translate_y)
        return self._transform

    def apply_zoom(self, delta: float, pointer: Point) -> Transform:
        """
        Zoom by a wheel delta, keeping the world point under the pointer fixed.

        Args:
            delta: Wheel delta in pixels; positive zooms out, negative zooms in
            pointer: Pointer position in screen coordinates
        """
        factor = 2 ** (-delta * self.settings.wheel_sensitivity)
        return self.zoom_by(factor, pointer)

    def zoom_by(self, factor: float, pointer: Point) -> Transform:
        """Multiply the scale by factor about a screen point."""
        t = self._transform
        scale = self.settings.clamp(t.scale * factor)
        if scale == t.scale:
            return t

        wx, wy = t.invert(*pointer)
        px, py = pointer
        self._transform = Transform(scale, px - wx * scale, py - wy * scale)
        return self._transform

    def apply_pan(self, dx: float, dy: float) -> Transform:
        """Shift by a screen-space delta. Scale limits do not apply."""
        self._transform = self._transform.then_translate(dx, dy)
        return self._transform

    def reset(self, initial_scale: Optional[float] = None, centered_on: Optional[Point] = None) -> Transform:
        """
        Show centered_on (world) at the centre of the surface.

        Args:
            initial_scale: Scale to use (settings.initial_scale if None)
            centered_on: World point to centre (surface centre if None)
        """
        scale = self.settings.clamp(
            self.settings.initial_scale if initial_scale is None else initial_scale
        )
        cx, cy = centered_on if centered_on is not None else self._size.center
        sx, sy = self._size.center
        self._transform = Transform(scale, sx - cx * scale, sy - cy * scale)
        return self._transform

    def resize(self, size: ViewportSize) -> None:
        """Record a new surface size. The transform itself is unchanged."""
        self._size = size

    def to_screen(self, x: float, y: float) -> Point:
        return self._transform.apply(x, y)

    def to_world(self, x: float, y: float) -> Point:
        return self._transform.invert(x, y)

    def map_rect_to_screen(self, rect: Rect) -> Rect:
        """Map a world-space rectangle to screen space."""
        x, y = self._transform.apply(rect.x, rect.y)
        k = self._transform.scale
        return Rect(x, y, rect.width * k, rect.height * k)
