"""
Tests for ViewportTransform (pan and zoom).
"""

import pytest

from agentgraph_core.domain.models import Rect, ViewportSize
from agentgraph_core.services.viewport import (
    IDENTITY, Transform, ViewportSettings, ViewportTransform,
)


class TestTransform:
    """The immutable transform value."""

    def test_apply_and_invert(self):
        t = Transform(2.0, 10.0, -5.0)
        assert t.apply(3, 4) == (16.0, 3.0)
        assert t.invert(16.0, 3.0) == (3.0, 4.0)

    def test_identity(self):
        assert IDENTITY.apply(7, 9) == (7, 9)

    def test_svg_form(self):
        assert Transform(0.5, 1.0, 2.0).to_svg() == "translate(1.0,2.0) scale(0.5)"


class TestZoom:
    """Wheel zoom about the pointer."""

    def test_pointer_stays_fixed(self, viewport):
        pointer = (250.0, 180.0)
        before = viewport.to_world(*pointer)
        viewport.apply_zoom(-300, pointer)
        after = viewport.to_world(*pointer)
        assert after[0] == pytest.approx(before[0])
        assert after[1] == pytest.approx(before[1])

    def test_negative_delta_zooms_in(self, viewport):
        viewport.apply_zoom(-100, (0, 0))
        assert viewport.current().scale > 1.0

    def test_positive_delta_zooms_out(self, viewport):
        viewport.apply_zoom(100, (0, 0))
        assert viewport.current().scale < 1.0

    def test_scale_clamped(self, viewport):
        for _ in range(50):
            viewport.apply_zoom(-1000, (400, 300))
        assert viewport.current().scale == 4.0
        for _ in range(50):
            viewport.apply_zoom(1000, (400, 300))
        assert viewport.current().scale == 0.1

    def test_zoom_at_limit_does_not_drift(self):
        viewport = ViewportTransform(ViewportSize(800, 600), ViewportSettings(max_scale=1.0))
        viewport.apply_pan(30, 40)
        before = viewport.current()
        viewport.apply_zoom(-200, (100, 100))
        assert viewport.current() == before

    def test_set_transform_clamps(self, viewport):
        result = viewport.set_transform(Transform(100.0, 5.0, 6.0))
        assert result == Transform(4.0, 5.0, 6.0)


class TestPan:
    """Pan is unbounded."""

    def test_pan_accumulates(self, viewport):
        viewport.apply_pan(10, 20)
        viewport.apply_pan(-4, 5)
        assert viewport.current() == Transform(1.0, 6.0, 25.0)

    def test_pan_keeps_scale(self, viewport):
        viewport.apply_zoom(-200, (0, 0))
        scale = viewport.current().scale
        viewport.apply_pan(1e6, -1e6)
        assert viewport.current().scale == scale


class TestReset:
    """Initial view."""

    def test_reset_centres_surface(self, viewport):
        t = viewport.reset()
        assert t.scale == 0.8
        assert viewport.to_screen(400, 300) == pytest.approx((400, 300))

    def test_reset_on_world_point(self, viewport):
        viewport.reset(initial_scale=2.0, centered_on=(100, 50))
        assert viewport.to_screen(100, 50) == pytest.approx((400, 300))

    def test_resize_keeps_transform(self, viewport):
        viewport.apply_pan(5, 5)
        before = viewport.current()
        viewport.resize(ViewportSize(1024, 768))
        assert viewport.current() == before
        assert viewport.size == ViewportSize(1024, 768)


class TestMapping:
    """World <-> screen conversion."""

    def test_round_trip_under_zoom_and_pan(self, viewport):
        viewport.apply_zoom(-250, (120, 80))
        viewport.apply_pan(-33, 17)
        x, y = viewport.to_world(*viewport.to_screen(321.0, 123.0))
        assert (x, y) == (pytest.approx(321.0), pytest.approx(123.0))

    def test_map_rect(self, viewport):
        viewport.set_transform(Transform(2.0, 10.0, 20.0))
        assert viewport.map_rect_to_screen(Rect(1, 2, 3, 4)) == Rect(12.0, 24.0, 6.0, 8.0)
