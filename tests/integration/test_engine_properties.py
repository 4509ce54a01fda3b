"""Integration tests for end-to-end search properties.

Runs the full engine on a set of convex and concave shapes and verifies:
- The rectangle lies inside the polygon
- Its area never exceeds the polygon area
- Angles are canonical and results are repeatable
"""

import math

import pytest

from maxrect import InscribedRectangleEngine
from maxrect.config import MaxRectSettings
from maxrect.core.geometry import point_in_polygon_with_tolerance
from maxrect.core.validator import DENSE, sample_points
from maxrect.domain import FitStatus, Point, Polygon, Rectangle, RectangleSource


def regular_polygon(n: int, radius: float, center: Point = Point(100, 100)) -> list[tuple[float, float]]:
    return [
        (center.x + radius * math.cos(2 * math.pi * i / n), center.y + radius * math.sin(2 * math.pi * i / n))
        for i in range(n)
    ]


def star(points: int, outer: float, inner: float) -> list[tuple[float, float]]:
    coords = []
    for i in range(points * 2):
        radius = outer if i % 2 == 0 else inner
        theta = math.pi * i / points
        coords.append((100 + radius * math.cos(theta), 100 + radius * math.sin(theta)))
    return coords


SHAPES = {
    "triangle": [(0, 0), (120, 0), (40, 90)],
    "l_shape": [(0, 0), (100, 0), (100, 30), (30, 30), (30, 100), (0, 100)],
    "u_shape": [(0, 0), (90, 0), (90, 80), (60, 80), (60, 25), (30, 25), (30, 80), (0, 80)],
    "hexagon": regular_polygon(6, 50),
    "star": star(5, 80, 35),
    "clockwise_pentagon": [(0, 0), (-20, 60), (40, 100), (100, 60), (80, 0)],
}


@pytest.fixture(scope="module")
def settings() -> MaxRectSettings:
    """Reduced search effort with budgets large enough to finish."""
    return MaxRectSettings.model_validate(
        {
            "search": {
                "max_time_ms": 60000.0,
                "dense_max_time_ms": 60000.0,
                "angle_step": 30.0,
                "fine_sweep_window": 0.0,
                "refinement_range": 4.0,
                "aspect_ratios": [0.5, 1.0, 2.0],
                "concave_aspect_ratios": [0.7, 1.4],
            },
            "centroids": {
                "coarse_grid_steps": 5,
                "dense_grid_steps": 8,
                "interior_grid_steps": 5,
                "hull_samples": 10,
                "grid_step": 25.0,
                "polylabel_precision": 1.0,
            },
        }
    )


def assert_inside(rect: Rectangle, polygon: Polygon) -> None:
    for point in sample_points(rect.corners, DENSE):
        assert point_in_polygon_with_tolerance(point, polygon.points, 1e-6), point


class TestShapes:
    """End-to-end checks on convex and concave shapes."""

    @pytest.mark.parametrize("name", sorted(SHAPES))
    def test_rectangle_inside(self, settings, name):
        """Test the result lies inside the polygon and is smaller than it."""
        polygon = Polygon.from_coords(SHAPES[name])
        result = InscribedRectangleEngine(settings).find(polygon)

        assert result.status is FitStatus.FOUND
        rect = result.rectangle
        assert 0.0 <= rect.angle < 90.0
        assert 0.0 < rect.area <= polygon.area
        assert_inside(rect, polygon)

    @pytest.mark.parametrize("name", ["l_shape", "star"])
    def test_deterministic(self, settings, name):
        """Test repeated runs return identical rectangles."""
        first = InscribedRectangleEngine(settings).find(SHAPES[name])
        second = InscribedRectangleEngine(settings).find(SHAPES[name])
        assert first.rectangle == second.rectangle

    def test_square_nearly_filled(self, settings):
        """Test a large square is almost entirely covered."""
        polygon = Polygon.from_coords([(0, 0), (200, 0), (200, 200), (0, 200)])
        result = InscribedRectangleEngine(settings).find(polygon)
        assert result.rectangle.area == pytest.approx(40000.0, rel=1e-6)

    def test_rotated_rectangle(self, settings):
        """Test a rotated rectangle is recovered at its own angle."""
        original = Rectangle(Point(50, 50), 30.0, 40.0, 20.0)
        result = InscribedRectangleEngine(settings).find(Polygon(original.corners))

        assert result.source is RectangleSource.PARALLELOGRAM
        rect = result.rectangle
        assert rect.area == pytest.approx(800.0, rel=1e-6)
        assert rect.angle == pytest.approx(30.0, abs=1e-6)
        assert rect.center.x == pytest.approx(50.0)
        assert rect.center.y == pytest.approx(50.0)

    def test_u_shape_fills_base_or_arm(self, settings):
        """Test the U shape result spans its base or one of its arms."""
        result = InscribedRectangleEngine(settings).find(SHAPES["u_shape"])
        # The base is 90 x 25, each arm 30 x 80
        assert result.rectangle.area >= 0.8 * 2250.0

    def test_truncated_search_is_still_valid(self):
        """Test a tiny budget returns a valid rectangle or reports none."""
        settings = MaxRectSettings.model_validate(
            {"search": {"max_time_ms": 1.0, "dense_max_time_ms": 1.0}}
        )
        polygon = Polygon.from_coords(SHAPES["star"])
        result = InscribedRectangleEngine(settings).find(polygon)

        assert result.status in (FitStatus.FOUND, FitStatus.NO_FEASIBLE)
        if result.found:
            assert_inside(result.rectangle, polygon)
