"""Unit tests for the closed-form quadrilateral formulas."""

import pytest

from maxrect.core.closed_form import (
    closed_form_rectangle,
    parallelogram_rectangle,
    trapezoid_rectangle,
)
from maxrect.core.validator import RectangleValidator
from maxrect.domain import Point, Polygon, RectangleSource


@pytest.fixture
def parallelogram() -> Polygon:
    """Parallelogram with 40-unit horizontal sides."""
    return Polygon.from_coords([(0, 0), (40, 0), (50, 20), (10, 20)])


@pytest.fixture
def trapezoid() -> Polygon:
    """Isosceles trapezoid, 60 wide at the bottom and 30 at the top."""
    return Polygon.from_coords([(0, 0), (60, 0), (45, 20), (15, 20)])


class TestParallelogram:
    """Tests for the parallelogram formula."""

    def test_dimensions(self, parallelogram):
        """Test width follows the edge pair nearest the angle."""
        rect = parallelogram_rectangle(parallelogram, 0.0)
        assert rect is not None
        assert rect.width == pytest.approx(40.0)
        assert rect.height == pytest.approx((10**2 + 20**2) ** 0.5)
        assert rect.center == Point(25, 10)

    def test_unequal_pairs_use_minimum(self):
        """Test pairs differing by more than a unit use the shorter edge."""
        polygon = Polygon.from_coords([(0, 0), (40, 0), (53, 20), (10, 20)])
        rect = parallelogram_rectangle(polygon, 0.0)
        assert rect is not None
        assert rect.width == pytest.approx(40.0)
        assert rect.height == pytest.approx((10**2 + 20**2) ** 0.5)

    def test_rejects_non_parallelogram(self, trapezoid):
        """Test opposite sides differing by 5 units or more are rejected."""
        assert parallelogram_rectangle(trapezoid, 0.0) is None

    def test_rejects_other_vertex_counts(self):
        """Test only quadrilaterals qualify."""
        triangle = Polygon.from_coords([(0, 0), (10, 0), (0, 10)])
        assert parallelogram_rectangle(triangle, 0.0) is None


class TestTrapezoid:
    """Tests for the trapezoid formula."""

    def test_rectangle_under_short_edge(self, trapezoid):
        """Test the rectangle spans the short edge and the full height."""
        rect = trapezoid_rectangle(trapezoid, 0.0)
        assert rect is not None
        assert rect.angle == pytest.approx(0.0)
        assert rect.width == pytest.approx(30.0)
        assert rect.height == pytest.approx(20.0)
        assert rect.center.x == pytest.approx(30.0)
        assert rect.center.y == pytest.approx(10.0)

    def test_rectangle_fits(self, trapezoid):
        """Test the trapezoid rectangle passes exact validation."""
        rect = trapezoid_rectangle(trapezoid, 0.0)
        validator = RectangleValidator(trapezoid)
        assert validator.shrink_and_retry(rect) == (rect, 1.0)

    def test_rejects_without_parallel_edges(self):
        """Test a general quadrilateral has no closed form."""
        polygon = Polygon.from_coords([(0, 0), (50, 0), (60, 40), (-10, 30)])
        assert trapezoid_rectangle(polygon, 0.0) is None


class TestClosedFormRectangle:
    """Tests for formula dispatch."""

    def test_parallelogram_first(self, parallelogram):
        """Test parallelograms are reported as such."""
        rect, source = closed_form_rectangle(parallelogram)
        assert source is RectangleSource.PARALLELOGRAM
        assert rect.angle == 0.0

    def test_trapezoid_fallback(self, trapezoid):
        """Test trapezoids fall through to the trapezoid formula."""
        rect, source = closed_form_rectangle(trapezoid)
        assert source is RectangleSource.TRAPEZOID
        assert rect.area == pytest.approx(600.0)

    def test_tall_rectangle(self):
        """Test a 1 x 2 rectangle maps to itself."""
        polygon = Polygon.from_coords([(0, 0), (1, 0), (1, 2), (0, 2)])
        rect, source = closed_form_rectangle(polygon)
        assert source is RectangleSource.PARALLELOGRAM
        assert rect.area == pytest.approx(2.0)

        canonical = rect.canonical()
        assert canonical.angle == 0.0
        assert (canonical.width, canonical.height) == (1.0, 2.0)

    def test_explicit_angle(self, parallelogram):
        """Test an explicit angle overrides orientation detection."""
        rect, _ = closed_form_rectangle(parallelogram, angle=90.0)
        assert rect.angle == 90.0

    def test_none_for_general_shapes(self):
        """Test shapes without a formula return None."""
        assert closed_form_rectangle(Polygon.from_coords([(0, 0), (10, 0), (0, 10)])) is None
        general = Polygon.from_coords([(0, 0), (50, 0), (60, 40), (-10, 30)])
        assert closed_form_rectangle(general) is None
