"""Unit tests for binary-search rectangle fitting."""

import pytest

from maxrect.core.fitter import BaseDimension, RectangleFitter
from maxrect.core.validator import RectangleValidator
from maxrect.domain import Point, Polygon


@pytest.fixture
def square() -> Polygon:
    """100 x 100 square."""
    return Polygon.from_coords([(0, 0), (100, 0), (100, 100), (0, 100)])


@pytest.fixture
def wide() -> Polygon:
    """200 x 50 rectangle."""
    return Polygon.from_coords([(0, 0), (200, 0), (200, 50), (0, 50)])


class TestFitAtAngle:
    """Tests for RectangleFitter.fit_at_angle."""

    def test_square_fills_square(self, square):
        """Test the aligned square fit approaches the full square."""
        fitter = RectangleFitter(square, RectangleValidator(square), [1.0])
        rect = fitter.fit_at_angle(Point(50, 50), 0.0)
        assert rect is not None
        assert rect.area == pytest.approx(10000.0, rel=0.01)

    def test_result_is_valid(self, square):
        """Test every returned rectangle passes the validator."""
        validator = RectangleValidator(square)
        fitter = RectangleFitter(square, validator, [0.5, 1.0, 2.0])
        for angle in (0.0, 20.0, 45.0, 70.0):
            rect = fitter.fit_at_angle(Point(50, 50), angle)
            assert rect is not None
            assert validator.is_valid(rect)

    def test_aspect_ratio_choice(self, wide):
        """Test the elongated ratio wins in an elongated polygon."""
        fitter = RectangleFitter(wide, RectangleValidator(wide), [1.0, 2.0, 4.0])
        rect = fitter.fit_at_angle(Point(100, 25), 0.0)
        assert rect is not None
        assert rect.width / rect.height == pytest.approx(4.0)
        assert rect.area == pytest.approx(10000.0, rel=0.01)

    def test_off_center_is_smaller(self, square):
        """Test an off-center candidate gives a smaller rectangle."""
        fitter = RectangleFitter(square, RectangleValidator(square), [1.0])
        centered = fitter.fit_at_angle(Point(50, 50), 0.0)
        off_center = fitter.fit_at_angle(Point(20, 20), 0.0)
        assert off_center.area < centered.area
        assert off_center.area == pytest.approx(1600.0, rel=0.01)

    def test_center_outside_rotated_extent(self, square):
        """Test a center outside the polygon's rotated extent yields nothing."""
        fitter = RectangleFitter(square, RectangleValidator(square), [1.0])
        assert fitter.fit_at_angle(Point(150, 50), 0.0) is None

    def test_floor_area_prunes(self, square):
        """Test a floor above any reachable area skips the search."""
        fitter = RectangleFitter(square, RectangleValidator(square), [1.0, 2.0])
        assert fitter.fit_at_angle(Point(50, 50), 0.0, floor_area=20000.0) is None
        assert fitter.attempts == 0

    def test_full_scale_accepted_first(self, square):
        """Test a rectangle that fits at the maximum scale needs one check."""
        validator = RectangleValidator(square)
        fitter = RectangleFitter(
            square, validator, [1.0], base=BaseDimension.EDGE_DISTANCE, edge_distance_factor=1.0
        )
        fitter.fit_at_angle(Point(50, 50), 0.0)
        assert validator.checks == 1
        assert fitter.attempts == 1


class TestEdgeDistanceBase:
    """Tests for the nearest-edge base dimension."""

    def test_scale_capped(self, square):
        """Test the scale cap bounds the rectangle size."""
        fitter = RectangleFitter(
            square,
            RectangleValidator(square),
            [1.0],
            base=BaseDimension.EDGE_DISTANCE,
            edge_distance_factor=1.0,
            scale_cap=1.5,
        )
        rect = fitter.fit_at_angle(Point(50, 50), 0.0)
        # base = 50, s <= 1.5 -> side <= 75
        assert rect is not None
        assert rect.width == pytest.approx(75.0)

    def test_default_factor_reaches_walls(self, square):
        """Test the default factor lets the fit reach the walls."""
        fitter = RectangleFitter(
            square, RectangleValidator(square), [1.0], base=BaseDimension.EDGE_DISTANCE
        )
        rect = fitter.fit_at_angle(Point(50, 50), 0.0)
        assert rect is not None
        assert rect.area == pytest.approx(10000.0, rel=0.01)

    def test_rotated_square_in_square(self, square):
        """Test a 45 degree fit is bounded by the inscribed diamond."""
        fitter = RectangleFitter(
            square, RectangleValidator(square), [1.0], base=BaseDimension.EDGE_DISTANCE
        )
        rect = fitter.fit_at_angle(Point(50, 50), 45.0)
        assert rect is not None
        assert rect.area <= 5000.0 + 1e-6
        assert rect.area == pytest.approx(5000.0, rel=0.02)
