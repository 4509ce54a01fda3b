"""Rectangle validation and repair.

A rectangle is valid when every sample point passes the containment test:
its four corners, its center, evenly spaced points along each side and a
bilinear lattice inside it. A single failing sample rejects the rectangle.

Sample positions of a sparser density are always a subset of a denser one
(8, 16 and 64 samples per side; 3x3 and 7x7 interior lattices), so anything
the dense pass accepts the sparse pass accepts too.

Repair paths:
- shrink_and_retry: shrink by fixed steps until the exact dense pass accepts
- expand_edges: push each side outward independently, keep the result only
  if the enlarged rectangle still validates
"""

import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from maxrect.config import ValidationConfig
from maxrect.core.containment import SpatialGrid
from maxrect.core.geometry import point_in_polygon, point_in_polygon_with_tolerance
from maxrect.domain import Point, Polygon, Rectangle


@dataclass(frozen=True, slots=True)
class SampleDensity:
    """Number of samples taken per rectangle side and inside the rectangle.

    Attributes:
        edge_samples: Side is split into this many equal segments
        interior_grid: Size of the interior lattice (n x n points)
    """

    edge_samples: int
    interior_grid: int


SPARSE = SampleDensity(edge_samples=8, interior_grid=3)
STANDARD = SampleDensity(edge_samples=16, interior_grid=3)
DENSE = SampleDensity(edge_samples=64, interior_grid=7)


def sample_points(corners: Sequence[Point], density: SampleDensity) -> Iterator[Point]:
    """Yield validation samples, corners first.

    Args:
        corners: Bottom-left, bottom-right, top-right, top-left
        density: Sampling density

    Yields:
        Corners, center, side samples and interior lattice points
    """
    yield from corners

    c0, c1, _, c3 = corners[0], corners[1], corners[2], corners[3]
    ux, uy = c1.x - c0.x, c1.y - c0.y
    vx, vy = c3.x - c0.x, c3.y - c0.y
    yield Point(c0.x + (ux + vx) / 2, c0.y + (uy + vy) / 2)

    n = density.edge_samples
    for k in range(4):
        a = corners[k]
        b = corners[(k + 1) % 4]
        for i in range(1, n):
            t = i / n
            yield Point(a.x + (b.x - a.x) * t, a.y + (b.y - a.y) * t)

    m = density.interior_grid
    for i in range(1, m + 1):
        u = i / (m + 1)
        for j in range(1, m + 1):
            v = j / (m + 1)
            yield Point(c0.x + ux * u + vx * v, c0.y + uy * u + vy * v)


def _is_axis_aligned(angle: float) -> bool:
    remainder = angle % 90.0
    return remainder < 1e-9 or 90.0 - remainder < 1e-9


class RectangleValidator:
    """Validates rectangles against one polygon.

    Search-time checks go through the spatial grid when one is supplied.
    Final checks use exact ray casting with the configured tolerance, so a
    rectangle flush with the boundary is accepted.

    Example:
        validator = RectangleValidator(polygon, SpatialGrid(polygon), ValidationConfig())
        if validator.is_valid(rect):
            final = validator.shrink_and_retry(rect)
    """

    def __init__(
        self,
        polygon: Polygon,
        grid: SpatialGrid | None = None,
        config: ValidationConfig | None = None,
    ) -> None:
        self.polygon = polygon
        self.grid = grid
        self.config = config or ValidationConfig()
        self._points = list(polygon.points)
        self.search_density = SampleDensity(
            self.config.search_edge_samples, self.config.search_interior_grid
        )
        self.final_density = SampleDensity(
            self.config.final_edge_samples, self.config.final_interior_grid
        )
        self.checks = 0

    def contains(self, point: Point) -> bool:
        """Search-time containment (grid accelerated when available)."""
        if self.grid is not None:
            return self.grid.contains_point(point)
        return point_in_polygon(point, self._points)

    def contains_exact(self, point: Point) -> bool:
        """Exact containment that accepts points within tolerance of an edge."""
        return point_in_polygon_with_tolerance(point, self._points, self.config.tolerance)

    def is_valid(
        self,
        rect: Rectangle,
        density: SampleDensity | None = None,
        exact: bool = False,
    ) -> bool:
        """Check whether a rectangle is inside the polygon.

        Args:
            rect: Rectangle to check
            density: Sampling density (search density if None)
            exact: Use exact tolerance-augmented containment

        Returns:
            True if every sample is contained
        """
        self.checks += 1
        if rect.width <= 0 or rect.height <= 0:
            return False

        if not exact and self.grid is not None and _is_axis_aligned(rect.angle):
            xs = [c.x for c in rect.corners]
            ys = [c.y for c in rect.corners]
            return self.grid.contains_rectangle(min(xs), min(ys), max(xs), max(ys))

        return self.validate_corners(rect.corners, density or self.search_density, exact)

    def validate_corners(
        self,
        corners: Sequence[Point],
        density: SampleDensity,
        exact: bool = False,
    ) -> bool:
        """Check the sample points of a corner quadruple."""
        contains = self.contains_exact if exact else self.contains
        return all(contains(p) for p in sample_points(corners, density))

    def shrink_and_retry(self, rect: Rectangle) -> tuple[Rectangle, float] | None:
        """Run the final validation pass, shrinking until it succeeds.

        The rectangle is tried at full size, then at 90%, 80% and so on
        down to the minimum scale.

        Args:
            rect: Candidate rectangle

        Returns:
            Tuple of (accepted rectangle, scale applied), or None when even
            the smallest scale fails
        """
        steps = int(round((1.0 - self.config.min_shrink_scale) / self.config.shrink_step))
        for k in range(steps + 1):
            scale = round(1.0 - k * self.config.shrink_step, 10)
            candidate = rect if k == 0 else rect.scaled(scale)
            if self.is_valid(candidate, self.final_density, exact=True):
                return candidate, scale
        return None

    def expand_edges(self, rect: Rectangle) -> Rectangle:
        """Push each side of a rectangle outward as far as it stays contained.

        Only runs for polygons with at most ``expansion_max_vertices``
        vertices. Each side is expanded independently by binary search, then
        all four pushes are applied at once. The original rectangle is
        returned when the combined result fails validation or gains less
        than 0.1 units in total.

        Args:
            rect: Rectangle to expand

        Returns:
            Expanded rectangle or the original
        """
        if self.polygon.vertex_count > self.config.expansion_max_vertices:
            return rect

        corners = rect.corners
        rad = math.radians(rect.angle)
        width_dir = (math.cos(rad), math.sin(rad))
        height_dir = (-math.sin(rad), math.cos(rad))

        bottom = self._max_expansion(corners, (0, 1), (-height_dir[0], -height_dir[1]))
        top = self._max_expansion(corners, (2, 3), height_dir)
        left = self._max_expansion(corners, (0, 3), (-width_dir[0], -width_dir[1]))
        right = self._max_expansion(corners, (1, 2), width_dir)

        if bottom + top + left + right < 0.1:
            return rect

        width = rect.width + left + right
        height = rect.height + bottom + top
        shift_w = (right - left) / 2
        shift_h = (top - bottom) / 2
        center = Point(
            rect.center.x + width_dir[0] * shift_w + height_dir[0] * shift_h,
            rect.center.y + width_dir[1] * shift_w + height_dir[1] * shift_h,
        )
        expanded = Rectangle(center, rect.angle, width, height)
        if not self.is_valid(expanded):
            return rect
        return expanded

    def _max_expansion(
        self,
        corners: Sequence[Point],
        indices: tuple[int, int],
        normal: tuple[float, float],
    ) -> float:
        low = 0.0
        high = self.config.expansion_limit
        best = 0.0
        samples = self.config.search_edge_samples
        while high - low > self.config.expansion_precision:
            distance = (low + high) / 2
            a = corners[indices[0]]
            b = corners[indices[1]]
            moved_a = Point(a.x + normal[0] * distance, a.y + normal[1] * distance)
            moved_b = Point(b.x + normal[0] * distance, b.y + normal[1] * distance)

            valid = self.contains(moved_a) and self.contains(moved_b)
            if valid:
                for i in range(1, samples):
                    t = i / samples
                    sample = Point(
                        moved_a.x + (moved_b.x - moved_a.x) * t,
                        moved_a.y + (moved_b.y - moved_a.y) * t,
                    )
                    if not self.contains(sample):
                        valid = False
                        break

            if valid:
                best = distance
                low = distance
            else:
                high = distance
        return best
