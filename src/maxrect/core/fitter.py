"""Binary-search rectangle fitting at a fixed center and angle.

For a candidate center and rotation angle the fitter sweeps a set of aspect
ratios. For each ratio it binary-searches the scale ``s`` of a rectangle
with width ``base*s*ratio`` and height ``base*s/ratio`` that still
validates, and keeps the largest area found.

The scale range is bounded by the polygon's extent in the rotated frame, so
no iteration is spent on rectangles that cannot fit the bounding box.
"""

import math
from enum import Enum, auto

from maxrect.core.geometry import distance_to_boundary
from maxrect.core.validator import RectangleValidator
from maxrect.domain import Point, Polygon, Rectangle


class BaseDimension(Enum):
    """How the base dimension of the scale search is chosen."""

    EXTENT = auto()  # Max polygon extent in the rotated frame
    EDGE_DISTANCE = auto()  # Distance to the nearest edge times a factor


class RectangleFitter:
    """Finds the largest valid rectangle for a given center and angle.

    Example:
        fitter = RectangleFitter(polygon, validator, [0.5, 1.0, 2.0])
        rect = fitter.fit_at_angle(Point(50, 50), 30.0)
    """

    def __init__(
        self,
        polygon: Polygon,
        validator: RectangleValidator,
        aspect_ratios: list[float],
        precision: float = 1e-3,
        max_iterations: int = 15,
        base: BaseDimension = BaseDimension.EXTENT,
        edge_distance_factor: float = 1.8,
        scale_cap: float = 1.5,
    ) -> None:
        """Initialize the fitter.

        Args:
            polygon: Polygon to fit into
            validator: Validator used for every trial rectangle
            aspect_ratios: Ratios tried at every center and angle
            precision: Stop when the scale interval is narrower than this
                fraction of its initial width
            max_iterations: Hard cap on binary search iterations
            base: Base dimension heuristic
            edge_distance_factor: Multiplier of the nearest-edge distance
            scale_cap: Maximum scale with the nearest-edge base
        """
        self.polygon = polygon
        self.validator = validator
        self.aspect_ratios = list(aspect_ratios)
        self.precision = precision
        self.max_iterations = max_iterations
        self.base = base
        self.edge_distance_factor = edge_distance_factor
        self.scale_cap = scale_cap
        self.attempts = 0
        self._frames: dict[float, tuple[float, float, float, float, float, float]] = {}

    def _frame(self, angle: float) -> tuple[float, float, float, float, float, float]:
        """Rotated bounding box (cos, sin, min_x, max_x, min_y, max_y) for an angle."""
        frame = self._frames.get(angle)
        if frame is not None:
            return frame

        rad = math.radians(angle)
        cos_a = math.cos(rad)
        sin_a = math.sin(rad)
        xs = [p.x * cos_a + p.y * sin_a for p in self.polygon.points]
        ys = [-p.x * sin_a + p.y * cos_a for p in self.polygon.points]
        frame = (cos_a, sin_a, min(xs), max(xs), min(ys), max(ys))
        self._frames[angle] = frame
        return frame

    def _base_dimension(self, center: Point, frame: tuple[float, ...]) -> float:
        if self.base is BaseDimension.EDGE_DISTANCE:
            return distance_to_boundary(center, self.polygon.points) * self.edge_distance_factor
        _, _, min_x, max_x, min_y, max_y = frame
        return max(max_x - min_x, max_y - min_y)

    def fit_at_angle(
        self, center: Point, angle: float, floor_area: float = 0.0
    ) -> Rectangle | None:
        """Find the largest valid rectangle at a center and angle.

        Args:
            center: Rectangle center
            angle: Rotation in degrees
            floor_area: Ratios that cannot beat this area are skipped

        Returns:
            Largest valid rectangle with area above ``floor_area``, or None
        """
        frame = self._frame(angle)
        cos_a, sin_a, min_x, max_x, min_y, max_y = frame
        local_x = center.x * cos_a + center.y * sin_a
        local_y = -center.x * sin_a + center.y * cos_a
        room_x = min(local_x - min_x, max_x - local_x)
        room_y = min(local_y - min_y, max_y - local_y)
        if room_x <= 0 or room_y <= 0:
            return None

        base = self._base_dimension(center, frame)
        if base <= 0:
            return None

        best: Rectangle | None = None
        best_area = floor_area
        for ratio in self.aspect_ratios:
            # width = base*s*ratio <= 2*room_x and height = base*s/ratio <= 2*room_y
            s_max = min(2 * room_x / (base * ratio), 2 * room_y * ratio / base)
            if self.base is BaseDimension.EDGE_DISTANCE:
                s_max = min(s_max, self.scale_cap)
            # Area is (base*s)^2 for every ratio
            if (base * s_max) ** 2 <= best_area:
                continue

            found = self._search_scale(center, angle, base, ratio, s_max)
            if found is not None and found.area > best_area:
                best = found
                best_area = found.area

        return best

    def _search_scale(
        self, center: Point, angle: float, base: float, ratio: float, s_max: float
    ) -> Rectangle | None:
        self.attempts += 1
        full = Rectangle(center, angle, base * s_max * ratio, base * s_max / ratio)
        if self.validator.is_valid(full):
            return full

        low = 0.0
        high = 1.0
        found: Rectangle | None = None
        for _ in range(self.max_iterations):
            if high - low < self.precision:
                break
            mid = (low + high) / 2
            s = mid * s_max
            rect = Rectangle(center, angle, base * s * ratio, base * s / ratio)
            if self.validator.is_valid(rect):
                low = mid
                found = rect
            else:
                high = mid
        return found
