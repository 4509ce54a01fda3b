"""Rotated rectangle model."""

import math
from dataclasses import dataclass, field
from typing import Any

from maxrect.domain.polygon import Point


def rectangle_corners(
    center: Point, angle: float, width: float, height: float
) -> tuple[Point, Point, Point, Point]:
    """Compute the corners of a rotated rectangle.

    Corners are ordered bottom-left, bottom-right, top-right, top-left in the
    rectangle's own rotated frame.

    Args:
        center: Rectangle center
        angle: Rotation in degrees (counter-clockwise)
        width: Extent along the rotated x axis
        height: Extent along the rotated y axis

    Returns:
        The four corners
    """
    rad = math.radians(angle)
    cos_a = math.cos(rad)
    sin_a = math.sin(rad)
    hw = width / 2
    hh = height / 2

    def place(dx: float, dy: float) -> Point:
        return Point(
            center.x + dx * cos_a - dy * sin_a,
            center.y + dx * sin_a + dy * cos_a,
        )

    return (place(-hw, -hh), place(hw, -hh), place(hw, hh), place(-hw, hh))


@dataclass(frozen=True)
class Rectangle:
    """A rectangle at arbitrary rotation.

    Never mutated: every refinement step produces a new instance.

    Attributes:
        center: Center point
        angle: Rotation in degrees
        width: Extent along the rotated x axis
        height: Extent along the rotated y axis
        corners: Bottom-left, bottom-right, top-right, top-left
    """

    center: Point
    angle: float
    width: float
    height: float
    corners: tuple[Point, ...] = field(default=(), compare=False)

    def __post_init__(self) -> None:
        if not self.corners:
            object.__setattr__(
                self,
                "corners",
                rectangle_corners(self.center, self.angle, self.width, self.height),
            )

    @property
    def area(self) -> float:
        return self.width * self.height

    def scaled(self, factor: float) -> "Rectangle":
        """Return the same rectangle with both dimensions multiplied by factor."""
        return Rectangle(self.center, self.angle, self.width * factor, self.height * factor)

    def canonical(self) -> "Rectangle":
        """Re-express the rectangle with its angle in [0, 90).

        A rectangle rotated by 90 degrees with width and height swapped covers
        the same points, so the angle is folded into the first quadrant.

        Returns:
            Equivalent rectangle with normalized angle and recomputed corners
        """
        angle = self.angle % 180.0
        # -1e-17 % 180 rounds to exactly 180.0
        if angle >= 180.0:
            angle = 0.0
        width, height = self.width, self.height
        if angle >= 90.0:
            angle -= 90.0
            width, height = height, width
        if angle == self.angle and width == self.width:
            return self
        return Rectangle(self.center, angle, width, height)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary with center, angle, width, height, area and corners
        """
        return {
            "center": self.center.to_dict(),
            "angle": self.angle,
            "width": self.width,
            "height": self.height,
            "area": self.area,
            "corners": [c.to_dict() for c in self.corners],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Rectangle":
        """Deserialize from dictionary.

        Stored corners are kept as-is so persisted results render exactly.

        Args:
            data: Dictionary produced by ``to_dict``

        Returns:
            Rectangle instance
        """
        corners = tuple(Point.from_dict(c) for c in data.get("corners", ()))
        return cls(
            center=Point.from_dict(data["center"]),
            angle=float(data["angle"]),
            width=float(data["width"]),
            height=float(data["height"]),
            corners=corners,
        )
