"""Core geometric types for polygon representation.

This module defines the fundamental geometric types used throughout maxrect:
- Point: A 2D point
- BoundingBox: Axis-aligned extent of a point set
- Polygon: An implicitly closed, immutable ring of points
- Edge: A polygon side with its length and undirected angle
- AngleGroup: Edges that share an orientation within a tolerance
"""

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any


@dataclass(frozen=True, slots=True)
class Point:
    """A point in 2D space.

    Immutable and hashable for use in sets/dicts.

    Attributes:
        x: X coordinate
        y: Y coordinate
    """

    x: float
    y: float

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple.

        Returns:
            Tuple of (x, y) coordinates
        """
        return (self.x, self.y)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary with x and y fields
        """
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with x and y fields

        Returns:
            Point instance
        """
        return cls(x=float(data["x"]), y=float(data["y"]))

    def distance_to(self, other: "Point") -> float:
        """Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Axis-aligned bounding box."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> Point:
        return Point((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    @classmethod
    def of(cls, points: Iterable[Point]) -> "BoundingBox":
        """Compute the bounding box of a non-empty point collection."""
        xs: list[float] = []
        ys: list[float] = []
        for p in points:
            xs.append(p.x)
            ys.append(p.y)
        if not xs:
            raise ValueError("Cannot compute bounding box of an empty point set")
        return cls(min(xs), min(ys), max(xs), max(ys))


@dataclass(frozen=True)
class Polygon:
    """A simple closed polygon.

    The ring is implicitly closed: the last point connects back to the first.
    Winding direction is not assumed. Polygons are immutable and hash by
    content, so they can key caches directly.

    Attributes:
        points: Vertices in boundary order
    """

    points: tuple[Point, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.points, tuple):
            object.__setattr__(self, "points", tuple(self.points))

    @classmethod
    def from_coords(cls, coords: Iterable[Sequence[float]]) -> "Polygon":
        """Build a polygon from (x, y) pairs.

        Args:
            coords: Iterable of two-element sequences

        Returns:
            Polygon instance
        """
        return cls(tuple(Point(float(c[0]), float(c[1])) for c in coords))

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self):
        return iter(self.points)

    @property
    def vertex_count(self) -> int:
        return len(self.points)

    @cached_property
    def bounding_box(self) -> BoundingBox:
        """Bounding box of all vertices (cached)."""
        return BoundingBox.of(self.points)

    @cached_property
    def signed_area(self) -> float:
        """Signed area using the shoelace formula (cached).

        Positive for counter-clockwise rings, negative for clockwise ones.
        """
        n = len(self.points)
        if n < 3:
            return 0.0

        area = 0.0
        for i in range(n):
            j = (i + 1) % n
            area += self.points[i].x * self.points[j].y
            area -= self.points[j].x * self.points[i].y

        return area / 2.0

    @property
    def area(self) -> float:
        return abs(self.signed_area)

    def is_counter_clockwise(self) -> bool:
        return self.signed_area > 0

    def cleaned(self, tolerance: float = 0.1) -> "Polygon":
        """Drop consecutive duplicate vertices.

        Points closer than ``tolerance`` to their predecessor are removed,
        including a closing point that repeats the first vertex.

        Args:
            tolerance: Distance under which two consecutive points are equal

        Returns:
            New polygon without duplicates (self if nothing was removed)
        """
        kept: list[Point] = []
        for p in self.points:
            if kept and p.distance_to(kept[-1]) < tolerance:
                continue
            kept.append(p)
        while len(kept) > 1 and kept[-1].distance_to(kept[0]) < tolerance:
            kept.pop()
        if len(kept) == len(self.points):
            return self
        return Polygon(tuple(kept))

    def to_list(self) -> list[list[float]]:
        """Serialize to a list of [x, y] pairs."""
        return [[p.x, p.y] for p in self.points]


@dataclass(frozen=True, slots=True)
class Edge:
    """One side of a polygon.

    Attributes:
        start: First endpoint
        end: Second endpoint
        index: Position of ``start`` in the polygon ring
        length: Euclidean length
        angle: Undirected orientation in degrees, normalized to [0, 180)
    """

    start: Point
    end: Point
    index: int
    length: float
    angle: float

    @property
    def midpoint(self) -> Point:
        return Point((self.start.x + self.end.x) / 2, (self.start.y + self.end.y) / 2)


@dataclass
class AngleGroup:
    """Edges whose orientations agree within a tolerance.

    Attributes:
        angle: Representative angle (the first edge added)
        total_length: Sum of member edge lengths, used as significance weight
        edges: Member edges in insertion order
    """

    angle: float
    total_length: float = 0.0
    edges: list[Edge] = field(default_factory=list)

    def add(self, edge: Edge) -> None:
        self.edges.append(edge)
        self.total_length += edge.length

    @property
    def perpendicular(self) -> float:
        return (self.angle + 90.0) % 180.0
