"""Domain models for maxrect.

This module contains the core domain models representing polygons, their
edges, rotated rectangles and search outcomes. All models are designed to be:

- Immutable where possible (using frozen dataclasses)
- Hashable by content, so polygons can key caches
- Serializable to plain dictionaries for JSON persistence

Key classes:
- Point: A 2D point
- Polygon: A closed ring of points
- Edge / AngleGroup: Boundary analysis views
- Rectangle: A rotated rectangle with ordered corners
- FitResult: Outcome of a search
"""

from maxrect.domain.polygon import AngleGroup, BoundingBox, Edge, Point, Polygon
from maxrect.domain.rectangle import Rectangle, rectangle_corners
from maxrect.domain.result import (
    FitResult,
    FitStatus,
    RectangleSource,
    TraceEvent,
    Tracer,
)

__all__: list[str] = [
    # Enums
    "FitStatus",
    "RectangleSource",
    # Core types
    "Point",
    "BoundingBox",
    "Polygon",
    "Edge",
    "AngleGroup",
    "Rectangle",
    "FitResult",
    "TraceEvent",
    "Tracer",
    # Helpers
    "rectangle_corners",
]
