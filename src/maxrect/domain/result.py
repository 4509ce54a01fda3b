"""Search outcome types.

The engine reports failure through values rather than exceptions:
- FitStatus: Tagged outcome of a search
- RectangleSource: Which sub-strategy produced the rectangle
- FitResult: Outcome plus the rectangle and informational metadata
- TraceEvent: Structured event handed to an optional observer
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from maxrect.domain.rectangle import Rectangle
from maxrect.exceptions import (
    DegeneratePolygonError,
    InvalidPolygonError,
    NoFeasibleRectangleError,
)


class FitStatus(Enum):
    """Outcome of an inscribed rectangle search."""

    FOUND = "found"
    INVALID_INPUT = "invalid_input"
    DEGENERATE = "degenerate"
    NO_FEASIBLE = "no_feasible"


class RectangleSource(Enum):
    """Sub-strategy that produced a rectangle."""

    PARALLELOGRAM = "parallelogram"
    TRAPEZOID = "trapezoid"
    BOUNDARY = "boundary"
    DENSE = "dense"


@dataclass(frozen=True)
class TraceEvent:
    """A structured trace event emitted while searching.

    Attributes:
        name: Dotted event name (e.g. "boundary.complete")
        data: Event payload
    """

    name: str
    data: dict[str, Any] = field(default_factory=dict)


Tracer = Callable[[TraceEvent], None]


@dataclass(frozen=True)
class FitResult:
    """Result of a search.

    Attributes:
        status: Outcome of the search
        rectangle: Best validated rectangle (only when status is FOUND)
        source: Sub-strategy that produced the rectangle
        elapsed_ms: Wall-clock time spent, informational only
        timed_out: True when a time budget truncated any search stage
        vertex_count: Number of vertices searched after cleanup
        reason: Human-readable failure reason
    """

    status: FitStatus
    rectangle: Rectangle | None = None
    source: RectangleSource | None = None
    elapsed_ms: float = 0.0
    timed_out: bool = False
    vertex_count: int = 0
    reason: str = ""

    @property
    def found(self) -> bool:
        return self.status is FitStatus.FOUND

    def unwrap(self) -> Rectangle:
        """Get the rectangle or raise the exception matching the status.

        Returns:
            The found rectangle

        Raises:
            InvalidPolygonError: Input had too few or non-finite points
            DegeneratePolygonError: Input had zero area
            NoFeasibleRectangleError: Nothing survived validation
        """
        if self.status is FitStatus.FOUND and self.rectangle is not None:
            return self.rectangle
        if self.status is FitStatus.INVALID_INPUT:
            raise InvalidPolygonError(self.reason)
        if self.status is FitStatus.DEGENERATE:
            raise DegeneratePolygonError(self.vertex_count)
        raise NoFeasibleRectangleError(self.vertex_count, self.elapsed_ms)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "status": self.status.value,
            "rectangle": self.rectangle.to_dict() if self.rectangle else None,
            "source": self.source.value if self.source else None,
            "elapsed_ms": round(self.elapsed_ms, 3),
            "timed_out": self.timed_out,
            "vertex_count": self.vertex_count,
            "reason": self.reason,
        }
