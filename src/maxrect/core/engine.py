"""Hybrid orchestrator for the inscribed rectangle search.

The engine runs, in order:

1. The closed-form formulas for four-vertex polygons. An exact fit that
   passes final validation at full size is returned immediately.
2. The boundary-driven search, followed by edge expansion on small polygons.
3. The dense search, unless a target area is given and the boundary result
   already covers the coverage threshold of it. A failed boundary search
   always forces the dense search.

Every candidate goes through the final exact validation pass (with
shrink-and-retry) before candidates are compared. The largest validated
area wins; on equal areas the earlier stage wins.
"""

import math
import time
from collections.abc import Iterable
from typing import Any

from maxrect.config import MaxRectSettings
from maxrect.core.closed_form import closed_form_rectangle
from maxrect.core.containment import SpatialGridCache
from maxrect.core.search import boundary_search, dense_search, emit
from maxrect.core.validator import RectangleValidator
from maxrect.domain import (
    FitResult,
    FitStatus,
    Point,
    Polygon,
    Rectangle,
    RectangleSource,
    Tracer,
)

CLEANUP_TOLERANCE = 0.1
MIN_POLYGON_AREA = 1e-9


def coerce_polygon(points: Polygon | Iterable[Any]) -> Polygon:
    """Build a polygon from a Polygon, Points, (x, y) pairs or {"x", "y"} dicts.

    Raises:
        ValueError: If a point cannot be interpreted
    """
    if isinstance(points, Polygon):
        return points

    result = []
    for item in points:
        if isinstance(item, Point):
            result.append(item)
        elif isinstance(item, dict):
            result.append(Point.from_dict(item))
        else:
            x, y = item
            result.append(Point(float(x), float(y)))
    return Polygon(tuple(result))


class InscribedRectangleEngine:
    """Finds the largest rectangle inside a polygon.

    The engine holds settings, an optional trace observer and a spatial grid
    cache. It has no other state between calls.

    Example:
        engine = InscribedRectangleEngine(get_default_settings())
        result = engine.find([(0, 0), (100, 0), (100, 40), (0, 40)])
        if result.found:
            print(result.rectangle.area)
    """

    def __init__(
        self,
        settings: MaxRectSettings | None = None,
        tracer: Tracer | None = None,
        grid_cache: SpatialGridCache | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            settings: Engine settings (defaults if None)
            tracer: Observer receiving TraceEvents
            grid_cache: Shared grid cache (a private one is created if None)
        """
        self.settings = settings or MaxRectSettings()
        self.tracer = tracer
        self.grid_cache = grid_cache or SpatialGridCache()

    def find(
        self,
        points: Polygon | Iterable[Any],
        target_area: float | None = None,
        path_count: int | None = None,
    ) -> FitResult:
        """Find the largest inscribed rectangle.

        Args:
            points: Polygon or point sequence
            target_area: Reference area; a boundary result covering the
                coverage threshold of it skips the dense search
            path_count: Number of source paths merged into the polygon

        Returns:
            FitResult describing the outcome
        """
        start = time.perf_counter()

        def elapsed() -> float:
            return (time.perf_counter() - start) * 1000.0

        try:
            polygon = coerce_polygon(points)
        except (TypeError, ValueError, KeyError) as e:
            emit(self.tracer, "input.invalid", reason=str(e))
            return FitResult(FitStatus.INVALID_INPUT, reason=f"Unreadable point: {e}")

        if polygon.vertex_count < 3:
            reason = f"Polygon needs at least 3 points, got {polygon.vertex_count}"
            emit(self.tracer, "input.invalid", reason=reason)
            return FitResult(
                FitStatus.INVALID_INPUT, vertex_count=polygon.vertex_count, reason=reason
            )

        if not all(math.isfinite(p.x) and math.isfinite(p.y) for p in polygon.points):
            reason = "Polygon has non-finite coordinates"
            emit(self.tracer, "input.invalid", reason=reason)
            return FitResult(
                FitStatus.INVALID_INPUT, vertex_count=polygon.vertex_count, reason=reason
            )

        bbox = polygon.bounding_box
        extent = max(bbox.width, bbox.height)
        polygon = polygon.cleaned(min(CLEANUP_TOLERANCE, extent * 1e-3))
        if polygon.vertex_count < 3 or polygon.area <= MIN_POLYGON_AREA * max(1.0, extent**2):
            emit(self.tracer, "input.degenerate", vertex_count=polygon.vertex_count)
            return FitResult(
                FitStatus.DEGENERATE,
                vertex_count=polygon.vertex_count,
                elapsed_ms=elapsed(),
                reason="Polygon has zero area",
            )

        grid = self.grid_cache.get(polygon)
        validator = RectangleValidator(polygon, grid, self.settings.validation)
        emit(
            self.tracer,
            "search.start",
            vertex_count=polygon.vertex_count,
            area=polygon.area,
            cell_size=grid.cell_size,
        )

        hybrid = self.settings.hybrid
        candidates: list[tuple[Rectangle, RectangleSource]] = []
        timed_out = False

        if hybrid.enable_closed_form and polygon.vertex_count == 4:
            closed = closed_form_rectangle(polygon)
            if closed is not None:
                rect, source = closed
                finalized = self._finalize(validator, rect, source)
                if finalized is not None:
                    final_rect, scale = finalized
                    if scale == 1.0:
                        return self._found(final_rect, source, polygon, elapsed(), False)
                    candidates.append((final_rect, source))

        boundary = boundary_search(polygon, validator, self.settings, path_count, self.tracer)
        timed_out = timed_out or boundary.timed_out
        boundary_rect: Rectangle | None = None
        if boundary.rectangle is not None:
            rect = boundary.rectangle
            if hybrid.enable_edge_expansion:
                expanded = validator.expand_edges(rect)
                if expanded is not rect:
                    emit(
                        self.tracer,
                        "expansion.applied",
                        before=rect.area,
                        after=expanded.area,
                    )
                rect = expanded
            finalized = self._finalize(validator, rect, RectangleSource.BOUNDARY)
            if finalized is not None:
                boundary_rect = finalized[0]
                candidates.append((boundary_rect, RectangleSource.BOUNDARY))

        run_dense = hybrid.enable_dense_search
        if boundary_rect is None:
            run_dense = True
        elif target_area is not None and target_area > 0:
            coverage = boundary_rect.area / target_area
            if coverage >= hybrid.coverage_threshold:
                emit(
                    self.tracer,
                    "dense.skipped",
                    coverage=round(coverage, 4),
                    threshold=hybrid.coverage_threshold,
                )
                run_dense = False

        if run_dense:
            dense = dense_search(polygon, validator, self.settings, self.tracer)
            timed_out = timed_out or dense.timed_out
            if dense.rectangle is not None:
                finalized = self._finalize(validator, dense.rectangle, RectangleSource.DENSE)
                if finalized is not None:
                    candidates.append((finalized[0], RectangleSource.DENSE))

        best: tuple[Rectangle, RectangleSource] | None = None
        for rect, source in candidates:
            if best is None or rect.area > best[0].area:
                best = (rect, source)

        if best is None:
            emit(self.tracer, "search.failed", elapsed_ms=round(elapsed(), 2))
            return FitResult(
                FitStatus.NO_FEASIBLE,
                elapsed_ms=elapsed(),
                timed_out=timed_out,
                vertex_count=polygon.vertex_count,
                reason="No rectangle passed validation",
            )

        return self._found(best[0], best[1], polygon, elapsed(), timed_out)

    def _finalize(
        self, validator: RectangleValidator, rect: Rectangle, source: RectangleSource
    ) -> tuple[Rectangle, float] | None:
        """Canonicalize and run the final validation pass with shrink-and-retry."""
        accepted = validator.shrink_and_retry(rect.canonical())
        if accepted is None:
            emit(self.tracer, "validation.rejected", source=source.value, area=rect.area)
            return None
        final_rect, scale = accepted
        if scale < 1.0:
            emit(
                self.tracer,
                "validation.shrunk",
                source=source.value,
                scale=scale,
                area=final_rect.area,
            )
        return accepted

    def _found(
        self,
        rect: Rectangle,
        source: RectangleSource,
        polygon: Polygon,
        elapsed_ms: float,
        timed_out: bool,
    ) -> FitResult:
        emit(
            self.tracer,
            "search.complete",
            source=source.value,
            area=rect.area,
            angle=rect.angle,
            width=rect.width,
            height=rect.height,
            elapsed_ms=round(elapsed_ms, 2),
        )
        return FitResult(
            FitStatus.FOUND,
            rectangle=rect,
            source=source,
            elapsed_ms=elapsed_ms,
            timed_out=timed_out,
            vertex_count=polygon.vertex_count,
        )


def find_inscribed_rectangle(
    points: Polygon | Iterable[Any],
    settings: MaxRectSettings | None = None,
    target_area: float | None = None,
    path_count: int | None = None,
    tracer: Tracer | None = None,
) -> FitResult:
    """Convenience wrapper around InscribedRectangleEngine.find.

    Args:
        points: Polygon or point sequence
        settings: Engine settings (defaults if None)
        target_area: Reference area for the coverage early stop
        path_count: Number of source paths merged into the polygon
        tracer: Optional trace observer

    Returns:
        FitResult describing the outcome
    """
    engine = InscribedRectangleEngine(settings, tracer)
    return engine.find(points, target_area=target_area, path_count=path_count)
