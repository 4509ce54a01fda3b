"""Time-budgeted rectangle searches.

Two searches share the fitter and validator:

- boundary_search: dominant boundary angles crossed with the uniform or
  hybrid candidate centers, fitted against the polygon extent
- dense_search: pole-seeded centers crossed with a full angle sweep
  (natural, critical and strategic angles) plus local angle refinement,
  fitted with the nearest-edge heuristic

Both stop cooperatively when their budget runs out and return the best
rectangle found so far. Running out of time is not an error.
"""

import time
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from maxrect.config import MaxRectSettings
from maxrect.core.boundary import (
    boundary_angles,
    critical_angles,
    detect_orientation,
    extract_edges,
    find_dominant_angles,
    natural_angles,
    refinement_angles,
    strategic_angles,
    unique_angles,
)
from maxrect.core.centroids import (
    Containment,
    fallback_centers,
    generate_candidates,
    pole_seeded_candidates,
    resolve_strategy,
)
from maxrect.core.fitter import BaseDimension, RectangleFitter
from maxrect.core.geometry import is_convex
from maxrect.core.validator import RectangleValidator
from maxrect.domain import Point, Polygon, Rectangle, TraceEvent, Tracer


class Deadline:
    """Wall-clock budget checked at loop boundaries."""

    def __init__(self, budget_ms: float | None) -> None:
        self.budget_ms = budget_ms
        self._start = time.perf_counter()

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self._start) * 1000.0

    def expired(self) -> bool:
        return self.budget_ms is not None and self.elapsed_ms > self.budget_ms


@dataclass
class SearchOutcome:
    """Best rectangle of one search plus bookkeeping.

    Attributes:
        rectangle: Best rectangle found (None if nothing validated)
        angle: Angle the best rectangle was found at
        center: Candidate center of the best rectangle
        centers_tried: Number of candidate centers visited
        angles_tried: Number of angles fully swept
        fits: Number of fitter calls
        timed_out: True when the budget cut the search short
        elapsed_ms: Time spent
    """

    rectangle: Rectangle | None = None
    angle: float | None = None
    center: Point | None = None
    centers_tried: int = 0
    angles_tried: int = 0
    fits: int = 0
    timed_out: bool = False
    elapsed_ms: float = 0.0
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def area(self) -> float:
        return self.rectangle.area if self.rectangle is not None else 0.0

    def offer(self, rect: Rectangle | None, center: Point, angle: float) -> bool:
        """Keep rect if it is strictly larger than the current best."""
        if rect is None or rect.area <= self.area:
            return False
        self.rectangle = rect
        self.center = center
        self.angle = angle
        return True


def emit(tracer: Tracer | None, name: str, **data: Any) -> None:
    """Send a trace event to an optional observer."""
    if tracer is not None:
        tracer(TraceEvent(name, data))


def boundary_search(
    polygon: Polygon,
    validator: RectangleValidator,
    settings: MaxRectSettings,
    path_count: int | None = None,
    tracer: Tracer | None = None,
) -> SearchOutcome:
    """Search the boundary-derived angles over the strategy's candidate centers.

    Args:
        polygon: Cleaned polygon
        validator: Validator bound to the polygon
        settings: Engine settings
        path_count: Number of source paths, used for strategy selection
        tracer: Optional trace observer

    Returns:
        Best rectangle found within the budget
    """
    cfg = settings.search
    debug = settings.hybrid.debug_mode
    deadline = Deadline(cfg.max_time_ms)

    edges = extract_edges(polygon)
    groups = find_dominant_angles(edges, cfg.angle_tolerance, cfg.min_edge_length)
    angles = boundary_angles(groups, cfg.max_dominant_angles, cfg.test_perpendicular)

    strategy = resolve_strategy(settings.centroids.strategy, polygon, path_count)
    centers = generate_candidates(polygon, strategy, validator.contains, settings.centroids)
    if not centers:
        centers = fallback_centers(polygon, validator.contains)

    fitter = RectangleFitter(
        polygon,
        validator,
        cfg.ratios_for(is_convex(polygon.points)),
        precision=cfg.binary_search_precision,
        max_iterations=cfg.binary_search_max_iterations,
        base=BaseDimension.EXTENT,
    )
    emit(
        tracer,
        "boundary.start",
        strategy=strategy.value,
        angle_groups=len(groups),
        angles=len(angles),
        centers=len(centers),
    )

    outcome = SearchOutcome(details={"strategy": strategy.value})
    for angle in angles:
        if deadline.expired():
            outcome.timed_out = True
            break
        for center in centers:
            if deadline.expired():
                outcome.timed_out = True
                break
            outcome.fits += 1
            outcome.offer(fitter.fit_at_angle(center, angle, outcome.area), center, angle)
        if outcome.timed_out:
            break
        outcome.angles_tried += 1
        if debug:
            emit(tracer, "boundary.angle", angle=angle, best_area=outcome.area)

    outcome.centers_tried = len(centers)
    outcome.elapsed_ms = deadline.elapsed_ms
    emit(
        tracer,
        "boundary.complete",
        area=outcome.area,
        angle=outcome.angle,
        timed_out=outcome.timed_out,
        elapsed_ms=round(outcome.elapsed_ms, 2),
    )
    return outcome


def dense_angles(polygon: Polygon, settings: MaxRectSettings) -> list[float]:
    """Full angle sweep of the dense search.

    Detected orientation first, then natural edge angles, rotating-calipers
    critical angles and the strategic sweep.
    """
    cfg = settings.search
    edges = extract_edges(polygon)
    angles = [detect_orientation(polygon)]
    angles.extend(natural_angles(edges))
    angles.extend(critical_angles(polygon))
    angles.extend(strategic_angles(cfg.angle_step, cfg.refinement_step, cfg.fine_sweep_window))
    return unique_angles(angles)


def _with_fallback(
    centers: Iterator[Point], polygon: Polygon, contains: Containment
) -> Iterator[Point]:
    """Pass centers through, or the classic centroids when there are none."""
    empty = True
    for center in centers:
        empty = False
        yield center
    if empty:
        yield from fallback_centers(polygon, contains)


def dense_search(
    polygon: Polygon,
    validator: RectangleValidator,
    settings: MaxRectSettings,
    tracer: Tracer | None = None,
) -> SearchOutcome:
    """Sweep every angle at each pole-seeded candidate center.

    When a center improves the best rectangle, the angles within
    ``refinement_range`` of its best angle are tried at ``refinement_step``.

    Args:
        polygon: Cleaned polygon
        validator: Validator bound to the polygon
        settings: Engine settings
        tracer: Optional trace observer

    Returns:
        Best rectangle found within the budget
    """
    cfg = settings.search
    debug = settings.hybrid.debug_mode
    deadline = Deadline(cfg.dense_max_time_ms)

    angles = dense_angles(polygon, settings)
    centers = _with_fallback(
        pole_seeded_candidates(polygon, validator.contains, settings.centroids),
        polygon,
        validator.contains,
    )

    fitter = RectangleFitter(
        polygon,
        validator,
        cfg.ratios_for(is_convex(polygon.points)),
        precision=cfg.dense_binary_search_precision,
        max_iterations=cfg.dense_binary_search_max_iterations,
        base=BaseDimension.EDGE_DISTANCE,
        edge_distance_factor=cfg.edge_distance_factor,
        scale_cap=cfg.edge_distance_scale_cap,
    )
    emit(tracer, "dense.start", angles=len(angles))

    outcome = SearchOutcome()
    for center in centers:
        if deadline.expired():
            outcome.timed_out = True
            break
        outcome.centers_tried += 1

        improved_at: float | None = None
        for angle in angles:
            if deadline.expired():
                outcome.timed_out = True
                break
            outcome.fits += 1
            if outcome.offer(fitter.fit_at_angle(center, angle, outcome.area), center, angle):
                improved_at = angle

        if improved_at is not None and not outcome.timed_out:
            refined = refinement_angles(improved_at, cfg.refinement_range, cfg.refinement_step)
            for angle in unique_angles(refined, exclude=angles):
                if deadline.expired():
                    outcome.timed_out = True
                    break
                outcome.fits += 1
                outcome.offer(fitter.fit_at_angle(center, angle, outcome.area), center, angle)
            if debug:
                emit(tracer, "dense.center", center=center.to_tuple(), best_area=outcome.area)

        if outcome.timed_out:
            break

    outcome.angles_tried = len(angles)
    outcome.elapsed_ms = deadline.elapsed_ms
    emit(
        tracer,
        "dense.complete",
        area=outcome.area,
        angle=outcome.angle,
        centers_tried=outcome.centers_tried,
        timed_out=outcome.timed_out,
        elapsed_ms=round(outcome.elapsed_ms, 2),
    )
    return outcome
