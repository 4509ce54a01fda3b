"""Containment oracle with spatial grid acceleration.

A SpatialGrid classifies the cells of a regular grid over the polygon's
bounding box once at construction, sweeping one scanline per lattice row.
Point queries that land in an Inside or Outside cell are answered from the
classification; only Boundary cells fall back to exact ray casting.

Grids are owned by their caller. SpatialGridCache is an explicit, bounded
cache keyed by polygon content for callers that query the same polygon from
several search stages.
"""

import math
from bisect import bisect_right
from collections import OrderedDict
from enum import Enum, auto

from maxrect.core.geometry import point_in_polygon, ray_crossings
from maxrect.domain import BoundingBox, Point, Polygon

MIN_CELL_SIZE = 2.0
MAX_CELL_SIZE = 8.0
CELL_SIZE_FRACTION = 0.025


class CellState(Enum):
    """Classification of a grid cell."""

    INSIDE = auto()
    OUTSIDE = auto()
    BOUNDARY = auto()


def choose_cell_size(bbox: BoundingBox) -> float:
    """Pick a cell size of 2.5% of the average bounding box dimension.

    Args:
        bbox: Polygon bounding box

    Returns:
        Cell size clamped to [2, 8] units
    """
    average = (bbox.width + bbox.height) / 2
    return max(MIN_CELL_SIZE, min(MAX_CELL_SIZE, average * CELL_SIZE_FRACTION))


class SpatialGrid:
    """Precomputed cell classification for fast containment queries.

    A cell is Inside when its four corners pass the ray-casting test, Outside
    when none do and Boundary otherwise. Cells that contain a polygon vertex
    or that an edge passes through are always Boundary, so a thin notch that
    crosses a cell without covering any of its corners is still tested
    exactly. The grid is read-only after construction.

    Example:
        grid = SpatialGrid(polygon)
        grid.contains_point(Point(10, 10))
        grid.contains_rectangle(0, 0, 20, 5)
    """

    def __init__(self, polygon: Polygon, cell_size: float | None = None) -> None:
        """Build and classify the grid.

        Args:
            polygon: Polygon to index
            cell_size: Cell edge length (chosen from the bounding box if None)
        """
        self.polygon = polygon
        self.bounds = polygon.bounding_box
        self.cell_size = cell_size if cell_size is not None else choose_cell_size(self.bounds)
        self.cols = max(1, math.ceil(self.bounds.width / self.cell_size))
        self.rows = max(1, math.ceil(self.bounds.height / self.cell_size))
        self._points = list(polygon.points)
        self._cells = self._classify_cells()

    def _lattice_x(self, col: int) -> float:
        return min(self.bounds.min_x + col * self.cell_size, self.bounds.max_x)

    def _lattice_y(self, row: int) -> float:
        return min(self.bounds.min_y + row * self.cell_size, self.bounds.max_y)

    def _lattice_row_inside(self, row: int) -> list[bool]:
        # One scanline per lattice row; parity of crossings right of x
        xs = ray_crossings(self._points, self._lattice_y(row))
        total = len(xs)
        return [
            (total - bisect_right(xs, self._lattice_x(c))) % 2 == 1
            for c in range(self.cols + 1)
        ]

    def _classify_cells(self) -> list[list[CellState]]:
        # Corner flags are shared between neighbouring cells
        corner_inside = [self._lattice_row_inside(r) for r in range(self.rows + 1)]
        touched = self._cells_touched_by_boundary()

        cells: list[list[CellState]] = []
        for r in range(self.rows):
            row_states = []
            for c in range(self.cols):
                if (r, c) in touched:
                    row_states.append(CellState.BOUNDARY)
                    continue
                inside_count = (
                    corner_inside[r][c]
                    + corner_inside[r][c + 1]
                    + corner_inside[r + 1][c]
                    + corner_inside[r + 1][c + 1]
                )
                if inside_count == 4:
                    row_states.append(CellState.INSIDE)
                elif inside_count == 0:
                    row_states.append(CellState.OUTSIDE)
                else:
                    row_states.append(CellState.BOUNDARY)
            cells.append(row_states)
        return cells

    def _cells_touched_by_boundary(self) -> set[tuple[int, int]]:
        touched: set[tuple[int, int]] = set()
        step = self.cell_size / 4
        n = len(self._points)
        for i in range(n):
            a = self._points[i]
            b = self._points[(i + 1) % n]
            length = math.hypot(b.x - a.x, b.y - a.y)
            samples = max(1, math.ceil(length / step))
            for k in range(samples + 1):
                t = k / samples
                cell = self._cell_index(a.x + (b.x - a.x) * t, a.y + (b.y - a.y) * t)
                if cell is not None:
                    touched.add(cell)
        return touched

    def _cell_index(self, x: float, y: float) -> tuple[int, int] | None:
        b = self.bounds
        if x < b.min_x or x > b.max_x or y < b.min_y or y > b.max_y:
            return None
        col = min(int((x - b.min_x) / self.cell_size), self.cols - 1)
        row = min(int((y - b.min_y) / self.cell_size), self.rows - 1)
        return row, col

    def cell_state(self, row: int, col: int) -> CellState:
        """Get the classification of a cell."""
        return self._cells[row][col]

    def state_counts(self) -> dict[CellState, int]:
        """Count cells per classification."""
        counts = {state: 0 for state in CellState}
        for row in self._cells:
            for state in row:
                counts[state] += 1
        return counts

    def contains_point(self, point: Point) -> bool:
        """Test whether a point is inside the polygon.

        Args:
            point: The point to test

        Returns:
            True if the point is inside
        """
        cell = self._cell_index(point.x, point.y)
        if cell is None:
            return False

        state = self._cells[cell[0]][cell[1]]
        if state is CellState.INSIDE:
            return True
        if state is CellState.OUTSIDE:
            return False
        return point_in_polygon(point, self._points)

    def contains_rectangle(self, min_x: float, min_y: float, max_x: float, max_y: float) -> bool:
        """Test whether an axis-aligned rectangle is inside the polygon.

        Every covered cell must be Inside. When a Boundary cell is covered the
        check is exact: no polygon edge may pass through the rectangle's
        interior and its center must be inside. Edges lying along a side do
        not count, so a rectangle flush with the boundary is accepted.

        Args:
            min_x: Left edge
            min_y: Bottom edge
            max_x: Right edge
            max_y: Top edge

        Returns:
            True if the rectangle is contained
        """
        b = self.bounds
        if min_x < b.min_x or max_x > b.max_x or min_y < b.min_y or max_y > b.max_y:
            return False

        first = self._cell_index(min_x, min_y)
        last = self._cell_index(max_x, max_y)
        if first is None or last is None:
            return False

        needs_exact = False
        for row in range(first[0], last[0] + 1):
            for col in range(first[1], last[1] + 1):
                state = self._cells[row][col]
                if state is CellState.OUTSIDE:
                    return False
                if state is CellState.BOUNDARY:
                    needs_exact = True

        if not needs_exact:
            return True
        return self._exact_rectangle_check(min_x, min_y, max_x, max_y)

    def _exact_rectangle_check(
        self, min_x: float, min_y: float, max_x: float, max_y: float
    ) -> bool:
        pts = self._points
        n = len(pts)
        for i in range(n):
            a = pts[i]
            b = pts[(i + 1) % n]
            if _segment_enters_box(a, b, min_x, min_y, max_x, max_y):
                return False
        # No edge crosses the interior, so it is entirely inside or outside
        center = Point((min_x + max_x) / 2, (min_y + max_y) / 2)
        return point_in_polygon(center, pts)


def _segment_enters_box(
    a: Point, b: Point, min_x: float, min_y: float, max_x: float, max_y: float
) -> bool:
    """Liang-Barsky clip of segment a-b against a box, true if it reaches the open interior."""
    dx = b.x - a.x
    dy = b.y - a.y
    t0, t1 = 0.0, 1.0
    for p, q in ((-dx, a.x - min_x), (dx, max_x - a.x), (-dy, a.y - min_y), (dy, max_y - a.y)):
        if p == 0:
            if q < 0:
                return False
            continue
        r = q / p
        if p < 0:
            if r > t1:
                return False
            t0 = max(t0, r)
        else:
            if r < t0:
                return False
            t1 = min(t1, r)

    t = (t0 + t1) / 2
    mx = a.x + dx * t
    my = a.y + dy * t
    eps = 1e-9 * max(1.0, max_x - min_x, max_y - min_y)
    return min_x + eps < mx < max_x - eps and min_y + eps < my < max_y - eps


class SpatialGridCache:
    """Caller-owned cache of spatial grids.

    Keys are the polygon itself (polygons hash by content) plus the cell
    size. The least recently used grid is evicted once ``max_entries`` is
    exceeded.
    """

    def __init__(self, max_entries: int = 32) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._grids: OrderedDict[tuple[Polygon, float], SpatialGrid] = OrderedDict()
        self.hits = 0
        self.misses = 0

    def get(self, polygon: Polygon, cell_size: float | None = None) -> SpatialGrid:
        """Get the grid for a polygon, building it on first use."""
        size = cell_size if cell_size is not None else choose_cell_size(polygon.bounding_box)
        key = (polygon, size)
        grid = self._grids.get(key)
        if grid is not None:
            self.hits += 1
            self._grids.move_to_end(key)
            return grid

        self.misses += 1
        grid = SpatialGrid(polygon, size)
        self._grids[key] = grid
        if len(self._grids) > self.max_entries:
            self._grids.popitem(last=False)
        return grid

    def invalidate(self, polygon: Polygon) -> int:
        """Drop every grid built for a polygon.

        Returns:
            Number of grids removed
        """
        stale = [key for key in self._grids if key[0] == polygon]
        for key in stale:
            del self._grids[key]
        return len(stale)

    def clear(self) -> None:
        self._grids.clear()

    def __len__(self) -> int:
        return len(self._grids)

    def __contains__(self, polygon: object) -> bool:
        return any(key[0] == polygon for key in self._grids)
