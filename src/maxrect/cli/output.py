"""Rich console output helpers for the CLI.

Results are rendered as tables; errors and progress steps go through the shared
console so tests can capture them.
"""

from rich.console import Console
from rich.table import Table
from rich.text import Text

from maxrect.domain import FitResult, Polygon
from maxrect.utils import SearchStats

console = Console()

# Status glyphs
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"


def print_header(version: str) -> None:
    """Print the banner line with the version.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]MaxRect[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print one progress step.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_polygon_info(path: str, polygon: Polygon, path_count: int | None = None) -> None:
    """Print polygon information.

    Args:
        path: Path to the polygon file
        polygon: Loaded polygon
        path_count: Number of source paths, if known
    """
    # Use Text to safely handle paths with special characters
    line1 = Text("  ")
    line1.append(path)
    console.print(line1)

    bbox = polygon.bounding_box
    line2 = f"  {polygon.vertex_count:,} points {SYM_DOT} area {polygon.area:,.1f}"
    line2 += f" {SYM_DOT} {bbox.width:,.1f} × {bbox.height:,.1f}"
    if path_count is not None:
        line2 += f" {SYM_DOT} {path_count} paths"
    console.print(line2)


def _format_time(milliseconds: float) -> str:
    """Format milliseconds into human-readable time string."""
    if milliseconds < 1000:
        return f"{milliseconds:.0f}ms"
    return f"{milliseconds / 1000:.1f}s"


def print_result(result: FitResult, polygon_area: float, verbose: bool = False) -> None:
    """Print a found rectangle with summary.

    Args:
        result: Successful search result
        polygon_area: Area of the searched polygon
        verbose: Whether to list the corners
    """
    rect = result.unwrap()
    source = result.source.value if result.source else "unknown"
    console.print(
        f"\n[bold green]{SYM_OK} Found[/bold green] in {_format_time(result.elapsed_ms)}"
        f" {SYM_DOT} {source}"
    )
    if result.timed_out:
        console.print("  [yellow]time budget reached, result may be improvable[/yellow]")

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="dim")
    table.add_column()
    table.add_row("Center", f"{rect.center.x:.2f}, {rect.center.y:.2f}")
    table.add_row("Angle", f"{rect.angle:.2f}°")
    table.add_row("Size", f"{rect.width:.2f} × {rect.height:.2f}")
    coverage = rect.area / polygon_area if polygon_area > 0 else 0.0
    table.add_row("Area", f"{rect.area:,.2f} ({coverage:.1%} of polygon)")
    if verbose:
        for index, corner in enumerate(rect.corners):
            table.add_row(f"Corner {index}", f"{corner.x:.2f}, {corner.y:.2f}")
    console.print(table)


def print_stats(stats: SearchStats) -> None:
    """Print trace statistics collected during the search.

    Args:
        stats: Statistics from the search logger
    """
    console.print(
        f"  {stats.shrink_count} shrinks {SYM_DOT} {stats.rejected_count} rejected"
        f" {SYM_DOT} {stats.expansions} expansions {SYM_DOT} {stats.timeouts} timeouts"
    )


def print_stored(key: str, path: str) -> None:
    """Print store update confirmation."""
    line = Text(f"  {SYM_DOT} stored as ")
    line.append(key, style="bold")
    line.append(" in ")
    line.append(path)
    console.print(line)


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")
