"""CLI application entry point for maxrect.

Typer application exposing the rectangle search as a command.
"""

import json
from pathlib import Path
from typing import Annotated

import typer

from maxrect import __version__
from maxrect.cli.output import (
    console,
    print_error,
    print_header,
    print_polygon_info,
    print_result,
    print_stats,
    print_step,
    print_stored,
)
from maxrect.config import (
    PRESETS,
    CentroidStrategy,
    LoggingConfig,
    MaxRectSettings,
    get_default_settings,
    get_preset,
)
from maxrect.core import InscribedRectangleEngine
from maxrect.exceptions import MaxRectError, PolygonLoadError, StoreError
from maxrect.io import PolygonReader, RectangleStore, make_key
from maxrect.utils import SearchLogger, configure_logging

# Create the Typer app
app = typer.Typer(
    name="maxrect",
    help="Find the largest rectangle, at any rotation, that fits inside a polygon.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print the installed version and stop."""
    if value:
        console.print(f"[bold blue]MaxRect[/bold blue] v{__version__}")
        raise typer.Exit()


def build_settings(
    preset: str | None,
    strategy: CentroidStrategy,
    max_time_ms: float | None,
    dense_time_ms: float | None,
    no_dense: bool,
    log_file: Path | None,
    log_level: str,
) -> MaxRectSettings:
    """Build settings from a preset and command-line overrides.

    Raises:
        KeyError: If the preset name is unknown
    """
    settings = get_preset(preset) if preset else get_default_settings()

    search_updates: dict[str, float] = {}
    if max_time_ms is not None:
        search_updates["max_time_ms"] = max_time_ms
    if dense_time_ms is not None:
        search_updates["dense_max_time_ms"] = dense_time_ms

    return settings.model_copy(
        update={
            "search": settings.search.model_copy(update=search_updates),
            "centroids": settings.centroids.model_copy(update={"strategy": strategy}),
            "hybrid": settings.hybrid.model_copy(
                update={"enable_dense_search": settings.hybrid.enable_dense_search and not no_dense}
            ),
            "logging": LoggingConfig(log_file=log_file, log_level=log_level),
        }
    )


@app.command()
def find(
    polygon_file: Annotated[
        Path,
        typer.Argument(
            help="Path to a JSON polygon file (point list or object with points/path)",
            show_default=False,
        ),
    ],
    max_time_ms: Annotated[
        float | None,
        typer.Option(
            "--max-time-ms",
            "-t",
            help="Time budget of the boundary search in milliseconds",
            min=1.0,
        ),
    ] = None,
    dense_time_ms: Annotated[
        float | None,
        typer.Option(
            "--dense-time-ms",
            help="Time budget of the dense search in milliseconds",
            min=1.0,
        ),
    ] = None,
    target_area: Annotated[
        float | None,
        typer.Option(
            "--target-area",
            help=(
                "Reference area; a boundary result covering the hybrid.coverage_threshold"
                " fraction of it (0.96 by default) skips the dense search"
            ),
            min=0.0,
        ),
    ] = None,
    path_count: Annotated[
        int | None,
        typer.Option(
            "--path-count",
            help="Number of source paths merged into the polygon",
            min=1,
        ),
    ] = None,
    strategy: Annotated[
        str,
        typer.Option(
            "--strategy",
            "-s",
            help="Centroid strategy (auto|uniform|hybrid)",
        ),
    ] = "auto",
    preset: Annotated[
        str | None,
        typer.Option(
            "--preset",
            "-p",
            help=f"Parameter preset ({'|'.join(PRESETS)})",
        ),
    ] = None,
    no_dense: Annotated[
        bool,
        typer.Option(
            "--no-dense",
            help="Skip the dense search unless the boundary search finds nothing",
        ),
    ] = False,
    as_json: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Print the result as JSON",
        ),
    ] = False,
    store: Annotated[
        Path | None,
        typer.Option(
            "--store",
            help="Add the result to a precomputed rectangle store (JSON)",
        ),
    ] = None,
    key: Annotated[
        str | None,
        typer.Option(
            "--key",
            help="Store key (default: region ids from the file, else the file name)",
        ),
    ] = None,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Also write JSON logs to this file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show corners and search statistics",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Only print errors",
        ),
    ] = False,
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Print the version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Find the largest inscribed rectangle of a polygon.

    The polygon file holds either a list of [x, y] pairs or an object with
    "points" or "path" (SVG path data) and optional "pathCount",
    "targetArea" and "ids" fields.

    Example:
        maxrect outline.json --json

    Exits with code 1 when the polygon is invalid or no rectangle fits.
    """
    # --verbose and --quiet conflict
    if verbose and quiet:
        print_error("--verbose and --quiet cannot be combined")
        raise typer.Exit(code=1)

    if not polygon_file.exists():
        print_error(
            f"Input file not found: {polygon_file}",
            details=f"The file '{polygon_file}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    try:
        strategy_pref = CentroidStrategy(strategy.lower())
    except ValueError:
        print_error(
            f"Invalid strategy: {strategy}",
            details="Valid values: auto, uniform, hybrid",
        )
        raise typer.Exit(code=1)

    try:
        settings = build_settings(
            preset, strategy_pref, max_time_ms, dense_time_ms, no_dense, log_file, log_level
        )
    except KeyError:
        print_error(f"Invalid preset: {preset}", details=f"Valid values: {', '.join(PRESETS)}")
        raise typer.Exit(code=1)

    # JSON mode keeps stdout machine-readable
    show = not quiet and not as_json

    if show:
        print_header(__version__)

    logger = configure_logging(
        log_file=settings.logging.log_file,
        console_level=settings.logging.log_level,
        file_level=settings.logging.file_log_level,
        quiet=quiet or as_json,
    )
    search_logger = SearchLogger(logger)

    try:
        if show:
            print_step("Loading polygon")

        reader = PolygonReader(polygon_file)
        reader.load()
        polygon = reader.polygon

        if show:
            print_polygon_info(str(polygon_file), polygon, reader.path_count)
            print_step("Searching")

        engine = InscribedRectangleEngine(settings, tracer=search_logger)
        result = engine.find(
            polygon,
            target_area=target_area if target_area is not None else reader.target_area,
            path_count=path_count if path_count is not None else reader.path_count,
        )

        if as_json:
            typer.echo(json.dumps(result.to_dict(), indent=2))

        if not result.found:
            if not as_json:
                print_error(f"No rectangle found: {result.reason}")
            raise typer.Exit(code=1)

        if show:
            print_result(result, polygon.area, verbose=verbose)
            if verbose:
                print_stats(search_logger.stats)

        if store is not None:
            store_key = key or (
                make_key(reader.region_ids) if reader.region_ids else polygon_file.stem
            )
            rect_store = RectangleStore(store)
            rect_store.load()
            rect_store.put(store_key, result.unwrap())
            rect_store.save()
            if show:
                print_stored(store_key, str(store))

    except FileNotFoundError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except PolygonLoadError as e:
        print_error(f"Could not load polygon: {e.reason}")
        raise typer.Exit(code=1)
    except StoreError as e:
        print_error(f"Could not update store: {e}")
        raise typer.Exit(code=1)
    except MaxRectError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        # exit codes set above pass through
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)


def cli() -> None:
    """Run the Typer application."""
    app()


if __name__ == "__main__":
    cli()
