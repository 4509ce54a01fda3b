"""Logging utilities for maxrect."""

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from maxrect.domain import TraceEvent

# Events logged above debug level
_INFO_EVENTS = frozenset({"search.complete", "search.failed", "dense.skipped"})
_WARNING_EVENTS = frozenset({"input.invalid", "input.degenerate", "validation.rejected"})

# Handlers installed by the last configure_logging call
_installed_handlers: list[logging.Handler] = []


@dataclass
class SearchStats:
    """Statistics accumulated from trace events."""

    searches: int = 0
    found_count: int = 0
    failed_count: int = 0
    invalid_count: int = 0
    shrink_count: int = 0
    rejected_count: int = 0
    expansions: int = 0
    timeouts: int = 0
    dense_skipped: int = 0
    sources: dict[str, int] = field(default_factory=dict)
    elapsed_ms: list[float] = field(default_factory=list)

    @property
    def avg_elapsed_ms(self) -> float | None:
        """Average search time in milliseconds."""
        if not self.elapsed_ms:
            return None
        return sum(self.elapsed_ms) / len(self.elapsed_ms)


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (file logging disabled if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in _installed_handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        root_logger.addHandler(file_handler)
        _installed_handlers.append(file_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.ERROR if quiet else getattr(logging, console_level.upper()))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)
    _installed_handlers.append(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("maxrect")
    logger.debug(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level,
    )

    return logger


class SearchLogger:
    """Trace observer that forwards engine events to structlog.

    Pass an instance as the engine's ``tracer``. Every event is logged with
    its payload as key/value pairs and folded into ``stats``.

    Example:
        search_logger = SearchLogger(configure_logging())
        engine = InscribedRectangleEngine(settings, tracer=search_logger)
    """

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self._logger = logger if logger is not None else structlog.get_logger("maxrect")
        self._stats = SearchStats()

    def __call__(self, event: TraceEvent) -> None:
        """Log a trace event and update statistics."""
        if event.name in _WARNING_EVENTS:
            self._logger.warning(event.name, **event.data)
        elif event.name in _INFO_EVENTS:
            self._logger.info(event.name, **event.data)
        else:
            self._logger.debug(event.name, **event.data)
        self._record(event)

    def _record(self, event: TraceEvent) -> None:
        stats = self._stats
        data = event.data
        if event.name == "search.start":
            stats.searches += 1
        elif event.name == "search.complete":
            stats.found_count += 1
            source = str(data.get("source"))
            stats.sources[source] = stats.sources.get(source, 0) + 1
            stats.elapsed_ms.append(float(data.get("elapsed_ms", 0.0)))
        elif event.name == "search.failed":
            stats.failed_count += 1
            stats.elapsed_ms.append(float(data.get("elapsed_ms", 0.0)))
        elif event.name in ("input.invalid", "input.degenerate"):
            stats.invalid_count += 1
        elif event.name == "validation.shrunk":
            stats.shrink_count += 1
        elif event.name == "validation.rejected":
            stats.rejected_count += 1
        elif event.name == "expansion.applied":
            stats.expansions += 1
        elif event.name == "dense.skipped":
            stats.dense_skipped += 1
        elif event.name in ("boundary.complete", "dense.complete") and data.get("timed_out"):
            stats.timeouts += 1

    @property
    def stats(self) -> SearchStats:
        """Get accumulated search statistics."""
        return self._stats
