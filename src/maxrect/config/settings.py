"""Configuration settings for maxrect."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

DEFAULT_ASPECT_RATIOS = [0.5, 0.7, 1.0, 1.4, 2.0, 2.5, 3.0]
WIDE_ASPECT_RATIOS = [0.5, 0.6, 0.7, 0.85, 1.0, 1.2, 1.4, 1.7, 2.0, 2.3, 2.5, 2.8, 3.0]


class CentroidStrategy(str, Enum):
    """Candidate center generation strategy."""

    AUTO = "auto"
    UNIFORM = "uniform"
    HYBRID = "hybrid"


class SearchConfig(BaseModel):
    """Configuration for angle sweeps and binary-search fitting."""

    max_time_ms: float = Field(
        default=300.0,
        gt=0.0,
        description="Wall-clock budget of the boundary-driven search",
    )
    dense_max_time_ms: float = Field(
        default=1000.0,
        gt=0.0,
        description="Wall-clock budget of the dense centroid search",
    )
    angle_step: float = Field(
        default=8.0,
        ge=1.0,
        le=90.0,
        description="Step of the strategic angle sweep in degrees",
    )
    refinement_step: float = Field(
        default=2.0,
        ge=0.25,
        le=10.0,
        description="Step of the local refinement around the best angle",
    )
    refinement_range: float = Field(
        default=8.0,
        ge=0.0,
        le=45.0,
        description="Half-width of the local refinement window in degrees",
    )
    fine_sweep_window: float = Field(
        default=10.0,
        ge=0.0,
        le=45.0,
        description="Degrees either side of 90 swept at the refinement step",
    )
    aspect_ratios: list[float] = Field(
        default_factory=lambda: list(DEFAULT_ASPECT_RATIOS),
        min_length=1,
        description="Aspect ratio sweep (width = base*s*r, height = base*s/r)",
    )
    concave_aspect_ratios: list[float] = Field(
        default_factory=lambda: list(WIDE_ASPECT_RATIOS),
        description="Extra aspect ratios tried for concave polygons",
    )
    binary_search_precision: float = Field(
        default=1e-3,
        ge=1e-6,
        le=0.1,
        description="Scale interval width at which the boundary search stops",
    )
    binary_search_max_iterations: int = Field(
        default=15,
        ge=1,
        le=40,
        description="Maximum binary search iterations in the boundary search",
    )
    dense_binary_search_precision: float = Field(
        default=1e-4,
        ge=1e-6,
        le=0.1,
        description="Scale interval width at which the dense search stops",
    )
    dense_binary_search_max_iterations: int = Field(
        default=20,
        ge=1,
        le=40,
        description="Maximum binary search iterations in the dense search",
    )
    max_dominant_angles: int = Field(
        default=8,
        ge=1,
        le=32,
        description="Number of dominant angle groups used by the boundary search",
    )
    angle_tolerance: float = Field(
        default=5.0,
        ge=0.1,
        le=30.0,
        description="Angle difference under which edges share a group (degrees)",
    )
    min_edge_length: float = Field(
        default=5.0,
        ge=0.0,
        description="Edges shorter than this are ignored for dominant angles",
    )
    test_perpendicular: bool = Field(
        default=True,
        description="Also try the perpendicular of every dominant angle",
    )
    edge_distance_factor: float = Field(
        default=1.8,
        gt=0.0,
        le=10.0,
        description="Base dimension multiplier of the nearest-edge heuristic",
    )
    edge_distance_scale_cap: float = Field(
        default=1.5,
        gt=0.0,
        le=10.0,
        description="Upper bound of the scale factor with the nearest-edge base",
    )

    def ratios_for(self, convex: bool) -> list[float]:
        """Get the aspect ratio sweep for a convex or concave polygon."""
        if convex:
            return list(self.aspect_ratios)
        return sorted(set(self.aspect_ratios) | set(self.concave_aspect_ratios))


class CentroidConfig(BaseModel):
    """Configuration for candidate center generation."""

    strategy: CentroidStrategy = Field(
        default=CentroidStrategy.AUTO,
        description="Centroid strategy for the boundary search (auto = selected per polygon)",
    )
    coarse_grid_steps: int = Field(
        default=10,
        ge=2,
        le=50,
        description="Steps of the coarse uniform grid",
    )
    dense_grid_steps: int = Field(
        default=20,
        ge=2,
        le=100,
        description="Steps of the dense uniform grid",
    )
    interior_grid_steps: int = Field(
        default=10,
        ge=2,
        le=50,
        description="Steps of the sparse interior grid of the hybrid strategy",
    )
    hull_samples: int = Field(
        default=30,
        ge=0,
        le=500,
        description="Maximum points sampled inside the convex hull",
    )
    edge_positions: list[float] = Field(
        default_factory=lambda: [0.25, 0.5, 0.75],
        description="Parameter positions sampled along each edge",
    )
    edge_offsets: list[float] = Field(
        default_factory=lambda: [10.0, 25.0],
        description="Inward offsets from each edge sample",
    )
    grid_step: float = Field(
        default=8.0,
        gt=0.0,
        description="Spacing of the aligned grid used by the dense search",
    )
    polylabel_precision: float = Field(
        default=0.5,
        gt=0.0,
        description="Precision of the pole of inaccessibility search",
    )


class ValidationConfig(BaseModel):
    """Configuration for rectangle validation and repair."""

    search_edge_samples: int = Field(
        default=16,
        ge=8,
        le=256,
        description="Samples per edge while searching",
    )
    search_interior_grid: int = Field(
        default=3,
        ge=1,
        le=15,
        description="Interior lattice size while searching",
    )
    final_edge_samples: int = Field(
        default=64,
        ge=8,
        le=512,
        description="Samples per edge in the final validation pass",
    )
    final_interior_grid: int = Field(
        default=7,
        ge=1,
        le=31,
        description="Interior lattice size in the final validation pass",
    )
    tolerance: float = Field(
        default=1e-6,
        ge=0.0,
        le=1.0,
        description="Distance to an edge counted as inside in the final pass",
    )
    shrink_step: float = Field(
        default=0.1,
        gt=0.0,
        le=0.5,
        description="Fraction of the original size removed per shrink retry",
    )
    min_shrink_scale: float = Field(
        default=0.5,
        gt=0.0,
        lt=1.0,
        description="Smallest scale tried by shrink-and-retry",
    )
    expansion_max_vertices: int = Field(
        default=10,
        ge=3,
        description="Edge expansion runs only for polygons up to this many vertices",
    )
    expansion_limit: float = Field(
        default=200.0,
        ge=0.0,
        description="Maximum outward push per rectangle side",
    )
    expansion_precision: float = Field(
        default=0.1,
        gt=0.0,
        description="Binary search precision of edge expansion",
    )


class HybridConfig(BaseModel):
    """Configuration for strategy selection."""

    coverage_threshold: float = Field(
        default=0.96,
        ge=0.0,
        le=1.0,
        description="Fraction of the target area that skips the dense search",
    )
    enable_closed_form: bool = Field(
        default=True,
        description="Try parallelogram/trapezoid formulas for 4-vertex input",
    )
    enable_dense_search: bool = Field(
        default=True,
        description="Allow the dense centroid search",
    )
    enable_edge_expansion: bool = Field(
        default=True,
        description="Push the boundary search result outward on small polygons",
    )
    debug_mode: bool = Field(
        default=False,
        description="Emit fine-grained trace events",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class MaxRectSettings(BaseModel):
    """Main application settings."""

    search: SearchConfig = Field(default_factory=SearchConfig)
    centroids: CentroidConfig = Field(default_factory=CentroidConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    hybrid: HybridConfig = Field(default_factory=HybridConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


PRESETS: dict[str, dict[str, dict[str, object]]] = {
    "baseline": {
        "centroids": {"grid_step": 12.0, "polylabel_precision": 1.0},
        "search": {
            "aspect_ratios": DEFAULT_ASPECT_RATIOS,
            "dense_binary_search_precision": 1e-3,
            "dense_binary_search_max_iterations": 15,
        },
    },
    "finer_grid": {
        "centroids": {"grid_step": 8.0, "polylabel_precision": 1.0},
        "search": {
            "aspect_ratios": DEFAULT_ASPECT_RATIOS,
            "dense_binary_search_precision": 1e-3,
            "dense_binary_search_max_iterations": 15,
        },
    },
    "more_aspects": {
        "centroids": {"grid_step": 12.0, "polylabel_precision": 1.0},
        "search": {
            "aspect_ratios": WIDE_ASPECT_RATIOS,
            "dense_binary_search_precision": 1e-3,
            "dense_binary_search_max_iterations": 15,
        },
    },
    "fine_tuned": {
        "centroids": {"grid_step": 12.0, "polylabel_precision": 1.0},
        "search": {
            "aspect_ratios": DEFAULT_ASPECT_RATIOS,
            "dense_binary_search_precision": 1e-4,
            "dense_binary_search_max_iterations": 20,
        },
    },
    "aggressive": {
        "centroids": {"grid_step": 8.0, "polylabel_precision": 0.5},
        "search": {
            "aspect_ratios": WIDE_ASPECT_RATIOS,
            "dense_binary_search_precision": 1e-4,
            "dense_binary_search_max_iterations": 20,
        },
    },
    "very_fine": {
        "centroids": {"grid_step": 6.0, "polylabel_precision": 0.5},
        "search": {
            "aspect_ratios": DEFAULT_ASPECT_RATIOS,
            "dense_binary_search_precision": 1e-3,
            "dense_binary_search_max_iterations": 15,
        },
    },
}


def get_default_settings() -> MaxRectSettings:
    """Get default application settings."""
    return MaxRectSettings()


def get_preset(name: str) -> MaxRectSettings:
    """Get settings for a named parameter preset.

    Args:
        name: Preset name (baseline, finer_grid, more_aspects, fine_tuned,
            aggressive, very_fine)

    Returns:
        Settings with the preset's dense search parameters applied

    Raises:
        KeyError: If the preset name is unknown
    """
    if name not in PRESETS:
        raise KeyError(f"Unknown preset '{name}', expected one of: {', '.join(PRESETS)}")
    return MaxRectSettings.model_validate(PRESETS[name])
