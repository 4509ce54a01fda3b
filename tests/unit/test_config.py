"""Unit tests for configuration models and presets."""

import pytest
from pydantic import ValidationError

from maxrect.config import (
    PRESETS,
    CentroidConfig,
    CentroidStrategy,
    HybridConfig,
    MaxRectSettings,
    SearchConfig,
    ValidationConfig,
    get_default_settings,
    get_preset,
)


class TestDefaults:
    """Tests for default values."""

    def test_search_defaults(self):
        """Test the search budgets and sweep defaults."""
        config = SearchConfig()
        assert config.max_time_ms == 300.0
        assert config.dense_max_time_ms == 1000.0
        assert config.angle_step == 8.0
        assert config.edge_distance_factor == 1.8
        assert config.edge_distance_scale_cap == 1.5

    def test_validation_defaults(self):
        """Test the sampling densities match the sparse/dense presets."""
        config = ValidationConfig()
        assert (config.search_edge_samples, config.search_interior_grid) == (16, 3)
        assert (config.final_edge_samples, config.final_interior_grid) == (64, 7)
        assert config.min_shrink_scale == 0.5

    def test_hybrid_defaults(self):
        """Test every stage is enabled by default."""
        config = HybridConfig()
        assert config.coverage_threshold == 0.96
        assert config.enable_closed_form
        assert config.enable_dense_search
        assert not config.debug_mode

    def test_default_settings(self):
        """Test get_default_settings builds fresh instances."""
        first = get_default_settings()
        second = get_default_settings()
        assert first == second
        assert first is not second
        assert first.centroids.strategy is CentroidStrategy.AUTO


class TestValidation:
    """Tests for field constraints."""

    def test_non_positive_budget(self):
        """Test budgets must be positive."""
        with pytest.raises(ValidationError):
            SearchConfig(max_time_ms=0)

    def test_empty_aspect_ratios(self):
        """Test at least one aspect ratio is required."""
        with pytest.raises(ValidationError):
            SearchConfig(aspect_ratios=[])

    def test_shrink_scale_bounds(self):
        """Test the minimum shrink scale lies strictly between 0 and 1."""
        with pytest.raises(ValidationError):
            ValidationConfig(min_shrink_scale=1.0)

    def test_strategy_from_string(self):
        """Test strategies parse from their values."""
        assert CentroidConfig(strategy="hybrid").strategy is CentroidStrategy.HYBRID
        with pytest.raises(ValidationError):
            CentroidConfig(strategy="random")

    def test_nested_dict(self):
        """Test nested dictionaries validate into sub-models."""
        settings = MaxRectSettings.model_validate({"hybrid": {"coverage_threshold": 0.5}})
        assert settings.hybrid.coverage_threshold == 0.5
        assert settings.search == SearchConfig()


class TestRatiosFor:
    """Tests for aspect ratio selection."""

    def test_convex_uses_base_ratios(self):
        """Test convex polygons use the base sweep."""
        config = SearchConfig(aspect_ratios=[2.0, 1.0])
        assert config.ratios_for(True) == [2.0, 1.0]

    def test_concave_merges_ratios(self):
        """Test concave polygons add the wide sweep, sorted and unique."""
        config = SearchConfig(aspect_ratios=[2.0, 1.0], concave_aspect_ratios=[1.0, 1.5])
        assert config.ratios_for(False) == [1.0, 1.5, 2.0]


class TestPresets:
    """Tests for named presets."""

    @pytest.mark.parametrize("name", sorted(PRESETS))
    def test_every_preset_validates(self, name):
        """Test each preset builds valid settings."""
        settings = get_preset(name)
        assert isinstance(settings, MaxRectSettings)
        assert settings.centroids.grid_step == PRESETS[name]["centroids"]["grid_step"]

    def test_aggressive(self):
        """Test the aggressive preset uses the fine grid and wide ratios."""
        settings = get_preset("aggressive")
        assert settings.centroids.grid_step == 8.0
        assert settings.search.dense_binary_search_max_iterations == 20
        assert len(settings.search.aspect_ratios) == 13

    def test_unknown_preset(self):
        """Test an unknown name raises KeyError listing the choices."""
        with pytest.raises(KeyError, match="baseline"):
            get_preset("turbo")
