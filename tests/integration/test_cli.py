"""Integration tests for the command-line interface."""

import json
import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from maxrect import __version__
from maxrect.cli.app import app
from maxrect.utils import logging as log_utils

runner = CliRunner()

FAST = ["--max-time-ms", "2000", "--dense-time-ms", "2000"]


@pytest.fixture(autouse=True)
def detach_handlers():
    """Remove handlers installed by the command after each test."""
    yield
    root = logging.getLogger()
    for handler in log_utils._installed_handlers:
        root.removeHandler(handler)
        handler.close()
    log_utils._installed_handlers.clear()


@pytest.fixture
def rectangle_file(tmp_path) -> Path:
    """1 x 2 rectangle as a bare point list."""
    path = tmp_path / "tall.json"
    path.write_text(json.dumps([[0, 0], [1, 0], [1, 2], [0, 2]]), encoding="utf-8")
    return path


@pytest.fixture
def regions_file(tmp_path) -> Path:
    """Square assembled from two regions."""
    path = tmp_path / "regions.json"
    data = {
        "points": [{"x": 0, "y": 0}, {"x": 50, "y": 0}, {"x": 50, "y": 50}, {"x": 0, "y": 50}],
        "ids": ["r2", "r1"],
        "pathCount": 2,
    }
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestFindCommand:
    """Tests for the find command."""

    def test_json_output(self, rectangle_file):
        """Test JSON output holds only the serialized result."""
        result = runner.invoke(app, [str(rectangle_file), "--json", *FAST])
        assert result.exit_code == 0, result.output

        data = json.loads(result.stdout)
        assert data["status"] == "found"
        assert data["source"] == "parallelogram"
        assert data["rectangle"]["area"] == pytest.approx(2.0)
        assert data["rectangle"]["angle"] == 0.0

    def test_rich_output(self, rectangle_file):
        """Test the default output shows the result table."""
        result = runner.invoke(app, [str(rectangle_file), *FAST])
        assert result.exit_code == 0, result.output
        assert "MaxRect" in result.output
        assert "Area" in result.output

    def test_verbose_output(self, rectangle_file):
        """Test verbose output adds corners and statistics."""
        result = runner.invoke(app, [str(rectangle_file), "--verbose", *FAST])
        assert result.exit_code == 0, result.output
        assert "Corner 0" in result.output

    def test_degenerate_polygon(self, tmp_path):
        """Test a zero-area polygon exits with code 1."""
        path = tmp_path / "line.json"
        path.write_text(json.dumps([[0, 0], [5, 0], [10, 0]]), encoding="utf-8")
        result = runner.invoke(app, [str(path), "--json", *FAST])
        assert result.exit_code == 1
        assert json.loads(result.stdout)["status"] == "degenerate"

    def test_missing_file(self, tmp_path):
        """Test a missing input file exits with code 1."""
        result = runner.invoke(app, [str(tmp_path / "missing.json")])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_unreadable_file(self, tmp_path):
        """Test malformed input exits with code 1."""
        path = tmp_path / "bad.json"
        path.write_text("{broken", encoding="utf-8")
        result = runner.invoke(app, [str(path)])
        assert result.exit_code == 1
        assert "Could not load polygon" in result.output

    def test_invalid_strategy(self, rectangle_file):
        """Test an unknown strategy exits with code 1."""
        result = runner.invoke(app, [str(rectangle_file), "--strategy", "random"])
        assert result.exit_code == 1
        assert "Invalid strategy" in result.output

    def test_invalid_preset(self, rectangle_file):
        """Test an unknown preset exits with code 1."""
        result = runner.invoke(app, [str(rectangle_file), "--preset", "turbo"])
        assert result.exit_code == 1
        assert "Invalid preset" in result.output

    def test_verbose_and_quiet(self, rectangle_file):
        """Test --verbose and --quiet are mutually exclusive."""
        result = runner.invoke(app, [str(rectangle_file), "--verbose", "--quiet"])
        assert result.exit_code == 1

    def test_preset_accepted(self, rectangle_file):
        """Test a known preset runs."""
        result = runner.invoke(app, [str(rectangle_file), "--preset", "baseline", "--quiet", *FAST])
        assert result.exit_code == 0, result.output

    def test_target_area_help(self):
        """Test --target-area help names the configurable threshold."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "coverage_threshold" in result.output
        assert "96%" not in result.output

    def test_version(self):
        """Test --version prints the version."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestStoreOption:
    """Tests for writing results to a rectangle store."""

    def test_key_from_region_ids(self, regions_file, tmp_path):
        """Test region ids form the sorted store key."""
        store = tmp_path / "store.json"
        result = runner.invoke(app, [str(regions_file), "--store", str(store), "--quiet", *FAST])
        assert result.exit_code == 0, result.output

        data = json.loads(store.read_text(encoding="utf-8"))
        assert list(data) == ["r1_r2"]
        assert data["r1_r2"]["area"] == pytest.approx(2500.0)

    def test_key_from_file_name(self, rectangle_file, tmp_path):
        """Test the file stem is the key when no ids are given."""
        store = tmp_path / "store.json"
        runner.invoke(app, [str(rectangle_file), "--store", str(store), "--quiet", *FAST])
        assert list(json.loads(store.read_text(encoding="utf-8"))) == ["tall"]

    def test_explicit_key_and_merge(self, rectangle_file, regions_file, tmp_path):
        """Test entries accumulate across runs and --key overrides."""
        store = tmp_path / "store.json"
        runner.invoke(app, [str(rectangle_file), "--store", str(store), "--key", "custom", "-q", *FAST])
        runner.invoke(app, [str(regions_file), "--store", str(store), "-q", *FAST])
        assert sorted(json.loads(store.read_text(encoding="utf-8"))) == ["custom", "r1_r2"]

    def test_corrupt_store(self, rectangle_file, tmp_path):
        """Test a corrupt store file exits with code 1."""
        store = tmp_path / "store.json"
        store.write_text("not json", encoding="utf-8")
        result = runner.invoke(app, [str(rectangle_file), "--store", str(store), *FAST])
        assert result.exit_code == 1
        assert "Could not update store" in result.output
