"""
Tests for configuration constants, parameter structures and YAML loading.
"""

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import load_config, load_rejection_params
from src.config import (
    MeanBounds,
    NullModelConfig,
    PercentileBounds,
    RejectionOptions,
    SpectralRejectionParams,
    bounds_from_confidence,
    normalize_model_name,
)
from src.exceptions import ConfigurationError, InvalidOption


class TestNullModelConfig:
    """Tests for null model parameters."""

    def test_defaults(self):
        """Test default values."""
        config = NullModelConfig()
        assert config.model == "poisson"
        assert config.n_samples == 100
        assert config.conversion == 1.0
        assert not config.closed_form_expectation
        assert config.no_loops
        assert config.n_jobs == 1

    @pytest.mark.parametrize("alias,expected", [
        ("poiss", "poisson"),
        ("WCM", "poisson"),
        ("sparse", "link"),
        (" Link ", "link"),
    ])
    def test_model_aliases(self, alias, expected):
        """Test that legacy model names are normalised."""
        assert normalize_model_name(alias) == expected
        assert NullModelConfig(model=alias).model == expected

    @pytest.mark.parametrize("kwargs", [
        {"model": "erdos"},
        {"n_samples": 0},
        {"n_samples": 2.5},
        {"conversion": 0},
        {"n_jobs": 0},
    ])
    def test_invalid(self, kwargs):
        """Test that invalid parameters are rejected on construction."""
        with pytest.raises(ConfigurationError):
            NullModelConfig(**kwargs)

    def test_frozen(self):
        """Test that parameters cannot be mutated."""
        config = NullModelConfig()
        with pytest.raises(AttributeError):
            config.n_samples = 5


class TestBounds:
    """Tests for bound strategies."""

    def test_from_confidence(self):
        """Test the scalar confidence mapping."""
        assert isinstance(bounds_from_confidence(0), MeanBounds)
        bounds = bounds_from_confidence(0.05)
        assert isinstance(bounds, PercentileBounds)
        assert bounds.interval == 0.05

    @pytest.mark.parametrize("interval", [0.0, 1.0, 2.0, -0.5])
    def test_percentile_interval_range(self, interval):
        """Test that percentile intervals must lie in (0, 1)."""
        with pytest.raises(ConfigurationError):
            PercentileBounds(interval)

    def test_kinds(self):
        """Test the strategy tags."""
        assert MeanBounds().kind == "mean"
        assert PercentileBounds().kind == "percentile"


class TestRejectionOptions:
    """Tests for node rejection options."""

    def test_defaults(self):
        """Test default values."""
        options = RejectionOptions()
        assert options.weight == "none"
        assert options.subspace == "positive"
        assert options.intervals == (0.05,)

    def test_scalar_interval(self):
        """Test that a single interval becomes a tuple."""
        assert RejectionOptions(intervals=0.01).intervals == (0.01,)

    def test_invalid_weight(self):
        """Test that an unknown weighting raises InvalidOption."""
        with pytest.raises(InvalidOption):
            RejectionOptions(weight="log")

    def test_invalid_subspace(self):
        """Test that an unknown subspace raises InvalidOption."""
        with pytest.raises(InvalidOption):
            RejectionOptions(subspace="all")

    def test_empty_intervals(self):
        """Test that at least one interval is required."""
        with pytest.raises(ConfigurationError):
            RejectionOptions(intervals=())


class TestSpectralRejectionParams:
    """Tests for pipeline parameters and the YAML layout."""

    def test_defaults(self):
        """Test default values."""
        params = SpectralRejectionParams()
        assert isinstance(params.bounds, MeanBounds)
        assert params.run_control
        assert params.eg_min == pytest.approx(1e-2)

    def test_from_default_yaml(self):
        """Test that the shipped configuration file builds parameters."""
        params = SpectralRejectionParams.from_dict(load_rejection_params())
        assert params.null_model.model == "poisson"
        assert params.null_model.n_samples == 100
        assert params.rejection.weight == "linear"
        assert params.rejection.intervals == (0.05,)
        assert isinstance(params.bounds, MeanBounds)

    def test_from_dict_overrides(self):
        """Test nested sections and the confidence key."""
        params = SpectralRejectionParams.from_dict({
            "null_model": {"model": "sparse", "n_samples": 10},
            "confidence": 0.1,
            "rejection": {"intervals": 0.01, "subspace": "symmetric"},
            "run_control": False,
        })
        assert params.null_model.model == "link"
        assert params.bounds == PercentileBounds(0.1)
        assert params.rejection.intervals == (0.01,)
        assert params.rejection.subspace == "symmetric"
        assert not params.run_control

    def test_unknown_top_level_key(self):
        """Test that misspelt keys are reported."""
        with pytest.raises(ConfigurationError):
            SpectralRejectionParams.from_dict({"null_models": {}})

    def test_unknown_section_key(self):
        """Test that misspelt section keys are reported."""
        with pytest.raises(ConfigurationError):
            SpectralRejectionParams.from_dict({"null_model": {"samples": 10}})

    def test_negative_eg_min(self):
        """Test that eg_min must be non-negative."""
        with pytest.raises(ConfigurationError):
            SpectralRejectionParams(eg_min=-1.0)


class TestLoadConfig:
    """Tests for YAML loading."""

    def test_load_by_path(self, tmp_path):
        """Test loading a YAML file by path."""
        path = tmp_path / "custom.yaml"
        path.write_text("null_model:\n  n_samples: 7\nconfidence: 0.05\n")

        config = load_config(path)
        assert config == {"null_model": {"n_samples": 7}, "confidence": 0.05}
        assert SpectralRejectionParams.from_dict(config).null_model.n_samples == 7

    def test_empty_file(self, tmp_path):
        """Test that an empty file loads as an empty mapping."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == {}

    def test_missing(self):
        """Test that a missing config raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config("no_such_config")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
