"""
Tests for the null spectrum sampler.
"""

import pytest
import numpy as np

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.config import MeanBounds, NullModelConfig, PercentileBounds
from src.exceptions import (
    EmptyNullSample,
    InvalidOption,
    SamplingCancelled,
    ShapeMismatch,
)
from src.null_models import (
    NullSpectrum,
    estimate_null_model,
    null_spectrum_bounds,
    sample_null_eigenvalues,
)


@pytest.fixture(scope="module")
def closed_form_setup(small_weight_matrix):
    config = NullModelConfig(n_samples=8, closed_form_expectation=True)
    exp_w = estimate_null_model(small_weight_matrix, config)
    return small_weight_matrix, exp_w, config


class TestSampleNullEigenvalues:
    """Tests for null eigenvalue sampling."""

    def test_all_statistic_shape(self, closed_form_setup):
        """Test that every eigenvalue of every sample is kept."""
        W, exp_w, config = closed_form_setup
        spectrum = sample_null_eigenvalues(W, exp_w, config, seed=0)

        assert spectrum.eigenvalues.shape == (8, W.shape[0])
        assert spectrum.n_samples == 8
        assert spectrum.pooled.size == 8 * W.shape[0]
        # rows ascending
        assert np.all(np.diff(spectrum.eigenvalues, axis=1) >= 0)

    def test_extremes_statistic(self, closed_form_setup):
        """Test that only minimum and maximum are kept."""
        W, exp_w, config = closed_form_setup
        full = sample_null_eigenvalues(W, exp_w, config, seed=1)
        extremes = sample_null_eigenvalues(W, exp_w, config, seed=1, statistic="extremes")

        assert extremes.eigenvalues.shape == (8, 2)
        assert np.allclose(extremes.maxima, full.maxima)
        assert np.allclose(extremes.minima, full.minima)
        assert extremes.extremes.size == 16

    def test_n_samples_override(self, closed_form_setup):
        """Test that n_samples overrides the config."""
        W, exp_w, config = closed_form_setup
        spectrum = sample_null_eigenvalues(W, exp_w, config, n_samples=3, seed=0)
        assert spectrum.n_samples == 3

    def test_seed_reproducible(self, closed_form_setup):
        """Test that the same seed gives the same spectrum."""
        W, exp_w, config = closed_form_setup
        a = sample_null_eigenvalues(W, exp_w, config, seed=5)
        b = sample_null_eigenvalues(W, exp_w, config, seed=5)
        assert np.array_equal(a.eigenvalues, b.eigenvalues)

    def test_null_spectrum_centered(self, closed_form_setup):
        """Test that null modularity spectra are roughly centred on zero."""
        W, exp_w, config = closed_form_setup
        spectrum = sample_null_eigenvalues(W, exp_w, config, seed=2)
        assert abs(np.mean(spectrum.pooled)) < 1.0
        assert np.all(spectrum.maxima > 0)
        assert np.all(spectrum.minima < 0)

    def test_parallel_matches_serial(self, small_weight_matrix):
        """Test that a process pool reproduces the serial result."""
        serial_config = NullModelConfig(n_samples=6, closed_form_expectation=True)
        parallel_config = NullModelConfig(n_samples=6, closed_form_expectation=True, n_jobs=2)
        exp_w = estimate_null_model(small_weight_matrix, serial_config)

        serial = sample_null_eigenvalues(small_weight_matrix, exp_w, serial_config, seed=9)
        parallel = sample_null_eigenvalues(small_weight_matrix, exp_w, parallel_config, seed=9)
        assert np.allclose(serial.eigenvalues, parallel.eigenvalues)

    def test_shape_mismatch(self, closed_form_setup):
        """Test that W and ExpW must have the same shape."""
        W, exp_w, config = closed_form_setup
        with pytest.raises(ShapeMismatch):
            sample_null_eigenvalues(W, exp_w[:-1, :-1], config)

    def test_unknown_statistic(self, closed_form_setup):
        """Test that an unknown statistic is rejected."""
        W, exp_w, config = closed_form_setup
        with pytest.raises(InvalidOption):
            sample_null_eigenvalues(W, exp_w, config, statistic="median")

    def test_cancel_immediately(self, closed_form_setup):
        """Test that a stop request before the first trial cancels the run."""
        W, exp_w, config = closed_form_setup
        with pytest.raises(SamplingCancelled):
            sample_null_eigenvalues(W, exp_w, config, should_stop=lambda: True)

    def test_cancel_between_trials(self, closed_form_setup):
        """Test that the stop flag is checked between trials."""
        W, exp_w, config = closed_form_setup
        calls = []

        def should_stop():
            calls.append(1)
            return len(calls) > 3

        with pytest.raises(SamplingCancelled):
            sample_null_eigenvalues(W, exp_w, config, should_stop=should_stop)
        assert len(calls) == 4


class TestNullSpectrumBounds:
    """Tests for bounds on the extreme null eigenvalues."""

    @pytest.fixture
    def spectrum(self):
        return NullSpectrum(eigenvalues=np.array([[-2.0, 0.0, 1.0], [-4.0, 0.0, 3.0]]))

    def test_mean_bounds(self, spectrum):
        """Test that mean bounds average the extremes."""
        lower, upper = null_spectrum_bounds(spectrum, MeanBounds())
        assert lower == pytest.approx(-3.0)
        assert upper == pytest.approx(2.0)

    def test_percentile_bounds(self, spectrum):
        """Test that percentile bounds use the tails of the extremes."""
        lower, upper = null_spectrum_bounds(spectrum, PercentileBounds(0.5))
        assert lower == pytest.approx(-3.5)
        assert upper == pytest.approx(2.5)

    def test_percentile_wider_than_mean(self, closed_form_setup):
        """Test that a percentile interval is wider than the mean bounds."""
        W, exp_w, config = closed_form_setup
        spectrum = sample_null_eigenvalues(W, exp_w, config, seed=3)
        mean_lo, mean_hi = null_spectrum_bounds(spectrum, MeanBounds())
        pct_lo, pct_hi = null_spectrum_bounds(spectrum, PercentileBounds(0.05))
        assert pct_lo <= mean_lo
        assert pct_hi >= mean_hi

    def test_empty_spectrum(self):
        """Test that an empty spectrum has no bounds."""
        with pytest.raises(EmptyNullSample):
            null_spectrum_bounds(NullSpectrum(np.empty((0, 3))), MeanBounds())


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
