"""
Null Models Module
==================

This module provides the strength-preserving null models and the
permutation sampler that builds the null eigenvalue distribution.

Submodules
----------
configuration
    Poisson and link (sparse) weighted configuration models, expected
    weight matrices
sampler
    Null spectrum sampling (optionally in a process pool) and bounds on
    the extreme null eigenvalues
"""

from .configuration import (
    ConfigurationNullModel,
    PoissonConfigurationModel,
    LinkConfigurationModel,
    build_null_model,
    estimate_null_model,
    trial_seeds,
)
from .sampler import (
    NullSpectrum,
    sample_null_eigenvalues,
    null_spectrum_bounds,
)

__all__ = [
    # Null models
    "ConfigurationNullModel",
    "PoissonConfigurationModel",
    "LinkConfigurationModel",
    "build_null_model",
    "estimate_null_model",
    "trial_seeds",
    # Sampler
    "NullSpectrum",
    "sample_null_eigenvalues",
    "null_spectrum_bounds",
]
