"""
Spectral Module
===============

This module provides the spectral side of spectral rejection: the
modularity matrix, its comparison against the null spectrum, node
rejection, and the end-to-end pipeline.

Submodules
----------
modularity
    Modularity matrix B = W - ExpW and its eigendecomposition
bounds
    Percentile bounds and the signal-space dimension estimate
rejection
    Signal/noise node partitions
noise_rejection
    The ``reject_the_noise`` pipeline (data and control analyses)
"""

from .modularity import (
    modularity_matrix,
    eigendecomposition,
    check_symmetric,
)
from .bounds import (
    SpectrumEstimate,
    percentile_bounds,
    estimate_signal_space,
)
from .rejection import (
    NodePartition,
    node_rejection,
    projection_lengths,
)
from .noise_rejection import (
    SpectralAnalysis,
    NoiseRejectionResult,
    reject_the_noise,
)

__all__ = [
    # Modularity
    "modularity_matrix",
    "eigendecomposition",
    "check_symmetric",
    # Bounds
    "SpectrumEstimate",
    "percentile_bounds",
    "estimate_signal_space",
    # Rejection
    "NodePartition",
    "node_rejection",
    "projection_lengths",
    # Pipeline
    "SpectralAnalysis",
    "NoiseRejectionResult",
    "reject_the_noise",
]
