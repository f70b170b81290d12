"""
Spectral Rejection Framework
============================

Separates signal from noise in weighted networks by spectral rejection:
the eigenvalues of a network's modularity matrix are tested against the
eigenvalue distribution of a strength-preserving null model, and nodes
are split into those that take part in the detected structure (signal)
and those that do not (noise).

Modules
-------
null_models
    Weighted configuration null models and null spectrum sampling
spectral
    Modularity matrix, signal-space estimate, node rejection and the
    ``reject_the_noise`` pipeline
data
    Weight matrix coercion and loading
config
    Constants and typed parameter structures
exceptions
    Error taxonomy
"""

__version__ = "0.1.0"

from . import exceptions
from . import data
from . import null_models
from . import spectral
from .config import (
    NullModelConfig,
    MeanBounds,
    PercentileBounds,
    RejectionOptions,
    SpectralRejectionParams,
)
from .null_models import estimate_null_model, sample_null_eigenvalues
from .spectral import modularity_matrix, node_rejection, reject_the_noise

__all__ = [
    "exceptions",
    "data",
    "null_models",
    "spectral",
    "NullModelConfig",
    "MeanBounds",
    "PercentileBounds",
    "RejectionOptions",
    "SpectralRejectionParams",
    "estimate_null_model",
    "sample_null_eigenvalues",
    "modularity_matrix",
    "node_rejection",
    "reject_the_noise",
    "__version__",
]
