"""
Exceptions Module
=================

Error taxonomy for the spectral rejection pipeline. Every error is raised
at the component boundary where it is detected and propagates unchanged
to the caller; nothing in the package retries or swallows them.
"""


class SpectralRejectionError(Exception):
    """Base class for all spectral rejection errors."""


class ConfigurationError(SpectralRejectionError, ValueError):
    """Unknown null model, invalid parameter value or unknown config key."""


class InvalidOption(ConfigurationError):
    """Unrecognised weighting or projection-subspace option."""


class ShapeMismatch(SpectralRejectionError, ValueError):
    """Matrix is not square, or W / ExpW / B dimensions disagree."""


class NonSymmetricInput(SpectralRejectionError, ValueError):
    """Matrix fails the symmetry check within numerical tolerance."""


class EmptyNullSample(SpectralRejectionError, ValueError):
    """Null eigenvalue sample has no observations to take percentiles of."""


class NumericalDegeneracy(SpectralRejectionError, ArithmeticError):
    """Eigendecomposition failed to converge, or the network has no weight."""


class SamplingCancelled(SpectralRejectionError, RuntimeError):
    """Permutation sampling was stopped by the caller between trials."""


__all__ = [
    "SpectralRejectionError",
    "ConfigurationError",
    "InvalidOption",
    "ShapeMismatch",
    "NonSymmetricInput",
    "EmptyNullSample",
    "NumericalDegeneracy",
    "SamplingCancelled",
]
