"""
Spectral Bounds Module
======================

Compares the eigenvalues of a modularity matrix against the null
eigenvalue distribution.

Two comparisons are provided:

- ``percentile_bounds``: two-sided percentile bounds over a pooled null
  sample, used by node rejection.
- ``estimate_signal_space``: the number of eigenvalues beyond the extreme
  null eigenvalues, i.e. the dimension of the signal space. The number
  of groups in the network is estimated as that dimension + 1.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from ..config import EIGENVALUE_ZERO_TOL, BoundStrategy, MeanBounds
from ..exceptions import ConfigurationError, EmptyNullSample
from ..null_models.sampler import NullSpectrum, null_spectrum_bounds
from .modularity import check_symmetric, eigendecomposition

logger = logging.getLogger(__name__)


def pooled_sample(null_sample: Union[NullSpectrum, NDArray[np.float64]]) -> NDArray[np.float64]:
    """
    Flatten a null sample to its finite observations.

    Raises
    ------
    EmptyNullSample
        If no finite observation remains
    """
    if isinstance(null_sample, NullSpectrum):
        values = null_sample.pooled
    else:
        values = np.asarray(null_sample, dtype=float).ravel()
    values = values[np.isfinite(values)]
    if values.size == 0:
        raise EmptyNullSample(
            "Null eigenvalue sample has no observations; percentile bounds are undefined"
        )
    return values


def percentile_bounds(
    null_sample: Union[NullSpectrum, NDArray[np.float64]],
    interval: float,
) -> Tuple[float, float]:
    """
    Symmetric percentile bounds on a pooled null sample.

    Parameters
    ----------
    null_sample : NullSpectrum or array-like
        Null eigenvalue observations
    interval : float
        Rejection interval in (0, 1): 0.05 gives the 2.5th and 97.5th
        percentiles

    Returns
    -------
    Tuple[float, float]
        (lower, upper)

    Examples
    --------
    >>> lo, hi = percentile_bounds(np.arange(101.0), 0.1)
    >>> float(lo), float(hi)
    (5.0, 95.0)
    """
    if not 0.0 < interval < 1.0:
        raise ConfigurationError(f"interval must lie in (0, 1), got {interval}")
    values = pooled_sample(null_sample)
    lower, upper = np.percentile(values, [100 * interval / 2, 100 * (1 - interval / 2)])
    return float(lower), float(upper)


@dataclass
class SpectrumEstimate:
    """
    Modularity spectrum compared against the null spectrum.

    Attributes
    ----------
    eigenvalues : NDArray[np.float64]
        Eigenvalues of B, descending
    eigenvectors : NDArray[np.float64]
        Matching eigenvectors as columns
    lower_bound, upper_bound : float
        Thresholds from the null spectrum
    n_dims : int
        Eigenvalues at or above the upper bound
    n_neg_dims : int
        Eigenvalues at or below the lower bound
    n_positive : int
        Eigenvalues above the zero tolerance
    """

    eigenvalues: NDArray[np.float64]
    eigenvectors: NDArray[np.float64]
    lower_bound: float
    upper_bound: float
    n_dims: int
    n_neg_dims: int
    n_positive: int

    @property
    def n_groups(self) -> int:
        """Estimated number of groups (signal dimensions + 1)."""
        return self.n_dims + 1

    @property
    def n_positive_groups(self) -> int:
        """Number of groups estimated from positive eigenvalues alone."""
        return self.n_positive + 1

    @property
    def signal_space(self) -> NDArray[np.float64]:
        """Eigenvectors of the eigenvalues above the upper bound."""
        return self.eigenvectors[:, : self.n_dims]

    @property
    def negative_space(self) -> NDArray[np.float64]:
        """Eigenvectors of the eigenvalues below the lower bound."""
        n = self.eigenvalues.shape[0]
        return self.eigenvectors[:, n - self.n_neg_dims :]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "n_dims": self.n_dims,
            "n_groups": self.n_groups,
            "n_neg_dims": self.n_neg_dims,
            "n_positive": self.n_positive,
            "n_positive_groups": self.n_positive_groups,
            "lower_bound": self.lower_bound,
            "upper_bound": self.upper_bound,
            "max_eigenvalue": float(self.eigenvalues[0]),
            "min_eigenvalue": float(self.eigenvalues[-1]),
        }


def estimate_signal_space(
    B: NDArray[np.float64],
    null_spectrum: NullSpectrum,
    bounds: Optional[BoundStrategy] = None,
    eg_min: float = EIGENVALUE_ZERO_TOL,
) -> SpectrumEstimate:
    """
    Estimate the dimension of the signal space of B.

    Parameters
    ----------
    B : NDArray[np.float64]
        Modularity matrix (n x n, symmetric)
    null_spectrum : NullSpectrum
        Null eigenvalues from ``sample_null_eigenvalues``
    bounds : MeanBounds or PercentileBounds, optional
        Threshold strategy on the extreme null eigenvalues
        (default: MeanBounds())
    eg_min : float, optional
        Eigenvalues at or below this count as zero (default: 1e-2)

    Returns
    -------
    SpectrumEstimate
        Eigenvalues (descending), eigenvectors and dimension counts
    """
    if bounds is None:
        bounds = MeanBounds()

    B = np.asarray(B, dtype=float)
    check_symmetric(B, "B")
    lower, upper = null_spectrum_bounds(null_spectrum, bounds)

    egs, V = eigendecomposition(B)
    order = np.argsort(egs)[::-1]
    egs, V = egs[order], V[:, order]

    n_dims = int(np.sum(egs >= upper))
    n_neg_dims = int(np.sum(egs <= lower))
    n_positive = int(np.sum(egs > eg_min))

    logger.info(
        f"Signal space: {n_dims} dimensions above {upper:.4f} "
        f"({n_neg_dims} below {lower:.4f}, {n_positive} positive)"
    )

    return SpectrumEstimate(
        eigenvalues=egs,
        eigenvectors=V,
        lower_bound=lower,
        upper_bound=upper,
        n_dims=n_dims,
        n_neg_dims=n_neg_dims,
        n_positive=n_positive,
    )
