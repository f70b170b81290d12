"""
Node Rejection Module
=====================

Splits the nodes of a network into a "signal" set and a "noise" set.

For each rejection interval I the eigenvalues of the modularity matrix B
are compared against the [I/2, 1 - I/2] percentiles of the null
eigenvalue sample. The number of eigenvalues beyond either bound,
Tsignal, is the number of nodes retained. Which nodes are retained is
decided by how far each node projects into the space of the eigenvectors
of the eigenvalues above the upper bound: the Tsignal nodes with the
longest projections are signal, the rest noise.

Only the positive extreme eigenvectors define the projection space, even
though negative extremes count towards Tsignal. ``subspace='symmetric'``
projects onto both sets instead.

References
----------
.. [1] Humphries et al. (2019) "Spectral rejection for testing hypotheses
       of structure in networks"
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Union

import numpy as np
from numpy.typing import NDArray

from ..config import (
    DEFAULT_SUBSPACE,
    DEFAULT_WEIGHT,
    check_subspace_option,
    check_weight_option,
)
from ..exceptions import ConfigurationError
from ..null_models.sampler import NullSpectrum
from .bounds import pooled_sample
from .modularity import check_symmetric, eigendecomposition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodePartition:
    """
    Signal/noise split of the nodes for one rejection interval.

    Attributes
    ----------
    interval : float
        Rejection interval the split was computed for
    signal : NDArray[np.int64]
        Retained node indices, ascending
    noise : NDArray[np.int64]
        Rejected node indices, ascending
    lower_bound, upper_bound : float
        Percentile bounds on the null sample
    n_positive : int
        Eigenvalues at or above the upper bound
    n_negative : int
        Eigenvalues at or below the lower bound
    """

    interval: float
    signal: NDArray[np.int64]
    noise: NDArray[np.int64]
    lower_bound: float
    upper_bound: float
    n_positive: int
    n_negative: int

    @property
    def n_signal(self) -> int:
        """Number of signal nodes (Tsignal)."""
        return int(self.signal.size)

    @property
    def n_noise(self) -> int:
        return int(self.noise.size)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "interval": self.interval,
            "n_signal": self.n_signal,
            "n_noise": self.n_noise,
            "n_positive": self.n_positive,
            "n_negative": self.n_negative,
            "lower_bound": self.lower_bound,
            "upper_bound": self.upper_bound,
            "signal": self.signal.tolist(),
            "noise": self.noise.tolist(),
        }


def _as_intervals(intervals: Union[float, Sequence[float]]) -> List[float]:
    if np.isscalar(intervals):
        intervals = [intervals]
    values = [float(i) for i in intervals]
    if not values:
        raise ConfigurationError("At least one rejection interval is required")
    for value in values:
        if not 0.0 < value < 1.0:
            raise ConfigurationError(f"Rejection interval must lie in (0, 1), got {value}")
    return values


def projection_lengths(
    V: NDArray[np.float64],
    egs: NDArray[np.float64],
    weight: str = DEFAULT_WEIGHT,
) -> NDArray[np.float64]:
    """
    Length of each node's projection into the space spanned by V.

    Parameters
    ----------
    V : NDArray[np.float64]
        Eigenvectors as columns (n x k)
    egs : NDArray[np.float64]
        Matching eigenvalues (k,)
    weight : str, optional
        'none': plain Euclidean length; 'linear': columns scaled by
        |eigenvalue|; 'sqrt': columns scaled by sqrt(|eigenvalue|)
        (default: 'none')

    Returns
    -------
    NDArray[np.float64]
        Row norms of the weighted V, shape (n,)
    """
    check_weight_option(weight)
    if weight == "linear":
        V = V * np.abs(egs)[np.newaxis, :]
    elif weight == "sqrt":
        V = V * np.sqrt(np.abs(egs))[np.newaxis, :]
    return np.sqrt(np.sum(V ** 2, axis=1))


def node_rejection(
    B: NDArray[np.float64],
    null_sample: Union[NullSpectrum, NDArray[np.float64]],
    intervals: Union[float, Sequence[float]] = 0.05,
    weight: str = DEFAULT_WEIGHT,
    subspace: str = DEFAULT_SUBSPACE,
) -> List[NodePartition]:
    """
    Separate nodes into signal and noise.

    Parameters
    ----------
    B : NDArray[np.float64]
        Modularity matrix of the network (n x n, symmetric)
    null_sample : NullSpectrum or array-like
        Null eigenvalue observations, pooled
    intervals : float or sequence of float, optional
        Rejection interval(s) in (0, 1): 0.05 for 95%, 0.01 for 99%.
        One partition is returned per value (default: 0.05)
    weight : str, optional
        Projection weighting: 'none', 'linear' or 'sqrt' (default: 'none')
    subspace : str, optional
        'positive' or 'symmetric' projection space (default: 'positive')

    Returns
    -------
    List[NodePartition]
        One partition per interval, in the order given

    Raises
    ------
    ShapeMismatch
        If B is not square
    NonSymmetricInput
        If B is not symmetric
    EmptyNullSample
        If the null sample has no observations
    ConfigurationError
        If an interval lies outside (0, 1)
    InvalidOption
        If weight or subspace is not recognised
    NumericalDegeneracy
        If the eigendecomposition of B fails

    Notes
    -----
    Nodes with equal projection lengths keep index order, so the lower
    index is retained first. If only negative extremes exist in the
    'positive' mode every length is zero and the lowest indices are
    retained.

    Examples
    --------
    >>> B = np.diag([5.0, 0.0, 0.0, -5.0])
    >>> parts = node_rejection(B, np.linspace(-1, 1, 100), intervals=0.05)
    >>> parts[0].signal.tolist(), parts[0].noise.tolist()
    ([0, 1], [2, 3])
    """
    check_weight_option(weight)
    check_subspace_option(subspace)
    interval_values = _as_intervals(intervals)

    B = np.asarray(B, dtype=float)
    check_symmetric(B, "B")
    sample = pooled_sample(null_sample)

    n = B.shape[0]
    egs, V = eigendecomposition(B)

    partitions = []
    for interval in interval_values:
        lower, upper = np.percentile(sample, [100 * interval / 2, 100 * (1 - interval / 2)])

        ixpos = np.flatnonzero(egs >= upper)
        ixneg = np.flatnonzero(egs <= lower)
        n_signal = ixpos.size + ixneg.size

        ixspace = ixpos if subspace == "positive" else np.concatenate([ixpos, ixneg])
        lengths = projection_lengths(V[:, ixspace], egs[ixspace], weight=weight)

        # stable sort keeps index order among equal lengths
        ranked = np.argsort(-lengths, kind="stable")
        signal = np.sort(ranked[:n_signal])
        noise = np.sort(ranked[n_signal:])

        logger.debug(
            f"Interval {interval}: bounds [{lower:.4f}, {upper:.4f}], "
            f"{ixpos.size} positive + {ixneg.size} negative extremes, "
            f"{n_signal}/{n} signal nodes"
        )

        partitions.append(
            NodePartition(
                interval=interval,
                signal=signal,
                noise=noise,
                lower_bound=float(lower),
                upper_bound=float(upper),
                n_positive=int(ixpos.size),
                n_negative=int(ixneg.size),
            )
        )

    return partitions
