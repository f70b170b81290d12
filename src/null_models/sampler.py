"""
Null Spectrum Sampler
=====================

This module builds the empirical null distribution of modularity-matrix
eigenvalues. Each trial draws one network from the null model, forms
B_perm = W_perm - ExpW and keeps its eigenvalues; the trials are pooled
into a ``NullSpectrum``.

Trials are independent and each owns its own random generator, seeded
from a per-trial seed, so they can run in a process pool and still
reproduce a serial run exactly. This is the expensive step of the whole
pipeline: one dense eigendecomposition per trial.
"""

import logging
import math
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from itertools import repeat
from typing import Callable, Optional, Tuple

import numpy as np
from numpy.typing import NDArray
from scipy import linalg

from ..config import MeanBounds, NullModelConfig, PercentileBounds, BoundStrategy
from ..data import as_weight_matrix
from ..exceptions import (
    ConfigurationError,
    EmptyNullSample,
    InvalidOption,
    NumericalDegeneracy,
    SamplingCancelled,
    ShapeMismatch,
)
from .configuration import ConfigurationNullModel, SeedLike, build_null_model, trial_seeds

logger = logging.getLogger(__name__)

STATISTICS = ("all", "extremes")


@dataclass
class NullSpectrum:
    """
    Eigenvalues of the null-model modularity matrices.

    Attributes
    ----------
    eigenvalues : NDArray[np.float64]
        One row per null sample, each row ascending. All n eigenvalues
        for statistic 'all'; (minimum, maximum) for 'extremes'.
    statistic : str
        'all' or 'extremes'
    """

    eigenvalues: NDArray[np.float64]
    statistic: str = "all"

    @property
    def n_samples(self) -> int:
        return int(self.eigenvalues.shape[0])

    @property
    def pooled(self) -> NDArray[np.float64]:
        """All eigenvalue observations as one flat sample."""
        return self.eigenvalues.ravel()

    @property
    def maxima(self) -> NDArray[np.float64]:
        """Largest eigenvalue of each null sample."""
        return self.eigenvalues[:, -1]

    @property
    def minima(self) -> NDArray[np.float64]:
        """Smallest eigenvalue of each null sample."""
        return self.eigenvalues[:, 0]

    @property
    def extremes(self) -> NDArray[np.float64]:
        """Minima followed by maxima, as one flat sample."""
        return np.concatenate([self.minima, self.maxima])


def _null_trial(
    model: ConfigurationNullModel,
    exp_w: NDArray[np.float64],
    seed: int,
    statistic: str,
) -> NDArray[np.float64]:
    rng = np.random.default_rng(seed)
    B_perm = model.sample(rng) - exp_w
    try:
        egs = linalg.eigvalsh(B_perm)
    except linalg.LinAlgError as e:
        raise NumericalDegeneracy(
            f"Eigenvalues of null sample (seed {seed}, shape {B_perm.shape}) "
            f"did not converge: {e}"
        ) from e
    if statistic == "extremes":
        return egs[[0, -1]]
    return egs


def _check_stop(should_stop: Optional[Callable[[], bool]], done: int, total: int) -> None:
    if should_stop is not None and should_stop():
        raise SamplingCancelled(f"Null sampling cancelled after {done}/{total} trials")


def sample_null_eigenvalues(
    W: NDArray[np.float64],
    exp_w: NDArray[np.float64],
    config: Optional[NullModelConfig] = None,
    n_samples: Optional[int] = None,
    seed: SeedLike = None,
    statistic: str = "all",
    should_stop: Optional[Callable[[], bool]] = None,
) -> NullSpectrum:
    """
    Sample the null distribution of modularity-matrix eigenvalues.

    Parameters
    ----------
    W : NDArray[np.float64]
        Observed weight matrix (n x n)
    exp_w : NDArray[np.float64]
        Expected weight matrix from ``estimate_null_model``
    config : NullModelConfig, optional
        Null model parameters (default: NullModelConfig())
    n_samples : int, optional
        Number of null networks; overrides ``config.n_samples``
    seed : int, np.random.Generator or None
        Random seed
    statistic : str, optional
        'all' keeps every eigenvalue of each sample, 'extremes' keeps the
        minimum and maximum only (default: 'all')
    should_stop : callable, optional
        Checked between trials; returning True cancels the run

    Returns
    -------
    NullSpectrum
        Eigenvalues per null sample

    Raises
    ------
    ShapeMismatch
        If W and exp_w differ in shape
    InvalidOption
        If statistic is not recognised
    SamplingCancelled
        If should_stop returned True
    NumericalDegeneracy
        If an eigendecomposition failed to converge
    """
    if config is None:
        config = NullModelConfig()
    if statistic not in STATISTICS:
        raise InvalidOption(f"Unknown statistic: {statistic!r} (expected one of {STATISTICS})")

    W = as_weight_matrix(W)
    exp_w = np.asarray(exp_w, dtype=float)
    if exp_w.shape != W.shape:
        raise ShapeMismatch(f"W has shape {W.shape} but ExpW has shape {exp_w.shape}")

    if n_samples is None:
        n_samples = config.n_samples
    if n_samples < 1:
        raise ConfigurationError(f"n_samples must be a positive integer, got {n_samples}")

    model = build_null_model(W, config)
    seeds = trial_seeds(seed, n_samples)

    logger.info(
        f"Sampling {n_samples} {model.name} null networks (n={model.n}, "
        f"workers={config.n_jobs})"
    )

    rows = []
    if config.n_jobs > 1:
        chunksize = max(1, math.ceil(n_samples / (4 * config.n_jobs)))
        executor = ProcessPoolExecutor(max_workers=config.n_jobs)
        try:
            results = executor.map(
                _null_trial,
                repeat(model),
                repeat(exp_w),
                seeds,
                repeat(statistic),
                chunksize=chunksize,
            )
            for i, egs in enumerate(results):
                rows.append(egs)
                _check_stop(should_stop, i + 1, n_samples)
        finally:
            executor.shutdown(wait=True, cancel_futures=True)
    else:
        for i, trial_seed in enumerate(seeds):
            _check_stop(should_stop, i, n_samples)
            rows.append(_null_trial(model, exp_w, trial_seed, statistic))
            logger.debug(f"Null trial {i + 1}/{n_samples}: max eigenvalue {rows[-1][-1]:.4f}")

    return NullSpectrum(eigenvalues=np.vstack(rows), statistic=statistic)


def null_spectrum_bounds(
    spectrum: NullSpectrum,
    bounds: BoundStrategy,
) -> Tuple[float, float]:
    """
    Lower and upper thresholds from the extreme null eigenvalues.

    Parameters
    ----------
    spectrum : NullSpectrum
        Sampled null eigenvalues
    bounds : MeanBounds or PercentileBounds
        MeanBounds: mean of the per-sample minima and maxima.
        PercentileBounds(I): the I/2 percentile of the minima and the
        1 - I/2 percentile of the maxima.

    Returns
    -------
    Tuple[float, float]
        (lower, upper)
    """
    if spectrum.eigenvalues.size == 0:
        raise EmptyNullSample("Null spectrum has no samples")

    minima = spectrum.minima[np.isfinite(spectrum.minima)]
    maxima = spectrum.maxima[np.isfinite(spectrum.maxima)]
    if minima.size == 0 or maxima.size == 0:
        raise EmptyNullSample("Null spectrum has no finite extreme eigenvalues")

    if isinstance(bounds, MeanBounds):
        return float(np.mean(minima)), float(np.mean(maxima))
    if isinstance(bounds, PercentileBounds):
        lower = np.percentile(minima, 100 * bounds.interval / 2)
        upper = np.percentile(maxima, 100 * (1 - bounds.interval / 2))
        return float(lower), float(upper)
    raise ConfigurationError(f"Unknown bound strategy: {bounds!r}")
