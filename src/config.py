"""
Configuration for the Spectral Rejection Framework.
===================================================

This module contains the configuration constants used throughout the
framework and the typed parameter structures passed to the null models,
the node rejection engine and the ``reject_the_noise`` pipeline.

All parameter structures are frozen dataclasses validated on
construction, so an invalid option fails where it is written rather than
deep inside a run.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Tuple, Union

from .exceptions import ConfigurationError, InvalidOption

# Random seed for all stochastic operations
RANDOM_SEED = 42

# Null model defaults
DEFAULT_NULL_MODEL = "poisson"
DEFAULT_N_SAMPLES = 100          # repeats of the null-model permutation
DEFAULT_CONVERSION = 1.0         # real-valued weights -> counts (1 for integers)

# Rejection defaults
DEFAULT_INTERVALS = (0.05,)
DEFAULT_WEIGHT = "none"
DEFAULT_SUBSPACE = "positive"

# Eigenvalues at or below this count as zero, given machine error
EIGENVALUE_ZERO_TOL = 1e-2

# Symmetry check: |M - M.T| <= SYMMETRY_ATOL * max(1, max|M|)
SYMMETRY_ATOL = 1e-8

NULL_MODELS = ("poisson", "link")
WEIGHT_OPTIONS = ("none", "linear", "sqrt")
SUBSPACE_OPTIONS = ("positive", "symmetric")

_MODEL_ALIASES = {
    "poisson": "poisson",
    "poiss": "poisson",
    "wcm": "poisson",
    "link": "link",
    "sparse": "link",
}


def _check_interval(value: float, name: str) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    if not 0.0 < value < 1.0:
        raise ConfigurationError(f"{name} must lie in (0, 1), got {value}")
    return value


def normalize_model_name(model: str) -> str:
    """Map a null-model name (or legacy alias) to its canonical form."""
    key = str(model).strip().lower()
    if key not in _MODEL_ALIASES:
        raise ConfigurationError(
            f"Unknown null model: {model!r} (expected one of {NULL_MODELS})"
        )
    return _MODEL_ALIASES[key]


def check_weight_option(weight: str) -> str:
    """Validate a projection weighting option."""
    if weight not in WEIGHT_OPTIONS:
        raise InvalidOption(
            f"Unknown weighting option: {weight!r} (expected one of {WEIGHT_OPTIONS})"
        )
    return weight


def check_subspace_option(subspace: str) -> str:
    """Validate a projection subspace option."""
    if subspace not in SUBSPACE_OPTIONS:
        raise InvalidOption(
            f"Unknown subspace option: {subspace!r} (expected one of {SUBSPACE_OPTIONS})"
        )
    return subspace


@dataclass(frozen=True)
class NullModelConfig:
    """
    Null model parameters.

    Parameters
    ----------
    model : str
        'poisson' (weighted configuration model) or 'link' (sparse
        weighted configuration model) (default: 'poisson')
    n_samples : int
        Number of null networks drawn (default: 100). Precision of the
        null spectrum against cost: each sample is one dense
        eigendecomposition.
    conversion : float
        Factor converting real-valued weights to counts (default: 1.0)
    closed_form_expectation : bool
        If True, ExpW is computed in closed form; otherwise it is the mean
        over the sampled null ensemble (default: False)
    no_loops : bool
        Suppress self-loops in the null model (default: True)
    n_jobs : int
        Worker processes used by the permutation sampler (default: 1)
    """

    model: str = DEFAULT_NULL_MODEL
    n_samples: int = DEFAULT_N_SAMPLES
    conversion: float = DEFAULT_CONVERSION
    closed_form_expectation: bool = False
    no_loops: bool = True
    n_jobs: int = 1

    def __post_init__(self):
        object.__setattr__(self, "model", normalize_model_name(self.model))
        if int(self.n_samples) != self.n_samples or self.n_samples < 1:
            raise ConfigurationError(f"n_samples must be a positive integer, got {self.n_samples}")
        if not self.conversion > 0:
            raise ConfigurationError(f"conversion must be positive, got {self.conversion}")
        if int(self.n_jobs) != self.n_jobs or self.n_jobs < 1:
            raise ConfigurationError(f"n_jobs must be a positive integer, got {self.n_jobs}")
        object.__setattr__(self, "n_samples", int(self.n_samples))
        object.__setattr__(self, "n_jobs", int(self.n_jobs))
        object.__setattr__(self, "conversion", float(self.conversion))


@dataclass(frozen=True)
class MeanBounds:
    """Thresholds at the mean extreme eigenvalues of the null samples."""

    kind: str = field(default="mean", init=False)


@dataclass(frozen=True)
class PercentileBounds:
    """Thresholds at two-sided percentiles of the extreme null eigenvalues."""

    interval: float = 0.05
    kind: str = field(default="percentile", init=False)

    def __post_init__(self):
        object.__setattr__(self, "interval", _check_interval(self.interval, "interval"))


BoundStrategy = Union[MeanBounds, PercentileBounds]


def bounds_from_confidence(confidence: float) -> BoundStrategy:
    """
    Build a bound strategy from the legacy scalar confidence parameter.

    A confidence of 0 selects the mean of the extreme null eigenvalues;
    any other value is a percentile interval.

    Examples
    --------
    >>> bounds_from_confidence(0)
    MeanBounds(kind='mean')
    >>> bounds_from_confidence(0.05).interval
    0.05
    """
    if confidence == 0:
        return MeanBounds()
    return PercentileBounds(confidence)


@dataclass(frozen=True)
class RejectionOptions:
    """
    Node rejection options.

    Parameters
    ----------
    weight : str
        Projection weighting: 'none', 'linear' or 'sqrt' (default: 'none')
    subspace : str
        'positive' projects onto the eigenvectors of the positive extreme
        eigenvalues only; 'symmetric' also uses the negative ones
        (default: 'positive')
    intervals : tuple of float
        Rejection intervals, one partition per value (default: (0.05,))
    """

    weight: str = DEFAULT_WEIGHT
    subspace: str = DEFAULT_SUBSPACE
    intervals: Tuple[float, ...] = DEFAULT_INTERVALS

    def __post_init__(self):
        check_weight_option(self.weight)
        check_subspace_option(self.subspace)
        intervals = self.intervals
        if isinstance(intervals, (int, float)):
            intervals = (intervals,)
        intervals = tuple(_check_interval(i, "intervals") for i in intervals)
        if not intervals:
            raise ConfigurationError("intervals must contain at least one value")
        object.__setattr__(self, "intervals", intervals)


@dataclass(frozen=True)
class SpectralRejectionParams:
    """
    Parameters of the full ``reject_the_noise`` pipeline.

    Parameters
    ----------
    null_model : NullModelConfig
        Null model used for the data spectrum
    bounds : MeanBounds or PercentileBounds
        Strategy for the signal-dimension thresholds (default: MeanBounds)
    rejection : RejectionOptions
        Node rejection options
    eg_min : float
        Eigenvalues at or below this are treated as zero (default: 1e-2)
    run_control : bool
        Also analyse the network against the full weighted configuration
        model (default: True)
    """

    null_model: NullModelConfig = field(default_factory=NullModelConfig)
    bounds: BoundStrategy = field(default_factory=MeanBounds)
    rejection: RejectionOptions = field(default_factory=RejectionOptions)
    eg_min: float = EIGENVALUE_ZERO_TOL
    run_control: bool = True

    def __post_init__(self):
        if not isinstance(self.bounds, (MeanBounds, PercentileBounds)):
            raise ConfigurationError(f"Unknown bound strategy: {self.bounds!r}")
        if self.eg_min < 0:
            raise ConfigurationError(f"eg_min must be non-negative, got {self.eg_min}")

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> "SpectralRejectionParams":
        """
        Build parameters from a nested mapping (the YAML layout).

        Expected keys: 'null_model' (NullModelConfig fields), 'confidence'
        (0 for mean bounds, else a percentile interval), 'rejection'
        (RejectionOptions fields), 'eg_min', 'run_control'.
        """
        allowed = {"null_model", "confidence", "rejection", "eg_min", "run_control"}
        unknown = set(config) - allowed
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {sorted(unknown)}")

        null_model = _build_section(NullModelConfig, config.get("null_model") or {}, "null_model")
        rejection_cfg = dict(config.get("rejection") or {})
        if "intervals" in rejection_cfg and rejection_cfg["intervals"] is not None:
            intervals = rejection_cfg["intervals"]
            if isinstance(intervals, (int, float)):
                intervals = [intervals]
            rejection_cfg["intervals"] = tuple(intervals)
        rejection = _build_section(RejectionOptions, rejection_cfg, "rejection")

        kwargs: Dict[str, Any] = {
            "null_model": null_model,
            "bounds": bounds_from_confidence(config.get("confidence", 0)),
            "rejection": rejection,
        }
        if "eg_min" in config:
            kwargs["eg_min"] = float(config["eg_min"])
        if "run_control" in config:
            kwargs["run_control"] = bool(config["run_control"])
        return cls(**kwargs)


def _build_section(section_cls, values: Mapping[str, Any], name: str):
    allowed = set(section_cls.__dataclass_fields__)
    unknown = set(values) - allowed
    if unknown:
        raise ConfigurationError(f"Unknown keys in '{name}': {sorted(unknown)}")
    return section_cls(**values)


__all__ = [
    "RANDOM_SEED",
    "EIGENVALUE_ZERO_TOL",
    "SYMMETRY_ATOL",
    "NULL_MODELS",
    "WEIGHT_OPTIONS",
    "SUBSPACE_OPTIONS",
    "NullModelConfig",
    "MeanBounds",
    "PercentileBounds",
    "BoundStrategy",
    "RejectionOptions",
    "SpectralRejectionParams",
    "bounds_from_confidence",
    "normalize_model_name",
    "check_weight_option",
    "check_subspace_option",
]
