"""
Modularity Matrix Module
========================

Builds the modularity matrix B = W - ExpW and decomposes it.

B is symmetric, so its eigenvalues are real and its eigenvectors
orthonormal. The decomposition returns eigenvalue/eigenvector pairs
together; callers reorder both with the same index array.
"""

import logging
from typing import Tuple

import numpy as np
from numpy.typing import NDArray
from scipy import linalg

from ..config import SYMMETRY_ATOL
from ..exceptions import NonSymmetricInput, NumericalDegeneracy, ShapeMismatch

logger = logging.getLogger(__name__)


def check_square(M: NDArray[np.float64], name: str = "matrix") -> None:
    """Raise ShapeMismatch unless M is a square 2-D array."""
    if M.ndim != 2 or M.shape[0] != M.shape[1]:
        raise ShapeMismatch(f"{name} must be square, got shape {M.shape}")


def check_symmetric(M: NDArray[np.float64], name: str = "matrix") -> None:
    """
    Raise NonSymmetricInput unless M is symmetric within tolerance.

    The tolerance scales with the largest absolute entry of M.
    """
    check_square(M, name)
    scale = max(1.0, float(np.abs(M).max(initial=0.0)))
    asymmetry = float(np.abs(M - M.T).max(initial=0.0))
    if not asymmetry <= SYMMETRY_ATOL * scale:
        raise NonSymmetricInput(
            f"{name} of shape {M.shape} is not symmetric (max asymmetry {asymmetry:.3g})"
        )


def modularity_matrix(
    W: NDArray[np.float64],
    exp_w: NDArray[np.float64],
) -> NDArray[np.float64]:
    """
    Modularity matrix B = W - ExpW.

    Parameters
    ----------
    W : NDArray[np.float64]
        Observed weight matrix (n x n)
    exp_w : NDArray[np.float64]
        Expected weight matrix under the null model (n x n)

    Returns
    -------
    NDArray[np.float64]
        B, a new n x n array

    Raises
    ------
    ShapeMismatch
        If W and exp_w are not square matrices of the same shape

    Examples
    --------
    >>> W = np.array([[0.0, 1.0], [1.0, 0.0]])
    >>> modularity_matrix(W, np.full((2, 2), 0.5))
    array([[-0.5,  0.5],
           [ 0.5, -0.5]])
    """
    W = np.asarray(W, dtype=float)
    exp_w = np.asarray(exp_w, dtype=float)
    check_square(W, "W")
    if exp_w.shape != W.shape:
        raise ShapeMismatch(f"W has shape {W.shape} but ExpW has shape {exp_w.shape}")
    return W - exp_w


def eigendecomposition(
    B: NDArray[np.float64],
) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    """
    Full eigendecomposition of a symmetric matrix.

    Parameters
    ----------
    B : NDArray[np.float64]
        Symmetric n x n matrix

    Returns
    -------
    Tuple[NDArray[np.float64], NDArray[np.float64]]
        (eigenvalues ascending, eigenvectors as matching columns)

    Raises
    ------
    NumericalDegeneracy
        If the decomposition does not converge
    """
    try:
        egs, V = linalg.eigh(B)
    except (linalg.LinAlgError, ValueError) as e:
        raise NumericalDegeneracy(
            f"Eigendecomposition of matrix with shape {B.shape} failed: {e}"
        ) from e
    return egs, V
