"""
Weight Matrix Loader Module
===========================

This module turns the network representations a caller is likely to hold
into the dense, validated weight matrix the rest of the framework works
on.

Supported inputs:
- NumPy arrays (any array-like)
- SciPy sparse matrices
- NetworkX graphs (edge weights read from an edge attribute)

Supported files:
- .npy: NumPy binary matrix
- .csv, .txt: dense matrix (comma or whitespace separated)
- .edges, .edgelist: weighted edge list ``u v w``
- .gml, .graphml: NetworkX graph formats
"""

import logging
from pathlib import Path
from typing import Any, Hashable, List, Optional, Union

import networkx as nx
import numpy as np
from numpy.typing import NDArray
from scipy import sparse

from ..config import SYMMETRY_ATOL
from ..exceptions import NonSymmetricInput, ShapeMismatch

logger = logging.getLogger(__name__)

MatrixLike = Union[NDArray[np.float64], "sparse.spmatrix", nx.Graph, Any]


def as_weight_matrix(
    W: MatrixLike,
    weight: str = "weight",
    nodelist: Optional[List[Hashable]] = None,
) -> NDArray[np.float64]:
    """
    Coerce a network to a dense, validated weight matrix.

    Parameters
    ----------
    W : array-like, scipy.sparse matrix or nx.Graph
        The network. Graph edges without the weight attribute count as 1.
    weight : str, optional
        Edge attribute holding the weight, for graphs (default: 'weight')
    nodelist : list, optional
        Node order for graphs (default: G.nodes() order)

    Returns
    -------
    NDArray[np.float64]
        n x n symmetric, non-negative weight matrix (a copy of the input)

    Raises
    ------
    ShapeMismatch
        If the matrix is not square
    NonSymmetricInput
        If the matrix is not symmetric (directed networks are not supported)
    ValueError
        If any weight is negative or not finite

    Examples
    --------
    >>> import networkx as nx
    >>> G = nx.path_graph(3)
    >>> float(as_weight_matrix(G).sum())
    4.0
    """
    if isinstance(W, nx.Graph):
        if W.is_directed():
            raise NonSymmetricInput("Directed graphs are not supported; convert to undirected first")
        matrix = nx.to_numpy_array(W, nodelist=nodelist, weight=weight, dtype=float)
    elif sparse.issparse(W):
        matrix = W.toarray().astype(float)
    else:
        matrix = np.array(W, dtype=float, copy=True)

    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise ShapeMismatch(f"Weight matrix must be square, got shape {matrix.shape}")
    if not np.all(np.isfinite(matrix)):
        raise ValueError("Weight matrix contains non-finite entries")
    if np.any(matrix < 0):
        raise ValueError(f"Weight matrix has negative entries (min={matrix.min():.4g})")

    scale = max(1.0, float(np.abs(matrix).max(initial=0.0)))
    if not np.allclose(matrix, matrix.T, rtol=0.0, atol=SYMMETRY_ATOL * scale):
        raise NonSymmetricInput(
            f"Weight matrix of shape {matrix.shape} is not symmetric "
            f"(max asymmetry {np.abs(matrix - matrix.T).max():.3g})"
        )

    return matrix


def node_strengths(W: NDArray[np.float64]) -> NDArray[np.float64]:
    """Strength (sum of incident weights) of each node."""
    return np.asarray(W, dtype=float).sum(axis=1)


def load_weight_matrix(filepath: Union[str, Path]) -> NDArray[np.float64]:
    """
    Load a weight matrix from file.

    Parameters
    ----------
    filepath : str or Path
        Path to a .npy, .csv, .txt, .edges, .edgelist, .gml or .graphml file

    Returns
    -------
    NDArray[np.float64]
        Validated weight matrix (see ``as_weight_matrix``)

    Raises
    ------
    FileNotFoundError
        If the file does not exist
    ValueError
        If the file format is not recognised
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Network file not found: {path}")

    suffix = path.suffix.lower()

    if suffix == ".npy":
        data = np.load(path)
    elif suffix == ".csv":
        data = np.loadtxt(path, delimiter=",", ndmin=2)
    elif suffix == ".txt":
        data = np.loadtxt(path, ndmin=2)
    elif suffix in {".edges", ".edgelist"}:
        G = nx.read_weighted_edgelist(path, nodetype=int)
        data = nx.Graph(G)
    elif suffix == ".gml":
        data = nx.Graph(nx.read_gml(path))
    elif suffix == ".graphml":
        data = nx.Graph(nx.read_graphml(path))
    else:
        raise ValueError(f"Unknown file format: {suffix}")

    if isinstance(data, nx.Graph):
        W = as_weight_matrix(data, nodelist=sorted(data.nodes()))
    else:
        W = as_weight_matrix(data)
    logger.info(f"Loaded {path.name}: {W.shape[0]} nodes, total weight {W.sum() / 2:.4g}")
    return W
