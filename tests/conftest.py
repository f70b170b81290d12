"""
Shared fixtures: small weighted block-model networks.
"""

import pytest
import networkx as nx
import numpy as np

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))


def weighted_block_network(sizes, p_in, p_out, mean_extra_weight=1.0, seed=None):
    """
    Stochastic block model with Poisson weights.

    Each edge gets weight 1 + Poisson(mean_extra_weight). Nodes are
    numbered block by block.
    """
    k = len(sizes)
    p_matrix = np.full((k, k), p_out)
    np.fill_diagonal(p_matrix, p_in)

    G = nx.stochastic_block_model(sizes=list(sizes), p=p_matrix.tolist(), seed=seed)
    rng = np.random.default_rng(seed)
    for u, v in G.edges():
        G[u][v]["weight"] = 1 + int(rng.poisson(mean_extra_weight))

    for node in G.nodes():
        G.nodes[node].pop("block", None)

    return G


@pytest.fixture
def block_network():
    """Factory for weighted block-model graphs."""
    return weighted_block_network


@pytest.fixture(scope="module")
def small_weight_matrix():
    """Dense 30-node weighted network with three blocks."""
    G = weighted_block_network([10, 10, 10], p_in=0.6, p_out=0.1, seed=3)
    return nx.to_numpy_array(G, nodelist=range(30), weight="weight")
