"""
Tests for weight matrix coercion and loading.
"""

import pytest
import networkx as nx
import numpy as np
from scipy import sparse

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.data import as_weight_matrix, load_weight_matrix, node_strengths
from src.exceptions import NonSymmetricInput, ShapeMismatch

TRIANGLE = np.array([
    [0.0, 2.0, 1.0],
    [2.0, 0.0, 3.0],
    [1.0, 3.0, 0.0],
])


class TestAsWeightMatrix:
    """Tests for input coercion."""

    def test_array(self):
        """Test that arrays are copied, not aliased."""
        W = as_weight_matrix(TRIANGLE)
        assert np.array_equal(W, TRIANGLE)
        W[0, 1] = 99.0
        assert TRIANGLE[0, 1] == 2.0

    def test_sparse(self):
        """Test that sparse matrices are densified."""
        W = as_weight_matrix(sparse.csr_matrix(TRIANGLE))
        assert isinstance(W, np.ndarray)
        assert np.array_equal(W, TRIANGLE)

    def test_graph(self):
        """Test that edge weights are read from a graph."""
        G = nx.Graph()
        G.add_weighted_edges_from([(0, 1, 2.0), (1, 2, 3.0), (0, 2, 1.0)])
        assert np.array_equal(as_weight_matrix(G), TRIANGLE)

    def test_graph_unweighted(self):
        """Test that edges without weights count as 1."""
        W = as_weight_matrix(nx.path_graph(4))
        assert W.sum() == 6.0

    def test_graph_nodelist(self):
        """Test that nodelist sets the node order."""
        G = nx.Graph()
        G.add_edge("b", "a", weight=5.0)
        G.add_edge("b", "c", weight=1.0)
        W = as_weight_matrix(G, nodelist=["a", "b", "c"])
        assert W[0, 1] == 5.0
        assert W[0, 2] == 0.0

    def test_directed_graph(self):
        """Test that directed graphs are refused."""
        with pytest.raises(NonSymmetricInput):
            as_weight_matrix(nx.DiGraph([(0, 1)]))

    def test_asymmetric(self):
        """Test that asymmetric matrices are refused."""
        with pytest.raises(NonSymmetricInput):
            as_weight_matrix([[0.0, 1.0], [0.0, 0.0]])

    def test_non_square(self):
        """Test that non-square matrices are refused."""
        with pytest.raises(ShapeMismatch):
            as_weight_matrix(np.zeros((2, 3)))
        with pytest.raises(ShapeMismatch):
            as_weight_matrix(np.zeros(4))

    def test_negative(self):
        """Test that negative weights are refused."""
        with pytest.raises(ValueError):
            as_weight_matrix([[0.0, -1.0], [-1.0, 0.0]])

    def test_non_finite(self):
        """Test that NaN weights are refused."""
        with pytest.raises(ValueError):
            as_weight_matrix([[0.0, np.nan], [np.nan, 0.0]])

    def test_strengths(self):
        """Test node strengths."""
        assert np.array_equal(node_strengths(TRIANGLE), [3.0, 5.0, 4.0])


class TestLoadWeightMatrix:
    """Tests for file loading."""

    def test_npy(self, tmp_path):
        """Test loading a NumPy binary file."""
        path = tmp_path / "W.npy"
        np.save(path, TRIANGLE)
        assert np.array_equal(load_weight_matrix(path), TRIANGLE)

    def test_csv(self, tmp_path):
        """Test loading a comma-separated matrix."""
        path = tmp_path / "W.csv"
        np.savetxt(path, TRIANGLE, delimiter=",")
        assert np.allclose(load_weight_matrix(path), TRIANGLE)

    def test_txt(self, tmp_path):
        """Test loading a whitespace-separated matrix."""
        path = tmp_path / "W.txt"
        np.savetxt(path, TRIANGLE)
        assert np.allclose(load_weight_matrix(path), TRIANGLE)

    def test_edge_list(self, tmp_path):
        """Test loading a weighted edge list with nodes in sorted order."""
        path = tmp_path / "network.edges"
        path.write_text("2 1 3.0\n0 1 2.0\n0 2 1.0\n")
        assert np.array_equal(load_weight_matrix(path), TRIANGLE)

    def test_graphml(self, tmp_path):
        """Test loading a GraphML file."""
        G = nx.Graph()
        G.add_weighted_edges_from([(0, 1, 2.0), (1, 2, 3.0), (0, 2, 1.0)])
        path = tmp_path / "network.graphml"
        nx.write_graphml(G, path)
        assert np.allclose(load_weight_matrix(path), TRIANGLE)

    def test_unknown_format(self, tmp_path):
        """Test that unknown suffixes are refused."""
        path = tmp_path / "W.xyz"
        path.write_text("")
        with pytest.raises(ValueError):
            load_weight_matrix(path)

    def test_missing_file(self, tmp_path):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_weight_matrix(tmp_path / "missing.npy")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
