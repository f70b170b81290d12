"""
Data Loading Module
===================

This module provides utilities for turning arrays, sparse matrices,
NetworkX graphs and network files into validated weight matrices.
"""

from .matrix_loader import (
    as_weight_matrix,
    load_weight_matrix,
    node_strengths,
)

__all__ = [
    "as_weight_matrix",
    "load_weight_matrix",
    "node_strengths",
]
