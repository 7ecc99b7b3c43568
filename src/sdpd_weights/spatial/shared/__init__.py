# src/sdpd_weights/spatial/shared/__init__.py

"""
Shared utilities for weights construction.

Sparse plumbing and validation used by both polygon-based and
distance-based builders.
"""

from .utils import (
    # Validation
    validate_distance_matrix,
    check_positive,

    # Matrix utilities
    as_weights_matrix,
    binarize,
    row_sums,
    safe_divide,

    # Neighbor lists
    to_neighbor_lists,
    neighbor_lists_to_matrix,
)

__all__ = [
    # Validation
    'validate_distance_matrix',
    'check_positive',

    # Matrix utilities
    'as_weights_matrix',
    'binarize',
    'row_sums',
    'safe_divide',

    # Neighbor lists
    'to_neighbor_lists',
    'neighbor_lists_to_matrix',
]
