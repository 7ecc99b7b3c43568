"""
polygon - Contiguity-based weights

Derives neighbor relations from unit boundary polygons. Every geometry
is validated first; missing, invalid or zero-area polygons raise
DegenerateGeometry listing the offending units.

Modules
-------
graph : First-order contiguity
    contiguity_matrix, validate_geometries
orders : Higher-order neighbors
    neighbor_order_matrix, all_neighbor_orders
boundaries : Shared-boundary length weights
    shared_boundary_matrix

Typical workflow
----------------
>>> import sdpd_weights as sw
>>>
>>> # 1. First-order queen contiguity
>>> W_1 = sw.spatial.polygon.contiguity_matrix(districts)
>>>
>>> # 2. Second-order neighbors, row-normalized
>>> W_2 = sw.spatial.polygon.neighbor_order_matrix(W_1, m=2, row_normalize=True)
>>>
>>> # 3. Shared boundary lengths
>>> W_len = sw.spatial.polygon.shared_boundary_matrix(districts)
"""

# Contiguity
from .graph import (
    contiguity_matrix,
    validate_geometries,
)

# Neighbor orders
from .orders import (
    all_neighbor_orders,
    neighbor_order_matrix,
)

# Boundaries
from .boundaries import shared_boundary_matrix

__all__ = [
    # Contiguity
    "contiguity_matrix",
    "validate_geometries",
    # Neighbor orders
    "neighbor_order_matrix",
    "all_neighbor_orders",
    # Boundaries
    "shared_boundary_matrix",
]
