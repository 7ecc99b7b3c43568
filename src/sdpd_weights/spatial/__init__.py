"""
spatial - Weights construction for sdpd_weights

Two complementary routes to a weights matrix:

polygon : Contiguity-based weights
    Uses unit boundary polygons: first-order contiguity, higher
    neighbor orders and shared-boundary lengths.

point : Distance-based weights
    Uses a distance matrix (given, or computed from coordinates or
    centroids): decay kernels and k-nearest neighbors.

shared : Utilities shared across both approaches

sources : WeightsSource wrappers that build a SpatialWeights from a
    WeightsConfig

Usage
-----
>>> import sdpd_weights as sw
>>>
>>> # Contiguity (first and second order)
>>> W_1 = sw.spatial.polygon.contiguity_matrix(districts)
>>> W_2 = sw.spatial.polygon.neighbor_order_matrix(districts, m=2)
>>>
>>> # Distance decay and nearest neighbors
>>> W_inv = sw.spatial.point.inverse_distance_weights(dist_m, cutoff=100000)
>>> W_knn = sw.spatial.point.knn_weights(dist_m, k=5)
"""

from . import shared
from . import point
from . import polygon
from . import sources

__all__ = [
    'shared',
    'point',
    'polygon',
    'sources',
]
