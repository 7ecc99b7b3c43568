# src/sdpd_weights/spatial/point/__init__.py

"""
Distance-based weights.

All builders take a symmetric, non-negative, zero-diagonal distance
matrix. Kernel parameters and cut-offs are in the same unit as the
distances; nothing is converted internally.

Modules
-------
- distances: Distance matrices from coordinates or polygon centroids
- kernels: Inverse, exponential and double-power decay weights
- neighbors: k-nearest-neighbor weights

Quick Start
-----------
>>> import sdpd_weights as sw
>>>
>>> dist_km = dist_m / 1000
>>> W_inv = sw.spatial.point.inverse_distance_weights(dist_km, cutoff=100)
>>> W_exp = sw.spatial.point.distance_weights(dist_km, 100, kernel='exponential')
>>> W_dd = sw.spatial.point.double_power_distance_weights(dist_km, 200, power=3)
>>> W_knn = sw.spatial.point.knn_weights(dist_km, k=5)
"""

# Distances
from .distances import (
    EARTH_RADIUS_KM,
    centroid_coordinates,
    distance_matrix_from_coordinates,
    distance_matrix_from_geometries,
)

# Kernels
from .kernels import (
    DEFAULT_POWER,
    distance_weights,
    double_power_distance_weights,
    exponential_distance_weights,
    inverse_distance_weights,
)

# Nearest neighbors
from .neighbors import knn_weights

__all__ = [
    # Distances
    'EARTH_RADIUS_KM',
    'centroid_coordinates',
    'distance_matrix_from_coordinates',
    'distance_matrix_from_geometries',
    # Kernels
    'DEFAULT_POWER',
    'distance_weights',
    'inverse_distance_weights',
    'exponential_distance_weights',
    'double_power_distance_weights',
    # Nearest neighbors
    'knn_weights',
]
