"""
distances.py - Distance matrices from coordinates or geometries

Computes the symmetric, zero-diagonal distance matrix consumed by the
decay kernels and the k-nearest-neighbor selector. No unit conversion
is done: kernel parameters must use the same unit as the distances.
"""
from __future__ import annotations

import numpy as np
from sklearn.metrics import pairwise_distances
from sklearn.metrics.pairwise import haversine_distances

from sdpd_weights.data.config import InvalidInputShape, ValidationError

# Mean Earth radius (IUGG) in kilometers
EARTH_RADIUS_KM = 6371.0088


def distance_matrix_from_coordinates(coords,
                                     metric: str = 'euclidean',
                                     radius: float = EARTH_RADIUS_KM) -> np.ndarray:
    """
    Pairwise distances between unit coordinates.

    Parameters
    ----------
    coords : array-like
        Coordinates (n_units × 2). For ``metric='haversine'`` the columns
        are longitude, latitude in degrees.
    metric : str, default='euclidean'
        'euclidean' for planar coordinates, 'haversine' for great-circle
        distances on a sphere
    radius : float, default=6371.0088
        Sphere radius for 'haversine'; sets the output unit (km by default)

    Returns
    -------
    np.ndarray
        Symmetric (n × n) distance matrix with exactly zero diagonal

    Examples
    --------
    >>> d = distance_matrix_from_coordinates(xy)
    >>> d_km = distance_matrix_from_coordinates(lonlat, metric='haversine')
    """
    coords = np.asarray(coords, dtype=np.float64)
    if coords.ndim != 2 or coords.shape[1] != 2:
        raise InvalidInputShape(f"Coordinates must have shape (n, 2), got {coords.shape}")
    if not np.all(np.isfinite(coords)):
        raise InvalidInputShape("Coordinates contain NaN or infinite values")

    if metric == 'euclidean':
        d = pairwise_distances(coords, metric='euclidean')
    elif metric == 'haversine':
        lon, lat = coords[:, 0], coords[:, 1]
        if np.any(np.abs(lat) > 90) or np.any(np.abs(lon) > 360):
            raise InvalidInputShape("Longitude/latitude values out of range")
        # sklearn expects (lat, lon) in radians
        latlon = np.radians(np.column_stack([lat, lon]))
        d = haversine_distances(latlon) * radius
    else:
        raise ValidationError(f"Unknown metric: {metric!r}. Use 'euclidean' or 'haversine'.")

    # Enforce exact symmetry and zero diagonal against rounding
    d = (d + d.T) / 2
    np.fill_diagonal(d, 0.0)
    return d


def centroid_coordinates(geometries) -> np.ndarray:
    """
    Centroid coordinates of unit geometries.

    Parameters
    ----------
    geometries : GeoDataFrame, GeoSeries or sequence of shapely geometries

    Returns
    -------
    np.ndarray
        Centroids (n_units × 2) as x, y (lon, lat for geographic CRS)
    """
    import shapely

    from sdpd_weights.spatial.polygon.graph import validate_geometries

    gs = validate_geometries(geometries)
    centroids = shapely.centroid(np.asarray(gs.values, dtype=object))
    return np.column_stack([shapely.get_x(centroids), shapely.get_y(centroids)])


def distance_matrix_from_geometries(geometries,
                                    metric: str | None = None,
                                    radius: float = EARTH_RADIUS_KM,
                                    verbose: bool = True) -> np.ndarray:
    """
    Distances between unit centroids.

    Parameters
    ----------
    geometries : GeoDataFrame, GeoSeries or sequence of shapely geometries
        One polygon per unit
    metric : str, optional
        'euclidean' or 'haversine'. If None, 'haversine' is used when the
        geometries carry a geographic CRS, 'euclidean' otherwise.
    radius : float, default=6371.0088
        Sphere radius for 'haversine'
    verbose : bool, default=True
        Print progress

    Returns
    -------
    np.ndarray
        Symmetric (n × n) distance matrix
    """
    if metric is None:
        crs = getattr(geometries, 'crs', None)
        metric = 'haversine' if crs is not None and crs.is_geographic else 'euclidean'

    if verbose:
        print(f"\n[Distances] Computing centroid distances (metric='{metric}')...")

    coords = centroid_coordinates(geometries)
    d = distance_matrix_from_coordinates(coords, metric=metric, radius=radius)

    if verbose:
        off = d[~np.eye(len(d), dtype=bool)]
        if len(off) > 0:
            print(f"  ✓ {len(d)} units, distance range: {off.min():.1f} – {off.max():.1f}")

    return d
