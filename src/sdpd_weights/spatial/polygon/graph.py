"""
graph.py - Contiguity weights from polygon geometry

Builds first-order adjacency between spatial units from their polygon
boundaries. Units keep their input order: row/column i of every matrix
is geometry i.
"""
from __future__ import annotations

from typing import Tuple

import numpy as np
import pandas as pd
from scipy import sparse

from sdpd_weights.data.config import DegenerateGeometry, ValidationError
from sdpd_weights.processing.normalization import apply_normalization
from sdpd_weights.spatial.shared.utils import as_weights_matrix


def _as_geoseries(geometries) -> Tuple['gpd.GeoSeries', pd.Index]:
    """
    Coerce input geometries to a positionally indexed GeoSeries.

    Parameters
    ----------
    geometries : GeoDataFrame, GeoSeries or sequence of shapely geometries
        One polygon or multi-polygon per spatial unit

    Returns
    -------
    gpd.GeoSeries
        Geometries with a RangeIndex (0..n-1)
    pd.Index
        Original unit labels, aligned to positions
    """
    import geopandas as gpd

    if isinstance(geometries, gpd.GeoDataFrame):
        gs = geometries.geometry
    elif isinstance(geometries, gpd.GeoSeries):
        gs = geometries
    else:
        gs = gpd.GeoSeries(list(geometries))

    unit_index = pd.Index(gs.index)
    gs = gs.reset_index(drop=True)
    return gs, unit_index


def validate_geometries(geometries) -> 'gpd.GeoSeries':
    """
    Check that every unit has a valid polygon with positive area.

    Nothing is dropped: all offending units are reported at once.

    Parameters
    ----------
    geometries : GeoDataFrame, GeoSeries or sequence of shapely geometries

    Returns
    -------
    gpd.GeoSeries
        Positionally indexed geometries

    Raises
    ------
    DegenerateGeometry
        If any geometry is missing, empty, invalid (e.g. self-intersecting),
        not polygonal or has zero area. ``units`` lists their positions.
    """
    import shapely

    gs, _ = _as_geoseries(geometries)
    if len(gs) == 0:
        raise ValidationError("No geometries supplied")

    geoms = np.asarray(gs.values, dtype=object)
    missing = gs.isna().to_numpy()

    bad = np.zeros(len(gs), dtype=bool)
    bad |= missing

    present = ~missing
    if present.any():
        subset = geoms[present]
        is_polygonal = np.array([
            g.geom_type in ('Polygon', 'MultiPolygon') for g in subset
        ])
        degenerate = (
            shapely.is_empty(subset)
            | ~shapely.is_valid(subset)
            | ~is_polygonal
            | ~(shapely.area(subset) > 0)
        )
        bad[np.flatnonzero(present)[degenerate]] = True

    if bad.any():
        units = np.flatnonzero(bad).tolist()
        preview = ', '.join(str(u) for u in units[:10])
        if len(units) > 10:
            preview += ', ...'
        raise DegenerateGeometry(
            f"{len(units)} unit(s) have missing, empty, invalid or zero-area "
            f"geometry: [{preview}]",
            units=units,
        )

    return gs


def _shared_boundary_length(geom_a, geom_b) -> float:
    """
    Length of the boundary shared by two polygons.

    Corner contacts and disjoint polygons give 0.0.
    """
    seg = geom_a.boundary.intersection(geom_b.boundary)
    if seg.is_empty:
        return 0.0
    return float(seg.length)


def _candidate_pairs(gs: 'gpd.GeoSeries') -> Tuple[np.ndarray, np.ndarray]:
    """
    Positional (i, j) pairs, i != j, whose geometries intersect.

    The spatial join pre-filters candidates with the STRtree bounding-box
    index before running the exact predicate.
    """
    import geopandas as gpd

    gdf = gpd.GeoDataFrame(geometry=gs)
    joined = gpd.sjoin(gdf, gdf, how='inner', predicate='intersects')

    rows = joined.index.to_numpy(dtype=np.int64)
    cols = joined['index_right'].to_numpy(dtype=np.int64)

    # Remove self-joins
    keep = rows != cols
    return rows[keep], cols[keep]


def contiguity_matrix(geometries,
                      queen: bool = True,
                      row_normalize: bool = False,
                      verbose: bool = True) -> sparse.csr_matrix:
    """
    Build a first-order contiguity weights matrix.

    Two units are neighbors if their polygons share at least one
    boundary point (queen) or a boundary segment of positive length
    (rook). Overlapping polygons are neighbors under both rules.

    Parameters
    ----------
    geometries : GeoDataFrame, GeoSeries or sequence of shapely geometries
        One polygon or multi-polygon per unit, in unit order
    queen : bool, default=True
        Queen contiguity (corners count). If False, rook contiguity.
    row_normalize : bool, default=False
        Row-standardize the result
    verbose : bool, default=True
        Print progress

    Returns
    -------
    sparse.csr_matrix
        Binary (n × n) matrix with zero diagonal (row-stochastic if
        ``row_normalize``)

    Raises
    ------
    DegenerateGeometry
        If any geometry is missing, invalid or has zero area

    Examples
    --------
    >>> from sdpd_weights.spatial.polygon.graph import contiguity_matrix
    >>> W = contiguity_matrix(districts)
    >>> W_rook = contiguity_matrix(districts.geometry, queen=False)
    """
    rule = 'queen' if queen else 'rook'
    if verbose:
        print(f"\n[Contiguity] Building {rule} contiguity matrix...")

    gs = validate_geometries(geometries)
    n_units = len(gs)

    rows, cols = _candidate_pairs(gs)

    if not queen and len(rows) > 0:
        geom = gs.values
        keep = np.array([
            _shared_boundary_length(geom[i], geom[j]) > 0
            or geom[i].overlaps(geom[j])
            or geom[i].contains(geom[j])
            or geom[j].contains(geom[i])
            for i, j in zip(rows, cols)
        ], dtype=bool)
        rows, cols = rows[keep], cols[keep]

    data = np.ones(len(rows), dtype=np.float64)
    W = sparse.csr_matrix((data, (rows, cols)), shape=(n_units, n_units))
    W.data[:] = 1.0
    W = as_weights_matrix(W)

    if verbose:
        degrees = np.diff(W.indptr)
        n_isolated = int((degrees == 0).sum())
        print(f"  ✓ Contiguity matrix: {n_units} units, {W.nnz // 2} links")
        print(f"    Mean degree: {degrees.mean():.1f}")
        if n_isolated > 0:
            print(f"  ⚠ {n_isolated} unit(s) without neighbors")

    return apply_normalization(W, row=row_normalize)
