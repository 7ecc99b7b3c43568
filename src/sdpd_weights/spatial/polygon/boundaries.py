"""
boundaries.py - Shared-boundary weights

Weights each pair of contiguous units by the length of the boundary they
share, in the units of the geometries' coordinate reference system.

Key design decisions:
- Length is measured on the intersection of the two boundaries, so it
  is symmetric and corner-only contacts get weight zero.
- Candidate pairs come from the same STRtree-filtered spatial join as
  the contiguity matrix; only those pairs are measured.
"""
from __future__ import annotations

import numpy as np
from scipy import sparse

from sdpd_weights.processing.normalization import apply_normalization
from sdpd_weights.spatial.shared.utils import as_weights_matrix

from .graph import _candidate_pairs, _shared_boundary_length, validate_geometries


def shared_boundary_matrix(geometries,
                           row_normalize: bool = False,
                           spectral_normalize: bool = False,
                           eig_tol: float = 0.0,
                           eig_maxiter: int | None = None,
                           verbose: bool = True) -> sparse.csr_matrix:
    """
    Build a weights matrix of shared boundary lengths.

    Parameters
    ----------
    geometries : GeoDataFrame, GeoSeries or sequence of shapely geometries
        One polygon or multi-polygon per unit, in unit order
    row_normalize : bool, default=False
        Row-standardize the result
    spectral_normalize : bool, default=False
        Divide by the leading eigenvalue
    eig_tol, eig_maxiter
        Eigen solver budget for spectral normalization
    verbose : bool, default=True
        Print progress

    Returns
    -------
    sparse.csr_matrix
        Symmetric (n × n) matrix, w_ij = length of the common boundary of
        units i and j (0 if they share none)

    Raises
    ------
    DegenerateGeometry
        If any geometry is missing, invalid or has zero area

    Examples
    --------
    >>> W_len = shared_boundary_matrix(lower_saxony)
    >>> W_len_rn = shared_boundary_matrix(lower_saxony, row_normalize=True)
    """
    if verbose:
        print(f"\n[Boundaries] Computing shared boundary lengths...")

    gs = validate_geometries(geometries)
    n_units = len(gs)

    rows, cols = _candidate_pairs(gs)

    # Measure each unordered pair once
    upper = rows < cols
    rows, cols = rows[upper], cols[upper]

    geom = gs.values
    lengths = np.array([
        _shared_boundary_length(geom[i], geom[j]) for i, j in zip(rows, cols)
    ], dtype=np.float64)

    all_rows = np.concatenate([rows, cols])
    all_cols = np.concatenate([cols, rows])
    all_lengths = np.concatenate([lengths, lengths])

    W = sparse.csr_matrix(
        (all_lengths, (all_rows, all_cols)), shape=(n_units, n_units)
    )
    W = as_weights_matrix(W)

    if verbose:
        n_contact = int((lengths > 0).sum())
        print(f"  ✓ {n_contact}/{len(lengths)} candidate pairs share a boundary")
        if n_contact > 0:
            pos = lengths[lengths > 0]
            print(f"    Length range: {pos.min():.1f} – {pos.max():.1f}")

    return apply_normalization(
        W, row=row_normalize, spectral=spectral_normalize,
        tol=eig_tol, maxiter=eig_maxiter,
    )
