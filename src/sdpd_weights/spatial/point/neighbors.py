"""
neighbors.py - k-nearest-neighbor weights

Selects, for every unit, the k closest other units from a distance
matrix. The relation is directed: j may be among i's nearest neighbors
without i being among j's, so the result is generally asymmetric.
"""
from __future__ import annotations

import numpy as np
from scipy import sparse

from sdpd_weights.data.config import NumericDomainError
from sdpd_weights.processing.normalization import apply_normalization
from sdpd_weights.spatial.shared.utils import as_weights_matrix, validate_distance_matrix


def _nearest_in_row(d_row: np.ndarray, i: int, k: int) -> np.ndarray:
    """
    Column indices of the k smallest non-zero distances in one row.

    Candidates exclude the diagonal and zero distances. A stable sort
    breaks ties by ascending column index.
    """
    candidates = np.flatnonzero(d_row > 0)
    candidates = candidates[candidates != i]
    order = np.argsort(d_row[candidates], kind='stable')
    return candidates[order[:k]]


def knn_weights(distances,
                k: int = 5,
                row_normalize: bool = False,
                spectral_normalize: bool = False,
                eig_tol: float = 0.0,
                eig_maxiter: int | None = None,
                verbose: bool = True) -> sparse.csr_matrix:
    """
    Binary k-nearest-neighbor weights from a distance matrix.

    Parameters
    ----------
    distances : np.ndarray or scipy.sparse matrix
        Symmetric (n × n) distance matrix with zero diagonal
    k : int, default=5
        Number of neighbors per unit. Units with fewer than k candidates
        (non-zero distances) keep all of them.
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
        (n × n) matrix, w_ij = 1 iff j is one of the k nearest units to i

    Examples
    --------
    >>> W_knn = knn_weights(dist_m, k=5)
    >>> np.diff(W_knn.indptr)   # neighbors per unit
    """
    if isinstance(k, bool) or not isinstance(k, (int, np.integer)) or k < 1:
        raise NumericDomainError(f"k must be a positive integer, got {k!r}")

    d = validate_distance_matrix(distances)
    n_units = d.shape[0]

    if verbose:
        print(f"\n[KNN] Selecting {k} nearest neighbors for {n_units} units...")

    # Rows are independent
    selected = [_nearest_in_row(d[i], i, int(k)) for i in range(n_units)]

    counts = np.array([len(s) for s in selected], dtype=np.int64)
    rows = np.repeat(np.arange(n_units), counts)
    cols = np.concatenate(selected) if n_units > 0 else np.array([], dtype=np.int64)
    data = np.ones(len(rows), dtype=np.float64)

    W = sparse.csr_matrix((data, (rows, cols)), shape=(n_units, n_units))
    W = as_weights_matrix(W)

    if verbose:
        n_short = int((counts < k).sum())
        print(f"  ✓ KNN matrix: {W.nnz} directed links")
        if n_short > 0:
            print(f"  ⚠ {n_short} unit(s) have fewer than {k} candidates")

    return apply_normalization(
        W, row=row_normalize, spectral=spectral_normalize,
        tol=eig_tol, maxiter=eig_maxiter,
    )
