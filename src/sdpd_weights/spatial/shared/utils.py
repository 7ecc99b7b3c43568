# src/sdpd_weights/spatial/shared/utils.py

"""
utils.py - Shared utilities for weights construction

Sparse-matrix plumbing and input validation used by both the
polygon-based and the distance-based builders.
"""
from __future__ import annotations

from typing import List, Sequence, Union

import numpy as np
from scipy import sparse

from sdpd_weights.data.config import InvalidInputShape, NumericDomainError, ValidationError

MatrixLike = Union[np.ndarray, sparse.spmatrix]


def as_weights_matrix(W: MatrixLike) -> sparse.csr_matrix:
    """
    Copy any square matrix into a float64 CSR weights matrix.

    The diagonal is set to exactly zero and explicit zeros are removed,
    so every builder returns a matrix with the same guarantees.

    Parameters
    ----------
    W : np.ndarray or scipy.sparse matrix
        Square matrix

    Returns
    -------
    sparse.csr_matrix
        Fresh (n × n) float64 matrix with zero diagonal
    """
    if sparse.issparse(W):
        out = sparse.csr_matrix(W, dtype=np.float64, copy=True)
    else:
        arr = np.asarray(W, dtype=np.float64)
        if arr.ndim != 2:
            raise InvalidInputShape(f"Expected a 2-D matrix, got {arr.ndim} dimension(s)")
        out = sparse.csr_matrix(arr)

    if out.shape[0] != out.shape[1]:
        raise InvalidInputShape(f"Weights matrix must be square, got shape {out.shape}")

    out = out.tolil()
    out.setdiag(0.0)
    out = out.tocsr()
    out.eliminate_zeros()
    out.sort_indices()
    return out


def validate_distance_matrix(distances: MatrixLike,
                             n_units: int | None = None,
                             atol: float = 1e-8) -> np.ndarray:
    """
    Validate a distance matrix and return a dense float64 copy.

    Parameters
    ----------
    distances : np.ndarray or scipy.sparse matrix
        Candidate (n × n) distance matrix
    n_units : int, optional
        Expected number of units (e.g. the number of geometries)
    atol : float, default=1e-8
        Absolute tolerance of the symmetry check

    Returns
    -------
    np.ndarray
        Validated distances (n × n)

    Raises
    ------
    InvalidInputShape
        Non-square, unit-count mismatch, non-finite, negative,
        non-zero diagonal or asymmetric input.
    """
    if sparse.issparse(distances):
        d = distances.toarray().astype(np.float64)
    else:
        d = np.array(distances, dtype=np.float64, copy=True)

    if d.ndim != 2 or d.shape[0] != d.shape[1]:
        raise InvalidInputShape(f"Distance matrix must be square, got shape {d.shape}")
    if n_units is not None and d.shape[0] != n_units:
        raise InvalidInputShape(
            f"Distance matrix has {d.shape[0]} units but {n_units} were expected"
        )
    if not np.all(np.isfinite(d)):
        raise InvalidInputShape("Distance matrix contains NaN or infinite values")
    if np.any(d < 0):
        n_neg = int((d < 0).sum())
        raise InvalidInputShape(f"Distance matrix contains {n_neg} negative entries")
    if np.any(np.diag(d) != 0):
        raise InvalidInputShape("Distance matrix must have a zero diagonal")
    if not np.allclose(d, d.T, rtol=0.0, atol=atol):
        raise InvalidInputShape("Distance matrix must be symmetric")

    return d


def check_positive(name: str, value: float) -> float:
    """Raise NumericDomainError unless value is a positive finite number."""
    if value is None or not np.isfinite(value) or not value > 0:
        raise NumericDomainError(f"{name} must be a positive number, got {value!r}")
    return float(value)


def safe_divide(numerator: np.ndarray,
                denominator: np.ndarray,
                fill_value: float = 0.0) -> np.ndarray:
    """
    Safely divide arrays, handling division by zero.

    Parameters
    ----------
    numerator : np.ndarray
        Numerator values
    denominator : np.ndarray
        Denominator values
    fill_value : float, default=0.0
        Value to use when denominator is zero

    Returns
    -------
    np.ndarray
        Result of division
    """
    with np.errstate(divide='ignore', invalid='ignore'):
        result = np.asarray(numerator / denominator, dtype=np.float64)
        result[~np.isfinite(result)] = fill_value

    return result


def row_sums(W: sparse.spmatrix) -> np.ndarray:
    """Row sums of a sparse matrix as a flat array."""
    return np.asarray(W.sum(axis=1)).ravel()


def to_neighbor_lists(W: MatrixLike) -> List[np.ndarray]:
    """
    Convert a weights matrix to per-unit neighbor index arrays.

    Parameters
    ----------
    W : np.ndarray or scipy.sparse matrix
        Weights matrix

    Returns
    -------
    list of np.ndarray
        Entry i holds the sorted column indices of the non-zero
        entries of row i (empty for isolated units)

    Examples
    --------
    >>> nbrs = to_neighbor_lists(W)
    >>> nbrs[0]
    array([1, 2])
    """
    W = as_weights_matrix(W)
    return [
        W.indices[W.indptr[i]:W.indptr[i + 1]].copy()
        for i in range(W.shape[0])
    ]


def neighbor_lists_to_matrix(neighbors: Sequence[Sequence[int]],
                             n_units: int | None = None) -> sparse.csr_matrix:
    """
    Build a binary adjacency matrix from neighbor index lists.

    Self references are discarded. Lists need not be symmetric; the
    result mirrors them exactly.

    Parameters
    ----------
    neighbors : sequence of sequences of int
        Entry i lists the neighbors of unit i
    n_units : int, optional
        Number of units (defaults to len(neighbors))

    Returns
    -------
    sparse.csr_matrix
        Binary (n × n) matrix
    """
    n = len(neighbors) if n_units is None else n_units
    if len(neighbors) != n:
        raise InvalidInputShape(f"Got {len(neighbors)} neighbor lists for {n} units")

    rows, cols = [], []
    for i, nbrs in enumerate(neighbors):
        for j in nbrs:
            j = int(j)
            if j < 0 or j >= n:
                raise ValidationError(f"Neighbor index {j} of unit {i} out of range 0..{n - 1}")
            rows.append(i)
            cols.append(j)

    data = np.ones(len(rows), dtype=np.float64)
    adjacency = sparse.csr_matrix(
        (data, (np.asarray(rows, dtype=np.int64), np.asarray(cols, dtype=np.int64))),
        shape=(n, n),
    )
    # Duplicates sum on construction
    adjacency.data[:] = 1.0
    return as_weights_matrix(adjacency)


def binarize(W: MatrixLike) -> sparse.csr_matrix:
    """Return a 0/1 copy of W with the sparsity pattern of its non-zeros."""
    B = as_weights_matrix(W)
    B.data = np.ones_like(B.data)
    return B
