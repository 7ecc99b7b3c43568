"""
orders.py - Higher-order contiguity

Expands a first-order adjacency relation to neighbors of exact order m:
unit j is an order-m neighbor of i when the shortest path between them
in the contiguity graph has exactly m links.
"""
from __future__ import annotations

from typing import Iterator, List

import numpy as np
from scipy import sparse

from sdpd_weights.data.config import InvalidInputShape, NumericDomainError, ValidationError
from sdpd_weights.processing.normalization import apply_normalization
from sdpd_weights.spatial.shared.utils import (
    as_weights_matrix,
    binarize,
    neighbor_lists_to_matrix,
)


def _first_order(source=None, queen: bool = True, neighbors=None) -> sparse.csr_matrix:
    """
    Resolve the first-order adjacency.

    ``source`` is polygons (GeoDataFrame / GeoSeries / shapely sequence)
    or a square adjacency matrix (sparse, ndarray or nested list of 0/1).
    Neighbor index lists are only accepted through ``neighbors``.
    """
    import geopandas as gpd

    if (source is None) == (neighbors is None):
        raise ValidationError("Pass exactly one of source or neighbors")

    if neighbors is not None:
        return neighbor_lists_to_matrix(list(neighbors))

    if isinstance(source, (gpd.GeoDataFrame, gpd.GeoSeries)):
        from .graph import contiguity_matrix
        return contiguity_matrix(source, queen=queen, verbose=False)

    if sparse.issparse(source):
        return binarize(source)

    if not isinstance(source, np.ndarray):
        items = list(source)
        if len(items) > 0 and hasattr(items[0], 'geom_type'):
            from .graph import contiguity_matrix
            return contiguity_matrix(items, queen=queen, verbose=False)
        try:
            source = np.asarray(items, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise InvalidInputShape(
                "Adjacency must be a square matrix; pass neighbor index "
                "lists with neighbors="
            ) from e

    if source.ndim != 2 or source.shape[0] != source.shape[1]:
        raise InvalidInputShape(f"Adjacency must be a square matrix, got shape {source.shape}")
    return binarize(source)


def _expand(A: sparse.csr_matrix) -> Iterator[sparse.csr_matrix]:
    """
    Breadth-first expansion on boolean sparse matrices.

    Yields order 1, 2, ... and stops once the frontier is empty.
    order k+1 = (order-k frontier reached through A) minus all pairs
    already seen at orders <= k, minus the diagonal.
    """
    n = A.shape[0]
    A_bool = A.astype(bool).tocsr()

    visited = (sparse.identity(n, format='csr', dtype=bool) + A_bool).tocsr()
    frontier = A_bool

    while frontier.nnz > 0:
        yield frontier
        reached = (frontier @ A_bool).astype(bool)
        new = (reached > visited).tocsr()
        new.eliminate_zeros()
        visited = (visited + new).tocsr()
        frontier = new


def _empty(n: int) -> sparse.csr_matrix:
    return sparse.csr_matrix((n, n), dtype=np.float64)


def neighbor_order_matrix(source=None,
                          m: int = 1,
                          queen: bool = True,
                          row_normalize: bool = False,
                          verbose: bool = True,
                          neighbors=None) -> sparse.csr_matrix:
    """
    Build the binary matrix of order-m neighbors.

    Parameters
    ----------
    source : polygons or adjacency matrix
        Polygons are converted with :func:`contiguity_matrix`. A matrix
        (sparse, ndarray or nested list) is treated as first-order
        adjacency (non-zeros become links).
    m : int, default=1
        Neighbor order (>= 1). m=1 returns the first-order relation.
    queen : bool, default=True
        Contiguity rule used when ``source`` is polygons
    row_normalize : bool, default=False
        Row-standardize the result (applied last)
    verbose : bool, default=True
        Print progress
    neighbors : list of lists, optional
        Per unit, the indices of its first-order neighbors. Use instead
        of ``source``.

    Returns
    -------
    sparse.csr_matrix
        (n × n) matrix, entry (i, j) = 1 iff the shortest path from i to
        j has exactly m links. Unreachable pairs stay zero.

    Examples
    --------
    >>> W_2 = neighbor_order_matrix(districts, m=2)
    >>> W_3 = neighbor_order_matrix(W_1, 3, row_normalize=True)
    >>> W_2 = neighbor_order_matrix(neighbors=[[1, 2], [0], [0]], m=2)
    """
    if isinstance(m, bool) or not isinstance(m, (int, np.integer)) or m < 1:
        raise NumericDomainError(f"Neighbor order m must be a positive integer, got {m!r}")

    if verbose:
        print(f"\n[Neighbor Orders] Building order-{m} neighbor matrix...")

    A = _first_order(source, queen=queen, neighbors=neighbors)
    W = None
    for order, O in enumerate(_expand(A), start=1):
        if order == m:
            W = as_weights_matrix(O.astype(np.float64))
            break
    if W is None:
        W = _empty(A.shape[0])

    if verbose:
        degrees = np.diff(W.indptr)
        print(f"  ✓ Order-{m} matrix: {W.shape[0]} units, {W.nnz} directed links")
        if W.shape[0] > 0:
            print(f"    Mean degree: {degrees.mean():.1f}")

    return apply_normalization(W, row=row_normalize)


def all_neighbor_orders(source=None,
                        max_order: int = 1,
                        queen: bool = True,
                        neighbors=None) -> List[sparse.csr_matrix]:
    """
    Exact-order neighbor matrices for orders 1..max_order.

    Orders beyond the diameter of the contiguity graph are all-zero.
    The matrices are pairwise disjoint and their sum covers every
    reachable pair within max_order links exactly once.

    Parameters
    ----------
    source : polygons or adjacency matrix
    max_order : int, default=1
        Highest order to compute
    queen : bool, default=True
    neighbors : list of lists, optional
        First-order neighbor index lists, instead of ``source``

    Returns
    -------
    list of sparse.csr_matrix
        Element k-1 is the order-k matrix
    """
    if isinstance(max_order, bool) or not isinstance(max_order, (int, np.integer)) or max_order < 1:
        raise NumericDomainError(f"max_order must be a positive integer, got {max_order!r}")

    A = _first_order(source, queen=queen, neighbors=neighbors)
    n = A.shape[0]
    if n == 0:
        raise ValidationError("Adjacency has no units")

    orders = []
    for O in _expand(A):
        orders.append(as_weights_matrix(O.astype(np.float64)))
        if len(orders) == max_order:
            break
    orders.extend(_empty(n) for _ in range(max_order - len(orders)))
    return orders
