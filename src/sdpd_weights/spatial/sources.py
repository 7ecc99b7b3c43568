"""
sources.py - Weights sources and the SpatialWeights container

A weights source wraps the input the caller has (polygons or a distance
matrix) and builds a SpatialWeights from a WeightsConfig:

    FromGeometry(districts).build(WeightsConfig(order=2))
    FromDistanceMatrix(dist_km).build(WeightsConfig(kernel='doubled', cutoff=100))

The caller picks the source class; nothing is inferred from input types.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

import numpy as np
import pandas as pd
from scipy import sparse

from sdpd_weights.data.config import ValidationError, WeightsConfig
from sdpd_weights.processing.normalization import apply_normalization
from sdpd_weights.spatial.shared.utils import (
    as_weights_matrix,
    to_neighbor_lists,
    validate_distance_matrix,
)


@dataclass
class SpatialWeights:
    """
    Stores a spatial weights matrix with its unit labels.

    Attributes
    ----------
    matrix : sparse.csr_matrix
        Weights matrix (n_units × n_units), zero diagonal
    unit_index : pd.Index
        Unit labels aligned to matrix rows/columns
    method : str
        How the matrix was built ('contiguity', 'shared_boundary',
        'inverse', 'exponential', 'doubled', 'knn')
    params : dict
        Options used to build the matrix
    """
    matrix: sparse.csr_matrix
    unit_index: pd.Index
    method: str
    params: dict = field(default_factory=dict)

    def __post_init__(self):
        self.matrix = as_weights_matrix(self.matrix)
        if len(self.unit_index) != self.matrix.shape[0]:
            raise ValidationError(
                f"{len(self.unit_index)} unit labels for a "
                f"{self.matrix.shape[0]}-unit matrix"
            )

    @property
    def n_units(self) -> int:
        return self.matrix.shape[0]

    @property
    def n_links(self) -> int:
        """Directed link count (non-zero entries)."""
        return self.matrix.nnz

    @property
    def mean_degree(self) -> float:
        return float(np.diff(self.matrix.indptr).mean()) if self.n_units else 0.0

    @property
    def isolated_units(self) -> pd.Index:
        """Labels of units with an all-zero row."""
        degrees = np.diff(self.matrix.indptr)
        return self.unit_index[degrees == 0]

    @property
    def is_symmetric(self) -> bool:
        diff = self.matrix - self.matrix.T
        return bool(diff.nnz == 0 or np.allclose(diff.data, 0.0))

    def get_neighbors(self, unit) -> List:
        """Get neighbor labels for a given unit label."""
        if unit not in self.unit_index:
            raise ValidationError(f"Unit '{unit}' not in weights")
        idx = self.unit_index.get_loc(unit)
        return self.unit_index[self.matrix[idx].indices].tolist()

    def to_neighbor_lists(self) -> List[np.ndarray]:
        """Per-unit neighbor positions (see ``to_neighbor_lists``)."""
        return to_neighbor_lists(self.matrix)

    def to_dense(self) -> np.ndarray:
        return self.matrix.toarray()

    def to_edge_list(self) -> pd.DataFrame:
        """Convert to a (unit_i, unit_j, weight) edge list DataFrame."""
        coo = self.matrix.tocoo()
        order = np.lexsort((coo.col, coo.row))
        return pd.DataFrame({
            'unit_i': self.unit_index[coo.row[order]],
            'unit_j': self.unit_index[coo.col[order]],
            'weight': coo.data[order],
        })

    def summary(self) -> Dict:
        """Get weights summary statistics."""
        degrees = np.diff(self.matrix.indptr)
        weights = self.matrix.data
        return {
            'method': self.method,
            'n_units': self.n_units,
            'n_links': self.n_links,
            'mean_degree': self.mean_degree,
            'min_degree': int(degrees.min()) if self.n_units else 0,
            'max_degree': int(degrees.max()) if self.n_units else 0,
            'isolated_units': int((degrees == 0).sum()),
            'symmetric': self.is_symmetric,
            'min_weight': float(weights.min()) if len(weights) else 0.0,
            'max_weight': float(weights.max()) if len(weights) else 0.0,
            'params': self.params,
        }

    def __repr__(self) -> str:
        s = self.summary()
        return (
            f"SpatialWeights (method={s['method']}, "
            f"{s['n_units']} units, {s['n_links']} links, "
            f"mean degree={s['mean_degree']:.1f})"
        )


class WeightsSource(ABC):
    """Input from which a SpatialWeights can be built."""

    unit_index: pd.Index

    @property
    def n_units(self) -> int:
        return len(self.unit_index)

    @abstractmethod
    def build(self, config: Optional[WeightsConfig] = None,
              verbose: bool = True) -> SpatialWeights:
        """Build weights according to ``config`` (defaults if None)."""


class FromGeometry(WeightsSource):
    """
    Contiguity-based weights from polygons.

    ``config.shared_boundary`` selects boundary-length weights; otherwise
    the binary order-``config.order`` contiguity matrix is built with the
    ``config.queen`` rule.
    """

    def __init__(self, geometries):
        from .polygon.graph import _as_geoseries, validate_geometries

        validate_geometries(geometries)
        self.geometries, self.unit_index = _as_geoseries(geometries)

    def build(self, config: Optional[WeightsConfig] = None,
              verbose: bool = True) -> SpatialWeights:
        from .polygon.boundaries import shared_boundary_matrix
        from .polygon.orders import neighbor_order_matrix

        config = replace(config or WeightsConfig()).validate()

        if config.shared_boundary:
            if config.order != 1:
                raise ValidationError("Shared-boundary weights are first order only")
            W = shared_boundary_matrix(self.geometries, verbose=verbose)
            method = 'shared_boundary'
            params = {}
        else:
            W = neighbor_order_matrix(
                self.geometries, m=config.order, queen=config.queen, verbose=verbose
            )
            method = 'contiguity'
            params = {'order': config.order, 'queen': config.queen}

        W = apply_normalization(
            W, row=config.row_normalize, spectral=config.spectral_normalize,
            tol=config.eig_tol, maxiter=config.eig_maxiter,
        )
        params.update(row_normalize=config.row_normalize,
                      spectral_normalize=config.spectral_normalize)
        return SpatialWeights(W, self.unit_index, method, params)


class FromDistanceMatrix(WeightsSource):
    """
    Distance-based weights from a precomputed distance matrix.

    ``config.k`` selects k-nearest-neighbor weights; otherwise the decay
    kernel ``config.kernel`` is applied with ``config.cutoff`` and
    ``config.power``.
    """

    def __init__(self, distances, unit_index=None):
        self.distances = validate_distance_matrix(distances)
        n = self.distances.shape[0]
        self.unit_index = pd.RangeIndex(n) if unit_index is None else pd.Index(unit_index)
        if len(self.unit_index) != n:
            raise ValidationError(
                f"{len(self.unit_index)} unit labels for a {n}-unit distance matrix"
            )

    @classmethod
    def from_coordinates(cls, coords, metric: str = 'euclidean',
                         unit_index=None) -> 'FromDistanceMatrix':
        """Source built from unit coordinates (see distance_matrix_from_coordinates)."""
        from .point.distances import distance_matrix_from_coordinates

        return cls(distance_matrix_from_coordinates(coords, metric=metric),
                   unit_index=unit_index)

    @classmethod
    def from_geometries(cls, geometries, metric: str | None = None,
                        verbose: bool = True) -> 'FromDistanceMatrix':
        """Source built from unit centroid distances."""
        from .point.distances import distance_matrix_from_geometries
        from .polygon.graph import _as_geoseries

        _, unit_index = _as_geoseries(geometries)
        d = distance_matrix_from_geometries(geometries, metric=metric, verbose=verbose)
        return cls(d, unit_index=unit_index)

    def build(self, config: Optional[WeightsConfig] = None,
              verbose: bool = True) -> SpatialWeights:
        from .point.kernels import DEFAULT_POWER, distance_weights
        from .point.neighbors import knn_weights

        config = replace(config or WeightsConfig()).validate()
        norm = dict(
            row_normalize=config.row_normalize,
            spectral_normalize=config.spectral_normalize,
            eig_tol=config.eig_tol,
            eig_maxiter=config.eig_maxiter,
        )

        if config.k is not None:
            W = knn_weights(self.distances, k=config.k, verbose=verbose, **norm)
            method = 'knn'
            params = {'k': config.k}
        else:
            power = DEFAULT_POWER[config.kernel] if config.power is None else config.power
            if verbose:
                print(f"\n[Distance Weights] kernel='{config.kernel}', "
                      f"cutoff={config.cutoff}, power={power}")
            W = distance_weights(self.distances, cutoff=config.cutoff,
                                 kernel=config.kernel, power=power, **norm)
            method = config.kernel
            params = {'cutoff': config.cutoff, 'power': power}

        params.update(row_normalize=config.row_normalize,
                      spectral_normalize=config.spectral_normalize)
        weights = SpatialWeights(W, self.unit_index, method, params)

        if verbose:
            print(f"  ✓ {weights}")
        return weights
