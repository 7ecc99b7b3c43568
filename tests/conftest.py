"""
conftest.py - Shared test fixtures for sdpd_weights

pytest reads this file before running any test. Every fixture defined
here is injected into tests that ask for it by name.

Geometry layouts used below (unit numbers are row-major positions):

    grid_2x2          grid_3x3            islands
    +---+---+         +---+---+---+       +---+---+     +---+
    | 2 | 3 |         | 6 | 7 | 8 |       | 0 | 1 |     | 2 |
    +---+---+         +---+---+---+       +---+---+     +---+
    | 0 | 1 |         | 3 | 4 | 5 |
    +---+---+         +---+---+---+
                      | 0 | 1 | 2 |
                      +---+---+---+
"""

import geopandas as gpd
import numpy as np
import pytest
from shapely.geometry import Polygon, box

# ===========================================================================
# Helpers
# ===========================================================================


def make_grid(n_rows, n_cols, size=1.0):
    """Unit squares laid out row by row, starting at the bottom-left."""
    return [
        box(c * size, r * size, (c + 1) * size, (r + 1) * size)
        for r in range(n_rows)
        for c in range(n_cols)
    ]


# ===========================================================================
# Fixture 1: polygons
# ===========================================================================


@pytest.fixture
def grid_2x2():
    """Four unit squares in a 2×2 block (0 and 3 touch only at a corner)."""
    return gpd.GeoSeries(make_grid(2, 2))


@pytest.fixture
def grid_3x3():
    """Nine unit squares in a 3×3 block; unit 4 is in the middle."""
    return gpd.GeoSeries(make_grid(3, 3))


@pytest.fixture
def islands():
    """Units 0 and 1 share an edge; unit 2 is far away (isolated)."""
    return gpd.GeoSeries([box(0, 0, 1, 1), box(1, 0, 2, 1), box(10, 10, 11, 11)])


@pytest.fixture
def labelled_grid():
    """2×3 grid as a GeoDataFrame with district codes as the index."""
    geoms = make_grid(2, 3, size=10.0)
    codes = ['DE911', 'DE912', 'DE913', 'DE914', 'DE915', 'DE916']
    return gpd.GeoDataFrame({'name': codes}, geometry=geoms, index=codes)


@pytest.fixture
def bowtie():
    """A self-intersecting (invalid) polygon."""
    return Polygon([(0, 0), (1, 1), (1, 0), (0, 1), (0, 0)])


# ===========================================================================
# Fixture 2: distance matrices
# ===========================================================================


@pytest.fixture
def line_distances():
    """
    Five units on a line at x = 0, 1, 3, 6, 10.

    Distances are integers so cut-offs can be placed exactly on a value.
    """
    x = np.array([0.0, 1.0, 3.0, 6.0, 10.0])
    return np.abs(x[:, None] - x[None, :])


@pytest.fixture
def tie_distances():
    """
    Row 0 has a three-way tie at distance 2 (units 2, 3, 4).

    Unit 1 sits at distance 1 from unit 0.
    """
    d = np.array([
        [0, 1, 2, 2, 2],
        [1, 0, 3, 3, 3],
        [2, 3, 0, 4, 4],
        [2, 3, 4, 0, 4],
        [2, 3, 4, 4, 0],
    ], dtype=float)
    return d


@pytest.fixture
def random_distances():
    """Euclidean distances (meters) between 40 random points in a 500 km box."""
    rng = np.random.default_rng(42)
    xy = rng.uniform(0, 500_000, size=(40, 2))
    d = np.sqrt(((xy[:, None, :] - xy[None, :, :]) ** 2).sum(axis=-1))
    return d


@pytest.fixture
def large_grid_adjacency():
    """Rook adjacency of a 10×10 lattice (100 units), built without geometry."""
    n_side = 10
    n = n_side * n_side
    A = np.zeros((n, n))
    for r in range(n_side):
        for c in range(n_side):
            i = r * n_side + c
            if c + 1 < n_side:
                A[i, i + 1] = A[i + 1, i] = 1
            if r + 1 < n_side:
                A[i, i + n_side] = A[i + n_side, i] = 1
    return A
