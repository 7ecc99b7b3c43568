# src/sdpd_weights/__init__.py

"""
sdpd_weights - Spatial weights matrices for spatial dynamic panel models
"""

# Configuration and errors
from .data.config import (
    WeightsConfig,
    WeightsError,
    ValidationError,
    InvalidInputShape,
    DegenerateGeometry,
    NumericDomainError,
    ConvergenceFailure,
)

# Import submodules (spatial before processing: builders import the normalizers)
from . import data
from . import spatial
from . import processing

from .spatial.sources import (
    SpatialWeights,
    WeightsSource,
    FromGeometry,
    FromDistanceMatrix,
)

__version__ = '0.1.0'

__all__ = [
    # Core classes
    'WeightsConfig',
    'SpatialWeights',
    'WeightsSource',
    'FromGeometry',
    'FromDistanceMatrix',

    # Exceptions
    'WeightsError',
    'ValidationError',
    'InvalidInputShape',
    'DegenerateGeometry',
    'NumericDomainError',
    'ConvergenceFailure',

    # Submodules
    'data',
    'processing',
    'spatial',
]
