"""
data - Configuration and error types

This module contains the options record shared by every weights
builder and the exception hierarchy they raise.
"""

from .config import (
    WeightsConfig,
    resolve_kernel,
    WeightsError,
    ValidationError,
    InvalidInputShape,
    DegenerateGeometry,
    NumericDomainError,
    ConvergenceFailure,
)

__all__ = [
    # Configuration
    'WeightsConfig',
    'resolve_kernel',

    # Exceptions
    'WeightsError',
    'ValidationError',
    'InvalidInputShape',
    'DegenerateGeometry',
    'NumericDomainError',
    'ConvergenceFailure',
]
