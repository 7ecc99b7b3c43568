"""
sdpd_weights.processing - Normalization of spatial weights matrices
"""

from .normalization import (
    row_normalize,
    spectral_normalize,
    leading_eigenvalue,
    apply_normalization,
)

__all__ = [
    'row_normalize',
    'spectral_normalize',
    'leading_eigenvalue',
    'apply_normalization',
]
