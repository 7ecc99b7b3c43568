"""
config.py - Configuration and error types for sdpd_weights

Contains:
- WeightsConfig: Options recognised by every weights construction call
- WeightsError and subclasses: Error taxonomy shared by all builders
"""

from dataclasses import dataclass

import numpy as np

KERNEL_ALIASES = {
    "inverse": "inverse",
    "inv": "inverse",
    "exponential": "exponential",
    "expo": "exponential",
    "exp": "exponential",
    "doubled": "doubled",
    "double": "doubled",
    "doublepower": "doubled",
}


class WeightsError(Exception):
    """Base exception for sdpd_weights errors."""

    pass


class ValidationError(WeightsError):
    """Raised when an option or input fails validation."""

    pass


class InvalidInputShape(ValidationError):
    """Raised for non-square, asymmetric or negative distance input, or mismatched unit counts."""

    pass


class DegenerateGeometry(ValidationError):
    """
    Raised when polygons are missing, empty, invalid or have zero area.

    Attributes
    ----------
    units : list of int
        Positions of every offending geometry.
    """

    def __init__(self, message: str, units=None):
        super().__init__(message)
        self.units = list(units) if units is not None else []


class NumericDomainError(WeightsError, ValueError):
    """Raised when a parameter lies outside the domain of the formula."""

    pass


class ConvergenceFailure(WeightsError):
    """Raised when the eigenvalue solver exhausts its iteration budget."""

    def __init__(self, message: str, maxiter: int | None = None):
        super().__init__(message)
        self.maxiter = maxiter


def resolve_kernel(kernel: str) -> str:
    """
    Map a kernel name or alias to its canonical name.

    Parameters
    ----------
    kernel : str
        'inverse', 'exponential' or 'doubled' (or an accepted alias)

    Returns
    -------
    str
        Canonical kernel name
    """
    key = str(kernel).lower().replace("-", "").replace("_", "")
    if key not in KERNEL_ALIASES:
        raise ValidationError(
            f"Invalid kernel type: {kernel!r}. Use 'inverse', 'exponential' or 'doubled'."
        )
    return KERNEL_ALIASES[key]


@dataclass
class WeightsConfig:
    """
    Options for one weights construction call.

    ``power`` is the kernel parameter: the inverse-distance exponent
    (default 1), the exponential decay rate (default 1) or the
    double-power exponent (default 2). ``None`` selects the kernel default.
    """

    # Contiguity
    order: int = 1
    queen: bool = True
    shared_boundary: bool = False

    # Distance
    cutoff: float | None = None
    power: float | None = None
    kernel: str = "inverse"
    k: int | None = None

    # Normalization
    row_normalize: bool = False
    spectral_normalize: bool = False

    # Eigen solver budget
    eig_tol: float = 0.0
    eig_maxiter: int | None = None

    def validate(self) -> "WeightsConfig":
        """
        Check every option and canonicalise the kernel name.

        Returns
        -------
        WeightsConfig
            self, for chaining
        """
        if isinstance(self.order, bool) or not isinstance(self.order, int) or self.order < 1:
            raise NumericDomainError(f"order must be a positive integer, got {self.order!r}")
        if self.cutoff is not None and not (np.isfinite(self.cutoff) and self.cutoff > 0):
            raise NumericDomainError(f"cutoff must be a positive finite number, got {self.cutoff!r}")
        if self.power is not None and not (np.isfinite(self.power) and self.power > 0):
            raise NumericDomainError(f"power must be a positive finite number, got {self.power!r}")
        if self.k is not None and (
            isinstance(self.k, bool) or not isinstance(self.k, int) or self.k < 1
        ):
            raise NumericDomainError(f"k must be a positive integer, got {self.k!r}")
        if self.eig_tol < 0:
            raise NumericDomainError(f"eig_tol must be non-negative, got {self.eig_tol!r}")
        if self.eig_maxiter is not None and self.eig_maxiter < 1:
            raise NumericDomainError(f"eig_maxiter must be positive, got {self.eig_maxiter!r}")
        self.kernel = resolve_kernel(self.kernel)
        return self
