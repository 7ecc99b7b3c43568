"""
kernels.py - Distance-decay weights

Transforms a distance matrix into a weights matrix with one of three
decay functions:

- inverse:      w_ij = d_ij^(-power)
- exponential:  w_ij = exp(-decay * d_ij)
- doubled:      w_ij = (1 - (d_ij / D)^power)^power for d_ij <= D

Cut-off convention: the inverse and exponential kernels keep pairs with
d_ij < cutoff and set d_ij >= cutoff to zero. The double-power kernel is
defined on 0 <= d_ij <= D and is exactly zero at d_ij = D, so both
conventions agree there. The diagonal is always zero.
"""
from __future__ import annotations

import numpy as np
from scipy import sparse

from sdpd_weights.data.config import NumericDomainError, resolve_kernel
from sdpd_weights.processing.normalization import apply_normalization
from sdpd_weights.spatial.shared.utils import (
    as_weights_matrix,
    check_positive,
    validate_distance_matrix,
)

DEFAULT_POWER = {
    'inverse': 1.0,
    'exponential': 1.0,
    'doubled': 2.0,
}


def _off_diagonal(n: int) -> np.ndarray:
    return ~np.eye(n, dtype=bool)


def _finish(W: np.ndarray, row_normalize: bool, spectral_normalize: bool,
            eig_tol: float, eig_maxiter: int | None) -> sparse.csr_matrix:
    np.fill_diagonal(W, 0.0)
    return apply_normalization(
        as_weights_matrix(W), row=row_normalize, spectral=spectral_normalize,
        tol=eig_tol, maxiter=eig_maxiter,
    )


def inverse_distance_weights(distances,
                             cutoff: float | None = None,
                             power: float = 1.0,
                             row_normalize: bool = False,
                             spectral_normalize: bool = False,
                             eig_tol: float = 0.0,
                             eig_maxiter: int | None = None) -> sparse.csr_matrix:
    """
    Inverse-distance weights, w_ij = d_ij^(-power).

    Parameters
    ----------
    distances : np.ndarray or scipy.sparse matrix
        Symmetric (n × n) distance matrix with zero diagonal
    cutoff : float, optional
        Pairs with d_ij >= cutoff get weight zero. None keeps all pairs.
    power : float, default=1.0
        Decay exponent (> 0)
    row_normalize : bool, default=False
        Row-standardize the result
    spectral_normalize : bool, default=False
        Divide by the leading eigenvalue
    eig_tol, eig_maxiter
        Eigen solver budget for spectral normalization

    Returns
    -------
    sparse.csr_matrix
        (n × n) weights matrix with zero diagonal

    Raises
    ------
    NumericDomainError
        If power or cutoff is not positive, or two distinct units are at
        distance zero (d^-power undefined)

    Examples
    --------
    >>> W = inverse_distance_weights(dist_m, cutoff=100000)
    >>> W2 = inverse_distance_weights(dist_km, 200, power=2)
    """
    power = check_positive('power', power)
    d = validate_distance_matrix(distances)
    off = _off_diagonal(d.shape[0])

    if np.any(d[off] == 0):
        n_zero = int((d[off] == 0).sum()) // 2
        raise NumericDomainError(
            f"{n_zero} pair(s) of distinct units are at distance zero; "
            f"inverse-distance weights are undefined"
        )

    keep = off
    if cutoff is not None:
        cutoff = check_positive('cutoff', cutoff)
        keep = off & (d < cutoff)

    W = np.zeros_like(d)
    W[keep] = d[keep] ** (-power)
    return _finish(W, row_normalize, spectral_normalize, eig_tol, eig_maxiter)


def exponential_distance_weights(distances,
                                 cutoff: float | None = None,
                                 decay: float = 1.0,
                                 row_normalize: bool = False,
                                 spectral_normalize: bool = False,
                                 eig_tol: float = 0.0,
                                 eig_maxiter: int | None = None) -> sparse.csr_matrix:
    """
    Exponential-decay weights, w_ij = exp(-decay * d_ij).

    The diagonal, where the formula gives exp(0) = 1, is set to zero.

    Parameters
    ----------
    distances : np.ndarray or scipy.sparse matrix
        Symmetric (n × n) distance matrix with zero diagonal
    cutoff : float, optional
        Pairs with d_ij >= cutoff get weight zero. None keeps all pairs.
    decay : float, default=1.0
        Decay rate (> 0), in inverse distance units
    row_normalize, spectral_normalize, eig_tol, eig_maxiter
        See :func:`inverse_distance_weights`

    Returns
    -------
    sparse.csr_matrix
        (n × n) weights matrix with zero diagonal

    Examples
    --------
    >>> W = exponential_distance_weights(dist_km, 200, decay=0.001)
    """
    decay = check_positive('decay', decay)
    d = validate_distance_matrix(distances)

    W = np.exp(-decay * d)
    if cutoff is not None:
        cutoff = check_positive('cutoff', cutoff)
        W[d >= cutoff] = 0.0
    return _finish(W, row_normalize, spectral_normalize, eig_tol, eig_maxiter)


def double_power_distance_weights(distances,
                                  cutoff: float | None = None,
                                  power: float = 2.0,
                                  row_normalize: bool = False,
                                  spectral_normalize: bool = False,
                                  eig_tol: float = 0.0,
                                  eig_maxiter: int | None = None) -> sparse.csr_matrix:
    """
    Double-power weights, w_ij = (1 - (d_ij / D)^power)^power for d_ij <= D.

    Parameters
    ----------
    distances : np.ndarray or scipy.sparse matrix
        Symmetric (n × n) distance matrix with zero diagonal
    cutoff : float, optional
        Band width D. Defaults to the largest distance in the matrix,
        so the farthest pair gets weight exactly zero.
    power : float, default=2.0
        Exponent (> 0)
    row_normalize, spectral_normalize, eig_tol, eig_maxiter
        See :func:`inverse_distance_weights`

    Returns
    -------
    sparse.csr_matrix
        (n × n) weights matrix with zero diagonal

    Examples
    --------
    >>> W = double_power_distance_weights(dist_km, 100)
    >>> W3 = double_power_distance_weights(dist_km, 200, power=3)
    """
    power = check_positive('power', power)
    d = validate_distance_matrix(distances)

    if cutoff is None:
        cutoff = float(d.max())
        if not cutoff > 0:
            raise NumericDomainError(
                "All distances are zero; the double-power band width is undefined"
            )
    cutoff = check_positive('cutoff', cutoff)

    inside = d <= cutoff
    W = np.zeros_like(d)
    W[inside] = (1.0 - (d[inside] / cutoff) ** power) ** power
    return _finish(W, row_normalize, spectral_normalize, eig_tol, eig_maxiter)


_KERNELS = {
    'inverse': (inverse_distance_weights, 'power'),
    'exponential': (exponential_distance_weights, 'decay'),
    'doubled': (double_power_distance_weights, 'power'),
}


def distance_weights(distances,
                     cutoff: float | None = None,
                     kernel: str = 'inverse',
                     power: float | None = None,
                     row_normalize: bool = False,
                     spectral_normalize: bool = False,
                     eig_tol: float = 0.0,
                     eig_maxiter: int | None = None) -> sparse.csr_matrix:
    """
    Distance-decay weights with the kernel chosen by name.

    Gives exactly the same matrix as calling the kernel-specific
    function with the same parameters.

    Parameters
    ----------
    distances : np.ndarray or scipy.sparse matrix
        Symmetric (n × n) distance matrix with zero diagonal
    cutoff : float, optional
        Distance cut-off (band width D for 'doubled')
    kernel : str, default='inverse'
        'inverse', 'exponential' or 'doubled' ('expo', 'double' and
        'doublepower' are accepted aliases)
    power : float, optional
        Kernel parameter: exponent for 'inverse' (default 1) and
        'doubled' (default 2), decay rate for 'exponential' (default 1)
    row_normalize, spectral_normalize, eig_tol, eig_maxiter
        See :func:`inverse_distance_weights`

    Returns
    -------
    sparse.csr_matrix
        (n × n) weights matrix with zero diagonal

    Examples
    --------
    >>> W_a = distance_weights(dist_km, 100, kernel='exponential')
    >>> W_b = exponential_distance_weights(dist_km, 100)
    >>> (W_a != W_b).nnz
    0
    """
    name = resolve_kernel(kernel)
    func, param = _KERNELS[name]
    value = DEFAULT_POWER[name] if power is None else power

    return func(
        distances,
        cutoff=cutoff,
        row_normalize=row_normalize,
        spectral_normalize=spectral_normalize,
        eig_tol=eig_tol,
        eig_maxiter=eig_maxiter,
        **{param: value},
    )
