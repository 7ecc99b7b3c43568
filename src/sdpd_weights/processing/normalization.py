"""
normalization.py - Normalization methods for spatial weights matrices

Provides row-stochastic and spectral (leading eigenvalue) scaling.
Both return a new matrix and leave their input untouched.
"""

import warnings

import numpy as np
from scipy import sparse
from scipy.sparse.linalg import ArpackError, ArpackNoConvergence, eigs

from sdpd_weights.data.config import ConvergenceFailure, NumericDomainError
from sdpd_weights.spatial.shared.utils import as_weights_matrix, row_sums, safe_divide

# Matrices up to this size are solved densely (ARPACK needs n > 2)
DENSE_EIGEN_MAX_UNITS = 64


def row_normalize(W):
    """
    Row-standardize a weights matrix so every row sums to one.

    Rows of isolated units (row sum zero) stay all-zero.

    Parameters
    ----------
    W : np.ndarray or scipy.sparse matrix
        Weights matrix (n × n)

    Returns
    -------
    sparse.csr_matrix
        Row-stochastic copy of W

    Examples
    --------
    >>> W_rn = row_normalize(W)
    >>> np.asarray(W_rn.sum(axis=1)).ravel()
    array([1., 1., 1., 1.])
    """
    W = as_weights_matrix(W)
    scaling = safe_divide(np.ones(W.shape[0]), row_sums(W))
    W_norm = sparse.diags(scaling).dot(W).tocsr()
    W_norm.eliminate_zeros()
    return W_norm


def leading_eigenvalue(W, tol: float = 0.0, maxiter: int | None = None,
                       max_retries: int = 2) -> float:
    """
    Eigenvalue of W with the largest real part.

    Uses the implicitly restarted Arnoldi method (ARPACK, which='LR').
    For a non-negative matrix this is the Perron root, i.e. the
    spectral radius. Matrices with at most ``DENSE_EIGEN_MAX_UNITS``
    units are solved with a dense eigendecomposition instead. If ARPACK
    does not converge the iteration budget is multiplied by ten and the
    solve is repeated, up to ``max_retries`` times.

    Parameters
    ----------
    W : np.ndarray or scipy.sparse matrix
        Weights matrix (n × n)
    tol : float, default=0.0
        Relative accuracy for ARPACK (0 means machine precision)
    maxiter : int, optional
        Arnoldi update iterations for the first attempt
        (ARPACK default is 10 * n)
    max_retries : int, default=2
        Additional attempts with a larger budget before giving up

    Returns
    -------
    float
        Real part of the leading eigenvalue

    Raises
    ------
    ConvergenceFailure
        If ARPACK has not converged after all retries
    """
    W = as_weights_matrix(W)
    n = W.shape[0]

    if n == 0:
        raise NumericDomainError("Cannot compute eigenvalues of an empty matrix")
    if W.nnz == 0:
        return 0.0

    if n <= DENSE_EIGEN_MAX_UNITS:
        values = np.linalg.eigvals(W.toarray())
        lam = values[np.argmax(values.real)]
    else:
        budget = maxiter if maxiter is not None else 10 * n
        lam = None
        for attempt in range(max_retries + 1):
            try:
                values = eigs(W, k=1, which='LR', tol=tol, maxiter=budget,
                              return_eigenvectors=False)
                lam = values[0]
                break
            except ArpackNoConvergence as e:
                if attempt == max_retries:
                    raise ConvergenceFailure(
                        f"Leading eigenvalue did not converge within {budget} "
                        f"iterations after {max_retries + 1} attempt(s)",
                        maxiter=budget,
                    ) from e
                budget *= 10
            except ArpackError as e:
                raise ConvergenceFailure(f"ARPACK failed: {e}", maxiter=budget) from e

    if abs(lam.imag) > 1e-8 * max(1.0, abs(lam.real)):
        warnings.warn(
            f"Leading eigenvalue has imaginary part {lam.imag:.3g}; using its real part",
            stacklevel=2,
        )
    return float(lam.real)


def spectral_normalize(W, tol: float = 0.0, maxiter: int | None = None,
                       max_retries: int = 2):
    """
    Scale a weights matrix by its leading eigenvalue.

    After scaling the eigenvalue with the largest real part is one, so
    applying the normalization twice is a no-op up to rounding.

    Parameters
    ----------
    W : np.ndarray or scipy.sparse matrix
        Weights matrix (n × n)
    tol, maxiter, max_retries
        Eigen solver budget, see :func:`leading_eigenvalue`

    Returns
    -------
    sparse.csr_matrix
        W / lambda_max

    Raises
    ------
    NumericDomainError
        If the leading eigenvalue is not positive (e.g. all-zero W)
    ConvergenceFailure
        If the eigen solver does not converge
    """
    W = as_weights_matrix(W)
    lam = leading_eigenvalue(W, tol=tol, maxiter=maxiter, max_retries=max_retries)

    if not lam > 0:
        raise NumericDomainError(
            f"Leading eigenvalue is {lam:.6g}; spectral normalization needs a positive value"
        )

    W_norm = W / lam
    return sparse.csr_matrix(W_norm)


def apply_normalization(W, row: bool = False, spectral: bool = False,
                        tol: float = 0.0, maxiter: int | None = None):
    """
    Apply the optional normalizations requested by a builder.

    Row normalization runs first; spectral scaling of a row-stochastic
    matrix then divides by one.
    """
    if row:
        W = row_normalize(W)
    if spectral:
        W = spectral_normalize(W, tol=tol, maxiter=maxiter)
    return W
