"""
Linear algebra on symmetric positive-definite (SPD) matrices.

Every covariance and precision matrix handled by the inference engine must be
SPD. This module provides the small set of primitives the engine needs, all
routed through the Cholesky decomposition:

    A = L Lᵀ,   L lower triangular with positive diagonal

from which
    A⁻¹      = L⁻ᵀ L⁻¹            (two triangular solves)
    log|A|   = 2 Σ log L_ii
    xᵀ A x   = ||Lᵀ x||²

Vector addition and scaling are plain numpy arithmetic and need no helper.

Positive definiteness is checked against a relative eigenvalue floor:
    λ_min(A) > tol · |λ_max(A)|,   λ_max(A) > 0

with tol = 1e-10 by default (a condition number cap of 1e10). Anything below
is treated as singular and reported as NumericalError.
"""

from typing import Optional
import numpy as np
from numpy.typing import NDArray
from scipy.linalg import cholesky as _scipy_cholesky, solve_triangular, LinAlgError

from bayesreg.errors import DimensionMismatchError, NumericalError

SPD_TOLERANCE = 1e-10
SYMMETRY_TOLERANCE = 1e-8


def as_vector(x, dimension: Optional[int] = None) -> NDArray[np.float64]:
    """
    Coerce input to a 1-D float64 array.

    Parameters
    ----------
    x : array_like
        Vector values
    dimension : int, optional
        Required length. If None, any length is accepted.

    Raises
    ------
    DimensionMismatchError
        If x is not 1-D or has the wrong length.
    """
    arr = np.asarray(x, dtype=np.float64)
    if arr.ndim != 1:
        raise DimensionMismatchError(f"Expected a 1-D vector. Got shape {arr.shape}")
    if dimension is not None and arr.shape[0] != dimension:
        raise DimensionMismatchError(
            f"Expected vector of length {dimension}. Got {arr.shape[0]}"
        )
    return arr


def as_matrix(a, dimension: Optional[int] = None) -> NDArray[np.float64]:
    """
    Coerce input to a square 2-D float64 array.

    Raises
    ------
    DimensionMismatchError
        If a is not square, or not (dimension, dimension) when given.
    """
    arr = np.asarray(a, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
        raise DimensionMismatchError(f"Expected a square matrix. Got shape {arr.shape}")
    if dimension is not None and arr.shape[0] != dimension:
        raise DimensionMismatchError(
            f"Expected matrix of shape ({dimension}, {dimension}). Got {arr.shape}"
        )
    return arr


def inner(u: NDArray[np.float64], v: NDArray[np.float64]) -> float:
    """Inner product uᵀv."""
    u = as_vector(u)
    v = as_vector(v, u.shape[0])
    return float(u @ v)


def outer(u: NDArray[np.float64], v: NDArray[np.float64]) -> NDArray[np.float64]:
    """Outer product u vᵀ."""
    return np.outer(as_vector(u), as_vector(v))


def matvec(a: NDArray[np.float64], x: NDArray[np.float64]) -> NDArray[np.float64]:
    """Matrix-vector product A x."""
    a = np.asarray(a, dtype=np.float64)
    x = as_vector(x)
    if a.ndim != 2 or a.shape[1] != x.shape[0]:
        raise DimensionMismatchError(
            f"Cannot multiply matrix of shape {a.shape} with vector of length {x.shape[0]}"
        )
    return a @ x


def quad_form(x: NDArray[np.float64], a: NDArray[np.float64]) -> float:
    """Quadratic form xᵀ A x."""
    x = as_vector(x)
    a = as_matrix(a, x.shape[0])
    return float(x @ a @ x)


def symmetrize(a: NDArray[np.float64]) -> NDArray[np.float64]:
    """Return ½(A + Aᵀ), removing round-off asymmetry."""
    a = as_matrix(a)
    return 0.5 * (a + a.T)


def is_positive_definite(a: NDArray[np.float64], tol: float = SPD_TOLERANCE) -> bool:
    """
    Check whether a matrix is symmetric positive definite.

    Parameters
    ----------
    a : NDArray[np.float64]
        Candidate matrix, shape (D, D)
    tol : float
        Relative eigenvalue floor.

    Returns
    -------
    bool
        True if A is square, symmetric and its smallest eigenvalue exceeds
        tol · |λ_max|.
    """
    arr = np.asarray(a, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[0] != arr.shape[1] or arr.shape[0] == 0:
        return False
    if not np.all(np.isfinite(arr)):
        return False
    scale = float(np.max(np.abs(arr)))
    if not np.allclose(arr, arr.T, atol=SYMMETRY_TOLERANCE * scale, rtol=0.0):
        return False

    eigenvalues = np.linalg.eigvalsh(symmetrize(arr))
    largest = float(eigenvalues[-1])
    if largest <= 0:
        return False
    return bool(eigenvalues[0] > tol * largest)


def check_positive_definite(a: NDArray[np.float64], tol: float = SPD_TOLERANCE) -> None:
    """
    Raise NumericalError unless A is symmetric positive definite.

    See ``is_positive_definite`` for the exact criterion.
    """
    if not is_positive_definite(a, tol=tol):
        raise NumericalError(
            f"Matrix is singular or not positive definite (tolerance {tol:g})"
        )


def cholesky(a: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Lower Cholesky factor L with A = L Lᵀ.

    Raises
    ------
    NumericalError
        If the decomposition fails.
    """
    a = as_matrix(a)
    try:
        return _scipy_cholesky(symmetrize(a), lower=True)
    except LinAlgError as exc:
        raise NumericalError(f"Cholesky decomposition failed: {exc}") from exc


def inv_spd(a: NDArray[np.float64], tol: float = SPD_TOLERANCE) -> NDArray[np.float64]:
    """
    Invert a symmetric positive-definite matrix.

    Uses A⁻¹ = L⁻ᵀ L⁻¹ computed with triangular solves against the identity,
    then symmetrizes the result.

    Parameters
    ----------
    a : NDArray[np.float64]
        SPD matrix, shape (D, D)
    tol : float
        Relative eigenvalue floor below which A is treated as singular.

    Returns
    -------
    NDArray[np.float64]
        A⁻¹, shape (D, D), exactly symmetric.

    Raises
    ------
    NumericalError
        If A is singular or not positive definite beyond tolerance.
    """
    check_positive_definite(a, tol=tol)
    L = cholesky(a)
    identity = np.eye(L.shape[0])
    L_inv = solve_triangular(L, identity, lower=True)
    return symmetrize(L_inv.T @ L_inv)


def solve_spd(a: NDArray[np.float64], b: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Solve A x = b for SPD A.

    Two triangular solves: L z = b, then Lᵀ x = z.
    """
    L = cholesky(a)
    b = np.asarray(b, dtype=np.float64)
    if b.shape[0] != L.shape[0]:
        raise DimensionMismatchError(
            f"Right-hand side has leading dimension {b.shape[0]}, expected {L.shape[0]}"
        )
    z = solve_triangular(L, b, lower=True)
    return solve_triangular(L.T, z, lower=False)


def log_det_spd(a: NDArray[np.float64]) -> float:
    """
    Log determinant of an SPD matrix.

    log det(A) = 2 * sum(log(diag(L)))
    """
    return float(2.0 * np.sum(np.log(np.diag(cholesky(a)))))
