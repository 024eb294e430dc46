"""
Linear algebra primitives for symmetric positive-definite matrices.

All inversions go through the Cholesky factor and fail loudly with
NumericalError when a matrix that must be positive definite is not.
"""

from bayesreg.linalg.spd import (
    SPD_TOLERANCE,
    as_matrix,
    as_vector,
    check_positive_definite,
    cholesky,
    inner,
    inv_spd,
    is_positive_definite,
    log_det_spd,
    matvec,
    outer,
    quad_form,
    solve_spd,
    symmetrize,
)

__all__ = [
    "SPD_TOLERANCE",
    "as_matrix",
    "as_vector",
    "check_positive_definite",
    "cholesky",
    "inner",
    "inv_spd",
    "is_positive_definite",
    "log_det_spd",
    "matvec",
    "outer",
    "quad_form",
    "solve_spd",
    "symmetrize",
]
