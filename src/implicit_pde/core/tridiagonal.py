"""
Tridiagonal linear solves.

Two interchangeable methods are provided:

* ``"thomas"``: O(N) forward elimination / back substitution compiled with
  numba (:func:`implicit_pde.core._thomas.thomas_solve`). No pivoting.
* ``"banded"``: :func:`scipy.linalg.solve_banded` (LAPACK gbsv, partial
  pivoting), useful as a cross-check.

Both accept real or complex coefficients; the result dtype is the common
dtype of the inputs.
"""

from __future__ import annotations

from typing import Literal

import numpy as np
import scipy.linalg

from ._thomas import thomas_solve
from .errors import NumericalSingularityError

Method = Literal["thomas", "banded"]
METHODS = ("thomas", "banded")


def _check_shapes(lower, diag, upper, rhs) -> int:
    if diag.ndim != 1 or diag.size < 1:
        raise ValueError("diag must be a non-empty 1-D array")
    n = diag.shape[0]
    if lower.shape != (n - 1,) or upper.shape != (n - 1,):
        raise ValueError(
            f"off-diagonals must have shape ({n - 1},), "
            f"got {lower.shape} and {upper.shape}"
        )
    if rhs.shape != (n,):
        raise ValueError(f"rhs must have shape ({n},), got {rhs.shape}")
    return n


def banded_layout(lower: np.ndarray, diag: np.ndarray, upper: np.ndarray) -> np.ndarray:
    """(3, n) band storage for ``scipy.linalg.solve_banded((1, 1), ...)``."""
    ab = np.zeros((3, diag.shape[0]), dtype=np.result_type(lower, diag, upper))
    ab[0, 1:] = upper
    ab[1] = diag
    ab[2, :-1] = lower
    return ab


def default_pivot_tol(diag: np.ndarray) -> float:
    """
    Relative zero-pivot threshold n * eps * max|diag|.

    Pivots below it carry no significant digits after cancellation.
    """
    diag = np.asarray(diag)
    if diag.size == 0:
        return 0.0
    scale = float(np.max(np.abs(diag)))
    if not np.isfinite(scale):
        return 0.0
    return diag.size * np.finfo(np.float64).eps * scale


def _result_dtype(*arrays) -> np.dtype:
    dtype = np.result_type(*arrays, np.float64)
    return np.dtype(np.complex128) if np.issubdtype(dtype, np.complexfloating) else np.dtype(np.float64)


def solve_tridiagonal(
    lower: np.ndarray,
    diag: np.ndarray,
    upper: np.ndarray,
    rhs: np.ndarray,
    *,
    method: Method = "thomas",
    pivot_tol: float | None = None,
) -> np.ndarray:
    """
    Solve the tridiagonal system A x = rhs.

    Parameters
    ----------
    lower, diag, upper : ndarray
        Sub-diagonal (n-1,), main diagonal (n,), super-diagonal (n-1,).
    rhs : ndarray
        Right-hand side (n,).
    method : {"thomas", "banded"}
        Solver backend.
    pivot_tol : float, optional
        Pivots with magnitude <= pivot_tol are treated as zero
        (``"thomas"`` only). None selects n * eps * max|diag|.

    Returns
    -------
    ndarray
        Solution vector (n,).

    Raises
    ------
    NumericalSingularityError
        A zero, near-zero or non-finite pivot was met.
    """
    lower, diag, upper, rhs = (np.asarray(a) for a in (lower, diag, upper, rhs))
    _check_shapes(lower, diag, upper, rhs)
    return ThomasSolver(lower, diag, upper, method=method, pivot_tol=pivot_tol).solve(rhs)


class ThomasSolver:
    """
    Repeated solves against one fixed tridiagonal matrix.

    The coefficient arrays are converted once and work buffers are reused
    across calls, which is what a time-marching loop needs.
    """

    def __init__(
        self,
        lower: np.ndarray,
        diag: np.ndarray,
        upper: np.ndarray,
        *,
        method: Method = "thomas",
        pivot_tol: float | None = None,
    ):
        if method not in METHODS:
            raise ValueError(f"Unknown method: {method}")
        lower, diag, upper = (np.asarray(a) for a in (lower, diag, upper))
        self.n = _check_shapes(lower, diag, upper, np.zeros(diag.size))
        self.method = method
        self.dtype = _result_dtype(lower, diag, upper)
        if pivot_tol is None:
            pivot_tol = default_pivot_tol(diag)
        self.pivot_tol = float(pivot_tol)
        self.lower, self.diag, self.upper = (
            np.ascontiguousarray(a, dtype=self.dtype) for a in (lower, diag, upper)
        )
        self._bands = {
            self.dtype: (self.lower, self.diag, self.upper, np.empty(self.n, dtype=self.dtype))
        }
        if method == "banded":
            self._ab = banded_layout(self.lower, self.diag, self.upper)

    def _bands_for(self, dtype: np.dtype):
        """(lower, diag, upper, work) converted to ``dtype``, cached."""
        if dtype not in self._bands:
            # real matrix, complex right-hand side
            self._bands[dtype] = tuple(
                np.ascontiguousarray(a, dtype=dtype) for a in (self.lower, self.diag, self.upper)
            ) + (np.empty(self.n, dtype=dtype),)
        return self._bands[dtype]

    def solve(self, rhs: np.ndarray, out: np.ndarray | None = None) -> np.ndarray:
        rhs = np.asarray(rhs)
        if rhs.shape != (self.n,):
            raise ValueError(f"rhs must have shape ({self.n},), got {rhs.shape}")
        dtype = _result_dtype(self.dtype, rhs)

        if self.method == "banded":
            try:
                x = scipy.linalg.solve_banded((1, 1), self._ab, rhs.astype(dtype, copy=False))
            except np.linalg.LinAlgError as e:
                raise NumericalSingularityError(f"singular tridiagonal matrix: {e}") from e
            if out is not None:
                out[:] = x
                return out
            return x

        lower, diag, upper, cprime = self._bands_for(dtype)
        if out is None or out.dtype != dtype or not out.flags.c_contiguous:
            target = np.empty(self.n, dtype=dtype)
        else:
            target = out
        failed_row = thomas_solve(
            lower, diag, upper, np.ascontiguousarray(rhs, dtype=dtype),
            cprime, target, self.pivot_tol,
        )
        if failed_row >= 0:
            raise NumericalSingularityError(
                f"zero pivot at row {failed_row} of {self.n} during tridiagonal elimination"
            )
        if out is not None and target is not out:
            out[:] = target
            return out
        return target
