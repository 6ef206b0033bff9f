"""
Tridiagonal operators for implicit finite-difference time stepping.

The matrices are stored as their three bands only. Dirichlet boundaries
are not folded into the bands: the time-marching engine overwrites the
end points of every new row after the solve.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .errors import ConfigurationError
from .grid import Grid1D
from .tridiagonal import banded_layout


def _readonly(a: np.ndarray) -> np.ndarray:
    a = np.array(a, order="C")
    a.setflags(write=False)
    return a


@dataclass(frozen=True)
class TridiagonalOperator:
    """
    Constant tridiagonal matrix stored as (lower, diag, upper) bands.

    Attributes
    ----------
    lower : np.ndarray
        Sub-diagonal, shape (N-1,)
    diag : np.ndarray
        Main diagonal, shape (N,)
    upper : np.ndarray
        Super-diagonal, shape (N-1,)
    """

    lower: np.ndarray
    diag: np.ndarray
    upper: np.ndarray

    def __post_init__(self):
        n = self.diag.shape[0]
        if self.lower.shape != (n - 1,) or self.upper.shape != (n - 1,):
            raise ValueError("off-diagonals must be one shorter than the diagonal")
        for name in ("lower", "diag", "upper"):
            object.__setattr__(self, name, _readonly(getattr(self, name)))

    @property
    def size(self) -> int:
        return self.diag.shape[0]

    @property
    def dtype(self) -> np.dtype:
        return np.result_type(self.lower, self.diag, self.upper)

    def matvec(self, v: np.ndarray) -> np.ndarray:
        """A @ v, with implicit zeros beyond both ends."""
        v = np.asarray(v)
        y = self.diag * v
        y[:-1] += self.upper * v[1:]
        y[1:] += self.lower * v[:-1]
        return y

    def to_banded(self) -> np.ndarray:
        """(3, N) layout expected by ``scipy.linalg.solve_banded((1, 1), ...)``."""
        return banded_layout(self.lower, self.diag, self.upper)

    def to_dense(self) -> np.ndarray:
        """Dense (N, N) matrix. O(N^2) memory; diagnostics and tests only."""
        return (
            np.diag(self.diag)
            + np.diag(self.upper, k=1)
            + np.diag(self.lower, k=-1)
        )


def shift(a: np.ndarray, k: int) -> np.ndarray:
    """
    Shifted copy of ``a`` with zero sentinels in the vacated slots.

    ``shift(a, 1)[i] == a[i+1]`` and ``shift(a, -1)[i] == a[i-1]``.
    """
    a = np.asarray(a)
    out = np.zeros_like(a)
    if k == 0:
        out[:] = a
        return out
    if k > 0:
        out[:-k] = a[k:]
    else:
        out[-k:] = a[:k]
    return out


def _check_grid(grid: Grid1D) -> None:
    if grid.dx <= 0:
        raise ConfigurationError("dx must be positive")
    if grid.Nx < 3:
        raise ConfigurationError(f"need at least 3 grid points, got Nx={grid.Nx}")


def btcs_operator(grid: Grid1D) -> TridiagonalOperator:
    """
    Backward-Euler (BTCS) matrix for u_t = u_xx.

    With r = dt/dx^2 the system is A u^{n+1} = u^n, where A has
    1 + 2r on the diagonal and -r on both off-diagonals.
    """
    _check_grid(grid)
    r = grid.dt / grid.dx**2
    N = grid.Nx
    off = np.full(N - 1, -r)
    return TridiagonalOperator(
        lower=off,
        diag=np.full(N, 1.0 + 2.0 * r),
        upper=off.copy(),
    )


def _check_potential(grid: Grid1D, V: np.ndarray) -> np.ndarray:
    V = np.asarray(V, dtype=np.float64)
    if V.shape != (grid.Nx,):
        raise ConfigurationError(f"potential must have shape ({grid.Nx},), got {V.shape}")
    return V


def crank_nicolson_operator(grid: Grid1D, V: np.ndarray) -> TridiagonalOperator:
    """
    Implicit half of the Crank-Nicolson scheme for the Schrödinger field.

    With r = dt/dx^2 the diagonal is i + r - (r/2) V_k and both
    off-diagonals are -r/2.
    """
    _check_grid(grid)
    V = _check_potential(grid, V)
    r = grid.dt / grid.dx**2
    N = grid.Nx
    off = np.full(N - 1, -0.5 * r, dtype=np.complex128)
    return TridiagonalOperator(
        lower=off,
        diag=1j + r - 0.5 * r * V,
        upper=off.copy(),
    )


def crank_nicolson_rhs(psi: np.ndarray, V: np.ndarray, r: float) -> np.ndarray:
    """
    Explicit half of the Crank-Nicolson scheme applied to ``psi``.

        rhs_k = (r/2) psi_{k+1} + (i - r) psi_k + (r/2) psi_{k-1} + (r/2) V_k psi_k

    Neighbours beyond the domain are taken as zero.
    """
    half_r = 0.5 * r
    return (
        half_r * shift(psi, 1)
        + (1j - r) * psi
        + half_r * shift(psi, -1)
        + half_r * V * psi
    )
