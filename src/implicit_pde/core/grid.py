from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable

import numpy as np

from .errors import ConfigurationError

# relative tolerance for L/dx and T/dt being integral (e.g. 100/0.1)
_INTEGRAL_RTOL = 1e-9


def _count_points(length: float, step: float, name: str, step_name: str) -> int:
    ratio = length / step
    n = round(ratio)
    if not math.isclose(ratio, n, rel_tol=_INTEGRAL_RTOL, abs_tol=_INTEGRAL_RTOL):
        raise ConfigurationError(
            f"{name} / {step_name} = {ratio!r} is not an integer; "
            f"the grid cannot end exactly at {name}={length}"
        )
    return int(n) + 1


@dataclass
class Grid1D:
    """
    Uniform space-time mesh: ``Nx`` points over [0, L] and ``Nt`` points
    over [0, T].

    Build it with :meth:`from_steps`, which checks that the step sizes
    divide the domain exactly.
    """

    L: float
    T: float
    dx: float
    dt: float
    Nx: int
    Nt: int
    x: np.ndarray = field(repr=False)  # shape (Nx,)
    t: np.ndarray = field(repr=False)  # shape (Nt,)

    @classmethod
    def from_steps(cls, T: float, L: float, dt: float, dx: float) -> "Grid1D":
        if dx <= 0:
            raise ConfigurationError("dx must be positive")
        if dt <= 0:
            raise ConfigurationError("dt must be positive")
        if L <= 0:
            raise ConfigurationError("L must be positive")
        if T < 0:
            raise ConfigurationError("T must be non-negative")

        Nx = _count_points(L, dx, "L", "dx")
        Nt = _count_points(T, dt, "T", "dt") if T > 0 else 1
        x = np.linspace(0.0, L, Nx)
        t = np.linspace(0.0, T, Nt)
        return cls(L=float(L), T=float(T), dx=float(dx), dt=float(dt),
                   Nx=Nx, Nt=Nt, x=x, t=t)

    @property
    def r(self) -> float:
        """Mesh ratio dt / dx**2."""
        return self.dt / self.dx**2

    @property
    def shape(self) -> tuple[int, int]:
        return (self.Nt, self.Nx)

    def allocate_field(
        self,
        initial: Callable[[np.ndarray], np.ndarray],
        dtype=np.float64,
        boundary_value: float = 0.0,
    ) -> np.ndarray:
        """
        Zero field history of shape (Nt, Nx) with row 0 set from ``initial``.

        The boundary entries of row 0 are overwritten with
        ``boundary_value`` whatever ``initial`` returns there.
        """
        field_t = np.zeros(self.shape, dtype=dtype)
        u0 = np.asarray(initial(self.x))
        if u0.shape != (self.Nx,):
            raise ConfigurationError(
                f"initial condition returned shape {u0.shape}, expected ({self.Nx},)"
            )
        if np.iscomplexobj(u0) and not np.issubdtype(np.dtype(dtype), np.complexfloating):
            raise ConfigurationError("complex initial condition for a real field")
        field_t[0] = u0
        apply_dirichlet(field_t[0], boundary_value)
        return field_t


def apply_dirichlet(row: np.ndarray, value: float = 0.0) -> np.ndarray:
    """Force both end points of ``row`` to ``value`` in place."""
    row[0] = value
    row[-1] = value
    return row
