"""
Abstract base for implicit tridiagonal time stepping.

Every concrete solver builds one constant tridiagonal operator A at
setup and then, for n = 0 .. Nt-2,

    1. rhs = self.rhs(field[n])
    2. solve A field[n+1] = rhs
    3. field[n+1][0] = field[n+1][-1] = 0   (Dirichlet)
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from ..config import GridConfig
from ..grid import Grid1D, apply_dirichlet
from ..operators import TridiagonalOperator
from ..quadrature import probability_norm
from ..tridiagonal import Method, ThomasSolver


@dataclass
class PropagationResult:
    """
    Output of one integration run, owned by the caller.

    Attributes
    ----------
    x : np.ndarray
        Grid coordinates (Nx,)
    t : np.ndarray
        Time points (Nt,)
    history : np.ndarray
        Field history (Nt, Nx); row n is the field at t[n]
    config : GridConfig
        Configuration the run was made with
    potential : np.ndarray, optional
        Potential (Nx,) for the Schrödinger solver, None otherwise
    """

    x: np.ndarray
    t: np.ndarray
    history: np.ndarray = field(repr=False)
    config: GridConfig
    potential: Optional[np.ndarray] = field(default=None, repr=False)

    def norm(self, step: int = -1) -> float:
        """Simpson integral of |history[step]|^2 over the domain."""
        return probability_norm(self.history[step], self.x)


class SolverBase(ABC):
    """
    Common time-marching loop.

    Parameters
    ----------
    config : GridConfig
        Run configuration
    method : {"thomas", "banded"}
        Tridiagonal solve backend
    pivot_tol : float, optional
        Pivot magnitude treated as zero; None selects the relative default
        of :class:`~implicit_pde.core.tridiagonal.ThomasSolver`
    verbose : bool
        Print setup and completion summaries
    """

    field_dtype: type = np.float64

    def __init__(
        self,
        config: GridConfig,
        *,
        method: Method = "thomas",
        pivot_tol: Optional[float] = None,
        verbose: bool = False,
    ):
        self.config = config
        self.grid: Grid1D = config.grid()
        self.method = method
        self.verbose = verbose
        self.operator: TridiagonalOperator = self.build_operator()
        self._solver = ThomasSolver(
            self.operator.lower,
            self.operator.diag,
            self.operator.upper,
            method=method,
            pivot_tol=pivot_tol,
        )
        if verbose:
            g = self.grid
            print(
                f"{self.get_name()}: Nx={g.Nx}, Nt={g.Nt}, "
                f"dx={g.dx:.4g}, dt={g.dt:.4g}, r={g.r:.4g}, method={method}"
            )

    @abstractmethod
    def get_name(self) -> str:
        """Short name of the scheme."""

    @abstractmethod
    def build_operator(self) -> TridiagonalOperator:
        """Constant implicit operator A."""

    @abstractmethod
    def initial_field(self, x: np.ndarray) -> np.ndarray:
        """Closed-form field at t = 0."""

    @abstractmethod
    def rhs(self, row: np.ndarray) -> np.ndarray:
        """Right-hand side for the step that starts from ``row``."""

    def potential(self) -> Optional[np.ndarray]:
        return None

    def step(self, row: np.ndarray, out: Optional[np.ndarray] = None) -> np.ndarray:
        """Advance one time step from ``row``; boundaries forced to zero."""
        new = self._solver.solve(self.rhs(row), out)
        return apply_dirichlet(new)

    def run(self) -> PropagationResult:
        """Integrate over the whole time grid and return the history."""
        t0 = time.perf_counter()
        hist = self.grid.allocate_field(self.initial_field, dtype=self.field_dtype)
        for n in range(self.grid.Nt - 1):
            self.step(hist[n], out=hist[n + 1])

        result = PropagationResult(
            x=self.grid.x.copy(),
            t=self.grid.t.copy(),
            history=hist,
            config=self.config,
            potential=self.potential(),
        )
        if self.verbose:
            print(
                f"{self.get_name()}: {self.grid.Nt - 1} steps "
                f"in {time.perf_counter() - t0:.2f}s"
            )
        return result
