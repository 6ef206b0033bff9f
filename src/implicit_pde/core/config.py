"""
Run configurations for the two solvers.

A configuration is a plain dataclass of scalars, validated on creation.
It is passed into a solver once; the solver never stores results on it.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from .errors import ConfigurationError
from .grid import Grid1D


@dataclass(frozen=True)
class GridConfig:
    """
    Space-time extent and step sizes.

    Attributes
    ----------
    T : float
        Total simulation time
    L : float
        Domain length, x in [0, L]
    dt : float
        Time step
    dx : float
        Grid spacing
    """

    T: float
    L: float
    dt: float
    dx: float

    def __post_init__(self):
        # builds (and so validates) the grid eagerly
        grid = self.grid()
        if grid.Nx < 3:
            raise ConfigurationError(f"need at least 3 grid points, got Nx={grid.Nx}")

    def grid(self) -> Grid1D:
        return Grid1D.from_steps(self.T, self.L, self.dt, self.dx)

    @property
    def r(self) -> float:
        return self.dt / self.dx**2

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DiffusionConfig(GridConfig):
    """
    Heat equation u_t = u_xx with u(x, 0) = exp(-(x - center)^2 / spread).

    ``center`` defaults to L/2.
    """

    center: Optional[float] = None
    spread: float = 150.0

    def __post_init__(self):
        super().__post_init__()
        if self.spread <= 0:
            raise ConfigurationError("spread must be positive")
        if self.center is None:
            object.__setattr__(self, "center", 0.5 * self.L)


@dataclass(frozen=True)
class SchrodingerConfig(GridConfig):
    """
    Gaussian wavepacket scattering on a square barrier.

    Attributes
    ----------
    x0 : float
        Initial packet centre
    a : float
        Packet width parameter
    l : float
        Packet momentum
    barrier_half_width : float
        Half width of the barrier
    barrier_height : float, optional
        Barrier height; defaults to 1 / r with r = dt / dx^2
    barrier_center : float, optional
        Barrier centre; defaults to L / 2
    """

    x0: float = 50.0
    a: float = 0.002
    l: float = 0.5
    barrier_half_width: float = 1.0
    barrier_height: Optional[float] = None
    barrier_center: Optional[float] = None

    def __post_init__(self):
        super().__post_init__()
        if self.a <= 0:
            raise ConfigurationError("width parameter a must be positive")
        if self.barrier_half_width < 0:
            raise ConfigurationError("barrier_half_width must be non-negative")
        if self.barrier_height is None:
            object.__setattr__(self, "barrier_height", 1.0 / self.r)
        if self.barrier_center is None:
            object.__setattr__(self, "barrier_center", 0.5 * self.L)
