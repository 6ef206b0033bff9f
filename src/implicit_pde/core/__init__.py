"""
Core numerics: grid, operators, tridiagonal solves, quadrature and the
time-marching solvers.
"""

from .config import DiffusionConfig, GridConfig, SchrodingerConfig
from .errors import ConfigurationError, NumericalSingularityError
from .grid import Grid1D, apply_dirichlet
from .initial_conditions import gaussian_profile, gaussian_wavepacket
from .operators import (
    TridiagonalOperator,
    btcs_operator,
    crank_nicolson_operator,
    crank_nicolson_rhs,
    shift,
)
from .potentials import square_barrier
from .propagation import DiffusionSolver, PropagationResult, SchrodingerSolver
from .propagator import diffusion_propagation, propagate, schrodinger_propagation
from .quadrature import composite_newton_cotes, conservation_drift, probability_norm, simpson
from .tridiagonal import ThomasSolver, solve_tridiagonal

__all__ = [
    "DiffusionConfig",
    "GridConfig",
    "SchrodingerConfig",
    "ConfigurationError",
    "NumericalSingularityError",
    "Grid1D",
    "apply_dirichlet",
    "gaussian_profile",
    "gaussian_wavepacket",
    "TridiagonalOperator",
    "btcs_operator",
    "crank_nicolson_operator",
    "crank_nicolson_rhs",
    "shift",
    "square_barrier",
    "DiffusionSolver",
    "PropagationResult",
    "SchrodingerSolver",
    "diffusion_propagation",
    "propagate",
    "schrodinger_propagation",
    "composite_newton_cotes",
    "conservation_drift",
    "probability_norm",
    "simpson",
    "ThomasSolver",
    "solve_tridiagonal",
]
