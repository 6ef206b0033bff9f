"""
Time-marching solvers.

Each solver builds a constant tridiagonal operator once and advances the
field with one tridiagonal solve per step.
"""

from .base import PropagationResult, SolverBase
from .diffusion import DiffusionSolver
from .schrodinger import SchrodingerSolver

__all__ = [
    "PropagationResult",
    "SolverBase",
    "DiffusionSolver",
    "SchrodingerSolver",
]
