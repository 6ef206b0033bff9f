"""
Backward-Euler (BTCS) solver for the 1-D diffusion equation.
"""

from __future__ import annotations

import numpy as np

from ..config import DiffusionConfig
from ..initial_conditions import gaussian_profile
from ..operators import TridiagonalOperator, btcs_operator
from .base import SolverBase


class DiffusionSolver(SolverBase):
    """
    u_t = u_xx on [0, L] with u = 0 at both ends.

    Each step solves A u^{n+1} = u^n with the BTCS matrix; the scheme is
    unconditionally stable, so any dt, dx > 0 are accepted.
    """

    field_dtype = np.float64

    def __init__(self, config: DiffusionConfig, **kwargs):
        if not isinstance(config, DiffusionConfig):
            raise TypeError("DiffusionSolver requires a DiffusionConfig")
        super().__init__(config, **kwargs)

    def get_name(self) -> str:
        return "Diffusion-BTCS"

    def build_operator(self) -> TridiagonalOperator:
        return btcs_operator(self.grid)

    def initial_field(self, x: np.ndarray) -> np.ndarray:
        return gaussian_profile(x, self.config.center, self.config.spread)

    def rhs(self, row: np.ndarray) -> np.ndarray:
        return row
