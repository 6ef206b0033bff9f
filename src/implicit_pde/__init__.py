"""
implicit_pde
============
Implicit finite-difference time stepping for 1-D linear PDEs:
Crank-Nicolson for the Schrödinger equation and backward Euler for the
diffusion equation, both built on an O(N) tridiagonal solve.
"""

from .core import *  # noqa: F401,F403
from .core import __all__ as _core_all

__all__ = list(_core_all)
__version__ = "0.1.0"
