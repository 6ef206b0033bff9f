"""
Error types raised by the time-stepping core.

Both are fatal for a run and are propagated to the caller of the
setup/run function unchanged.
"""

import numpy as np


class ConfigurationError(ValueError):
    """Invalid grid or model parameters, detected before any time step."""


class NumericalSingularityError(np.linalg.LinAlgError):
    """Zero (or near-zero) pivot met while solving a tridiagonal system."""
