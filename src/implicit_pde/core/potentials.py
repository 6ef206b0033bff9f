from __future__ import annotations

import numpy as np


def square_barrier(
    x: np.ndarray,
    center: float,
    half_width: float,
    height: float,
) -> np.ndarray:
    """
    Square barrier V(x) = height on |x - center| <= half_width, 0 elsewhere.

    Returns a new read-only float array with the shape of ``x``.
    """
    if half_width < 0:
        raise ValueError("half_width must be non-negative")
    V = np.where(np.abs(x - center) <= half_width, float(height), 0.0)
    V.setflags(write=False)
    return V
