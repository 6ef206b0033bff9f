"""
Composite closed Newton-Cotes quadrature on uniformly sampled data.

Used as a diagnostic: the integral of |psi|^2 should stay close to its
initial value under the Crank-Nicolson scheme.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from scipy.integrate import newton_cotes

if TYPE_CHECKING:
    from .propagation.base import PropagationResult


def composite_newton_cotes(
    f: np.ndarray,
    a: float,
    b: float,
    n: int,
    m: int = 3,
) -> float:
    """
    Integrate samples ``f`` over [a, b] split into ``n`` sub-intervals of
    ``m`` points each (m=2 trapezoid, m=3 Simpson 1/3, m=4 Simpson 3/8,
    m=5 Boole).

    ``f`` must hold exactly n*(m-1) + 1 equally spaced samples, with
    f[0] at ``a`` and f[-1] at ``b``.
    """
    f = np.asarray(f)
    if n < 1:
        raise ValueError("n must be >= 1")
    if not 2 <= m <= 5:
        raise ValueError("m must be between 2 and 5")
    if f.ndim != 1 or f.size != n * (m - 1) + 1:
        raise ValueError(
            f"expected {n * (m - 1) + 1} samples for n={n}, m={m}; got shape {f.shape}"
        )
    # weights for one sub-interval, integral = h * sum(w * f) with h the sample spacing
    w, _ = newton_cotes(m - 1, 1)
    h = (b - a) / (n * (m - 1))
    panels = np.lib.stride_tricks.sliding_window_view(f, m)[:: m - 1]
    total = h * np.sum(panels @ w)
    return complex(total) if np.iscomplexobj(total) else float(total)


def simpson(f: np.ndarray, a: float, b: float, n: int | None = None) -> float:
    """
    Composite Simpson 1/3 rule: per sub-interval of width H the weights
    are H * [1, 4, 1] / 6. ``n`` defaults to (len(f) - 1) // 2.
    """
    f = np.asarray(f)
    if n is None:
        if f.size < 3 or (f.size - 1) % 2:
            raise ValueError(
                f"Simpson's rule needs an odd number (>= 3) of samples, got {f.size}"
            )
        n = (f.size - 1) // 2
    return composite_newton_cotes(f, a, b, n, m=3)


def probability_norm(psi: np.ndarray, x: np.ndarray) -> float:
    """Simpson integral of |psi|^2 over the span of ``x``."""
    density = np.abs(np.asarray(psi)) ** 2
    return simpson(density, float(x[0]), float(x[-1]))


def conservation_drift(result: "PropagationResult") -> float:
    """|norm(last row) - norm(first row)| of a propagation result."""
    return abs(result.norm(-1) - result.norm(0))
