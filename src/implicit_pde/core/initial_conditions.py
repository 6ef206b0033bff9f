from __future__ import annotations

import numpy as np


def gaussian_profile(x: np.ndarray, center: float, spread: float) -> np.ndarray:
    """
    Real Gaussian bump u(x) = exp(-(x - center)^2 / spread).

    Peak value 1 at ``center``; ``spread`` plays the role of 2σ².
    """
    if spread <= 0:
        raise ValueError("spread must be positive")
    return np.exp(-((x - center) ** 2) / spread)


def gaussian_wavepacket(
    x: np.ndarray,
    x0: float,
    a: float,
    l: float,
    *,
    normalize: bool = True,
) -> np.ndarray:
    """
    Gaussian wavepacket psi(x) = N exp(-a (x - x0)^2) exp(-i l x).

    Parameters
    ----------
    x : ndarray
        Grid coordinates.
    x0 : float
        Packet centre.
    a : float
        Width parameter (|psi|^2 has variance 1 / (4a)).
    l : float
        Mean momentum. The Crank-Nicolson operator in
        :mod:`implicit_pde.core.operators` advances the complex conjugate
        of the usual i dpsi/dt = H psi form, so the carrier is exp(-i l x)
        for a packet with l > 0 to travel towards +x.
    normalize : bool
        If True, N = (2a/pi)^(1/4) so that the integral of |psi|^2 over the
        real line is 1.
    """
    if a <= 0:
        raise ValueError("width parameter a must be positive")
    N = (2.0 * a / np.pi) ** 0.25 if normalize else 1.0
    return N * np.exp(-a * (x - x0) ** 2) * np.exp(-1j * l * x)
