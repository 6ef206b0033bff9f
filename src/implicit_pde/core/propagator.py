"""
implicit_pde/core/propagator.py
-------------------------------
Function-style entry points around the solver classes.

* diffusion_propagation(config)    → BTCS, real field
* schrodinger_propagation(config)  → Crank-Nicolson, complex field
"""

from __future__ import annotations

from typing import Optional, Union

from .config import DiffusionConfig, SchrodingerConfig
from .propagation import DiffusionSolver, PropagationResult, SchrodingerSolver
from .tridiagonal import Method


def diffusion_propagation(
    config: DiffusionConfig,
    *,
    method: Method = "thomas",
    pivot_tol: Optional[float] = None,
    verbose: bool = False,
) -> PropagationResult:
    """
    Integrate the diffusion equation over the whole time grid.

    Parameters
    ----------
    config : DiffusionConfig
        Grid and initial-condition parameters
    method : {"thomas", "banded"}
        Tridiagonal solve backend
    pivot_tol : float, optional
        Zero-pivot threshold; None uses the relative default
    verbose : bool
        Print setup and timing summaries

    Returns
    -------
    PropagationResult
        ``history`` has shape (Nt, Nx), dtype float64
    """
    return DiffusionSolver(config, method=method, pivot_tol=pivot_tol, verbose=verbose).run()


def schrodinger_propagation(
    config: SchrodingerConfig,
    *,
    method: Method = "thomas",
    pivot_tol: Optional[float] = None,
    verbose: bool = False,
) -> PropagationResult:
    """
    Integrate the Schrödinger equation over the whole time grid.

    Parameters
    ----------
    config : SchrodingerConfig
        Grid, wavepacket and barrier parameters
    method : {"thomas", "banded"}
        Tridiagonal solve backend
    pivot_tol : float, optional
        Zero-pivot threshold; None uses the relative default
    verbose : bool
        Print setup, timing and norm summaries

    Returns
    -------
    PropagationResult
        ``history`` has shape (Nt, Nx), dtype complex128; ``potential`` is set
    """
    result = SchrodingerSolver(config, method=method, pivot_tol=pivot_tol, verbose=verbose).run()
    if verbose:
        n0, n1 = result.norm(0), result.norm(-1)
        print(f"norm: t=0 → {n0:.6f}, t=T → {n1:.6f} (drift {abs(n1 - n0):.2e})")
    return result


def propagate(
    config: Union[DiffusionConfig, SchrodingerConfig],
    **kwargs,
) -> PropagationResult:
    """Dispatch on the configuration type."""
    if isinstance(config, SchrodingerConfig):
        return schrodinger_propagation(config, **kwargs)
    if isinstance(config, DiffusionConfig):
        return diffusion_propagation(config, **kwargs)
    raise TypeError(f"Unsupported configuration type: {type(config).__name__}")
