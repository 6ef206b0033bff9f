#!/usr/bin/env python
"""
Run both solvers once and print the quantities an external plotter would
consume: grid, potential, and the norm / peak diagnostics.
"""

import numpy as np

from implicit_pde import (
    DiffusionConfig,
    SchrodingerConfig,
    conservation_drift,
    diffusion_propagation,
    schrodinger_propagation,
)

# ---- diffusion --------------------------------------------------------
dcfg = DiffusionConfig(T=100.0, L=100.0, dt=0.1, dx=0.1, center=50.0, spread=150.0)
dres = diffusion_propagation(dcfg, verbose=True)
mid = dres.history.shape[1] // 2
print(f"u(L/2): t=0 → {dres.history[0, mid]:.4f}, t=T → {dres.history[-1, mid]:.4f}")

# ---- Schrödinger ------------------------------------------------------
scfg = SchrodingerConfig(T=240.0, L=400.0, dt=0.2, dx=0.2, x0=50.0, a=0.002, l=0.5)
sres = schrodinger_propagation(scfg, verbose=True)
print(f"barrier cells: {np.count_nonzero(sres.potential)}, height {sres.potential.max():.3g}")
print(f"norm drift after {sres.history.shape[0] - 1} steps: {conservation_drift(sres):.2e}")
