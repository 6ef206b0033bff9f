#!/usr/bin/env python
"""
Diffusion (BTCS) parameter file for implicit_pde.simulation.runner
"""

description = "diffusion_gaussian"
equation = "diffusion"

# === grid ===
T, L = 100.0, 100.0
dt, dx = 0.1, 0.1

# === initial condition exp(-(x - center)^2 / spread) ===
center = 50.0
spread = [50.0, 150.0]      # swept: 2 cases

# === solver ===
method = "thomas"
