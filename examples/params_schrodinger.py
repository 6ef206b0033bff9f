#!/usr/bin/env python
"""
Wavepacket / square-barrier parameter file for implicit_pde.simulation.runner
"""

description = "schrodinger_barrier"
equation = "schrodinger"

# === grid ===
T, L = 240.0, 400.0
dt, dx = 0.2, 0.2

# === wavepacket ===
x0 = 50.0
a = 0.002
l_sweep = [0.3, 0.5]        # swept, saved as "l"

# === barrier (height defaults to 1 / r) ===
barrier_half_width = 2.0

method = "thomas"
