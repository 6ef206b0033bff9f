import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "../src")))
import numpy as np
import pytest
from implicit_pde.core.config import DiffusionConfig, SchrodingerConfig
from implicit_pde.core.errors import NumericalSingularityError
from implicit_pde.core.operators import TridiagonalOperator
from implicit_pde.core.propagation import DiffusionSolver, SchrodingerSolver
from implicit_pde.core.propagator import diffusion_propagation, propagate, schrodinger_propagation
from implicit_pde.core.quadrature import conservation_drift


@pytest.fixture(scope="module")
def diffusion_result():
    # T=100, L=100, dt=dx=0.1, u0 = exp(-(x-50)^2/150), r = 10
    cfg = DiffusionConfig(T=100.0, L=100.0, dt=0.1, dx=0.1, center=50.0, spread=150.0)
    return diffusion_propagation(cfg)


@pytest.fixture(scope="module")
def schrodinger_result():
    cfg = SchrodingerConfig(T=240.0, L=400.0, dt=0.2, dx=0.2, x0=50.0, a=0.002, l=0.5)
    return schrodinger_propagation(cfg)


def test_diffusion_scenario(diffusion_result):
    u = diffusion_result.history
    assert u.shape == (1001, 1001)
    assert u.dtype == np.float64
    assert np.isclose(u[0, 500], 1.0)
    assert u[1000, 500] < u[0, 500]
    assert u[1000, 0] == 0.0 and u[1000, 1000] == 0.0
    assert diffusion_result.potential is None


def test_diffusion_boundaries_every_step(diffusion_result):
    u = diffusion_result.history
    assert np.all(u[:, 0] == 0.0)
    assert np.all(u[:, -1] == 0.0)


def test_diffusion_symmetry_and_decay(diffusion_result):
    u = diffusion_result.history
    assert np.allclose(u, u[:, ::-1], atol=1e-10)
    peaks = u.max(axis=1)
    assert np.all(np.diff(peaks) < 0)
    assert np.all(np.argmax(u, axis=1) == 500)


def test_diffusion_maximum_principle_any_step():
    # BTCS: no CFL limit, r = 20 here
    cfg = DiffusionConfig(T=50.0, L=20.0, dt=5.0, dx=0.5, center=7.0, spread=2.0)
    res = diffusion_propagation(cfg)
    u0max = np.abs(res.history[0]).max()
    assert np.all(np.abs(res.history).max(axis=1) <= u0max + 1e-12)
    assert np.all(np.isfinite(res.history))


def test_schrodinger_norm_preserved(schrodinger_result):
    res = schrodinger_result
    assert res.history.shape == (1201, 2001)
    assert res.history.dtype == np.complex128
    n0, n1 = res.norm(0), res.norm(-1)
    assert np.isclose(n0, 1.0, atol=1e-2)
    assert abs(n1 - n0) < 1e-2
    assert conservation_drift(res) < 1e-2


def test_schrodinger_boundaries_and_potential(schrodinger_result):
    res = schrodinger_result
    assert np.all(res.history[:, 0] == 0)
    assert np.all(res.history[:, -1] == 0)
    V = res.potential
    assert V.shape == (2001,)
    r = 0.2 / 0.2**2
    assert np.isclose(V.max(), 1.0 / r)
    inside = np.flatnonzero(V)
    assert np.isclose(res.x[inside].mean(), 200.0, atol=0.2)


def test_schrodinger_packet_moves_right(schrodinger_result):
    res = schrodinger_result
    density = np.abs(res.history) ** 2
    mean_x = (density * res.x).sum(axis=1) / density.sum(axis=1)
    assert np.isclose(mean_x[0], 50.0, atol=0.5)
    # group velocity 2l = 1
    assert np.isclose(mean_x[50], 60.0, atol=1.0)


def test_methods_agree():
    cfg = SchrodingerConfig(T=4.0, L=40.0, dt=0.2, dx=0.2, x0=15.0, a=0.05, l=1.0)
    a = schrodinger_propagation(cfg, method="thomas")
    b = schrodinger_propagation(cfg, method="banded")
    assert np.allclose(a.history, b.history)


def test_runs_do_not_share_state():
    cfg = DiffusionConfig(T=1.0, L=10.0, dt=0.1, dx=0.5)
    solver = DiffusionSolver(cfg)
    a = solver.run()
    b = solver.run()
    assert a.history is not b.history
    a.history[:] = 0.0
    assert b.history[0].max() > 0.0


def test_step_forces_dirichlet():
    cfg = SchrodingerConfig(T=1.0, L=10.0, dt=0.1, dx=0.1, x0=1.0, a=0.5, l=0.0)
    solver = SchrodingerSolver(cfg)
    row = np.ones(solver.grid.Nx, dtype=np.complex128)
    new = solver.step(row)
    assert new[0] == 0 and new[-1] == 0
    assert np.abs(new[1:-1]).max() > 0


def test_propagate_dispatch_and_verbose(capsys):
    res = propagate(DiffusionConfig(T=0.2, L=2.0, dt=0.1, dx=0.5), verbose=True)
    assert res.history.shape == (3, 5)
    out = capsys.readouterr().out
    assert "Diffusion-BTCS" in out
    with pytest.raises(TypeError):
        propagate({"T": 1.0})


def test_solver_requires_matching_config():
    with pytest.raises(TypeError):
        DiffusionSolver(SchrodingerConfig(T=1.0, L=10.0, dt=0.1, dx=0.1))


class _SingularSolver(DiffusionSolver):
    def build_operator(self):
        N = self.grid.Nx
        return TridiagonalOperator(lower=np.ones(N - 1), diag=np.zeros(N), upper=np.ones(N - 1))


def test_singular_operator_aborts_run():
    cfg = DiffusionConfig(T=1.0, L=10.0, dt=0.1, dx=0.5)
    with pytest.raises(NumericalSingularityError):
        _SingularSolver(cfg).run()


def test_pivot_tol_reaches_solver():
    cfg = DiffusionConfig(T=1.0, L=10.0, dt=0.1, dx=0.5)
    # BTCS diagonal is 1 + 2r = 1.8 here; a threshold above it rejects every pivot
    solver = DiffusionSolver(cfg, pivot_tol=10.0)
    assert solver._solver.pivot_tol == 10.0
    with pytest.raises(NumericalSingularityError):
        solver.run()
    with pytest.raises(NumericalSingularityError):
        diffusion_propagation(cfg, pivot_tol=10.0)
    assert DiffusionSolver(cfg)._solver.pivot_tol < 1e-12


def test_result_history_norm(diffusion_result):
    u0 = diffusion_result.history[0]
    assert np.isclose(diffusion_result.norm(0), np.sum(u0**2) * 0.1, rtol=1e-3)
