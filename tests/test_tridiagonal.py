import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "../src")))
import numpy as np
import pytest
from implicit_pde.core.tridiagonal import ThomasSolver, solve_tridiagonal
from implicit_pde.core.errors import NumericalSingularityError


def _dense(lower, diag, upper):
    return np.diag(diag) + np.diag(upper, 1) + np.diag(lower, -1)


@pytest.mark.parametrize("method", ["thomas", "banded"])
def test_identity_returns_rhs(method):
    n = 6
    rhs = np.arange(1.0, n + 1)
    x = solve_tridiagonal(np.zeros(n - 1), np.ones(n), np.zeros(n - 1), rhs, method=method)
    assert np.allclose(x, rhs)


@pytest.mark.parametrize("method", ["thomas", "banded"])
def test_hand_solved_3x3(method):
    # [[2,-1,0],[-1,2,-1],[0,-1,2]] x = [1,0,1]  ->  x = [1,1,1]
    x = solve_tridiagonal([-1.0, -1.0], [2.0, 2.0, 2.0], [-1.0, -1.0], [1.0, 0.0, 1.0], method=method)
    assert np.allclose(x, [1.0, 1.0, 1.0])


def test_hand_solved_4x4():
    # [[4,1,0,0],[1,4,1,0],[0,1,4,1],[0,0,1,4]] x = [5,6,6,5]  ->  x = [1,1,1,1]
    x = solve_tridiagonal([1.0] * 3, [4.0] * 4, [1.0] * 3, [5.0, 6.0, 6.0, 5.0])
    assert np.allclose(x, np.ones(4))


def test_complex_matches_dense_solve():
    rng = np.random.default_rng(0)
    n = 12
    lower = rng.normal(size=n - 1) + 1j * rng.normal(size=n - 1)
    upper = rng.normal(size=n - 1) + 1j * rng.normal(size=n - 1)
    diag = 5.0 + 1j + rng.normal(size=n)
    rhs = rng.normal(size=n) + 1j * rng.normal(size=n)
    x = solve_tridiagonal(lower, diag, upper, rhs)
    assert x.dtype == np.complex128
    assert np.allclose(x, np.linalg.solve(_dense(lower, diag, upper), rhs))
    xb = solve_tridiagonal(lower, diag, upper, rhs, method="banded")
    assert np.allclose(x, xb)


def test_real_matrix_complex_rhs():
    n = 5
    lower = -np.ones(n - 1)
    upper = -np.ones(n - 1)
    diag = 3.0 * np.ones(n)
    rhs = np.exp(1j * np.arange(n))
    x = solve_tridiagonal(lower, diag, upper, rhs)
    assert np.iscomplexobj(x)
    assert np.allclose(_dense(lower, diag, upper) @ x, rhs)


def test_solver_reuse_and_out_buffer():
    n = 8
    solver = ThomasSolver(-np.ones(n - 1), 4.0 * np.ones(n), -np.ones(n - 1))
    out = np.empty(n)
    for k in range(3):
        rhs = np.full(n, float(k + 1))
        res = solver.solve(rhs, out)
        assert res is out
        assert np.allclose(_dense(-np.ones(n - 1), 4.0 * np.ones(n), -np.ones(n - 1)) @ out, rhs)


def test_zero_first_pivot_raises():
    with pytest.raises(NumericalSingularityError):
        solve_tridiagonal([1.0], [0.0, 1.0], [1.0], [1.0, 1.0])


def test_zero_later_pivot_reports_row():
    # [[1,1],[1,1]]: second pivot is exactly 1 - 1*1 = 0
    with pytest.raises(NumericalSingularityError, match="row 1"):
        solve_tridiagonal([1.0], [1.0, 1.0], [1.0], [1.0, 2.0])


def test_banded_singular_raises():
    with pytest.raises(NumericalSingularityError):
        solve_tridiagonal([1.0], [1.0, 1.0], [1.0], [1.0, 2.0], method="banded")


def test_pivot_tolerance():
    with pytest.raises(NumericalSingularityError):
        solve_tridiagonal([0.0], [1e-14, 1.0], [0.0], [1.0, 1.0], pivot_tol=1e-12)
    # small but exact pivot is above the relative default n * eps * max|diag|
    x = solve_tridiagonal([0.0], [1e-14, 1.0], [0.0], [1.0, 1.0])
    assert np.isclose(x[0], 1e14)


def test_singularity_is_linalg_error():
    assert issubclass(NumericalSingularityError, np.linalg.LinAlgError)


def test_shape_mismatch():
    with pytest.raises(ValueError):
        solve_tridiagonal([1.0, 1.0], [1.0, 1.0], [1.0], [1.0, 1.0])
    with pytest.raises(ValueError):
        solve_tridiagonal([1.0], [1.0, 1.0], [1.0], [1.0, 1.0, 1.0])


def test_unknown_method():
    with pytest.raises(ValueError):
        ThomasSolver([0.0], [1.0, 1.0], [0.0], method="lu")


def test_cancellation_pivot_raises_by_default():
    # [[1,1],[1,1+eps]]: second pivot is eps after cancellation
    with pytest.raises(NumericalSingularityError, match="row 1"):
        solve_tridiagonal([1.0], [1.0, 1.0 + 2.2e-16], [1.0], [1.0, 2.0])
    solver = ThomasSolver([1.0], [1.0, 1.0 + 2.2e-16], [1.0])
    assert solver.pivot_tol > 2.2e-16
    # explicit zero tolerance only stops on exact zeros
    x = solve_tridiagonal([1.0], [1.0, 1.0 + 2.2e-16], [1.0], [1.0, 2.0], pivot_tol=0.0)
    assert np.all(np.abs(x) > 1e14)


def test_default_pivot_tol_scales_with_diagonal():
    from implicit_pde.core.tridiagonal import default_pivot_tol
    eps = np.finfo(np.float64).eps
    assert np.isclose(default_pivot_tol(np.array([1.0, -3.0, 2.0])), 3 * eps * 3.0)
    assert np.isclose(default_pivot_tol(np.array([1j, 2.0])), 2 * eps * 2.0)
    assert default_pivot_tol(np.zeros(4)) == 0.0
