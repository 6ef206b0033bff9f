import numpy as np
from numba import njit


@njit(cache=True)
def thomas_solve(
    lower: np.ndarray,
    diag: np.ndarray,
    upper: np.ndarray,
    rhs: np.ndarray,
    cprime: np.ndarray,
    out: np.ndarray,
    pivot_tol: float,
) -> int:
    """
    Thomas algorithm (tridiagonal Gaussian elimination without pivoting).

    Parameters
    ----------
    lower : np.ndarray
        Sub-diagonal (n-1,)
    diag : np.ndarray
        Main diagonal (n,)
    upper : np.ndarray
        Super-diagonal (n-1,)
    rhs : np.ndarray
        Right-hand side (n,)
    cprime : np.ndarray
        Work buffer (n,) for the modified super-diagonal
    out : np.ndarray
        Solution buffer (n,), written in place
    pivot_tol : float
        A pivot with |beta| <= pivot_tol stops the elimination.

    Returns
    -------
    int
        -1 on success, otherwise the row index of the failing pivot.
        ``out`` is only meaningful on success.

    All arrays must share one dtype (float64 or complex128).
    """
    n = diag.shape[0]

    # ---- forward elimination ----
    beta = diag[0]
    if not np.isfinite(abs(beta)) or abs(beta) <= pivot_tol:
        return 0
    if n > 1:
        cprime[0] = upper[0] / beta
    out[0] = rhs[0] / beta

    for i in range(1, n):
        beta = diag[i] - lower[i - 1] * cprime[i - 1]
        if not np.isfinite(abs(beta)) or abs(beta) <= pivot_tol:
            return i
        if i < n - 1:
            cprime[i] = upper[i] / beta
        out[i] = (rhs[i] - lower[i - 1] * out[i - 1]) / beta

    # ---- back substitution ----
    for i in range(n - 2, -1, -1):
        out[i] -= cprime[i] * out[i + 1]

    return -1
