"""
Core Numba JIT compiled functions for tridiagonal eigenvalue bisection.
These are the performance-critical numerical kernels.
"""
import numpy as np
from numba import njit, prange
import numba
from .constants import *

##########################################################################################
# Core numba JIT functions for Sturm-sequence bisection
##########################################################################################


@njit([gershgorin_bounds_sig_32, gershgorin_bounds_sig_64],
      parallel=True, cache=True, nogil=True)
def gershgorin_bounds_nb_core(diagonal, off_diagonal):
    """
    Interval [lower, upper] containing every eigenvalue, from the union of the
    Gershgorin discs of each row. Uses the thread-local accumulation pattern.

    Args:
        diagonal: Main diagonal (n,)
        off_diagonal: Sub/super diagonal (n,), off_diagonal[i] couples rows i-1 and i

    Returns:
        (lower, upper) bounds of the spectrum
    """
    n = diagonal.shape[0]

    # Last row only has one off-diagonal neighbour
    last_radius = abs(off_diagonal[n - 1])

    # Get number of threads
    n_threads = numba.config.NUMBA_NUM_THREADS

    # Thread-local accumulators, seeded with the last row
    local_lower = np.full(n_threads, diagonal[n - 1] - last_radius, dtype=diagonal.dtype)
    local_upper = np.full(n_threads, diagonal[n - 1] + last_radius, dtype=diagonal.dtype)

    for i in prange(n - 1):
        radius = abs(off_diagonal[i]) + abs(off_diagonal[i + 1])
        row_lower = diagonal[i] - radius
        row_upper = diagonal[i] + radius

        thread_id = numba.get_thread_id()
        if row_lower < local_lower[thread_id]:
            local_lower[thread_id] = row_lower
        if row_upper > local_upper[thread_id]:
            local_upper[thread_id] = row_upper

    # Merge results
    lower = local_lower[0]
    upper = local_upper[0]
    for t in range(1, n_threads):
        if local_lower[t] < lower:
            lower = local_lower[t]
        if local_upper[t] > upper:
            upper = local_upper[t]

    return lower, upper


# no fastmath in the counting kernels: the zero-pivot test and the sign count need IEEE semantics
@njit(cache=True, nogil=True)
def count_less_than_nb_core(diagonal, off_diagonal, x, eps):
    """
    Number of eigenvalues strictly less than x.

    Runs the ratio form of the Sturm sequence, q_i = p_i(x) / p_{i-1}(x) of the
    leading principal minors of (T - xI); every negative q_i is one sign change.
    A zero pivot is replaced by |off_diagonal[i]| / eps instead of dividing by zero.

    Args:
        diagonal: Main diagonal (n,)
        off_diagonal: Sub/super diagonal (n,), entry 0 is ignored
        x: Shift
        eps: Machine epsilon of the working precision

    Returns:
        count in [0, n]
    """
    n = diagonal.shape[0]

    q = diagonal[0] - x
    count = 0
    if q < 0.0:
        count += 1

    for i in range(1, n):
        if q != 0.0:
            q = diagonal[i] - x - off_diagonal[i] * off_diagonal[i] / q
        else:
            q = diagonal[i] - x - abs(off_diagonal[i]) / eps
        if q < 0.0:
            count += 1

    return count


@njit(cache=True, nogil=True)
def bisection_tolerance_nb_core(lower, upper, eps, atol):
    """Relative tolerance tracking the current bracket, floored at atol."""
    # scaled before adding, |upper| + |lower| overflows near the float limit
    tolerance = eps * abs(upper) + eps * abs(lower)
    if tolerance < atol:
        return atol
    return tolerance


@njit(cache=True, nogil=True)
def kth_eigenvalue_nb_core(diagonal, off_diagonal, k, lower, upper, eps, atol):
    """
    Bisect [lower, upper] down to the k-th smallest eigenvalue (k = 0 is the smallest).

    The bracket is halved until it is narrower than eps * (|upper| + |lower|).
    The absolute floor atol keeps eigenvalues at zero from bisecting down into
    the subnormals. Widths and midpoints are formed from halves, so brackets
    reaching the largest finite floats do not overflow.

    Args:
        diagonal: Main diagonal (n,)
        off_diagonal: Sub/super diagonal (n,)
        k: Ascending eigenvalue index, 0 <= k < n
        lower, upper: Bracket containing the whole spectrum (Gershgorin bounds)
        eps: Machine epsilon of the working precision
        atol: Absolute tolerance floor, see absolute_tolerance_np_core

    Returns:
        eigenvalue estimate, midpoint of the final bracket
    """
    rank = k + 1

    tolerance = 2.0 * eps * abs(upper) + 2.0 * eps * abs(lower)
    if tolerance < atol:
        tolerance = atol

    iterations = 0
    while 0.5 * upper - 0.5 * lower > 0.5 * tolerance and iterations < MAX_BISECTION_ITERATIONS:
        mid = 0.5 * upper + 0.5 * lower

        # at least k+1 eigenvalues below mid -> the k-th one is in the lower half
        if count_less_than_nb_core(diagonal, off_diagonal, mid, eps) >= rank:
            upper = mid
        else:
            lower = mid

        tolerance = bisection_tolerance_nb_core(lower, upper, eps, atol)
        iterations += 1

    return 0.5 * lower + 0.5 * upper


@njit([tridiagonal_eigenvalues_sig_32, tridiagonal_eigenvalues_sig_64],
      parallel=True, cache=True, nogil=True)
def tridiagonal_eigenvalues_nb_core(diagonal, off_diagonal, lower, upper, eps, atol):
    """
    All eigenvalues in ascending order, one independent bisection per index.

    Each index only reads the bands, so the loop over k is a prange. Results are
    written to slot k, the output order does not depend on thread scheduling.

    Args:
        diagonal: Main diagonal (n,)
        off_diagonal: Sub/super diagonal (n,)
        lower, upper: Gershgorin bounds of the matrix
        eps: Machine epsilon of the working precision
        atol: Absolute tolerance floor

    Returns:
        eigenvalues: (n,) ascending
    """
    n = diagonal.shape[0]
    eigenvalues = np.empty(n, dtype=diagonal.dtype)

    for k in prange(n):
        eigenvalues[k] = kth_eigenvalue_nb_core(
            diagonal, off_diagonal, np.int64(k), lower, upper, eps, atol)

    return eigenvalues


@njit([shared_bounds_eigenvalues_sig_32, shared_bounds_eigenvalues_sig_64],
      cache=True, nogil=True)
def shared_bounds_eigenvalues_nb_core(diagonal, off_diagonal, lower, upper, eps, atol):
    """
    All eigenvalues in ascending order from one descending sweep k = n-1 ... 0.

    Every Sturm count taken while hunting eigenvalue k also brackets its
    neighbours: count(mid) = j + 1 means eigenvalue j lies below mid and
    eigenvalue j + 1 lies above it. Those bounds are kept in lower_bounds and
    eigen_upper and reused by the later (smaller) indices. The sweep mutates
    both arrays, so it must stay sequential (no prange).

    Args:
        diagonal: Main diagonal (n,)
        off_diagonal: Sub/super diagonal (n,)
        lower, upper: Gershgorin bounds of the matrix
        eps: Machine epsilon of the working precision
        atol: Absolute tolerance floor

    Returns:
        eigenvalues: (n,) ascending
    """
    n = diagonal.shape[0]

    lower_bounds = np.full(n, lower)
    eigen_upper = np.full(n, upper)

    x_upper = upper
    for k in range(n - 1, -1, -1):
        # tightest lower bound known for any index <= k
        x_lower = lower
        for i in range(k, -1, -1):
            if x_lower < lower_bounds[i]:
                x_lower = lower_bounds[i]
                break

        # previous eigenvalue is an upper bound, eigen_upper[k] may be tighter
        if x_upper > eigen_upper[k]:
            x_upper = eigen_upper[k]

        tolerance = 2.0 * eps * abs(x_upper) + 2.0 * eps * abs(x_lower)
        if tolerance < atol:
            tolerance = atol

        iterations = 0
        while 0.5 * x_upper - 0.5 * x_lower > 0.5 * tolerance and iterations < MAX_BISECTION_ITERATIONS:
            mid = 0.5 * x_lower + 0.5 * x_upper
            j = count_less_than_nb_core(diagonal, off_diagonal, mid, eps) - 1

            if j < k:
                x_lower = mid
                if j < 0:
                    lower_bounds[0] = mid
                else:
                    lower_bounds[j + 1] = mid
                    if eigen_upper[j] > mid:
                        eigen_upper[j] = mid
            else:
                x_upper = mid

            tolerance = bisection_tolerance_nb_core(x_lower, x_upper, eps, atol)
            iterations += 1

        eigen_upper[k] = 0.5 * x_lower + 0.5 * x_upper

    return eigen_upper


##########################################################################################
# Core numpy functions for Sturm-sequence bisection
##########################################################################################


def gershgorin_bounds_np_core(
    diagonal: np.ndarray,
    off_diagonal: np.ndarray) -> tuple:
    """
    Gershgorin bounds with numpy reductions.

    Args:
        diagonal (np.ndarray): main diagonal (n,)
        off_diagonal (np.ndarray): sub/super diagonal (n,)

    Returns:
        (lower, upper): bounds of the spectrum, in the dtype of the bands
    """
    abs_off = np.abs(off_diagonal)
    radius = np.empty_like(abs_off)
    radius[:-1] = abs_off[:-1] + abs_off[1:]
    radius[-1] = abs_off[-1]
    return np.min(diagonal - radius), np.max(diagonal + radius)


def count_less_than_np_core(
    diagonal: np.ndarray,
    off_diagonal: np.ndarray,
    x,
    eps: float):
    """
    Sturm count vectorised over an array of shifts x.

    Args:
        diagonal (np.ndarray): main diagonal (n,)
        off_diagonal (np.ndarray): sub/super diagonal (n,), entry 0 is ignored
        x (float or np.ndarray): shift(s)
        eps (float): machine epsilon of the working precision

    Returns:
        count (int or np.ndarray): eigenvalues strictly below each shift
    """
    x = np.asarray(x, dtype=diagonal.dtype)

    # a pivot overflowing to +-inf keeps its sign, which is all the count needs
    with np.errstate(over='ignore'):
        off_sq = off_diagonal * off_diagonal
        off_abs = np.abs(off_diagonal)

        q = diagonal[0] - x
        count = (q < 0).astype(np.int64)

        for i in range(1, diagonal.shape[0]):
            zero_pivot = q == 0
            safe_q = np.where(zero_pivot, 1, q)
            q = np.where(zero_pivot,
                         diagonal[i] - x - off_abs[i] / eps,
                         diagonal[i] - x - off_sq[i] / safe_q)
            count += q < 0

    if count.ndim == 0:
        return int(count)
    return count


def absolute_tolerance_np_core(
    lower: float,
    upper: float,
    eps: float,
    tiny: float) -> float:
    """
    Absolute floor of the bisection tolerance, eps^2 * (|lower| + |upper|) of
    the starting bracket. Falls back to tiny (smallest normal float) when that
    product underflows to zero.
    """
    atol = eps * eps * abs(lower) + eps * eps * abs(upper)
    return max(atol, tiny)


def tridiagonal_eigenvalues_np_core(
    diagonal: np.ndarray,
    off_diagonal: np.ndarray,
    lower: float,
    upper: float,
    eps: float,
    atol: float) -> np.ndarray:
    """
    All eigenvalues by bisecting every index simultaneously.

    Each iteration runs one vectorised Sturm count over the n midpoints;
    converged brackets are frozen.

    Args:
        diagonal (np.ndarray): main diagonal (n,)
        off_diagonal (np.ndarray): sub/super diagonal (n,)
        lower (float), upper (float): Gershgorin bounds
        eps (float): machine epsilon of the working precision
        atol (float): absolute tolerance floor

    Returns:
        eigenvalues (np.ndarray): (n,) ascending
    """
    n = diagonal.shape[0]
    dtype = diagonal.dtype
    ranks = np.arange(1, n + 1)

    x_lower = np.full(n, lower, dtype=dtype)
    x_upper = np.full(n, upper, dtype=dtype)

    tolerance = np.maximum(2 * eps * np.abs(x_upper) + 2 * eps * np.abs(x_lower), atol)

    for _ in range(MAX_BISECTION_ITERATIONS):
        active = 0.5 * x_upper - 0.5 * x_lower > 0.5 * tolerance
        if not active.any():
            break

        mid = (0.5 * x_upper + 0.5 * x_lower).astype(dtype)
        in_lower_half = count_less_than_np_core(diagonal, off_diagonal, mid, eps) >= ranks

        x_upper = np.where(active & in_lower_half, mid, x_upper)
        x_lower = np.where(active & ~in_lower_half, mid, x_lower)
        tolerance = np.maximum(eps * np.abs(x_upper) + eps * np.abs(x_lower), atol)

    return (0.5 * x_lower + 0.5 * x_upper).astype(dtype)
