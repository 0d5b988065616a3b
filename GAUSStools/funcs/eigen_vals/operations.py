"""
GAUSStools: Eigenvalue Operations

This module computes the eigenvalues of real symmetric tridiagonal matrices by
bisection on Sturm-sequence sign counts, using Numba for high-performance
computing. It is the root finder behind the Gauss quadrature rules: the nodes
of an n-point rule are the eigenvalues of the n x n Jacobi matrix of the
orthogonal polynomial family.

A tridiagonal matrix is passed as two equal-length 1D arrays,
diagonal[i] = T[i, i] and off_diagonal[i] = T[i-1, i] = T[i, i-1] for i >= 1.
off_diagonal[0] is ignored by the Sturm count.

Eigenvalue indices are ascending everywhere: k = 0 is the smallest eigenvalue
and eigenvalues(...)[k] == kth_eigenvalue(..., k). For the k-th largest ask
for index n - 1 - k.

Author: GAUSStools contributors

"""

import operator
import time
import numpy as np
from typing import List, Sequence, Tuple
from joblib import Parallel, delayed
from .core_functions import *

default_timer = time.time


class EigenvalueOperations:
    """
    A class to compute eigenvalues of symmetric tridiagonal matrices.
    No data objects. Only methods.

    This class provides methods for:
    - Gershgorin bounds of the spectrum
    - Sturm counts (number of eigenvalues below a shift)
    - A single eigenvalue by index
    - All eigenvalues, either by independent parallel bisections (default)
      or by the sequential shared-bounds sweep
    - Batches of independent matrices dispatched with joblib
    """

    def __init__(
        self,
        use_numba: bool = True,
        precision: str = DEFAULT_PRECISION,
        strategy: str = 'bisection',
        n_jobs: int = 1,
        verbose: bool = False) -> None:
        """
        Initialize the EigenvalueOperations class.

        Args:
            use_numba (bool, optional): use Numba core functions. Defaults to True.
            precision (str, optional): working precision, 'float32' or 'float64'.
                Defaults to 'float64'.
            strategy (str, optional): how eigenvalues() computes the full spectrum.
                'bisection' solves every index independently in parallel,
                'shared_bounds' runs one sequential sweep that reuses the brackets
                found for neighbouring indices. Defaults to 'bisection'.
            n_jobs (int, optional): joblib workers for eigenvalues_batch. Defaults to 1.
            verbose (bool, optional): print the strategy, size and wall time of each
                solve. Defaults to False.
        """
        if precision not in PRECISIONS:
            raise ValueError("precision must be 'float32' or 'float64'")
        if strategy not in STRATEGIES:
            raise ValueError(f"strategy must be one of {STRATEGIES}. Got {strategy}")

        self.use_numba = use_numba
        self.precision = precision
        self.strategy = strategy
        self.n_jobs = n_jobs
        self.verbose = verbose

        # Set data types based on precision
        if precision == 'float32':
            self.float_dtype = np.float32
        else:
            self.float_dtype = np.float64
        self.eps = self.float_dtype(np.finfo(self.float_dtype).eps)
        self.tiny = self.float_dtype(np.finfo(self.float_dtype).tiny)


    def _prepare_bands(
        self,
        diagonal: np.ndarray,
        off_diagonal: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Validate the two bands and return contiguous arrays in the working precision.
        The caller's arrays are never written to.
        """
        diagonal = np.asarray(diagonal)
        off_diagonal = np.asarray(off_diagonal)

        if diagonal.ndim != 1 or off_diagonal.ndim != 1:
            raise ValueError("diagonal and off_diagonal must be 1D arrays")
        if diagonal.shape[0] != off_diagonal.shape[0]:
            raise ValueError(
                f"diagonal and off_diagonal must have the same length. "
                f"Got {diagonal.shape[0]} and {off_diagonal.shape[0]}")
        if diagonal.shape[0] == 0:
            raise ValueError("matrix dimension must be at least 1")

        diagonal = np.ascontiguousarray(diagonal, dtype=self.float_dtype)
        off_diagonal = np.ascontiguousarray(off_diagonal, dtype=self.float_dtype)
        return diagonal, off_diagonal


    def _bounds(
        self,
        diagonal: np.ndarray,
        off_diagonal: np.ndarray) -> Tuple[np.floating, np.floating]:
        """Gershgorin bounds of already prepared bands, in the working precision."""
        if self.use_numba:
            lower, upper = gershgorin_bounds_nb_core(diagonal, off_diagonal)
        else:
            lower, upper = gershgorin_bounds_np_core(diagonal, off_diagonal)
        return self.float_dtype(lower), self.float_dtype(upper)


    def _absolute_tolerance(
        self,
        lower: np.floating,
        upper: np.floating) -> np.floating:
        """Bisection tolerance floor for a bracket starting at [lower, upper]."""
        return self.float_dtype(
            absolute_tolerance_np_core(lower, upper, self.eps, self.tiny))


    def gershgorin_bounds(
        self,
        diagonal: np.ndarray,
        off_diagonal: np.ndarray) -> Tuple[float, float]:
        """
        Interval containing every eigenvalue of the matrix.

        Row i contributes [d_i - r_i, d_i + r_i] with r_i = |e_i| + |e_{i+1}|
        (r_{n-1} = |e_{n-1}|); the result is the union of the row intervals.

        Args:
            diagonal (np.ndarray): main diagonal (n,)
            off_diagonal (np.ndarray): sub/super diagonal (n,)

        Returns:
            (lower, upper): bounds of the spectrum
        """
        diagonal, off_diagonal = self._prepare_bands(diagonal, off_diagonal)
        lower, upper = self._bounds(diagonal, off_diagonal)
        return float(lower), float(upper)


    def count_less_than(
        self,
        diagonal: np.ndarray,
        off_diagonal: np.ndarray,
        x: float) -> int:
        """
        Number of eigenvalues strictly less than x (Sturm count).

        Args:
            diagonal (np.ndarray): main diagonal (n,)
            off_diagonal (np.ndarray): sub/super diagonal (n,)
            x (float): shift

        Returns:
            count (int): in [0, n]
        """
        diagonal, off_diagonal = self._prepare_bands(diagonal, off_diagonal)
        x = self.float_dtype(x)
        if self.use_numba:
            return int(count_less_than_nb_core(diagonal, off_diagonal, x, self.eps))
        return count_less_than_np_core(diagonal, off_diagonal, x, self.eps)


    def kth_eigenvalue(
        self,
        diagonal: np.ndarray,
        off_diagonal: np.ndarray,
        k: int) -> float:
        """
        The k-th smallest eigenvalue (k = 0 is the smallest).

        Args:
            diagonal (np.ndarray): main diagonal (n,)
            off_diagonal (np.ndarray): sub/super diagonal (n,)
            k (int): ascending index, 0 <= k < n

        Returns:
            eigenvalue (float)
        """
        if isinstance(k, (bool, np.bool_)):
            raise ValueError(f"k must be an integer index. Got {k!r}")
        try:
            k = operator.index(k)
        except TypeError:
            raise ValueError(f"k must be an integer index. Got {k!r}") from None

        diagonal, off_diagonal = self._prepare_bands(diagonal, off_diagonal)
        n = diagonal.shape[0]
        if not 0 <= k < n:
            raise ValueError(f"k must satisfy 0 <= k < {n}. Got {k}")

        lower, upper = self._bounds(diagonal, off_diagonal)
        atol = self._absolute_tolerance(lower, upper)
        if self.use_numba:
            return float(kth_eigenvalue_nb_core(
                diagonal, off_diagonal, np.int64(k), lower, upper, self.eps, atol))

        # the numpy solver is vectorised over all indices anyway
        return float(tridiagonal_eigenvalues_np_core(
            diagonal, off_diagonal, lower, upper, self.eps, atol)[k])


    def eigenvalues(
        self,
        diagonal: np.ndarray,
        off_diagonal: np.ndarray) -> np.ndarray:
        """
        All eigenvalues of the matrix in ascending order, computed with the
        strategy chosen at construction.

        Args:
            diagonal (np.ndarray): main diagonal (n,)
            off_diagonal (np.ndarray): sub/super diagonal (n,)

        Returns:
            eigenvalues (np.ndarray): (n,) ascending, in the working precision
        """
        if self.strategy == 'shared_bounds':
            return self.shared_bounds_eigenvalues(diagonal, off_diagonal)

        diagonal, off_diagonal = self._prepare_bands(diagonal, off_diagonal)

        t0 = default_timer()
        lower, upper = self._bounds(diagonal, off_diagonal)
        atol = self._absolute_tolerance(lower, upper)
        if self.use_numba:
            eigenvalues = tridiagonal_eigenvalues_nb_core(
                diagonal, off_diagonal, lower, upper, self.eps, atol)
        else:
            eigenvalues = tridiagonal_eigenvalues_np_core(
                diagonal, off_diagonal, lower, upper, self.eps, atol)

        if self.verbose:
            print(f"eigenvalues: bisection, n = {diagonal.shape[0]}, "
                  f"{default_timer() - t0:.4f} s")
        return eigenvalues


    def shared_bounds_eigenvalues(
        self,
        diagonal: np.ndarray,
        off_diagonal: np.ndarray) -> np.ndarray:
        """
        All eigenvalues in ascending order from the sequential shared-bounds sweep.

        The sweep carries per-index bracket arrays from one eigenvalue to the
        next, so it is always sequential. With use_numba=False the same kernel
        runs as plain Python (py_func), which is only useful for debugging.

        Args:
            diagonal (np.ndarray): main diagonal (n,)
            off_diagonal (np.ndarray): sub/super diagonal (n,)

        Returns:
            eigenvalues (np.ndarray): (n,) ascending, in the working precision
        """
        diagonal, off_diagonal = self._prepare_bands(diagonal, off_diagonal)

        t0 = default_timer()
        lower, upper = self._bounds(diagonal, off_diagonal)
        atol = self._absolute_tolerance(lower, upper)
        if self.use_numba:
            eigenvalues = shared_bounds_eigenvalues_nb_core(
                diagonal, off_diagonal, lower, upper, self.eps, atol)
        else:
            eigenvalues = shared_bounds_eigenvalues_nb_core.py_func(
                diagonal, off_diagonal, lower, upper, self.eps, atol)

        if self.verbose:
            print(f"eigenvalues: shared_bounds, n = {diagonal.shape[0]}, "
                  f"{default_timer() - t0:.4f} s")
        return eigenvalues


    def eigenvalues_batch(
        self,
        matrices: Sequence[Tuple[np.ndarray, np.ndarray]]) -> List[np.ndarray]:
        """
        Eigenvalues of several independent matrices.

        Every (diagonal, off_diagonal) pair is validated up front, then the solves
        are dispatched with joblib over n_jobs worker processes. The returned list
        follows the input order.

        Args:
            matrices: sequence of (diagonal, off_diagonal) pairs

        Returns:
            list of (n_i,) ascending eigenvalue arrays
        """
        prepared = [self._prepare_bands(d, e) for d, e in matrices]

        if self.n_jobs == 1:
            return [self.eigenvalues(d, e) for d, e in prepared]

        return Parallel(n_jobs=self.n_jobs)(
            delayed(_solve_single)(d, e, self.use_numba, self.precision, self.strategy)
            for d, e in prepared)


def _solve_single(
    diagonal: np.ndarray,
    off_diagonal: np.ndarray,
    use_numba: bool,
    precision: str,
    strategy: str) -> np.ndarray:
    """Worker entry point for eigenvalues_batch."""
    return EigenvalueOperations(
        use_numba=use_numba,
        precision=precision,
        strategy=strategy).eigenvalues(diagonal, off_diagonal)


##########################################################################################
# Functional interface
##########################################################################################


def gershgorin_bounds(
    diagonal: np.ndarray,
    off_diagonal: np.ndarray) -> Tuple[float, float]:
    """Gershgorin bounds of the symmetric tridiagonal matrix (diagonal, off_diagonal)."""
    return EigenvalueOperations().gershgorin_bounds(diagonal, off_diagonal)


def count_less_than(
    diagonal: np.ndarray,
    off_diagonal: np.ndarray,
    x: float) -> int:
    """Number of eigenvalues strictly less than x."""
    return EigenvalueOperations().count_less_than(diagonal, off_diagonal, x)


def kth_eigenvalue(
    diagonal: np.ndarray,
    off_diagonal: np.ndarray,
    k: int) -> float:
    """k-th smallest eigenvalue, k = 0 is the smallest."""
    return EigenvalueOperations().kth_eigenvalue(diagonal, off_diagonal, k)


def tridiagonal_eigenvalues(
    diagonal: np.ndarray,
    off_diagonal: np.ndarray) -> np.ndarray:
    """All eigenvalues in ascending order (parallel bisection)."""
    return EigenvalueOperations().eigenvalues(diagonal, off_diagonal)


def shared_bounds_eigenvalues(
    diagonal: np.ndarray,
    off_diagonal: np.ndarray) -> np.ndarray:
    """All eigenvalues in ascending order (sequential shared-bounds sweep)."""
    return EigenvalueOperations().shared_bounds_eigenvalues(diagonal, off_diagonal)
