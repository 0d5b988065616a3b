"""
GAUSStools: Orthogonal Polynomial Operations

Roots, Gauss weights and Gauss quadrature rules of the classical orthogonal
polynomial families (Hermite, Laguerre, Legendre, Chebyshev of the first and
second kind). The roots are the eigenvalues of each family's Jacobi matrix,
computed with EigenvalueOperations; the weights follow from the same matrix
through the Christoffel formula.

Author: GAUSStools contributors

"""

import warnings
import numpy as np
from typing import Callable, Optional, Tuple
from .core_functions import *
from ..eigen_vals.operations import EigenvalueOperations


class OrthogonalPolynomialOperations:
    """
    A class to compute Gauss quadrature rules of one orthogonal polynomial family.

    This class provides methods for:
    - Building the Jacobi matrix of degree n
    - Evaluating the polynomial with its three-term recurrence
    - Computing the roots (quadrature nodes) in ascending order
    - Asymptotic estimates and bounds of the Laguerre roots
    - Computing the Gauss weights
    - Applying the n-point Gauss rule to a function
    """

    def __init__(
        self,
        family: str,
        use_numba: bool = True,
        precision: str = 'float64',
        strategy: str = 'bisection',
        verbose: bool = False) -> None:
        """
        Initialize the OrthogonalPolynomialOperations class.

        Args:
            family (str): 'hermite', 'laguerre', 'legendre', 'chebyshev_t' or 'chebyshev_u'
            use_numba (bool, optional): use Numba core functions. Defaults to True.
            precision (str, optional): 'float32' or 'float64'. Defaults to 'float64'.
            strategy (str, optional): eigenvalue strategy, see EigenvalueOperations.
                Defaults to 'bisection'.
            verbose (bool, optional): print timing of the eigenvalue solves. Defaults to False.
        """
        if family not in FAMILIES:
            raise ValueError(f"family must be one of {tuple(FAMILIES)}. Got {family}")

        self.family_name = family
        self.family = FAMILIES[family]
        self.mu_0 = WEIGHT_MOMENTS[self.family]
        self.use_numba = use_numba
        self.eigen_ops = EigenvalueOperations(
            use_numba=use_numba,
            precision=precision,
            strategy=strategy,
            verbose=verbose)
        self.float_dtype = self.eigen_ops.float_dtype


    @staticmethod
    def _check_points(n: int) -> None:
        if n < 1:
            raise ValueError("number of points can't be zero")


    def jacobi_matrix(
        self,
        n: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Jacobi matrix of the degree-n polynomial.

        Args:
            n (int): degree, n >= 1

        Returns:
            diagonal (np.ndarray): (n,)
            off_diagonal (np.ndarray): (n,), off_diagonal[0] = 0
        """
        self._check_points(n)
        return jacobi_matrix_np_core(self.family, n, dtype=self.float_dtype)


    def evaluate(
        self,
        n: int,
        x: np.ndarray) -> np.ndarray:
        """
        Evaluate the classical degree-n polynomial (H_n, L_n, P_n, T_n or U_n).

        Args:
            n (int): degree, n >= 0
            x (np.ndarray): evaluation points

        Returns:
            values (np.ndarray): same shape as x
        """
        if n < 0:
            raise ValueError("degree must be non-negative")
        return evaluate_np_core(self.family, n, x)


    def roots(
        self,
        n: int) -> np.ndarray:
        """
        Roots of the degree-n polynomial in ascending order.

        Args:
            n (int): degree, n >= 1

        Returns:
            roots (np.ndarray): (n,)
        """
        diagonal, off_diagonal = self.jacobi_matrix(n)
        return self.eigen_ops.eigenvalues(diagonal, off_diagonal)


    def _check_laguerre(self) -> None:
        if self.family != LAGUERRE:
            raise ValueError(
                f"asymptotic zeros are only available for the laguerre family. "
                f"Got {self.family_name}")


    def approximate_roots(
        self,
        n: int) -> np.ndarray:
        """
        Asymptotic estimates of the Laguerre roots from the zeros of J_0.
        No eigenvalue solve; good for the small roots of large n.

        Args:
            n (int): degree, n >= 1

        Returns:
            roots (np.ndarray): (n,) ascending estimates
        """
        self._check_points(n)
        self._check_laguerre()
        return laguerre_approximate_zeros_np_core(n).astype(self.float_dtype)


    def root_bounds(
        self,
        n: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Interval [lower[m], upper[m]] enclosing the m-th Laguerre root.

        Args:
            n (int): degree, n >= 1

        Returns:
            lower (np.ndarray): (n,)
            upper (np.ndarray): (n,)
        """
        self._check_points(n)
        self._check_laguerre()
        return laguerre_zero_bounds_np_core(n)


    def roots_and_weights(
        self,
        n: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Nodes and weights of the n-point Gauss rule.

        For large n the smallest weights underflow. When a node or weight comes
        out as NaN a RuntimeWarning is issued and the partial result is still
        returned.

        Args:
            n (int): number of points, n >= 1

        Returns:
            nodes (np.ndarray): (n,) ascending
            weights (np.ndarray): (n,)
        """
        diagonal, off_diagonal = self.jacobi_matrix(n)
        nodes = self.eigen_ops.eigenvalues(diagonal, off_diagonal)

        if self.use_numba:
            weights = christoffel_weights_nb_core(
                nodes, diagonal, off_diagonal, self.float_dtype(self.mu_0))
        else:
            weights = christoffel_weights_np_core(
                nodes, diagonal, off_diagonal, self.mu_0)

        if np.isnan(nodes).any() or np.isnan(weights).any():
            warnings.warn(
                f"n = {n} is too big for the {self.family_name} rule: some nodes "
                f"or weights are NaN and may have underflowed",
                RuntimeWarning)

        return nodes, weights


    def gauss_rule(
        self,
        f: Callable[[np.ndarray], np.ndarray],
        n: int,
        lower_limit: Optional[float] = None,
        upper_limit: Optional[float] = None) -> float:
        """
        n-point Gauss approximation of the integral of f(x) * w(x) over the
        support of the family's weight function w.

        For the Legendre family a finite interval [lower_limit, upper_limit] may
        be given; the rule is mapped onto it with x -> c x + d.

        Args:
            f (Callable): integrand, called once with the array of nodes
            n (int): number of points, n >= 1
            lower_limit (float, optional): lower integration limit (Legendre only)
            upper_limit (float, optional): upper integration limit (Legendre only)

        Returns:
            integral (float)
        """
        limits_given = lower_limit is not None or upper_limit is not None
        if limits_given and self.family != LEGENDRE:
            raise ValueError("integration limits are only supported for the legendre family")

        if limits_given:
            if lower_limit is None or upper_limit is None:
                raise ValueError("both lower_limit and upper_limit must be given")
            if not (np.isfinite(lower_limit) and np.isfinite(upper_limit)):
                raise ValueError("integration limits must be finite")

        nodes, weights = self.roots_and_weights(n)

        if not limits_given:
            return float(np.sum(weights * np.asarray(f(nodes))))

        c = 0.5 * (upper_limit - lower_limit)
        d = 0.5 * (upper_limit + lower_limit)
        return float(c * np.sum(weights * np.asarray(f(c * nodes + d))))
