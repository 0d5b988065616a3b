"""
Core functions for the classical orthogonal polynomial families:
Jacobi matrices, three-term recurrences, Christoffel weights and the
asymptotic Laguerre zero estimates.
"""
import numpy as np
from numba import njit, prange
from scipy import special
from .constants import *

##########################################################################################
# Three-term recurrences
##########################################################################################

# P_1(x) = slope * x + intercept
FIRST_DEGREE = {
    HERMITE: (2.0, 0.0),
    LAGUERRE: (-1.0, 1.0),
    LEGENDRE: (1.0, 0.0),
    CHEBYSHEV_T: (1.0, 0.0),
    CHEBYSHEV_U: (2.0, 0.0),
}


def recurrence_coefficients(
    family: int,
    k: int) -> tuple:
    """
    Coefficients of P_{k+1}(x) = (alpha * x + beta) * P_k(x) - gamma * P_{k-1}(x)
    for the classical (non-normalised) polynomials.

    Args:
        family (int): family code from constants
        k (int): degree of P_k, k >= 1

    Returns:
        (alpha, beta, gamma)
    """
    if family == HERMITE:
        return 2.0, 0.0, 2.0 * k
    if family == LAGUERRE:
        return -1.0 / (k + 1), (2.0 * k + 1) / (k + 1), k / (k + 1)
    if family == LEGENDRE:
        return (2.0 * k + 1) / (k + 1), 0.0, k / (k + 1)
    # both Chebyshev kinds share the recurrence, only P_1 differs
    return 2.0, 0.0, 1.0


def evaluate_np_core(
    family: int,
    n: int,
    x: np.ndarray) -> np.ndarray:
    """
    Evaluate the degree-n polynomial of a family with its three-term recurrence.

    Args:
        family (int): family code from constants
        n (int): degree, n >= 0
        x (np.ndarray): evaluation points

    Returns:
        P_n(x) (np.ndarray): same shape as x
    """
    x = np.asarray(x, dtype=np.float64)
    p_prev = np.ones_like(x)
    if n == 0:
        return p_prev

    slope, intercept = FIRST_DEGREE[family]
    p = slope * x + intercept
    for k in range(1, n):
        alpha, beta, gamma = recurrence_coefficients(family, k)
        p_prev, p = p, (alpha * x + beta) * p - gamma * p_prev
    return p


def jacobi_matrix_np_core(
    family: int,
    n: int,
    dtype=np.float64) -> tuple:
    """
    Symmetric tridiagonal Jacobi matrix of the orthonormal recurrence.
    Its eigenvalues are the n roots of the degree-n polynomial.

    Args:
        family (int): family code from constants
        n (int): matrix dimension / polynomial degree
        dtype: output precision

    Returns:
        diagonal (np.ndarray): (n,)
        off_diagonal (np.ndarray): (n,), off_diagonal[0] = 0
    """
    i = np.arange(n, dtype=np.float64)
    diagonal = np.zeros(n)
    off_diagonal = np.zeros(n)

    if family == HERMITE:
        off_diagonal[1:] = np.sqrt(i[1:] / 2.0)
    elif family == LAGUERRE:
        diagonal = 2.0 * i + 1.0
        off_diagonal[1:] = i[1:]
    elif family == LEGENDRE:
        off_diagonal[1:] = i[1:] / np.sqrt(4.0 * i[1:] ** 2 - 1.0)
    elif family == CHEBYSHEV_T:
        off_diagonal[1:] = 0.5
        if n > 1:
            off_diagonal[1] = np.sqrt(0.5)
    elif family == CHEBYSHEV_U:
        off_diagonal[1:] = 0.5
    else:
        raise ValueError(f"Unknown family code: {family}")

    return diagonal.astype(dtype), off_diagonal.astype(dtype)


##########################################################################################
# Christoffel weights
##########################################################################################


@njit([christoffel_weights_sig_32, christoffel_weights_sig_64],
      parallel=True, cache=True, nogil=True)
def christoffel_weights_nb_core(nodes, diagonal, off_diagonal, mu_0):
    """
    Gauss weights w_i = 1 / sum_k p_k(x_i)^2 over the orthonormal polynomials
    p_0 ... p_{n-1}, generated from the Jacobi matrix itself:

        b_{k+1} p_{k+1} = (x - a_k) p_k - b_k p_{k-1},   p_0 = 1 / sqrt(mu_0)

    Args:
        nodes: Quadrature nodes (n,), eigenvalues of the Jacobi matrix
        diagonal: Jacobi matrix diagonal a_k (n,)
        off_diagonal: Jacobi matrix off-diagonal b_k (n,)
        mu_0: Integral of the weight function

    Returns:
        weights: (n,)
    """
    n = nodes.shape[0]
    weights = np.empty(n, dtype=nodes.dtype)

    for i in prange(n):
        x = nodes[i]
        p_prev = 0.0
        p = 1.0 / np.sqrt(mu_0)
        total = p * p
        for k in range(n - 1):
            p_next = ((x - diagonal[k]) * p - off_diagonal[k] * p_prev) / off_diagonal[k + 1]
            p_prev = p
            p = p_next
            total += p * p
        weights[i] = 1.0 / total

    return weights


def christoffel_weights_np_core(
    nodes: np.ndarray,
    diagonal: np.ndarray,
    off_diagonal: np.ndarray,
    mu_0: float) -> np.ndarray:
    """
    Same as christoffel_weights_nb_core, vectorised over the nodes.

    Args:
        nodes (np.ndarray): quadrature nodes (n,)
        diagonal (np.ndarray): Jacobi matrix diagonal (n,)
        off_diagonal (np.ndarray): Jacobi matrix off-diagonal (n,)
        mu_0 (float): integral of the weight function

    Returns:
        weights (np.ndarray): (n,)
    """
    p_prev = np.zeros_like(nodes)
    p = np.full_like(nodes, 1.0 / np.sqrt(mu_0))
    total = p * p
    for k in range(nodes.shape[0] - 1):
        p_prev, p = p, ((nodes - diagonal[k]) * p - off_diagonal[k] * p_prev) / off_diagonal[k + 1]
        total += p * p
    return 1.0 / total


##########################################################################################
# Asymptotic Laguerre zeros
##########################################################################################


def laguerre_approximate_zeros_np_core(n: int) -> np.ndarray:
    """
    Tricomi estimate of the zeros of L_n from the zeros j_m of the Bessel
    function J_0, with k_n = n + 1/2:

        x_m ~ j_m^2 / (4 k_n) * (1 + (j_m^2 - 2) / (48 k_n^2))

    Accurate for the small zeros (m << n), degrades towards the largest.

    Args:
        n (int): degree, n >= 1

    Returns:
        zeros (np.ndarray): (n,) ascending estimates
    """
    j_sq = special.jn_zeros(0, n) ** 2
    k_n = n + 0.5
    return j_sq / (4.0 * k_n) * (1.0 + (j_sq - 2.0) / (48.0 * k_n ** 2))


def laguerre_zero_bounds_np_core(n: int) -> tuple:
    """
    Lower and upper bounds of each zero x_m of L_n (Abramowitz & Stegun 22.16.8):

        j_m^2 / (4 k_n) < x_m < k_m / k_n * (2 k_m + sqrt(4 k_m^2 + 1/4))

    with k_m = m + 1/2, m = 1 ... n.

    Args:
        n (int): degree, n >= 1

    Returns:
        lower (np.ndarray): (n,)
        upper (np.ndarray): (n,)
    """
    j_sq = special.jn_zeros(0, n) ** 2
    k_n = n + 0.5
    k_m = np.arange(1, n + 1, dtype=np.float64) + 0.5
    lower = j_sq / (4.0 * k_n)
    upper = k_m / k_n * (2.0 * k_m + np.sqrt(4.0 * k_m ** 2 + 0.25))
    return lower, upper
