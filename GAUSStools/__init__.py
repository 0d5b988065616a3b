"""
GAUSStools

Eigenvalues of symmetric tridiagonal matrices by Sturm bisection, and the
Gauss quadrature rules built on them.
"""

from .funcs.eigen_vals import (
    EigenvalueOperations,
    gershgorin_bounds,
    count_less_than,
    kth_eigenvalue,
    tridiagonal_eigenvalues,
    shared_bounds_eigenvalues
)
from .funcs.orthopoly import OrthogonalPolynomialOperations

__version__ = "0.1.0"

__all__ = [
    'EigenvalueOperations',
    'OrthogonalPolynomialOperations',
    'gershgorin_bounds',
    'count_less_than',
    'kth_eigenvalue',
    'tridiagonal_eigenvalues',
    'shared_bounds_eigenvalues'
]
