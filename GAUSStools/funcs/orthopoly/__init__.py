"""
GAUSStools Orthogonal Polynomial Module

Provides Gauss quadrature rules for the classical orthogonal polynomial
families. Nodes are eigenvalues of the family's Jacobi matrix, computed by
Sturm bisection (see eigen_vals); weights come from the Christoffel formula.
"""

# Import main classes
from .operations import OrthogonalPolynomialOperations

# Import core functions for advanced users
from .core_functions import (
    jacobi_matrix_np_core,
    evaluate_np_core,
    recurrence_coefficients,
    christoffel_weights_nb_core,
    christoffel_weights_np_core,
    laguerre_approximate_zeros_np_core,
    laguerre_zero_bounds_np_core
)

# Version info
__version__ = "1.0.0"
__author__ = "GAUSStools contributors"

# Define public API
__all__ = [
    'OrthogonalPolynomialOperations',
    # Core functions for advanced use
    'jacobi_matrix_np_core',
    'evaluate_np_core',
    'recurrence_coefficients',
    'christoffel_weights_nb_core',
    'christoffel_weights_np_core',
    'laguerre_approximate_zeros_np_core',
    'laguerre_zero_bounds_np_core'
]
