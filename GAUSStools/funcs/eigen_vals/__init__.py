"""
GAUSStools Eigenvalue Operations Module

Provides eigenvalues of real symmetric tridiagonal matrices by bisection on
Sturm-sequence sign counts, the root finder behind the Gauss quadrature rules.

Features:
- Gershgorin bounds with a parallel thread-local reduction
- Linear-time Sturm counts with a zero-pivot guard
- Independent per-index bisection, parallel over indices (default)
- Sequential shared-bounds sweep reusing brackets across indices
- Numba-optimized kernels with NumPy fallbacks, float32 and float64

Eigenvalue indices are ascending: k = 0 is the smallest eigenvalue.
"""

# Import main classes
from .operations import EigenvalueOperations

# Functional interface
from .operations import (
    gershgorin_bounds,
    count_less_than,
    kth_eigenvalue,
    tridiagonal_eigenvalues,
    shared_bounds_eigenvalues
)

# Import core functions for advanced users
from .core_functions import (
    gershgorin_bounds_nb_core,
    count_less_than_nb_core,
    kth_eigenvalue_nb_core,
    tridiagonal_eigenvalues_nb_core,
    shared_bounds_eigenvalues_nb_core,
    gershgorin_bounds_np_core,
    count_less_than_np_core,
    tridiagonal_eigenvalues_np_core,
    absolute_tolerance_np_core
)

# Version info
__version__ = "1.0.0"
__author__ = "GAUSStools contributors"

# Define public API
__all__ = [
    'EigenvalueOperations',
    'gershgorin_bounds',
    'count_less_than',
    'kth_eigenvalue',
    'tridiagonal_eigenvalues',
    'shared_bounds_eigenvalues',
    # Core functions for advanced use
    'gershgorin_bounds_nb_core',
    'count_less_than_nb_core',
    'kth_eigenvalue_nb_core',
    'tridiagonal_eigenvalues_nb_core',
    'shared_bounds_eigenvalues_nb_core',
    'gershgorin_bounds_np_core',
    'count_less_than_np_core',
    'tridiagonal_eigenvalues_np_core',
    'absolute_tolerance_np_core'
]
