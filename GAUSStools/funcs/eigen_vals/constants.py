from numba import types

##############################################################################
# Global constants
##############################################################################

DEFAULT_PRECISION = 'float64'
PRECISIONS = ('float32', 'float64')
STRATEGIES = ('bisection', 'shared_bounds')   # 'bisection' is the default
MAX_BISECTION_ITERATIONS = 2200                 # > exponent + mantissa range of float64

##############################################################################
# Type signatures for Numba functions
##############################################################################

# Gershgorin bounds of the tridiagonal bands
gershgorin_bounds_sig_32 = types.UniTuple(types.float32, 2)(
    types.float32[:],             # diagonal: (n,)
    types.float32[:],             # off_diagonal: (n,), entry 0 unused by the Sturm count
)
gershgorin_bounds_sig_64 = types.UniTuple(types.float64, 2)(
    types.float64[:],             # diagonal: (n,)
    types.float64[:],             # off_diagonal: (n,)
)

# All eigenvalues, independent bisection per index
tridiagonal_eigenvalues_sig_32 = types.float32[:](
    types.float32[:],             # diagonal: (n,)
    types.float32[:],             # off_diagonal: (n,)
    types.float32,                # lower Gershgorin bound
    types.float32,                # upper Gershgorin bound
    types.float32,                # machine epsilon of the working precision
    types.float32,                # absolute tolerance floor
)
tridiagonal_eigenvalues_sig_64 = types.float64[:](
    types.float64[:],             # diagonal: (n,)
    types.float64[:],             # off_diagonal: (n,)
    types.float64,                # lower Gershgorin bound
    types.float64,                # upper Gershgorin bound
    types.float64,                # machine epsilon of the working precision
    types.float64,                # absolute tolerance floor
)

# All eigenvalues, sequential sweep with shared bound arrays
shared_bounds_eigenvalues_sig_32 = types.float32[:](
    types.float32[:],             # diagonal: (n,)
    types.float32[:],             # off_diagonal: (n,)
    types.float32,                # lower Gershgorin bound
    types.float32,                # upper Gershgorin bound
    types.float32,                # machine epsilon of the working precision
    types.float32,                # absolute tolerance floor
)
shared_bounds_eigenvalues_sig_64 = types.float64[:](
    types.float64[:],             # diagonal: (n,)
    types.float64[:],             # off_diagonal: (n,)
    types.float64,                # lower Gershgorin bound
    types.float64,                # upper Gershgorin bound
    types.float64,                # machine epsilon of the working precision
    types.float64,                # absolute tolerance floor
)
