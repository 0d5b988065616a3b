from numba import types
import numpy as np

##############################################################################
# Global constants
##############################################################################

HERMITE, LAGUERRE, LEGENDRE, CHEBYSHEV_T, CHEBYSHEV_U = 0, 1, 2, 3, 4  # family codes
FAMILIES = {
    'hermite': HERMITE,          # weight exp(-x^2) on (-inf, inf), physicists' H_n
    'laguerre': LAGUERRE,        # weight exp(-x) on [0, inf)
    'legendre': LEGENDRE,        # weight 1 on [-1, 1]
    'chebyshev_t': CHEBYSHEV_T,  # weight 1/sqrt(1 - x^2) on [-1, 1]
    'chebyshev_u': CHEBYSHEV_U,  # weight sqrt(1 - x^2) on [-1, 1]
}

# mu_0 = integral of the weight function over its support
WEIGHT_MOMENTS = {
    HERMITE: np.sqrt(np.pi),
    LAGUERRE: 1.0,
    LEGENDRE: 2.0,
    CHEBYSHEV_T: np.pi,
    CHEBYSHEV_U: 0.5 * np.pi,
}

##############################################################################
# Type signatures for Numba functions
##############################################################################

# Christoffel weights from the Jacobi matrix
christoffel_weights_sig_32 = types.float32[:](
    types.float32[:],             # nodes: (n,)
    types.float32[:],             # diagonal: (n,)
    types.float32[:],             # off_diagonal: (n,)
    types.float32,                # mu_0: integral of the weight function
)
christoffel_weights_sig_64 = types.float64[:](
    types.float64[:],             # nodes: (n,)
    types.float64[:],             # diagonal: (n,)
    types.float64[:],             # off_diagonal: (n,)
    types.float64,                # mu_0: integral of the weight function
)
