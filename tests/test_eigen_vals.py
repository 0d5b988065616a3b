#!/usr/bin/env python3
import numpy as np
import pytest
from scipy.linalg import eigh_tridiagonal
from GAUSStools.funcs.eigen_vals import (
    EigenvalueOperations,
    gershgorin_bounds,
    count_less_than,
    kth_eigenvalue,
    tridiagonal_eigenvalues,
    shared_bounds_eigenvalues,
    gershgorin_bounds_np_core,
    absolute_tolerance_np_core,
)

HERMITE_5_DIAG = np.zeros(5)
HERMITE_5_OFF = np.array([0.0, np.sqrt(0.5), 1.0, np.sqrt(1.5), np.sqrt(2.0)])
HERMITE_5_ZEROS = np.array([-2.020183, -0.958572, 0.0, 0.958572, 2.020183])


def random_matrix(n, seed):
    rng = np.random.default_rng(seed)
    diagonal = rng.uniform(-5.0, 5.0, n)
    off_diagonal = rng.uniform(-2.0, 2.0, n)
    off_diagonal[0] = 0.0
    return diagonal, off_diagonal


def reference_eigenvalues(diagonal, off_diagonal):
    return eigh_tridiagonal(diagonal, off_diagonal[1:], eigvals_only=True)


# a few structured cases plus random ones
TEST_MATRICES = [
    (HERMITE_5_DIAG, HERMITE_5_OFF),
    (np.array([1.0, 2.0, 3.0, 4.0]), np.zeros(4)),
    (np.full(6, 2.0), np.full(6, -1.0)),                    # 1D Laplacian
    (np.arange(1.0, 11.0) ** 2, np.arange(10.0) ** 2),
    (np.array([3.0]), np.array([0.0])),
] + [random_matrix(n, seed) for seed, n in enumerate((2, 7, 16, 33, 100))]


def slow_reference_count(diagonal, off_diagonal, x):
    """
    Sign changes of the leading principal minors of (T - xI), each minor
    evaluated by plain recursion (exponential cost, small n only).
    """
    def minor(i):
        if i < 0:
            return 1.0
        if i == 0:
            return diagonal[0] - x
        return (diagonal[i] - x) * minor(i - 1) - off_diagonal[i] ** 2 * minor(i - 2)

    count = 0
    previous = 1.0
    for i in range(len(diagonal)):
        current = minor(i)
        if current * previous < 0:
            count += 1
        previous = current
    return count


def test_hermite_degree_5_zeros():
    eigenvalues = tridiagonal_eigenvalues(HERMITE_5_DIAG, HERMITE_5_OFF)
    assert np.allclose(eigenvalues, HERMITE_5_ZEROS, rtol=0.0, atol=1e-6)


def test_diagonal_matrix():
    eigenvalues = tridiagonal_eigenvalues([1.0, 2.0, 3.0, 4.0], [0.0, 0.0, 0.0, 0.0])
    assert np.allclose(eigenvalues, [1.0, 2.0, 3.0, 4.0], rtol=0.0, atol=1e-12)


def test_repeated_and_zero_eigenvalues():
    assert np.allclose(tridiagonal_eigenvalues([2.0, 2.0, 2.0], [0.0, 0.0, 0.0]), 2.0)
    assert np.allclose(tridiagonal_eigenvalues(np.zeros(4), np.zeros(4)), 0.0)
    assert np.allclose(shared_bounds_eigenvalues(np.zeros(4), np.zeros(4)), 0.0)


def test_single_element():
    assert np.isclose(kth_eigenvalue([-3.5], [0.0], 0), -3.5)
    assert np.allclose(tridiagonal_eigenvalues([-3.5], [0.0]), [-3.5])


@pytest.mark.parametrize("diagonal, off_diagonal", TEST_MATRICES)
def test_matches_scipy(diagonal, off_diagonal):
    expected = reference_eigenvalues(diagonal, off_diagonal)
    eigenvalues = tridiagonal_eigenvalues(diagonal, off_diagonal)
    assert np.allclose(eigenvalues, expected, rtol=1e-10, atol=1e-10)
    assert np.all(np.diff(eigenvalues) >= 0), "Eigenvalues are not ascending!"


@pytest.mark.parametrize("diagonal, off_diagonal", TEST_MATRICES)
def test_interval_containment(diagonal, off_diagonal):
    lower, upper = gershgorin_bounds(diagonal, off_diagonal)
    eigenvalues = tridiagonal_eigenvalues(diagonal, off_diagonal)
    assert np.all(eigenvalues >= lower) and np.all(eigenvalues <= upper)


@pytest.mark.parametrize("diagonal, off_diagonal", TEST_MATRICES)
def test_gershgorin_numba_matches_numpy(diagonal, off_diagonal):
    nb_bounds = gershgorin_bounds(diagonal, off_diagonal)
    np_bounds = EigenvalueOperations(use_numba=False).gershgorin_bounds(diagonal, off_diagonal)
    assert nb_bounds == np_bounds


def test_gershgorin_last_row_radius():
    # last row only sees off_diagonal[n-1]
    lower, upper = gershgorin_bounds([0.0, 10.0], [0.0, 1.0])
    assert (lower, upper) == (-1.0, 11.0)
    lower, upper = gershgorin_bounds_np_core(np.array([0.0, 10.0]), np.array([0.0, 1.0]))
    assert (lower, upper) == (-1.0, 11.0)


@pytest.mark.parametrize("diagonal, off_diagonal", TEST_MATRICES)
def test_sturm_count_completeness(diagonal, off_diagonal):
    n = len(diagonal)
    lower, upper = gershgorin_bounds(diagonal, off_diagonal)
    assert count_less_than(diagonal, off_diagonal, lower) == 0
    assert count_less_than(diagonal, off_diagonal, np.nextafter(upper, np.inf)) == n


@pytest.mark.parametrize("diagonal, off_diagonal", TEST_MATRICES)
def test_sturm_count_monotonic(diagonal, off_diagonal):
    lower, upper = gershgorin_bounds(diagonal, off_diagonal)
    shifts = np.linspace(lower - 1.0, upper + 1.0, 257)
    for use_numba in (True, False):
        ops = EigenvalueOperations(use_numba=use_numba)
        counts = [ops.count_less_than(diagonal, off_diagonal, x) for x in shifts]
        assert all(c0 <= c1 for c0, c1 in zip(counts, counts[1:]))
        assert counts[0] == 0 and counts[-1] == len(diagonal)


def test_sturm_count_matches_slow_reference():
    rng = np.random.default_rng(1234)
    for n in (1, 2, 5, 9):
        diagonal, off_diagonal = random_matrix(n, n)
        for x in rng.uniform(-8.0, 8.0, 25):
            expected = slow_reference_count(diagonal, off_diagonal, x)
            assert count_less_than(diagonal, off_diagonal, x) == expected
            assert EigenvalueOperations(use_numba=False).count_less_than(
                diagonal, off_diagonal, x) == expected


def test_sturm_count_counts_strictly_less():
    diagonal, off_diagonal = [1.0, 2.0, 3.0, 4.0], np.zeros(4)
    assert count_less_than(diagonal, off_diagonal, 2.0) == 1
    assert count_less_than(diagonal, off_diagonal, np.nextafter(2.0, 3.0)) == 2


def test_sturm_count_zero_pivot():
    # eigenvalues are -sqrt(2), 0, sqrt(2); q_0 = 0 at x = 0
    diagonal, off_diagonal = np.zeros(3), np.array([0.0, 1.0, 1.0])
    assert count_less_than(diagonal, off_diagonal, 0.0) == 1
    assert EigenvalueOperations(use_numba=False).count_less_than(diagonal, off_diagonal, 0.0) == 1
    assert count_less_than(diagonal, off_diagonal, 1.5) == 3
    assert np.allclose(tridiagonal_eigenvalues(diagonal, off_diagonal),
                       [-np.sqrt(2.0), 0.0, np.sqrt(2.0)], atol=1e-12)


def test_kth_eigenvalue_is_ascending_index():
    diagonal, off_diagonal = random_matrix(12, 99)
    eigenvalues = tridiagonal_eigenvalues(diagonal, off_diagonal)
    n = len(diagonal)
    for k in range(n):
        assert np.isclose(kth_eigenvalue(diagonal, off_diagonal, k), eigenvalues[k])
    # k-th largest is index n - 1 - k
    assert np.isclose(kth_eigenvalue(diagonal, off_diagonal, n - 1), eigenvalues.max())
    assert np.isclose(
        EigenvalueOperations(use_numba=False).kth_eigenvalue(diagonal, off_diagonal, 0),
        eigenvalues.min())


@pytest.mark.parametrize("diagonal, off_diagonal", TEST_MATRICES)
def test_parallel_and_shared_bounds_agree(diagonal, off_diagonal):
    parallel = tridiagonal_eigenvalues(diagonal, off_diagonal)
    shared = shared_bounds_eigenvalues(diagonal, off_diagonal)
    assert np.allclose(parallel, shared, rtol=1e-10, atol=1e-6)


@pytest.mark.parametrize("diagonal, off_diagonal", TEST_MATRICES)
def test_numpy_fallback_matches_numba(diagonal, off_diagonal):
    nb_values = EigenvalueOperations(use_numba=True).eigenvalues(diagonal, off_diagonal)
    np_values = EigenvalueOperations(use_numba=False).eigenvalues(diagonal, off_diagonal)
    assert np.allclose(nb_values, np_values, rtol=1e-10, atol=1e-6)


def test_shared_bounds_strategy_and_py_func():
    diagonal, off_diagonal = random_matrix(20, 5)
    expected = reference_eigenvalues(diagonal, off_diagonal)
    ops = EigenvalueOperations(strategy='shared_bounds')
    assert np.allclose(ops.eigenvalues(diagonal, off_diagonal), expected, atol=1e-10)
    ops = EigenvalueOperations(use_numba=False, strategy='shared_bounds')
    assert np.allclose(ops.eigenvalues(diagonal, off_diagonal), expected, atol=1e-10)


def test_large_matrix():
    # same bands as the original benchmark: diagonal i^2, off-diagonal i^4
    n = 1000
    diagonal = np.arange(1, n + 1, dtype=np.float64) ** 2
    off_diagonal = np.arange(n, dtype=np.float64) ** 4
    expected = reference_eigenvalues(diagonal, off_diagonal)
    eigenvalues = tridiagonal_eigenvalues(diagonal, off_diagonal)
    scale = np.max(np.abs(expected))
    assert np.max(np.abs(eigenvalues - expected)) <= 1e-10 * scale


def test_float32_precision():
    diagonal, off_diagonal = random_matrix(10, 3)
    ops = EigenvalueOperations(precision='float32')
    eigenvalues = ops.eigenvalues(diagonal, off_diagonal)
    assert eigenvalues.dtype == np.float32
    assert np.allclose(eigenvalues, reference_eigenvalues(diagonal, off_diagonal), atol=1e-4)
    shared = EigenvalueOperations(precision='float32', strategy='shared_bounds')
    assert np.allclose(shared.eigenvalues(diagonal, off_diagonal), eigenvalues, atol=1e-4)
    assert EigenvalueOperations(precision='float32', use_numba=False).eigenvalues(
        diagonal, off_diagonal).dtype == np.float32


def test_idempotent_and_inputs_untouched():
    diagonal, off_diagonal = random_matrix(25, 11)
    diagonal_copy, off_diagonal_copy = diagonal.copy(), off_diagonal.copy()
    first = tridiagonal_eigenvalues(diagonal, off_diagonal)
    second = tridiagonal_eigenvalues(diagonal, off_diagonal)
    assert np.array_equal(first, second)
    assert np.array_equal(shared_bounds_eigenvalues(diagonal, off_diagonal),
                          shared_bounds_eigenvalues(diagonal, off_diagonal))
    assert np.array_equal(diagonal, diagonal_copy)
    assert np.array_equal(off_diagonal, off_diagonal_copy)


def test_first_off_diagonal_entry_ignored_by_count():
    diagonal, off_diagonal = random_matrix(8, 21)
    shifted = off_diagonal.copy()
    shifted[0] = 100.0
    for x in (-3.0, 0.0, 2.5):
        assert count_less_than(diagonal, off_diagonal, x) == count_less_than(diagonal, shifted, x)
    assert np.allclose(tridiagonal_eigenvalues(diagonal, off_diagonal),
                       tridiagonal_eigenvalues(diagonal, shifted))


def test_invalid_dimensions():
    with pytest.raises(ValueError):
        tridiagonal_eigenvalues([1.0, 2.0], [0.0])
    with pytest.raises(ValueError):
        tridiagonal_eigenvalues([], [])
    with pytest.raises(ValueError):
        gershgorin_bounds(np.ones((2, 2)), np.ones((2, 2)))
    with pytest.raises(ValueError):
        kth_eigenvalue([1.0, 2.0], [0.0, 0.0], 2)
    with pytest.raises(ValueError):
        kth_eigenvalue([1.0, 2.0], [0.0, 0.0], -1)
    with pytest.raises(ValueError):
        EigenvalueOperations(precision='float16')
    with pytest.raises(ValueError):
        EigenvalueOperations(strategy='qr')


def test_batch_keeps_input_order():
    matrices = [random_matrix(n, seed) for seed, n in enumerate((3, 9, 4, 15))]
    expected = [reference_eigenvalues(d, e) for d, e in matrices]
    for n_jobs in (1, 2):
        results = EigenvalueOperations(n_jobs=n_jobs).eigenvalues_batch(matrices)
        assert len(results) == len(expected)
        for result, reference in zip(results, expected):
            assert np.allclose(result, reference, atol=1e-10)


def test_batch_rejects_bad_matrix_before_solving():
    matrices = [random_matrix(4, 0), (np.ones(3), np.ones(2))]
    with pytest.raises(ValueError):
        EigenvalueOperations().eigenvalues_batch(matrices)


def test_verbose_prints_timing(capsys):
    EigenvalueOperations(verbose=True).eigenvalues(HERMITE_5_DIAG, HERMITE_5_OFF)
    EigenvalueOperations(verbose=True, strategy='shared_bounds').eigenvalues(
        HERMITE_5_DIAG, HERMITE_5_OFF)
    out = capsys.readouterr().out
    assert "bisection, n = 5" in out
    assert "shared_bounds, n = 5" in out


def test_bands_near_float_limit():
    # bracket spans [-1e308, 1e308]; its width does not fit in a float
    diagonal, off_diagonal = np.array([1e308, -1e308]), np.zeros(2)
    expected = [-1e308, 1e308]
    assert np.allclose(tridiagonal_eigenvalues(diagonal, off_diagonal), expected, rtol=1e-12, atol=0.0)
    assert np.allclose(shared_bounds_eigenvalues(diagonal, off_diagonal), expected, rtol=1e-12, atol=0.0)
    assert np.isclose(kth_eigenvalue(diagonal, off_diagonal, 1), 1e308, rtol=1e-12, atol=0.0)
    np_ops = EigenvalueOperations(use_numba=False)
    assert np.allclose(np_ops.eigenvalues(diagonal, off_diagonal), expected, rtol=1e-12, atol=0.0)
    assert np.allclose(np_ops.shared_bounds_eigenvalues(diagonal, off_diagonal),
                       expected, rtol=1e-12, atol=0.0)


def test_tiny_matrix_tolerance_floor():
    eps = np.finfo(np.float64).eps
    tiny = np.finfo(np.float64).tiny
    # eps^2 * 2e-300 underflows, the floor falls back to the smallest normal float
    assert absolute_tolerance_np_core(-1e-300, 1e-300, eps, tiny) == tiny
    assert absolute_tolerance_np_core(-1.0, 1.0, eps, tiny) == 2 * eps * eps

    diagonal, off_diagonal = np.array([1e-300, 0.0, -1e-300]), np.zeros(3)
    expected = [-1e-300, 0.0, 1e-300]
    for use_numba in (True, False):
        ops = EigenvalueOperations(use_numba=use_numba)
        eigenvalues = ops.eigenvalues(diagonal, off_diagonal)
        assert np.allclose(eigenvalues, expected, rtol=1e-12, atol=tiny)
        assert np.allclose(ops.shared_bounds_eigenvalues(diagonal, off_diagonal),
                           expected, rtol=1e-12, atol=tiny)


@pytest.mark.parametrize("k", [1.5, True, np.float64(1.0), "1"])
def test_kth_eigenvalue_rejects_non_integer_index(k):
    with pytest.raises(ValueError, match="integer"):
        kth_eigenvalue([1.0, 2.0, 3.0], [0.0, 0.0, 0.0], k)


def test_kth_eigenvalue_accepts_numpy_integer_index():
    assert np.isclose(kth_eigenvalue([1.0, 2.0, 3.0], [0.0, 0.0, 0.0], np.int32(1)), 2.0)
