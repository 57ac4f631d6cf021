import numpy as np
import pytest

from mandelview import ComplexPoint, IterationResult, ViewportState, classify, classify_grid, plane_grid


@pytest.mark.parametrize("bound", [1, 2, 50, 100])
def test_origin_never_escapes(bound):
    assert classify(ComplexPoint(0.0, 0.0), bound) == IterationResult(escaped=False, iterations=bound)


def test_two_escapes_after_one_iteration():
    assert classify(ComplexPoint(2.0, 0.0), 50) == IterationResult(escaped=True, iterations=1)


def test_minus_one_is_in_the_set():
    result = classify(ComplexPoint(-1.0, 0.0), 50)
    assert result == IterationResult(escaped=False, iterations=50)
    assert result.in_set


def test_hand_traced_escape():
    # c = 0.5: z = 0.5, 0.75, 1.0625, 1.62890625, 3.15...
    assert classify(ComplexPoint(0.5, 0.0), 100) == IterationResult(escaped=True, iterations=5)
    assert classify(ComplexPoint(0.5, 0.0), 3) == IterationResult(escaped=False, iterations=3)


def test_zero_bound_never_iterates():
    assert classify(ComplexPoint(5.0, 5.0), 0) == IterationResult(escaped=False, iterations=0)


def test_grid_matches_scalar_classifier():
    reals, imaginaries = plane_grid(ViewportState(0.6, -0.5, 0.0), 24, 18)
    counts = classify_grid(reals, imaginaries, 40)
    assert counts.shape == (18, 24)
    for y in range(18):
        for x in range(24):
            c = ComplexPoint(float(reals[y, x]), float(imaginaries[y, x]))
            assert counts[y, x] == classify(c, 40).iterations


def test_grid_known_points():
    reals = np.array([[0.0, 2.0, -1.0, 0.5]])
    imaginaries = np.zeros_like(reals)
    counts = classify_grid(reals, imaginaries, 50)
    assert counts.tolist() == [[50, 1, 50, 5]]


def test_grid_edge_cases():
    assert classify_grid(np.zeros((0, 3)), np.zeros((0, 3)), 10).shape == (0, 3)
    assert classify_grid(np.ones((2, 2)), np.ones((2, 2)), 0).tolist() == [[0, 0], [0, 0]]
    with pytest.raises(ValueError):
        classify_grid(np.zeros((2, 2)), np.zeros((2, 3)), 10)
