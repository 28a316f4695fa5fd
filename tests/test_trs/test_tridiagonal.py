import numpy as np
import pytest

from krylovtr.trs import TridiagonalMatrix, solve_tridiagonal_trs


def _model(T: np.ndarray, g: np.ndarray, h: np.ndarray) -> float:
    return float(g @ h + 0.5 * h @ (T @ h))


def _boundary_minimum_2d(T: np.ndarray, g: np.ndarray, radius: float) -> float:
    angles = np.linspace(0.0, 2.0 * np.pi, 200001)
    pts = radius * np.stack([np.cos(angles), np.sin(angles)], axis=1)
    values = pts @ g + 0.5 * np.einsum("ij,jk,ik->i", pts, T, pts)
    return float(values.min())


def test_tridiagonal_matrix_append_and_leading():
    T = TridiagonalMatrix(4)
    T.append(1.0)
    T.append(2.0, 0.5)
    T.append(3.0, -0.25)
    assert len(T) == 3
    assert T.capacity == 4
    assert np.array_equal(T.diagonal, [1.0, 2.0, 3.0])
    assert np.array_equal(T.offdiagonal, [0.5, -0.25])
    expected = np.array([[1.0, 0.5, 0.0], [0.5, 2.0, -0.25], [0.0, -0.25, 3.0]])
    assert np.array_equal(T.to_dense(), expected)
    assert np.array_equal(T.leading(2), expected[:2, :2])


def test_tridiagonal_matrix_rejects_invalid_rows():
    T = TridiagonalMatrix(2)
    with pytest.raises(ValueError):
        T.append(1.0, 0.5)
    T.append(1.0)
    with pytest.raises(ValueError):
        T.append(2.0)
    T.append(2.0, 1.0)
    with pytest.raises(ValueError, match="full"):
        T.append(3.0, 1.0)
    with pytest.raises(ValueError):
        T.leading(3)
    with pytest.raises(ValueError):
        TridiagonalMatrix(0)


def test_diagonal_accessor_returns_copy():
    T = TridiagonalMatrix(2)
    T.append(1.0)
    T.diagonal[0] = 42.0
    assert T.diagonal[0] == 1.0


def test_interior_solution():
    T = np.diag([2.0, 3.0])
    g = np.array([1.0, 1.0])
    res = solve_tridiagonal_trs(T, g, 10.0)
    assert not res.limited_by_tr
    assert not res.trouble
    assert res.accurate
    assert res.multiplier == 0.0
    assert np.allclose(res.h, [-0.5, -1.0 / 3.0])


def test_positive_definite_boundary_solution():
    T = np.array([[2.0, 1.0], [1.0, 2.0]])
    g = np.array([1.0, 0.0])
    res = solve_tridiagonal_trs(T, g, 0.1)
    assert res.limited_by_tr
    assert res.accurate
    assert not res.trouble
    assert np.linalg.norm(res.h) == pytest.approx(0.1)
    assert _model(T, g, res.h) <= _boundary_minimum_2d(T, g, 0.1) + 1e-8


def test_indefinite_boundary_solution():
    T = np.array([[-2.0, 1.0], [1.0, 1.0]])
    g = np.array([0.5, 0.3])
    res = solve_tridiagonal_trs(T, g, 1.0)
    assert res.limited_by_tr
    assert res.accurate
    assert res.multiplier >= -np.linalg.eigvalsh(T)[0]
    assert np.linalg.norm(res.h) == pytest.approx(1.0)
    assert _model(T, g, res.h) <= _boundary_minimum_2d(T, g, 1.0) + 1e-8


def test_hard_case():
    # g has no component along the leftmost eigenvector e_1.
    T = np.diag([-1.0, 2.0])
    g = np.array([0.0, 1.0])
    res = solve_tridiagonal_trs(T, g, 2.0)
    assert res.limited_by_tr
    assert res.trouble
    assert res.accurate
    assert res.multiplier == pytest.approx(1.0)
    assert np.linalg.norm(res.h) == pytest.approx(2.0)
    assert res.h[1] == pytest.approx(-1.0 / 3.0)
    assert abs(res.h[0]) == pytest.approx(np.sqrt(4.0 - 1.0 / 9.0))
    assert _model(T, g, res.h) <= _boundary_minimum_2d(T, g, 2.0) + 1e-8


def test_zero_gradient():
    res = solve_tridiagonal_trs(np.diag([-1.0, 1.0]), np.zeros(2), 1.0)
    assert res.limited_by_tr
    assert abs(res.h[0]) == pytest.approx(1.0)
    assert res.h[1] == pytest.approx(0.0)

    res = solve_tridiagonal_trs(np.diag([1.0, 1.0]), np.zeros(2), 1.0)
    assert not res.limited_by_tr
    assert np.array_equal(res.h, np.zeros(2))


def test_scalar_problem():
    res = solve_tridiagonal_trs(np.array([[1.0]]), np.array([1.0]), 0.5)
    assert res.limited_by_tr
    assert np.allclose(res.h, [-0.5])
    assert res.multiplier == pytest.approx(1.0)


def test_accepts_tridiagonal_matrix():
    T = TridiagonalMatrix(3)
    T.append(-1.0)
    T.append(2.0, 0.5)
    T.append(1.0, 0.3)
    g = np.array([1.0, 0.0, 0.0])
    from_object = solve_tridiagonal_trs(T, g, 0.7)
    from_dense = solve_tridiagonal_trs(T.to_dense(), g, 0.7)
    assert np.array_equal(from_object.h, from_dense.h)


def test_optimality_conditions_random(rng):
    for n in (1, 3, 6, 10):
        for _ in range(5):
            diag = rng.standard_normal(n)
            off = rng.standard_normal(n - 1)
            T = np.diag(diag) + np.diag(off, 1) + np.diag(off, -1)
            g = np.zeros(n)
            g[0] = abs(rng.standard_normal()) + 0.1
            radius = float(rng.uniform(0.1, 2.0))
            res = solve_tridiagonal_trs(T, g, radius)
            lam = res.multiplier
            assert res.accurate
            assert lam >= 0.0
            assert np.linalg.eigvalsh(T + lam * np.eye(n))[0] >= -1e-8
            assert np.allclose((T + lam * np.eye(n)) @ res.h, -g, atol=1e-7)
            assert np.linalg.norm(res.h) <= radius + 1e-10
            if res.limited_by_tr:
                assert np.linalg.norm(res.h) == pytest.approx(radius, rel=1e-8)


@pytest.mark.parametrize(
    "T, g, radius",
    [
        (np.ones((2, 3)), np.ones(2), 1.0),
        (np.eye(2), np.ones(3), 1.0),
        (np.eye(2), np.ones(2), 0.0),
    ],
)
def test_invalid_inputs(T, g, radius):
    with pytest.raises(ValueError):
        solve_tridiagonal_trs(T, g, radius)
