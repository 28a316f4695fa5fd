import numpy as np
import pytest

from krylovtr.manifolds import Euclidean, Manifold, lincomb_many, supports_finite_differences


def test_euclidean_satisfies_manifold_protocol():
    M = Euclidean(3)
    assert isinstance(M, Manifold)
    assert supports_finite_differences(M)


def test_euclidean_basic_operations(rng):
    M = Euclidean(2, 3)
    assert M.dimension() == 6
    x = M.random_point(rng)
    u = rng.standard_normal((2, 3))
    v = rng.standard_normal((2, 3))
    assert M.inner_product(x, u, v) == pytest.approx(float(np.sum(u * v)))
    assert M.norm(x, u) == pytest.approx(np.sqrt(np.sum(u * u)))
    assert np.array_equal(M.tangentialize(x, u), u)
    assert np.array_equal(M.zero_vector(x), np.zeros((2, 3)))
    assert np.allclose(M.lincomb(x, 2.0, u, -1.0, v), 2 * u - v)
    assert np.allclose(M.lincomb(x, 0.5, u), 0.5 * u)
    assert np.allclose(M.retraction(x, u), x + u)
    assert np.array_equal(M.transport(x, x + u, v), v)


def test_random_tangent_vector_is_unit(rng):
    M = Euclidean(5)
    v = M.random_tangent_vector(np.zeros(5), rng)
    assert M.norm(None, v) == pytest.approx(1.0)


def test_invalid_shape():
    with pytest.raises(ValueError):
        Euclidean()
    with pytest.raises(ValueError):
        Euclidean(0)


def test_lincomb_many():
    M = Euclidean(2)
    vecs = [np.array([1.0, 0.0]), np.array([0.0, 1.0])]
    assert np.allclose(lincomb_many(M, None, [3.0, 4.0], vecs), [3.0, 4.0])
    with pytest.raises(ValueError):
        lincomb_many(M, None, [1.0], vecs)
