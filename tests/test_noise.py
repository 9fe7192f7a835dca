import numpy as np
import pytest

from terrain_generator.noise import GradientField2D, GradientField3D, perlin_2d, perlin_3d


@pytest.fixture
def field_2d(rng):
    return GradientField2D(16, rng)


@pytest.fixture
def field_3d(rng):
    return GradientField3D(8, rng)


def test_2d_gradients_are_unit_length(field_2d):
    assert field_2d.gradients.shape == (16, 16, 2)
    np.testing.assert_allclose(np.linalg.norm(field_2d.gradients, axis=-1), 1.0)


def test_3d_gradients_are_unit_length(field_3d):
    assert field_3d.gradients.shape == (8, 8, 8, 3)
    np.testing.assert_allclose(np.linalg.norm(field_3d.gradients, axis=-1), 1.0)


def test_lattice_is_immutable(field_2d):
    with pytest.raises(ValueError):
        field_2d.gradients[0, 0, 0] = 5.0


def test_same_seed_reproduces_lattice():
    a = GradientField2D(8, np.random.default_rng(7))
    b = GradientField2D(8, np.random.default_rng(7))
    c = GradientField2D(8, np.random.default_rng(8))
    np.testing.assert_array_equal(a.gradients, b.gradients)
    assert not np.array_equal(a.gradients, c.gradients)


@pytest.mark.parametrize("size", [0, -3])
def test_rejects_non_positive_size(rng, size):
    with pytest.raises(ValueError):
        GradientField2D(size, rng)
    with pytest.raises(ValueError):
        GradientField3D(size, rng)


def test_scalar_input_returns_float(field_2d, field_3d):
    assert isinstance(field_2d.sample(1.3, 2.7), float)
    assert isinstance(field_3d(1.3, 2.7, 0.2), float)


def test_array_input_keeps_shape(field_2d):
    x = np.linspace(0, 10, 12).reshape(3, 4)
    assert field_2d(x, x).shape == (3, 4)
    # Broadcasting a scalar against an array.
    assert field_2d(x, 1.5).shape == (3, 4)


def test_zero_at_lattice_points(field_2d, field_3d):
    # Every corner offset is zero at an integer coordinate.
    assert field_2d(3.0, 5.0) == 0.0
    assert field_3d(1.0, 2.0, 3.0) == 0.0


def test_2d_periodicity(field_2d, rng):
    x = rng.uniform(-40, 40, 500)
    y = rng.uniform(-40, 40, 500)
    base = field_2d(x, y)
    np.testing.assert_allclose(field_2d(x + 16, y), base, atol=1e-9)
    np.testing.assert_allclose(field_2d(x, y + 16), base, atol=1e-9)


def test_3d_periodicity(field_3d, rng):
    x, y, z = rng.uniform(-20, 20, (3, 300))
    base = field_3d(x, y, z)
    np.testing.assert_allclose(field_3d(x + 8, y, z), base, atol=1e-9)
    np.testing.assert_allclose(field_3d(x, y + 8, z), base, atol=1e-9)
    np.testing.assert_allclose(field_3d(x, y, z + 8), base, atol=1e-9)


def test_negative_coordinates_wrap(field_2d):
    assert field_2d(-0.5, 0.25) == pytest.approx(field_2d(15.5, 0.25), abs=1e-12)


def test_bounded_range(field_2d, field_3d, rng):
    x, y, z = rng.uniform(0, 64, (3, 20000))
    assert np.max(np.abs(field_2d(x, y))) <= 1.0 + 1e-9
    assert np.max(np.abs(field_3d(x, y, z))) <= 1.0 + 1e-9


def test_output_is_not_constant(field_2d, rng):
    x, y = rng.uniform(0, 16, (2, 1000))
    assert np.std(field_2d(x, y)) > 0.05


def test_continuity_across_cell_boundaries(field_2d, field_3d, rng):
    delta = 1e-3
    # Straddle integer boundaries on purpose.
    x = np.floor(rng.uniform(0, 16, 2000)) - delta / 2
    y = rng.uniform(0, 16, 2000)
    diff_2d = np.abs(field_2d(x + delta, y) - field_2d(x, y))
    assert diff_2d.max() < 10 * delta

    z = rng.uniform(0, 8, 2000)
    diff_3d = np.abs(field_3d(x + delta, y, z) - field_3d(x, y, z))
    assert diff_3d.max() < 20 * delta


def test_constructor_helpers_return_callables(rng):
    sample_2d = perlin_2d(8, rng)
    sample_3d = perlin_3d(4, rng)
    assert np.isfinite(sample_2d(0.5, 0.5))
    assert np.isfinite(sample_3d(0.5, 0.5, 0.5))
