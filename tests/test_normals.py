import numpy as np
import pytest

from terrain_generator import heightmaps
from terrain_generator.mesh import build_grid, flat_heightmap
from terrain_generator.normals import (
    FIXED_KERNEL,
    DegenerateNormalError,
    accumulate_face_normals,
    gaussian_kernel,
    make_kernel,
    normalize_rows,
    smooth_normals,
)


@pytest.fixture
def noisy_grid(rng):
    terrain = heightmaps.terrain_heightmap(rng, lattice_size=16)
    return build_grid(20, 15, 1.0, terrain)


def test_face_normals_are_unit_length(noisy_grid):
    positions, _, indices = noisy_grid
    face_normals = accumulate_face_normals(positions, indices)
    assert face_normals.shape == positions.shape
    np.testing.assert_allclose(np.linalg.norm(face_normals, axis=1), 1.0, atol=1e-4)


def test_smoothed_normals_are_unit_length(noisy_grid):
    positions, _, indices = noisy_grid
    face_normals = accumulate_face_normals(positions, indices)
    for kernel in (gaussian_kernel(4, 3.0), FIXED_KERNEL):
        smoothed = smooth_normals(face_normals, 20, 15, kernel)
        np.testing.assert_allclose(np.linalg.norm(smoothed, axis=1), 1.0, atol=1e-4)


def test_face_normals_point_up_on_flat_grid():
    positions, _, indices = build_grid(3, 3, 0.5, flat_heightmap)
    face_normals = accumulate_face_normals(positions, indices)
    np.testing.assert_array_equal(face_normals, np.tile([0.0, 1.0, 0.0], (16, 1)))


def test_tilted_plane_keeps_its_normal_after_smoothing():
    positions, _, indices = build_grid(6, 5, 1.0, lambda x, y: 0.5 * x)
    face_normals = accumulate_face_normals(positions, indices)
    smoothed = smooth_normals(face_normals, 6, 5, gaussian_kernel(4, 3.0))
    expected = np.array([-0.5, 1.0, 0.0]) / np.sqrt(1.25)
    np.testing.assert_allclose(face_normals, np.tile(expected, (42, 1)), atol=1e-12)
    # Clamped borders keep a uniform field uniform, even at the edges.
    np.testing.assert_allclose(smoothed, np.tile(expected, (42, 1)), atol=1e-12)


def test_smoothing_clamps_at_borders():
    # A single 1x1 cell: vertex (0,0) differs from the other three.
    normals = np.array([
        [1.0, 0.0, 0.0],
        [0.0, 1.0, 0.0],
        [0.0, 1.0, 0.0],
        [0.0, 1.0, 0.0],
    ])
    smoothed = smooth_normals(normals, 1, 1, FIXED_KERNEL)
    # Clamping folds the weights 1 + 2 + 2 + 4 onto the corner itself.
    np.testing.assert_allclose(smoothed[0], np.array([9.0, 7.0, 0.0]) / np.hypot(9.0, 7.0))
    # The opposite corner only sees the diagonal weight.
    np.testing.assert_allclose(smoothed[3], np.array([1.0, 15.0, 0.0]) / np.hypot(1.0, 15.0))


def test_gaussian_kernel_weights():
    kernel = gaussian_kernel(4, 3.0)
    assert kernel.shape == (9, 9)
    assert kernel[4, 4] == 1.0
    assert kernel[5, 4] == pytest.approx(np.exp(-1.0 / 18.0))
    assert kernel[0, 0] == pytest.approx(np.exp(-32.0 / 18.0))
    np.testing.assert_array_equal(kernel, kernel.T)
    np.testing.assert_array_equal(kernel, kernel[::-1, ::-1])


def test_make_kernel():
    np.testing.assert_array_equal(make_kernel('fixed'), FIXED_KERNEL)
    assert make_kernel('gaussian', 2, 1.0).shape == (5, 5)
    with pytest.raises(ValueError):
        make_kernel('box')
    with pytest.raises(ValueError):
        gaussian_kernel(2, 0.0)


def test_normalize_rows_rejects_zero_vectors():
    with pytest.raises(DegenerateNormalError):
        normalize_rows(np.array([[0.0, 2.0, 0.0], [0.0, 0.0, 0.0]]))


def test_zero_area_triangle_is_reported():
    positions = np.zeros((3, 3))
    with pytest.raises(DegenerateNormalError):
        accumulate_face_normals(positions, np.array([0, 1, 2], dtype=np.uint32))


def test_untouched_vertex_is_reported():
    positions = np.array([[0.0, 0.0, 0.0], [0.0, 0.0, 1.0], [1.0, 0.0, 1.0], [5.0, 0.0, 5.0]])
    with pytest.raises(DegenerateNormalError):
        accumulate_face_normals(positions, np.array([0, 1, 2], dtype=np.uint32))


def test_smooth_normals_checks_shape():
    with pytest.raises(ValueError):
        smooth_normals(np.ones((5, 3)), 1, 1, FIXED_KERNEL)
