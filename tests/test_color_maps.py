import numpy as np
import pytest

from terrain_generator import color_maps


@pytest.mark.parametrize("height,normal_y,expected", [
    (-20.0, 1.0, color_maps.SURFACE_ID_SEA),
    (-20.0, 0.1, color_maps.SURFACE_ID_SEA),
    (30.0, 0.99, color_maps.SURFACE_ID_PEAK),
    (30.0, 0.5, color_maps.SURFACE_ID_CLIFF),
    (0.0, 0.5, color_maps.SURFACE_ID_CLIFF),
    (0.0, 0.99, color_maps.SURFACE_ID_GRASS_FLAT),
    (0.0, 0.9, color_maps.SURFACE_ID_GRASS),
    (-14.5, 0.9, color_maps.SURFACE_ID_GRASS),
    (24.0, 0.99, color_maps.SURFACE_ID_PEAK),
])
def test_default_threshold_ladder(height, normal_y, expected):
    surface_map = color_maps.calculate_surface_map(np.array([height]), np.array([normal_y]))
    assert surface_map.dtype == np.uint8
    assert surface_map[0] == expected


def test_threshold_overrides():
    heights = np.array([-10.0, 10.0])
    normal_y = np.array([1.0, 1.0])
    surface_map = color_maps.calculate_surface_map(heights, normal_y, {"sea": 0.0, "peak": 5.0})
    np.testing.assert_array_equal(surface_map, [color_maps.SURFACE_ID_SEA, color_maps.SURFACE_ID_PEAK])


def test_surface_lut():
    lut = color_maps.create_surface_color_lut()
    assert lut.shape == (5, 4)
    assert lut.dtype == np.float32
    np.testing.assert_array_equal(lut[:, 3], 1.0)
    np.testing.assert_array_equal(lut[color_maps.SURFACE_ID_PEAK], [1.0, 1.0, 1.0, 1.0])
    assert np.all((lut >= 0.0) & (lut <= 1.0))


def test_classify_vertices_reads_height_and_normal_y():
    positions = np.array([[0.0, -20.0, 0.0], [1.0, 30.0, 0.0], [2.0, 0.0, 0.0]])
    normals = np.array([[0.0, 1.0, 0.0], [0.0, 1.0, 0.0], [0.6, 0.8 - 1e-6, 0.0]])
    colors = color_maps.classify_vertices(positions, normals)
    lut = color_maps.create_surface_color_lut()
    np.testing.assert_array_equal(colors[0], lut[color_maps.SURFACE_ID_SEA])
    np.testing.assert_array_equal(colors[1], lut[color_maps.SURFACE_ID_PEAK])
    np.testing.assert_array_equal(colors[2], lut[color_maps.SURFACE_ID_CLIFF])


def test_preview_color_array():
    lut = color_maps.create_surface_color_lut()
    colors = lut[np.array([0, 1, 2, 3, 4, 4])]
    preview = color_maps.get_preview_color_array(colors, 1, 2)
    assert preview.shape == (2, 3, 3)
    assert preview.dtype == np.uint8
    np.testing.assert_array_equal(preview[0, 0], color_maps.COLOR_MAP_SURFACE["sea"])
    np.testing.assert_array_equal(preview[1, 2], color_maps.COLOR_MAP_SURFACE["peak"])
