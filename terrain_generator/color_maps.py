# terrain_generator/color_maps.py

"""
================================================================================
SURFACE CLASSIFICATION & COLOR MAPPING
================================================================================
This module classifies terrain vertices into surface categories from their
height and the up component of their smoothed normal, and converts the
resulting category map into per-vertex RGBA colors.

It is a pure, stateless utility with no dependencies on any renderer.
================================================================================
"""
import numpy as np
from . import config as DEFAULTS

# --- Surface ID Constants ---
SURFACE_ID_SEA = 0
SURFACE_ID_CLIFF = 1
SURFACE_ID_GRASS = 2
SURFACE_ID_GRASS_FLAT = 3
SURFACE_ID_PEAK = 4

SURFACE_NAMES = ("sea", "cliff", "grass", "grass_flat", "peak")

# --- Default Color Mappings ---
COLOR_MAP_SURFACE = {
    "sea": (26, 77, 153),
    "cliff": (128, 128, 128),
    "grass": (51, 128, 38),
    "grass_flat": (89, 179, 51),
    "peak": (255, 255, 255),
}


def create_surface_color_lut() -> np.ndarray:
    """Creates a LUT where the index is the surface ID and the value is an RGBA color in [0, 1]."""
    rgb = np.array([COLOR_MAP_SURFACE[name] for name in SURFACE_NAMES], dtype=np.float32) / 255.0
    alpha = np.ones((len(SURFACE_NAMES), 1), dtype=np.float32)
    return np.hstack([rgb, alpha])


def calculate_surface_map(heights: np.ndarray, normal_y: np.ndarray, thresholds: dict = None) -> np.ndarray:
    """
    Returns a uint8 array of surface IDs, checked in order:
    below sea level, too steep, grassland (flat or sloped), and peaks above the rest.
    """
    levels = dict(DEFAULTS.SURFACE_THRESHOLDS)
    if thresholds:
        levels.update(thresholds)

    heights = np.asarray(heights)
    normal_y = np.asarray(normal_y)
    below_peak = heights < levels["peak"]

    conditions = [
        heights < levels["sea"],
        normal_y < levels["cliff_normal_y"],
        below_peak & (normal_y > levels["flat_normal_y"]),
        below_peak,
    ]
    choices = [SURFACE_ID_SEA, SURFACE_ID_CLIFF, SURFACE_ID_GRASS_FLAT, SURFACE_ID_GRASS]
    return np.select(conditions, choices, default=SURFACE_ID_PEAK).astype(np.uint8)


def get_surface_color_array(surface_map: np.ndarray, surface_lut: np.ndarray) -> np.ndarray:
    """Converts a surface ID map into RGBA colors using a pre-computed LUT."""
    return surface_lut[surface_map]


def classify_vertices(positions: np.ndarray, normals: np.ndarray, thresholds: dict = None) -> np.ndarray:
    """Per-vertex RGBA colors for a mesh, from position y (height) and normal y."""
    surface_map = calculate_surface_map(positions[:, 1], normals[:, 1], thresholds)
    return get_surface_color_array(surface_map, create_surface_color_lut())


def get_preview_color_array(colors: np.ndarray, width: int, height: int) -> np.ndarray:
    """
    Converts per-vertex RGBA colors into a top-down (width+1, height+1, 3)
    uint8 RGB array, indexed [x, y] like the vertex grid.
    """
    rgb = np.clip(colors[:, :3] * 255.0, 0, 255).round().astype(np.uint8)
    return rgb.reshape(width + 1, height + 1, 3)
