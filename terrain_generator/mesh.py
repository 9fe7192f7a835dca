# terrain_generator/mesh.py

"""
================================================================================
GRID MESH BUILDER
================================================================================
This module turns a heightmap function into a renderable triangle mesh: a
regular (width+1) x (height+1) vertex grid centered on the origin, two
triangles per cell, smoothed shading normals and, optionally, per-vertex
surface colors.

Data Contract:
---------------
- Inputs:
    - width, height: The number of grid cells along x and z (ints >= 1).
    - unit: The world-space size of one cell (float > 0).
    - heightmap: A vectorized callable (x, y) -> height.
- Outputs:
    - SurfaceMesh: plain NumPy buffers (float32 positions/normals/colors,
      uint32 indices) ready to be handed to a renderer.
- Side Effects: None.
- Invariants:
    - Vertex (xi, yi) is stored at index xi * (height + 1) + yi.
    - len(positions) == len(normals) == (width + 1) * (height + 1).
    - len(indices) == width * height * 6 and every index < vertex count.
================================================================================
"""

from typing import NamedTuple, Optional

import numpy as np

from . import color_maps
from . import normals as normal_synth

UP = np.array([0.0, 1.0, 0.0])


class MeshInvariantError(AssertionError):
    """Raised when a freshly built mesh breaks its size or index invariants."""


class SurfaceMesh(NamedTuple):
    positions: np.ndarray
    normals: np.ndarray
    colors: Optional[np.ndarray]
    indices: np.ndarray
    width: int
    height: int

    @property
    def vertex_count(self) -> int:
        return self.positions.shape[0]


def grid_index(x, y, height: int):
    """Index of grid vertex (x, y); works on scalars and integer arrays."""
    return x * (height + 1) + y


def flat_heightmap(x, y):
    return np.zeros(np.broadcast(np.asarray(x), np.asarray(y)).shape)

def ripple_heightmap(x, y):
    """A cheap closed-form surface, handy for eyeballing normals without noise."""
    x = np.asarray(x, dtype=np.float64)
    return np.sin(x * x + np.asarray(y, dtype=np.float64)) / 4.0


def _check_grid_args(width: int, height: int, unit: float):
    if width < 1 or height < 1:
        raise ValueError(f"Grid must be at least 1x1 cells, got {width}x{height}")
    if unit <= 0:
        raise ValueError(f"Grid unit must be positive, got {unit}")

def _check_invariants(positions, normals, indices, width, height):
    vertex_count = (width + 1) * (height + 1)
    if positions.shape != (vertex_count, 3):
        raise MeshInvariantError(f"Expected {vertex_count} positions, got {positions.shape[0]}")
    if normals.shape != positions.shape:
        raise MeshInvariantError(f"Normal count {normals.shape[0]} != position count {positions.shape[0]}")
    if indices.shape != (width * height * 6,):
        raise MeshInvariantError(f"Expected {width * height * 6} indices, got {indices.size}")
    if indices.size and int(indices.max()) >= vertex_count:
        raise MeshInvariantError(f"Index {int(indices.max())} out of range for {vertex_count} vertices")


def build_grid(width: int, height: int, unit: float, heightmap):
    """
    Builds the raw grid: positions, placeholder up-normals and triangle indices.

    Returns:
        (positions, normals, indices) as float64, float64 and uint32 arrays.
    """
    _check_grid_args(width, height, unit)

    # 'ij' indexing keeps x as the slow axis, matching grid_index().
    xi, yi = np.meshgrid(np.arange(width + 1), np.arange(height + 1), indexing='ij')
    x = (xi - width / 2.0) * unit
    y = (yi - height / 2.0) * unit

    heights = np.broadcast_to(np.asarray(heightmap(x, y), dtype=np.float64), x.shape)
    if not np.all(np.isfinite(heights)):
        raise ValueError("Heightmap produced non-finite heights")

    # Height is the up axis: (x, h, y).
    positions = np.stack([x, heights, y], axis=-1).reshape(-1, 3)
    normals = np.tile(UP, (positions.shape[0], 1))

    # One quad per cell whose lower corner is (qx - 1, qy - 1).
    qx, qy = np.meshgrid(np.arange(1, width + 1), np.arange(1, height + 1), indexing='ij')
    qx = qx.ravel()
    qy = qy.ravel()
    lower_left = grid_index(qx - 1, qy - 1, height)
    upper_left = grid_index(qx - 1, qy, height)
    upper_right = grid_index(qx, qy, height)
    lower_right = grid_index(qx, qy - 1, height)
    indices = np.stack(
        [lower_left, upper_left, upper_right, upper_right, lower_right, lower_left], axis=1
    ).ravel().astype(np.uint32)

    _check_invariants(positions, normals, indices, width, height)
    return positions, normals, indices


def build_mesh(
    width: int,
    height: int,
    unit: float,
    heightmap,
    kernel: np.ndarray = None,
    thresholds: dict = None,
    classify: bool = False,
) -> SurfaceMesh:
    """
    The full pipeline: grid, face normals, smoothed normals and (if requested)
    surface colors.

    Args:
        kernel: Smoothing kernel; defaults to the configured kernel.
        thresholds: Surface classifier thresholds; only used with classify=True.
        classify: Whether to derive per-vertex RGBA colors.
    """
    positions, _, indices = build_grid(width, height, unit, heightmap)

    if kernel is None:
        kernel = normal_synth.make_kernel()
    face_normals = normal_synth.accumulate_face_normals(positions, indices)
    smoothed = normal_synth.smooth_normals(face_normals, width, height, kernel)
    _check_invariants(positions, smoothed, indices, width, height)

    colors = None
    if classify:
        colors = color_maps.classify_vertices(positions, smoothed, thresholds)

    return SurfaceMesh(
        positions=positions.astype(np.float32),
        normals=smoothed.astype(np.float32),
        colors=colors,
        indices=indices,
        width=width,
        height=height,
    )
