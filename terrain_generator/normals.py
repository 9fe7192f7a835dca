# terrain_generator/normals.py

"""
================================================================================
NORMAL SYNTHESIS
================================================================================
Two passes turn a triangulated grid into smooth shading normals:

1. Face accumulation: every triangle adds its unit face normal to each of its
   three vertices (equal weight per face, regardless of area or angle), then
   every vertex normal is renormalized.
2. Spatial smoothing: the per-vertex normals are convolved over the 2D grid
   with a symmetric kernel. Neighbors past the border are clamped to the edge
   vertex. The sum is renormalized, so the kernel needs no normalization.

Data Contract:
---------------
- Inputs: (N, 3) positions, (M,) triangle indices, grid width/height.
- Outputs: (N, 3) float64 unit normals.
- Side Effects: None.
- Invariants: Every returned normal has unit length. A zero-length vector is
  reported as DegenerateNormalError instead of turning into NaN.
================================================================================
"""

import numpy as np
from numba import njit
from scipy import ndimage

from . import config as DEFAULTS

# 3x3 weights: center 4, edge neighbors 2, diagonal neighbors 1.
FIXED_KERNEL = np.array([
    [1.0, 2.0, 1.0],
    [2.0, 4.0, 2.0],
    [1.0, 2.0, 1.0],
])


class DegenerateNormalError(ValueError):
    """Raised when a normal would be normalized from a zero-length vector."""


def normalize_rows(vectors: np.ndarray) -> np.ndarray:
    """Scales every row of an (N, 3) array to unit length."""
    lengths = np.linalg.norm(vectors, axis=1)
    zero_rows = np.flatnonzero(lengths == 0.0)
    if zero_rows.size:
        raise DegenerateNormalError(
            f"{zero_rows.size} zero-length normal(s), first at vertex {zero_rows[0]}"
        )
    return vectors / lengths[:, np.newaxis]


@njit
def _accumulate(positions, indices, out):
    """
    Adds each triangle's unit normal, normalize(cross(c - a, a - b)), into its
    three vertices. Returns the index of the first zero-area triangle, or -1.
    """
    for t in range(indices.shape[0] // 3):
        ai = indices[3 * t]
        bi = indices[3 * t + 1]
        ci = indices[3 * t + 2]

        e1x = positions[ci, 0] - positions[ai, 0]
        e1y = positions[ci, 1] - positions[ai, 1]
        e1z = positions[ci, 2] - positions[ai, 2]
        e2x = positions[ai, 0] - positions[bi, 0]
        e2y = positions[ai, 1] - positions[bi, 1]
        e2z = positions[ai, 2] - positions[bi, 2]

        nx = e1y * e2z - e1z * e2y
        ny = e1z * e2x - e1x * e2z
        nz = e1x * e2y - e1y * e2x
        length = np.sqrt(nx * nx + ny * ny + nz * nz)
        if length == 0.0:
            return t
        nx /= length
        ny /= length
        nz /= length

        for vi in (ai, bi, ci):
            out[vi, 0] += nx
            out[vi, 1] += ny
            out[vi, 2] += nz
    return -1


def accumulate_face_normals(positions: np.ndarray, indices: np.ndarray) -> np.ndarray:
    """Pass 1: equal-weight face normal accumulation followed by renormalization."""
    if indices.size % 3 != 0:
        raise ValueError(f"Index count {indices.size} is not a multiple of 3")

    positions64 = np.ascontiguousarray(positions, dtype=np.float64)
    accumulated = np.zeros_like(positions64)
    bad_triangle = _accumulate(positions64, np.ascontiguousarray(indices, dtype=np.int64), accumulated)
    if bad_triangle >= 0:
        raise DegenerateNormalError(f"Triangle {bad_triangle} has zero area")

    return normalize_rows(accumulated)


def gaussian_kernel(radius: int, sigma: float) -> np.ndarray:
    """An unnormalized (2r+1)x(2r+1) kernel with weights exp(-(dx^2 + dy^2) / 2sigma^2)."""
    if radius < 0:
        raise ValueError("Kernel radius must be non-negative")
    if sigma <= 0:
        raise ValueError("Kernel sigma must be positive")
    offsets = np.arange(-radius, radius + 1, dtype=np.float64)
    dx, dy = np.meshgrid(offsets, offsets, indexing='ij')
    return np.exp(-(dx ** 2 + dy ** 2) / (2.0 * sigma ** 2))


def make_kernel(
    name: str = DEFAULTS.NORMAL_SMOOTHING_KERNEL,
    radius: int = DEFAULTS.NORMAL_SMOOTHING_RADIUS,
    sigma: float = DEFAULTS.NORMAL_SMOOTHING_SIGMA,
) -> np.ndarray:
    """Looks up a smoothing kernel by name ('gaussian' or 'fixed')."""
    if name == 'gaussian':
        return gaussian_kernel(radius, sigma)
    if name == 'fixed':
        return FIXED_KERNEL.copy()
    raise ValueError(f"Unknown smoothing kernel '{name}', expected 'gaussian' or 'fixed'")


def smooth_normals(normals: np.ndarray, width: int, height: int, kernel: np.ndarray) -> np.ndarray:
    """
    Pass 2: convolves the normals over the (width+1) x (height+1) grid and
    renormalizes. Reads only the completed pass 1 result.
    """
    expected = (width + 1) * (height + 1)
    if normals.shape != (expected, 3):
        raise ValueError(f"Expected ({expected}, 3) normals for a {width}x{height} grid, got {normals.shape}")

    grid = np.asarray(normals, dtype=np.float64).reshape(width + 1, height + 1, 3)
    smoothed = np.empty_like(grid)
    for axis in range(3):
        # mode='nearest' repeats the edge vertex past the border.
        smoothed[..., axis] = ndimage.convolve(grid[..., axis], kernel, mode='nearest')

    return normalize_rows(smoothed.reshape(-1, 3))
