# terrain_generator/noise.py

"""
================================================================================
GRADIENT NOISE FIELDS
================================================================================
This module provides 2D and 3D gradient ("Perlin") noise. Each field owns a
fixed, toroidal lattice of random unit vectors that is drawn once from a
caller-supplied random generator and never changes afterwards.

Data Contract:
---------------
- Inputs (on initialization):
    - size: The side length of the lattice (int > 0).
    - rng: A numpy.random.Generator. Passing the same seeded generator state
      reproduces the same lattice.
- Inputs (sampling):
    - x, y[, z]: Scalars or NumPy arrays (broadcast against each other).
- Outputs:
    - Noise values roughly in [-1, 1]. A float for scalar input, otherwise an
      array with the broadcast shape of the inputs.
- Side Effects: None.
- Invariants: Every lattice vector has unit length. The field is periodic
  with period `size` along every axis and C2 continuous (quintic fade).
================================================================================
"""

import numpy as np
from numba import njit


@njit
def _lerp(a, b, x):
    "Linear interpolation."
    return a + x * (b - a)

@njit
def _fade(t):
    "6t^5 - 15t^4 + 10t^3"
    return t * t * t * (t * (t * 6 - 15) + 10)

@njit
def _wrap(v, size):
    """Euclidean remainder, so negative coordinates land in [0, size]."""
    return v - np.floor(v / size) * size

@njit
def _sample_2d(gradients, xs, ys):
    """
    Samples the 2D lattice at every (xs[i], ys[i]).
    Corners are visited in bit order (bit 0 = x, bit 1 = y) and interpolated
    along x first, then y.
    """
    size = gradients.shape[0]
    n = xs.shape[0]
    out = np.empty(n)
    dots = np.empty(4)

    for i in range(n):
        x = _wrap(xs[i], size)
        y = _wrap(ys[i], size)
        xi = int(np.floor(x))
        yi = int(np.floor(y))
        xf = x - xi
        yf = y - yi

        for corner in range(4):
            dx = corner & 1
            dy = (corner >> 1) & 1
            # The second modulo catches a coordinate that rounded up to exactly `size`.
            cx = (xi + dx) % size
            cy = (yi + dy) % size
            dots[corner] = gradients[cx, cy, 0] * (xf - dx) + gradients[cx, cy, 1] * (yf - dy)

        u = _fade(xf)
        v = _fade(yf)
        x0 = _lerp(dots[0], dots[1], u)
        x1 = _lerp(dots[2], dots[3], u)
        out[i] = _lerp(x0, x1, v)

    return out

@njit
def _sample_3d(gradients, xs, ys, zs):
    """
    Samples the 3D lattice at every (xs[i], ys[i], zs[i]).
    Corner bits are (x, y, z) from least to most significant; interpolation
    collapses x, then y, then z.
    """
    size = gradients.shape[0]
    n = xs.shape[0]
    out = np.empty(n)
    dots = np.empty(8)

    for i in range(n):
        x = _wrap(xs[i], size)
        y = _wrap(ys[i], size)
        z = _wrap(zs[i], size)
        xi = int(np.floor(x))
        yi = int(np.floor(y))
        zi = int(np.floor(z))
        xf = x - xi
        yf = y - yi
        zf = z - zi

        for corner in range(8):
            dx = corner & 1
            dy = (corner >> 1) & 1
            dz = (corner >> 2) & 1
            cx = (xi + dx) % size
            cy = (yi + dy) % size
            cz = (zi + dz) % size
            dots[corner] = (
                gradients[cx, cy, cz, 0] * (xf - dx)
                + gradients[cx, cy, cz, 1] * (yf - dy)
                + gradients[cx, cy, cz, 2] * (zf - dz)
            )

        u = _fade(xf)
        v = _fade(yf)
        w = _fade(zf)
        x00 = _lerp(dots[0], dots[1], u)
        x10 = _lerp(dots[2], dots[3], u)
        x01 = _lerp(dots[4], dots[5], u)
        x11 = _lerp(dots[6], dots[7], u)
        y0 = _lerp(x00, x10, v)
        y1 = _lerp(x01, x11, v)
        out[i] = _lerp(y0, y1, w)

    return out


def _flatten_coordinates(*coords):
    """Broadcasts the coordinate inputs and returns (shape, flat float64 arrays)."""
    arrays = np.broadcast_arrays(*[np.asarray(c, dtype=np.float64) for c in coords])
    shape = arrays[0].shape
    return shape, [np.ascontiguousarray(a).reshape(-1) for a in arrays]

def _restore_shape(values, shape):
    if len(shape) == 0:
        return float(values[0])
    return values.reshape(shape)


class GradientField2D:
    """A size x size torus of random unit gradients with a continuous sampler."""

    def __init__(self, size: int, rng: np.random.Generator):
        if size <= 0:
            raise ValueError(f"Lattice size must be positive, got {size}")
        self.size = int(size)

        angles = rng.uniform(0.0, 2.0 * np.pi, size=(self.size, self.size))
        gradients = np.stack([np.cos(angles), np.sin(angles)], axis=-1)
        gradients.setflags(write=False)
        self.gradients = gradients

    def sample(self, x, y):
        """Returns the noise value at (x, y)."""
        shape, (xs, ys) = _flatten_coordinates(x, y)
        return _restore_shape(_sample_2d(self.gradients, xs, ys), shape)

    __call__ = sample


class GradientField3D:
    """
    A size^3 torus of random unit gradients.

    Gradients are drawn uniformly from the cube [-1, 1)^3 and then normalized,
    which leans slightly towards the cube's diagonals. This matches the look
    of the existing cloud volumes and is kept on purpose.
    """

    def __init__(self, size: int, rng: np.random.Generator):
        if size <= 0:
            raise ValueError(f"Lattice size must be positive, got {size}")
        self.size = int(size)

        vectors = rng.uniform(-1.0, 1.0, size=(self.size, self.size, self.size, 3))
        lengths = np.linalg.norm(vectors, axis=-1)
        # A zero draw cannot be normalized; redraw those cells until none remain.
        degenerate = lengths == 0.0
        while np.any(degenerate):
            vectors[degenerate] = rng.uniform(-1.0, 1.0, size=(int(degenerate.sum()), 3))
            lengths = np.linalg.norm(vectors, axis=-1)
            degenerate = lengths == 0.0

        gradients = vectors / lengths[..., np.newaxis]
        gradients.setflags(write=False)
        self.gradients = gradients

    def sample(self, x, y, z):
        """Returns the noise value at (x, y, z)."""
        shape, (xs, ys, zs) = _flatten_coordinates(x, y, z)
        return _restore_shape(_sample_3d(self.gradients, xs, ys, zs), shape)

    __call__ = sample


def perlin_2d(size: int, rng: np.random.Generator) -> GradientField2D:
    """Builds a 2D noise field and returns it as a sampling callable (x, y) -> float."""
    return GradientField2D(size, rng)

def perlin_3d(size: int, rng: np.random.Generator) -> GradientField3D:
    """Builds a 3D noise field and returns it as a sampling callable (x, y, z) -> float."""
    return GradientField3D(size, rng)
