# terrain_generator/volumetric.py

"""
================================================================================
VOLUMETRIC NOISE PACKER
================================================================================
This module samples a 3D density function on an S x S x S integer lattice and
packs the samples into a flat byte buffer for an external 3D-texture consumer
(e.g. the ray-marched sky volume).

Data Contract:
---------------
- Inputs:
    - size: Lattice side length S (int > 0).
    - step: World-space distance between neighboring lattice points.
    - density_fn: A vectorized callable (x, y, z) -> density.
    - channels: 1 (scalar density) or 4 (density broadcast into RGBA).
- Outputs:
    - VolumetricBuffer with native-endian float32 texels, x fastest, then y,
      then z. Texel (i, j, k) starts at byte 4 * C * (i + j*S + k*S*S).
- Side Effects: None. The buffer is never read back by the generator.
================================================================================
"""

from typing import NamedTuple

import numpy as np

FORMAT_R32_FLOAT = 'R32_FLOAT'
FORMAT_RGBA32_FLOAT = 'RGBA32_FLOAT'

_FORMATS_BY_CHANNELS = {1: FORMAT_R32_FLOAT, 4: FORMAT_RGBA32_FLOAT}
_CHANNELS_BY_FORMAT = {v: k for k, v in _FORMATS_BY_CHANNELS.items()}
BYTES_PER_FLOAT = 4


class VolumetricBuffer(NamedTuple):
    data: bytes
    dims: tuple
    format: str

    @property
    def channels(self) -> int:
        return _CHANNELS_BY_FORMAT[self.format]

    def as_array(self) -> np.ndarray:
        """A read-only (S, S, S[, C]) float32 view indexed [z, y, x(, c)]."""
        width, height, depth = self.dims
        shape = (depth, height, width) if self.channels == 1 else (depth, height, width, self.channels)
        return np.frombuffer(self.data, dtype=np.float32).reshape(shape)


def texel_offset(size: int, i: int, j: int, k: int, channels: int = 1) -> int:
    """Byte offset of lattice point (i, j, k) inside a packed buffer."""
    return BYTES_PER_FLOAT * channels * (i + j * size + k * size * size)


def pack_volume(size: int, step: float, density_fn, channels: int = 1) -> VolumetricBuffer:
    """
    Samples density_fn at (i*step, j*step, k*step) for every lattice point and
    serializes the result. Sampling proceeds one z-slab at a time to keep peak
    memory proportional to S^2 rather than S^3.
    """
    if size <= 0:
        raise ValueError(f"Volume size must be positive, got {size}")
    if step <= 0:
        raise ValueError(f"Sample step must be positive, got {step}")
    if channels not in _FORMATS_BY_CHANNELS:
        raise ValueError(f"Unsupported channel count {channels}, expected 1 or 4")

    coords = np.arange(size, dtype=np.float64) * step
    # Slab arrays are indexed [y, x] so a C-order ravel puts x fastest.
    y_slab, x_slab = np.meshgrid(coords, coords, indexing='ij')
    volume = np.empty((size, size, size), dtype=np.float32)

    for k in range(size):
        z_slab = np.full_like(x_slab, coords[k])
        volume[k] = np.asarray(density_fn(x_slab, y_slab, z_slab), dtype=np.float64)

    if channels == 4:
        volume = np.repeat(volume[..., np.newaxis], 4, axis=-1)

    return VolumetricBuffer(
        data=volume.tobytes(),
        dims=(size, size, size),
        format=_FORMATS_BY_CHANNELS[channels],
    )


def read_texel(buffer: VolumetricBuffer, i: int, j: int, k: int, channel: int = 0) -> float:
    """Decodes one float from a packed buffer using the documented offset formula."""
    size = buffer.dims[0]
    offset = texel_offset(size, i, j, k, buffer.channels) + BYTES_PER_FLOAT * channel
    return float(np.frombuffer(buffer.data, dtype=np.float32, count=1, offset=offset)[0])
