# terrain_generator/heightmaps.py

"""
================================================================================
FRACTAL HEIGHTMAP COMPOSER
================================================================================
This module layers independently seeded noise fields into height (2D) and
density (3D) functions. Every heightmap here is a small callable object, so
they can be nested, translated and combined freely.

Data Contract:
---------------
- Inputs:
    - Gradient noise fields (see noise.py) and octave tables of
      (field_index, divisor, amplitude).
    - x, y[, z]: Scalars or NumPy arrays.
- Outputs:
    - Heights/densities with the broadcast shape of the inputs.
- Side Effects: None. Heightmaps hold no mutable state beyond the lattices
  of the fields they wrap.
================================================================================
"""

import numpy as np

from . import config as DEFAULTS
from .noise import GradientField2D, GradientField3D


class Octave:
    """One noise layer: field(x / divisor, y / divisor) * amplitude."""

    def __init__(self, field, divisor: float, amplitude: float):
        if divisor == 0:
            raise ValueError("Octave divisor must be non-zero")
        self.field = field
        self.divisor = float(divisor)
        self.amplitude = float(amplitude)

    def __call__(self, *coords):
        scaled = [np.asarray(c, dtype=np.float64) / self.divisor for c in coords]
        return self.field(*scaled) * self.amplitude


class FractalHeightmap:
    """
    The sum of several octaves, optionally sampled at a translated domain.
    Works for both 2D and 3D fields; the number of coordinates must match the
    dimensionality of the wrapped fields.
    """

    def __init__(self, octaves, offset=None):
        if not octaves:
            raise ValueError("A fractal heightmap needs at least one octave")
        self.octaves = list(octaves)
        self.offset = tuple(offset) if offset is not None else None

    @property
    def amplitude_bound(self) -> float:
        """The largest absolute value the sum can reach (each octave is within [-1, 1])."""
        return sum(abs(o.amplitude) for o in self.octaves)

    def __call__(self, *coords):
        if self.offset is not None:
            coords = [np.asarray(c, dtype=np.float64) + d for c, d in zip(coords, self.offset)]
        total = self.octaves[0](*coords)
        for octave in self.octaves[1:]:
            total = total + octave(*coords)
        return total


def translated(heightmap, dx: float, dy: float):
    """Returns a heightmap that samples `heightmap` at (x + dx, y + dy)."""
    def shifted(x, y):
        return heightmap(np.asarray(x, dtype=np.float64) + dx, np.asarray(y, dtype=np.float64) + dy)
    return shifted


class BandedOverlay:
    """
    A secondary surface confined to a height band of a base surface.

    Where the base height lies outside [band_min, band_max] the overlay returns
    `sentinel`; elsewhere it returns overlay(x, y) + base(x, y) - base_offset.
    """

    def __init__(self, base, overlay, band, base_offset: float, sentinel: float):
        band_min, band_max = band
        if band_min > band_max:
            raise ValueError(f"Invalid band: {band_min} > {band_max}")
        self.base = base
        self.overlay = overlay
        self.band_min = float(band_min)
        self.band_max = float(band_max)
        self.base_offset = float(base_offset)
        self.sentinel = float(sentinel)

    def __call__(self, x, y):
        base_height = np.asarray(self.base(x, y), dtype=np.float64)
        in_band = (base_height >= self.band_min) & (base_height <= self.band_max)
        surface = self.overlay(x, y) + base_height - self.base_offset
        result = np.where(in_band, surface, self.sentinel)
        if result.ndim == 0:
            return float(result)
        return result


class VerticalBias:
    """-(y - mid)^2 / falloff: zero at mid height, increasingly negative away from it."""

    def __init__(self, mid: float, falloff: float):
        if falloff <= 0:
            raise ValueError("Vertical bias falloff must be positive")
        self.mid = float(mid)
        self.falloff = float(falloff)

    def __call__(self, y):
        return -(np.asarray(y, dtype=np.float64) - self.mid) ** 2 / self.falloff


class FractalVolume:
    """A 3D fractal density, optionally shaped by a vertical bias term."""

    def __init__(self, octaves, vertical_bias: VerticalBias = None):
        self.fractal = FractalHeightmap(octaves)
        self.vertical_bias = vertical_bias

    def __call__(self, x, y, z):
        density = self.fractal(x, y, z)
        if self.vertical_bias is not None:
            density = density + self.vertical_bias(y)
        return density


# --- Factories ---

def build_octaves(fields, table) -> list:
    """Turns an octave table of (field_index, divisor, amplitude) into Octave objects."""
    octaves = []
    for field_index, divisor, amplitude in table:
        if not 0 <= field_index < len(fields):
            raise ValueError(f"Octave refers to field {field_index}, only {len(fields)} available")
        octaves.append(Octave(fields[field_index], divisor, amplitude))
    return octaves

def make_fields_2d(rng: np.random.Generator, count: int, size: int) -> list:
    """Draws `count` independent 2D lattices from `rng`, in order."""
    return [GradientField2D(size, rng) for _ in range(count)]

def terrain_heightmap(
    rng: np.random.Generator,
    lattice_size: int = DEFAULTS.NOISE_LATTICE_SIZE,
    field_count: int = DEFAULTS.NOISE_FIELD_COUNT,
    octave_table=DEFAULTS.TERRAIN_OCTAVES,
) -> FractalHeightmap:
    """The primary terrain: a few fields layered at increasing wavelength and amplitude."""
    fields = make_fields_2d(rng, field_count, lattice_size)
    return FractalHeightmap(build_octaves(fields, octave_table))

def rock_heightmap(
    base,
    rng: np.random.Generator,
    lattice_size: int = DEFAULTS.NOISE_LATTICE_SIZE,
    field_count: int = DEFAULTS.NOISE_FIELD_COUNT,
    octave_table=DEFAULTS.ROCK_OCTAVES,
    band=(DEFAULTS.ROCK_BAND_MIN, DEFAULTS.ROCK_BAND_MAX),
    base_offset: float = DEFAULTS.ROCK_BASE_OFFSET,
    sentinel: float = DEFAULTS.ROCK_SENTINEL_HEIGHT,
) -> BandedOverlay:
    """An exposed-rock surface that only exists inside a height band of `base`."""
    fields = make_fields_2d(rng, field_count, lattice_size)
    overlay = FractalHeightmap(build_octaves(fields, octave_table))
    return BandedOverlay(base, overlay, band, base_offset, sentinel)

def water_heightmaps(
    rng: np.random.Generator,
    lattice_size: int = DEFAULTS.NOISE_LATTICE_SIZE,
    field_count: int = DEFAULTS.NOISE_FIELD_COUNT,
    octave_table=DEFAULTS.WATER_OCTAVES,
    water_level: float = DEFAULTS.WATER_LEVEL,
    layer_offsets=DEFAULTS.WATER_LAYER_OFFSETS,
) -> list:
    """
    The water layers. All layers share one composed function; each samples it
    at a different constant offset so the layers do not coincide.
    """
    fields = make_fields_2d(rng, field_count, lattice_size)
    waves = FractalHeightmap(build_octaves(fields, octave_table))

    def surface(x, y):
        return waves(x, y) + water_level

    return [translated(surface, dx, dy) for dx, dy in layer_offsets]

def sky_density(
    rng: np.random.Generator,
    lattice_size: int = DEFAULTS.SKY_LATTICE_SIZE,
    octave_table=DEFAULTS.SKY_OCTAVES,
    bias_mid: float = DEFAULTS.SKY_BIAS_MID,
    bias_falloff: float = DEFAULTS.SKY_BIAS_FALLOFF,
    with_bias: bool = True,
) -> FractalVolume:
    """The cloud density used for the sky volume: four 3D octaves plus a vertical bias."""
    field_count = max(index for index, _, _ in octave_table) + 1
    fields = [GradientField3D(lattice_size, rng) for _ in range(field_count)]
    bias = VerticalBias(bias_mid, bias_falloff) if with_bias else None
    return FractalVolume(build_octaves(fields, octave_table), vertical_bias=bias)
