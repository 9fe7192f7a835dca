# terrain_generator/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the terrain
generator. These values are used if they are not explicitly provided by the
user's configuration.

DO NOT MODIFY THIS FILE FOR A SPECIFIC RUN.
Instead, pass a configuration dictionary to the TerrainGenerator instance.
================================================================================
"""

# --- Noise Generation ---
DEFAULT_SEED = 1337
# Large prime numbers used to offset seeds for the secondary surfaces, ensuring
# they are unique but deterministic from the master seed.
ROCK_SEED_OFFSET = 12347
WATER_SEED_OFFSET = 98761
SKY_SEED_OFFSET = 54321

# The side length of each gradient lattice. Noise repeats every this many units
# of (already divided) sample space.
NOISE_LATTICE_SIZE = 100
# How many independent lattices the terrain octaves are spread across.
NOISE_FIELD_COUNT = 2

# --- Octave Tables ---
# Each entry is (field_index, divisor, amplitude). A larger divisor means a
# wider feature; the amplitude is in world units.
TERRAIN_OCTAVES = (
    (0, 3.0, 1.0),
    (1, 13.0, 4.0),
    (0, 43.0, 16.0),
    (1, 197.0, 64.0),
)

# --- Grid ---
TERRAIN_GRID_WIDTH = 1000
TERRAIN_GRID_HEIGHT = 1000
TERRAIN_GRID_UNIT = 1.0

# --- Rock Overlay ---
# The rock surface only exists where the base terrain falls inside this band.
ROCK_OCTAVES = (
    (0, 2.0, 0.5),
    (1, 7.0, 1.5),
)
ROCK_BAND_MIN = 6.0
ROCK_BAND_MAX = 40.0
# Lowered so the overlay mostly sits just under the terrain and breaks through on slopes.
ROCK_BASE_OFFSET = 1.0
# Far below the sea floor; the renderer never sees it.
ROCK_SENTINEL_HEIGHT = -1000.0

# --- Water Layers ---
WATER_LAYER_COUNT = 4
WATER_LEVEL = -14.5
WATER_OCTAVES = (
    (0, 5.0, 0.2),
    (1, 17.0, 0.6),
)
# Constant domain shifts applied to each layer so the copies do not overlap.
WATER_LAYER_OFFSETS = (
    (0.0, 0.0),
    (1013.0, 517.0),
    (2029.0, 1031.0),
    (3041.0, 1543.0),
)
WATER_GRID_WIDTH = 200
WATER_GRID_HEIGHT = 200
WATER_GRID_UNIT = 5.0

# --- Normal Smoothing ---
# 'gaussian' uses an exp(-(dx^2+dy^2)/2sigma^2) kernel of the given radius.
# 'fixed' uses the 3x3 table {center: 4, edges: 2, corners: 1}.
NORMAL_SMOOTHING_KERNEL = 'gaussian'
NORMAL_SMOOTHING_RADIUS = 4
NORMAL_SMOOTHING_SIGMA = 3.0

# --- Surface Classification ---
# Heights are world units, the *_normal_y values are the up component of the
# smoothed unit normal (1.0 is perfectly flat).
SURFACE_THRESHOLDS = {
    "sea": -14.5,
    "peak": 24.0,
    "cliff_normal_y": 0.8,
    "flat_normal_y": 0.98,
}

# --- Sky Volume ---
SKY_VOLUME_SIZE = 256
SKY_VOLUME_STEP = 2.0
SKY_VOLUME_CHANNELS = 1
# Kept well below the volume extent; a 3D lattice grows with the cube of its size.
SKY_LATTICE_SIZE = 128
SKY_OCTAVES = (
    (0, 3.0, 1.0),
    (0, 13.0, 4.0),
    (0, 43.0, 16.0),
    (0, 197.0, 64.0),
)
# Density is suppressed away from the middle of the volume.
SKY_BIAS_MID = 128.0
SKY_BIAS_FALLOFF = 16384.0

# --- Material Records (passed through to the renderer untouched) ---
TERRAIN_MATERIAL = {
    "peak_thresh": 24.0,
    "peak_width": 4.0,
    "cliff_thresh": 0.8,
    "cliff_width": 0.05,
    "steep_thresh": 0.9,
    "steep_width": 0.05,
    "sea_thresh": -14.5,
    "sea_width": 1.0,
    "light_dir": (0.3, -1.0, 0.4),
    "ambient_color": (0.15, 0.15, 0.2, 1.0),
    "diffuse_color": (1.0, 0.95, 0.85, 1.0),
}

WATER_MATERIAL = {
    "base_color": (0.05, 0.25, 0.45, 0.7),
    "specular_color": (1.0, 1.0, 1.0, 1.0),
    "shininess": 64.0,
    "light_dir": (0.3, -1.0, 0.4),
    "ambient_color": (0.15, 0.15, 0.2, 1.0),
}

SKY_MATERIAL = {
    "step_size": 1.0,
    "noise_size": 1.0,
    "noise_scale": 0.03,
    "noise_scroll": 0.0,
    "noise_bias": 0.0,
    "noise_thresh": 10.0,
    "step_count": 200,
    "camera_pos": (0.0, 0.0, 0.0),
}

# --- Bake Output ---
DEFAULT_OUTPUT_DIR = "baked_terrain"
