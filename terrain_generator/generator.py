# terrain_generator/generator.py

"""
================================================================================
CORE TERRAIN GENERATOR
================================================================================
This module contains the main TerrainGenerator class, responsible for turning
a configuration into the raw data artifacts a renderer needs: the classified
terrain mesh, the exposed-rock overlay, the water layers and the packed sky
volume, each with its material record.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict): A dictionary of parameters which can override the
      internal defaults. Expected keys include 'seed', 'terrain_octaves', etc.
    - logger: A configured Python logging object for runtime messages.
- Outputs (from methods):
    - SurfaceMesh / VolumetricBuffer objects and plain material dicts.
- Side Effects: Logs messages using the provided logger.
- Invariants: Given the same seed and configuration, the output is
  deterministic. Every call draws fresh noise fields from freshly seeded
  generators; no state is shared between calls.
================================================================================
"""

import logging
import time

import numpy as np

from . import config as DEFAULTS
from . import heightmaps
from . import materials
from . import normals
from . import volumetric
from .mesh import SurfaceMesh, build_mesh


class TerrainGenerator:
    """
    Generates the terrain, rock, water and sky artifacts for one world.
    This class is backend-only and does not handle any visualization.
    """
    def __init__(self, config: dict, logger: logging.Logger):
        """
        Initializes the terrain generator.

        Args:
            config (dict): User-defined parameters to override defaults.
            logger (logging.Logger): The logger instance for all output.
        """
        self.logger = logger
        self.user_config = config
        self.logger.info("TerrainGenerator initializing...")

        # --- Consolidate Configuration ---
        self.settings = {
            'seed': self.user_config.get('seed', DEFAULTS.DEFAULT_SEED),
            'rock_seed_offset': self.user_config.get('rock_seed_offset', DEFAULTS.ROCK_SEED_OFFSET),
            'water_seed_offset': self.user_config.get('water_seed_offset', DEFAULTS.WATER_SEED_OFFSET),
            'sky_seed_offset': self.user_config.get('sky_seed_offset', DEFAULTS.SKY_SEED_OFFSET),

            'noise_lattice_size': self.user_config.get('noise_lattice_size', DEFAULTS.NOISE_LATTICE_SIZE),
            'noise_field_count': self.user_config.get('noise_field_count', DEFAULTS.NOISE_FIELD_COUNT),
            'terrain_octaves': self.user_config.get('terrain_octaves', DEFAULTS.TERRAIN_OCTAVES),

            'terrain_grid_width': self.user_config.get('terrain_grid_width', DEFAULTS.TERRAIN_GRID_WIDTH),
            'terrain_grid_height': self.user_config.get('terrain_grid_height', DEFAULTS.TERRAIN_GRID_HEIGHT),
            'terrain_grid_unit': self.user_config.get('terrain_grid_unit', DEFAULTS.TERRAIN_GRID_UNIT),

            'rock_octaves': self.user_config.get('rock_octaves', DEFAULTS.ROCK_OCTAVES),
            'rock_band_min': self.user_config.get('rock_band_min', DEFAULTS.ROCK_BAND_MIN),
            'rock_band_max': self.user_config.get('rock_band_max', DEFAULTS.ROCK_BAND_MAX),
            'rock_base_offset': self.user_config.get('rock_base_offset', DEFAULTS.ROCK_BASE_OFFSET),
            'rock_sentinel_height': self.user_config.get('rock_sentinel_height', DEFAULTS.ROCK_SENTINEL_HEIGHT),

            'water_layer_count': self.user_config.get('water_layer_count', DEFAULTS.WATER_LAYER_COUNT),
            'water_level': self.user_config.get('water_level', DEFAULTS.WATER_LEVEL),
            'water_octaves': self.user_config.get('water_octaves', DEFAULTS.WATER_OCTAVES),
            'water_layer_offsets': self.user_config.get('water_layer_offsets', DEFAULTS.WATER_LAYER_OFFSETS),
            'water_grid_width': self.user_config.get('water_grid_width', DEFAULTS.WATER_GRID_WIDTH),
            'water_grid_height': self.user_config.get('water_grid_height', DEFAULTS.WATER_GRID_HEIGHT),
            'water_grid_unit': self.user_config.get('water_grid_unit', DEFAULTS.WATER_GRID_UNIT),

            'normal_smoothing_kernel': self.user_config.get('normal_smoothing_kernel', DEFAULTS.NORMAL_SMOOTHING_KERNEL),
            'normal_smoothing_radius': self.user_config.get('normal_smoothing_radius', DEFAULTS.NORMAL_SMOOTHING_RADIUS),
            'normal_smoothing_sigma': self.user_config.get('normal_smoothing_sigma', DEFAULTS.NORMAL_SMOOTHING_SIGMA),
            'surface_thresholds': self.user_config.get('surface_thresholds', DEFAULTS.SURFACE_THRESHOLDS),

            'sky_volume_size': self.user_config.get('sky_volume_size', DEFAULTS.SKY_VOLUME_SIZE),
            'sky_volume_step': self.user_config.get('sky_volume_step', DEFAULTS.SKY_VOLUME_STEP),
            'sky_volume_channels': self.user_config.get('sky_volume_channels', DEFAULTS.SKY_VOLUME_CHANNELS),
            'sky_lattice_size': self.user_config.get('sky_lattice_size', DEFAULTS.SKY_LATTICE_SIZE),
            'sky_octaves': self.user_config.get('sky_octaves', DEFAULTS.SKY_OCTAVES),
            'sky_bias_mid': self.user_config.get('sky_bias_mid', DEFAULTS.SKY_BIAS_MID),
            'sky_bias_falloff': self.user_config.get('sky_bias_falloff', DEFAULTS.SKY_BIAS_FALLOFF),

            'terrain_material': self.user_config.get('terrain_material', {}),
            'water_material': self.user_config.get('water_material', {}),
            'sky_material': self.user_config.get('sky_material', {}),
        }

        if self.settings['water_layer_count'] > len(self.settings['water_layer_offsets']):
            raise ValueError(
                f"water_layer_count is {self.settings['water_layer_count']} but only "
                f"{len(self.settings['water_layer_offsets'])} water_layer_offsets are configured"
            )

        # --- Public Properties for easy access ---
        self.seed = self.settings['seed']

        # Build the kernel and the material records up front so bad settings fail fast.
        self.kernel = normals.make_kernel(
            self.settings['normal_smoothing_kernel'],
            self.settings['normal_smoothing_radius'],
            self.settings['normal_smoothing_sigma'],
        )
        self.materials = {
            'terrain': materials.terrain_material(self.settings['terrain_material']),
            'water': materials.water_material(self.settings['water_material']),
            'sky': materials.sky_material(self.settings['sky_material']),
        }

        self.logger.info(f"TerrainGenerator initialized with seed: {self.seed}")
        self.logger.info(
            f"Terrain grid: {self.settings['terrain_grid_width']}x"
            f"{self.settings['terrain_grid_height']} cells at {self.settings['terrain_grid_unit']} units"
        )
        self.logger.debug(
            f"Smoothing kernel '{self.settings['normal_smoothing_kernel']}' "
            f"({self.kernel.shape[0]}x{self.kernel.shape[1]})"
        )
        self.logger.debug(f"Terrain octaves: {list(self.settings['terrain_octaves'])}")

    # --- Random Sources ---
    def _rng(self, offset: int = 0) -> np.random.Generator:
        """A freshly seeded generator; each surface gets its own offset."""
        return np.random.default_rng(self.seed + offset)

    # --- Heightmaps ---
    def get_terrain_heightmap(self) -> heightmaps.FractalHeightmap:
        return heightmaps.terrain_heightmap(
            self._rng(),
            lattice_size=self.settings['noise_lattice_size'],
            field_count=self.settings['noise_field_count'],
            octave_table=self.settings['terrain_octaves'],
        )

    def get_rock_heightmap(self) -> heightmaps.BandedOverlay:
        """The rock overlay, banded on a terrain heightmap identical to get_terrain_heightmap()."""
        return heightmaps.rock_heightmap(
            self.get_terrain_heightmap(),
            self._rng(self.settings['rock_seed_offset']),
            lattice_size=self.settings['noise_lattice_size'],
            field_count=self.settings['noise_field_count'],
            octave_table=self.settings['rock_octaves'],
            band=(self.settings['rock_band_min'], self.settings['rock_band_max']),
            base_offset=self.settings['rock_base_offset'],
            sentinel=self.settings['rock_sentinel_height'],
        )

    def get_water_heightmaps(self) -> list:
        layer_count = self.settings['water_layer_count']
        return heightmaps.water_heightmaps(
            self._rng(self.settings['water_seed_offset']),
            lattice_size=self.settings['noise_lattice_size'],
            field_count=self.settings['noise_field_count'],
            octave_table=self.settings['water_octaves'],
            water_level=self.settings['water_level'],
            layer_offsets=list(self.settings['water_layer_offsets'])[:layer_count],
        )

    def get_sky_density(self) -> heightmaps.FractalVolume:
        return heightmaps.sky_density(
            self._rng(self.settings['sky_seed_offset']),
            lattice_size=self.settings['sky_lattice_size'],
            octave_table=self.settings['sky_octaves'],
            bias_mid=self.settings['sky_bias_mid'],
            bias_falloff=self.settings['sky_bias_falloff'],
        )

    # --- Artifacts ---
    def _build_surface(self, name: str, width: int, height: int, unit: float, heightmap, classify: bool = False) -> SurfaceMesh:
        start_time = time.perf_counter()
        mesh = build_mesh(
            width, height, unit, heightmap,
            kernel=self.kernel,
            thresholds=self.settings['surface_thresholds'],
            classify=classify,
        )
        elapsed = time.perf_counter() - start_time
        self.logger.info(
            f"Built {name} mesh: {mesh.vertex_count} vertices, "
            f"{mesh.indices.size} indices in {elapsed:.2f} seconds."
        )
        return mesh

    def generate_terrain(self) -> SurfaceMesh:
        """The primary terrain with per-vertex surface colors."""
        return self._build_surface(
            "terrain",
            self.settings['terrain_grid_width'],
            self.settings['terrain_grid_height'],
            self.settings['terrain_grid_unit'],
            self.get_terrain_heightmap(),
            classify=True,
        )

    def generate_rock(self) -> SurfaceMesh:
        return self._build_surface(
            "rock",
            self.settings['terrain_grid_width'],
            self.settings['terrain_grid_height'],
            self.settings['terrain_grid_unit'],
            self.get_rock_heightmap(),
        )

    def generate_water(self) -> list:
        """One mesh per water layer, in layer order."""
        return [
            self._build_surface(
                f"water layer {i}",
                self.settings['water_grid_width'],
                self.settings['water_grid_height'],
                self.settings['water_grid_unit'],
                layer,
            )
            for i, layer in enumerate(self.get_water_heightmaps())
        ]

    def generate_sky_volume(self) -> volumetric.VolumetricBuffer:
        start_time = time.perf_counter()
        size = self.settings['sky_volume_size']
        buffer = volumetric.pack_volume(
            size,
            self.settings['sky_volume_step'],
            self.get_sky_density(),
            channels=self.settings['sky_volume_channels'],
        )
        elapsed = time.perf_counter() - start_time
        self.logger.info(
            f"Packed sky volume: {size}^3 texels, {len(buffer.data)} bytes "
            f"({buffer.format}) in {elapsed:.2f} seconds."
        )
        return buffer

    def generate_all(self, include_sky: bool = True) -> dict:
        """Builds every artifact sequentially: terrain, rock, water, then sky."""
        artifacts = {
            'terrain': self.generate_terrain(),
            'rock': self.generate_rock(),
            'water': self.generate_water(),
            'materials': self.materials,
        }
        if include_sky:
            artifacts['sky'] = self.generate_sky_volume()
        return artifacts
