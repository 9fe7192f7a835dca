import logging

import numpy as np
import pytest


@pytest.fixture
def rng():
    return np.random.default_rng(2024)


@pytest.fixture
def logger():
    return logging.getLogger("TerrainGeneratorTest")


@pytest.fixture
def small_config():
    """Generation parameters small enough to run every surface in well under a second."""
    return {
        'seed': 42,
        'noise_lattice_size': 16,
        'terrain_grid_width': 12,
        'terrain_grid_height': 10,
        'terrain_grid_unit': 2.0,
        'water_grid_width': 6,
        'water_grid_height': 6,
        'water_grid_unit': 4.0,
        'normal_smoothing_radius': 2,
        'normal_smoothing_sigma': 1.5,
        'sky_volume_size': 4,
        'sky_volume_step': 2.0,
        'sky_lattice_size': 8,
    }
