# terrain_generator/__init__.py

# Public API of the terrain generation package.

from .generator import TerrainGenerator
from .mesh import SurfaceMesh, build_mesh
from .noise import GradientField2D, GradientField3D, perlin_2d, perlin_3d
from .volumetric import VolumetricBuffer, pack_volume

__all__ = [
    "TerrainGenerator",
    "SurfaceMesh",
    "build_mesh",
    "GradientField2D",
    "GradientField3D",
    "perlin_2d",
    "perlin_3d",
    "VolumetricBuffer",
    "pack_volume",
]
