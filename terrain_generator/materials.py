# terrain_generator/materials.py

"""
================================================================================
MATERIAL PARAMETER RECORDS
================================================================================
Flat records of shading parameters for each surface. The generator never
interprets them; they are passed through to the renderer together with the
mesh buffers. Overrides may only change keys the record already has.
================================================================================
"""

from . import config as DEFAULTS


def _merge(defaults: dict, overrides: dict, kind: str) -> dict:
    overrides = overrides or {}
    unknown = sorted(set(overrides) - set(defaults))
    if unknown:
        raise ValueError(f"Unknown {kind} material parameter(s): {', '.join(unknown)}")
    material = dict(defaults)
    material.update(overrides)
    return material


def terrain_material(overrides: dict = None) -> dict:
    """Peak/cliff/steep/sea thresholds with their blend widths, plus lighting colors."""
    return _merge(DEFAULTS.TERRAIN_MATERIAL, overrides, "terrain")

def water_material(overrides: dict = None) -> dict:
    return _merge(DEFAULTS.WATER_MATERIAL, overrides, "water")

def sky_material(overrides: dict = None, noise_texture: str = None) -> dict:
    """
    Ray-march uniforms for the sky volume. `noise_texture` names the packed
    volume the renderer should bind (e.g. a file in the bake output).
    """
    material = _merge(DEFAULTS.SKY_MATERIAL, overrides, "sky")
    material["noise_texture"] = noise_texture
    return material
