# bake_terrain.py

"""
================================================================================
OFFLINE TERRAIN BAKER SCRIPT
================================================================================
This script is a command-line tool for generating every terrain artifact once
and writing it to a directory ("baking"): mesh buffers as .npz files, the sky
volume as a raw float32 texture, a top-down color preview and a manifest that
ties them together with their material records.

Usage:
    python bake_terrain.py --config path/to/your/config.json
================================================================================
"""
import os
import sys
import json
import logging
import argparse
import time
import numpy as np
from PIL import Image
from tqdm import tqdm

# Add project root to Python path to allow importing from terrain_generator
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from terrain_generator.generator import TerrainGenerator
from terrain_generator import color_maps
from terrain_generator import config as DEFAULTS

SKY_VOLUME_FILENAME = "sky_volume.bin"
PREVIEW_FILENAME = "preview.png"


def save_mesh(mesh, directory: str, name: str) -> dict:
    """Writes a mesh's buffers to <name>.npz and returns its manifest entry."""
    file_name = f"{name}.npz"
    buffers = {
        'positions': mesh.positions,
        'normals': mesh.normals,
        'indices': mesh.indices,
    }
    if mesh.colors is not None:
        buffers['colors'] = mesh.colors
    np.savez_compressed(os.path.join(directory, file_name), **buffers)
    return {
        'file': file_name,
        'grid': [mesh.width, mesh.height],
        'vertex_count': mesh.vertex_count,
        'index_count': int(mesh.indices.size),
        'has_colors': mesh.colors is not None,
    }


def save_preview(mesh, directory: str) -> str:
    """Saves the terrain's vertex colors as a top-down PNG."""
    color_array = color_maps.get_preview_color_array(mesh.colors, mesh.width, mesh.height)
    # Pillow works with (height, width, channels) arrays, so we need to transpose
    # the grid from (x, y, channels) to what Pillow expects.
    img = Image.fromarray(np.ascontiguousarray(np.transpose(color_array, (1, 0, 2))), 'RGB')
    img.save(os.path.join(directory, PREVIEW_FILENAME), 'PNG')
    return PREVIEW_FILENAME


def bake_terrain(config_path: str, output_dir: str = None, include_sky: bool = True):
    """
    Loads a configuration, generates every surface and writes the bake output.
    Returns the manifest dict, or None if the configuration could not be loaded.
    """
    logger = logging.getLogger("Baker")

    # 1. --- Load Configuration ---
    logger.info(f"Loading configuration from: {config_path}")
    try:
        with open(config_path, 'r') as f:
            config = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.critical(f"Failed to load or parse config file: {e}")
        return None

    params = config.get('terrain_generation_parameters', {})
    generator = TerrainGenerator(config=params, logger=logger)

    # 2. --- Prepare Output Directory ---
    if output_dir is None:
        output_dir = os.path.join(DEFAULTS.DEFAULT_OUTPUT_DIR, f"seed_{generator.seed}")
    os.makedirs(output_dir, exist_ok=True)
    logger.info(f"Output directory set to '{output_dir}'")

    manifest = {
        'seed': generator.seed,
        'meshes': {},
        'materials': dict(generator.materials),
    }
    start_time = time.perf_counter()

    # 3. --- Generate Surfaces in a fixed order ---
    steps = ["terrain", "rock", "water"] + (["sky"] if include_sky else [])
    for step in tqdm(steps, desc="Baking Surfaces"):
        if step == "terrain":
            terrain = generator.generate_terrain()
            manifest['meshes']['terrain'] = save_mesh(terrain, output_dir, "terrain")
            manifest['preview'] = save_preview(terrain, output_dir)
        elif step == "rock":
            manifest['meshes']['rock'] = save_mesh(generator.generate_rock(), output_dir, "rock")
        elif step == "water":
            for i, layer in enumerate(generator.generate_water()):
                manifest['meshes'][f"water_{i}"] = save_mesh(layer, output_dir, f"water_{i}")
        elif step == "sky":
            volume = generator.generate_sky_volume()
            with open(os.path.join(output_dir, SKY_VOLUME_FILENAME), 'wb') as f:
                f.write(volume.data)
            manifest['sky_volume'] = {
                'file': SKY_VOLUME_FILENAME,
                'dims': list(volume.dims),
                'format': volume.format,
                'byte_order': sys.byteorder,
            }
            manifest['materials']['sky'] = dict(manifest['materials']['sky'], noise_texture=SKY_VOLUME_FILENAME)

    # 4. --- Save the manifest and the "birth certificate" generation config ---
    manifest_path = os.path.join(output_dir, "manifest.json")
    with open(manifest_path, 'w') as f:
        json.dump(manifest, f, indent=2)

    gen_config_path = os.path.join(output_dir, "generation_config.json")
    with open(gen_config_path, 'w') as f:
        json.dump(generator.settings, f, indent=4)

    end_time = time.perf_counter()
    logger.info(f"Baking complete! Total time: {end_time - start_time:.2f} seconds.")
    logger.info(f"Baked terrain and manifest.json saved to: {output_dir}")
    return manifest


def main(argv=None):
    parser = argparse.ArgumentParser(description="Offline Terrain Baker for the procedural terrain generator.")
    parser.add_argument(
        "--config",
        type=str,
        required=True,
        help="Path to the JSON configuration file for the terrain to be baked."
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output directory (defaults to baked_terrain/seed_<seed>)."
    )
    parser.add_argument(
        "--skip-sky",
        action="store_true",
        help="Do not generate the sky volume."
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )
    manifest = bake_terrain(args.config, args.output, include_sky=not args.skip_sky)
    return 0 if manifest is not None else 1


# --- Command-Line Interface ---
if __name__ == "__main__":
    sys.exit(main())
