"""
Panoramic background: loading and the fixed angular remap used for misses.

The remap is not a lens-accurate projection; it reproduces a fixed
scale-and-offset lookup so the panorama roughly lines up with the camera.
"""
import math
import os

import jax.numpy as jnp
import numpy as np
from PIL import Image


def load_background(path: str) -> jnp.ndarray:
    """Load an image as an (H, W, 3) uint8 RGB raster."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"Background image not found: {path}")
    with Image.open(path) as img:
        raster = np.asarray(img.convert('RGB'), dtype=np.uint8)
    print(f"Background loaded from {path}: {raster.shape[1]}x{raster.shape[0]}")
    return jnp.asarray(raster)


def projection_params(width: int, height: int, fov: float, bg_width: int, bg_height: int):
    """(kx, ky, x0, y0) for the angular remap. Pure Python; evaluated at trace time."""
    dir_z = -height / (2.0 * math.tan(fov / 2.0))
    kx = 0.5 * math.pi / math.atan((width / 2.0) / abs(dir_z))
    ky = 0.4 * math.pi * 2.0 / fov
    x0 = bg_width // 4 - int(kx * width / 2.0)
    y0 = bg_height // 2 - int(ky * height / 2.0)
    return kx, ky, x0, y0


def sample_background(background: jnp.ndarray, screen_x, screen_y, width: int, height: int, fov: float):
    """Colour in [0, 1] of the background behind pixel column screen_x, row screen_y."""
    bg_height, bg_width = background.shape[0], background.shape[1]
    kx, ky, x0, y0 = projection_params(width, height, fov, bg_width, bg_height)

    # Truncate like an integer cast, then wrap (floor-mod keeps negative origins in range)
    col = jnp.trunc(x0 + kx * jnp.asarray(screen_x, jnp.float32)).astype(jnp.int32)
    row = jnp.trunc(y0 + ky * jnp.asarray(screen_y, jnp.float32)).astype(jnp.int32)
    col = jnp.mod(col, bg_width)
    row = jnp.mod(row, bg_height)

    return background[row, col].astype(jnp.float32) / 255.0
