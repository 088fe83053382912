import os

import jax.numpy as jnp
import numpy as np
from flax import struct
from PIL import Image


@struct.dataclass
class Framebuffer:
    """Flat row-major HDR colour buffer; pixel (x, y) lives at index y * width + x."""
    width: int = struct.field(pytree_node=False)
    height: int = struct.field(pytree_node=False)
    colors: jnp.ndarray  # Shape (width * height, 3)

    def __post_init__(self):
        expected = (self.width * self.height, 3)
        shape = getattr(self.colors, 'shape', None)  # Leaves may be placeholders when unflattened by jax
        if shape is not None and tuple(shape) != expected:
            raise ValueError(f"Framebuffer colors must have shape {expected}, got {tuple(shape)}")

    def index(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} framebuffer")
        return y * self.width + x

    def pixel(self, x: int, y: int) -> jnp.ndarray:
        return self.colors[self.index(x, y)]

    def to_image(self) -> jnp.ndarray:
        """HDR colours reshaped to (height, width, 3)."""
        return self.colors.reshape(self.height, self.width, 3)


# --- Tone Mapping ---
def tone_map(colors: jnp.ndarray) -> jnp.ndarray:
    """Compress HDR colours (..., 3) to uint8.

    Overbright pixels are divided by their largest channel, which keeps the hue
    instead of clipping each channel separately. Quantisation rounds half up.
    """
    m = jnp.max(colors, axis=-1, keepdims=True)
    scaled = jnp.where(m > 1.0, colors / jnp.maximum(m, 1.0), colors)
    ldr = jnp.clip(scaled, 0.0, 1.0)
    return jnp.floor(ldr * 255.0 + 0.5).astype(jnp.uint8)


# --- Encoding ---
def save_image(framebuffer: Framebuffer, path: str) -> str:
    """Tone-map the framebuffer and write it as an RGB image; format follows the extension."""
    pixels = np.asarray(tone_map(framebuffer.to_image()))
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    Image.fromarray(pixels, 'RGB').save(path)
    return path
