import math
from dataclasses import field
from functools import partial

import jax
import jax.numpy as jnp
from flax import struct

from .types import Ray
from .utils import normalize


@struct.dataclass
class Camera:
    """Pinhole camera looking down -z. Pixel (0, 0) is the top-left corner."""
    eye: jnp.ndarray = field(default_factory=lambda: jnp.array([0.0, 0.0, 3.0]))
    fov: float = struct.field(pytree_node=False, default=math.pi / 3.0)  # Vertical field of view (radians)

    def focal_z(self, height: int) -> float:
        """z component of every (unnormalized) pixel direction."""
        return -height / (2.0 * math.tan(self.fov / 2.0))

    def directions(self, xs, ys, width: int, height: int) -> jnp.ndarray:
        """Unit ray directions through the centres of pixels (xs, ys)."""
        xs = jnp.asarray(xs, dtype=jnp.float32)
        ys = jnp.asarray(ys, dtype=jnp.float32)
        dir_x = (xs + 0.5) - width / 2.0
        # Flips the image vertically so row 0 is the top
        dir_y = -(ys + 0.5) + height / 2.0
        dir_z = jnp.full_like(dir_x, self.focal_z(height))
        return normalize(jnp.stack([dir_x, dir_y, dir_z], axis=-1))

    def rays(self, xs, ys, width: int, height: int) -> Ray:
        direction = self.directions(xs, ys, width, height)
        origin = jnp.broadcast_to(self.eye, direction.shape)
        return Ray(origin=origin, direction=direction)

    @partial(jax.jit, static_argnames=['width', 'height'])
    def generate_rays(self, width: int, height: int) -> Ray:
        """Rays for every pixel, flattened row-major (index y * width + x)."""
        x, y = jnp.meshgrid(jnp.arange(width), jnp.arange(height))
        return self.rays(x.ravel(), y.ravel(), width, height)
