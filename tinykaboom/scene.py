import math
from dataclasses import field

import jax.numpy as jnp
from flax import struct

from .geometry import SPHERE_RADIUS, NOISE_AMPLITUDE

DEFAULT_FOV = math.pi / 3.0
FLAT_BACKGROUND = (0.2, 0.7, 0.8)


@struct.dataclass
class RenderConfig:
    # Raster and lens are static: they fix array shapes under jit
    width: int = struct.field(pytree_node=False, default=640)
    height: int = struct.field(pytree_node=False, default=480)
    fov_radians: float = struct.field(pytree_node=False, default=DEFAULT_FOV)

    # Camera looks along -z from here
    camera_pos: jnp.ndarray = field(default_factory=lambda: jnp.array([0.0, 0.0, 3.0]))
    light_pos: jnp.ndarray = field(default_factory=lambda: jnp.array([10.0, 10.0, 10.0]))

    # Implicit surface
    sphere_radius: float = SPHERE_RADIUS
    noise_amplitude: float = NOISE_AMPLITUDE

    # Used for misses when no background raster is supplied
    background_color: jnp.ndarray = field(default_factory=lambda: jnp.array(FLAT_BACKGROUND))


def validate_config(config: RenderConfig) -> RenderConfig:
    """Eagerly check the preconditions the jitted renderer relies on.

    Raises ValueError; returns the config unchanged so calls can be chained.
    """
    if config.width <= 0 or config.height <= 0:
        raise ValueError(f"Image size must be positive, got {config.width}x{config.height}")
    if not 0.0 < config.fov_radians < math.pi:
        raise ValueError(f"fov_radians must lie in (0, pi), got {config.fov_radians}")
    if float(config.sphere_radius) <= 0.0:
        raise ValueError(f"sphere_radius must be positive, got {config.sphere_radius}")
    # The shader divides by the amplitude to get the noise level
    if float(config.noise_amplitude) <= 0.0:
        raise ValueError(f"noise_amplitude must be positive, got {config.noise_amplitude}")

    for name in ('camera_pos', 'light_pos', 'background_color'):
        shape = jnp.shape(getattr(config, name))
        if shape != (3,):
            raise ValueError(f"{name} must have shape (3,), got {shape}")

    # Every hit lies inside the bounding sphere, so a light outside it keeps light_pos - hit non-zero
    light_distance = float(jnp.linalg.norm(config.light_pos))
    if light_distance <= float(config.sphere_radius):
        raise ValueError(
            f"light_pos must lie outside the bounding sphere (radius {config.sphere_radius}), "
            f"got distance {light_distance:.3f}"
        )
    return config
