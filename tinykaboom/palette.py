import jax.numpy as jnp

from .utils import clamp01, lerp_color

# Note that the ramp is "hot": YELLOW has components > 1.
YELLOW = jnp.array([1.7, 1.3, 1.0])
ORANGE = jnp.array([1.0, 0.6, 0.0])
RED = jnp.array([1.0, 0.0, 0.0])
DARK_GRAY = jnp.array([0.2, 0.2, 0.2])
GRAY = jnp.array([0.4, 0.4, 0.4])

FIRE_STOPS = jnp.stack([GRAY, DARK_GRAY, RED, ORANGE, YELLOW])  # (5, 3)


def palette_fire(d):
    """Piecewise-linear gray -> dark gray -> red -> orange -> yellow ramp over d in [0, 1]."""
    x = clamp01(d)
    segment = jnp.minimum(jnp.floor(x * 4.0), 3.0)
    k = segment.astype(jnp.int32)
    return lerp_color(FIRE_STOPS[k], FIRE_STOPS[k + 1], x * 4.0 - segment)
