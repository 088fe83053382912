import jax.numpy as jnp

# --- Vector Utilities ---
def dot(v1, v2):
    return jnp.sum(v1 * v2, axis=-1)

def norm(v):
    return jnp.linalg.norm(v, axis=-1)

def normalize(v):
    """Normalize a vector."""
    # Epsilon keeps traced code finite; zero-length inputs are rejected eagerly in scene.validate_config
    n = jnp.linalg.norm(v, axis=-1, keepdims=True)
    return v / jnp.maximum(n, 1e-6)

def clamp01(t):
    return jnp.clip(t, 0.0, 1.0)

# --- Interpolation ---
# Two explicit interpolators: one over scalars, one over RGB/Vec3 values.

def lerp_scalar(v0, v1, t):
    """v0 + (v1 - v0) * clamp(t, 0, 1) for scalar fields."""
    return v0 + (v1 - v0) * clamp01(t)

def lerp_color(v0, v1, t):
    """Same as lerp_scalar, but v0/v1 are (..., 3) and t has the leading shape (...)."""
    return v0 + (v1 - v0) * clamp01(t)[..., None]
