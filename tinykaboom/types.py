import jax.numpy as jnp
from flax import struct

# --- Type Aliases for Clarity ---
Vec3 = jnp.ndarray  # Shape (..., 3)
Color = jnp.ndarray  # RGB triple, (..., 3). May exceed 1.0 before tone mapping.


@struct.dataclass
class Ray:
    origin: jnp.ndarray     # Shape (..., 3)
    direction: jnp.ndarray  # Shape (..., 3), unit length


@struct.dataclass
class HitResult:
    found: jnp.ndarray      # bool, shape (...)
    position: jnp.ndarray   # Shape (..., 3). Only meaningful where found is True
    steps: jnp.ndarray      # int32, number of SDF evaluations taken by the march
