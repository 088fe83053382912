"""
Value noise and fractal turbulence.

Both are deterministic scalar fields over R^3 and carry no seed or state.
Every function works on a single point of shape (3,) and also broadcasts
over leading batch axes (..., 3).
"""
import jax.numpy as jnp

from .utils import dot, lerp_scalar

# Per-axis strides collapsing a 3D lattice cell into a 1D hash key
LATTICE_STRIDES = jnp.array([1.0, 57.0, 113.0])

# Fixed orthonormal basis change applied before the octave sum
ROTATION = jnp.array([
    [ 0.00,  0.80,  0.60],
    [-0.80,  0.36, -0.48],
    [-0.60, -0.48,  0.64],
])

# (amplitude, frequency multiplier applied *after* the octave)
OCTAVES = (
    (0.5000, 2.32),
    (0.2500, 3.03),
    (0.1250, 2.61),
    (0.0625, 1.00),
)
AMPLITUDE_SUM = 0.9375


def hash_scalar(n):
    """frac(sin(n) * 43758.5453). Maps any float key to [0, 1)."""
    x = jnp.sin(n) * 43758.5453
    return x - jnp.floor(x)


def noise(x):
    """Trilinearly interpolated value noise, in [0, 1)."""
    p = jnp.floor(x)
    f = x - p
    f = f * f * (3.0 - 2.0 * f)

    n = dot(p, LATTICE_STRIDES)
    fx, fy, fz = f[..., 0], f[..., 1], f[..., 2]

    return lerp_scalar(
        lerp_scalar(
            lerp_scalar(hash_scalar(n + 0.0), hash_scalar(n + 1.0), fx),
            lerp_scalar(hash_scalar(n + 57.0), hash_scalar(n + 58.0), fx), fy),
        lerp_scalar(
            lerp_scalar(hash_scalar(n + 113.0), hash_scalar(n + 114.0), fx),
            lerp_scalar(hash_scalar(n + 170.0), hash_scalar(n + 171.0), fx), fy),
        fz)


def rotate(v):
    return jnp.einsum('ij,...j->...i', ROTATION, v)


def turbulence(x):
    """Four-octave fractal sum of noise over a rotated domain, roughly in [0, 1]."""
    p = rotate(x)
    f = 0.0
    for amplitude, frequency in OCTAVES:
        f = f + amplitude * noise(p)
        p = p * frequency
    return f / AMPLITUDE_SUM
