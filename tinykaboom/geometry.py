import jax.numpy as jnp

from .noise import turbulence
from .utils import dot, norm, normalize

# All of the explosion fits in a sphere of this radius, centred on the origin.
SPHERE_RADIUS = 1.5
# How far (towards the centre) turbulence may push the surface.
NOISE_AMPLITUDE = 1.0
# Spatial frequency of the surface detail.
NOISE_FREQUENCY = 3.4

NORMAL_EPSILON = 0.1


# --- Implicit Surface ---

def signed_distance(p, sphere_radius=SPHERE_RADIUS, noise_amplitude=NOISE_AMPLITUDE):
    """Signed distance to the displaced sphere: negative inside, positive outside."""
    displacement = -turbulence(p * NOISE_FREQUENCY) * noise_amplitude
    return norm(p) - (sphere_radius + displacement)


def bounding_sphere_miss(origin, direction, radius=SPHERE_RADIUS):
    """True when the ray's line passes farther than `radius` from the origin.

    turbulence() is non-negative, so the displaced surface lies inside the
    undisplaced sphere and this test never rejects a ray that could hit.
    """
    return dot(origin, origin) - dot(origin, direction) ** 2 > radius * radius


# --- Normals ---

def distance_field_normal(pos, sphere_radius=SPHERE_RADIUS, noise_amplitude=NOISE_AMPLITUDE):
    """Forward finite-difference gradient of the SDF, normalized.

    eps is large on purpose; the shading palette was tuned against it.
    """
    d = signed_distance(pos, sphere_radius, noise_amplitude)
    offsets = jnp.eye(3) * NORMAL_EPSILON                  # (3, 3), one row per axis
    probes = pos[..., None, :] + offsets                    # (..., 3, 3)
    gradient = signed_distance(probes, sphere_radius, noise_amplitude) - d[..., None]
    return normalize(gradient)
