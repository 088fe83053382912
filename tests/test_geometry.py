import jax.numpy as jnp
import pytest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from tinykaboom.geometry import (
    signed_distance, bounding_sphere_miss, distance_field_normal,
    SPHERE_RADIUS, NOISE_AMPLITUDE,
)


@pytest.fixture
def shell_points():
    """Points scattered through and around the bounding sphere, shape (N, 3)."""
    axis = jnp.linspace(-2.2, 2.2, 11)
    xx, yy, zz = jnp.meshgrid(axis, axis, axis, indexing='ij')
    return jnp.stack([xx.ravel(), yy.ravel(), zz.ravel()], axis=-1)


# --- Tests for signed_distance ---

def test_surface_never_exceeds_sphere_radius(shell_points):
    """Displacement only moves the surface inward: sd(p) >= |p| - R."""
    d = signed_distance(shell_points)
    lower = jnp.linalg.norm(shell_points, axis=-1) - SPHERE_RADIUS
    assert jnp.all(d >= lower - 1e-5)

def test_displacement_bounded_by_amplitude(shell_points):
    """With turbulence in [0, 1], sd(p) <= |p| - (R - A)."""
    d = signed_distance(shell_points)
    upper = jnp.linalg.norm(shell_points, axis=-1) - (SPHERE_RADIUS - NOISE_AMPLITUDE)
    assert jnp.all(d <= upper + 1e-5)

def test_outside_bounding_sphere_is_positive():
    p = jnp.array([0.0, 1.6, 0.0])
    assert float(signed_distance(p)) > 0.0

def test_zero_amplitude_is_plain_sphere():
    p = jnp.array([0.0, 0.0, 2.0])
    assert jnp.allclose(signed_distance(p, 1.5, 0.0), 0.5, atol=1e-6)

def test_signed_distance_continuity():
    """Nearby points differ by at most their separation plus the noise variation."""
    p = jnp.array([0.4, -0.7, 0.9])
    eps = 1e-3
    q = p + jnp.array([eps, 0.0, 0.0])
    delta = abs(float(signed_distance(p)) - float(signed_distance(q)))
    assert delta < 0.05


# --- Tests for bounding_sphere_miss ---

def test_bounding_cull_rejects_far_ray():
    origin = jnp.array([0.0, 0.0, 3.0])
    direction = jnp.array([1.0, 0.0, 0.0])  # Closest approach is 3 > 1.5
    assert bool(bounding_sphere_miss(origin, direction, 1.5))

def test_bounding_cull_keeps_central_ray():
    origin = jnp.array([0.0, 0.0, 3.0])
    direction = jnp.array([0.0, 0.0, -1.0])
    assert not bool(bounding_sphere_miss(origin, direction, 1.5))

def test_bounding_cull_tangent_ray_not_rejected():
    # Closest approach exactly equal to the radius is not strictly outside
    origin = jnp.array([1.5, 0.0, 3.0])
    direction = jnp.array([0.0, 0.0, -1.0])
    assert not bool(bounding_sphere_miss(origin, direction, 1.5))


# --- Tests for distance_field_normal ---

def test_normal_is_unit_length(shell_points):
    n = distance_field_normal(shell_points[:50])
    assert jnp.allclose(jnp.linalg.norm(n, axis=-1), 1.0, atol=1e-5)

def test_normal_on_plain_sphere_is_radial():
    pos = jnp.array([0.0, 0.0, 1.5])
    n = distance_field_normal(pos, 1.5, 0.0)
    # Forward differences with eps=0.1 tilt the estimate slightly towards +x/+y
    assert float(jnp.dot(n, jnp.array([0.0, 0.0, 1.0]))) > 0.99

def test_normal_batch_matches_single():
    points = jnp.array([[0.2, 0.3, 1.1], [-0.5, 0.8, 0.1]])
    batch = distance_field_normal(points)
    singles = jnp.stack([distance_field_normal(p) for p in points])
    assert jnp.allclose(batch, singles, atol=5e-2)
