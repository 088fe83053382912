import jax
import jax.numpy as jnp
from jax import lax
from typing import NamedTuple, Optional
from tqdm import tqdm

from .types import Ray, HitResult
from .geometry import signed_distance, bounding_sphere_miss, distance_field_normal
from .palette import palette_fire
from .background import sample_background
from .camera import Camera
from .framebuffer import Framebuffer
from .scene import RenderConfig, validate_config
from .utils import dot, norm, normalize

MAX_MARCH_STEPS = 128
STEP_SCALE = 0.1      # Fraction of the distance estimate taken per step
MIN_STEP = 0.01       # Floor so flat regions of the field cannot stall the march
AMBIENT = 0.4         # Lower bound on the Lambertian term

DEFAULT_TILE_ROWS = 32


# --- Sphere Tracing ---
class MarchState(NamedTuple):
    step: jnp.ndarray
    position: jnp.ndarray
    found: jnp.ndarray


def sphere_trace(origin, direction, sphere_radius, noise_amplitude) -> HitResult:
    """Marches a single ray (origin, unit direction) to the first sample inside the surface.

    The reported hit is the first interior sample, not a refined root, so it
    sits inside the true surface by at most one step.
    """
    culled = bounding_sphere_miss(origin, direction, sphere_radius)

    def cond_fun(state):
        return (~culled) & (~state.found) & (state.step < MAX_MARCH_STEPS)

    def body_fun(state):
        d = signed_distance(state.position, sphere_radius, noise_amplitude)
        inside = d < 0.0
        # Step depends on the current distance: far from the surface, take big steps
        advanced = state.position + direction * jnp.maximum(d * STEP_SCALE, MIN_STEP)
        return MarchState(
            step=state.step + 1,
            position=jnp.where(inside, state.position, advanced),
            found=inside,
        )

    init_state = MarchState(
        step=jnp.array(0, dtype=jnp.int32),
        position=jnp.asarray(origin, dtype=jnp.float32),
        found=jnp.array(False),
    )
    final_state = lax.while_loop(cond_fun, body_fun, init_state)
    return HitResult(found=final_state.found, position=final_state.position, steps=final_state.step)


# --- Shading ---
def shade(hit_pos, light_pos, sphere_radius, noise_amplitude):
    """Fire-palette colour at a surface hit, lit by one point light (no shadows)."""
    noise_level = (sphere_radius - norm(hit_pos)) / noise_amplitude
    light_dir = normalize(light_pos - hit_pos)
    normal = distance_field_normal(hit_pos, sphere_radius, noise_amplitude)
    light_intensity = jnp.maximum(AMBIENT, dot(light_dir, normal))
    return palette_fire((noise_level - 0.2) * 2.0) * light_intensity[..., None]


# --- Per-Pixel Compositing ---
def render_pixel(config: RenderConfig, background: Optional[jnp.ndarray], ray: Ray, pixel_x, pixel_y):
    """Colour of one pixel: shaded surface on a hit, background otherwise."""
    hit = sphere_trace(ray.origin, ray.direction, config.sphere_radius, config.noise_amplitude)
    surface = shade(hit.position, config.light_pos, config.sphere_radius, config.noise_amplitude)

    if background is None:
        miss = config.background_color
    else:
        miss = sample_background(background, pixel_x, pixel_y,
                                 config.width, config.height, config.fov_radians)

    return jnp.where(hit.found, surface, miss)


_render_pixel_batch = jax.vmap(
    render_pixel,
    in_axes=(None, None, Ray(origin=0, direction=0), 0, 0)
)


@jax.jit
def render_pixels(config: RenderConfig, xs, ys, background: Optional[jnp.ndarray] = None) -> jnp.ndarray:
    """HDR colours (N, 3) for the pixels at columns xs, rows ys."""
    camera = Camera(eye=config.camera_pos, fov=config.fov_radians)
    rays = camera.rays(xs, ys, config.width, config.height)
    return _render_pixel_batch(config, background, rays, xs, ys)


def render_framebuffer(
    config: RenderConfig,
    background: Optional[jnp.ndarray] = None,
    tile_rows: int = DEFAULT_TILE_ROWS,
    progress: bool = True,
) -> Framebuffer:
    """Render the whole frame, tile_rows rows at a time.

    Tiles are independent; the framebuffer is assembled once all of them finish.
    """
    validate_config(config)
    if tile_rows <= 0:
        raise ValueError(f"tile_rows must be positive, got {tile_rows}")

    width, height = config.width, config.height
    tiles = []
    starts = range(0, height, tile_rows)
    for row_start in tqdm(starts, desc="Rendering", unit="tile", disable=not progress):
        row_end = min(row_start + tile_rows, height)
        x, y = jnp.meshgrid(jnp.arange(width, dtype=jnp.int32),
                            jnp.arange(row_start, row_end, dtype=jnp.int32))
        tiles.append(render_pixels(config, x.ravel(), y.ravel(), background))

    colors = jnp.concatenate(tiles, axis=0)
    colors.block_until_ready()
    return Framebuffer(width=width, height=height, colors=colors)
