from .types import Ray, HitResult
from .noise import hash_scalar, noise, turbulence
from .geometry import signed_distance, bounding_sphere_miss, distance_field_normal
from .palette import palette_fire
from .camera import Camera
from .scene import RenderConfig, validate_config
from .framebuffer import Framebuffer, tone_map, save_image
from .background import load_background, sample_background
from .integrator import sphere_trace, shade, render_pixels, render_framebuffer
