import math
import os
import time
import argparse

import jax.numpy as jnp

from tinykaboom.scene import RenderConfig, validate_config
from tinykaboom.background import load_background
from tinykaboom.integrator import render_framebuffer, DEFAULT_TILE_ROWS
from tinykaboom.framebuffer import save_image


def build_parser():
    parser = argparse.ArgumentParser(description="Sphere-traced noise explosion renderer")
    parser.add_argument('--width', type=int, default=640, help='Image width')
    parser.add_argument('--height', type=int, default=480, help='Image height')
    parser.add_argument('--fov', type=float, default=60.0, help='Vertical field of view in degrees')
    parser.add_argument('--camera', type=float, nargs=3, default=[0.0, 0.0, 3.0], metavar=('X', 'Y', 'Z'),
                        help='Camera position (looks along -z)')
    parser.add_argument('--light', type=float, nargs=3, default=[10.0, 10.0, 10.0], metavar=('X', 'Y', 'Z'),
                        help='Point light position')
    parser.add_argument('--sphere-radius', type=float, default=1.5, help='Radius of the undisplaced sphere')
    parser.add_argument('--noise-amplitude', type=float, default=1.0, help='Inward displacement scale')
    parser.add_argument('--background', type=str, default=None,
                        help='Optional panorama image for rays that miss (e.g. envmap.jpg)')
    parser.add_argument('--output', type=str, default='out.png', help='Output image path (format from extension)')
    parser.add_argument('--tile-rows', type=int, default=DEFAULT_TILE_ROWS, help='Rows rendered per batch')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    config = RenderConfig(
        width=args.width,
        height=args.height,
        fov_radians=math.radians(args.fov),
        camera_pos=jnp.array(args.camera),
        light_pos=jnp.array(args.light),
        sphere_radius=args.sphere_radius,
        noise_amplitude=args.noise_amplitude,
    )
    try:
        validate_config(config)
    except ValueError as e:
        raise SystemExit(f"Invalid render settings: {e}")

    # --- Load Background ---
    background = None
    if args.background and os.path.exists(args.background):
        background = load_background(args.background)
    elif args.background:
        print(f"Warning: background image not found at {args.background}. Using flat background colour.")

    # --- Render ---
    print(f"Rendering {config.width}x{config.height} explosion "
          f"(fov {args.fov:.1f} deg, radius {config.sphere_radius}, amplitude {config.noise_amplitude})...")
    print("Compiling sphere tracer (JIT)...")
    start_time = time.time()
    framebuffer = render_framebuffer(config, background, tile_rows=args.tile_rows)
    print(f"Rendering finished in {time.time() - start_time:.2f} seconds.")

    # --- Save Image ---
    output_path = save_image(framebuffer, args.output)
    print(f"Image saved to {output_path}")


if __name__ == "__main__":
    main()
