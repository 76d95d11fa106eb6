#!/usr/bin/env python3
"""Render the random world scene.

This script generates the random world (a ground plane covered in small
diffuse spheres plus one glass and two metal spheres), renders it through a
thin-lens camera and writes the result as PNG or JPEG.

Usage:
    python -m examples.render_random_world [options]

Options:
    --width WIDTH         Image width in pixels (default: 256)
    --height HEIGHT       Image height in pixels (default: 256)
    --samples SAMPLES     Number of samples per pixel (default: 100)
    --seed SEED           Seed for scene generation and sampling (default: 1)
    --max-depth DEPTH     Maximum bounces per path (default: 50)
    --output OUTPUT       Output file path (default: out.jpg)
    --arch ARCH           Taichi backend: cpu, gpu or cuda (default: cpu)
    --verbose             Enable debug logging

Example:
    python -m examples.render_random_world --width 128 --height 128 --samples 20
"""

import argparse
import logging
import sys
from pathlib import Path

logger = logging.getLogger("render_random_world")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the random world scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=256,
        help="Image width in pixels (default: 256)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=256,
        help="Image height in pixels (default: 256)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=100,
        help="Number of samples per pixel (default: 100)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=1,
        help="Seed for scene generation and sampling (default: 1)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=50,
        help="Maximum bounces per path (default: 50)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="out.jpg",
        help="Output file path (default: out.jpg)",
    )
    parser.add_argument(
        "--arch",
        choices=["cpu", "gpu", "cuda"],
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def render_random_world(
    width: int = 256,
    height: int = 256,
    num_samples: int = 100,
    seed: int = 1,
    max_depth: int = 50,
    output_path: str = "out.jpg",
) -> Path:
    """Render the random world and save it to a file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        num_samples: Number of samples per pixel.
        seed: Seed for scene generation and the per-pixel random streams.
        max_depth: Maximum bounces per path.
        output_path: Output file path (PNG or JPEG).

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from raykernel.config import RenderConfig
    from raykernel.core.integrator import render_config
    from raykernel.preview.export import save_image
    from raykernel.scene.presets import random_world, random_world_camera

    config = RenderConfig(
        width=width,
        height=height,
        samples_per_pixel=num_samples,
        max_depth=max_depth,
        seed=seed,
    )

    logger.info("Generating world")
    world = random_world(seed)
    camera = random_world_camera(width, height)

    logger.info("Rendering")
    pixels = render_config(world, camera, config)

    output_file = Path(output_path)
    save_image(pixels, output_file)
    logger.info("Done")
    logger.debug("Saved to: %s", output_file.absolute())

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    from raykernel.config import init_backend

    backend = init_backend(args.arch)
    logger.debug("Using %s backend", backend)

    try:
        render_random_world(
            width=args.width,
            height=args.height,
            num_samples=args.samples,
            seed=args.seed,
            max_depth=args.max_depth,
            output_path=args.output,
        )
        return 0
    except (ValueError, RuntimeError, OSError) as e:
        logger.error("Error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
