"""Path tracing integrator and the per-pixel render loop.

A ray that escapes the scene sees a vertical sky gradient. A ray that hits a
surface is scattered by the surface material and traced further, its light
attenuated by the material albedo, until it escapes, is absorbed, or runs
out of bounces (in which case it contributes black).

Each pixel owns an independent random stream derived from the render seed
and its flattened index, so a render is a deterministic function of its
inputs even though pixels are traced in parallel.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from raykernel.core.integrator import render
    >>> from raykernel.scene.presets import three_sphere_camera, three_sphere_world
    >>>
    >>> world = three_sphere_world()
    >>> camera = three_sphere_camera(200, 200)
    >>> pixels = render(world, camera, 200, 200, samples_per_pixel=100)
    >>> pixels.shape
    (200, 200, 3)
"""

import logging
import time

import numpy as np
import numpy.typing as npt
import taichi as ti

from raykernel.camera.thin_lens import ThinLensCamera, get_ray, setup_camera
from raykernel.config import DEFAULT_MAX_DEPTH, DEFAULT_SEED, RenderConfig
from raykernel.core.ray import Ray
from raykernel.core.sampling import random_real, seed_stream
from raykernel.core.vector import Color, mul_color, real, unit, vec3
from raykernel.materials.material import scatter
from raykernel.scene.intersection import hit_world
from raykernel.scene.world import World

logger = logging.getLogger(__name__)

# =============================================================================
# Rendering Constants
# =============================================================================

# Maximum ray bounces (path length)
MAX_DEPTH = DEFAULT_MAX_DEPTH

# Exclusive bounds for ray intersection; T_MIN keeps scattered rays from
# re-hitting the surface they leave
T_MIN = 0.001
T_MAX = 1e308

# Largest value that still truncates into an 8-bit channel
_TO_8BIT = 255.999

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 1024
MAX_IMAGE_HEIGHT = 1024

# Linear color per pixel, indexed [row, col] with row 0 at the top
_color_buffer = ti.Vector.field(3, dtype=real, shape=(MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH))

# Output of the single-ray tracing kernel
_traced_color = ti.Vector.field(3, dtype=real, shape=())


# =============================================================================
# Path Tracing Core
# =============================================================================


@ti.func
def background_color(direction: vec3) -> Color:
    """Sky color seen by a ray that escapes the scene.

    Blends white and light blue by t = 0.5 * (unit(direction).y + 1), so
    straight down is white and straight up is blue.
    """
    t = 0.5 * (unit(direction).y + 1.0)
    return (1.0 - t) * Color(1.0, 1.0, 1.0) + t * Color(0.5, 0.7, 1.0)


@ti.func
def compute_color(ray: Ray, state: ti.u32, max_depth: ti.i32):
    """Estimate the light arriving along a ray.

    Equivalent to the recursive definition
        color(ray, depth) = attenuation * color(scattered, depth + 1)
    evaluated as a loop over bounces carrying the product of attenuations.
    The material is asked to scatter on every hit, including the last one
    allowed, so the random stream advances the same way as the recursion.

    Args:
        ray: The ray to trace.
        state: Random stream state.
        max_depth: Number of bounces allowed before a hit contributes black.

    Returns:
        A tuple (color, state).
    """
    s = ti.cast(state, ti.u32)
    current = Ray(origin=ray.origin, direction=ray.direction)
    throughput = Color(1.0, 1.0, 1.0)
    color = Color(0.0, 0.0, 0.0)

    # Taichi doesn't support break in ti.func loops
    active = 1

    for depth in range(max_depth + 1):
        if active == 1:
            rec = hit_world(current, T_MIN, T_MAX)

            if rec.hit == 0:
                color = mul_color(throughput, background_color(current.direction))
                active = 0
            else:
                scattered = scatter(current, rec, s)
                s = scattered.rng_state

                if depth < max_depth and scattered.did_scatter == 1:
                    throughput = mul_color(throughput, scattered.attenuation)
                    current = Ray(origin=scattered.origin, direction=scattered.direction)
                else:
                    # Absorbed or out of bounces: black
                    active = 0

    return color, s


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_kernel(
    width: ti.i32,
    height: ti.i32,
    samples: ti.i32,
    seed: ti.u32,
    max_depth: ti.i32,
):
    """Render every pixel into the color buffer.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        samples: Samples averaged per pixel.
        seed: Render seed for the per-pixel streams.
        max_depth: Bounce limit passed to compute_color.
    """
    for row, col in ti.ndrange(height, width):
        state = seed_stream(seed, ti.cast(row * width + col, ti.u32))

        # Image row 0 shows the highest scene row
        j = height - 1 - row

        total = Color(0.0, 0.0, 0.0)
        for _ in range(samples):
            r1, state = random_real(state)
            r2, state = random_real(state)
            u = (ti.cast(col, real) + r1) / ti.cast(width, real)
            v = (ti.cast(j, real) + r2) / ti.cast(height, real)

            origin, direction, state = get_ray(u, v, state)
            color, state = compute_color(
                Ray(origin=origin, direction=direction), state, max_depth
            )
            total += color

        _color_buffer[row, col] = total / ti.cast(samples, real)


@ti.kernel
def _trace_kernel(origin: vec3, direction: vec3, seed: ti.u32, max_depth: ti.i32):
    """Trace a single ray through the uploaded scene."""
    state = seed_stream(seed, ti.u32(0))
    color, _ = compute_color(Ray(origin=origin, direction=direction), state, max_depth)
    _traced_color[None] = color


# =============================================================================
# Public Rendering API
# =============================================================================


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    *,
    seed: int = DEFAULT_SEED,
    max_depth: int = MAX_DEPTH,
) -> tuple[float, float, float]:
    """Trace one ray through the scene currently uploaded to the device.

    Useful for debugging individual paths. For images use render(), which
    processes all pixels in parallel.

    Args:
        origin: The ray origin.
        direction: The ray direction (any non-zero length).
        seed: Seed of the random stream used by the scatter calls.
        max_depth: Number of bounces allowed.

    Returns:
        Tuple of (R, G, B) linear color values.

    Raises:
        ValueError: If max_depth is negative.
    """
    if max_depth < 0:
        raise ValueError(f"max_depth must be non-negative, got {max_depth}")
    _trace_kernel(
        vec3(origin[0], origin[1], origin[2]),
        vec3(direction[0], direction[1], direction[2]),
        seed & 0xFFFFFFFF,
        max_depth,
    )
    color = _traced_color[None]
    return (float(color[0]), float(color[1]), float(color[2]))


def _render(world: World, camera: ThinLensCamera, config: RenderConfig) -> npt.NDArray[np.float64]:
    if config.width > MAX_IMAGE_WIDTH or config.height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({config.width}x{config.height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    world.upload()
    setup_camera(camera)

    logger.debug(
        "Rendering %dx%d, %d spp, max_depth=%d, seed=%d",
        config.width,
        config.height,
        config.samples_per_pixel,
        config.max_depth,
        config.seed,
    )
    start_time = time.perf_counter()

    _render_kernel(
        config.width,
        config.height,
        config.samples_per_pixel,
        config.seed & 0xFFFFFFFF,
        config.max_depth,
    )
    image = _color_buffer.to_numpy()[: config.height, : config.width, :].copy()

    logger.debug("Render finished in %.2fs", time.perf_counter() - start_time)
    return image


def render_linear(
    world: World,
    camera: ThinLensCamera,
    width: int,
    height: int,
    samples_per_pixel: int = 1,
    *,
    seed: int = DEFAULT_SEED,
    max_depth: int = MAX_DEPTH,
) -> npt.NDArray[np.float64]:
    """Render a world to linear floating point colors.

    Args:
        world: The spheres to render. Uploaded to the device, replacing any
            previously uploaded scene.
        camera: The camera to render from.
        width: Image width in pixels.
        height: Image height in pixels.
        samples_per_pixel: Jittered samples averaged per pixel.
        seed: Seed of the per-pixel random streams.
        max_depth: Number of bounces allowed per sample.

    Returns:
        Array of shape (height, width, 3), float64, row 0 at the top.
        Values are not clamped.

    Raises:
        ValueError: If a dimension, the sample count or max_depth is invalid,
            or the image exceeds MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT.
    """
    config = RenderConfig(
        width=width,
        height=height,
        samples_per_pixel=samples_per_pixel,
        max_depth=max_depth,
        seed=seed,
    )
    return _render(world, camera, config)


def to_uint8(linear: npt.ArrayLike) -> npt.NDArray[np.uint8]:
    """Convert linear colors to 8-bit channels.

    Each channel is clamped into [0, 1], scaled by 255.999 and truncated,
    so 1.0 maps to 255 and anything below 1/255.999 maps to 0. No gamma is
    applied. NaN channels become 0.

    Args:
        linear: Array of linear color values, any shape.

    Returns:
        Array of the same shape with dtype uint8.
    """
    colors = np.nan_to_num(np.asarray(linear, dtype=np.float64), nan=0.0)
    colors = np.clip(colors, 0.0, 1.0)
    return (_TO_8BIT * colors).astype(np.uint8)


def render(
    world: World,
    camera: ThinLensCamera,
    width: int,
    height: int,
    samples_per_pixel: int = 1,
    *,
    seed: int = DEFAULT_SEED,
    max_depth: int = MAX_DEPTH,
) -> npt.NDArray[np.uint8]:
    """Render a world to an 8-bit RGB image.

    Same arguments as render_linear().

    Returns:
        Array of shape (height, width, 3), dtype uint8, row 0 at the top.
    """
    return to_uint8(
        render_linear(
            world,
            camera,
            width,
            height,
            samples_per_pixel,
            seed=seed,
            max_depth=max_depth,
        )
    )


def render_config(
    world: World,
    camera: ThinLensCamera,
    config: RenderConfig,
) -> npt.NDArray[np.uint8]:
    """Render a world to an 8-bit RGB image using a RenderConfig."""
    return to_uint8(_render(world, camera, config))
