"""Ready-made worlds and cameras.

Two scenes are provided:
- The three-sphere regression world: a diffuse ground, a fuzzy metal sphere
  and a glass sphere, framed from (1, 1, 1). Small and quick to render.
- The random world: a large diffuse ground covered with a grid of small
  randomly colored diffuse spheres, plus one glass and two metal spheres.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from raykernel.scene.presets import three_sphere_world, three_sphere_camera
    >>> world = three_sphere_world()
    >>> camera = three_sphere_camera(200, 200)
"""

from __future__ import annotations

import math

import numpy as np

from raykernel.camera.thin_lens import ThinLensCamera
from raykernel.materials.material import dielectric, lambertian, metal
from raykernel.scene.world import World

# =============================================================================
# Shared Constants
# =============================================================================

VUP = (0.0, 1.0, 0.0)
VFOV = 90.0
APERTURE = 0.01

GROUND_ALBEDO = (0.5, 0.5, 0.5)
GLASS_IOR = 1.5

# Keeps the small spheres clear of the large metal sphere at (4, 1, 0)
_CLEARANCE_POINT = np.array([4.0, 0.2, 0.0])
_CLEARANCE = 0.9

SMALL_SPHERE_RADIUS = 0.2
GRID_RANGE = range(-11, 11)


def _camera(
    lookfrom: tuple[float, float, float],
    lookat: tuple[float, float, float],
    width: int,
    height: int,
) -> ThinLensCamera:
    """Camera focused on lookat with the shared lens settings."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    return ThinLensCamera(
        lookfrom=lookfrom,
        lookat=lookat,
        vup=VUP,
        vfov=VFOV,
        aspect_ratio=width / height,
        aperture=APERTURE,
        focus_dist=math.dist(lookfrom, lookat),
    )


# =============================================================================
# Three-Sphere World
# =============================================================================


def three_sphere_world() -> World:
    """Create the three-sphere regression world.

    - Ground: center (0, -100.5, -1), radius 100, Lambertian gray 0.5
    - Metal: center (0, 0, -1), radius 1, albedo 0.8, fuzz 0.2
    - Glass: center (1.5, 0, -1), radius 1, ior 1.5
    """
    world = World()
    world.add_sphere((0.0, -100.5, -1.0), 100.0, lambertian(GROUND_ALBEDO))
    world.add_sphere((0.0, 0.0, -1.0), 1.0, metal((0.8, 0.8, 0.8), fuzz=0.2))
    world.add_sphere((1.5, 0.0, -1.0), 1.0, dielectric(GLASS_IOR))
    return world


def three_sphere_camera(width: int, height: int) -> ThinLensCamera:
    """Camera at (1, 1, 1) looking at (0, 0, -1), focused on the target.

    Raises:
        ValueError: If width or height is not positive.
    """
    return _camera((1.0, 1.0, 1.0), (0.0, 0.0, -1.0), width, height)


# =============================================================================
# Random World
# =============================================================================


def random_world(seed: int = 1) -> World:
    """Create the random world.

    A 22 x 22 grid of small diffuse spheres (radius 0.2) is jittered over
    the ground. A grid sphere is skipped if its center lies within 0.9 of
    (4, 0.2, 0). Each channel of a small sphere's albedo is the product of
    two uniform draws, which biases the palette toward dark colors.

    Args:
        seed: Seed of the numpy generator that places and colors the spheres.

    Returns:
        The populated world (ground, grid spheres, then glass and metal).
    """
    rng = np.random.default_rng(seed)
    world = World()

    world.add_sphere((0.0, -1000.0, -1.0), 1000.0, lambertian(GROUND_ALBEDO))

    for a in GRID_RANGE:
        for b in GRID_RANGE:
            center = np.array(
                [a + 0.9 * rng.random(), SMALL_SPHERE_RADIUS, b + 0.9 * rng.random()]
            )
            if np.linalg.norm(center - _CLEARANCE_POINT) <= _CLEARANCE:
                continue
            albedo = rng.random(3) * rng.random(3)
            world.add_sphere(
                tuple(center),
                SMALL_SPHERE_RADIUS,
                lambertian(tuple(albedo)),
            )

    world.add_sphere((4.0, 1.0, 0.0), 1.0, metal((0.8, 0.6, 0.2), fuzz=0.1))
    world.add_sphere((0.0, 1.0, 0.0), 1.0, dielectric(GLASS_IOR))
    world.add_sphere((-4.0, 1.0, 0.0), 1.0, metal((0.8, 0.8, 0.8), fuzz=0.2))
    return world


def random_world_camera(width: int, height: int) -> ThinLensCamera:
    """Camera at (3, 2, 3) looking at (0, 0, -1), focused on the target.

    Raises:
        ValueError: If width or height is not positive.
    """
    return _camera((3.0, 2.0, 3.0), (0.0, 0.0, -1.0), width, height)
