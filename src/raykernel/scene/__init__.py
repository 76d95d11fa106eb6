"""Scene module: device scene storage, the host World and ready-made scenes.

Components:
    intersection: Sphere storage in Taichi fields and the closest-hit query
    world: Host-side World aggregate that uploads spheres and materials
    presets: The three-sphere regression world and the random world

Scene data is kept in structure-of-arrays Taichi fields so the render kernel
can loop over spheres without indirection.
"""

from .intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
    hit_world,
)
from .presets import (
    random_world,
    random_world_camera,
    three_sphere_camera,
    three_sphere_world,
)
from .world import SceneConfig, SphereInfo, World

__all__ = [
    # Intersection module
    "MAX_SPHERES",
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "hit_world",
    # World
    "World",
    "SphereInfo",
    "SceneConfig",
    # Presets
    "three_sphere_world",
    "three_sphere_camera",
    "random_world",
    "random_world_camera",
]
