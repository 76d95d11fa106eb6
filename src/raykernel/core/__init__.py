"""Core rendering module.

Components:
    vector: Vector/color algebra shared by every other component
    sampling: Seeded per-pixel random streams and sphere/disk sampling
    ray: Ray data structure, reflection, refraction and Schlick's approximation
    integrator: Color integrator (path tracer) and the per-pixel render loop
"""

from .ray import Ray, make_ray, point_at, reflect, refract, schlick
from .sampling import (
    next_u32,
    random_in_unit_disk,
    random_in_unit_sphere,
    random_real,
    seed_stream,
    wang_hash,
)
from .vector import (
    Color,
    as_vector,
    cross,
    dot,
    length,
    mul_color,
    real,
    squared_length,
    unit,
    unit_vector,
    vec3,
)

# Note: integrator is NOT imported here; it allocates Taichi fields through its
# scene and camera imports and must be loaded after ti.init().
#
#   from raykernel.core.integrator import render

__all__ = [
    "real",
    "vec3",
    "Color",
    "dot",
    "cross",
    "length",
    "squared_length",
    "unit",
    "mul_color",
    "as_vector",
    "unit_vector",
    "wang_hash",
    "seed_stream",
    "next_u32",
    "random_real",
    "random_in_unit_sphere",
    "random_in_unit_disk",
    "Ray",
    "point_at",
    "make_ray",
    "reflect",
    "refract",
    "schlick",
]
