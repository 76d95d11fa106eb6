"""Lambertian (ideal diffuse) material.

The outgoing direction is the surface normal plus a random point inside the
unit sphere, which biases scattering toward the normal and approximates a
cosine-weighted diffuse lobe. A Lambertian surface never absorbs the ray;
its albedo tints every bounce.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from raykernel.materials.lambertian import scatter_lambertian
    >>> # Use within a Taichi kernel:
    >>> # record = scatter_lambertian(albedo, ray_in, hit_record, rng_state)
"""

import taichi as ti

from raykernel.core.ray import Ray
from raykernel.core.sampling import random_in_unit_sphere
from raykernel.core.vector import Color
from raykernel.geometry.sphere import HitRecord
from raykernel.materials.scatter_record import ScatterRecord


@ti.func
def scatter_lambertian(
    albedo: Color,
    ray_in: Ray,
    rec: HitRecord,
    state: ti.u32,
) -> ScatterRecord:
    """Scatter a ray diffusely off a Lambertian surface.

    Args:
        albedo: The diffuse reflectance color.
        ray_in: The incoming ray (unused, kept for a uniform scatter signature).
        rec: The hit record at the surface.
        state: Random stream state.

    Returns:
        A ScatterRecord with did_scatter == 1 and attenuation == albedo.
    """
    offset, s = random_in_unit_sphere(state)
    target = rec.point + rec.normal + offset
    return ScatterRecord(
        did_scatter=1,
        attenuation=albedo,
        origin=rec.point,
        direction=target - rec.point,
        rng_state=s,
    )
