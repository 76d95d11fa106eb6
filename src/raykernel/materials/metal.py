"""Metal (specular reflective) material with fuzz.

The reflection formula is:
    R = I - 2(I . N)N

applied to the normalised incident direction. For fuzzy metals the
reflected direction is perturbed by a random point in the unit sphere
scaled by the fuzz factor. Rays whose perturbed direction does not leave
the surface (dot(R, N) <= 0) are absorbed.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from raykernel.materials.metal import scatter_metal
    >>> # Use within a Taichi kernel:
    >>> # record = scatter_metal(albedo, fuzz, ray_in, hit_record, rng_state)
"""

import taichi as ti

from raykernel.core.ray import Ray, reflect
from raykernel.core.sampling import random_in_unit_sphere
from raykernel.core.vector import Color, dot, real, unit
from raykernel.geometry.sphere import HitRecord
from raykernel.materials.scatter_record import ScatterRecord


@ti.func
def scatter_metal(
    albedo: Color,
    fuzz: real,
    ray_in: Ray,
    rec: HitRecord,
    state: ti.u32,
) -> ScatterRecord:
    """Reflect a ray off a metal surface.

    Args:
        albedo: The reflective color tint.
        fuzz: Fuzziness of the reflection, clamped to [0, 1].
            0 = perfect mirror.
        ray_in: The incoming ray.
        rec: The hit record at the surface.
        state: Random stream state.

    Returns:
        A ScatterRecord. did_scatter is 0 when the fuzzed direction points
        into the surface.
    """
    f = ti.min(ti.max(fuzz, 0.0), 1.0)
    reflected = reflect(unit(ray_in.direction), rec.normal)

    offset, s = random_in_unit_sphere(state)
    direction = reflected + f * offset

    did_scatter = 0
    if dot(direction, rec.normal) > 0.0:
        did_scatter = 1

    return ScatterRecord(
        did_scatter=did_scatter,
        attenuation=albedo,
        origin=rec.point,
        direction=direction,
        rng_state=s,
    )
