"""Dielectric (glass/water) material implementation.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for Fresnel reflectance
    - Total internal reflection when no refracted direction exists

Whether the ray enters or leaves the medium follows from the sign of
dot(direction, outward_normal). The material reflects with probability equal
to the Schlick reflectance (1 on total internal reflection) and refracts
otherwise, drawing one uniform number per scatter. The glass is colorless:
attenuation is always white.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from raykernel.materials.dielectric import scatter_dielectric
    >>> # Use within a Taichi kernel:
    >>> # record = scatter_dielectric(ior, ray_in, hit_record, rng_state)
"""

import taichi as ti

from raykernel.core.ray import Ray, reflect, refract, schlick
from raykernel.core.sampling import random_real
from raykernel.core.vector import Color, dot, length, real, vec3
from raykernel.geometry.sphere import HitRecord
from raykernel.materials.scatter_record import ScatterRecord


@ti.func
def _interface(ior: real, direction: vec3, normal: vec3):
    """Orient the interface relative to the incoming direction.

    Args:
        ior: Index of refraction of the material.
        direction: The incoming ray direction (any length).
        normal: The outward unit normal.

    Returns:
        A tuple (facing_normal, ni_over_nt, cosine) where facing_normal points
        to the incident side and cosine feeds Schlick's approximation.
    """
    d_dot_n = dot(direction, normal)
    facing_normal = normal
    ni_over_nt = 1.0 / ior
    cosine = -d_dot_n / length(direction)
    if d_dot_n > 0.0:
        # Leaving the medium
        facing_normal = -normal
        ni_over_nt = ior
        cosine = ior * d_dot_n / length(direction)
    return facing_normal, ni_over_nt, cosine


@ti.func
def reflect_probability(ior: real, direction: vec3, normal: vec3) -> real:
    """Probability that a dielectric scatter reflects instead of refracting.

    Args:
        ior: Index of refraction of the material.
        direction: The incoming ray direction.
        normal: The outward unit normal at the hit point.

    Returns:
        1.0 on total internal reflection, otherwise Schlick's reflectance.
    """
    facing_normal, ni_over_nt, cosine = _interface(ior, direction, normal)
    _, can_refract = refract(direction, facing_normal, ni_over_nt)
    probability = 1.0
    if can_refract == 1:
        probability = schlick(cosine, ior)
    return probability


@ti.func
def scatter_dielectric(
    ior: real,
    ray_in: Ray,
    rec: HitRecord,
    state: ti.u32,
) -> ScatterRecord:
    """Reflect or refract a ray at a dielectric boundary.

    Args:
        ior: Index of refraction of the material.
        ray_in: The incoming ray.
        rec: The hit record at the surface (outward normal).
        state: Random stream state.

    Returns:
        A ScatterRecord with did_scatter == 1 and white attenuation.
    """
    direction_in = ray_in.direction
    reflected = reflect(direction_in, rec.normal)

    facing_normal, ni_over_nt, cosine = _interface(ior, direction_in, rec.normal)
    refracted, can_refract = refract(direction_in, facing_normal, ni_over_nt)

    probability = 1.0
    if can_refract == 1:
        probability = schlick(cosine, ior)

    u, s = random_real(state)
    direction = refracted
    if u < probability:
        direction = reflected

    return ScatterRecord(
        did_scatter=1,
        attenuation=Color(1.0, 1.0, 1.0),
        origin=rec.point,
        direction=direction,
        rng_state=s,
    )
