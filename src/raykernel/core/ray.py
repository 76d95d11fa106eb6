"""Ray data structure and the reflection/refraction helpers built on it.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from raykernel.core.ray import Ray, point_at
    >>> from raykernel.core.vector import vec3
    >>> @ti.kernel
    ... def k() -> ti.f64:
    ...     ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, -1.0))
    ...     return point_at(ray, 5.0).z  # -5.0
"""

import taichi as ti

from raykernel.core.vector import dot, real, unit, vec3


@ti.dataclass
class Ray:
    """A parametric line origin + t * direction.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction of the ray. Not required to be unit length;
            code that needs a unit direction normalises it itself.
    """

    origin: vec3
    direction: vec3


@ti.func
def point_at(ray: Ray, t: real) -> vec3:
    """Compute the point origin + direction * t."""
    return ray.origin + ray.direction * t


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


@ti.func
def reflect(v: vec3, n: vec3) -> vec3:
    """Mirror v about the unit normal n: v - 2 * dot(v, n) * n."""
    return v - 2.0 * dot(v, n) * n


@ti.func
def refract(v: vec3, n: vec3, ni_over_nt: real):
    """Refract v through a surface with unit normal n using Snell's law.

    The normal must face the incoming side (dot(v, n) <= 0). The incident
    direction is normalised before bending.

    Args:
        v: The incident direction (any length).
        n: The unit surface normal on the incident side.
        ni_over_nt: Ratio of refractive indices n_incident / n_transmitted.

    Returns:
        A tuple (refracted, ok). ok is 0 on total internal reflection
        (discriminant <= 0), in which case refracted is the zero vector.
    """
    uv = unit(v)
    dt = dot(uv, n)
    discriminant = 1.0 - ni_over_nt * ni_over_nt * (1.0 - dt * dt)
    refracted = vec3(0.0, 0.0, 0.0)
    ok = 0
    if discriminant > 0.0:
        refracted = (uv - n * dt) * ni_over_nt - n * ti.sqrt(discriminant)
        ok = 1
    return refracted, ok


@ti.func
def schlick(cosine: real, ref_idx: real) -> real:
    """Schlick's approximation of the Fresnel reflectance.

    r0 = ((1 - n) / (1 + n))^2
    reflectance = r0 + (1 - r0) * (1 - cosine)^5
    """
    r0 = (1.0 - ref_idx) / (1.0 + ref_idx)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * (1.0 - cosine) ** 5
