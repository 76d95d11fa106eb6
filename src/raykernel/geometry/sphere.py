"""Sphere primitive and ray-sphere intersection.

The intersection solves
    |origin + t * direction - center|^2 = radius^2
which expands to the quadratic a*t^2 + 2*b*t + c = 0 with
    a = dot(direction, direction)
    b = dot(oc, direction)
    c = dot(oc, oc) - radius^2
    oc = origin - center

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from raykernel.geometry.sphere import Sphere, hit_sphere
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti

from raykernel.core.ray import Ray, point_at
from raykernel.core.vector import dot, real, vec3


@ti.dataclass
class Sphere:
    """A sphere bound to a material.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (positive).
        material_id: Index of the sphere's material in the material registry.
    """

    center: vec3
    radius: real
    material_id: ti.i32


@ti.dataclass
class HitRecord:
    """Record of a ray-surface intersection.

    Attributes:
        hit: 1 if the ray intersected a surface, 0 otherwise. The remaining
            fields are only meaningful when hit == 1.
        t: The ray parameter of the intersection.
        point: The world-space intersection point.
        normal: The outward unit normal at the intersection point. It is not
            flipped toward the ray; materials compare it with the incoming
            direction to tell entering from exiting rays.
        material_id: Material of the surface that was hit, -1 on a miss.
    """

    hit: ti.i32
    t: real
    point: vec3
    normal: vec3
    material_id: ti.i32


@ti.func
def miss_record() -> HitRecord:
    """A HitRecord describing no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        material_id=-1,
    )


@ti.func
def hit_sphere(ray: Ray, sphere: Sphere, t_min: real, t_max: real) -> HitRecord:
    """Intersect a ray with a sphere.

    The smaller root is tried first and accepted if t_min < t < t_max;
    otherwise the larger root is tried under the same bounds.

    Args:
        ray: The ray to test.
        sphere: The sphere to test against.
        t_min: Exclusive lower bound on the ray parameter.
        t_max: Exclusive upper bound on the ray parameter.

    Returns:
        A HitRecord; check its hit field.
    """
    oc = ray.origin - sphere.center
    a = dot(ray.direction, ray.direction)
    b = dot(oc, ray.direction)
    c = dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = b * b - a * c

    record = miss_record()

    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)

        t = (-b - sqrt_d) / a
        valid = (t > t_min) and (t < t_max)

        if not valid:
            t = (-b + sqrt_d) / a
            valid = (t > t_min) and (t < t_max)

        if valid:
            point = point_at(ray, t)
            record = HitRecord(
                hit=1,
                t=t,
                point=point,
                normal=(point - sphere.center) / sphere.radius,
                material_id=sphere.material_id,
            )

    return record


@ti.func
def make_sphere(center: vec3, radius: real, material_id: ti.i32) -> Sphere:
    """Create a sphere from center, radius and material id."""
    return Sphere(center=center, radius=radius, material_id=material_id)
