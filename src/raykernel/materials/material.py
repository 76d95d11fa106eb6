"""Material variants, device-side registry and scatter dispatch.

A material is a tagged variant over {Lambertian, Metal, Dielectric}. On the
host it is a frozen ``Material`` dataclass; on the device the registry keeps
one structure-of-arrays entry per material id, and ``scatter`` dispatches on
the stored ``MaterialType`` to the matching scattering model.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from raykernel.materials.material import add_material, lambertian, metal
    >>> ground = add_material(lambertian((0.5, 0.5, 0.5)))
    >>> mirror = add_material(metal((0.8, 0.8, 0.8), fuzz=0.0))
    >>> # Use scatter(ray_in, hit_record, rng_state) within a Taichi kernel
"""

import math
from dataclasses import dataclass
from enum import IntEnum

import taichi as ti

from raykernel.core.ray import Ray
from raykernel.core.vector import Color, real, vec3
from raykernel.geometry.sphere import HitRecord
from raykernel.materials.dielectric import scatter_dielectric
from raykernel.materials.lambertian import scatter_lambertian
from raykernel.materials.metal import scatter_metal
from raykernel.materials.scatter_record import ScatterRecord


class MaterialType(IntEnum):
    """Enumeration of supported material types, used for scatter dispatch."""

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2


@dataclass(frozen=True)
class Material:
    """A material variant and its parameters.

    Only the parameters relevant to ``kind`` are used: albedo for Lambertian,
    albedo and fuzz for Metal, ior for Dielectric. Build instances with
    ``lambertian``, ``metal`` or ``dielectric``.

    Attributes:
        kind: The material variant.
        albedo: Reflectance color (R, G, B), usually in [0, 1]. Components
            above 1 amplify light and are clamped only at 8-bit conversion.
        fuzz: Metal fuzziness in [0, 1].
        ior: Dielectric index of refraction.
    """

    kind: MaterialType
    albedo: tuple[float, float, float] = (1.0, 1.0, 1.0)
    fuzz: float = 0.0
    ior: float = 1.0


def _check_albedo(albedo: tuple[float, float, float]) -> tuple[float, float, float]:
    """Validate an albedo color and return it as a tuple of floats."""
    if len(albedo) != 3:
        raise ValueError(f"Albedo must have 3 components, got {len(albedo)}")
    for i, component in enumerate(albedo):
        if not math.isfinite(component):
            raise ValueError(f"Albedo component {i} must be finite, got {component}")
    return (float(albedo[0]), float(albedo[1]), float(albedo[2]))


def lambertian(albedo: tuple[float, float, float]) -> Material:
    """Create a Lambertian (diffuse) material.

    Raises:
        ValueError: If the albedo is not three finite numbers.
    """
    return Material(kind=MaterialType.LAMBERTIAN, albedo=_check_albedo(albedo))


def metal(albedo: tuple[float, float, float], fuzz: float = 0.0) -> Material:
    """Create a metal material.

    Args:
        albedo: The reflective color as (R, G, B).
        fuzz: Fuzziness, clamped into [0, 1]. 0 = perfect mirror.

    Raises:
        ValueError: If the albedo is not three finite numbers or fuzz is NaN.
    """
    if math.isnan(fuzz):
        raise ValueError("Fuzz must be a number, got NaN")
    return Material(
        kind=MaterialType.METAL,
        albedo=_check_albedo(albedo),
        fuzz=min(max(float(fuzz), 0.0), 1.0),
    )


def dielectric(ior: float = 1.5) -> Material:
    """Create a dielectric (glass-like) material.

    Args:
        ior: Index of refraction. Common values: air 1.0, water 1.33,
            glass 1.5, diamond 2.4.

    Raises:
        ValueError: If ior is not a positive finite number.
    """
    if not math.isfinite(ior) or ior <= 0.0:
        raise ValueError(f"Index of refraction must be positive and finite, got {ior}")
    return Material(kind=MaterialType.DIELECTRIC, ior=float(ior))


# =============================================================================
# Material Field Storage
# =============================================================================

# Maximum number of materials in the scene
MAX_MATERIALS = 1024

material_kinds = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
material_albedos = ti.Vector.field(3, dtype=real, shape=MAX_MATERIALS)
material_fuzz = ti.field(dtype=real, shape=MAX_MATERIALS)
material_iors = ti.field(dtype=real, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_materials() -> None:
    """Clear all materials.

    Resets the material count to zero. Existing data in the fields is
    overwritten when new materials are added.
    """
    num_materials[None] = 0


def add_material(material: Material) -> int:
    """Add a material to the device registry.

    Args:
        material: The material to store.

    Returns:
        The material id to reference from spheres.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_kinds[idx] = int(material.kind)
    material_albedos[idx] = list(material.albedo)
    material_fuzz[idx] = material.fuzz
    material_iors[idx] = material.ior
    num_materials[None] = idx + 1
    return idx


def get_material_count() -> int:
    """Get the number of materials in the registry."""
    return int(num_materials[None])


@ti.func
def get_material_kind(material_id: ti.i32) -> ti.i32:
    """Get the MaterialType of a material id, or -1 for an unknown id."""
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_kinds[material_id]
    return result


@ti.func
def scatter(ray_in: Ray, rec: HitRecord, state: ti.u32) -> ScatterRecord:
    """Scatter a ray according to the material of the surface it hit.

    Unknown material ids absorb the ray.

    Args:
        ray_in: The incoming ray.
        rec: The hit record; its material_id selects the material.
        state: Random stream state.

    Returns:
        The ScatterRecord produced by the material's scattering model.
    """
    material_id = rec.material_id
    kind = get_material_kind(material_id)

    result = ScatterRecord(
        did_scatter=0,
        attenuation=Color(0.0, 0.0, 0.0),
        origin=rec.point,
        direction=vec3(0.0, 0.0, 0.0),
        rng_state=state,
    )

    if kind == int(MaterialType.LAMBERTIAN):
        result = scatter_lambertian(material_albedos[material_id], ray_in, rec, state)
    elif kind == int(MaterialType.METAL):
        result = scatter_metal(
            material_albedos[material_id], material_fuzz[material_id], ray_in, rec, state
        )
    elif kind == int(MaterialType.DIELECTRIC):
        result = scatter_dielectric(material_iors[material_id], ray_in, rec, state)

    return result
