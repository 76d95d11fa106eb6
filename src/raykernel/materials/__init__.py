"""Materials module: scattering models for light bouncing off surfaces.

Components:
    lambertian: Ideal diffuse reflection around the surface normal
    metal: Specular reflection with optional fuzz
    dielectric: Glass-like refraction/reflection with Schlick's approximation
    material: Material variants, device registry and scatter dispatch

Each scattering model is a Taichi function mapping an incoming ray and a hit
record to a ScatterRecord (outgoing ray and attenuation, or absorption).
"""

from .dielectric import reflect_probability, scatter_dielectric
from .lambertian import scatter_lambertian
from .material import (
    MAX_MATERIALS,
    Material,
    MaterialType,
    add_material,
    clear_materials,
    dielectric,
    get_material_count,
    get_material_kind,
    lambertian,
    metal,
    scatter,
)
from .metal import scatter_metal
from .scatter_record import ScatterRecord

__all__ = [
    "ScatterRecord",
    "scatter_lambertian",
    "scatter_metal",
    "scatter_dielectric",
    "reflect_probability",
    "MaterialType",
    "Material",
    "lambertian",
    "metal",
    "dielectric",
    "MAX_MATERIALS",
    "add_material",
    "clear_materials",
    "get_material_count",
    "get_material_kind",
    "scatter",
]
