"""Host-side scene aggregate coordinating spheres and materials.

A ``World`` is the collection of intersectable objects a render call sees: a
list of spheres, each bound to a material. It is built on the host, then
``upload()`` writes it into the device fields used by ``hit_world`` and
``scatter``. Identical materials share one registry entry.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from raykernel.materials.material import dielectric, lambertian, metal
    >>> from raykernel.scene.world import World
    >>> world = World()
    >>> world.add_sphere((0.0, -100.5, -1.0), 100.0, lambertian((0.5, 0.5, 0.5)))
    >>> world.add_sphere((0.0, 0.0, -1.0), 0.5, metal((0.8, 0.6, 0.2), fuzz=0.1))
    >>> world.add_sphere((1.0, 0.0, -1.0), 0.5, dielectric(1.5))
    >>> world.upload()
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from raykernel.core.vector import as_vector
from raykernel.materials.material import (
    MAX_MATERIALS,
    Material,
    MaterialType,
    add_material,
    clear_materials,
    dielectric,
    lambertian,
    metal,
)
from raykernel.scene.intersection import MAX_SPHERES, add_sphere, clear_scene

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SphereInfo:
    """A sphere in the world.

    Attributes:
        center: The center of the sphere.
        radius: The radius of the sphere (positive).
        material: The material bound to the sphere.
    """

    center: tuple[float, float, float]
    radius: float
    material: Material


@dataclass
class SceneConfig:
    """Plain-data description of a world, for serialization.

    Attributes:
        spheres: One dict per sphere with keys center, radius and material.
            The material dict has a "type" key ("lambertian", "metal" or
            "dielectric") plus the parameters of that type.
    """

    spheres: list[dict[str, Any]] = field(default_factory=list)


def _material_to_dict(material: Material) -> dict[str, Any]:
    if material.kind == MaterialType.LAMBERTIAN:
        return {"type": "lambertian", "albedo": list(material.albedo)}
    if material.kind == MaterialType.METAL:
        return {"type": "metal", "albedo": list(material.albedo), "fuzz": material.fuzz}
    return {"type": "dielectric", "ior": material.ior}


def _material_from_dict(data: dict[str, Any]) -> Material:
    kind = data.get("type")
    if kind == "lambertian":
        return lambertian(tuple(data["albedo"]))
    if kind == "metal":
        return metal(tuple(data["albedo"]), data.get("fuzz", 0.0))
    if kind == "dielectric":
        return dielectric(data.get("ior", 1.5))
    raise ValueError(f"Unknown material type: {kind!r}")


class World:
    """Aggregate of spheres that a render call intersects.

    Insertion order does not affect which hit is reported: the device query
    always returns the globally closest intersection.

    Attributes:
        spheres: The spheres added so far, in insertion order.
    """

    def __init__(self) -> None:
        """Initialize an empty world."""
        self.spheres: list[SphereInfo] = []

    def __len__(self) -> int:
        return len(self.spheres)

    def __iter__(self) -> Iterator[SphereInfo]:
        return iter(self.spheres)

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material: Material,
    ) -> int:
        """Add a sphere bound to a material.

        Args:
            center: The center of the sphere.
            radius: The radius of the sphere.
            material: The material of the sphere.

        Returns:
            The index of the sphere in this world.

        Raises:
            ValueError: If the center is not finite or the radius is not a
                positive finite number.
            TypeError: If material is not a Material.
            RuntimeError: If the world already holds the maximum number of spheres.
        """
        center_vec = as_vector(center, "Sphere center")
        if not math.isfinite(radius) or radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive and finite, got {radius}")
        if not isinstance(material, Material):
            raise TypeError(f"Expected a Material, got {type(material).__name__}")
        if len(self.spheres) >= MAX_SPHERES:
            raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")

        info = SphereInfo(
            center=(float(center_vec[0]), float(center_vec[1]), float(center_vec[2])),
            radius=float(radius),
            material=material,
        )
        self.spheres.append(info)
        return len(self.spheres) - 1

    def materials(self) -> list[Material]:
        """Distinct materials used by the world, in first-use order."""
        seen: dict[Material, None] = {}
        for sphere in self.spheres:
            seen.setdefault(sphere.material, None)
        return list(seen)

    def clear(self) -> None:
        """Remove every sphere."""
        self.spheres.clear()

    def upload(self) -> None:
        """Write the world into the device scene and material fields.

        Replaces whatever scene was previously uploaded.

        Raises:
            RuntimeError: If the world needs more materials than the device
                registry holds.
        """
        materials = self.materials()
        if len(materials) > MAX_MATERIALS:
            raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

        clear_scene()
        clear_materials()

        material_ids = {material: add_material(material) for material in materials}
        for sphere in self.spheres:
            add_sphere(sphere.center, sphere.radius, material_ids[sphere.material])

        logger.debug(
            "Uploaded world: %d spheres, %d materials", len(self.spheres), len(materials)
        )

    def to_config(self) -> SceneConfig:
        """Export the world as plain data."""
        return SceneConfig(
            spheres=[
                {
                    "center": list(sphere.center),
                    "radius": sphere.radius,
                    "material": _material_to_dict(sphere.material),
                }
                for sphere in self.spheres
            ]
        )

    @classmethod
    def from_config(cls, config: SceneConfig) -> World:
        """Build a world from plain data produced by ``to_config``.

        Raises:
            ValueError: If a sphere or material description is invalid.
        """
        world = cls()
        for entry in config.spheres:
            world.add_sphere(
                tuple(entry["center"]),
                entry["radius"],
                _material_from_dict(entry["material"]),
            )
        return world

    def __repr__(self) -> str:
        return f"World(spheres={len(self.spheres)}, materials={len(self.materials())})"
