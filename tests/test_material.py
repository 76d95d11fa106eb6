"""Unit tests for the material variant, registry and scatter dispatch.

Tests cover:
- Host-side constructors and the Material dataclass
- Registry add/clear/count and capacity
- Dispatch to the matching scattering model
- Unknown material ids absorb the ray
"""

import numpy as np
import pytest
import taichi as ti


class TestMaterialVariants:
    """Tests for host-side material construction."""

    def test_lambertian(self):
        from raykernel.materials.material import MaterialType, lambertian

        material = lambertian((0.1, 0.2, 0.3))
        assert material.kind == MaterialType.LAMBERTIAN
        assert material.albedo == (0.1, 0.2, 0.3)

    def test_metal(self):
        from raykernel.materials.material import MaterialType, metal

        material = metal((0.8, 0.6, 0.2), fuzz=0.1)
        assert material.kind == MaterialType.METAL
        assert material.fuzz == 0.1

    def test_dielectric(self):
        from raykernel.materials.material import MaterialType, dielectric

        material = dielectric(2.4)
        assert material.kind == MaterialType.DIELECTRIC
        assert material.ior == 2.4

    def test_materials_are_hashable_values(self):
        from raykernel.materials.material import lambertian

        assert lambertian((0.5, 0.5, 0.5)) == lambertian((0.5, 0.5, 0.5))
        assert len({lambertian((0.5, 0.5, 0.5)), lambertian((0.5, 0.5, 0.5))}) == 1

    def test_albedo_wrong_length(self):
        from raykernel.materials.material import lambertian

        with pytest.raises(ValueError, match="3 components"):
            lambertian((0.5, 0.5))


class TestMaterialRegistry:
    """Tests for device-side material storage."""

    def test_add_and_count(self):
        from raykernel.materials.material import (
            add_material,
            dielectric,
            get_material_count,
            lambertian,
            metal,
        )

        assert add_material(lambertian((0.5, 0.5, 0.5))) == 0
        assert add_material(metal((0.8, 0.8, 0.8), 0.2)) == 1
        assert add_material(dielectric(1.5)) == 2
        assert get_material_count() == 3

    def test_clear(self):
        from raykernel.materials.material import (
            add_material,
            clear_materials,
            get_material_count,
            lambertian,
        )

        add_material(lambertian((0.5, 0.5, 0.5)))
        clear_materials()
        assert get_material_count() == 0

    def test_capacity_exceeded(self):
        from raykernel.materials.material import (
            MAX_MATERIALS,
            add_material,
            lambertian,
            num_materials,
        )

        num_materials[None] = MAX_MATERIALS
        with pytest.raises(RuntimeError, match="Maximum number of materials"):
            add_material(lambertian((0.5, 0.5, 0.5)))

    def test_get_material_kind(self):
        from raykernel.materials.material import (
            MaterialType,
            add_material,
            dielectric,
            get_material_kind,
            lambertian,
        )

        add_material(lambertian((0.5, 0.5, 0.5)))
        add_material(dielectric(1.5))
        kinds = ti.field(dtype=ti.i32, shape=4)

        @ti.kernel
        def test_kernel():
            kinds[0] = get_material_kind(0)
            kinds[1] = get_material_kind(1)
            kinds[2] = get_material_kind(2)
            kinds[3] = get_material_kind(-1)

        test_kernel()
        assert kinds[0] == int(MaterialType.LAMBERTIAN)
        assert kinds[1] == int(MaterialType.DIELECTRIC)
        assert kinds[2] == -1
        assert kinds[3] == -1


def _dispatch(material_id, direction=(0.0, -1.0, 0.0)):
    """Scatter a ray hitting an upward-facing surface with the given material id."""
    from raykernel.core.ray import Ray
    from raykernel.core.vector import vec3
    from raykernel.geometry.sphere import HitRecord
    from raykernel.materials.material import scatter

    result = ti.Vector.field(3, dtype=ti.f64, shape=2)
    scattered = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel(mid: ti.i32, d: vec3):
        rec = HitRecord(
            hit=1,
            t=1.0,
            point=vec3(0.0, 0.0, 0.0),
            normal=vec3(0.0, 1.0, 0.0),
            material_id=mid,
        )
        record = scatter(Ray(origin=-d, direction=d), rec, ti.u32(77))
        result[0] = record.direction
        result[1] = record.attenuation
        scattered[None] = record.did_scatter

    test_kernel(material_id, vec3(*direction))
    return result[0].to_numpy(), result[1].to_numpy(), scattered[None]


class TestScatterDispatch:
    """Tests for the unified scatter function."""

    def test_dispatch_metal(self):
        from raykernel.materials.material import add_material, lambertian, metal

        add_material(lambertian((0.5, 0.5, 0.5)))
        mirror = add_material(metal((0.9, 0.8, 0.7), fuzz=0.0))

        direction, attenuation, scattered = _dispatch(mirror, (1.0, -1.0, 0.0))
        assert scattered == 1
        assert np.allclose(direction, np.array([1.0, 1.0, 0.0]) / np.sqrt(2.0))
        assert np.allclose(attenuation, [0.9, 0.8, 0.7])

    def test_dispatch_lambertian(self):
        from raykernel.materials.material import add_material, lambertian

        diffuse = add_material(lambertian((0.2, 0.4, 0.6)))
        direction, attenuation, scattered = _dispatch(diffuse)
        assert scattered == 1
        assert np.sum((direction - [0.0, 1.0, 0.0]) ** 2) < 1.0
        assert np.allclose(attenuation, [0.2, 0.4, 0.6])

    def test_dispatch_dielectric(self):
        from raykernel.materials.material import add_material, dielectric

        glass = add_material(dielectric(1.0))
        direction, attenuation, scattered = _dispatch(glass)
        assert scattered == 1
        assert np.allclose(direction, [0.0, -1.0, 0.0])
        assert np.allclose(attenuation, 1.0)

    def test_unknown_material_absorbs(self):
        _, attenuation, scattered = _dispatch(5)
        assert scattered == 0
        assert np.allclose(attenuation, 0.0)
