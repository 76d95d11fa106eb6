"""Unit tests for the Dielectric material.

Tests cover:
- Index of refraction 1.0 does not bend rays
- Snell's law when entering glass
- Total internal reflection when leaving glass at a steep angle
- Reflection probability from Schlick's approximation
- Colorless attenuation
- Host-side constructor validation
"""

import math

import numpy as np
import pytest
import taichi as ti


def _scatter(direction, normal, ior, count=1, seed=1):
    """Run scatter_dielectric count times; returns (directions, did_scatter, attenuations)."""
    from raykernel.core.ray import Ray
    from raykernel.core.sampling import seed_stream
    from raykernel.core.vector import vec3
    from raykernel.geometry.sphere import HitRecord
    from raykernel.materials.dielectric import scatter_dielectric

    directions = ti.Vector.field(3, dtype=ti.f64, shape=count)
    attenuations = ti.Vector.field(3, dtype=ti.f64, shape=count)
    scattered = ti.field(dtype=ti.i32, shape=count)

    @ti.kernel
    def test_kernel(d: vec3, nrm: vec3, eta: ti.f64, s: ti.u32):
        for i in range(count):
            rec = HitRecord(
                hit=1, t=1.0, point=vec3(0.0, 0.0, 0.0), normal=nrm, material_id=0
            )
            ray_in = Ray(origin=-d, direction=d)
            record = scatter_dielectric(eta, ray_in, rec, seed_stream(s, ti.u32(i)))
            directions[i] = record.direction
            attenuations[i] = record.attenuation
            scattered[i] = record.did_scatter

    test_kernel(vec3(*direction), vec3(*normal), ior, seed)
    return directions.to_numpy(), scattered.to_numpy(), attenuations.to_numpy()


def _probability(direction, normal, ior):
    from raykernel.core.vector import vec3
    from raykernel.materials.dielectric import reflect_probability

    result = ti.field(dtype=ti.f64, shape=())

    @ti.kernel
    def test_kernel(d: vec3, nrm: vec3, eta: ti.f64):
        result[None] = reflect_probability(eta, d, nrm)

    test_kernel(vec3(*direction), vec3(*normal), ior)
    return result[None]


def _is_collinear(a, b):
    a = a / np.linalg.norm(a)
    b = b / np.linalg.norm(b)
    return np.allclose(a, b)


class TestIndexOfOne:
    """Tests for a dielectric that matches the surrounding medium."""

    def test_normal_incidence_is_straight(self):
        """Test a head-on ray passes straight through with ior 1."""
        dirs, scattered, _ = _scatter((0.0, 0.0, -1.0), (0.0, 0.0, 1.0), 1.0, count=100)
        assert np.all(scattered == 1)
        for d in dirs:
            assert _is_collinear(d, np.array([0.0, 0.0, -1.0]))

    def test_oblique_refraction_is_straight(self):
        """Test oblique rays are refracted without bending.

        Schlick's reflectance is (1 - cos)^5 for ior 1, so a rare sample may
        reflect; every other sample continues along the incoming direction.
        """
        incoming = np.array([0.6, 0.0, -0.8])
        mirror = np.array([0.6, 0.0, 0.8])
        dirs, _, _ = _scatter(tuple(incoming), (0.0, 0.0, 1.0), 1.0, count=200)

        straight = sum(_is_collinear(d, incoming) for d in dirs)
        for d in dirs:
            assert _is_collinear(d, incoming) or _is_collinear(d, mirror)
        assert straight >= 190

    def test_probability_at_normal_incidence(self):
        assert _probability((0.0, 0.0, -1.0), (0.0, 0.0, 1.0), 1.0) == pytest.approx(0.0)


class TestGlass:
    """Tests for ior 1.5."""

    def test_entering_bends_toward_normal(self):
        """Test a refracted ray entering glass obeys Snell's law."""
        incoming = np.array([math.sin(math.radians(30.0)), 0.0, -math.cos(math.radians(30.0))])
        dirs, _, _ = _scatter(tuple(incoming), (0.0, 0.0, 1.0), 1.5, count=50)

        refracted = [d for d in dirs if d[2] < 0.0]
        assert refracted
        d = refracted[0] / np.linalg.norm(refracted[0])
        assert d[0] == pytest.approx(math.sin(math.radians(30.0)) / 1.5)

    def test_total_internal_reflection(self):
        """Test a steep exit from glass always reflects."""
        # Leaving the sphere 60 degrees from the outward normal
        direction = (math.sqrt(3.0), 1.0, 0.0)
        dirs, scattered, _ = _scatter(direction, (0.0, 1.0, 0.0), 1.5, count=50)
        assert np.all(scattered == 1)
        assert np.allclose(dirs, [math.sqrt(3.0), -1.0, 0.0])
        assert _probability(direction, (0.0, 1.0, 0.0), 1.5) == 1.0

    def test_probability_normal_incidence(self):
        """Test Schlick reflectance of glass at normal incidence is about 4%."""
        assert _probability((0.0, 0.0, -1.0), (0.0, 0.0, 1.0), 1.5) == pytest.approx(0.04)

    def test_reflection_frequency(self):
        """Test the fraction of reflected samples tracks the probability."""
        dirs, _, _ = _scatter((0.0, 0.0, -1.0), (0.0, 0.0, 1.0), 1.5, count=4000)
        reflected = np.mean(dirs[:, 2] > 0.0)
        assert 0.02 < reflected < 0.06

    def test_attenuation_is_white(self):
        _, _, att = _scatter((0.3, 0.0, -1.0), (0.0, 0.0, 1.0), 1.5, count=10)
        assert np.allclose(att, 1.0)


class TestDielectricConstructor:
    """Tests for the host-side dielectric constructor."""

    def test_default_ior(self):
        from raykernel.materials.material import dielectric

        assert dielectric().ior == 1.5

    @pytest.mark.parametrize("ior", [0.0, -1.5, math.inf, math.nan])
    def test_invalid_ior(self, ior):
        from raykernel.materials.material import dielectric

        with pytest.raises(ValueError, match="Index of refraction"):
            dielectric(ior)
