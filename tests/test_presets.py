"""Unit tests for the ready-made scenes.

Tests cover:
- Three-sphere regression world layout and camera
- Random world reproducibility and placement rules
"""

import math

import numpy as np
import pytest


class TestThreeSphereWorld:
    """Tests for the regression world."""

    def test_layout(self):
        from raykernel.materials.material import MaterialType
        from raykernel.scene.presets import three_sphere_world

        world = three_sphere_world()
        spheres = world.spheres
        assert len(spheres) == 3

        ground, metal, glass = spheres
        assert ground.center == (0.0, -100.5, -1.0)
        assert ground.radius == 100.0
        assert ground.material.kind == MaterialType.LAMBERTIAN
        assert metal.material.kind == MaterialType.METAL
        assert metal.material.fuzz == pytest.approx(0.2)
        assert glass.center == (1.5, 0.0, -1.0)
        assert glass.material.ior == pytest.approx(1.5)

    def test_camera(self):
        from raykernel.scene.presets import three_sphere_camera

        camera = three_sphere_camera(200, 100)
        assert camera.lookfrom == (1.0, 1.0, 1.0)
        assert camera.aspect_ratio == pytest.approx(2.0)
        assert camera.aperture == pytest.approx(0.01)
        assert camera.focus_dist == pytest.approx(math.sqrt(6.0))

    def test_camera_invalid_size(self):
        from raykernel.scene.presets import three_sphere_camera

        with pytest.raises(ValueError):
            three_sphere_camera(0, 100)


class TestRandomWorld:
    """Tests for the random world."""

    def test_reproducible(self):
        from raykernel.scene.presets import random_world

        assert random_world(5).spheres == random_world(5).spheres
        assert random_world(5).spheres != random_world(6).spheres

    def test_layout(self):
        from raykernel.materials.material import MaterialType
        from raykernel.scene.presets import random_world

        spheres = random_world(1).spheres
        ground, grid, big = spheres[0], spheres[1:-3], spheres[-3:]

        assert ground.radius == 1000.0
        assert 0 < len(grid) <= 22 * 22
        assert [s.center for s in big] == [(4.0, 1.0, 0.0), (0.0, 1.0, 0.0), (-4.0, 1.0, 0.0)]
        assert [s.material.kind for s in big] == [
            MaterialType.METAL,
            MaterialType.DIELECTRIC,
            MaterialType.METAL,
        ]

        for sphere in grid:
            center = np.array(sphere.center)
            assert sphere.radius == pytest.approx(0.2)
            assert center[1] == pytest.approx(0.2)
            assert np.linalg.norm(center - [4.0, 0.2, 0.0]) > 0.9
            assert sphere.material.kind == MaterialType.LAMBERTIAN
            assert all(0.0 <= c <= 1.0 for c in sphere.material.albedo)

    def test_fits_device_storage(self):
        from raykernel.materials.material import MAX_MATERIALS
        from raykernel.scene.intersection import MAX_SPHERES, get_sphere_count
        from raykernel.scene.presets import random_world

        world = random_world(1)
        assert len(world) <= MAX_SPHERES
        assert len(world.materials()) <= MAX_MATERIALS
        world.upload()
        assert get_sphere_count() == len(world)

    def test_camera(self):
        from raykernel.scene.presets import random_world_camera

        camera = random_world_camera(256, 256)
        assert camera.lookfrom == (3.0, 2.0, 3.0)
        assert camera.lookat == (0.0, 0.0, -1.0)
        assert camera.vfov == 90.0
        assert camera.focus_dist == pytest.approx(math.sqrt(29.0))
