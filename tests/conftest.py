"""Pytest configuration for raykernel tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts. Double precision
    matches the field types used by the tracer.
    """
    ti.init(arch=ti.cpu, default_fp=ti.f64, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear device scene and material storage before and after each test."""
    # Import here to ensure Taichi is initialized
    from raykernel.materials.material import clear_materials
    from raykernel.scene.intersection import clear_scene

    clear_scene()
    clear_materials()

    yield

    clear_scene()
    clear_materials()
