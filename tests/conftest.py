"""Pytest configuration for spherecast tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene storage, frame buffer and shading constants around each test.

    This ensures tests are isolated from each other.
    """
    # Import here so that fields are declared after ti.init()
    from spherecast.core.shading import ShadingConfig, configure_shading, reset_frame_buffer
    from spherecast.scene.storage import clear_scene, set_light

    def _clear_all():
        clear_scene()
        set_light((0.0, 0.0, 0.0), 1.0, (255.0, 255.0, 255.0))
        reset_frame_buffer()
        configure_shading(ShadingConfig())

    _clear_all()

    yield

    _clear_all()
