"""Pytest configuration for voxel renderer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts. Fast math stays off
    so slab divisions by zero produce infinities.
    """
    ti.init(arch=ti.cpu, random_seed=42, fast_math=False)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene data before and after each test.

    This ensures tests are isolated from each other.
    """
    # Import here to ensure Taichi is initialized first
    from src.voxelray.core.render import clear_render_target
    from src.voxelray.materials.material import clear_materials
    from src.voxelray.materials.texture import clear_textures
    from src.voxelray.scene.intersection import clear_scene

    def _clear_all():
        clear_scene()
        clear_materials()
        clear_textures()
        clear_render_target()

    _clear_all()

    yield

    _clear_all()


@pytest.fixture
def checker_png(tmp_path):
    """Write a 2x2 checker image and return its path.

    Top row: red, green. Bottom row: blue, white.
    """
    import numpy as np
    from PIL import Image as PILImage

    pixels = np.array(
        [
            [[255, 0, 0], [0, 255, 0]],
            [[0, 0, 255], [255, 255, 255]],
        ],
        dtype=np.uint8,
    )
    path = tmp_path / "checker.png"
    PILImage.fromarray(pixels).save(path)
    return path
