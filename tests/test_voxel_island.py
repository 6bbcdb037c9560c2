"""Tests for the voxel island scene.

Tests cover:
- Block counts per layer and material
- The sun as the single light body
- Shared and missing texture files
- Rendering the island by day and by night
"""

from collections import Counter

import numpy as np
import pytest

DAY_SKY = (68, 142, 228)


class TestIslandLayout:
    """Tests for the island's blocks."""

    def test_cube_and_material_counts(self):
        from src.voxelray.scene.voxel_island import create_voxel_island_scene

        scene, _ = create_voxel_island_scene()

        # sun + ground + lake layer + trunk + crown
        assert scene.get_cube_count() == 1 + 84 + 84 + 7 + 60
        assert scene.get_material_count() == 4
        assert scene.get_texture_count() == 0

    def test_sun_is_first_cube(self):
        from src.voxelray.scene.voxel_island import SUN_START, create_voxel_island_scene

        scene, _ = create_voxel_island_scene()
        assert scene.light_index == 0
        assert scene.get_light_center() == SUN_START
        assert sum(cube.is_light for cube in scene.cubes) == 1

    def test_block_materials(self):
        """Test water fills the lake and bark fills the trunk."""
        from src.voxelray.scene.voxel_island import (
            BARK_COLOR,
            WATER_COLOR,
            create_voxel_island_scene,
        )

        scene, _ = create_voxel_island_scene()
        counts = Counter(cube.material_id for cube in scene.cubes)

        by_color = {
            scene.get_material_info(mid).material.diffuse: count for mid, count in counts.items()
        }
        assert by_color[WATER_COLOR] == 21
        assert by_color[BARK_COLOR] == 7

        water_cubes = [c for c in scene.cubes if scene.get_material_info(c.material_id).material.diffuse == WATER_COLOR]
        assert all(c.center[1] == 2.0 for c in water_cubes)
        assert all(3.0 <= c.center[0] <= 7.0 for c in water_cubes)

    def test_no_duplicate_positions(self):
        from src.voxelray.scene.voxel_island import create_voxel_island_scene

        scene, _ = create_voxel_island_scene()
        centers = [cube.center for cube in scene.cubes]
        assert len(set(centers)) == len(centers)

    def test_trunk_column(self):
        from src.voxelray.scene.voxel_island import BARK_COLOR, create_voxel_island_scene

        scene, _ = create_voxel_island_scene()
        trunk = sorted(
            c.center[1]
            for c in scene.cubes
            if scene.get_material_info(c.material_id).material.diffuse == BARK_COLOR
        )
        assert trunk == [3.0, 4.0, 5.0, 6.0, 7.0, 8.0, 9.0]

    def test_camera_looks_at_tree(self):
        from src.voxelray.scene.voxel_island import create_voxel_island_scene

        _, camera = create_voxel_island_scene()
        np.testing.assert_allclose(camera.eye, [0.0, 5.0, 7.0])
        np.testing.assert_allclose(camera.forward, [0.0, 0.0, -1.0], atol=1e-12)


class TestIslandTextures:
    """Tests for textured blocks."""

    def test_shared_texture_file(self, checker_png):
        """Test blocks naming the same image share one texture."""
        from src.voxelray.scene.voxel_island import VoxelIslandParams, create_voxel_island_scene

        params = VoxelIslandParams(grass_texture=str(checker_png), bark_texture=str(checker_png))
        scene, _ = create_voxel_island_scene(params)

        assert scene.get_texture_count() == 1
        textured = [
            scene.get_material_info(mid)
            for mid in range(scene.get_material_count())
            if scene.get_material_info(mid).texture_id >= 0
        ]
        assert len(textured) == 2
        assert {info.texture_id for info in textured} == {0}

    def test_missing_texture_raises(self, tmp_path):
        from src.voxelray.scene.voxel_island import VoxelIslandParams, create_voxel_island_scene

        params = VoxelIslandParams(water_texture=str(tmp_path / "missing.png"))
        with pytest.raises(FileNotFoundError):
            create_voxel_island_scene(params)


class TestIslandParams:
    """Tests for VoxelIslandParams."""

    def test_make_orbit(self):
        from src.voxelray.scene.voxel_island import VoxelIslandParams

        orbit = VoxelIslandParams(orbit_radius=20.0, orbit_speed=0.1).make_orbit()
        assert orbit.radius == 20.0
        assert orbit.speed == 0.1
        assert orbit.angle == 0.0


class TestIslandRender:
    """End-to-end renders of the island."""

    def test_center_pixel_shows_trunk(self):
        from src.voxelray.core.renderer import FrameRenderer
        from src.voxelray.scene.voxel_island import create_voxel_island_scene

        scene, camera = create_voxel_island_scene()
        renderer = FrameRenderer(16, 12)
        renderer.render(camera, scene.get_light_center())
        image = renderer.get_image_numpy()

        assert tuple(image[6, 8]) != DAY_SKY
        # Bark is red-dominant
        assert image[6, 8, 0] > image[6, 8, 2]

    def test_night_frame_is_darker(self):
        from src.voxelray.core.renderer import FrameRenderer
        from src.voxelray.scene.voxel_island import create_voxel_island_scene

        scene, camera = create_voxel_island_scene()
        renderer = FrameRenderer(16, 12)

        renderer.render(camera, (0.0, 15.0, 0.0))
        day = renderer.get_image_numpy().astype(np.float64)
        renderer.render(camera, (0.0, -15.0, 0.0))
        night = renderer.get_image_numpy().astype(np.float64)

        assert night.mean() < day.mean()
        assert tuple(night[0, 0]) == (10.0, 10.0, 30.0)
