"""Unit tests for the SceneManager.

Tests cover:
- Material and texture registration
- Cube addition with validation and the single light body
- Scene serialization (to_config, from_config, to_dict, from_dict)
- Scene clearing
"""

import numpy as np
import pytest


@pytest.fixture
def fresh_scene():
    """Create a fresh SceneManager for each test."""
    from src.voxelray.scene.manager import SceneManager

    scene = SceneManager()
    yield scene
    scene.clear()


class TestMaterialRegistration:
    """Tests for material and texture registration."""

    def test_add_material(self, fresh_scene):
        from src.voxelray.materials.material import Material

        grass = fresh_scene.add_material(Material(diffuse=(34, 139, 34)))
        water = fresh_scene.add_material(Material(diffuse=(0, 0, 255)))
        assert (grass, water) == (0, 1)
        assert fresh_scene.get_material_count() == 2
        assert fresh_scene.get_texture_count() == 0

        info = fresh_scene.get_material_info(water)
        assert info is not None
        assert info.material.diffuse == (0, 0, 255)
        assert info.texture_id == -1
        assert fresh_scene.get_material_info(5) is None

    def test_invalid_material_raises(self, fresh_scene):
        from src.voxelray.materials.material import Material

        with pytest.raises(ValueError):
            fresh_scene.add_material(Material(diffuse=(300, 0, 0)))
        assert fresh_scene.get_material_count() == 0

    def test_shared_texture_uploaded_once(self, fresh_scene, checker_png):
        """Test materials sharing a texture share one texture handle."""
        from src.voxelray.materials.material import Material
        from src.voxelray.materials.texture import Texture

        texture = Texture.from_file(checker_png)
        a = fresh_scene.add_material(Material(diffuse=(0, 0, 0), texture=texture))
        b = fresh_scene.add_material(Material(diffuse=(255, 255, 255), texture=texture))

        assert fresh_scene.get_texture_count() == 1
        assert fresh_scene.get_material_info(a).texture_id == 0
        assert fresh_scene.get_material_info(b).texture_id == 0

    def test_invalid_textured_material_uploads_nothing(self, fresh_scene, checker_png):
        """Test a rejected material does not leave its texture registered."""
        from src.voxelray.materials.material import Material
        from src.voxelray.materials.texture import Texture

        texture = Texture.from_file(checker_png)
        with pytest.raises(ValueError):
            fresh_scene.add_material(Material(diffuse=(0, 0, 0), specular=-1.0, texture=texture))

        assert fresh_scene.get_texture_count() == 0
        assert fresh_scene.get_material_count() == 0

        # The same texture still registers cleanly afterwards
        mat = fresh_scene.add_material(Material(diffuse=(0, 0, 0), texture=texture))
        assert fresh_scene.get_material_info(mat).texture_id == 0
        assert fresh_scene.get_texture_count() == 1

    def test_distinct_textures_get_distinct_handles(self, fresh_scene):
        from src.voxelray.materials.material import Material
        from src.voxelray.materials.texture import Texture

        t0 = Texture(pixels=np.zeros((2, 2, 3), dtype=np.uint8))
        t1 = Texture(pixels=np.zeros((2, 2, 3), dtype=np.uint8))
        fresh_scene.add_material(Material(diffuse=(0, 0, 0), texture=t0))
        fresh_scene.add_material(Material(diffuse=(0, 0, 0), texture=t1))
        assert fresh_scene.get_texture_count() == 2


class TestCubeAddition:
    """Tests for adding cubes."""

    def test_add_cube(self, fresh_scene):
        from src.voxelray.materials.material import Material

        mat = fresh_scene.add_material(Material(diffuse=(139, 69, 19)))
        for y in range(3, 6):
            fresh_scene.add_cube((0, y, 0), 1.0, mat)

        assert fresh_scene.get_cube_count() == 3
        assert fresh_scene.cubes[2].center == (0.0, 5.0, 0.0)
        assert not fresh_scene.has_light()
        assert fresh_scene.get_light_center() is None

    def test_add_cube_invalid_material(self, fresh_scene):
        with pytest.raises(ValueError, match="Invalid material_id"):
            fresh_scene.add_cube((0, 0, 0), 1.0, 0)

    def test_add_cube_invalid_size(self, fresh_scene):
        from src.voxelray.materials.material import Material

        mat = fresh_scene.add_material(Material(diffuse=(0, 0, 0)))
        with pytest.raises(ValueError):
            fresh_scene.add_cube((0, 0, 0), 0.0, mat)

    def test_single_light_body(self, fresh_scene):
        """Test only one cube may be flagged as the light."""
        from src.voxelray.materials.material import Material

        sun = fresh_scene.add_material(Material(diffuse=(255, 255, 0)))
        index = fresh_scene.add_cube((0, 10, 0), 1.0, sun, is_light=True)

        assert fresh_scene.has_light()
        assert fresh_scene.light_index == index
        assert fresh_scene.get_light_center() == (0.0, 10.0, 0.0)

        with pytest.raises(ValueError, match="light body"):
            fresh_scene.add_cube((5, 10, 0), 1.0, sun, is_light=True)
        assert fresh_scene.get_cube_count() == 1

    def test_capacity_information(self, fresh_scene):
        from src.voxelray.materials.material import MAX_MATERIALS
        from src.voxelray.materials.texture import MAX_TEXTURES
        from src.voxelray.scene.intersection import MAX_CUBES

        assert fresh_scene.get_max_cubes() == MAX_CUBES
        assert fresh_scene.get_max_materials() == MAX_MATERIALS
        assert fresh_scene.get_max_textures() == MAX_TEXTURES


class TestSceneClearing:
    """Tests for clearing scene data."""

    def test_clear(self, fresh_scene, checker_png):
        from src.voxelray.materials.material import Material
        from src.voxelray.materials.texture import Texture

        texture = Texture.from_file(checker_png)
        mat = fresh_scene.add_material(Material(diffuse=(0, 0, 0), texture=texture))
        fresh_scene.add_cube((0, 0, 0), 1.0, mat, is_light=True)

        fresh_scene.clear()

        assert fresh_scene.get_material_count() == 0
        assert fresh_scene.get_texture_count() == 0
        assert fresh_scene.get_cube_count() == 0
        assert not fresh_scene.has_light()


class TestSceneSerialization:
    """Tests for scene serialization."""

    def test_to_config(self, fresh_scene, checker_png):
        """Test exporting scene to config."""
        from src.voxelray.materials.material import Material
        from src.voxelray.materials.texture import Texture

        texture = Texture.from_file(checker_png)
        grass = fresh_scene.add_material(Material(diffuse=(34, 139, 34), texture=texture))
        sun = fresh_scene.add_material(Material(diffuse=(255, 255, 0), specular=4.0))
        fresh_scene.add_cube((0, 10, 0), 1.0, sun, is_light=True)
        fresh_scene.add_cube((1, 1, 1), 1.0, grass)

        config = fresh_scene.to_config()

        assert len(config.materials) == 2
        assert config.materials[0]["texture"] == str(checker_png)
        assert config.materials[1]["texture"] is None
        assert config.materials[1]["specular"] == 4.0
        assert len(config.cubes) == 2
        assert config.cubes[0]["is_light"] is True
        assert config.cubes[1]["center"] == [1.0, 1.0, 1.0]

    def test_from_config(self, fresh_scene, checker_png):
        """Test loading scene from config, sharing textures by path."""
        from src.voxelray.scene.manager import SceneConfig

        config = SceneConfig(
            materials=[
                {"diffuse": [34, 139, 34], "texture": str(checker_png)},
                {"diffuse": [0, 0, 255], "texture": str(checker_png)},
                {"diffuse": [255, 255, 0]},
            ],
            cubes=[
                {"center": [0.0, 10.0, 0.0], "size": 1.0, "material_id": 2, "is_light": True},
                {"center": [0.0, 1.0, 0.0], "size": 1.0, "material_id": 0},
                {"center": [4.0, 2.0, 0.0], "material_id": 1},
            ],
        )

        fresh_scene.from_config(config)

        assert fresh_scene.get_material_count() == 3
        assert fresh_scene.get_texture_count() == 1
        assert fresh_scene.get_cube_count() == 3
        assert fresh_scene.light_index == 0
        assert fresh_scene.get_material_info(2).material.albedo == (0.9, 0.1, 0.0, 0.0)

    def test_from_config_missing_diffuse(self, fresh_scene):
        from src.voxelray.scene.manager import SceneConfig

        with pytest.raises(ValueError, match="diffuse"):
            fresh_scene.from_config(SceneConfig(materials=[{"specular": 1.0}]))

    def test_from_config_missing_texture_file(self, fresh_scene, tmp_path):
        from src.voxelray.scene.manager import SceneConfig

        config = SceneConfig(materials=[{"diffuse": [0, 0, 0], "texture": str(tmp_path / "nope.png")}])
        with pytest.raises(FileNotFoundError):
            fresh_scene.from_config(config)

    def test_to_dict_from_dict(self, fresh_scene):
        """Test round-trip serialization via dict."""
        from src.voxelray.materials.material import Material
        from src.voxelray.scene.manager import SceneManager

        grass = fresh_scene.add_material(Material(diffuse=(34, 139, 34)))
        sun = fresh_scene.add_material(Material(diffuse=(255, 255, 0)))
        fresh_scene.add_cube((0, 10, 0), 1.0, sun, is_light=True)
        fresh_scene.add_cube((2, 1, -3), 1.0, grass)

        data = fresh_scene.to_dict()

        scene2 = SceneManager()
        scene2.from_dict(data)

        assert scene2.get_material_count() == 2
        assert scene2.get_cube_count() == 2
        assert scene2.get_light_center() == (0.0, 10.0, 0.0)
        assert scene2.cubes[1].center == (2.0, 1.0, -3.0)
        assert scene2.to_dict() == data
