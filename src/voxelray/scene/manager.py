"""Scene manager coordinating cubes, materials and textures.

This module provides the high-level scene building API. It registers
textures and materials into their Taichi-side registries, places cubes with
material handles, enforces the single light/sky body, and keeps Python-side
records so a scene can be exported to and rebuilt from a plain configuration.

The SceneManager maintains:
- Texture handles, deduplicated by texture identity
- Material handles shared by any number of cubes
- The index of the light/sky body cube, if any
- Scene serialization/configuration support

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> from src.voxelray.materials.material import Material
    >>> from src.voxelray.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> grass = scene.add_material(Material(diffuse=(34, 139, 34)))
    >>> scene.add_cube(center=(0, 1, 0), size=1.0, material_id=grass)
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import taichi.math as tm

from src.voxelray.materials.material import (
    MAX_MATERIALS,
    Material,
    add_material,
    clear_materials,
    get_material_count,
)
from src.voxelray.materials.texture import (
    MAX_TEXTURES,
    Texture,
    add_texture,
    clear_textures,
    get_texture_count,
)
from src.voxelray.scene.intersection import (
    MAX_CUBES,
    add_cube,
    clear_scene,
    get_cube_count,
)

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass
class MaterialInfo:
    """Information about a registered material.

    Attributes:
        material_id: The material handle.
        material: The material parameters as provided during creation.
        texture_id: Handle of the material's texture, or -1.
    """

    material_id: int
    material: Material
    texture_id: int


@dataclass
class CubeInfo:
    """Information about a cube in the scene.

    Attributes:
        cube_index: The index in the cube storage arrays.
        center: The center of the cube (initial position for the light body).
        size: The edge length of the cube.
        material_id: The material handle assigned to the cube.
        is_light: Whether the cube is the light/sky body.
    """

    cube_index: int
    center: tuple[float, float, float]
    size: float
    material_id: int
    is_light: bool


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        materials: List of material configurations.
        cubes: List of cube configurations.
    """

    materials: list[dict[str, Any]] = field(default_factory=list)
    cubes: list[dict[str, Any]] = field(default_factory=list)


def _as_vec3_tuple(values: Any) -> tuple[float, float, float]:
    return (float(values[0]), float(values[1]), float(values[2]))


class SceneManager:
    """Scene builder for voxel scenes.

    Attributes:
        materials: List of MaterialInfo for all registered materials.
        cubes: List of CubeInfo for all cubes in the scene.
        light_index: Index of the light/sky body cube, or None.

    Example:
        >>> scene = SceneManager()
        >>> bark = scene.add_material(Material(diffuse=(139, 69, 19)))
        >>> sun = scene.add_material(Material(diffuse=(255, 255, 0)))
        >>> for y in range(3, 6):
        ...     scene.add_cube((0, y, 0), 1.0, bark)
        >>> scene.add_cube((0, 10, 0), 1.0, sun, is_light=True)
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.materials: list[MaterialInfo] = []
        self.cubes: list[CubeInfo] = []
        self.light_index: int | None = None
        self._texture_ids: dict[int, int] = {}
        self._textures: list[Texture] = []
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        clear_scene()
        clear_materials()
        clear_textures()
        self.materials.clear()
        self.cubes.clear()
        self.light_index = None
        self._texture_ids.clear()
        self._textures.clear()

    def clear(self) -> None:
        """Clear the entire scene (cubes, materials and textures)."""
        self._clear_all()

    # =========================================================================
    # Texture and Material Management
    # =========================================================================

    def add_texture(self, texture: Texture) -> int:
        """Register a texture, reusing the handle if it was added before.

        Args:
            texture: The decoded texture.

        Returns:
            The texture handle.

        Raises:
            ValueError: If the texture is too large for the registry.
            RuntimeError: If the maximum number of textures is exceeded.
        """
        key = id(texture)
        if key in self._texture_ids:
            return self._texture_ids[key]

        texture_id = add_texture(texture)
        self._texture_ids[key] = texture_id
        # Keep a reference so id() stays unique for the scene's lifetime
        self._textures.append(texture)
        logger.debug("Registered texture %d (%s)", texture_id, texture.path)
        return texture_id

    def add_material(self, material: Material) -> int:
        """Register a material, uploading its texture if it has one.

        Args:
            material: The material parameters.

        Returns:
            The material handle.

        Raises:
            ValueError: If the material parameters are out of range.
            RuntimeError: If the maximum number of materials or textures is
                exceeded.
        """
        material.validate()

        texture_id = -1
        if material.texture is not None:
            texture_id = self.add_texture(material.texture)

        material_id = add_material(material, texture_id)
        self.materials.append(
            MaterialInfo(material_id=material_id, material=material, texture_id=texture_id)
        )
        return material_id

    def get_material_count(self) -> int:
        """Get the total number of materials in the scene."""
        return get_material_count()

    def get_texture_count(self) -> int:
        """Get the total number of textures in the scene."""
        return get_texture_count()

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Get information about a material by handle.

        Args:
            material_id: The material handle.

        Returns:
            MaterialInfo for the material, or None if not found.
        """
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    # =========================================================================
    # Cube Management
    # =========================================================================

    def add_cube(
        self,
        center: tuple[float, float, float],
        size: float,
        material_id: int,
        is_light: bool = False,
    ) -> int:
        """Add a cube to the scene.

        Args:
            center: The center point of the cube as (x, y, z).
            size: The edge length of the cube (positive).
            material_id: The material handle to assign to the cube.
            is_light: Whether the cube is the light/sky body. At most one
                cube may be flagged.

        Returns:
            The index of the added cube.

        Raises:
            ValueError: If material_id is invalid, size is not positive, or a
                light body already exists.
            RuntimeError: If the maximum number of cubes is exceeded.
        """
        if material_id < 0 or material_id >= get_material_count():
            raise ValueError(f"Invalid material_id: {material_id}")
        if size <= 0.0:
            raise ValueError(f"Cube size must be positive, got {size}")
        if is_light and self.light_index is not None:
            raise ValueError(f"Scene already has a light body (cube {self.light_index})")

        center_tuple = _as_vec3_tuple(center)
        cube_index = add_cube(vec3(*center_tuple), size, material_id, is_light)

        self.cubes.append(
            CubeInfo(
                cube_index=cube_index,
                center=center_tuple,
                size=size,
                material_id=material_id,
                is_light=is_light,
            )
        )
        if is_light:
            self.light_index = cube_index

        return cube_index

    def get_cube_count(self) -> int:
        """Get the number of cubes in the scene."""
        return get_cube_count()

    def has_light(self) -> bool:
        """Check whether a light/sky body has been placed."""
        return self.light_index is not None

    def get_light_center(self) -> tuple[float, float, float] | None:
        """Get the initial center of the light/sky body.

        Returns:
            The light body's stored center, or None if there is no light.
        """
        if self.light_index is None:
            return None
        return self.cubes[self.light_index].center

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object.

        Textures are exported by file path; a texture created from an
        in-memory array has no path and is exported as None.

        Returns:
            A SceneConfig containing all materials and cubes.
        """
        config = SceneConfig()

        for info in self.materials:
            mat = info.material
            config.materials.append(
                {
                    "diffuse": list(mat.diffuse),
                    "specular": mat.specular,
                    "albedo": list(mat.albedo),
                    "refractive_index": mat.refractive_index,
                    "texture": mat.texture.path if mat.texture is not None else None,
                }
            )

        for cube in self.cubes:
            config.cubes.append(
                {
                    "center": list(cube.center),
                    "size": cube.size,
                    "material_id": cube.material_id,
                    "is_light": cube.is_light,
                }
            )

        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Clears the current scene and loads the configuration. Texture paths
        are decoded once each, so materials naming the same file share one
        texture.

        Args:
            config: The scene configuration to load.

        Raises:
            ValueError: If the configuration contains invalid data.
            FileNotFoundError: If a texture file does not exist.
        """
        self.clear()

        textures_by_path: dict[str, Texture] = {}
        for mat_config in config.materials:
            if "diffuse" not in mat_config:
                raise ValueError("Material configuration is missing 'diffuse'")

            texture = None
            texture_path = mat_config.get("texture")
            if texture_path is not None:
                if texture_path not in textures_by_path:
                    textures_by_path[texture_path] = Texture.from_file(texture_path)
                texture = textures_by_path[texture_path]

            albedo_list = mat_config.get("albedo", [0.9, 0.1, 0.0, 0.0])
            material = Material(
                diffuse=_as_vec3_tuple(mat_config["diffuse"]),
                specular=float(mat_config.get("specular", 1.0)),
                albedo=(
                    float(albedo_list[0]),
                    float(albedo_list[1]),
                    float(albedo_list[2]),
                    float(albedo_list[3]),
                ),
                refractive_index=float(mat_config.get("refractive_index", 1.0)),
                texture=texture,
            )
            self.add_material(material)

        for cube_config in config.cubes:
            self.add_cube(
                _as_vec3_tuple(cube_config.get("center", [0, 0, 0])),
                float(cube_config.get("size", 1.0)),
                int(cube_config.get("material_id", 0)),
                is_light=bool(cube_config.get("is_light", False)),
            )

        logger.info(
            "Loaded scene: %d materials, %d cubes", len(self.materials), len(self.cubes)
        )

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization).

        Returns:
            A dictionary representation of the scene.
        """
        config = self.to_config()
        return {
            "materials": config.materials,
            "cubes": config.cubes,
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary.

        Args:
            data: Dictionary with 'materials' and 'cubes' keys.
        """
        config = SceneConfig(
            materials=data.get("materials", []),
            cubes=data.get("cubes", []),
        )
        self.from_config(config)

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_cubes() -> int:
        """Get the maximum number of cubes supported."""
        return MAX_CUBES

    @staticmethod
    def get_max_materials() -> int:
        """Get the maximum number of materials supported."""
        return MAX_MATERIALS

    @staticmethod
    def get_max_textures() -> int:
        """Get the maximum number of textures supported."""
        return MAX_TEXTURES
