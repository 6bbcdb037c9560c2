"""Voxel island scene configuration.

This module provides a factory function for the demo scene: a small grassy
island of unit cubes with a lake cut into its top layer, a tree, and the sun
as the scene's light/sky body.

The island consists of:
- A grass ground layer (y = 1) spanning x in [-3, 8], z in [-3, 3]
- A second layer (y = 2) of grass around a lake of water cubes
- A tree at the origin: a bark trunk (y = 3..9) and a leaf crown (y = 6..9)
- The sun, a single cube starting at (0, 10, 0), flagged as the light

Each block type may optionally be textured from an image file.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> from src.voxelray.scene.voxel_island import create_voxel_island_scene
    >>> from src.voxelray.core.renderer import FrameRenderer
    >>>
    >>> scene, camera = create_voxel_island_scene()
    >>> renderer = FrameRenderer(320, 240)
    >>> renderer.render(camera, light_position=scene.get_light_center())
"""

import logging
from dataclasses import dataclass

from src.voxelray.camera.camera import Camera
from src.voxelray.materials.material import Material
from src.voxelray.materials.texture import Texture
from src.voxelray.scene.animation import SUN_ORBIT_RADIUS, SUN_ORBIT_SPEED, SunOrbit
from src.voxelray.scene.manager import SceneManager

logger = logging.getLogger(__name__)

# =============================================================================
# Voxel Island Parameters
# =============================================================================


@dataclass
class VoxelIslandParams:
    """Parameters for configuring the voxel island scene.

    Attributes:
        orbit_radius: Radius of the sun's orbit around the origin.
        orbit_speed: Angle the sun advances per frame, in radians.
        grass_texture: Optional image file for grass blocks.
        bark_texture: Optional image file for trunk blocks.
        water_texture: Optional image file for water blocks.
        sun_texture: Optional image file for the sun block.

    Example:
        >>> params = VoxelIslandParams(grass_texture="assets/grass.png")
        >>> scene, camera = create_voxel_island_scene(params)
    """

    orbit_radius: float = SUN_ORBIT_RADIUS
    orbit_speed: float = SUN_ORBIT_SPEED
    grass_texture: str | None = None
    bark_texture: str | None = None
    water_texture: str | None = None
    sun_texture: str | None = None

    def make_orbit(self) -> SunOrbit:
        """Create the sun orbit described by these parameters."""
        return SunOrbit(radius=self.orbit_radius, speed=self.orbit_speed)


# =============================================================================
# Voxel Island Constants
# =============================================================================

# Block colors (0-255)
GRASS_COLOR = (34.0, 139.0, 34.0)
BARK_COLOR = (139.0, 69.0, 19.0)
SUN_COLOR = (255.0, 255.0, 0.0)
WATER_COLOR = (0.0, 0.0, 255.0)

# Shared shading parameters of every block type
BLOCK_SPECULAR = 1.0
BLOCK_ALBEDO = (0.9, 0.1, 0.0, 0.0)

# Initial sun position; the orbit takes over once animation starts
SUN_START = (0.0, 10.0, 0.0)

# Island footprint (inclusive integer ranges)
ISLAND_X_RANGE = (-3, 8)
ISLAND_Z_RANGE = (-3, 3)

# Tree trunk height range, at x = z = 0
TRUNK_Y_RANGE = (3, 9)

# Default view: looking down -z at the tree
CAMERA_EYE = (0.0, 5.0, 7.0)
CAMERA_CENTER = (0.0, 5.0, 0.0)
CAMERA_UP = (0.0, 1.0, 0.0)


def _is_lake(x: int, z: int) -> bool:
    """Check whether a top-layer column belongs to the lake."""
    if 4 <= x <= 6:
        return abs(z) <= 2
    if x in (3, 7):
        return abs(z) <= 1
    return False


def _is_leaf(x: int, y: int, z: int) -> bool:
    """Check whether a crown position holds a leaf block."""
    if x == 0 and z == 0:
        return False  # trunk
    if y in (6, 7):
        return abs(x) <= 2 and abs(z) <= 2
    if y == 8:
        return abs(x) <= 1 and abs(z) <= 1
    if y == 9:
        return abs(x) + abs(z) == 1
    return False


def _make_material(
    color: tuple[float, float, float],
    texture_path: str | None,
    textures: dict[str, Texture],
) -> Material:
    texture = None
    if texture_path is not None:
        if texture_path not in textures:
            textures[texture_path] = Texture.from_file(texture_path)
        texture = textures[texture_path]
    return Material(
        diffuse=color,
        specular=BLOCK_SPECULAR,
        albedo=BLOCK_ALBEDO,
        texture=texture,
    )


# =============================================================================
# Voxel Island Factory
# =============================================================================


def create_voxel_island_scene(
    params: VoxelIslandParams | None = None,
) -> tuple[SceneManager, Camera]:
    """Create the voxel island scene.

    The sun is added first so that it is cube 0, followed by the ground
    layer, the lake layer, the trunk and the crown. Blocks are unit cubes
    centered on integer coordinates.

    Args:
        params: Optional VoxelIslandParams. If None, uses default
            VoxelIslandParams() (untextured blocks).

    Returns:
        A tuple of (SceneManager, Camera) where the camera looks at the tree
        from (0, 5, 7).

    Raises:
        FileNotFoundError: If a texture file does not exist.
        ValueError: If a texture is larger than the texture registry allows.
    """
    if params is None:
        params = VoxelIslandParams()

    scene = SceneManager()

    # =========================================================================
    # Materials
    # =========================================================================

    # Blocks naming the same image share one texture
    textures: dict[str, Texture] = {}
    sun_mat = scene.add_material(_make_material(SUN_COLOR, params.sun_texture, textures))
    grass_mat = scene.add_material(_make_material(GRASS_COLOR, params.grass_texture, textures))
    water_mat = scene.add_material(_make_material(WATER_COLOR, params.water_texture, textures))
    bark_mat = scene.add_material(_make_material(BARK_COLOR, params.bark_texture, textures))

    # =========================================================================
    # Sun
    # =========================================================================

    scene.add_cube(SUN_START, 1.0, sun_mat, is_light=True)

    # =========================================================================
    # Ground and lake layers
    # =========================================================================

    x_lo, x_hi = ISLAND_X_RANGE
    z_lo, z_hi = ISLAND_Z_RANGE
    for x in range(x_lo, x_hi + 1):
        for z in range(z_lo, z_hi + 1):
            scene.add_cube((x, 1.0, z), 1.0, grass_mat)

    for x in range(x_lo, x_hi + 1):
        for z in range(z_lo, z_hi + 1):
            material_id = water_mat if _is_lake(x, z) else grass_mat
            scene.add_cube((x, 2.0, z), 1.0, material_id)

    # =========================================================================
    # Tree
    # =========================================================================

    y_lo, y_hi = TRUNK_Y_RANGE
    for y in range(y_lo, y_hi + 1):
        scene.add_cube((0.0, y, 0.0), 1.0, bark_mat)

    for y in range(6, 10):
        for x in range(-2, 3):
            for z in range(-2, 3):
                if _is_leaf(x, y, z):
                    scene.add_cube((x, y, z), 1.0, grass_mat)

    logger.info(
        "Created voxel island: %d cubes, %d materials, %d textures",
        scene.get_cube_count(),
        scene.get_material_count(),
        scene.get_texture_count(),
    )

    camera = Camera(eye=CAMERA_EYE, center=CAMERA_CENTER, up=CAMERA_UP)
    return scene, camera
