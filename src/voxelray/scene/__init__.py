"""Scene module for cube storage, scene building and animation.

Components:
    intersection: Cube storage in Taichi fields and nearest-hit search
    manager: Scene manager coordinating cubes, materials and textures
    animation: Orbit of the light/sky body
    voxel_island: The demo island scene

Scene data is organized for efficient kernel access:
    - Structure-of-Arrays layout for cube data
    - Material handles shared by many cubes
    - One flagged light/sky body whose position is supplied per frame
"""

from .animation import SUN_ORBIT_RADIUS, SUN_ORBIT_SPEED, SunOrbit
from .intersection import (
    MAX_CUBES,
    Intersect,
    add_cube,
    clear_scene,
    get_cube_count,
    intersect_scene,
)
from .manager import CubeInfo, MaterialInfo, SceneConfig, SceneManager
from .voxel_island import VoxelIslandParams, create_voxel_island_scene

__all__ = [
    # Intersection
    "Intersect",
    "MAX_CUBES",
    "add_cube",
    "clear_scene",
    "get_cube_count",
    "intersect_scene",
    # Manager
    "SceneManager",
    "SceneConfig",
    "MaterialInfo",
    "CubeInfo",
    # Animation
    "SunOrbit",
    "SUN_ORBIT_RADIUS",
    "SUN_ORBIT_SPEED",
    # Demo scene
    "VoxelIslandParams",
    "create_voxel_island_scene",
]
