"""Scene-level cube storage and nearest-hit search.

The scene stores cubes in Taichi fields (Structure of Arrays) together with a
material handle and a flag marking the single light/sky body. Intersection is
a brute-force linear scan that keeps the nearest hit by strict distance
comparison, so the first cube found wins an exact tie.

The light body's stored center is never rewritten per frame. Every query
takes the current light position as an argument and the flagged cube is
intersected there instead.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> from src.voxelray.scene.intersection import (
    ...     Intersect, add_cube, intersect_scene, clear_scene
    ... )
    >>> clear_scene()
    >>> add_cube(vec3(0, 0, 0), 1.0, material_id=0)
    >>> # Use intersect_scene within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from src.voxelray.core.ray import Ray, make_ray
from src.voxelray.geometry.cube import Cube, CubeHit, hit_cube, make_cube

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3
vec2 = tm.vec2

# Initial nearest distance for the scan
ZBUFFER_FAR = 1e30


@ti.dataclass
class Intersect:
    """Record of a ray-scene intersection with material information.

    Attributes:
        is_intersecting: Whether the ray hit any cube (1 if hit, 0 if miss).
        distance: Distance along the ray to the hit. 0 for a miss.
        point: The hit point. Only valid if is_intersecting == 1.
        normal: Outward face normal at the hit point.
            Only valid if is_intersecting == 1.
        material_id: Material handle of the hit cube, -1 for a miss.
        uv: Face-local texture coordinate. Only valid if has_uv == 1.
        has_uv: Whether uv is meaningful for this hit.
        cube_index: Index of the hit cube, -1 for a miss.
    """

    is_intersecting: ti.i32
    distance: ti.f32
    point: vec3
    normal: vec3
    material_id: ti.i32
    uv: vec2
    has_uv: ti.i32
    cube_index: ti.i32


# Maximum number of cubes supported in the scene
MAX_CUBES = 4096

# Cube storage: Structure of Arrays layout
cube_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_CUBES)
cube_sizes = ti.field(dtype=ti.f32, shape=MAX_CUBES)
cube_material_ids = ti.field(dtype=ti.i32, shape=MAX_CUBES)
# 1 for the light/sky body, 0 otherwise
cube_is_light = ti.field(dtype=ti.i32, shape=MAX_CUBES)
num_cubes = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all cubes from the scene.

    Resets the cube count to zero. The actual field data is not cleared but
    will be overwritten when new cubes are added.
    """
    num_cubes[None] = 0


def add_cube(center: vec3, size: float, material_id: int = 0, is_light: bool = False) -> int:
    """Add a cube to the scene.

    Args:
        center: The center point of the cube. For the light body this is
            only its initial position; queries use the per-frame position.
        size: The edge length of the cube (should be positive).
        material_id: The material handle to associate with this cube.
        is_light: Whether this cube is the light/sky body.

    Returns:
        The index of the added cube.

    Raises:
        RuntimeError: If the maximum number of cubes is exceeded.
    """
    idx = num_cubes[None]
    if idx >= MAX_CUBES:
        raise RuntimeError(f"Maximum number of cubes ({MAX_CUBES}) exceeded")
    cube_centers[idx] = center
    cube_sizes[idx] = size
    cube_material_ids[idx] = material_id
    cube_is_light[idx] = 1 if is_light else 0
    num_cubes[None] = idx + 1
    return idx


def get_cube_count() -> int:
    """Get the number of cubes in the scene."""
    return int(num_cubes[None])


@ti.func
def _cube_hit_to_intersect(rec: CubeHit, material_id: ti.i32, cube_index: ti.i32) -> Intersect:
    """Convert a CubeHit to an Intersect carrying the cube's material."""
    return Intersect(
        is_intersecting=rec.hit,
        distance=rec.distance,
        point=rec.point,
        normal=rec.normal,
        material_id=material_id,
        uv=rec.uv,
        has_uv=1,
        cube_index=cube_index,
    )


@ti.func
def _make_miss_record() -> Intersect:
    """Create the no-hit Intersect.

    Returns:
        An Intersect with is_intersecting=0, distance=0 and material_id=-1.
    """
    return Intersect(
        is_intersecting=0,
        distance=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        material_id=-1,
        uv=vec2(0.0, 0.0),
        has_uv=0,
        cube_index=-1,
    )


@ti.func
def get_cube_center(cube_index: ti.i32, light_position: vec3) -> vec3:
    """Get the current center of a cube.

    Args:
        cube_index: Index of the cube in the scene.
        light_position: Current position of the light/sky body.

    Returns:
        light_position for the light body, the stored center otherwise.
    """
    center = cube_centers[cube_index]
    if cube_is_light[cube_index] == 1:
        center = light_position
    return center


@ti.func
def get_scene_cube(cube_index: ti.i32, light_position: vec3) -> Cube:
    """Get a scene cube placed where it is for the current frame."""
    return make_cube(get_cube_center(cube_index, light_position), cube_sizes[cube_index])


@ti.func
def intersect_cube_at(cube_index: ti.i32, ray: Ray, light_position: vec3) -> Intersect:
    """Intersect a ray with one scene cube.

    Args:
        cube_index: Index of the cube in the scene.
        ray: The ray to test, with a normalized direction.
        light_position: Current position of the light/sky body.

    Returns:
        An Intersect for that cube, or the miss record.
    """
    rec = hit_cube(ray, get_scene_cube(cube_index, light_position))
    result = _make_miss_record()
    if rec.hit == 1:
        result = _cube_hit_to_intersect(rec, cube_material_ids[cube_index], cube_index)
    return result


@ti.func
def intersect_scene(
    ray_origin: vec3,
    ray_direction: vec3,
    light_position: vec3,
) -> Intersect:
    """Find the nearest cube hit by a ray.

    Scans every cube in insertion order and keeps the hit with the smallest
    distance. The comparison is strict, so on an exact tie the earlier cube
    is kept.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The normalized direction of the ray.
        light_position: Current position of the light/sky body.

    Returns:
        The nearest Intersect, or the miss record if nothing was hit.
    """
    ray = make_ray(ray_origin, ray_direction)
    zbuffer = ZBUFFER_FAR
    result = _make_miss_record()

    n_cubes = num_cubes[None]
    for i in range(n_cubes):
        rec = intersect_cube_at(i, ray, light_position)
        if rec.is_intersecting == 1 and rec.distance < zbuffer:
            zbuffer = rec.distance
            result = rec

    return result
