"""Axis-aligned cube primitive with slab-method ray intersection.

This module provides the Cube dataclass and the intersection routine used for
every voxel in the scene. A cube is described by its center and a uniform edge
length; its bounds are center +/- size / 2 along each axis.

The intersection uses the slab method: each axis contributes an entry/exit
interval and the three intervals are folded together in x, y, z order. Zero
direction components are not special-cased. The divisions produce +/-inf,
which orders correctly in the min/max folds as long as kernels are compiled
without fast math.

Besides the hit distance, the routine recovers the outward face normal and a
per-face UV coordinate so that textures tile across neighbouring voxels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> from src.voxelray.geometry.cube import Cube, hit_cube
    >>> cube = Cube(center=ti.math.vec3(0, 0, 0), size=1.0)
    >>> # Use hit_cube(ray, cube) within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from src.voxelray.core.ray import Ray, make_ray, ray_at, wrap_unit

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3
vec2 = tm.vec2

# Distance below which a hit point is considered to lie on a face plane
NORMAL_EPSILON = 1e-4


@ti.dataclass
class Cube:
    """An axis-aligned cube.

    Attributes:
        center: The center point of the cube (vec3).
        size: The uniform edge length (positive float).
    """

    center: vec3
    size: ti.f32


@ti.dataclass
class CubeHit:
    """Record of a ray-cube intersection.

    Attributes:
        hit: Whether the ray entered the cube (1 if hit, 0 if miss).
        distance: Parametric distance to the entry point. Only valid if hit == 1.
        point: The entry point on the cube surface. Only valid if hit == 1.
        normal: Axis-aligned outward normal of the entered face.
            Only valid if hit == 1.
        uv: Face-local texture coordinate in [0, 1) x [0, 1).
            Only valid if hit == 1.
    """

    hit: ti.i32
    distance: ti.f32
    point: vec3
    normal: vec3
    uv: vec2


@ti.func
def make_cube(center: vec3, size: ti.f32) -> Cube:
    """Create a cube from center and edge length."""
    return Cube(center=center, size=size)


@ti.func
def cube_bounds(center: vec3, size: ti.f32):
    """Compute the minimum and maximum corners of a cube.

    Returns:
        A tuple (min_bound, max_bound).
    """
    half = vec3(size * 0.5, size * 0.5, size * 0.5)
    return center - half, center + half


@ti.func
def cube_face_normal(point: vec3, min_bound: vec3, max_bound: vec3) -> vec3:
    """Pick the outward normal of the face a point lies on.

    Faces are tested in the fixed order -x, +x, -y, +y, -z, +z and the first
    plane within NORMAL_EPSILON of the point wins, so points on edges and
    corners resolve to the earliest face in that order.

    Args:
        point: A point on (or very near) the cube surface.
        min_bound: Minimum corner of the cube.
        max_bound: Maximum corner of the cube.

    Returns:
        The unit normal of the matched face, or a zero vector if the point is
        not on any face.
    """
    normal = vec3(0.0, 0.0, 0.0)
    if ti.abs(point.x - min_bound.x) < NORMAL_EPSILON:
        normal = vec3(-1.0, 0.0, 0.0)
    elif ti.abs(point.x - max_bound.x) < NORMAL_EPSILON:
        normal = vec3(1.0, 0.0, 0.0)
    elif ti.abs(point.y - min_bound.y) < NORMAL_EPSILON:
        normal = vec3(0.0, -1.0, 0.0)
    elif ti.abs(point.y - max_bound.y) < NORMAL_EPSILON:
        normal = vec3(0.0, 1.0, 0.0)
    elif ti.abs(point.z - min_bound.z) < NORMAL_EPSILON:
        normal = vec3(0.0, 0.0, -1.0)
    elif ti.abs(point.z - max_bound.z) < NORMAL_EPSILON:
        normal = vec3(0.0, 0.0, 1.0)
    return normal


@ti.func
def cube_uv(point: vec3, normal: vec3, min_bound: vec3, size: ti.f32) -> vec2:
    """Compute the face-local UV coordinate of a surface point.

    The point is expressed relative to the minimum corner and the two axes
    orthogonal to the dominant normal component are kept: (z, y) for x faces,
    (x, z) for y faces and (x, y) for z faces. Each is divided by the edge
    length and wrapped into [0, 1).

    Args:
        point: A point on the cube surface.
        normal: The face normal at that point.
        min_bound: Minimum corner of the cube.
        size: Cube edge length.

    Returns:
        The (u, v) coordinate, each component in [0, 1).
    """
    local = point - min_bound
    u = local.x
    v = local.y
    if ti.abs(normal.x) > 0.9:
        u = local.z
        v = local.y
    elif ti.abs(normal.y) > 0.9:
        u = local.x
        v = local.z
    return vec2(wrap_unit(u / size), wrap_unit(v / size))


@ti.func
def _make_miss_hit() -> CubeHit:
    """Create a CubeHit indicating no intersection."""
    return CubeHit(
        hit=0,
        distance=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        uv=vec2(0.0, 0.0),
    )


@ti.func
def hit_cube(ray: Ray, cube: Cube) -> CubeHit:
    """Intersect a ray with an axis-aligned cube using the slab method.

    For each axis the entry/exit distances t0 = (min - o) / d and
    t1 = (max - o) / d are ordered so t0 <= t1 and intersected with the
    running interval [t_min, t_max], folding x, then y, then z. The ray misses
    when the interval becomes empty at any stage, or when the final entry
    distance is negative (the cube is behind the origin or contains it).

    Args:
        ray: The ray to test. Its direction should be normalized; zero
            components are allowed and yield infinite slab bounds.
        cube: The cube to test against.

    Returns:
        A CubeHit with the entry point, outward face normal, distance and
        face UV, or a miss record.
    """
    result = _make_miss_hit()
    min_bound, max_bound = cube_bounds(cube.center, cube.size)

    t_lo = (min_bound - ray.origin) / ray.direction
    t_hi = (max_bound - ray.origin) / ray.direction
    t_near = ti.min(t_lo, t_hi)
    t_far = ti.max(t_lo, t_hi)

    # x axis seeds the interval
    t_min = t_near.x
    t_max = t_far.x
    valid = 1

    # y axis
    if t_min > t_far.y or t_near.y > t_max:
        valid = 0
    if valid == 1:
        t_min = ti.max(t_min, t_near.y)
        t_max = ti.min(t_max, t_far.y)

    # z axis
    if valid == 1:
        if t_min > t_far.z or t_near.z > t_max:
            valid = 0
    if valid == 1:
        t_min = ti.max(t_min, t_near.z)
        t_max = ti.min(t_max, t_far.z)

    # NaN components fail every comparison above; reject them here as well
    if valid == 1 and t_min >= 0.0 and t_min <= t_max:
        point = ray_at(ray, t_min)
        normal = cube_face_normal(point, min_bound, max_bound)
        result = CubeHit(
            hit=1,
            distance=t_min,
            point=point,
            normal=normal,
            uv=cube_uv(point, normal, min_bound, cube.size),
        )

    return result


@ti.func
def ray_intersect_cube(
    ray_origin: vec3,
    ray_direction: vec3,
    center: vec3,
    size: ti.f32,
) -> CubeHit:
    """Intersect a ray given by origin and direction with a cube.

    Same as hit_cube, for callers holding plain vectors.
    """
    return hit_cube(make_ray(ray_origin, ray_direction), make_cube(center, size))
