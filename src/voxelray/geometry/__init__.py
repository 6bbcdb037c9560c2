"""Geometry module for shape primitives.

Components:
    cube: Axis-aligned cube with slab-method intersection, face normals and UVs
"""

from .cube import (
    NORMAL_EPSILON,
    Cube,
    CubeHit,
    cube_bounds,
    cube_face_normal,
    cube_uv,
    hit_cube,
    make_cube,
    ray_intersect_cube,
)

__all__ = [
    "Cube",
    "CubeHit",
    "NORMAL_EPSILON",
    "make_cube",
    "cube_bounds",
    "cube_face_normal",
    "cube_uv",
    "hit_cube",
    "ray_intersect_cube",
]
