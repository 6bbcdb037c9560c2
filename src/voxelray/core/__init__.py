"""Core rendering module.

Components:
    ray: Ray data structure and vector utilities
    color: 0-255 color helpers
    shading: Nearest hit, shadows, lighting and sky
    render: Framebuffer and the per-frame pixel kernel
    renderer: FrameRenderer wrapper with frame timing

All compute-intensive operations use Taichi kernels.
"""

from .color import COLOR_MAX, COLOR_MIN, WHITE, clamp_color, color_to_float
from .ray import (
    Ray,
    dot,
    length,
    make_ray,
    normalize,
    ray_at,
    reflect,
    vec3,
    wrap_unit,
)

# Note: shading, render and renderer are NOT imported here to avoid circular imports.
# Import directly from src.voxelray.core.render or src.voxelray.core.renderer when needed.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "normalize",
    "dot",
    "reflect",
    "wrap_unit",
    "COLOR_MIN",
    "COLOR_MAX",
    "WHITE",
    "clamp_color",
    "color_to_float",
]
