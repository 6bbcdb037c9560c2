"""Frame rendering kernel and framebuffer.

This module holds the per-frame pixel loop: every pixel is mapped to a
camera-space direction, transformed to world space through the camera basis
and traced with cast_ray at depth 0. Pixels are independent, so the loop is
a single parallel Taichi kernel; the scene, camera and light position are
read-only for the duration of a frame.

Pixel (x, y) maps to

    sx = (2x / W - 1) * aspect * tan(fov / 2)
    sy = (1 - 2y / H) * tan(fov / 2)
    direction = normalize(sx, sy, -1)

with a fixed 60 degree vertical field of view. Row y = 0 is the top of the
image.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> from src.voxelray.core.render import render_frame, setup_render_target
    >>> from src.voxelray.camera.camera import Camera, setup_camera
    >>>
    >>> setup_camera(Camera(eye=(0, 5, 7), center=(0, 5, 0)))
    >>> setup_render_target(320, 240)
    >>> render_frame((0.0, 10.0, 0.0))
"""

import math

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.voxelray.camera.camera import FIELD_OF_VIEW, base_change, get_camera_eye
from src.voxelray.core.shading import cast_ray

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Render Target (Framebuffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 1024
MAX_IMAGE_HEIGHT = 1024

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Pixel colors on the 0-255 scale, indexed [x, y] with y = 0 at the top
_framebuffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())

# Light position for the frame being rendered
_light_position = ti.Vector.field(3, dtype=ti.f32, shape=())

# Output of the single-pixel kernel
_pixel_result = ti.Vector.field(3, dtype=ti.f32, shape=())

# tan(fov / 2), fixed for the lifetime of the renderer
_FOV_SCALE = math.tan(FIELD_OF_VIEW / 2.0)


def setup_render_target(width: int, height: int) -> None:
    """Initialize the framebuffer for a given image size.

    The buffer is preallocated to MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT; this
    sets the active region and clears it.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum
            supported size.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1
    clear_render_target()


def clear_render_target() -> None:
    """Clear the framebuffer to black."""
    _framebuffer.fill(0.0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions.

    Returns:
        Tuple of (width, height).
    """
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def set_light_position(light_position: tuple[float, float, float]) -> None:
    """Set the light/sky body position used by the next frame."""
    _light_position[None] = [light_position[0], light_position[1], light_position[2]]


def get_framebuffer() -> "ti.MatrixField":
    """Get the framebuffer field.

    Note: This returns the full preallocated buffer. Use get_image_dimensions()
    to determine the active region.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    return _framebuffer


# =============================================================================
# Primary Rays
# =============================================================================


@ti.func
def primary_direction(x: ti.i32, y: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    """Compute the world-space direction of the primary ray for a pixel.

    Args:
        x: Pixel column (0 = left).
        y: Pixel row (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        The normalized world-space direction.
    """
    w = ti.cast(width, ti.f32)
    h = ti.cast(height, ti.f32)
    aspect = w / h
    screen_x = 2.0 * ti.cast(x, ti.f32) / w - 1.0
    screen_y = -(2.0 * ti.cast(y, ti.f32) / h) + 1.0
    sx = screen_x * aspect * _FOV_SCALE
    sy = screen_y * _FOV_SCALE
    return base_change(tm.normalize(vec3(sx, sy, -1.0)))


@ti.func
def render_pixel_impl(x: ti.i32, y: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    """Trace the primary ray of one pixel."""
    direction = primary_direction(x, y, width, height)
    return cast_ray(get_camera_eye(), direction, _light_position[None], 0)


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_frame(width: ti.i32, height: ti.i32):
    """Render every pixel of the active region into the framebuffer."""
    for x, y in ti.ndrange(width, height):
        _framebuffer[x, y] = render_pixel_impl(x, y, width, height)


@ti.kernel
def _render_single_pixel(x: ti.i32, y: ti.i32, width: ti.i32, height: ti.i32):
    """Render one pixel into _pixel_result.

    The work sits inside a one-iteration loop so that the scene scans stay
    serial inner loops.
    """
    for _ in range(1):
        _pixel_result[None] = render_pixel_impl(x, y, width, height)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_frame(light_position: tuple[float, float, float]) -> None:
    """Render one frame with the light body at the given position.

    The camera must already be uploaded with setup_camera().

    Args:
        light_position: Position of the light/sky body for this frame.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    set_light_position(light_position)
    width, height = get_image_dimensions()
    _render_frame(width, height)


def render_pixel(x: int, y: int, light_position: tuple[float, float, float]) -> tuple[float, float, float]:
    """Render a single pixel.

    This is a Python-callable function for testing. For full frames use
    render_frame(), which processes all pixels in parallel.

    Args:
        x: Pixel column (0 = left).
        y: Pixel row (0 = top).
        light_position: Position of the light/sky body.

    Returns:
        Tuple of (R, G, B) on the 0-255 scale.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    set_light_position(light_position)
    width, height = get_image_dimensions()
    _render_single_pixel(x, y, width, height)
    color = _pixel_result[None]
    return (float(color[0]), float(color[1]), float(color[2]))


def get_image_numpy() -> npt.NDArray[np.uint8]:
    """Get the framebuffer as an 8-bit RGB image.

    Returns:
        NumPy array of shape (height, width, 3) with dtype uint8, row 0 at
        the top.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    full_image = _framebuffer.to_numpy()

    # Extract active region and transpose from (width, height, 3) to (height, width, 3)
    image = np.transpose(full_image[:width, :height, :], (1, 0, 2))

    return np.clip(np.rint(image), 0.0, 255.0).astype(np.uint8)
