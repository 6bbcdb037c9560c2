"""Frame renderer for real-time voxel rendering.

This module wraps the frame kernel in a small stateful object that owns the
image size, uploads the camera before each frame, and tracks frame count
and timing for interactive use.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> from src.voxelray.core.renderer import FrameRenderer
    >>> from src.voxelray.scene.voxel_island import create_voxel_island_scene
    >>>
    >>> scene, camera = create_voxel_island_scene()
    >>> renderer = FrameRenderer(320, 240)
    >>> renderer.render(camera, light_position=(0.0, 10.0, 0.0))
    >>> image = renderer.get_image_numpy()
"""

import logging
import time

import numpy as np
import numpy.typing as npt

from src.voxelray.camera.camera import Camera, setup_camera
from src.voxelray.core.render import (
    get_image_numpy,
    render_frame,
    setup_render_target,
)

logger = logging.getLogger(__name__)


class FrameRenderer:
    """Renders whole frames of the current scene.

    The renderer delegates to the module-level framebuffer (a Taichi field);
    creating a second renderer resizes that shared buffer.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        frame_count: Number of frames rendered so far.
        last_frame_time: Wall-clock seconds spent on the latest frame.
    """

    def __init__(self, width: int, height: int) -> None:
        """Initialize the renderer.

        Args:
            width: Image width in pixels (max 1024).
            height: Image height in pixels (max 1024).

        Raises:
            ValueError: If dimensions are invalid or exceed the maximum size.
        """
        self._width = width
        self._height = height
        self.frame_count = 0
        self.last_frame_time = 0.0
        setup_render_target(width, height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    def resize(self, width: int, height: int) -> None:
        """Resize the render target.

        Args:
            width: New image width in pixels.
            height: New image height in pixels.

        Raises:
            ValueError: If dimensions are invalid or exceed the maximum size.
        """
        setup_render_target(width, height)
        self._width = width
        self._height = height

    def render(
        self,
        camera: Camera,
        light_position: tuple[float, float, float],
        out: npt.NDArray[np.uint8] | None = None,
    ) -> None:
        """Render one frame.

        Args:
            camera: The camera for this frame; uploaded before rendering.
            light_position: Position of the light/sky body for this frame.
            out: Optional caller-owned array of shape (height, width, 3),
                dtype uint8, that receives a copy of the frame.

        Raises:
            ValueError: If out has the wrong shape.
        """
        if out is not None and out.shape != (self._height, self._width, 3):
            raise ValueError(
                f"Output shape {out.shape} doesn't match expected ({self._height}, {self._width}, 3)"
            )

        start = time.perf_counter()
        setup_camera(camera)
        render_frame(light_position)
        if out is not None:
            out[...] = get_image_numpy()
        self.last_frame_time = time.perf_counter() - start
        self.frame_count += 1

        logger.debug("Frame %d rendered in %.3fs", self.frame_count, self.last_frame_time)

    def get_image_numpy(self) -> npt.NDArray[np.uint8]:
        """Get the latest frame as an 8-bit RGB NumPy array.

        Returns:
            NumPy array of shape (height, width, 3) with dtype uint8.
        """
        return get_image_numpy()

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"FrameRenderer(width={self.width}, height={self.height}, "
            f"frames={self.frame_count})"
        )
