"""Interactive preview window using Taichi GGUI.

This module provides the real-time loop for the voxel renderer: every frame
the sun advances along its orbit, held keys move or orbit the camera, the
frame is rendered and shown on a ti.ui.Window canvas.

Controls:
    - W / S: move forward / backward
    - A / D: move left / right
    - Arrow keys: orbit the camera around its target
    - P: export the current frame to a timestamped PNG
    - Escape: quit

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from src.voxelray.preview.interactive import InteractivePreview
    >>>
    >>> preview = InteractivePreview(640, 480)
    >>> preview.run()  # Blocks until the window is closed
"""

import logging
import os
from datetime import datetime
from typing import TYPE_CHECKING, Any

import taichi as ti

from src.voxelray.camera.camera import Camera, MoveDirection

if TYPE_CHECKING:
    from src.voxelray.core.renderer import FrameRenderer
    from src.voxelray.scene.animation import SunOrbit
    from src.voxelray.scene.manager import SceneManager
    from src.voxelray.scene.voxel_island import VoxelIslandParams

logger = logging.getLogger(__name__)

# Orbit angle applied per frame while an arrow key is held
ORBIT_STEP = 0.05

# Held keys translating the camera
MOVE_KEYS: dict[str, MoveDirection] = {
    "w": "forward",
    "s": "backward",
    "a": "left",
    "d": "right",
}

# Held keys orbiting the camera, as (delta_yaw, delta_pitch)
ORBIT_KEYS: dict[str, tuple[float, float]] = {
    ti.ui.LEFT: (ORBIT_STEP, 0.0),
    ti.ui.RIGHT: (-ORBIT_STEP, 0.0),
    ti.ui.UP: (0.0, -ORBIT_STEP),
    ti.ui.DOWN: (0.0, ORBIT_STEP),
}

EXPORT_KEY = "p"


def apply_camera_key(camera: Camera, key: str) -> bool:
    """Apply one movement or orbit key to the camera.

    Args:
        camera: The camera to update.
        key: A GGUI key name.

    Returns:
        True if the key is bound to a camera action.
    """
    if key in MOVE_KEYS:
        camera.move(MOVE_KEYS[key])
        return True
    if key in ORBIT_KEYS:
        delta_yaw, delta_pitch = ORBIT_KEYS[key]
        camera.orbit(delta_yaw, delta_pitch)
        return True
    return False


# Lazy kernel holder - kernel is created on first use after Taichi is initialized
_to_display_kernel: Any = None


def _get_to_display_kernel() -> Any:
    """Get or create the framebuffer-to-display conversion kernel.

    The framebuffer stores 0-255 colors with row 0 at the top; the canvas
    expects [0, 1] colors with row 0 at the bottom.
    """
    global _to_display_kernel
    if _to_display_kernel is None:

        @ti.kernel
        def _kernel(src: ti.template(), dst: ti.template(), width: ti.i32, height: ti.i32):
            for x, y in ti.ndrange(width, height):
                dst[x, height - 1 - y] = src[x, y] / 255.0

        _to_display_kernel = _kernel
    return _to_display_kernel


class InteractivePreview:
    """Interactive voxel island viewer using Taichi GGUI.

    Attributes:
        width: Window width in pixels.
        height: Window height in pixels.
        display_image: Taichi field holding the image shown on the canvas.
        scene: The scene being viewed, once built.
        camera: The viewer's camera, once built.
        orbit: The sun's orbit, once built.
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        title: str = "Voxel Island - Interactive Preview",
        params: "VoxelIslandParams | None" = None,
    ) -> None:
        """Initialize the interactive preview.

        Args:
            width: Window width in pixels.
            height: Window height in pixels.
            title: Window title.
            params: Scene parameters; defaults to VoxelIslandParams().

        Note:
            The window is created lazily on first use so that the object can
            be constructed without a display.
        """
        self.width = width
        self.height = height
        self._title = title
        self._params = params

        self._window: "ti.ui.Window | None" = None
        self._canvas: "ti.ui.Canvas | None" = None

        self.display_image: "ti.MatrixField" = ti.Vector.field(
            3, dtype=ti.f32, shape=(width, height)
        )

        self.scene: "SceneManager | None" = None
        self.camera: Camera | None = None
        self.orbit: "SunOrbit | None" = None
        self._renderer: "FrameRenderer | None" = None

    def _initialize_window(self) -> None:
        if self._window is not None:
            return

        self._window = ti.ui.Window(
            name=self._title,
            res=(self.width, self.height),
            vsync=True,
        )
        self._canvas = self._window.get_canvas()

    @property
    def window(self) -> "ti.ui.Window":
        """Get the Taichi GGUI window, initializing if needed."""
        if self._window is None:
            self._initialize_window()
        assert self._window is not None
        return self._window

    @property
    def canvas(self) -> "ti.ui.Canvas":
        """Get the canvas for rendering."""
        if self._canvas is None:
            self._initialize_window()
        assert self._canvas is not None
        return self._canvas

    def build(self) -> None:
        """Build the scene, camera, sun orbit and renderer.

        Called by run(); can be called directly to drive frames without a
        window.
        """
        from src.voxelray.core.renderer import FrameRenderer
        from src.voxelray.scene.voxel_island import (
            VoxelIslandParams,
            create_voxel_island_scene,
        )

        params = self._params if self._params is not None else VoxelIslandParams()
        self.scene, self.camera = create_voxel_island_scene(params)
        self.orbit = params.make_orbit()
        self._renderer = FrameRenderer(self.width, self.height)

    def get_renderer(self) -> "FrameRenderer | None":
        """Get the frame renderer, or None before build()."""
        return self._renderer

    def step(self, held_keys: tuple[str, ...] = ()) -> None:
        """Advance the animation by one frame and render it.

        Args:
            held_keys: GGUI key names currently held down.

        Raises:
            RuntimeError: If build() has not been called.
        """
        if self._renderer is None or self.camera is None or self.orbit is None:
            raise RuntimeError("Preview not built. Call build() first.")

        for key in held_keys:
            apply_camera_key(self.camera, key)

        light_position = self.orbit.advance()
        self._renderer.render(self.camera, light_position)

        from src.voxelray.core.render import get_framebuffer

        kernel = _get_to_display_kernel()
        kernel(get_framebuffer(), self.display_image, self.width, self.height)

    def _held_keys(self) -> tuple[str, ...]:
        keys = list(MOVE_KEYS) + list(ORBIT_KEYS)
        return tuple(key for key in keys if self.window.is_pressed(key))

    def is_running(self) -> bool:
        """Check if the window is still open."""
        return self.window.running

    def show_frame(self) -> None:
        """Present the display image."""
        self.canvas.set_image(self.display_image)
        self.window.show()

    def run(self) -> None:
        """Run the main loop until the window is closed or Escape is pressed."""
        self._initialize_window()
        if self._renderer is None:
            self.build()

        logger.info("Interactive preview started (%dx%d)", self.width, self.height)

        while self.is_running():
            for event in self.window.get_events(ti.ui.PRESS):
                if event.key == ti.ui.ESCAPE:
                    self.window.running = False
                elif event.key == EXPORT_KEY:
                    self._export_png()
            if not self.is_running():
                break

            self.step(self._held_keys())
            self.show_frame()

        logger.info("Interactive preview closed after %d frames", self._renderer.frame_count)

    def close(self) -> None:
        """Close the preview window."""
        if self._window is not None:
            self._window.running = False

    @staticmethod
    def is_display_available() -> bool:
        """Check if a display is available for GUI rendering.

        Returns:
            True if a display is available, False for headless environments.
        """
        display = os.environ.get("DISPLAY")
        wayland = os.environ.get("WAYLAND_DISPLAY")

        if os.name == "nt":
            return True

        # On macOS, display is always available if not in SSH
        if os.uname().sysname == "Darwin":
            ssh_connection = os.environ.get("SSH_CONNECTION")
            return not (ssh_connection and not display)

        return bool(display or wayland)

    def _export_png(self) -> str | None:
        """Export the current frame to a timestamped PNG file.

        Returns:
            The filename written, or None when nothing has been rendered.
        """
        from src.voxelray.preview.export import save_png

        if self._renderer is None or self._renderer.frame_count == 0:
            logger.error("No frame available for export")
            return None

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"voxel_island_{timestamp}.png"
        save_png(self._renderer, filename)
        return filename
