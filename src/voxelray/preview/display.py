"""Matplotlib-based preview display for rendered frames.

This module shows a finished frame in a Matplotlib figure. Frames are
already 8-bit sRGB-ready colors, so no tone mapping is applied.

Example:
    >>> from src.voxelray.preview.display import show_preview
    >>> from src.voxelray.core.renderer import FrameRenderer
    >>>
    >>> renderer = FrameRenderer(320, 240)
    >>> renderer.render(camera, light_position=(0.0, 10.0, 0.0))
    >>> show_preview(renderer)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from src.voxelray.core.renderer import FrameRenderer


def image_to_float(image: npt.NDArray[np.uint8]) -> npt.NDArray[np.float32]:
    """Convert an 8-bit RGB image to floats in [0, 1] for display.

    Args:
        image: Image array of shape (H, W, 3) with dtype uint8.

    Returns:
        Float32 image of the same shape.

    Raises:
        ValueError: If the image is not of shape (H, W, 3).
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Image must have shape (H, W, 3), got {image.shape}")
    return image.astype(np.float32) / 255.0


def show_preview(
    renderer: FrameRenderer,
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 6),
    block: bool = True,
) -> None:
    """Display the latest frame as a Matplotlib figure.

    Args:
        renderer: The FrameRenderer whose latest frame is shown.
        title: Custom title (default shows the frame count).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    display_image = image_to_float(renderer.get_image_numpy())

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        title = f"Voxel Preview - frame {renderer.frame_count}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
