"""Preview module for output and visualization.

Components:
    display: Matplotlib-based preview display
    export: PNG export utilities
    interactive: Taichi GGUI-based interactive window

Example:
    >>> from src.voxelray.preview import show_preview, save_png
    >>> show_preview(renderer)
    >>> save_png(renderer, "output.png")
"""

from src.voxelray.preview.display import image_to_float, show_preview
from src.voxelray.preview.export import save_png, save_png_from_array
from src.voxelray.preview.interactive import InteractivePreview, apply_camera_key

__all__ = [
    # Interactive preview
    "InteractivePreview",
    "apply_camera_key",
    # Display functions
    "show_preview",
    "image_to_float",
    # Export functions
    "save_png",
    "save_png_from_array",
]
