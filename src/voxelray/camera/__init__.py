"""Camera module.

Components:
    camera: Look-at camera with movement, orbit and kernel-side basis change
"""

from .camera import (
    FIELD_OF_VIEW,
    MOVE_STEP,
    PITCH_LIMIT,
    Camera,
    MoveDirection,
    base_change,
    get_camera_eye,
    get_camera_info,
    setup_camera,
)

__all__ = [
    "Camera",
    "MoveDirection",
    "FIELD_OF_VIEW",
    "MOVE_STEP",
    "PITCH_LIMIT",
    "setup_camera",
    "base_change",
    "get_camera_eye",
    "get_camera_info",
]
