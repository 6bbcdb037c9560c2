"""Look-at camera with movement and orbit controls.

The camera keeps an eye position, a look-at target and an up hint, and derives
an orthonormal basis (u, v, w) from them:

- w: points from the target back toward the eye (camera-space +z)
- u: points right in the image plane
- v: points up in the image plane

Primary rays are built in camera space looking down -z and mapped to world
space with base_change, i.e. u * dx + v * dy + w * dz. The basis is always
re-derived from eye/target/up as a whole; it is never edited piecewise.

Movement translates eye and target together. Orbiting moves the eye on a
sphere of fixed radius around the target using yaw/pitch deltas; pitch is
clamped short of the poles and there is no roll.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.voxelray.camera.camera import Camera, setup_camera
    >>>
    >>> camera = Camera(eye=(0.0, 5.0, 7.0), center=(0.0, 5.0, 0.0), up=(0.0, 1.0, 0.0))
    >>> camera.move("forward")
    >>> camera.orbit(0.05, 0.0)
    >>> setup_camera(camera)
"""

import math
from typing import Literal

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

vec3 = tm.vec3

# Type alias for movement commands
MoveDirection = Literal["forward", "backward", "left", "right"]

# Vertical field of view used by the renderer (60 degrees)
FIELD_OF_VIEW = math.pi / 3.0

# Distance covered by one movement command
MOVE_STEP = 0.1

# Pitch stays this far from straight up/down
PITCH_LIMIT = math.pi / 2.0 - 0.1


def _normalize(v: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    return v / np.linalg.norm(v)


# =============================================================================
# Camera (Python-side state)
# =============================================================================


class Camera:
    """Look-at camera holding eye, target, up hint and derived basis.

    Attributes:
        eye: Camera position in world space.
        center: Look-at target in world space.
        up: Up hint used to derive the basis.
        u: Right vector of the basis.
        v: Up vector of the basis.
        w: Backward vector of the basis (target toward eye).
        move_step: Distance covered by one move() call.
    """

    def __init__(
        self,
        eye: tuple[float, float, float],
        center: tuple[float, float, float],
        up: tuple[float, float, float] = (0.0, 1.0, 0.0),
        *,
        move_step: float = MOVE_STEP,
    ) -> None:
        """Create a camera and derive its basis.

        Args:
            eye: Camera position.
            center: Point the camera looks at. Must differ from eye.
            up: Up hint; must not be parallel to the view direction.
            move_step: Distance covered by one move() call.

        Raises:
            ValueError: If eye and center coincide or up is parallel to the
                view direction.
        """
        self.eye = np.array(eye, dtype=np.float64)
        self.center = np.array(center, dtype=np.float64)
        self.up = np.array(up, dtype=np.float64)
        self.move_step = move_step
        self._update_basis()

    def _update_basis(self) -> None:
        """Re-derive the orthonormal basis from eye, center and up."""
        back = self.eye - self.center
        if np.linalg.norm(back) < 1e-12:
            raise ValueError("Camera eye and center must be distinct points")
        w = _normalize(back)

        right = np.cross(self.up, w)
        if np.linalg.norm(right) < 1e-12:
            raise ValueError("Camera up hint must not be parallel to the view direction")
        u = _normalize(right)

        # u and w are orthonormal, re-normalize anyway to keep drift out
        v = _normalize(np.cross(w, u))

        self.u = u
        self.v = v
        self.w = w

    @property
    def forward(self) -> npt.NDArray[np.float64]:
        """Get the viewing direction (eye toward target)."""
        return -self.w

    def base_change(self, direction: tuple[float, float, float]) -> npt.NDArray[np.float64]:
        """Transform a camera-space direction into world space.

        Args:
            direction: Direction (dx, dy, dz) in camera space, where -z is
                the viewing direction.

        Returns:
            The normalized world-space direction u*dx + v*dy + w*dz.
        """
        dx, dy, dz = direction
        return _normalize(self.u * dx + self.v * dy + self.w * dz)

    def move(self, direction: MoveDirection) -> None:
        """Translate eye and target together by one step.

        Args:
            direction: "forward" / "backward" along the view direction, or
                "left" / "right" along the right vector.

        Raises:
            ValueError: If direction is not one of the four commands.
        """
        if direction == "forward":
            offset = self.forward * self.move_step
        elif direction == "backward":
            offset = -self.forward * self.move_step
        elif direction == "left":
            offset = -self.u * self.move_step
        elif direction == "right":
            offset = self.u * self.move_step
        else:
            raise ValueError(f"Unknown move direction: {direction}")

        self.eye = self.eye + offset
        self.center = self.center + offset
        self._update_basis()

    def orbit(self, delta_yaw: float, delta_pitch: float) -> None:
        """Orbit the eye around the target.

        The eye is kept at its current distance from the target. Yaw wraps
        modulo 2*pi; pitch is clamped to +/-(pi/2 - 0.1), or to the current
        pitch when the camera already sits beyond that.

        Args:
            delta_yaw: Change of the horizontal angle in radians.
            delta_pitch: Change of the vertical angle in radians.
        """
        offset = self.eye - self.center
        radius = float(np.linalg.norm(offset))
        x, y, z = (float(c) for c in offset)

        yaw = math.atan2(z, x)
        pitch = math.atan2(-y, math.hypot(x, z))

        yaw = (yaw + delta_yaw) % (2.0 * math.pi)
        # A camera built past the limit is only kept from going further
        limit = max(PITCH_LIMIT, abs(pitch))
        pitch = min(max(pitch + delta_pitch, -limit), limit)

        self.eye = self.center + radius * np.array(
            [
                math.cos(yaw) * math.cos(pitch),
                -math.sin(pitch),
                math.sin(yaw) * math.cos(pitch),
            ]
        )
        self._update_basis()

    def __repr__(self) -> str:
        """Return a string representation of the camera state."""
        return f"Camera(eye={tuple(self.eye.tolist())}, center={tuple(self.center.tolist())})"


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_eye = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_u = ti.Vector.field(3, dtype=ti.f32, shape=())  # Right
_camera_v = ti.Vector.field(3, dtype=ti.f32, shape=())  # Up
_camera_w = ti.Vector.field(3, dtype=ti.f32, shape=())  # Backward


def setup_camera(camera: Camera) -> None:
    """Upload the camera eye and basis for use inside kernels.

    Must be called after every move/orbit before rendering the next frame.

    Args:
        camera: The camera to upload.
    """
    _camera_eye[None] = camera.eye.tolist()
    _camera_u[None] = camera.u.tolist()
    _camera_v[None] = camera.v.tolist()
    _camera_w[None] = camera.w.tolist()


@ti.func
def base_change(direction: vec3) -> vec3:
    """Transform a camera-space direction into world space.

    Args:
        direction: Direction in camera space (-z is the viewing direction).

    Returns:
        The normalized world-space direction.
    """
    world = direction.x * _camera_u[None] + direction.y * _camera_v[None] + direction.z * _camera_w[None]
    return tm.normalize(world)


@ti.func
def get_camera_eye() -> vec3:
    """Get the uploaded camera position in world space."""
    return _camera_eye[None]


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get the uploaded camera state for debugging.

    Returns:
        Dictionary with eye, u, v and w.
    """
    eye_vec = _camera_eye[None]
    u_vec = _camera_u[None]
    v_vec = _camera_v[None]
    w_vec = _camera_w[None]

    return {
        "eye": (float(eye_vec[0]), float(eye_vec[1]), float(eye_vec[2])),
        "u": (float(u_vec[0]), float(u_vec[1]), float(u_vec[2])),
        "v": (float(v_vec[0]), float(v_vec[1]), float(v_vec[2])),
        "w": (float(w_vec[0]), float(w_vec[1]), float(w_vec[2])),
    }
