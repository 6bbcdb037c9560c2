#!/usr/bin/env python3
"""Interactive voxel island viewer.

This script opens a window showing the voxel island in real time, with the
sun orbiting the island so the scene cycles between day and night.

Usage:
    python -m examples.interactive_voxel_island [--width W] [--height H]

Controls:
    - W / S: move forward / backward
    - A / D: move left / right
    - Arrow keys: orbit the camera
    - P: export the current frame to a timestamped PNG
    - Escape: quit
"""

from __future__ import annotations

import argparse
import logging
import platform
import sys
from pathlib import Path

# Ensure the project root is in the Python path for direct execution
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import taichi as ti  # noqa: E402


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Interactive voxel island viewer.")
    parser.add_argument("--width", type=int, default=640, help="Window width (default: 640)")
    parser.add_argument("--height", type=int, default=480, help="Window height (default: 480)")
    parser.add_argument(
        "--orbit-speed",
        type=float,
        default=None,
        help="Sun orbit speed in radians per frame (default: 0.05)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    return parser.parse_args()


def initialize_taichi() -> str:
    """Initialize Taichi with the best available backend.

    On macOS, prefers Metal. Falls back to CPU if GPU is unavailable.

    Returns:
        Name of the backend being used.
    """
    system = platform.system()

    if system == "Darwin":
        try:
            ti.init(arch=ti.metal, fast_math=False)
            return "Metal (GPU)"
        except Exception:
            pass

    try:
        ti.init(arch=ti.gpu, fast_math=False)
        return "GPU"
    except Exception:
        pass

    ti.init(arch=ti.cpu, fast_math=False)
    return "CPU"


def main() -> int:
    """Main entry point for the interactive viewer.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize Taichi first (before importing modules that use ti.kernel)
    backend = initialize_taichi()
    print(f"Taichi backend: {backend}")

    # Import after Taichi initialization
    from src.voxelray.preview.interactive import InteractivePreview
    from src.voxelray.scene.voxel_island import VoxelIslandParams

    if not InteractivePreview.is_display_available():
        print("Error: No display available. Cannot run interactive preview.")
        print("This script requires a graphical display environment.")
        return 1

    params = VoxelIslandParams()
    if args.orbit_speed is not None:
        params.orbit_speed = args.orbit_speed

    print(f"Creating interactive preview window ({args.width}x{args.height})...")
    preview = InteractivePreview(args.width, args.height, params=params)

    print("Starting interactive rendering...")
    print("  - W/A/S/D to move, arrow keys to orbit")
    print("  - P to export the current frame")
    print("  - Escape or close the window to exit")
    print()

    try:
        preview.run()
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
    finally:
        preview.close()
        print("Preview window closed.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
