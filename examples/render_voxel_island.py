#!/usr/bin/env python3
"""Render the voxel island scene to a PNG.

This script builds the voxel island, places the sun at a chosen point of its
orbit, renders a single frame and saves it.

Usage:
    python -m examples.render_voxel_island [options]

Options:
    --width WIDTH           Image width in pixels (default: 640)
    --height HEIGHT         Image height in pixels (default: 480)
    --sun-angle ANGLE       Sun orbit angle in radians (default: start position)
    --output OUTPUT         Output file path (default: voxel_island.png)
    --grass-texture PATH    Image used for grass blocks
    --bark-texture PATH     Image used for trunk blocks
    --water-texture PATH    Image used for water blocks
    --sun-texture PATH      Image used for the sun block
    --preview               Show the frame in a Matplotlib window
    --log-level LEVEL       Logging level (default: INFO)
    --quiet                 Suppress progress output

Example:
    python -m examples.render_voxel_island --width 320 --height 240 --sun-angle 2.5
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import taichi as ti

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the voxel island scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=640,
        help="Image width in pixels (default: 640)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=480,
        help="Image height in pixels (default: 480)",
    )
    parser.add_argument(
        "--sun-angle",
        type=float,
        default=None,
        help="Sun orbit angle in radians (default: sun at its start position)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="voxel_island.png",
        help="Output file path (default: voxel_island.png)",
    )
    parser.add_argument("--grass-texture", type=str, default=None, help="Image for grass blocks")
    parser.add_argument("--bark-texture", type=str, default=None, help="Image for trunk blocks")
    parser.add_argument("--water-texture", type=str, default=None, help="Image for water blocks")
    parser.add_argument("--sun-texture", type=str, default=None, help="Image for the sun block")
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the frame in a Matplotlib window",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args()


def render_voxel_island(
    width: int = 640,
    height: int = 480,
    sun_angle: float | None = None,
    output_path: str = "voxel_island.png",
    textures: dict[str, str | None] | None = None,
    preview: bool = False,
    quiet: bool = False,
) -> Path:
    """Render the voxel island scene and save to file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        sun_angle: Sun orbit angle in radians, or None for the sun's start
            position above the tree.
        output_path: Output file path (PNG).
        textures: Optional texture paths keyed by "grass", "bark", "water"
            and "sun".
        preview: If True, show the frame with Matplotlib after saving.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from src.voxelray.core.renderer import FrameRenderer
    from src.voxelray.preview.display import show_preview
    from src.voxelray.preview.export import save_png
    from src.voxelray.scene.voxel_island import VoxelIslandParams, create_voxel_island_scene

    textures = textures or {}
    params = VoxelIslandParams(
        grass_texture=textures.get("grass"),
        bark_texture=textures.get("bark"),
        water_texture=textures.get("water"),
        sun_texture=textures.get("sun"),
    )

    if not quiet:
        print(f"Creating voxel island scene ({width}x{height})...")

    scene, camera = create_voxel_island_scene(params)

    if sun_angle is None:
        light_position = scene.get_light_center()
    else:
        light_position = params.make_orbit().position(sun_angle)

    renderer = FrameRenderer(width, height)
    renderer.render(camera, light_position)

    output_file = Path(output_path)
    save_png(renderer, output_file)

    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Render time: {renderer.last_frame_time:.2f}s")

    if preview:
        show_preview(renderer)

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize Taichi
    # Use GPU if available, fall back to CPU
    try:
        ti.init(arch=ti.gpu, fast_math=False)
        if not args.quiet:
            print("Using GPU backend")
    except Exception:
        ti.init(arch=ti.cpu, fast_math=False)
        if not args.quiet:
            print("Using CPU backend")

    try:
        render_voxel_island(
            width=args.width,
            height=args.height,
            sun_angle=args.sun_angle,
            output_path=args.output,
            textures={
                "grass": args.grass_texture,
                "bark": args.bark_texture,
                "water": args.water_texture,
                "sun": args.sun_texture,
            },
            preview=args.preview,
            quiet=args.quiet,
        )
        return 0
    except Exception:
        logger.exception("Render failed")
        return 1


if __name__ == "__main__":
    sys.exit(main())
