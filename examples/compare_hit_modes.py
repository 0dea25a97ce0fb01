#!/usr/bin/env python3
"""Compare last-writer and nearest-hit resolution of overlapping spheres.

Renders one frame of the default scene twice, once with the last sphere in
evaluation order winning each pixel and once with the nearest hit winning,
and shows both with their difference in a Matplotlib figure.

Usage:
    python -m examples.compare_hit_modes [--width W] [--height H] [--frame N]
        [--save-dir DIR] [--no-show]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

_src_root = Path(__file__).parent.parent / "src"
if str(_src_root) not in sys.path:
    sys.path.insert(0, str(_src_root))

import taichi as ti  # noqa: E402


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Compare hit resolution modes.")
    parser.add_argument("--width", type=int, default=250, help="Viewport width (default: 250)")
    parser.add_argument("--height", type=int, default=250, help="Viewport height (default: 250)")
    parser.add_argument(
        "--frame", type=int, default=0, help="Animation frame to compare (default: 0)"
    )
    parser.add_argument("--save-dir", type=str, default=None, help="Also save both frames here")
    parser.add_argument("--no-show", action="store_true", help="Skip the Matplotlib window")
    return parser.parse_args()


def render_with_mode(width: int, height: int, frame: int, hit_mode: str):
    """Render the given animation frame of the default scene with one hit mode."""
    from spherecast.core.driver import FrameDriver
    from spherecast.core.shading import ShadingConfig
    from spherecast.preview.sinks import ArraySink
    from spherecast.scene.default import create_default_scene

    scene = create_default_scene(width, height)
    driver = FrameDriver(scene, ArraySink(width, height), shading=ShadingConfig(hit_mode=hit_mode))
    driver.run(max_frames=frame)
    return driver.render()


def main() -> int:
    """Main entry point."""
    args = parse_args()
    ti.init(arch=ti.cpu)
    print("Using CPU backend")

    from spherecast.preview.display import frame_difference, show_comparison
    from spherecast.preview.export import save_png

    try:
        last_writer = render_with_mode(args.width, args.height, args.frame, "last_writer")
        nearest = render_with_mode(args.width, args.height, args.frame, "nearest")
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.save_dir is not None:
        save_dir = Path(args.save_dir)
        save_dir.mkdir(parents=True, exist_ok=True)
        for name, image in (("last_writer", last_writer), ("nearest", nearest)):
            path = save_png(image, save_dir / f"{name}_{args.frame:04d}.png")
            print(f"Saved to: {path.absolute()}")

    if args.no_show:
        _, rmse = frame_difference(last_writer, nearest)
    else:
        rmse = show_comparison(last_writer, nearest, labels=("Last writer", "Nearest hit"))
    print(f"RMSE between modes: {rmse:.3f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
