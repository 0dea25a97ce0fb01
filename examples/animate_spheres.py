#!/usr/bin/env python3
"""Interactive animated sphere scene.

This script opens a preview window and animates the default scene: three
colored spheres orbiting under a moving point light, a visible light bulb
that follows the light, and a large world sphere behind them.

Usage:
    python -m examples.animate_spheres [options]

Controls:
    - Move the mouse: pin the light's x/y to the cursor
    - Mouse wheel: push the world sphere and the light away or pull them closer
    - Escape or close the window: quit

Options:
    --width WIDTH         Viewport width in pixels (default: 250)
    --height HEIGHT       Viewport height in pixels (default: 250)
    --angle-step STEP     Animation angle increment per frame (default: 0.1)
    --hit-mode MODE       last_writer or nearest (default: last_writer)
    --shadow-probe MODE   light_normal or point_to_light (default: light_normal)
    --static              Keep the colored spheres still
"""

from __future__ import annotations

import argparse
import platform
import sys
import time
from pathlib import Path

# Ensure the package sources are importable for direct execution
_src_root = Path(__file__).parent.parent / "src"
if str(_src_root) not in sys.path:
    sys.path.insert(0, str(_src_root))

import taichi as ti  # noqa: E402


def initialize_taichi() -> str:
    """Initialize Taichi with the best available backend.

    On macOS, prefers Metal. Falls back to CPU if GPU is unavailable.

    Returns:
        Name of the backend being used.
    """
    system = platform.system()

    if system == "Darwin":
        try:
            ti.init(arch=ti.metal)
            return "Metal (GPU)"
        except Exception:
            pass

    try:
        ti.init(arch=ti.gpu)
        return "GPU"
    except Exception:
        pass

    ti.init(arch=ti.cpu)
    return "CPU"


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Animate the sphere scene in a preview window.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=250, help="Viewport width (default: 250)")
    parser.add_argument("--height", type=int, default=250, help="Viewport height (default: 250)")
    parser.add_argument(
        "--angle-step",
        type=float,
        default=0.1,
        help="Animation angle increment per frame (default: 0.1)",
    )
    parser.add_argument(
        "--hit-mode",
        choices=["last_writer", "nearest"],
        default="last_writer",
        help="Overlapping hit resolution (default: last_writer)",
    )
    parser.add_argument(
        "--shadow-probe",
        choices=["light_normal", "point_to_light"],
        default="light_normal",
        help="Shadow probe direction (default: light_normal)",
    )
    parser.add_argument("--static", action="store_true", help="Keep the colored spheres still")
    return parser.parse_args()


def main() -> int:
    """Main entry point for the interactive animation.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    args = parse_args()

    # Initialize Taichi first (before importing modules that declare fields)
    backend = initialize_taichi()
    print(f"Taichi backend: {backend}")

    from spherecast.core.animation import AnimationConfig
    from spherecast.core.driver import FrameDriver
    from spherecast.core.shading import ShadingConfig
    from spherecast.preview.window import PreviewWindow
    from spherecast.scene.default import SceneParams, create_default_scene

    if not PreviewWindow.is_display_available():
        print("Error: No display available. Cannot open the preview window.")
        print("Use examples/render_frames.py for headless rendering.")
        return 1

    try:
        params = SceneParams(width=args.width, height=args.height, animate_spheres=not args.static)
        scene = create_default_scene(params=params)
        shading = ShadingConfig(hit_mode=args.hit_mode, shadow_probe=args.shadow_probe)
        animation = AnimationConfig(angle_step=args.angle_step)

        print(f"Creating preview window ({args.width}x{args.height})...")
        window = PreviewWindow(args.width, args.height)
        driver = FrameDriver(
            scene,
            sink=window,
            input_source=window,
            shading=shading,
            animation=animation,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("Starting animation...")
    print("  - Move the mouse to drag the light")
    print("  - Scroll to move the world sphere in depth")
    print("  - Press Escape or close the window to exit")
    print()

    start_time = time.time()
    try:
        driver.run()
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
    finally:
        driver.close()

    elapsed = time.time() - start_time
    fps = driver.frame_count / elapsed if elapsed > 0 else 0.0
    print(f"Rendered {driver.frame_count} frames ({fps:.1f} fps).")
    print("Preview window closed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
