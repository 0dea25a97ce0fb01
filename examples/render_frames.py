#!/usr/bin/env python3
"""Render the animated sphere scene headlessly to PNG files.

This script runs the frame loop without a window. Frames are written to a
directory as numbered PNGs, or only the last frame is saved to a single file.
An optional pointer position pins the light, and an optional scroll delta is
applied on the first frame, to reproduce interactive sessions.

Usage:
    python -m examples.render_frames [options]

Options:
    --width WIDTH       Viewport width in pixels (default: 250)
    --height HEIGHT     Viewport height in pixels (default: 250)
    --frames N          Number of frames to render (default: 30)
    --output-dir DIR    Write every frame as DIR/frame_NNNN.png
    --output FILE       Save only the last frame (default: spheres.png)
    --pointer X Y       Pin the light to this viewport position
    --scroll NOTCHES    Scroll delta applied after the first frame
    --quiet             Suppress progress output

Example:
    python -m examples.render_frames --frames 60 --output-dir frames
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

_src_root = Path(__file__).parent.parent / "src"
if str(_src_root) not in sys.path:
    sys.path.insert(0, str(_src_root))

import taichi as ti  # noqa: E402


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the animated sphere scene to PNG files.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=250, help="Viewport width (default: 250)")
    parser.add_argument("--height", type=int, default=250, help="Viewport height (default: 250)")
    parser.add_argument(
        "--frames", type=int, default=30, help="Number of frames to render (default: 30)"
    )
    parser.add_argument(
        "--output-dir", type=str, default=None, help="Directory for numbered frame PNGs"
    )
    parser.add_argument(
        "--output",
        type=str,
        default="spheres.png",
        help="Output file for the last frame (default: spheres.png)",
    )
    parser.add_argument(
        "--pointer",
        type=float,
        nargs=2,
        metavar=("X", "Y"),
        default=None,
        help="Pin the light to this viewport position",
    )
    parser.add_argument(
        "--scroll", type=float, default=0.0, help="Scroll delta applied after the first frame"
    )
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    return parser.parse_args()


def render_frames(
    width: int = 250,
    height: int = 250,
    num_frames: int = 30,
    output_dir: str | None = None,
    output_path: str = "spheres.png",
    pointer: tuple[float, float] | None = None,
    scroll: float = 0.0,
    quiet: bool = False,
) -> list[Path]:
    """Run the frame loop and save the results.

    Args:
        width: Viewport width in pixels.
        height: Viewport height in pixels.
        num_frames: Number of frames to render.
        output_dir: If given, every frame is written into this directory.
        output_path: Otherwise, the last frame is written to this file.
        pointer: Optional pointer position pinning the light.
        scroll: Scroll delta applied after the first frame.
        quiet: If True, suppress progress output.

    Returns:
        Paths of the saved images.
    """
    from spherecast.core.animation import FrameInput
    from spherecast.core.driver import FrameDriver
    from spherecast.preview.export import PngSequenceSink, save_png
    from spherecast.preview.inputs import NullInput, ScriptedInput
    from spherecast.preview.sinks import ArraySink
    from spherecast.scene.default import create_default_scene

    if not quiet:
        print(f"Creating sphere scene ({width}x{height})...")
    scene = create_default_scene(width, height)

    if output_dir is not None:
        sink = PngSequenceSink(width, height, output_dir)
    else:
        sink = ArraySink(width, height)

    if pointer is not None or scroll:
        first = FrameInput(pointer=pointer, scroll=scroll)
        input_source = ScriptedInput([first], quit_when_exhausted=False)
    else:
        input_source = NullInput()

    driver = FrameDriver(scene, sink=sink, input_source=input_source)

    if not quiet:
        print(f"Rendering {num_frames} frames...")

    start_time = time.time()

    def progress_callback(index: int, image, frame_input) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            fps = (index + 1) / elapsed if elapsed > 0 else 0.0
            print(
                f"\r  Frame {index + 1}/{num_frames} - {fps:.1f} fps",
                end="",
                flush=True,
            )

    driver.run(max_frames=num_frames, callback=progress_callback)

    if not quiet:
        print()

    if output_dir is not None:
        saved = list(sink.written)
    else:
        saved = [save_png(sink.last_frame, output_path)]

    total_time = time.time() - start_time
    if not quiet:
        if output_dir is not None:
            print(f"Saved {len(saved)} frames to: {Path(output_dir).absolute()}")
        else:
            print(f"Saved to: {saved[0].absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return saved


def main() -> int:
    """Main entry point."""
    args = parse_args()

    # Use GPU if available, fall back to CPU
    try:
        ti.init(arch=ti.gpu)
        if not args.quiet:
            print("Using GPU backend")
    except Exception:
        ti.init(arch=ti.cpu)
        if not args.quiet:
            print("Using CPU backend")

    try:
        render_frames(
            width=args.width,
            height=args.height,
            num_frames=args.frames,
            output_dir=args.output_dir,
            output_path=args.output,
            pointer=tuple(args.pointer) if args.pointer is not None else None,
            scroll=args.scroll,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
