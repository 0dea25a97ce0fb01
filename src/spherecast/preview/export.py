"""Image export utilities for rendered frames.

Frames are 8-bit RGB arrays of shape (height, width, 3) with row 0 at the top,
as produced by get_frame_rgb(). They are written as PNG via Pillow.

Example:
    >>> from spherecast.preview.export import save_png
    >>> save_png(get_frame_rgb(), "frame.png")

For headless animation runs, PngSequenceSink writes every presented frame:
    >>> sink = PngSequenceSink(250, 250, "frames")
    >>> driver = FrameDriver(scene, sink=sink)
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from spherecast.preview.sinks import ArraySink


def image_to_uint8(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Convert a float image with channels in [0, 255] to uint8.

    Values are clamped, then truncated toward zero.
    """
    return np.clip(image, 0.0, 255.0).astype(np.uint8)


def save_png(image: npt.NDArray, filepath: str | Path) -> Path:
    """Save a (height, width, 3) RGB frame as PNG.

    Args:
        image: uint8 frame, or float frame with channels in [0, 255].
        filepath: Output file path.

    Returns:
        The path written.

    Raises:
        ValueError: If the image is not (height, width, 3).
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (height, width, 3), got {image.shape}")
    if image.dtype != np.uint8:
        image = image_to_uint8(image)

    path = Path(filepath)
    PILImage.fromarray(np.ascontiguousarray(image)).save(path)
    return path


def load_png(filepath: str | Path) -> npt.NDArray[np.uint8]:
    """Load a PNG as a (height, width, 3) uint8 array."""
    with PILImage.open(filepath) as img:
        return np.asarray(img.convert("RGB"), dtype=np.uint8)


class PngSequenceSink(ArraySink):
    """Sink that writes every presented frame to a numbered PNG.

    Files are named ``{prefix}_{index:04d}.png`` inside the directory.

    Attributes:
        directory: Output directory (created if missing).
        written: Paths written so far.
    """

    def __init__(
        self,
        width: int,
        height: int,
        directory: str | Path,
        *,
        prefix: str = "frame",
    ) -> None:
        super().__init__(width, height)
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self._prefix = prefix
        self.written: list[Path] = []

    def present(self) -> None:
        super().present()
        path = self.directory / f"{self._prefix}_{self.presented - 1:04d}.png"
        self.written.append(save_png(self.frames[-1], path))
