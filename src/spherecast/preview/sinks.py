"""Output sinks for rendered frames.

A sink receives every pixel of a frame as integer (x, y, r, g, b) values,
with x in [0, width), y in [0, height) (y = 0 is the top row) and channels
in [0, 255], then a single present() call per frame.

FrameSink.put_image() delivers a whole (height, width, 3) uint8 frame by
calling put_pixel() for each pixel; sinks backed by arrays override it with
a bulk copy.

Example:
    >>> sink = ArraySink(250, 250)
    >>> sink.put_pixel(0, 0, 255, 0, 0)
    >>> sink.present()
    >>> sink.last_frame[0, 0]
    array([255,   0,   0], dtype=uint8)
"""

from __future__ import annotations

from collections import deque

import numpy as np
import numpy.typing as npt


class FrameSink:
    """Base class for frame consumers."""

    width: int
    height: int

    def put_pixel(self, x: int, y: int, r: int, g: int, b: int) -> None:
        """Receive one pixel of the current frame."""
        raise NotImplementedError

    def put_image(self, image: npt.NDArray[np.uint8]) -> None:
        """Receive a whole frame of shape (height, width, 3).

        Raises:
            ValueError: If the shape does not match the sink's viewport.
        """
        _check_frame_shape(image, self.width, self.height)
        for y in range(self.height):
            for x in range(self.width):
                r, g, b = image[y, x]
                self.put_pixel(x, y, int(r), int(g), int(b))

    def present(self) -> None:
        """Finish the current frame."""

    def close(self) -> None:
        """Release any resources held by the sink."""


def _check_frame_shape(image: npt.NDArray, width: int, height: int) -> None:
    expected_shape = (height, width, 3)
    if image.shape != expected_shape:
        raise ValueError(f"Image shape {image.shape} doesn't match expected {expected_shape}")


class ArraySink(FrameSink):
    """Sink that keeps frames in memory.

    Pixels are written into a working buffer; present() snapshots it.

    Attributes:
        width: Viewport width.
        height: Viewport height.
        frames: The most recent presented frames, oldest first.
        presented: Total number of present() calls.
    """

    def __init__(self, width: int, height: int, *, keep_frames: int = 1) -> None:
        """Create an in-memory sink.

        Args:
            width: Viewport width in pixels.
            height: Viewport height in pixels.
            keep_frames: How many presented frames to retain.

        Raises:
            ValueError: If a dimension or keep_frames is not positive.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Viewport dimensions must be positive, got {width}x{height}")
        if keep_frames <= 0:
            raise ValueError(f"keep_frames must be positive, got {keep_frames}")
        self.width = width
        self.height = height
        self.frames: deque[npt.NDArray[np.uint8]] = deque(maxlen=keep_frames)
        self.presented = 0
        self._buffer = np.zeros((height, width, 3), dtype=np.uint8)

    def put_pixel(self, x: int, y: int, r: int, g: int, b: int) -> None:
        """Write one pixel into the working buffer.

        Raises:
            ValueError: If the coordinates or channels are out of range.
        """
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise ValueError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} viewport")
        for channel in (r, g, b):
            if not 0 <= channel <= 255:
                raise ValueError(f"Channel value {channel} outside [0, 255]")
        self._buffer[y, x] = (r, g, b)

    def put_image(self, image: npt.NDArray[np.uint8]) -> None:
        """Copy a whole frame into the working buffer."""
        _check_frame_shape(image, self.width, self.height)
        self._buffer[:] = image

    def present(self) -> None:
        """Snapshot the working buffer as a finished frame."""
        self.frames.append(self._buffer.copy())
        self.presented += 1

    @property
    def last_frame(self) -> npt.NDArray[np.uint8] | None:
        """The most recently presented frame, or None before the first."""
        if not self.frames:
            return None
        return self.frames[-1]
