"""Frame driver tying the renderer, output sink and input source together.

One frame is one blocking unit of work:

    1. Render every pixel of the viewport against the current scene.
    2. Hand the frame to the output sink and present it.
    3. Poll the input source.
    4. Fold the input into the scene, advance the animation and upload the
       new centers.

Rendering only reads the scene fields; steps 3 and 4 are the only writers,
so the scene never changes while a frame is being traced. A quit request
stops the loop after the frame in which it was polled.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spherecast.core.driver import FrameDriver
    >>> from spherecast.scene.default import create_default_scene
    >>> from spherecast.preview.sinks import ArraySink
    >>>
    >>> scene = create_default_scene(250, 250)
    >>> driver = FrameDriver(scene, ArraySink(250, 250))
    >>> driver.run(max_frames=10)
    10
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from spherecast.core.animation import AnimationConfig, Animator, FrameInput
from spherecast.core.shading import (
    ShadingConfig,
    configure_shading,
    get_frame_rgb,
    render_frame,
    setup_frame_buffer,
)
from spherecast.preview.inputs import InputSource, NullInput

if TYPE_CHECKING:
    from spherecast.preview.sinks import FrameSink
    from spherecast.scene.manager import Scene

# Callback receives (frame_index, frame_image, frame_input)
FrameCallback = Callable[[int, npt.NDArray[np.uint8], FrameInput], None]


class FrameDriver:
    """Runs the render / present / poll / advance loop.

    The driver owns the scene for the duration of the run. The viewport size
    defaults to the sink's size.

    Attributes:
        scene: The scene being rendered and animated.
        sink: Receives every frame.
        input_source: Polled once per frame.
        animator: Moves the scene between frames.
    """

    def __init__(
        self,
        scene: Scene,
        sink: FrameSink,
        input_source: InputSource | None = None,
        shading: ShadingConfig | None = None,
        animation: AnimationConfig | None = None,
        width: int | None = None,
        height: int | None = None,
    ) -> None:
        """Set up the frame buffer, shading constants and scene fields.

        Args:
            scene: The scene to render.
            sink: Output sink for finished frames.
            input_source: Input provider; NullInput if omitted.
            shading: Shading constants; defaults if omitted.
            animation: Animation parameters; defaults if omitted.
            width: Viewport width; the sink's width if omitted.
            height: Viewport height; the sink's height if omitted.

        Raises:
            ValueError: If the viewport is out of range or differs from the
                sink's size.
            RuntimeError: If the scene fields could not be synchronized.
        """
        self._width = width if width is not None else sink.width
        self._height = height if height is not None else sink.height
        if (self._width, self._height) != (sink.width, sink.height):
            raise ValueError(
                f"Viewport {self._width}x{self._height} doesn't match sink "
                f"{sink.width}x{sink.height}"
            )

        self.scene = scene
        self.sink = sink
        self.input_source = input_source if input_source is not None else NullInput()
        self.animator = Animator(animation)
        self._frame_count = 0
        self._quit = False
        self._last_image: npt.NDArray[np.uint8] | None = None

        setup_frame_buffer(self._width, self._height)
        configure_shading(shading if shading is not None else ShadingConfig())
        self.scene.upload()
        if not self.scene.is_synced():
            raise RuntimeError("Scene fields don't match the scene container after upload")

    @property
    def width(self) -> int:
        """Get the viewport width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the viewport height."""
        return self._height

    @property
    def frame_count(self) -> int:
        """Number of frames presented so far."""
        return self._frame_count

    @property
    def quit_requested(self) -> bool:
        """Whether the input source has asked the loop to stop."""
        return self._quit

    def render(self) -> npt.NDArray[np.uint8]:
        """Render the current scene without presenting or advancing.

        Returns:
            The frame as uint8 RGB of shape (height, width, 3).
        """
        render_frame()
        return get_frame_rgb()

    def step(self) -> FrameInput:
        """Render, present, poll and advance one frame.

        Returns:
            The input polled after the frame was presented.
        """
        image = self.render()
        self.sink.put_image(image)
        self.sink.present()
        self._frame_count += 1

        frame_input = self.input_source.poll()
        if frame_input.quit:
            self._quit = True

        self.animator.apply_input(self.scene, frame_input)
        self.animator.advance(self.scene)
        self.scene.upload()
        self._last_image = image
        return frame_input

    def frames(self, max_frames: int | None = None) -> Generator[npt.NDArray[np.uint8], None, None]:
        """Run the loop, yielding each presented frame.

        Stops after the frame in which quit was polled, or after max_frames.

        Args:
            max_frames: Upper bound on frames for this call; unbounded if None.

        Yields:
            Each frame as uint8 RGB of shape (height, width, 3).
        """
        produced = 0
        while not self._quit and (max_frames is None or produced < max_frames):
            self.step()
            produced += 1
            yield self._last_image

    def run(self, max_frames: int | None = None, callback: FrameCallback | None = None) -> int:
        """Run the loop until quit or max_frames.

        Args:
            max_frames: Upper bound on frames for this call; unbounded if None.
            callback: Optional callback called after each frame with
                (frame_index, frame_image, frame_input).

        Returns:
            Number of frames presented by this call.
        """
        produced = 0
        while not self._quit and (max_frames is None or produced < max_frames):
            frame_input = self.step()
            produced += 1
            if callback is not None:
                callback(self._frame_count - 1, self._last_image, frame_input)
        return produced

    def close(self) -> None:
        """Release the sink."""
        self.sink.close()

    def __repr__(self) -> str:
        """Return a string representation of the driver state."""
        return (
            f"FrameDriver(width={self.width}, height={self.height}, "
            f"frames={self.frame_count}, theta={self.animator.theta:.3f})"
        )
