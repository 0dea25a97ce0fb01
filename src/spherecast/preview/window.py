"""Interactive preview window using Taichi's ti.GUI.

PreviewWindow is both the output sink and the input source of an
interactive run:

    - Frames are shown in a ti.GUI window of the viewport size.
    - Closing the window or pressing Escape requests quit.
    - Moving the mouse reports the pointer in viewport pixels (y down).
    - The mouse wheel reports a scroll delta of one notch per wheel event.

ti.GUI is used rather than the GGUI ti.ui.Window because it reports mouse
wheel events.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spherecast.preview.window import PreviewWindow
    >>> window = PreviewWindow(250, 250)
    >>> window.put_image(frame)
    >>> window.present()
    >>> frame_input = window.poll()
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import numpy as np
import taichi as ti

from spherecast.core.animation import FrameInput
from spherecast.preview.inputs import InputSource
from spherecast.preview.sinks import FrameSink, _check_frame_shape

if TYPE_CHECKING:
    import numpy.typing as npt


class PreviewWindow(FrameSink, InputSource):
    """ti.GUI window acting as frame sink and input source.

    Attributes:
        width: Window width in pixels.
        height: Window height in pixels.
    """

    def __init__(self, width: int, height: int, *, title: str = "spherecast") -> None:
        """Prepare the window.

        The native window is created lazily on first use so that the object
        can be constructed in headless environments.

        Args:
            width: Window width in pixels.
            height: Window height in pixels.
            title: Window title.
        """
        self.width = width
        self.height = height
        self._title = title
        self._gui: ti.GUI | None = None
        self._quit_requested = False
        # ti.GUI layout: indexed [x, y] with the origin at the bottom-left
        self._display = np.zeros((width, height, 3), dtype=np.uint8)

    @property
    def gui(self) -> ti.GUI:
        """Get the ti.GUI window, creating it if needed."""
        if self._gui is None:
            self._gui = ti.GUI(self._title, res=(self.width, self.height))
        return self._gui

    def is_running(self) -> bool:
        """Check whether the window is open and no quit was requested."""
        return self.gui.running and not self._quit_requested

    def put_pixel(self, x: int, y: int, r: int, g: int, b: int) -> None:
        self._display[x, self.height - 1 - y] = (r, g, b)

    def put_image(self, image: npt.NDArray[np.uint8]) -> None:
        """Copy a (height, width, 3) top-row-first frame into the display buffer."""
        _check_frame_shape(image, self.width, self.height)
        self._display[:] = np.transpose(image, (1, 0, 2))[:, ::-1, :]

    def present(self) -> None:
        """Show the display buffer."""
        self.gui.set_image(self._display)
        self.gui.show()

    def poll(self) -> FrameInput:
        """Drain pending window events into a FrameInput."""
        gui = self.gui
        moved = False
        scroll = 0.0

        for event in gui.get_events():
            if event.key in (ti.GUI.ESCAPE, ti.GUI.EXIT):
                self._quit_requested = True
            elif event.key == ti.GUI.WHEEL:
                scroll += float(np.sign(event.delta[1]))
            elif event.key == ti.GUI.MOVE:
                moved = True

        pointer = None
        if moved:
            cx, cy = gui.get_cursor_pos()
            pointer = (cx * self.width, (1.0 - cy) * self.height)

        return FrameInput(
            quit=self._quit_requested or not gui.running,
            pointer=pointer,
            scroll=scroll,
        )

    def close(self) -> None:
        """Close the window if it was opened."""
        if self._gui is not None:
            self._gui.close()
            self._gui = None

    @staticmethod
    def is_display_available() -> bool:
        """Check if a display is available for GUI rendering.

        Returns:
            True if a display is available, False for headless environments.
        """
        display = os.environ.get("DISPLAY")
        wayland = os.environ.get("WAYLAND_DISPLAY")

        if os.name == "nt":
            return True

        # On macOS, display is available unless in SSH without X forwarding
        if os.uname().sysname == "Darwin":
            return not (os.environ.get("SSH_CONNECTION") and not display)

        return bool(display or wayland)
