"""Input sources polled by the frame driver between frames.

An input source returns one FrameInput per poll: an optional quit signal,
an optional pointer position in viewport pixels and a scroll delta.
"""

from __future__ import annotations

from collections.abc import Iterable

from spherecast.core.animation import FrameInput


class InputSource:
    """Base class for input providers."""

    def poll(self) -> FrameInput:
        """Collect input gathered since the previous poll."""
        raise NotImplementedError


class NullInput(InputSource):
    """Never produces input; the loop runs until a frame limit."""

    def poll(self) -> FrameInput:
        return FrameInput()


class ScriptedInput(InputSource):
    """Replays a fixed sequence of inputs, one per frame.

    Useful for headless runs and tests.

    Args:
        events: The inputs to return in order.
        quit_when_exhausted: Return a quit input once the sequence runs out;
            otherwise return empty inputs forever.
    """

    def __init__(self, events: Iterable[FrameInput], *, quit_when_exhausted: bool = True) -> None:
        self._events = list(events)
        self._position = 0
        self._quit_when_exhausted = quit_when_exhausted

    @property
    def remaining(self) -> int:
        """Number of scripted inputs not yet returned."""
        return len(self._events) - self._position

    def poll(self) -> FrameInput:
        if self._position < len(self._events):
            event = self._events[self._position]
            self._position += 1
            return event
        return FrameInput(quit=self._quit_when_exhausted)
