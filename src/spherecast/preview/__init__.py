"""Preview module for frame output and user input.

Components:
    sinks: FrameSink base class and the in-memory ArraySink
    inputs: InputSource base class, NullInput and ScriptedInput
    window: ti.GUI window acting as sink and input source
    export: PNG export and a sink writing numbered PNG frames
    display: Matplotlib frame display and side-by-side comparison

Example:
    >>> from spherecast.preview import ArraySink, ScriptedInput
    >>> from spherecast.core.animation import FrameInput
    >>> sink = ArraySink(250, 250)
    >>> source = ScriptedInput([FrameInput(pointer=(10.0, 20.0))])
"""

from spherecast.preview.display import frame_difference, show_comparison, show_frame
from spherecast.preview.export import PngSequenceSink, image_to_uint8, load_png, save_png
from spherecast.preview.inputs import InputSource, NullInput, ScriptedInput
from spherecast.preview.sinks import ArraySink, FrameSink
from spherecast.preview.window import PreviewWindow

__all__ = [
    # Sinks
    "FrameSink",
    "ArraySink",
    "PngSequenceSink",
    # Inputs
    "InputSource",
    "NullInput",
    "ScriptedInput",
    # Window
    "PreviewWindow",
    # Export
    "save_png",
    "load_png",
    "image_to_uint8",
    # Display
    "show_frame",
    "show_comparison",
    "frame_difference",
]
