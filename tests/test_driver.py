"""Tests for the frame driver.

Tests cover:
- Frame loop with frame limits and quit requests
- The per-pixel sink contract
- Input folding and scene upload between frames
- Callbacks and the frame generator
"""

import numpy as np
import pytest


def _make_recording_sink(width, height):
    from spherecast.preview.sinks import FrameSink

    class RecordingSink(FrameSink):
        def __init__(self):
            self.width = width
            self.height = height
            self.pixels = []
            self.present_calls = 0

        def put_pixel(self, x, y, r, g, b):
            self.pixels.append((x, y, r, g, b))

        def present(self):
            self.present_calls += 1

    return RecordingSink()


class TestFrameDriverLoop:
    """Tests for run() and step()."""

    def test_run_max_frames(self):
        """Test run stops at max_frames and reports the count."""
        from spherecast.core.driver import FrameDriver
        from spherecast.preview.sinks import ArraySink
        from spherecast.scene.default import create_default_scene

        scene = create_default_scene(32, 24)
        sink = ArraySink(32, 24)
        driver = FrameDriver(scene, sink)

        assert driver.run(max_frames=3) == 3
        assert driver.frame_count == 3
        assert sink.presented == 3
        assert driver.animator.frame == 3
        assert sink.last_frame.shape == (24, 32, 3)

    def test_quit_stops_after_current_frame(self):
        """Test a quit polled after frame 2 ends the loop with 2 frames presented."""
        from spherecast.core.animation import FrameInput
        from spherecast.core.driver import FrameDriver
        from spherecast.preview.inputs import ScriptedInput
        from spherecast.preview.sinks import ArraySink
        from spherecast.scene.default import create_default_scene

        scene = create_default_scene(16, 16)
        sink = ArraySink(16, 16)
        source = ScriptedInput([FrameInput(), FrameInput(quit=True)], quit_when_exhausted=False)
        driver = FrameDriver(scene, sink, input_source=source)

        assert driver.run() == 2
        assert sink.presented == 2
        assert driver.quit_requested
        assert driver.run(max_frames=5) == 0

    def test_exhausted_script_quits(self):
        """Test an empty script quits after the first frame."""
        from spherecast.core.driver import FrameDriver
        from spherecast.preview.inputs import ScriptedInput
        from spherecast.preview.sinks import ArraySink
        from spherecast.scene.default import create_default_scene

        scene = create_default_scene(8, 8)
        driver = FrameDriver(scene, ArraySink(8, 8), input_source=ScriptedInput([]))
        assert driver.run() == 1

    def test_first_frame_uses_initial_centers(self):
        """Test the first presented frame shows the scene before any animation step."""
        from spherecast.core.driver import FrameDriver
        from spherecast.preview.sinks import ArraySink
        from spherecast.scene.default import create_default_scene

        reference = FrameDriver(create_default_scene(40, 40), ArraySink(40, 40)).render()

        sink = ArraySink(40, 40)
        driver = FrameDriver(create_default_scene(40, 40), sink)
        driver.step()

        np.testing.assert_array_equal(sink.last_frame, reference)

    def test_step_folds_pointer_into_scene(self):
        """Test a polled pointer moves the light and is uploaded before the next frame."""
        from spherecast.core.animation import FrameInput
        from spherecast.core.driver import FrameDriver
        from spherecast.preview.inputs import ScriptedInput
        from spherecast.preview.sinks import ArraySink
        from spherecast.scene.default import create_default_scene
        from spherecast.scene.storage import get_light_center

        scene = create_default_scene(20, 20)
        source = ScriptedInput([FrameInput(pointer=(5.0, 6.0))])
        driver = FrameDriver(scene, ArraySink(20, 20), input_source=source)

        frame_input = driver.step()

        assert frame_input.pointer == (5.0, 6.0)
        assert scene.light.center[:2] == (5.0, 6.0)
        assert get_light_center()[:2] == pytest.approx((5.0, 6.0))

    def test_frames_change_as_scene_animates(self):
        """Test consecutive frames differ once the scene moves."""
        from spherecast.core.driver import FrameDriver
        from spherecast.preview.sinks import ArraySink
        from spherecast.scene.default import create_default_scene

        sink = ArraySink(48, 48, keep_frames=3)
        driver = FrameDriver(create_default_scene(48, 48), sink)
        driver.run(max_frames=3)

        assert len(sink.frames) == 3
        assert not np.array_equal(sink.frames[0], sink.frames[2])


class TestSinkContract:
    """Tests for the pixel sink interface."""

    def test_every_pixel_once_then_present(self):
        """Test each pixel is delivered once per frame with in-range integers."""
        from spherecast.core.driver import FrameDriver
        from spherecast.scene.default import create_default_scene

        sink = _make_recording_sink(6, 4)
        driver = FrameDriver(create_default_scene(6, 4), sink)
        driver.step()

        assert sink.present_calls == 1
        assert len(sink.pixels) == 24
        assert {(x, y) for x, y, *_ in sink.pixels} == {(x, y) for x in range(6) for y in range(4)}
        for _, _, r, g, b in sink.pixels:
            for channel in (r, g, b):
                assert isinstance(channel, int)
                assert 0 <= channel <= 255

    def test_viewport_mismatch_raises(self):
        """Test a viewport differing from the sink's size is rejected."""
        from spherecast.core.driver import FrameDriver
        from spherecast.preview.sinks import ArraySink
        from spherecast.scene.default import create_default_scene

        with pytest.raises(ValueError, match="doesn't match sink"):
            FrameDriver(create_default_scene(10, 10), ArraySink(10, 10), width=20)

    def test_replaced_scene_rejected(self):
        """Test a scene superseded by a newer one can't drive frames."""
        from spherecast.core.driver import FrameDriver
        from spherecast.preview.sinks import ArraySink
        from spherecast.scene.default import create_default_scene

        stale = create_default_scene(10, 10)
        create_default_scene(10, 10)

        with pytest.raises(RuntimeError, match="replaced by a newer scene"):
            FrameDriver(stale, ArraySink(10, 10))


class TestCallbacksAndGenerator:
    """Tests for callback and generator interfaces."""

    def test_callback_receives_each_frame(self):
        """Test the callback gets (index, image, input) per frame."""
        from spherecast.core.driver import FrameDriver
        from spherecast.preview.sinks import ArraySink
        from spherecast.scene.default import create_default_scene

        calls = []

        def callback(index, image, frame_input):
            calls.append((index, image.shape, frame_input.quit))

        driver = FrameDriver(create_default_scene(12, 10), ArraySink(12, 10))
        driver.run(max_frames=4, callback=callback)

        assert calls == [(i, (10, 12, 3), False) for i in range(4)]

    def test_frames_generator(self):
        """Test frames() yields each presented image."""
        from spherecast.core.driver import FrameDriver
        from spherecast.preview.sinks import ArraySink
        from spherecast.scene.default import create_default_scene

        sink = ArraySink(12, 10)
        driver = FrameDriver(create_default_scene(12, 10), sink)

        images = list(driver.frames(max_frames=2))
        assert len(images) == 2
        np.testing.assert_array_equal(images[-1], sink.last_frame)

    def test_repr(self):
        """Test the string representation shows the loop state."""
        from spherecast.core.driver import FrameDriver
        from spherecast.preview.sinks import ArraySink
        from spherecast.scene.default import create_default_scene

        driver = FrameDriver(create_default_scene(8, 8), ArraySink(8, 8))
        driver.step()
        assert repr(driver) == "FrameDriver(width=8, height=8, frames=1, theta=0.100)"
