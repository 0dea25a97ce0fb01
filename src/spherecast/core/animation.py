"""Deterministic scene animation.

Scene motion is a pure function of a shared angle parameter that grows by a
fixed step every frame. Each animated object follows a sinusoidal path around
its anchor point:

    center[axis] = anchor[axis] + amplitude[axis] * sin(frequency[axis] * theta + phase[axis])

There is no randomness, so the same start angle and step always produce
bit-identical centers after the same number of frames.

User input perturbs the scene between frames:
    - A pointer position pins the light's x/y to the pointer.
    - A scroll delta moves the background sphere and the light in depth,
      in lockstep, with the background clamped to a fixed range.

This module is plain Python and does not touch Taichi fields; the frame
driver uploads the resulting centers after each step.

Example:
    >>> animator = Animator(AnimationConfig(angle_step=0.1))
    >>> animator.apply_input(scene, FrameInput(pointer=(40.0, 60.0)))
    >>> animator.advance(scene)
    >>> scene.upload()
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from spherecast.geometry.sphere import SphereKind

if TYPE_CHECKING:
    from spherecast.scene.manager import Scene

Vec3Tuple = tuple[float, float, float]

# Largest scroll delta honored in a single frame
MAX_SCROLL_PER_FRAME = 10.0


@dataclass(frozen=True)
class Orbit:
    """Sinusoidal path around an anchor point.

    Attributes:
        amplitude: Per-axis swing in scene units.
        frequency: Per-axis multiplier on the shared angle.
        phase: Per-axis phase offset in radians (pi/2 turns sin into cos).
    """

    amplitude: Vec3Tuple = (0.0, 0.0, 0.0)
    frequency: Vec3Tuple = (1.0, 1.0, 1.0)
    phase: Vec3Tuple = (0.0, 0.0, 0.0)

    def position(self, anchor: Vec3Tuple, theta: float) -> Vec3Tuple:
        """Evaluate the path at angle theta."""
        return (
            anchor[0] + self.amplitude[0] * math.sin(self.frequency[0] * theta + self.phase[0]),
            anchor[1] + self.amplitude[1] * math.sin(self.frequency[1] * theta + self.phase[1]),
            anchor[2] + self.amplitude[2] * math.sin(self.frequency[2] * theta + self.phase[2]),
        )


@dataclass(frozen=True)
class FrameInput:
    """Input gathered between two frames.

    Attributes:
        quit: Stop the frame loop after the current frame.
        pointer: Pointer position in viewport pixels (y down), or None.
        scroll: Scroll delta in wheel notches (0.0 when there was none).
    """

    quit: bool = False
    pointer: tuple[float, float] | None = None
    scroll: float = 0.0


@dataclass
class AnimationConfig:
    """Tunable animation parameters.

    Attributes:
        angle_step: Increment of the shared angle per frame.
        start_angle: Angle at the first frame.
        depth_range: (min, max) z of the background sphere under scrolling.
        scroll_step: Depth change per scroll notch.
    """

    angle_step: float = 0.1
    start_angle: float = 0.0
    depth_range: tuple[float, float] = (580.0, 660.0)
    scroll_step: float = 10.0

    def __post_init__(self) -> None:
        lo, hi = self.depth_range
        if lo >= hi:
            raise ValueError(f"Depth range must satisfy min < max, got {self.depth_range}")


class Animator:
    """Advances scene positions frame by frame.

    The animator owns the shared angle and the last pointer position. It is
    the only writer of sphere and light centers during a run.

    Attributes:
        config: The animation parameters.
        theta: The current shared angle.
        frame: Number of completed advance() calls.
    """

    def __init__(self, config: AnimationConfig | None = None) -> None:
        self.config = config if config is not None else AnimationConfig()
        self.theta = self.config.start_angle
        self.frame = 0
        self._pointer: tuple[float, float] | None = None

    @property
    def pointer(self) -> tuple[float, float] | None:
        """The pointer position currently pinning the light, if any."""
        return self._pointer

    def apply_input(self, scene: Scene, frame_input: FrameInput) -> None:
        """Fold one frame of user input into the scene.

        The pointer is remembered and pins the light from the next advance()
        on. Scrolling moves the background sphere's anchor depth, clamped to
        the configured range, and shifts the light's anchor depth by the
        same applied amount.

        Args:
            scene: The scene to perturb.
            frame_input: Input polled after the last frame.
        """
        if frame_input.pointer is not None:
            self._pointer = (float(frame_input.pointer[0]), float(frame_input.pointer[1]))

        if frame_input.scroll:
            self.scroll_depth(scene, frame_input.scroll)

    def scroll_depth(self, scene: Scene, notches: float) -> float:
        """Move the background and the light in depth.

        Args:
            scene: The scene to perturb.
            notches: Scroll delta; positive pushes the background away.

        Returns:
            The depth change actually applied after clamping.
        """
        background = scene.background
        if background is None:
            return 0.0

        notches = max(-MAX_SCROLL_PER_FRAME, min(MAX_SCROLL_PER_FRAME, notches))
        lo, hi = self.config.depth_range
        old_z = background.anchor[2]
        new_z = min(hi, max(lo, old_z + notches * self.config.scroll_step))
        applied = new_z - old_z

        if applied != 0.0:
            background.anchor = (background.anchor[0], background.anchor[1], new_z)
            light = scene.light
            light.anchor = (light.anchor[0], light.anchor[1], light.anchor[2] + applied)
        return applied

    def advance(self, scene: Scene) -> None:
        """Reposition everything for the current angle, then step the angle.

        Spheres with an orbit move along it; spheres without one sit at their
        anchor. Emitter spheres track the light's x/y so the visible bulb
        stays with the light.
        """
        light = scene.light
        if light.orbit is not None:
            light.center = light.orbit.position(light.anchor, self.theta)
        else:
            light.center = light.anchor
        if self._pointer is not None:
            light.center = (self._pointer[0], self._pointer[1], light.center[2])

        for sphere in scene.spheres:
            if sphere.orbit is not None:
                center = sphere.orbit.position(sphere.anchor, self.theta)
            else:
                center = sphere.anchor
            if sphere.kind == SphereKind.EMITTER:
                center = (light.center[0], light.center[1], center[2])
            sphere.center = center

        self.theta += self.config.angle_step
        self.frame += 1

    def reset(self) -> None:
        """Return to the start angle and forget the pointer."""
        self.theta = self.config.start_angle
        self.frame = 0
        self._pointer = None
