"""Default animated sphere scene.

The reference scene for a width x height viewport (250 x 250 by default):

- Background "world" sphere far behind everything, moved in depth by scroll
- Light orbiting in front of the spheres, with a visible bulb tracking it
- Red, green and blue spheres around the viewport diagonal

Coordinates are in pixels: x to the right, y down, z into the screen. Primary
rays start on the z = camera_z plane and travel along +z.

Evaluation order is background, bulb, red, green, blue. With the default
last-writer hit mode a later sphere covers an earlier one on the same ray.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spherecast.scene.default import SceneParams, create_default_scene
    >>> scene = create_default_scene(250, 250)
    >>> scene.get("blue").radius
    45.0
"""

import math
from dataclasses import dataclass

from spherecast.core.animation import Orbit
from spherecast.geometry.sphere import SphereKind
from spherecast.scene.manager import WHITE, Scene, SceneLight

# Sizes below are authored for this viewport and scaled to the actual one
REFERENCE_SIZE = 250.0

RED = (255.0, 0.0, 110.0)
GREEN = (110.0, 255.0, 0.0)
BLUE = (0.0, 110.0, 255.0)
WORLD = (70.0, 70.0, 90.0)

# Background sphere: front surface at z = BACKGROUND_DEPTH - BACKGROUND_RADIUS
BACKGROUND_DEPTH = 620.0
BACKGROUND_RADIUS = 560.0


@dataclass
class SceneParams:
    """Parameters for the default scene.

    Attributes:
        width: Viewport width in pixels.
        height: Viewport height in pixels.
        light_color: RGB color of the light.
        red_color: Base color of the small center sphere.
        green_color: Base color of the upper-left sphere.
        blue_color: Base color of the lower-right sphere.
        world_color: Base color of the background sphere.
        background_depth: Initial z of the background sphere's center.
        animate_spheres: Give the colored spheres orbits; the light always
            orbits.
    """

    width: int = 250
    height: int = 250
    light_color: tuple[float, float, float] = WHITE
    red_color: tuple[float, float, float] = RED
    green_color: tuple[float, float, float] = GREEN
    blue_color: tuple[float, float, float] = BLUE
    world_color: tuple[float, float, float] = WORLD
    background_depth: float = BACKGROUND_DEPTH
    animate_spheres: bool = True


def create_default_scene(
    width: int | None = None,
    height: int | None = None,
    params: SceneParams | None = None,
) -> Scene:
    """Create the default scene.

    Args:
        width: Viewport width; overrides params.width when given.
        height: Viewport height; overrides params.height when given.
        params: Optional SceneParams; defaults to SceneParams().

    Returns:
        The populated Scene, already uploaded to the storage fields.

    Raises:
        ValueError: If a viewport dimension is not positive.
    """
    if params is None:
        params = SceneParams()
    w = float(width if width is not None else params.width)
    h = float(height if height is not None else params.height)
    if w <= 0 or h <= 0:
        raise ValueError(f"Viewport dimensions must be positive, got {w}x{h}")

    s = min(w, h) / REFERENCE_SIZE
    half_pi = 0.5 * math.pi

    # Light swings across the middle of the viewport: x = sin(theta), y = cos(theta / 2)
    light = SceneLight(
        center=(w * 0.5, h * 0.5, -20.0),
        radius=40.0 * s,
        color=params.light_color,
        orbit=Orbit(
            amplitude=(w * 0.25, h * 0.25, 0.0),
            frequency=(1.0, 0.5, 0.0),
            phase=(0.0, half_pi, 0.0),
        ),
    )
    scene = Scene(light)

    scene.add_sphere(
        "world",
        (w * 0.5, h * 0.5, params.background_depth),
        BACKGROUND_RADIUS,
        params.world_color,
        kind=SphereKind.BACKGROUND,
    )
    scene.add_sphere(
        "bulb",
        (w * 0.5, h * 0.5, 60.0),
        40.0 * s,
        params.light_color,
        kind=SphereKind.EMITTER,
    )

    red_orbit = green_orbit = blue_orbit = None
    if params.animate_spheres:
        red_orbit = Orbit(amplitude=(0.0, 10.0 * s, 0.0), frequency=(0.0, 2.0, 0.0))
        green_orbit = Orbit(
            amplitude=(12.0 * s, 12.0 * s, 0.0),
            frequency=(1.0, 1.0, 0.0),
            phase=(0.0, half_pi, 0.0),
        )
        blue_orbit = Orbit(
            amplitude=(15.0 * s, 0.0, 25.0),
            frequency=(0.5, 0.0, 0.5),
            phase=(0.0, 0.0, half_pi),
        )

    scene.add_sphere("red", (w * 0.5, h * 0.5, 0.0), 15.0 * s, params.red_color, orbit=red_orbit)
    scene.add_sphere(
        "green", (w * 0.25, h * 0.25, 0.0), 30.0 * s, params.green_color, orbit=green_orbit
    )
    scene.add_sphere(
        "blue", (w * 0.75, h * 0.75, 0.0), 45.0 * s, params.blue_color, orbit=blue_orbit
    )

    scene.upload()
    return scene
