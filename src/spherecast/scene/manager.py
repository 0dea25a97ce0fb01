"""Scene container coordinating Python-side scene state and storage fields.

The Scene is owned by the frame driver. It keeps the authoritative
Python-side description of every sphere and the light (names, anchors,
orbits, current centers) and pushes the current centers into the Taichi
storage fields with upload(). The shading kernels read those fields during a
frame; positions change only between frames.

Spheres are evaluated in insertion order, which also decides which sphere
wins on a shared ray under the default hit mode.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spherecast.scene.manager import Scene, SceneLight
    >>> scene = Scene(SceneLight(center=(125.0, 125.0, -20.0)))
    >>> scene.add_sphere("red", (125.0, 125.0, 0.0), 15.0, (255.0, 0.0, 110.0))
    >>> scene.upload()
"""

from __future__ import annotations

from dataclasses import dataclass

from spherecast.core.animation import Orbit, Vec3Tuple
from spherecast.geometry.sphere import SphereKind
from spherecast.scene.storage import (
    add_sphere,
    clear_scene,
    get_scene_generation,
    get_sphere_count,
    set_light,
    set_light_center,
    set_sphere_center,
)

WHITE = (255.0, 255.0, 255.0)


@dataclass
class SceneSphere:
    """A sphere in the scene.

    Attributes:
        name: Unique name used for lookup.
        center: Current center; rewritten by the animation step.
        radius: Radius, fixed after construction.
        color: Base RGB color with channels in [0, 255].
        kind: Shading treatment tag.
        orbit: Optional path followed around the anchor.
        anchor: Rest position the orbit is evaluated around. Defaults to the
            initial center.
        index: Position in the storage fields (set when added to a Scene).
    """

    name: str
    center: Vec3Tuple
    radius: float
    color: Vec3Tuple
    kind: SphereKind = SphereKind.STANDARD
    orbit: Orbit | None = None
    anchor: Vec3Tuple | None = None
    index: int = -1

    def __post_init__(self) -> None:
        if self.radius <= 0.0:
            raise ValueError(f"Sphere {self.name!r} radius must be positive, got {self.radius}")
        self.center = tuple(float(c) for c in self.center)
        self.color = tuple(float(c) for c in self.color)
        if self.anchor is None:
            self.anchor = self.center


@dataclass
class SceneLight:
    """The point light, modelled as a sphere used as position + color source.

    Attributes:
        center: Current center.
        radius: Scales the light normal used by the stylized shadow probe.
        color: RGB color with channels in [0, 255].
        orbit: Optional path followed around the anchor.
        anchor: Rest position. Defaults to the initial center.
    """

    center: Vec3Tuple
    radius: float = 40.0
    color: Vec3Tuple = WHITE
    orbit: Orbit | None = None
    anchor: Vec3Tuple | None = None

    def __post_init__(self) -> None:
        if self.radius <= 0.0:
            raise ValueError(f"Light radius must be positive, got {self.radius}")
        self.center = tuple(float(c) for c in self.center)
        if self.anchor is None:
            self.anchor = self.center


class Scene:
    """Ordered sphere collection plus the light.

    Creating a Scene clears the storage fields: only one scene is live at a
    time, matching the single frame buffer.

    A Scene superseded by a newer one refuses to upload or add spheres,
    since its indices now point into the newer scene.

    Attributes:
        spheres: Spheres in evaluation order.
        light: The light source.
    """

    def __init__(self, light: SceneLight) -> None:
        self.spheres: list[SceneSphere] = []
        self.light = light
        self._by_name: dict[str, SceneSphere] = {}
        clear_scene()
        self._generation = get_scene_generation()
        set_light(light.center, light.radius, light.color)

    @property
    def is_current(self) -> bool:
        """Whether this scene still owns the storage fields."""
        return self._generation == get_scene_generation()

    def _check_current(self) -> None:
        if not self.is_current:
            raise RuntimeError(
                "Scene was replaced by a newer scene; its storage slots are no longer valid"
            )

    def add_sphere(
        self,
        name: str,
        center: Vec3Tuple,
        radius: float,
        color: Vec3Tuple,
        kind: SphereKind = SphereKind.STANDARD,
        orbit: Orbit | None = None,
    ) -> SceneSphere:
        """Append a sphere to the evaluation order.

        Args:
            name: Unique sphere name.
            center: Initial center (also the orbit anchor).
            radius: Radius (must be positive).
            color: Base RGB color, channels in [0, 255].
            kind: Shading treatment tag.
            orbit: Optional animation path.

        Returns:
            The SceneSphere record.

        Raises:
            ValueError: If the name is taken or the radius is not positive.
            RuntimeError: If the storage capacity is exceeded or the
                scene was replaced by a newer one.
        """
        self._check_current()
        if name in self._by_name:
            raise ValueError(f"Sphere name {name!r} already in scene")
        sphere = SceneSphere(
            name=name,
            center=center,
            radius=radius,
            color=color,
            kind=kind,
            orbit=orbit,
        )
        sphere.index = add_sphere(sphere.center, sphere.radius, sphere.color, sphere.kind)
        self.spheres.append(sphere)
        self._by_name[name] = sphere
        return sphere

    def get(self, name: str) -> SceneSphere:
        """Look up a sphere by name.

        Raises:
            KeyError: If no sphere has that name.
        """
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f"No sphere named {name!r} in scene") from None

    @property
    def background(self) -> SceneSphere | None:
        """The first BACKGROUND sphere, if any."""
        for sphere in self.spheres:
            if sphere.kind == SphereKind.BACKGROUND:
                return sphere
        return None

    @property
    def emitters(self) -> list[SceneSphere]:
        """All EMITTER spheres (visible light bulbs)."""
        return [s for s in self.spheres if s.kind == SphereKind.EMITTER]

    @property
    def sphere_count(self) -> int:
        """Number of spheres in the scene."""
        return len(self.spheres)

    def upload(self) -> None:
        """Push the current sphere and light centers into the storage fields.

        Call between frames, after the animation step.

        Raises:
            RuntimeError: If a newer Scene has taken over the storage fields.
        """
        self._check_current()
        for sphere in self.spheres:
            set_sphere_center(sphere.index, sphere.center)
        set_light_center(self.light.center)

    def is_synced(self) -> bool:
        """Check that the storage holds exactly this scene's spheres."""
        return self.is_current and get_sphere_count() == len(self.spheres)

    def __repr__(self) -> str:
        names = ", ".join(s.name for s in self.spheres)
        return f"Scene(spheres=[{names}], light={self.light.center})"
