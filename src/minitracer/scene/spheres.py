"""Default diffuse-spheres scene.

The scene is made of four diffuse spheres:
- A small red sphere in front of the camera
- A huge green sphere acting as the ground
- A small gold sphere to the right
- A huge grey sphere that encloses the camera

Only the first ``num_active`` spheres enter the surface list. With the
default of two the image shows the red sphere resting on the green ground
under the sky. With ``num_active=4`` every path that would reach the sky
first meets the inside of the enclosing sphere; its normals point outward,
so the scattered ray leaves it and the sky shows through tinted grey.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.minitracer.scene.spheres import create_default_scene
    >>> from src.minitracer.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_default_scene()
    >>> setup_camera(camera)
"""

from dataclasses import dataclass

from src.minitracer.camera.pinhole import PinholeCamera
from src.minitracer.scene.manager import SceneManager


@dataclass(frozen=True)
class SphereSpec:
    """A sphere of the default scene with its diffuse albedo."""

    center: tuple[float, float, float]
    radius: float
    albedo: tuple[float, float, float]


DEFAULT_SPHERES: tuple[SphereSpec, ...] = (
    SphereSpec(center=(0.0, 0.0, -1.0), radius=0.5, albedo=(0.8, 0.3, 0.3)),
    SphereSpec(center=(0.0, -100.5, -1.0), radius=100.0, albedo=(0.4, 0.8, 0.3)),
    SphereSpec(center=(1.0, 0.0, -1.0), radius=0.5, albedo=(0.8, 0.6, 0.2)),
    SphereSpec(center=(-1.0, 0.0, 1.0), radius=100.0, albedo=(0.8, 0.8, 0.8)),
)

# Number of spheres placed in the surface list by default
DEFAULT_ACTIVE_SPHERES = 2


def create_default_scene(
    num_active: int = DEFAULT_ACTIVE_SPHERES,
) -> tuple[SceneManager, PinholeCamera]:
    """Create the default spheres scene and its camera.

    Each sphere gets its own Lambertian material, registered before the
    sphere itself.

    Args:
        num_active: How many of DEFAULT_SPHERES, in order, to place in the
            surface list.

    Returns:
        A tuple of (SceneManager, PinholeCamera) with the default camera frame.

    Raises:
        ValueError: If num_active is outside [0, len(DEFAULT_SPHERES)].
    """
    if not 0 <= num_active <= len(DEFAULT_SPHERES):
        raise ValueError(
            f"num_active must be between 0 and {len(DEFAULT_SPHERES)}, got {num_active}"
        )

    scene = SceneManager()
    for spec in DEFAULT_SPHERES[:num_active]:
        scene.add_lambertian_sphere(spec.center, spec.radius, spec.albedo)

    return scene, PinholeCamera()
