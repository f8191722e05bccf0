"""Pinhole camera frame for primary ray generation.

The camera is a fixed pinhole: an origin and an image-plane rectangle given
by its lower-left corner and two spanning vectors. The default frame sits at
the world origin looking down -z onto a 2x2 plane at unit distance, which is
a 90 degree vertical field of view for a square image.

Camera rays are built from unnormalized directions
``lower_left + u * horizontal + v * vertical - origin``.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.minitracer.camera.pinhole import PinholeCamera, setup_camera, get_ray
    >>>
    >>> setup_camera(PinholeCamera())
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(0.5, 0.5)  # Ray through image center
"""

from dataclasses import dataclass

import taichi as ti

from src.minitracer.core.ray import Ray, make_ray, vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class PinholeCamera:
    """Configuration for a pinhole camera frame.

    Attributes:
        origin: Camera position in world space.
        lower_left_corner: Lower-left corner of the image plane.
        horizontal: Vector spanning the full image width.
        vertical: Vector spanning the full image height.
    """

    origin: tuple[float, float, float] = (0.0, 0.0, 0.0)
    lower_left_corner: tuple[float, float, float] = (-1.0, -1.0, -1.0)
    horizontal: tuple[float, float, float] = (2.0, 0.0, 0.0)
    vertical: tuple[float, float, float] = (0.0, 2.0, 0.0)


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_viewport_horizontal = ti.Vector.field(3, dtype=ti.f32, shape=())
_viewport_vertical = ti.Vector.field(3, dtype=ti.f32, shape=())
_lower_left_corner = ti.Vector.field(3, dtype=ti.f32, shape=())


def setup_camera(camera: PinholeCamera) -> None:
    """Load a camera frame into the fields read by ray generation.

    Must be called from Python (not from within a Taichi kernel) before
    rendering.
    """
    _camera_origin[None] = list(camera.origin)
    _viewport_horizontal[None] = list(camera.horizontal)
    _viewport_vertical[None] = list(camera.vertical)
    _lower_left_corner[None] = list(camera.lower_left_corner)


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def get_ray(u: ti.f32, v: ti.f32) -> Ray:
    """Generate a ray through normalized image coordinates (u, v).

    Args:
        u: Horizontal coordinate, 0 at the left edge and 1 at the right.
        v: Vertical coordinate, 0 at the bottom edge and 1 at the top.

    Returns:
        A Ray from the camera origin toward the point (u, v) on the image
        plane. The direction is not normalized.
    """
    point_on_viewport = (
        _lower_left_corner[None] + u * _viewport_horizontal[None] + v * _viewport_vertical[None]
    )
    origin = _camera_origin[None]
    return make_ray(origin, point_on_viewport - origin)


@ti.func
def get_ray_jittered(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate a ray through a uniformly random point of a pixel.

    ``u = (i + rand) / width`` and ``v = (j + rand) / height`` with each
    ``rand`` uniform in [0, 1).

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.
    """
    jitter_u = ti.random(ti.f32)
    jitter_v = ti.random(ti.f32)

    u = (ti.cast(pixel_i, ti.f32) + jitter_u) / ti.cast(width, ti.f32)
    v = (ti.cast(pixel_j, ti.f32) + jitter_v) / ti.cast(height, ti.f32)

    return get_ray(u, v)


@ti.func
def get_camera_origin() -> vec3:
    """Get the camera origin in world space."""
    return _camera_origin[None]


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with origin, horizontal, vertical and lower_left.
    """
    origin_vec = _camera_origin[None]
    h_vec = _viewport_horizontal[None]
    vert_vec = _viewport_vertical[None]
    ll_vec = _lower_left_corner[None]

    return {
        "origin": (float(origin_vec[0]), float(origin_vec[1]), float(origin_vec[2])),
        "horizontal": (float(h_vec[0]), float(h_vec[1]), float(h_vec[2])),
        "vertical": (float(vert_vec[0]), float(vert_vec[1]), float(vert_vec[2])),
        "lower_left": (float(ll_vec[0]), float(ll_vec[1]), float(ll_vec[2])),
    }
