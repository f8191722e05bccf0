"""Path tracing integrator for Monte Carlo light transport.

This module implements the radiance estimator and the per-pixel sampling
loop. Each camera sample is traced through the scene: at every hit the
surface material either scatters the path, multiplying its throughput by
the material attenuation, or absorbs it. A path that escapes the scene picks
up the sky gradient; a path that is absorbed or still bouncing after
MAX_DEPTH scatters contributes black.

The estimator is written as a loop carrying the throughput and the current
ray, which is equivalent to the recursive form
``color(ray, depth) = attenuation * color(scattered, depth + 1)``.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, random_seed=42)
    >>> from src.minitracer.core.integrator import (
    ...     render_image, setup_render_target, get_image_buffer
    ... )
    >>> from src.minitracer.scene.spheres import create_default_scene
    >>> from src.minitracer.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_default_scene()
    >>> setup_camera(camera)
    >>> setup_render_target(256, 256)
    >>> render_image(num_samples=32)
    >>> buffer = get_image_buffer()
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.minitracer.camera.pinhole import get_ray_jittered
from src.minitracer.core.ray import normalize
from src.minitracer.materials.lambertian import scatter_lambertian_by_id
from src.minitracer.scene.intersection import intersect_scene
from src.minitracer.scene.manager import (
    MaterialType,
    get_material_type,
    get_material_type_index,
)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Number of scatters after which a path is cut off (returns black)
MAX_DEPTH = 20

# t_min and t_max for ray intersection; t_min keeps scattered rays from
# re-hitting the surface they leave
T_MIN = 0.001
T_MAX = float(np.finfo(np.float32).max)

# Sky gradient endpoints: straight down and straight up
SKY_BOTTOM_COLOR = vec3(1.0, 1.0, 1.0)
SKY_TOP_COLOR = vec3(0.5, 0.7, 1.0)

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Sum of all samples per pixel, indexed [i, j] with j = 0 at the bottom row
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Sample count per pixel
_sample_count = ti.field(dtype=ti.i32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffers.

    Sets the active image dimensions and clears the buffers.

    Args:
        width: Image width in pixels (1 to MAX_IMAGE_WIDTH).
        height: Image height in pixels (1 to MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the render target buffers to zero."""
    _color_buffer.fill(0.0)
    _sample_count.fill(0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Material Dispatch
# =============================================================================


@ti.func
def scatter_material(material_id: ti.i32, hit_point: vec3, normal: vec3):
    """Dispatch to the scatter function of the material that was hit.

    Args:
        material_id: The unified material ID (NO_MATERIAL for none).
        hit_point: The intersection point on the surface.
        normal: The unit surface normal.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter). The
        scattered ray starts at hit_point. did_scatter is 0 when the path
        is absorbed.
    """
    mat_type = get_material_type(material_id)
    type_index = get_material_type_index(material_id)

    scattered_direction = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0

    if mat_type == int(MaterialType.LAMBERTIAN):
        scattered, albedo, scatter_flag = scatter_lambertian_by_id(type_index, hit_point, normal)
        scattered_direction = scattered.direction
        attenuation = albedo
        did_scatter = scatter_flag

    return scattered_direction, attenuation, did_scatter


# =============================================================================
# Radiance Estimation
# =============================================================================


@ti.func
def sky_color(direction: vec3) -> vec3:
    """Background radiance for a ray that leaves the scene.

    Blends white (looking straight down) into sky blue (straight up) by
    ``t = 0.5 * (normalize(direction).y + 1)``; x and z do not matter.
    """
    unit_direction = normalize(direction)
    t = 0.5 * (unit_direction.y + 1.0)
    return (1.0 - t) * SKY_BOTTOM_COLOR + t * SKY_TOP_COLOR


@ti.func
def trace_ray(ray_origin: vec3, ray_direction: vec3) -> vec3:
    """Estimate the radiance arriving along a ray.

    At bounce ``depth``:
        - miss: the path ends with throughput * sky_color(direction)
        - hit with depth < MAX_DEPTH and a scattering material: throughput is
          multiplied by the attenuation and the scattered ray is followed
        - any other hit: the path ends black

    Args:
        ray_origin: Origin of the primary ray.
        ray_direction: Direction of the primary ray (need not be normalized).

    Returns:
        The estimated radiance (RGB). Components are never negative when
        every albedo is in [0, 1].
    """
    origin = ray_origin
    direction = ray_direction
    radiance = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)

    # Active flag for path continuation
    active = 1

    for depth in range(MAX_DEPTH + 1):
        if active == 1:
            rec = intersect_scene(origin, direction, T_MIN, T_MAX)

            if rec.hit == 0:
                radiance = throughput * sky_color(direction)
                active = 0
            elif depth < MAX_DEPTH:
                scattered_direction, attenuation, did_scatter = scatter_material(
                    rec.material_id, rec.point, rec.normal
                )
                if did_scatter == 1:
                    throughput *= attenuation
                    origin = rec.point
                    direction = scattered_direction
                else:
                    active = 0
            else:
                active = 0

    return radiance


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_pixels(width: ti.i32, height: ti.i32, num_samples: ti.i32):
    """Add num_samples jittered samples to every pixel.

    Pixels are visited one at a time from the top row down, left to right,
    drawing all samples of a pixel before moving on. The loop is serialized
    so the random stream is consumed in a fixed order.
    """
    ti.loop_config(serialize=True)
    for row, i in ti.ndrange(height, width):
        j = height - 1 - row
        color = vec3(0.0, 0.0, 0.0)
        for _ in range(num_samples):
            ray = get_ray_jittered(i, j, width, height)
            color += trace_ray(ray.origin, ray.direction)
        _color_buffer[i, j] += color
        _sample_count[i, j] += num_samples


@ti.kernel
def _render_single_pixel(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    """Render a single sample for a specific pixel."""
    ray = get_ray_jittered(pixel_i, pixel_j, width, height)
    return trace_ray(ray.origin, ray.direction)


@ti.kernel
def _trace_single_ray(origin: vec3, direction: vec3) -> vec3:
    """Trace one ray through the scene."""
    return trace_ray(origin, direction)


# =============================================================================
# Public Rendering API
# =============================================================================


def trace_ray_python(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> tuple[float, float, float]:
    """Trace a single ray from Python and return its radiance.

    Args:
        origin: Ray origin as (x, y, z).
        direction: Ray direction as (x, y, z), need not be normalized.

    Returns:
        Tuple of (R, G, B) linear radiance.
    """
    color = _trace_single_ray(vec3(*origin), vec3(*direction))
    return (float(color[0]), float(color[1]), float(color[2]))


def render_sample(pixel_i: int, pixel_j: int) -> tuple[float, float, float]:
    """Render a single sample for a specific pixel.

    Intended for tests; does not touch the accumulation buffers.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).

    Returns:
        Tuple of (R, G, B) color values.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    color = _render_single_pixel(pixel_i, pixel_j, width, height)

    return (float(color[0]), float(color[1]), float(color[2]))


def render_image(num_samples: int = 1) -> None:
    """Add num_samples samples to every pixel of the render target.

    Can be called repeatedly; the image is the average of everything
    accumulated since the last clear.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    if num_samples <= 0:
        return

    width, height = get_image_dimensions()
    _render_pixels(width, height, num_samples)


def get_total_samples() -> int:
    """Get the number of samples accumulated per pixel.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    return int(_sample_count[0, 0])


def get_image_numpy() -> npt.NDArray[np.float32]:
    """Get the averaged linear image as a NumPy array.

    Values are not clamped. Pixels without samples are black.

    Returns:
        Array of shape (height, width, 3); row 0 is the top of the image.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    sums = _color_buffer.to_numpy()[:width, :height, :]
    counts = _sample_count.to_numpy()[:width, :height].astype(np.float32)

    image = np.zeros_like(sums)
    sampled = counts > 0
    image[sampled] = sums[sampled] / counts[sampled][:, np.newaxis]

    # (width, height, 3) -> (height, width, 3), then put the top row first
    image = np.transpose(image, (1, 0, 2))
    image = np.flipud(image)

    return np.ascontiguousarray(image, dtype=np.float32)


def get_image_buffer() -> npt.NDArray[np.float32]:
    """Get the averaged image as a flat row-major buffer.

    Returns:
        Array of shape (width * height, 3), starting at the top-left pixel
        and scanning each row left to right.
    """
    return get_image_numpy().reshape(-1, 3)
