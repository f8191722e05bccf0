"""Lambertian (ideal diffuse) material implementation.

The scattered direction is chosen with the unit-sphere offset technique:
a target point is placed at ``hit_point + normal + p`` where ``p`` is a
uniformly sampled point inside the unit sphere, and the scattered ray runs
from the hit point toward that target. The resulting distribution leans
toward the normal, approximating cosine-weighted diffuse reflection, so the
attenuation is simply the albedo.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.minitracer.materials.lambertian import scatter_lambertian
    >>> # Use within a Taichi kernel:
    >>> # scattered, attenuation, did_scatter = scatter_lambertian(albedo, point, normal)
"""

import taichi as ti
import taichi.math as tm

from src.minitracer.core.ray import make_ray, random_in_unit_sphere

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def scatter_lambertian(albedo: vec3, hit_point: vec3, normal: vec3):
    """Scatter an incoming ray off a diffuse surface.

    Lambertian surfaces always scatter; the incoming direction does not
    influence the outgoing one.

    Args:
        albedo: The diffuse reflectance color (RGB, each component in [0, 1]).
        hit_point: The intersection point on the surface.
        normal: The unit surface normal at the hit point.

    Returns:
        A tuple of (scattered, attenuation, did_scatter) where:
        - scattered: Ray from hit_point toward hit_point + normal + p.
        - attenuation: The albedo.
        - did_scatter: Always 1.
    """
    target = hit_point + normal + random_in_unit_sphere()
    scattered = make_ray(hit_point, target - hit_point)
    return scattered, albedo, 1


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of Lambertian materials in the scene
MAX_LAMBERTIAN_MATERIALS = 256

# Storage for Lambertian material properties
lambertian_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LAMBERTIAN_MATERIALS)
num_lambertian_materials = ti.field(dtype=ti.i32, shape=())


def clear_lambertian_materials() -> None:
    """Clear all Lambertian materials.

    Resets the material count to zero. Existing data in the field will be
    overwritten when new materials are added.
    """
    num_lambertian_materials[None] = 0


def add_lambertian_material(albedo: tuple[float, float, float]) -> int:
    """Add a Lambertian material to the material registry.

    Args:
        albedo: The diffuse reflectance color as (R, G, B) tuple.
            Each component must be in [0, 1].

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any albedo component is outside [0, 1].
    """
    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )

    idx = num_lambertian_materials[None]
    if idx >= MAX_LAMBERTIAN_MATERIALS:
        raise RuntimeError(
            f"Maximum number of Lambertian materials ({MAX_LAMBERTIAN_MATERIALS}) exceeded"
        )

    lambertian_albedos[idx] = vec3(albedo[0], albedo[1], albedo[2])
    num_lambertian_materials[None] = idx + 1
    return idx


def get_lambertian_material_count() -> int:
    """Get the number of Lambertian materials in the registry."""
    return int(num_lambertian_materials[None])


@ti.func
def get_lambertian_albedo(material_idx: ti.i32) -> vec3:
    """Get the albedo for a Lambertian material by registry index."""
    return lambertian_albedos[material_idx]


@ti.func
def scatter_lambertian_by_id(material_idx: ti.i32, hit_point: vec3, normal: vec3):
    """Scatter off a Lambertian material looked up by registry index.

    Returns:
        A tuple of (scattered, attenuation, did_scatter).
    """
    albedo = get_lambertian_albedo(material_idx)
    return scatter_lambertian(albedo, hit_point, normal)
