"""Materials module for surface scattering models.

Components:
    lambertian: Ideal diffuse (Lambertian) reflection

Each material provides a scatter function returning
``(scattered_ray, attenuation, did_scatter)``. ``did_scatter == 0`` means
the path is absorbed; the tracer then returns black for it. Lambertian
surfaces always scatter; surfaces registered without a material
(``NO_MATERIAL`` in the scene manager) never do.

Material properties live in Taichi fields indexed by a type-local id so the
tracer can look them up inside kernels.
"""

from .lambertian import (
    add_lambertian_material,
    clear_lambertian_materials,
    get_lambertian_albedo,
    get_lambertian_material_count,
    scatter_lambertian,
    scatter_lambertian_by_id,
)

__all__ = [
    "scatter_lambertian",
    "scatter_lambertian_by_id",
    "add_lambertian_material",
    "clear_lambertian_materials",
    "get_lambertian_material_count",
    "get_lambertian_albedo",
]
