"""Scene module for scene management and hit records.

Components:
    intersection: Surface list storage and closest-hit queries
    manager: Scene manager coordinating spheres and materials
    spheres: The default diffuse-spheres scene

Scene data lives in Taichi fields in a Structure-of-Arrays layout so that
kernels can walk the surface list and look up materials by id.
"""

from .intersection import (
    MAX_SPHERES,
    SceneHitRecord,
    add_sphere,
    clear_scene,
    get_sphere_count,
    intersect_scene,
)
from .manager import (
    MAX_MATERIALS,
    NO_MATERIAL,
    MaterialType,
    SceneManager,
    get_material_type,
    get_material_type_index,
    material_type_indices,
    material_types,
    num_materials,
)
from .spheres import (
    DEFAULT_ACTIVE_SPHERES,
    DEFAULT_SPHERES,
    SphereSpec,
    create_default_scene,
)

__all__ = [
    # Intersection module
    "SceneHitRecord",
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "intersect_scene",
    "MAX_SPHERES",
    # Manager module
    "SceneManager",
    "MaterialType",
    "MAX_MATERIALS",
    "NO_MATERIAL",
    "get_material_type",
    "get_material_type_index",
    "material_types",
    "material_type_indices",
    "num_materials",
    # Default scene
    "SphereSpec",
    "DEFAULT_SPHERES",
    "DEFAULT_ACTIVE_SPHERES",
    "create_default_scene",
]
