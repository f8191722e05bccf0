"""Scene building: material ids and the surface list.

Every material gets a scene-wide id. Kernels resolve an id to
``(material_type, type_local_index)`` through two Taichi fields, so the
tracer can pick the scatter function and the registry slot that hold the
material's parameters.

A sphere may only reference a material that is already registered, or
``NO_MATERIAL`` for a surface that absorbs every ray.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.minitracer.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> red = scene.add_lambertian_material(albedo=(0.8, 0.3, 0.3))
    >>> scene.add_sphere(center=(0, 0, -1), radius=0.5, material_id=red)
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

from src.minitracer.materials.lambertian import (
    add_lambertian_material,
    clear_lambertian_materials,
)
from src.minitracer.scene.intersection import (
    add_sphere,
    clear_scene,
    get_sphere_count,
)

vec3 = tm.vec3

Color = tuple[float, float, float]
Point = tuple[float, float, float]


class MaterialType(IntEnum):
    """Scatter model selected by the tracer for a material id."""

    LAMBERTIAN = 0


# Material id for surfaces that absorb every ray
NO_MATERIAL = -1

MAX_MATERIALS = 256

# Indexed by material id
material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
material_type_indices = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def _clear_material_tracking() -> None:
    num_materials[None] = 0


@ti.func
def get_material_type(material_id: ti.i32) -> ti.i32:
    """MaterialType of a material id, or -1 for NO_MATERIAL and unknown ids."""
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_types[material_id]
    return result


@ti.func
def get_material_type_index(material_id: ti.i32) -> ti.i32:
    """Registry slot of a material id within its type, or -1 if there is none."""
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_type_indices[material_id]
    return result


class SceneManager:
    """Builds the surface list and the materials it references.

    Only one scene exists at a time: creating a manager clears the shared
    Taichi fields.

    Attributes:
        albedos: Albedo of each material, indexed by material id.
        spheres: ``(center, radius, material_id)`` per sphere, in surface
            list order.
    """

    def __init__(self) -> None:
        self.albedos: list[Color] = []
        self.spheres: list[tuple[Point, float, int]] = []
        self.clear()

    def clear(self) -> None:
        """Remove every sphere and material."""
        clear_scene()
        clear_lambertian_materials()
        _clear_material_tracking()
        self.albedos.clear()
        self.spheres.clear()

    def add_lambertian_material(self, albedo: Color) -> int:
        """Register a diffuse material and return its material id.

        Raises:
            RuntimeError: If MAX_MATERIALS materials already exist.
            ValueError: If any albedo component is outside [0, 1].
        """
        material_id = num_materials[None]
        if material_id >= MAX_MATERIALS:
            raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

        material_types[material_id] = int(MaterialType.LAMBERTIAN)
        material_type_indices[material_id] = add_lambertian_material(albedo)
        num_materials[None] = material_id + 1

        self.albedos.append(tuple(albedo))
        return material_id

    def add_sphere(self, center: Point, radius: float, material_id: int) -> int:
        """Append a sphere to the surface list and return its index.

        Raises:
            RuntimeError: If the surface list is full.
            ValueError: If material_id is neither registered nor NO_MATERIAL.
        """
        if material_id != NO_MATERIAL and not 0 <= material_id < num_materials[None]:
            raise ValueError(f"Invalid material_id: {material_id}")

        index = add_sphere(vec3(*center), radius, material_id)
        self.spheres.append((tuple(center), radius, material_id))
        return index

    def add_lambertian_sphere(
        self, center: Point, radius: float, albedo: Color
    ) -> tuple[int, int]:
        """Add a sphere with a new diffuse material of its own.

        Returns:
            Tuple of (sphere_index, material_id).
        """
        material_id = self.add_lambertian_material(albedo)
        return self.add_sphere(center, radius, material_id), material_id

    def get_material_count(self) -> int:
        return int(num_materials[None])

    def get_sphere_count(self) -> int:
        return get_sphere_count()
