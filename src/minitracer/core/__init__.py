"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    ray: Ray data structure, vector helpers and unit-sphere sampling
    integrator: Radiance estimation, render target and sampling loop
    progressive: Batched rendering with progress callbacks

The integrator traces each camera sample through the scene, bouncing off
diffuse surfaces until the path escapes to the sky, is absorbed, or reaches
the bounce cap.
"""

from .ray import (
    Ray,
    cross,
    dot,
    length,
    length_squared,
    make_ray,
    normalize,
    random_in_unit_sphere,
    ray_at,
    vec3,
)

# Note: integrator and progressive are NOT imported here to avoid circular imports.
# Import directly from src.minitracer.core.integrator or src.minitracer.core.progressive.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "random_in_unit_sphere",
]
