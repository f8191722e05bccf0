"""A minimal Taichi-based offline path tracer for diffuse spheres.

Renders a static scene of Lambertian spheres lit by a sky gradient, using
jittered Monte Carlo sampling per pixel and a capped number of bounces.

Subpackages:
    core: Rays, vector helpers, radiance estimation and the sampling loop
    geometry: Sphere primitive and ray-sphere intersection
    materials: Diffuse scattering and the material registry
    scene: Surface list, scene manager and the default scene
    camera: Fixed pinhole camera frame
    preview: Gamma mapping, PPM/PNG export and viewing
"""

__version__ = "0.1.0"
