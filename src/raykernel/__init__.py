"""Taichi path tracing kernel for sphere scenes.

This package renders a scene of spheres through a thin-lens camera using
stochastic recursive ray tracing, with support for:
- Diffuse (Lambertian), fuzzy metal and glass (dielectric) materials
- Depth of field from a thin-lens aperture
- Seeded, per-pixel random streams for reproducible renders

Subpackages:
    core: Vector algebra, random streams, rays, the color integrator and render loop
    geometry: Sphere primitive and ray-sphere intersection
    materials: Scattering models and the material registry
    scene: Device storage for spheres, the World aggregate and preset scenes
    camera: Thin-lens camera with ray generation
    preview: Image export utilities

Taichi must be initialised with double precision before any device module is
imported, see ``raykernel.config.init_backend``.
"""

__version__ = "0.1.0"
