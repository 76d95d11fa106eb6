"""Result type shared by every scattering model."""

import taichi as ti

from raykernel.core.vector import Color, vec3


@ti.dataclass
class ScatterRecord:
    """Outcome of scattering a ray at a surface.

    Attributes:
        did_scatter: 1 if an outgoing ray was produced, 0 if the ray was absorbed.
        attenuation: Color factor applied to the light carried by the outgoing ray.
        origin: Origin of the outgoing ray (the hit point).
        direction: Direction of the outgoing ray (not normalised).
        rng_state: Random stream state after the scatter call.
    """

    did_scatter: ti.i32
    attenuation: Color
    origin: vec3
    direction: vec3
    rng_state: ti.u32
