"""Explicit, seeded random streams for Monte Carlo sampling.

Every function that consumes randomness takes a ``ti.u32`` generator state
and returns the advanced state alongside its value, so the caller owns the
stream. The render loop derives one stream per pixel from the render seed,
which makes a render a pure function of its inputs no matter how Taichi
schedules the parallel pixel loop.

The stream is a xorshift32 generator seeded through a Wang integer hash:
    state = wang_hash(seed ^ wang_hash(index))

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from raykernel.core.sampling import seed_stream, random_real
    >>> @ti.kernel
    ... def draw() -> ti.f64:
    ...     state = seed_stream(1, 0)
    ...     value, state = random_real(state)
    ...     return value
"""

import taichi as ti

from raykernel.core.vector import real, squared_length, vec3

# Maps a u32 onto [0, 1)
_U32_TO_UNIT = 1.0 / 4294967296.0

# Upper bound on rejection sampling iterations
MAX_REJECTION_TRIES = 100


@ti.func
def wang_hash(key: ti.u32) -> ti.u32:
    """Thomas Wang's 32-bit integer hash."""
    k = ti.cast(key, ti.u32)
    k = (k ^ ti.u32(61)) ^ (k >> ti.u32(16))
    k = k * ti.u32(9)
    k = k ^ (k >> ti.u32(4))
    k = k * ti.u32(0x27D4EB2D)
    k = k ^ (k >> ti.u32(15))
    return k


@ti.func
def seed_stream(seed: ti.u32, index: ti.u32) -> ti.u32:
    """Derive the initial state of an independent stream.

    Args:
        seed: The render seed.
        index: Stream index (for example the flattened pixel index).

    Returns:
        A non-zero generator state.
    """
    state = wang_hash(ti.cast(seed, ti.u32) ^ wang_hash(ti.cast(index, ti.u32)))
    # xorshift never leaves the zero state
    if state == ti.u32(0):
        state = ti.u32(1)
    return state


@ti.func
def next_u32(state: ti.u32) -> ti.u32:
    """Advance a xorshift32 generator by one step."""
    x = ti.cast(state, ti.u32)
    x = x ^ (x << ti.u32(13))
    x = x ^ (x >> ti.u32(17))
    x = x ^ (x << ti.u32(5))
    return x


@ti.func
def random_real(state: ti.u32):
    """Draw a uniform number in [0, 1).

    Returns:
        A tuple (value, state).
    """
    s = next_u32(state)
    return ti.cast(s, real) * _U32_TO_UNIT, s


@ti.func
def random_in_unit_sphere(state: ti.u32):
    """Random point strictly inside the unit sphere (rejection sampling).

    Returns:
        A tuple (point, state) with squared_length(point) < 1.
    """
    s = ti.cast(state, ti.u32)
    p = vec3(0.0, 0.0, 0.0)
    found = False
    for _ in range(MAX_REJECTION_TRIES):
        if not found:
            x, s = random_real(s)
            y, s = random_real(s)
            z, s = random_real(s)
            candidate = 2.0 * vec3(x, y, z) - vec3(1.0, 1.0, 1.0)
            if squared_length(candidate) < 1.0:
                p = candidate
                found = True
    return p, s


@ti.func
def random_in_unit_disk(state: ti.u32):
    """Random point strictly inside the unit disk in the xy-plane.

    Used for lens sampling in the thin-lens camera.

    Returns:
        A tuple (point, state) with point.z == 0 and x^2 + y^2 < 1.
    """
    s = ti.cast(state, ti.u32)
    p = vec3(0.0, 0.0, 0.0)
    found = False
    for _ in range(MAX_REJECTION_TRIES):
        if not found:
            x, s = random_real(s)
            y, s = random_real(s)
            candidate = vec3(2.0 * x - 1.0, 2.0 * y - 1.0, 0.0)
            if squared_length(candidate) < 1.0:
                p = candidate
                found = True
    return p, s
