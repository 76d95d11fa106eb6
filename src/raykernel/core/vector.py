"""Vector and color algebra for the device-side kernels.

Points, directions, normals and colors all share the same 3-component double
precision vector type. Addition, subtraction and scaling by a scalar are the
native Taichi vector operators (``a + b``, ``a - b``, ``a * s``, ``a / s``);
this module adds the named operations the rest of the tracer relies on.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from raykernel.core.vector import vec3, cross, unit
    >>> @ti.kernel
    ... def k() -> ti.f64:
    ...     return unit(cross(vec3(1.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0))).z
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

# Scalar type used for fields; vectors follow default_fp, which
# init_backend sets to ti.f64
real = ti.f64

# 3D vector (points, directions, normals)
vec3 = tm.vec3

# RGB color, structurally identical to vec3
Color = tm.vec3


@ti.func
def dot(a: vec3, b: vec3) -> real:
    """Dot product a . b."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Right-handed cross product a x b.

    Component form
        (y1*z2 - z1*y2, -(x1*z2 - z1*x2), x1*y2 - y1*x2)
    """
    return tm.cross(a, b)


@ti.func
def squared_length(v: vec3) -> real:
    """Squared Euclidean length, avoiding the square root."""
    return tm.dot(v, v)


@ti.func
def length(v: vec3) -> real:
    """Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def unit(v: vec3) -> vec3:
    """Scale a vector to unit length.

    The input must not be the zero vector. In Taichi debug mode a zero-length
    input raises; otherwise the result is NaN.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v.
    """
    assert tm.length(v) > 0.0, "cannot normalise a zero-length vector"
    return tm.normalize(v)


@ti.func
def mul_color(a: Color, b: Color) -> Color:
    """Component-wise product of two colors (attenuation of light)."""
    return a * b


# =============================================================================
# Host-side helpers (NumPy)
# =============================================================================


def as_vector(values, name: str = "vector") -> npt.NDArray[np.float64]:
    """Convert a 3-sequence to a finite float64 NumPy vector.

    Args:
        values: Any sequence of three numbers.
        name: Name used in error messages.

    Returns:
        A NumPy array of shape (3,).

    Raises:
        ValueError: If the input does not have three finite components.
    """
    array = np.asarray(values, dtype=np.float64)
    if array.shape != (3,):
        raise ValueError(f"{name} must have 3 components, got shape {array.shape}")
    if not np.all(np.isfinite(array)):
        raise ValueError(f"{name} must be finite, got {tuple(array.tolist())}")
    return array


def unit_vector(values, name: str = "vector") -> npt.NDArray[np.float64]:
    """Host-side normalisation that fails fast on zero-length input.

    Raises:
        ValueError: If the vector has zero length.
    """
    array = as_vector(values, name)
    norm = float(np.linalg.norm(array))
    if norm == 0.0:
        raise ValueError(f"{name} has zero length and cannot be normalised")
    return array / norm
