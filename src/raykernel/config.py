"""Render configuration and Taichi backend initialisation.

Example:
    >>> from raykernel.config import RenderConfig, init_backend
    >>> init_backend("cpu")
    >>> config = RenderConfig(width=256, height=256, samples_per_pixel=100)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import taichi as ti

logger = logging.getLogger(__name__)

# Bounce cutoff for the color integrator
DEFAULT_MAX_DEPTH = 50

# Seed used when none is given, matching the reference renders
DEFAULT_SEED = 1

_ARCHS = {
    "cpu": ti.cpu,
    "gpu": ti.gpu,
    "cuda": ti.cuda,
}


@dataclass(frozen=True)
class RenderConfig:
    """Parameters of a single render call.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        samples_per_pixel: Number of jittered samples averaged per pixel.
        max_depth: Maximum number of bounces before a path returns black.
        seed: Seed of the per-pixel random streams.
    """

    width: int
    height: int
    samples_per_pixel: int = 1
    max_depth: int = DEFAULT_MAX_DEPTH
    seed: int = DEFAULT_SEED

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Image dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.samples_per_pixel <= 0:
            raise ValueError(
                f"samples_per_pixel must be positive, got {self.samples_per_pixel}"
            )
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        return self.width / self.height


def init_backend(arch: str = "cpu", *, debug: bool = False) -> str:
    """Initialise Taichi with double precision floats.

    The device modules store vectors as ``ti.f64``; initialising with
    ``default_fp=ti.f64`` keeps literals and locals at the same precision.

    Args:
        arch: One of "cpu", "gpu" or "cuda". GPU backends fall back
            to the CPU when they cannot be initialised.
        debug: Enable Taichi debug mode, which turns kernel assertions (such
            as normalising a zero-length vector) into exceptions.

    Returns:
        The name of the backend actually in use.

    Raises:
        ValueError: If the architecture name is unknown.
    """
    if arch not in _ARCHS:
        raise ValueError(f"Unknown arch '{arch}', expected one of {sorted(_ARCHS)}")

    if arch == "cpu":
        ti.init(arch=ti.cpu, default_fp=ti.f64, debug=debug)
        return "cpu"

    try:
        ti.init(arch=_ARCHS[arch], default_fp=ti.f64, debug=debug)
        return arch
    except Exception:
        logger.warning("Could not initialise %s backend, falling back to cpu", arch)
        ti.init(arch=ti.cpu, default_fp=ti.f64, debug=debug)
        return "cpu"
