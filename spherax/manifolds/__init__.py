"""Riemannian manifold implementations for optimization."""

import logging

from .base import Manifold
from .errors import (
    DegenerateNormalizationError,
    DimensionError,
    GeometricError,
    InvalidPointError,
    InvalidTangentVectorError,
    ManifoldError,
    validate_manifold_point,
    validate_tangent_vector,
)
from .sphere import Sphere

logger = logging.getLogger(__name__)


def create_sphere(n: int = 3, m: int = 1) -> Sphere:
    """Create the sphere of unit Frobenius-norm n x m matrices with shape validation.

    Factory function for creating Sphere manifolds with clear error messages.

    Args:
        n: Number of rows (default: 3)
        m: Number of columns (default: 1, the ordinary sphere S^(n-1))

    Returns:
        Sphere: A sphere manifold instance

    Raises:
        TypeError: If n or m is not an integer
        ValueError: If n or m is not positive

    Examples:
        >>> sphere = create_sphere(3)      # S^2 in R^3
        >>> frob = create_sphere(4, 2)     # unit-norm 4x2 matrices
    """
    sphere = Sphere(n=n, m=m)
    logger.debug(f"create_sphere -> {sphere.name} (dimension {sphere.dimension})")
    return sphere


__all__ = [
    "DegenerateNormalizationError",
    "DimensionError",
    "GeometricError",
    "InvalidPointError",
    "InvalidTangentVectorError",
    "Manifold",
    "ManifoldError",
    "Sphere",
    "create_sphere",
    "validate_manifold_point",
    "validate_tangent_vector",
]
