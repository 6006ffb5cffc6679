"""spherax: JAX operators for Riemannian optimization on unit Frobenius-norm matrices.

The package provides a manifold descriptor that an external Riemannian solver
(steepest descent, conjugate gradients, trust regions) calls each iteration:
tangent projection, exponential and logarithm maps, retraction, vector
transport, gradient and Hessian conversion, sampling and point hashing.

Quick start:
    >>> import jax
    >>> import spherax
    >>>
    >>> sphere = spherax.create_sphere(4, 2)   # unit-norm 4x2 matrices
    >>> key_x, key_v = jax.random.split(jax.random.key(0))
    >>> x = sphere.random_point(key_x)
    >>> v = sphere.random_tangent(key_v, x)
    >>> y = sphere.exp(x, v, 0.1)
    >>> round(float(sphere.dist(x, y)), 6)
    0.1

Importing the package switches JAX to 64-bit mode, since the unit-norm and
orthogonality invariants are only meaningful to ~1e-12 in double precision.
Use :func:`disable_double_precision` to go back to float32.
"""

__version__ = "0.1.0"

import logging

from .core.config import RuntimeConfig, disable_double_precision, disable_jit, enable_double_precision, enable_jit
from .core.constants import NumericalConstants
from .core.jit_decorator import clear_jit_cache, get_cache_info
from .manifolds import (
    DegenerateNormalizationError,
    DimensionError,
    GeometricError,
    InvalidPointError,
    InvalidTangentVectorError,
    Manifold,
    ManifoldError,
    Sphere,
    create_sphere,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())


def get_config() -> dict:
    """Get the current runtime configuration (JIT, precision, input validation)."""
    return RuntimeConfig.get_config()


__all__ = [
    "DegenerateNormalizationError",
    "DimensionError",
    "GeometricError",
    "InvalidPointError",
    "InvalidTangentVectorError",
    "Manifold",
    "ManifoldError",
    "NumericalConstants",
    "RuntimeConfig",
    "Sphere",
    "__version__",
    "clear_jit_cache",
    "create_sphere",
    "disable_double_precision",
    "disable_jit",
    "enable_double_precision",
    "enable_jit",
    "get_cache_info",
    "get_config",
]

# Initialize double precision on import
enable_double_precision()
