"""Manifold error hierarchy and validation helpers.

Every exception raised by a manifold operator derives from :class:`ManifoldError`
and carries the diagnostic values that triggered it, so callers such as an
external solver can decide whether to abort or to take a corrective step.
"""

import jax.numpy as jnp
from jaxtyping import Array


class ManifoldError(Exception):
    """Base exception for manifold-related errors."""

    pass


class DimensionError(ManifoldError):
    """Exception for shape mismatches in manifold operations."""

    def __init__(self, message: str, expected: int | tuple | None = None, actual: int | tuple | None = None):
        """Initialize DimensionError with dimension information."""
        super().__init__(message)
        self.expected = expected
        self.actual = actual

    def __str__(self) -> str:
        """Return string representation with dimension information."""
        base_msg = super().__str__()
        if self.expected is not None and self.actual is not None:
            return f"{base_msg} (expected={self.expected}, actual={self.actual})"
        return base_msg


class GeometricError(ManifoldError):
    """Exception for geometric operation failures on manifolds."""

    def __init__(self, message: str, operation: str | None = None, manifold_type: str | None = None):
        """Initialize GeometricError with geometric operation context."""
        super().__init__(message)
        self.operation = operation
        self.manifold_type = manifold_type


class DegenerateNormalizationError(GeometricError):
    """Raised when an operator would divide by a (near) zero norm.

    Typical causes are ``pairmean`` of antipodal points, ``log`` between
    antipodal points and a retraction whose step exactly cancels the base point.
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        manifold_type: str | None = None,
        norm_value: float | None = None,
    ):
        """Initialize DegenerateNormalizationError with the offending norm."""
        super().__init__(message, operation=operation, manifold_type=manifold_type)
        self.norm_value = norm_value


class InvalidPointError(ManifoldError):
    """Exception for points that do not lie on the manifold."""

    def __init__(
        self,
        message: str,
        point: Array | None = None,
        violated_constraint: str | None = None,
        constraint_value: float | None = None,
    ):
        """Initialize InvalidPointError with constraint violation information."""
        super().__init__(message)
        self.point = point
        self.violated_constraint = violated_constraint
        self.constraint_value = constraint_value


class InvalidTangentVectorError(ManifoldError):
    """Exception for tangent vectors that do not lie in the tangent space."""

    def __init__(
        self,
        message: str,
        tangent_vector: Array | None = None,
        base_point: Array | None = None,
        orthogonality_error: float | None = None,
    ):
        """Initialize InvalidTangentVectorError with tangent space violation information."""
        super().__init__(message)
        self.tangent_vector = tangent_vector
        self.base_point = base_point
        self.orthogonality_error = orthogonality_error


def validate_manifold_point(point: Array, expected_shape: tuple[int, ...], tolerance: float = 1e-8) -> None:
    """Validate that a matrix is a point of the unit Frobenius-norm sphere.

    Args:
        point: Point to validate
        expected_shape: Shape of the manifold's points
        tolerance: Numerical tolerance on the norm

    Raises:
        DimensionError: If the shape is wrong
        InvalidPointError: If the point does not have unit norm
    """
    if tuple(point.shape) != tuple(expected_shape):
        raise DimensionError("Point has the wrong shape", expected=tuple(expected_shape), actual=tuple(point.shape))

    norm_error = abs(float(jnp.linalg.norm(point)) - 1.0)
    if norm_error > tolerance:
        raise InvalidPointError(
            "Point does not have unit Frobenius norm",
            point=point,
            violated_constraint="unit_norm",
            constraint_value=norm_error,
        )


def validate_tangent_vector(tangent: Array, base_point: Array, tolerance: float = 1e-8) -> None:
    """Validate that a tangent vector is orthogonal to its base point.

    Args:
        tangent: Tangent vector to validate
        base_point: Base point on the manifold
        tolerance: Numerical tolerance on the inner product

    Raises:
        DimensionError: If the shapes of tangent and base point differ
        InvalidTangentVectorError: If the tangent vector is not orthogonal to the base point
    """
    if tangent.shape != base_point.shape:
        raise DimensionError(
            "Tangent vector and base point shapes differ", expected=base_point.shape, actual=tangent.shape
        )

    dot_product = abs(float(jnp.vdot(base_point, tangent)))
    if dot_product > tolerance:
        raise InvalidTangentVectorError(
            "Tangent vector not orthogonal to base point",
            tangent_vector=tangent,
            base_point=base_point,
            orthogonality_error=dot_product,
        )
