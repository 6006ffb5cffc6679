"""Abstract base class for Riemannian manifold implementations.

This module defines the contract a generic Riemannian solver relies on: every
operation a steepest-descent, conjugate-gradient or trust-region loop needs in
order to treat a constrained set as a smooth manifold. Implementations are
stateless; all operations are pure functions of their arguments.
"""

import jax.numpy as jnp
from jaxtyping import Array, Float, PRNGKeyArray

from ..core.constants import NumericalConstants
from ..core.type_system import AmbientVector, FlatTangentVector, ManifoldPoint, TangentVector


class Manifold:
    """Abstract base class for Riemannian manifolds.

    Subclasses provide the geometry; ``norm`` and ``dist`` have defaults derived
    from the metric and the logarithm.
    """

    @property
    def name(self) -> str:
        """Human readable name of the manifold."""
        return self.__class__.__name__

    @property
    def dimension(self) -> int:
        """Intrinsic dimension of the manifold."""
        raise NotImplementedError("Subclasses must define manifold dimension")

    @property
    def ambient_shape(self) -> tuple[int, ...]:
        """Shape of points and tangent vectors in the embedding space."""
        raise NotImplementedError("Subclasses must define the ambient shape")

    @property
    def typical_dist(self) -> float:
        """Order-of-magnitude distance scale, used by solver heuristics."""
        raise NotImplementedError("Subclasses must define a typical distance")

    @property
    def vec_mat_are_isometries(self) -> bool:
        """Whether ``vec`` and ``mat`` preserve inner products."""
        return False

    def inner(self, x: ManifoldPoint, u: TangentVector, v: TangentVector) -> Array:
        """Compute the Riemannian inner product between tangent vectors u and v at point x.

        Args:
            x: Point on the manifold.
            u: First tangent vector at x.
            v: Second tangent vector at x.

        Returns:
            The inner product <u, v>_x in the Riemannian metric.
        """
        raise NotImplementedError("Subclasses must implement Riemannian inner product")

    def norm(self, x: ManifoldPoint, v: TangentVector) -> Array:
        """Compute the norm of tangent vector v at point x."""
        return jnp.sqrt(self.inner(x, v, v))

    def dist(self, x: ManifoldPoint, y: ManifoldPoint) -> Array:
        """Compute the Riemannian distance between points x and y on the manifold."""
        v = self.log(x, y)
        return self.norm(x, v)

    def proj(self, x: ManifoldPoint, v: AmbientVector) -> TangentVector:
        """Project a vector from ambient space to the tangent space at point x.

        Args:
            x: Point on the manifold.
            v: Vector in the ambient space to be projected.

        Returns:
            The projection of v onto the tangent space at x.
        """
        raise NotImplementedError("Subclasses must implement projection operation")

    def tangent(self, x: ManifoldPoint, v: AmbientVector) -> TangentVector:
        """Re-tangentialize a vector that is only approximately tangent at x."""
        return self.proj(x, v)

    def egrad2rgrad(self, x: ManifoldPoint, egrad: AmbientVector) -> TangentVector:
        """Convert a Euclidean gradient into the Riemannian gradient at x."""
        raise NotImplementedError("Subclasses must implement gradient conversion")

    def ehess2rhess(
        self, x: ManifoldPoint, egrad: AmbientVector, ehess: AmbientVector, u: TangentVector
    ) -> TangentVector:
        """Convert a Euclidean Hessian-vector product into the Riemannian one.

        Args:
            x: Point on the manifold.
            egrad: Euclidean gradient of the cost at x.
            ehess: Euclidean Hessian of the cost at x applied to u.
            u: Tangent vector at x along which the Hessian is applied.

        Returns:
            The Riemannian Hessian at x applied to u.
        """
        raise NotImplementedError("Subclasses must implement Hessian conversion")

    def exp(self, x: ManifoldPoint, v: TangentVector, t: float = 1.0) -> ManifoldPoint:
        """Follow the geodesic from x with initial velocity t * v.

        Args:
            x: Point on the manifold.
            v: Tangent vector at x.
            t: Step size scaling v.

        Returns:
            The point reached after unit time along the geodesic.
        """
        raise NotImplementedError("Subclasses must implement exponential map")

    def retr(self, x: ManifoldPoint, v: TangentVector, t: float = 1.0) -> ManifoldPoint:
        """Apply a retraction, a cheaper first-order approximation of ``exp``.

        Args:
            x: Point on the manifold.
            v: Tangent vector at x.
            t: Step size scaling v.

        Returns:
            The point reached by the retraction from x in direction t * v.
        """
        raise NotImplementedError("Subclasses must implement retraction")

    def log(self, x: ManifoldPoint, y: ManifoldPoint) -> TangentVector:
        """Apply the logarithmic map, the inverse of ``exp``.

        Args:
            x: Starting point on the manifold.
            y: Target point on the manifold.

        Returns:
            The tangent vector v at x such that exp(x, v) = y.
        """
        raise NotImplementedError("Subclasses must implement logarithmic map")

    def random_point(self, key: PRNGKeyArray) -> ManifoldPoint:
        """Sample a point uniformly on the manifold."""
        raise NotImplementedError("Subclasses must implement random point generation")

    def random_tangent(self, key: PRNGKeyArray, x: ManifoldPoint) -> TangentVector:
        """Sample a unit-norm random tangent vector at x."""
        raise NotImplementedError("Subclasses must implement random tangent generation")

    def zero_vector(self, x: ManifoldPoint) -> TangentVector:
        """Return the zero element of the tangent space at x."""
        raise NotImplementedError("Subclasses must implement the zero tangent vector")

    def lincomb(
        self,
        x: ManifoldPoint,
        a1: float | Array,
        u1: TangentVector,
        a2: float | Array | None = None,
        u2: TangentVector | None = None,
    ) -> TangentVector:
        """Compute a1 * u1, or a1 * u1 + a2 * u2 when the second pair is given.

        Tangent spaces of embedded submanifolds are linear subspaces of the
        ambient space, so plain array arithmetic is the right default.
        """
        if (a2 is None) != (u2 is None):
            raise ValueError("lincomb needs both a2 and u2, or neither")
        if a2 is None:
            return a1 * u1
        return a1 * u1 + a2 * u2

    def transp(self, x: ManifoldPoint, y: ManifoldPoint, v: TangentVector) -> TangentVector:
        """Transport vector v from the tangent space at x to the tangent space at y.

        Args:
            x: Starting point on the manifold.
            y: Target point on the manifold.
            v: Tangent vector at x to be transported.

        Returns:
            A tangent vector at y.
        """
        raise NotImplementedError("Subclasses must implement vector transport")

    def pairmean(self, x: ManifoldPoint, y: ManifoldPoint) -> ManifoldPoint:
        """Return a midpoint-like point between x and y."""
        raise NotImplementedError("Subclasses must implement pair mean")

    def vec(self, x: ManifoldPoint, u: TangentVector) -> FlatTangentVector:
        """Flatten a tangent vector at x into a one-dimensional array."""
        raise NotImplementedError("Subclasses must implement vectorization")

    def mat(self, x: ManifoldPoint, u_vec: Float[Array, " nm"]) -> TangentVector:
        """Inverse of ``vec``: rebuild the tangent vector from its flat form."""
        raise NotImplementedError("Subclasses must implement matricization")

    def hash(self, x: ManifoldPoint) -> str:
        """Return a stable content-based identifier of x, for caching."""
        raise NotImplementedError("Subclasses must implement point hashing")

    def validate_point(self, x: ManifoldPoint, atol: float = NumericalConstants.VALIDATION_TOLERANCE) -> bool:
        """Validate that x is a valid point on the manifold.

        Args:
            x: Point to validate.
            atol: Absolute tolerance for validation.

        Returns:
            True if x is on the manifold, False otherwise.
        """
        raise NotImplementedError("Point validation not implemented")

    def validate_tangent(
        self, x: ManifoldPoint, v: TangentVector, atol: float = NumericalConstants.VALIDATION_TOLERANCE
    ) -> bool:
        """Validate that v is a valid tangent vector at point x.

        Args:
            x: Point on the manifold.
            v: Vector to validate.
            atol: Absolute tolerance for validation.

        Returns:
            True if v is in the tangent space at x, False otherwise.
        """
        # Default implementation: check if v equals its projection
        proj_v = self.proj(x, v)
        return bool(jnp.allclose(v, proj_v, atol=atol))

    def __repr__(self) -> str:
        """String representation of the manifold."""
        return f"{self.__class__.__name__}()"
