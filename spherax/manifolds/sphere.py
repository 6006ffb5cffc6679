"""Implementation of the sphere of unit Frobenius-norm matrices with its Riemannian geometry.

The manifold is the set of real n x m matrices X with ||X||_F = 1. It is a
Riemannian submanifold of R^(n x m) endowed with the trace inner product
<A, B> = sum(A * B). For m = 1 this is the ordinary unit sphere S^(n-1).
"""

import hashlib
import logging

import jax
import jax.numpy as jnp
import jax.random as jr
import numpy as np
from jax import lax
from jaxtyping import Array, Float, PRNGKeyArray

from ..core.config import RuntimeConfig
from ..core.constants import NumericalConstants
from ..core.jit_decorator import jit_optimized
from ..core.type_system import AmbientVector, FlatTangentVector, ManifoldPoint, TangentVector
from .base import Manifold
from .errors import DegenerateNormalizationError, DimensionError

logger = logging.getLogger(__name__)


class Sphere(Manifold):
    """Unit Frobenius-norm n x m matrices with the canonical embedded metric.

    Instances only hold the shape ``(n, m)``. They compare and hash by shape,
    which lets equal manifolds share compiled kernels.
    """

    def __init__(self, n: int = 3, m: int = 1):
        """Initialize the sphere of unit-norm n x m matrices.

        Args:
            n: Number of rows (default: 3, which gives S^2 in R^3)
            m: Number of columns (default: 1)

        Raises:
            TypeError: If n or m is not an integer
            ValueError: If n or m is smaller than 1
        """
        # bool is an int subclass but never a meaningful size
        if not isinstance(n, int) or not isinstance(m, int) or isinstance(n, bool) or isinstance(m, bool):
            raise TypeError(f"Sphere shape must be integers, got n={type(n)}, m={type(m)}")
        if n < 1 or m < 1:
            raise ValueError(f"Sphere shape must be positive, got n={n}, m={m}")
        self._n = n
        self._m = m
        logger.debug(f"Created {self!r}")

    @property
    def name(self) -> str:
        """Human readable name of the sphere."""
        if self._m == 1:
            return f"Sphere S^{self._n - 1}"
        return f"Unit F-norm {self._n}x{self._m} matrices"

    @property
    def dimension(self) -> int:
        """Intrinsic dimension, n*m - 1 (one constraint on the ambient space)."""
        return self._n * self._m - 1

    @property
    def ambient_dimension(self) -> int:
        """Dimension of the embedding space R^(n x m)."""
        return self._n * self._m

    @property
    def ambient_shape(self) -> tuple[int, int]:
        """Shape of points and tangent vectors."""
        return (self._n, self._m)

    @property
    def typical_dist(self) -> float:
        """Largest geodesic distance on the sphere, pi."""
        return float(jnp.pi)

    @property
    def vec_mat_are_isometries(self) -> bool:
        """Flattening preserves the trace inner product."""
        return True

    def inner(self, x: ManifoldPoint, u: TangentVector, v: TangentVector) -> Array:
        """Compute the Riemannian inner product, the trace inner product of u and v.

        The metric does not depend on x since the sphere inherits the ambient metric.
        """
        self._check_shape("inner", x, u, v)
        return self._inner_impl(u, v)

    def norm(self, x: ManifoldPoint, v: TangentVector) -> Array:
        """Frobenius norm of the tangent vector v."""
        self._check_shape("norm", x, v)
        return jnp.linalg.norm(v)

    def dist(self, x: ManifoldPoint, y: ManifoldPoint) -> Array:
        """Compute the geodesic distance arccos(<x, y>).

        The inner product of two unit matrices can overshoot [-1, 1] by a few
        ulps, so it is clipped before the arccos.
        """
        self._check_shape("dist", x, y)
        return self._dist_impl(x, y)

    def proj(self, x: ManifoldPoint, v: AmbientVector) -> TangentVector:
        """Project v onto the tangent space at x by removing its component along x.

        Args:
            x: Point on the sphere.
            v: Matrix in the ambient space.

        Returns:
            v - <x, v> x, which is orthogonal to x.
        """
        self._check_shape("proj", x, v)
        return self._proj_impl(x, v)

    def egrad2rgrad(self, x: ManifoldPoint, egrad: AmbientVector) -> TangentVector:
        """Riemannian gradient: the tangent projection of the Euclidean gradient."""
        self._check_shape("egrad2rgrad", x, egrad)
        return self._proj_impl(x, egrad)

    def ehess2rhess(
        self, x: ManifoldPoint, egrad: AmbientVector, ehess: AmbientVector, u: TangentVector
    ) -> TangentVector:
        """Riemannian Hessian-vector product proj(x, ehess) - <x, egrad> u.

        The second term is the Weingarten correction coming from the curvature
        of the sphere inside the ambient space.
        """
        self._check_shape("ehess2rhess", x, egrad, ehess, u)
        return self._ehess2rhess_impl(x, egrad, ehess, u)

    def exp(self, x: ManifoldPoint, v: TangentVector, t: float = 1.0) -> ManifoldPoint:
        """Compute the exponential map, following the great circle from x along t * v.

        Args:
            x: Point on the sphere.
            v: Tangent vector at x.
            t: Step size scaling v (default: 1.0).

        Returns:
            x cos(r) + t v sin(r) / r with r = ||t v||_F. For r below
            ``NumericalConstants.EXP_SMALL_STEP`` the result is normalize(x + t v).
        """
        self._check_shape("exp", x, v)
        return self._exp_impl(x, v, t)

    def retr(self, x: ManifoldPoint, v: TangentVector, t: float = 1.0) -> ManifoldPoint:
        """Retraction by normalization: (x + t v) / ||x + t v||_F.

        Raises:
            DegenerateNormalizationError: If x + t v vanishes.
        """
        self._check_shape("retr", x, v)
        return self._normalize(x + t * v, "retr")

    def log(self, x: ManifoldPoint, y: ManifoldPoint) -> TangentVector:
        """Compute the logarithmic map at x of y.

        The projection of y - x onto the tangent space at x points along the
        geodesic; when the points are more than
        ``NumericalConstants.LOG_CORRECTION_DISTANCE`` apart it is rescaled to
        the geodesic distance.

        Raises:
            DegenerateNormalizationError: If x and y are antipodal.
        """
        self._check_shape("log", x, y)
        v, scale_norm = self._log_impl(x, y)
        self._guard_norm(scale_norm, "log")
        return v

    def random_point(self, key: PRNGKeyArray) -> ManifoldPoint:
        """Sample a point uniformly by normalizing a standard normal matrix.

        Args:
            key: JAX PRNG key.

        Returns:
            A random point of shape (n, m).
        """
        samples = jr.normal(key, self.ambient_shape)
        return self._normalize(samples, "random_point")

    def random_tangent(self, key: PRNGKeyArray, x: ManifoldPoint) -> TangentVector:
        """Sample a unit-norm tangent vector at x.

        A standard normal matrix is projected onto the tangent space at x and
        then normalized.

        Args:
            key: JAX PRNG key.
            x: Point on the sphere.

        Returns:
            A random tangent vector at x with unit Frobenius norm.
        """
        self._check_shape("random_tangent", x)
        ambient = jr.normal(key, self.ambient_shape)
        return self._normalize(self._proj_impl(x, ambient), "random_tangent")

    def zero_vector(self, x: ManifoldPoint) -> TangentVector:
        """Zero matrix of shape (n, m)."""
        self._check_shape("zero_vector", x)
        return jnp.zeros(self.ambient_shape)

    def lincomb(
        self,
        x: ManifoldPoint,
        a1: float | Array,
        u1: TangentVector,
        a2: float | Array | None = None,
        u2: TangentVector | None = None,
    ) -> TangentVector:
        """Linear combination of tangent vectors at x."""
        self._check_shape("lincomb", x, u1, *([] if u2 is None else [u2]))
        return super().lincomb(x, a1, u1, a2, u2)

    def transp(self, x: ManifoldPoint, y: ManifoldPoint, v: TangentVector) -> TangentVector:
        """Vector transport by projection onto the tangent space at y.

        This is not parallel transport but the usual choice for retraction-based
        solvers on embedded submanifolds.
        """
        self._check_shape("transp", x, y, v)
        return self._proj_impl(y, v)

    def pairmean(self, x: ManifoldPoint, y: ManifoldPoint) -> ManifoldPoint:
        """Midpoint of the shortest great circle arc, (x + y) / ||x + y||_F.

        Raises:
            DegenerateNormalizationError: If x and y are antipodal.
        """
        self._check_shape("pairmean", x, y)
        return self._normalize(x + y, "pairmean")

    def vec(self, x: ManifoldPoint, u: TangentVector) -> FlatTangentVector:
        """Flatten u in row-major order into an array of length n*m."""
        self._check_shape("vec", x, u)
        return jnp.ravel(u)

    def mat(self, x: ManifoldPoint, u_vec: Float[Array, " nm"]) -> TangentVector:
        """Reshape a flat array of length n*m back into an n x m tangent vector.

        Raises:
            DimensionError: If u_vec is not one-dimensional of length n*m.
        """
        self._check_shape("mat", x)
        if jnp.ndim(u_vec) != 1 or jnp.size(u_vec) != self.ambient_dimension:
            raise DimensionError(
                "mat expects a flat vector of length n*m",
                expected=(self.ambient_dimension,),
                actual=tuple(jnp.shape(u_vec)),
            )
        return jnp.reshape(u_vec, self.ambient_shape)

    def hash(self, x: ManifoldPoint) -> str:
        """Content-based identifier of x: ``"z"`` followed by a SHA-256 hex digest.

        The digest is taken over the float64 bytes of x in row-major order, so
        equal points give equal hashes across calls and processes. The point
        must be concrete (not traced under ``jax.jit``).
        """
        self._check_shape("hash", x)
        data = np.ascontiguousarray(np.asarray(x, dtype=np.float64))
        return "z" + hashlib.sha256(data.tobytes()).hexdigest()

    def validate_point(self, x: ManifoldPoint, atol: float = NumericalConstants.VALIDATION_TOLERANCE) -> bool:
        """Validate that x has the right shape and unit Frobenius norm."""
        if tuple(jnp.shape(x)) != self.ambient_shape:
            return False
        return bool(jnp.allclose(jnp.linalg.norm(x), 1.0, atol=atol))

    def validate_tangent(
        self, x: ManifoldPoint, v: TangentVector, atol: float = NumericalConstants.VALIDATION_TOLERANCE
    ) -> bool:
        """Validate that v has the right shape and is orthogonal to the point x."""
        if not self.validate_point(x, atol):
            return False
        if tuple(jnp.shape(v)) != self.ambient_shape:
            return False
        return bool(jnp.allclose(self._inner_impl(x, v), 0.0, atol=atol))

    def __eq__(self, other: object) -> bool:
        """Spheres are equal when their shapes are equal."""
        if not isinstance(other, Sphere):
            return NotImplemented
        return self.ambient_shape == other.ambient_shape

    def __hash__(self) -> int:
        """Hash on the shape, so instances can be static JIT arguments."""
        return hash((Sphere, self._n, self._m))

    def __repr__(self) -> str:
        """String representation of the manifold."""
        return f"Sphere(n={self._n}, m={self._m})"

    # Validation helpers

    def _check_shape(self, operation: str, *arrays: Array) -> None:
        """Raise DimensionError if any argument is not an (n, m) array."""
        if not RuntimeConfig.get("validate_inputs"):
            return
        for array in arrays:
            shape = tuple(jnp.shape(array))
            if shape != self.ambient_shape:
                raise DimensionError(
                    f"{operation} received an array of the wrong shape for {self!r}",
                    expected=self.ambient_shape,
                    actual=shape,
                )

    def _guard_norm(self, norm_value: Array, operation: str) -> None:
        """Raise DegenerateNormalizationError if a divisor norm is (near) zero.

        Under an outer ``jax.jit`` the norm is abstract and cannot be inspected,
        in which case no check is made.
        """
        try:
            value = float(norm_value)
        except jax.errors.ConcretizationTypeError:
            return
        # "not >=" also rejects NaN
        if not value >= NumericalConstants.NORMALIZATION_EPSILON:
            logger.debug(f"Degenerate normalization in {operation}: norm={value}")
            raise DegenerateNormalizationError(
                f"{operation} cannot normalize a matrix of norm {value:.3e}",
                operation=operation,
                manifold_type=self.name,
                norm_value=value,
            )

    def _normalize(self, y: Array, operation: str) -> Array:
        """Scale y to unit Frobenius norm, refusing degenerate inputs."""
        y_norm = jnp.linalg.norm(y)
        self._guard_norm(y_norm, operation)
        return y / y_norm

    # JIT-optimized implementation methods

    @jit_optimized(static_args=(0,))
    def _inner_impl(self, u: Array, v: Array) -> Array:
        return jnp.sum(u * v)

    @jit_optimized(static_args=(0,))
    def _proj_impl(self, x: Array, v: Array) -> Array:
        return v - x * jnp.sum(x * v)

    @jit_optimized(static_args=(0,))
    def _dist_impl(self, x: Array, y: Array) -> Array:
        cos_angle = jnp.clip(jnp.sum(x * y), -1.0, 1.0)
        return jnp.arccos(cos_angle)

    @jit_optimized(static_args=(0,))
    def _ehess2rhess_impl(self, x: Array, egrad: Array, ehess: Array, u: Array) -> Array:
        return self._proj_impl(x, ehess) - jnp.sum(x * egrad) * u

    @jit_optimized(static_args=(0,))
    def _exp_impl(self, x: Array, v: Array, t: float | Array) -> Array:
        tv = t * v
        step_norm = jnp.linalg.norm(tv)

        def geodesic_step() -> Array:
            return x * jnp.cos(step_norm) + tv * (jnp.sin(step_norm) / step_norm)

        def small_step() -> Array:
            # sin(r)/r is 1 to machine precision here
            y = x + tv
            return y / jnp.linalg.norm(y)

        return lax.cond(step_norm > NumericalConstants.EXP_SMALL_STEP, geodesic_step, small_step)

    @jit_optimized(static_args=(0,))
    def _log_impl(self, x: Array, y: Array) -> tuple[Array, Array]:
        """Return the logarithm and the norm it was divided by (1 when not rescaled)."""
        v = self._proj_impl(x, y - x)
        distance = self._dist_impl(x, y)
        v_norm = jnp.linalg.norm(v)
        is_far = distance > NumericalConstants.LOG_CORRECTION_DISTANCE

        def rescaled() -> Array:
            return v * (distance / v_norm)

        def unscaled() -> Array:
            return v

        scale_norm = jnp.where(is_far, v_norm, 1.0)
        return lax.cond(is_far, rescaled, unscaled), scale_norm
