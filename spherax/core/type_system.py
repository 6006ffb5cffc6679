"""Type aliases for arrays used by the manifold operators."""

from jaxtyping import Array, Float

ManifoldPoint = Float[Array, "n m"]
"""A point on the manifold: an n x m matrix."""

TangentVector = Float[Array, "n m"]
"""A tangent vector at some base point, same shape as the point."""

AmbientVector = Float[Array, "n m"]
"""An arbitrary matrix of the embedding space, e.g. a Euclidean gradient."""

FlatTangentVector = Float[Array, " nm"]
"""A tangent vector flattened to a one-dimensional array."""
