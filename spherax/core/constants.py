"""Configuration constants for the spherax library.

This module defines the numerical thresholds used by the sphere operators so
that branch points and tolerances live in one place instead of as magic numbers.
"""


class NumericalConstants:
    """Numerical constants for stability and tolerance in manifold operations.

    The branch thresholds are tuned to double precision and must not be
    re-derived: below ``EXP_SMALL_STEP`` the ratio sin(r)/r equals 1 to machine
    precision, and below ``LOG_CORRECTION_DISTANCE`` the tangent projection of
    ``y - x`` already has the geodesic length.
    """

    EXP_SMALL_STEP: float = 4.5e-8
    """Step norm under which the exponential map falls back to normalize(x + v)."""

    LOG_CORRECTION_DISTANCE: float = 1e-6
    """Distance above which the logarithm is rescaled to the geodesic length."""

    NORMALIZATION_EPSILON: float = 1e-12
    """Norm under which a normalization is considered degenerate."""

    VALIDATION_TOLERANCE: float = 1e-6
    """Tolerance for validating points and tangent vectors."""
