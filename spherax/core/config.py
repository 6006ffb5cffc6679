"""Runtime configuration for spherax.

Holds the process-wide switches: JIT compilation, double precision and input
validation. Values live in a class-level dictionary and are changed through
:meth:`RuntimeConfig.configure`.
"""

import logging
from typing import Any, ClassVar

import jax

logger = logging.getLogger(__name__)


class RuntimeConfig:
    """Central configuration store for spherax."""

    _config: ClassVar[dict[str, Any]] = {
        "enable_jit": True,
        "enable_x64": True,
        "validate_inputs": True,
    }

    @classmethod
    def configure(cls, **kwargs: Any) -> None:
        """Update configuration values.

        Args:
            **kwargs: Configuration parameters
                - enable_jit: Compile manifold kernels with ``jax.jit``
                - enable_x64: Run JAX in 64-bit mode
                - validate_inputs: Check argument shapes in manifold operations

        Raises:
            KeyError: If an unknown configuration key is given.
        """
        unknown = set(kwargs) - set(cls._config)
        if unknown:
            raise KeyError(f"Unknown configuration keys: {sorted(unknown)}")

        cls._config.update(kwargs)
        if "enable_x64" in kwargs:
            jax.config.update("jax_enable_x64", bool(kwargs["enable_x64"]))
        logger.info(f"spherax configuration updated: {kwargs}")

    @classmethod
    def get(cls, key: str) -> Any:
        """Return a single configuration value."""
        return cls._config[key]

    @classmethod
    def get_config(cls) -> dict[str, Any]:
        """Return a copy of the current configuration."""
        return cls._config.copy()


def enable_double_precision() -> None:
    """Run JAX computations in float64.

    The unit-norm and orthogonality invariants of the sphere operators hold to
    about 1e-12 only in double precision.
    """
    RuntimeConfig.configure(enable_x64=True)


def disable_double_precision() -> None:
    """Return JAX to its default float32 mode."""
    RuntimeConfig.configure(enable_x64=False)


def enable_jit() -> None:
    """Compile manifold kernels with ``jax.jit``."""
    RuntimeConfig.configure(enable_jit=True)


def disable_jit() -> None:
    """Run manifold kernels eagerly, e.g. for debugging."""
    RuntimeConfig.configure(enable_jit=False)
