"""JIT optimization decorator for separating compilation concerns from manifold logic.

Manifold kernels are written as plain JAX functions and decorated with
:func:`jit_optimized`. Compiled versions are kept in an LRU cache so repeated
calls do not pay the tracing cost again.
"""

import functools
import logging
from collections import OrderedDict
from collections.abc import Callable
from typing import Any

import jax

from .config import RuntimeConfig

logger = logging.getLogger(__name__)


class JITOptimizer:
    """JIT optimizer with LRU caching for compiled functions."""

    def __init__(self, cache_size: int = 128):
        """Initialize JIT optimizer with specified cache size.

        Args:
            cache_size: Maximum number of compiled functions to cache (default: 128)
        """
        self.cache_size = cache_size
        self._cache: OrderedDict[tuple[Callable[..., Any], tuple[int, ...]], Callable[..., Any]] = OrderedDict()

    def compile(self, func: Callable[..., Any], static_args: tuple[int, ...] = ()) -> Callable[..., Any]:
        """Compile function with JIT and cache the result.

        Args:
            func: Function to compile
            static_args: Tuple of argument positions to treat as static

        Returns:
            JIT-compiled function
        """
        # Keyed on the function object: closures may share a qualified name
        cache_key = (func, static_args)
        qualified_name = getattr(func, "__qualname__", func.__name__)

        if cache_key in self._cache:
            self._cache.move_to_end(cache_key)
            return self._cache[cache_key]

        compiled_func: Callable[..., Any] = (
            jax.jit(func, static_argnums=static_args) if static_args else jax.jit(func)
        )
        logger.debug(f"Compiled {qualified_name} with static_argnums={static_args}")

        self._cache[cache_key] = compiled_func
        if len(self._cache) > self.cache_size:
            self._cache.popitem(last=False)

        return compiled_func

    def clear_cache(self) -> None:
        """Clear the JIT compilation cache."""
        self._cache.clear()


# Global optimizer instance for decorator usage
_global_optimizer = JITOptimizer()


def jit_optimized(static_args: tuple[int, ...] = ()) -> Callable[..., Any]:
    """Decorator for JIT optimization with caching support.

    When JIT is disabled through :class:`~spherax.core.config.RuntimeConfig`
    the decorated function runs eagerly.

    Args:
        static_args: Tuple of argument positions to treat as static during compilation.
            Methods pass ``(0,)`` so that ``self`` is hashed instead of traced.

    Returns:
        Decorator function that applies JIT optimization

    Examples:
        >>> @jit_optimized()
        ... def shift(x: Array, v: Array) -> Array:
        ...     return x + v
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            if not RuntimeConfig.get("enable_jit"):
                return func(*args, **kwargs)
            compiled_func = _global_optimizer.compile(func, static_args)
            return compiled_func(*args, **kwargs)

        wrapper._static_args = static_args  # type: ignore
        return wrapper

    return decorator


def clear_jit_cache() -> None:
    """Clear the global JIT compilation cache."""
    _global_optimizer.clear_cache()


def get_cache_info() -> dict[str, Any]:
    """Get information about the current JIT cache state.

    Returns:
        Dictionary with cache statistics including size and capacity
    """
    return {
        "cache_size": len(_global_optimizer._cache),
        "cache_capacity": _global_optimizer.cache_size,
        "cached_functions": [getattr(func, "__qualname__", repr(func)) for func, _ in _global_optimizer._cache],
    }
