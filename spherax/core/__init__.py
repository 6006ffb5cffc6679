"""spherax core module: configuration, constants and JIT management."""

from .config import RuntimeConfig, disable_double_precision, disable_jit, enable_double_precision, enable_jit
from .constants import NumericalConstants
from .jit_decorator import JITOptimizer, clear_jit_cache, get_cache_info, jit_optimized

__all__ = [
    "JITOptimizer",
    "NumericalConstants",
    "RuntimeConfig",
    "clear_jit_cache",
    "disable_double_precision",
    "disable_jit",
    "enable_double_precision",
    "enable_jit",
    "get_cache_info",
    "jit_optimized",
]
