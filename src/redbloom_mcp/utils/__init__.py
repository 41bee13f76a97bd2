"""Utility modules for filter tools."""

from .decorators import format_error, format_success, handle_filter_errors
from .rate_limiter import RateLimiter
from .validators import (
    validate_batch_container,
    validate_capacity,
    validate_error_rate,
    validate_expansion_rate,
    validate_filter_name,
)

__all__ = [
    "RateLimiter",
    "format_error",
    "format_success",
    "handle_filter_errors",
    "validate_batch_container",
    "validate_capacity",
    "validate_error_rate",
    "validate_expansion_rate",
    "validate_filter_name",
]
