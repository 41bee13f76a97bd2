"""Input validation utilities for filter command parameters."""

from numbers import Real
from typing import Any


def validate_error_rate(error_rate: Any) -> bool:
    """Validate a target false-positive probability.

    Args:
        error_rate: The probability to validate

    Returns:
        True if error_rate is a real number strictly between 0 and 1
    """
    if isinstance(error_rate, bool) or not isinstance(error_rate, Real):
        return False
    return 0 < error_rate < 1


def validate_capacity(capacity: Any) -> bool:
    """Validate an initial filter capacity.

    Args:
        capacity: The capacity to validate

    Returns:
        True if capacity is a positive integer
    """
    return isinstance(capacity, int) and not isinstance(capacity, bool) and capacity > 0


def validate_expansion_rate(expansion_rate: Any) -> bool:
    """Validate an expansion rate.

    Any integer is accepted: zero or negative values are the non-scaling
    sentinel, positive values are the growth factor.

    Args:
        expansion_rate: The expansion rate to validate

    Returns:
        True if expansion_rate is an integer
    """
    return isinstance(expansion_rate, int) and not isinstance(expansion_rate, bool)


def validate_filter_name(name: Any) -> bool:
    """Validate a filter key name.

    Args:
        name: The filter name to validate

    Returns:
        True if name is a non-blank string or bytes
    """
    if isinstance(name, bytes):
        return len(name) > 0
    return isinstance(name, str) and len(name.strip()) > 0


def validate_batch_container(items: Any) -> bool:
    """Validate the container holding a batch of items.

    Text and bytes are iterable but are single members, not batches.

    Args:
        items: The batch container to validate

    Returns:
        True if items is an iterable other than str, bytes or bytearray
    """
    if isinstance(items, (str, bytes, bytearray)):
        return False
    try:
        iter(items)
    except TypeError:
        return False
    return True
