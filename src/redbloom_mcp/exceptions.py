"""Common exceptions for the redbloom-mcp package."""

from typing import Any, List, Optional


class FilterError(Exception):
    """Base class for every filter command failure."""

    error_code = "reply_error"

    def __init__(
        self,
        message: str,
        command: Optional[str] = None,
        submitted: bool = True,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.command = command
        self.submitted = submitted
        # Per-item results of a batch reply that contained error elements
        self.partial: Optional[List[Any]] = None


class InvalidArgumentError(FilterError, ValueError):
    """Raised when arguments are rejected, locally or by the service."""

    error_code = "invalid_argument"


class EmptyBatchError(InvalidArgumentError):
    """Raised before submission when a batch operation gets no items."""

    error_code = "empty_batch"

    def __init__(self, command: Optional[str] = None) -> None:
        super().__init__("At least one item is required", command=command, submitted=False)


class FilterAlreadyExistsError(FilterError):
    """Raised when reserving a filter name that already exists."""

    error_code = "filter_exists"


class FilterNotFoundError(FilterError):
    """Raised when the named filter does not exist and may not be created."""

    error_code = "filter_not_found"


class ItemTooLargeError(FilterError):
    """Raised when an item exceeds the service size limit."""

    error_code = "item_too_large"


class CapacityExceededError(FilterError):
    """Raised when a non-scaling filter is full."""

    error_code = "capacity_exceeded"


class ReplyError(FilterError):
    """Raised for a service error reply outside the known categories.

    Transports raise this with the raw service message; the reply decoder
    reclassifies it into one of the narrower subclasses of FilterError.
    """


class ProtocolError(FilterError):
    """Raised when a reply does not have the shape the command promises."""

    error_code = "protocol_error"


class TransportError(FilterError):
    """Raised when the transport fails to deliver a command or read its reply."""

    error_code = "transport_failure"


class RateLimitError(Exception):
    """Raised when a tool call is throttled."""

    def __init__(self, message: str, retry_after: float = 1.0) -> None:
        super().__init__(message)
        self.retry_after = retry_after
