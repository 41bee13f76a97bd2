"""Decorators for filter tool error handling."""

import functools
import json
import logging
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from ..constants import ERROR_CODES
from ..exceptions import FilterError, RateLimitError, TransportError

logger = logging.getLogger(__name__)


def _metadata(request_id: str) -> Dict[str, str]:
    return {
        "timestamp": datetime.now().isoformat() + "Z",
        "request_id": request_id,
    }


def format_error(
    error_code: str,
    message: Optional[str] = None,
    request_id: Optional[str] = None,
    **extra: Any,
) -> str:
    """Format an error response as a JSON string.

    Args:
        error_code: Error code from ERROR_CODES
        message: Human-readable error message; the error code's description
            from ERROR_CODES when empty
        request_id: Request id to report, generated if omitted
        extra: Additional top-level fields (command, partial, retry_after)

    Returns:
        JSON error response
    """
    response: Dict[str, Any] = {
        "success": False,
        "error": error_code,
        "message": message or ERROR_CODES.get(error_code, error_code),
    }
    response.update({key: value for key, value in extra.items() if value is not None})
    response["metadata"] = _metadata(request_id or str(uuid.uuid4()))
    return json.dumps(response, indent=2)


def format_success(data: Any, metadata: Optional[Dict[str, Any]] = None) -> str:
    """Format a successful response as a JSON string."""
    response: Dict[str, Any] = {
        "success": True,
        "data": data,
        "metadata": _metadata(str(uuid.uuid4())),
    }
    if metadata:
        response["metadata"].update(metadata)
    return json.dumps(response, indent=2)


def handle_filter_errors(func: Callable[..., str]) -> Callable[..., str]:
    """Decorator to turn filter failures into JSON error responses.

    Args:
        func: The tool function to decorate

    Returns:
        Decorated function that never raises for filter, throttling or
        validation failures
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> str:
        request_id = str(uuid.uuid4())
        start_time = datetime.now()

        def elapsed() -> int:
            return int((datetime.now() - start_time).total_seconds() * 1000)

        try:
            logger.info(f"Request {request_id}: Starting {func.__name__}")
            result = func(*args, **kwargs)
            logger.info(f"Request {request_id}: Completed {func.__name__} in {elapsed()}ms")
            return result

        except RateLimitError as e:
            logger.warning(f"Request {request_id}: Rate limit exceeded in {elapsed()}ms")
            return format_error(
                "rate_limit_exceeded",
                str(e),
                request_id,
                retry_after=round(e.retry_after, 3),
            )

        except TransportError as e:
            logger.exception(f"Request {request_id}: Transport failure in {elapsed()}ms")
            return format_error(e.error_code, e.message, request_id, command=e.command)

        except FilterError as e:
            logger.warning(f"Request {request_id}: {e.error_code} in {elapsed()}ms: {e.message}")
            return format_error(
                e.error_code,
                e.message,
                request_id,
                command=e.command,
                submitted=e.submitted,
                partial=e.partial,
            )

        except ValueError as e:
            logger.warning(f"Request {request_id}: Validation error in {elapsed()}ms: {e}")
            return format_error("invalid_argument", str(e), request_id, submitted=False)

        except Exception as e:
            logger.exception(f"Request {request_id}: Unexpected error in {elapsed()}ms: {e}")
            return format_error("unexpected_error", f"An unexpected error occurred: {e!s}", request_id)

    return wrapper
